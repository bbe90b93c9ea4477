# Session tokens
# Sessions are stateless: nothing is persisted server-side.

"""
A session token is an HS256 JWT signed with JWT_SECRET carrying:
- email: identity key (document id in the users collection)
- role: role at issue time (informational; the stored role is authoritative)
- iat / exp: issue and expiry time (JWT_EXPIRES_IN, default 7 days)

It is returned in the login/registration response body and set as an
httpOnly cookie named AUTH_COOKIE_NAME ("token" by default). Requests may
present it either as "Authorization: Bearer <token>" or through that cookie.

ID tokens issued by Firebase Authentication are accepted on the
/auth/firebase/* routes and resolved against the same users collection.
"""
