"""
Core dependencies for route protection and permission checking

Authentication walks a fixed sequence: token present -> token verifies ->
claims carry an identity -> user document exists -> account active. Each
step fails with its own status/message; the optional variant turns every
failure into "anonymous".
"""

from fastapi import Depends, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from firebase_admin import auth as firebase_auth
from typing import Any, Callable, Dict, Optional
import logging

from app.config import settings
from app.config.permissions_config import Permission, Role, is_allowed, parse_role
from app.core.errors import Forbidden, NotFound, Unauthenticated
from app.core.security import TokenExpired, TokenMalformed, verify_token
from app.database.document_store import DocumentStore, StoreError
from app.database.firebase_client import verify_firebase_id_token
from app.database.store_client import get_store
from app.modules.auth.schemas import CurrentUser
from app.modules.users.models import USERS_COLLECTION

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

TokenVerifier = Callable[[str], Dict[str, Any]]


def extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    """Bearer header first, then the session cookie."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.auth_cookie_name) or None


def identity_from_claims(claims: Dict[str, Any]) -> Optional[str]:
    """The canonical identity key is the e-mail; a bare uid claim is accepted as a fallback."""
    for key in ("email", "uid"):
        value = claims.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip().lower()
    return None


def merge_identity(identity: str, claims: Dict[str, Any], record: Dict[str, Any], provider: str) -> CurrentUser:
    """Stored role always wins; the claim role only fills in when the record has none."""
    role = parse_role(record.get("role")) or parse_role(claims.get("role")) or Role.USER
    return CurrentUser(
        uid=identity,
        email=record.get("email") or claims.get("email") or identity,
        name=record.get("name"),
        phone=record.get("phone"),
        role=role,
        is_active=record.get("isActive", True) is not False,
        provider=provider,
        token_role=claims.get("role"),
    )


async def resolve_user(store: DocumentStore, claims: Dict[str, Any], provider: str) -> CurrentUser:
    identity = identity_from_claims(claims)
    if not identity:
        raise Unauthenticated("Invalid token payload (no uid/email)")

    user_doc = await store.get(USERS_COLLECTION, identity)
    if user_doc is None:
        raise NotFound("User not found")

    if user_doc.data.get("isActive") is False:
        logger.warning(f"Rejected token for disabled account {identity}")
        raise Unauthenticated("User account is disabled")

    return merge_identity(identity, claims, user_doc.data, provider)


def _verify_local_token(token: str) -> Dict[str, Any]:
    try:
        return verify_token(token, settings.jwt_secret)
    except TokenExpired:
        raise Unauthenticated("Token expired")
    except TokenMalformed:
        raise Unauthenticated("Invalid token")


async def authenticate(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    store: DocumentStore = Depends(get_store),
) -> CurrentUser:
    """Authenticate with a locally issued session token."""
    token = extract_token(request, credentials)
    if not token:
        raise Unauthenticated("No token provided")
    try:
        claims = _verify_local_token(token)
    except Unauthenticated as e:
        logger.warning(f"Auth error: {e.detail}")
        raise
    return await resolve_user(store, claims, "local")


def get_firebase_verifier() -> TokenVerifier:
    return verify_firebase_id_token


async def authenticate_firebase(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    store: DocumentStore = Depends(get_store),
    verifier: TokenVerifier = Depends(get_firebase_verifier),
) -> CurrentUser:
    """Authenticate with an ID token issued by Firebase Authentication."""
    token = extract_token(request, credentials)
    if not token:
        raise Unauthenticated("No Firebase token provided")
    try:
        claims = await run_in_threadpool(verifier, token)
    except firebase_auth.ExpiredIdTokenError:
        raise Unauthenticated("Token expired")
    except (firebase_auth.InvalidIdTokenError, firebase_auth.CertificateFetchError, ValueError) as e:
        logger.warning(f"Firebase token rejected: {e}")
        raise Unauthenticated("Invalid Firebase token")
    return await resolve_user(store, claims, "firebase")


async def optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    store: DocumentStore = Depends(get_store),
) -> Optional[CurrentUser]:
    """Best-effort identity for public endpoints; never rejects the request."""
    try:
        return await authenticate(request, credentials, store)
    except (HTTPException, StoreError, ValueError) as e:
        logger.debug(f"Continuing unauthenticated: {e}")
        return None


def require_permission(required_permission: Permission):
    """Factory function to create permission check dependency"""
    async def check_permission(user: CurrentUser = Depends(authenticate)) -> CurrentUser:
        """Dependency to check if user has required permission"""
        if not is_allowed(user.role, required_permission):
            logger.warning(f"{user.uid} ({user.role.value}) lacks {required_permission.value}")
            raise Forbidden("Insufficient permissions")
        return user
    return check_permission
