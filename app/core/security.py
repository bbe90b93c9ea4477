"""
Session tokens, password hashing and the session cookie attributes.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional

import jwt
from passlib.context import CryptContext

from app.config import settings

BCRYPT_ROUNDS = 12
JWT_ALGORITHM = "HS256"

_pwd = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


class TokenError(Exception):
    """Base class for token verification failures."""


class TokenExpired(TokenError):
    pass


class TokenMalformed(TokenError):
    pass


def parse_duration(value: str) -> timedelta:
    """Parse "7d", "12h", "30m", "45s" or a plain number of seconds."""
    match = _DURATION_RE.match(str(value))
    if not match:
        raise ValueError(f"invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(seconds=int(amount) * _DURATION_UNITS[unit])


def sign_token(claims: Mapping[str, Any], secret: str, ttl: timedelta) -> str:
    if not secret:
        raise ValueError("jwt_secret_blank")
    if ttl.total_seconds() <= 0:
        raise ValueError("token ttl must be positive")

    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = dict(claims)
    payload["iat"] = now
    payload["exp"] = now + ttl
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def verify_token(token: str, secret: str) -> Dict[str, Any]:
    if not secret:
        raise ValueError("jwt_secret_blank")
    if not token:
        raise TokenMalformed("token_blank")
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenExpired(str(e)) from e
    except jwt.InvalidTokenError as e:
        raise TokenMalformed(str(e)) from e


def create_session_token(email: str, role: str) -> str:
    """Token issued at login/registration, signed with the configured secret and TTL."""
    return sign_token(
        {"email": email, "role": role},
        settings.jwt_secret,
        parse_duration(settings.jwt_expires_in),
    )


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("password_blank")
    return _pwd.hash(password)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password or not password_hash:
        return False
    try:
        return _pwd.verify(password, password_hash)
    except (ValueError, TypeError):
        # Unknown or corrupted hash format
        return False


def session_cookie_options() -> Dict[str, Any]:
    """Keyword arguments for Response.set_cookie of the session token."""
    max_age = int(timedelta(days=settings.jwt_cookie_expires_in).total_seconds())
    return {
        "max_age": max_age,
        "expires": datetime.now(timezone.utc) + timedelta(seconds=max_age),
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "none" if settings.is_production else "lax",
        "domain": settings.cookie_domain if settings.is_production else None,
    }
