import logging
from typing import Any, Dict

from fastapi import Response

from app.config import settings
from app.config.permissions_config import Role, parse_role
from app.core.errors import Unauthenticated
from app.core.security import create_session_token, session_cookie_options, verify_password
from app.database.document_store import DocumentStore
from app.modules.auth.schemas import (
    CreateUserRequest, LoginRequest, RegisterRequest, SessionUser, TokenResponse
)
from app.modules.users.service import UserService, normalize_email

logger = logging.getLogger(__name__)


def issue_session(user_data: Dict[str, Any], response: Response) -> TokenResponse:
    """Sign a session token for the user and set it as the session cookie"""
    role = parse_role(user_data.get("role")) or Role.USER
    token = create_session_token(user_data["email"], role.value)
    response.set_cookie(settings.auth_cookie_name, token, **session_cookie_options())
    return TokenResponse(token=token, user=SessionUser(email=user_data["email"], role=role))


def clear_session(response: Response) -> None:
    options = session_cookie_options()
    response.delete_cookie(
        settings.auth_cookie_name,
        httponly=True,
        secure=options["secure"],
        samesite=options["samesite"],
        domain=options["domain"],
    )


class AuthService:
    def __init__(self, store: DocumentStore):
        self.store = store
        self.users = UserService(store)

    async def register(self, register_data: RegisterRequest) -> Dict[str, Any]:
        """Self-service registration; always creates a plain user"""
        return await self.users.create_user(
            name=register_data.name,
            phone=register_data.phone,
            email=register_data.email,
            password=register_data.password,
            role=Role.USER,
        )

    async def create_user(self, user_data: CreateUserRequest, created_by: str) -> Dict[str, Any]:
        """Account created by an administrator with an explicit role"""
        return await self.users.create_user(
            name=user_data.name,
            phone=user_data.phone,
            email=user_data.email,
            password=user_data.password,
            role=user_data.role,
            created_by=created_by,
        )

    async def login(self, login_data: LoginRequest) -> Dict[str, Any]:
        email = normalize_email(login_data.email)
        record = await self.users.get_user_record(email)
        if record is None:
            logger.warning(f"Login failed for unknown account {email}")
            raise Unauthenticated("Invalid credentials")

        if record.get("isActive") is False:
            raise Unauthenticated("Account is disabled")

        if not verify_password(login_data.password, record.get("password")):
            logger.warning(f"Login failed for {email}: bad password")
            raise Unauthenticated("Invalid credentials")

        await self.users.record_login(email)
        return record
