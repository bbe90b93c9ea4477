from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from typing import List, Literal, Optional

from app.config.permissions_config import Role
from app.core.schemas import CamelModel
from app.modules.users.schemas import UserResponse, validate_phone


class CurrentUser(BaseModel):
    """Identity attached to an authenticated request"""
    model_config = ConfigDict(frozen=True)

    uid: str  # identity key (lower-cased e-mail)
    email: str
    role: Role
    name: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool = True
    provider: Literal["local", "firebase"] = "local"
    token_role: Optional[str] = None


class RegisterRequest(BaseModel):
    name: str
    phone: str
    email: EmailStr
    password: str

    @field_validator("name", "password")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("phone")
    @classmethod
    def phone_format(cls, value: str) -> str:
        return validate_phone(value)


class CreateUserRequest(RegisterRequest):
    role: Role = Role.USER


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def phone_format(cls, value: Optional[str]) -> Optional[str]:
        return validate_phone(value)


class SessionUser(BaseModel):
    email: str
    role: Role


class TokenResponse(BaseModel):
    success: bool = True
    token: str
    user: SessionUser


class MeResponse(CamelModel):
    success: bool = True
    user: UserResponse
    permissions: List[str]
