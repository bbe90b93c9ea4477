from pydantic import StrictBool, field_validator
from typing import Optional, List
from datetime import datetime
import re

from app.config.permissions_config import Role, parse_role
from app.core.pagination import OffsetPagination
from app.core.schemas import CamelModel

PHONE_RE = re.compile(r"^\+?[\d\s\-\(\)]{10,}$")


def validate_phone(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not PHONE_RE.match(value):
        raise ValueError("Invalid phone number format")
    return value


class UserResponse(CamelModel):
    uid: str
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    role: Role = Role.USER
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    last_login_at: Optional[datetime] = None

    @field_validator("role", mode="before")
    @classmethod
    def unknown_role_is_user(cls, value):
        return parse_role(value) or Role.USER


class UserListResponse(CamelModel):
    users: List[UserResponse]
    pagination: OffsetPagination


class UserStatusUpdate(CamelModel):
    is_active: StrictBool


class UserRoleUpdate(CamelModel):
    role: Role
