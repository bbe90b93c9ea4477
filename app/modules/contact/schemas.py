from enum import Enum
from pydantic import EmailStr, field_validator
from typing import List, Optional
from datetime import datetime

from app.core.pagination import OffsetPagination
from app.core.schemas import CamelModel


class ContactStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class ContactCreate(CamelModel):
    name: str
    phone_number: str
    email: EmailStr
    message: Optional[str] = None

    @field_validator("name", "phone_number")
    @classmethod
    def required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Name, phone number, and email are required")
        return value.strip()


class ContactStatusUpdate(CamelModel):
    status: ContactStatus


class ContactResponse(CamelModel):
    id: str
    name: str
    phone_number: str
    email: str
    message: Optional[str] = None
    status: ContactStatus = ContactStatus.PENDING
    timestamp: Optional[datetime] = None
    submitted_by: Optional[str] = None
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None


class ContactListResponse(CamelModel):
    contacts: List[ContactResponse]
    pagination: OffsetPagination
