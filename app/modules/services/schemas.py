from pydantic import field_validator
from typing import Optional, List
from datetime import datetime

from app.core.pagination import OffsetPagination
from app.core.schemas import CamelModel


class ServiceFields(CamelModel):
    name: str
    category: str
    short_description: str
    long_description: str
    image: Optional[str] = None
    tags: List[str] = []


class ServiceCreate(ServiceFields):
    @field_validator("name", "category", "short_description", "long_description")
    @classmethod
    def required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Required fields missing")
        return value


class ServiceUpdate(ServiceCreate):
    pass


class ServiceResponse(ServiceFields):
    id: str
    timestamp: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None


class ServiceListResponse(CamelModel):
    services: List[ServiceResponse]
    pagination: OffsetPagination
