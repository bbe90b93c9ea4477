from pydantic import StrictBool, field_validator
from typing import Any, Dict, List, Optional, Union
from datetime import datetime
import re

from app.core.pagination import OffsetPagination
from app.core.schemas import CamelModel

YOUTUBE_WATCH_RE = re.compile(r"^https://(www\.)?youtube\.com/watch\?v=[\w-]+$")


class TrainingFields(CamelModel):
    title: str
    description: Optional[str] = None
    yt_link: str
    seo: Dict[str, Any] = {}
    category: Optional[str] = None
    level: Optional[str] = None
    duration: Optional[Union[str, int, float]] = None
    is_active: bool = True


class TrainingCreate(TrainingFields):
    @field_validator("title")
    @classmethod
    def title_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Title and YouTube link are required")
        return value

    @field_validator("yt_link")
    @classmethod
    def youtube_link(cls, value: str) -> str:
        if not YOUTUBE_WATCH_RE.match(value):
            raise ValueError("Invalid YouTube link format")
        return value


class TrainingUpdate(TrainingCreate):
    pass


class TrainingStatusUpdate(CamelModel):
    is_active: StrictBool


class TrainingResponse(TrainingFields):
    id: str
    timestamp: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None
    deactivated_at: Optional[datetime] = None
    reactivated_at: Optional[datetime] = None
    deleted_by: Optional[str] = None
    deleted_at: Optional[datetime] = None


class TrainingListResponse(CamelModel):
    trainings: List[TrainingResponse]
    pagination: OffsetPagination
    category: Optional[str] = None
    level: Optional[str] = None
