from pydantic import field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime

from app.core.pagination import CursorPagination
from app.core.schemas import CamelModel


class BlogFields(CamelModel):
    title: str
    content: str
    author: str
    category: Optional[str] = None
    tags: List[str] = []
    image: Optional[str] = None
    seo: Dict[str, Any] = {}
    is_published: bool = False


class BlogCreate(BlogFields):
    @field_validator("title", "content", "author")
    @classmethod
    def required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Title, content, and author are required")
        return value


class BlogUpdate(BlogCreate):
    pass


class BlogResponse(BlogFields):
    id: str
    timestamp: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None


class BlogListResponse(CamelModel):
    blogs: List[BlogResponse]
    pagination: CursorPagination
