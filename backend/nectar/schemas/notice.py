"""Notice schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class NoticeInput(BaseModel):
    class_id: Optional[int] = None  # required for teacher notices, ignored for global ones
    content: str = Field(min_length=5, max_length=2000)


class NoticeUpdate(BaseModel):
    content: str = Field(min_length=5, max_length=2000)


class NoticeResponse(BaseModel):
    id: int
    class_id: Optional[int] = None
    content: str
    author_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
