"""Class event and routine schemas."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

EventType = Literal["test", "quiz", "assignment_due", "presentation", "holiday", "other"]


class ClassEventInput(BaseModel):
    event_type: EventType
    title: str = Field(min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    event_date: str = Field(min_length=10)  # YYYY-MM-DD or an ISO timestamp


class ClassEventResponse(BaseModel):
    id: int
    class_id: int
    event_type: str
    title: str
    description: Optional[str] = None
    event_date: str
    created_by_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ClassRoutineResponse(BaseModel):
    id: int
    class_id: int
    file_name: str
    file_url: str
    uploaded_by_id: str
    uploaded_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
