"""Schedule entry schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

_HH_MM = r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$"


class ScheduleEntryInput(BaseModel):
    day_of_week: int = Field(ge=0, le=6)
    start_time: str = Field(pattern=_HH_MM)
    end_time: str = Field(pattern=_HH_MM)
    course_code: Optional[str] = None
    teacher_id: Optional[str] = None
    room_number: Optional[str] = None


class ScheduleEntryResponse(BaseModel):
    id: int
    class_id: int
    day_of_week: int
    start_time: str
    end_time: str
    course_code: Optional[str] = None
    teacher_id: Optional[str] = None
    room_number: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
