"""Attendance schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class StudentAttendance(BaseModel):
    student_id: str
    status: str  # present | absent | late | excused, checked per record


class AttendanceInput(BaseModel):
    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    records: list[StudentAttendance]


class AttendanceResponse(BaseModel):
    id: int
    class_id: int
    student_id: str
    date: str
    status: str
    marked_by_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    student_name: Optional[str] = None
    student_cuet_id: Optional[str] = None

    class Config:
        from_attributes = True
