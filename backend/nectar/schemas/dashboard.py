"""Dashboard aggregate schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from nectar.schemas.class_ import ClassSummary


class ScheduleEntryDetails(BaseModel):
    id: int
    class_id: int
    class_code: str
    day_of_week: int
    start_time: str
    end_time: str
    course_code: Optional[str] = None
    course_name: Optional[str] = None
    room_number: Optional[str] = None


class NoticeSummary(BaseModel):
    id: int
    class_code: Optional[str] = None
    content: str
    created_at: Optional[datetime] = None


class AttendanceStats(BaseModel):
    total_attended: int
    total_classes: int
    overall_percentage: float


class TeacherDashboard(BaseModel):
    assigned_classes: list[ClassSummary] = []
    upcoming_events: list[ScheduleEntryDetails] = []
    recent_notices: list[NoticeSummary] = []


class StudentDashboard(BaseModel):
    enrolled_classes: list[ClassSummary] = []
    recent_notices: list[NoticeSummary] = []
    attendance_stats: Optional[AttendanceStats] = None
