"""SQLAlchemy ORM models."""

from nectar.models.user import User, AuthIdentity
from nectar.models.department import Department
from nectar.models.course import Course
from nectar.models.class_ import Class, ClassTeacher
from nectar.models.enrollment import Enrollment
from nectar.models.attendance import AttendanceRecord
from nectar.models.schedule import ScheduleEntry
from nectar.models.notice import Notice
from nectar.models.class_event import ClassEvent, ClassRoutine

__all__ = [
    "User",
    "AuthIdentity",
    "Department",
    "Course",
    "Class",
    "ClassTeacher",
    "Enrollment",
    "AttendanceRecord",
    "ScheduleEntry",
    "Notice",
    "ClassEvent",
    "ClassRoutine",
]
