"""Attendance record model."""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from nectar.database import Base

ATTENDANCE_STATUSES = ("present", "absent", "late", "excused")


class AttendanceRecord(Base):
    __tablename__ = "attendance"
    __table_args__ = (
        UniqueConstraint(
            "class_id", "student_id", "date", name="unique_attendance_class_student_date"
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    class_id = Column(
        Integer, ForeignKey("classes.id", name="attendance_class_id_fkey"), nullable=False
    )
    student_id = Column(
        String(36), ForeignKey("users.id", name="attendance_student_id_fkey"), nullable=False
    )
    date = Column(String(10), nullable=False)  # YYYY-MM-DD
    status = Column(String(20), nullable=False)
    marked_by_id = Column(
        String(36), ForeignKey("users.id", name="attendance_marked_by_id_fkey"), nullable=False
    )
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    student = relationship("User", foreign_keys=[student_id])
