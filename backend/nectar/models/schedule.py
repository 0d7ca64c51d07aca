"""Weekly schedule entry model."""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from nectar.database import Base


class ScheduleEntry(Base):
    __tablename__ = "schedules"

    id = Column(Integer, primary_key=True, autoincrement=True)
    class_id = Column(
        Integer, ForeignKey("classes.id", name="schedules_class_id_fkey"), nullable=False
    )
    day_of_week = Column(Integer, nullable=False)  # 0 = Sunday .. 6 = Saturday
    start_time = Column(String(8), nullable=False)  # HH:MM
    end_time = Column(String(8), nullable=False)
    course_code = Column(
        String(20), ForeignKey("courses.code", name="schedules_course_code_fkey"), nullable=True
    )
    teacher_id = Column(
        String(36), ForeignKey("users.id", name="schedules_teacher_id_fkey"), nullable=True
    )
    room_number = Column(String(50), nullable=True)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    class_ = relationship("Class")
