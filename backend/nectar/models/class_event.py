"""ClassEvent and ClassRoutine models."""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from nectar.database import Base

EVENT_TYPES = ("test", "quiz", "assignment_due", "presentation", "holiday", "other")


class ClassEvent(Base):
    __tablename__ = "class_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    class_id = Column(
        Integer, ForeignKey("classes.id", name="class_events_class_id_fkey"), nullable=False
    )
    event_type = Column(String(20), nullable=False)
    title = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    event_date = Column(String(32), nullable=False)  # YYYY-MM-DD or ISO timestamp
    created_by_id = Column(
        String(36), ForeignKey("users.id", name="class_events_created_by_id_fkey"), nullable=False
    )
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    class_ = relationship("Class")


class ClassRoutine(Base):
    """The uploaded routine PDF for a class (at most one per class)."""

    __tablename__ = "class_routines"
    __table_args__ = (UniqueConstraint("class_id", name="class_routines_class_id_key"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    class_id = Column(
        Integer, ForeignKey("classes.id", name="class_routines_class_id_fkey"), nullable=False
    )
    file_name = Column(String(255), nullable=False)
    file_path = Column(String(512), nullable=False)  # object path inside the bucket
    file_url = Column(Text, nullable=False)
    uploaded_by_id = Column(
        String(36), ForeignKey("users.id", name="class_routines_uploaded_by_id_fkey"), nullable=False
    )
    uploaded_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
