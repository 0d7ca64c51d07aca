"""Enrollment model — one row per (student, class) pair."""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, PrimaryKeyConstraint
from sqlalchemy.orm import relationship

from nectar.database import Base

ENROLLMENT_STATUSES = ("pending", "approved", "rejected")


class Enrollment(Base):
    __tablename__ = "enrollments"
    __table_args__ = (PrimaryKeyConstraint("user_id", "class_id", name="enrollments_pkey"),)

    user_id = Column(
        String(36), ForeignKey("users.id", name="enrollments_user_id_fkey"), nullable=False
    )
    class_id = Column(
        Integer, ForeignKey("classes.id", name="enrollments_class_id_fkey"), nullable=False
    )
    status = Column(String(20), nullable=False, default="pending")  # pending | approved | rejected
    requested_at = Column(DateTime, nullable=True, default=lambda: datetime.now(timezone.utc))
    reviewed_by = Column(
        String(36), ForeignKey("users.id", name="enrollments_reviewed_by_fkey"), nullable=True
    )
    reviewed_at = Column(DateTime, nullable=True)

    # Relationships
    user = relationship("User", back_populates="enrollments", foreign_keys=[user_id])
    class_ = relationship("Class")
