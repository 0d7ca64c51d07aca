"""Course model."""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Float, DateTime, UniqueConstraint

from nectar.database import Base


class Course(Base):
    __tablename__ = "courses"
    __table_args__ = (UniqueConstraint("code", name="courses_code_key"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(20), nullable=False)
    name = Column(String(100), nullable=False)
    credits = Column(Float, nullable=False)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
