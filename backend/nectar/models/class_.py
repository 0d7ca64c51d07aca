"""Class and ClassTeacher models."""

from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    UniqueConstraint,
    PrimaryKeyConstraint,
)
from sqlalchemy.orm import relationship

from nectar.database import Base


class Class(Base):
    __tablename__ = "classes"
    __table_args__ = (
        UniqueConstraint("code", name="classes_code_key"),
        UniqueConstraint(
            "dept_id", "session", "section", name="unique_class_session_section"
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    dept_id = Column(
        Integer, ForeignKey("departments.id", name="classes_dept_id_fkey"), nullable=False
    )
    session = Column(String(9), nullable=False)  # e.g. 2023-2024
    section = Column(String(5), nullable=True)
    code = Column(String(20), nullable=False)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    # Relationships
    department = relationship("Department", back_populates="classes")
    teachers = relationship("ClassTeacher", back_populates="class_", passive_deletes=True)


class ClassTeacher(Base):
    __tablename__ = "class_teachers"
    __table_args__ = (PrimaryKeyConstraint("user_id", "class_id", name="class_teachers_pkey"),)

    user_id = Column(
        String(36), ForeignKey("users.id", name="class_teachers_user_id_fkey"), nullable=False
    )
    class_id = Column(
        Integer, ForeignKey("classes.id", name="class_teachers_class_id_fkey"), nullable=False
    )
    assigned_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    teacher = relationship("User", back_populates="teaching_assignments")
    class_ = relationship("Class", back_populates="teachers")
