"""User profile and auth identity models."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship

from nectar.database import Base

ROLES = ("admin", "teacher", "student", "cr")


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", name="users_email_key"),
        UniqueConstraint("student_id", name="users_student_id_key"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), nullable=False, index=True)
    full_name = Column(String(255), nullable=False)
    dept_code = Column(String(10), nullable=True)
    role = Column(String(20), nullable=False, default="student")  # admin | teacher | student | cr
    student_id = Column(String(20), nullable=True)  # university roll number
    batch = Column(String(10), nullable=True)
    section = Column(String(5), nullable=True)
    picture_url = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    # Relationships
    enrollments = relationship(
        "Enrollment",
        back_populates="user",
        foreign_keys="Enrollment.user_id",
        passive_deletes=True,
    )
    teaching_assignments = relationship(
        "ClassTeacher", back_populates="teacher", passive_deletes=True
    )


class AuthIdentity(Base):
    """Login credentials, kept apart from the profile row like Supabase's auth.users."""

    __tablename__ = "auth_users"
    __table_args__ = (UniqueConstraint("email", name="auth_users_email_key"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
