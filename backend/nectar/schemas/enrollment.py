"""Enrollment schemas."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel


class EnrollmentRequest(BaseModel):
    class_id: int


class EnrollmentReview(BaseModel):
    student_id_to_review: str
    new_status: Literal["approved", "rejected"]


class EnrollmentResponse(BaseModel):
    user_id: str
    class_id: int
    status: str
    requested_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EnrollmentView(EnrollmentResponse):
    class_code: Optional[str] = None
    class_session: Optional[str] = None


class PendingEnrollment(EnrollmentResponse):
    student_name: Optional[str] = None
    student_cuet_id: Optional[str] = None
