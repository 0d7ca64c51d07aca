"""Enrollment service — request/review state machine and enrollment listings.

A (student, class) pair has at most one enrollment row:

    (none) --request--> pending --review--> approved
                                  \\------> rejected --request--> pending
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from nectar.database import persist, ForeignKeyViolation, UniqueViolation
from nectar.errors import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ServiceError,
)
from nectar.models.class_ import Class
from nectar.models.enrollment import Enrollment
from nectar.models.user import User
from nectar.services.authorization import authorize_class_moderator

logger = logging.getLogger(__name__)


def request_enrollment(db: Session, student_id: str, class_id: int) -> Enrollment:
    """Create (or re-open after a rejection) a pending enrollment request."""
    now = datetime.now(timezone.utc)
    enrollment = db.get(Enrollment, (student_id, class_id))

    if enrollment is not None:
        if enrollment.status == "approved":
            raise ConflictError(f"already approved for class ID {class_id}")
        if enrollment.status == "pending":
            raise ConflictError(f"enrollment request already pending for class ID {class_id}")
        enrollment.status = "pending"
        enrollment.requested_at = now
        enrollment.reviewed_by = None
        enrollment.reviewed_at = None
    else:
        enrollment = Enrollment(
            user_id=student_id,
            class_id=class_id,
            status="pending",
            requested_at=now,
        )
        db.add(enrollment)

    try:
        persist(db, enrollment)
    except ForeignKeyViolation as exc:
        # SQLite does not name the violated key; the student row is known to exist.
        if exc.constraint in (None, "enrollments_class_id_fkey"):
            raise NotFoundError("Class not found.") from exc
        raise
    except UniqueViolation as exc:
        # Another request for the same pair was inserted concurrently.
        raise ConflictError(
            f"enrollment request already pending for class ID {class_id}"
        ) from exc

    logger.info("Student %s requested enrollment in class %s", student_id, class_id)
    return enrollment


def _find_pending(db: Session, student_id: str, class_id: int) -> Optional[Enrollment]:
    return (
        db.query(Enrollment)
        .filter(
            Enrollment.user_id == student_id,
            Enrollment.class_id == class_id,
            Enrollment.status == "pending",
        )
        .first()
    )


def review_enrollment(
    db: Session,
    reviewer: User,
    class_id: int,
    student_id: str,
    new_status: str,
) -> Enrollment:
    """Approve or reject a pending request.

    The final UPDATE is conditional on the row still being pending, so of two
    reviewers racing on the same request only one can win.
    """
    if new_status not in ("approved", "rejected"):
        raise BadRequestError("new_status must be 'approved' or 'rejected'")

    authorize_class_moderator(db, reviewer, class_id)

    if _find_pending(db, student_id, class_id) is None:
        raise NotFoundError(
            f"no pending enrollment request found for student {student_id} in class {class_id}"
        )

    updated = (
        db.query(Enrollment)
        .filter(
            Enrollment.user_id == student_id,
            Enrollment.class_id == class_id,
            Enrollment.status == "pending",
        )
        .update(
            {
                "status": new_status,
                "reviewed_by": reviewer.id,
                "reviewed_at": datetime.now(timezone.utc),
            },
            synchronize_session=False,
        )
    )
    if updated == 0:
        db.rollback()
        raise ConflictError(
            f"failed to update enrollment for student {student_id} in class {class_id}: "
            "request may no longer be pending"
        )
    persist(db)

    logger.info(
        "Enrollment of %s in class %s %s by %s", student_id, class_id, new_status, reviewer.id
    )
    return db.get(Enrollment, (student_id, class_id))


def list_my_enrollments(db: Session, student_id: str) -> list[dict]:
    rows = (
        db.query(Enrollment, Class)
        .join(Class, Class.id == Enrollment.class_id)
        .filter(Enrollment.user_id == student_id)
        .order_by(Enrollment.requested_at.desc())
        .all()
    )
    return [
        {
            **_enrollment_fields(enrollment),
            "class_code": cls.code,
            "class_session": cls.session,
        }
        for enrollment, cls in rows
    ]


def list_available_classes(db: Session, student_id: str) -> list[dict]:
    """Classes the student has neither a pending nor an approved request for."""
    taken = select(Enrollment.class_id).where(
        Enrollment.user_id == student_id,
        Enrollment.status.in_(("pending", "approved")),
    )
    classes = (
        db.query(Class)
        .filter(Class.id.not_in(taken))
        .order_by(Class.code)
        .all()
    )
    return [
        {
            "id": c.id,
            "code": c.code,
            "session": c.session,
            "section": c.section,
            "department_name": c.department.name if c.department else None,
        }
        for c in classes
    ]


def list_pending_for_class(db: Session, requester: User, class_id: int) -> list[dict]:
    """Pending requests for a class, visible to admins and the class's CRs."""
    try:
        authorize_class_moderator(db, requester, class_id)
    except ServiceError as exc:
        raise ForbiddenError(
            f"user {requester.id} is not authorized to view pending enrollments "
            f"for class {class_id}: {exc.message}"
        ) from exc

    rows = (
        db.query(Enrollment, User)
        .join(User, User.id == Enrollment.user_id)
        .filter(Enrollment.class_id == class_id, Enrollment.status == "pending")
        .order_by(Enrollment.requested_at)
        .all()
    )
    return [
        {
            **_enrollment_fields(enrollment),
            "student_name": user.full_name,
            "student_cuet_id": user.student_id,
        }
        for enrollment, user in rows
    ]


def approved_class_ids(db: Session, student_id: str) -> list[int]:
    rows = (
        db.query(Enrollment.class_id)
        .filter(Enrollment.user_id == student_id, Enrollment.status == "approved")
        .all()
    )
    return [r.class_id for r in rows]


def _enrollment_fields(enrollment: Enrollment) -> dict:
    return {
        "user_id": enrollment.user_id,
        "class_id": enrollment.class_id,
        "status": enrollment.status,
        "requested_at": enrollment.requested_at,
        "reviewed_by": enrollment.reviewed_by,
        "reviewed_at": enrollment.reviewed_at,
    }
