"""Role resolution and class-representative authorization.

Nothing here is cached: every class-scoped mutation re-reads the caller's
role and enrollment so that promotions, demotions and review decisions take
effect on the very next request.
"""

from sqlalchemy.orm import Session

from nectar.errors import ForbiddenError, NotFoundError
from nectar.models.enrollment import Enrollment
from nectar.models.user import User


def get_user_role(db: Session, user_id: str) -> str:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError(f"user with ID {user_id} not found")
    if not user.role:
        raise ForbiddenError("Access denied: User profile incomplete or role not assigned.")
    return user.role


def is_authorized_cr(db: Session, user_id: str, class_id: int) -> None:
    """Require ``user_id`` to be a CR with an approved enrollment in ``class_id``.

    Raises NotFoundError when the user does not exist and ForbiddenError when
    the role or the membership check fails.
    """
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError(f"CR user {user_id} not found")
    if user.role != "cr":
        raise ForbiddenError(
            f"user {user_id} is not a Class Representative (role: {user.role})"
        )

    enrollment = db.get(Enrollment, (user_id, class_id))
    if enrollment is None or enrollment.status != "approved":
        raise ForbiddenError(f"CR {user_id} is not an approved member of class {class_id}")


def authorize_class_moderator(db: Session, user: User, class_id: int) -> None:
    """Admins moderate every class; anyone else must pass the CR check."""
    if user.role == "admin":
        return
    is_authorized_cr(db, user.id, class_id)


def authorize_attendance_view(db: Session, viewer: User, class_id: int, student_id: str) -> None:
    """Students see their own record; teachers, admins and the class's CRs see anyone's."""
    if viewer.id == student_id or viewer.role in ("teacher", "admin"):
        return
    if viewer.role == "cr":
        is_authorized_cr(db, viewer.id, class_id)
        return
    raise ForbiddenError(
        f"user {viewer.id} is not authorized to view attendance of student {student_id}"
    )
