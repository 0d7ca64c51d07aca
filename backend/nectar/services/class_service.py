"""Class service — class CRUD and teacher assignment."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from nectar.database import persist, ForeignKeyViolation, UniqueViolation
from nectar.errors import BadRequestError, ConflictError, NotFoundError
from nectar.models.class_ import Class, ClassTeacher
from nectar.models.user import User

logger = logging.getLogger(__name__)

_UNIQUE_MESSAGES = {
    "classes_code_key": "Class with this code already exists.",
    "unique_class_session_section": (
        "A class with the same department, session, and section already exists."
    ),
}


def _raise_for_write_error(exc: Exception, prefix: str = "") -> None:
    if isinstance(exc, UniqueViolation):
        message = _UNIQUE_MESSAGES.get(exc.constraint, "Class write failed due to a uniqueness constraint.")
        raise ConflictError(prefix + message) from exc
    if isinstance(exc, ForeignKeyViolation):
        raise BadRequestError(
            "Invalid Department ID: The specified department does not exist."
        ) from exc
    raise exc


def create_class(db: Session, dept_id: int, session: str, section: Optional[str], code: str) -> Class:
    cls = Class(dept_id=dept_id, session=session, section=section or None, code=code)
    db.add(cls)
    try:
        persist(db, cls)
    except (UniqueViolation, ForeignKeyViolation) as exc:
        _raise_for_write_error(exc)
    return cls


def list_classes(db: Session) -> list[Class]:
    return db.query(Class).order_by(Class.code).all()


def get_class(db: Session, class_id: int) -> Class:
    cls = db.get(Class, class_id)
    if cls is None:
        raise NotFoundError(f"class with ID {class_id} not found")
    return cls


def update_class(
    db: Session, class_id: int, dept_id: int, session: str, section: Optional[str], code: str
) -> Class:
    cls = get_class(db, class_id)
    cls.dept_id = dept_id
    cls.session = session
    cls.section = section or None
    cls.code = code
    try:
        persist(db, cls)
    except (UniqueViolation, ForeignKeyViolation) as exc:
        _raise_for_write_error(exc, prefix="Update failed: ")
    return cls


def delete_class(db: Session, class_id: int) -> None:
    cls = get_class(db, class_id)
    db.delete(cls)
    try:
        persist(db)
    except ForeignKeyViolation as exc:
        raise ConflictError("Failed to delete class: It is referenced by other data.") from exc


# ── Teacher assignment ──────────────────────────────────────────────────────

def list_class_teachers(db: Session, class_id: int) -> list[User]:
    get_class(db, class_id)
    return (
        db.query(User)
        .join(ClassTeacher, ClassTeacher.user_id == User.id)
        .filter(ClassTeacher.class_id == class_id)
        .order_by(User.full_name)
        .all()
    )


def assign_teachers(db: Session, class_id: int, teacher_ids: list[str]) -> tuple[int, list[str]]:
    """Assign each teacher to the class; returns (successful, per-teacher errors)."""
    successful = 0
    errors = []
    for teacher_id in teacher_ids:
        user = db.get(User, teacher_id)
        if user is None:
            errors.append(f"user with ID {teacher_id} not found")
            continue
        if user.role != "teacher":
            errors.append(f"user with ID {teacher_id} is not a teacher (role: {user.role})")
            continue
        if db.get(ClassTeacher, (teacher_id, class_id)) is not None:
            errors.append(f"teacher {teacher_id} already assigned to class {class_id}")
            continue

        db.add(ClassTeacher(user_id=teacher_id, class_id=class_id))
        try:
            persist(db)
        except UniqueViolation:
            errors.append(f"teacher {teacher_id} already assigned to class {class_id}")
            continue
        except ForeignKeyViolation:
            errors.append(f"failed to assign teacher {teacher_id} to class {class_id}: class not found")
            continue
        successful += 1

    logger.info("Assigned %d teacher(s) to class %s (%d errors)", successful, class_id, len(errors))
    return successful, errors


def unassign_teachers(db: Session, class_id: int, teacher_ids: list[str]) -> tuple[int, list[str]]:
    successful = 0
    errors = []
    for teacher_id in teacher_ids:
        removed = (
            db.query(ClassTeacher)
            .filter(ClassTeacher.class_id == class_id, ClassTeacher.user_id == teacher_id)
            .delete(synchronize_session=False)
        )
        if removed == 0:
            errors.append(f"teacher {teacher_id} is not assigned to class {class_id}")
            continue
        persist(db)
        successful += 1

    logger.info("Unassigned %d teacher(s) from class %s (%d errors)", successful, class_id, len(errors))
    return successful, errors


def teacher_class_ids(db: Session, teacher_id: str) -> list[int]:
    rows = db.query(ClassTeacher.class_id).filter(ClassTeacher.user_id == teacher_id).all()
    return [r.class_id for r in rows]
