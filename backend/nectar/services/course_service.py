"""Course service."""

from sqlalchemy.orm import Session

from nectar.database import persist, ForeignKeyViolation, UniqueViolation
from nectar.errors import ConflictError, NotFoundError
from nectar.models.course import Course


def create_course(db: Session, code: str, name: str, credits: float) -> Course:
    course = Course(code=code, name=name, credits=credits)
    db.add(course)
    try:
        persist(db, course)
    except UniqueViolation as exc:
        raise ConflictError("Course with this code already exists.") from exc
    return course


def list_courses(db: Session) -> list[Course]:
    return db.query(Course).order_by(Course.code).all()


def get_course(db: Session, course_id: int) -> Course:
    course = db.get(Course, course_id)
    if course is None:
        raise NotFoundError(f"course with ID {course_id} not found")
    return course


def update_course(db: Session, course_id: int, code: str, name: str, credits: float) -> Course:
    course = get_course(db, course_id)
    course.code = code
    course.name = name
    course.credits = credits
    try:
        persist(db, course)
    except UniqueViolation as exc:
        raise ConflictError("Update failed: course code already exists for another course.") from exc
    except ForeignKeyViolation as exc:
        raise ConflictError(
            "Update failed: the course code is referenced by schedule entries."
        ) from exc
    return course


def delete_course(db: Session, course_id: int) -> None:
    course = get_course(db, course_id)
    db.delete(course)
    try:
        persist(db)
    except ForeignKeyViolation as exc:
        raise ConflictError("Failed to delete course: It is referenced by other data.") from exc
