"""Department service."""

from sqlalchemy.orm import Session

from nectar.database import persist, ForeignKeyViolation, UniqueViolation
from nectar.errors import ConflictError, NotFoundError
from nectar.models.department import Department


def create_department(db: Session, code: str, name: str) -> Department:
    department = Department(code=code, name=name)
    db.add(department)
    try:
        persist(db, department)
    except UniqueViolation as exc:
        raise ConflictError("Department code already exists.") from exc
    return department


def list_departments(db: Session) -> list[Department]:
    return db.query(Department).order_by(Department.code).all()


def get_department(db: Session, department_id: int) -> Department:
    department = db.get(Department, department_id)
    if department is None:
        raise NotFoundError(f"department with ID {department_id} not found")
    return department


def update_department(db: Session, department_id: int, code: str, name: str) -> Department:
    department = get_department(db, department_id)
    department.code = code
    department.name = name
    try:
        persist(db, department)
    except UniqueViolation as exc:
        raise ConflictError(
            "Update failed: this department code already exists for another department."
        ) from exc
    return department


def delete_department(db: Session, department_id: int) -> None:
    department = get_department(db, department_id)
    db.delete(department)
    try:
        persist(db)
    except ForeignKeyViolation as exc:
        raise ConflictError("Failed to delete department: It is referenced by other data.") from exc
