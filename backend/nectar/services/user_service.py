"""User service — profile CRUD, CR promotion/demotion and bulk student import."""

import csv
import io
import logging
from typing import Optional

from sqlalchemy.orm import Session

from nectar.database import persist, ForeignKeyViolation, UniqueViolation, BackendError
from nectar.errors import BadRequestError, ConflictError, NotFoundError
from nectar.models.user import User, ROLES
from nectar.services import auth_service

logger = logging.getLogger(__name__)

SIGNUP_ROLES = ("student", "teacher", "cr")

CSV_HEADERS = ("uuid", "email", "full_name", "student_id", "dept_code", "batch", "section", "picture_url")
REQUIRED_CSV_HEADERS = ("email", "full_name", "student_id", "dept_code", "batch")

# Optional profile columns; an empty string in an update clears the column.
_NULLABLE_FIELDS = ("dept_code", "student_id", "batch", "section", "picture_url")


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def validate_role_fields(
    role: str,
    dept_code: Optional[str],
    student_id: Optional[str],
    batch: Optional[str],
    section: Optional[str] = None,
    require_section: bool = False,
) -> None:
    """Check the profile fields a role depends on."""
    if role in ("student", "cr"):
        if _blank(student_id) or _blank(batch) or _blank(dept_code):
            raise BadRequestError("StudentID, Batch, and DeptCode are required for students/CRs.")
        if require_section and _blank(section):
            raise BadRequestError("Section is required for students/CRs.")
    elif role == "teacher":
        if _blank(dept_code):
            raise BadRequestError("DeptCode is required for teachers.")


def _profile_fields(data) -> dict:
    return {
        "full_name": data.full_name,
        "role": data.role,
        "dept_code": data.dept_code or None,
        "student_id": data.student_id or None,
        "batch": data.batch or None,
        "section": data.section or None,
        "picture_url": data.picture_url or None,
    }


def sign_up(db: Session, data) -> User:
    """Self-service registration for students, CRs and teachers."""
    if data.role not in SIGNUP_ROLES:
        raise BadRequestError("Invalid role. Must be 'student', 'teacher', or 'cr'.")
    validate_role_fields(
        data.role, data.dept_code, data.student_id, data.batch, data.section, require_section=True
    )
    return auth_service.register_user(db, data.email, data.password, _profile_fields(data))


def create_user(db: Session, data) -> User:
    """Admin-side account creation (identity and profile)."""
    if data.role not in ROLES:
        raise BadRequestError(f"Invalid role. Must be one of: {', '.join(ROLES)}.")
    validate_role_fields(data.role, data.dept_code, data.student_id, data.batch)
    return auth_service.register_user(db, data.email, data.password, _profile_fields(data))


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.created_at).all()


def get_user(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError(f"user with ID {user_id} not found")
    return user


def _apply_updates(user: User, changes: dict) -> None:
    for field, value in changes.items():
        if field in _NULLABLE_FIELDS and value == "":
            value = None
        setattr(user, field, value)


def update_user(db: Session, user_id: str, data) -> User:
    user = get_user(db, user_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise BadRequestError("No fields provided for update.")
    if "full_name" in changes and _blank(changes["full_name"]):
        raise BadRequestError("full_name cannot be empty.")
    if "role" in changes and changes["role"] not in ROLES:
        raise BadRequestError(f"Invalid role. Must be one of: {', '.join(ROLES)}.")

    _apply_updates(user, changes)
    try:
        persist(db, user)
    except UniqueViolation as exc:
        raise ConflictError("Update failed: Student ID already exists for another user.") from exc
    return user


def delete_user(db: Session, user_id: str) -> None:
    """Remove the profile and its login identity."""
    user = get_user(db, user_id)
    db.delete(user)
    auth_service.delete_identity(db, user_id)
    try:
        persist(db)
    except ForeignKeyViolation as exc:
        raise ConflictError(
            "Failed to delete user: the user is referenced by other data."
        ) from exc
    logger.info("Deleted user %s", user_id)


def _change_role(db: Session, user_id: str, expected: str, new_role: str) -> Optional[User]:
    # Guarded on the current role so a concurrent change is not overwritten.
    updated = (
        db.query(User)
        .filter(User.id == user_id, User.role == expected)
        .update({"role": new_role}, synchronize_session=False)
    )
    if updated == 0:
        db.rollback()
        return None
    persist(db)
    logger.info("Changed role of user %s from %s to %s", user_id, expected, new_role)
    return db.get(User, user_id)


def promote_to_cr(db: Session, user_id: str) -> User:
    user = get_user(db, user_id)
    if user.role != "student":
        raise ConflictError(
            f"user {user_id} is not a student (current role: {user.role}). Cannot promote to CR."
        )
    promoted = _change_role(db, user_id, "student", "cr")
    if promoted is None:
        raise ConflictError(f"user {user_id} is no longer a student. Cannot promote to CR.")
    return promoted


def demote_to_student(db: Session, user_id: str) -> User:
    user = get_user(db, user_id)
    if user.role != "cr":
        raise ConflictError(f"user {user_id} is not a CR (current role: {user.role}).")
    demoted = _change_role(db, user_id, "cr", "student")
    if demoted is None:
        raise ConflictError(f"user {user_id} is no longer a CR.")
    return demoted


def update_own_profile(db: Session, user_id: str, data) -> User:
    user = get_user(db, user_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise BadRequestError("No fields provided for update.")
    if "full_name" in changes and _blank(changes["full_name"]):
        raise BadRequestError("full_name cannot be empty.")

    _apply_updates(user, changes)
    persist(db, user)
    return user


# ── Bulk import ──────────────────────────────────────────────────────────────

def parse_student_csv(content: bytes) -> list[dict]:
    """Read the upload into row dicts keyed by the recognised headers.

    Headers are matched case-insensitively; unknown columns are ignored.
    """
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise BadRequestError("CSV file must be UTF-8 encoded.")
    reader = csv.reader(io.StringIO(text))
    try:
        header = next(reader)
    except StopIteration:
        raise BadRequestError("CSV file is empty.")
    except csv.Error as exc:
        raise BadRequestError(f"Failed to read CSV header: {exc}")

    header_map = {}
    for index, name in enumerate(header):
        key = name.strip().lower()
        if key in CSV_HEADERS:
            header_map[key] = index

    for required in REQUIRED_CSV_HEADERS:
        if required not in header_map:
            raise BadRequestError(f"Missing required CSV header: {required}")

    rows = []
    try:
        for record in reader:
            if not any(cell.strip() for cell in record):
                continue
            row = {}
            for key, index in header_map.items():
                row[key] = record[index].strip() if index < len(record) else ""
            rows.append(row)
    except csv.Error as exc:
        raise BadRequestError(f"Error reading CSV record: {exc}")

    if not rows:
        raise BadRequestError("No student data found in CSV after header.")
    return rows


def bulk_create_students(db: Session, rows: list[dict]) -> tuple[int, list[str]]:
    """Insert one student profile per row; returns (created, per-row errors)."""
    created = 0
    errors = []
    for number, row in enumerate(rows, start=1):
        missing = [f for f in REQUIRED_CSV_HEADERS if not row.get(f)]
        if missing:
            errors.append(
                f"row {number}: missing required fields ({', '.join(missing)}) for student "
                f"email '{row.get('email', '')}' (or student_id '{row.get('student_id', '')}')"
            )
            continue

        profile = User(
            email=row["email"],
            full_name=row["full_name"],
            student_id=row["student_id"],
            dept_code=row["dept_code"],
            batch=row["batch"],
            section=row.get("section") or None,
            picture_url=row.get("picture_url") or None,
            role="student",
        )
        if row.get("uuid"):
            profile.id = row["uuid"]
        db.add(profile)
        try:
            persist(db)
        except BackendError as exc:
            errors.append(
                f"row {number} (email: {row['email']}, student_id: {row['student_id']}): "
                f"failed to insert profile: {exc}"
            )
            continue
        created += 1

    logger.info("Bulk student import: %d created, %d errors", created, len(errors))
    return created, errors
