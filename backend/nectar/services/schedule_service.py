"""Schedule service — weekly timetable entries per class."""

from sqlalchemy.orm import Session

from nectar.database import persist, ForeignKeyViolation, UniqueViolation
from nectar.errors import BadRequestError, ConflictError, NotFoundError
from nectar.models.schedule import ScheduleEntry


def _entry_fields(data) -> dict:
    if data.end_time <= data.start_time:
        raise BadRequestError("end_time must be after start_time")
    # Optional columns: a missing value or an empty string is stored as NULL.
    return {
        "day_of_week": data.day_of_week,
        "start_time": data.start_time,
        "end_time": data.end_time,
        "course_code": data.course_code or None,
        "teacher_id": data.teacher_id or None,
        "room_number": data.room_number or None,
    }


def _persist_entry(db: Session, entry: ScheduleEntry, action: str) -> None:
    try:
        persist(db, entry)
    except UniqueViolation as exc:
        raise ConflictError(f"Schedule entry {action} conflicts with an existing one.") from exc
    except ForeignKeyViolation as exc:
        raise BadRequestError(
            "Invalid data for schedule entry (e.g., non-existent class, course_code or teacher_id)."
        ) from exc


def create_entry(db: Session, class_id: int, data) -> ScheduleEntry:
    entry = ScheduleEntry(class_id=class_id, **_entry_fields(data))
    db.add(entry)
    _persist_entry(db, entry, "creation")
    return entry


def list_entries(db: Session, class_id: int) -> list[ScheduleEntry]:
    return (
        db.query(ScheduleEntry)
        .filter(ScheduleEntry.class_id == class_id)
        .order_by(ScheduleEntry.day_of_week, ScheduleEntry.start_time)
        .all()
    )


def get_entry(db: Session, entry_id: int) -> ScheduleEntry:
    entry = db.get(ScheduleEntry, entry_id)
    if entry is None:
        raise NotFoundError(f"schedule entry with ID {entry_id} not found")
    return entry


def update_entry(db: Session, entry_id: int, data) -> ScheduleEntry:
    """Replace an entry's slot details; the owning class never changes."""
    entry = get_entry(db, entry_id)
    for field, value in _entry_fields(data).items():
        setattr(entry, field, value)
    _persist_entry(db, entry, "update")
    return entry


def delete_entry(db: Session, entry_id: int) -> None:
    entry = get_entry(db, entry_id)
    db.delete(entry)
    persist(db)
