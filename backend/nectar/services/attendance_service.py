"""Attendance service — per-day attendance marking and lookups."""

import logging

from sqlalchemy.orm import Session

from nectar.database import persist, ForeignKeyViolation
from nectar.errors import BadRequestError
from nectar.models.attendance import AttendanceRecord, ATTENDANCE_STATUSES
from nectar.models.user import User

logger = logging.getLogger(__name__)


def upsert_attendance(
    db: Session, class_id: int, date: str, records: list, marked_by_id: str
) -> tuple[int, list[str]]:
    """Insert or overwrite one record per student for (class, date).

    Records with an unknown status are skipped and reported; the rest are
    written in a single transaction. Returns (processed, errors).
    """
    errors = []
    valid = []
    for rec in records:
        if rec.status not in ATTENDANCE_STATUSES:
            errors.append(f"invalid status '{rec.status}' for student ID {rec.student_id}")
            continue
        valid.append(rec)

    if not valid:
        errors.append("no valid attendance records provided to upsert")
        return 0, errors

    student_ids = [rec.student_id for rec in valid]
    existing = {
        r.student_id: r
        for r in db.query(AttendanceRecord).filter(
            AttendanceRecord.class_id == class_id,
            AttendanceRecord.date == date,
            AttendanceRecord.student_id.in_(student_ids),
        )
    }

    for rec in valid:
        row = existing.get(rec.student_id)
        if row is None:
            row = AttendanceRecord(class_id=class_id, student_id=rec.student_id, date=date)
            db.add(row)
            existing[rec.student_id] = row
        row.status = rec.status
        row.marked_by_id = marked_by_id

    try:
        persist(db)
    except ForeignKeyViolation as exc:
        raise BadRequestError(
            f"failed to upsert attendance records: unknown class or student ({exc})"
        ) from exc

    logger.info("Marked attendance for %d student(s) in class %s on %s", len(valid), class_id, date)
    return len(valid), errors


def list_for_class_date(db: Session, class_id: int, date: str) -> list[dict]:
    rows = (
        db.query(AttendanceRecord, User)
        .outerjoin(User, User.id == AttendanceRecord.student_id)
        .filter(AttendanceRecord.class_id == class_id, AttendanceRecord.date == date)
        .order_by(User.student_id)
        .all()
    )
    result = []
    for record, student in rows:
        item = _record_fields(record)
        if student is not None:
            item["student_name"] = student.full_name
            item["student_cuet_id"] = student.student_id
        result.append(item)
    return result


def list_for_student(db: Session, class_id: int, student_id: str) -> list[AttendanceRecord]:
    return (
        db.query(AttendanceRecord)
        .filter(AttendanceRecord.class_id == class_id, AttendanceRecord.student_id == student_id)
        .order_by(AttendanceRecord.date.desc())
        .all()
    )


def _record_fields(record: AttendanceRecord) -> dict:
    return {
        "id": record.id,
        "class_id": record.class_id,
        "student_id": record.student_id,
        "date": record.date,
        "status": record.status,
        "marked_by_id": record.marked_by_id,
        "created_at": record.created_at,
        "updated_at": record.updated_at,
    }
