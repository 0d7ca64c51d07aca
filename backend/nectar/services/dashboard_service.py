"""Dashboard service — teacher and student landing-page aggregates.

Each dashboard fans out into several small queries joined in memory by
foreign id. Only the first lookup (which classes the user belongs to) is
mandatory; every later section is best-effort and is left empty with a
warning in the log when its query fails.
"""

import logging
from contextlib import contextmanager
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from nectar.models.attendance import AttendanceRecord
from nectar.models.class_ import Class
from nectar.models.course import Course
from nectar.models.department import Department
from nectar.models.notice import Notice
from nectar.models.schedule import ScheduleEntry
from nectar.services.class_service import teacher_class_ids
from nectar.services.enrollment_service import approved_class_ids

logger = logging.getLogger(__name__)

NOTICE_PREVIEW_CHARS = 100
GLOBAL_NOTICE_LIMIT = 3
CLASS_NOTICE_LIMIT = 5
SCHEDULE_LIMIT = 5


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


@contextmanager
def _best_effort(db: Session, section: str):
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Dashboard section %s unavailable: %s", section, exc)


def _class_summaries(db: Session, class_ids: list[int]) -> tuple[list[dict], dict[int, str]]:
    """Summaries for the given classes plus an id -> code map."""
    if not class_ids:
        return [], {}
    classes = db.query(Class).filter(Class.id.in_(class_ids)).order_by(Class.code).all()
    codes = {c.id: c.code for c in classes}

    department_names: dict[int, str] = {}
    with _best_effort(db, "departments"):
        dept_ids = {c.dept_id for c in classes}
        for dept in db.query(Department).filter(Department.id.in_(dept_ids)):
            department_names[dept.id] = dept.name

    summaries = [
        {
            "id": c.id,
            "code": codes[c.id],
            "session": c.session,
            "section": c.section,
            "department_name": department_names.get(c.dept_id),
        }
        for c in classes
    ]
    return summaries, codes


def _notice_summary(notice: Notice, class_code: Optional[str] = None) -> dict:
    return {
        "id": notice.id,
        "class_code": class_code,
        "content": truncate(notice.content, NOTICE_PREVIEW_CHARS),
        "created_at": notice.created_at,
    }


def _recent_notices(db: Session, class_ids: list[int], codes: dict[int, str]) -> list[dict]:
    notices = []
    with _best_effort(db, "global notices"):
        rows = (
            db.query(Notice)
            .filter(Notice.class_id.is_(None))
            .order_by(Notice.created_at.desc())
            .limit(GLOBAL_NOTICE_LIMIT)
            .all()
        )
        notices.extend(_notice_summary(n) for n in rows)

    if class_ids:
        with _best_effort(db, "class notices"):
            rows = (
                db.query(Notice)
                .filter(Notice.class_id.in_(class_ids))
                .order_by(Notice.created_at.desc())
                .limit(CLASS_NOTICE_LIMIT)
                .all()
            )
            notices.extend(_notice_summary(n, codes.get(n.class_id)) for n in rows)
    return notices


def teacher_dashboard(db: Session, teacher_id: str) -> dict:
    class_ids = teacher_class_ids(db, teacher_id)
    dashboard = {"assigned_classes": [], "upcoming_events": [], "recent_notices": []}

    codes: dict[int, str] = {}
    with _best_effort(db, "assigned classes"):
        dashboard["assigned_classes"], codes = _class_summaries(db, class_ids)

    if class_ids:
        with _best_effort(db, "schedule"):
            entries = (
                db.query(ScheduleEntry)
                .filter(ScheduleEntry.class_id.in_(class_ids))
                .order_by(ScheduleEntry.day_of_week, ScheduleEntry.start_time)
                .limit(SCHEDULE_LIMIT)
                .all()
            )
            course_codes = {e.course_code for e in entries if e.course_code}
            course_names = {}
            if course_codes:
                course_names = {
                    c.code: c.name
                    for c in db.query(Course).filter(Course.code.in_(course_codes))
                }
            dashboard["upcoming_events"] = [
                {
                    "id": e.id,
                    "class_id": e.class_id,
                    "class_code": codes.get(e.class_id, ""),
                    "day_of_week": e.day_of_week,
                    "start_time": e.start_time,
                    "end_time": e.end_time,
                    "course_code": e.course_code,
                    "course_name": course_names.get(e.course_code),
                    "room_number": e.room_number,
                }
                for e in entries
            ]

    dashboard["recent_notices"] = _recent_notices(db, class_ids, codes)
    return dashboard


def student_dashboard(db: Session, student_id: str) -> dict:
    class_ids = approved_class_ids(db, student_id)
    dashboard = {"enrolled_classes": [], "recent_notices": [], "attendance_stats": None}

    codes: dict[int, str] = {}
    with _best_effort(db, "enrolled classes"):
        dashboard["enrolled_classes"], codes = _class_summaries(db, class_ids)

    dashboard["recent_notices"] = _recent_notices(db, class_ids, codes)

    if class_ids:
        with _best_effort(db, "attendance stats"):
            statuses = [
                r.status
                for r in db.query(AttendanceRecord.status).filter(
                    AttendanceRecord.student_id == student_id,
                    AttendanceRecord.class_id.in_(class_ids),
                )
            ]
            if statuses:
                attended = sum(1 for s in statuses if s in ("present", "late"))
                dashboard["attendance_stats"] = {
                    "total_attended": attended,
                    "total_classes": len(statuses),
                    "overall_percentage": attended / len(statuses) * 100,
                }
    return dashboard
