"""Teacher router — class notices, attendance, schedule entries and dashboard."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from nectar.database import get_db
from nectar.errors import BadRequestError
from nectar.middleware.auth import require_teacher
from nectar.models.user import User
from nectar.routers.responses import MULTI_STATUS, batch_response
from nectar.schemas.attendance import AttendanceInput, AttendanceResponse
from nectar.schemas.dashboard import TeacherDashboard
from nectar.schemas.notice import NoticeInput, NoticeResponse, NoticeUpdate
from nectar.schemas.schedule import ScheduleEntryInput, ScheduleEntryResponse
from nectar.services import (
    attendance_service,
    dashboard_service,
    notice_service,
    schedule_service,
)

router = APIRouter(prefix="/api/teacher", tags=["teacher"])


# ── Notices ───────────────────────────────────────────────────────────────────

@router.post("/notices", response_model=NoticeResponse, status_code=201)
def create_notice(
    req: NoticeInput,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    """Post a notice to one class."""
    if req.class_id is None:
        raise BadRequestError("class_id is required for a class notice.")
    return notice_service.create_notice(db, current_user.id, req.content, req.class_id)


@router.get("/classes/{class_id}/notices", response_model=list[NoticeResponse])
def list_class_notices(
    class_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    return notice_service.list_class_notices(db, class_id)


@router.put("/notices/{notice_id}", response_model=NoticeResponse)
def update_notice(
    notice_id: int,
    req: NoticeUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    return notice_service.update_notice(db, notice_id, current_user, req.content)


@router.delete("/notices/{notice_id}")
def delete_notice(
    notice_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    notice_service.delete_notice(db, notice_id, current_user)
    return {"message": "Notice deleted successfully"}


# ── Attendance ────────────────────────────────────────────────────────────────

@router.post(
    "/classes/{class_id}/attendance",
    responses={MULTI_STATUS: {"description": "Some records were rejected"}},
)
def mark_attendance(
    class_id: int,
    req: AttendanceInput,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    """Insert or overwrite attendance for one date; one record per student."""
    if not req.records:
        raise BadRequestError("No attendance records provided.")
    processed, errors = attendance_service.upsert_attendance(
        db, class_id, req.date, req.records, current_user.id
    )
    return batch_response(
        processed,
        errors,
        count_key="records_processed",
        success_message="Attendance marked successfully.",
        partial_message="Attendance marked with some errors.",
        failure_message="Failed to mark attendance.",
    )


@router.get("/classes/{class_id}/attendance", response_model=list[AttendanceResponse])
def get_attendance(
    class_id: int,
    date: str = Query(..., pattern=r"^\d{4}-\d{2}-\d{2}$"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    return attendance_service.list_for_class_date(db, class_id, date)


# ── Schedule entries ──────────────────────────────────────────────────────────

@router.post(
    "/classes/{class_id}/schedule-entries",
    response_model=ScheduleEntryResponse,
    status_code=201,
)
def create_schedule_entry(
    class_id: int,
    req: ScheduleEntryInput,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    return schedule_service.create_entry(db, class_id, req)


@router.get("/classes/{class_id}/schedule-entries", response_model=list[ScheduleEntryResponse])
def list_schedule_entries(
    class_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    return schedule_service.list_entries(db, class_id)


@router.put("/schedule-entries/{entry_id}", response_model=ScheduleEntryResponse)
def update_schedule_entry(
    entry_id: int,
    req: ScheduleEntryInput,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    """Replace every field of an entry."""
    return schedule_service.update_entry(db, entry_id, req)


@router.delete("/schedule-entries/{entry_id}")
def delete_schedule_entry(
    entry_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    schedule_service.delete_entry(db, entry_id)
    return {"message": "Schedule entry deleted successfully"}


# ── Dashboard ─────────────────────────────────────────────────────────────────

@router.get("/dashboard", response_model=TeacherDashboard)
def get_dashboard(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    """Assigned classes, upcoming schedule and recent notices."""
    return dashboard_service.teacher_dashboard(db, current_user.id)
