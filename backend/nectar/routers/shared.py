"""Shared router — read-only class views for any authenticated user."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from nectar.database import get_db
from nectar.errors import NotFoundError
from nectar.middleware.auth import get_current_user
from nectar.models.user import User
from nectar.schemas.attendance import AttendanceResponse
from nectar.schemas.class_event import ClassEventResponse, ClassRoutineResponse
from nectar.schemas.notice import NoticeResponse
from nectar.schemas.schedule import ScheduleEntryResponse
from nectar.services import (
    attendance_service,
    class_event_service,
    file_service,
    notice_service,
    schedule_service,
)
from nectar.services.authorization import authorize_attendance_view

router = APIRouter(
    prefix="/api/shared", tags=["shared"], dependencies=[Depends(get_current_user)]
)


@router.get("/notices/global", response_model=list[NoticeResponse])
def list_global_notices(db: Session = Depends(get_db)):
    return notice_service.list_global_notices(db)


@router.get(
    "/classes/{class_id}/students/{student_id}/attendance",
    response_model=list[AttendanceResponse],
)
def get_student_attendance(
    class_id: int,
    student_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """One student's attendance history in a class, newest first."""
    authorize_attendance_view(db, current_user, class_id, student_id)
    return attendance_service.list_for_student(db, class_id, student_id)


@router.get("/classes/{class_id}/schedule", response_model=list[ScheduleEntryResponse])
def get_class_schedule(class_id: int, db: Session = Depends(get_db)):
    return schedule_service.list_entries(db, class_id)


@router.get("/classes/{class_id}/events", response_model=list[ClassEventResponse])
def list_class_events(class_id: int, db: Session = Depends(get_db)):
    return class_event_service.list_events(db, class_id)


@router.get("/classes/{class_id}/routine", response_model=ClassRoutineResponse)
def get_class_routine(class_id: int, db: Session = Depends(get_db)):
    routine = file_service.get_class_routine(db, class_id)
    if routine is None:
        raise NotFoundError(f"no routine found for class {class_id}")
    return routine
