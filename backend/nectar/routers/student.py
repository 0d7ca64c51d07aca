"""Student router — dashboard, profile, enrollment and CR class management."""

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from nectar.database import get_db
from nectar.middleware.auth import get_current_user
from nectar.models.user import User
from nectar.schemas.class_ import ClassSummary
from nectar.schemas.class_event import ClassEventInput, ClassEventResponse, ClassRoutineResponse
from nectar.schemas.dashboard import StudentDashboard
from nectar.schemas.enrollment import (
    EnrollmentRequest,
    EnrollmentResponse,
    EnrollmentReview,
    EnrollmentView,
    PendingEnrollment,
)
from nectar.schemas.user import ProfileUpdate, UserResponse
from nectar.services import (
    class_event_service,
    dashboard_service,
    enrollment_service,
    file_service,
    user_service,
)
from nectar.services.storage import StorageGateway, get_storage

router = APIRouter(prefix="/api/student", tags=["student"])


@router.get("/dashboard", response_model=StudentDashboard)
def get_dashboard(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Enrolled classes, recent notices and attendance stats."""
    return dashboard_service.student_dashboard(db, current_user.id)


@router.get("/profile", response_model=UserResponse)
def get_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/profile", response_model=UserResponse)
def update_profile(
    req: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return user_service.update_own_profile(db, current_user.id, req)


# ── Enrollment ────────────────────────────────────────────────────────────────

@router.post("/enrollments/request", response_model=EnrollmentResponse, status_code=201)
def request_enrollment(
    req: EnrollmentRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Ask to join a class; a rejected request can be re-opened."""
    return enrollment_service.request_enrollment(db, current_user.id, req.class_id)


@router.get("/enrollments", response_model=list[EnrollmentView])
def list_my_enrollments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return enrollment_service.list_my_enrollments(db, current_user.id)


@router.get("/available-classes", response_model=list[ClassSummary])
def list_available_classes(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Classes with no pending or approved request from the caller."""
    return enrollment_service.list_available_classes(db, current_user.id)


# ── CR: class moderation ──────────────────────────────────────────────────────

@router.get("/classes/{class_id}/enrollments/pending", response_model=list[PendingEnrollment])
def list_pending_enrollments(
    class_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return enrollment_service.list_pending_for_class(db, current_user, class_id)


@router.post("/classes/{class_id}/enrollments/review", response_model=EnrollmentResponse)
def review_enrollment(
    class_id: int,
    req: EnrollmentReview,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Approve or reject a pending request (CR of the class, or admin)."""
    return enrollment_service.review_enrollment(
        db, current_user, class_id, req.student_id_to_review, req.new_status
    )


@router.post(
    "/classes/{class_id}/events", response_model=ClassEventResponse, status_code=201
)
def create_event(
    class_id: int,
    req: ClassEventInput,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return class_event_service.create_event(db, current_user, class_id, req)


@router.put("/classes/{class_id}/events/{event_id}", response_model=ClassEventResponse)
def update_event(
    class_id: int,
    event_id: int,
    req: ClassEventInput,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return class_event_service.update_event(db, current_user, class_id, event_id, req)


@router.delete("/classes/{class_id}/events/{event_id}")
def delete_event(
    class_id: int,
    event_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    class_event_service.delete_event(db, current_user, class_id, event_id)
    return {"message": "Event deleted successfully"}


@router.post(
    "/classes/{class_id}/routine", response_model=ClassRoutineResponse, status_code=201
)
async def upload_routine(
    class_id: int,
    routine_file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: StorageGateway = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    """Upload the class routine PDF, replacing any previous one."""
    data = await routine_file.read()
    return file_service.upload_class_routine(
        db,
        storage,
        current_user,
        class_id,
        routine_file.filename,
        routine_file.content_type,
        data,
    )


@router.delete("/classes/{class_id}/routine")
def delete_routine(
    class_id: int,
    db: Session = Depends(get_db),
    storage: StorageGateway = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    file_service.delete_class_routine(db, storage, current_user, class_id)
    return {"message": "Class routine deleted successfully"}
