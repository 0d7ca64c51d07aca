"""Admin router — reference data, user management, bulk import and assignments."""

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from nectar.database import get_db
from nectar.errors import BadRequestError
from nectar.middleware.auth import require_admin
from nectar.models.user import User
from nectar.routers.responses import MULTI_STATUS, batch_response
from nectar.schemas.class_ import ClassInput, ClassResponse, TeacherAssignmentInput
from nectar.schemas.course import CourseInput, CourseResponse
from nectar.schemas.department import DepartmentInput, DepartmentResponse
from nectar.schemas.notice import NoticeInput, NoticeResponse
from nectar.schemas.user import (
    AdminCreateUser,
    AdminUpdateUser,
    RoleChangeResponse,
    UserResponse,
)
from nectar.services import (
    class_service,
    course_service,
    department_service,
    notice_service,
    user_service,
)

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


# ── Departments ───────────────────────────────────────────────────────────────

@router.post("/departments", response_model=DepartmentResponse, status_code=201)
def create_department(req: DepartmentInput, db: Session = Depends(get_db)):
    return department_service.create_department(db, req.code, req.name)


@router.get("/departments", response_model=list[DepartmentResponse])
def list_departments(db: Session = Depends(get_db)):
    return department_service.list_departments(db)


@router.get("/departments/{department_id}", response_model=DepartmentResponse)
def get_department(department_id: int, db: Session = Depends(get_db)):
    return department_service.get_department(db, department_id)


@router.put("/departments/{department_id}", response_model=DepartmentResponse)
def update_department(department_id: int, req: DepartmentInput, db: Session = Depends(get_db)):
    return department_service.update_department(db, department_id, req.code, req.name)


@router.delete("/departments/{department_id}")
def delete_department(department_id: int, db: Session = Depends(get_db)):
    department_service.delete_department(db, department_id)
    return {"message": "Department deleted successfully"}


# ── Courses ───────────────────────────────────────────────────────────────────

@router.post("/courses", response_model=CourseResponse, status_code=201)
def create_course(req: CourseInput, db: Session = Depends(get_db)):
    return course_service.create_course(db, req.code, req.name, req.credits)


@router.get("/courses", response_model=list[CourseResponse])
def list_courses(db: Session = Depends(get_db)):
    return course_service.list_courses(db)


@router.get("/courses/{course_id}", response_model=CourseResponse)
def get_course(course_id: int, db: Session = Depends(get_db)):
    return course_service.get_course(db, course_id)


@router.put("/courses/{course_id}", response_model=CourseResponse)
def update_course(course_id: int, req: CourseInput, db: Session = Depends(get_db)):
    return course_service.update_course(db, course_id, req.code, req.name, req.credits)


@router.delete("/courses/{course_id}")
def delete_course(course_id: int, db: Session = Depends(get_db)):
    course_service.delete_course(db, course_id)
    return {"message": "Course deleted successfully"}


# ── Classes ───────────────────────────────────────────────────────────────────

@router.post("/classes", response_model=ClassResponse, status_code=201)
def create_class(req: ClassInput, db: Session = Depends(get_db)):
    return class_service.create_class(db, req.dept_id, req.session, req.section, req.code)


@router.get("/classes", response_model=list[ClassResponse])
def list_classes(db: Session = Depends(get_db)):
    return class_service.list_classes(db)


@router.get("/classes/{class_id}", response_model=ClassResponse)
def get_class(class_id: int, db: Session = Depends(get_db)):
    return class_service.get_class(db, class_id)


@router.put("/classes/{class_id}", response_model=ClassResponse)
def update_class(class_id: int, req: ClassInput, db: Session = Depends(get_db)):
    return class_service.update_class(
        db, class_id, req.dept_id, req.session, req.section, req.code
    )


@router.delete("/classes/{class_id}")
def delete_class(class_id: int, db: Session = Depends(get_db)):
    class_service.delete_class(db, class_id)
    return {"message": "Class deleted successfully"}


@router.get("/classes/{class_id}/teachers", response_model=list[UserResponse])
def list_class_teachers(class_id: int, db: Session = Depends(get_db)):
    """Teachers currently assigned to a class."""
    return class_service.list_class_teachers(db, class_id)


# ── Users ─────────────────────────────────────────────────────────────────────

@router.post("/users", response_model=UserResponse, status_code=201)
def create_user(req: AdminCreateUser, db: Session = Depends(get_db)):
    """Create a login identity and profile for any role."""
    return user_service.create_user(db, req)


@router.get("/users", response_model=list[UserResponse])
def list_users(db: Session = Depends(get_db)):
    return user_service.list_users(db)


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(user_id: str, db: Session = Depends(get_db)):
    return user_service.get_user(db, user_id)


@router.put("/users/{user_id}", response_model=UserResponse)
def update_user(user_id: str, req: AdminUpdateUser, db: Session = Depends(get_db)):
    """Partial update; an empty string clears an optional field."""
    return user_service.update_user(db, user_id, req)


@router.delete("/users/{user_id}")
def delete_user(user_id: str, db: Session = Depends(get_db)):
    user_service.delete_user(db, user_id)
    return {"message": "User deleted successfully."}


@router.post("/users/{user_id}/promote-cr", response_model=RoleChangeResponse)
def promote_to_cr(user_id: str, db: Session = Depends(get_db)):
    """Promote a student to Class Representative."""
    user = user_service.promote_to_cr(db, user_id)
    return RoleChangeResponse(
        message="User successfully promoted to CR.",
        user=UserResponse.model_validate(user),
    )


@router.post("/users/{user_id}/demote-cr", response_model=RoleChangeResponse)
def demote_to_student(user_id: str, db: Session = Depends(get_db)):
    """Demote a Class Representative back to student."""
    user = user_service.demote_to_student(db, user_id)
    return RoleChangeResponse(
        message="User successfully demoted to Student.",
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/students/bulk-upload-profiles",
    responses={MULTI_STATUS: {"description": "Some rows failed"}},
)
async def bulk_upload_students(
    csv_file: UploadFile = File(...),
    db: Session = Depends(get_db),
):
    """Create student profiles from a CSV upload, one row per student."""
    if not (csv_file.filename or "").lower().endswith(".csv"):
        raise BadRequestError("Invalid file type. Only CSV files are accepted.")
    content = await csv_file.read()
    rows = user_service.parse_student_csv(content)
    created, errors = user_service.bulk_create_students(db, rows)
    return batch_response(
        created,
        errors,
        count_key="profiles_processed",
        success_message="Bulk student profiles processed successfully.",
        partial_message="Bulk student profile upload processed with some errors.",
    )


# ── Class-teacher assignments ────────────────────────────────────────────────

@router.post(
    "/class-teacher-assignments/assign",
    responses={MULTI_STATUS: {"description": "Some teachers could not be assigned"}},
)
def assign_teachers(req: TeacherAssignmentInput, db: Session = Depends(get_db)):
    successful, errors = class_service.assign_teachers(db, req.class_id, req.teacher_ids)
    return batch_response(
        successful,
        errors,
        count_key="successful_assignments",
        success_message="Teachers assigned to class successfully.",
        partial_message="Teacher assignment completed with some errors.",
        failure_message="Failed to assign any teachers.",
    )


@router.post(
    "/class-teacher-assignments/unassign",
    responses={MULTI_STATUS: {"description": "Some teachers could not be unassigned"}},
)
def unassign_teachers(req: TeacherAssignmentInput, db: Session = Depends(get_db)):
    successful, errors = class_service.unassign_teachers(db, req.class_id, req.teacher_ids)
    return batch_response(
        successful,
        errors,
        count_key="successful_unassignments",
        success_message="Teachers unassigned from class successfully.",
        partial_message="Teacher unassignment completed with some errors.",
        failure_message="Failed to unassign any teachers.",
    )


# ── Notices ───────────────────────────────────────────────────────────────────

@router.post("/notices/global", response_model=NoticeResponse, status_code=201)
def create_global_notice(
    req: NoticeInput,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Post a notice visible to everyone."""
    return notice_service.create_notice(db, current_user.id, req.content, class_id=None)
