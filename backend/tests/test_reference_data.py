"""Tests for departments, courses, classes, teacher assignment and schedules."""

import pytest

from conftest import make_class, make_course, make_department, make_user
from nectar.database import UniqueViolation, persist
from nectar.errors import BadRequestError, ConflictError, NotFoundError
from nectar.models.department import Department
from nectar.schemas.schedule import ScheduleEntryInput
from nectar.services import (
    class_service,
    course_service,
    department_service,
    schedule_service,
)


class TestBackendErrors:
    """Integrity errors surface as typed errors carrying the constraint name."""

    def test_unique_violation_names_constraint(self, db):
        make_department(db)
        db.add(Department(code="CSE", name="Duplicate"))
        with pytest.raises(UniqueViolation) as info:
            persist(db)
        assert info.value.constraint == "departments_code_key"


class TestDepartments:

    def test_crud(self, db):
        department = department_service.create_department(db, "CSE", "Computer Science")
        assert department_service.get_department(db, department.id).name == "Computer Science"

        updated = department_service.update_department(db, department.id, "CSE", "Computing")
        assert updated.name == "Computing"
        assert len(department_service.list_departments(db)) == 1

        department_service.delete_department(db, department.id)
        with pytest.raises(NotFoundError):
            department_service.get_department(db, department.id)

    def test_duplicate_code(self, db):
        department_service.create_department(db, "CSE", "Computer Science")
        with pytest.raises(ConflictError, match="Department code already exists"):
            department_service.create_department(db, "CSE", "Other")

    def test_delete_referenced_department(self, db):
        """A department with classes cannot be removed."""
        department = make_department(db)
        make_class(db, department)
        with pytest.raises(ConflictError, match="referenced by other data"):
            department_service.delete_department(db, department.id)


class TestCourses:

    def test_duplicate_code_on_update(self, db):
        make_course(db, "CSE101")
        other = make_course(db, "CSE102", "Data Structures")
        with pytest.raises(ConflictError, match="course code already exists"):
            course_service.update_course(db, other.id, "CSE101", "Data Structures", 3.0)

    def test_delete_course_used_by_schedule(self, db):
        course = make_course(db)
        cls = make_class(db, make_department(db))
        schedule_service.create_entry(
            db,
            cls.id,
            ScheduleEntryInput(
                day_of_week=1, start_time="09:00", end_time="09:50", course_code=course.code
            ),
        )
        with pytest.raises(ConflictError):
            course_service.delete_course(db, course.id)


class TestClasses:

    def test_duplicate_code(self, db):
        department = make_department(db)
        class_service.create_class(db, department.id, "2021-2022", "A", "CSE-21A")
        with pytest.raises(ConflictError, match="Class with this code already exists"):
            class_service.create_class(db, department.id, "2022-2023", "A", "CSE-21A")

    def test_duplicate_session_section(self, db):
        department = make_department(db)
        class_service.create_class(db, department.id, "2021-2022", "A", "CSE-21A")
        with pytest.raises(ConflictError, match="same department, session, and section"):
            class_service.create_class(db, department.id, "2021-2022", "A", "CSE-21X")

    def test_unknown_department(self, db):
        with pytest.raises(BadRequestError, match="Invalid Department ID"):
            class_service.create_class(db, 42, "2021-2022", "A", "CSE-21A")

    def test_update_prefixes_conflict_message(self, db):
        department = make_department(db)
        class_service.create_class(db, department.id, "2021-2022", "A", "CSE-21A")
        second = class_service.create_class(db, department.id, "2021-2022", "B", "CSE-21B")
        with pytest.raises(ConflictError, match="^Update failed: Class with this code"):
            class_service.update_class(db, second.id, department.id, "2021-2022", "B", "CSE-21A")


class TestTeacherAssignment:
    """Batch assignment with per-teacher error reporting."""

    def test_partial_assignment(self, db):
        cls = make_class(db, make_department(db))
        teacher = make_user(db, "t@cuet.ac.bd", role="teacher")
        student = make_user(db, "s@cuet.ac.bd")

        successful, errors = class_service.assign_teachers(
            db, cls.id, [teacher.id, student.id, "missing"]
        )
        assert successful == 1
        assert len(errors) == 2
        assert "is not a teacher" in errors[0]
        assert "not found" in errors[1]
        assert [t.id for t in class_service.list_class_teachers(db, cls.id)] == [teacher.id]
        assert class_service.teacher_class_ids(db, teacher.id) == [cls.id]

    def test_duplicate_assignment(self, db):
        cls = make_class(db, make_department(db))
        teacher = make_user(db, "t@cuet.ac.bd", role="teacher")
        class_service.assign_teachers(db, cls.id, [teacher.id])
        successful, errors = class_service.assign_teachers(db, cls.id, [teacher.id])
        assert successful == 0
        assert errors == [f"teacher {teacher.id} already assigned to class {cls.id}"]

    def test_unassign(self, db):
        cls = make_class(db, make_department(db))
        teacher = make_user(db, "t@cuet.ac.bd", role="teacher")
        class_service.assign_teachers(db, cls.id, [teacher.id])

        successful, errors = class_service.unassign_teachers(db, cls.id, [teacher.id, "other"])
        assert successful == 1
        assert len(errors) == 1
        assert class_service.list_class_teachers(db, cls.id) == []


class TestScheduleEntries:

    def test_end_must_follow_start(self, db):
        cls = make_class(db, make_department(db))
        with pytest.raises(BadRequestError, match="end_time must be after start_time"):
            schedule_service.create_entry(
                db, cls.id, ScheduleEntryInput(day_of_week=0, start_time="10:00", end_time="09:00")
            )

    def test_unknown_course_code(self, db):
        cls = make_class(db, make_department(db))
        with pytest.raises(BadRequestError, match="Invalid data for schedule entry"):
            schedule_service.create_entry(
                db,
                cls.id,
                ScheduleEntryInput(
                    day_of_week=0, start_time="09:00", end_time="10:00", course_code="NOPE"
                ),
            )

    def test_update_replaces_fields(self, db):
        """Empty optional values are stored as NULL."""
        cls = make_class(db, make_department(db))
        entry = schedule_service.create_entry(
            db,
            cls.id,
            ScheduleEntryInput(day_of_week=2, start_time="09:00", end_time="10:00", room_number="301"),
        )
        updated = schedule_service.update_entry(
            db,
            entry.id,
            ScheduleEntryInput(day_of_week=3, start_time="11:00", end_time="12:00", room_number=""),
        )
        assert updated.day_of_week == 3
        assert updated.room_number is None
        assert updated.class_id == cls.id

    def test_list_is_ordered_by_day_and_time(self, db):
        cls = make_class(db, make_department(db))
        for day, start, end in ((3, "09:00", "10:00"), (1, "11:00", "12:00"), (1, "08:00", "09:00")):
            schedule_service.create_entry(
                db, cls.id, ScheduleEntryInput(day_of_week=day, start_time=start, end_time=end)
            )
        slots = [(e.day_of_week, e.start_time) for e in schedule_service.list_entries(db, cls.id)]
        assert slots == [(1, "08:00"), (1, "11:00"), (3, "09:00")]

    def test_delete_missing_entry(self, db):
        with pytest.raises(NotFoundError):
            schedule_service.delete_entry(db, 404)
