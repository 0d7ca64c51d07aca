"""Tests for dashboards and global search."""

import pytest
from sqlalchemy.exc import OperationalError

from conftest import assign_teacher, enroll, make_class, make_course, make_department, make_user
from nectar.models.notice import Notice
from nectar.schemas.attendance import StudentAttendance
from nectar.schemas.schedule import ScheduleEntryInput
from nectar.services import (
    attendance_service,
    dashboard_service,
    notice_service,
    schedule_service,
    search_service,
)


class TestTruncate:

    def test_short_text_is_untouched(self):
        assert dashboard_service.truncate("hello", 100) == "hello"

    def test_long_text_gets_ellipsis(self):
        assert dashboard_service.truncate("x" * 120, 100) == "x" * 100 + "..."


class TestTeacherDashboard:

    def test_aggregates_classes_schedule_and_notices(self, db):
        department = make_department(db)
        cls = make_class(db, department)
        course = make_course(db)
        teacher = make_user(db, "t@cuet.ac.bd", role="teacher")
        admin = make_user(db, "admin@cuet.ac.bd", role="admin")
        assign_teacher(db, teacher, cls)

        for day in range(6):
            schedule_service.create_entry(
                db,
                cls.id,
                ScheduleEntryInput(
                    day_of_week=day, start_time="09:00", end_time="10:00", course_code=course.code
                ),
            )
        for i in range(4):
            notice_service.create_notice(db, admin.id, f"Global notice {i}", None)
        notice_service.create_notice(db, teacher.id, "y" * 150, cls.id)

        dashboard = dashboard_service.teacher_dashboard(db, teacher.id)

        assert [c["code"] for c in dashboard["assigned_classes"]] == ["CSE-21A"]
        assert dashboard["assigned_classes"][0]["department_name"] == "Computer Science"
        assert len(dashboard["upcoming_events"]) == 5
        assert dashboard["upcoming_events"][0]["course_name"] == "Structured Programming"
        assert dashboard["upcoming_events"][0]["class_code"] == "CSE-21A"

        global_notices = [n for n in dashboard["recent_notices"] if n["class_code"] is None]
        class_notices = [n for n in dashboard["recent_notices"] if n["class_code"] == "CSE-21A"]
        assert len(global_notices) == 3
        assert len(class_notices) == 1
        assert class_notices[0]["content"] == "y" * 100 + "..."

    def test_teacher_without_classes(self, db):
        teacher = make_user(db, "t@cuet.ac.bd", role="teacher")
        dashboard = dashboard_service.teacher_dashboard(db, teacher.id)
        assert dashboard["assigned_classes"] == []
        assert dashboard["upcoming_events"] == []


class TestStudentDashboard:

    def test_attendance_stats_count_late_as_attended(self, db):
        cls = make_class(db, make_department(db))
        teacher = make_user(db, "t@cuet.ac.bd", role="teacher")
        student = make_user(db, "s@cuet.ac.bd")
        enroll(db, student, cls)

        for date, status in (("2024-03-01", "present"), ("2024-03-02", "late"), ("2024-03-03", "absent"), ("2024-03-04", "excused")):
            attendance_service.upsert_attendance(
                db, cls.id, date, [StudentAttendance(student_id=student.id, status=status)], teacher.id
            )

        dashboard = dashboard_service.student_dashboard(db, student.id)
        stats = dashboard["attendance_stats"]
        assert stats["total_attended"] == 2
        assert stats["total_classes"] == 4
        assert stats["overall_percentage"] == pytest.approx(50.0)
        assert [c["code"] for c in dashboard["enrolled_classes"]] == ["CSE-21A"]

    def test_pending_classes_are_not_shown(self, db):
        cls = make_class(db, make_department(db))
        student = make_user(db, "s@cuet.ac.bd")
        enroll(db, student, cls, status="pending")

        dashboard = dashboard_service.student_dashboard(db, student.id)
        assert dashboard["enrolled_classes"] == []
        assert dashboard["attendance_stats"] is None

    def test_failing_section_leaves_partial_data(self, db, monkeypatch, caplog):
        """A broken notice query is logged and the rest of the dashboard survives."""
        cls = make_class(db, make_department(db))
        student = make_user(db, "s@cuet.ac.bd")
        enroll(db, student, cls)

        original_query = db.query

        def flaky_query(*entities, **kwargs):
            if entities and entities[0] is Notice:
                raise OperationalError("SELECT notices", {}, Exception("connection lost"))
            return original_query(*entities, **kwargs)

        monkeypatch.setattr(db, "query", flaky_query)
        dashboard = dashboard_service.student_dashboard(db, student.id)

        assert dashboard["recent_notices"] == []
        assert [c["code"] for c in dashboard["enrolled_classes"]] == ["CSE-21A"]
        assert "unavailable" in caplog.text


class TestGlobalSearch:

    def test_user_and_course_matches_without_duplicates(self, db):
        """Name and email both match the same user; code and name both match the course."""
        make_user(db, "data.miner@cuet.ac.bd", full_name="Data Miner")
        make_course(db, code="DATA301", name="Data Engineering")

        items, error = search_service.global_search(db, "data")

        assert error is None
        keys = [(i["type"], i["id"]) for i in items]
        assert len(keys) == len(set(keys))
        assert sorted(i["type"] for i in items) == ["Course", "User"]
        user_item = next(i for i in items if i["type"] == "User")
        assert user_item["title"] == "Data Miner"
        assert user_item["subtitle"] == "student (ID: DATA.MINER)"

    def test_like_wildcards_are_literal(self, db):
        make_course(db, code="CSE101", name="Structured Programming")
        items, _ = search_service.global_search(db, "%")
        assert items == []

    def test_notice_titles_are_truncated(self, db):
        admin = make_user(db, "admin@cuet.ac.bd", role="admin")
        notice_service.create_notice(db, admin.id, "Exam schedule " + "z" * 60, None)

        items, _ = search_service.global_search(db, "exam schedule")
        notice = next(i for i in items if i["type"] == "Notice")
        assert notice["title"] == ("Exam schedule " + "z" * 60)[:47] + "..."
        assert notice["subtitle"] == "Global Notice"

    def test_failures_are_aggregated(self, db, monkeypatch):
        make_course(db, code="DATA301", name="Data Engineering")
        original_query = db.query

        def flaky_query(*entities, **kwargs):
            if entities and entities[0] is Notice:
                raise OperationalError("SELECT notices", {}, Exception("timeout"))
            return original_query(*entities, **kwargs)

        monkeypatch.setattr(db, "query", flaky_query)
        items, error = search_service.global_search(db, "data")

        assert [i["type"] for i in items] == ["Course"]
        assert error.startswith("global search completed with errors: notices search failed")
