"""Tests for the enrollment request/review state machine and CR authorization."""

import pytest

from conftest import enroll, make_class, make_department, make_user
from nectar.errors import ConflictError, ForbiddenError, NotFoundError
from nectar.models.enrollment import Enrollment
from nectar.services import enrollment_service
from nectar.services.authorization import get_user_role, is_authorized_cr


@pytest.fixture
def setup(db):
    department = make_department(db)
    cls = make_class(db, department)
    student = make_user(db, "s1@cuet.ac.bd")
    cr = make_user(db, "cr1@cuet.ac.bd", role="cr")
    enroll(db, cr, cls)
    return {"class": cls, "student": student, "cr": cr}


class TestEnrollmentRequest:
    """Students requesting to join a class."""

    def test_request_creates_pending_row(self, db, setup):
        """A first request is stored as pending with no reviewer."""
        enrollment = enrollment_service.request_enrollment(
            db, setup["student"].id, setup["class"].id
        )
        assert enrollment.status == "pending"
        assert enrollment.reviewed_by is None
        assert enrollment.requested_at is not None

    def test_second_request_is_rejected_while_pending(self, db, setup):
        """Requesting twice fails with 'already pending'."""
        enrollment_service.request_enrollment(db, setup["student"].id, setup["class"].id)
        with pytest.raises(ConflictError, match="already pending"):
            enrollment_service.request_enrollment(db, setup["student"].id, setup["class"].id)

    def test_request_after_approval_is_rejected(self, db, setup):
        """An approved member cannot request again."""
        with pytest.raises(ConflictError, match="already approved"):
            enrollment_service.request_enrollment(db, setup["cr"].id, setup["class"].id)

    def test_request_after_rejection_resets_to_pending(self, db, setup):
        """A rejected request can be re-opened and loses its review data."""
        student, cls = setup["student"], setup["class"]
        enrollment_service.request_enrollment(db, student.id, cls.id)
        enrollment_service.review_enrollment(db, setup["cr"], cls.id, student.id, "rejected")

        reopened = enrollment_service.request_enrollment(db, student.id, cls.id)
        assert reopened.status == "pending"
        assert reopened.reviewed_by is None
        assert reopened.reviewed_at is None
        assert db.query(Enrollment).filter(Enrollment.user_id == student.id).count() == 1

    def test_request_for_missing_class(self, db, setup):
        """An unknown class id is reported as not found."""
        with pytest.raises(NotFoundError):
            enrollment_service.request_enrollment(db, setup["student"].id, 9999)


class TestEnrollmentReview:
    """CRs approving or rejecting pending requests."""

    def test_cr_approves_pending_request(self, db, setup):
        """Approval records the reviewer and drops the row from the pending list."""
        student, cls, cr = setup["student"], setup["class"], setup["cr"]
        enrollment_service.request_enrollment(db, student.id, cls.id)

        reviewed = enrollment_service.review_enrollment(db, cr, cls.id, student.id, "approved")
        assert reviewed.status == "approved"
        assert reviewed.reviewed_by == cr.id
        assert reviewed.reviewed_at is not None

        pending = enrollment_service.list_pending_for_class(db, cr, cls.id)
        assert all(p["user_id"] != student.id for p in pending)

    def test_review_without_pending_request(self, db, setup):
        """Reviewing a pair with no pending row is a 404."""
        with pytest.raises(NotFoundError, match="no pending enrollment request"):
            enrollment_service.review_enrollment(
                db, setup["cr"], setup["class"].id, setup["student"].id, "approved"
            )

    def test_review_never_touches_non_pending_row(self, db, setup):
        """An approved row cannot be flipped to rejected by a later review."""
        student, cls, cr = setup["student"], setup["class"], setup["cr"]
        enrollment_service.request_enrollment(db, student.id, cls.id)
        enrollment_service.review_enrollment(db, cr, cls.id, student.id, "approved")

        with pytest.raises(NotFoundError):
            enrollment_service.review_enrollment(db, cr, cls.id, student.id, "rejected")
        assert db.get(Enrollment, (student.id, cls.id)).status == "approved"

    def test_concurrent_review_loses_race(self, db, setup, monkeypatch):
        """If the row stops being pending after the lookup, the update fails."""
        student, cls, cr = setup["student"], setup["class"], setup["cr"]
        enrollment_service.request_enrollment(db, student.id, cls.id)
        enrollment_service.review_enrollment(db, cr, cls.id, student.id, "approved")

        # The second reviewer saw the row while it was still pending.
        stale = Enrollment(user_id=student.id, class_id=cls.id, status="pending")
        monkeypatch.setattr(enrollment_service, "_find_pending", lambda *args: stale)

        with pytest.raises(ConflictError, match="no longer be pending"):
            enrollment_service.review_enrollment(db, cr, cls.id, student.id, "rejected")
        assert db.get(Enrollment, (student.id, cls.id)).status == "approved"

    def test_admin_may_review_any_class(self, db, setup):
        """Admins pass the moderator check without being a CR."""
        admin = make_user(db, "admin@cuet.ac.bd", role="admin")
        enrollment_service.request_enrollment(db, setup["student"].id, setup["class"].id)
        reviewed = enrollment_service.review_enrollment(
            db, admin, setup["class"].id, setup["student"].id, "rejected"
        )
        assert reviewed.status == "rejected"


class TestCRAuthorization:
    """Class representative checks for class-scoped mutations."""

    def test_cr_without_approved_enrollment_is_denied(self, db, setup):
        """role=cr alone is not enough; the CR must be an approved member."""
        other_class = make_class(db, make_department(db, "EEE", "Electrical"), code="EEE-21A")
        with pytest.raises(ForbiddenError, match="not an approved member"):
            is_authorized_cr(db, setup["cr"].id, other_class.id)

    def test_pending_cr_is_denied(self, db, setup):
        """A pending enrollment does not grant CR powers."""
        cr = make_user(db, "cr2@cuet.ac.bd", role="cr")
        enroll(db, cr, setup["class"], status="pending")
        enrollment_service.request_enrollment(db, setup["student"].id, setup["class"].id)
        with pytest.raises(ForbiddenError):
            enrollment_service.review_enrollment(
                db, cr, setup["class"].id, setup["student"].id, "approved"
            )

    def test_student_is_not_a_cr(self, db, setup):
        """Plain students fail the role check."""
        with pytest.raises(ForbiddenError, match="not a Class Representative"):
            is_authorized_cr(db, setup["student"].id, setup["class"].id)

    def test_unknown_user(self, db, setup):
        """A missing user is a 404, not a 403."""
        with pytest.raises(NotFoundError):
            is_authorized_cr(db, "00000000-0000-0000-0000-000000000000", setup["class"].id)

    def test_pending_list_denied_for_non_cr(self, db, setup):
        """Viewing pending requests is wrapped as Forbidden."""
        with pytest.raises(ForbiddenError, match="not authorized to view pending"):
            enrollment_service.list_pending_for_class(db, setup["student"], setup["class"].id)

    def test_get_user_role(self, db, setup):
        assert get_user_role(db, setup["cr"].id) == "cr"
        with pytest.raises(NotFoundError):
            get_user_role(db, "missing")


class TestEnrollmentListings:
    """Student-facing enrollment views."""

    def test_my_enrollments_include_class_details(self, db, setup):
        enrollment_service.request_enrollment(db, setup["student"].id, setup["class"].id)
        rows = enrollment_service.list_my_enrollments(db, setup["student"].id)
        assert len(rows) == 1
        assert rows[0]["class_code"] == "CSE-21A"
        assert rows[0]["class_session"] == "2021-2022"

    def test_available_classes_exclude_pending_and_approved(self, db, setup):
        """Rejected classes become available again; pending/approved ones do not."""
        second = make_class(db, setup["class"].department, code="CSE-21B", section="B")
        student = setup["student"]

        available = {c["id"] for c in enrollment_service.list_available_classes(db, student.id)}
        assert available == {setup["class"].id, second.id}

        enrollment_service.request_enrollment(db, student.id, second.id)
        available = {c["id"] for c in enrollment_service.list_available_classes(db, student.id)}
        assert available == {setup["class"].id}

        admin = make_user(db, "admin@cuet.ac.bd", role="admin")
        enrollment_service.review_enrollment(db, admin, second.id, student.id, "rejected")
        available = enrollment_service.list_available_classes(db, student.id)
        assert {c["id"] for c in available} == {setup["class"].id, second.id}
        assert available[0]["department_name"] == "Computer Science"
