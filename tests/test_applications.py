"""Unit tests for ApplicationService."""

from datetime import timedelta

import pytest

from internmatch.applications import (
    ApplicationStatus,
    DuplicateApplicationError,
    InternshipClosedError,
)
from internmatch.applications.service import ApplicationService
from internmatch.persistence import RecordNotFoundError, close_database, init_database


@pytest.fixture(autouse=True)
def database():
    init_database("sqlite:///:memory:")
    yield
    close_database()


@pytest.fixture
def service(matching_service, fixed_now):
    return ApplicationService(matching_service, clock=lambda: fixed_now)


@pytest.fixture
def listing():
    return {
        "id": "int-analyst",
        "required_skills": ["SQL", "Excel"],
        "target_student_years": ["junior", "senior"],
        "term": "Summer 2026",
        "application_deadline": "2026-07-01",
    }


class TestSubmit:
    """Tests for ApplicationService.submit."""

    def test_submit_stores_snapshot(self, service, listing, fixed_now):
        student = {"id": "stu-1", "skills": ["Excel"], "year": "junior"}

        record = service.submit(student, listing)

        assert record.student_id == "stu-1"
        assert record.internship_id == "int-analyst"
        assert record.status is ApplicationStatus.SUBMITTED
        assert record.created_at == fixed_now
        assert record.snapshot.computed_at == fixed_now
        assert record.snapshot.matching_version == "2.0.0"
        assert record.snapshot == service.snapshot_builder.build(
            service.matching_service.internship(listing),
            service.matching_service.student(student),
        )
        assert record.match_score == record.snapshot.score

    def test_submit_is_persisted(self, service, listing):
        record = service.submit({"id": "stu-1"}, listing)
        assert [r.id for r in service.applications_for("stu-1")] == [record.id]

    def test_duplicate_application(self, service, listing):
        service.submit({"id": "stu-1"}, listing)
        with pytest.raises(DuplicateApplicationError, match="already applied"):
            service.submit({"id": "stu-1"}, listing)

        assert len(service.applicants("int-analyst")) == 1

    @pytest.mark.parametrize("status", ["closed", "Filled", "draft"])
    def test_inactive_listing_rejected(self, service, listing, status):
        listing["status"] = status
        with pytest.raises(InternshipClosedError, match="listing is not active"):
            service.submit({"id": "stu-1"}, listing)
        assert service.applicants("int-analyst") == []

    def test_is_active_false_rejected(self, service, listing):
        listing["is_active"] = False
        with pytest.raises(InternshipClosedError):
            service.submit({"id": "stu-1"}, listing)

    def test_deadline_passed(self, service, listing):
        listing["application_deadline"] = "2026-05-01"
        with pytest.raises(InternshipClosedError) as exc_info:
            service.submit({"id": "stu-1"}, listing)
        assert exc_info.value.internship_id == "int-analyst"
        assert exc_info.value.reason == "application deadline 2026-05-01 has passed"

    def test_no_deadline_is_open(self, service, listing):
        del listing["application_deadline"]
        assert service.submit({"id": "stu-1"}, listing).internship_id == "int-analyst"


class TestApplicants:
    """Tests for listing applicants and status changes."""

    @pytest.fixture
    def ticking_service(self, matching_service, fixed_now):
        """Each submission happens one minute after the previous one."""
        ticks = iter(range(100))
        return ApplicationService(
            matching_service, clock=lambda: fixed_now + timedelta(minutes=next(ticks))
        )

    def test_applicants_by_stored_score(self, ticking_service, listing):
        ticking_service.submit({"id": "stu-none"}, listing)
        ticking_service.submit({"id": "stu-full", "skills": ["SQL", "Excel"]}, listing)
        ticking_service.submit({"id": "stu-half", "skills": ["SQL"]}, listing)

        applicants = ticking_service.applicants("int-analyst")

        assert [r.student_id for r in applicants] == ["stu-full", "stu-half", "stu-none"]

    def test_applicants_by_date(self, ticking_service, listing):
        ticking_service.submit({"id": "stu-full", "skills": ["SQL", "Excel"]}, listing)
        ticking_service.submit({"id": "stu-none"}, listing)

        applicants = ticking_service.applicants("int-analyst", sort="applied_at")

        assert [r.student_id for r in applicants] == ["stu-none", "stu-full"]

    def test_update_status_keeps_snapshot(self, service, listing):
        record = service.submit({"id": "stu-1", "skills": ["SQL"]}, listing)

        updated = service.update_status(record.id, ApplicationStatus.SHORTLISTED)

        assert updated.status is ApplicationStatus.SHORTLISTED
        assert updated.snapshot == record.snapshot

    def test_update_status_unknown_application(self, service):
        with pytest.raises(RecordNotFoundError):
            service.update_status("missing", ApplicationStatus.REVIEWED)
