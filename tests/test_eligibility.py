"""Unit tests for hard-constraint eligibility."""

import pytest

from internmatch.matching import MatchingEngine, eligibility_failures, is_eligible


@pytest.fixture
def check():
    """Score a pair and return its eligibility failures."""
    engine = MatchingEngine()

    def _check(student, internship):
        match = engine.evaluate(student, internship)
        return eligibility_failures(student, internship, match)

    return _check


class TestEligibility:
    """Tests for eligibility_failures and is_eligible."""

    def test_open_listing_is_eligible(self, make_student, make_internship):
        student = make_student()
        listing = make_internship()
        match = MatchingEngine().evaluate(student, listing)
        assert is_eligible(student, listing, match)

    def test_remote_only_student_and_on_site_role(self, check, make_student, make_internship):
        failures = check(
            make_student(remote_only=True),
            make_internship(work_mode="on-site", location="Chicago, IL"),
        )
        assert len(failures) == 1
        assert failures[0].startswith("Location or work mode mismatch: Student is remote-only")

    def test_work_mode_preference_mismatch(self, check, make_student, make_internship):
        failures = check(make_student(preferred_work_modes=["on-site"]), make_internship(work_mode="remote"))
        assert len(failures) == 1

    def test_in_person_location_mismatch(self, check, make_student, make_internship):
        student = make_student(preferred_city="Boston", preferred_state="MA")
        assert check(student, make_internship(location="Chicago, IL (On-site)"))

    def test_start_after_term_closes(self, check, make_student, make_internship):
        failures = check(
            make_student(availability_start_month="October"), make_internship(term="Summer 2026")
        )
        assert failures == ["Term mismatch (Summer 2026)"]

    def test_late_start_inside_term_is_eligible(self, check, make_student, make_internship):
        """Test a partial month credit still counts as available."""
        student = make_student(availability_start_month="August")
        assert check(student, make_internship(term="Summer 2026")) == []

    def test_too_few_hours(self, check, make_student, make_internship):
        failures = check(
            make_student(availability_hours_per_week=10), make_internship(hours_per_week=20)
        )
        assert failures == ["Hours exceed availability (20 > 10 h/week)"]

    def test_unknown_student_data_is_not_a_failure(self, check, make_student, make_internship):
        """Test missing profile fields cost points but never make a listing ineligible."""
        listing = make_internship(
            term="Summer 2026", hours_per_week=20, location="Chicago, IL (On-site)"
        )
        assert check(make_student(), listing) == []

    def test_failures_accumulate(self, check, make_student, make_internship):
        student = make_student(
            remote_only=True, availability_start_month="October", availability_hours_per_week=5
        )
        listing = make_internship(
            work_mode="on-site", location="Chicago, IL", term="Summer 2026", hours_per_week=20
        )
        assert len(check(student, listing)) == 3
