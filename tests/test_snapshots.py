"""Unit tests for application match snapshots."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from internmatch.matching import DEFAULT_SCORING_MODEL, MatchingEngine, ScoringModelError
from internmatch.snapshots import (
    ApplicationMatchSnapshot,
    SnapshotBuilder,
    build_snapshot,
    reproduce_snapshot,
)


@pytest.fixture
def pair(make_student, make_internship):
    student = make_student(
        "stu-snap", skills=["Excel"], year="junior", availability_start_month="June"
    )
    listing = make_internship(
        "int-snap",
        required_skills=["SQL", "Excel"],
        target_student_years=["junior", "senior"],
        term="Summer 2026",
    )
    return student, listing


class TestSnapshotBuilder:
    """Tests for SnapshotBuilder."""

    def test_build_freezes_result(self, pair, fixed_now):
        student, listing = pair
        snapshot = SnapshotBuilder(clock=lambda: fixed_now).build(listing, student)

        assert snapshot.student_id == "stu-snap"
        assert snapshot.internship_id == "int-snap"
        assert snapshot.matching_version == "2.0.0"
        assert snapshot.computed_at == fixed_now
        # 10 skills + 10 preferred + 15 + 10 + 10 + 10 location + 10 year + 15 * 0.75 term
        assert snapshot.score == 86.25
        assert snapshot.normalized_score == round(86.25 / 100, 3)
        assert snapshot.reasons[0].startswith("Availability:")
        assert "Year in school: Junior (+10.0)" in snapshot.reasons

    def test_scores_rounded_to_three_decimals(self, make_student, make_internship):
        student = make_student(skills=["SQL"])
        listing = make_internship(required_skills=["SQL", "Excel", "Python"])
        snapshot = build_snapshot(listing, student)
        assert snapshot.score == round(20 / 3 + 80, 3)

    def test_snapshot_is_frozen(self, pair):
        student, listing = pair
        snapshot = build_snapshot(listing, student)
        with pytest.raises(ValidationError):
            snapshot.score = 0

    def test_computed_at_normalized_to_utc(self):
        eastern = timezone(timedelta(hours=-5))
        snapshot = ApplicationMatchSnapshot(
            student_id="s",
            internship_id="i",
            score=50,
            normalized_score=0.5,
            matching_version="2.0.0",
            computed_at=datetime(2026, 3, 1, 4, 30, tzinfo=eastern),
        )
        assert snapshot.computed_at == datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)

    def test_normalized_score_bounds(self):
        with pytest.raises(ValidationError):
            ApplicationMatchSnapshot(
                student_id="s",
                internship_id="i",
                score=150,
                normalized_score=1.5,
                matching_version="2.0.0",
                computed_at=datetime(2026, 3, 1, tzinfo=timezone.utc),
            )

    def test_to_columns(self, pair, fixed_now):
        student, listing = pair
        snapshot = SnapshotBuilder(clock=lambda: fixed_now).build(listing, student)
        columns = snapshot.to_columns()
        assert columns["match_score"] == snapshot.score
        assert columns["match_reasons"] == list(snapshot.reasons)
        assert columns["matching_version"] == "2.0.0"


class TestReproduceSnapshot:
    """Tests for reproduce_snapshot."""

    def test_reproduces_exactly(self, pair, fixed_now):
        student, listing = pair
        original = SnapshotBuilder(clock=lambda: fixed_now).build(listing, student)
        assert reproduce_snapshot(original, listing, student) == original

    def test_uses_the_snapshot_version(self, pair, fixed_now):
        """Test reproduction uses the stored version, not the caller's model."""
        from internmatch.matching import register_scoring_model

        student, listing = pair
        heavy = register_scoring_model(
            DEFAULT_SCORING_MODEL.with_overrides("test-snapshot-heavy", {"skills_required": 60})
        )
        original = SnapshotBuilder(MatchingEngine(heavy), clock=lambda: fixed_now).build(listing, student)

        reproduced = reproduce_snapshot(original, listing, student)

        assert reproduced.matching_version == "test-snapshot-heavy"
        assert reproduced.score == original.score

    def test_unknown_version(self, pair, fixed_now):
        student, listing = pair
        snapshot = SnapshotBuilder(clock=lambda: fixed_now).build(listing, student)
        orphan = snapshot.model_copy(update={"matching_version": "0.0.0-unregistered"})
        with pytest.raises(ScoringModelError):
            reproduce_snapshot(orphan, listing, student)
