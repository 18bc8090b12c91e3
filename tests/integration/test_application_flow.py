"""Integration tests for the dataset -> ranking -> application snapshot workflow."""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from internmatch.applications import ApplicationStatus
from internmatch.applications.service import ApplicationService
from internmatch.config import MatchingConfig
from internmatch.domain import load_dataset
from internmatch.matching import MatchingService, build_scoring_model
from internmatch.persistence import close_database, init_database
from internmatch.snapshots import reproduce_snapshot

SAMPLE_DATASET = Path(__file__).resolve().parents[2] / "data" / "sample_dataset.yaml"
SUBMITTED_AT = datetime(2026, 4, 1, 15, 0, tzinfo=timezone.utc)


@pytest.fixture
def test_database(tmp_path):
    """Setup test database with file storage."""
    db_url = f"sqlite:///{tmp_path / 'test_integration.db'}"
    init_database(db_url)
    yield db_url
    close_database()


@pytest.fixture
def dataset():
    return load_dataset(SAMPLE_DATASET)


@pytest.fixture
def matching_service(dataset):
    return MatchingService(catalog=dataset.catalog)


class TestEndToEndApplications:
    """Test end-to-end application workflows against a file database."""

    def test_ranked_score_matches_stored_snapshot(self, test_database, dataset, matching_service):
        """Test the score a student saw in ranking is the score stored on apply."""
        student = dataset.student("stu-maya")
        ranked = matching_service.rank_internships(student, dataset.internships)
        top = next(item for item in ranked if item.internship.internship_id == "int-data-analyst")

        service = ApplicationService(matching_service, clock=lambda: SUBMITTED_AT)
        record = service.submit(student, dataset.internship("int-data-analyst"))

        assert record.snapshot.score == round(top.match.score, 3)
        assert list(record.snapshot.reasons) == top.match.reason_texts()
        assert list(record.snapshot.gaps) == top.match.gap_texts()

    def test_applicants_ordered_by_snapshot(self, test_database, dataset, matching_service):
        ticks = iter(range(10))
        service = ApplicationService(
            matching_service, clock=lambda: SUBMITTED_AT + timedelta(minutes=next(ticks))
        )
        for student in dataset.students:
            service.submit(student, dataset.internship("int-data-analyst"))

        applicants = service.applicants("int-data-analyst")

        assert applicants[0].student_id == "stu-maya"
        scores = [record.snapshot.score for record in applicants]
        assert scores == sorted(scores, reverse=True)

        by_date = service.applicants("int-data-analyst", sort="applied_at")
        assert [record.student_id for record in by_date] == ["stu-ana", "stu-leo", "stu-maya"]

    def test_snapshot_survives_model_change(self, test_database, dataset, matching_service):
        """Test a new scoring version leaves stored snapshots untouched and reproducible."""
        student = dataset.student("stu-leo")
        listing = dataset.internship("int-finance-summer")

        original = ApplicationService(matching_service, clock=lambda: SUBMITTED_AT).submit(
            student, listing
        )

        reweighted = build_scoring_model(
            MatchingConfig(version="integration-2.1.0", weights={"major_alignment": 45})
        )
        new_service = MatchingService(catalog=dataset.catalog, model=reweighted)
        rescored = new_service.evaluate(student, listing)

        stored = ApplicationService(new_service).applications_for("stu-leo")[0]

        assert rescored.matching_version == "integration-2.1.0"
        assert rescored.max_score == 130.0
        assert stored.snapshot == original.snapshot
        assert stored.snapshot.matching_version == "2.0.0"

        reproduced = reproduce_snapshot(
            stored.snapshot,
            matching_service.internship(listing),
            matching_service.student(student),
        )
        assert reproduced == stored.snapshot

    def test_status_change_keeps_snapshot(self, test_database, dataset, matching_service):
        service = ApplicationService(matching_service, clock=lambda: SUBMITTED_AT)
        record = service.submit(dataset.student("stu-ana"), dataset.internship("int-remote-research"))

        service.update_status(record.id, ApplicationStatus.REVIEWED)
        stored = service.applications_for("stu-ana")[0]

        assert stored.status is ApplicationStatus.REVIEWED
        assert stored.snapshot == record.snapshot
