"""Unit tests for the persistence layer.

Tests database initialization, session management and the
ApplicationRepository for:
- Inserting applications with their snapshots
- One application per student and internship
- Applicant listing order (by stored score or by date)
- Status updates that leave the snapshot untouched
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import text

from internmatch.applications.models import ApplicationRecord, ApplicationStatus
from internmatch.persistence import (
    ApplicationModel,
    ApplicationRepository,
    DatabaseConnectionError,
    DataIntegrityError,
    RecordNotFoundError,
    close_database,
    get_engine,
    get_session,
    init_database,
)
from internmatch.snapshots.models import ApplicationMatchSnapshot

BASE_TIME = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


def make_record(
    application_id="app-1",
    student_id="stu-1",
    internship_id="int-1",
    score=50.0,
    created_at=BASE_TIME,
    reasons=("Required skills: SQL (+20.0)",),
    gaps=(),
):
    """Build an ApplicationRecord with a plausible snapshot."""
    return ApplicationRecord(
        id=application_id,
        student_id=student_id,
        internship_id=internship_id,
        created_at=created_at,
        snapshot=ApplicationMatchSnapshot(
            student_id=student_id,
            internship_id=internship_id,
            score=score,
            normalized_score=score / 100,
            reasons=reasons,
            gaps=gaps,
            matching_version="2.0.0",
            computed_at=created_at,
        ),
    )


@pytest.fixture
def database():
    """In-memory database, closed after the test."""
    init_database("sqlite:///:memory:")
    yield
    close_database()


class TestDatabaseInitialization:
    """Tests for init_database and session management."""

    def test_init_database_file(self, tmp_path):
        """Test that a file database and its directory are created."""
        db_file = tmp_path / "nested" / "internmatch.db"
        init_database(f"sqlite:///{db_file}")
        try:
            assert db_file.parent.exists()
            with get_session() as session:
                tables = session.execute(
                    text("SELECT name FROM sqlite_master WHERE type='table'")
                ).scalars().all()
            assert "applications" in tables
        finally:
            close_database()

    def test_init_database_in_memory(self, database):
        assert get_engine() is not None

    @pytest.mark.parametrize("url", ["", None, "not a url"])
    def test_invalid_url(self, url):
        with pytest.raises(DatabaseConnectionError):
            init_database(url)

    def test_session_before_init(self):
        close_database()
        with pytest.raises(DatabaseConnectionError, match="not initialized"):
            with get_session():
                pass

    def test_engine_before_init(self):
        close_database()
        with pytest.raises(DatabaseConnectionError):
            get_engine()

    def test_close_is_idempotent(self):
        close_database()
        close_database()

    def test_session_rolls_back_on_error(self, database):
        """Test that an exception inside the session discards its writes."""
        with pytest.raises(RuntimeError):
            with get_session() as session:
                ApplicationRepository(session).add(make_record())
                raise RuntimeError("abort")

        with get_session() as session:
            assert ApplicationRepository(session).get_by_id("app-1") is None


class TestApplicationRepository:
    """Tests for ApplicationRepository."""

    def test_add_and_get(self, database):
        record = make_record(gaps=("Missing recommended coursework: Statistics / Probability",))
        with get_session() as session:
            stored = ApplicationRepository(session).add(record)

        assert stored == record

        with get_session() as session:
            loaded = ApplicationRepository(session).get_by_id("app-1")

        assert loaded.student_id == "stu-1"
        assert loaded.status is ApplicationStatus.SUBMITTED
        assert loaded.created_at == BASE_TIME
        assert loaded.snapshot == record.snapshot
        assert loaded.snapshot.gaps == ("Missing recommended coursework: Statistics / Probability",)

    def test_get_missing(self, database):
        with get_session() as session:
            repo = ApplicationRepository(session)
            assert repo.get_by_id("nope") is None
            assert repo.get_for_pair("stu-x", "int-x") is None

    def test_get_for_pair(self, database):
        with get_session() as session:
            ApplicationRepository(session).add(make_record())
        with get_session() as session:
            record = ApplicationRepository(session).get_for_pair("stu-1", "int-1")
        assert record.id == "app-1"

    def test_duplicate_pair_rejected(self, database):
        """Test a student can apply to an internship only once."""
        with get_session() as session:
            ApplicationRepository(session).add(make_record())

        with pytest.raises(DataIntegrityError):
            with get_session() as session:
                ApplicationRepository(session).add(make_record(application_id="app-2"))

        with get_session() as session:
            assert len(ApplicationRepository(session).list_for_internship("int-1")) == 1

    def test_list_by_match_score(self, database):
        """Test applicants order by stored score, then newest, then id."""
        with get_session() as session:
            repo = ApplicationRepository(session)
            repo.add(make_record("app-low", "stu-a", score=40.0))
            repo.add(make_record("app-high", "stu-b", score=80.0))
            repo.add(make_record("app-mid-old", "stu-c", score=60.0, created_at=BASE_TIME))
            repo.add(
                make_record("app-mid-new", "stu-d", score=60.0, created_at=BASE_TIME + timedelta(days=1))
            )
            repo.add(make_record("app-other", "stu-e", internship_id="int-2", score=99.0))

        with get_session() as session:
            records = ApplicationRepository(session).list_for_internship("int-1")

        assert [r.id for r in records] == ["app-high", "app-mid-new", "app-mid-old", "app-low"]

    def test_list_by_applied_at(self, database):
        with get_session() as session:
            repo = ApplicationRepository(session)
            repo.add(make_record("app-first", "stu-a", score=90.0, created_at=BASE_TIME))
            repo.add(
                make_record("app-second", "stu-b", score=10.0, created_at=BASE_TIME + timedelta(hours=1))
            )

        with get_session() as session:
            records = ApplicationRepository(session).list_for_internship("int-1", sort="applied_at")

        assert [r.id for r in records] == ["app-second", "app-first"]

    def test_unknown_sort_falls_back_to_score(self, database, caplog):
        with get_session() as session:
            repo = ApplicationRepository(session)
            repo.add(make_record("app-low", "stu-a", score=10.0, created_at=BASE_TIME + timedelta(hours=1)))
            repo.add(make_record("app-high", "stu-b", score=90.0))

        with caplog.at_level("WARNING"):
            with get_session() as session:
                records = ApplicationRepository(session).list_for_internship("int-1", sort="gpa")

        assert [r.id for r in records] == ["app-high", "app-low"]
        assert "Unknown applicant sort" in caplog.text

    def test_list_for_student(self, database):
        with get_session() as session:
            repo = ApplicationRepository(session)
            repo.add(make_record("app-1", internship_id="int-1", created_at=BASE_TIME))
            repo.add(make_record("app-2", internship_id="int-2", created_at=BASE_TIME + timedelta(days=2)))

        with get_session() as session:
            records = ApplicationRepository(session).list_for_student("stu-1")

        assert [r.id for r in records] == ["app-2", "app-1"]

    def test_update_status_keeps_snapshot(self, database):
        record = make_record()
        with get_session() as session:
            ApplicationRepository(session).add(record)

        with get_session() as session:
            updated = ApplicationRepository(session).update_status("app-1", ApplicationStatus.SHORTLISTED)

        assert updated.status is ApplicationStatus.SHORTLISTED
        assert updated.snapshot == record.snapshot

    def test_update_status_accepts_string(self, database):
        with get_session() as session:
            ApplicationRepository(session).add(make_record())
        with get_session() as session:
            updated = ApplicationRepository(session).update_status("app-1", "rejected")
        assert updated.status is ApplicationStatus.REJECTED

    def test_update_status_missing(self, database):
        with pytest.raises(RecordNotFoundError):
            with get_session() as session:
                ApplicationRepository(session).update_status("nope", ApplicationStatus.REVIEWED)

    def test_corrupt_snapshot_texts_read_as_empty(self, database):
        with get_session() as session:
            ApplicationRepository(session).add(make_record())
            session.execute(
                text("UPDATE applications SET match_reasons = 'not json' WHERE id = 'app-1'")
            )

        with get_session() as session:
            loaded = ApplicationRepository(session).get_by_id("app-1")

        assert loaded.snapshot.reasons == ()


def test_model_round_trip():
    """Test ORM conversion preserves the record."""
    record = make_record(gaps=("Missing required skills: Excel",))
    model = ApplicationModel.from_domain(record)
    assert model.match_reasons == '["Required skills: SQL (+20.0)"]'
    assert model.created_at == "2026-03-01T09:00:00.000000Z"
    assert model.to_domain() == record
