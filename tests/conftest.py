"""Shared fixtures for the matching engine tests."""

import logging
from datetime import datetime, timezone

import pytest

from internmatch.logging import clear_log_context
from internmatch.matching import MatchingService
from internmatch.reporting.fixtures import SAMPLE_CATALOG


@pytest.fixture(autouse=True)
def restore_root_logger():
    """configure_logging() replaces root handlers; put pytest's back afterwards."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    clear_log_context()


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No config file in the working directory and no engine env vars."""
    monkeypatch.chdir(tmp_path)
    for name in ("DATABASE_URL", "LOG_LEVEL", "ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def matching_service():
    """MatchingService over the bundled sample catalog and the default model."""
    return MatchingService(catalog=SAMPLE_CATALOG)


@pytest.fixture
def make_student(matching_service):
    """Build a normalized student from raw fields."""

    def _make(student_id="stu-1", **fields):
        return matching_service.student({"id": student_id, **fields})

    return _make


@pytest.fixture
def make_internship(matching_service):
    """Build a normalized internship from raw fields."""

    def _make(internship_id="int-1", **fields):
        return matching_service.internship({"id": internship_id, **fields})

    return _make


@pytest.fixture
def fixed_now():
    return datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)
