"""Database schema and ORM <-> domain conversion.

Snapshot columns (match_*) are written once on insert. Reasons and gaps are
stored as JSON arrays in text columns so the order of the texts survives.
"""

import json
from typing import List, Optional

from sqlalchemy import Column, Float, Index, String, Text, UniqueConstraint
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from internmatch.applications.models import ApplicationRecord, ApplicationStatus
from internmatch.logging import get_logger
from internmatch.snapshots.models import ApplicationMatchSnapshot
from internmatch.utils import format_timestamp, parse_iso_datetime

logger = get_logger(__name__, component="database")

Base = declarative_base()


class ApplicationModel(Base):
    """ORM model for the applications table."""

    __tablename__ = "applications"

    id = Column(String(64), primary_key=True, nullable=False)
    student_id = Column(String(255), nullable=False)
    internship_id = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default=ApplicationStatus.SUBMITTED.value)

    # ISO 8601 UTC strings, like every timestamp column
    created_at = Column(String(50), nullable=False)
    computed_at = Column(String(50), nullable=False)

    # Snapshot
    match_score = Column(Float, nullable=False)
    match_normalized_score = Column(Float, nullable=False)
    match_reasons = Column(Text, nullable=False, default="[]")
    match_gaps = Column(Text, nullable=False, default="[]")
    matching_version = Column(String(50), nullable=False)

    __table_args__ = (
        UniqueConstraint("student_id", "internship_id", name="uq_applications_pair"),
        Index("idx_applications_internship", "internship_id"),
        Index("idx_applications_student", "student_id"),
    )

    def to_domain(self) -> ApplicationRecord:
        snapshot = ApplicationMatchSnapshot(
            student_id=self.student_id,
            internship_id=self.internship_id,
            score=self.match_score,
            normalized_score=self.match_normalized_score,
            reasons=tuple(_load_texts(self.match_reasons)),
            gaps=tuple(_load_texts(self.match_gaps)),
            matching_version=self.matching_version,
            computed_at=parse_iso_datetime(self.computed_at),
        )
        return ApplicationRecord(
            id=self.id,
            student_id=self.student_id,
            internship_id=self.internship_id,
            status=ApplicationStatus(self.status),
            created_at=parse_iso_datetime(self.created_at),
            snapshot=snapshot,
        )

    @classmethod
    def from_domain(cls, record: ApplicationRecord) -> "ApplicationModel":
        columns = record.snapshot.to_columns()
        return cls(
            id=record.id,
            student_id=record.student_id,
            internship_id=record.internship_id,
            status=record.status.value,
            created_at=format_timestamp(record.created_at),
            computed_at=format_timestamp(record.snapshot.computed_at),
            match_score=columns["match_score"],
            match_normalized_score=columns["match_normalized_score"],
            match_reasons=json.dumps(columns["match_reasons"]),
            match_gaps=json.dumps(columns["match_gaps"]),
            matching_version=columns["matching_version"],
        )


def _load_texts(raw: Optional[str]) -> List[str]:
    """Decode a JSON text column; a corrupt value reads as an empty list."""
    if not raw:
        return []
    try:
        values = json.loads(raw)
    except ValueError:
        logger.warning(
            "Could not decode stored snapshot texts",
            extra={"event": "database.snapshot.corrupt"},
        )
        return []
    if not isinstance(values, list):
        return []
    return [str(value) for value in values]


def create_schema(engine: Engine) -> None:
    """Create all tables that do not exist yet (idempotent)."""
    Base.metadata.create_all(engine)
    logger.debug("Database schema ready", extra={"event": "database.schema.created"})
