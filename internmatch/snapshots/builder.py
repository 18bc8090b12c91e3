"""Building and reproducing application match snapshots."""

import logging
from datetime import datetime
from typing import Callable, Optional

from internmatch.logging import get_logger, scoring_context
from internmatch.matching.engine import MatchingEngine
from internmatch.matching.models import MatchResult
from internmatch.matching.signals import get_scoring_model
from internmatch.normalization.models import (
    NormalizedInternshipListing,
    NormalizedStudentProfile,
)
from internmatch.utils import utc_now

from .models import ApplicationMatchSnapshot

logger = get_logger(__name__, component="snapshots")

SCORE_DECIMALS = 3


def snapshot_from_result(result: MatchResult, computed_at: datetime) -> ApplicationMatchSnapshot:
    """Freeze a match result into a snapshot (scores rounded to 3 decimals)."""
    return ApplicationMatchSnapshot(
        student_id=result.student_id,
        internship_id=result.internship_id,
        score=round(result.score, SCORE_DECIMALS),
        normalized_score=round(result.normalized_score, SCORE_DECIMALS),
        reasons=tuple(result.reason_texts()),
        gaps=tuple(result.gap_texts()),
        matching_version=result.matching_version,
        computed_at=computed_at,
    )


class SnapshotBuilder:
    """Computes the snapshot stored when a student applies."""

    def __init__(
        self,
        engine: Optional[MatchingEngine] = None,
        clock: Callable[[], datetime] = utc_now,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize SnapshotBuilder.

        Args:
            engine: Matching engine (defaults to the built-in model)
            clock: Source of computed_at timestamps
            logger_instance: Logger instance (defaults to module logger)
        """
        self.engine = engine or MatchingEngine()
        self.clock = clock
        self.logger = logger_instance or logger

    def build(
        self,
        internship: NormalizedInternshipListing,
        student: NormalizedStudentProfile,
    ) -> ApplicationMatchSnapshot:
        """Score the pair and freeze the result."""
        with scoring_context(
            student_id=student.student_id,
            internship_id=internship.internship_id,
            matching_version=self.engine.matching_version,
        ):
            result = self.engine.evaluate(student, internship)
            snapshot = snapshot_from_result(result, self.clock())
            self.logger.info(
                "Match snapshot built",
                extra={
                    "event": "snapshot.built",
                    "score": snapshot.score,
                    "normalized_score": snapshot.normalized_score,
                    "gap_count": len(snapshot.gaps),
                },
            )
            return snapshot


def build_snapshot(
    internship: NormalizedInternshipListing,
    student: NormalizedStudentProfile,
    engine: Optional[MatchingEngine] = None,
) -> ApplicationMatchSnapshot:
    """Build a snapshot with a one-off SnapshotBuilder."""
    return SnapshotBuilder(engine).build(internship, student)


def reproduce_snapshot(
    snapshot: ApplicationMatchSnapshot,
    internship: NormalizedInternshipListing,
    student: NormalizedStudentProfile,
) -> ApplicationMatchSnapshot:
    """Re-run a snapshot with the model registered for its version.

    Given the same normalized inputs the result equals the original apart
    from computed_at, which is carried over.

    Raises:
        ScoringModelError: If the snapshot's version is not registered
    """
    model = get_scoring_model(snapshot.matching_version)
    builder = SnapshotBuilder(MatchingEngine(model), clock=lambda: snapshot.computed_at)
    return builder.build(internship, student)
