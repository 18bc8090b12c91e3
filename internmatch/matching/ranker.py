"""Ranking of internships for a student and applicants for an internship."""

import logging
from typing import Iterable, List, Optional

from internmatch.logging import get_logger, scoring_context
from internmatch.normalization.models import (
    NormalizedInternshipListing,
    NormalizedStudentProfile,
)
from internmatch.utils import EPOCH, ensure_utc

from .engine import MatchingEngine
from .exceptions import ScoringModelError
from .models import RankedApplicant, RankedInternship

logger = get_logger(__name__, component="ranking")


def _created_at_key(value) -> float:
    """Newer first; rows without created_at sort as the oldest."""
    return -(ensure_utc(value) or EPOCH).timestamp()


class Ranker:
    """Orders candidates by normalized score with deterministic tie-breaks.

    Sort keys:
    - internships: normalized_score desc, created_at desc, internship_id asc
    - applicants: normalized_score desc, student created_at desc, student_id asc

    A pair that fails to score is logged and left out; a ScoringModelError
    is a configuration fault and propagates.
    """

    def __init__(
        self,
        engine: Optional[MatchingEngine] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        self.engine = engine or MatchingEngine()
        self.logger = logger_instance or logger

    def rank_internships(
        self,
        student: NormalizedStudentProfile,
        internships: Iterable[NormalizedInternshipListing],
    ) -> List[RankedInternship]:
        """Rank internships for one student."""
        ranked = []
        excluded = 0
        with scoring_context(student_id=student.student_id, matching_version=self.engine.matching_version):
            for internship in internships:
                match = self._score(student, internship)
                if match is None:
                    excluded += 1
                    continue
                ranked.append(RankedInternship(internship=internship, match=match))

            ranked.sort(
                key=lambda item: (
                    -item.match.normalized_score,
                    _created_at_key(item.internship.created_at),
                    item.internship.internship_id,
                )
            )

            self.logger.info(
                f"Ranked {len(ranked)} internships",
                extra={
                    "event": "ranking.completed",
                    "ranking_type": "internships",
                    "ranked_count": len(ranked),
                    "excluded_count": excluded,
                },
            )
        return ranked

    def rank_applicants(
        self,
        internship: NormalizedInternshipListing,
        students: Iterable[NormalizedStudentProfile],
    ) -> List[RankedApplicant]:
        """Rank applicants (students) for one internship."""
        ranked = []
        excluded = 0
        with scoring_context(
            internship_id=internship.internship_id, matching_version=self.engine.matching_version
        ):
            for student in students:
                match = self._score(student, internship)
                if match is None:
                    excluded += 1
                    continue
                ranked.append(RankedApplicant(student=student, match=match))

            ranked.sort(
                key=lambda item: (
                    -item.match.normalized_score,
                    _created_at_key(item.student.created_at),
                    item.student.student_id,
                )
            )

            self.logger.info(
                f"Ranked {len(ranked)} applicants",
                extra={
                    "event": "ranking.completed",
                    "ranking_type": "applicants",
                    "ranked_count": len(ranked),
                    "excluded_count": excluded,
                },
            )
        return ranked

    def _score(self, student, internship):
        try:
            return self.engine.evaluate(student, internship)
        except ScoringModelError:
            raise
        except Exception as e:
            self.logger.warning(
                f"Excluding pair from ranking: {e}",
                extra={
                    "event": "ranking.pair.excluded",
                    "student_id": student.student_id,
                    "internship_id": internship.internship_id,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            return None
