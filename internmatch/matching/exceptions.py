"""Exceptions raised by the matching engine."""

from internmatch.config.exceptions import ConfigurationError


class ScoringModelError(ConfigurationError):
    """The scoring model is inconsistent.

    Raised when a model is defined (missing signal, bad weight, version
    reused with different weights) or when a contribution breaks the
    0 <= points <= weight invariant during aggregation. These are
    configuration faults, so rankers never swallow them.
    """


class MatchingError(Exception):
    """Base exception for failures while scoring a pair."""


class PairEvaluationError(MatchingError):
    """Scoring a single student/internship pair failed."""

    def __init__(self, student_id: str, internship_id: str, reason: str):
        self.student_id = student_id
        self.internship_id = internship_id
        self.reason = reason
        super().__init__(
            f"Could not score student {student_id} against internship {internship_id}: {reason}"
        )
