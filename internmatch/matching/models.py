"""Data models for match results.

A MatchResult carries the total score plus a per-signal breakdown, and the
reasons and gaps derived from it. Everything here is immutable so a result
can be cached, logged or snapshotted without defensive copies.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from internmatch.normalization.models import (
    NormalizedInternshipListing,
    NormalizedStudentProfile,
)

from .signals import SignalKey


class MatchStatus(str, Enum):
    """How a signal came out for a pair."""

    MATCH = "match"
    PARTIAL = "partial"
    MISS = "miss"
    NO_CONSTRAINT = "no_constraint"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class SignalEvaluation:
    """Raw output of one evaluator, before weighting.

    Attributes:
        raw_value: Match value in [0, 1]
        status: Outcome classification
        required: Whether a zero here counts as a gap
        detail: Short human-readable explanation
        matched: Display names of the values that matched
        missing: Display names of the values that did not
    """

    raw_value: float
    status: MatchStatus
    required: bool = False
    detail: str = ""
    matched: Tuple[str, ...] = ()
    missing: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PerSignalContribution:
    """A weighted signal outcome; 0 <= points_awarded <= weight."""

    signal_key: SignalKey
    weight: float
    raw_match_value: float
    points_awarded: float
    status: MatchStatus
    required: bool = False
    detail: str = ""
    matched: Tuple[str, ...] = ()
    missing: Tuple[str, ...] = ()

    @property
    def ratio(self) -> float:
        return self.points_awarded / self.weight if self.weight > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "signal_key": self.signal_key.value,
            "weight": self.weight,
            "raw_match_value": round(self.raw_match_value, 4),
            "points_awarded": round(self.points_awarded, 4),
            "status": self.status.value,
            "required": self.required,
            "detail": self.detail,
            "matched": list(self.matched),
            "missing": list(self.missing),
        }


@dataclass(frozen=True)
class Reason:
    key: str
    text: str
    signal_key: SignalKey
    points: float


@dataclass(frozen=True)
class Gap:
    key: str
    text: str
    signal_key: SignalKey
    weight: float


@dataclass(frozen=True)
class MatchBreakdown:
    contributions: Tuple[PerSignalContribution, ...] = ()
    reasons: Tuple[Reason, ...] = ()
    gaps: Tuple[Gap, ...] = ()

    def contribution(self, key: SignalKey) -> Optional[PerSignalContribution]:
        for contribution in self.contributions:
            if contribution.signal_key == key:
                return contribution
        return None


@dataclass(frozen=True)
class MatchResult:
    """Score for one student/internship pair.

    ``normalized_score`` is score / max_score, clamped to [0, 1], and is the
    value rankings sort by.
    """

    student_id: str
    internship_id: str
    score: float
    max_score: float
    normalized_score: float
    matching_version: str
    breakdown: MatchBreakdown = field(default_factory=MatchBreakdown)

    def reason_texts(self, limit: Optional[int] = None) -> List[str]:
        """Reason texts, strongest first; ``limit`` slices the list."""
        texts = [reason.text for reason in self.breakdown.reasons]
        return texts if limit is None else texts[:limit]

    def gap_texts(self, limit: Optional[int] = None) -> List[str]:
        """Gap texts, heaviest signal first; ``limit`` slices the list."""
        texts = [gap.text for gap in self.breakdown.gaps]
        return texts if limit is None else texts[:limit]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "student_id": self.student_id,
            "internship_id": self.internship_id,
            "score": round(self.score, 4),
            "max_score": self.max_score,
            "normalized_score": round(self.normalized_score, 4),
            "matching_version": self.matching_version,
            "reasons": [
                {"key": r.key, "text": r.text, "signal_key": r.signal_key.value, "points": r.points}
                for r in self.breakdown.reasons
            ],
            "gaps": [
                {"key": g.key, "text": g.text, "signal_key": g.signal_key.value, "weight": g.weight}
                for g in self.breakdown.gaps
            ],
            "breakdown": [c.to_dict() for c in self.breakdown.contributions],
        }


@dataclass(frozen=True)
class RankedInternship:
    internship: NormalizedInternshipListing
    match: MatchResult


@dataclass(frozen=True)
class RankedApplicant:
    student: NormalizedStudentProfile
    match: MatchResult
