"""Score aggregation."""

import math
from dataclasses import dataclass
from typing import Iterable

from .exceptions import ScoringModelError
from .models import PerSignalContribution

# Float slack for points computed as weight * ratio
TOLERANCE = 1e-9


@dataclass(frozen=True)
class ScoreSummary:
    score: float
    max_score: float
    normalized_score: float


def aggregate(contributions: Iterable[PerSignalContribution], max_score: float) -> ScoreSummary:
    """Sum contribution points and normalize against the model's max score.

    ``max_score`` comes from the scoring model, not from the contributions,
    so a student with an incomplete profile is scored out of the same total
    as everyone else.

    Raises:
        ScoringModelError: If any contribution is negative or exceeds its weight
    """
    total = 0.0
    violations = []
    for contribution in contributions:
        points = contribution.points_awarded
        if (
            not math.isfinite(points)
            or points < -TOLERANCE
            or points > contribution.weight + TOLERANCE
        ):
            violations.append(
                f"{contribution.signal_key.value}: {points} points outside [0, {contribution.weight}]"
            )
            continue
        total += min(max(points, 0.0), contribution.weight)

    if violations:
        raise ScoringModelError(
            "Signal contribution outside its weight bounds",
            errors=violations,
            suggestions=["Evaluators must return raw values between 0 and 1"],
        )

    if max_score <= 0:
        return ScoreSummary(score=total, max_score=max_score, normalized_score=0.0)

    normalized = min(1.0, max(0.0, total / max_score))
    return ScoreSummary(score=total, max_score=max_score, normalized_score=normalized)
