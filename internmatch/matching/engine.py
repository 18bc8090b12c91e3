"""Matching engine: scores one normalized student/internship pair.

This module composes the scoring pipeline:
1. Run every signal's evaluator
2. Weight raw values into per-signal contributions
3. Aggregate contributions into a score out of the model's max score
4. Derive reasons and gaps
"""

import logging
from typing import Dict, List, Optional

from internmatch.logging import get_logger, scoring_context
from internmatch.normalization.models import (
    NormalizedInternshipListing,
    NormalizedStudentProfile,
)

from .aggregator import aggregate
from .evaluators import EVALUATORS, Evaluator, check_evaluator_coverage
from .exceptions import PairEvaluationError
from .models import MatchBreakdown, MatchResult, PerSignalContribution
from .reasons import ReasonGapGenerator
from .signals import DEFAULT_SCORING_MODEL, ScoringModel, SignalKey

logger = get_logger(__name__, component="matching")


class MatchingEngine:
    """Scores normalized pairs against a fixed scoring model.

    The engine holds no mutable state; one instance can score pairs from
    many threads.
    """

    def __init__(
        self,
        model: Optional[ScoringModel] = None,
        evaluators: Optional[Dict[SignalKey, Evaluator]] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize MatchingEngine.

        Args:
            model: Scoring model (defaults to the built-in model)
            evaluators: Evaluator table (defaults to EVALUATORS)
            logger_instance: Logger instance (defaults to module logger)

        Raises:
            ScoringModelError: If the evaluator table does not cover every signal
        """
        self.model = model or DEFAULT_SCORING_MODEL
        self.evaluators = dict(evaluators or EVALUATORS)
        check_evaluator_coverage(self.evaluators)
        self.reasons = ReasonGapGenerator(model=self.model)
        self.logger = logger_instance or logger

    @property
    def matching_version(self) -> str:
        return self.model.version

    def contributions(
        self,
        student: NormalizedStudentProfile,
        internship: NormalizedInternshipListing,
    ) -> List[PerSignalContribution]:
        """Evaluate and weight every signal, in model order.

        Raises:
            PairEvaluationError: If an evaluator fails
        """
        results = []
        for signal in self.model.signals:
            evaluator = self.evaluators[signal.key]
            try:
                evaluation = evaluator(student, internship, self.model.settings)
            except Exception as e:
                raise PairEvaluationError(
                    student.student_id,
                    internship.internship_id,
                    f"{signal.key.value} evaluator failed: {e}",
                ) from e

            results.append(
                PerSignalContribution(
                    signal_key=signal.key,
                    weight=float(signal.weight),
                    raw_match_value=evaluation.raw_value,
                    points_awarded=signal.weight * evaluation.raw_value,
                    status=evaluation.status,
                    required=evaluation.required,
                    detail=evaluation.detail,
                    matched=evaluation.matched,
                    missing=evaluation.missing,
                )
            )
        return results

    def evaluate(
        self,
        student: NormalizedStudentProfile,
        internship: NormalizedInternshipListing,
    ) -> MatchResult:
        """Score one pair.

        Returns:
            MatchResult with score, normalized score and breakdown

        Raises:
            PairEvaluationError: If an evaluator fails
            ScoringModelError: If a contribution breaks the weight bounds
        """
        with scoring_context(
            student_id=student.student_id,
            internship_id=internship.internship_id,
            matching_version=self.model.version,
        ):
            contributions = self.contributions(student, internship)
            summary = aggregate(contributions, self.model.max_score)
            reasons, gaps = self.reasons.generate(contributions)

            result = MatchResult(
                student_id=student.student_id,
                internship_id=internship.internship_id,
                score=summary.score,
                max_score=summary.max_score,
                normalized_score=summary.normalized_score,
                matching_version=self.model.version,
                breakdown=MatchBreakdown(
                    contributions=tuple(contributions),
                    reasons=tuple(reasons),
                    gaps=tuple(gaps),
                ),
            )

            self.logger.debug(
                "Pair evaluated",
                extra={
                    "event": "matching.pair.evaluated",
                    "score": round(result.score, 3),
                    "normalized_score": round(result.normalized_score, 3),
                    "reason_count": len(reasons),
                    "gap_count": len(gaps),
                },
            )
            return result

