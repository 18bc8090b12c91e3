"""Weighted multi-signal matching between students and internships.

This module provides:
- ScoringModel / SignalKey: the versioned signal catalog and its registry
- EVALUATORS: one pure evaluator per signal
- MatchingEngine: scores one normalized pair
- is_eligible: hard-constraint check for callers that filter ranked results
- Ranker: orders internships for a student and applicants for an internship
- MatchingService: the same operations starting from raw rows
"""

from .aggregator import ScoreSummary, aggregate
from .eligibility import eligibility_failures, is_eligible
from .engine import MatchingEngine
from .evaluators import EVALUATORS, check_evaluator_coverage
from .exceptions import MatchingError, PairEvaluationError, ScoringModelError
from .models import (
    Gap,
    MatchBreakdown,
    MatchResult,
    MatchStatus,
    PerSignalContribution,
    RankedApplicant,
    RankedInternship,
    Reason,
    SignalEvaluation,
)
from .ranker import Ranker
from .reasons import GAP_KEYS, ReasonGapGenerator
from .service import MatchingService
from .signals import (
    DEFAULT_MATCHING_VERSION,
    DEFAULT_SCORING_MODEL,
    ScoringModel,
    ScoringSettings,
    SignalDefinition,
    SignalKey,
    SignalKind,
    build_scoring_model,
    get_scoring_model,
    register_scoring_model,
    registered_versions,
)

__all__ = [
    "DEFAULT_MATCHING_VERSION",
    "DEFAULT_SCORING_MODEL",
    "EVALUATORS",
    "GAP_KEYS",
    "Gap",
    "MatchBreakdown",
    "MatchResult",
    "MatchStatus",
    "MatchingEngine",
    "MatchingError",
    "MatchingService",
    "PairEvaluationError",
    "PerSignalContribution",
    "RankedApplicant",
    "RankedInternship",
    "Ranker",
    "Reason",
    "ReasonGapGenerator",
    "ScoreSummary",
    "ScoringModel",
    "ScoringModelError",
    "ScoringSettings",
    "SignalDefinition",
    "SignalEvaluation",
    "SignalKey",
    "SignalKind",
    "aggregate",
    "build_scoring_model",
    "check_evaluator_coverage",
    "eligibility_failures",
    "get_scoring_model",
    "is_eligible",
    "register_scoring_model",
    "registered_versions",
]
