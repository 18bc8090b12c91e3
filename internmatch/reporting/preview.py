"""Admin matching preview: filter listings, rank them for one student, inspect a pair."""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from internmatch.matching.eligibility import is_eligible
from internmatch.matching.engine import MatchingEngine
from internmatch.matching.models import MatchResult, RankedInternship
from internmatch.matching.ranker import Ranker
from internmatch.normalization.models import (
    NormalizedInternshipListing,
    NormalizedStudentProfile,
    WorkMode,
)
from internmatch.utils import normalize_token


@dataclass(frozen=True)
class PreviewFilters:
    """Listing filters; None (or False) means "don't filter".

    ``category`` and ``term`` are case-insensitive substring matches against
    the listing's category and term text.
    ``eligible_only`` drops listings that fail a hard constraint for the
    student (see internmatch.matching.eligibility); it applies after scoring.
    """

    category: Optional[str] = None
    remote_only: bool = False
    term: Optional[str] = None
    eligible_only: bool = False


def _is_remote(internship: NormalizedInternshipListing) -> bool:
    return internship.work_mode is WorkMode.REMOTE or internship.remote_allowed


def _matches_term(internship: NormalizedInternshipListing, term: str) -> bool:
    haystack = normalize_token(internship.term_label)
    if term in haystack:
        return True
    return term == internship.term_season.value


def filter_internships(
    internships: Iterable[NormalizedInternshipListing],
    filters: Optional[PreviewFilters] = None,
    include_inactive: bool = False,
) -> List[NormalizedInternshipListing]:
    """Listings passing every filter, in input order."""
    filters = filters or PreviewFilters()
    category = normalize_token(filters.category)
    term = normalize_token(filters.term)

    selected = []
    for internship in internships:
        if not include_inactive and not internship.is_active:
            continue
        if category and category not in normalize_token(internship.category):
            continue
        if filters.remote_only and not _is_remote(internship):
            continue
        if term and not _matches_term(internship, term):
            continue
        selected.append(internship)
    return selected


def rank_internships_for_preview(
    internships: Iterable[NormalizedInternshipListing],
    student: NormalizedStudentProfile,
    filters: Optional[PreviewFilters] = None,
    engine: Optional[MatchingEngine] = None,
) -> List[RankedInternship]:
    """Filter, then rank the remaining listings for the student."""
    ranked = Ranker(engine).rank_internships(student, filter_internships(internships, filters))
    if filters is not None and filters.eligible_only:
        ranked = [item for item in ranked if is_eligible(student, item.internship, item.match)]
    return ranked


def evaluate_single_preview_match(
    internship: NormalizedInternshipListing,
    student: NormalizedStudentProfile,
    engine: Optional[MatchingEngine] = None,
) -> MatchResult:
    return (engine or MatchingEngine()).evaluate(student, internship)


def build_contribution_rows(match: MatchResult) -> List[Dict[str, object]]:
    """One row per signal for the admin breakdown table, in model order."""
    return [
        {
            "signal_key": contribution.signal_key.value,
            "weight": contribution.weight,
            "raw_match_value": round(contribution.raw_match_value, 4),
            "points_awarded": round(contribution.points_awarded, 4),
            "status": contribution.status.value,
            "evidence": contribution.detail,
        }
        for contribution in match.breakdown.contributions
    ]
