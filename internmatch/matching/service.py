"""Raw-row facade over normalization, scoring and ranking."""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Union

from internmatch.catalog import CanonicalCatalog, CatalogResolver
from internmatch.domain.models import RawInternship, RawStudentProfile
from internmatch.logging import get_logger
from internmatch.normalization import (
    NormalizedInternshipListing,
    NormalizedStudentProfile,
    ProfileNormalizer,
)

from .engine import MatchingEngine
from .models import MatchResult, RankedApplicant, RankedInternship
from .ranker import Ranker
from .signals import ScoringModel

logger = get_logger(__name__, component="matching")

StudentRow = Union[RawStudentProfile, NormalizedStudentProfile, Mapping[str, Any]]
InternshipRow = Union[RawInternship, NormalizedInternshipListing, Mapping[str, Any]]


class MatchingService:
    """Scores and ranks straight from raw rows.

    Rows may be raw pydantic models, plain dicts, or already-normalized
    shapes. Batch methods skip rows that fail to normalize (they are logged
    by the normalizer).
    """

    def __init__(
        self,
        catalog: Optional[CanonicalCatalog] = None,
        model: Optional[ScoringModel] = None,
        engine: Optional[MatchingEngine] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        self.logger = logger_instance or logger
        self.resolver = CatalogResolver(catalog)
        self.normalizer = ProfileNormalizer(self.resolver, logger_instance=logger_instance)
        self.engine = engine or MatchingEngine(model)
        self.ranker = Ranker(self.engine, logger_instance=logger_instance)

    @property
    def model(self) -> ScoringModel:
        return self.engine.model

    def student(self, row: StudentRow) -> NormalizedStudentProfile:
        if isinstance(row, NormalizedStudentProfile):
            return row
        return self.normalizer.normalize_student(row)

    def internship(self, row: InternshipRow) -> NormalizedInternshipListing:
        if isinstance(row, NormalizedInternshipListing):
            return row
        return self.normalizer.normalize_internship(row)

    def students(self, rows: Iterable[StudentRow]) -> List[NormalizedStudentProfile]:
        rows = list(rows)
        ready = [row for row in rows if isinstance(row, NormalizedStudentProfile)]
        raw = [row for row in rows if not isinstance(row, NormalizedStudentProfile)]
        return ready + list(self.normalizer.normalize_students(raw))

    def internships(self, rows: Iterable[InternshipRow]) -> List[NormalizedInternshipListing]:
        rows = list(rows)
        ready = [row for row in rows if isinstance(row, NormalizedInternshipListing)]
        raw = [row for row in rows if not isinstance(row, NormalizedInternshipListing)]
        return ready + list(self.normalizer.normalize_internships(raw))

    def evaluate(self, student: StudentRow, internship: InternshipRow) -> MatchResult:
        """Score one pair of rows."""
        return self.engine.evaluate(self.student(student), self.internship(internship))

    def rank_internships(
        self, student: StudentRow, internships: Iterable[InternshipRow]
    ) -> List[RankedInternship]:
        """Rank internship rows for a student row."""
        return self.ranker.rank_internships(self.student(student), self.internships(internships))

    def rank_applicants(
        self, internship: InternshipRow, students: Iterable[StudentRow]
    ) -> List[RankedApplicant]:
        """Rank student rows for an internship row."""
        return self.ranker.rank_applicants(self.internship(internship), self.students(students))
