"""Match-coverage indicators: which scoring dimensions a row actually fills.

A row with few dimensions present scores toward the "unknown" end of every
signal; admins use these indicators to find profiles and listings worth
completing.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from internmatch.normalization.models import (
    UNKNOWN,
    InternshipExperienceLevel,
    NormalizedInternshipListing,
    NormalizedStudentProfile,
    StudentExperienceLevel,
    TermSeason,
    WorkMode,
    YearInSchool,
)


@dataclass(frozen=True)
class MatchingCoverage:
    total: int
    present: int
    missing: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def ratio(self) -> float:
        return self.present / self.total if self.total else 0.0

    def to_dict(self) -> Dict[str, object]:
        return {"total": self.total, "present": self.present, "missing": list(self.missing)}


def _coverage(checks: Sequence[Tuple[str, bool]]) -> MatchingCoverage:
    missing: List[str] = [label for label, ok in checks if not ok]
    return MatchingCoverage(total=len(checks), present=len(checks) - len(missing), missing=tuple(missing))


def student_coverage(student: NormalizedStudentProfile) -> MatchingCoverage:
    return _coverage(
        [
            ("majors", student.majors is not UNKNOWN),
            ("skills", student.skills is not UNKNOWN),
            ("coursework", student.coursework is not UNKNOWN),
            ("term", student.availability_start_month is not UNKNOWN),
            ("hours", student.availability_hours_per_week is not UNKNOWN),
            (
                "location/work mode",
                not student.location.is_unknown
                or bool(student.preferred_work_modes)
                or student.remote_only,
            ),
            ("year", student.year is not YearInSchool.UNKNOWN),
            ("experience", student.experience is not StudentExperienceLevel.UNKNOWN),
        ]
    )


def internship_coverage(internship: NormalizedInternshipListing) -> MatchingCoverage:
    return _coverage(
        [
            ("majors", bool(internship.majors)),
            ("skills", bool(internship.required_skills) or bool(internship.preferred_skills)),
            ("coursework", bool(internship.coursework)),
            (
                "term",
                internship.term_season is not TermSeason.UNKNOWN or bool(internship.term_months),
            ),
            ("hours", internship.hours_min is not None or internship.hours_max is not None),
            (
                "location/work mode",
                internship.remote_allowed
                or internship.work_mode is WorkMode.REMOTE
                or not internship.location.is_unknown,
            ),
            ("year", bool(internship.target_years)),
            ("experience", internship.experience is not InternshipExperienceLevel.UNKNOWN),
        ]
    )
