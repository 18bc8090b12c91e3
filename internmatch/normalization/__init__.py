"""Normalization of raw student and internship rows."""

from .geo import haversine_km, month_window, normalize_state, parse_month
from .models import (
    UNKNOWN,
    GeoPoint,
    InternshipExperienceLevel,
    LabelSet,
    NormalizedInternshipListing,
    NormalizedStudentProfile,
    RemoteScope,
    StudentExperienceLevel,
    TermSeason,
    TransportMode,
    Unknown,
    WorkMode,
    YearInSchool,
)
from .service import (
    SEASON_WINDOWS,
    ProfileNormalizer,
    derive_term,
    parse_description_fields,
    season_from_month,
)

__all__ = [
    "UNKNOWN",
    "Unknown",
    "LabelSet",
    "GeoPoint",
    "YearInSchool",
    "StudentExperienceLevel",
    "InternshipExperienceLevel",
    "WorkMode",
    "TermSeason",
    "TransportMode",
    "RemoteScope",
    "NormalizedStudentProfile",
    "NormalizedInternshipListing",
    "ProfileNormalizer",
    "SEASON_WINDOWS",
    "derive_term",
    "parse_description_fields",
    "season_from_month",
    "haversine_km",
    "month_window",
    "normalize_state",
    "parse_month",
]
