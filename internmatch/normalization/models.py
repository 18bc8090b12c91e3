"""Normalized shapes consumed by the signal evaluators.

Student-side fields that are missing carry the UNKNOWN sentinel so that an
evaluator can tell "the student did not say" apart from "the student said
nothing matches". Internship-side sets that are empty mean "no constraint".

Every enum has its own UNKNOWN member; parse() maps free text onto members
and never raises.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple, Union

from internmatch.catalog.models import LabelSet
from internmatch.utils import normalize_token


class Unknown(Enum):
    """Sentinel type for a value the student has not provided."""

    UNKNOWN = "unknown"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNKNOWN"


UNKNOWN = Unknown.UNKNOWN


class _ParsableEnum(str, Enum):
    """str enum with a forgiving parse() over synonyms."""

    @classmethod
    def _synonyms(cls) -> Dict[str, str]:
        return {}

    @classmethod
    def parse(cls, value: Optional[str]):
        """Map free text to a member; unrecognized text gives UNKNOWN."""
        if isinstance(value, cls):
            return value
        token = normalize_token(value if value is None else str(value))
        if not token:
            return cls("unknown")
        for member in cls:
            if token == normalize_token(member.value):
                return member
        synonym = cls._synonyms().get(token) or cls._synonyms().get(token.replace(" ", ""))
        return cls(synonym) if synonym else cls("unknown")


class YearInSchool(_ParsableEnum):
    FRESHMAN = "freshman"
    SOPHOMORE = "sophomore"
    JUNIOR = "junior"
    SENIOR = "senior"
    GRADUATE = "graduate"
    ANY = "any"
    UNKNOWN = "unknown"

    @classmethod
    def _synonyms(cls) -> Dict[str, str]:
        return {
            "first year": "freshman", "1st year": "freshman", "year 1": "freshman", "1": "freshman",
            "second year": "sophomore", "2nd year": "sophomore", "year 2": "sophomore", "2": "sophomore",
            "third year": "junior", "3rd year": "junior", "year 3": "junior", "3": "junior",
            "fourth year": "senior", "4th year": "senior", "year 4": "senior", "4": "senior",
            "fifth year": "senior", "5th year": "senior",
            "grad": "graduate", "grad student": "graduate", "graduate student": "graduate",
            "masters": "graduate", "phd": "graduate", "mba": "graduate",
            "all": "any", "all years": "any", "any year": "any",
        }


class StudentExperienceLevel(_ParsableEnum):
    NONE = "none"
    PROJECTS = "projects"
    INTERNSHIP = "internship"
    UNKNOWN = "unknown"

    @classmethod
    def _synonyms(cls) -> Dict[str, str]:
        return {
            "no experience": "none", "beginner": "none", "no": "none",
            "project": "projects", "class projects": "projects", "personal projects": "projects",
            "internships": "internship", "prior internship": "internship",
            "previous internship": "internship",
        }

    @property
    def ordinal(self) -> Optional[int]:
        return {"none": 0, "projects": 1, "internship": 2}.get(self.value)


class InternshipExperienceLevel(_ParsableEnum):
    ENTRY = "entry"
    MID = "mid"
    SENIOR = "senior"
    UNKNOWN = "unknown"

    @classmethod
    def _synonyms(cls) -> Dict[str, str]:
        return {
            "entry level": "entry", "beginner": "entry", "none": "entry", "no experience": "entry",
            "intermediate": "mid", "mid level": "mid", "some experience": "mid",
            "advanced": "senior", "experienced": "senior",
        }

    @property
    def ordinal(self) -> Optional[int]:
        return {"entry": 0, "mid": 1, "senior": 2}.get(self.value)


class WorkMode(_ParsableEnum):
    REMOTE = "remote"
    HYBRID = "hybrid"
    ON_SITE = "on-site"
    UNKNOWN = "unknown"

    @classmethod
    def _synonyms(cls) -> Dict[str, str]:
        return {
            "onsite": "on-site", "on site": "on-site", "in person": "on-site",
            "in_person": "on-site", "inperson": "on-site", "office": "on-site",
            "in office": "on-site", "virtual": "remote",
        }


class TermSeason(_ParsableEnum):
    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"
    WINTER = "winter"
    UNKNOWN = "unknown"

    @classmethod
    def _synonyms(cls) -> Dict[str, str]:
        return {"autumn": "fall"}


class TransportMode(_ParsableEnum):
    CAR = "car"
    TRANSIT = "transit"
    BIKE = "bike"
    WALK = "walk"
    UNKNOWN = "unknown"

    @classmethod
    def _synonyms(cls) -> Dict[str, str]:
        return {
            "drive": "car", "driving": "car", "public transit": "transit",
            "bus": "transit", "train": "transit", "subway": "transit",
            "bicycle": "bike", "cycling": "bike", "walking": "walk",
        }


class RemoteScope(_ParsableEnum):
    ANYWHERE = "anywhere"
    COUNTRY = "country"
    STATES = "states"
    UNKNOWN = "unknown"

    @classmethod
    def _synonyms(cls) -> Dict[str, str]:
        return {
            "global": "anywhere", "worldwide": "anywhere",
            "us": "country", "usa": "country", "us only": "country", "nationwide": "country",
            "state": "states", "specific states": "states",
        }


# Student-side scalar or set: the value, or UNKNOWN
MaybeLabels = Union[LabelSet, Unknown]
MaybeInt = Union[int, Unknown]
MaybeFloat = Union[float, Unknown]
MaybeStr = Union[str, Unknown]


@dataclass(frozen=True)
class GeoPoint:
    """A place, any part of which may be unknown."""

    city: MaybeStr = UNKNOWN
    state: MaybeStr = UNKNOWN
    zip_code: MaybeStr = UNKNOWN
    latitude: MaybeFloat = UNKNOWN
    longitude: MaybeFloat = UNKNOWN

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not UNKNOWN and self.longitude is not UNKNOWN

    @property
    def is_unknown(self) -> bool:
        return (
            self.city is UNKNOWN
            and self.state is UNKNOWN
            and self.zip_code is UNKNOWN
            and not self.has_coordinates
        )

    def describe(self) -> str:
        """Human-readable "City, ST" text ('' when nothing is known)."""
        parts = [part for part in (self.city, self.state) if part is not UNKNOWN]
        return ", ".join(parts)


@dataclass(frozen=True)
class NormalizedStudentProfile:
    """A student profile ready for evaluation."""

    student_id: str
    school: MaybeStr = UNKNOWN
    primary_major_id: Optional[str] = None
    secondary_major_id: Optional[str] = None
    majors: MaybeLabels = UNKNOWN
    year: YearInSchool = YearInSchool.UNKNOWN
    experience: StudentExperienceLevel = StudentExperienceLevel.UNKNOWN
    skills: MaybeLabels = UNKNOWN
    coursework: MaybeLabels = UNKNOWN
    availability_start_month: MaybeInt = UNKNOWN
    availability_hours_per_week: MaybeFloat = UNKNOWN
    location: GeoPoint = field(default_factory=GeoPoint)
    max_commute_minutes: MaybeInt = UNKNOWN
    transport_mode: TransportMode = TransportMode.UNKNOWN
    preferred_work_modes: FrozenSet[WorkMode] = frozenset()
    remote_only: bool = False
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class NormalizedInternshipListing:
    """An internship listing ready for evaluation.

    Empty label sets mean the listing does not constrain that dimension.
    ``term_months`` is the ordered month window and may wrap the year
    (winter is (12, 1, 2)).
    """

    internship_id: str
    employer_id: Optional[str] = None
    title: str = ""
    category: Optional[str] = None
    required_skills: LabelSet = field(default_factory=LabelSet)
    preferred_skills: LabelSet = field(default_factory=LabelSet)
    coursework: LabelSet = field(default_factory=LabelSet)
    majors: LabelSet = field(default_factory=LabelSet)
    target_years: FrozenSet[YearInSchool] = frozenset()
    experience: InternshipExperienceLevel = InternshipExperienceLevel.UNKNOWN
    work_mode: WorkMode = WorkMode.UNKNOWN
    term_season: TermSeason = TermSeason.UNKNOWN
    term_label: Optional[str] = None
    term_months: Tuple[int, ...] = ()
    hours_min: Optional[float] = None
    hours_max: Optional[float] = None
    pay_min: Optional[float] = None
    pay_max: Optional[float] = None
    location: GeoPoint = field(default_factory=GeoPoint)
    remote_allowed: bool = False
    remote_scope: RemoteScope = RemoteScope.UNKNOWN
    remote_states: FrozenSet[str] = frozenset()
    application_deadline: Optional[datetime] = None
    is_active: bool = True
    created_at: Optional[datetime] = None


__all__ = [
    "UNKNOWN",
    "Unknown",
    "LabelSet",
    "YearInSchool",
    "StudentExperienceLevel",
    "InternshipExperienceLevel",
    "WorkMode",
    "TermSeason",
    "TransportMode",
    "RemoteScope",
    "GeoPoint",
    "NormalizedStudentProfile",
    "NormalizedInternshipListing",
]
