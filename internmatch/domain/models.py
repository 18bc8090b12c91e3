"""Raw input rows as they arrive from the host application.

- RawStudentProfile: one student profile row plus its skill/coursework links
- RawInternship: one internship listing row plus its skill/coursework links

These models are deliberately lenient. Source data is user-entered and
inconsistently typed, so unknown keys are ignored and values that cannot be
parsed (a "TBD" hour count, a malformed timestamp) become None instead of
failing validation. Only a missing id is rejected. Interpreting the values
(enums, months, states) is the Profile Normalizer's job.
"""

from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from internmatch.utils import parse_iso_datetime, split_labels

_TRUE_STRINGS = {"true", "yes", "y", "1", "on"}
_FALSE_STRINGS = {"false", "no", "n", "0", "off"}


def _optional_text(value: Any) -> Optional[str]:
    """Strip strings; numbers (zip codes, month numbers) become text."""
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    return text or None


def _optional_float(value: Any) -> Optional[float]:
    """Parse a number, returning None for blanks and garbage like 'TBD'."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip().replace(",", "")
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _optional_datetime(value: Any) -> Optional[datetime]:
    """Parse ISO strings, datetimes and YAML dates; anything else is None."""
    if isinstance(value, datetime):
        return parse_iso_datetime(value)
    if isinstance(value, date):
        return parse_iso_datetime(value.isoformat())
    if isinstance(value, str):
        return parse_iso_datetime(value)
    return None


def _optional_bool(value: Any) -> Optional[bool]:
    """Parse yes/no style flags; anything unrecognized is None."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    return None


class _RawRow(BaseModel):
    """Shared leniency rules for raw rows."""

    model_config = {"extra": "ignore"}

    @field_validator("id", mode="before", check_fields=False)
    @classmethod
    def require_id(cls, v: Any) -> str:
        """The id is the only field a row cannot do without."""
        text = _optional_text(v)
        if not text:
            raise ValueError("id cannot be empty")
        return text

    @field_validator("created_at", mode="before", check_fields=False)
    @classmethod
    def parse_created_at(cls, v: Any) -> Optional[datetime]:
        return _optional_datetime(v)


class RawStudentProfile(_RawRow):
    """A student profile row."""

    id: str = Field(..., description="Student (user) id")
    school: Optional[str] = None
    major_id: Optional[str] = Field(None, description="Canonical primary major id")
    secondary_major_id: Optional[str] = Field(None, description="Canonical secondary major id")
    majors: List[str] = Field(default_factory=list, description="Free-text majors")
    year: Optional[str] = Field(None, description="Year in school, free text")
    experience_level: Optional[str] = None
    skills: List[str] = Field(default_factory=list, description="Skill labels")
    skill_ids: List[str] = Field(default_factory=list, description="Canonical skill ids")
    coursework: List[str] = Field(default_factory=list, description="Coursework labels")
    coursework_category_ids: List[str] = Field(default_factory=list)
    coursework_item_ids: List[str] = Field(default_factory=list)
    availability_start_month: Optional[str] = Field(
        None, description="Month name, abbreviation, number or YYYY-MM"
    )
    availability_hours_per_week: Optional[float] = None
    preferred_city: Optional[str] = None
    preferred_state: Optional[str] = None
    preferred_zip: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    max_commute_minutes: Optional[float] = None
    transport_mode: Optional[str] = None
    preferred_work_modes: List[str] = Field(default_factory=list)
    remote_only: bool = False
    created_at: Optional[datetime] = None

    @field_validator(
        "school",
        "major_id",
        "secondary_major_id",
        "year",
        "experience_level",
        "availability_start_month",
        "preferred_city",
        "preferred_state",
        "preferred_zip",
        "transport_mode",
        mode="before",
    )
    @classmethod
    def clean_text(cls, v: Any) -> Optional[str]:
        return _optional_text(v)

    @field_validator(
        "majors",
        "skills",
        "skill_ids",
        "coursework",
        "coursework_category_ids",
        "coursework_item_ids",
        "preferred_work_modes",
        mode="before",
    )
    @classmethod
    def clean_labels(cls, v: Any) -> List[str]:
        """Accept arrays or comma separated strings."""
        return split_labels(v)

    @field_validator(
        "availability_hours_per_week",
        "latitude",
        "longitude",
        "max_commute_minutes",
        mode="before",
    )
    @classmethod
    def clean_numbers(cls, v: Any) -> Optional[float]:
        return _optional_float(v)

    @field_validator("remote_only", mode="before")
    @classmethod
    def clean_remote_only(cls, v: Any) -> bool:
        return bool(_optional_bool(v))


class RawInternship(_RawRow):
    """An internship listing row."""

    id: str = Field(..., description="Internship id")
    employer_id: Optional[str] = None
    title: Optional[str] = None
    company_name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    role_category: Optional[str] = None
    majors: List[str] = Field(default_factory=list, description="Target majors, free text")
    major_ids: List[str] = Field(default_factory=list, description="Target canonical major ids")
    required_skills: List[str] = Field(default_factory=list)
    preferred_skills: List[str] = Field(default_factory=list)
    required_skill_ids: List[str] = Field(default_factory=list)
    preferred_skill_ids: List[str] = Field(default_factory=list)
    recommended_coursework: List[str] = Field(default_factory=list)
    coursework_category_ids: List[str] = Field(default_factory=list)
    coursework_item_ids: List[str] = Field(default_factory=list)
    target_student_years: List[str] = Field(default_factory=list)
    experience_level: Optional[str] = None
    work_mode: Optional[str] = None
    location: Optional[str] = None
    location_city: Optional[str] = None
    location_state: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    remote_allowed: bool = False
    remote_eligibility_scope: Optional[str] = None
    remote_eligible_states: List[str] = Field(default_factory=list)
    term: Optional[str] = Field(None, description="e.g. 'Summer 2026' or 'May 2026 - Aug 2026'")
    start_month: Optional[str] = None
    end_month: Optional[str] = None
    hours_per_week: Optional[float] = None
    hours_per_week_min: Optional[float] = None
    hours_per_week_max: Optional[float] = None
    pay_min: Optional[float] = None
    pay_max: Optional[float] = None
    application_deadline: Optional[datetime] = None
    status: Optional[str] = None
    is_active: Optional[bool] = None
    created_at: Optional[datetime] = None

    @field_validator(
        "employer_id",
        "title",
        "company_name",
        "description",
        "category",
        "role_category",
        "experience_level",
        "work_mode",
        "location",
        "location_city",
        "location_state",
        "remote_eligibility_scope",
        "term",
        "start_month",
        "end_month",
        "status",
        mode="before",
    )
    @classmethod
    def clean_text(cls, v: Any) -> Optional[str]:
        return _optional_text(v)

    @field_validator(
        "majors",
        "major_ids",
        "required_skills",
        "preferred_skills",
        "required_skill_ids",
        "preferred_skill_ids",
        "recommended_coursework",
        "coursework_category_ids",
        "coursework_item_ids",
        "target_student_years",
        "remote_eligible_states",
        mode="before",
    )
    @classmethod
    def clean_labels(cls, v: Any) -> List[str]:
        """Accept arrays or comma separated strings."""
        return split_labels(v)

    @field_validator(
        "latitude",
        "longitude",
        "hours_per_week",
        "hours_per_week_min",
        "hours_per_week_max",
        "pay_min",
        "pay_max",
        mode="before",
    )
    @classmethod
    def clean_numbers(cls, v: Any) -> Optional[float]:
        return _optional_float(v)

    @field_validator("remote_allowed", mode="before")
    @classmethod
    def clean_remote_allowed(cls, v: Any) -> bool:
        return bool(_optional_bool(v))

    @field_validator("is_active", mode="before")
    @classmethod
    def clean_is_active(cls, v: Any) -> Optional[bool]:
        return _optional_bool(v)

    @field_validator("application_deadline", mode="before")
    @classmethod
    def parse_deadline(cls, v: Any) -> Optional[datetime]:
        return _optional_datetime(v)
