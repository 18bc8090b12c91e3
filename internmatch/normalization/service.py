"""Profile normalization: raw rows in, evaluator-ready shapes out.

This module implements the normalization logic that:
1. Resolves skills, coursework and majors through the catalog resolver
2. Maps free-text enums (year, experience, work mode) onto closed enums
3. Derives the internship term window and season
4. Marks missing student data with the UNKNOWN sentinel

Normalization runs once per row; evaluators never look at raw text.
"""

import logging
import re
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from internmatch.catalog import CatalogKind, CatalogResolver, LabelSet
from internmatch.domain.models import RawInternship, RawStudentProfile
from internmatch.logging import get_logger
from internmatch.utils import normalize_token

from .geo import month_window, normalize_state, parse_month
from .models import (
    UNKNOWN,
    GeoPoint,
    InternshipExperienceLevel,
    NormalizedInternshipListing,
    NormalizedStudentProfile,
    RemoteScope,
    StudentExperienceLevel,
    TermSeason,
    TransportMode,
    WorkMode,
    YearInSchool,
)

logger = get_logger(__name__, component="normalization")

SEASON_WINDOWS: Dict[TermSeason, Tuple[int, ...]] = {
    TermSeason.SPRING: (1, 2, 3, 4),
    TermSeason.SUMMER: (5, 6, 7, 8),
    TermSeason.FALL: (9, 10, 11, 12),
    TermSeason.WINTER: (12, 1, 2),
}

CLOSED_STATUSES = {"closed", "draft", "archived", "expired", "filled", "paused"}

_DESCRIPTION_LINE = re.compile(
    r"^\s*(required skills|preferred skills|category|season|majors?)\s*:\s*(.+?)\s*$",
    re.IGNORECASE | re.MULTILINE,
)
_MODE_SUFFIX = re.compile(r"\(([^)]*)\)\s*$")
_MONTH_WORD = r"\b(jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
_TERM_RANGE = re.compile(_MONTH_WORD + r"\.?\s+(\d{4})\s*[-–]\s*" + _MONTH_WORD + r"\.?\s+(\d{4})", re.IGNORECASE)
_TERM_SINGLE = re.compile(_MONTH_WORD + r"\.?\s+(\d{4})", re.IGNORECASE)


def season_from_month(month: int) -> TermSeason:
    """Meteorological season for a month (Mar-May spring, Jun-Aug summer, ...)."""
    if month in (3, 4, 5):
        return TermSeason.SPRING
    if month in (6, 7, 8):
        return TermSeason.SUMMER
    if month in (9, 10, 11):
        return TermSeason.FALL
    return TermSeason.WINTER


def parse_description_fields(description: Optional[str]) -> Dict[str, str]:
    """Pull ``Label: value`` lines out of a listing description.

    Listings created from templates carry their structured fields as lines
    such as ``Required skills: SQL, Excel``. Only the first occurrence of
    each label is used.

    Example:
        >>> parse_description_fields("Category: Finance\\nSeason: Summer")
        {'category': 'Finance', 'season': 'Summer'}
    """
    fields: Dict[str, str] = {}
    if not description:
        return fields
    for match in _DESCRIPTION_LINE.finditer(description):
        key = normalize_token(match.group(1)).replace(" ", "_")
        if key == "major":
            key = "majors"
        fields.setdefault(key, match.group(2))
    return fields


def derive_term(
    term: Optional[str],
    start_month: Optional[str] = None,
    end_month: Optional[str] = None,
    season_hint: Optional[str] = None,
) -> Tuple[TermSeason, Tuple[int, ...]]:
    """Work out the season and ordered month window of a listing.

    Precedence: explicit start/end months, then a "Month YYYY - Month YYYY"
    range in the term text, then a single "Month YYYY", then a season
    keyword (in the term text or the description's Season line).

    Returns:
        (season, months); months is empty when nothing could be derived
    """
    months: Tuple[int, ...] = ()
    start = parse_month(start_month)
    end = parse_month(end_month)
    text = term or ""

    if start is not None:
        months = month_window(start, end) if end is not None else (start,)
    else:
        range_match = _TERM_RANGE.search(text)
        single_match = _TERM_SINGLE.search(text)
        if range_match:
            months = month_window(parse_month(range_match.group(1)), parse_month(range_match.group(3)))
        elif single_match:
            months = (parse_month(single_match.group(1)),)

    keyword_season = TermSeason.UNKNOWN
    for source in (text, season_hint or ""):
        lowered = source.lower()
        for season in (TermSeason.SPRING, TermSeason.SUMMER, TermSeason.FALL, TermSeason.WINTER):
            if season.value in lowered:
                keyword_season = season
                break
        if keyword_season is TermSeason.UNKNOWN and "autumn" in lowered:
            keyword_season = TermSeason.FALL
        if keyword_season is not TermSeason.UNKNOWN:
            break

    if not months and keyword_season is not TermSeason.UNKNOWN:
        months = SEASON_WINDOWS[keyword_season]

    if keyword_season is not TermSeason.UNKNOWN:
        season = keyword_season
    elif months:
        season = season_from_month(months[0])
    else:
        season = TermSeason.UNKNOWN

    return season, months


def _positive(value: Optional[float]) -> Optional[float]:
    return value if value is not None and value > 0 else None


def _coordinate(value: Optional[float], limit: float):
    if value is None or abs(value) > limit:
        return UNKNOWN
    return float(value)


def _text_or_unknown(value: Optional[str]):
    return value.strip() if value and value.strip() else UNKNOWN


RawRow = Union[RawStudentProfile, RawInternship, Mapping[str, Any]]


class ProfileNormalizer:
    """Turns raw student and internship rows into normalized shapes.

    Pure apart from logging: the same rows and catalog always normalize to
    equal objects.
    """

    def __init__(
        self,
        resolver: Optional[CatalogResolver] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize ProfileNormalizer.

        Args:
            resolver: Catalog resolver (an empty catalog when omitted, which
                keeps every label as a custom token)
            logger_instance: Logger instance (defaults to module logger)
        """
        self.resolver = resolver or CatalogResolver()
        self.logger = logger_instance or logger

    # Students

    def normalize_student(
        self, raw: Union[RawStudentProfile, Mapping[str, Any]]
    ) -> NormalizedStudentProfile:
        """Normalize a single student profile row."""
        if not isinstance(raw, RawStudentProfile):
            raw = RawStudentProfile.model_validate(raw)

        majors = self.resolver.labels_for_ids(
            CatalogKind.MAJOR, [raw.major_id, raw.secondary_major_id]
        ).union(self.resolver.resolve_many(CatalogKind.MAJOR, raw.majors))

        skills = self.resolver.labels_for_ids(CatalogKind.SKILL, raw.skill_ids).union(
            self.resolver.resolve_many(CatalogKind.SKILL, raw.skills)
        )

        coursework = self._coursework(
            raw.coursework_category_ids, raw.coursework_item_ids, raw.coursework
        )

        year = YearInSchool.parse(raw.year)
        if year is YearInSchool.ANY:
            year = YearInSchool.UNKNOWN

        start_month = parse_month(raw.availability_start_month)
        hours = _positive(raw.availability_hours_per_week)
        commute = _positive(raw.max_commute_minutes)

        work_modes = frozenset(
            mode
            for mode in (WorkMode.parse(value) for value in raw.preferred_work_modes)
            if mode is not WorkMode.UNKNOWN
        )

        return NormalizedStudentProfile(
            student_id=raw.id,
            school=_text_or_unknown(raw.school),
            primary_major_id=raw.major_id,
            secondary_major_id=raw.secondary_major_id,
            majors=majors if majors else UNKNOWN,
            year=year,
            experience=StudentExperienceLevel.parse(raw.experience_level),
            skills=skills if skills else UNKNOWN,
            coursework=coursework if coursework else UNKNOWN,
            availability_start_month=start_month if start_month is not None else UNKNOWN,
            availability_hours_per_week=hours if hours is not None else UNKNOWN,
            location=GeoPoint(
                city=_text_or_unknown(raw.preferred_city),
                state=normalize_state(raw.preferred_state) or UNKNOWN,
                zip_code=_text_or_unknown(raw.preferred_zip),
                latitude=_coordinate(raw.latitude, 90.0),
                longitude=_coordinate(raw.longitude, 180.0),
            ),
            max_commute_minutes=int(round(commute)) if commute is not None else UNKNOWN,
            transport_mode=TransportMode.parse(raw.transport_mode),
            preferred_work_modes=work_modes,
            remote_only=raw.remote_only,
            created_at=raw.created_at,
        )

    # Internships

    def normalize_internship(
        self, raw: Union[RawInternship, Mapping[str, Any]]
    ) -> NormalizedInternshipListing:
        """Normalize a single internship row."""
        if not isinstance(raw, RawInternship):
            raw = RawInternship.model_validate(raw)

        described = parse_description_fields(raw.description)

        required_skills = self.resolver.labels_for_ids(
            CatalogKind.SKILL, raw.required_skill_ids
        ).union(
            self.resolver.resolve_many(
                CatalogKind.SKILL,
                [*raw.required_skills, *_split(described.get("required_skills"))],
            )
        )
        preferred_skills = self.resolver.labels_for_ids(
            CatalogKind.SKILL, raw.preferred_skill_ids
        ).union(
            self.resolver.resolve_many(
                CatalogKind.SKILL,
                [*raw.preferred_skills, *_split(described.get("preferred_skills"))],
            )
        )

        majors = self.resolver.labels_for_ids(CatalogKind.MAJOR, raw.major_ids).union(
            self.resolver.resolve_many(
                CatalogKind.MAJOR, [*raw.majors, *_split(described.get("majors"))]
            )
        )

        coursework = self._coursework(
            raw.coursework_category_ids, raw.coursework_item_ids, raw.recommended_coursework
        )

        target_years = frozenset(
            year
            for year in (YearInSchool.parse(value) for value in raw.target_student_years)
            if year is not YearInSchool.UNKNOWN
        )

        work_mode, location_text = self._work_mode(raw.work_mode, raw.location)
        city, state = self._city_state(raw.location_city, raw.location_state, location_text)

        remote_states = frozenset(
            state_code
            for state_code in (normalize_state(value) for value in raw.remote_eligible_states)
            if state_code
        )
        remote_scope = RemoteScope.parse(raw.remote_eligibility_scope)
        if remote_scope is RemoteScope.UNKNOWN and remote_states:
            remote_scope = RemoteScope.STATES

        season, months = derive_term(
            raw.term, raw.start_month, raw.end_month, described.get("season")
        )

        hours_min = _positive(raw.hours_per_week_min) or _positive(raw.hours_per_week)
        hours_max = _positive(raw.hours_per_week_max) or _positive(raw.hours_per_week)

        is_active = raw.is_active if raw.is_active is not None else True
        if raw.status and raw.status.strip().lower() in CLOSED_STATUSES:
            is_active = False

        return NormalizedInternshipListing(
            internship_id=raw.id,
            employer_id=raw.employer_id,
            title=raw.title or "",
            category=raw.category or raw.role_category or described.get("category"),
            required_skills=required_skills,
            preferred_skills=preferred_skills,
            coursework=coursework,
            majors=majors,
            target_years=target_years,
            experience=InternshipExperienceLevel.parse(raw.experience_level),
            work_mode=work_mode,
            term_season=season,
            term_label=raw.term,
            term_months=months,
            hours_min=hours_min,
            hours_max=hours_max,
            pay_min=raw.pay_min,
            pay_max=raw.pay_max,
            location=GeoPoint(
                city=city or UNKNOWN,
                state=state or UNKNOWN,
                latitude=_coordinate(raw.latitude, 90.0),
                longitude=_coordinate(raw.longitude, 180.0),
            ),
            remote_allowed=raw.remote_allowed,
            remote_scope=remote_scope,
            remote_states=remote_states,
            application_deadline=raw.application_deadline,
            is_active=is_active,
            created_at=raw.created_at,
        )

    # Batches

    def normalize_students(self, rows: Iterable[RawRow]) -> Iterator[NormalizedStudentProfile]:
        """Normalize many student rows, logging and skipping failures."""
        yield from self._normalize_batch(rows, self.normalize_student, "student")

    def normalize_internships(
        self, rows: Iterable[RawRow]
    ) -> Iterator[NormalizedInternshipListing]:
        """Normalize many internship rows, logging and skipping failures."""
        yield from self._normalize_batch(rows, self.normalize_internship, "internship")

    def _normalize_batch(self, rows, normalize, row_type: str):
        for index, row in enumerate(rows):
            try:
                yield normalize(row)
            except Exception as e:
                row_id = getattr(row, "id", None)
                if row_id is None and isinstance(row, Mapping):
                    row_id = row.get("id")
                self.logger.warning(
                    f"Skipping {row_type} row {row_id or index}: {e}",
                    extra={
                        "event": "normalization.row.skipped",
                        "row_type": row_type,
                        "row_id": row_id,
                        "row_index": index,
                        "error_type": type(e).__name__,
                    },
                )

    # Helpers

    def _coursework(
        self,
        category_ids: Iterable[str],
        item_ids: Iterable[str],
        labels: Iterable[str],
    ) -> LabelSet:
        """Coursework as category ids; items fold into their category."""
        folded: List[str] = list(category_ids)
        unmatched_items: List[str] = []
        for item_id in item_ids:
            category_id = self.resolver.category_for_item(item_id)
            if category_id:
                folded.append(category_id)
            else:
                unmatched_items.append(self.resolver.label_for(CatalogKind.COURSEWORK_ITEM, item_id) or item_id)

        free_text: List[str] = []
        for label in labels:
            category = self.resolver.resolve(CatalogKind.COURSEWORK_CATEGORY, label)
            if category.canonical_id:
                folded.append(category.canonical_id)
                continue
            item = self.resolver.resolve(CatalogKind.COURSEWORK_ITEM, label)
            category_id = self.resolver.category_for_item(item.canonical_id) if item.canonical_id else None
            if category_id:
                folded.append(category_id)
            else:
                free_text.append(label)

        return self.resolver.labels_for_ids(CatalogKind.COURSEWORK_CATEGORY, folded).union(
            self.resolver.resolve_many(CatalogKind.COURSEWORK_CATEGORY, [*unmatched_items, *free_text])
        )

    @staticmethod
    def _work_mode(work_mode: Optional[str], location: Optional[str]) -> Tuple[WorkMode, str]:
        """Work mode from the field, else from a "(Hybrid)" location suffix.

        Returns:
            (mode, location text with any suffix removed)
        """
        location_text = (location or "").strip()
        suffix_mode = WorkMode.UNKNOWN
        suffix = _MODE_SUFFIX.search(location_text)
        if suffix:
            suffix_mode = WorkMode.parse(suffix.group(1))
            location_text = location_text[: suffix.start()].strip()

        mode = WorkMode.parse(work_mode)
        if mode is WorkMode.UNKNOWN:
            mode = suffix_mode
        if mode is WorkMode.UNKNOWN and WorkMode.parse(location_text) is WorkMode.REMOTE:
            mode = WorkMode.REMOTE
        return mode, location_text

    @staticmethod
    def _city_state(
        city: Optional[str], state: Optional[str], location_text: str
    ) -> Tuple[Optional[str], Optional[str]]:
        """City and USPS state, falling back to a "City, ST" location string."""
        if WorkMode.parse(location_text) is WorkMode.REMOTE:
            location_text = ""

        parsed_city: Optional[str] = None
        parsed_state: Optional[str] = None
        if location_text:
            parts = [part.strip() for part in location_text.split(",") if part.strip()]
            if parts:
                parsed_city = parts[0]
            if len(parts) > 1:
                parsed_state = parts[1]

        return (city or parsed_city), normalize_state(state or parsed_state)


def _split(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]
