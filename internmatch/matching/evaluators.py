"""Signal evaluators: one pure function per SignalKey.

Each evaluator takes a normalized student, a normalized listing and the
model's ScoringSettings and returns a SignalEvaluation whose raw_value lies
in [0, 1]. Evaluators are total: missing data on either side is a defined
outcome, never an exception.

Conventions:
- an empty constraint on the listing side is an automatic pass
  (status no_constraint, raw 1.0)
- a constraint the student has not filled in scores 0 with status unknown
"""

import calendar
from typing import Callable, Dict, List, Tuple

from internmatch.catalog.models import LabelSet
from internmatch.normalization.geo import haversine_km
from internmatch.normalization.models import (
    UNKNOWN,
    InternshipExperienceLevel,
    NormalizedInternshipListing,
    NormalizedStudentProfile,
    RemoteScope,
    StudentExperienceLevel,
    TransportMode,
    WorkMode,
    YearInSchool,
)
from internmatch.utils import normalize_token

from .exceptions import ScoringModelError
from .models import MatchStatus, SignalEvaluation
from .signals import ScoringSettings, SignalKey

Evaluator = Callable[
    [NormalizedStudentProfile, NormalizedInternshipListing, ScoringSettings], SignalEvaluation
]


def _no_constraint(detail: str) -> SignalEvaluation:
    return SignalEvaluation(raw_value=1.0, status=MatchStatus.NO_CONSTRAINT, detail=detail)


def _status_for(ratio: float) -> MatchStatus:
    if ratio >= 1.0:
        return MatchStatus.MATCH
    if ratio > 0.0:
        return MatchStatus.PARTIAL
    return MatchStatus.MISS


def _overlap(student, listing: LabelSet, required: bool, what: str) -> SignalEvaluation:
    """Share of the listing's labels the student has."""
    if not listing:
        return _no_constraint(f"No {what} listed")

    wanted = listing.ordered_keys()
    if student is UNKNOWN:
        return SignalEvaluation(
            raw_value=0.0,
            status=MatchStatus.UNKNOWN,
            required=required,
            detail=f"Student has not listed {what}",
            missing=tuple(listing.display(key) for key in wanted),
        )

    hits = (student.ids & listing.ids) | (student.custom & listing.custom)
    matched = tuple(listing.display(key) for key in wanted if key in hits)
    missing = tuple(listing.display(key) for key in wanted if key not in hits)
    ratio = len(hits) / len(listing)

    return SignalEvaluation(
        raw_value=ratio,
        status=_status_for(ratio),
        required=required,
        detail=f"{len(matched)} of {len(listing)} {what}",
        matched=matched,
        missing=missing,
    )


def evaluate_skills_required(student, internship, settings) -> SignalEvaluation:
    return _overlap(student.skills, internship.required_skills, True, "required skills")


def evaluate_skills_preferred(student, internship, settings) -> SignalEvaluation:
    return _overlap(student.skills, internship.preferred_skills, False, "preferred skills")


def evaluate_coursework_alignment(student, internship, settings) -> SignalEvaluation:
    return _overlap(student.coursework, internship.coursework, True, "recommended coursework")


def evaluate_major_alignment(student, internship, settings) -> SignalEvaluation:
    """Canonical major overlap, with partial credit for a free-text match.

    The free-text comparison uses the student's custom majors plus the
    names of their canonical majors, against the listing's custom majors and
    its category.
    """
    listing = internship.majors
    if not listing:
        return _no_constraint("Open to all majors")

    wanted = tuple(listing.display_names())
    if student.majors is UNKNOWN:
        return SignalEvaluation(
            raw_value=0.0,
            status=MatchStatus.UNKNOWN,
            required=True,
            detail="Student has not listed a major",
            missing=wanted,
        )

    shared_ids = student.majors.ids & listing.ids
    if shared_ids:
        matched = tuple(listing.display(key) for key in listing.ordered_keys() if key in shared_ids)
        return SignalEvaluation(
            raw_value=1.0,
            status=MatchStatus.MATCH,
            required=True,
            detail="Major is a target major",
            matched=matched,
        )

    student_tokens: Dict[str, str] = {}
    for key in student.majors.ordered_keys():
        name = student.majors.display(key)
        token = key if key in student.majors.custom else normalize_token(name)
        if token:
            student_tokens.setdefault(token, name)

    listing_tokens = set(listing.custom)
    if internship.category:
        listing_tokens.add(normalize_token(internship.category))

    shared_tokens = [token for token in student_tokens if token in listing_tokens]
    if shared_tokens:
        return SignalEvaluation(
            raw_value=settings.free_text_major,
            status=MatchStatus.PARTIAL,
            required=True,
            detail="Major matches the listing by name only",
            matched=tuple(student_tokens[token] for token in shared_tokens),
            missing=wanted,
        )

    return SignalEvaluation(
        raw_value=0.0,
        status=MatchStatus.MISS,
        required=True,
        detail="Major is not a target major",
        missing=wanted,
    )


def evaluate_experience_alignment(student, internship, settings) -> SignalEvaluation:
    """Ordinal comparison: none/entry, projects/mid, internship/senior."""
    level = internship.experience
    if level is InternshipExperienceLevel.UNKNOWN:
        return _no_constraint("No experience level specified")

    if student.experience is StudentExperienceLevel.UNKNOWN:
        return SignalEvaluation(
            raw_value=0.0,
            status=MatchStatus.UNKNOWN,
            required=True,
            detail="Student has not set an experience level",
            missing=(level.value,),
        )

    distance = abs(student.experience.ordinal - level.ordinal)
    described = f"{student.experience.value} experience for a {level.value}-level role"
    if distance == 0:
        return SignalEvaluation(
            1.0, MatchStatus.MATCH, True, described, matched=(student.experience.value,)
        )
    if distance == 1:
        return SignalEvaluation(
            settings.adjacent_experience,
            _status_for(settings.adjacent_experience),
            True,
            described,
            matched=(student.experience.value,),
            missing=(level.value,),
        )
    return SignalEvaluation(0.0, MatchStatus.MISS, True, described, missing=(level.value,))


def evaluate_year_in_school(student, internship, settings) -> SignalEvaluation:
    targets = internship.target_years
    if not targets or YearInSchool.ANY in targets:
        return _no_constraint("Open to all years")

    wanted = tuple(year.value.title() for year in YearInSchool if year in targets)
    if student.year is YearInSchool.UNKNOWN:
        return SignalEvaluation(
            0.0, MatchStatus.UNKNOWN, True, "Student has not set a year in school", missing=wanted
        )
    if student.year in targets:
        return SignalEvaluation(
            1.0, MatchStatus.MATCH, True, "Year is targeted", matched=(student.year.value.title(),)
        )
    return SignalEvaluation(
        0.0, MatchStatus.MISS, True, f"{student.year.value.title()} is not targeted", missing=wanted
    )


def _mode_label(mode: WorkMode) -> str:
    return {WorkMode.ON_SITE: "on-site"}.get(mode, mode.value)


def evaluate_location_mode_fit(student, internship, settings) -> SignalEvaluation:
    """Work mode preference, remote eligibility and commute.

    Checked in order; the first rule that decides wins:
    1. remote-only students cannot take on-site/hybrid roles without remote allowed
    2. a declared work-mode preference must include the listing's mode
    3. an unspecified listing mode is no constraint
    4. remote roles restricted to states require the student's state
    5. on-site/hybrid roles need a feasible commute or the same city
    """
    mode = internship.work_mode
    in_person = mode in (WorkMode.ON_SITE, WorkMode.HYBRID)

    if student.remote_only and in_person and not internship.remote_allowed:
        return SignalEvaluation(
            0.0, MatchStatus.MISS, True,
            f"Student is remote-only; role is {_mode_label(mode)}",
            missing=(_mode_label(mode),),
        )

    preferred = student.preferred_work_modes
    if preferred and mode is not WorkMode.UNKNOWN and mode not in preferred:
        if not (internship.remote_allowed and WorkMode.REMOTE in preferred):
            return SignalEvaluation(
                0.0, MatchStatus.MISS, True,
                f"Role is {_mode_label(mode)}; student prefers "
                + ", ".join(_mode_label(m) for m in WorkMode if m in preferred),
                missing=(_mode_label(mode),),
            )

    if mode is WorkMode.UNKNOWN:
        return _no_constraint("Work mode not specified")

    if mode is WorkMode.REMOTE:
        if internship.remote_scope is RemoteScope.STATES and internship.remote_states:
            states = tuple(sorted(internship.remote_states))
            if student.location.state is UNKNOWN:
                return SignalEvaluation(
                    0.0, MatchStatus.UNKNOWN, True,
                    "Remote role limited to certain states; student state unknown",
                    missing=states,
                )
            if student.location.state in internship.remote_states:
                return SignalEvaluation(
                    1.0, MatchStatus.MATCH, True,
                    f"Remote role open to {student.location.state}",
                    matched=(student.location.state,),
                )
            return SignalEvaluation(
                0.0, MatchStatus.MISS, True,
                f"Remote role not open to {student.location.state}",
                missing=states,
            )
        return SignalEvaluation(1.0, MatchStatus.MATCH, True, "Remote role", matched=("remote",))

    if internship.remote_allowed:
        return SignalEvaluation(
            1.0, MatchStatus.MATCH, True,
            f"{_mode_label(mode).capitalize()} role with remote option",
            matched=("remote option",),
        )

    place = internship.location
    if place.is_unknown:
        return _no_constraint("Location not specified")

    home = student.location
    where = place.describe() or "the listing location"

    if place.has_coordinates and home.has_coordinates and student.max_commute_minutes is not UNKNOWN:
        distance_km = haversine_km(home.latitude, home.longitude, place.latitude, place.longitude)
        mode_key = student.transport_mode.value
        if student.transport_mode is TransportMode.UNKNOWN:
            mode_key = TransportMode.TRANSIT.value
        minutes = distance_km / settings.speed_for(mode_key) * 60.0
        detail = f"About {round(minutes)} min by {mode_key} to {where} (max {student.max_commute_minutes})"
        if minutes <= student.max_commute_minutes:
            return SignalEvaluation(1.0, MatchStatus.MATCH, True, detail, matched=(where,))
        return SignalEvaluation(0.0, MatchStatus.MISS, True, detail, missing=(where,))

    if home.city is not UNKNOWN and place.city is not UNKNOWN:
        same_city = normalize_token(home.city) == normalize_token(place.city)
        states_known = home.state is not UNKNOWN and place.state is not UNKNOWN
        if same_city and (not states_known or home.state == place.state):
            return SignalEvaluation(
                1.0, MatchStatus.MATCH, True, f"{_mode_label(mode).capitalize()} in {where}",
                matched=(where,),
            )

    if home.city is UNKNOWN:
        return SignalEvaluation(
            0.0, MatchStatus.UNKNOWN, True,
            f"{_mode_label(mode).capitalize()} in {where}; student location unknown",
            missing=(where,),
        )

    return SignalEvaluation(
        0.0, MatchStatus.MISS, True,
        f"{_mode_label(mode).capitalize()} in {where}, outside the student's area",
        missing=(where,),
    )


def _month_name(month: int) -> str:
    return calendar.month_abbr[month]


def month_part(start, window: Tuple[int, ...]) -> float:
    """Credit for a start month against an ordered month window.

    Inside the window at index i: (len - i) / len. Outside: 1 if the month
    falls before the window opens, 0 if after it closes, judged by the
    shorter cyclic distance.
    """
    if start in window:
        index = window.index(start)
        return (len(window) - index) / len(window)
    months_until_open = (window[0] - start) % 12
    months_since_close = (start - window[-1]) % 12
    return 1.0 if months_until_open <= months_since_close else 0.0


def evaluate_term_availability(student, internship, settings) -> SignalEvaluation:
    """Mean of the month part and the hours part, for the parts the listing declares.

    Only ``hours_min`` is scored: a student available for more than
    ``hours_max`` can still work the listed hours, so the maximum only
    appears in the text.
    """
    parts: List[float] = []
    notes: List[str] = []
    matched: List[str] = []
    missing: List[str] = []
    unknown_parts = 0

    window = internship.term_months
    if window:
        term_text = f"{_month_name(window[0])}-{_month_name(window[-1])}"
        if internship.term_label:
            term_text = f"{internship.term_label} ({term_text})"
        if student.availability_start_month is UNKNOWN:
            parts.append(0.0)
            unknown_parts += 1
            notes.append("start month not provided")
            missing.append(term_text)
        else:
            part = month_part(student.availability_start_month, window)
            parts.append(part)
            notes.append(
                f"available from {_month_name(student.availability_start_month)} for {term_text}"
            )
            (matched if part > 0 else missing).append(term_text)

    if internship.hours_min:
        hours_text = f"{internship.hours_min:g} h/week"
        if internship.hours_max and internship.hours_max > internship.hours_min:
            hours_text = f"{internship.hours_min:g}-{internship.hours_max:g} h/week"
        if student.availability_hours_per_week is UNKNOWN:
            parts.append(0.0)
            unknown_parts += 1
            notes.append("weekly hours not provided")
            missing.append(hours_text)
        else:
            hours = student.availability_hours_per_week
            part = 1.0 if hours >= internship.hours_min else hours / internship.hours_min
            parts.append(part)
            notes.append(f"{hours:g} of {hours_text}")
            (matched if part >= 1.0 else missing).append(hours_text)

    if not parts:
        return _no_constraint("No term or hours specified")

    value = sum(parts) / len(parts)
    status = _status_for(value)
    if value == 0.0 and unknown_parts == len(parts):
        status = MatchStatus.UNKNOWN

    return SignalEvaluation(
        raw_value=value,
        status=status,
        required=True,
        detail="; ".join(notes),
        matched=tuple(matched),
        missing=tuple(missing),
    )


EVALUATORS: Dict[SignalKey, Evaluator] = {
    SignalKey.SKILLS_REQUIRED: evaluate_skills_required,
    SignalKey.SKILLS_PREFERRED: evaluate_skills_preferred,
    SignalKey.MAJOR_ALIGNMENT: evaluate_major_alignment,
    SignalKey.COURSEWORK_ALIGNMENT: evaluate_coursework_alignment,
    SignalKey.EXPERIENCE_ALIGNMENT: evaluate_experience_alignment,
    SignalKey.LOCATION_MODE_FIT: evaluate_location_mode_fit,
    SignalKey.YEAR_IN_SCHOOL: evaluate_year_in_school,
    SignalKey.TERM_AVAILABILITY: evaluate_term_availability,
}


def check_evaluator_coverage(evaluators: Dict[SignalKey, Evaluator] = EVALUATORS) -> None:
    """Fail loudly if any signal has no evaluator.

    Raises:
        ScoringModelError: Listing the signals without an evaluator
    """
    missing = [key.value for key in SignalKey if key not in evaluators]
    if missing:
        raise ScoringModelError(
            "Signals without an evaluator",
            errors=[f"No evaluator registered for '{key}'" for key in missing],
        )


check_evaluator_coverage()
