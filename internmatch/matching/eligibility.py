"""Hard-constraint eligibility for a scored pair.

Scoring never excludes a listing; callers that only want listings a
student can actually take filter with these helpers. A pair is ineligible
when:
- the work mode, remote rules or location rule out the student
  (location_mode_fit is a miss)
- the student's start month falls after the term window closes
- the listing's minimum weekly hours exceed the student's availability

Unknown student data is never a failure here; it already costs points.
"""

from typing import List

from internmatch.normalization.models import (
    UNKNOWN,
    NormalizedInternshipListing,
    NormalizedStudentProfile,
)

from .evaluators import month_part
from .models import MatchResult, MatchStatus
from .signals import SignalKey


def eligibility_failures(
    student: NormalizedStudentProfile,
    internship: NormalizedInternshipListing,
    match: MatchResult,
) -> List[str]:
    """Hard-constraint failures for a scored pair, empty when eligible.

    Args:
        student: Normalized student the match was computed for
        internship: Normalized listing the match was computed for
        match: Result of MatchingEngine.evaluate for the pair

    Returns:
        One message per failed constraint
    """
    failures = []

    location = match.breakdown.contribution(SignalKey.LOCATION_MODE_FIT)
    if location is not None and location.status is MatchStatus.MISS:
        failures.append(f"Location or work mode mismatch: {location.detail}")

    window = internship.term_months
    start = student.availability_start_month
    if window and start is not UNKNOWN and month_part(start, window) == 0.0:
        term = internship.term_label or "the listing term"
        failures.append(f"Term mismatch ({term})")

    hours = student.availability_hours_per_week
    if internship.hours_min and hours is not UNKNOWN and hours < internship.hours_min:
        failures.append(
            f"Hours exceed availability ({internship.hours_min:g} > {hours:g} h/week)"
        )

    return failures


def is_eligible(
    student: NormalizedStudentProfile,
    internship: NormalizedInternshipListing,
    match: MatchResult,
) -> bool:
    return not eligibility_failures(student, internship, match)
