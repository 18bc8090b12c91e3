"""Reason and gap text generation.

Reasons explain where a pair scored; gaps name required dimensions where it
did not. Both come from fixed templates so the same contribution always
produces the same text.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from .models import Gap, MatchStatus, PerSignalContribution, Reason
from .signals import DEFAULT_SCORING_MODEL, ScoringModel, ScoringSettings, SignalKey, SignalKind

REASON_LABELS: Dict[SignalKey, str] = {
    SignalKey.SKILLS_REQUIRED: "Required skills",
    SignalKey.SKILLS_PREFERRED: "Preferred skills",
    SignalKey.MAJOR_ALIGNMENT: "Major alignment",
    SignalKey.COURSEWORK_ALIGNMENT: "Coursework",
    SignalKey.EXPERIENCE_ALIGNMENT: "Experience",
    SignalKey.LOCATION_MODE_FIT: "Location/work mode",
    SignalKey.YEAR_IN_SCHOOL: "Year in school",
    SignalKey.TERM_AVAILABILITY: "Availability",
}

GAP_KEYS: Dict[SignalKey, str] = {
    SignalKey.SKILLS_REQUIRED: "missing_required_skills",
    SignalKey.MAJOR_ALIGNMENT: "major_mismatch",
    SignalKey.COURSEWORK_ALIGNMENT: "missing_coursework",
    SignalKey.EXPERIENCE_ALIGNMENT: "experience_mismatch",
    SignalKey.LOCATION_MODE_FIT: "location_mismatch",
    SignalKey.YEAR_IN_SCHOOL: "year_not_targeted",
    SignalKey.TERM_AVAILABILITY: "availability_mismatch",
}

# What to ask for when the student left a dimension empty
_PROFILE_PROMPTS: Dict[SignalKey, str] = {
    SignalKey.SKILLS_REQUIRED: "skills",
    SignalKey.SKILLS_PREFERRED: "skills",
    SignalKey.MAJOR_ALIGNMENT: "major",
    SignalKey.COURSEWORK_ALIGNMENT: "coursework",
    SignalKey.EXPERIENCE_ALIGNMENT: "experience level",
    SignalKey.LOCATION_MODE_FIT: "location and work mode preferences",
    SignalKey.YEAR_IN_SCHOOL: "year in school",
    SignalKey.TERM_AVAILABILITY: "availability",
}


def _join(values: Sequence[str]) -> str:
    return ", ".join(values)


def _reason_details(c: PerSignalContribution) -> str:
    if c.signal_key in (
        SignalKey.SKILLS_REQUIRED,
        SignalKey.SKILLS_PREFERRED,
        SignalKey.COURSEWORK_ALIGNMENT,
        SignalKey.MAJOR_ALIGNMENT,
        SignalKey.YEAR_IN_SCHOOL,
    ):
        return _join(c.matched) or c.detail
    return c.detail


def _gap_text(c: PerSignalContribution) -> str:
    if c.status is MatchStatus.UNKNOWN:
        prompt = f"Add your {_PROFILE_PROMPTS[c.signal_key]} to your profile"
        if c.missing:
            return f"{prompt} (listing asks for: {_join(c.missing)})"
        return prompt

    key = c.signal_key
    if key is SignalKey.SKILLS_REQUIRED:
        return f"Missing required skills: {_join(c.missing)}"
    if key is SignalKey.MAJOR_ALIGNMENT:
        return f"Major not targeted (listing looks for: {_join(c.missing)})"
    if key is SignalKey.COURSEWORK_ALIGNMENT:
        return f"Missing recommended coursework: {_join(c.missing)}"
    if key is SignalKey.EXPERIENCE_ALIGNMENT:
        return f"Experience mismatch: {c.detail}"
    if key is SignalKey.LOCATION_MODE_FIT:
        return f"Location/work mode mismatch: {c.detail}"
    if key is SignalKey.YEAR_IN_SCHOOL:
        return f"Year in school not targeted (listing targets: {_join(c.missing)})"
    return f"Availability mismatch: {c.detail}"


class ReasonGapGenerator:
    """Turns contributions into ordered reasons and gaps.

    Reasons are sorted by points descending and gaps by weight descending;
    ties keep model order. Lists are returned in full and callers slice
    them for display.
    """

    def __init__(
        self,
        settings: Optional[ScoringSettings] = None,
        model: Optional[ScoringModel] = None,
    ):
        self.model = model or DEFAULT_SCORING_MODEL
        self.settings = settings or self.model.settings

    def is_reason(self, c: PerSignalContribution) -> bool:
        if c.status not in (MatchStatus.MATCH, MatchStatus.PARTIAL) or c.weight <= 0:
            return False
        kind = self.model.signal(c.signal_key).kind
        threshold = (
            self.settings.boolean_reason if kind is SignalKind.BOOLEAN else self.settings.ratio_reason
        )
        return c.ratio >= threshold

    def is_gap(self, c: PerSignalContribution) -> bool:
        if not c.required or c.status is MatchStatus.NO_CONSTRAINT:
            return False
        return c.ratio <= self.settings.gap_threshold

    def generate(
        self, contributions: Sequence[PerSignalContribution]
    ) -> Tuple[List[Reason], List[Gap]]:
        """Build reasons and gaps for one pair."""
        reasons = [
            Reason(
                key=c.signal_key.value,
                text=f"{REASON_LABELS[c.signal_key]}: {_reason_details(c)} (+{c.points_awarded:.1f})",
                signal_key=c.signal_key,
                points=c.points_awarded,
            )
            for c in sorted(
                (c for c in contributions if self.is_reason(c)),
                key=lambda c: (-c.points_awarded, self.model.order_of(c.signal_key)),
            )
        ]

        gaps = [
            Gap(
                key=GAP_KEYS.get(c.signal_key, c.signal_key.value),
                text=_gap_text(c),
                signal_key=c.signal_key,
                weight=c.weight,
            )
            for c in sorted(
                (c for c in contributions if self.is_gap(c)),
                key=lambda c: (-c.weight, self.model.order_of(c.signal_key)),
            )
        ]

        return reasons, gaps
