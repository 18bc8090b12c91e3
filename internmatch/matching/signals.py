"""Signal catalog: the versioned scoring model.

A ScoringModel fixes which signals exist, how much each is worth, and the
partial-credit and threshold settings used to interpret them. The
(version -> model) registry guarantees that a matching_version stored on a
snapshot always means the same weights.
"""

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from internmatch.config.models import MatchingConfig
from internmatch.logging import get_logger
from internmatch.utils import compute_model_fingerprint

from .exceptions import ScoringModelError

logger = get_logger(__name__, component="matching")

DEFAULT_MATCHING_VERSION = "2.0.0"


class SignalKey(str, Enum):
    """Closed set of scoring signals, in model order."""

    SKILLS_REQUIRED = "skills_required"
    SKILLS_PREFERRED = "skills_preferred"
    MAJOR_ALIGNMENT = "major_alignment"
    COURSEWORK_ALIGNMENT = "coursework_alignment"
    EXPERIENCE_ALIGNMENT = "experience_alignment"
    LOCATION_MODE_FIT = "location_mode_fit"
    YEAR_IN_SCHOOL = "year_in_school"
    TERM_AVAILABILITY = "term_availability"


class SignalKind(str, Enum):
    """BOOLEAN signals are all-or-nothing; RATIO signals award partial credit."""

    BOOLEAN = "boolean"
    RATIO = "ratio"


@dataclass(frozen=True)
class SignalDefinition:
    key: SignalKey
    weight: float
    description: str
    kind: SignalKind = SignalKind.RATIO


DEFAULT_COMMUTE_SPEEDS_KMH = {
    "car": 40.0,
    "transit": 25.0,
    "bike": 15.0,
    "walk": 5.0,
}


@dataclass(frozen=True)
class ScoringSettings:
    """Partial credit, thresholds and commute speeds.

    Thresholds are fractions of a signal's weight:
    - a match/partial signal is a reason when points/weight >= boolean_reason
      (boolean signals) or ratio_reason (ratio signals)
    - a required signal is a gap when points/weight <= gap_threshold
    """

    adjacent_experience: float = 0.5
    free_text_major: float = 0.5
    boolean_reason: float = 0.99
    ratio_reason: float = 0.6
    gap_threshold: float = 0.0
    commute_speeds_kmh: Mapping[str, float] = field(
        default_factory=lambda: dict(DEFAULT_COMMUTE_SPEEDS_KMH)
    )

    def __post_init__(self):
        object.__setattr__(
            self, "commute_speeds_kmh", MappingProxyType(dict(self.commute_speeds_kmh))
        )

    def speed_for(self, mode: str) -> float:
        """Average speed for a transport mode; transit when unknown."""
        return self.commute_speeds_kmh.get(mode) or self.commute_speeds_kmh["transit"]

    def to_dict(self) -> Dict[str, object]:
        return {
            "adjacent_experience": self.adjacent_experience,
            "free_text_major": self.free_text_major,
            "boolean_reason": self.boolean_reason,
            "ratio_reason": self.ratio_reason,
            "gap_threshold": self.gap_threshold,
            "commute_speeds_kmh": dict(sorted(self.commute_speeds_kmh.items())),
        }

    def validate(self) -> List[str]:
        """Return a list of problems (empty when valid)."""
        errors = []
        for name in (
            "adjacent_experience",
            "free_text_major",
            "boolean_reason",
            "ratio_reason",
            "gap_threshold",
        ):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not 0.0 <= value <= 1.0:
                errors.append(f"{name} must be between 0 and 1, got {value}")
        if "transit" not in self.commute_speeds_kmh:
            errors.append("commute_speeds_kmh must define a 'transit' speed")
        for mode, speed in self.commute_speeds_kmh.items():
            if mode not in DEFAULT_COMMUTE_SPEEDS_KMH:
                errors.append(
                    f"Unknown transport mode '{mode}' in commute_speeds_kmh "
                    f"(expected one of: {', '.join(DEFAULT_COMMUTE_SPEEDS_KMH)})"
                )
            elif not isinstance(speed, (int, float)) or not speed > 0:
                errors.append(f"Commute speed for '{mode}' must be positive, got {speed}")
        return errors


class ScoringModel:
    """An immutable, versioned set of signal definitions plus settings.

    Raises:
        ScoringModelError: On an empty version, a missing or repeated
            signal, a non-positive weight, or invalid settings
    """

    def __init__(
        self,
        version: str,
        signals: Tuple[SignalDefinition, ...],
        settings: Optional[ScoringSettings] = None,
    ):
        self._version = (version or "").strip()
        self._signals = tuple(signals)
        self._settings = settings or ScoringSettings()
        self._validate()
        self._by_key = {signal.key: signal for signal in self._signals}
        self._fingerprint = compute_model_fingerprint(self.describe())

    def _validate(self) -> None:
        errors = []
        if not self._version:
            errors.append("matching version cannot be empty")

        seen = [signal.key for signal in self._signals]
        for key in SignalKey:
            count = seen.count(key)
            if count == 0:
                errors.append(f"Signal '{key.value}' is missing from the model")
            elif count > 1:
                errors.append(f"Signal '{key.value}' is defined {count} times")

        for signal in self._signals:
            if not isinstance(signal.key, SignalKey):
                errors.append(f"Unknown signal key: {signal.key!r}")
            weight = signal.weight
            if not isinstance(weight, (int, float)) or not math.isfinite(weight) or weight <= 0:
                errors.append(f"Weight for '{getattr(signal.key, 'value', signal.key)}' must be > 0, got {weight}")

        errors.extend(self._settings.validate())

        if errors:
            raise ScoringModelError(
                f"Invalid scoring model '{self._version or '<empty>'}'",
                errors=errors,
                suggestions=["Define every signal exactly once with a positive weight"],
            )

    @property
    def version(self) -> str:
        return self._version

    @property
    def signals(self) -> Tuple[SignalDefinition, ...]:
        return self._signals

    @property
    def settings(self) -> ScoringSettings:
        return self._settings

    @property
    def max_score(self) -> float:
        """Sum of all weights; independent of how complete the data is."""
        return float(sum(signal.weight for signal in self._signals))

    @property
    def fingerprint(self) -> str:
        return self._fingerprint

    @property
    def weights(self) -> Dict[str, float]:
        return {signal.key.value: float(signal.weight) for signal in self._signals}

    def signal(self, key: SignalKey) -> SignalDefinition:
        return self._by_key[SignalKey(key)]

    def order_of(self, key: SignalKey) -> int:
        """Position of a signal in the model, used to break ties."""
        return self._signals.index(self.signal(key))

    def describe(self) -> Dict[str, object]:
        """Everything that affects a score, as plain data."""
        return {
            "version": self._version,
            "signals": [
                {"key": s.key.value, "weight": float(s.weight), "kind": s.kind.value}
                for s in self._signals
            ],
            "settings": self._settings.to_dict(),
        }

    def with_overrides(
        self,
        version: str,
        weights: Optional[Mapping[str, float]] = None,
        settings: Optional[ScoringSettings] = None,
    ) -> "ScoringModel":
        """Derive a new model under a new version."""
        weights = dict(weights or {})
        unknown = sorted(set(weights) - {key.value for key in SignalKey})
        if unknown:
            raise ScoringModelError(
                "Unknown signal keys in weight overrides",
                errors=[f"Unknown signal: {key}" for key in unknown],
                suggestions=[f"Valid signals: {', '.join(key.value for key in SignalKey)}"],
            )
        signals = tuple(
            replace(signal, weight=weights.get(signal.key.value, signal.weight))
            for signal in self._signals
        )
        return ScoringModel(version, signals, settings or self._settings)

    def __eq__(self, other) -> bool:
        return isinstance(other, ScoringModel) and other.fingerprint == self.fingerprint

    def __hash__(self) -> int:
        return hash(self._fingerprint)

    def __repr__(self) -> str:
        return f"ScoringModel(version={self._version!r}, max_score={self.max_score})"


DEFAULT_SIGNALS: Tuple[SignalDefinition, ...] = (
    SignalDefinition(
        SignalKey.SKILLS_REQUIRED, 20,
        "Share of the listing's required skills the student has",
    ),
    SignalDefinition(
        SignalKey.SKILLS_PREFERRED, 10,
        "Share of the listing's preferred skills the student has",
    ),
    SignalDefinition(
        SignalKey.MAJOR_ALIGNMENT, 15,
        "Student major matches a target major (partial credit for a free-text match)",
    ),
    SignalDefinition(
        SignalKey.COURSEWORK_ALIGNMENT, 10,
        "Share of the recommended coursework categories the student has taken",
    ),
    SignalDefinition(
        SignalKey.EXPERIENCE_ALIGNMENT, 10,
        "Student experience level against the listing's level (partial credit when adjacent)",
    ),
    SignalDefinition(
        SignalKey.LOCATION_MODE_FIT, 10,
        "Work mode preference, remote eligibility and commute fit",
        SignalKind.BOOLEAN,
    ),
    SignalDefinition(
        SignalKey.YEAR_IN_SCHOOL, 10,
        "Student year is one the listing targets",
        SignalKind.BOOLEAN,
    ),
    SignalDefinition(
        SignalKey.TERM_AVAILABILITY, 15,
        "Start month inside the term window and enough weekly hours",
    ),
)

DEFAULT_SCORING_MODEL = ScoringModel(DEFAULT_MATCHING_VERSION, DEFAULT_SIGNALS)

_REGISTRY: Dict[str, ScoringModel] = {DEFAULT_MATCHING_VERSION: DEFAULT_SCORING_MODEL}


def register_scoring_model(model: ScoringModel) -> ScoringModel:
    """Register a model under its version.

    Re-registering an identical model is a no-op.

    Returns:
        The registered model

    Raises:
        ScoringModelError: If the version already maps to a different model
    """
    existing = _REGISTRY.get(model.version)
    if existing is not None:
        if existing.fingerprint != model.fingerprint:
            raise ScoringModelError(
                f"Matching version '{model.version}' is already registered with different weights or settings",
                errors=[
                    f"Registered fingerprint: {existing.fingerprint}",
                    f"New fingerprint: {model.fingerprint}",
                ],
                suggestions=["Set matching.version to a new version string when changing weights"],
            )
        return existing

    _REGISTRY[model.version] = model
    logger.info(
        f"Registered scoring model {model.version}",
        extra={
            "event": "matching.model.registered",
            "matching_version": model.version,
            "fingerprint": model.fingerprint,
            "max_score": model.max_score,
        },
    )
    return model


def get_scoring_model(version: str = DEFAULT_MATCHING_VERSION) -> ScoringModel:
    """Look up the model registered for a version.

    Raises:
        ScoringModelError: If no model is registered for the version
    """
    model = _REGISTRY.get(version)
    if model is None:
        raise ScoringModelError(
            f"No scoring model registered for matching version '{version}'",
            suggestions=[f"Registered versions: {', '.join(sorted(_REGISTRY))}"],
        )
    return model


def registered_versions() -> List[str]:
    return sorted(_REGISTRY)


def build_scoring_model(config: Optional[MatchingConfig] = None) -> ScoringModel:
    """Build and register the scoring model described by configuration.

    Without overrides this is the default model. Overrides are layered on
    top of the default weights and settings.

    Raises:
        ScoringModelError: On unknown signal keys, invalid settings, or a
            version that is already registered with different weights
    """
    if config is None:
        return DEFAULT_SCORING_MODEL

    if not config.is_customized and config.version in (None, DEFAULT_MATCHING_VERSION):
        return DEFAULT_SCORING_MODEL

    base = DEFAULT_SCORING_MODEL.settings
    speeds = dict(base.commute_speeds_kmh)
    speeds.update(config.commute_speeds_kmh)

    settings = replace(
        base,
        commute_speeds_kmh=speeds,
        **{
            name: value
            for name, value in {
                "adjacent_experience": config.partial_credit.adjacent_experience,
                "free_text_major": config.partial_credit.free_text_major,
                "boolean_reason": config.thresholds.boolean_reason,
                "ratio_reason": config.thresholds.ratio_reason,
                "gap_threshold": config.thresholds.gap,
            }.items()
            if value is not None
        },
    )

    model = DEFAULT_SCORING_MODEL.with_overrides(
        config.version or DEFAULT_MATCHING_VERSION, config.weights, settings
    )
    return register_scoring_model(model)
