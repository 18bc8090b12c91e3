"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class ThresholdConfig(BaseModel):
    """Reason/gap thresholds, expressed as a fraction of a signal's weight.

    Unset fields keep the built-in scoring model values.
    """

    boolean_reason: Optional[float] = Field(
        None, ge=0.0, le=1.0, description="Minimum points/weight for a boolean signal reason"
    )
    ratio_reason: Optional[float] = Field(
        None, ge=0.0, le=1.0, description="Minimum points/weight for a ratio signal reason"
    )
    gap: Optional[float] = Field(
        None,
        ge=0.0,
        le=1.0,
        description="A required signal at or below this points/weight is reported as a gap",
    )


class PartialCreditConfig(BaseModel):
    """Partial-credit fractions used by evaluators."""

    adjacent_experience: Optional[float] = Field(
        None, ge=0.0, le=1.0, description="Credit for an adjacent experience level"
    )
    free_text_major: Optional[float] = Field(
        None, ge=0.0, le=1.0, description="Credit when majors only overlap as free text"
    )


class MatchingConfig(BaseModel):
    """Scoring model overrides.

    Any override changes what a score means, so it must come with its own
    matching version.
    """

    version: Optional[str] = Field(None, description="Matching version for a customized model")
    weights: Dict[str, float] = Field(
        default_factory=dict, description="Per-signal weight overrides keyed by signal key"
    )
    thresholds: ThresholdConfig = Field(default_factory=ThresholdConfig)
    partial_credit: PartialCreditConfig = Field(default_factory=PartialCreditConfig)
    commute_speeds_kmh: Dict[str, float] = Field(
        default_factory=dict, description="Average speed per transport mode for commute estimates"
    )
    reason_display_limit: int = Field(
        2, ge=0, le=10, description="How many reasons/gaps callers show per match"
    )

    @field_validator("version")
    @classmethod
    def strip_version(cls, v: Optional[str]) -> Optional[str]:
        """Strip whitespace from the version; blank means unset."""
        if v is None:
            return None
        stripped = v.strip()
        return stripped or None

    @field_validator("weights", "commute_speeds_kmh")
    @classmethod
    def positive_values(cls, v: Dict[str, float]) -> Dict[str, float]:
        """Weights and speeds must be positive numbers."""
        normalized = {}
        for key, value in v.items():
            name = str(key).strip().lower()
            if value is None or value <= 0:
                raise ValueError(f"'{name}' must be a positive number, got {value}")
            normalized[name] = float(value)
        return normalized

    @property
    def is_customized(self) -> bool:
        """Whether any scoring override is present."""
        return bool(
            self.weights
            or self.commute_speeds_kmh
            or self.thresholds.model_dump(exclude_none=True)
            or self.partial_credit.model_dump(exclude_none=True)
        )

    @model_validator(mode="after")
    def require_version_for_overrides(self):
        """Overrides without a version would silently change old scores."""
        if self.is_customized and not self.version:
            raise ValueError(
                "Custom weights, thresholds, partial credit or commute speeds require "
                "matching.version to be set to a new version string"
            )
        return self


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for the matching engine."""

    matching: MatchingConfig = Field(
        default_factory=MatchingConfig, description="Scoring model configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    dataset: Optional[str] = Field(
        None, description="Default dataset file (catalog, students, internships) for the CLI"
    )

    @field_validator("dataset")
    @classmethod
    def strip_dataset(cls, v: Optional[str]) -> Optional[str]:
        """Strip whitespace from the dataset path."""
        if v is None:
            return None
        stripped = v.strip()
        return stripped or None
