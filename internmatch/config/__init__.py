"""Configuration management module for the internship matching engine."""

from .environment import DEFAULT_DATABASE_URL, EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config, parse_config
from .models import (
    AppConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    MatchingConfig,
    PartialCreditConfig,
    ThresholdConfig,
)

__all__ = [
    # Main loader functions
    "load_config",
    "parse_config",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "MatchingConfig",
    "ThresholdConfig",
    "PartialCreditConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    "DEFAULT_DATABASE_URL",
    # Enums
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
