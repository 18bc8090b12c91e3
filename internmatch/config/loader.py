"""Configuration loader for the internship matching engine."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .models import AppConfig
from .validators import check_for_warnings, emit_warnings


def load_config(config_path: Optional[Path] = None) -> tuple[AppConfig, EnvironmentConfig]:
    """
    Load and validate configuration from a YAML file and environment variables.

    Config file lookup:
    1. Use provided config_path if given (must exist)
    2. Try config.yaml in current directory
    3. Try ./config/config.yaml
    4. Fall back to built-in defaults (the default scoring model)

    Args:
        config_path: Optional path to configuration file

    Returns:
        Tuple of (AppConfig, EnvironmentConfig) with validated configuration

    Raises:
        ConfigurationError: If configuration is invalid or an explicit file is missing
    """
    config_file = _find_config_file(config_path)

    config_dict: Dict[str, Any] = {}
    if config_file is not None:
        config_dict = _read_yaml(config_file)

    warning_messages = check_for_warnings(config_dict)
    if warning_messages:
        emit_warnings(warning_messages)

    app_config = parse_config(config_dict)

    try:
        env_config = load_environment_config()
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load environment configuration: {e}",
            suggestions=["Copy .env.example to .env and adjust the values"],
        )

    return app_config, env_config


def parse_config(config_dict: Dict[str, Any]) -> AppConfig:
    """
    Validate a raw configuration mapping.

    Pydantic errors are converted to a ConfigurationError listing every
    failing field.
    """
    try:
        return AppConfig.model_validate(config_dict or {})
    except ValidationError as e:
        errors = []
        for error in e.errors():
            field_path = " -> ".join(str(loc) for loc in error["loc"]) or "matching"
            error_msg = error["msg"]
            error_type = error["type"]

            if error_type in ["float_type", "float_parsing", "int_type", "int_parsing", "dict_type"]:
                expected_type = error_type.split("_")[0]
                errors.append(
                    f"Invalid type for '{field_path}': expected {expected_type}, got {error.get('input')}"
                )
            elif "enum" in error_type:
                errors.append(f"Invalid value for '{field_path}': {error_msg}")
            else:
                errors.append(f"{field_path}: {error_msg}")

        raise ConfigurationError(
            "Configuration validation failed",
            errors=errors,
            suggestions=[
                "Review config.example.yaml for correct format",
                "Set matching.version whenever weights or thresholds are customized",
            ],
        )


def _read_yaml(config_file: Path) -> Dict[str, Any]:
    """Read a YAML mapping from disk."""
    try:
        with open(config_file, "r") as f:
            loaded = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(
            f"Configuration file not found: {config_file}",
            suggestions=[f"Ensure {config_file} exists and is readable"],
        )
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse YAML configuration: {e}",
            suggestions=[
                "Check YAML syntax in your config file",
                "Ensure proper indentation (use spaces, not tabs)",
            ],
        )
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read configuration file: {e}",
            suggestions=[f"Ensure {config_file} is readable", "Check file permissions"],
        )

    if loaded is None:
        return {}

    if not isinstance(loaded, dict):
        raise ConfigurationError(
            f"Configuration file {config_file} must contain a mapping at the top level",
            suggestions=["Review config.example.yaml for correct format"],
        )

    return loaded


def _find_config_file(config_path: Optional[Path] = None) -> Optional[Path]:
    """
    Find the configuration file.

    Args:
        config_path: Optional explicit path to config file

    Returns:
        Path to the configuration file, or None when no default file exists

    Raises:
        ConfigurationError: If an explicit path does not exist
    """
    if config_path:
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigurationError(
                f"Specified configuration file not found: {config_path}",
                suggestions=[
                    f"Ensure {config_path} exists",
                    "Omit --config to run with the default scoring model",
                ],
            )
        return config_path

    candidates = [
        Path("config.yaml"),
        Path("config") / "config.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None
