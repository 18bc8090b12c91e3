"""Integration tests for configuration module."""

import warnings
from pathlib import Path

import pytest

from internmatch.config import (
    DEFAULT_DATABASE_URL,
    ConfigurationError,
    load_config,
    load_environment_config,
    parse_config,
)

# Test fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"
EXAMPLE_CONFIG = Path(__file__).resolve().parents[1] / "config.example.yaml"


class TestConfigurationLoading:
    """Test configuration loading from YAML files."""

    def test_load_valid_config(self, clean_env):
        """Test loading a customized configuration file."""
        app_config, env_config = load_config(FIXTURES_DIR / "valid_config.yaml")

        matching = app_config.matching
        assert matching.version == "2.1.0-test"
        assert matching.weights == {
            "skills_required": 25.0,
            "major_alignment": 15.0,
            "term_availability": 20.0,
        }
        assert matching.thresholds.ratio_reason == 0.5
        assert matching.thresholds.gap is None
        assert matching.partial_credit.adjacent_experience == 0.25
        assert matching.commute_speeds_kmh == {"car": 50.0}
        assert matching.reason_display_limit == 3
        assert matching.is_customized is True

        assert app_config.logging.level == "DEBUG"
        assert app_config.logging.format == "json"
        assert app_config.dataset == "data/sample_dataset.yaml"
        assert env_config.database_url == DEFAULT_DATABASE_URL

    def test_load_minimal_config(self, clean_env):
        """Test loading a minimal configuration with defaults."""
        app_config, _ = load_config(FIXTURES_DIR / "minimal_config.yaml")

        assert app_config.logging.level == "WARNING"
        assert app_config.logging.format == "key-value"  # Default
        assert app_config.matching.version is None
        assert app_config.matching.is_customized is False
        assert app_config.matching.reason_display_limit == 2  # Default
        assert app_config.dataset is None

    def test_example_config_loads_cleanly(self, clean_env):
        """Test the shipped example config is valid and raises no warnings."""
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            app_config, _ = load_config(EXAMPLE_CONFIG)

        assert not [w for w in caught if issubclass(w.category, UserWarning)]
        assert app_config.matching.is_customized is False

    def test_no_config_file_uses_defaults(self, clean_env):
        """Test that running without any config file falls back to defaults."""
        app_config, env_config = load_config()

        assert app_config.matching.is_customized is False
        assert app_config.logging.level == "INFO"
        assert env_config.environment == "local"

    def test_finds_config_in_working_directory(self, clean_env):
        (clean_env / "config.yaml").write_text("logging:\n  level: ERROR\n")
        app_config, _ = load_config()
        assert app_config.logging.level == "ERROR"

    def test_finds_config_in_config_directory(self, clean_env):
        (clean_env / "config").mkdir()
        (clean_env / "config" / "config.yaml").write_text("logging:\n  format: json\n")
        app_config, _ = load_config()
        assert app_config.logging.format == "json"

    def test_empty_config_file(self, clean_env):
        (clean_env / "config.yaml").write_text("")
        app_config, _ = load_config()
        assert app_config.matching.version is None

    def test_config_file_not_found(self, clean_env):
        """Test error when an explicit config file doesn't exist."""
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(Path("nonexistent.yaml"))

        assert "Specified configuration file not found" in str(exc_info.value)

    def test_invalid_yaml(self, clean_env):
        config_file = clean_env / "broken.yaml"
        config_file.write_text("matching:\n  weights: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Failed to parse YAML configuration"):
            load_config(config_file)

    def test_top_level_must_be_mapping(self, clean_env):
        config_file = clean_env / "list.yaml"
        config_file.write_text("- matching\n- logging\n")

        with pytest.raises(ConfigurationError, match="mapping at the top level"):
            load_config(config_file)


class TestConfigurationValidation:
    """Test validation errors collected from the pydantic models."""

    def test_overrides_require_version(self, clean_env):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(FIXTURES_DIR / "missing_version_config.yaml")

        error = exc_info.value
        assert error.message == "Configuration validation failed"
        assert len(error.errors) == 1
        assert "matching.version" in error.errors[0]

    def test_blank_version_counts_as_missing(self):
        with pytest.raises(ConfigurationError):
            parse_config({"matching": {"version": "  ", "thresholds": {"gap": 0.1}}})

    def test_version_alone_is_not_customized(self):
        config = parse_config({"matching": {"version": "2.0.1"}})
        assert config.matching.is_customized is False

    def test_weight_keys_are_normalized(self):
        config = parse_config({"matching": {"version": "x", "weights": {" Skills_Required ": 30}}})
        assert config.matching.weights == {"skills_required": 30.0}

    @pytest.mark.parametrize("weight", [0, -5])
    def test_weights_must_be_positive(self, weight):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_config({"matching": {"version": "x", "weights": {"skills_required": weight}}})

        assert "must be a positive number" in exc_info.value.errors[0]

    def test_weight_must_be_numeric(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_config({"matching": {"version": "x", "weights": {"skills_required": "lots"}}})

        assert exc_info.value.errors == [
            "Invalid type for 'matching -> weights -> skills_required': expected float, got lots"
        ]

    def test_threshold_out_of_range(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_config({"matching": {"version": "x", "thresholds": {"ratio_reason": 1.5}}})

        assert exc_info.value.errors[0].startswith("matching -> thresholds -> ratio_reason")

    def test_invalid_log_level(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_config({"logging": {"level": "LOUD"}})

        assert exc_info.value.errors[0].startswith("Invalid value for 'logging -> level'")

    def test_errors_are_all_reported(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_config(
                {
                    "matching": {"reason_display_limit": 50},
                    "logging": {"format": "xml"},
                }
            )

        assert len(exc_info.value.errors) == 2
        message = str(exc_info.value)
        assert "Validation Errors:" in message
        assert "  1. " in message
        assert "Suggestions:" in message


class TestConfigurationWarnings:
    """Test soft validation warnings."""

    def test_dominant_weight_warning(self, clean_env):
        config_file = clean_env / "config.yaml"
        config_file.write_text(
            "matching:\n"
            "  version: dominant-1\n"
            "  weights:\n"
            "    skills_required: 80\n"
            "    skills_preferred: 10\n"
        )

        with pytest.warns(UserWarning, match="'skills_required'"):
            load_config(config_file)

    def test_single_weight_override_does_not_warn(self):
        from internmatch.config.validators import check_for_warnings

        assert check_for_warnings({"matching": {"weights": {"skills_required": 80}}}) == []

    def test_zero_display_limit_warning(self, clean_env):
        config_file = clean_env / "config.yaml"
        config_file.write_text("matching:\n  reason_display_limit: 0\n")

        with pytest.warns(UserWarning, match="reason_display_limit is 0"):
            app_config, _ = load_config(config_file)

        assert app_config.matching.reason_display_limit == 0

    def test_gap_threshold_warning(self, clean_env):
        config_file = clean_env / "config.yaml"
        config_file.write_text(
            "matching:\n"
            "  version: gaps-1\n"
            "  thresholds:\n"
            "    gap: 0.6\n"
            "    ratio_reason: 0.6\n"
        )

        with pytest.warns(UserWarning, match="Gap threshold"):
            load_config(config_file)


class TestEnvironmentConfig:
    """Test environment variable loading."""

    def test_defaults(self, clean_env):
        env_config = load_environment_config()

        assert env_config.database_url == DEFAULT_DATABASE_URL
        assert env_config.log_level is None
        assert env_config.environment == "local"

    def test_values_from_environment(self, clean_env, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite:////tmp/internmatch-test.db")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("ENVIRONMENT", "staging")

        env_config = load_environment_config()

        assert env_config.database_url == "sqlite:////tmp/internmatch-test.db"
        assert env_config.log_level == "DEBUG"
        assert env_config.environment == "staging"

    def test_invalid_database_url(self, clean_env, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "internmatch.db")

        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config()

        assert "Invalid DATABASE_URL" in exc_info.value.errors[0]

    def test_invalid_log_level(self, clean_env, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config()

        assert "Invalid LOG_LEVEL" in exc_info.value.errors[0]

    def test_load_config_reports_environment_errors(self, clean_env, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "verbose")

        with pytest.raises(ConfigurationError, match="Environment variable validation failed"):
            load_config()
