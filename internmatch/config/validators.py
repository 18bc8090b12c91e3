"""Soft validation checks for configuration."""

import warnings
from typing import Any, Dict, List

# A single weight above this share of the total drowns out the other signals
DOMINANT_WEIGHT_SHARE = 0.5


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for potential issues and return warnings.

    These never stop loading; hard errors are left to the pydantic models.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    matching = config_dict.get("matching", {})
    if not isinstance(matching, dict):
        return warning_messages

    weights = matching.get("weights", {})
    if isinstance(weights, dict) and weights:
        numeric = {
            str(key): value
            for key, value in weights.items()
            if isinstance(value, (int, float)) and value > 0
        }
        total = sum(numeric.values())
        if len(numeric) > 1 and total > 0:
            for key, value in sorted(numeric.items()):
                if value / total > DOMINANT_WEIGHT_SHARE:
                    warning_messages.append(
                        f"Weight for '{key}' ({value}) is more than half of the overridden "
                        "weights and will dominate the score"
                    )

    limit = matching.get("reason_display_limit")
    if limit == 0:
        warning_messages.append(
            "reason_display_limit is 0; rankings and previews will show no reasons or gaps"
        )

    thresholds = matching.get("thresholds", {})
    if isinstance(thresholds, dict):
        gap = thresholds.get("gap")
        ratio_reason = thresholds.get("ratio_reason")
        if (
            isinstance(gap, (int, float))
            and isinstance(ratio_reason, (int, float))
            and gap >= ratio_reason
        ):
            warning_messages.append(
                f"Gap threshold ({gap}) is not below ratio_reason ({ratio_reason}); "
                "a ratio signal can be reported as both a reason and a gap"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
