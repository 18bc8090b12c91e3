"""Hashing utilities for scoring model fingerprints and application ids.

The fingerprint lets the model registry detect a weight or threshold change
that was made without bumping the matching version.
"""

import hashlib
import json
import uuid
from typing import Any, Mapping


def hash_string(text: str, algorithm: str = "sha256") -> str:
    """Hash a string with the given algorithm.

    Args:
        text: Text to hash
        algorithm: Any algorithm supported by hashlib (default: sha256)

    Returns:
        Hexadecimal digest
    """
    hash_obj = hashlib.new(algorithm)
    hash_obj.update(text.encode("utf-8"))
    return hash_obj.hexdigest()


def compute_model_fingerprint(payload: Mapping[str, Any]) -> str:
    """Compute a stable fingerprint for a scoring model description.

    The payload is serialized as canonical JSON (sorted keys, no whitespace)
    so that two models with the same version, weights and settings always
    hash to the same value regardless of dict ordering.

    Args:
        payload: JSON-serializable description of the model

    Returns:
        64-character SHA256 hex digest

    Example:
        >>> a = compute_model_fingerprint({"version": "1", "weights": {"a": 1, "b": 2}})
        >>> b = compute_model_fingerprint({"weights": {"b": 2, "a": 1}, "version": "1"})
        >>> a == b
        True
    """
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    return hash_string(canonical)


def new_application_id() -> str:
    """Generate a random identifier for an application row."""
    return uuid.uuid4().hex
