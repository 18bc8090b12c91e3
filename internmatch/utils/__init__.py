"""Utility functions for text normalization, hashing, and time handling."""

from .hashing import compute_model_fingerprint, hash_string, new_application_id
from .text import compact_token, normalize_token, split_labels
from .timestamps import EPOCH, ensure_utc, format_timestamp, parse_iso_datetime, utc_now

__all__ = [
    # Text
    "normalize_token",
    "compact_token",
    "split_labels",
    # Hashing
    "hash_string",
    "compute_model_fingerprint",
    "new_application_id",
    # Timestamps
    "EPOCH",
    "utc_now",
    "ensure_utc",
    "parse_iso_datetime",
    "format_timestamp",
]
