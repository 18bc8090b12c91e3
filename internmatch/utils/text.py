"""Text normalization helpers shared by the catalog resolver and normalizer.

Every comparison in the matching engine is equality on a normalized token,
so all free text goes through normalize_token() before it is compared.
"""

import re
import unicodedata
from typing import Iterable, List, Optional, Sequence, Union

_APOSTROPHES = re.compile(r"['’‘`]")
# Letters and digits in any script stay; + and # stay meaningful (c++, c#)
_PUNCTUATION = re.compile(r"[^\w+#\s]|_")
_WHITESPACE = re.compile(r"\s+")


def normalize_token(text: Optional[str]) -> str:
    """Normalize a label for token comparison.

    Steps:
    - Unicode NFKC form, case-fold and trim
    - Drop apostrophes ("Women's Studies" -> "womens studies")
    - Replace remaining punctuation with spaces
    - Collapse whitespace

    Args:
        text: Free-text label (None is treated as empty)

    Returns:
        Normalized token (empty string when nothing meaningful remains)

    Example:
        >>> normalize_token("  Data-Visualization (Tableau/Power BI) ")
        'data visualization tableau power bi'
    """
    if not text:
        return ""

    normalized = unicodedata.normalize("NFKC", str(text)).casefold().strip()
    normalized = _APOSTROPHES.sub("", normalized)
    normalized = _PUNCTUATION.sub(" ", normalized)
    return _WHITESPACE.sub(" ", normalized).strip()


def compact_token(text: Optional[str]) -> str:
    """Normalized token with all spaces removed ("Power BI" -> "powerbi")."""
    return normalize_token(text).replace(" ", "")


def split_labels(value: Union[None, str, Sequence[object]]) -> List[str]:
    """Split a list-or-comma-string field into trimmed, non-empty labels.

    Source rows store list fields either as arrays or as comma separated
    strings; both shapes come out as a plain list of strings.

    Args:
        value: None, a comma separated string, or a sequence of values

    Returns:
        List of trimmed labels in input order
    """
    if value is None:
        return []

    if isinstance(value, str):
        parts: Iterable[object] = value.split(",")
    else:
        parts = value

    labels = []
    for part in parts:
        if part is None:
            continue
        stripped = _WHITESPACE.sub(" ", str(part)).strip()
        if stripped:
            labels.append(stripped)
    return labels

