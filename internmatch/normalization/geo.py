"""Geography and calendar helpers used during normalization and evaluation."""

import math
import re
from typing import Optional, Tuple

EARTH_RADIUS_KM = 6371.0

US_STATES = {
    "AL": "Alabama", "AK": "Alaska", "AZ": "Arizona", "AR": "Arkansas",
    "CA": "California", "CO": "Colorado", "CT": "Connecticut", "DE": "Delaware",
    "DC": "District of Columbia", "FL": "Florida", "GA": "Georgia", "HI": "Hawaii",
    "ID": "Idaho", "IL": "Illinois", "IN": "Indiana", "IA": "Iowa",
    "KS": "Kansas", "KY": "Kentucky", "LA": "Louisiana", "ME": "Maine",
    "MD": "Maryland", "MA": "Massachusetts", "MI": "Michigan", "MN": "Minnesota",
    "MS": "Mississippi", "MO": "Missouri", "MT": "Montana", "NE": "Nebraska",
    "NV": "Nevada", "NH": "New Hampshire", "NJ": "New Jersey", "NM": "New Mexico",
    "NY": "New York", "NC": "North Carolina", "ND": "North Dakota", "OH": "Ohio",
    "OK": "Oklahoma", "OR": "Oregon", "PA": "Pennsylvania", "RI": "Rhode Island",
    "SC": "South Carolina", "SD": "South Dakota", "TN": "Tennessee", "TX": "Texas",
    "UT": "Utah", "VT": "Vermont", "VA": "Virginia", "WA": "Washington",
    "WV": "West Virginia", "WI": "Wisconsin", "WY": "Wyoming", "PR": "Puerto Rico",
}

_STATE_BY_NAME = {name.lower(): code for code, name in US_STATES.items()}

MONTH_NAMES = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)

_MONTH_BY_NAME = {name: index for index, name in enumerate(MONTH_NAMES, start=1)}
_MONTH_BY_NAME.update({name[:3]: index for index, name in enumerate(MONTH_NAMES, start=1)})
_MONTH_BY_NAME["sept"] = 9

_YEAR_MONTH = re.compile(r"^\d{4}-(\d{1,2})(?:-\d{1,2})?")


def normalize_state(value: Optional[str]) -> Optional[str]:
    """Return the USPS code for a state code or full name.

    Unrecognized values are upper-cased and kept, so two rows spelling an
    unknown region the same way still compare equal.

    Example:
        >>> normalize_state("california")
        'CA'
    """
    if value is None:
        return None
    text = " ".join(str(value).replace(".", " ").split())
    if not text:
        return None
    upper = text.upper()
    if upper in US_STATES:
        return upper
    return _STATE_BY_NAME.get(text.lower(), upper)


def parse_month(value) -> Optional[int]:
    """Parse a month given as name, abbreviation, number or YYYY-MM.

    Returns:
        Month number 1-12, or None if the value is not a month
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if 1 <= value <= 12 else None
    if isinstance(value, float):
        return int(value) if value.is_integer() and 1 <= value <= 12 else None

    text = str(value).strip().lower().rstrip(".")
    if not text:
        return None

    match = _YEAR_MONTH.match(text)
    if match:
        month = int(match.group(1))
        return month if 1 <= month <= 12 else None

    if text.isdigit():
        month = int(text)
        return month if 1 <= month <= 12 else None

    first_word = text.split()[0]
    return _MONTH_BY_NAME.get(first_word)


def month_window(start: int, end: int) -> Tuple[int, ...]:
    """Ordered months from start to end inclusive, wrapping past December.

    Example:
        >>> month_window(11, 2)
        (11, 12, 1, 2)
    """
    months = [start]
    current = start
    while current != end:
        current = current % 12 + 1
        months.append(current)
    return tuple(months)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in kilometres."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(a)))
