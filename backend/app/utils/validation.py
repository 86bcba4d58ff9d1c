"""
Input Validation Utilities
===========================

Numeric coercion for loosely-typed report payloads.

Clients send numbers as JSON numbers or as strings ("37.5"). Everything goes
through Python's own float()/int() parsing, which doesn't depend on locale.
Strings must be plain ASCII numbers ("37.5", "-1e3"); underscores, commas
and non-ASCII digits are rejected. Epoch values must fit in 64 bits.
Anything that doesn't parse to a finite number is rejected; we never store NaN.
"""

import math
import re
from datetime import datetime, timezone
from typing import Any, Iterable, Optional


def epoch_millis(moment: Optional[datetime] = None) -> int:
    """
    Convert a datetime to epoch milliseconds.

    Args:
        moment: Timezone-aware datetime (defaults to now, UTC)

    Returns:
        Milliseconds since the Unix epoch
    """
    if moment is None:
        moment = datetime.now(timezone.utc)
    return int(moment.timestamp() * 1000)


def is_missing(value: Any) -> bool:
    """A field counts as missing when it is absent or JSON null."""
    return value is None


def missing_fields(payload: dict, required: Iterable[str]) -> list[str]:
    """
    List required fields that are missing from a payload.

    Args:
        payload: The raw request body
        required: Field names that must be present

    Returns:
        Missing field names, in the order they were required
    """
    return [name for name in required if is_missing(payload.get(name))]


# Plain ASCII decimal/scientific notation. float() alone would also take
# "1_000" and full-width digits.
NUMBER_PATTERN = re.compile(r'^[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?$')
INTEGER_PATTERN = re.compile(r'^[+-]?[0-9]+$')

# Firestore stores integers as signed 64-bit
INT64_MIN = -2**63
INT64_MAX = 2**63 - 1


def parse_float(value: Any) -> Optional[float]:
    """
    Coerce a number or numeric string to float.

    Args:
        value: int, float or str (e.g. 37.5, "37.5", " 12 ", "1e3")

    Returns:
        The float value, or None if it isn't a finite number written with
        ASCII digits
    """
    # bool is an int subclass; true/false are not coordinates
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not NUMBER_PATTERN.match(text):
            return None
        number = float(text)
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_epoch_millis(value: Any) -> Optional[int]:
    """
    Coerce a number or numeric string to integer epoch milliseconds.

    Fractional values are truncated ("1700000000000.9" -> 1700000000000).

    Args:
        value: int, float or str

    Returns:
        The integer value, or None if it isn't a finite number or doesn't
        fit in a signed 64-bit integer
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and INTEGER_PATTERN.match(value.strip()):
        number = int(value.strip())
    else:
        parsed = parse_float(value)
        if parsed is None:
            return None
        number = int(parsed)
    if not INT64_MIN <= number <= INT64_MAX:
        return None
    return number
