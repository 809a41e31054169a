import math
import re
from typing import Any, Optional

# Plain ASCII decimal literals: no digit-group underscores, no Unicode digits
DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


def to_number(value: Any) -> Optional[float]:
    """
    Coerce a loosely-typed value to a finite float.

    Accepts ints, floats and ASCII decimal strings (surrounding whitespace
    is ignored). Booleans, NaN, infinities and anything else yield None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not DECIMAL_PATTERN.fullmatch(value):
            return None
    elif not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def to_integer(value: Any) -> Optional[int]:
    """Coerce a value to an int when it is numeric with no fractional part."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and INTEGER_PATTERN.fullmatch(value.strip()):
        try:
            return int(value.strip())
        except ValueError:
            # beyond the interpreter's int string conversion limit
            return None
    number = to_number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def to_positive_int(value: Any, default: int) -> int:
    """Parse a positive integer, falling back to ``default`` for anything else."""
    number = to_integer(value)
    if number is None or number <= 0:
        return default
    return number


def to_text(value: Any) -> Optional[str]:
    """Return a stripped string, or None for non-strings and blank strings."""
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None
