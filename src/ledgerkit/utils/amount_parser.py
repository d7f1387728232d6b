"""Amount and identifier parsing utilities."""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_amount(amount_str: str) -> Decimal:
    """Parse a display amount string into a Decimal.

    Handles "123.45", "$123.45", "-123.45", "1,234.56" and "(123.45)"
    (negative in parentheses).

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount_str = re.sub(r"[$€£¥₴]", "", amount_str).replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    return -amount if is_negative else amount


def parse_int_or_none(value: Any) -> Optional[int]:
    """Parse a loosely typed value into an int, or None when it has no integer prefix.

    Strings are read up to the first non-digit ("12abc" -> 12, "7.9" -> 7),
    which is how query-string ids and amounts have always been interpreted.
    Booleans are rejected.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        try:
            return int(value)
        except (ValueError, OverflowError):
            # NaN or infinity
            return None
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match is None:
            return None
        return int(match.group(1))
    return None


def to_minor_units(amount: Decimal, part_fraction: int) -> int:
    """Convert a display amount into integer minor units.

    Raises:
        ValueError: If the amount has more precision than the currency allows
    """
    scaled = amount * part_fraction
    if scaled != scaled.to_integral_value():
        raise ValueError(f"Amount {amount} is finer than 1/{part_fraction} of a unit")
    return int(scaled)
