"""Small numeric helpers: rounding to multiples and strict number parsing."""

from __future__ import annotations

import math
import re

_NUMBER_PATTERN = re.compile(r"[+\-]?[0-9]*(\.[0-9]*)?")


def _trunc_div(numerator: int, denominator: int) -> int:
    """Integer division that truncates toward zero."""
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator >= 0) else -quotient


def round_down_to_nearest(value: float, multiple: int) -> int:
    """Round ``value`` toward zero to a multiple of ``multiple``.

    A ``multiple`` of zero gives zero.
    """
    if multiple == 0:
        return 0
    return multiple * _trunc_div(int(value), multiple)


def round_up_to_nearest(value: float, multiple: int) -> int:
    """Round ``value`` away from zero to a multiple of ``multiple``.

    A ``multiple`` of zero gives zero.
    """
    if multiple == 0:
        return 0

    sign = 1
    if value < 0.0:
        sign = -1
        value = -value

    rounded_up = math.ceil(value)
    return sign * _trunc_div(rounded_up + multiple - 1, multiple) * multiple


def parse_number(value: str) -> float:
    """Parse a plain decimal number such as ``"-1.5"`` or ``"+100"``.

    No whitespace, exponents or other text are accepted.
    Raises ValueError if ``value`` is not such a number or is out of range.
    """
    if _NUMBER_PATTERN.fullmatch(value) is None:
        raise ValueError(f"not a number: {value!r}")

    try:
        number = float(value)
    except ValueError:
        raise ValueError(f"not a number: {value!r}") from None

    if math.isinf(number):
        raise ValueError(f"number out of range: {value!r}")

    if number == 0.0 and any(c in "123456789" for c in value):
        raise ValueError(f"number out of range: {value!r}")

    return number