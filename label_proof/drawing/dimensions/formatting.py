"""
Measurement text for dimension labels.

Clean two-decimal values print short (``1.5"``, ``0.75"``) and whole
numbers keep one decimal (``4.0"``). Values that need more precision keep
up to four decimals (``1.2346"``). Rounding is half-up, as the proofing
desk has always printed it.
"""

import math
import re

INCH_MARK = '"'

_TRAILING_ZEROS = re.compile(r'\.?0+$')
_WHOLE_NUMBER = re.compile(r'\.0+$')

CLEAN_TOLERANCE = 0.001


def _round_half_up(value: float, digits: int) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _first_significant_decimal(value: float) -> int:
    """1-based position of the first non-zero fractional digit (0 if none)."""
    _, _, decimals = repr(float(value)).partition('.')
    for i, digit in enumerate(decimals):
        if not digit.isdigit():
            break
        if digit != '0':
            return i + 1
    return 0


def format_dimension(value_in: float) -> str:
    """Format a measurement in inches with an inch mark.

    Args:
        value_in: measurement in inches.

    Returns:
        Display string such as ``1.5"``, ``1.0"``, ``0.75"`` or ``1.2346"``.
    """
    value = float(value_in)
    two_decimal = _round_half_up(value, 2)

    if abs(two_decimal - value) < CLEAN_TOLERANCE:
        text = _TRAILING_ZEROS.sub('', repr(two_decimal))
        if '.' not in text and _WHOLE_NUMBER.search(repr(value)):
            text += '.0'
        return text + INCH_MARK

    four_decimal = _round_half_up(value, 4)
    text = _TRAILING_ZEROS.sub('', repr(four_decimal))
    if '.' not in text and '.' in repr(value):
        precision = max(2, min(4, _first_significant_decimal(value)))
        text = f"{four_decimal:.{precision}f}"
    return text + INCH_MARK
