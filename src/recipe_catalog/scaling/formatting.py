"""Display formatting for scaled quantities."""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal


_TRAILING_ZEROS = re.compile(r"\.?0+$")
_FRACTION_TOLERANCE = 1.0e-6
_MAX_FRACTION_TERMS = 64


def format_number(value: float) -> str:
    """Render ``value`` compactly: integers bare, others to at most 2 decimals.

    Rounding is half-up on the exact binary value, so ``1.005`` renders as
    ``"1"`` while ``1.125`` renders as ``"1.13"``.

    >>> format_number(2.0), format_number(1.3333), format_number(0.5)
    ('2', '1.33', '0.5')
    """
    if not math.isfinite(value):
        return str(value)
    if float(value).is_integer():
        return str(int(value))
    rounded = Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return _TRAILING_ZEROS.sub("", f"{rounded:f}", count=1)


def to_fraction(value: float) -> str:
    """Render ``value`` as the nearest ``h/k`` continued-fraction approximation.

    Whole numbers render as integers; the expansion stops once the
    approximation is within a relative tolerance of 1e-6.

    >>> to_fraction(0.5), to_fraction(1.5), to_fraction(0.3333333)
    ('1/2', '3/2', '1/3')
    """
    if not math.isfinite(value):
        return str(value)
    if float(value).is_integer():
        return str(int(value))

    sign = "-" if value < 0 else ""
    amount = abs(value)
    h1, h2 = 1, 0
    k1, k2 = 0, 1
    b = amount
    for _ in range(_MAX_FRACTION_TERMS):
        a = math.floor(b)
        h1, h2 = a * h1 + h2, h1
        k1, k2 = a * k1 + k2, k1
        if abs(amount - h1 / k1) <= amount * _FRACTION_TOLERANCE or b == a:
            break
        b = 1 / (b - a)

    if k1 == 1:
        return f"{sign}{h1}"
    return f"{sign}{h1}/{k1}"
