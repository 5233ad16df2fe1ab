"""Leading-quantity parsing for ingredient lines.

Only the numeric prefix is interpreted; units stay part of the description.
Whitespace and hyphen separated numbers are summed, so "1 1/2" is 1.5 and a
range such as "2-3" becomes 5.
"""

from __future__ import annotations

import math
import re
from typing import NamedTuple


_LEADING_QUANTITY = re.compile(r"([0-9./\s-]+)(.*)")
_TOKEN_SEPARATOR = re.compile(r"[\s-]+")


class ParsedQuantity(NamedTuple):
    """An ingredient line split into its numeric amount and description."""

    amount: float | None
    text: str


def _token_value(token: str) -> float:
    if "/" in token:
        numerator, denominator = token.split("/")[:2]
        return float(numerator) / float(denominator)
    return float(token)


def parse_quantity(line: str) -> ParsedQuantity:
    """Split ``line`` into a leading amount and the remaining text.

    Never raises: lines without a usable leading number come back as
    ``ParsedQuantity(None, line)``.

    Examples:
        >>> parse_quantity("1 1/2 cups flour")
        ParsedQuantity(amount=1.5, text='cups flour')
        >>> parse_quantity("Salt to taste")
        ParsedQuantity(amount=None, text='Salt to taste')
    """
    match = _LEADING_QUANTITY.fullmatch(line)
    if match is None:
        return ParsedQuantity(None, line)

    number_run = match.group(1).strip()
    if not number_run:
        return ParsedQuantity(None, line)

    tokens = [token for token in _TOKEN_SEPARATOR.split(number_run) if token]
    if not tokens:
        # Bullet-style prefixes such as "- " carry no number
        return ParsedQuantity(None, line)

    total = 0.0
    for token in tokens:
        try:
            total += _token_value(token)
        except (ValueError, ZeroDivisionError):
            return ParsedQuantity(None, line)

    if not math.isfinite(total):
        return ParsedQuantity(None, line)
    return ParsedQuantity(total, match.group(2).strip())
