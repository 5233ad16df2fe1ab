"""Lenient field types for loosely typed recipe data.

Model output and older data files carry values such as ``"30分"`` for a
cooking time or a bare string where a list is expected. These annotated
types coerce such values instead of failing validation.
"""

from __future__ import annotations

import math
import re
from typing import Annotated, Any

from pydantic import BeforeValidator


_FIRST_NUMBER = re.compile(r"[0-9]+(?:\.[0-9]+)?")


def _lenient_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    match = _FIRST_NUMBER.search(str(value))
    return float(match.group(0)) if match else None


def _lenient_int(value: Any) -> int:
    number = _lenient_number(value)
    return round(number) if number is not None else 0


def _lenient_optional_int(value: Any) -> int | None:
    number = _lenient_number(value)
    return round(number) if number is not None else None


def _lenient_servings(value: Any) -> int | None:
    number = _lenient_number(value)
    if number is None or number < 1:
        return None
    return round(number)


def _lenient_str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None and str(item).strip()]
    return [str(value)]


def _str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None]
    return [str(value)]


def _lenient_str(value: Any) -> str:
    return "" if value is None else str(value)


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_text(value: Any) -> str | None:
    return None if value is None else str(value)


# Model output: blanks are dropped
LenientStrList = Annotated[list[str], BeforeValidator(_lenient_str_list)]
LenientStr = Annotated[str, BeforeValidator(_lenient_str)]
OptionalStr = Annotated[str | None, BeforeValidator(_optional_str)]
LenientInt = Annotated[int, BeforeValidator(_lenient_int)]
LenientServings = Annotated[int | None, BeforeValidator(_lenient_servings)]
LenientNumber = Annotated[float | None, BeforeValidator(_lenient_number)]

# Stored documents: text is kept as written
StoredStrList = Annotated[list[str], BeforeValidator(_str_list)]
StoredText = Annotated[str | None, BeforeValidator(_optional_text)]
StoredOptionalInt = Annotated[int | None, BeforeValidator(_lenient_optional_int)]
