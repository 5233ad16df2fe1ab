"""Serving-count scaling of ingredient lines."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, NamedTuple

from recipe_catalog.scaling.formatting import format_number, to_fraction
from recipe_catalog.scaling.quantity import parse_quantity


if TYPE_CHECKING:
    from collections.abc import Callable

    from recipe_catalog.schemas.recipe import Recipe


_SERVINGS_NUMBER = re.compile(r"[0-9]+(\.[0-9]+)?")


class ScaledLine(NamedTuple):
    """One ingredient line before and after scaling."""

    original: str
    amount: float | None
    scaled_amount: float | None
    text: str
    display: str


def extract_servings_number(yield_text: str | None) -> float:
    """Return the first number in a yield description, or 1 if there is none.

    >>> extract_servings_number("Serves 4-6")
    4.0
    """
    if not yield_text:
        return 1.0
    match = _SERVINGS_NUMBER.search(yield_text)
    return float(match.group(0)) if match else 1.0


def base_servings_for(recipe: Recipe) -> float:
    """Serving count a recipe's ingredient amounts are written for."""
    if recipe.base_servings:
        return float(recipe.base_servings)
    return extract_servings_number(recipe.recipe_yield)


def scale_factor(base: float, target: float) -> float:
    """Multiplier taking amounts written for ``base`` servings to ``target``."""
    return target / max(base, 1)


class ServingScaler:
    """Target-serving state for one recipe and the scaled lines it implies.

    Starts at the recipe's base serving count; the target never drops
    below one serving.

    Example:
        ```python
        scaler = ServingScaler(4)
        scaler.set_servings(6)
        scaler.scale_line("2 cups flour")  # "3 cups flour"
        ```
    """

    def __init__(self, base_servings: float, *, fractions: bool = False) -> None:
        self.base_servings = base_servings
        self.servings = base_servings
        self._format: Callable[[float], str] = to_fraction if fractions else format_number

    @classmethod
    def for_recipe(cls, recipe: Recipe, *, fractions: bool = False) -> ServingScaler:
        """Build a scaler starting at the recipe's base serving count."""
        return cls(base_servings_for(recipe), fractions=fractions)

    @property
    def factor(self) -> float:
        """Current scale factor."""
        return scale_factor(self.base_servings, self.servings)

    def increment(self) -> float:
        """Add one serving and return the new target."""
        self.servings += 1
        return self.servings

    def decrement(self) -> float:
        """Remove one serving, stopping at one, and return the new target."""
        self.servings = max(1, self.servings - 1)
        return self.servings

    def set_servings(self, servings: float) -> None:
        """Set the target serving count directly.

        Raises:
            ValueError: If ``servings`` is less than one.
        """
        if servings < 1:
            msg = f"Servings must be at least 1, got {servings}"
            raise ValueError(msg)
        self.servings = servings

    def scale(self, line: str) -> ScaledLine:
        """Parse and scale one ingredient line."""
        amount, text = parse_quantity(line)
        if amount is None:
            return ScaledLine(line, None, None, text, line)
        scaled = amount * self.factor
        display = " ".join(part for part in (self._format(scaled), text) if part)
        return ScaledLine(line, amount, scaled, text, display)

    def scale_line(self, line: str) -> str:
        """Display text for one ingredient line at the current target."""
        return self.scale(line).display

    def scale_lines(self, lines: list[str]) -> list[ScaledLine]:
        """Scale every ingredient line, preserving order."""
        return [self.scale(line) for line in lines]
