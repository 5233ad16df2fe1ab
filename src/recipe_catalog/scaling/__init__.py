"""Ingredient quantity parsing, serving scaling and number formatting."""

from recipe_catalog.scaling.formatting import format_number, to_fraction
from recipe_catalog.scaling.quantity import ParsedQuantity, parse_quantity
from recipe_catalog.scaling.servings import (
    ScaledLine,
    ServingScaler,
    base_servings_for,
    extract_servings_number,
    scale_factor,
)


__all__ = [
    "ParsedQuantity",
    "ScaledLine",
    "ServingScaler",
    "base_servings_for",
    "extract_servings_number",
    "format_number",
    "parse_quantity",
    "scale_factor",
    "to_fraction",
]
