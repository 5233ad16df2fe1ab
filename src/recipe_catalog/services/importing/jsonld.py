"""schema.org/Recipe JSON-LD extraction.

Reads the structured data most recipe sites embed in their pages. Used when
the generative model is unavailable and recipe-scrapers does not know the
site.
"""

from __future__ import annotations

import re
from typing import Any

import orjson

from recipe_catalog.core.logging import get_logger
from recipe_catalog.schemas.importing import ImportedRecipe


logger = get_logger(__name__)

_JSONLD_BLOCK = re.compile(
    r'<script[^>]*type=["\']application/ld\+json["\'][^>]*>(.*?)</script>',
    re.DOTALL | re.IGNORECASE,
)
_ISO_DURATION = re.compile(r"P(?:(\d+)D)?T?(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")


def extract_recipe_from_jsonld(html: str, source_url: str) -> ImportedRecipe | None:
    """Return the first schema.org Recipe found in ``html``, or None."""
    for block in _JSONLD_BLOCK.findall(html):
        try:
            data = orjson.loads(block.strip())
        except orjson.JSONDecodeError:
            continue
        recipe_data = find_recipe_node(data)
        if recipe_data:
            return _to_imported_recipe(recipe_data, source_url)
    return None


def find_recipe_node(data: Any) -> dict[str, Any] | None:
    """Locate a Recipe object in a JSON-LD document.

    Handles a bare Recipe, an ``@graph`` container and top-level arrays.
    """
    if isinstance(data, dict):
        schema_type = data.get("@type", "")
        if isinstance(schema_type, list):
            schema_type = " ".join(str(t) for t in schema_type)
        if "Recipe" in str(schema_type):
            return data
        for item in data.get("@graph", []):
            found = find_recipe_node(item)
            if found:
                return found
    elif isinstance(data, list):
        for item in data:
            found = find_recipe_node(item)
            if found:
                return found
    return None


def _to_imported_recipe(data: dict[str, Any], source_url: str) -> ImportedRecipe:
    cooking_time = parse_duration_minutes(data.get("totalTime"))
    if cooking_time is None:
        parts = [
            parse_duration_minutes(data.get("prepTime")),
            parse_duration_minutes(data.get("cookTime")),
        ]
        cooking_time = sum(p for p in parts if p) or None

    return ImportedRecipe(
        title=_first_text(data.get("name")) or "",
        recipe_yield=_first_text(data.get("recipeYield")) or "",
        cooking_time=cooking_time or 0,
        calories_per_serving=_calories(data.get("nutrition")),
        ingredients=_text_list(data.get("recipeIngredient")),
        instructions=_instructions(data.get("recipeInstructions")),
        categories=_text_list(data.get("recipeCategory")),
        image_url=_image(data.get("image")),
        source_url=source_url,
        notes=_first_text(data.get("description")),
    )


def parse_duration_minutes(duration: Any) -> int | None:
    """Convert an ISO 8601 duration such as ``PT1H30M`` to whole minutes.

    Seconds round up to the next minute; zero durations count as unknown.
    """
    if not isinstance(duration, str):
        return None
    match = _ISO_DURATION.fullmatch(duration.strip().upper())
    if not match:
        return None
    days, hours, minutes, seconds = (int(g) if g else 0 for g in match.groups())
    total = days * 24 * 60 + hours * 60 + minutes + (1 if seconds else 0)
    return total or None


def _first_text(value: Any) -> str | None:
    if isinstance(value, list):
        value = value[0] if value else None
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _text_list(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        value = [value]
    return [str(item).strip() for item in value if item and str(item).strip()]


def _instructions(value: Any) -> list[str]:
    if isinstance(value, str):
        return [s.strip() for s in re.split(r"\n+|\d+\.\s+", value) if s.strip()]
    if not isinstance(value, list):
        return []

    steps: list[str] = []
    for item in value:
        if isinstance(item, dict) and item.get("@type") == "HowToSection":
            steps.extend(
                text
                for text in map(_step_text, item.get("itemListElement", []))
                if text
            )
        else:
            text = _step_text(item)
            if text:
                steps.append(text)
    return steps


def _step_text(item: Any) -> str | None:
    if isinstance(item, str):
        return item.strip() or None
    if isinstance(item, dict):
        for key in ("text", "name", "description"):
            value = item.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return None


def _image(value: Any) -> str | None:
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, str):
        return value or None
    if isinstance(value, dict):
        return value.get("url") or value.get("contentUrl")
    return None


def _calories(nutrition: Any) -> str | None:
    # Left as text; ImportedRecipe pulls the number out of "350 kcal"
    if isinstance(nutrition, dict):
        return _first_text(nutrition.get("calories"))
    return None
