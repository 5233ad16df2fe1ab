"""Unit tests for recipe search and filters."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from recipe_catalog.storage import filter_recipes, matches_query


if TYPE_CHECKING:
    from collections.abc import Callable

    from recipe_catalog.schemas import Recipe


pytestmark = pytest.mark.unit


@pytest.fixture
def recipes(recipe_factory: Callable[..., Recipe]) -> list[Recipe]:
    return [
        recipe_factory(
            id=1,
            title="Chicken Curry",
            ingredients=["500g chicken", "2 onions"],
            categories=["洋食"],
            seasons=["冬"],
            events=["普段"],
        ),
        recipe_factory(
            id=2,
            title="ちらし寿司",
            ingredients=["2 cups rice", "1 sheet nori"],
            categories=["和食"],
            seasons=["春"],
            events=["ひな祭り"],
        ),
        recipe_factory(
            id=3,
            title="Onion Soup",
            ingredients=["4 onions", "1 l stock"],
            categories=["洋食"],
            seasons=["冬", "秋"],
            events=["普段"],
        ),
    ]


class TestMatchesQuery:
    """Tests for matches_query."""

    def test_matches_title_case_insensitively(self, recipes: list[Recipe]) -> None:
        assert matches_query(recipes[0], "CURRY")

    def test_matches_ingredient_lines(self, recipes: list[Recipe]) -> None:
        assert matches_query(recipes[1], "nori")

    def test_no_match(self, recipes: list[Recipe]) -> None:
        assert not matches_query(recipes[0], "tofu")


class TestFilterRecipes:
    """Tests for filter_recipes."""

    def test_no_criteria_returns_all(self, recipes: list[Recipe]) -> None:
        assert filter_recipes(recipes) == recipes

    def test_query_across_title_and_ingredients(self, recipes: list[Recipe]) -> None:
        assert [r.id for r in filter_recipes(recipes, query="onion")] == [1, 3]

    def test_tag_filters_are_exact(self, recipes: list[Recipe]) -> None:
        assert [r.id for r in filter_recipes(recipes, category="洋食")] == [1, 3]
        assert [r.id for r in filter_recipes(recipes, season="秋")] == [3]
        assert [r.id for r in filter_recipes(recipes, event="ひな祭り")] == [2]
        assert filter_recipes(recipes, category="洋") == []

    def test_criteria_combine(self, recipes: list[Recipe]) -> None:
        result = filter_recipes(recipes, query="soup", season="冬", event="普段")

        assert [r.id for r in result] == [3]

    def test_empty_strings_ignored(self, recipes: list[Recipe]) -> None:
        assert filter_recipes(recipes, query="", category="") == recipes
