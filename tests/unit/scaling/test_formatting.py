"""Unit tests for quantity display formatting."""

from __future__ import annotations

import pytest

from recipe_catalog.scaling import format_number, to_fraction


pytestmark = pytest.mark.unit


class TestFormatNumber:
    """Tests for format_number."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (2.0, "2"),
            (0.0, "0"),
            (300.0, "300"),
            (1.3333, "1.33"),
            (0.5, "0.5"),
            (10.5, "10.5"),
            (1.25, "1.25"),
            (1.125, "1.13"),
            (1.005, "1"),
            (2.999, "3"),
            (3.0001, "3"),
            (-0.5, "-0.5"),
        ],
    )
    def test_formats_compactly(self, value: float, expected: str) -> None:
        """Should print integers bare and others with at most two decimals."""
        assert format_number(value) == expected

    def test_non_finite_values(self) -> None:
        """Should fall back to the plain float text."""
        assert format_number(float("inf")) == "inf"
        assert format_number(float("nan")) == "nan"


class TestToFraction:
    """Tests for to_fraction."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0.5, "1/2"),
            (1.5, "3/2"),
            (0.75, "3/4"),
            (0.125, "1/8"),
            (0.3333333, "1/3"),
            (2.0, "2"),
            (-0.5, "-1/2"),
        ],
    )
    def test_nearest_fraction(self, value: float, expected: str) -> None:
        """Should render the continued-fraction approximation."""
        assert to_fraction(value) == expected
