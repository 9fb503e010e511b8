"""Tests for fixed-point formatting helpers."""

from decimal import Decimal

import pytest

from rewards_pools.core.units import MAX_UINT256, format_units, to_decimal_units


@pytest.mark.parametrize(
    ("value", "decimals", "expected"),
    [
        (1500000000000000000, 18, "1.5"),
        (0, 18, "0.0"),
        (10**18, 18, "1.0"),
        (5 * 10**17, 16, "50.0"),
        (10**18, 16, "100.0"),
        (123, 16, "0.0000000000000123"),
        (5, 0, "5.0"),
        (-25, 1, "-2.5"),
    ],
)
def test_format_units(value, decimals, expected):
    """format_units strips trailing zeros but keeps one fractional digit."""
    assert format_units(value, decimals) == expected


def test_format_units_rejects_negative_decimals():
    with pytest.raises(ValueError, match="non-negative"):
        format_units(1, -1)


def test_to_decimal_units():
    assert to_decimal_units(2_500_000, 6) == Decimal("2.5")


def test_max_uint256():
    assert MAX_UINT256 == int("f" * 64, 16)
