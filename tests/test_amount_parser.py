"""Tests for amount and identifier parsing."""

from decimal import Decimal

import pytest

from ledgerkit.utils.amount_parser import parse_amount, parse_int_or_none, to_minor_units


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("123.45", Decimal("123.45")),
        ("$1,234.50", Decimal("1234.50")),
        ("-7", Decimal("-7")),
        ("(12.00)", Decimal("-12.00")),
        ("₴ 40", Decimal("40")),
    ],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "twelve"])
def test_parse_amount_invalid(raw):
    with pytest.raises(ValueError):
        parse_amount(raw)


@pytest.mark.parametrize(
    "raw,expected",
    [
        (5, 5),
        ("5", 5),
        ("  42", 42),
        ("12abc", 12),
        ("7.9", 7),
        ("-3", -3),
        (Decimal("8.6"), 8),
        (2.5, 2),
        ("abc", None),
        ("", None),
        (None, None),
        (True, None),
        (float("nan"), None),
        (["5"], None),
    ],
)
def test_parse_int_or_none(raw, expected):
    assert parse_int_or_none(raw) == expected


def test_to_minor_units():
    assert to_minor_units(Decimal("12.50"), 100) == 1250
    assert to_minor_units(Decimal("3"), 1) == 3


def test_to_minor_units_rejects_extra_precision():
    with pytest.raises(ValueError, match="finer"):
        to_minor_units(Decimal("1.005"), 100)
