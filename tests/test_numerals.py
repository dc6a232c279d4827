#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Test suite for Korean price text parsing.
"""
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from core.numerals import parse_price, parse_korean_number, UNPARSABLE_PRICE


@pytest.mark.parametrize(
    "text, expected",
    [
        ("12,000", 12000),
        ("1,234,567", 1234567),
        ("  9,800 BP ", 9800),
        ("1억", 100_000_000),
        ("1억 2,000만", 120_000_000),
        ("12억 3,000만", 1_230_000_000),
        ("1조 2,345억", 1_234_500_000_000),
        ("3.5조", 3_500_000_000_000),
        ("2경", 2 * 10 ** 16),
        ("삼천오백만", 35_000_000),
        ("1천2백", 1200),
        ("만", 10_000),
        ("천만", 10_000_000),
        ("십억", 1_000_000_000),
        ("억", 100_000_000),
    ],
)
def test_parse_price_formats(text, expected):
    """Separators, big/small units and digit words all parse to the magnitude."""
    assert parse_price(text) == expected


@pytest.mark.parametrize("text", ["Error", "", None, "   ", "N/A", "1.2.3", "."])
def test_unparsable_text_is_fixed_value(text):
    """Failure sentinel and garbage map to the documented constant."""
    assert parse_price(text) == UNPARSABLE_PRICE


def test_unparsable_sorts_below_everything():
    assert UNPARSABLE_PRICE < parse_price("0")
    assert UNPARSABLE_PRICE < parse_price("1")
    # Comparable with itself, unlike NaN
    assert UNPARSABLE_PRICE == parse_price("Error")
    assert sorted([parse_price("Error"), parse_price("5")]) == [UNPARSABLE_PRICE, 5]


def test_parse_price_is_deterministic():
    values = {parse_price("4억 5,600만") for _ in range(10)}
    assert values == {456_000_000}


def test_parse_korean_number_raises_without_digits():
    with pytest.raises(ValueError):
        parse_korean_number("Error")


def test_big_units_order_by_magnitude():
    texts = ["9,999만", "1억", "9,999억", "1조"]
    values = [parse_price(t) for t in texts]
    assert values == sorted(values)
