"""Store-type detection and category price ranges."""

from __future__ import annotations

from decimal import Decimal

import pytest

from pricescan.receipt.store_profiles import (
    GENERIC,
    GENERIC_SUPERMARKET,
    PRICESMART,
    detect_store_type,
    price_in_category_range,
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("PRICESMART\nMember 0042", PRICESMART),
        ("Price Smart Portmore", PRICESMART),
        ("SOVEREIGN SUPERMARKET\nRice 1lb J$120.00", GENERIC_SUPERMARKET),
        ("Corner Grocery", GENERIC_SUPERMARKET),
        ("Rice 1lb J$120.00", GENERIC),
        ("", GENERIC),
    ],
)
def test_detect_store_type(text: str, expected: str) -> None:
    assert detect_store_type(text) == expected


def test_category_ranges_are_inclusive() -> None:
    assert price_in_category_range(Decimal("100"), "Meat & Seafood")
    assert price_in_category_range(Decimal("5000"), "Meat & Seafood")
    assert not price_in_category_range(Decimal("99.99"), "Meat & Seafood")
    assert not price_in_category_range(Decimal("1500.01"), "Beverages")


def test_unknown_category_uses_other_range() -> None:
    assert price_in_category_range(Decimal("10"), "Fuel")
    assert not price_in_category_range(Decimal("9.99"), "Snacks")
    assert not price_in_category_range(Decimal("10000.01"), "Snacks")


def test_bulk_store_raises_minimum() -> None:
    # Groceries minimum 25 doubles to 50, then the bulk floor of 100 applies.
    assert price_in_category_range(Decimal("60"), "Groceries")
    assert not price_in_category_range(Decimal("60"), "Groceries", PRICESMART)
    assert price_in_category_range(Decimal("100"), "Groceries", PRICESMART)
    # Meat minimum 100 doubles to 200.
    assert not price_in_category_range(Decimal("150"), "Meat & Seafood", PRICESMART)


def test_non_positive_and_huge_prices_fail() -> None:
    assert not price_in_category_range(Decimal("0"), "Other")
    assert not price_in_category_range(Decimal("60000"), "Other")
