from __future__ import annotations

from decimal import Decimal

import pytest

from pricescan.domain import UNKNOWN_ITEM, ExtractedPrice
from pricescan.receipt.enrichment import (
    build_keyword_tables,
    categorize_item,
    enrich_price,
    normalize_item_name,
    suggest_unit,
)


@pytest.mark.parametrize(
    ("name", "category"),
    [
        ("Rice 1lb", "Groceries"),
        ("Chicken Breast", "Meat & Seafood"),
        ("Diesel", "Fuel"),
        ("Milk 1L", "Dairy"),
        ("Ripe Bananas", "Produce"),
        ("Orange Juice", "Produce"),
        ("Bottled Water", "Beverages"),
        ("Laundry Detergent", "Household"),
        ("Phone Card", "Other"),
    ],
)
def test_categorize_item(name: str, category: str) -> None:
    assert categorize_item(name) == category


@pytest.mark.parametrize(
    ("name", "unit"),
    [
        ("Rice 1lb", "per lb"),
        ("Sugar 2kg", "per kg"),
        ("Gasoline Gallon", "per gallon"),
        ("Juice 1 Litre", "per liter"),
        ("Biscuits 6 Pack", "per pack"),
        ("Milk 1L", "each"),
    ],
)
def test_suggest_unit(name: str, unit: str) -> None:
    assert suggest_unit(name) == unit


def test_normalize_item_name() -> None:
    assert normalize_item_name("rice   1LB") == "Rice 1lb"
    assert normalize_item_name("   ") == UNKNOWN_ITEM


def test_enrich_price_returns_new_record() -> None:
    raw = ExtractedPrice(item_name="RICE 1LB", price=Decimal("120.00"), original_text="RICE 1LB J$120.00", confidence=0.9)

    enriched = enrich_price(raw)

    assert raw.item_name == "RICE 1LB"
    assert raw.category == "Other"
    assert enriched.item_name == "Rice 1lb"
    assert enriched.category == "Groceries"
    assert enriched.unit == "per lb"
    assert enriched.price == raw.price
    assert enriched.confidence == raw.confidence


def test_config_rules_take_priority_over_builtins() -> None:
    tables = build_keyword_tables([{"categories": [{"name": "Snacks", "keywords": ["chips"]}]}])

    assert categorize_item("Banana Chips", tables) == "Snacks"
    assert categorize_item("Banana") == "Produce"


def test_later_config_layers_win() -> None:
    tables = build_keyword_tables(
        [
            {"units": [{"name": "per dozen", "keywords": "doz"}]},
            {"units": [{"name": "per tray", "keywords": ["doz"]}]},
        ]
    )

    assert suggest_unit("Eggs 1 Doz", tables) == "per tray"


def test_invalid_config_entries_are_skipped() -> None:
    tables = build_keyword_tables([{"categories": [{"name": "", "keywords": ["x"]}, "bad", {"name": "Toys"}]}])

    assert [rule[0] for rule in tables.categories if rule[0] in {"", "Toys"}] == []
