from __future__ import annotations

from decimal import Decimal

from pricescan.domain import ExtractedPrice
from pricescan.receipt.dedup import dedup_key, deduplicate_capture


def _price(name: str, price: str, confidence: float) -> ExtractedPrice:
    return ExtractedPrice(item_name=name, price=Decimal(price), original_text=f"{name} {price}", confidence=confidence)


def test_keeps_highest_confidence_in_first_seen_slot() -> None:
    candidates = [
        _price("Rice", "120.00", 0.7),
        _price("Milk", "220.00", 0.9),
        _price("Rice", "120.00", 0.9),
    ]

    result = deduplicate_capture(candidates)

    assert [(c.item_name, c.confidence) for c in result] == [("Rice", 0.9), ("Milk", 0.9)]


def test_equal_confidence_keeps_earlier_candidate() -> None:
    first = _price("Rice", "120.00", 0.8)
    second = ExtractedPrice(item_name="Rice", price=Decimal("120.00"), original_text="other line", confidence=0.8)

    assert deduplicate_capture([first, second]) == [first]


def test_key_rounds_price_to_cents() -> None:
    assert dedup_key(_price("Rice", "120", 0.8)) == dedup_key(_price("Rice", "120.00", 0.8))
    assert dedup_key(_price("Rice", "120.005", 0.8)) == (Decimal("120.01"), "Rice")


def test_names_are_compared_exactly() -> None:
    result = deduplicate_capture([_price("Rice", "120.00", 0.8), _price("rice", "120.00", 0.8)])

    assert len(result) == 2


def test_deduplication_is_idempotent() -> None:
    candidates = [
        _price("Rice", "120.00", 0.7),
        _price("Rice", "120.00", 0.9),
        _price("Milk", "220.00", 0.8),
        _price("Milk", "220.001", 0.85),
        _price("Bread", "250.00", 0.7),
    ]

    once = deduplicate_capture(candidates)

    assert deduplicate_capture(once) == once
