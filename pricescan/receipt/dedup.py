"""Exact-match deduplication of candidates from a single capture."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from pricescan.domain.prices import ExtractedPrice

CENTS = Decimal("0.01")

DedupKey = tuple[Decimal, str]


def dedup_key(candidate: ExtractedPrice) -> DedupKey:
    """Key candidates by (price rounded to cents, exact item name)."""
    return candidate.price.quantize(CENTS, rounding=ROUND_HALF_UP), candidate.item_name


def deduplicate_capture(candidates: Iterable[ExtractedPrice]) -> list[ExtractedPrice]:
    """
    Collapse candidates sharing a dedup key, keeping the most confident one.

    Survivors stay in the position where their key was first seen. On equal
    confidence the earlier candidate is kept. Running this twice on its own
    output returns the same list.
    """
    kept: dict[DedupKey, ExtractedPrice] = {}
    for candidate in candidates:
        key = dedup_key(candidate)
        existing = kept.get(key)
        if existing is None or candidate.confidence > existing.confidence:
            # Re-assigning an existing key keeps its original insertion slot.
            kept[key] = candidate
    return list(kept.values())
