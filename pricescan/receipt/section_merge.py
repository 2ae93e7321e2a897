"""Merge candidates from several overlapping photos of one long receipt.

Adjacent sections are photographed with deliberate visual overlap so no
line is missed. The same item therefore often shows up in two sections,
sometimes with a slightly different name (cropped first word, OCR noise).
The merger collapses such probable duplicates, keeps the receipt's
top-to-bottom reading order, and reports an aggregate confidence.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from decimal import Decimal

from pricescan.domain.prices import ExtractedPrice, MergedReceiptResult, ReceiptSection

from .settings import DEFAULT_SETTINGS, ExtractionSettings, clamp_confidence
from .store_profiles import detect_store_type

PRICE_TOLERANCE = Decimal("0.01")


def section_marker(section_number: int) -> str:
    return f"--- Section {section_number} ---"


def word_similarity(name_a: str, name_b: str) -> float:
    """Jaccard similarity of the whitespace-separated word sets."""
    if name_a == name_b:
        return 1.0
    if not name_a or not name_b:
        return 0.0
    words_a = set(name_a.split())
    words_b = set(name_b.split())
    union = words_a | words_b
    if not union:
        return 0.0
    return len(words_a & words_b) / len(union)


def _names_match(name_a: str, name_b: str, threshold: float) -> bool:
    a = name_a.lower()
    b = name_b.lower()
    if word_similarity(a, b) >= threshold:
        return True
    # A section edge tends to crop the start of a line: "Milk 1L" vs "Fresh Milk 1L".
    words_a = set(a.split())
    words_b = set(b.split())
    return bool(words_a) and bool(words_b) and (words_a <= words_b or words_b <= words_a)


def is_probable_duplicate(
    a: ExtractedPrice, b: ExtractedPrice, settings: ExtractionSettings = DEFAULT_SETTINGS
) -> bool:
    """Same price (within a cent) and a similar item name."""
    if abs(a.price - b.price) >= PRICE_TOLERANCE:
        return False
    return _names_match(a.item_name, b.item_name, settings.duplicate_similarity_threshold)


def remove_probable_duplicates(
    candidates: Sequence[ExtractedPrice], settings: ExtractionSettings = DEFAULT_SETTINGS
) -> list[ExtractedPrice]:
    """
    Fuzzy dedup over clusters of probable duplicates.

    Duplicates are grouped transitively ("Bread" ~ "Wheat Bread" ~ "Wheat"
    form one cluster), so no two survivors are probable duplicates of each
    other. Each cluster keeps its most confident member; ties keep the
    earliest. Survivors come back in input order.
    """
    items = list(candidates)
    parent = list(range(len(items)))

    def find(idx: int) -> int:
        while parent[idx] != idx:
            parent[idx] = parent[parent[idx]]
            idx = parent[idx]
        return idx

    for i in range(len(items)):
        for j in range(i):
            if is_probable_duplicate(items[i], items[j], settings):
                root_i, root_j = find(i), find(j)
                if root_i != root_j:
                    parent[max(root_i, root_j)] = min(root_i, root_j)

    best: dict[int, int] = {}
    for idx, item in enumerate(items):
        root = find(idx)
        if root not in best or item.confidence > items[best[root]].confidence:
            best[root] = idx
    return [items[idx] for idx in sorted(best.values())]


def aggregate_confidence(
    candidates: Sequence[ExtractedPrice], section_count: int, settings: ExtractionSettings = DEFAULT_SETTINGS
) -> float:
    """
    Mean candidate confidence plus a small bonus per extra section.

    Overlapping sections give redundant coverage, so each section beyond the
    first adds ``settings.section_bonus``. No candidates means 0.0.
    """
    if not candidates:
        return 0.0
    mean = sum(c.confidence for c in candidates) / len(candidates)
    return clamp_confidence(mean + settings.section_bonus * max(section_count - 1, 0))


def _reading_order(candidate: ExtractedPrice) -> tuple[int, float]:
    return (candidate.section_number or 0, candidate.position.top)


def merge_sections(
    section_candidates: Sequence[Sequence[ExtractedPrice]],
    sections: Sequence[ReceiptSection],
    section_texts: Sequence[str] | None = None,
    settings: ExtractionSettings = DEFAULT_SETTINGS,
) -> MergedReceiptResult:
    """
    Merge per-section candidate lists into one result.

    Args:
        section_candidates: Deduplicated candidates per section, aligned with ``sections``
        sections: The sections in capture order
        section_texts: Recognized full text per section, aligned with ``sections``
        settings: Tunables (similarity threshold, section bonus)

    Returns:
        MergedReceiptResult with candidates ordered by section then vertical position
    """
    if len(section_candidates) != len(sections):
        raise ValueError(f"Got {len(section_candidates)} candidate lists for {len(sections)} sections")
    texts = list(section_texts) if section_texts is not None else [""] * len(sections)
    if len(texts) != len(sections):
        raise ValueError(f"Got {len(texts)} section texts for {len(sections)} sections")

    ordered = sorted(zip(sections, section_candidates, texts), key=lambda item: item[0].section_number)

    tagged: list[ExtractedPrice] = []
    for section, candidates, _text in ordered:
        for candidate in candidates:
            if candidate.section_number is None:
                candidate = dataclasses.replace(candidate, section_number=section.section_number)
            tagged.append(candidate)

    survivors = remove_probable_duplicates(tagged, settings)
    survivors.sort(key=_reading_order)

    full_text = "\n\n".join(f"{section_marker(section.section_number)}\n{text}" for section, _c, text in ordered)

    return MergedReceiptResult(
        prices=tuple(survivors),
        full_text=full_text,
        total_sections=len(sections),
        confidence=aggregate_confidence(survivors, len(sections), settings),
        store_type=detect_store_type("\n".join(text for _s, _c, text in ordered)),
    )
