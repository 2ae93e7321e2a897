"""Line-based price extraction from recognized receipt text."""

from __future__ import annotations

from dataclasses import dataclass

from pricescan.domain.prices import UNKNOWN_ITEM, ExtractedPrice, RecognizedLine, RecognizedText

from .dedup import deduplicate_capture
from .enrichment import enrich_price
from .patterns import (
    PRICE_PATTERNS,
    clean_name_fragment,
    has_currency_marker,
    is_valid_price,
    looks_like_summary_line,
    normalize_amount,
)
from .settings import (
    BASE_CONFIDENCE,
    CURRENCY_MARKER_BONUS,
    DEFAULT_SETTINGS,
    LONG_LINE_PENALTY,
    MULTI_TOKEN_BONUS,
    PLAUSIBLE_RANGE_BONUS,
    ExtractionSettings,
    clamp_confidence,
)
from .store_profiles import detect_store_type, price_in_category_range


@dataclass(frozen=True)
class _PriceMatch:
    start: int
    end: int
    raw_amount: str
    pattern_name: str


def _find_price_matches(text: str) -> list[_PriceMatch]:
    """
    Run every price pattern over a line, in pattern order.

    A match overlapping a span already claimed by an earlier pattern is
    dropped, so "J$120.00" yields one match rather than a prefixed and a
    bare-decimal one.
    """
    claimed: list[tuple[int, int]] = []
    matches: list[_PriceMatch] = []
    for name, pattern in PRICE_PATTERNS:
        for match in pattern.finditer(text):
            start, end = match.span()
            if any(start < c_end and c_start < end for c_start, c_end in claimed):
                continue
            claimed.append((start, end))
            matches.append(_PriceMatch(start=start, end=end, raw_amount=match.group("amount"), pattern_name=name))
    matches.sort(key=lambda m: m.start)
    return matches


def _derive_item_name(text: str, match: _PriceMatch, settings: ExtractionSettings) -> str:
    """Prefer the text before the price; fall back to a short trailing label."""
    prefix = clean_name_fragment(text[: match.start])
    if prefix:
        return prefix
    suffix = clean_name_fragment(text[match.end :])
    if suffix and len(suffix) < settings.fallback_name_max_length:
        return suffix
    return UNKNOWN_ITEM


def score_line_confidence(text: str, value: float, settings: ExtractionSettings = DEFAULT_SETTINGS) -> float:
    """
    Additive confidence for one price found on a line.

    Starts at 0.5; an explicit currency marker adds 0.2, a value inside the
    plausible range adds 0.1, two or more tokens (an item name is likely
    present) add 0.1, and an overlong line (likely prose) costs 0.2.
    """
    confidence = BASE_CONFIDENCE
    if has_currency_marker(text):
        confidence += CURRENCY_MARKER_BONUS
    if settings.plausible_min <= value <= settings.plausible_max:
        confidence += PLAUSIBLE_RANGE_BONUS
    if len(text.split()) >= 2:
        confidence += MULTI_TOKEN_BONUS
    if len(text) > settings.long_line_length:
        confidence -= LONG_LINE_PENALTY
    return clamp_confidence(confidence)


def parse_line(line: RecognizedLine, settings: ExtractionSettings = DEFAULT_SETTINGS) -> list[ExtractedPrice]:
    """Extract raw (unenriched) candidates from one recognized line."""
    text = line.text
    if not text.strip():
        return []
    if settings.skip_summary_lines and looks_like_summary_line(text):
        return []

    candidates: list[ExtractedPrice] = []
    for match in _find_price_matches(text):
        value = normalize_amount(match.raw_amount)
        if value is None or not is_valid_price(value):
            continue
        candidates.append(
            ExtractedPrice(
                item_name=_derive_item_name(text, match, settings),
                price=value,
                original_text=text,
                confidence=score_line_confidence(text, float(value), settings),
                position=line.bounding_box,
            )
        )
    return candidates


def extract_candidates(
    recognized: RecognizedText, settings: ExtractionSettings = DEFAULT_SETTINGS
) -> list[ExtractedPrice]:
    """Parse every line, dedupe, rank by confidence and cap (no enrichment)."""
    candidates: list[ExtractedPrice] = []
    for line in recognized.iter_lines():
        candidates.extend(parse_line(line, settings))

    unique = deduplicate_capture(candidates)
    # Stable sort: equal confidence keeps reading order.
    unique.sort(key=lambda c: c.confidence, reverse=True)
    return unique[: settings.max_candidates]


def parse_prices(recognized: RecognizedText, settings: ExtractionSettings = DEFAULT_SETTINGS) -> list[ExtractedPrice]:
    """
    Turn recognized text into ranked, enriched price candidates.

    Args:
        recognized: Recognition output (blocks of lines with bounding boxes)
        settings: Tunables; defaults reproduce the calibrated behaviour

    Returns:
        At most ``settings.max_candidates`` candidates, highest confidence
        first, each with a normalized name, category and unit.
        With ``validate_category_ranges`` set, candidates priced outside
        their category's range for the detected store type are dropped.
    """
    enriched = [enrich_price(c, settings.keyword_tables) for c in extract_candidates(recognized, settings)]
    if settings.validate_category_ranges:
        store_type = detect_store_type(recognized.full_text)
        enriched = [c for c in enriched if price_in_category_range(c.price, c.category, store_type)]
    # Name normalization can make two survivors share a key ("RICE" vs "Rice").
    return deduplicate_capture(enriched)


def parse_text(text: str, settings: ExtractionSettings = DEFAULT_SETTINGS) -> list[ExtractedPrice]:
    """Convenience wrapper for plain newline-separated text."""
    return parse_prices(RecognizedText.from_lines(text.splitlines()), settings)
