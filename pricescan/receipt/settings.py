"""Tunable heuristics for extraction, selection and merging.

These values encode empirical heuristics, not domain rules. Defaults match
the behaviour the review UI was calibrated against; override them from the
project TOML config (see ``pricescan.runtime.config``).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .enrichment import KeywordTables, default_keyword_tables

# Parser
MAX_CANDIDATES = 10  # Bounds noise from long blocks of unrelated text
PLAUSIBLE_PRICE_MIN = 10.0
PLAUSIBLE_PRICE_MAX = 10000.0
LONG_LINE_LENGTH = 100  # Longer lines are likely prose, not price lines
FALLBACK_NAME_MAX_LENGTH = 30

BASE_CONFIDENCE = 0.5
CURRENCY_MARKER_BONUS = 0.2
PLAUSIBLE_RANGE_BONUS = 0.1
MULTI_TOKEN_BONUS = 0.1
LONG_LINE_PENALTY = 0.2

# Merger
DUPLICATE_SIMILARITY_THRESHOLD = 0.7
SECTION_CONFIDENCE_BONUS = 0.05  # Per extra overlapping section

# Enhancement selection score = count_weight * count + confidence_weight * mean
CANDIDATE_COUNT_WEIGHT = 1.0
AVERAGE_CONFIDENCE_WEIGHT = 1.0


@dataclass(frozen=True)
class ExtractionSettings:
    """All engine tunables in one immutable bundle."""

    max_candidates: int = MAX_CANDIDATES
    plausible_min: float = PLAUSIBLE_PRICE_MIN
    plausible_max: float = PLAUSIBLE_PRICE_MAX
    long_line_length: int = LONG_LINE_LENGTH
    fallback_name_max_length: int = FALLBACK_NAME_MAX_LENGTH
    skip_summary_lines: bool = False
    validate_category_ranges: bool = False
    duplicate_similarity_threshold: float = DUPLICATE_SIMILARITY_THRESHOLD
    section_bonus: float = SECTION_CONFIDENCE_BONUS
    count_weight: float = CANDIDATE_COUNT_WEIGHT
    confidence_weight: float = AVERAGE_CONFIDENCE_WEIGHT
    keyword_tables: KeywordTables = field(default_factory=default_keyword_tables)


DEFAULT_SETTINGS = ExtractionSettings()


CONFIDENCE_PRECISION = 4  # Keeps additive scores like 0.5 + 0.2 + 0.1 + 0.1 exact


def clamp_confidence(value: float) -> float:
    """Clamp a confidence score to [0, 1] and round it to CONFIDENCE_PRECISION places."""
    return round(max(0.0, min(1.0, value)), CONFIDENCE_PRECISION)
