"""Category/unit suggestion and name cleanup for parsed price candidates.

Categories and units are picked by keyword: a rule matches when one of its
keywords is contained in any whitespace token of the lowercased item name.
Rules are checked in priority order (highest first); ties keep table order,
so built-in rules keep the order they are listed in ``patterns``.

To add new rules, either extend the tables in ``patterns`` or add
``[[categories]]`` / ``[[units]]`` entries to the project TOML config.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from pricescan.domain.prices import DEFAULT_CATEGORY, DEFAULT_UNIT, UNKNOWN_ITEM, ExtractedPrice

from .patterns import CATEGORY_KEYWORDS, UNIT_KEYWORDS

# (target, keywords, priority)
KeywordRule = tuple[str, tuple[str, ...], int]


@dataclass(frozen=True)
class KeywordTables:
    """In-memory category and unit rules, already sorted by priority."""

    categories: tuple[KeywordRule, ...]
    units: tuple[KeywordRule, ...]


def _normalize_keywords(raw: Any) -> tuple[str, ...]:
    """Normalize keywords value from TOML into a tuple of lowercase strings."""
    if isinstance(raw, str):
        value = raw.strip().lower()
        return (value,) if value else tuple()
    if isinstance(raw, list):
        return tuple(str(v).strip().lower() for v in raw if str(v).strip())
    return tuple()


def _rules_from_config(entries: Any, layer_priority: int) -> list[KeywordRule]:
    rules: list[KeywordRule] = []
    if not isinstance(entries, list):
        return rules
    for entry in entries:
        if not isinstance(entry, Mapping):
            continue
        keywords = _normalize_keywords(entry.get("keywords"))
        target = str(entry.get("name") or "").strip()
        if not keywords or not target:
            continue
        rules.append((target, keywords, int(entry.get("priority", 0)) + layer_priority))
    return rules


def _sorted(rules: list[KeywordRule]) -> tuple[KeywordRule, ...]:
    # sorted() is stable, so equal priorities keep insertion order.
    return tuple(sorted(rules, key=lambda rule: rule[2], reverse=True))


def build_keyword_tables(configs: Sequence[Mapping[str, Any]] | None = None) -> KeywordTables:
    """Merge built-in keyword tables with in-memory config layers.

    Each config may carry ``categories`` and ``units`` arrays of tables with
    ``name``, ``keywords`` and optional ``priority``. Later layers win over
    earlier ones and over the built-ins.
    """
    categories: list[KeywordRule] = [(name, keywords, 0) for name, keywords in CATEGORY_KEYWORDS]
    units: list[KeywordRule] = [(name, keywords, 0) for name, keywords in UNIT_KEYWORDS]

    for idx, config in enumerate(configs or (), start=1):
        layer_priority = idx * 100
        categories.extend(_rules_from_config(config.get("categories"), layer_priority))
        units.extend(_rules_from_config(config.get("units"), layer_priority))

    return KeywordTables(categories=_sorted(categories), units=_sorted(units))


@lru_cache(maxsize=1)
def default_keyword_tables() -> KeywordTables:
    """Built-in-only tables (no file I/O)."""
    return build_keyword_tables()


def _match_keyword_rule(name: str, rules: Sequence[KeywordRule], default: str) -> str:
    tokens = name.lower().split()
    for target, keywords, _priority in rules:
        for keyword in keywords:
            if any(keyword in token for token in tokens):
                return target
    return default


def categorize_item(name: str, tables: KeywordTables | None = None) -> str:
    """Return the category for an item name, e.g. "Rice 1lb" -> "Groceries"."""
    layers = tables or default_keyword_tables()
    return _match_keyword_rule(name, layers.categories, DEFAULT_CATEGORY)


def suggest_unit(name: str, tables: KeywordTables | None = None) -> str:
    """Return the unit for an item name, e.g. "Rice 1lb" -> "per lb"."""
    layers = tables or default_keyword_tables()
    return _match_keyword_rule(name, layers.units, DEFAULT_UNIT)


def normalize_item_name(name: str) -> str:
    """Collapse whitespace and capitalize each word ("rice  1LB" -> "Rice 1lb")."""
    words = name.split()
    if not words:
        return UNKNOWN_ITEM
    return " ".join(word[0].upper() + word[1:].lower() for word in words)


def enrich_price(candidate: ExtractedPrice, tables: KeywordTables | None = None) -> ExtractedPrice:
    """Return a copy of the candidate with name, category and unit filled in."""
    name = normalize_item_name(candidate.item_name)
    return dataclasses.replace(
        candidate,
        item_name=name,
        category=categorize_item(name, tables),
        unit=suggest_unit(name, tables),
    )
