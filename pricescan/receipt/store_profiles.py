"""Store-type detection and per-category price ranges.

Warehouse clubs sell in bulk, so the lowest believable price for every
category is raised on their receipts.
"""

from __future__ import annotations

import re
from decimal import Decimal

from pricescan.domain.prices import DEFAULT_CATEGORY, StoreType

GENERIC: StoreType = "generic"
GENERIC_SUPERMARKET: StoreType = "generic_supermarket"
PRICESMART: StoreType = "pricesmart"

_PRICESMART_NAME = re.compile(r"price\s*smart", re.IGNORECASE)
_SUPERMARKET_KEYWORDS = ("supermarket", "grocery")

# Inclusive (min, max) per category, JMD
CATEGORY_PRICE_RANGES: dict[str, tuple[Decimal, Decimal]] = {
    "Meat & Seafood": (Decimal("100"), Decimal("5000")),
    "Produce": (Decimal("20"), Decimal("2000")),
    "Dairy": (Decimal("50"), Decimal("2000")),
    "Beverages": (Decimal("30"), Decimal("1500")),
    "Groceries": (Decimal("25"), Decimal("3000")),
    "Household": (Decimal("50"), Decimal("4000")),
    DEFAULT_CATEGORY: (Decimal("10"), Decimal("10000")),
}
MAX_CHECKED_PRICE = Decimal("50000")
BULK_STORE_MIN_PRICE = Decimal("100")


def detect_store_type(text: str) -> StoreType:
    """Classify the store from recognized receipt text."""
    if _PRICESMART_NAME.search(text):
        return PRICESMART
    lowered = text.lower()
    if any(keyword in lowered for keyword in _SUPERMARKET_KEYWORDS):
        return GENERIC_SUPERMARKET
    return GENERIC


def price_in_category_range(price: Decimal, category: str, store_type: StoreType = GENERIC) -> bool:
    """
    Whether a price is believable for its category.

    Categories without their own range (including ones added from config)
    use the "Other" range. At a bulk store the minimum is doubled, and never
    below BULK_STORE_MIN_PRICE.
    """
    if price <= 0 or price > MAX_CHECKED_PRICE:
        return False
    low, high = CATEGORY_PRICE_RANGES.get(category, CATEGORY_PRICE_RANGES[DEFAULT_CATEGORY])
    if store_type == PRICESMART:
        low = max(low * 2, BULK_STORE_MIN_PRICE)
    return low <= price <= high
