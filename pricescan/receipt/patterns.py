"""Price patterns and keyword tables used by the price parser."""

import re
from decimal import Decimal, InvalidOperation

# A parsed price must fall strictly inside this range; anything else is rejected.
PRICE_FLOOR = Decimal("0")
PRICE_CEILING = Decimal("100000")

# Amount with optional comma grouping and up to two decimals: "1,250.00", "120", "5.5"
_AMOUNT = r"\d{1,3}(?:,\d{3})+(?:\.\d{1,2})?|\d+(?:\.\d{1,2})?"

# "J$120.00", "JMD 1,250", "$5.99", "US$3.00"
CURRENCY_PREFIXED_PRICE = re.compile(
    rf"(?:J\$|US\$|JMD\s*|\$)\s*(?P<amount>{_AMOUNT})(?![\d,]|\.\d)",
    re.IGNORECASE,
)

# "120.00 JMD", "45$"
CURRENCY_SUFFIXED_PRICE = re.compile(
    rf"(?<![\d.,])(?P<amount>{_AMOUNT})\s*(?:JMD|J\$|\$)(?!\d)",
    re.IGNORECASE,
)

# "Bread 250.00" - no currency at all, only trusted when the cents are ".00".
# NOTE: also matches non-price decimals like "2.00 kg"; kept for compatibility.
BARE_DECIMAL_PRICE = re.compile(r"(?<![\d.,$])(?P<amount>\d{1,3}(?:,\d{3})+\.00|\d+\.00)(?!\d)")

# Matchers are applied in this order; earlier matchers claim their span first.
PRICE_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("currency_prefixed", CURRENCY_PREFIXED_PRICE),
    ("currency_suffixed", CURRENCY_SUFFIXED_PRICE),
    ("bare_decimal", BARE_DECIMAL_PRICE),
)

CURRENCY_MARKER = re.compile(r"J\$|US\$|JMD|\$", re.IGNORECASE)
_CURRENCY_SYMBOLS = re.compile(r"J\$|US\$|JMD|\$", re.IGNORECASE)

# Everything except word characters, whitespace and parentheses
_NAME_PUNCTUATION = re.compile(r"[^\w\s()]")

# Totals, tax, payment and receipt-header lines are not items.
SUMMARY_LINE_KEYWORDS = (
    "subtotal",
    "sub total",
    "total",
    "tax",
    "gct",
    "cash",
    "change",
    "tender",
    "balance",
    "thank",
    "cashier",
    "transaction",
    "receipt",
    "date",
    "time",
    "ref",
    "seq",
    "terminal",
)
_DIGITS_ONLY = re.compile(r"^\d+$")
MIN_PRODUCT_LINE_LENGTH = 3
_SUMMARY_LINE = re.compile(r"\b(?:" + "|".join(re.escape(k) for k in SUMMARY_LINE_KEYWORDS) + r")\b", re.IGNORECASE)

# Built-in category keywords; first category with a keyword contained in any
# name token wins, so order matters.
CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Groceries", ("rice", "bread", "flour", "sugar", "pasta", "cereal")),
    ("Meat & Seafood", ("chicken", "beef", "pork", "fish", "meat", "bacon", "shrimp", "mutton")),
    ("Fuel", ("gas", "fuel", "petrol", "diesel", "kerosene")),
    ("Dairy", ("milk", "cheese", "yogurt", "butter")),
    ("Produce", ("banana", "apple", "orange", "tomato", "onion", "potato", "lettuce", "carrot", "plantain")),
    ("Beverages", ("juice", "soda", "water", "cola", "beer", "wine")),
    ("Household", ("soap", "detergent", "tissue", "bleach")),
)

UNIT_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("per lb", ("lb", "pound")),
    ("per kg", ("kg", "kilo")),
    ("per gallon", ("gal", "gallon")),
    ("per liter", ("liter", "litre")),
    ("per pack", ("pack",)),
)


def normalize_amount(raw: str) -> Decimal | None:
    """Strip currency symbols, grouping separators and whitespace, then parse."""
    cleaned = _CURRENCY_SYMBOLS.sub("", raw)
    cleaned = cleaned.replace(",", "")
    cleaned = re.sub(r"\s+", "", cleaned)
    if not cleaned:
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def is_valid_price(value: Decimal) -> bool:
    return PRICE_FLOOR < value < PRICE_CEILING


def has_currency_marker(text: str) -> bool:
    return CURRENCY_MARKER.search(text) is not None


def looks_like_summary_line(text: str) -> bool:
    """
    Return True for lines that should not become items.

    Covers total/tax/payment and receipt-header lines, bare item codes
    (digits only) and fragments shorter than MIN_PRODUCT_LINE_LENGTH.
    """
    stripped = text.strip()
    if len(stripped) < MIN_PRODUCT_LINE_LENGTH or _DIGITS_ONLY.match(stripped):
        return True
    return _SUMMARY_LINE.search(stripped) is not None


def clean_name_fragment(text: str) -> str:
    """Trim a name fragment and drop punctuation other than parentheses."""
    cleaned = _NAME_PUNCTUATION.sub(" ", text)
    cleaned = re.sub(r"[\s_]+", " ", cleaned).strip()
    if not cleaned:
        return ""
    return cleaned[0].upper() + cleaned[1:]
