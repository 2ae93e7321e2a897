"""pricescan: extract item prices from photos of receipts and shelf labels."""

__version__ = "0.1.0"
