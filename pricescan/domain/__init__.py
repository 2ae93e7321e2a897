"""Core domain models for the pricescan project.

This module provides the data models shared by every layer:
- ExtractedPrice, Rect: candidate price records
- RecognizedText, RecognizedBlock, RecognizedLine: recognition engine output
- ReceiptSection, CaptureResult, MergedReceiptResult: capture/merge results
- Typed engine errors and the cancellation token

Usage:
    from pricescan.domain import ExtractedPrice, RecognizedText
"""

from pricescan.domain.cancellation import CancellationToken
from pricescan.domain.errors import (
    CancellationRequested,
    ImageUnreadable,
    InsufficientSections,
    PriceScanError,
    RecognitionFailure,
)
from pricescan.domain.prices import (
    DEFAULT_CATEGORY,
    DEFAULT_UNIT,
    UNKNOWN_ITEM,
    CaptureResult,
    EnhancementVariant,
    ExtractedPrice,
    MergedReceiptResult,
    ReceiptSection,
    RecognizedBlock,
    RecognizedLine,
    RecognizedText,
    Rect,
    StoreType,
)

__all__ = [
    # Models
    "CaptureResult",
    "EnhancementVariant",
    "ExtractedPrice",
    "MergedReceiptResult",
    "ReceiptSection",
    "RecognizedBlock",
    "RecognizedLine",
    "RecognizedText",
    "Rect",
    "StoreType",
    "DEFAULT_CATEGORY",
    "DEFAULT_UNIT",
    "UNKNOWN_ITEM",
    # Errors
    "PriceScanError",
    "ImageUnreadable",
    "RecognitionFailure",
    "CancellationRequested",
    "InsufficientSections",
    "CancellationToken",
]
