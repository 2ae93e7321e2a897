"""Data models for price extraction from receipt captures."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Literal

UNKNOWN_ITEM = "Unknown Item"
DEFAULT_CATEGORY = "Other"
DEFAULT_UNIT = "each"


@dataclass(frozen=True)
class Rect:
    """Axis-aligned bounding box, pixel or normalized coordinates."""

    left: float
    top: float
    right: float
    bottom: float

    @classmethod
    def zero(cls) -> Rect:
        return cls(0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class ExtractedPrice:
    """A single candidate price record parsed from one recognized line."""

    item_name: str
    price: Decimal
    original_text: str
    confidence: float
    position: Rect = field(default_factory=Rect.zero)
    category: str = DEFAULT_CATEGORY
    unit: str = DEFAULT_UNIT
    # Only set for captures that belong to a multi-section receipt.
    section_number: int | None = None


@dataclass(frozen=True)
class RecognizedLine:
    text: str
    bounding_box: Rect = field(default_factory=Rect.zero)


@dataclass(frozen=True)
class RecognizedBlock:
    lines: tuple[RecognizedLine, ...] = ()


@dataclass(frozen=True)
class RecognizedText:
    """Output of the text-recognition engine for one image."""

    blocks: tuple[RecognizedBlock, ...] = ()

    @classmethod
    def empty(cls) -> RecognizedText:
        return cls()

    @classmethod
    def from_lines(cls, lines: list[str] | tuple[str, ...]) -> RecognizedText:
        """Build a single-block result, stacking lines top to bottom."""
        recognized = tuple(
            RecognizedLine(text=text, bounding_box=Rect(0.0, float(i), 1.0, float(i + 1)))
            for i, text in enumerate(lines)
        )
        return cls(blocks=(RecognizedBlock(lines=recognized),))

    def iter_lines(self) -> list[RecognizedLine]:
        return [line for block in self.blocks for line in block.lines]

    @property
    def full_text(self) -> str:
        return "\n".join(line.text for line in self.iter_lines())


class EnhancementVariant(enum.Enum):
    """Image enhancement variants, in the order they are tried."""

    ORIGINAL = "original"
    CONTRAST = "contrast"
    BRIGHTNESS = "brightness"
    SHARPEN = "sharpen"
    GRAYSCALE = "grayscale"
    BINARIZE = "binarize"


@dataclass(frozen=True)
class ReceiptSection:
    """One photograph in a long-receipt capture sequence."""

    image_path: Path
    section_number: int  # 1-based, capture order
    timestamp: datetime = field(default_factory=datetime.now)


CaptureStatus = Literal["prices_found", "no_prices_found"]
StoreType = Literal["pricesmart", "generic_supermarket", "generic"]


@dataclass(frozen=True)
class CaptureResult:
    """Extraction outcome for a single capture."""

    full_text: str
    prices: tuple[ExtractedPrice, ...]
    variant: EnhancementVariant = EnhancementVariant.ORIGINAL
    store_type: StoreType = "generic"

    @property
    def status(self) -> CaptureStatus:
        return "prices_found" if self.prices else "no_prices_found"


@dataclass(frozen=True)
class MergedReceiptResult:
    """Combined result for all sections of one long receipt."""

    prices: tuple[ExtractedPrice, ...]
    full_text: str
    total_sections: int
    confidence: float
    store_type: StoreType = "generic"
