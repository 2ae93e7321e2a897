"""Shared pytest fixtures for pricescan tests.

Tests never talk to a real OCR service: "images" are plain strings (or text
files) and the fake recognizer turns them straight into recognized lines.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from pricescan.application import CaptureEngine
from pricescan.domain import EnhancementVariant, ImageUnreadable, RecognitionFailure, RecognizedText
from pricescan.receipt.settings import DEFAULT_SETTINGS


class FakeRecognizer:
    """Looks up text by image key; enhanced images look like ``"<key>:<variant>"``."""

    def __init__(self, texts: dict[str, str], failing: set[str] | None = None) -> None:
        self.texts = texts
        self.failing = failing or set()
        self.calls: list[str] = []

    def recognize(self, image: Any) -> RecognizedText:
        key = str(image)
        self.calls.append(key)
        if key in self.failing or key.split(":", 1)[0] in self.failing:
            raise RecognitionFailure(f"engine down for {key}")
        text = self.texts.get(key, self.texts.get(key.split(":", 1)[0], ""))
        return RecognizedText.from_lines(text.splitlines())


class FakeEnhancer:
    """Tags the image key with the variant name; optionally fails some variants."""

    def __init__(self, failing: set[EnhancementVariant] | None = None) -> None:
        self.failing = failing or set()

    def enhance(self, image: Any, variant: EnhancementVariant) -> str:
        if variant in self.failing:
            raise RuntimeError(f"{variant.value} filter crashed")
        return f"{image}:{variant.value}"


def name_loader(unreadable: set[str] | None = None) -> Callable[[Path], str]:
    """Image loader returning the file name as the "image"."""
    bad = unreadable or set()

    def _load(path: Path) -> str:
        if path.name in bad:
            raise ImageUnreadable(f"Failed to decode image {path.name}")
        return path.name

    return _load


@pytest.fixture
def make_engine() -> Callable[..., CaptureEngine]:
    def _make(
        texts: dict[str, str],
        unreadable: set[str] | None = None,
        failing: set[str] | None = None,
    ) -> CaptureEngine:
        return CaptureEngine(
            recognizer=FakeRecognizer(texts, failing=failing),
            enhancer=FakeEnhancer(),
            image_loader=name_loader(unreadable),
            settings=DEFAULT_SETTINGS,
        )

    return _make
