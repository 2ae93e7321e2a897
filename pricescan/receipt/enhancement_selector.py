"""Pick the enhancement variant whose recognized text parses best.

The recognition engine and the pixel transforms are external collaborators,
described here as protocols. The price parser is used purely as a scoring
oracle: the variant yielding the most (and most confident) candidates wins.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from pricescan.domain.cancellation import CancellationToken
from pricescan.domain.errors import RecognitionFailure
from pricescan.domain.prices import EnhancementVariant, ExtractedPrice, RecognizedText

from .price_parser import parse_prices
from .settings import DEFAULT_SETTINGS, ExtractionSettings


class TextRecognizer(Protocol):
    """Black-box recognition engine: image -> blocks of lines with boxes.

    Implementations signal errors by raising ``RecognitionFailure``.
    """

    def recognize(self, image: Any) -> RecognizedText: ...


class ImageEnhancer(Protocol):
    """Produces one enhanced copy of an image per variant."""

    def enhance(self, image: Any, variant: EnhancementVariant) -> Any: ...


@dataclass(frozen=True)
class VariantAttempt:
    """Outcome of trying one variant; ``error`` is set when it was skipped."""

    variant: EnhancementVariant
    score: float = 0.0
    candidate_count: int = 0
    error: str | None = None


@dataclass(frozen=True)
class VariantSelection:
    """Winning variant with its recognized text and parsed candidates."""

    variant: EnhancementVariant
    recognized: RecognizedText
    candidates: tuple[ExtractedPrice, ...]
    attempts: tuple[VariantAttempt, ...] = ()

    @property
    def full_text(self) -> str:
        return self.recognized.full_text


def score_candidates(candidates: Sequence[ExtractedPrice], settings: ExtractionSettings = DEFAULT_SETTINGS) -> float:
    """Combine candidate count and average confidence into one score."""
    if not candidates:
        return 0.0
    average = sum(c.confidence for c in candidates) / len(candidates)
    return settings.count_weight * len(candidates) + settings.confidence_weight * average


def select_best_variant(
    image: Any,
    recognizer: TextRecognizer,
    enhancer: ImageEnhancer,
    settings: ExtractionSettings = DEFAULT_SETTINGS,
    variants: Sequence[EnhancementVariant] = tuple(EnhancementVariant),
    cancel_token: CancellationToken | None = None,
) -> VariantSelection:
    """
    Try each enhancement variant in order and keep the best-scoring parse.

    The original image is used as-is for ``EnhancementVariant.ORIGINAL``.
    An enhancer error only disqualifies that variant. Ties keep the earlier
    variant. When nothing parses, the original variant's text is returned
    with no candidates (a valid "no prices found" outcome).

    Raises:
        RecognitionFailure: recognition failed for every variant
        CancellationRequested: the token was cancelled between variants
    """
    attempts: list[VariantAttempt] = []
    best: VariantSelection | None = None
    best_score = 0.0
    fallback: VariantSelection | None = None
    recognition_errors: list[str] = []

    for variant in variants:
        if cancel_token is not None:
            cancel_token.raise_if_cancelled(f"Cancelled before {variant.value} variant")

        if variant is EnhancementVariant.ORIGINAL:
            candidate_image = image
        else:
            try:
                candidate_image = enhancer.enhance(image, variant)
            except Exception as exc:  # Enhancer errors only disqualify this variant
                attempts.append(VariantAttempt(variant=variant, error=f"enhancement failed: {exc}"))
                continue

        try:
            recognized = recognizer.recognize(candidate_image)
        except RecognitionFailure as exc:
            recognition_errors.append(f"{variant.value}: {exc}")
            attempts.append(VariantAttempt(variant=variant, error=f"recognition failed: {exc}"))
            continue

        candidates = tuple(parse_prices(recognized, settings))
        score = score_candidates(candidates, settings)
        attempts.append(VariantAttempt(variant=variant, score=score, candidate_count=len(candidates)))

        selection = VariantSelection(variant=variant, recognized=recognized, candidates=candidates)
        if fallback is None or variant is EnhancementVariant.ORIGINAL:
            fallback = selection
        if candidates and (best is None or score > best_score):
            best = selection
            best_score = score

    chosen = best or fallback
    if chosen is None:
        detail = "; ".join(recognition_errors) or "no variant could be recognized"
        raise RecognitionFailure(f"Recognition failed for every enhancement variant ({detail})")

    return VariantSelection(
        variant=chosen.variant,
        recognized=chosen.recognized,
        candidates=chosen.candidates,
        attempts=tuple(attempts),
    )
