"""Capture processing workflows: single capture, batch, long receipt."""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from pricescan.domain.cancellation import CancellationToken
from pricescan.domain.errors import (
    CancellationRequested,
    ImageUnreadable,
    InsufficientSections,
    RecognitionFailure,
)
from pricescan.domain.prices import CaptureResult, MergedReceiptResult, ReceiptSection
from pricescan.receipt.enhancement_selector import ImageEnhancer, TextRecognizer, select_best_variant
from pricescan.receipt.section_merge import merge_sections
from pricescan.receipt.settings import DEFAULT_SETTINGS, ExtractionSettings
from pricescan.receipt.store_profiles import detect_store_type
from pricescan.runtime import get_logger

logger = get_logger(__name__)

OutcomeStatus = Literal[
    "success",
    "no_prices_found",
    "image_unreadable",
    "recognition_failure",
]
JobStatus = Literal["completed", "cancelled"]

# (current_index, total, current_label), called after each image completes
ProgressCallback = Callable[[int, int, str], None]


@dataclass(frozen=True)
class CaptureEngine:
    """Collaborators and tunables used to process captures."""

    recognizer: TextRecognizer
    enhancer: ImageEnhancer
    image_loader: Callable[[Path], Any]
    settings: ExtractionSettings = DEFAULT_SETTINGS


@dataclass(frozen=True)
class CaptureOutcome:
    """Per-image outcome inside a batch; failures never abort the batch."""

    status: OutcomeStatus
    result: CaptureResult | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status in ("success", "no_prices_found")


@dataclass(frozen=True)
class BatchResult:
    """Outcome of a batch; ``outcomes`` is keyed by image path, in processing order."""

    status: JobStatus
    outcomes: dict[str, CaptureOutcome] = field(default_factory=dict)
    total: int = 0

    @property
    def succeeded(self) -> dict[str, CaptureOutcome]:
        return {key: outcome for key, outcome in self.outcomes.items() if outcome.ok}

    @property
    def failed(self) -> dict[str, CaptureOutcome]:
        return {key: outcome for key, outcome in self.outcomes.items() if not outcome.ok}


@dataclass(frozen=True)
class LongReceiptResult:
    """Merged long receipt plus the per-section outcomes it was built from."""

    status: JobStatus
    merged: MergedReceiptResult
    outcomes: dict[int, CaptureOutcome] = field(default_factory=dict)


def process_single_capture(
    image_path: Path,
    engine: CaptureEngine,
    cancel_token: CancellationToken | None = None,
) -> CaptureResult:
    """
    Run enhancement selection and price extraction on one photo.

    Returns a CaptureResult whose status is "no_prices_found" when nothing
    parsed; that is a valid outcome, not an error.

    Raises:
        ImageUnreadable: the image could not be loaded
        RecognitionFailure: recognition failed on every variant
        CancellationRequested: the token was cancelled mid-way
    """
    start_time = time.time()
    image = engine.image_loader(image_path)
    selection = select_best_variant(
        image,
        engine.recognizer,
        engine.enhancer,
        settings=engine.settings,
        cancel_token=cancel_token,
    )
    for attempt in selection.attempts:
        if attempt.error:
            logger.debug("%s: %s variant skipped (%s)", image_path.name, attempt.variant.value, attempt.error)

    logger.info(
        "%s: %d price(s) via %s variant in %.2f seconds",
        image_path.name,
        len(selection.candidates),
        selection.variant.value,
        time.time() - start_time,
    )
    return CaptureResult(
        full_text=selection.full_text,
        prices=selection.candidates,
        variant=selection.variant,
        store_type=detect_store_type(selection.full_text),
    )


def _run_capture(image_path: Path, engine: CaptureEngine, cancel_token: CancellationToken | None) -> CaptureOutcome:
    """Process one image, turning per-image failures into an outcome record."""
    try:
        result = process_single_capture(image_path, engine, cancel_token=cancel_token)
    except ImageUnreadable as exc:
        logger.warning("Skipping unreadable image %s: %s", image_path, exc)
        return CaptureOutcome(status="image_unreadable", error=str(exc))
    except RecognitionFailure as exc:
        logger.warning("Recognition failed for %s: %s", image_path, exc)
        return CaptureOutcome(status="recognition_failure", error=str(exc))

    status: OutcomeStatus = "success" if result.prices else "no_prices_found"
    return CaptureOutcome(status=status, result=result)


def process_batch(
    image_paths: Sequence[Path],
    engine: CaptureEngine,
    progress: ProgressCallback | None = None,
    cancel_token: CancellationToken | None = None,
) -> BatchResult:
    """
    Process independent photos one after another.

    One failing image does not stop the others. Cancellation is checked
    between images (and between variants); results produced before the
    cancel are kept and the batch reports status "cancelled".
    """
    outcomes: dict[str, CaptureOutcome] = {}
    total = len(image_paths)

    for index, image_path in enumerate(image_paths, start=1):
        if cancel_token is not None and cancel_token.is_cancelled:
            logger.info("Batch cancelled after %d of %d images", index - 1, total)
            return BatchResult(status="cancelled", outcomes=outcomes, total=total)
        try:
            outcomes[str(image_path)] = _run_capture(image_path, engine, cancel_token)
        except CancellationRequested:
            logger.info("Batch cancelled while processing %s", image_path.name)
            return BatchResult(status="cancelled", outcomes=outcomes, total=total)
        if progress is not None:
            progress(index, total, image_path.name)

    return BatchResult(status="completed", outcomes=outcomes, total=total)


def process_long_receipt(
    sections: Sequence[ReceiptSection],
    engine: CaptureEngine,
    progress: ProgressCallback | None = None,
    cancel_token: CancellationToken | None = None,
) -> LongReceiptResult:
    """
    Process every section of a long receipt and merge the results.

    Sections are processed in section order. Failed sections are reported
    in ``outcomes`` and contribute nothing to the merge; the merged
    ``total_sections`` counts only sections that were processed. On
    cancellation the sections finished so far are still merged.

    Raises:
        InsufficientSections: no sections were given
        ValueError: two sections share a section number
    """
    if not sections:
        raise InsufficientSections("No receipt sections provided")
    numbers = [s.section_number for s in sections]
    duplicates = sorted({n for n in numbers if numbers.count(n) > 1})
    if duplicates:
        raise ValueError(f"Duplicate section numbers: {duplicates}")

    ordered = sorted(sections, key=lambda s: s.section_number)
    outcomes: dict[int, CaptureOutcome] = {}
    status: JobStatus = "completed"

    for index, section in enumerate(ordered, start=1):
        if cancel_token is not None and cancel_token.is_cancelled:
            status = "cancelled"
            break
        label = f"Section {section.section_number}"
        try:
            outcomes[section.section_number] = _run_capture(section.image_path, engine, cancel_token)
        except CancellationRequested:
            status = "cancelled"
            break
        if progress is not None:
            progress(index, len(ordered), label)

    merged_sections: list[ReceiptSection] = []
    candidate_lists = []
    texts: list[str] = []
    for section in ordered:
        outcome = outcomes.get(section.section_number)
        if outcome is None or outcome.result is None:
            continue
        merged_sections.append(section)
        candidate_lists.append(outcome.result.prices)
        texts.append(outcome.result.full_text)

    merged = merge_sections(candidate_lists, merged_sections, texts, settings=engine.settings)
    logger.info(
        "Long receipt %s: %d section(s) merged into %d price(s), confidence %.2f",
        status,
        merged.total_sections,
        len(merged.prices),
        merged.confidence,
    )
    return LongReceiptResult(status=status, merged=merged, outcomes=outcomes)
