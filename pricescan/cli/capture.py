"""Capture command handlers used by the unified CLI."""

from __future__ import annotations

import argparse
import json
import signal
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from pricescan.application import (
    CaptureEngine,
    CaptureOutcome,
    build_default_engine,
    process_batch,
    process_long_receipt,
    process_single_capture,
)
from pricescan.domain import CancellationRequested, CancellationToken, ExtractedPrice, ImageUnreadable, RecognitionFailure
from pricescan.receipt.serialization import capture_result_to_dict, merged_result_to_dict
from pricescan.runtime import get_logger, load_engine_config
from pricescan.runtime.capture_storage import save_capture_json
from pricescan.runtime.section_storage import SectionStore

logger = get_logger(__name__)

EXIT_CANCELLED = 130


def _build_engine(args: argparse.Namespace) -> CaptureEngine | None:
    """Build the engine from config; None (after printing why) when the config is invalid."""
    try:
        config = load_engine_config(tuple(args.config) if args.config else None)
    except ValueError as exc:
        logger.error("Invalid engine config: %s", exc)
        print(f"Error: invalid config: {exc}")
        return None
    return build_default_engine(config, ocr_url=args.ocr_url)


@contextmanager
def _cancel_on_interrupt() -> Iterator[CancellationToken]:
    """Turn the first Ctrl+C into a cooperative cancel; a second one aborts."""
    token = CancellationToken()

    def _handler(signum: int, frame: Any) -> None:
        if token.is_cancelled:
            raise KeyboardInterrupt
        print("\nCancelling after the current image...")
        token.cancel()

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield token
    finally:
        signal.signal(signal.SIGINT, previous)


def _print_progress(current: int, total: int, label: str) -> None:
    print(f"[{current}/{total}] {label}")


def _print_prices(prices: tuple[ExtractedPrice, ...]) -> None:
    if not prices:
        print("No prices found.")
        return
    print(f"Prices ({len(prices)}):")
    for i, candidate in enumerate(prices, 1):
        unit_str = f" {candidate.unit}" if candidate.unit != "each" else ""
        print(f"  {i}. {candidate.item_name} - J${candidate.price:,.2f}{unit_str} [{candidate.category}] ({candidate.confidence:.0%})")


def _print_outcome(label: str, outcome: CaptureOutcome) -> None:
    print("\n" + "=" * 60)
    print(label)
    print("=" * 60)
    if outcome.result is None:
        print(f"Failed ({outcome.status}): {outcome.error}")
        return
    print(f"Variant: {outcome.result.variant.value}")
    _print_prices(outcome.result.prices)


def _outcome_to_dict(outcome: CaptureOutcome) -> dict[str, Any]:
    data: dict[str, Any] = {"status": outcome.status}
    if outcome.result is not None:
        data.update(capture_result_to_dict(outcome.result))
        data["status"] = outcome.status
    if outcome.error is not None:
        data["error"] = outcome.error
    return data


def cmd_scan(args: argparse.Namespace) -> int:
    """Extract prices from one photo and print them."""
    image_path = Path(args.image)
    engine = _build_engine(args)
    if engine is None:
        return 1

    with _cancel_on_interrupt() as token:
        try:
            result = process_single_capture(image_path, engine, cancel_token=token)
        except ImageUnreadable as exc:
            logger.error("%s", exc)
            print(f"Error: {exc}")
            return 1
        except RecognitionFailure as exc:
            logger.error("%s", exc)
            print(f"OCR service unavailable: {exc}")
            print("Make sure the OCR service is running before scanning.")
            return 1
        except CancellationRequested:
            print("Cancelled.")
            return EXIT_CANCELLED

    payload = capture_result_to_dict(result)
    if args.save:
        saved = save_capture_json(payload, image_path)
        logger.info("Saved result to %s", saved)

    if args.json:
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    print("\n" + "=" * 60)
    print(f"PRICES: {image_path.name}")
    print("=" * 60)
    print(f"Variant: {result.variant.value}")
    print(f"Store: {result.store_type}")
    _print_prices(result.prices)
    print("=" * 60)
    return 0


def cmd_batch(args: argparse.Namespace) -> int:
    """Extract prices from several independent photos."""
    image_paths = [Path(p) for p in args.images]
    engine = _build_engine(args)
    if engine is None:
        return 1

    with _cancel_on_interrupt() as token:
        batch = process_batch(
            image_paths,
            engine,
            progress=None if args.json else _print_progress,
            cancel_token=token,
        )

    if args.save:
        for key, outcome in batch.outcomes.items():
            save_capture_json(_outcome_to_dict(outcome), Path(key))

    if args.json:
        payload = {
            "status": batch.status,
            "total": batch.total,
            "outcomes": {key: _outcome_to_dict(outcome) for key, outcome in batch.outcomes.items()},
        }
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        for key, outcome in batch.outcomes.items():
            _print_outcome(Path(key).name, outcome)
        print(f"\nProcessed {len(batch.outcomes)} of {batch.total}: {len(batch.succeeded)} ok, {len(batch.failed)} failed")

    if batch.status == "cancelled":
        return EXIT_CANCELLED
    return 0 if batch.succeeded else 1


def cmd_long(args: argparse.Namespace) -> int:
    """Capture the given photos as sections of one long receipt and merge them."""
    section_paths = [Path(p) for p in args.sections]
    missing = [str(p) for p in section_paths if not p.is_file()]
    if missing:
        print(f"Error: section photo(s) not found: {', '.join(missing)}")
        return 1

    engine = _build_engine(args)
    if engine is None:
        return 1
    with SectionStore() as store, _cancel_on_interrupt() as token:
        for path in section_paths:
            store.add_section(path)
        long_result = process_long_receipt(
            store.sections,
            engine,
            progress=None if args.json else _print_progress,
            cancel_token=token,
        )

    merged = long_result.merged
    payload = merged_result_to_dict(merged)
    payload["status"] = long_result.status
    payload["sections"] = {str(n): _outcome_to_dict(o) for n, o in long_result.outcomes.items()}
    if args.save:
        save_capture_json(payload, section_paths[0].with_name(f"{section_paths[0].stem}_long"))

    if args.json:
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        for number, outcome in long_result.outcomes.items():
            if not outcome.ok:
                print(f"Section {number} failed ({outcome.status}): {outcome.error}")
        print("\n" + "=" * 60)
        print(f"LONG RECEIPT: {merged.total_sections} section(s), confidence {merged.confidence:.0%}")
        print(f"Store: {merged.store_type}")
        print("=" * 60)
        _print_prices(merged.prices)
        print("=" * 60)

    if long_result.status == "cancelled":
        return EXIT_CANCELLED
    return 0 if merged.total_sections else 1
