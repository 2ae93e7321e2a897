"""Application-layer workflows orchestrating domain and runtime services."""

from pricescan.application.engine import build_default_engine
from pricescan.application.scan import (
    BatchResult,
    CaptureEngine,
    CaptureOutcome,
    LongReceiptResult,
    process_batch,
    process_long_receipt,
    process_single_capture,
)

__all__ = [
    "BatchResult",
    "CaptureEngine",
    "CaptureOutcome",
    "LongReceiptResult",
    "build_default_engine",
    "process_batch",
    "process_long_receipt",
    "process_single_capture",
]
