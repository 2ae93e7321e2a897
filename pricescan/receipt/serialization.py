"""JSON-friendly views of extraction results."""

from __future__ import annotations

from typing import Any

from pricescan.domain.prices import CaptureResult, ExtractedPrice, MergedReceiptResult


def extracted_price_to_dict(candidate: ExtractedPrice) -> dict[str, Any]:
    # Prices are rendered as strings so no precision is lost in JSON.
    data: dict[str, Any] = {
        "item_name": candidate.item_name,
        "price": f"{candidate.price:.2f}",
        "original_text": candidate.original_text,
        "confidence": candidate.confidence,
        "category": candidate.category,
        "unit": candidate.unit,
        "position": [
            candidate.position.left,
            candidate.position.top,
            candidate.position.right,
            candidate.position.bottom,
        ],
    }
    if candidate.section_number is not None:
        data["section_number"] = candidate.section_number
    return data


def capture_result_to_dict(result: CaptureResult) -> dict[str, Any]:
    return {
        "status": result.status,
        "variant": result.variant.value,
        "store_type": result.store_type,
        "full_text": result.full_text,
        "prices": [extracted_price_to_dict(c) for c in result.prices],
    }


def merged_result_to_dict(result: MergedReceiptResult) -> dict[str, Any]:
    return {
        "total_sections": result.total_sections,
        "confidence": result.confidence,
        "store_type": result.store_type,
        "full_text": result.full_text,
        "prices": [extracted_price_to_dict(c) for c in result.prices],
    }
