"""HTTP client for an external PaddleOCR-style recognition service."""

from __future__ import annotations

import io
import time
from typing import Any

import httpx

from pricescan.domain.errors import RecognitionFailure
from pricescan.domain.prices import RecognizedText
from pricescan.receipt.ocr_helpers import (
    OCR_IMAGE_PADDING,
    resize_image_bytes,
    transform_paddleocr_result,
)
from pricescan.runtime.logging import get_logger

logger = get_logger(__name__)


def _image_to_bytes(image: Any) -> bytes:
    """Encode a Pillow image (or pass raw bytes through)."""
    if isinstance(image, bytes | bytearray):
        return bytes(image)
    buffer = io.BytesIO()
    image.convert("RGB").save(buffer, format="PNG")
    return buffer.getvalue()


class HttpTextRecognizer:
    """
    Recognition engine backed by an OCR service exposing ``POST /ocr``.

    The image is resized/padded before upload; the response detections are
    grouped into lines by ``transform_paddleocr_result``.
    """

    def __init__(
        self,
        ocr_url: str,
        timeout: float = 60.0,
        padding: int = OCR_IMAGE_PADDING,
        client: httpx.Client | None = None,
    ) -> None:
        self.ocr_url = ocr_url.rstrip("/")
        self.timeout = timeout
        self.padding = padding
        self._client = client

    def _post(self, payload: bytes) -> httpx.Response:
        files = {"file": ("capture.jpg", payload, "image/jpeg")}
        if self._client is not None:
            return self._client.post(f"{self.ocr_url}/ocr", files=files, timeout=self.timeout)
        return httpx.post(f"{self.ocr_url}/ocr", files=files, timeout=self.timeout)

    def recognize_raw(self, image: Any) -> dict[str, Any]:
        """Send one image and return the service's raw JSON response."""
        try:
            payload = resize_image_bytes(_image_to_bytes(image), padding=self.padding)
        except OSError as exc:
            raise RecognitionFailure(f"Could not encode image for OCR: {exc}") from exc

        start_time = time.time()
        try:
            response = self._post(payload)
        except httpx.RequestError as exc:
            logger.error("Failed to connect to OCR service: %s", exc)
            raise RecognitionFailure(f"Failed to connect to OCR service: {exc}") from exc
        logger.debug("OCR service returned in %.2f seconds", time.time() - start_time)

        if response.status_code != 200:
            # Response body may echo recognized text; keep it out of the logs.
            logger.error("OCR service error: %s", response.status_code)
            raise RecognitionFailure(f"OCR service error: {response.status_code}")

        try:
            raw_result = response.json()
        except ValueError as exc:
            raise RecognitionFailure(f"OCR service returned invalid JSON: {exc}") from exc
        if not isinstance(raw_result, dict):
            raise RecognitionFailure("OCR service returned an unexpected payload")
        return raw_result

    def recognize(self, image: Any) -> RecognizedText:
        raw_result = self.recognize_raw(image)
        try:
            return transform_paddleocr_result(raw_result, padding=self.padding)
        except (KeyError, TypeError, ValueError) as exc:
            raise RecognitionFailure(f"Malformed OCR detections: {exc}") from exc
