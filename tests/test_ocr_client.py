"""Tests for the HTTP recognizer using httpx's mock transport."""

from __future__ import annotations

import io
from collections.abc import Callable

import httpx
import pytest
from PIL import Image

from pricescan.domain import RecognitionFailure
from pricescan.runtime.ocr_client import HttpTextRecognizer


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def _photo() -> Image.Image:
    return Image.new("RGB", (200, 100), "white")


def test_recognize_posts_image_and_groups_lines() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json={
                "image_width": 300,
                "image_height": 200,
                "detections": [
                    [[[60, 60], [140, 60], [140, 75], [60, 75]], ["Soap", 0.95]],
                    [[[200, 61], [245, 61], [245, 74], [200, 74]], ["J$95.00", 0.9]],
                ],
            },
        )

    recognizer = HttpTextRecognizer("http://ocr.test/", client=_client(handler))

    recognized = recognizer.recognize(_photo())

    assert recognized.full_text == "Soap J$95.00"
    assert requests[0].method == "POST"
    assert requests[0].url.path == "/ocr"
    assert b'name="file"' in requests[0].read()


def test_recognize_accepts_raw_bytes() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"image_width": 300, "image_height": 200, "detections": []})

    buffer = io.BytesIO()
    _photo().save(buffer, format="PNG")

    recognized = HttpTextRecognizer("http://ocr.test", client=_client(handler)).recognize(buffer.getvalue())

    assert recognized.full_text == ""


def test_http_error_status_is_recognition_failure() -> None:
    recognizer = HttpTextRecognizer("http://ocr.test", client=_client(lambda request: httpx.Response(503)))

    with pytest.raises(RecognitionFailure, match="503"):
        recognizer.recognize(_photo())


def test_connection_error_is_recognition_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    recognizer = HttpTextRecognizer("http://ocr.test", client=_client(handler))

    with pytest.raises(RecognitionFailure, match="connect"):
        recognizer.recognize(_photo())


def test_invalid_json_is_recognition_failure() -> None:
    recognizer = HttpTextRecognizer(
        "http://ocr.test", client=_client(lambda request: httpx.Response(200, content=b"<html>oops</html>"))
    )

    with pytest.raises(RecognitionFailure):
        recognizer.recognize(_photo())


def test_malformed_detections_are_recognition_failure() -> None:
    recognizer = HttpTextRecognizer(
        "http://ocr.test",
        client=_client(lambda request: httpx.Response(200, json={"image_width": 300, "detections": [["bad"]]})),
    )

    with pytest.raises(RecognitionFailure, match="Malformed"):
        recognizer.recognize(_photo())


def test_undecodable_image_bytes_are_recognition_failure() -> None:
    recognizer = HttpTextRecognizer("http://ocr.test", client=_client(lambda request: httpx.Response(200, json={})))

    with pytest.raises(RecognitionFailure):
        recognizer.recognize(b"not an image")
