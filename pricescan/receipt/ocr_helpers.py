"""Pure helpers turning raw OCR service output into ``RecognizedText``."""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Any

from pricescan.domain.prices import RecognizedBlock, RecognizedLine, RecognizedText, Rect

MAX_IMAGE_DIMENSION = 3000  # Resize if either dimension exceeds this
OCR_IMAGE_PADDING = 50  # White padding around image to prevent edge truncation

MIN_DETECTION_CONFIDENCE = 0.7
MIN_TEXT_LENGTH = 2
LEFT_ZONE = 0.3  # Normalized x below this is the item-name column
RIGHT_ZONE = 0.7  # Normalized x above this is the price column


def resize_image_bytes(
    image_bytes: bytes, max_dimension: int = MAX_IMAGE_DIMENSION, padding: int = OCR_IMAGE_PADDING
) -> bytes:
    """
    Resize image bytes if it exceeds max_dimension on either side.

    Also adds white padding around the image to prevent OCR edge truncation.

    Returns:
        Image bytes (JPEG format), resized if necessary, with padding added
    """
    from PIL import Image, ImageOps

    img = Image.open(io.BytesIO(image_bytes))

    # Apply EXIF orientation so OCR sees the photo the way the user took it
    img = ImageOps.exif_transpose(img)

    width, height = img.size
    if width > max_dimension or height > max_dimension:
        scale = max_dimension / max(width, height)
        img = img.resize((max(1, int(width * scale)), max(1, int(height * scale))), Image.Resampling.LANCZOS)

    if padding > 0:
        img = ImageOps.expand(img, border=padding, fill="white")

    buffer = io.BytesIO()
    img.convert("RGB").save(buffer, format="JPEG", quality=95)
    return buffer.getvalue()


@dataclass(frozen=True)
class _Detection:
    text: str
    x_min: float
    y_min: float
    x_max: float
    y_max: float

    @property
    def center_y(self) -> float:
        return (self.y_min + self.y_max) / 2

    @property
    def height(self) -> float:
        return self.y_max - self.y_min


def _overlap_ratio(a: _Detection, b: _Detection) -> float:
    """Vertical overlap relative to the shorter of the two boxes."""
    overlap = min(a.y_max, b.y_max) - max(a.y_min, b.y_min)
    smaller = min(a.height, b.height)
    if overlap <= 0 or smaller <= 0:
        return 0.0
    return overlap / smaller


def _same_line(a: _Detection, b: _Detection, image_width: float) -> bool:
    """
    Decide whether two detections belong on the same physical line.

    Opposite columns (item name left, price right) need real vertical
    overlap; anything else uses center distance scaled to text height.
    """
    a_left = a.x_min / image_width < LEFT_ZONE
    b_left = b.x_min / image_width < LEFT_ZONE
    a_right = a.x_min / image_width > RIGHT_ZONE
    b_right = b.x_min / image_width > RIGHT_ZONE
    if (a_left and b_right) or (a_right and b_left):
        return _overlap_ratio(a, b) >= 0.5
    tolerance = max(a.height, b.height) * 0.6
    return abs(a.center_y - b.center_y) <= tolerance


def group_detections_into_lines(detections: list[_Detection], image_width: float) -> list[list[_Detection]]:
    """Group detections into lines ordered top-to-bottom, words left-to-right."""
    lines: list[list[_Detection]] = []
    for det in sorted(detections, key=lambda d: (d.center_y, d.x_min)):
        for line in lines:
            if _same_line(line[0], det, image_width):
                line.append(det)
                break
        else:
            lines.append([det])

    for line in lines:
        line.sort(key=lambda d: d.x_min)
    lines.sort(key=lambda line: sum(d.center_y for d in line) / len(line))
    return lines


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def transform_paddleocr_result(raw_result: dict[str, Any], padding: int = OCR_IMAGE_PADDING) -> RecognizedText:
    """
    Transform a raw PaddleOCR-style response into ``RecognizedText``.

    Expected shape: ``{"image_width", "image_height", "detections": [[bbox,
    [text, confidence]], ...]}`` where bbox is four ``[x, y]`` points in the
    padded image. Coordinates are shifted back by ``padding`` and normalized
    to [0, 1]; every grouped line carries the union box of its words.
    """
    image_width = max(float(raw_result.get("image_width", 0)) - 2 * padding, 1.0)
    image_height = max(float(raw_result.get("image_height", 0)) - 2 * padding, 1.0)

    detections: list[_Detection] = []
    for bbox, (text, confidence) in raw_result.get("detections", []):
        if confidence < MIN_DETECTION_CONFIDENCE:
            continue
        if len(str(text).strip()) < MIN_TEXT_LENGTH:
            continue
        xs = [point[0] - padding for point in bbox]
        ys = [point[1] - padding for point in bbox]
        detections.append(_Detection(text=str(text).strip(), x_min=min(xs), y_min=min(ys), x_max=max(xs), y_max=max(ys)))

    if not detections:
        return RecognizedText.empty()

    lines: list[RecognizedLine] = []
    for group in group_detections_into_lines(detections, image_width):
        box = Rect(
            left=_clamp(min(d.x_min for d in group) / image_width),
            top=_clamp(min(d.y_min for d in group) / image_height),
            right=_clamp(max(d.x_max for d in group) / image_width),
            bottom=_clamp(max(d.y_max for d in group) / image_height),
        )
        lines.append(RecognizedLine(text=" ".join(d.text for d in group), bounding_box=box))

    return RecognizedText(blocks=(RecognizedBlock(lines=tuple(lines)),))
