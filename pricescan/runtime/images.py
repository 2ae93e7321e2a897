"""Image loading and the default Pillow-based enhancement producer."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from PIL import Image, ImageEnhance, ImageFilter, ImageOps, UnidentifiedImageError

from pricescan.domain.errors import ImageUnreadable
from pricescan.domain.prices import EnhancementVariant

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB

CONTRAST_FACTOR = 1.8
BRIGHTNESS_FACTOR = 1.3
BINARIZE_THRESHOLD = 140


def load_image(image_path: Path, max_file_size: int = MAX_FILE_SIZE) -> Image.Image:
    """
    Open and fully decode an image, normalizing EXIF orientation.

    Raises:
        ImageUnreadable: missing, oversized, corrupt or undecodable file,
            or more pixels than Pillow's decompression-bomb limit
    """
    if not image_path.exists():
        raise ImageUnreadable(f"Image file not found: {image_path}")

    size = image_path.stat().st_size
    if size > max_file_size:
        raise ImageUnreadable(f"Image file too large: {size / (1024 * 1024):.1f}MB")

    try:
        with Image.open(image_path) as img:
            img.load()
            return ImageOps.exif_transpose(img)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise ImageUnreadable(f"Failed to decode image {image_path.name}: {exc}") from exc


class PillowImageEnhancer:
    """Default enhancement producer; each variant returns a new image."""

    def enhance(self, image: Any, variant: EnhancementVariant) -> Image.Image:
        if variant is EnhancementVariant.ORIGINAL:
            return image
        if variant is EnhancementVariant.CONTRAST:
            return ImageEnhance.Contrast(image).enhance(CONTRAST_FACTOR)
        if variant is EnhancementVariant.BRIGHTNESS:
            return ImageEnhance.Brightness(image).enhance(BRIGHTNESS_FACTOR)
        if variant is EnhancementVariant.SHARPEN:
            return image.filter(ImageFilter.SHARPEN)
        if variant is EnhancementVariant.GRAYSCALE:
            return ImageOps.grayscale(image)
        if variant is EnhancementVariant.BINARIZE:
            gray = ImageOps.grayscale(image)
            return gray.point(lambda px: 255 if px > BINARIZE_THRESHOLD else 0, mode="1")
        raise ValueError(f"Unsupported enhancement variant: {variant}")
