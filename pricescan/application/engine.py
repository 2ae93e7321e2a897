"""Wire the default runtime adapters into a CaptureEngine."""

from __future__ import annotations

from pricescan.application.scan import CaptureEngine
from pricescan.runtime.config import EngineConfig, load_engine_config
from pricescan.runtime.images import PillowImageEnhancer, load_image
from pricescan.runtime.ocr_client import HttpTextRecognizer


def build_default_engine(config: EngineConfig | None = None, ocr_url: str | None = None) -> CaptureEngine:
    """Build an engine backed by the HTTP OCR service and Pillow enhancements.

    ``ocr_url`` overrides the URL from config (CLI ``--ocr-url``).
    """
    if config is None:
        config = load_engine_config()
    recognizer = HttpTextRecognizer(ocr_url or config.ocr_url, timeout=config.ocr_timeout)
    return CaptureEngine(
        recognizer=recognizer,
        enhancer=PillowImageEnhancer(),
        image_loader=load_image,
        settings=config.settings,
    )
