"""Runtime loader for engine tunables and keyword tables.

Example ``config/pricescan.toml``::

    [engine]
    max_candidates = 15
    duplicate_similarity_threshold = 0.75
    skip_summary_lines = true
    validate_category_ranges = true

    [ocr]
    url = "http://localhost:8001"
    timeout = 60

    [[categories]]
    name = "Snacks"
    keywords = ["chips", "biscuit"]

    [[units]]
    name = "per dozen"
    keywords = ["dozen", "doz"]
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from functools import lru_cache
from pathlib import Path
from typing import Any

from pricescan.receipt.enrichment import build_keyword_tables
from pricescan.receipt.settings import ExtractionSettings
from pricescan.runtime.logging import get_logger
from pricescan.runtime.paths import get_paths

logger = get_logger(__name__)

DEFAULT_OCR_URL = "http://localhost:8001"
DEFAULT_OCR_TIMEOUT = 60.0

# ExtractionSettings fields that may be set from [engine]
_ENGINE_KEYS = {f.name: str(f.type) for f in fields(ExtractionSettings) if f.name != "keyword_tables"}


@dataclass(frozen=True)
class EngineConfig:
    """Everything the application layer needs to build an engine."""

    settings: ExtractionSettings = field(default_factory=ExtractionSettings)
    ocr_url: str = DEFAULT_OCR_URL
    ocr_timeout: float = DEFAULT_OCR_TIMEOUT


def _load_toml(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict; missing files map to empty dict."""
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    if not path.exists():
        return {}

    with open(path, "rb") as f:
        data = tomllib.load(f)
    return data if isinstance(data, dict) else {}


def _coerce(name: str, value: Any) -> Any:
    declared = _ENGINE_KEYS[name]
    if declared == "bool":
        if not isinstance(value, bool):
            raise ValueError(f"[engine] {name} must be true or false, got {value!r}")
        return value
    if declared == "int":
        return int(value)
    return float(value)


def build_engine_config(*configs: Mapping[str, Any]) -> EngineConfig:
    """Build an EngineConfig from in-memory TOML documents (later ones win)."""
    engine_overrides: dict[str, Any] = {}
    ocr_url = DEFAULT_OCR_URL
    ocr_timeout = DEFAULT_OCR_TIMEOUT

    for config in configs:
        engine = config.get("engine", {})
        if isinstance(engine, Mapping):
            for key, value in engine.items():
                if key not in _ENGINE_KEYS:
                    logger.warning("Ignoring unknown [engine] setting: %s", key)
                    continue
                engine_overrides[key] = _coerce(key, value)

        ocr = config.get("ocr", {})
        if isinstance(ocr, Mapping):
            ocr_url = str(ocr.get("url", ocr_url))
            ocr_timeout = float(ocr.get("timeout", ocr_timeout))

    settings = ExtractionSettings(keyword_tables=build_keyword_tables(configs), **engine_overrides)
    return EngineConfig(settings=settings, ocr_url=ocr_url, ocr_timeout=ocr_timeout)


@lru_cache(maxsize=8)
def load_engine_config(config_paths: tuple[str, ...] | None = None) -> EngineConfig:
    """Load engine config from the project config file (or explicit paths)."""
    if config_paths is None:
        files = [get_paths().engine_config]
    else:
        files = [Path(path) for path in config_paths]

    documents = [_load_toml(path) for path in files]
    for path, document in zip(files, documents):
        if document:
            logger.debug("Loaded engine config from %s", path)
    return build_engine_config(*documents)
