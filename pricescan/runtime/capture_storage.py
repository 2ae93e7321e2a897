"""Persist capture results as JSON.

Directory structure:
    captures/
    └── results/   - One JSON file per processed capture or long receipt
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pricescan.runtime.logging import get_logger
from pricescan.runtime.paths import get_paths

logger = get_logger(__name__)


def save_capture_json(payload: dict[str, Any], image_path: Path, out_dir: Path | None = None) -> Path:
    """Write ``payload`` to ``<results>/<image stem>.json`` and return the path."""
    target_dir = out_dir if out_dir is not None else get_paths().results
    target_dir.mkdir(parents=True, exist_ok=True)
    out_path = target_dir / f"{image_path.stem}.json"
    out_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.debug("Capture result saved to: %s", out_path)
    return out_path
