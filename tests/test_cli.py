"""CLI tests: argument wiring, exit codes and output, with a text-file engine."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

import pricescan.cli.capture as capture_cli
import pricescan.runtime.paths as runtime_paths
from pricescan.application import CaptureEngine
from pricescan.cli.main import main
from pricescan.domain import EnhancementVariant, ImageUnreadable, RecognizedText
from pricescan.runtime.config import build_engine_config


class _TextRecognizer:
    def recognize(self, image: Any) -> RecognizedText:
        return RecognizedText.from_lines(str(image).splitlines())


class _Identity:
    def enhance(self, image: Any, variant: EnhancementVariant) -> Any:
        return image


def _read_text_photo(path: Path) -> str:
    if not path.exists():
        raise ImageUnreadable(f"Image file not found: {path}")
    return path.read_text(encoding="utf-8")


@pytest.fixture
def text_engine(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Photos are text files; recognition returns their lines."""
    engine = CaptureEngine(recognizer=_TextRecognizer(), enhancer=_Identity(), image_loader=_read_text_photo)
    monkeypatch.setattr(capture_cli, "build_default_engine", lambda config, ocr_url=None: engine)
    monkeypatch.setattr(capture_cli, "load_engine_config", lambda paths=None: build_engine_config())
    monkeypatch.setattr(runtime_paths, "_paths", runtime_paths.ProjectPaths(root=tmp_path))


def _photo(tmp_path: Path, name: str, text: str) -> str:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_no_command_prints_help() -> None:
    assert main([]) == 1


def test_scan_prints_prices(text_engine: None, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    photo = _photo(tmp_path, "label.jpg", "Rice 1lb J$120.00")

    assert main(["scan", photo]) == 0

    out = capsys.readouterr().out
    assert "Rice 1lb - J$120.00 per lb [Groceries] (90%)" in out


def test_scan_json_output(text_engine: None, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    photo = _photo(tmp_path, "label.jpg", "Soap J$95.00")

    assert main(["scan", photo, "--json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "prices_found"
    assert payload["variant"] == "original"
    assert payload["store_type"] == "generic"
    assert payload["prices"][0]["price"] == "95.00"
    assert payload["prices"][0]["category"] == "Household"


def test_scan_save_writes_result_json(text_engine: None, tmp_path: Path) -> None:
    photo = _photo(tmp_path, "label.jpg", "Soap J$95.00")

    assert main(["scan", photo, "--save"]) == 0

    saved = json.loads((tmp_path / "captures" / "results" / "label.json").read_text(encoding="utf-8"))
    assert saved["prices"][0]["item_name"] == "Soap"


def test_scan_missing_image_fails(text_engine: None, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["scan", str(tmp_path / "missing.jpg")]) == 1
    assert "Error:" in capsys.readouterr().out


def test_batch_isolates_failures(text_engine: None, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    good = _photo(tmp_path, "good.jpg", "Rice 1lb J$120.00")
    missing = str(tmp_path / "missing.jpg")

    assert main(["batch", good, missing, "--json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "completed"
    assert payload["outcomes"][good]["status"] == "success"
    assert payload["outcomes"][missing]["status"] == "image_unreadable"


def test_batch_with_only_failures_exits_nonzero(text_engine: None, tmp_path: Path) -> None:
    assert main(["batch", str(tmp_path / "missing.jpg")]) == 1


def test_long_receipt(text_engine: None, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    top = _photo(tmp_path, "top.jpg", "Rice 1lb J$120.00\nMilk 1L J$220.00")
    bottom = _photo(tmp_path, "bottom.jpg", "Fresh Milk 1L J$220.00\nBread 250.00")

    assert main(["long", top, bottom, "--json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["total_sections"] == 2
    assert [p["item_name"] for p in payload["prices"]] == ["Rice 1lb", "Milk 1l", "Bread"]
    assert payload["sections"]["2"]["status"] == "success"


def test_long_receipt_missing_section(text_engine: None, tmp_path: Path) -> None:
    top = _photo(tmp_path, "top.jpg", "Rice 1lb J$120.00")

    assert main(["long", top, str(tmp_path / "gone.jpg")]) == 1


def test_invalid_config_value_exits_with_message(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = tmp_path / "bad.toml"
    config.write_text('[engine]\nmax_candidates = "abc"\n', encoding="utf-8")
    photo = _photo(tmp_path, "label.jpg", "Soap J$95.00")

    assert main(["scan", photo, "--config", str(config)]) == 1
    assert "invalid config" in capsys.readouterr().out
