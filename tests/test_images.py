from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from pricescan.application import CaptureEngine, process_batch
from pricescan.domain import EnhancementVariant, ImageUnreadable, RecognizedText
from pricescan.runtime.images import PillowImageEnhancer, load_image


def _write_photo(path: Path) -> Path:
    Image.new("RGB", (64, 32), (120, 130, 140)).save(path, format="JPEG")
    return path


def test_load_image_decodes_file(tmp_path: Path) -> None:
    image = load_image(_write_photo(tmp_path / "label.jpg"))

    assert image.size == (64, 32)


def test_missing_image_is_unreadable(tmp_path: Path) -> None:
    with pytest.raises(ImageUnreadable, match="not found"):
        load_image(tmp_path / "nope.jpg")


def test_corrupt_image_is_unreadable(tmp_path: Path) -> None:
    path = tmp_path / "corrupt.jpg"
    path.write_bytes(b"\xff\xd8 definitely not a jpeg")

    with pytest.raises(ImageUnreadable):
        load_image(path)


def test_oversized_image_is_unreadable(tmp_path: Path) -> None:
    path = _write_photo(tmp_path / "big.jpg")

    with pytest.raises(ImageUnreadable, match="too large"):
        load_image(path, max_file_size=10)


@pytest.mark.parametrize("variant", list(EnhancementVariant))
def test_every_variant_produces_an_image(tmp_path: Path, variant: EnhancementVariant) -> None:
    image = load_image(_write_photo(tmp_path / "label.jpg"))

    enhanced = PillowImageEnhancer().enhance(image, variant)

    assert enhanced.size == image.size


def test_grayscale_and_binarize_modes(tmp_path: Path) -> None:
    image = load_image(_write_photo(tmp_path / "label.jpg"))
    enhancer = PillowImageEnhancer()

    assert enhancer.enhance(image, EnhancementVariant.GRAYSCALE).mode == "L"
    assert enhancer.enhance(image, EnhancementVariant.BINARIZE).mode == "1"


class _BlankRecognizer:
    def recognize(self, image: object) -> RecognizedText:
        return RecognizedText.empty()


def _write_bomb(path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    # Small file, but more pixels than the lowered limit allows (bombs trip at twice the limit).
    Image.new("1", (40, 40)).save(path, format="PNG")
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    return path


def test_decompression_bomb_is_unreadable(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write_bomb(tmp_path / "bomb.png", monkeypatch)

    with pytest.raises(ImageUnreadable, match="bomb.png"):
        load_image(path)


def test_decompression_bomb_does_not_abort_batch(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    bomb = _write_bomb(tmp_path / "bomb.png", monkeypatch)
    good = tmp_path / "good.png"
    Image.new("RGB", (8, 8)).save(good, format="PNG")
    engine = CaptureEngine(recognizer=_BlankRecognizer(), enhancer=PillowImageEnhancer(), image_loader=load_image)

    batch = process_batch([bomb, good], engine)

    assert batch.status == "completed"
    assert batch.outcomes[str(bomb)].status == "image_unreadable"
    assert batch.outcomes[str(good)].ok
