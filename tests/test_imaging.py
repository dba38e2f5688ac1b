"""Tests for Pillow thumbnail generation.

Updates: v0.1.0 - 2026-10-02 - Cover downscaling, small images and invalid inputs.
"""

from __future__ import annotations

import base64
import io
from pathlib import Path

import pytest
from PIL import Image

from core.exceptions import ImageProcessingError
from core.imaging import create_thumbnail


def _png_bytes(width: int, height: int, mode: str = "RGB") -> bytes:
    buffer = io.BytesIO()
    Image.new(mode, (width, height), color=(200, 40, 40, 128)[: len(mode)]).save(buffer, "PNG")
    return buffer.getvalue()


def _decode(data_url: str) -> Image.Image:
    prefix = "data:image/jpeg;base64,"
    assert data_url.startswith(prefix)
    return Image.open(io.BytesIO(base64.b64decode(data_url[len(prefix) :])))


def test_wide_images_are_scaled_to_max_width() -> None:
    thumbnail = _decode(create_thumbnail(_png_bytes(1600, 800)))

    assert thumbnail.format == "JPEG"
    assert thumbnail.size == (400, 200)


def test_small_images_keep_their_size() -> None:
    thumbnail = _decode(create_thumbnail(_png_bytes(120, 90)))

    assert thumbnail.size == (120, 90)


def test_transparent_images_are_flattened(tmp_path: Path) -> None:
    source = tmp_path / "logo.png"
    source.write_bytes(_png_bytes(800, 400, mode="RGBA"))

    thumbnail = _decode(create_thumbnail(source, max_width=200))

    assert thumbnail.mode == "RGB"
    assert thumbnail.size == (200, 100)


def test_invalid_image_bytes_raise() -> None:
    with pytest.raises(ImageProcessingError):
        create_thumbnail(b"definitely not an image")


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ImageProcessingError):
        create_thumbnail(tmp_path / "absent.png")


def test_non_positive_width_is_rejected() -> None:
    with pytest.raises(ValueError):
        create_thumbnail(_png_bytes(10, 10), max_width=0)


def test_organizer_stores_thumbnail_on_new_prompt(organizer, tmp_path: Path) -> None:
    source = tmp_path / "photo.png"
    source.write_bytes(_png_bytes(900, 300))

    prompt = organizer.add_prompt("Photo", "Describe it", image_source=source)

    assert prompt is not None
    assert prompt.category_id == "1"
    assert _decode(prompt.image).size == (400, 133)


def test_organizer_rejects_unreadable_image_without_saving(organizer) -> None:
    with pytest.raises(ImageProcessingError):
        organizer.add_prompt("Broken", "text", "1", image_source=b"junk")

    assert organizer.store.prompts == []
