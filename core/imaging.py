"""Thumbnail helpers that turn user images into embeddable data URLs.

Updates: v0.1.0 - 2026-10-02 - Downscale images with Pillow and encode JPEG data URLs.
"""

from __future__ import annotations

import base64
import io
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .exceptions import ImageProcessingError

DEFAULT_THUMBNAIL_WIDTH = 400
JPEG_QUALITY = 70


def create_thumbnail(
    source: Path | bytes,
    *,
    max_width: int = DEFAULT_THUMBNAIL_WIDTH,
) -> str:
    """Return a ``data:image/jpeg;base64`` thumbnail at most *max_width* pixels wide."""
    if max_width <= 0:
        raise ValueError("max_width must be greater than zero")
    try:
        data = source if isinstance(source, bytes) else Path(source).expanduser().read_bytes()
    except OSError as exc:
        raise ImageProcessingError(f"Unable to read image {source}") from exc
    try:
        with Image.open(io.BytesIO(data)) as opened:
            img = opened.convert("RGB")
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageProcessingError("Invalid image file format.") from exc

    if img.width > max_width:
        height = max(1, round(img.height * max_width / img.width))
        img = img.resize((max_width, height), Image.Resampling.LANCZOS)

    buffer = io.BytesIO()
    img.save(buffer, "JPEG", quality=JPEG_QUALITY, optimize=True)
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/jpeg;base64,{encoded}"


__all__ = ["DEFAULT_THUMBNAIL_WIDTH", "create_thumbnail"]
