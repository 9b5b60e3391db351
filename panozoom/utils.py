from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Tuple

import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import (
    ImageDecodeError,
    ImageIOError,
    ImageProbeError,
    TilePersistError,
)


def to_numpy_rgb(img: Image.Image) -> np.ndarray[Any, Any]:
    if img.mode != "RGB":
        img = img.convert("RGB")
    return np.array(img, dtype=np.uint8)


def from_numpy_rgb(arr: np.ndarray[Any, Any]) -> Image.Image:
    if arr.ndim != 3 or arr.shape[2] != 3 or arr.dtype != np.uint8:
        raise ValueError("from_numpy_rgb expects a uint8 (H,W,3) array")
    return Image.fromarray(arr)


def probe_size(path: Path) -> Tuple[int, int]:
    """Return (width, height) from the image header without decoding."""
    try:
        with Image.open(path) as img:
            return img.size
    except (OSError, Image.DecompressionBombError) as e:
        raise ImageProbeError(f"Cannot probe image size of {path}: {e}") from e


def load_rgb(path: Path, height: Optional[int] = None) -> np.ndarray[Any, Any]:
    """Decode ``path`` into a uint8 (H,W,3) array.

    When ``height`` is given, rows below it are cropped away before the
    pixel data is converted.
    """
    try:
        img = Image.open(path)
    except (UnidentifiedImageError, Image.DecompressionBombError) as e:
        raise ImageDecodeError(f"Cannot decode image {path}: {e}") from e
    except OSError as e:
        raise ImageIOError(f"Cannot open image {path}: {e}") from e

    with img:
        try:
            if height is not None and img.height > height:
                cropped = img.crop((0, 0, img.width, height))
                return to_numpy_rgb(cropped)
            return to_numpy_rgb(img)
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            raise ImageDecodeError(f"Cannot decode image {path}: {e}") from e


def save_tile(arr: np.ndarray[Any, Any], path: Path, quality: int = 90) -> None:
    try:
        from_numpy_rgb(arr).save(path, "JPEG", quality=quality)
    except OSError as e:
        raise TilePersistError(f"Cannot write tile {path}: {e}") from e


def write_text(path: Path, content: str) -> None:
    try:
        with path.open("w", encoding="utf-8", newline="") as f:
            f.write(content)
    except OSError as e:
        raise TilePersistError(f"Cannot write {path}: {e}") from e
