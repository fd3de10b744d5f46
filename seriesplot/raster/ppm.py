from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image


PPM_FORMAT = "PPM"
# suffixes written as binary PPM; anything else is left to Pillow's suffix lookup
PPM_SUFFIXES = {".ppm", ""}


def save_format(path: Path) -> str | None:
    return PPM_FORMAT if path.suffix.lower() in PPM_SUFFIXES else None


def read_ppm_header(path: str | Path) -> tuple[int, int]:
    """`(width, height)` of a PPM file, without decoding the pixels."""
    with Image.open(path) as img:
        if img.format != PPM_FORMAT:
            raise ValueError(f"{path}: not a PPM file ({img.format})")
        return img.size


def read_ppm(path: str | Path) -> np.ndarray:
    with Image.open(path) as img:
        if img.format != PPM_FORMAT:
            raise ValueError(f"{path}: not a PPM file ({img.format})")
        return np.asarray(img.convert("RGB"), dtype=np.uint8).copy()
