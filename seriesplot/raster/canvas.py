from __future__ import annotations

import logging
import math
from pathlib import Path

import numpy as np
from PIL import Image

from seriesplot.point import BoundingBox, Point2
from seriesplot.raster.color import Color, ColorPolicy
from seriesplot.raster.ppm import save_format
from seriesplot.raster.sdf import DeferredSDFDrawer


LOGGER = logging.getLogger(__name__)


def _clamp_index(value: float, limit: int) -> int:
    if math.isnan(value):
        return 0
    if value >= limit:
        return limit - 1
    if value <= 0:
        return 0
    return int(value)


class PixelBuffer:
    """Row-major RGB canvas addressed in normalized `[0, 1]^2` space.

    `y = 0` is the bottom edge; row 0 of `data` is the top row. Geometry is
    multiplied by `aspect` along the longer axis so that distances measured
    in drawing code are isotropic in pixels.
    """

    def __init__(self, width: int, height: int, background: Color | None = None) -> None:
        if width < 0 or height < 0:
            raise ValueError("image width/height must be >= 0")
        background = background or Color.white()
        self.width = int(width)
        self.height = int(height)
        self.data = np.empty((self.height, self.width, 3), dtype=np.uint8)
        self.data[:, :] = background.rgb
        self.width_bigger = self.width >= self.height
        if self.width == 0 or self.height == 0:
            self.aspect = 1.0
        elif self.width_bigger:
            self.aspect = self.width / self.height
        else:
            self.aspect = self.height / self.width
        self._open_drawer: DeferredSDFDrawer | None = None

    @classmethod
    def from_array(cls, data: np.ndarray) -> "PixelBuffer":
        height, width = int(data.shape[0]), int(data.shape[1])
        out = cls(width, height)
        out.data[:, :] = data[:, :, :3]
        return out

    @property
    def aspect_scale(self) -> Point2:
        if self.width_bigger:
            return Point2(self.aspect, 1.0)
        return Point2(1.0, self.aspect)

    def with_aspect(self, point: Point2) -> Point2:
        return point * self.aspect_scale

    def without_aspect(self, point: Point2) -> Point2:
        return point / self.aspect_scale

    def to_local_f(self, point: Point2) -> Point2:
        return Point2(point.x * self.width, (1.0 - point.y) * self.height)

    def to_local(self, point: Point2) -> tuple[int, int]:
        p = self.to_local_f(point)
        return _clamp_index(p.x, self.width), _clamp_index(p.y, self.height)

    def pixel(self, x: int, y: int) -> Color:
        r, g, b = self.data[y, x].tolist()
        return Color(r, g, b)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def write_pixels(self, pixels: np.ndarray, color: ColorPolicy) -> None:
        """Apply `color` once to every distinct `(x, y)` pixel in `pixels`."""
        if pixels.size == 0:
            return
        pixels = np.unique(np.asarray(pixels, dtype=np.int64).reshape(-1, 2), axis=0)
        xs = pixels[:, 0]
        ys = pixels[:, 1]
        self.data[ys, xs] = color.apply(self.data[ys, xs])

    def fill(self, bb: BoundingBox, color: ColorPolicy) -> None:
        x0, y1 = self.to_local(bb.bottom_left)
        x1, y0 = self.to_local(bb.top_right)
        view = self.data[y0:y1, x0:x1]
        if view.size == 0:
            return
        view[:, :] = color.apply(view.reshape(-1, 3)).reshape(view.shape)

    def sdf_drawer(self) -> DeferredSDFDrawer:
        self._ensure_no_open_drawer()
        drawer = DeferredSDFDrawer(self)
        self._open_drawer = drawer
        return drawer

    def _release_drawer(self, drawer: DeferredSDFDrawer) -> None:
        if self._open_drawer is drawer:
            self._open_drawer = None

    def _ensure_no_open_drawer(self) -> None:
        if self._open_drawer is not None:
            raise RuntimeError("an SDF batch is still open; submit it before using the image")

    def to_rgb(self) -> np.ndarray:
        self._ensure_no_open_drawer()
        return self.data.copy()

    def save(self, path: str | Path) -> Path:
        """Write the image with Pillow; `.ppm` (or no suffix) is binary PPM, other suffixes pick their own format."""
        self._ensure_no_open_drawer()
        if self.width == 0 or self.height == 0:
            raise ValueError("cannot save a zero-sized image")
        path = Path(path)
        Image.fromarray(self.data).save(path, format=save_format(path))
        LOGGER.debug("saved %dx%d image to %s", self.width, self.height, path)
        return path

    @classmethod
    def load(cls, path: str | Path) -> "PixelBuffer":
        with Image.open(path) as img:
            return cls.from_array(np.asarray(img.convert("RGB"), dtype=np.uint8))
