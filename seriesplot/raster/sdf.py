from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from seriesplot.point import Point2
from seriesplot.raster.color import Color

if TYPE_CHECKING:
    from seriesplot.raster.canvas import PixelBuffer


LOGGER = logging.getLogger(__name__)

# rows evaluated per pass; bounds the temporary arrays for tall lines
ROW_BAND = 512


class SignedDistance:
    """A batch of sample points moved into a shape's local frame.

    Transforms mutate the points in place; the shape queries return the signed
    distance to the shape boundary, negative inside.
    """

    def __init__(self, x: np.ndarray, y: np.ndarray) -> None:
        self.x = np.array(x, dtype=np.float64, copy=True)
        self.y = np.array(y, dtype=np.float64, copy=True)

    def translate(self, translation: Point2) -> None:
        self.x -= translation.x
        self.y -= translation.y

    def rotate(self, rotation: float) -> None:
        # into the frame of a shape rotated by `rotation`
        c = math.cos(-rotation)
        s = math.sin(-rotation)
        x = self.x * c - self.y * s
        self.y = self.x * s + self.y * c
        self.x = x

    def scale(self, scale: Point2) -> None:
        with np.errstate(divide="ignore", invalid="ignore"):
            self.x /= scale.x
            self.y /= scale.y

    def circle(self, size: float) -> np.ndarray:
        return np.hypot(self.x, self.y) - size

    def rectangle(self, size: float) -> np.ndarray:
        dx = np.abs(self.x) - size
        dy = np.abs(self.y) - size
        out_dist = np.hypot(np.maximum(dx, 0.0), np.maximum(dy, 0.0))
        in_dist = np.minimum(np.maximum(dx, dy), 0.0)
        return out_dist + in_dist


@dataclass(frozen=True)
class SDFLine:
    p0: Point2
    p1: Point2
    thickness: float
    color: Color
    rotation: float
    half_length: float
    local_length: float
    clip_distance: float

    @classmethod
    def between(cls, p0: Point2, p1: Point2, thickness: float, color: Color) -> "SDFLine":
        offset = p1 - p0
        length = offset.hypot()
        half_length = length / 2.0
        return cls(
            p0=p0,
            p1=p1,
            thickness=thickness,
            color=color,
            rotation=math.atan2(offset.y, offset.x),
            half_length=half_length,
            local_length=half_length / thickness if thickness != 0 else math.inf,
            clip_distance=offset.x**2 + offset.y**2 + 2.0 * length * thickness + thickness**2,
        )

    def pixel_bounds(self, image: PixelBuffer) -> tuple[int, int, int, int] | None:
        """Conservative `(x0, x1, y0, y1)` pixel window (exclusive ends) the line can touch."""
        if not (self.p0.is_finite() and self.p1.is_finite() and math.isfinite(self.thickness)):
            return None
        scale = image.aspect_scale
        t = abs(self.thickness)
        left = (min(self.p0.x, self.p1.x) - t) / scale.x * image.width
        right = (max(self.p0.x, self.p1.x) + t) / scale.x * image.width
        top = (1.0 - (max(self.p0.y, self.p1.y) + t) / scale.y) * image.height
        bottom = (1.0 - (min(self.p0.y, self.p1.y) - t) / scale.y) * image.height
        x0 = max(0, int(math.floor(left)))
        x1 = min(image.width, int(math.ceil(right)) + 1)
        y0 = max(0, int(math.floor(top)))
        y1 = min(image.height, int(math.ceil(bottom)) + 1)
        if x0 >= x1 or y0 >= y1:
            return None
        return x0, x1, y0, y1

    def covers(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        """Membership mask for points already in aspect-corrected space."""
        dx = x - self.p0.x
        dy = y - self.p0.y
        within = dx * dx + dy * dy <= self.clip_distance

        start_cap = SignedDistance(x, y)
        end_cap = SignedDistance(x, y)
        body = SignedDistance(x, y)

        start_cap.translate(self.p0)
        end_cap.translate(self.p1)

        body.translate(self.p0)
        body.rotate(self.rotation)
        body.translate(Point2(self.half_length, 0.0))
        body.scale(Point2(self.local_length, 1.0))

        is_cap = (start_cap.circle(self.thickness) < 0.0) | (end_cap.circle(self.thickness) < 0.0)
        with np.errstate(invalid="ignore"):
            is_body = body.rectangle(self.thickness) < 0.0
        return within & (is_cap | is_body)


class DeferredSDFDrawer:
    """Collects thick lines and composites them in one pass on `submit`.

    Lines are resolved per pixel in reverse submission order and the first hit
    wins, so later lines paint over earlier ones. The image must not be read or
    saved until the batch is submitted.
    """

    def __init__(self, image: PixelBuffer) -> None:
        self._image = image
        self._lines: list[SDFLine] = []
        self._submitted = False

    def __enter__(self) -> "DeferredSDFDrawer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.submit()
        else:
            self._image._release_drawer(self)

    def __len__(self) -> int:
        return len(self._lines)

    def line(self, p0: Point2, p1: Point2, thickness: float, color: Color) -> None:
        if self._submitted:
            raise RuntimeError("SDF batch already submitted")
        p0 = self._image.with_aspect(p0)
        p1 = self._image.with_aspect(p1)
        self._lines.append(SDFLine.between(p0, p1, thickness, color))

    def submit(self) -> None:
        if self._submitted:
            raise RuntimeError("SDF batch already submitted")
        self._submitted = True
        self._image._release_drawer(self)
        LOGGER.debug("compositing %d SDF lines", len(self._lines))
        sdf_lines(self._image, self._lines)


def sdf_lines(image: PixelBuffer, lines: list[SDFLine]) -> None:
    if not lines or image.width == 0 or image.height == 0:
        return
    scale = image.aspect_scale
    unresolved = np.ones((image.height, image.width), dtype=bool)
    for line in reversed(lines):
        bounds = line.pixel_bounds(image)
        if bounds is None:
            continue
        x0, x1, y0, y1 = bounds
        xs = np.arange(x0, x1, dtype=np.float64) / image.width * scale.x
        for band0 in range(y0, y1, ROW_BAND):
            band1 = min(y1, band0 + ROW_BAND)
            pending = unresolved[band0:band1, x0:x1]
            if not pending.any():
                continue
            ys = (1.0 - np.arange(band0, band1, dtype=np.float64) / image.height) * scale.y
            gx, gy = np.meshgrid(xs, ys)
            hit = pending & line.covers(gx, gy)
            image.data[band0:band1, x0:x1][hit] = line.color.rgb
            pending[hit] = False
