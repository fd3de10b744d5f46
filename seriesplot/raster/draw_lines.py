from __future__ import annotations

import math

import numpy as np

from seriesplot.point import Point2
from seriesplot.raster.canvas import PixelBuffer
from seriesplot.raster.color import ColorPolicy, lerp_rgb


Pixel = tuple[int, int]

CAP_SEGMENTS = 3
CIRCLE_LOD = 9


def line_pixels(p0: Pixel, p1: Pixel) -> list[Pixel]:
    """Bresenham walk from `p0` to `p1`, both ends included."""
    x0, y0 = p0
    x1, y1 = p1
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    pixels: list[Pixel] = []
    while True:
        pixels.append((x0, y0))
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            if x0 == x1:
                break
            err += dy
            x0 += sx
        if e2 <= dx:
            if y0 == y1:
                break
            err += dx
            y0 += sy
    return pixels


def triangle_local_pixels(p0: Pixel, p1: Pixel, p2: Pixel) -> np.ndarray:
    """Fill between the leftmost and rightmost edge pixel of every row.

    Returns an `(N, 2)` array of `(x, y)`. Zero-area triangles still produce
    the pixels of their edges.
    """
    y_lowest = min(p0[1], p1[1], p2[1])
    y_highest = max(p0[1], p1[1], p2[1])
    rows = y_highest - y_lowest + 1
    lows = np.full(rows, np.iinfo(np.int64).max, dtype=np.int64)
    highs = np.full(rows, np.iinfo(np.int64).min, dtype=np.int64)

    for a, b in ((p0, p1), (p1, p2), (p2, p0)):
        edge = np.asarray(line_pixels(a, b), dtype=np.int64)
        index = edge[:, 1] - y_lowest
        np.minimum.at(lows, index, edge[:, 0])
        np.maximum.at(highs, index, edge[:, 0])

    lengths = highs - lows + 1
    starts = np.cumsum(lengths) - lengths
    total = int(lengths.sum())
    xs = np.arange(total, dtype=np.int64) - np.repeat(starts, lengths) + np.repeat(lows, lengths)
    ys = np.repeat(np.arange(y_lowest, y_highest + 1, dtype=np.int64), lengths)
    return np.stack((xs, ys), axis=1)


def triangle_pixels(image: PixelBuffer, p0: Point2, p1: Point2, p2: Point2) -> np.ndarray:
    return triangle_local_pixels(image.to_local(p0), image.to_local(p1), image.to_local(p2))


def draw_triangle(image: PixelBuffer, p0: Point2, p1: Point2, p2: Point2, color: ColorPolicy) -> None:
    image.write_pixels(triangle_pixels(image, p0, p1, p2), color)


def line_thick_pixels(image: PixelBuffer, p0: Point2, p1: Point2, thickness: float) -> np.ndarray:
    """Pixels of a round-capped thick segment built from triangles."""
    diff = p1 - p0
    angle = math.atan2(diff.y, diff.x)

    def direction(raw: Point2) -> Point2:
        return image.without_aspect(raw.rotate(angle)) * thickness

    def cap_point(i: int, x_scale: float) -> Point2:
        # position along the cap from 0 to 1
        p_n = i / (CAP_SEGMENTS + 1)
        return direction(Point2(math.sin(p_n * math.pi) * x_scale, p_n * 2.0 - 1.0))

    up = direction(Point2(0.0, 1.0))
    parts = [
        triangle_pixels(image, p0 + up, p1 + up, p0 - up),
        triangle_pixels(image, p0 - up, p1 + up, p1 - up),
    ]
    for i in range(CAP_SEGMENTS):
        parts.append(triangle_pixels(image, p0 - up, p0 + cap_point(i + 1, -1.0), p0 + cap_point(i + 2, -1.0)))
        parts.append(triangle_pixels(image, p1 - up, p1 + cap_point(i + 1, 1.0), p1 + cap_point(i + 2, 1.0)))
    return np.concatenate(parts, axis=0)


def draw_line_thick(image: PixelBuffer, p0: Point2, p1: Point2, thickness: float, color: ColorPolicy) -> None:
    image.write_pixels(line_thick_pixels(image, p0, p1, thickness), color)


def circle_pixels(image: PixelBuffer, center: Point2, size: float, lod: int = CIRCLE_LOD) -> np.ndarray:
    radius = image.without_aspect(Point2.repeat(size))

    def point_at(i: int) -> Point2:
        a = i / lod * (2.0 * math.pi)
        return Point2(math.sin(a), math.cos(a)) * radius + center

    parts = [triangle_pixels(image, point_at(i - 1), center, point_at(i)) for i in range(1, lod + 1)]
    return np.concatenate(parts, axis=0)


def draw_circle(image: PixelBuffer, center: Point2, size: float, color: ColorPolicy, lod: int = CIRCLE_LOD) -> None:
    image.write_pixels(circle_pixels(image, center, size, lod=lod), color)


def _round(v: float) -> float:
    # half away from zero
    return math.copysign(math.floor(abs(v) + 0.5), v)


def _fpart(v: float) -> float:
    return v - math.trunc(v)


def _rfpart(v: float) -> float:
    return 1.0 - _fpart(v)


def draw_line(image: PixelBuffer, p0: Point2, p1: Point2, color: ColorPolicy) -> None:
    """Xiaolin Wu anti-aliased hairline; coverage blends towards `color`."""
    a = image.to_local_f(p0)
    b = image.to_local_f(p1)
    if not (a.is_finite() and b.is_finite()):
        return
    x0, y0, x1, y1 = a.x, a.y, b.x, b.y

    steep = abs(y1 - y0) > abs(x1 - x0)
    if steep:
        x0, y0 = y0, x0
        x1, y1 = y1, x1
    if x0 > x1:
        x0, x1 = x1, x0
        y0, y1 = y1, y0

    dx = x1 - x0
    gradient = 1.0 if dx == 0.0 else (y1 - y0) / dx

    def plot(x: float, y: float, brightness: float) -> None:
        if steep:
            x, y = y, x
        px, py = int(math.floor(x)), int(math.floor(y))
        if not image.in_bounds(px, py):
            return
        prev = image.data[py, px]
        image.data[py, px] = lerp_rgb(prev, color.apply(prev), brightness)

    def endpoint(x: float, y: float, x_gap: float) -> tuple[float, float]:
        x_end = _round(x)
        y_end = y + gradient * (x_end - x)
        y_pxl = math.floor(y_end)
        plot(x_end, y_pxl, _rfpart(y_end) * x_gap)
        plot(x_end, y_pxl + 1.0, _fpart(y_end) * x_gap)
        return y_end, x_end

    y_end, x_pxl1 = endpoint(x0, y0, _rfpart(x0 + 0.5))
    _, x_pxl2 = endpoint(x1, y1, _fpart(x1 + 0.5))

    intery = y_end + gradient
    for x in range(int(x_pxl1) + 1, int(x_pxl2)):
        plot(float(x), math.floor(intery), _rfpart(intery))
        plot(float(x), math.floor(intery) + 1.0, _fpart(intery))
        intery += gradient
