from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Literal

import numpy as np

from seriesplot.font import Font, Glyph
from seriesplot.point import BoundingBox, Point2
from seriesplot.raster.canvas import PixelBuffer
from seriesplot.raster.color import ColorPolicy
from seriesplot.raster.draw_lines import line_thick_pixels


TextHAlign = Literal["left", "middle", "right"]
TextVAlign = Literal["bottom", "middle", "top"]

# stroke thickness relative to the glyph size
STROKE_RATIO = 0.05


@dataclass(frozen=True)
class _PlacedGlyph:
    glyph: Glyph
    position: Point2
    size: Point2
    thickness: float


def _layout(image: PixelBuffer, font: Font, position: Point2, size: Point2, text: str) -> Iterator[_PlacedGlyph]:
    thickness = min(size.x, size.y) * STROKE_RATIO
    size = image.without_aspect(size)
    pen = position.x
    advance = 0.0
    for char in text:
        glyph = font.get(char)
        if glyph is None:
            continue
        # no advance after the last glyph
        pen += advance
        advance = glyph.total_step * size.x
        yield _PlacedGlyph(glyph=glyph, position=Point2(pen, position.y), size=size, thickness=thickness)


def text_size(image: PixelBuffer, font: Font, size: Point2, text: str) -> Point2:
    """Footprint of `text` drawn at `size`, measured without rasterising it."""
    extent = Point2(0.0, 0.0)
    for placed in _layout(image, font, Point2(0.0, 0.0), size, text):
        extent = Point2(placed.position.x + placed.glyph.width * placed.size.x, max(extent.y, placed.size.y))
    return extent


def draw_text(
    image: PixelBuffer,
    font: Font,
    color: ColorPolicy,
    position: Point2,
    size: Point2,
    text: str,
) -> BoundingBox:
    bb_right = position
    for placed in _layout(image, font, position, size, text):
        glyph = placed.glyph

        def to_local(p: Point2) -> Point2:
            return placed.position + Point2(p.x * glyph.width, p.y) * placed.size

        parts = [
            line_thick_pixels(image, to_local(stroke.start), to_local(stroke.end), placed.thickness)
            for stroke in glyph.strokes
        ]
        image.write_pixels(np.concatenate(parts, axis=0), color)
        bb_right = Point2(
            placed.position.x + glyph.width * placed.size.x,
            max(bb_right.y, position.y + placed.size.y),
        )
    return BoundingBox(bottom_left=position, top_right=bb_right)


def text_between(
    image: PixelBuffer,
    font: Font,
    color: ColorPolicy,
    bb: BoundingBox,
    align_h: TextHAlign,
    align_v: TextVAlign,
    text: str,
) -> BoundingBox | None:
    """Fit `text` inside `bb` keeping its aspect ratio, then align it."""
    natural = text_size(image, font, Point2.repeat(1.0), text)
    if natural.x <= 0.0 or natural.y <= 0.0:
        return None

    goal = bb.area()
    scale = min(goal.x / natural.x, goal.y / natural.y)
    real = natural * scale

    if align_h == "left":
        x = bb.bottom_left.x
    elif align_h == "middle":
        x = (bb.bottom_left.x + bb.top_right.x - real.x) * 0.5
    elif align_h == "right":
        x = bb.top_right.x - real.x
    else:
        raise ValueError(f"unknown horizontal alignment: {align_h}")

    if align_v == "bottom":
        y = bb.bottom_left.y
    elif align_v == "middle":
        y = (bb.bottom_left.y + bb.top_right.y - real.y) * 0.5
    elif align_v == "top":
        y = bb.top_right.y - real.y
    else:
        raise ValueError(f"unknown vertical alignment: {align_v}")

    return draw_text(image, font, color, Point2(x, y), Point2.repeat(scale), text)
