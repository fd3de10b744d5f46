from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, Sequence

from seriesplot.config import GraphConfig
from seriesplot.font import DEFAULT_FONT, Font
from seriesplot.point import BoundingBox, Point2
from seriesplot.raster import (
    Color,
    ColorAlpha,
    PixelBuffer,
    TextVAlign,
    draw_circle,
    draw_line_thick,
    text_between,
)
from seriesplot.scales import AxisFrame, Padding, fit, padding_for
from seriesplot.series import SampleSeries, load_series, parse_series
from seriesplot.stats import Correlation, LinearFit, clip_line_to_unit, correlation, least_squares


LOGGER = logging.getLogger(__name__)

PALETTE: tuple[Color, ...] = (
    Color(255, 120, 120),
    Color(120, 255, 120),
    Color(120, 120, 255),
    Color(255, 120, 220),
    Color(255, 220, 120),
)
XORSHIFT_SEED = 54321

THICKNESS = 0.005
GUIDE_SIZE = 0.01
GUIDE_DIVISIONS = 10
LABEL_HEIGHT = 0.025
TOP_LABEL_HEIGHT = 0.05
LABEL_FRACTIONS = (0.25, 0.5, 0.75)

GUIDE_COLOR = Color.gray(235)
LOWEST_COLOR = Color.gray(210)
BORDER_COLOR = Color.black()
TEXT_COLOR = Color.black()
# darkens the marker fill relative to the series colour
MARKER_SHADE = ColorAlpha(0, 0, 0, 90)
MARKER_ALPHA = 200
AVERAGE_TINT = 0.6


@dataclass
class Xorshift32:
    state: int = XORSHIFT_SEED

    def next(self) -> int:
        s = self.state
        s ^= (s << 13) & 0xFFFFFFFF
        s ^= s >> 17
        s ^= (s << 5) & 0xFFFFFFFF
        self.state = s
        return s


def series_colors(rng: Xorshift32 | None = None) -> Iterator[Color]:
    """The fixed palette, then xorshift32 colours forever."""
    yield from PALETTE
    rng = rng or Xorshift32()
    while True:
        value = rng.next()
        yield Color(value & 0xFF, (value >> 8) & 0xFF, (value >> 16) & 0xFF)


@dataclass(frozen=True)
class SeriesSummary:
    source_name: str | None
    count: int
    lowest: float | None
    highest: float | None
    fit: LinearFit
    correlation: Correlation


def _lerp(a: float, b: float, t: float) -> float:
    return a * (1.0 - t) + b * t


def _segments(points: Sequence[Point2]) -> Iterator[tuple[Point2, Point2]]:
    """Consecutive pairs whose endpoints are both finite."""
    for p0, p1 in zip(points, points[1:]):
        if p0.is_finite() and p1.is_finite():
            yield p0, p1


@dataclass
class Figure:
    config: GraphConfig = field(default_factory=GraphConfig)
    font: Font = DEFAULT_FONT
    frame: AxisFrame = field(init=False)
    series: list[SampleSeries] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        self.frame = AxisFrame(
            log_scale=self.config.log_scale,
            min_avg=self.config.min_avg,
            min_height=self.config.min_height,
            max_height=self.config.max_height,
        )

    def add_series(self, series: SampleSeries) -> "Figure":
        self.frame.fit_series(series)
        self.series.append(series)
        return self

    def add_lines(self, lines: Iterable[str], *, source_name: str | None = None) -> SampleSeries:
        series = parse_series(lines, running_avg=self.config.running_avg, source_name=source_name)
        self.add_series(series)
        return series

    def load(self, path: str | Path) -> SampleSeries:
        series = load_series(path, running_avg=self.config.running_avg)
        self.add_series(series)
        return series

    def summaries(self) -> list[SeriesSummary]:
        out: list[SeriesSummary] = []
        for series in self.series:
            xs = series.xs
            ys = series.ys
            out.append(
                SeriesSummary(
                    source_name=series.source_name,
                    count=len(series),
                    lowest=series.lowest,
                    highest=series.highest,
                    fit=least_squares(xs, ys),
                    correlation=correlation(xs, ys),
                )
            )
        return out

    def render(self, width: int | None = None, height: int | None = None) -> PixelBuffer:
        width = self.config.width if width is None else width
        height = self.config.height if height is None else height
        image = PixelBuffer(width, height, Color.white())
        if width == 0 or height == 0:
            return image

        pad = padding_for(width, height)
        aspect = width / height

        self._draw_guides(image, pad, THICKNESS * 0.75)

        for series in self.series:
            if series.lowest is None:
                continue
            y = self.frame.position(Point2(0.0, series.lowest)).y
            if not math.isfinite(y):
                continue
            draw_line_thick(image, fit(Point2(0.0, y), pad), fit(Point2(1.0, y), pad), THICKNESS, LOWEST_COLOR)

        self._draw_borders(image, pad, THICKNESS)

        for series, color in zip(self.series, series_colors()):
            LOGGER.debug("drawing %s (%d points) in %s", series.source_name or "<series>", len(series), color)
            self._draw_series(image, series, pad, THICKNESS, color)

        self._draw_units(image, pad, aspect)
        return image

    def save(self, path: str | Path | None = None) -> Path:
        return self.render().save(self.config.output if path is None else path)

    def _draw_series(self, image: PixelBuffer, series: SampleSeries, pad: Padding, thickness: float, color: Color) -> None:
        points = [self.frame.to_local(p, pad) for p in series.points]

        if self.config.plot_line:
            self._draw_best_fit(image, series, pad, thickness, color)

        with image.sdf_drawer() as drawer:
            for p0, p1 in _segments(points):
                drawer.line(p0, p1, thickness, color)

        marker = ColorAlpha.from_color(MARKER_SHADE.opaque.lerp(color, 1.0 - MARKER_SHADE.a / 255.0), MARKER_ALPHA)
        for point in points:
            if point.is_finite():
                draw_circle(image, point, thickness * 1.5, marker)

        averages = series.average_points()
        if averages:
            avg_color = Color.white().lerp(color, AVERAGE_TINT)
            with image.sdf_drawer() as drawer:
                for p0, p1 in _segments([self.frame.to_local(p, pad) for p in averages]):
                    drawer.line(p0, p1, thickness, avg_color)

    def best_fit_segment(self, series: SampleSeries) -> tuple[Point2, Point2] | None:
        """Least-squares line of `series` in normalized space, clipped to the plot."""
        normalized = [self.frame.position(p) for p in series.points]
        return clip_line_to_unit(least_squares([p.x for p in normalized], [p.y for p in normalized]))

    def unit_labels(self) -> list[tuple[float, float]]:
        """`(normalized height, value)` of every axis label, bottom to top."""
        labels = [(0.0, self.frame.bottom)]
        labels.extend((t, self.frame.unposition(Point2(0.0, t)).y) for t in LABEL_FRACTIONS)
        labels.append((1.0, self.frame.top))
        return labels

    def _draw_best_fit(self, image: PixelBuffer, series: SampleSeries, pad: Padding, thickness: float, color: Color) -> None:
        segment = self.best_fit_segment(series)
        if segment is None:
            LOGGER.debug("best-fit line for %s misses the plot", series.source_name or "<series>")
            return
        start, end = segment
        with image.sdf_drawer() as drawer:
            drawer.line(fit(start, pad), fit(end, pad), thickness, Color.black().lerp(color, 0.75))

    def _draw_guides(self, image: PixelBuffer, pad: Padding, thickness: float) -> None:
        def cap_at(t: float, weight: float) -> None:
            y = _lerp(pad.bottom_left.y, pad.top_right.y, t)
            guide_width = GUIDE_SIZE * (weight / thickness) ** 0.5
            draw_line_thick(
                image,
                Point2(pad.bottom_left.x - guide_width, y),
                Point2(pad.bottom_left.x + guide_width, y),
                weight,
                BORDER_COLOR,
            )

        def line_at(t: float, weight: float) -> None:
            y = _lerp(pad.bottom_left.y, pad.top_right.y, t)
            draw_line_thick(image, Point2(pad.bottom_left.x, y), Point2(pad.top_right.x, y), weight, GUIDE_COLOR)
            cap_at(t, weight)

        line_at(0.5, thickness)
        line_at(1.0, thickness)

        half = thickness * 0.55
        step = 0.5 / GUIDE_DIVISIONS
        for i in range(1, GUIDE_DIVISIONS):
            line_at(i * step, half)
            line_at(0.5 + i * step, half)

        # the half-way tick is drawn twice as heavy
        cap_at(0.5, thickness * 2.0)
        cap_at(0.0, thickness)

    def _draw_borders(self, image: PixelBuffer, pad: Padding, thickness: float) -> None:
        corner = pad.bottom_left
        draw_line_thick(image, corner, Point2(corner.x, pad.top_right.y), thickness, BORDER_COLOR)
        draw_line_thick(image, corner, Point2(pad.top_right.x, corner.y), thickness, BORDER_COLOR)

    def _draw_units(self, image: PixelBuffer, pad: Padding, aspect: float) -> None:
        left = 0.02 / aspect
        right = pad.bottom_left.x - GUIDE_SIZE - left

        def label(value: float, bottom: float, height: float, align_v: TextVAlign) -> None:
            box = BoundingBox(bottom_left=Point2(left, bottom), top_right=Point2(right, bottom + height))
            text_between(image, self.font, TEXT_COLOR, box, "right", align_v, f"{value:.4f}")

        for t, value in self.unit_labels():
            if t == 0.0:
                label(value, pad.bottom_left.y, LABEL_HEIGHT, "bottom")
            elif t == 1.0:
                label(value, pad.top_right.y - TOP_LABEL_HEIGHT, TOP_LABEL_HEIGHT, "top")
            else:
                y = _lerp(pad.bottom_left.y, pad.top_right.y, t)
                label(value, y - LABEL_HEIGHT * 0.5, LABEL_HEIGHT, "middle")
