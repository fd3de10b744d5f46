from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

import numpy as np

from seriesplot.errors import SeriesParseError
from seriesplot.point import Point2


LOGGER = logging.getLogger(__name__)

STEP_PREFIX = "step"
DEFAULT_STEP = 1.0


def running_average(values: np.ndarray, window: int) -> np.ndarray:
    """Trailing mean of the `min(window, i)` values before each index `i`.

    Index 0 has no prior values and yields NaN.
    """
    values = np.asarray(values, dtype=np.float64)
    prefix = np.concatenate(([0.0], np.cumsum(values)))
    index = np.arange(values.size)
    take = np.minimum(index, window)
    with np.errstate(divide="ignore", invalid="ignore"):
        return (prefix[index] - prefix[index - take]) / take


@dataclass(frozen=True)
class SampleSeries:
    points: tuple[Point2, ...]
    lowest: float | None = None
    highest: float | None = None
    averages: tuple[float, ...] | None = None
    source_name: str | None = None

    def __len__(self) -> int:
        return len(self.points)

    @property
    def xs(self) -> np.ndarray:
        return np.asarray([p.x for p in self.points], dtype=np.float64)

    @property
    def ys(self) -> np.ndarray:
        return np.asarray([p.y for p in self.points], dtype=np.float64)

    def first(self) -> Point2 | None:
        return self.points[0] if self.points else None

    def last(self) -> Point2 | None:
        return self.points[-1] if self.points else None

    def average_points(self) -> tuple[Point2, ...]:
        if self.averages is None:
            return ()
        return tuple(Point2(p.x, avg) for p, avg in zip(self.points, self.averages, strict=True))


@dataclass
class SeriesBuilder:
    running_avg: int | None = None
    source_name: str | None = None
    _points: list[Point2] = field(default_factory=list)
    _lowest: float | None = None
    _highest: float | None = None

    def push(self, point: Point2) -> None:
        self._points.append(point)
        y = point.y
        self._lowest = y if self._lowest is None or y < self._lowest else self._lowest
        self._highest = y if self._highest is None or y > self._highest else self._highest

    def complete(self) -> SampleSeries:
        points = tuple(sorted(self._points, key=lambda p: p.x))
        averages = None
        if self.running_avg is not None:
            ys = np.asarray([p.y for p in points], dtype=np.float64)
            averages = tuple(running_average(ys, self.running_avg).tolist())
        return SampleSeries(
            points=points,
            lowest=self._lowest,
            highest=self._highest,
            averages=averages,
            source_name=self.source_name,
        )


def _parse_float(text: str) -> float:
    # float() also accepts digit separators, sample files must not
    if "_" in text:
        raise ValueError(text)
    return float(text)


def parse_series(
    lines: Iterable[str],
    *,
    running_avg: int | None = None,
    source_name: str | None = None,
) -> SampleSeries:
    """Build a series from `step <float>` directives and bare float samples."""
    builder = SeriesBuilder(running_avg=running_avg, source_name=source_name)
    step = DEFAULT_STEP
    x = 0.0
    for line_number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if line.startswith(STEP_PREFIX):
            try:
                step = _parse_float(line[len(STEP_PREFIX) :].strip())
            except ValueError as exc:
                raise SeriesParseError(line, line_number=line_number, source=source_name) from exc
            continue
        try:
            value = _parse_float(line)
        except ValueError as exc:
            raise SeriesParseError(line, line_number=line_number, source=source_name) from exc
        x += step
        builder.push(Point2(x, value))

    series = builder.complete()
    LOGGER.debug("parsed %d samples from %s", len(series), source_name or "<input>")
    return series


def load_series(path: str | Path, *, running_avg: int | None = None) -> SampleSeries:
    path = Path(path)
    raw = path.read_bytes()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        # report the whole offending line, not just the bad bytes
        start = raw.rfind(b"\n", 0, exc.start) + 1
        end = raw.find(b"\n", exc.start)
        line = raw[start : end if end != -1 else len(raw)].decode("utf-8", errors="replace").strip()
        raise SeriesParseError(line, line_number=raw.count(b"\n", 0, exc.start) + 1, source=str(path)) from exc
    return parse_series(io.StringIO(text, newline=None), running_avg=running_avg, source_name=str(path))
