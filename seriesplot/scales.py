from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from seriesplot.point import BoundingBox, Point2
from seriesplot.series import SampleSeries


LOGGER = logging.getLogger(__name__)

Padding = BoundingBox


def padding_for(width: int, height: int, pad: float = 0.025, left: float = 0.2) -> Padding:
    aspect = width / height
    return Padding(
        bottom_left=Point2(left / aspect, pad),
        top_right=Point2(1.0 - pad / aspect, 1.0 - pad),
    )


def fit(point: Point2, pad: Padding) -> Point2:
    """Map normalized `[0, 1]^2` into the padded drawing rectangle."""
    return point * pad.area() + pad.bottom_left


@dataclass
class AxisFrame:
    """Data-space rectangle shared by every ingested series."""

    log_scale: float | None = None
    min_avg: float | None = None
    min_height: float | None = None
    max_height: float | None = None
    top: float = 0.0
    bottom: float = math.inf
    left: float = 0.0
    right: float = 0.0

    def fit_series(self, series: SampleSeries) -> None:
        last = series.last()
        if last is not None:
            LOGGER.debug("right: %s", last.x)
            self.right = max(self.right, last.x)

        if not series.points:
            if self.min_height is not None:
                self.bottom = self.min_height
            return

        ys = series.ys
        if self.max_height is not None:
            self.top = self.max_height
        else:
            self.top = max(self.top, float(np.fmax.reduce(ys)))

        lowest = float(np.fmin.reduce(ys))
        LOGGER.debug("bottom: %s", lowest)

        if self.min_height is not None:
            self.bottom = self.min_height
        elif self.bottom > lowest:
            if self.min_avg is not None:
                diff = abs(float(np.mean(ys)) - lowest)
                self.bottom = lowest - diff * self.min_avg
            else:
                self.bottom = lowest

    def position(self, point: Point2) -> Point2:
        """Normalize a data point; degenerate frames yield NaN/inf, never raise."""
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            x = np.float64(point.x - self.left) / np.float64(self.right - self.left)
            y = np.float64(point.y - self.bottom) / np.float64(self.top - self.bottom)
            if self.log_scale is not None:
                y = np.power(y, self.log_scale)
        return Point2(float(x), float(y))

    def unposition(self, point: Point2) -> Point2:
        with np.errstate(invalid="ignore", over="ignore", divide="ignore"):
            y = np.float64(point.y)
            if self.log_scale is not None:
                y = np.power(y, 1.0 / np.float64(self.log_scale))
            x = np.float64(point.x) * (self.right - self.left) + self.left
            y = y * (self.top - self.bottom) + self.bottom
        return Point2(float(x), float(y))

    def to_local(self, point: Point2, pad: Padding) -> Point2:
        return fit(self.position(point), pad)
