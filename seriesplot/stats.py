from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from seriesplot.point import Point2, ieee_div


# below this the shift identity Gamma(z) = Gamma(z + 1) / z is applied
STIRLING_THRESHOLD = 20.0

# 1 + 1/(12z) + 1/(288z^2) - ... through z^-7
_STIRLING_TERMS = (
    1.0,
    1.0 / 12.0,
    1.0 / 288.0,
    -139.0 / 51840.0,
    -571.0 / 2488320.0,
    163879.0 / 209018880.0,
    5246819.0 / 75246796800.0,
    -534703531.0 / 902961561600.0,
)


@dataclass(frozen=True)
class LinearFit:
    slope: float
    intercept: float

    def at(self, x: float) -> float:
        return self.slope * x + self.intercept

    def solve(self, y: float) -> float:
        return ieee_div(y - self.intercept, self.slope)


@dataclass(frozen=True)
class Correlation:
    r: float
    t: float
    significance: float
    n: int


def _stirling_series(z: float) -> float:
    return sum(term / z**k for k, term in enumerate(_STIRLING_TERMS))


def _shift(z: float) -> tuple[float, float]:
    product = 1.0
    while z < STIRLING_THRESHOLD:
        product *= z
        z += 1.0
    return z, product


def gamma(z: float) -> float:
    """Stirling-series Gamma, shifted upwards for small arguments."""
    if math.isnan(z) or z == -math.inf or (z < 0.0 and z + 1.0 == z):
        return math.nan
    if z == math.inf:
        return math.inf
    z, product = _shift(z)
    try:
        value = math.sqrt(2.0 * math.pi / z) * (z / math.e) ** z * _stirling_series(z)
    except OverflowError:
        value = math.inf
    return ieee_div(value, product)


def log_gamma(z: float) -> float:
    """`log|Gamma(z)|` from the same series, usable where `gamma` overflows."""
    if math.isnan(z) or z == -math.inf or (z < 0.0 and z + 1.0 == z):
        return math.nan
    if z == math.inf:
        return math.inf
    z, product = _shift(z)
    if product == 0.0:
        return math.inf
    log_value = 0.5 * math.log(2.0 * math.pi / z) + z * (math.log(z) - 1.0) + math.log(_stirling_series(z))
    return log_value - math.log(abs(product))


def student_t_density(t: float, df: float) -> float:
    """Student's t probability density at `t`. This is not a tail probability."""
    if not (df > 0.0):
        return math.nan
    ratio = math.exp(log_gamma((df + 1.0) / 2.0) - log_gamma(df / 2.0))
    with np.errstate(over="ignore", invalid="ignore"):
        kernel = float(np.power(np.float64(1.0 + t * t / df), -(df + 1.0) / 2.0))
    return ratio / math.sqrt(math.pi * df) * kernel


def least_squares(xs: np.ndarray, ys: np.ndarray) -> LinearFit:
    """Ordinary least squares; all-equal `xs` give NaN slope and intercept."""
    xs = np.asarray(xs, dtype=np.float64)
    ys = np.asarray(ys, dtype=np.float64)
    if xs.size == 0:
        return LinearFit(math.nan, math.nan)
    mean_x = float(np.mean(xs))
    mean_y = float(np.mean(ys))
    dx = xs - mean_x
    with np.errstate(divide="ignore", invalid="ignore"):
        slope = float(np.float64(np.sum(dx * (ys - mean_y))) / np.float64(np.sum(dx * dx)))
    return LinearFit(slope=slope, intercept=mean_y - slope * mean_x)


def _standardize(values: np.ndarray) -> np.ndarray:
    with np.errstate(divide="ignore", invalid="ignore"):
        return (values - np.mean(values)) / np.std(values, ddof=1)


def correlation(xs: np.ndarray, ys: np.ndarray) -> Correlation:
    """Pearson r, its t statistic and the t density at that statistic."""
    xs = np.asarray(xs, dtype=np.float64)
    ys = np.asarray(ys, dtype=np.float64)
    n = int(xs.size)
    if n < 2:
        return Correlation(r=math.nan, t=math.nan, significance=math.nan, n=n)
    with np.errstate(divide="ignore", invalid="ignore"):
        r = float(np.sum(_standardize(xs) * _standardize(ys)) / (n - 1))
        t = float(np.float64(r) / np.sqrt(np.float64(1.0 - r * r)) * np.sqrt(np.float64(n - 2)))
    df = float(n - 2)
    return Correlation(r=r, t=t, significance=student_t_density(t, df), n=n)


def clip_line_to_unit(line: LinearFit) -> tuple[Point2, Point2] | None:
    """Part of `line` over `x` in `[0, 1]` that lies inside the unit square.

    Liang-Barsky clip of the segment from `x = 0` to `x = 1`. Returns None
    when the line misses the square or is not finite there.
    """
    start = Point2(0.0, line.at(0.0))
    end = Point2(1.0, line.at(1.0))
    if not (start.is_finite() and end.is_finite()):
        return None
    delta = end - start

    t0, t1 = 0.0, 1.0
    for p, q in ((-delta.x, start.x), (delta.x, 1.0 - start.x), (-delta.y, start.y), (delta.y, 1.0 - start.y)):
        if p == 0.0:
            if q < 0.0:
                return None
            continue
        r = q / p
        if p < 0.0:
            t0 = max(t0, r)
        else:
            t1 = min(t1, r)
    if t0 > t1:
        return None
    return start + delta * t0, start + delta * t1
