from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Union


Operand = Union["Point2", float, int]


def ieee_div(a: float, b: float) -> float:
    """Float division that follows IEEE 754 instead of raising on zero."""
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _components(value: Operand) -> tuple[float, float]:
    if isinstance(value, Point2):
        return value.x, value.y
    return value, value


@dataclass(frozen=True)
class Point2:
    x: float
    y: float

    @classmethod
    def repeat(cls, value: float) -> "Point2":
        return cls(value, value)

    def _apply(self, other: Operand, op: Callable[[float, float], float]) -> "Point2":
        ox, oy = _components(other)
        return Point2(op(self.x, ox), op(self.y, oy))

    def __add__(self, other: Operand) -> "Point2":
        return self._apply(other, lambda a, b: a + b)

    def __sub__(self, other: Operand) -> "Point2":
        return self._apply(other, lambda a, b: a - b)

    def __mul__(self, other: Operand) -> "Point2":
        return self._apply(other, lambda a, b: a * b)

    def __truediv__(self, other: Operand) -> "Point2":
        return self._apply(other, ieee_div)

    def __radd__(self, other: float) -> "Point2":
        return self + other

    def __rmul__(self, other: float) -> "Point2":
        return self * other

    def __neg__(self) -> "Point2":
        return Point2(-self.x, -self.y)

    def abs(self) -> "Point2":
        return Point2(abs(self.x), abs(self.y))

    def hypot(self) -> float:
        return math.hypot(self.x, self.y)

    def rotate(self, angle: float) -> "Point2":
        """Rotate counter-clockwise around the origin by `angle` radians."""
        c = math.cos(angle)
        s = math.sin(angle)
        return Point2(self.x * c - self.y * s, self.x * s + self.y * c)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)


@dataclass(frozen=True)
class BoundingBox:
    bottom_left: Point2
    top_right: Point2

    def area(self) -> Point2:
        return self.top_right - self.bottom_left

    def map(self, f: Callable[[Point2], Point2]) -> "BoundingBox":
        return BoundingBox(bottom_left=f(self.bottom_left), top_right=f(self.top_right))
