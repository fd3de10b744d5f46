from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import numpy as np


RGB = tuple[int, int, int]


def lerp_rgb(a: np.ndarray, b: np.ndarray, amount: float | np.ndarray) -> np.ndarray:
    """Linear blend of uint8 colours, truncated back to uint8."""
    amount = np.asarray(amount, dtype=np.float32)
    if amount.ndim == 1:
        amount = amount[:, None]
    out = a.astype(np.float32) * (1.0 - amount) + b.astype(np.float32) * amount
    return np.clip(out, 0, 255).astype(np.uint8)


class ColorPolicy(Protocol):
    def apply(self, existing: np.ndarray) -> np.ndarray: ...


@dataclass(frozen=True)
class Color:
    r: int
    g: int
    b: int

    @classmethod
    def black(cls) -> "Color":
        return cls(0, 0, 0)

    @classmethod
    def white(cls) -> "Color":
        return cls(255, 255, 255)

    @classmethod
    def gray(cls, level: int) -> "Color":
        return cls(level, level, level)

    @property
    def rgb(self) -> np.ndarray:
        return np.asarray((self.r, self.g, self.b), dtype=np.uint8)

    def lerp(self, other: "Color", amount: float) -> "Color":
        r, g, b = lerp_rgb(self.rgb, other.rgb, amount).tolist()
        return Color(r, g, b)

    def apply(self, existing: np.ndarray) -> np.ndarray:
        return np.broadcast_to(self.rgb, np.shape(existing)).copy()


@dataclass(frozen=True)
class ColorAlpha:
    r: int
    g: int
    b: int
    a: int = 255

    @classmethod
    def from_color(cls, color: Color, a: int = 255) -> "ColorAlpha":
        return cls(color.r, color.g, color.b, a)

    @property
    def opaque(self) -> Color:
        return Color(self.r, self.g, self.b)

    def apply(self, existing: np.ndarray) -> np.ndarray:
        existing = np.asarray(existing, dtype=np.uint8)
        src = np.broadcast_to(self.opaque.rgb, existing.shape)
        return lerp_rgb(src, existing, 1.0 - (self.a / 255.0))


@dataclass(frozen=True)
class NoColor:
    def apply(self, existing: np.ndarray) -> np.ndarray:
        return np.array(existing, dtype=np.uint8, copy=True)
