from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from seriesplot.point import Point2


DEFAULT_STEP = 0.35


@dataclass(frozen=True)
class Stroke:
    start: Point2
    end: Point2


@dataclass(frozen=True)
class Glyph:
    strokes: tuple[Stroke, ...]
    width: float
    step: float = DEFAULT_STEP

    @property
    def total_step(self) -> float:
        return self.width + self.step


class StrokeBuilder:
    """Accumulates directed strokes for one glyph."""

    def __init__(self, start: tuple[float, float], end: tuple[float, float]) -> None:
        self._strokes: list[Stroke] = [Stroke(Point2(*start), Point2(*end))]

    def teleport(self, start: tuple[float, float], end: tuple[float, float]) -> "StrokeBuilder":
        self._strokes.append(Stroke(Point2(*start), Point2(*end)))
        return self

    def move_to(self, position: tuple[float, float]) -> "StrokeBuilder":
        """Continue from the end of the last stroke."""
        start = self._strokes[-1].end
        self._strokes.append(Stroke(start, Point2(*position)))
        return self

    def move_from(self, index: int, position: tuple[float, float]) -> "StrokeBuilder":
        """Branch from the end of stroke `index`."""
        start = self._strokes[index].end
        self._strokes.append(Stroke(start, Point2(*position)))
        return self

    def move_to_index(self, index: int) -> "StrokeBuilder":
        """Close back onto the start of stroke `index`."""
        start = self._strokes[-1].end
        self._strokes.append(Stroke(start, self._strokes[index].start))
        return self

    def build(self) -> tuple[Stroke, ...]:
        return tuple(self._strokes)


def _flipped(strokes: tuple[Stroke, ...]) -> tuple[Stroke, ...]:
    def flip(p: Point2) -> Point2:
        return Point2(1.0 - p.x, 1.0 - p.y)

    return tuple(Stroke(flip(s.start), flip(s.end)) for s in strokes)


class Font:
    def __init__(self, glyphs: Mapping[str, Glyph]) -> None:
        self._glyphs = MappingProxyType(dict(glyphs))

    def get(self, char: str) -> Glyph | None:
        glyph = self._glyphs.get(char)
        if glyph is None:
            glyph = self._glyphs.get(char.upper())
        return glyph

    def __contains__(self, char: str) -> bool:
        return self.get(char) is not None

    def __len__(self) -> int:
        return len(self._glyphs)


def build_default_font() -> Font:
    B = StrokeBuilder

    six = B((1.0, 1.0), (0.0, 0.6)).move_to((0.0, 0.0)).move_to((1.0, 0.0)).move_to((1.0, 0.6)).move_to_index(1).build()

    glyphs = {
        "0": Glyph(
            B((0.0, 1.0), (1.0, 1.0))
            .move_to((1.0, 0.0))
            .move_to((0.0, 0.0))
            .move_to_index(0)
            .teleport((0.0, 1.0), (1.0, 0.0))
            .build(),
            width=0.6,
        ),
        "1": Glyph(B((1.0, 0.0), (1.0, 1.0)).build(), width=0.1),
        "2": Glyph(
            B((0.0, 0.8), (0.2, 1.0)).move_to((0.9, 1.0)).move_to((1.0, 0.8)).move_to((0.0, 0.0)).move_to((1.0, 0.0)).build(),
            width=0.8,
        ),
        "3": Glyph(
            B((0.0, 1.0), (1.0, 1.0)).move_to((1.0, 1.0)).move_to((0.2, 0.6)).move_to((1.0, 0.0)).move_to((0.0, 0.0)).build(),
            width=0.8,
        ),
        "4": Glyph(B((0.8, 0.0), (0.8, 1.0)).move_to((0.0, 0.3)).move_to((1.0, 0.3)).build(), width=0.8),
        "5": Glyph(
            B((1.0, 1.0), (0.0, 1.0)).move_to((0.0, 0.6)).move_to((1.0, 0.6)).move_to((1.0, 0.0)).move_to((0.0, 0.0)).build(),
            width=0.8,
        ),
        "6": Glyph(six, width=0.6),
        "7": Glyph(B((0.0, 1.0), (1.0, 1.0)).move_to((0.1, 0.0)).build(), width=0.7),
        "8": Glyph(
            B((0.0, 1.0), (1.0, 1.0)).move_to((0.0, 0.0)).move_to((1.0, 0.0)).move_to_index(0).build(),
            width=0.6,
        ),
        "9": Glyph(_flipped(six), width=0.6),
        ".": Glyph(B((0.4, 0.0), (0.4, 0.0)).build(), width=0.1),
        "-": Glyph(B((0.0, 0.5), (1.0, 0.5)).build(), width=0.5),
        "A": Glyph(B((0.0, 0.0), (0.5, 1.0)).move_to((1.0, 0.0)).teleport((0.15, 0.3), (0.85, 0.3)).build(), width=0.8),
        "B": Glyph(
            B((0.0, 0.0), (0.0, 1.0))
            .move_to((0.8, 1.0))
            .move_to((1.0, 0.8))
            .move_to((0.8, 0.5))
            .move_to((0.0, 0.5))
            .move_from(4, (1.0, 0.2))
            .move_to((1.0, 0.0))
            .move_to_index(0)
            .build(),
            width=0.7,
        ),
        "C": Glyph(B((1.0, 1.0), (0.0, 1.0)).move_to((0.0, 0.0)).move_to((1.0, 0.0)).build(), width=0.5),
        "D": Glyph(
            B((0.7, 1.0), (0.0, 1.0)).move_to((0.0, 0.0)).move_to((0.7, 0.0)).move_to((1.0, 0.5)).move_to_index(0).build(),
            width=0.7,
        ),
        "E": Glyph(
            B((1.0, 1.0), (0.0, 1.0)).move_to((0.0, 0.0)).move_to((1.0, 0.0)).teleport((0.0, 0.5), (1.0, 0.5)).build(),
            width=0.7,
        ),
        "F": Glyph(B((1.0, 1.0), (0.0, 1.0)).move_to((0.0, 0.0)).teleport((0.0, 0.5), (0.9, 0.5)).build(), width=0.7),
        "G": Glyph(
            B((1.0, 1.0), (0.0, 1.0)).move_to((0.0, 0.0)).move_to((1.0, 0.0)).move_to((1.0, 0.5)).move_to((0.5, 0.5)).build(),
            width=0.8,
        ),
        "H": Glyph(
            B((0.0, 1.0), (0.0, 0.0)).teleport((1.0, 1.0), (1.0, 0.0)).teleport((0.0, 0.5), (1.0, 0.5)).build(),
            width=0.6,
        ),
        "I": Glyph(
            B((1.0, 1.0), (0.0, 1.0)).teleport((1.0, 0.0), (0.0, 0.0)).teleport((0.5, 0.0), (0.5, 1.0)).build(),
            width=0.4,
        ),
        "J": Glyph(B((0.3, 1.0), (1.0, 1.0)).move_to((1.0, 0.0)).move_to((0.0, 0.0)).move_to((0.0, 0.2)).build(), width=0.6),
        "K": Glyph(B((0.0, 1.0), (0.0, 0.0)).teleport((0.8, 1.0), (0.0, 0.5)).move_to((1.0, 0.0)).build(), width=0.7),
        "L": Glyph(B((0.0, 1.0), (0.0, 0.0)).move_to((1.0, 0.0)).build(), width=0.6),
        "M": Glyph(B((0.0, 0.0), (0.0, 1.0)).move_to((0.5, 0.4)).move_to((1.0, 1.0)).move_to((1.0, 0.0)).build(), width=0.7),
        "N": Glyph(B((0.0, 0.0), (0.0, 1.0)).move_to((1.0, 0.0)).move_to((1.0, 1.0)).build(), width=0.6),
        "O": Glyph(
            B((0.0, 1.0), (1.0, 1.0)).move_to((1.0, 0.0)).move_to((0.0, 0.0)).move_to_index(0).build(),
            width=0.6,
        ),
        "P": Glyph(B((0.0, 0.5), (1.0, 0.5)).move_to((1.0, 1.0)).move_to((0.0, 1.0)).move_to((0.0, 0.0)).build(), width=0.6),
        "Q": Glyph(
            B((0.0, 1.0), (0.9, 1.0))
            .move_to((0.9, 0.05))
            .move_to((0.0, 0.05))
            .move_to_index(0)
            .teleport((0.5, 0.2), (1.0, 0.0))
            .build(),
            width=0.6,
        ),
        "R": Glyph(
            B((1.0, 0.0), (0.0, 0.5)).move_to((0.9, 0.5)).move_to((0.9, 1.0)).move_to((0.0, 1.0)).move_to((0.0, 0.0)).build(),
            width=0.7,
        ),
        "S": Glyph(
            B((1.0, 1.0), (0.0, 1.0)).move_to((0.0, 0.6)).move_to((1.0, 0.4)).move_to((1.0, 0.0)).move_to((0.0, 0.0)).build(),
            width=0.5,
        ),
        "T": Glyph(B((1.0, 1.0), (0.0, 1.0)).teleport((0.5, 1.0), (0.5, 0.0)).build(), width=0.7),
        "U": Glyph(B((0.0, 1.0), (0.0, 0.0)).move_to((1.0, 0.0)).move_to((1.0, 1.0)).build(), width=0.6),
        "V": Glyph(B((0.0, 1.0), (0.5, 0.0)).move_to((1.0, 1.0)).build(), width=0.5),
        "W": Glyph(
            B((0.0, 1.0), (0.2, 0.0)).move_to((0.5, 0.6)).move_to((0.8, 0.0)).move_to((1.0, 1.0)).build(),
            width=0.9,
        ),
        "X": Glyph(B((0.0, 1.0), (1.0, 0.0)).teleport((0.0, 0.0), (1.0, 1.0)).build(), width=0.7),
        "Y": Glyph(B((0.0, 1.0), (0.5, 0.6)).move_to((0.5, 0.0)).move_from(0, (1.0, 1.0)).build(), width=0.7),
        "Z": Glyph(B((0.0, 1.0), (1.0, 1.0)).move_to((0.0, 0.0)).move_to((1.0, 0.0)).build(), width=0.7),
    }
    return Font(glyphs)


DEFAULT_FONT = build_default_font()
