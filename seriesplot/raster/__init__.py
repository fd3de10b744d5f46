from .canvas import PixelBuffer
from .color import Color, ColorAlpha, ColorPolicy, NoColor
from .draw_lines import (
    circle_pixels,
    draw_circle,
    draw_line,
    draw_line_thick,
    draw_triangle,
    line_pixels,
    line_thick_pixels,
    triangle_local_pixels,
    triangle_pixels,
)
from .draw_text import TextHAlign, TextVAlign, draw_text, text_between, text_size
from .ppm import read_ppm, read_ppm_header
from .sdf import DeferredSDFDrawer

__all__ = [
    "Color",
    "ColorAlpha",
    "ColorPolicy",
    "DeferredSDFDrawer",
    "NoColor",
    "PixelBuffer",
    "TextHAlign",
    "TextVAlign",
    "circle_pixels",
    "draw_circle",
    "draw_line",
    "draw_line_thick",
    "draw_text",
    "draw_triangle",
    "line_pixels",
    "line_thick_pixels",
    "read_ppm",
    "read_ppm_header",
    "text_between",
    "text_size",
    "triangle_local_pixels",
    "triangle_pixels",
]
