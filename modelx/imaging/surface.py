"""
Immutable draw calls and the surface that rasterizes them.

Each draw call carries its own ``Paint`` (colour, style, stroke width, text
size), so no drawing state leaks from one call to the next. ``Surface``
executes a sequence of calls against a Pillow image.

Coordinate conventions:

- Rectangles are half-open: ``right`` and ``bottom`` are exclusive.
- A stroked rectangle paints a band of ``stroke_width`` centred on each edge,
  half inside and half outside the rectangle.
- Text ``y`` is the baseline; ``x`` is the left edge of the first glyph's
  advance.
- Bitmaps are pasted at their natural size with fractional positions
  truncated.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Tuple, Union

from PIL import Image, ImageDraw

from .fonts import FontBook

Color = Tuple[int, int, int]

FILL = 'fill'
STROKE = 'stroke'


@dataclass(frozen=True)
class Paint:
    color: Color
    style: str = FILL
    stroke_width: float = 1.0
    text_size: int = 0


@dataclass(frozen=True)
class DrawRect:
    left: float
    top: float
    right: float
    bottom: float
    paint: Paint


@dataclass(frozen=True)
class DrawText:
    text: str
    x: float
    y: float
    paint: Paint


@dataclass(frozen=True)
class DrawBitmap:
    bitmap: Image.Image = field(compare=False)
    x: float
    y: float


DrawOp = Union[DrawRect, DrawText, DrawBitmap]


def _px(value: float) -> int:
    # Round half up so a 1-unit stroke centred on an integer edge covers that pixel.
    return int(math.floor(value + 0.5))


class Surface:
    """Pillow image wrapped as a target for draw calls."""

    def __init__(self, image: Image.Image, fonts: FontBook) -> None:
        self.image = image
        self.fonts = fonts
        self._draw = ImageDraw.Draw(image)

    def draw_all(self, ops: Iterable[DrawOp]) -> None:
        for op in ops:
            self.draw(op)

    def draw(self, op: DrawOp) -> None:
        if isinstance(op, DrawRect):
            if op.paint.style == STROKE:
                self._stroke_rect(op)
            else:
                self._fill(op.left, op.top, op.right, op.bottom, op.paint.color)
        elif isinstance(op, DrawText):
            self._text(op)
        elif isinstance(op, DrawBitmap):
            self._bitmap(op)
        else:
            raise TypeError(f'Unsupported draw call: {op!r}')

    def _fill(self, left: float, top: float, right: float, bottom: float, color: Color) -> None:
        x0, y0 = max(_px(left), 0), max(_px(top), 0)
        x1, y1 = min(_px(right), self.image.width), min(_px(bottom), self.image.height)
        if x1 <= x0 or y1 <= y0:
            return
        self._draw.rectangle([x0, y0, x1 - 1, y1 - 1], fill=color)

    def _stroke_rect(self, op: DrawRect) -> None:
        half = op.paint.stroke_width / 2.0
        color = op.paint.color
        outer_left, outer_right = op.left - half, op.right + half
        outer_top, outer_bottom = op.top - half, op.bottom + half
        # top, bottom, left, right bands
        self._fill(outer_left, outer_top, outer_right, op.top + half, color)
        self._fill(outer_left, op.bottom - half, outer_right, outer_bottom, color)
        self._fill(outer_left, outer_top, op.left + half, outer_bottom, color)
        self._fill(op.right - half, outer_top, outer_right, outer_bottom, color)

    def _text(self, op: DrawText) -> None:
        if not op.text:
            return
        font = self.fonts.font(op.paint.text_size)
        self._draw.text((op.x, op.y), op.text, fill=op.paint.color, font=font, anchor='ls')

    def _bitmap(self, op: DrawBitmap) -> None:
        bitmap = op.bitmap
        mask = bitmap if bitmap.mode in ('RGBA', 'LA') else None
        if bitmap.mode != self.image.mode and bitmap.mode != 'RGBA':
            bitmap = bitmap.convert(self.image.mode)
        self.image.paste(bitmap, (int(op.x), int(op.y)), mask)
