"""Camera glyph drawn next to the brand text."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from PIL import Image, ImageDraw

GLYPH_SIZE = 24

_INK = (0, 0, 0, 255)
_CLEAR = (0, 0, 0, 0)


def camera_glyph() -> Image.Image:
    """Return a new 24x24 RGBA camera icon, black on transparent."""
    img = Image.new('RGBA', (GLYPH_SIZE, GLYPH_SIZE), _CLEAR)
    draw = ImageDraw.Draw(img)
    # body and viewfinder bump
    draw.rounded_rectangle([2, 6, 21, 20], radius=2, fill=_INK)
    draw.polygon([(8, 6), (9, 4), (14, 4), (15, 6)], fill=_INK)
    # lens ring
    draw.ellipse([7, 8, 16, 17], fill=_CLEAR)
    draw.ellipse([9, 10, 14, 15], fill=_INK)
    return img


def load_glyph(path: Union[str, Path]) -> Image.Image:
    """Load an icon file to use in place of the built-in camera glyph."""
    with Image.open(path) as img:
        return img.convert('RGBA')
