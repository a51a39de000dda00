"""
Font loading and text measurement for the watermark.

``FontBook`` is both the text measurer the caption fit loop relies on and the
font provider the drawing surface renders with, so a caption is always drawn
with exactly the font it was measured with.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from PIL import ImageFont

DEFAULT_FONT = '/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf'

logger = logging.getLogger(__name__)


class FontBook:
    """Sized fonts loaded from one TrueType file, cached per size."""

    def __init__(self, font_path: Optional[str] = None) -> None:
        self.font_path = font_path
        self._fonts: Dict[int, ImageFont.FreeTypeFont] = {}

    def font(self, size: int) -> ImageFont.FreeTypeFont:
        """Return the font at ``size``.

        Tries the configured path, then DejaVuSans, then Pillow's bundled
        default font.
        """
        size = int(size)
        if size < 1:
            raise ValueError(f'Font size must be at least 1, got {size}')
        cached = self._fonts.get(size)
        if cached is not None:
            return cached

        font = None
        for candidate in (self.font_path, DEFAULT_FONT):
            if not candidate:
                continue
            try:
                font = ImageFont.truetype(candidate, size)
                break
            except OSError:
                logger.debug('Font %s unavailable, trying next', candidate)
        if font is None:
            font = ImageFont.load_default(size=size)
        self._fonts[size] = font
        return font

    def measure(self, text: str, size: int) -> float:
        """Return the rendered advance width of ``text`` at ``size``."""
        if not text:
            return 0.0
        return float(self.font(size).getlength(text))
