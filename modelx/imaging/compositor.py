"""
ModelX watermark compositor.

``compose_watermark`` takes an upright photo and a caption and returns a new
image carrying the fixed ModelX template:

1. Canvas in portrait orientation (narrow side as width). The photo is pasted
   unscaled at the origin; a landscape photo therefore only covers the top of
   the canvas and the rest keeps the canvas fill (white).
2. A white border stroked 500 units wide around (0, 200)-(w, h-650), which
   renders as a thick band rather than an outline.
3. A white caption band across the bottom 650 units.
4. The caption in black, starting at size 258 and shrunk one unit at a time
   until it leaves at least 123 units of horizontal margin, centred with its
   baseline 500 units above the bottom.
5. "Model Number" in grey at size 200, centred on baseline 320.
6. The camera glyph at its natural size near the bottom-left corner.
7. "ModelX" in black at size 65 next to the glyph.
8. A thin blue border inset 10 units from every edge.

The function has no side effects and keeps no state between calls.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from PIL import Image

from .fonts import FontBook
from .glyphs import camera_glyph
from .surface import DrawBitmap, DrawOp, DrawRect, DrawText, FILL, Paint, STROKE, Surface

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)
GRAY = (120, 120, 120)
BLUE = (0, 116, 217)

CANVAS_FILL = WHITE

BORDER_TOP = 200
BORDER_STROKE_WIDTH = 500
CAPTION_BAND_HEIGHT = 650

CAPTION_TEXT_SIZE = 258
CAPTION_MIN_MARGIN = 123
CAPTION_BASELINE_OFFSET = 500
MIN_TEXT_SIZE = 1

LABEL_TEXT = 'Model Number'
LABEL_TEXT_SIZE = 200
LABEL_BASELINE = 320

ICON_COLUMN_WIDTH = 147
ICON_NOMINAL_SIZE = 24
ICON_X = (ICON_COLUMN_WIDTH - ICON_NOMINAL_SIZE) / 2
ICON_BOTTOM_OFFSET = 147

BRAND_TEXT = 'ModelX'
BRAND_TEXT_SIZE = 65
BRAND_X = 147
BRAND_BOTTOM_OFFSET = 92

FRAME_INSET = 10
FRAME_STROKE_WIDTH = 1.0


class InvalidInputError(ValueError):
    """Raised when the source image cannot be composited (e.g. zero size)."""


def canvas_size(width: int, height: int) -> Tuple[int, int]:
    """Return the portrait canvas size for a ``width`` x ``height`` source."""
    return min(width, height), max(width, height)


def new_canvas(source: Image.Image) -> Image.Image:
    """Allocate the output canvas and paste ``source`` unscaled at the origin.

    The canvas keeps the source mode when it is RGB or RGBA and uses RGBA
    otherwise. Area not covered by the source is filled with ``CANVAS_FILL``.
    """
    width, height = source.size
    if width <= 0 or height <= 0:
        raise InvalidInputError(f'Source image must have positive dimensions, got {width}x{height}')
    mode = source.mode if source.mode in ('RGB', 'RGBA') else 'RGBA'
    if source.mode != mode:
        source = source.convert(mode)
    fill = CANVAS_FILL + (255,) if mode == 'RGBA' else CANVAS_FILL
    canvas = Image.new(mode, canvas_size(width, height), fill)
    canvas.paste(source, (0, 0))
    return canvas


def fit_caption_size(caption: str, width: int, fonts: FontBook) -> Tuple[int, float]:
    """Find the caption text size and its measured width.

    Starts at ``CAPTION_TEXT_SIZE`` and steps down by one while the caption
    leaves less than ``CAPTION_MIN_MARGIN`` of horizontal space. The size
    never drops below ``MIN_TEXT_SIZE``, so the loop ends even when the
    caption cannot fit at any size. An empty caption keeps the initial size
    on any canvas width.

    Returns:
        ``(size, measured_width)`` for the final size.
    """
    size = CAPTION_TEXT_SIZE
    measured = fonts.measure(caption, size)
    while caption and width - measured < CAPTION_MIN_MARGIN and size > MIN_TEXT_SIZE:
        size -= 1
        measured = fonts.measure(caption, size)
    return size, measured


def watermark_operations(
    width: int,
    height: int,
    caption: str,
    fonts: FontBook,
    icon: Image.Image,
) -> List[DrawOp]:
    """Return the ordered draw calls for the watermark on a ``width`` x ``height`` canvas."""
    caption_size, caption_width = fit_caption_size(caption, width, fonts)
    label_width = fonts.measure(LABEL_TEXT, LABEL_TEXT_SIZE)
    band_top = height - CAPTION_BAND_HEIGHT

    return [
        DrawRect(0, BORDER_TOP, width, band_top, Paint(WHITE, STROKE, BORDER_STROKE_WIDTH)),
        DrawRect(0, band_top, width, height, Paint(WHITE, FILL)),
        DrawText(
            caption,
            (width - caption_width) / 2,
            height - CAPTION_BASELINE_OFFSET,
            Paint(BLACK, text_size=caption_size),
        ),
        DrawText(
            LABEL_TEXT,
            (width - label_width) / 2,
            LABEL_BASELINE,
            Paint(GRAY, text_size=LABEL_TEXT_SIZE),
        ),
        DrawBitmap(icon, ICON_X, height - ICON_BOTTOM_OFFSET),
        DrawText(BRAND_TEXT, BRAND_X, height - BRAND_BOTTOM_OFFSET, Paint(BLACK, text_size=BRAND_TEXT_SIZE)),
        DrawRect(
            FRAME_INSET,
            FRAME_INSET,
            width - FRAME_INSET,
            height - FRAME_INSET,
            Paint(BLUE, STROKE, FRAME_STROKE_WIDTH),
        ),
    ]


def compose_watermark(
    source: Image.Image,
    caption: str,
    fonts: Optional[FontBook] = None,
    icon: Optional[Image.Image] = None,
) -> Image.Image:
    """Return a new image with the ModelX watermark drawn over ``source``.

    Args:
        source: Upright photo. Read only; never modified.
        caption: Text for the caption band. May be empty or arbitrarily long.
        fonts: Font provider and text measurer. Defaults to ``FontBook()``.
        icon: Glyph drawn next to the brand text. Defaults to ``camera_glyph()``.

    Raises:
        InvalidInputError: if ``source`` has a zero dimension.
    """
    fonts = fonts or FontBook()
    icon = icon if icon is not None else camera_glyph()

    canvas = new_canvas(source)
    width, height = canvas.size
    Surface(canvas, fonts).draw_all(watermark_operations(width, height, caption, fonts, icon))
    return canvas
