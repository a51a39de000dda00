"""
Rotation normalization for captured photos.

Camera sensors store frames in their native orientation and record how the
device was held in the EXIF ``Orientation`` tag. Before a photo is watermarked
it has to be turned upright; this module maps the tag to a clockwise rotation
angle and applies it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from PIL import Image

EXIF_ORIENTATION_TAG = 0x0112

# EXIF orientation values that are pure rotations. Mirrored variants
# (2, 4, 5, 7) are left untouched, as are missing or unknown values.
_ORIENTATION_TO_ROTATION = {
    1: 0,
    3: 180,
    6: 90,
    8: 270,
}

# Pillow's ROTATE_* transposes turn counter-clockwise.
_CLOCKWISE_TRANSPOSE = {
    90: Image.Transpose.ROTATE_270,
    180: Image.Transpose.ROTATE_180,
    270: Image.Transpose.ROTATE_90,
}

VALID_ANGLES = (0, 90, 180, 270)


def rotation_for_orientation(orientation: Optional[int]) -> int:
    """Return the clockwise rotation that makes an image with ``orientation`` upright."""
    return _ORIENTATION_TO_ROTATION.get(orientation, 0)


def read_rotation(path: Union[str, Path]) -> int:
    """Read the EXIF orientation of an image file and return its rotation angle.

    Files without EXIF data, or with an orientation that is not a pure
    rotation, report 0.

    Raises:
        FileNotFoundError: if ``path`` does not exist.
        PIL.UnidentifiedImageError: if the file is not an image.
    """
    with Image.open(path) as img:
        orientation = img.getexif().get(EXIF_ORIENTATION_TAG)
    return rotation_for_orientation(orientation)


def rotate_upright(image: Image.Image, angle: int) -> Image.Image:
    """Rotate ``image`` clockwise by ``angle`` degrees.

    Always returns a new image; the input is not modified. For 90 and 270
    degrees the width and height are swapped.

    Args:
        image: Decoded source image.
        angle: One of 0, 90, 180 or 270.

    Raises:
        ValueError: if ``angle`` is not a multiple of 90 in [0, 270].
    """
    if angle not in VALID_ANGLES:
        raise ValueError(f'Unsupported rotation angle: {angle}')
    if angle == 0:
        return image.copy()
    return image.transpose(_CLOCKWISE_TRANSPOSE[angle])
