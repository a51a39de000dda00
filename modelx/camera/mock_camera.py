"""
Mock camera backend for development and testing on machines without a physical camera.

This implementation creates synthetic stills using the Pillow library. Each
still is filled with a solid color and annotated with its capture time, then
saved as a JPEG tagged with an EXIF orientation, just as a phone sensor held
in portrait would record a landscape frame.

Usage:

```python
from modelx.camera.mock_camera import MockCamera
cam = MockCamera(image_width=1920, image_height=1080, orientation=6)
image = cam.capture(Path('./capture/ModelX.jpg'))
```
"""

from __future__ import annotations

import datetime
import os
from pathlib import Path
import random

from PIL import Image, ImageDraw, ImageFont

from ..imaging.orientation import EXIF_ORIENTATION_TAG
from .base import CameraBackend, CaptureError, CapturedImage, describe_capture


class MockCamera(CameraBackend):
    """Mock camera backend that generates synthetic stills."""

    def __init__(self, image_width: int = 1920, image_height: int = 1080, orientation: int = 6,
                 quality: int = 90) -> None:
        self.image_width = image_width
        self.image_height = image_height
        self.orientation = orientation
        self.quality = quality
        self.font = ImageFont.load_default()

    def _save_image(self, img: Image.Image, path: str) -> None:
        """Save image to disk with the configured EXIF orientation."""
        exif = Image.Exif()
        exif[EXIF_ORIENTATION_TAG] = self.orientation
        img.save(path, format='JPEG', quality=self.quality, exif=exif)

    def capture(self, out_path: Path) -> CapturedImage:
        """Generate a synthetic still at ``out_path``.

        Raises:
            CaptureError: if the still cannot be written.
        """
        r, g, b = [random.randint(0, 255) for _ in range(3)]
        img = Image.new('RGB', (self.image_width, self.image_height), color=(r, g, b))
        draw = ImageDraw.Draw(img)
        stamp = datetime.datetime.now().strftime('%d.%m.%Y %H:%M:%S')
        draw.text((10, 10), f'Mock capture {stamp}', fill=(255 - r, 255 - g, 255 - b), font=self.font)

        try:
            os.makedirs(Path(out_path).parent, exist_ok=True)
            self._save_image(img, str(out_path))
        except OSError as exc:
            raise CaptureError(f'Failed to write mock capture {out_path}: {exc}') from exc
        return describe_capture(Path(out_path))
