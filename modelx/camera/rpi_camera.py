"""
Raspberry Pi camera backend.

This backend uses the libcamera tools available on Raspberry Pi OS to capture
single stills. It invokes ``libcamera-still`` via subprocess with a short
timeout so the shutter fires with minimal latency.

Note: To use this backend, ensure that libcamera is installed and the camera
is enabled on your Raspberry Pi. If libcamera is not available (e.g., when
running on macOS), ``start`` raises ``CameraStartError``.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path

from .base import CameraBackend, CameraStartError, CaptureError, CapturedImage, describe_capture

LIBCAMERA_STILL = 'libcamera-still'


class RpiCamera(CameraBackend):
    """Camera backend using libcamera tools on Raspberry Pi."""

    def __init__(self, image_width: int = 1920, image_height: int = 1080, quality: int = 90) -> None:
        self.image_width = image_width
        self.image_height = image_height
        self.quality = quality

    def start(self) -> None:
        if shutil.which(LIBCAMERA_STILL) is None:
            raise CameraStartError(f'{LIBCAMERA_STILL} is not available on this system')

    def capture(self, out_path: Path) -> CapturedImage:
        """Capture a still using libcamera-still.

        Args:
            out_path: Destination JPEG path.

        Returns:
            ``CapturedImage`` for the written file.

        Raises:
            CaptureError: if capturing fails.
        """
        cmd = [
            LIBCAMERA_STILL,
            '-n',                        # no preview
            '-o', str(out_path),
            '--width', str(self.image_width),
            '--height', str(self.image_height),
            '--quality', str(self.quality),
            '--immediate',
            '-t', '1',
        ]
        os.makedirs(Path(out_path).parent, exist_ok=True)
        try:
            subprocess.run(cmd, check=True, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
        except FileNotFoundError as exc:
            raise CaptureError(f'{LIBCAMERA_STILL} is not available on this system') from exc
        except subprocess.CalledProcessError as exc:
            raise CaptureError(f'{LIBCAMERA_STILL} failed: {exc.stderr.decode().strip()}') from exc

        return describe_capture(Path(out_path))
