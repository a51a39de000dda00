"""
Camera backend abstractions for ModelX Camera.

This module defines the interface that all camera backends must implement.
A camera backend is responsible for capturing a single still, saving it to
disk, and describing it as a ``CapturedImage``: file size, pixel dimensions
and the clockwise rotation (from EXIF orientation) needed to make it upright.

Captures can be run on a worker via ``take_picture``, which delivers a
``CaptureResult`` through a ``concurrent.futures.Future`` instead of
success/error callbacks.

Implementations may use mock data for development/testing or interact with
real hardware on a Raspberry Pi (e.g., via libcamera).
"""

from __future__ import annotations

import datetime
import logging
import os
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image

from ..imaging.orientation import read_rotation

logger = logging.getLogger(__name__)


class CaptureError(RuntimeError):
    """Raised when a still could not be captured or saved."""


class CameraStartError(CaptureError):
    """Raised when the camera cannot be started."""


@dataclass
class CapturedImage:
    """Represents metadata for a captured image."""

    local_path: str
    size_bytes: int
    width_px: int
    height_px: int
    rotation: int
    captured_at: datetime.datetime


@dataclass
class CaptureResult:
    """Outcome of an asynchronous capture: either ``image`` or ``error`` is set."""

    image: Optional[CapturedImage] = None
    error: Optional[CaptureError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.image is not None

    def unwrap(self) -> CapturedImage:
        """Return the captured image or raise the carried error."""
        if self.error is not None:
            raise self.error
        if self.image is None:
            raise CaptureError('Capture produced no image')
        return self.image


def describe_capture(path: Path) -> CapturedImage:
    """Build a ``CapturedImage`` for a file that was just written.

    Raises:
        CaptureError: if the file is missing or not a readable image.
    """
    try:
        size_bytes = os.path.getsize(path)
        with Image.open(path) as img:
            width_px, height_px = img.size
        rotation = read_rotation(path)
    except OSError as exc:
        raise CaptureError(f'Captured file {path} is unreadable: {exc}') from exc
    return CapturedImage(
        local_path=str(path),
        size_bytes=size_bytes,
        width_px=width_px,
        height_px=height_px,
        rotation=rotation,
        captured_at=datetime.datetime.now(),
    )


class CameraBackend:
    """Abstract base class for camera backends."""

    def start(self) -> None:
        """Prepare the camera for capturing.

        Raises:
            CameraStartError: if the camera is unavailable.
        """

    def capture(self, out_path: Path) -> CapturedImage:
        """Capture a single still to ``out_path``.

        Args:
            out_path: Destination file. Its directory must exist.

        Returns:
            A CapturedImage describing the saved file.

        Raises:
            CaptureError: if capturing fails.
            NotImplementedError: if not implemented by subclass.
        """
        raise NotImplementedError('capture must be implemented by subclasses')

    def take_picture(self, out_path: Path, executor: Executor) -> 'Future[CaptureResult]':
        """Capture on ``executor`` and return a future resolving to a ``CaptureResult``.

        The future never raises: capture failures are carried in
        ``CaptureResult.error``.
        """
        def run() -> CaptureResult:
            try:
                return CaptureResult(image=self.capture(out_path))
            except CaptureError as exc:
                logger.error('Capture to %s failed: %s', out_path, exc)
                return CaptureResult(error=exc)

        return executor.submit(run)
