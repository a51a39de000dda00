"""
Main orchestration for ModelX Camera.

This script coordinates capturing a still, turning it upright, stamping the
ModelX watermark with a user-supplied caption and writing the result to the
shared output folder. Captures run on a single background worker; the
configuration is read from a YAML file (see :mod:`modelx.config`).

Usage:

```bash
python -m modelx.main --config config/device.yaml --caption "ABC123"
```

Without ``--caption`` the caption is read from standard input after each
capture.
"""

from __future__ import annotations

import argparse
import logging
import os
import signal
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Optional

from PIL import Image

from .config import Config
from .camera.base import CameraBackend, CameraStartError, CaptureError, CapturedImage
from .camera.mock_camera import MockCamera
from .camera.rpi_camera import RpiCamera
from .imaging.compositor import InvalidInputError, compose_watermark
from .imaging.fonts import FontBook
from .imaging.glyphs import camera_glyph, load_glyph
from .imaging.orientation import rotate_upright
from .storage import ImageStore, StorageError, timestamped_name

logger = logging.getLogger(__name__)


class ModelXApp:
    """Main controller for ModelX Camera operations."""

    def __init__(self, config: Config) -> None:
        self.config = config
        # Ensure directories exist
        config.ensure_paths()

        self.camera: CameraBackend = self._init_camera()
        self.fonts = FontBook(config.font_path)
        self.icon = load_glyph(config.icon_path) if config.icon_path else camera_glyph()
        self.store = ImageStore(config.output_dir, quality=config.jpeg_quality)

        # Initialize logging last; stop() detaches the handlers again
        self._setup_logging()
        self.camera_ready = False
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='CameraWorker')

    def _setup_logging(self) -> None:
        """Configure logging to file and console."""
        root = logging.getLogger()
        root.setLevel(logging.INFO)
        formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(threadName)s - %(message)s'
        )
        # File handler
        fh = logging.FileHandler(self.config.log_file)
        fh.setFormatter(formatter)
        root.addHandler(fh)
        # Console handler
        ch = logging.StreamHandler(sys.stdout)
        ch.setFormatter(formatter)
        root.addHandler(ch)
        self._log_handlers = [fh, ch]

    def _teardown_logging(self) -> None:
        """Detach and close the handlers added by ``_setup_logging``."""
        root = logging.getLogger()
        for handler in self._log_handlers:
            root.removeHandler(handler)
            handler.close()
        self._log_handlers = []

    def _init_camera(self) -> CameraBackend:
        """Instantiate the camera backend based on configuration."""
        width, height = self.config.image_width, self.config.image_height
        if self.config.camera_backend == 'mock':
            orientation = int(self.config.extra.get('mock_orientation', 6))
            return MockCamera(image_width=width, image_height=height, orientation=orientation,
                              quality=self.config.jpeg_quality)
        elif self.config.camera_backend == 'rpi':
            return RpiCamera(image_width=width, image_height=height, quality=self.config.jpeg_quality)
        else:
            raise ValueError(f'Unknown camera backend: {self.config.camera_backend}')

    @property
    def capture_path(self) -> Path:
        return Path(self.config.capture_dir) / self.config.capture_filename

    def start_camera(self) -> bool:
        """Start the camera backend.

        A failure is logged and leaves the camera unusable until this method
        is called again.
        """
        try:
            self.camera.start()
        except CameraStartError as exc:
            logger.error('Failed to start camera: %s', exc)
            self.camera_ready = False
            return False
        self.camera_ready = True
        logger.info('Camera started (%s backend)', self.config.camera_backend)
        return True

    def take_photo(self, caption_provider: Callable[[], str]) -> Optional[Path]:
        """Capture a still and save the watermarked photo.

        Args:
            caption_provider: Called after a successful capture to obtain the
                caption text. Raising ``EOFError`` cancels the photo.

        Returns:
            Path of the saved photo, or None if the camera is not started,
            the caption was cancelled or any step failed (failures are logged).
        """
        if not self.camera_ready:
            logger.warning('Camera is not started; ignoring capture request')
            return None

        # Replace the previous raw capture, if any
        raw_path = self.capture_path
        if raw_path.exists():
            try:
                os.remove(raw_path)
            except OSError as exc:
                logger.error('Failed to delete previous capture %s: %s', raw_path, exc)

        result = self.camera.take_picture(raw_path, self._executor).result()
        try:
            captured = result.unwrap()
        except CaptureError as exc:
            logger.error('Failed to capture image: %s', exc)
            return None

        try:
            caption = caption_provider()
        except EOFError:
            # Cancelled: nothing is saved and the raw capture stays in place
            logger.info('Caption entry cancelled; keeping raw capture %s', raw_path)
            return None

        try:
            return self.process_capture(captured, caption)
        except (InvalidInputError, StorageError, OSError) as exc:
            logger.exception('Failed to process capture %s: %s', raw_path, exc)
            return None

    def process_capture(self, captured: CapturedImage, caption: str) -> Path:
        """Rotate, watermark and save ``captured``, then remove the raw file.

        Raises:
            InvalidInputError: if the decoded capture has no pixels.
            StorageError: if the watermarked photo cannot be written.
        """
        with Image.open(captured.local_path) as img:
            img.load()
            upright = rotate_upright(img, captured.rotation)

        result = compose_watermark(upright, caption, fonts=self.fonts, icon=self.icon)
        saved = self.store.save(result, timestamped_name(self.config.filename_prefix))
        logger.info('Image saved to %s', saved)

        try:
            os.remove(captured.local_path)
        except OSError as exc:
            logger.error('Failed to delete raw capture %s: %s', captured.local_path, exc)
        return saved

    def stop(self) -> None:
        """Wait for pending captures, release the worker and detach logging."""
        self._executor.shutdown(wait=True)
        self._teardown_logging()


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='ModelX Camera')
    parser.add_argument('--config', '-c', type=str, required=True, help='Path to YAML configuration file')
    parser.add_argument('--caption', type=str, default=None, help='Caption to stamp; prompted for when omitted')
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    config = Config.from_yaml(args.config)
    app = ModelXApp(config)

    def handle_sigterm(signum, frame):
        logging.info('Shutting down...')
        app.stop()
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigterm)
    signal.signal(signal.SIGTERM, handle_sigterm)

    if not app.start_camera():
        app.stop()
        sys.exit(1)

    if args.caption is not None:
        saved = app.take_photo(lambda: args.caption)
    else:
        saved = app.take_photo(lambda: input('Caption: '))
    app.stop()
    if saved is None:
        sys.exit(1)
    print(saved)


if __name__ == '__main__':
    main()
