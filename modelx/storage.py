"""
Persistence of watermarked photos.

``ImageStore`` writes finished images as JPEG files into a shared output
folder. Saving is create-or-overwrite: any file with the same name is deleted
first, and the file is closed right after the single write.
"""

from __future__ import annotations

import datetime
import logging
import os
from pathlib import Path
from typing import Optional, Union

from PIL import Image

logger = logging.getLogger(__name__)

DEFAULT_QUALITY = 90


class StorageError(OSError):
    """Raised when a photo cannot be written or an old one cannot be removed."""


def timestamped_name(prefix: str = 'ModelX_', when: Optional[datetime.datetime] = None) -> str:
    """Return ``<prefix><ddMMyyyy_HHmmss>.jpg`` for ``when`` (default: now)."""
    when = when or datetime.datetime.now()
    return f"{prefix}{when.strftime('%d%m%Y_%H%M%S')}.jpg"


class ImageStore:
    """JPEG writer bound to one output directory."""

    def __init__(self, output_dir: Union[str, Path], quality: int = DEFAULT_QUALITY) -> None:
        self.output_dir = Path(output_dir)
        self.quality = quality

    def path_for(self, filename: str) -> Path:
        return self.output_dir / filename

    def delete_existing(self, filename: str) -> bool:
        """Delete ``filename`` from the output directory if present.

        Returns:
            True if a file was removed.

        Raises:
            StorageError: if the file exists but cannot be removed.
        """
        path = self.path_for(filename)
        if not path.exists():
            return False
        try:
            os.remove(path)
        except OSError as exc:
            raise StorageError(f'Failed to delete {path}: {exc}') from exc
        logger.info('Deleted existing image %s', path)
        return True

    def save(self, image: Image.Image, filename: str) -> Path:
        """Write ``image`` as JPEG under ``filename``, replacing any previous file.

        Raises:
            StorageError: if the directory or file cannot be written.
        """
        self.delete_existing(filename)
        path = self.path_for(filename)
        rgb = image if image.mode == 'RGB' else image.convert('RGB')
        try:
            os.makedirs(self.output_dir, exist_ok=True)
            with open(path, 'wb') as out:
                rgb.save(out, format='JPEG', quality=self.quality)
        except OSError as exc:
            # no truncated JPEG left behind under the target name
            if path.exists():
                try:
                    os.remove(path)
                except OSError:
                    logger.error('Failed to remove partial file %s', path)
            raise StorageError(f'Failed to write {path}: {exc}') from exc
        logger.info('Saved %s (%dx%d, quality %d)', path, image.width, image.height, self.quality)
        return path
