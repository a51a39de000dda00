"""ModelX Camera: capture a photo, stamp the ModelX watermark and store it."""

__version__ = '0.1.0'
