"""Image processing for ModelX Camera: orientation, fonts, drawing and the watermark compositor."""

from .compositor import InvalidInputError, compose_watermark
from .orientation import read_rotation, rotate_upright

__all__ = ['InvalidInputError', 'compose_watermark', 'read_rotation', 'rotate_upright']
