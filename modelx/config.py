"""
Configuration management for ModelX Camera.

This module defines a dataclass ``Config`` that holds configuration for the
camera application. It can be loaded from a YAML file or constructed manually.
The configuration covers storage paths, file naming, JPEG quality, camera
backend selection and the optional font/icon overrides used by the watermark.

Example YAML configuration (config/device.yaml):

```yaml
output_dir: "./Pictures/CameraX"   # shared folder for watermarked photos
capture_dir: "./capture"           # raw captures land here before processing
capture_filename: "ModelX.jpg"
filename_prefix: "ModelX_"
jpeg_quality: 90
camera_backend: "rpi"              # "mock" on development machines
image_width: 1920
image_height: 1080
font_path: "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"
log_file: "./modelx.log"
```

Using the ``Config.from_yaml`` method simplifies loading configuration:

```python
from modelx.config import Config
config = Config.from_yaml('config/device.yaml')
```
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
import yaml


@dataclass
class Config:
    """Configuration settings for the ModelX camera application."""

    output_dir: str
    capture_dir: str = './capture'
    capture_filename: str = 'ModelX.jpg'
    filename_prefix: str = 'ModelX_'
    jpeg_quality: int = 90
    camera_backend: str = 'mock'
    image_width: int = 1920
    image_height: int = 1080
    font_path: Optional[str] = None
    icon_path: Optional[str] = None
    log_file: str = './modelx.log'

    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not 1 <= int(self.jpeg_quality) <= 100:
            raise ValueError(f'jpeg_quality must be between 1 and 100, got {self.jpeg_quality}')

    @classmethod
    def from_yaml(cls, path: str) -> 'Config':
        """Load configuration from a YAML file.

        Raises:
            FileNotFoundError: if the YAML file cannot be found.
            yaml.YAMLError: if the YAML file is invalid.
            KeyError: if required keys are missing.
            ValueError: if ``jpeg_quality`` is out of range.
        """
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}

        required_keys = ['output_dir']
        missing = [k for k in required_keys if k not in data]
        if missing:
            raise KeyError(f'Missing required configuration keys: {missing}')

        return cls(
            output_dir=data['output_dir'],
            capture_dir=data.get('capture_dir', './capture'),
            capture_filename=data.get('capture_filename', 'ModelX.jpg'),
            filename_prefix=data.get('filename_prefix', 'ModelX_'),
            jpeg_quality=int(data.get('jpeg_quality', 90)),
            camera_backend=data.get('camera_backend', 'mock'),
            image_width=int(data.get('image_width', 1920)),
            image_height=int(data.get('image_height', 1080)),
            font_path=data.get('font_path'),
            icon_path=data.get('icon_path'),
            log_file=data.get('log_file', './modelx.log'),
            extra={k: v for k, v in data.items() if k not in cls.__annotations__},
        )

    def ensure_paths(self) -> None:
        """Ensure that the capture, output and log directories exist.

        Creates directories as needed. This method is idempotent.
        """
        for directory in (self.capture_dir, self.output_dir):
            if not os.path.exists(directory):
                os.makedirs(directory, exist_ok=True)

        # Create directory for log file
        log_dir = os.path.dirname(self.log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir, exist_ok=True)
