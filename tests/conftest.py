import logging

import pytest
from PIL import Image

from modelx.config import Config
from modelx.imaging.fonts import FontBook


class FixedAdvanceFonts(FontBook):
    """Real fonts for drawing, but every character measures half the text size."""

    def __init__(self) -> None:
        super().__init__()
        self.calls = 0

    def measure(self, text: str, size: int) -> float:
        self.calls += 1
        return len(text) * size * 0.5


class EndlessFonts(FontBook):
    """Measures any non-empty text as infinitely wide."""

    def __init__(self) -> None:
        super().__init__()
        self.calls = 0

    def measure(self, text: str, size: int) -> float:
        self.calls += 1
        return float('inf') if text else 0.0


@pytest.fixture
def fixed_fonts():
    return FixedAdvanceFonts()


@pytest.fixture
def endless_fonts():
    return EndlessFonts()


@pytest.fixture
def solid_image():
    def make(width, height, color=(10, 200, 30), mode='RGB'):
        return Image.new(mode, (width, height), color)
    return make


@pytest.fixture
def config(tmp_path):
    return Config(
        output_dir=str(tmp_path / 'Pictures' / 'CameraX'),
        capture_dir=str(tmp_path / 'capture'),
        log_file=str(tmp_path / 'logs' / 'modelx.log'),
    )


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
