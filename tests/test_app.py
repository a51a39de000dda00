import logging
import os

import pytest
from PIL import Image

from modelx.camera.base import CameraBackend, CameraStartError, CaptureError
from modelx import main as main_module
from modelx.main import ModelXApp, parse_args


class DeadCamera(CameraBackend):
    def start(self):
        raise CameraStartError('no camera')


class JammedCamera(CameraBackend):
    def capture(self, out_path):
        raise CaptureError('shutter jammed')


@pytest.fixture
def app(config, restore_logging):
    instance = ModelXApp(config)
    yield instance
    instance.stop()


def test_take_photo_saves_watermarked_portrait(app, config):
    assert app.start_camera()
    captions = []

    def caption():
        captions.append('asked')
        return 'ABC123'

    saved = app.take_photo(caption)
    assert captions == ['asked']
    assert saved is not None
    assert str(saved.parent) == config.output_dir
    assert saved.name.startswith('ModelX_') and saved.suffix == '.jpg'
    with Image.open(saved) as img:
        # 1920x1080 landscape sensor tagged as rotated 90 degrees
        assert img.size == (1080, 1920)
    # raw capture is removed once the watermarked copy exists
    assert not app.capture_path.exists()


def test_take_photo_requires_started_camera(app):
    assert app.take_photo(lambda: 'ignored') is None
    assert os.listdir(app.config.output_dir) == []


def test_camera_start_failure_is_not_fatal(app):
    app.camera = DeadCamera()
    assert app.start_camera() is False
    assert app.camera_ready is False
    assert app.take_photo(lambda: 'ignored') is None


def test_capture_failure_returns_none(app):
    app.camera = JammedCamera()
    assert app.start_camera()
    asked = []
    assert app.take_photo(lambda: asked.append(1) or 'x') is None
    assert asked == []


def test_previous_raw_capture_is_replaced(app):
    app.capture_path.write_bytes(b'stale')
    assert app.start_camera()
    assert app.take_photo(lambda: '') is not None


def test_empty_caption(app):
    assert app.start_camera()
    saved = app.take_photo(lambda: '')
    assert saved is not None and saved.exists()


def test_unknown_backend(config, restore_logging):
    config.camera_backend = 'webcam'
    with pytest.raises(ValueError):
        ModelXApp(config)


def test_custom_icon(config, restore_logging, tmp_path):
    icon_path = tmp_path / 'icon.png'
    Image.new('RGBA', (24, 24), (255, 0, 0, 255)).save(icon_path)
    config.icon_path = str(icon_path)
    instance = ModelXApp(config)
    try:
        assert instance.icon.getpixel((0, 0)) == (255, 0, 0, 255)
    finally:
        instance.stop()


def test_logs_to_configured_file(app, config):
    app.start_camera()
    for handler in logging.getLogger().handlers:
        handler.flush()
    with open(config.log_file) as f:
        assert 'Camera started' in f.read()


def test_parse_args():
    args = parse_args(['-c', 'config/device.yaml', '--caption', 'ABC123'])
    assert args.config == 'config/device.yaml'
    assert args.caption == 'ABC123'
    assert parse_args(['--config', 'x.yaml']).caption is None


def test_cancelled_caption_saves_nothing(app):
    assert app.start_camera()

    def cancel():
        raise EOFError

    assert app.take_photo(cancel) is None
    assert os.listdir(app.config.output_dir) == []
    # the raw capture is left where the camera wrote it
    assert app.capture_path.exists()


def test_main_exits_cleanly_on_cancelled_caption(config, restore_logging, tmp_path, monkeypatch):
    path = tmp_path / 'device.yaml'
    path.write_text(
        f'output_dir: "{config.output_dir}"\n'
        f'capture_dir: "{config.capture_dir}"\n'
        f'log_file: "{config.log_file}"\n'
    )

    def eof(prompt=''):
        raise EOFError

    monkeypatch.setattr('builtins.input', eof)
    monkeypatch.setattr(main_module.signal, 'signal', lambda *args: None)
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(['-c', str(path)])
    assert excinfo.value.code == 1
    assert os.listdir(config.output_dir) == []


def test_stop_detaches_log_handlers(config):
    root = logging.getLogger()
    before = list(root.handlers)
    instance = ModelXApp(config)
    added = [h for h in root.handlers if h not in before]
    assert len(added) == 2
    instance.stop()
    assert root.handlers == before
    file_handler = next(h for h in added if isinstance(h, logging.FileHandler))
    assert file_handler.stream is None


def test_repeated_apps_do_not_duplicate_log_lines(config):
    for _ in range(3):
        ModelXApp(config).stop()
    instance = ModelXApp(config)
    try:
        instance.start_camera()
    finally:
        instance.stop()
    with open(config.log_file) as f:
        assert f.read().count('Camera started') == 1


def test_failed_construction_attaches_no_handlers(config):
    root = logging.getLogger()
    before = list(root.handlers)
    config.camera_backend = 'webcam'
    with pytest.raises(ValueError):
        ModelXApp(config)
    assert root.handlers == before
