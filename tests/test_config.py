import pytest

from modelx.config import Config


def test_from_yaml_defaults(tmp_path):
    path = tmp_path / 'device.yaml'
    path.write_text('output_dir: "./out"\n')
    config = Config.from_yaml(str(path))
    assert config.output_dir == './out'
    assert config.capture_filename == 'ModelX.jpg'
    assert config.filename_prefix == 'ModelX_'
    assert config.jpeg_quality == 90
    assert config.camera_backend == 'mock'
    assert config.font_path is None
    assert config.extra == {}


def test_from_yaml_overrides_and_extra(tmp_path):
    path = tmp_path / 'device.yaml'
    path.write_text(
        'output_dir: out\n'
        'camera_backend: rpi\n'
        'jpeg_quality: 75\n'
        'image_width: 4056\n'
        'mock_orientation: 1\n'
    )
    config = Config.from_yaml(str(path))
    assert config.camera_backend == 'rpi'
    assert config.jpeg_quality == 75
    assert config.image_width == 4056
    assert config.extra == {'mock_orientation': 1}


def test_from_yaml_missing_required(tmp_path):
    path = tmp_path / 'device.yaml'
    path.write_text('camera_backend: mock\n')
    with pytest.raises(KeyError):
        Config.from_yaml(str(path))


def test_from_yaml_empty_file(tmp_path):
    path = tmp_path / 'device.yaml'
    path.write_text('')
    with pytest.raises(KeyError):
        Config.from_yaml(str(path))


@pytest.mark.parametrize('quality', [0, 101])
def test_quality_range(quality):
    with pytest.raises(ValueError):
        Config(output_dir='out', jpeg_quality=quality)


def test_ensure_paths(tmp_path):
    config = Config(
        output_dir=str(tmp_path / 'a' / 'out'),
        capture_dir=str(tmp_path / 'b'),
        log_file=str(tmp_path / 'logs' / 'modelx.log'),
    )
    config.ensure_paths()
    config.ensure_paths()
    assert (tmp_path / 'a' / 'out').is_dir()
    assert (tmp_path / 'b').is_dir()
    assert (tmp_path / 'logs').is_dir()
