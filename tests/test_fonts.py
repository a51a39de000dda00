import pytest

from modelx.imaging.fonts import FontBook


def test_empty_text_has_zero_width():
    assert FontBook().measure('', 258) == 0.0


def test_width_grows_with_size():
    fonts = FontBook()
    widths = [fonts.measure('ABC123', size) for size in (10, 50, 120, 258)]
    assert widths == sorted(widths)
    assert widths[0] < widths[-1]


def test_fonts_are_cached_per_size():
    fonts = FontBook()
    assert fonts.font(40) is fonts.font(40)
    assert fonts.font(40) is not fonts.font(41)


def test_missing_font_path_falls_back(tmp_path):
    fonts = FontBook(str(tmp_path / 'missing.ttf'))
    assert fonts.measure('ModelX', 65) > 0


@pytest.mark.parametrize('size', [0, -3])
def test_size_must_be_positive(size):
    with pytest.raises(ValueError):
        FontBook().font(size)
