import pytest

from cubcaster.colors import color_by_name
from cubcaster.xpm import (
    XpmError,
    load_xpm,
    parse_xpm_lines,
    parse_xpm_text,
    split_words,
    strip_comments,
    text_to_rgb,
)

SAMPLE_LINES = ["2 2 2 1", "a c #FF0000", "b c None", "ab", "ba"]

SAMPLE_TEXT = """/* XPM */
static char *sample[] = {
/* columns rows colors chars-per-pixel */
"2 2 2 1",
"a c #FF0000",
// transparent colour
"b c None",
"ab",
"ba"
};
"""


def test_split_words_spaces_and_tabs():
    assert split_words("  16 16\t2 1 ") == ["16", "16", "2", "1"]


def test_split_words_empty():
    assert split_words(" \t ") == []


def test_strip_comments_keeps_length_and_removes_text():
    text = 'x /* hidden */ "a" // gone\n"b"'
    result = strip_comments(text)
    assert len(result) == len(text)
    assert "hidden" not in result
    assert "gone" not in result
    assert '"a"' in result and '"b"' in result


def test_strip_comments_ignores_quoted_markers():
    text = '"a /* b */ c"'
    assert strip_comments(text) == text


def test_text_to_rgb_hex():
    assert text_to_rgb("#FF0000", None) == 0xFF0000


def test_text_to_rgb_names():
    assert text_to_rgb("red", None) == 0xFF0000
    assert text_to_rgb("light", "blue") == color_by_name("light blue")
    assert text_to_rgb("None", None) == -1


def test_text_to_rgb_unknown_is_zero():
    assert text_to_rgb("nosuchcolour", None) == 0
    assert text_to_rgb("#", None) == 0


def test_parse_lines_pixels():
    img = parse_xpm_lines(SAMPLE_LINES)
    assert (img.width, img.height) == (2, 2)
    assert img.get_pixel(0, 0) == 0xFF0000
    assert img.get_pixel(1, 0) == 0xFF000000
    assert img.get_pixel(0, 1) == 0xFF000000
    assert img.get_pixel(1, 1) == 0xFF0000


def test_short_codes_last_definition_wins():
    img = parse_xpm_lines(["1 1 2 1", "a c red", "a c blue", "a"])
    assert img.get_pixel(0, 0) == color_by_name("blue")


def test_long_codes_first_definition_wins():
    img = parse_xpm_lines(["1 1 2 3", "abc c red", "abc c blue", "abc"])
    assert img.get_pixel(0, 0) == color_by_name("red")


def test_unknown_pixel_code_is_black():
    img = parse_xpm_lines(["2 1 1 1", "a c white", "az"])
    assert img.get_pixel(0, 0) == color_by_name("white")
    assert img.get_pixel(1, 0) == 0


@pytest.mark.parametrize(
    "lines",
    [
        [],
        ["0 2 1 1", "a c red", "a", "a"],
        ["2 2"],
        ["1 1 1 1", "a s red", "a"],
        ["1 1 1 1", "a c", "a"],
        ["1 2 1 1", "a c red", "a"],
        ["2 1 1 1", "a c red", "a"],
    ],
)
def test_invalid_lines(lines):
    with pytest.raises(XpmError):
        parse_xpm_lines(lines)


def test_parse_text_matches_lines():
    from_text = parse_xpm_text(SAMPLE_TEXT)
    from_lines = parse_xpm_lines(SAMPLE_LINES)
    assert list(from_text.pixels) == list(from_lines.pixels)


def test_load_xpm(tmp_path):
    path = tmp_path / "sample.xpm"
    path.write_text(SAMPLE_TEXT)
    img = load_xpm(path)
    assert img.get_pixel(0, 0) == 0xFF0000
    assert img.width == 2


def test_load_missing_file(tmp_path):
    with pytest.raises(XpmError):
        load_xpm(tmp_path / "absent.xpm")