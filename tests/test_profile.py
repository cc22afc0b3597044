import numpy as np
import pytest

from oiltanklevel.errors import ParseError
from oiltanklevel.profile import parse_brightness_dump, load_brightness_dump


def test_parses_first_channel_in_line_order():
    text = (
        "# ImageMagick pixel enumeration: 1,3,255,gray\n"
        "0,0: ( 29, 29, 29)  #1D1D1D  gray(29,29,29)\n"
        "0,1: (255,255,255)  #FFFFFF  white\n"
        "0,2: (  0,  0,  0)  #000000  black\n"
    )
    profile = parse_brightness_dump(text)
    assert profile.tolist() == [29, 255, 0]


def test_accepts_compact_channel_format():
    text = "# header\n0,0: (12,12,12)  #0C0C0C  gray(12)\n0,1: (7,7,7)  #070707  gray(7)\n"
    assert parse_brightness_dump(text).tolist() == [12, 7]


def test_accepts_iterable_of_lines(make_dump):
    lines = make_dump([1, 2, 3]).splitlines(keepends=True)
    assert parse_brightness_dump(iter(lines)).tolist() == [1, 2, 3]


def test_header_only_gives_empty_profile():
    assert parse_brightness_dump("# ImageMagick pixel enumeration: 1,0,255,gray\n").size == 0


def test_blank_lines_are_ignored(make_dump):
    text = make_dump([4, 5]) + "\n\n"
    assert parse_brightness_dump(text).tolist() == [4, 5]


def test_bad_line_fails_fast_with_line_number(make_dump):
    text = make_dump([4, 5]) + "garbage here\n" + "0,3: ( 1, 1, 1)\n"
    with pytest.raises(ParseError) as exc_info:
        parse_brightness_dump(text)
    assert exc_info.value.line_number == 4
    assert exc_info.value.line == "garbage here"
    assert "garbage here" in str(exc_info.value)


def test_other_column_is_rejected():
    text = "# header\n1,0: ( 29, 29, 29)\n"
    with pytest.raises(ParseError):
        parse_brightness_dump(text)


def test_profile_is_read_only(make_dump):
    profile = parse_brightness_dump(make_dump([1, 2, 3]))
    with pytest.raises(ValueError):
        profile[0] = 9


def test_load_from_file(tmp_path, make_dump):
    path = tmp_path / 'strip.txt'
    path.write_text(make_dump([10, 200, 0]))
    profile = load_brightness_dump(str(path))
    assert isinstance(profile, np.ndarray)
    assert profile.tolist() == [10, 200, 0]
