# tests/test_primitives.py
import math

import pytest

from subparse.parser import ParseError, parse
from subparse.parts import Color
from subparse.template import parse_float, parse_int, to_time, value_or_default


@pytest.mark.parametrize(
    "text, expected",
    [
        ("&H3F171F&", Color(31, 23, 63)),
        ("&3F171F&", Color(31, 23, 63)),
        ("&H71F&", Color(31, 7, 0)),
        ("&H3F171F00&", Color(0, 31, 23)),
        ("&H3F171FFF&", Color(255, 31, 23)),
        ("&HAAAA3F171F00&", Color(255, 255, 255)),
        ("&HAAAA3F171FFF&", Color(255, 255, 255)),
        ("H3F171F", Color(31, 23, 63)),
    ],
)
def test_color(text, expected):
    assert parse(text, "color") == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("&HFF&", 0),
        ("&FF&", 0),
        ("&HF&", 1 - 15 / 255),
        ("&H0&", 1),
        ("&F", 1 - 15 / 255),
        ("&0", 1),
        ("0", 1),
        ("H0", 1),
    ],
)
def test_alpha(text, expected):
    assert parse(text, "alpha") == pytest.approx(expected)


@pytest.mark.parametrize(
    "text, rgb, alpha",
    [
        ("&H00434441", (65, 68, 67), 1),
        ("&HF0434441", (65, 68, 67), 1 - 240 / 255),
        ("&HFF434441", (65, 68, 67), 0),
        ("&H71F", (31, 7, 0), 1),
        ("&h71F&", (31, 7, 0), 1),
        ("&H3F171F00", (0, 31, 23), 1 - 63 / 255),
        ("&H3F171FFF", (255, 31, 23), 1 - 63 / 255),
        ("&HAAAA3F171F00", (255, 255, 255), 0),
        ("65535", (255, 255, 0), 1),
    ],
)
def test_color_with_alpha(text, rgb, alpha):
    color = parse(text, "color_with_alpha")
    assert (color.red, color.green, color.blue) == rgb
    assert color.alpha == pytest.approx(alpha)


def test_color_rejects_non_hex():
    with pytest.raises(ParseError):
        parse("&HZZ&", "color")


@pytest.mark.parametrize(
    "text, expected",
    [
        ("5", 5),
        ("-5", -5),
        ("0.8", 0.8),
        ("-143.39", -143.39),
    ],
)
def test_decimal(text, expected):
    assert parse(text, "decimal") == expected


@pytest.mark.parametrize("text", ["", "-", ".5", "5.", "1.2.3", "+5"])
def test_decimal_rejects(text):
    with pytest.raises(ParseError):
        parse(text, "decimal")


def test_unknown_rule():
    with pytest.raises(ValueError, match="Could not find parser rule"):
        parse("abc", "no_such_rule")


def test_parse_error_is_value_error():
    assert issubclass(ParseError, ValueError)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("0:00:00.00", 0),
        ("0:04:23.70", 263.7),
        ("1:00:00.50", 3600.5),
        ("00:00:10.500", 10.5),
        ("12.25", 12.25),
    ],
)
def test_to_time(text, expected):
    assert to_time(text) == pytest.approx(expected)


def test_to_time_without_digits_is_nan():
    assert math.isnan(to_time("0:xx:00.00"))


def test_parse_float_reads_leading_number():
    assert parse_float("  12.5px") == 12.5
    assert parse_float("-3") == -3
    assert math.isnan(parse_float("abc"))


def test_parse_int_reads_leading_integer():
    assert parse_int("42abc") == 42
    with pytest.raises(ValueError):
        parse_int("abc")


def test_value_or_default_uses_default_when_missing():
    assert value_or_default({}, "Outline", parse_float, lambda v: v >= 0, "1") == 1


def test_value_or_default_converts_present_value():
    assert value_or_default({"Outline": "2.5"}, "Outline", parse_float, lambda v: v >= 0, "1") == 2.5


def test_value_or_default_rejects_invalid_value():
    with pytest.raises(ValueError, match="Property Outline has invalid value -1"):
        value_or_default({"Outline": "-1"}, "Outline", parse_float, lambda v: v >= 0, "1")


def test_value_or_default_wraps_converter_errors():
    with pytest.raises(ValueError, match="Property Alignment has invalid value x"):
        value_or_default({"Alignment": "x"}, "Alignment", parse_int, None, "2")


def test_color_with_alpha_replaces_alpha():
    color = Color(1, 2, 3)
    assert color.with_alpha(None) is color
    assert color.with_alpha(0.5) == Color(1, 2, 3, 0.5)
    assert color.alpha == 1


def test_color_interpolate():
    start = Color(0, 0, 0, 0)
    assert start.interpolate(Color(200, 100, 50, 1), 0.5) == Color(100, 50, 25, 0.5)
    assert start.interpolate(Color(200, 100, 50, 1), 0) == start


def test_color_str():
    assert str(Color(1, 2, 3, 0.5)) == "rgba(1, 2, 3, 0.500)"


def test_color_interpolate_keeps_integer_channels():
    color = Color(0, 0, 0).interpolate(Color(255, 10, 3), 0.25)
    assert color == Color(64, 2, 1)
    assert all(isinstance(channel, int) for channel in (color.red, color.green, color.blue))
