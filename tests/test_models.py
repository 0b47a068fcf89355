# tests/test_models.py
import pytest

from subparse import models
from subparse.models import (
    Attachment,
    AttachmentType,
    BorderStyle,
    ScriptProperties,
    Style,
    WrappingStyle,
)
from subparse.parts import Color


def test_style_defaults():
    style = Style.from_template({"Name": "Default"})
    assert style == Style(name="Default")
    assert style.font_name == "sans-serif"
    assert style.font_size == 50
    assert style.font_scale_x == 1
    assert style.primary_color == Color(255, 255, 0)
    assert style.secondary_color == Color(0, 0, 0)
    assert style.border_style == BorderStyle.Outline
    assert style.alignment == 2


def test_default_style_matches_style_defaults():
    assert Style.default() == Style(name="Default")


def test_missing_colours_use_yellow_primary_and_black_secondary():
    style = Style.from_template({"Name": "sign1", "Fontname": "Arial"})
    assert style.primary_color == Color(255, 255, 0)
    assert style.secondary_color == Color(0, 0, 0)
    assert Style.default().primary_color == Color(255, 255, 0)


def test_malformed_default_style_line(monkeypatch):
    monkeypatch.setattr(models, "DEFAULT_STYLE_LINE", "Style: Default")
    with pytest.raises(ValueError, match="Malformed default style line"):
        Style.default()


def test_style_from_fields():
    style = Style.from_template(
        {
            "Name": "sign1",
            "Fontname": "Times New Roman",
            "Fontsize": "36",
            "PrimaryColour": "&H00F1F4F9",
            "BackColour": "&H96000000",
            "Bold": "-1",
            "Italic": "1",
            "ScaleX": "120",
            "ScaleY": "80",
            "Angle": "-12.5",
            "BorderStyle": "3",
            "Outline": "1.5",
            "Shadow": "0",
            "Alignment": "8",
            "MarginL": "10",
        }
    )
    assert style.name == "sign1"
    assert style.font_name == "Times New Roman"
    assert style.font_size == 36
    assert style.primary_color == Color(249, 244, 241)
    assert style.shadow_color.alpha == pytest.approx(1 - 150 / 255)
    assert style.bold is True
    # only -1 enables a flag
    assert style.italic is False
    assert style.font_scale_x == pytest.approx(1.2)
    assert style.font_scale_y == pytest.approx(0.8)
    assert style.rotation_z == -12.5
    assert style.border_style == BorderStyle.OpaqueBox
    assert style.outline_thickness == 1.5
    assert style.shadow_depth == 0
    assert style.alignment == 8
    assert style.margin_left == 10
    assert style.margin_right == 80


def test_style_field_names_are_case_insensitive():
    assert Style.from_template({"name": "Default", "FontSize": "36"}).font_size == 36


def test_style_name_asterisk_is_stripped():
    assert Style.from_template({"Name": "*sign1"}).name == "sign1"


def test_style_without_name():
    with pytest.raises(ValueError, match="Style doesn't have a name."):
        Style.from_template({"Fontname": "Arial"})


@pytest.mark.parametrize(
    "key, value",
    [
        ("Alignment", "0"),
        ("Alignment", "10"),
        ("Outline", "-1"),
        ("Shadow", "-0.5"),
        ("Fontsize", "abc"),
        ("BorderStyle", "2"),
        ("MarginV", "x"),
    ],
)
def test_style_rejects_invalid_values(key, value):
    with pytest.raises(ValueError, match=f"Property {key} has invalid value"):
        Style.from_template({"Name": "Default", key: value})


def test_script_properties():
    properties = ScriptProperties()
    assert properties.apply("PlayResX", "1280")
    assert properties.apply("PlayResY", "720")
    assert properties.apply("WrapStyle", "2")
    assert properties.apply("ScaledBorderAndShadow", "yes")
    assert properties == ScriptProperties(1280, 720, WrappingStyle.NoWrap, True)


def test_script_properties_ignores_unknown_names():
    properties = ScriptProperties()
    assert not properties.apply("Title", "Sample")
    assert properties == ScriptProperties()


def test_scaled_border_and_shadow_is_yes_or_not():
    properties = ScriptProperties()
    properties.apply("ScaledBorderAndShadow", "no")
    assert properties.scale_border_and_shadow is False
    properties.apply("ScaledBorderAndShadow", " Yes")
    assert properties.scale_border_and_shadow is True


@pytest.mark.parametrize("name, value", [("PlayResX", "0"), ("PlayResY", "wide"), ("WrapStyle", "4")])
def test_script_properties_rejects_invalid_values(name, value):
    with pytest.raises(ValueError, match=f"Property {name} has invalid value"):
        ScriptProperties().apply(name, value)


def test_attachment_decode_adds_padding():
    attachment = Attachment("logo.png", AttachmentType.Graphic, "aGVsbG8")
    assert attachment.decode() == b"hello"
    assert attachment.url == "data:application/octet-stream;base64,aGVsbG8"


def test_font_attachment_url():
    attachment = Attachment("font.ttf", AttachmentType.Font, "AAEAAA")
    assert attachment.url == "data:application/x-font-ttf;base64,AAEAAA"


def test_graphic_is_not_a_font():
    with pytest.raises(ValueError, match="is not a font"):
        Attachment("logo.png", AttachmentType.Graphic, "aGVsbG8").get_font()
