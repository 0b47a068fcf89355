"""
SPDX-License-Identifier: Apache-2.0
"""

from __future__ import annotations

import base64
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from io import BytesIO

from fontTools.ttLib import TTFont

from subparse.parser import parse
from subparse.parts import Color
from subparse.template import (
    TemplateFields,
    is_number,
    parse_float,
    parse_format_specifier,
    parse_int,
    parse_line_into_typed_template,
    value_or_default,
)

__all__ = (
    "AttachmentType",
    "Attachment",
    "BorderStyle",
    "DEFAULT_STYLE_LINE",
    "DEFAULT_STYLES_FORMAT",
    "Format",
    "ScriptProperties",
    "Style",
    "WrappingStyle",
)

DEFAULT_STYLES_FORMAT = parse_format_specifier(
    "Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, OutlineColour, BackColour, "
    "Bold, Italic, Underline, StrikeOut, ScaleX, ScaleY, Spacing, Angle, "
    "BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, Encoding"
)
DEFAULT_STYLE_LINE = (
    "Style: Default,sans-serif,50,&H0000FFFF,&H00000000,&H00000000,&H00000000,"
    "0,0,0,0,100,100,0,0,1,1,1,2,80,80,35,1"
)
FONT_NAME_IDS = (1, 4, 6)
"""Family, full and PostScript names"""


class WrappingStyle(IntEnum):
    SmartTop = 0
    EndOfLine = 1
    NoWrap = 2
    SmartBottom = 3


class BorderStyle(IntEnum):
    Outline = 1
    OpaqueBox = 3


class AttachmentType(str, Enum):
    Font = "font"
    Graphic = "graphic"


class Format(str, Enum):
    ASS = "ass"
    SRT = "srt"


def _non_negative(value: float) -> bool:
    return is_number(value) and value >= 0


def _parse_color(value: str) -> Color:
    return parse(value, "color_with_alpha")


def _parse_border_style(value: str) -> BorderStyle:
    return BorderStyle(parse_int(value))


@dataclass
class ScriptProperties:
    resolution_x: int | None = None
    resolution_y: int | None = None
    wrapping_style: WrappingStyle | None = None
    scale_border_and_shadow: bool | None = None

    def apply(self, name: str, value: str) -> bool:
        """Set the property named by a ``[Script Info]`` line, ``False`` if it is not one we keep."""
        template = {name: value}
        match name:
            case "PlayResX":
                self.resolution_x = value_or_default(template, name, parse_int, lambda v: v > 0, "0")
            case "PlayResY":
                self.resolution_y = value_or_default(template, name, parse_int, lambda v: v > 0, "0")
            case "WrapStyle":
                wrap = value_or_default(template, name, parse_int, lambda v: 0 <= v <= 3, "0")
                self.wrapping_style = WrappingStyle(wrap)
            case "ScaledBorderAndShadow":
                self.scale_border_and_shadow = value_or_default(
                    template, name, lambda v: v.strip().lower() == "yes", None, "no"
                )
            case _:
                return False
        return True


@dataclass
class Style:
    name: str = field(kw_only=True)
    italic: bool = field(default=False, kw_only=True)
    bold: bool = field(default=False, kw_only=True)
    underline: bool = field(default=False, kw_only=True)
    strike_through: bool = field(default=False, kw_only=True)
    font_name: str = field(default="sans-serif", kw_only=True)
    font_size: float = field(default=50, kw_only=True)
    font_scale_x: float = field(default=1, kw_only=True)
    """1 is unscaled"""
    font_scale_y: float = field(default=1, kw_only=True)
    letter_spacing: float = field(default=0, kw_only=True)
    rotation_z: float = field(default=0, kw_only=True)
    primary_color: Color = field(default=Color(255, 255, 0), kw_only=True)
    secondary_color: Color = field(default=Color(0, 0, 0), kw_only=True)
    outline_color: Color = field(default=Color(0, 0, 0), kw_only=True)
    shadow_color: Color = field(default=Color(0, 0, 0), kw_only=True)
    outline_thickness: float = field(default=1, kw_only=True)
    border_style: BorderStyle = field(default=BorderStyle.Outline, kw_only=True)
    shadow_depth: float = field(default=1, kw_only=True)
    alignment: int = field(default=2, kw_only=True)
    """Numpad layout, 1 to 9"""
    margin_left: float = field(default=80, kw_only=True)
    margin_right: float = field(default=80, kw_only=True)
    margin_vertical: float = field(default=35, kw_only=True)

    @classmethod
    def from_template(cls, template: Mapping[str, str]) -> "Style":
        """
        Build a style from the fields of a ``Style:`` line.

        Missing fields take their defaults, fields that are present but malformed
        raise a ``ValueError`` naming the field.
        """
        if not isinstance(template, TemplateFields):
            template = TemplateFields(template)

        name = template.get("Name")
        if not isinstance(name, str):
            raise ValueError("Style doesn't have a name.")

        return cls(
            name=name.lstrip("*"),
            italic=template.get("Italic") == "-1",
            bold=template.get("Bold") == "-1",
            underline=template.get("Underline") == "-1",
            strike_through=template.get("StrikeOut") == "-1",
            font_name=template.get("Fontname", "sans-serif"),
            font_size=value_or_default(template, "Fontsize", parse_float, _non_negative, "50"),
            font_scale_x=value_or_default(template, "ScaleX", parse_float, _non_negative, "100") / 100,
            font_scale_y=value_or_default(template, "ScaleY", parse_float, _non_negative, "100") / 100,
            letter_spacing=value_or_default(template, "Spacing", parse_float, _non_negative, "0"),
            rotation_z=value_or_default(template, "Angle", parse_float, is_number, "0"),
            primary_color=value_or_default(template, "PrimaryColour", _parse_color, None, "&H0000FFFF"),
            secondary_color=value_or_default(template, "SecondaryColour", _parse_color, None, "&H00000000"),
            outline_color=value_or_default(template, "OutlineColour", _parse_color, None, "&H00000000"),
            shadow_color=value_or_default(template, "BackColour", _parse_color, None, "&H00000000"),
            outline_thickness=value_or_default(template, "Outline", parse_float, _non_negative, "1"),
            border_style=value_or_default(template, "BorderStyle", _parse_border_style, None, "1"),
            shadow_depth=value_or_default(template, "Shadow", parse_float, _non_negative, "1"),
            alignment=value_or_default(template, "Alignment", parse_int, lambda v: 1 <= v <= 9, "2"),
            margin_left=value_or_default(template, "MarginL", parse_float, is_number, "80"),
            margin_right=value_or_default(template, "MarginR", parse_float, is_number, "80"),
            margin_vertical=value_or_default(template, "MarginV", parse_float, is_number, "35"),
        )

    @classmethod
    def default(cls) -> "Style":
        parsed = parse_line_into_typed_template(DEFAULT_STYLE_LINE, DEFAULT_STYLES_FORMAT)
        if parsed is None:
            raise ValueError(f"Malformed default style line {DEFAULT_STYLE_LINE!r}")
        return cls.from_template(parsed.fields)


@dataclass
class Attachment:
    filename: str
    type: AttachmentType
    contents: str = ""
    """Base64 data, possibly without padding"""
    _font: TTFont | None = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self._font = None

    @property
    def url(self) -> str:
        media_type = "application/x-font-ttf" if self.type == AttachmentType.Font else "application/octet-stream"
        return f"data:{media_type};base64,{self.contents}"

    def decode(self) -> bytes:
        padding = "=" * (-len(self.contents) % 4)
        return base64.b64decode(self.contents + padding)

    def get_font(self) -> TTFont:
        if self.type != AttachmentType.Font:
            raise ValueError(f"Attachment {self.filename} is not a font")
        if self._font is not None:
            return self._font

        font = TTFont(BytesIO(self.decode()))
        self._font = font
        return font

    def font_names(self) -> set[str]:
        font = self.get_font()
        if "name" not in font:
            raise ValueError(f"Could not find name table in {self.filename}")

        names: set[str] = set()
        for record in font["name"].names:
            if record.nameID in FONT_NAME_IDS:
                names.add(record.toUnicode(errors="replace"))
        return names
