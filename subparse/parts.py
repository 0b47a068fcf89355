"""
SPDX-License-Identifier: Apache-2.0

Typed pieces of a dialogue's text. Every tag field may be ``None``, which means
the value was left unspecified and the style's value applies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias, Union, get_args

from subparse.drawing import Instruction


@dataclass(frozen=True)
class Color:
    red: int
    green: int
    blue: int
    alpha: float = 1.0
    """0 is fully transparent, 1 is fully opaque"""

    def with_alpha(self, value: float | None) -> "Color":
        if value is None:
            return self
        return Color(self.red, self.green, self.blue, value)

    def interpolate(self, final: "Color", progression: float) -> "Color":
        return Color(
            round(self.red + progression * (final.red - self.red)),
            round(self.green + progression * (final.green - self.green)),
            round(self.blue + progression * (final.blue - self.blue)),
            self.alpha + progression * (final.alpha - self.alpha),
        )

    def __str__(self) -> str:
        return f"rgba({self.red}, {self.green}, {self.blue}, {self.alpha:.3f})"


# --- structural ---


@dataclass(frozen=True)
class Comment:
    """Text inside a ``{}`` block that is not understood as a tag."""

    value: str


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class NewLine:
    pass


# --- glyph styling ---


@dataclass(frozen=True)
class Italic:
    value: bool | None


@dataclass(frozen=True)
class Bold:
    value: bool | int | None
    """Either an on/off flag or a font weight between 100 and 900"""


@dataclass(frozen=True)
class Underline:
    value: bool | None


@dataclass(frozen=True)
class StrikeThrough:
    value: bool | None


@dataclass(frozen=True)
class Border:
    value: float | None


@dataclass(frozen=True)
class BorderX:
    value: float | None


@dataclass(frozen=True)
class BorderY:
    value: float | None


@dataclass(frozen=True)
class Shadow:
    value: float | None


@dataclass(frozen=True)
class ShadowX:
    value: float | None


@dataclass(frozen=True)
class ShadowY:
    value: float | None


@dataclass(frozen=True)
class Blur:
    """Edge blur, ``\\be``"""

    value: float | None


@dataclass(frozen=True)
class GaussianBlur:
    value: float | None


@dataclass(frozen=True)
class FontName:
    value: str | None


@dataclass(frozen=True)
class FontSize:
    value: float | None


@dataclass(frozen=True)
class FontSizePlus:
    value: float


@dataclass(frozen=True)
class FontSizeMinus:
    value: float


@dataclass(frozen=True)
class FontScaleX:
    value: float | None
    """1 is unscaled"""


@dataclass(frozen=True)
class FontScaleY:
    value: float | None
    """1 is unscaled"""


@dataclass(frozen=True)
class LetterSpacing:
    value: float | None


@dataclass(frozen=True)
class RotateX:
    value: float | None


@dataclass(frozen=True)
class RotateY:
    value: float | None


@dataclass(frozen=True)
class RotateZ:
    value: float | None


@dataclass(frozen=True)
class SkewX:
    value: float | None


@dataclass(frozen=True)
class SkewY:
    value: float | None


# --- colors and alphas ---


@dataclass(frozen=True)
class PrimaryColor:
    value: Color | None


@dataclass(frozen=True)
class SecondaryColor:
    value: Color | None


@dataclass(frozen=True)
class OutlineColor:
    value: Color | None


@dataclass(frozen=True)
class ShadowColor:
    value: Color | None


@dataclass(frozen=True)
class Alpha:
    value: float | None


@dataclass(frozen=True)
class PrimaryAlpha:
    value: float | None


@dataclass(frozen=True)
class SecondaryAlpha:
    value: float | None


@dataclass(frozen=True)
class OutlineAlpha:
    value: float | None


@dataclass(frozen=True)
class ShadowAlpha:
    value: float | None


# --- layout ---


@dataclass(frozen=True)
class Alignment:
    value: int
    """Numpad layout, 1 to 9"""


@dataclass(frozen=True)
class Reset:
    value: str | None
    """Name of the style to reset to, or ``None`` for the dialogue's own style"""


@dataclass(frozen=True)
class Position:
    x: float
    y: float


@dataclass(frozen=True)
class Move:
    x1: float
    y1: float
    x2: float
    y2: float
    t1: float | None
    """Seconds from the dialogue's start"""
    t2: float | None


@dataclass(frozen=True)
class RotationOrigin:
    x: float
    y: float


# --- timing ---


@dataclass(frozen=True)
class Fade:
    start: float
    """Fade-in duration in seconds"""
    end: float
    """Fade-out duration in seconds"""


@dataclass(frozen=True)
class ComplexFade:
    a1: float
    a2: float
    a3: float
    t1: float
    t2: float
    t3: float
    t4: float


@dataclass(frozen=True)
class ColorKaraoke:
    duration: float


@dataclass(frozen=True)
class SweepingColorKaraoke:
    duration: float


@dataclass(frozen=True)
class OutlineKaraoke:
    duration: float


@dataclass(frozen=True)
class WrappingStyle:
    value: int


@dataclass(frozen=True)
class Transform:
    start: float | None
    end: float | None
    accel: float | None
    tags: list[Part] = field(default_factory=list)


# --- clipping and drawing ---


@dataclass(frozen=True)
class RectangularClip:
    x1: float
    y1: float
    x2: float
    y2: float
    inside: bool
    """``False`` for ``\\iclip``"""


@dataclass(frozen=True)
class VectorClip:
    scale: float
    instructions: list[Instruction]
    inside: bool


@dataclass(frozen=True)
class DrawingMode:
    scale: float


@dataclass(frozen=True)
class DrawingBaselineOffset:
    value: float


@dataclass(frozen=True)
class DrawingInstructions:
    instructions: list[Instruction]


Part: TypeAlias = Union[
    Comment,
    Text,
    NewLine,
    Italic,
    Bold,
    Underline,
    StrikeThrough,
    Border,
    BorderX,
    BorderY,
    Shadow,
    ShadowX,
    ShadowY,
    Blur,
    GaussianBlur,
    FontName,
    FontSize,
    FontSizePlus,
    FontSizeMinus,
    FontScaleX,
    FontScaleY,
    LetterSpacing,
    RotateX,
    RotateY,
    RotateZ,
    SkewX,
    SkewY,
    PrimaryColor,
    SecondaryColor,
    OutlineColor,
    ShadowColor,
    Alpha,
    PrimaryAlpha,
    SecondaryAlpha,
    OutlineAlpha,
    ShadowAlpha,
    Alignment,
    Reset,
    Position,
    Move,
    RotationOrigin,
    Fade,
    ComplexFade,
    ColorKaraoke,
    SweepingColorKaraoke,
    OutlineKaraoke,
    WrappingStyle,
    Transform,
    RectangularClip,
    VectorClip,
    DrawingMode,
    DrawingBaselineOffset,
    DrawingInstructions,
]

PART_TYPES: tuple[type, ...] = get_args(Part)
