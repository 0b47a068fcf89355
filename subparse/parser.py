"""
SPDX-License-Identifier: Apache-2.0

Override tag grammar. Every rule is a method of ``_ParserRun`` that either returns
a value and advances the cursor, or returns ``None`` and leaves the cursor where
it found it. Only the public ``parse`` entry point raises.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import Any, NamedTuple

from subparse import settings
from subparse.drawing import INSTRUCTION_ARITY, Instruction, make_instruction
from subparse.parts import (
    Alignment,
    Alpha,
    Blur,
    Bold,
    Border,
    BorderX,
    BorderY,
    Color,
    ColorKaraoke,
    Comment,
    ComplexFade,
    DrawingBaselineOffset,
    DrawingInstructions,
    DrawingMode,
    Fade,
    FontName,
    FontScaleX,
    FontScaleY,
    FontSize,
    FontSizeMinus,
    FontSizePlus,
    GaussianBlur,
    Italic,
    LetterSpacing,
    Move,
    NewLine,
    OutlineAlpha,
    OutlineColor,
    OutlineKaraoke,
    Part,
    Position,
    PrimaryAlpha,
    PrimaryColor,
    RectangularClip,
    Reset,
    RotateX,
    RotateY,
    RotateZ,
    RotationOrigin,
    SecondaryAlpha,
    SecondaryColor,
    Shadow,
    ShadowAlpha,
    ShadowColor,
    ShadowX,
    ShadowY,
    SkewX,
    SkewY,
    StrikeThrough,
    SweepingColorKaraoke,
    Text,
    Transform,
    Underline,
    VectorClip,
    WrappingStyle,
)

__all__ = ("ParseError", "parse", "TAG_ORDER", "TRANSFORM_TAG_ORDER")

logger = logging.getLogger(__name__)

MAX_INT32 = 0xFFFFFFFF
HARD_SPACE = "\u00a0"

# Longer names first so that a tag is never shadowed by one of its prefixes.
TAG_ORDER: tuple[str, ...] = (
    "alpha", "iclip", "xbord", "ybord", "xshad", "yshad",
    "blur", "bord", "clip", "fade", "fscx", "fscy", "move", "shad",
    "fad", "fax", "fay", "frx", "fry", "frz", "fsp", "fs+", "fs-", "org", "pbo", "pos",
    "an", "be", "fn", "fr", "fs", "kf", "ko", "1a", "1c", "2a", "2c", "3a", "3c", "4a", "4c",
    "a", "b", "c", "i", "k", "K", "p", "q", "r", "s", "t", "u",
)

TRANSFORM_TAG_ORDER: tuple[str, ...] = (
    "alpha", "iclip", "xbord", "ybord", "xshad", "yshad",
    "blur", "bord", "clip", "fscx", "fscy", "shad",
    "fax", "fay", "frx", "fry", "frz", "fsp", "fs+", "fs-",
    "be", "fr", "fs", "1a", "1c", "2a", "2c", "3a", "3c", "4a", "4c",
    "c",
)

_HEX_DIGITS_RE = re.compile(r"[0-9a-fA-F]+")
_DECIMAL_DIGITS_RE = re.compile(r"[0-9]+")
_UNSIGNED_DECIMAL_RE = re.compile(r"[0-9]+(\.[0-9]*)?")

_LEGACY_ALIGNMENT = {"1": 1, "2": 2, "3": 3, "5": 7, "6": 8, "7": 9, "9": 4, "10": 5, "11": 6}


class ParseError(ValueError):
    pass


class _TagSpec(NamedTuple):
    part: Callable[[Any], Part]
    values: tuple[str, ...] = ("decimal",)
    """Value rules tried in order, the first one that matches wins"""
    required: bool = False
    convert: Callable[[Any], Any] | None = None


def _centiseconds(value: float) -> float:
    return value / 100


def _percentage(value: float) -> float:
    return value / 100


_TAG_SPECS: dict[str, _TagSpec] = {
    "alpha": _TagSpec(Alpha, ("alpha",)),
    "be": _TagSpec(Blur),
    "blur": _TagSpec(GaussianBlur),
    "bord": _TagSpec(Border),
    "xbord": _TagSpec(BorderX),
    "ybord": _TagSpec(BorderY),
    "shad": _TagSpec(Shadow),
    "xshad": _TagSpec(ShadowX),
    "yshad": _TagSpec(ShadowY),
    "fax": _TagSpec(SkewX),
    "fay": _TagSpec(SkewY),
    "fr": _TagSpec(RotateZ),
    "frx": _TagSpec(RotateX),
    "fry": _TagSpec(RotateY),
    "frz": _TagSpec(RotateZ),
    "fs": _TagSpec(FontSize),
    "fsp": _TagSpec(LetterSpacing),
    "fscx": _TagSpec(FontScaleX, convert=_percentage),
    "fscy": _TagSpec(FontScaleY, convert=_percentage),
    "fs+": _TagSpec(FontSizePlus, required=True),
    "fs-": _TagSpec(FontSizeMinus, required=True),
    "p": _TagSpec(DrawingMode, required=True),
    "pbo": _TagSpec(DrawingBaselineOffset, required=True),
    "k": _TagSpec(ColorKaraoke, required=True, convert=_centiseconds),
    "K": _TagSpec(SweepingColorKaraoke, required=True, convert=_centiseconds),
    "kf": _TagSpec(SweepingColorKaraoke, required=True, convert=_centiseconds),
    "ko": _TagSpec(OutlineKaraoke, required=True, convert=_centiseconds),
    "b": _TagSpec(Bold, ("bold_weight", "enable_disable")),
    "i": _TagSpec(Italic, ("enable_disable",)),
    "u": _TagSpec(Underline, ("enable_disable",)),
    "s": _TagSpec(StrikeThrough, ("enable_disable",)),
    "c": _TagSpec(PrimaryColor, ("color",)),
    "1c": _TagSpec(PrimaryColor, ("color",)),
    "2c": _TagSpec(SecondaryColor, ("color",)),
    "3c": _TagSpec(OutlineColor, ("color",)),
    "4c": _TagSpec(ShadowColor, ("color",)),
    "1a": _TagSpec(PrimaryAlpha, ("alpha",)),
    "2a": _TagSpec(SecondaryAlpha, ("alpha",)),
    "3a": _TagSpec(OutlineAlpha, ("alpha",)),
    "4a": _TagSpec(ShadowAlpha, ("alpha",)),
}


def _saturate_int32(value: int, negative: bool) -> int:
    if value >= MAX_INT32:
        return MAX_INT32
    return -value if negative else value


class _ParserRun:
    def __init__(self, text: str) -> None:
        self.text = text
        self.position = 0

    # --- cursor ---

    def have_more(self) -> bool:
        return self.position < len(self.text)

    def peek(self, count: int = 1) -> str:
        return self.text[self.position : self.position + count]

    def take(self, count: int = 1) -> str:
        value = self.peek(count)
        self.position += len(value)
        return value

    def read(self, literal: str) -> bool:
        if self.text.startswith(literal, self.position):
            self.position += len(literal)
            return True
        return False

    def _read_pattern(self, pattern: re.Pattern[str]) -> re.Match[str] | None:
        matching = pattern.match(self.text, self.position)
        if matching is not None:
            self.position = matching.end()
        return matching

    def _read_until_tag_end(self) -> str:
        start = self.position
        while self.have_more() and self.peek() not in ("\\", "}"):
            self.position += 1
        return self.text[start : self.position]

    # --- dialogue text ---

    def parse_dialogue_parts(self) -> list[Part]:
        parts: list[Part] = []

        while self.have_more():
            enclosed = self.parse_enclosed_tags()
            if enclosed is not None:
                parts.extend(enclosed)
                continue

            if self.read("\\N") or self.read("\\n"):
                part: Part = NewLine()
            elif self.read("\\h"):
                part = Text(HARD_SPACE)
            else:
                part = Text(self.take())

            if isinstance(part, Text) and parts and isinstance(parts[-1], Text):
                parts[-1] = Text(parts[-1].value + part.value)
            else:
                parts.append(part)

        in_drawing_mode = False
        for index, part in enumerate(parts):
            if isinstance(part, DrawingMode):
                in_drawing_mode = part.scale != 0
            elif isinstance(part, Text) and in_drawing_mode:
                parts[index] = DrawingInstructions(parse(part.value, "drawing_instructions"))

        return parts

    def parse_enclosed_tags(self) -> list[Part] | None:
        start = self.position
        if not self.read("{"):
            return None

        parts = self._parse_tag_sequence(TAG_ORDER, ("}",))
        if not self.read("}"):
            self.position = start
            return None
        return parts

    def _parse_tag_sequence(self, names: tuple[str, ...], terminators: tuple[str, ...]) -> list[Part]:
        parts: list[Part] = []

        while self.have_more() and self.peek() not in terminators:
            part: Part | None = None
            if self.read("\\"):
                part = self.parse_tag_of(names)
                if part is None:
                    self.position -= 1

            if part is None:
                part = Comment(self.take())

            if isinstance(part, Comment) and parts and isinstance(parts[-1], Comment):
                parts[-1] = Comment(parts[-1].value + part.value)
            else:
                parts.append(part)

        return parts

    def parse_tag_of(self, names: tuple[str, ...]) -> Part | None:
        for name in names:
            part = self.parse_tag(name)
            if part is not None:
                return part
        return None

    def parse_tag(self, name: str) -> Part | None:
        start = self.position
        if not self.read(name):
            return None

        spec = _TAG_SPECS.get(name)
        if spec is not None:
            part = self._parse_simple_tag(spec)
        else:
            part = getattr(self, f"_parse_tag_{name}")()

        if part is None:
            self.position = start
        return part

    def _parse_simple_tag(self, spec: _TagSpec) -> Part | None:
        for rule in spec.values:
            value = getattr(self, f"parse_{rule}")()
            if value is not None:
                if spec.convert is not None:
                    value = spec.convert(value)
                return spec.part(value)

        if spec.required:
            return None
        return spec.part(None)

    # --- hand-written tags, called with the tag name already consumed ---

    def _parse_tag_an(self) -> Alignment | None:
        next_char = self.peek()
        if next_char == "" or next_char not in "123456789":
            return None
        return Alignment(int(self.take()))

    def _parse_tag_a(self) -> Alignment | None:
        if self.peek(2) in ("10", "11"):
            return Alignment(_LEGACY_ALIGNMENT[self.take(2)])
        if self.peek() in _LEGACY_ALIGNMENT:
            return Alignment(_LEGACY_ALIGNMENT[self.take()])
        return None

    def _parse_tag_q(self) -> WrappingStyle | None:
        next_char = self.peek()
        if next_char == "" or next_char not in "0123":
            return None
        return WrappingStyle(int(self.take()))

    def _parse_tag_fn(self) -> FontName:
        return FontName(self._read_until_tag_end() or None)

    def _parse_tag_r(self) -> Reset:
        return Reset(self._read_until_tag_end() or None)

    def _parse_decimal_arguments(self, *counts: int) -> list[float] | None:
        """``(a,b,...)`` with exactly one of ``counts`` decimals, no spaces, no trailing comma."""
        start = self.position
        if not self.read("("):
            return None

        values: list[float] = []
        while True:
            value = self.parse_decimal()
            if value is None:
                self.position = start
                return None
            values.append(value)
            if not self.read(","):
                break

        if not self.read(")") or len(values) not in counts:
            self.position = start
            return None
        return values

    def _parse_tag_pos(self) -> Position | None:
        values = self._parse_decimal_arguments(2)
        if values is None:
            return None
        return Position(*values)

    def _parse_tag_org(self) -> RotationOrigin | None:
        values = self._parse_decimal_arguments(2)
        if values is None:
            return None
        return RotationOrigin(*values)

    def _parse_tag_move(self) -> Move | None:
        values = self._parse_decimal_arguments(4, 6)
        if values is None:
            return None
        if len(values) == 4:
            return Move(*values, None, None)
        x1, y1, x2, y2, t1, t2 = values
        return Move(x1, y1, x2, y2, t1 / 1000, t2 / 1000)

    def _parse_tag_fad(self) -> Fade | None:
        values = self._parse_decimal_arguments(2)
        if values is None:
            return None
        return Fade(values[0] / 1000, values[1] / 1000)

    def _parse_tag_fade(self) -> ComplexFade | None:
        values = self._parse_decimal_arguments(7)
        if values is None:
            return None
        alphas = [1 - value / 255 for value in values[:3]]
        times = [value / 1000 for value in values[3:]]
        return ComplexFade(*alphas, *times)

    def _parse_tag_t(self) -> Transform | None:
        if not self.read("("):
            return None

        start: float | None = None
        end: float | None = None
        accel: float | None = None

        first = self.parse_decimal()
        if first is not None:
            if not self.read(","):
                return None

            second = self.parse_decimal()
            if second is not None:
                start, end = first / 1000, second / 1000
                if not self.read(","):
                    return None

                third = self.parse_decimal()
                if third is not None:
                    accel = third
                    if not self.read(","):
                        return None
            else:
                accel = first
                if not self.read(","):
                    return None

        tags = self._parse_tag_sequence(TRANSFORM_TAG_ORDER, (")", "}"))
        self.read(")")
        return Transform(start, end, accel, tags)

    def _parse_clip(self, inside: bool) -> RectangularClip | VectorClip | None:
        if not self.read("("):
            return None

        scale: float | None = None
        first = self.parse_decimal()
        if first is not None:
            if not self.read(","):
                return None

            second = self.parse_decimal()
            if second is None:
                scale = first
            else:
                rest = self._parse_rest_of_rectangle()
                if rest is None:
                    return None
                if not self.read(")"):
                    return None
                return RectangularClip(first, second, *rest, inside=inside)

        commands_start = self.position
        while self.have_more() and self.peek() not in (")", "}"):
            self.position += 1
        commands = self.text[commands_start : self.position]

        if not self.read(")"):
            return None

        instructions = parse(commands, "drawing_instructions")
        return VectorClip(scale if scale is not None else 1, instructions, inside)

    def _parse_rest_of_rectangle(self) -> tuple[float, float] | None:
        if not self.read(","):
            return None
        x2 = self.parse_decimal()
        if x2 is None or not self.read(","):
            return None
        y2 = self.parse_decimal()
        if y2 is None:
            return None
        return x2, y2

    def _parse_tag_clip(self) -> RectangularClip | VectorClip | None:
        return self._parse_clip(inside=True)

    def _parse_tag_iclip(self) -> RectangularClip | VectorClip | None:
        return self._parse_clip(inside=False)

    # --- drawings ---

    def parse_drawing_instructions(self) -> list[Instruction]:
        instructions: list[Instruction] = []
        kind: str | None = None
        values: list[float] = []

        while self.have_more():
            while self.read(" "):
                pass
            if not self.have_more():
                break

            if kind is not None:
                value = self.parse_decimal()
                if value is not None:
                    values.append(value)
                    if len(values) == INSTRUCTION_ARITY[kind]:
                        instructions.append(make_instruction(kind, values))
                        values = []
                    continue

            char = self.take()
            if char in INSTRUCTION_ARITY:
                kind = char
                values = []

        return instructions

    # --- values ---

    def parse_decimal(self) -> float | None:
        start = self.position
        negative = self.read("-")

        matching = self._read_pattern(_UNSIGNED_DECIMAL_RE)
        if matching is None or matching.group(1) == ".":
            self.position = start
            return None

        value = float(matching.group())
        return -value if negative else value

    def parse_enable_disable(self) -> bool | None:
        next_char = self.peek()
        if next_char in ("0", "1"):
            self.position += 1
            return next_char == "1"
        return None

    def parse_bold_weight(self) -> int | None:
        weight = self.peek(3)
        if len(weight) == 3 and weight[0] in "123456789" and weight[1:] == "00":
            self.position += 3
            return int(weight)
        return None

    def parse_hex_int32(self) -> int | None:
        start = self.position
        negative = self.read("-")

        matching = self._read_pattern(_HEX_DIGITS_RE)
        if matching is None:
            self.position = start
            return None
        return _saturate_int32(int(matching.group(), 16), negative)

    def parse_decimal_int32(self) -> int | None:
        start = self.position
        negative = self.read("-")

        matching = self._read_pattern(_DECIMAL_DIGITS_RE)
        if matching is None:
            self.position = start
            return None
        return _saturate_int32(int(matching.group()), negative)

    def _skip_color_framing(self) -> None:
        while self.read("&") or self.read("H"):
            pass

    def parse_color(self) -> Color | None:
        start = self.position
        self._skip_color_framing()

        value = self.parse_hex_int32()
        if value is None:
            self.position = start
            return None

        self._skip_color_framing()
        return Color(value & 0xFF, (value >> 8) & 0xFF, (value >> 16) & 0xFF)

    def parse_alpha(self) -> float | None:
        start = self.position
        self._skip_color_framing()

        value = self.parse_hex_int32()
        if value is None:
            self.position = start
            return None

        self._skip_color_framing()
        return 1 - (value & 0xFF) / 0xFF

    def parse_color_with_alpha(self) -> Color | None:
        start = self.position
        if self.read("&H") or self.read("&h"):
            value = self.parse_hex_int32()
        else:
            value = self.parse_decimal_int32()

        if value is None:
            self.position = start
            return None

        self.read("&")
        return Color(
            value & 0xFF,
            (value >> 8) & 0xFF,
            (value >> 16) & 0xFF,
            1 - ((value >> 24) & 0xFF) / 0xFF,
        )


def _tag_rule(name: str) -> Callable[[_ParserRun], Part | None]:
    def rule(run: _ParserRun) -> Part | None:
        return run.parse_tag(name)

    return rule


def _tag_rule_name(name: str) -> str:
    return "tag_" + name.replace("+", "plus").replace("-", "minus")


_RULES: dict[str, Callable[[_ParserRun], Any]] = {
    "dialogue_parts": _ParserRun.parse_dialogue_parts,
    "enclosed_tags": _ParserRun.parse_enclosed_tags,
    "drawing_instructions": _ParserRun.parse_drawing_instructions,
    "decimal": _ParserRun.parse_decimal,
    "color": _ParserRun.parse_color,
    "alpha": _ParserRun.parse_alpha,
    "color_with_alpha": _ParserRun.parse_color_with_alpha,
    **{_tag_rule_name(name): _tag_rule(name) for name in TAG_ORDER},
}


def parse(text: str, rule: str) -> Any:
    """
    Parse the whole of ``text`` with the named rule.

    :param text: The input, for example a dialogue's raw text
    :param rule: One of ``dialogue_parts``, ``enclosed_tags``, ``drawing_instructions``,
        ``decimal``, ``color``, ``alpha``, ``color_with_alpha`` or ``tag_<name>``
    :raises ParseError: if the rule does not match the entire input
    """
    rule_function = _RULES.get(rule)
    if rule_function is None:
        raise ValueError(f"Could not find parser rule named {rule}")

    run = _ParserRun(text)
    result = rule_function(run)
    if result is None or run.have_more():
        if settings.debug_mode:
            logger.error("Parse failed. %s %r %r", rule, text, result)
        raise ParseError(f"Parse failed. Rule {rule} does not match {text!r}")

    return result
