"""
SPDX-License-Identifier: Apache-2.0

Line-by-line readers that fill an ``ASS`` from ASS/SSA or SRT input.
"""

from __future__ import annotations

import logging
import re
from enum import Enum, auto
from typing import TYPE_CHECKING

from subparse import settings
from subparse.dialogue import Dialogue
from subparse.models import Attachment, AttachmentType, Style, WrappingStyle
from subparse.streams import Stream
from subparse.template import parse_format_specifier, parse_line_into_property

if TYPE_CHECKING:
    from subparse.script import ASS

__all__ = ("StreamParser", "SrtStreamParser", "uuencoded_to_base64")

logger = logging.getLogger(__name__)

BOM = "\ufeff"

_SRT_INDEX_RE = re.compile(r"^\d+$")
_SRT_TIMING_RE = re.compile(r"^(\d+:\d\d:\d\d[,.]\d\d\d) --> (\d+:\d\d:\d\d[,.]\d\d\d)")
_SRT_FONT_COLOR_RE = re.compile(r'<font color="#([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})">')
_SRT_SIMPLE_TAGS = {
    "<b>": "{\\b1}",
    "{b}": "{\\b1}",
    "</b>": "{\\b0}",
    "{/b}": "{\\b0}",
    "<i>": "{\\i1}",
    "{i}": "{\\i1}",
    "</i>": "{\\i0}",
    "{/i}": "{\\i0}",
    "<u>": "{\\u1}",
    "{u}": "{\\u1}",
    "</u>": "{\\u0}",
    "{/u}": "{\\u0}",
}


class Section(Enum):
    ScriptInfo = auto()
    Styles = auto()
    Events = auto()
    Fonts = auto()
    Graphics = auto()
    Other = auto()
    EOF = auto()


_SECTIONS = {
    "[Script Info]": Section.ScriptInfo,
    "[V4+ Styles]": Section.Styles,
    "[V4 Styles]": Section.Styles,
    "[Events]": Section.Events,
    "[Fonts]": Section.Fonts,
    "[Graphics]": Section.Graphics,
}


def uuencoded_to_base64(line: str) -> str:
    """Map the character set of embedded ``[Fonts]``/``[Graphics]`` data to base64."""
    result = []
    for index, char in enumerate(line):
        code = ord(char) - 33
        if code < 0 or code > 63:
            raise ValueError(f"Out-of-range character code {code} at index {index} in string {line}")

        if code < 26:
            result.append(chr(ord("A") + code))
        elif code < 52:
            result.append(chr(ord("a") + code - 26))
        elif code < 62:
            result.append(chr(ord("0") + code - 52))
        elif code == 62:
            result.append("+")
        else:
            result.append("/")
    return "".join(result)


def _strip_line(line: str, swallow_bom: bool) -> str:
    if line.endswith("\r"):
        line = line[:-1]
    if swallow_bom and line.startswith(BOM):
        line = line[1:]
    return line


class StreamParser:
    def __init__(self, stream: Stream, ass: ASS) -> None:
        self._stream = stream
        self._ass = ass
        self._section = Section.ScriptInfo
        self._attachment: Attachment | None = None

    def parse(self) -> ASS:
        """
        Read the whole stream into the script.

        :raises ValueError: if the script never declared its ``PlayResX``/``PlayResY``
        """
        swallow_bom = True
        while (line := self._stream.next_line()) is not None:
            line = _strip_line(line, swallow_bom)
            swallow_bom = False
            self._on_line(line)

        self._enter(Section.EOF)

        properties = self._ass.properties
        if properties.resolution_x is None or properties.resolution_y is None:
            raise ValueError("Malformed ASS script.")
        return self._ass

    def _enter(self, section: Section) -> None:
        if self._attachment is not None:
            self._ass.add_attachment(self._attachment)
            self._attachment = None
        self._section = section

    def _on_line(self, line: str) -> None:
        if line == "":
            return
        if line.startswith(";") and self._attachment is None:
            return

        if line in _SECTIONS:
            self._enter(_SECTIONS[line])
            return

        if self._attachment is None and line.startswith("[") and line.endswith("]"):
            self._enter(Section.Other)
            return

        match self._section:
            case Section.ScriptInfo:
                self._on_script_info(line)
            case Section.Styles | Section.Events:
                self._on_template_line(line)
            case Section.Fonts | Section.Graphics:
                self._on_attachment_line(line)
            case Section.Other:
                pass
            case _:
                raise ValueError(f"Unhandled state {self._section}")

    def _on_script_info(self, line: str) -> None:
        prop = parse_line_into_property(line)
        if prop is None:
            return

        try:
            self._ass.properties.apply(prop.name, prop.value)
        except ValueError as e:
            if settings.debug_mode:
                logger.error("Could not parse script property from line %s - %s", line, e)

    def _on_template_line(self, line: str) -> None:
        is_styles = self._section == Section.Styles
        specifier = self._ass.styles_format_specifier if is_styles else self._ass.dialogues_format_specifier

        if specifier is None:
            prop = parse_line_into_property(line)
            if prop is not None and prop.name == "Format":
                if is_styles:
                    self._ass.styles_format_specifier = parse_format_specifier(prop.value)
                else:
                    self._ass.dialogues_format_specifier = parse_format_specifier(prop.value)
            return

        try:
            if is_styles:
                self._ass.add_style(line)
            else:
                self._ass.add_event(line)
        except ValueError as e:
            if settings.debug_mode:
                kind = "style" if is_styles else "event"
                logger.error("Could not parse %s from line %s - %s", kind, line, e)

    def _on_attachment_line(self, line: str) -> None:
        is_fonts = self._section == Section.Fonts
        prefix = "fontname:" if is_fonts else "filename:"

        if line.startswith(prefix) and line[len(prefix) :].strip():
            if self._attachment is not None:
                self._ass.add_attachment(self._attachment)
            self._attachment = Attachment(
                line[len(prefix) :].strip(),
                AttachmentType.Font if is_fonts else AttachmentType.Graphic,
            )
            return

        if self._attachment is None:
            return

        try:
            self._attachment.contents += uuencoded_to_base64(line)
        except ValueError as e:
            if settings.debug_mode:
                logger.error("Encountered error while reading font %s: %s", self._attachment.filename, e)
            self._attachment = None


def _convert_srt_markup(line: str) -> str:
    for tag, replacement in _SRT_SIMPLE_TAGS.items():
        line = line.replace(tag, replacement)
    line = _SRT_FONT_COLOR_RE.sub(lambda m: f"{{\\c&H{m.group(3)}{m.group(2)}{m.group(1)}&}}", line)
    return line.replace("</font>", "{\\c}")


class SrtStreamParser:
    def __init__(self, stream: Stream, ass: ASS) -> None:
        self._stream = stream
        self._ass = ass

        self._number: str | None = None
        self._start: str | None = None
        self._end: str | None = None
        self._text: str | None = None

        ass.properties.resolution_x = 1280
        ass.properties.resolution_y = 720
        ass.properties.wrapping_style = WrappingStyle.EndOfLine
        ass.properties.scale_border_and_shadow = True

        style = Style.from_template({"Name": "Default", "Fontsize": "36"})
        ass.styles[style.name] = style

    def parse(self) -> ASS:
        swallow_bom = True
        while (line := self._stream.next_line()) is not None:
            line = _strip_line(line, swallow_bom)
            swallow_bom = False
            self._on_line(line)

        self._flush()
        return self._ass

    def _flush(self) -> None:
        if self._number is not None and self._start is not None and self._end is not None and self._text is not None:
            dialogue = Dialogue(
                {"Style": "Default", "Start": self._start, "End": self._end, "Text": self._text},
                self._ass,
            )
            self._ass.dialogues.append(dialogue)

        self._number = self._start = self._end = self._text = None

    def _on_line(self, line: str) -> None:
        if line == "":
            self._flush()
            return

        if self._number is None:
            if _SRT_INDEX_RE.match(line):
                self._number = line
        elif self._start is None and self._end is None:
            if matching := _SRT_TIMING_RE.match(line):
                self._start = matching.group(1).replace(",", ".")
                self._end = matching.group(2).replace(",", ".")
        else:
            line = _convert_srt_markup(line)
            self._text = line if self._text is None else self._text + "\\N" + line
