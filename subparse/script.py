"""
SPDX-License-Identifier: Apache-2.0
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Any

from subparse import settings
from subparse.dialogue import Dialogue
from subparse.models import Attachment, Format, ScriptProperties, Style
from subparse.stream_parsers import SrtStreamParser, StreamParser
from subparse.streams import Stream, StringStream, TextStream
from subparse.template import parse_line_into_typed_template

__all__ = ("ASS",)

logger = logging.getLogger(__name__)


def _default_styles() -> dict[str, Style]:
    style = Style.default()
    return {style.name: style}


def _as_format(value: Format | str) -> Format:
    try:
        return Format(value.lower())
    except (AttributeError, ValueError):
        raise ValueError(f"Illegal value of type {value!r}") from None


@dataclass
class ASS:
    """A subtitle script: its properties, styles, dialogues and embedded attachments."""

    properties: ScriptProperties = field(default_factory=ScriptProperties)
    styles: dict[str, Style] = field(default_factory=_default_styles)
    dialogues: list[Dialogue] = field(default_factory=list)
    attachments: list[Attachment] = field(default_factory=list)
    styles_format_specifier: list[str] | None = None
    dialogues_format_specifier: list[str] | None = None

    def add_style(self, line: str) -> Style | None:
        """
        Add a style from a ``Style:`` line of the styles section.

        Lines that are not ``Style:`` lines are skipped and return ``None``.

        :raises ValueError: if no ``Format:`` line was seen yet, or the style is invalid
        """
        if self.styles_format_specifier is None:
            raise ValueError("stylesFormatSpecifier is not set.")

        template = parse_line_into_typed_template(line, self.styles_format_specifier)
        if template is None or template.kind != "Style":
            return None

        style = Style.from_template(template.fields)
        if settings.verbose_mode:
            logger.debug("Read style %s from %r", style.name, line)

        self.styles[style.name] = style
        return style

    def add_event(self, line: str) -> Dialogue | None:
        """
        Add a dialogue from a ``Dialogue:`` line of the events section.

        ``Comment:`` lines and anything else are skipped and return ``None``.

        :raises ValueError: if no ``Format:`` line was seen yet, or the dialogue is invalid
        """
        if self.dialogues_format_specifier is None:
            raise ValueError("dialoguesFormatSpecifier is not set.")

        template = parse_line_into_typed_template(line, self.dialogues_format_specifier)
        if template is None or template.kind != "Dialogue":
            return None

        dialogue = Dialogue(template.fields, self)
        if settings.verbose_mode:
            logger.debug("Read dialogue %s from %r", dialogue.id, line)

        self.dialogues.append(dialogue)
        return dialogue

    def add_attachment(self, attachment: Attachment) -> None:
        self.attachments.append(attachment)

    @classmethod
    def from_string(cls, raw: str, type: Format | str = Format.ASS) -> "ASS":
        return cls.from_stream(StringStream(raw), type)

    @classmethod
    def from_stream(cls, stream: Stream, type: Format | str = Format.ASS) -> "ASS":
        ass = cls()
        match _as_format(type):
            case Format.ASS:
                return StreamParser(stream, ass).parse()
            case Format.SRT:
                return SrtStreamParser(stream, ass).parse()

    @classmethod
    def from_file(
        cls,
        path: str | PathLike[str],
        type: Format | str | None = None,
        encoding: str = "utf-8-sig",
    ) -> "ASS":
        """
        Read a script from disk.

        :param type: ``ass`` or ``srt``, guessed from the file suffix when omitted
        """
        path = Path(path)
        if type is None:
            type = Format.SRT if path.suffix.lower() == ".srt" else Format.ASS

        with path.open("r", encoding=encoding) as file:
            return cls.from_stream(TextStream(file), type)

    def to_json(self, encode: Callable[[Any], Any]) -> dict[str, Any]:
        return {
            "properties": encode(self.properties),
            "styles": encode(self.styles),
            "dialogues": encode(self.dialogues),
            "attachments": encode(self.attachments),
            "styles_format_specifier": self.styles_format_specifier,
            "dialogues_format_specifier": self.dialogues_format_specifier,
        }

    @classmethod
    def from_json(cls, data: Mapping[str, Any], decode: Callable[[Any], Any]) -> "ASS":
        ass = cls(
            properties=decode(data["properties"]),
            styles=decode(data["styles"]),
            attachments=decode(data["attachments"]),
            styles_format_specifier=data["styles_format_specifier"],
            dialogues_format_specifier=data["dialogues_format_specifier"],
        )
        ass.dialogues = [Dialogue.from_json(item, decode, ass.styles) for item in data["dialogues"]]
        return ass
