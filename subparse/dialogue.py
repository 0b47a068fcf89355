"""
SPDX-License-Identifier: Apache-2.0
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Mapping
from dataclasses import replace
from functools import cached_property
from typing import TYPE_CHECKING, Any, NamedTuple

from subparse import settings
from subparse.models import Style
from subparse.parser import parse
from subparse.parts import Comment, Move, Part, Transform
from subparse.parts import Alignment as AlignmentTag
from subparse.template import TemplateFields, parse_int, to_time, value_or_default

if TYPE_CHECKING:
    from subparse.script import ASS

__all__ = ("Dialogue",)

logger = logging.getLogger(__name__)

_dialogue_ids = itertools.count()


class _ParsedText(NamedTuple):
    parts: list[Part]
    alignment: int
    contains_transform_tag: bool


def _resolve_style(style_name: str | None, ass: ASS) -> Style:
    if style_name is not None:
        style_name = style_name.lstrip("*")
        if style_name.lower() == "default":
            style_name = "Default"

        style = ass.styles.get(style_name)
        if style is not None:
            return style

    if settings.debug_mode:
        logger.warning('Unrecognized style %s. Falling back to "Default"', style_name)

    style = ass.styles.get("Default")
    if style is None:
        style = Style.default()
        ass.styles[style.name] = style
    return style


class Dialogue:
    """
    One ``Dialogue:`` event.

    The override tags of the text are only parsed the first time ``parts``,
    ``alignment`` or ``contains_transform_tag`` is read.
    """

    def __init__(self, template: Mapping[str, str], ass: ASS) -> None:
        if not isinstance(template, TemplateFields):
            template = TemplateFields(template)

        self.id: int = next(_dialogue_ids)

        style_name = template.get("Style")
        self.style = _resolve_style(style_name if isinstance(style_name, str) else None, ass)

        start = template.get("Start")
        if not isinstance(start, str):
            raise ValueError(f"Dialogue start time {start} is not a string.")
        self.start: float = to_time(start)

        end = template.get("End")
        if not isinstance(end, str):
            raise ValueError(f"Dialogue end time {end} is not a string.")
        self.end: float = to_time(end)

        self.layer: int = max(value_or_default(template, "Layer", parse_int, None, "0"), 0)

        text = template.get("Text")
        if not isinstance(text, str):
            raise ValueError(f"Dialogue text {text} is not a string.")
        self.raw_text: str = text

    @property
    def parts(self) -> list[Part]:
        return self._parsed.parts

    @property
    def alignment(self) -> int:
        return self._parsed.alignment

    @property
    def contains_transform_tag(self) -> bool:
        return self._parsed.contains_transform_tag

    @property
    def duration(self) -> float:
        return self.end - self.start

    @cached_property
    def _parsed(self) -> _ParsedText:
        parts: list[Part] = parse(self.raw_text, "dialogue_parts")
        alignment = self.style.alignment
        contains_transform_tag = False

        for index, part in enumerate(parts):
            if isinstance(part, AlignmentTag):
                alignment = part.value
            elif isinstance(part, Move):
                if part.t1 is None or part.t2 is None:
                    parts[index] = replace(part, t1=0, t2=self.duration)
            elif isinstance(part, Transform):
                if part.start is None or part.end is None or part.accel is None:
                    parts[index] = replace(
                        part,
                        start=0 if part.start is None else part.start,
                        end=self.duration if part.end is None else part.end,
                        accel=1 if part.accel is None else part.accel,
                    )
                contains_transform_tag = True

        if settings.debug_mode:
            suspects = [part for part in parts if isinstance(part, Comment) and "\\" in part.value]
            if suspects:
                logger.warning(
                    "Possible incorrect parse:\n%s\nwas parsed as\n%s\nThe possibly incorrect parses are:\n%s",
                    self.raw_text,
                    self._describe(parts),
                    "\n".join(map(str, suspects)),
                )

        return _ParsedText(parts, alignment, contains_transform_tag)

    def _describe(self, parts: list[Part] | None) -> str:
        body = ", ".join(map(str, parts)) if parts is not None else self.raw_text
        return f"#{self.id} [{self.start:.3f}-{self.end:.3f}] {body}"

    def __str__(self) -> str:
        parsed = self.__dict__.get("_parsed")
        return self._describe(parsed.parts if parsed is not None else None)

    def __repr__(self) -> str:
        return f"<Dialogue {self}>"

    def to_json(self, encode: Callable[[Any], Any]) -> dict[str, Any]:
        return {
            "id": self.id,
            "style": self.style.name,
            "start": self.start,
            "end": self.end,
            "layer": self.layer,
            "raw_text": self.raw_text,
        }

    @classmethod
    def from_json(
        cls,
        data: Mapping[str, Any],
        decode: Callable[[Any], Any],
        styles: Mapping[str, Style] | None = None,
    ) -> "Dialogue":
        """Rebuild a dialogue, linking it to ``styles`` by name when they are given."""
        dialogue = cls.__new__(cls)
        dialogue.id = data["id"]
        style = (styles or {}).get(data["style"])
        dialogue.style = style if style is not None else Style.default()
        dialogue.start = data["start"]
        dialogue.end = data["end"]
        dialogue.layer = data["layer"]
        dialogue.raw_text = data["raw_text"]
        return dialogue
