"""
SPDX-License-Identifier: Apache-2.0

JSON round-tripping of parsed scripts. Every object carries a ``_classTag`` that
is resolved against an explicit ``Registry`` on the way back.
"""

from __future__ import annotations

import dataclasses
import json
from enum import Enum
from functools import partial
from typing import Any

from subparse.dialogue import Dialogue
from subparse.drawing import CubicBezierCurveInstruction, LineInstruction, MoveInstruction
from subparse.models import Attachment, AttachmentType, BorderStyle, Format, ScriptProperties, Style, WrappingStyle
from subparse.parts import PART_TYPES, Color
from subparse.script import ASS

__all__ = ("Registry", "create_registry", "serialize", "deserialize")

CLASS_TAG_KEY = "_classTag"


class Registry:
    def __init__(self) -> None:
        self._tags: dict[type, int] = {}
        self._classes: dict[int, type] = {}

    def register(self, cls: type) -> int:
        existing = self._tags.get(cls)
        if existing is not None:
            return existing

        tag = len(self._classes)
        self._tags[cls] = tag
        self._classes[tag] = cls
        return tag

    def tag_of(self, cls: type) -> int:
        try:
            return self._tags[cls]
        except KeyError:
            raise TypeError(f"{cls.__name__} is not registered for serialization") from None

    def class_of(self, tag: int) -> type:
        try:
            return self._classes[tag]
        except KeyError:
            raise ValueError(f"Unknown class tag {tag}") from None

    def __contains__(self, cls: object) -> bool:
        return cls in self._tags


def create_registry() -> Registry:
    registry = Registry()
    for cls in (
        *PART_TYPES,
        Color,
        MoveInstruction,
        LineInstruction,
        CubicBezierCurveInstruction,
        WrappingStyle,
        BorderStyle,
        AttachmentType,
        Format,
        ScriptProperties,
        Style,
        Attachment,
        Dialogue,
        ASS,
    ):
        registry.register(cls)
    return registry


def _encode(value: Any, registry: Registry) -> Any:
    encode = partial(_encode, registry=registry)

    if value is None or isinstance(value, (bool, int, float, str)) and not isinstance(value, Enum):
        return value
    if isinstance(value, Enum):
        return {CLASS_TAG_KEY: registry.tag_of(type(value)), "value": value.value}
    if isinstance(value, (list, tuple)):
        return [encode(item) for item in value]
    if isinstance(value, dict):
        return {key: encode(item) for key, item in value.items()}

    tag = registry.tag_of(type(value))
    if hasattr(value, "to_json"):
        result = value.to_json(encode)
    elif dataclasses.is_dataclass(value):
        result = {
            f.name: encode(getattr(value, f.name)) for f in dataclasses.fields(value) if not f.name.startswith("_")
        }
    else:
        raise TypeError(f"Cannot serialize {type(value).__name__}")

    result[CLASS_TAG_KEY] = tag
    return result


def _decode(value: Any, registry: Registry) -> Any:
    decode = partial(_decode, registry=registry)

    if isinstance(value, list):
        return [decode(item) for item in value]
    if not isinstance(value, dict):
        return value
    if CLASS_TAG_KEY not in value:
        return {key: decode(item) for key, item in value.items()}

    cls = registry.class_of(value[CLASS_TAG_KEY])
    data = {key: item for key, item in value.items() if key != CLASS_TAG_KEY}

    if issubclass(cls, Enum):
        return cls(data["value"])
    if hasattr(cls, "from_json"):
        return cls.from_json(data, decode)
    return cls(**{key: decode(item) for key, item in data.items()})


def serialize(obj: Any, registry: Registry) -> str:
    return json.dumps(_encode(obj, registry))


def deserialize(text: str, registry: Registry) -> Any:
    return _decode(json.loads(text), registry)
