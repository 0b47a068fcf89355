"""
SPDX-License-Identifier: Apache-2.0

Splitting of ``Name: value`` lines and of tabular ``Style:`` / ``Dialogue:``
lines according to a section's ``Format:`` header.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")

TEMPLATE_KINDS = frozenset({"Style", "Dialogue", "Comment"})

_FLOAT_PREFIX_RE = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_INT_PREFIX_RE = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class Property:
    name: str
    value: str


class TemplateFields(Mapping[str, str]):
    """Field values of one line, in ``Format:`` order, looked up case-insensitively."""

    def __init__(self, items: Iterable[tuple[str, str]] | Mapping[str, str] = ()) -> None:
        if isinstance(items, Mapping):
            items = items.items()
        self._names: dict[str, str] = {}
        self._values: dict[str, str] = {}
        for name, value in items:
            key = name.lower()
            self._names.setdefault(key, name)
            self._values[key] = value

    def __getitem__(self, key: str) -> str:
        return self._values[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._names.values())

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"TemplateFields({dict(self.items())!r})"


@dataclass(frozen=True)
class TypedTemplate:
    kind: str
    """``Style``, ``Dialogue`` or ``Comment``"""
    fields: TemplateFields


def parse_line_into_property(line: str) -> Property | None:
    name, colon, value = line.partition(":")
    if not colon:
        return None
    return Property(name=name, value=value.lstrip())


def parse_format_specifier(value: str) -> list[str]:
    return [name.strip() for name in value.split(",")]


def parse_line_into_typed_template(line: str, format_specifier: list[str]) -> TypedTemplate | None:
    """
    Split a tabular line into its fields.

    The last field of the format swallows the rest of the line, commas included,
    since that is where a dialogue's free text lives. Returns ``None`` when the line
    is not a Style/Dialogue/Comment line or has fewer values than the format declares.
    """
    prop = parse_line_into_property(line)
    if prop is None or prop.name not in TEMPLATE_KINDS or not format_specifier:
        return None

    count = len(format_specifier)
    values = prop.value.split(",", count - 1)
    if len(values) < count:
        return None

    stripped = [value.strip() for value in values[:-1]]
    stripped.append(values[-1])
    return TypedTemplate(kind=prop.name, fields=TemplateFields(zip(format_specifier, stripped)))


def parse_float(value: str) -> float:
    """Read the leading number of ``value`` the way lenient script readers do, ``nan`` if none."""
    if matching := _FLOAT_PREFIX_RE.match(value):
        return float(matching.group(1))
    return math.nan


def parse_int(value: str) -> int:
    if matching := _INT_PREFIX_RE.match(value):
        return int(matching.group(1))
    raise ValueError(f"{value!r} is not an integer")


def is_number(value: float) -> bool:
    return not math.isnan(value)


def value_or_default(
    template: Mapping[str, str],
    key: str,
    converter: Callable[[str], T],
    validator: Callable[[T], bool] | None,
    default: str,
) -> T:
    """
    Convert ``template[key]``, or ``default`` when the key is absent.

    A present value that cannot be converted, or whose converted value the validator
    rejects, is an error naming the property.
    """
    value = template.get(key)
    if value is None:
        return converter(default)

    try:
        result = converter(value)
    except ValueError as e:
        raise ValueError(f"Property {key} has invalid value {value} - {e}") from e

    if validator is not None and not validator(result):
        raise ValueError(f"Property {key} has invalid value {value}")

    return result


def to_time(value: str) -> float:
    """``h:mm:ss.cc`` to seconds; every colon-separated field shifts the previous ones by 60."""
    seconds = 0.0
    for part in value.split(":"):
        seconds = seconds * 60 + parse_float(part)
    return seconds
