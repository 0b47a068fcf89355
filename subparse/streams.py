"""
SPDX-License-Identifier: Apache-2.0

Line sources consumed by the stream parsers.
"""

from __future__ import annotations

from typing import Protocol, TextIO

__all__ = ("Stream", "StringStream", "TextStream")


class Stream(Protocol):
    def next_line(self) -> str | None:
        """The next line without its line terminator, ``None`` once the input is exhausted."""
        ...


class StringStream:
    def __init__(self, text: str) -> None:
        self._lines = text.split("\n")
        self._index = 0

    def next_line(self) -> str | None:
        if self._index >= len(self._lines):
            return None
        line = self._lines[self._index]
        self._index += 1
        return line


class TextStream:
    def __init__(self, file: TextIO) -> None:
        self._file = file

    def next_line(self) -> str | None:
        line = self._file.readline()
        if line == "":
            return None
        if line.endswith("\n"):
            line = line[:-1]
        return line
