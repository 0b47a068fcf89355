"""
SPDX-License-Identifier: Apache-2.0
"""

from __future__ import annotations

debug_mode: bool = False
"""Log suspicious parses, unknown style references and skipped script lines."""

verbose_mode: bool = False
"""Log every style and dialogue template read from a script."""


def set_debug_mode(value: bool) -> None:
    global debug_mode
    debug_mode = value


def set_verbose_mode(value: bool) -> None:
    global verbose_mode
    verbose_mode = value
