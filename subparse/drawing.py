"""
SPDX-License-Identifier: Apache-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias, Union


@dataclass(frozen=True)
class MoveInstruction:
    x: float
    y: float


@dataclass(frozen=True)
class LineInstruction:
    x: float
    y: float


@dataclass(frozen=True)
class CubicBezierCurveInstruction:
    x1: float
    """X of the first control point"""
    y1: float
    x2: float
    """X of the second control point"""
    y2: float
    x3: float
    """X of the end point"""
    y3: float


Instruction: TypeAlias = Union[MoveInstruction, LineInstruction, CubicBezierCurveInstruction]

INSTRUCTION_ARITY: dict[str, int] = {"m": 2, "l": 2, "b": 6}


def make_instruction(kind: str, values: list[float]) -> Instruction:
    match kind:
        case "m":
            return MoveInstruction(*values)
        case "l":
            return LineInstruction(*values)
        case "b":
            return CubicBezierCurveInstruction(*values)
    raise ValueError(f"Unknown drawing instruction {kind!r}")
