# tests/test_drawing.py
import pytest

from subparse.drawing import CubicBezierCurveInstruction, LineInstruction, MoveInstruction, make_instruction
from subparse.parser import parse
from subparse.parts import DrawingInstructions, DrawingMode, Text


@pytest.mark.parametrize(
    "text, expected",
    [
        ("m 0 0 l 100 0 100 100 0 100", [
            MoveInstruction(0, 0),
            LineInstruction(100, 0),
            LineInstruction(100, 100),
            LineInstruction(0, 100),
        ]),
        ("m 100 200 l 300 400k", [MoveInstruction(100, 200), LineInstruction(300, 400)]),
        ("m 100 k 200", [MoveInstruction(100, 200)]),
        ("l 1 x 2 3 4", [LineInstruction(1, 2), LineInstruction(3, 4)]),
        ("k 100 m 200 300", [MoveInstruction(200, 300)]),
        ("m 100 200 k 300 400 l 500 600", [
            MoveInstruction(100, 200),
            MoveInstruction(300, 400),
            LineInstruction(500, 600),
        ]),
        ("  m 1 2  ", [MoveInstruction(1, 2)]),
        ("m -1.5 2.25", [MoveInstruction(-1.5, 2.25)]),
        ("", []),
        (" ", []),
    ],
)
def test_drawing_instructions(text, expected):
    assert parse(text, "drawing_instructions") == expected


def test_cubic_bezier_curve():
    assert parse("m 0 0 b 1 2 3 4 5 6 7 8 9 10 11 12", "drawing_instructions") == [
        MoveInstruction(0, 0),
        CubicBezierCurveInstruction(1, 2, 3, 4, 5, 6),
        CubicBezierCurveInstruction(7, 8, 9, 10, 11, 12),
    ]


def test_incomplete_instruction_is_dropped():
    assert parse("m 0 0 b 1 2 3", "drawing_instructions") == [MoveInstruction(0, 0)]


def test_make_instruction_rejects_unknown_kind():
    with pytest.raises(ValueError):
        make_instruction("x", [1, 2])


def test_text_in_drawing_mode_becomes_instructions():
    parts = parse("{\\p1}m 0 0 l 10 0{\\p0}done", "dialogue_parts")
    assert parts == [
        DrawingMode(1),
        DrawingInstructions([MoveInstruction(0, 0), LineInstruction(10, 0)]),
        DrawingMode(0),
        Text("done"),
    ]


def test_text_before_drawing_mode_is_kept():
    parts = parse("m 0 0{\\p2}l 1 1", "dialogue_parts")
    assert parts == [Text("m 0 0"), DrawingMode(2), DrawingInstructions([LineInstruction(1, 1)])]
