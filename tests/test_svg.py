# This file is part of svg-path-model.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

import pytest

from svg_path_model import Command, CommandType, Point
from svg_path_model.svg import commands_from_string, commands_to_string, format_number


def roundtrip(path: str) -> str:
    return commands_to_string(commands_from_string(path))


def test_format_number() -> None:
    """Numbers are written without redundant zeros."""
    assert format_number(2.0, None) == "2"
    assert format_number(1.5, None) == "1.5"
    assert format_number(3.33333, 2) == "3.33"
    assert format_number(10, 2) == "10"
    assert format_number(-0.0001, 2) == "0"
    assert format_number(-0.5, None, minify=True) == "-.5"


def test_command_validation() -> None:
    """Commands check their point count and type."""
    with pytest.raises(ValueError):
        Command(CommandType.LINE, (Point(0, 0),))
    with pytest.raises(ValueError):
        Command(CommandType.LINE, (None, Point(0, 0)))
    with pytest.raises(ValueError):
        Command(CommandType.ARC, (Point(0, 0), Point(1, 1)))
    assert Command.move(None, Point(1, 1)).start is None


def test_relative_commands() -> None:
    """Relative commands are made absolute."""
    assert roundtrip("m 1 1 l 2 0 l 0 2 z") == "M 1 1 L 3 1 L 3 3 Z"
    assert roundtrip("M 1 1 L 2 2 Z m 1 0 l 1 1") == "M 1 1 L 2 2 Z M 2 1 L 3 2"
    assert roundtrip("m 1 1 2 0 0 2") == "M 1 1 L 3 1 L 3 3"


def test_horizontal_vertical() -> None:
    """Horizontal and vertical lines become lines."""
    assert roundtrip("M 10 10 h 5 v 5 H 0 z") == "M 10 10 L 15 10 L 15 15 L 0 15 Z"


def test_close_geometry() -> None:
    """A close command runs from the current point back to the sub-path start."""
    cmds = commands_from_string("M 10 10 L 15 10 L 15 15 Z")
    assert cmds[-1].type is CommandType.CLOSE
    assert cmds[-1].points == (Point(15, 15), Point(10, 10))
    assert cmds[-1].values == []


def test_smooth_curves() -> None:
    """Smooth curves reflect the previous control point."""
    assert (
        roundtrip("M 0 0 C 0 10 10 10 10 0 S 20 -10 20 0")
        == "M 0 0 C 0 10 10 10 10 0 C 10 -10 20 -10 20 0"
    )
    assert roundtrip("M 0 0 Q 5 5 10 0 T 20 0") == "M 0 0 Q 5 5 10 0 Q 15 -5 20 0"
    # Without a preceding curve of the same kind, the current point is used.
    assert roundtrip("M 0 0 L 1 0 S 2 1 3 0") == "M 0 0 L 1 0 C 1 0 2 1 3 0"
    assert roundtrip("M 0 0 L 1 0 T 3 0") == "M 0 0 L 1 0 Q 1 0 3 0"


def test_smooth_curve_chains() -> None:
    """Smooth curves following smooth curves reflect their control points."""
    assert (
        roundtrip("M 0 0 C 0 10 10 10 10 0 S 20 -10 20 0 S 30 10 30 0")
        == "M 0 0 C 0 10 10 10 10 0 C 10 -10 20 -10 20 0 C 20 10 30 10 30 0"
    )
    assert (
        roundtrip("M 0 0 Q 5 5 10 0 T 20 0 T 30 0")
        == "M 0 0 Q 5 5 10 0 Q 15 -5 20 0 Q 25 5 30 0"
    )


def test_smooth_curve_after_arc() -> None:
    """Cubics approximating an arc are not reflected by a following smooth curve."""
    cmds = commands_from_string("M 0 0 A 5 5 0 0 1 10 0 S 20 10 20 0")
    assert cmds[-1].points[:2] == (Point(10, 0), Point(10, 0))

    cmds = commands_from_string("M 0 0 A 5 5 0 0 1 10 0 T 20 0")
    assert cmds[-1].points == (Point(10, 0), Point(10, 0), Point(20, 0))


def test_arcs_become_cubics() -> None:
    """Elliptical arcs are approximated by cubic curves."""
    cmds = commands_from_string("M 0 0 A 1 1 0 0 1 2 0 L 2 2")
    assert [c.type for c in cmds] == [
        CommandType.MOVE,
        CommandType.CUBIC,
        CommandType.CUBIC,
        CommandType.LINE,
    ]
    assert cmds[1].start == Point(0, 0)
    assert cmds[2].end == Point(2, 0)
    assert cmds[3].start == Point(2, 0)

    # Degenerate arcs vanish
    assert roundtrip("M 1 1 a 4 4 0 0 0 0 0 L 2 2") == "M 1 1 L 2 2"


def test_malformed() -> None:
    """Malformed path data raises :class:`ValueError`."""
    with pytest.raises(ValueError):
        commands_from_string("x 0 0 z")
    with pytest.raises(ValueError):
        commands_from_string("M 0 0 L 1")


def test_minify() -> None:
    """Minified output drops repeated letters and redundant spaces."""
    cmds = commands_from_string("M -15 14 C -10 21.5 0 21.5 0 21.5 C 0.5 0 -0.25 1 15 14 Z")
    assert commands_to_string(cmds, minify=True) == (
        "M-15 14C-10 21.5 0 21.5 0 21.5.5 0-.25 1 15 14Z"
    )
    cmds = commands_from_string("M 0 0 L 10 0 L 10 10 Z Z")
    assert commands_to_string(cmds, minify=True) == "M0 0 10 0 10 10ZZ"
    assert commands_to_string(cmds, decimals=1) == "M 0 0 L 10 0 L 10 10 Z Z"


def test_reverse_command() -> None:
    """Reversal swaps the traversal direction; moves cannot be reversed."""
    cmd = Command(CommandType.QUADRATIC, (Point(0, 0), Point(1, 1), Point(2, 0)), True)
    reversed_cmd = cmd.reversed()
    assert reversed_cmd.points == (Point(2, 0), Point(1, 1), Point(0, 0))
    assert reversed_cmd.is_split
    with pytest.raises(ValueError):
        Command.move(None, Point(0, 0)).reversed()


def test_convert_from_line() -> None:
    """Lines become straight curves with evenly placed control points."""
    line = Command.line(Point(0, 0), Point(3, 0), is_split=True)
    assert str(line.converted(CommandType.CUBIC)) == "C 1 0 2 0 3 0"
    assert str(line.converted(CommandType.QUADRATIC)) == "Q 1.5 0 3 0"
    assert line.converted(CommandType.CUBIC).is_split
    assert line.converted(CommandType.LINE) is line


def test_convert_curves() -> None:
    """Conversions between curve degrees and to lines."""
    quadratic = Command(CommandType.QUADRATIC, (Point(0, 0), Point(1, 2), Point(2, 0)))
    cubic = quadratic.converted(CommandType.CUBIC)
    assert cubic.type is CommandType.CUBIC
    _, c1, c2, _ = cubic.points
    assert c1 is not None and c2 is not None
    assert (c1.x, c1.y) == pytest.approx((2 / 3, 4 / 3))
    assert (c2.x, c2.y) == pytest.approx((4 / 3, 4 / 3))

    cubic = Command(
        CommandType.CUBIC, (Point(0, 0), Point(0, 3), Point(3, 3), Point(3, 0))
    )
    assert str(cubic.converted(CommandType.QUADRATIC)) == "Q 1.5 4.5 3 0"
    assert str(cubic.converted(CommandType.LINE)) == "L 3 0"

    close = Command(CommandType.CLOSE, (Point(4, 0), Point(0, 0)))
    assert str(close.converted(CommandType.LINE)) == "L 0 0"
    assert str(close.converted(CommandType.QUADRATIC)) == "Q 2 0 0 0"


def test_convert_move() -> None:
    """Moves cannot be converted, nor can anything become a move."""
    with pytest.raises(ValueError):
        Command.move(None, Point(0, 0)).converted(CommandType.LINE)
    with pytest.raises(ValueError):
        Command.line(Point(0, 0), Point(1, 0)).converted(CommandType.MOVE)
