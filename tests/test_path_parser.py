# This file is part of svg-path-model.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations

import pytest

from svg_path_model.path_parser import PathParser


def test_empty() -> None:
    """Empty and whitespace-only path data contains no commands."""
    assert PathParser.parse("") == []
    assert PathParser.parse(" \n\t ") == []


def test_move_to() -> None:
    """``m`` command parsing and validation."""
    with pytest.raises(ValueError, match="malformed"):
        PathParser.parse("m 10")
    assert PathParser.parse("m 10 20") == [["m", "10", "20"]]


def test_number_formats() -> None:
    """Exponents, signs and dot-separated numbers are read as SVG does."""
    assert PathParser.parse("m 1e3 2e-3") == [["m", "1e3", "2e-3"]]
    assert PathParser.parse("M46-86") == [["M", "46", "-86"]]
    assert PathParser.parse("M.5.5") == [["M", ".5", ".5"]]
    assert PathParser.parse("M+1,-2.") == [["M", "+1", "-2."]]


def test_repeated_move_becomes_line() -> None:
    """Implicit repetitions of a move are lines of the same relativity."""
    assert PathParser.parse("m 12.5,52 39,0 0,-40 z") == [
        ["m", "12.5", "52"],
        ["l", "39", "0"],
        ["l", "0", "-40"],
        ["z"],
    ]
    assert PathParser.parse("M 1 2 3 4") == [["M", "1", "2"], ["L", "3", "4"]]


def test_initial_move_missing() -> None:
    """Path data must start with a move."""
    with pytest.raises(ValueError, match="malformed"):
        PathParser.parse("l 1 1")
    with pytest.raises(ValueError, match="malformed"):
        PathParser.parse("z")


def test_unexpected_character() -> None:
    """Unknown command letters and stray characters are rejected."""
    with pytest.raises(ValueError, match="malformed"):
        PathParser.parse("M 0 0 x 1 1")
    with pytest.raises(ValueError, match="malformed"):
        PathParser.parse("M 0 0 L 1 1 #")


def test_repeated_curves() -> None:
    """Implicitly repeated curves equal explicitly repeated ones."""
    a = PathParser.parse("m0 0c 50,0 50,100 100,100 50,0 50,-100 100,-100")
    b = PathParser.parse("m0 0c 50,0 50,100 100,100 c 50,0 50,-100 100,-100")
    assert a == [
        ["m", "0", "0"],
        ["c", "50", "0", "50", "100", "100", "100"],
        ["c", "50", "0", "50", "-100", "100", "-100"],
    ]
    assert a == b


def test_incomplete_arguments() -> None:
    """An argument group that is cut short is malformed."""
    with pytest.raises(ValueError, match="malformed"):
        PathParser.parse("m0 0l 10 10 0")
    with pytest.raises(ValueError, match="malformed"):
        PathParser.parse("M0 0 t 1 2 3")
    with pytest.raises(ValueError, match="malformed"):
        PathParser.parse("M0 0 L")


def test_single_argument_commands() -> None:
    """``h`` and ``v`` take a single coordinate."""
    assert PathParser.parse("m0 0 h 10.5 v -3") == [
        ["m", "0", "0"],
        ["h", "10.5"],
        ["v", "-3"],
    ]


def test_arc_flags() -> None:
    """Arc flags are single digits and need no separator."""
    assert PathParser.parse("M0 0A 30 50 0 0 1 162.55 162.45") == [
        ["M", "0", "0"],
        ["A", "30", "50", "0", "0", "1", "162.55", "162.45"],
    ]
    assert PathParser.parse("M0 0A 60 60 0 01100 100") == [
        ["M", "0", "0"],
        ["A", "60", "60", "0", "0", "1", "100", "100"],
    ]
    with pytest.raises(ValueError, match="malformed"):
        PathParser.parse("M0 0A 60 60 0 2 1 100 100")


def test_smooth_and_quadratic_curves() -> None:
    """``Q``, ``S`` and ``T`` argument groups."""
    assert PathParser.parse("M10 80 Q 95 10 180 80 T 1 -200 S 1 2, 3 4") == [
        ["M", "10", "80"],
        ["Q", "95", "10", "180", "80"],
        ["T", "1", "-200"],
        ["S", "1", "2", "3", "4"],
    ]


def test_close() -> None:
    """``z`` takes no arguments and may repeat."""
    assert PathParser.parse("m0 0z") == [["m", "0", "0"], ["z"]]
    assert PathParser.parse("M0 0 L 1 1 Z z") == [
        ["M", "0", "0"],
        ["L", "1", "1"],
        ["Z"],
        ["z"],
    ]
