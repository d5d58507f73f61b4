# This file is part of svg-path-model.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from svg_path_model import CommandMutation
from svg_path_model.path_change_origin import shift_commands
from svg_path_model.path_operations import flatten_commands, reverse_commands
from svg_path_model.svg import commands_from_string, commands_to_string


def mutations(path: str) -> list[CommandMutation]:
    return [CommandMutation(c) for c in commands_from_string(path)]


def test_flatten() -> None:
    """Flattening lists the live commands of every mutation."""
    cms = mutations("M 0 0 L 10 0 L 10 10 Z")
    cms[1] = cms[1].split([0.5])
    assert commands_to_string(flatten_commands(cms)) == "M 0 0 L 5 0 L 10 0 L 10 10 Z"


def test_reverse() -> None:
    """Reversal turns a trailing close into a line and synthesizes a move."""
    cmds = reverse_commands(mutations("M 0 0 L 10 0 L 10 10 Z"))
    assert commands_to_string(cmds) == "M 0 0 L 10 10 L 10 0 L 0 0"

    cmds = reverse_commands(mutations("M 0 0 Q 5 5 10 0 C 10 5 15 5 15 0"))
    assert commands_to_string(cmds) == "M 15 0 C 15 5 10 5 10 0 Q 5 5 0 0"


def test_reverse_keeps_split_seams() -> None:
    """Split markers stay on the same geometric seam."""
    cms = mutations("M 0 0 L 10 0 L 10 10")
    cms[1] = cms[1].split([0.5])
    cmds = reverse_commands(cms)
    assert commands_to_string(cmds) == "M 10 10 L 10 0 L 5 0 L 0 0"
    assert [c.is_split for c in cmds] == [False, False, True, False]


def test_reverse_single_move() -> None:
    """A lone move is returned as it is."""
    cms = mutations("M 3 4")
    assert reverse_commands(cms) == list(cms[0].commands)


def test_shift() -> None:
    """Rotating a closed sub-path moves its start point."""
    cmds = flatten_commands(mutations("M 0 0 L 10 0 L 10 10 Z"))
    assert commands_to_string(shift_commands(cmds, 0, False)) == (
        "M 0 0 L 10 0 L 10 10 Z"
    )
    assert commands_to_string(shift_commands(cmds, 1, False)) == (
        "M 10 0 L 10 10 L 0 0 L 10 0"
    )
    assert commands_to_string(shift_commands(cmds, 2, False)) == (
        "M 10 10 L 0 0 L 10 0 L 10 10"
    )


def test_shift_general_rotation() -> None:
    """Offsets away from both ends rotate around the moved start."""
    cmds = flatten_commands(mutations("M 0 0 L 10 0 L 10 10 L 0 10 Z"))
    assert commands_to_string(shift_commands(cmds, 2, False)) == (
        "M 10 10 L 0 10 L 0 0 L 10 0 L 10 10"
    )


def test_shift_reversed() -> None:
    """Offsets of reversed sub-paths count in the opposite direction."""
    cmds = reverse_commands(mutations("M 0 0 L 10 0 L 10 10 Z"))
    assert commands_to_string(shift_commands(cmds, 1, True)) == (
        "M 10 0 L 0 0 L 10 10 L 10 0"
    )


def test_shift_open() -> None:
    """Open sub-paths are not rotated."""
    cmds = flatten_commands(mutations("M 0 0 L 10 0 L 10 10"))
    assert shift_commands(cmds, 1, False) == cmds
