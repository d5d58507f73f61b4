# This file is part of svg-path-model.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations

from collections.abc import Sequence

from .svg import Command, CommandType


def shift_commands(
    cmds: Sequence[Command], shift_offset: int, is_reversed: bool
) -> list[Command]:
    """
    Rotate the commands of a closed sub-path so that it starts elsewhere.

    After the rotation the sub-path starts at the end point of the command
    that was at index ``shift_offset``. For a reversed sub-path the offset
    counts in the opposite direction, i.e. ``len(cmds) - 1 - shift_offset``
    is used. A trailing close becomes an explicit line, and the leading move
    is recreated from the new neighbouring end points.

    Nothing changes if the offset is zero, the sub-path has a single command
    or it is not closed.
    """
    num_commands = len(cmds)
    if (
        not shift_offset
        or num_commands == 1
        or cmds[0].end != cmds[num_commands - 1].end
    ):
        return list(cmds)

    if is_reversed:
        shift_offset = num_commands - 1 - shift_offset

    cmds = list(cmds)
    if cmds[-1].type is CommandType.CLOSE:
        cmds[-1] = cmds[-1].as_line()

    first = cmds[0]

    # The rotation below would attach the move to the wrong neighbour at both
    # boundaries, so those get their own rotations.
    if shift_offset == 1:
        return [Command.move(first.start, cmds[1].end), *cmds[2:], cmds[1]]
    if shift_offset == num_commands - 1:
        return [
            Command.move(first.start, cmds[num_commands - 2].end),
            cmds[-1],
            *cmds[1 : num_commands - 1],
        ]

    # After rotating, the original move sits at index `num_commands - shift_offset`.
    new_cmds = [cmds[(i + shift_offset) % num_commands] for i in range(num_commands)]
    previous_move = new_cmds.pop(num_commands - shift_offset)
    new_cmds.append(new_cmds.pop(0))
    new_cmds.insert(0, Command.move(previous_move.start, new_cmds[-1].end))
    return new_cmds
