# This file is part of svg-path-model.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations

from collections.abc import Sequence

from .command_mutation import CommandMutation
from .svg import Command, CommandType


def flatten_commands(mutations: Sequence[CommandMutation]) -> list[Command]:
    """Live commands of ``mutations`` in order."""
    return [cmd for cm in mutations for cmd in cm.commands]


def reverse_commands(mutations: Sequence[CommandMutation]) -> list[Command]:
    """
    Live commands of one sub-path, traversed in the opposite direction.

    Consider a segment A–B–C where AB is split and BC is not. Reversed, the
    user should see C–B–A with CB split and BA not: the split markers at every
    mutation boundary are toggled so that they stay attached to the same
    geometric seam. A trailing close is made an explicit line first, and a new
    leading move is synthesized from the original move's start to the new
    first command's start.
    """
    cmds: list[Command] = []
    for cm in mutations:
        cm_cmds = list(cm.commands)
        if cm_cmds[0].type is not CommandType.MOVE:
            cm_cmds[0] = cm_cmds[0].toggle_split()
            cm_cmds[-1] = cm_cmds[-1].toggle_split()
        cmds.extend(cm_cmds)

    if len(cmds) == 1:
        return cmds

    if cmds[-1].type is CommandType.CLOSE:
        cmds[-1] = cmds[-1].as_line()

    reversed_cmds = [cmd.reversed() for cmd in reversed(cmds[1:])]
    reversed_cmds.insert(0, Command.move(cmds[0].start, reversed_cmds[0].start))  # type: ignore[arg-type]
    return reversed_cmds
