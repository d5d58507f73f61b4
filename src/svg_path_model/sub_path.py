# This file is part of svg-path-model.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from .geometry import Point
from .svg import Command, CommandType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubPath:
    """Contiguous run of commands that starts with exactly one move."""

    commands: tuple[Command, ...]

    @property
    def start(self) -> Point:
        """Point the leading move goes to."""
        return self.commands[0].end

    @property
    def end(self) -> Point:
        return self.commands[-1].end

    @property
    def is_closed(self) -> bool:
        """``True`` if the sub-path ends with a close or returns to its start."""
        return self.commands[-1].type is CommandType.CLOSE or self.start == self.end


def create_sub_paths(commands: Sequence[Command]) -> tuple[SubPath, ...]:
    """
    Group a flat command list into sub-paths.

    A move starts a new sub-path and a close ends the current one. Commands
    following a close without a move of their own start a sub-path led by the
    most recently seen move, so that every sub-path is self-contained.

    Input that is empty or does not start with a move yields no sub-paths.
    """
    if not commands or commands[0].type is not CommandType.MOVE:
        if commands:
            logger.warning(
                "Path data starts with %r instead of a move; no sub-paths created",
                commands[0].type.value,
            )
        return ()

    sub_paths: list[SubPath] = []
    current: list[Command] = []
    last_move = commands[0]
    for cmd in commands:
        if cmd.type is CommandType.MOVE:
            last_move = cmd
            if current:
                sub_paths.append(SubPath(tuple(current)))
            current = [cmd]
            continue
        if not current:
            current.append(last_move)
        current.append(cmd)
        if cmd.type is CommandType.CLOSE:
            sub_paths.append(SubPath(tuple(current)))
            current = []

    if current:
        sub_paths.append(SubPath(tuple(current)))
    return tuple(sub_paths)
