# This file is part of svg-path-model.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from typing import Final, final, override

from .geometry import Point, Projection
from .math import lerp
from .svg import Command, CommandType

_convertible_types: Final = (
    CommandType.LINE,
    CommandType.QUADRATIC,
    CommandType.CUBIC,
)


def _checked_parameters(ts: Iterable[float]) -> list[float]:
    checked = list(ts)
    for t in checked:
        if not 0 <= t <= 1:
            raise ValueError(f"Split parameter {t!r} outside [0, 1]")
    return checked


@dataclass(frozen=True)
class SplitPoint:
    """
    End of one live piece of a :class:`CommandMutation`.

    :ivar id: Identifier, unique within the owning mutation and stable across edits.
    :ivar t: Parameter of the piece's end along the backing command.
    :ivar type: Command type the piece is displayed as.
    """

    id: int
    t: float
    type: CommandType


@final
class CommandMutation:
    """
    One original ("backing") command together with its live representation.

    The live representation is described by split points sorted by their
    parameter; the last split point always sits at ``t = 1`` and stands for the
    backing command's own end. Piece ``i`` covers the backing geometry between
    the previous split point (or ``t = 0``) and split point ``i`` and is shown
    with split point ``i``'s type.

    Instances are immutable; every edit returns a new mutation. The backing
    command is never modified, so :attr:`backing_command` always restores the
    original.
    """

    def __init__(
        self,
        backing_command: Command,
        split_points: Sequence[SplitPoint] | None = None,
        next_id: int = 1,
    ) -> None:
        self.backing_command: Final = backing_command
        self.split_points: Final[tuple[SplitPoint, ...]] = (
            tuple(split_points)
            if split_points
            else (SplitPoint(0, 1.0, backing_command.type),)
        )
        self.next_id: Final = next_id
        self.commands: Final[tuple[Command, ...]] = self._build_commands()

    def _natural_type(self, idx: int) -> CommandType:
        """Unconverted type of piece ``idx``; only the last piece of a close stays a close."""
        backing_type = self.backing_command.type
        if backing_type is CommandType.CLOSE and idx != len(self.split_points) - 1:
            return CommandType.LINE
        return backing_type

    def _build_commands(self) -> tuple[Command, ...]:
        backing = self.backing_command
        if backing.type is CommandType.MOVE:
            return (backing,)

        bezier = backing.bezier
        start = backing.start
        assert start is not None

        commands: list[Command] = []
        last = len(self.split_points) - 1
        t0 = 0.0
        for idx, split_point in enumerate(self.split_points):
            piece = bezier.split(t0, split_point.t)
            end = backing.end if idx == last else bezier(split_point.t)
            cmd = Command(
                self._natural_type(idx),
                (start, *piece.points[1:-1], end),
                is_split=idx != last,
            )
            commands.append(cmd.converted(split_point.type))
            start, t0 = end, split_point.t
        return tuple(commands)

    # ---- queries ------------------------------------------------------------------

    @property
    def path_length(self) -> float:
        """Arc length of the backing command."""
        return self.backing_command.bezier.length

    def project(self, point: Point) -> Projection | None:
        """
        Nearest point of the backing geometry to ``point``.

        The returned parameter refers to the backing command and can be passed
        to :meth:`split`. Moves have no extent and yield ``None``.
        """
        if self.backing_command.type is CommandType.MOVE:
            return None
        return self.backing_command.bezier.project(point)

    def id_at_index(self, split_idx: int) -> int:
        """Identifier of live piece ``split_idx``."""
        return self.split_points[split_idx].id

    # ---- edits --------------------------------------------------------------------

    def split(self, ts: Iterable[float]) -> CommandMutation:
        """
        Insert split points at the backing parameters ``ts``.

        :raises ValueError: If the backing command is a move or a parameter
                            lies outside ``[0, 1]``.
        """
        if self.backing_command.type is CommandType.MOVE:
            raise ValueError("A move command cannot be split")
        ts = _checked_parameters(ts)

        new_type = (
            CommandType.LINE
            if self.backing_command.type is CommandType.CLOSE
            else self.backing_command.type
        )
        next_id = self.next_id
        added: list[SplitPoint] = []
        for t in ts:
            added.append(SplitPoint(next_id, t, new_type))
            next_id += 1

        interior = sorted([*self.split_points[:-1], *added], key=lambda sp: sp.t)
        return CommandMutation(
            self.backing_command, [*interior, self.split_points[-1]], next_id
        )

    def split_at_index(self, split_idx: int, ts: Iterable[float]) -> CommandMutation:
        """
        Split live piece ``split_idx`` at the parameters ``ts``, which are
        relative to that piece rather than to the backing command.

        :raises ValueError: If a parameter lies outside ``[0, 1]``.
        """
        ts = _checked_parameters(ts)
        t_start = self.split_points[split_idx - 1].t if split_idx > 0 else 0.0
        t_end = self.split_points[split_idx].t
        return self.split([lerp(t_start, t_end, t) for t in ts])

    def split_in_half_at_index(self, split_idx: int) -> CommandMutation:
        """Split live piece ``split_idx`` at its parameter midpoint."""
        return self.split_at_index(split_idx, [0.5])

    def unsplit_at_index(self, split_idx: int) -> CommandMutation:
        """
        Remove the split point ending live piece ``split_idx``, merging it with
        the following piece.

        :raises IndexError: If ``split_idx`` does not denote an inserted split point.
        """
        if not 0 <= split_idx < len(self.split_points) - 1:
            raise IndexError(f"No split point at index {split_idx}")
        split_points = list(self.split_points)
        del split_points[split_idx]
        return CommandMutation(self.backing_command, split_points, self.next_id)

    def convert_at_index(
        self, split_idx: int, new_type: CommandType
    ) -> CommandMutation:
        """
        Display live piece ``split_idx`` as ``new_type``.

        :raises ValueError: If the mutation is a move or ``new_type`` is not a
                            line, quadratic or cubic.
        """
        if self.backing_command.type is CommandType.MOVE:
            raise ValueError("A move command cannot be converted")
        if new_type not in _convertible_types:
            raise ValueError(f"Cannot convert to {new_type!r}")
        split_points = list(self.split_points)
        split_points[split_idx] = replace(split_points[split_idx], type=new_type)
        return CommandMutation(self.backing_command, split_points, self.next_id)

    def unconvert_all(self) -> CommandMutation:
        """Restore every live piece to its unconverted type."""
        split_points = [
            replace(sp, type=self._natural_type(idx))
            for idx, sp in enumerate(self.split_points)
        ]
        return CommandMutation(self.backing_command, split_points, self.next_id)

    @override
    def __repr__(self) -> str:
        live = " ".join(str(c) for c in self.commands)
        return f"CommandMutation({self.backing_command}, live={live!r})"
