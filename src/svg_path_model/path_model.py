# This file is part of svg-path-model.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations

import functools
import logging
import re
from collections.abc import Callable, Iterable, Sequence
from typing import Final, NamedTuple, final, override

from .command_mutation import CommandMutation
from .geometry import Point, Projection
from .path_change_origin import shift_commands
from .path_operations import flatten_commands, reverse_commands
from .sub_path import SubPath, create_sub_paths
from .svg import Command, CommandType, commands_from_string, commands_to_string

logger = logging.getLogger(__name__)

_format_spec: Final = re.compile(r"(m?)(?:\.([0-9]+))?(m?)")

type MutationsMap = tuple[tuple[CommandMutation, ...], ...]


class IncompatibleTopologyError(ValueError):
    """Raised by a strict interpolation between paths that are not morphable."""


class SplitOp(NamedTuple):
    """Request to split logical command ``cmd_idx`` of sub-path ``sub_idx`` at ``ts``."""

    sub_idx: int
    cmd_idx: int
    ts: Sequence[float]


class UnsplitOp(NamedTuple):
    """Request to remove the split point at logical command ``cmd_idx``."""

    sub_idx: int
    cmd_idx: int


class PathProjection(NamedTuple):
    """
    Result of :meth:`PathModel.project`.

    :ivar projection: Nearest point, its distance and its parameter along the
                      owning command.
    :ivar split: Deferred action splitting the owning command at that parameter.
    """

    projection: Projection
    split: Callable[[], PathModel]


def _descending[T: tuple](ops: Iterable[T]) -> list[T]:
    """Sort batch requests so that higher ``(sub_idx, cmd_idx)`` come first."""
    return sorted(ops, key=lambda op: (op[0], op[1]), reverse=True)


@final
class PathModel:
    """
    Immutable, editable model of SVG path data.

    Every original command is owned by a :class:`CommandMutation` that keeps
    the command itself and its current split/converted representation.
    Reversal and rotation of sub-paths are stored as per-sub-path flags and
    offsets and only applied when the displayed commands are rebuilt. This
    keeps every edit reversible: :meth:`revert` restores the imported path.

    Commands are addressed by *logical* indices, i.e. indices into the
    displayed commands of a sub-path after reversal and rotation.
    All editing methods return a new instance.
    """

    def __init__(self, path: str | Sequence[Command]) -> None:
        commands = commands_from_string(path) if isinstance(path, str) else path
        sub_paths = create_sub_paths(commands)
        self._init(
            [cmd for sub_path in sub_paths for cmd in sub_path.commands],
            tuple(tuple(CommandMutation(c) for c in s.commands) for s in sub_paths),
            (0,) * len(sub_paths),
            (False,) * len(sub_paths),
        )

    @staticmethod
    def from_string(path: str) -> PathModel:
        """Model of the SVG path data ``path``."""
        return PathModel(path)

    @staticmethod
    def from_commands(commands: Sequence[Command]) -> PathModel:
        """Model of already parsed absolute commands."""
        return PathModel(commands)

    def _init(
        self,
        commands: Sequence[Command],
        command_mutations_map: MutationsMap,
        shift_offsets: tuple[int, ...],
        reversals: tuple[bool, ...],
    ) -> None:
        self._commands: tuple[Command, ...] = tuple(commands)
        self._path_string: str = commands_to_string(commands)
        self._sub_paths: tuple[SubPath, ...] = create_sub_paths(commands)
        self._command_mutations_map: MutationsMap = command_mutations_map
        self._shift_offsets: tuple[int, ...] = shift_offsets
        self._reversals: tuple[bool, ...] = reversals
        # Only the first sub-path counts; some renderers report path lengths this way.
        self._total_length: float = (
            sum(cm.path_length for cm in command_mutations_map[0])
            if command_mutations_map
            else 0.0
        )

    def clone(
        self,
        *,
        command_mutations_map: MutationsMap | None = None,
        shift_offsets: Sequence[int] | None = None,
        reversals: Sequence[bool] | None = None,
    ) -> PathModel:
        """
        Rebuild the displayed commands from mutation state, reversals and shift
        offsets, taking each from the arguments if given and from this
        instance otherwise.
        """
        mutations_map = (
            command_mutations_map
            if command_mutations_map is not None
            else self._command_mutations_map
        )
        offsets = (
            tuple(shift_offsets) if shift_offsets is not None else self._shift_offsets
        )
        flags = tuple(reversals) if reversals is not None else self._reversals

        commands: list[Command] = []
        for sub_idx, cms in enumerate(mutations_map):
            is_reversed = flags[sub_idx]
            cmds = reverse_commands(cms) if is_reversed else flatten_commands(cms)
            commands.extend(shift_commands(cmds, offsets[sub_idx], is_reversed))

        logger.debug(
            "Rebuilt %d commands (offsets=%s, reversals=%s)",
            len(commands),
            offsets,
            flags,
        )
        clone = object.__new__(PathModel)
        clone._init(commands, mutations_map, offsets, flags)
        return clone

    # ---- accessors ----------------------------------------------------------------

    @property
    def path_string(self) -> str:
        """Serialized form of the displayed commands."""
        return self._path_string

    @property
    def commands(self) -> tuple[Command, ...]:
        """Displayed commands of all sub-paths."""
        return self._commands

    @property
    def sub_paths(self) -> tuple[SubPath, ...]:
        return self._sub_paths

    @property
    def command_mutations_map(self) -> MutationsMap:
        """One mutation per original command, grouped by sub-path."""
        return self._command_mutations_map

    @property
    def shift_offsets(self) -> tuple[int, ...]:
        return self._shift_offsets

    @property
    def reversals(self) -> tuple[bool, ...]:
        return self._reversals

    @property
    def total_length(self) -> float:
        """
        Length of the *first* sub-path only.

        Kept this way for compatibility with renderers that report path
        lengths per first sub-path; see :attr:`total_length_of_all_sub_paths`
        for the sum over the whole path.
        """
        return self._total_length

    @property
    def total_length_of_all_sub_paths(self) -> float:
        """Sum of the lengths of every sub-path."""
        return sum(
            cm.path_length for cms in self._command_mutations_map for cm in cms
        )

    def id_at(self, sub_idx: int, cmd_idx: int) -> int:
        """Identifier of the split point at logical command ``cmd_idx``."""
        target_cm, _, split_idx = self._find_command_mutation(sub_idx, cmd_idx)
        return target_cm.id_at_index(split_idx)

    # ---- serialization ------------------------------------------------------------

    def as_string(self, decimals: int | None = None, minify: bool = False) -> str:
        """Serialize the displayed commands to SVG path data."""
        if decimals is None and not minify:
            return self._path_string
        return commands_to_string(self._commands, decimals, minify)

    @override
    def __format__(self, format_spec: str) -> str:
        """
        Format with ``.N`` (number of decimals) and ``m`` (minify), e.g.
        ``f"{path:.2m}"``.
        """
        match = _format_spec.fullmatch(format_spec)
        if match is None or (match.group(1) and match.group(3)):
            raise ValueError(f"Invalid format specifier: {format_spec!r}")
        decimals = int(match.group(2)) if match.group(2) is not None else None
        return self.as_string(decimals, bool(match.group(1) or match.group(3)))

    @override
    def __str__(self) -> str:
        return self._path_string

    @override
    def __repr__(self) -> str:
        return f"PathModel({self._path_string!r})"

    # ---- morphing -----------------------------------------------------------------

    def is_morphable_with(self, other: PathModel) -> bool:
        """
        ``True`` if both paths have the same number of sub-paths and, per
        sub-path, the same number of commands with the same types.
        """
        subs1, subs2 = self._sub_paths, other._sub_paths
        return len(subs1) == len(subs2) and all(
            len(s1.commands) == len(s2.commands)
            and all(c1.type is c2.type for c1, c2 in zip(s1.commands, s2.commands))
            for s1, s2 in zip(subs1, subs2)
        )

    def interpolate(
        self,
        start: PathModel,
        end: PathModel,
        fraction: float,
        *,
        strict: bool = False,
    ) -> PathModel:
        """
        Path between ``start`` (``fraction=0``) and ``end`` (``fraction=1``).

        Every point is interpolated linearly and independently per coordinate.
        Command types and split markers come from this path, which must be
        morphable with both ``start`` and ``end``. The result is built from the
        interpolated commands alone and carries no edit history.

        :param strict: Raise instead of returning ``self`` if the paths are not
                       morphable.
        :raises IncompatibleTopologyError: If ``strict`` and the topologies differ.
        """
        if not self.is_morphable_with(start) or not self.is_morphable_with(end):
            if strict:
                raise IncompatibleTopologyError(
                    f"Cannot interpolate between {start!r} and {end!r} on {self!r}"
                )
            return self

        commands: list[Command] = []
        for sub, sub1, sub2 in zip(self._sub_paths, start._sub_paths, end._sub_paths):
            for cmd, cmd1, cmd2 in zip(sub.commands, sub1.commands, sub2.commands):
                points = tuple(
                    p1.lerp(p2, fraction) if p1 is not None and p2 is not None else None
                    for p1, p2 in zip(cmd1.points, cmd2.points)
                )
                commands.append(Command(cmd.type, points, cmd.is_split))
        return PathModel(commands)

    # ---- projection ---------------------------------------------------------------

    def project(self, point: Point) -> PathProjection | None:
        """
        Nearest point on the path to ``point``.

        Mutations are visited by sub-path and then in order; among equally
        distant candidates the first one visited is kept.

        :return: The projection and a deferred split at its position, or
                 ``None`` if the path has nothing to project onto.
        """
        best: tuple[Projection, int, int] | None = None
        for sub_idx, cms in enumerate(self._command_mutations_map):
            for cm_idx, cm in enumerate(cms):
                projection = cm.project(point)
                if projection is None:
                    continue
                if best is None or projection.distance < best[0].distance:
                    best = (projection, sub_idx, cm_idx)

        if best is None:
            return None
        projection, sub_idx, cm_idx = best
        split = functools.partial(
            self._split_command_mutation, sub_idx, cm_idx, projection.t
        )
        return PathProjection(projection, split)

    # ---- reversal and rotation ----------------------------------------------------

    def reverse(self, sub_idx: int) -> PathModel:
        """Toggle the direction of sub-path ``sub_idx``."""
        return self.clone(
            reversals=[not r if i == sub_idx else r for i, r in enumerate(self._reversals)]
        )

    def shift_back(self, sub_idx: int, num_shifts: int = 1) -> PathModel:
        """Rotate the start of a closed sub-path backwards by ``num_shifts`` commands."""
        if self._reversals[sub_idx]:
            return self._shift(sub_idx, lambda o, n: (o - num_shifts) % (n - 1))
        return self._shift(sub_idx, lambda o, n: (o + num_shifts) % (n - 1))

    def shift_forward(self, sub_idx: int, num_shifts: int = 1) -> PathModel:
        """Rotate the start of a closed sub-path forwards by ``num_shifts`` commands."""
        if self._reversals[sub_idx]:
            return self._shift(sub_idx, lambda o, n: (o + num_shifts) % (n - 1))
        return self._shift(sub_idx, lambda o, n: (o - num_shifts) % (n - 1))

    def _shift(
        self, sub_idx: int, calc_offset: Callable[[int, int], int]
    ) -> PathModel:
        sub_path = self._sub_paths[sub_idx]
        num_commands = len(sub_path.commands)
        if num_commands <= 1 or not sub_path.is_closed:
            return self
        return self.clone(
            shift_offsets=[
                calc_offset(offset, num_commands) if i == sub_idx else offset
                for i, offset in enumerate(self._shift_offsets)
            ]
        )

    # ---- split / unsplit ----------------------------------------------------------

    def split(self, sub_idx: int, cmd_idx: int, *ts: float) -> PathModel:
        """
        Split logical command ``cmd_idx`` at the parameters ``ts`` (relative to
        that command).

        Without parameters the path is returned unchanged.
        """
        if not ts:
            logger.warning("Attempt to split a path with an empty parameter list")
            return self
        target_cm, cm_idx, split_idx = self._find_command_mutation(sub_idx, cmd_idx)
        shift_offsets = self._shift_offsets_after_split(sub_idx, cm_idx, len(ts))
        mutations_map = self._replace_command_mutation(
            sub_idx, cm_idx, target_cm.split_at_index(split_idx, ts)
        )
        return self.clone(
            command_mutations_map=mutations_map, shift_offsets=shift_offsets
        )

    def split_batch(
        self, ops: Iterable[SplitOp | tuple[int, int, Sequence[float]]]
    ) -> PathModel:
        """
        Apply several splits, highest ``(sub_idx, cmd_idx)`` first so that no
        split changes the logical indices of the requests still pending.

        Requests for the same command are merged into one split, so every
        parameter refers to the command as it was before the batch.
        """
        merged: dict[tuple[int, int], list[float]] = {}
        for sub_idx, cmd_idx, ts in ops:
            merged.setdefault((sub_idx, cmd_idx), []).extend(ts)

        result = self
        for sub_idx, cmd_idx, ts in _descending(
            (sub_idx, cmd_idx, sorted(ts)) for (sub_idx, cmd_idx), ts in merged.items()
        ):
            logger.debug("Batch split of command %d in sub-path %d", cmd_idx, sub_idx)
            result = result.split(sub_idx, cmd_idx, *ts)
        return result

    def split_in_half(self, sub_idx: int, cmd_idx: int) -> PathModel:
        """Split logical command ``cmd_idx`` at its parameter midpoint."""
        target_cm, cm_idx, split_idx = self._find_command_mutation(sub_idx, cmd_idx)
        shift_offsets = self._shift_offsets_after_split(sub_idx, cm_idx, 1)
        mutations_map = self._replace_command_mutation(
            sub_idx, cm_idx, target_cm.split_in_half_at_index(split_idx)
        )
        return self.clone(
            command_mutations_map=mutations_map, shift_offsets=shift_offsets
        )

    def _split_command_mutation(self, sub_idx: int, cm_idx: int, t: float) -> PathModel:
        """Split mutation ``cm_idx`` at the backing parameter ``t``."""
        shift_offsets = self._shift_offsets_after_split(sub_idx, cm_idx, 1)
        target_cm = self._command_mutations_map[sub_idx][cm_idx]
        mutations_map = self._replace_command_mutation(
            sub_idx, cm_idx, target_cm.split([t])
        )
        return self.clone(
            command_mutations_map=mutations_map, shift_offsets=shift_offsets
        )

    def _shift_offsets_after_split(
        self, sub_idx: int, cm_idx: int, num_splits: int
    ) -> list[int]:
        # All new points land in one mutation, so the pivot moves by either
        # `num_splits` or not at all.
        shift_offsets = list(self._shift_offsets)
        shift_offset = shift_offsets[sub_idx]
        if shift_offset and cm_idx <= shift_offset:
            shift_offsets[sub_idx] = shift_offset + num_splits
        return shift_offsets

    def unsplit(self, sub_idx: int, cmd_idx: int) -> PathModel:
        """Remove the split point at logical command ``cmd_idx``."""
        target_cm, cm_idx, split_idx = self._find_command_mutation(sub_idx, cmd_idx)
        if self._reversals[sub_idx]:
            split_idx -= 1
        mutations_map = self._replace_command_mutation(
            sub_idx, cm_idx, target_cm.unsplit_at_index(split_idx)
        )
        shift_offsets = list(self._shift_offsets)
        shift_offset = shift_offsets[sub_idx]
        if shift_offset and cm_idx <= shift_offset:
            shift_offsets[sub_idx] = shift_offset - 1
        return self.clone(
            command_mutations_map=mutations_map, shift_offsets=shift_offsets
        )

    def unsplit_batch(self, ops: Iterable[UnsplitOp | tuple[int, int]]) -> PathModel:
        """Apply several unsplits, highest ``(sub_idx, cmd_idx)`` first."""
        result = self
        for sub_idx, cmd_idx in _descending(ops):
            logger.debug("Batch unsplit of command %d in sub-path %d", cmd_idx, sub_idx)
            result = result.unsplit(sub_idx, cmd_idx)
        return result

    # ---- conversion ---------------------------------------------------------------

    def convert(
        self, sub_idx: int, cmd_idx: int, new_type: CommandType | str
    ) -> PathModel:
        """
        Display logical command ``cmd_idx`` as ``new_type`` (line, quadratic or
        cubic).

        :raises ValueError: For an unknown or unsupported type.
        """
        new_type = CommandType(new_type.upper())
        target_cm, cm_idx, split_idx = self._find_command_mutation(sub_idx, cmd_idx)
        mutations_map = self._replace_command_mutation(
            sub_idx, cm_idx, target_cm.convert_at_index(split_idx, new_type)
        )
        return self.clone(command_mutations_map=mutations_map)

    def unconvert(self, sub_idx: int) -> PathModel:
        """Undo every conversion in sub-path ``sub_idx`` except on its leading move."""
        mutations_map = list(self._command_mutations_map)
        mutations_map[sub_idx] = tuple(
            cm if i == 0 else cm.unconvert_all()
            for i, cm in enumerate(mutations_map[sub_idx])
        )
        return self.clone(command_mutations_map=tuple(mutations_map))

    def revert(self) -> PathModel:
        """The path as originally imported, without any edits."""
        return PathModel(
            [cm.backing_command for cms in self._command_mutations_map for cm in cms]
        )

    # ---- index resolution ---------------------------------------------------------

    def _find_command_mutation(
        self, sub_idx: int, cmd_idx: int
    ) -> tuple[CommandMutation, int, int]:
        """
        Resolve a logical command index.

        :return: The owning mutation, its index within the sub-path and the
                 index of the live command within the mutation.
        :raises IndexError: If the index does not denote a command.
        """
        num_commands = len(self._sub_paths[sub_idx].commands)
        if not 0 <= cmd_idx < num_commands:
            raise IndexError(
                f"Command index {cmd_idx} out of range for sub-path {sub_idx} "
                f"({num_commands} commands)"
            )
        if cmd_idx and self._reversals[sub_idx]:
            cmd_idx = num_commands - cmd_idx
        cmd_idx += self._shift_offsets[sub_idx]
        if cmd_idx >= num_commands:
            cmd_idx -= num_commands - 1

        counter = 0
        for cm_idx, target_cm in enumerate(self._command_mutations_map[sub_idx]):
            if counter + len(target_cm.commands) > cmd_idx:
                return target_cm, cm_idx, cmd_idx - counter
            counter += len(target_cm.commands)
        raise IndexError(f"No command mutation contains index {cmd_idx}")

    def _replace_command_mutation(
        self, sub_idx: int, cm_idx: int, cm: CommandMutation
    ) -> MutationsMap:
        cms = list(self._command_mutations_map[sub_idx])
        cms[cm_idx] = cm
        mutations_map = list(self._command_mutations_map)
        mutations_map[sub_idx] = tuple(cms)
        return tuple(mutations_map)
