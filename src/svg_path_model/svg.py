# This file is part of svg-path-model.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Final, override

from .geometry import Bezier, Point, arc_to_beziers
from .math import DEFAULT_PRECISION, Precision
from .path_parser import PathParser

_number_strip_trailing_zeros: Final = re.compile(r"^(-?[0-9]*\.([0-9]*[1-9])?)0*$")
_number_strip_dot: Final = re.compile(r"\.$")
_number_leading_zero: Final = re.compile(r"^(-?)0\.")
_minify_cmd_space: Final = re.compile(r"^([a-zA-Z]) ")
_minify_dot_gap: Final = re.compile(r"(\.[0-9]+) (?=\.)")


def format_number(v: float, d: int | None, minify: bool = False) -> str:
    """Format a float with optional fixed decimals and SVG number minification."""
    s = f"{v:.{d}f}" if d is not None else str(v)
    s = _number_strip_trailing_zeros.sub(r"\1", s)
    s = _number_strip_dot.sub("", s)
    if s == "-0":
        s = "0"
    if minify:
        s = _number_leading_zero.sub(r"\1.", s)
    return s


class CommandType(StrEnum):
    """Absolute SVG command letters used by the path model."""

    MOVE = "M"
    LINE = "L"
    QUADRATIC = "Q"
    CUBIC = "C"
    ARC = "A"
    CLOSE = "Z"


_point_counts: Final = {
    CommandType.MOVE: 2,
    CommandType.LINE: 2,
    CommandType.QUADRATIC: 3,
    CommandType.CUBIC: 4,
    CommandType.CLOSE: 2,
}


@dataclass(frozen=True)
class Command:
    """
    A single absolute draw command.

    ``points[0]`` is the start point and ``points[-1]`` the end point, with the
    control points of curves in between. Only a move may lack a start point
    (the very first command of a path).

    Elliptical arcs are not stored as commands; they are approximated by
    cubic curves when path data is read (see :func:`commands_from_string`).

    :ivar type: Command type.
    :ivar points: Start point, control points and end point.
    :ivar is_split: Whether the end point of this command was introduced by a split.
    """

    type: CommandType
    points: tuple[Point | None, ...]
    is_split: bool = False

    def __post_init__(self) -> None:
        count = _point_counts.get(self.type)
        if count is None:
            raise ValueError(f"Unsupported command type: {self.type!r}")
        if len(self.points) != count:
            raise ValueError(
                f"Command {self.type} needs {count} points, got {len(self.points)}"
            )
        if any(p is None for p in self.points[1:]) or (
            self.points[0] is None and self.type is not CommandType.MOVE
        ):
            raise ValueError(f"Command {self.type} is missing points")

    # ---- construction -------------------------------------------------------------

    @staticmethod
    def move(start: Point | None, end: Point) -> Command:
        """Move command from ``start`` (the previous end point, if any) to ``end``."""
        return Command(CommandType.MOVE, (start, end))

    @staticmethod
    def line(start: Point, end: Point, is_split: bool = False) -> Command:
        """Straight line from ``start`` to ``end``."""
        return Command(CommandType.LINE, (start, end), is_split)

    # ---- accessors ----------------------------------------------------------------

    @property
    def start(self) -> Point | None:
        return self.points[0]

    @property
    def end(self) -> Point:
        end = self.points[-1]
        assert end is not None
        return end

    @property
    def bezier(self) -> Bezier:
        """
        Geometry of this command.

        Lines and closes are degree-1 curves; a move is the single point it
        moves to.
        """
        if self.type is CommandType.MOVE:
            return Bezier([self.end])
        return Bezier([p for p in self.points if p is not None])

    # ---- derived commands ---------------------------------------------------------

    def reversed(self) -> Command:
        """The same geometry traversed from end to start."""
        if self.type is CommandType.MOVE:
            raise ValueError("Cannot reverse a move command")
        return replace(self, points=self.points[::-1])

    def toggle_split(self) -> Command:
        return replace(self, is_split=not self.is_split)

    def with_split(self, is_split: bool) -> Command:
        return replace(self, is_split=is_split)

    def as_line(self) -> Command:
        """A line with the same end points and split marker."""
        start = self.start
        assert start is not None
        return Command.line(start, self.end, self.is_split)

    def converted(self, new_type: CommandType) -> Command:
        """
        Convert this command to ``new_type``, keeping its end points.

        * line or close to cubic: control points at 1/3 and 2/3 of the chord
        * line or close to quadratic: control point at the chord midpoint
        * quadratic to cubic: exact degree elevation
        * cubic to quadratic: control point ``(3 (c1 + c2) - start - end) / 4``
        * anything to line or close: only the end points are kept

        :raises ValueError: If either type is a move or the target is an arc.
        """
        if self.type is CommandType.MOVE or new_type is CommandType.MOVE:
            raise ValueError("Move commands cannot be converted")
        if new_type is self.type:
            return self

        start, end = self.start, self.end
        assert start is not None
        match new_type:
            case CommandType.LINE | CommandType.CLOSE:
                points: tuple[Point, ...] = (start, end)
            case CommandType.QUADRATIC if self.type is CommandType.CUBIC:
                _, c1, c2, _ = self.points
                assert c1 is not None and c2 is not None
                points = (start, ((c1 + c2) * 3 - start - end) / 4, end)
            case CommandType.QUADRATIC:
                points = (start, start.lerp(end, 0.5), end)
            case CommandType.CUBIC if self.type is CommandType.QUADRATIC:
                points = self.bezier.elevated().points
            case CommandType.CUBIC:
                points = (start, start.lerp(end, 1 / 3), start.lerp(end, 2 / 3), end)
            case _:
                raise ValueError(f"Unsupported conversion target: {new_type!r}")
        return Command(new_type, points, self.is_split)

    # ---- serialization ------------------------------------------------------------

    @property
    def values(self) -> list[float]:
        """Serialized coordinates: every point except the start point."""
        if self.type is CommandType.CLOSE:
            return []
        return [v for p in self.points[1:] if p is not None for v in p]

    def as_string(
        self,
        decimals: int | None = None,
        minify: bool = False,
        trailing_items: Sequence[Command] | None = None,
    ) -> str:
        """
        Serialize this command (optionally together with same-typed trailing
        commands) into an SVG path fragment.
        """
        trailing_items = trailing_items or []
        flattened = self.values + [v for it in trailing_items for v in it.values]
        str_values = [format_number(it, decimals, minify) for it in flattened]
        return " ".join([self.type.value, *str_values])

    @override
    def __str__(self) -> str:
        return self.as_string()


# ------------------------------------------------------------------------------
# Path data
# ------------------------------------------------------------------------------


def commands_from_string(
    path: str, *, n: Precision = DEFAULT_PRECISION
) -> list[Command]:
    """
    Read SVG path data into absolute commands.

    Relative commands are made absolute, horizontal and vertical lines become
    lines, smooth curves get their reflected control points made explicit (only
    a preceding C/S or Q/T is reflected, never a curve made from an arc), and
    elliptical arcs are approximated by cubic curves (a degenerate arc whose
    end equals its start is dropped, as SVG renderers do).

    :raises ValueError: If the path data is malformed.
    """
    commands: list[Command] = []
    current: Point | None = None
    sub_path_start: Point | None = None
    previous: Command | None = None
    previous_key = "M"

    for raw in PathParser.parse(path):
        cmd, *args = raw
        values = [float(a) for a in args]
        key = cmd.upper()
        origin = current if cmd.islower() and current is not None else Point(0, 0)

        def pt(i: int) -> Point:
            return Point(origin.x + values[i], origin.y + values[i + 1])

        if key == "M":
            item = Command.move(current, pt(0))
            sub_path_start = item.end
            commands.append(item)
            current, previous, previous_key = item.end, item, key
            continue

        assert current is not None and sub_path_start is not None
        new_items: list[Command] = []
        match key:
            case "L":
                new_items.append(Command.line(current, pt(0)))
            case "H":
                x = values[0] + (current.x if cmd.islower() else 0)
                new_items.append(Command.line(current, Point(x, current.y)))
            case "V":
                y = values[0] + (current.y if cmd.islower() else 0)
                new_items.append(Command.line(current, Point(current.x, y)))
            case "C":
                points = (current, pt(0), pt(2), pt(4))
                new_items.append(Command(CommandType.CUBIC, points))
            case "S":
                c1 = current
                if previous is not None and previous_key in ("C", "S"):
                    c1 = current * 2 - previous.points[2]  # type: ignore[operator]
                points = (current, c1, pt(0), pt(2))
                new_items.append(Command(CommandType.CUBIC, points))
            case "Q":
                points = (current, pt(0), pt(2))
                new_items.append(Command(CommandType.QUADRATIC, points))
            case "T":
                c = current
                if previous is not None and previous_key in ("Q", "T"):
                    c = current * 2 - previous.points[1]  # type: ignore[operator]
                new_items.append(Command(CommandType.QUADRATIC, (current, c, pt(0))))
            case "A":
                rx, ry, rotation, large_arc, sweep = values[:5]
                start = current
                for c1, c2, end in arc_to_beziers(
                    current, rx, ry, rotation, bool(large_arc), bool(sweep), pt(5), n=n
                ):
                    new_items.append(Command(CommandType.CUBIC, (start, c1, c2, end)))
                    start = end
            case "Z":
                new_items.append(Command(CommandType.CLOSE, (current, sub_path_start)))
            case _:
                raise ValueError(f"Invalid SVG command type: {cmd!r}")

        commands.extend(new_items)
        if new_items:
            current, previous = new_items[-1].end, new_items[-1]
        previous_key = key

    return commands


def commands_to_string(
    commands: Sequence[Command], decimals: int | None = None, minify: bool = False
) -> str:
    """
    Serialize absolute commands to SVG path data.

    Without ``minify`` every command is written with its letter
    (``"M 0 0 L 10 0 Z"``). With ``minify``, repeated command letters are
    dropped, as are the lines following a move, and redundant spaces are
    removed.
    """
    grouped: list[tuple[str, Command, list[Command]]] = []
    for it in commands:
        t = it.type.value
        if minify and grouped and grouped[-1][0] == t != CommandType.CLOSE:
            grouped[-1][2].append(it)
            continue
        gtype = "L" if t == "M" else t
        grouped.append((gtype, it, []))

    out_parts: list[str] = []
    for _, item, trailing in grouped:
        s = item.as_string(decimals, minify, trailing)
        if minify:
            s = _minify_cmd_space.sub(r"\1", s)
            s = s.replace(" -", "-")
            s = _minify_dot_gap.sub(r"\1", s)
        out_parts.append(s)

    return "".join(out_parts) if minify else " ".join(out_parts)
