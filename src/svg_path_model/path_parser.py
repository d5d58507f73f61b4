# This file is part of svg-path-model.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations

import re
from typing import Final

_argument_counts: Final = {
    "M": 2,
    "L": 2,
    "H": 1,
    "V": 1,
    "Z": 0,
    "C": 6,
    "S": 4,
    "Q": 4,
    "T": 2,
    "A": 7,
}
_number: Final = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_flag: Final = re.compile(r"[01]")
_separators: Final = re.compile(r"[\s,]*")
_arc_flag_indices: Final = (3, 4)


class _Scanner:
    """Cursor over path data that yields command letters and argument groups."""

    def __init__(self, path: str) -> None:
        self.path: str = path
        self.pos: int = 0

    def _skip_separators(self) -> None:
        match = _separators.match(self.path, self.pos)
        assert match is not None
        self.pos = match.end()

    def command(self) -> str | None:
        """Next command letter, or ``None`` at the end of the input."""
        self._skip_separators()
        if self.pos >= len(self.path):
            return None
        c = self.path[self.pos]
        if c.upper() not in _argument_counts:
            raise ValueError(f"malformed path (unexpected {c!r} at {self.pos})")
        self.pos += 1
        return c

    def arguments(self, cmd: str) -> list[str] | None:
        """
        Read one complete argument group for ``cmd``.

        :return: The argument strings, or ``None`` if no number follows.
        :raises ValueError: If the group is incomplete.
        """
        self._skip_separators()
        if not _number.match(self.path, self.pos):
            return None

        values: list[str] = []
        for idx in range(_argument_counts[cmd]):
            if idx > 0:
                self._skip_separators()
            pattern = _flag if cmd == "A" and idx in _arc_flag_indices else _number
            match = pattern.match(self.path, self.pos)
            if match is None:
                raise ValueError(
                    f"malformed path (expected {_argument_counts[cmd]} arguments "
                    f"for {cmd!r}, got {len(values)} at {self.pos})"
                )
            values.append(match.group())
            self.pos = match.end()
        return values


class PathParser:
    """Tokenizer for SVG path data."""

    @staticmethod
    def parse(path: str) -> list[list[str]]:
        """
        Split SVG path data into ``[command, *arguments]`` items.

        Implicitly repeated commands are expanded, with the repetitions of a
        move becoming lines of the same relativity. Argument values are kept
        as the strings found in the input.

        :raises ValueError: If the path is malformed.
        """
        scanner = _Scanner(path)
        items: list[list[str]] = []

        while (cmd := scanner.command()) is not None:
            if not items and cmd.upper() != "M":
                raise ValueError("malformed path (must start with a move command)")

            key = cmd.upper()
            if _argument_counts[key] == 0:
                items.append([cmd])
                continue

            current, groups = cmd, 0
            while (values := scanner.arguments(current.upper())) is not None:
                items.append([current, *values])
                groups += 1
                if key == "M":
                    current = "l" if cmd.islower() else "L"
            if groups == 0:
                raise ValueError(f"malformed path (missing arguments for {cmd!r})")

        return items
