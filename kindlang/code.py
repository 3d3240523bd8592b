"""Locating markers inside source code by line and column."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from functools import cmp_to_key

from wcwidth import wcwidth

from kindlang.diagnostics import Marker
from kindlang.span import Pos, SyntaxCtxIndex

MarkerSpan = tuple["Point", "Point", Marker]


@dataclass(frozen=True)
class Point:
    """A zero-based line and byte column."""

    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line + 1}:{self.column + 1}"


@dataclass(frozen=True)
class Spaces:
    """Display width of a piece of text and the number of tabs in it."""

    width: int
    tabs: int


@dataclass(frozen=True)
class LineGuide:
    """Byte offsets of line ends, to turn an index into a line and column."""

    offsets: tuple[int, ...]

    @classmethod
    def from_code(cls, code: str) -> LineGuide:
        offsets = []
        size = 0
        for chr_ in code:
            size += len(chr_.encode("utf-8"))
            if chr_ == "\n":
                offsets.append(size)
        offsets.append(size)
        return cls(tuple(offsets))

    def find(self, pos: Pos) -> Point:
        """The line and column of a byte index."""
        line = bisect_right(self.offsets, pos.index)
        if line >= len(self.offsets):
            line = len(self.offsets) - 1
        line_start = 0 if line == 0 else self.offsets[line - 1]
        return Point(line, pos.index - line_start)

    def __len__(self) -> int:
        return len(self.offsets)


def count_width(text: str) -> Spaces:
    """Display width of ``text`` (control characters count as zero) and its tabs."""
    width = sum(max(wcwidth(chr_), 0) for chr_ in text)
    return Spaces(width, text.count("\t"))


def _compare_markers(x: Marker, y: Marker) -> int:
    a, b = x.position.start, y.position.end
    return (a > b) - (a < b)


def group_markers(markers: list[Marker]) -> dict[SyntaxCtxIndex, list[Marker]]:
    """Group markers by syntax context and sort each group by position."""
    groups: dict[SyntaxCtxIndex, list[Marker]] = {}
    for marker in markers:
        groups.setdefault(marker.position.ctx, []).append(marker)
    return {
        ctx: sorted(group, key=cmp_to_key(_compare_markers)) for ctx, group in groups.items()
    }


def group_marker_lines(
    guide: LineGuide, markers: list[Marker]
) -> tuple[set[int], dict[int, list[MarkerSpan]], list[MarkerSpan]]:
    """Lines to show, markers by starting line, and markers spanning several lines."""
    lines_set: set[int] = set()
    by_line: dict[int, list[MarkerSpan]] = {}
    multi_line: list[MarkerSpan] = []

    for marker in markers:
        start = guide.find(marker.position.start)
        end = guide.find(marker.position.end)
        by_line.setdefault(start.line, []).append((start, end, marker))

        if end.line != start.line:
            multi_line.append((start, end, marker))
        elif marker.main:
            # Show some context around the main marker.
            first = max(start.line - 1, 0)
            last = len(guide) - 1 if first + 2 >= len(guide) else first + 2
            lines_set.update(range(first, last + 1))

        if end.line - start.line <= 3:
            lines_set.update(range(start.line, end.line + 1))
        else:
            lines_set.add(start.line)
            lines_set.add(end.line)

    return lines_set, by_line, multi_line