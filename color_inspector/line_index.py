"""Offset to line/column mapping over a file's text."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import List, Sequence, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .models import Range


def build_line_starts(text: str) -> List[int]:
    """Return the offset at which every line of `text` starts."""
    starts = [0]
    position = text.find("\n")
    while position != -1:
        starts.append(position + 1)
        position = text.find("\n", position + 1)
    return starts


def offset_to_line(starts: Sequence[int], offset: int) -> int:
    """Return the 0-based line containing `offset`."""
    return max(0, bisect_right(starts, offset) - 1)


def offset_to_column(starts: Sequence[int], offset: int) -> int:
    line = offset_to_line(starts, offset)
    return max(0, offset - starts[line])


@dataclass(frozen=True)
class LineIndex:
    """Line start table for one text, built once and queried by binary search."""

    text: str
    starts: tuple[int, ...]

    @classmethod
    def build(cls, text: str) -> "LineIndex":
        return cls(text=text, starts=tuple(build_line_starts(text)))

    @property
    def line_count(self) -> int:
        return len(self.starts)

    def line_of(self, offset: int) -> int:
        return offset_to_line(self.starts, offset)

    def column_of(self, offset: int) -> int:
        return offset_to_column(self.starts, offset)

    def line_start(self, line: int) -> int:
        return self.starts[line]

    def line_text(self, line: int) -> str:
        """Text of the 0-based `line` without its terminator."""
        start = self.starts[line]
        end = self.starts[line + 1] if line + 1 < len(self.starts) else len(self.text)
        return self.text[start:end].rstrip("\r\n")

    def lines(self) -> List[str]:
        return [self.line_text(line) for line in range(len(self.starts))]

    def range_of(self, start: int, end: int) -> "Range":
        from .models import Range

        return Range(
            line=self.line_of(start) + 1,
            start_col=self.column_of(start),
            end_col=self.column_of(end),
        )


__all__ = ["LineIndex", "build_line_starts", "offset_to_column", "offset_to_line"]
