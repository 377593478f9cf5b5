"""Line/column to absolute offset conversion.

Line terminators may be ``\\n``, ``\\r`` or a ``\\r\\n`` / ``\\n\\r`` pair,
mixed freely in one document.  Two identical terminators in a row always
count as two line breaks.
"""

from __future__ import annotations

from bisect import bisect_right

from changelog_lint.model import Offset


def find_line_starts(text: str) -> list[int]:
    """Return the offset of the first character of every line."""
    starts = [0]
    seen_cr = False
    seen_lf = False
    for i, ch in enumerate(text):
        if ch == "\n":
            if seen_lf:
                starts.append(i)
                seen_cr = False
            seen_lf = True
        elif ch == "\r":
            if seen_cr:
                starts.append(i)
                seen_lf = False
            seen_cr = True
        elif seen_lf or seen_cr:
            starts.append(i)
            seen_lf = False
            seen_cr = False
    return starts


class LineIndex:
    """Maps 1-based ``(line, column)`` pairs onto 0-based offsets of *text*."""

    __slots__ = ("text", "_starts")

    def __init__(self, text: str) -> None:
        self.text = text
        self._starts = find_line_starts(text)

    @property
    def line_count(self) -> int:
        return len(self._starts)

    def line_start(self, line: int) -> int:
        if not 1 <= line <= len(self._starts):
            raise IndexError(f"line {line} out of range 1..{len(self._starts)}")
        return self._starts[line - 1]

    def line_end(self, line: int) -> int:
        """Inclusive offset of the last character of *line*, terminator included."""
        if line < self.line_count:
            return self.line_start(line + 1) - 1
        self.line_start(line)
        return len(self.text) - 1

    def line_text(self, line: int) -> str:
        """Content of *line* without its terminator."""
        return self.text[self.line_start(line):self.line_end(line) + 1].rstrip("\r\n")

    def lines(self) -> list[str]:
        return [self.line_text(n) for n in range(1, self.line_count + 1)]

    def offset(self, line: int, column: int) -> int:
        return self.line_start(line) + (column - 1)

    def position(self, offset: int) -> tuple[int, int]:
        """Inverse of :meth:`offset`: the ``(line, column)`` holding *offset*."""
        if not 0 <= offset <= len(self.text):
            raise IndexError(f"offset {offset} out of range 0..{len(self.text)}")
        line = bisect_right(self._starts, offset)
        return line, offset - self._starts[line - 1] + 1

    def block_range(self, start_line: int, end_line: int) -> Offset:
        """Whole-line range covering *start_line* through *end_line*."""
        return Offset(self.line_start(start_line), self.line_end(end_line))
