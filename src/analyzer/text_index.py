"""Offset <-> (line, column) conversion over a single text."""
from bisect import bisect_right
from typing import List

from .models import Position, SourceRange


class TextIndex:
    """Maps absolute character offsets to zero-based line/column positions.

    Lines are split on ``\\n`` only, so a ``\\r`` before a newline stays part
    of the preceding line's columns.
    """

    def __init__(self, text: str):
        self.text = text
        self.line_starts: List[int] = [0]
        for offset, char in enumerate(text):
            if char == '\n':
                self.line_starts.append(offset + 1)

    @property
    def line_count(self) -> int:
        return len(self.line_starts)

    def position_at(self, offset: int) -> Position:
        """Convert an offset to a Position, clamping to the text bounds."""
        offset = max(0, min(offset, len(self.text)))
        line = bisect_right(self.line_starts, offset) - 1
        return Position(line, offset - self.line_starts[line])

    def offset_at(self, position: Position) -> int:
        """Convert a Position back to an offset, clamping to its line."""
        line = max(0, min(position.line, self.line_count - 1))
        line_start = self.line_starts[line]
        line_end = self.line_end(line)
        return max(line_start, min(line_start + position.column, line_end))

    def range_of(self, start_offset: int, end_offset: int) -> SourceRange:
        return SourceRange(self.position_at(start_offset), self.position_at(end_offset))

    def line_end(self, line: int) -> int:
        """Offset of the newline ending ``line`` (or end of text)."""
        if line + 1 < self.line_count:
            return self.line_starts[line + 1] - 1
        return len(self.text)

    def line_text(self, line: int) -> str:
        return self.text[self.line_starts[line]:self.line_end(line)]
