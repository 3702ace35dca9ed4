"""Line <-> offset resolution for document text."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import Tuple

from .errors import OutOfRangeError


@dataclass(frozen=True, slots=True)
class LineIndex:
    """Start offsets of every line in a text snapshot.

    Lines are 1-based and split on ``\\n`` only. A text ending with a newline
    has a trailing empty line, so ``"a\\n"`` has two lines and line 2 starts
    at offset 2. The end offset of a line includes its newline.
    """

    starts: Tuple[int, ...]
    length: int

    @classmethod
    def build(cls, text: str) -> "LineIndex":
        starts = [0]
        position = text.find("\n")
        while position != -1:
            starts.append(position + 1)
            position = text.find("\n", position + 1)
        return cls(starts=tuple(starts), length=len(text))

    @property
    def line_count(self) -> int:
        return len(self.starts)

    def line_start(self, line: int) -> int:
        if line < 1 or line > self.line_count:
            raise OutOfRangeError(f"Line {line} out of range", line=line)
        return self.starts[line - 1]

    def line_end(self, line: int) -> int:
        if line < 1 or line > self.line_count:
            raise OutOfRangeError(f"Line {line} out of range", line=line)
        if line == self.line_count:
            return self.length
        return self.starts[line]

    def line_of(self, offset: int) -> int:
        if offset < 0 or offset > self.length:
            raise OutOfRangeError(f"Offset {offset} out of range", offset=offset)
        return bisect_right(self.starts, offset)


__all__ = ["LineIndex"]
