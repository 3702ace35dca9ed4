"""Applies line-anchored operations to a live document.

Line numbers are turned into offsets at the moment each operation runs,
never ahead of time. Combined with the descending order produced by
``build_script`` this means edits already applied (all below the current
one) cannot shift the offsets being resolved.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from reformat_engine.buffer import OutOfRangeError, TextDocument
from reformat_engine.diff import split_lines

from .operations import DeleteRange, EditOperation, InsertAt, ReplaceRange


@dataclass(frozen=True, slots=True)
class LineWindow:
    """Maps line numbers relative to a span of the document.

    Line 1 begins at ``start_offset``, line ``line_count + 1`` at
    ``end_offset``; lines in between follow the document's own line starts.
    """

    start_offset: int
    end_offset: int
    line_count: int

    def __post_init__(self) -> None:
        if self.start_offset < 0 or self.end_offset < self.start_offset:
            raise ValueError("LineWindow offsets must satisfy 0 <= start <= end")
        if self.line_count < 0:
            raise ValueError("LineWindow line_count must be >= 0")

    @classmethod
    def over(cls, start_offset: int, text: str) -> "LineWindow":
        return cls(start_offset, start_offset + len(text), len(split_lines(text)))


def line_start(
    document: TextDocument, line: int, window: Optional[LineWindow] = None
) -> int:
    """Resolve ``line`` to an offset in the document as it is right now."""

    if window is None:
        index = document.line_index()
        if line == index.line_count + 1:
            return len(document)
        return index.line_start(line)

    if line < 1 or line > window.line_count + 1:
        raise OutOfRangeError(
            f"Line {line} outside window of {window.line_count} lines", line=line
        )
    if line == 1:
        offset = window.start_offset
    elif line == window.line_count + 1:
        offset = window.end_offset
    else:
        index = document.line_index()
        base = index.line_of(window.start_offset)
        offset = index.line_start(base + line - 1)
    if offset > len(document):
        raise OutOfRangeError(
            f"Line {line} resolves past the end of the document", offset=offset, line=line
        )
    return offset


def apply(
    document: TextDocument,
    operation: EditOperation,
    window: Optional[LineWindow] = None,
) -> None:
    """Perform one operation; raises ``OutOfRangeError`` if it cannot be placed."""

    if isinstance(operation, InsertAt):
        document.insert_text(line_start(document, operation.line, window), operation.text)
        return

    if not isinstance(operation, (DeleteRange, ReplaceRange)):
        raise TypeError(f"Unsupported edit operation {operation!r}")

    start = line_start(document, operation.start_line, window)
    end = line_start(document, operation.end_line + 1, window)
    if end < start:
        raise OutOfRangeError(
            f"Lines {operation.start_line}-{operation.end_line} resolve to an "
            f"inverted span [{start}, {end})",
            offset=start,
            line=operation.start_line,
        )
    document.remove_text(start, end - start)
    if isinstance(operation, ReplaceRange) and operation.text:
        document.insert_text(start, operation.text)


def apply_script(
    document: TextDocument,
    operations: Iterable[EditOperation],
    window: Optional[LineWindow] = None,
) -> int:
    """Apply operations in the given order and return how many ran."""

    applied = 0
    for operation in operations:
        apply(document, operation, window)
        applied += 1
    return applied


__all__ = ["LineWindow", "line_start", "apply", "apply_script"]
