"""Line-anchored document edit operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from reformat_engine.diff import DiffEntry, DiffKind


@dataclass(frozen=True, slots=True)
class InsertAt:
    """Insert ``text`` at the start of ``line``."""

    line: int
    text: str

    def __post_init__(self) -> None:
        if self.line < 1:
            raise ValueError("InsertAt line must be >= 1")
        if not self.text:
            raise ValueError("InsertAt text cannot be empty")

    @property
    def anchor(self) -> int:
        return self.line


@dataclass(frozen=True, slots=True)
class DeleteRange:
    """Remove lines ``start_line`` through ``end_line`` including the last newline."""

    start_line: int
    end_line: int

    def __post_init__(self) -> None:
        _check_span(self.start_line, self.end_line)

    @property
    def anchor(self) -> int:
        return self.start_line


@dataclass(frozen=True, slots=True)
class ReplaceRange:
    """Swap lines ``start_line`` through ``end_line`` for ``text``."""

    start_line: int
    end_line: int
    text: str

    def __post_init__(self) -> None:
        _check_span(self.start_line, self.end_line)

    @property
    def anchor(self) -> int:
        return self.start_line


EditOperation = Union[InsertAt, DeleteRange, ReplaceRange]


def _check_span(start_line: int, end_line: int) -> None:
    if start_line < 1:
        raise ValueError("start_line must be >= 1")
    if end_line < start_line:
        raise ValueError("end_line must be >= start_line")


def operation_for(entry: DiffEntry) -> EditOperation:
    """Translate one diff entry into the edit that realizes it."""

    if entry.kind is DiffKind.ADD:
        return InsertAt(entry.original.start, entry.formatted_text)
    if entry.kind is DiffKind.DELETE:
        return DeleteRange(entry.original.start, entry.original.end)
    return ReplaceRange(entry.original.start, entry.original.end, entry.formatted_text)


__all__ = [
    "InsertAt",
    "DeleteRange",
    "ReplaceRange",
    "EditOperation",
    "operation_for",
]
