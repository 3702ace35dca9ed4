"""Dataclasses describing line diffs between an original and a formatted text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

_INNER_WHITESPACE = re.compile(r"(?<=\S)[ \t\f\v]+(?=\S)")


class DiffKind(str, Enum):
    ADD = "add"
    DELETE = "delete"
    CHANGE = "change"


@dataclass(frozen=True, slots=True)
class LineRange:
    """Inclusive, 1-based line span; empty when ``end < start``.

    An empty range still carries a position: ``LineRange(k, k - 1)`` sits
    right before line ``k``.
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 1:
            raise ValueError("LineRange start must be >= 1")
        if self.end < self.start - 1:
            raise ValueError("LineRange end must be >= start - 1")

    @classmethod
    def before(cls, line: int) -> "LineRange":
        return cls(line, line - 1)

    @property
    def is_empty(self) -> bool:
        return self.end < self.start

    def __len__(self) -> int:
        return self.end - self.start + 1


@dataclass(frozen=True, slots=True)
class DiffEntry:
    """Classified correspondence between original and formatted lines."""

    kind: DiffKind
    original: LineRange
    formatted: LineRange
    formatted_text: str = ""

    def __post_init__(self) -> None:
        if self.kind in (DiffKind.DELETE, DiffKind.CHANGE) and self.original.is_empty:
            raise ValueError(f"{self.kind.name} entry needs original lines")
        if self.kind is DiffKind.ADD and not self.formatted_text:
            raise ValueError("ADD entry needs formatted text")
        if self.kind is DiffKind.DELETE and self.formatted_text:
            raise ValueError("DELETE entry cannot carry formatted text")


@dataclass(frozen=True, slots=True)
class DiffOptions:
    """Comparison-only line normalization switches."""

    ignore_case: bool = False
    ignore_inner_whitespace: bool = False
    ignore_leading_and_trailing_whitespace: bool = False

    def normalize(self, line: str) -> str:
        if self.ignore_leading_and_trailing_whitespace:
            line = line.strip()
        if self.ignore_inner_whitespace:
            line = _INNER_WHITESPACE.sub(" ", line)
        if self.ignore_case:
            line = line.casefold()
        return line


__all__ = ["DiffKind", "LineRange", "DiffEntry", "DiffOptions"]
