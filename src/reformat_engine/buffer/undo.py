"""Undo/redo history for document edits."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True, slots=True)
class EditRecord:
    """Primitive change: ``text`` inserted at or removed from ``offset``."""

    kind: str  # "insert" or "remove"
    offset: int
    text: str


@dataclass(slots=True)
class UndoEntry:
    label: str
    edits: List[EditRecord] = field(default_factory=list)
    caret_before: int = 0
    caret_after: int = 0


class UndoTimeline:
    """Linear undo/redo history; one entry per compound edit."""

    def __init__(self) -> None:
        self._entries: List[UndoEntry] = []
        self._index: int = -1

    def push(self, entry: UndoEntry) -> None:
        if self._index < len(self._entries) - 1:
            self._entries = self._entries[: self._index + 1]
        self._entries.append(entry)
        self._index = len(self._entries) - 1

    def can_undo(self) -> bool:
        return self._index >= 0

    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def undo(self) -> Optional[UndoEntry]:
        if not self.can_undo():
            return None
        entry = self._entries[self._index]
        self._index -= 1
        return entry

    def redo(self) -> Optional[UndoEntry]:
        if not self.can_redo():
            return None
        self._index += 1
        return self._entries[self._index]

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["EditRecord", "UndoEntry", "UndoTimeline"]
