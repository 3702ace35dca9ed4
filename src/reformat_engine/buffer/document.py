"""Live, mutable text document the reformatter patches in place."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import ContextManager, List, Optional

from reformat_engine.runtime import telemetry

from .errors import BufferMutationError, OutOfRangeError
from .line_index import LineIndex
from .undo import EditRecord, UndoEntry, UndoTimeline


class Position:
    """Offset that follows the text around it as the document changes.

    An insertion exactly at the position leaves it in place; a removal that
    spans it collapses it to the start of the removed range.
    """

    __slots__ = ("offset",)

    def __init__(self, offset: int) -> None:
        self.offset = offset

    def __int__(self) -> int:
        return self.offset

    def __repr__(self) -> str:
        return f"Position({self.offset})"

    def _on_insert(self, offset: int, length: int) -> None:
        if offset < self.offset:
            self.offset += length

    def _on_remove(self, offset: int, length: int) -> None:
        if self.offset >= offset + length:
            self.offset -= length
        elif self.offset > offset:
            self.offset = offset


class TextDocument:
    """Flat string storage with a lazily rebuilt line index.

    The document is the only thing the engine mutates. Edits go through
    ``insert_text``/``remove_text`` so live positions (the caret included)
    and the undo timeline stay in step with the text.
    """

    def __init__(
        self,
        text: str = "",
        *,
        name: str = "default",
        read_only: bool = False,
        undo: Optional[UndoTimeline] = None,
    ) -> None:
        self.name = name
        self.read_only = read_only
        self.undo_timeline = undo if undo is not None else UndoTimeline()
        self._text = text
        self._version = 0
        self._index: Optional[LineIndex] = None
        self._index_version = -1
        self._positions: List[Position] = []
        self._group: Optional[UndoEntry] = None
        self._group_depth = 0
        self._replaying = False
        self.caret = self.create_position(0)

    @property
    def text(self) -> str:
        return self._text

    @property
    def version(self) -> int:
        return self._version

    def __len__(self) -> int:
        return len(self._text)

    def line_index(self) -> LineIndex:
        if self._index is None or self._index_version != self._version:
            self._index = LineIndex.build(self._text)
            self._index_version = self._version
        return self._index

    def get_text(self, offset: int, length: int) -> str:
        self._check_range(offset, length)
        return self._text[offset : offset + length]

    def insert_text(self, offset: int, text: str) -> None:
        self._ensure_writable("insert")
        self._check_range(offset, 0)
        if not text:
            return
        self._text = self._text[:offset] + text + self._text[offset:]
        self._version += 1
        for position in self._positions:
            position._on_insert(offset, len(text))
        self._record(EditRecord("insert", offset, text))

    def remove_text(self, offset: int, length: int) -> None:
        self._ensure_writable("remove")
        self._check_range(offset, length)
        if length == 0:
            return
        removed = self._text[offset : offset + length]
        self._text = self._text[:offset] + self._text[offset + length :]
        self._version += 1
        for position in self._positions:
            position._on_remove(offset, length)
        self._record(EditRecord("remove", offset, removed))

    def create_position(self, offset: int) -> Position:
        self._check_range(offset, 0)
        position = Position(offset)
        self._positions.append(position)
        return position

    def release_position(self, position: Position) -> None:
        if position is self.caret:
            raise ValueError("The caret position cannot be released")
        self._positions.remove(position)

    def set_caret(self, offset: int) -> None:
        self._check_range(offset, 0)
        self.caret.offset = offset

    def compound(self, label: str) -> "CompoundEdit":
        """Group every edit made inside the block into one undo step."""

        return CompoundEdit(self, label)

    def undo(self) -> bool:
        entry = self.undo_timeline.undo()
        if entry is None:
            return False
        self._replay(reversed(entry.edits), invert=True)
        self.caret.offset = min(entry.caret_before, len(self._text))
        return True

    def redo(self) -> bool:
        entry = self.undo_timeline.redo()
        if entry is None:
            return False
        self._replay(entry.edits, invert=False)
        self.caret.offset = min(entry.caret_after, len(self._text))
        return True

    def _replay(self, edits, *, invert: bool) -> None:
        self._replaying = True
        try:
            for edit in edits:
                inserting = (edit.kind == "insert") != invert
                if inserting:
                    self.insert_text(edit.offset, edit.text)
                else:
                    self.remove_text(edit.offset, len(edit.text))
        finally:
            self._replaying = False

    def _record(self, edit: EditRecord) -> None:
        if self._replaying:
            return
        if self._group is not None:
            self._group.edits.append(edit)
            return
        self.undo_timeline.push(
            UndoEntry(
                label=edit.kind,
                edits=[edit],
                caret_before=self.caret.offset,
                caret_after=self.caret.offset,
            )
        )

    def _ensure_writable(self, action: str) -> None:
        if self.read_only:
            raise BufferMutationError(
                f"Cannot {action} text: document '{self.name}' is read-only",
                document=self.name,
            )

    def _check_range(self, offset: int, length: int) -> None:
        if offset < 0 or length < 0 or offset + length > len(self._text):
            raise OutOfRangeError(
                f"Range [{offset}, {offset + length}) outside document of "
                f"length {len(self._text)}",
                offset=offset,
            )


class CompoundEdit(AbstractContextManager["CompoundEdit"]):
    """Collects edits into a single undo entry; nested blocks join the outer one."""

    def __init__(self, document: TextDocument, label: str) -> None:
        self.document = document
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "CompoundEdit":
        document = self.document
        if document._group_depth == 0:
            document._group = UndoEntry(
                label=self.label, caret_before=document.caret.offset
            )
            self._span_cm = telemetry.span(
                name=f"document::{self.label}",
                component="document",
                metadata={"document": document.name},
            )
            self._span_cm.__enter__()
        document._group_depth += 1
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        document = self.document
        document._group_depth -= 1
        if document._group_depth == 0:
            entry = document._group
            document._group = None
            if entry is not None and entry.edits:
                entry.caret_after = document.caret.offset
                document.undo_timeline.push(entry)
            if self._span_cm is not None:
                self._span_cm.__exit__(exc_type, exc, tb)
        return False


__all__ = ["Position", "TextDocument", "CompoundEdit"]
