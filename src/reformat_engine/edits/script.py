"""Turns diff entries into an edit script applied bottom-up."""

from __future__ import annotations

from typing import Iterable, List

from reformat_engine.diff import DiffEntry

from .operations import EditOperation, operation_for


def build_script(entries: Iterable[DiffEntry]) -> List[EditOperation]:
    """Return one operation per entry, furthest from the start first.

    Applying operations in this order keeps every pending operation's line
    numbers valid: nothing above a line has moved when it is edited.
    """

    indexed = [(index, operation_for(entry)) for index, entry in enumerate(entries)]
    indexed.sort(key=lambda item: (item[1].anchor, item[0]), reverse=True)
    return [operation for _, operation in indexed]


__all__ = ["build_script"]
