from __future__ import annotations

import pytest

from reformat_engine.diff import DiffEntry, DiffKind, LineRange, diff
from reformat_engine.edits import (
    DeleteRange,
    InsertAt,
    ReplaceRange,
    build_script,
    operation_for,
)


def make_entry(
    kind: DiffKind, original: LineRange, formatted: LineRange, text: str = ""
) -> DiffEntry:
    return DiffEntry(kind=kind, original=original, formatted=formatted, formatted_text=text)


def test_each_kind_maps_to_its_operation() -> None:
    add = make_entry(DiffKind.ADD, LineRange.before(4), LineRange(4, 5), "x\ny\n")
    delete = make_entry(DiffKind.DELETE, LineRange(2, 3), LineRange.before(2))
    change = make_entry(DiffKind.CHANGE, LineRange(7, 7), LineRange(8, 9), "z\n")

    assert operation_for(add) == InsertAt(4, "x\ny\n")
    assert operation_for(delete) == DeleteRange(2, 3)
    assert operation_for(change) == ReplaceRange(7, 7, "z\n")


def test_script_is_sorted_furthest_first() -> None:
    entries = [
        make_entry(DiffKind.ADD, LineRange.before(1), LineRange(1, 1), "header\n"),
        make_entry(DiffKind.DELETE, LineRange(3, 4), LineRange.before(3)),
        make_entry(DiffKind.CHANGE, LineRange(6, 6), LineRange(4, 4), "six\n"),
    ]

    script = build_script(entries)

    assert [operation.anchor for operation in script] == [6, 3, 1]
    assert script == [
        ReplaceRange(6, 6, "six\n"),
        DeleteRange(3, 4),
        InsertAt(1, "header\n"),
    ]


def test_script_from_diff() -> None:
    original = "a\nb\nc\nd\ne\n"
    formatted = "a\nB\nc\nd\nE\nf\n"

    assert build_script(diff(original, formatted)) == [
        ReplaceRange(5, 5, "E\nf\n"),
        ReplaceRange(2, 2, "B\n"),
    ]


def test_empty_entries_give_empty_script() -> None:
    assert build_script([]) == []


def test_operations_validate_lines() -> None:
    with pytest.raises(ValueError):
        InsertAt(0, "x")
    with pytest.raises(ValueError):
        InsertAt(1, "")
    with pytest.raises(ValueError):
        DeleteRange(3, 2)
    with pytest.raises(ValueError):
        ReplaceRange(0, 1, "x")
