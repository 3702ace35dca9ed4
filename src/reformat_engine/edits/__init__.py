"""Edit scripts derived from line diffs and their application to documents."""

from .applier import LineWindow, apply, apply_script, line_start
from .operations import (
    DeleteRange,
    EditOperation,
    InsertAt,
    ReplaceRange,
    operation_for,
)
from .script import build_script

__all__ = [
    "InsertAt",
    "DeleteRange",
    "ReplaceRange",
    "EditOperation",
    "operation_for",
    "build_script",
    "LineWindow",
    "line_start",
    "apply",
    "apply_script",
]
