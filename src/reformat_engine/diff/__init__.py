"""Line diffing between an original text and its formatted counterpart."""

from .engine import diff, split_lines
from .models import DiffEntry, DiffKind, DiffOptions, LineRange

__all__ = [
    "diff",
    "split_lines",
    "DiffEntry",
    "DiffKind",
    "DiffOptions",
    "LineRange",
]
