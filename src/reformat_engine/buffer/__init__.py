"""Document abstractions: text storage, line index, regions, undo, and locking."""

from .document import CompoundEdit, Position, TextDocument
from .errors import BufferMutationError, OutOfRangeError
from .line_index import LineIndex
from .lock import ReformatLock, ThreadLock, hold
from .region import OverlappingRegionsError, Region, ensure_disjoint
from .undo import EditRecord, UndoEntry, UndoTimeline

__all__ = [
    "TextDocument",
    "CompoundEdit",
    "Position",
    "LineIndex",
    "Region",
    "OverlappingRegionsError",
    "ensure_disjoint",
    "UndoTimeline",
    "UndoEntry",
    "EditRecord",
    "ReformatLock",
    "ThreadLock",
    "hold",
    "OutOfRangeError",
    "BufferMutationError",
]
