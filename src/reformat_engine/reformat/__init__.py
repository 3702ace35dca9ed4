"""Region reformatting pass and the host-facing task factory."""

from .reformatter import (
    ReformatReport,
    RegionOutcome,
    RegionReformatter,
    RegionState,
    Reindenter,
)
from .task import (
    PARSER_LOCK,
    SCALA_MIME_TYPE,
    ReformatContext,
    ReformatTask,
    ReformatTaskFactory,
)

__all__ = [
    "RegionReformatter",
    "RegionState",
    "RegionOutcome",
    "ReformatReport",
    "Reindenter",
    "ReformatContext",
    "ReformatTask",
    "ReformatTaskFactory",
    "SCALA_MIME_TYPE",
    "PARSER_LOCK",
]
