"""Document spans handed to the reformatter by its caller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple


@dataclass(frozen=True, slots=True)
class Region:
    """Half-open ``[start, end)`` span of document offsets."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError("Region end must be >= start")

    @classmethod
    def from_length(cls, start: int, length: int) -> "Region":
        return cls(start, start + length)

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def is_editable(self) -> bool:
        return self.start >= 0 and self.end > self.start

    def overlaps(self, other: "Region") -> bool:
        if not self.length or not other.length:
            return False
        return self.start < other.end and other.start < self.end


class OverlappingRegionsError(ValueError):
    """Raised when regions passed to one reformat pass overlap."""

    def __init__(self, first: Region, second: Region) -> None:
        super().__init__(
            f"Regions [{first.start}, {first.end}) and "
            f"[{second.start}, {second.end}) overlap"
        )
        self.first = first
        self.second = second


def ensure_disjoint(regions: Iterable[Region]) -> Tuple[Region, ...]:
    """Return ``regions`` unchanged after checking that no two overlap.

    Only regions that will be edited are compared: zero-length regions and
    regions starting before the document are skipped by the reformatter.
    """

    items = tuple(regions)
    ordered: List[Region] = sorted(
        (region for region in items if region.is_editable),
        key=lambda region: (region.start, region.end),
    )
    reach: Optional[Region] = None
    for current in ordered:
        if reach is not None and reach.overlaps(current):
            raise OverlappingRegionsError(reach, current)
        if reach is None or current.end > reach.end:
            reach = current
    return items


__all__ = ["Region", "OverlappingRegionsError", "ensure_disjoint"]
