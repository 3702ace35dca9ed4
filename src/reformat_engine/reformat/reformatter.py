"""Region-by-region reformatting of a live document.

Each region goes through ``PENDING -> FORMATTING`` and then either
``DIFFING -> APPLYING -> DONE`` or, when the formatter cannot parse it,
``PARSE_FAILED -> FALLBACK_REINDENT -> DONE``. Regions are visited bottom
of the document first, and each region's edit script is applied bottom
first too, so nothing that still has to be edited ever moves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, List, Optional

from reformat_engine.buffer import (
    OutOfRangeError,
    ReformatLock,
    Region,
    TextDocument,
    ensure_disjoint,
    hold,
)
from reformat_engine.diff import DiffOptions, diff
from reformat_engine.edits import LineWindow, apply, build_script
from reformat_engine.formatting import (
    CodeStyle,
    FormatParseError,
    Formatter,
    FormattingPreferences,
    reindent,
)
from reformat_engine.runtime import telemetry

Reindenter = Callable[[TextDocument, Region, CodeStyle], int]


class RegionState(str, Enum):
    PENDING = "pending"
    FORMATTING = "formatting"
    PARSE_FAILED = "parse_failed"
    FALLBACK_REINDENT = "fallback_reindent"
    DIFFING = "diffing"
    APPLYING = "applying"
    DONE = "done"
    ABANDONED = "abandoned"
    SKIPPED = "skipped"


@dataclass(slots=True)
class RegionOutcome:
    """What happened to one region during a pass."""

    region: Region
    state: RegionState = RegionState.PENDING
    operations: int = 0
    applied: int = 0
    fallback: bool = False
    error: Optional[str] = None


@dataclass(slots=True)
class ReformatReport:
    """Outcomes in the order the regions were supplied."""

    outcomes: List[RegionOutcome] = field(default_factory=list)

    @property
    def completed(self) -> bool:
        return all(
            outcome.state in (RegionState.DONE, RegionState.SKIPPED)
            for outcome in self.outcomes
        )

    @property
    def fallbacks(self) -> List[RegionOutcome]:
        return [outcome for outcome in self.outcomes if outcome.fallback]

    @property
    def abandoned(self) -> List[RegionOutcome]:
        return [o for o in self.outcomes if o.state is RegionState.ABANDONED]


class RegionReformatter:
    """Formats regions with an external formatter and patches only what changed."""

    def __init__(
        self,
        document: TextDocument,
        formatter: Formatter,
        *,
        style: Optional[CodeStyle] = None,
        preferences: Optional[FormattingPreferences] = None,
        diff_options: Optional[DiffOptions] = None,
        reindenter: Reindenter = reindent,
        lock: Optional[ReformatLock] = None,
        logger_name: Optional[str] = None,
    ) -> None:
        self.document = document
        self.formatter = formatter
        self.style = style or CodeStyle()
        self.preferences = preferences or FormattingPreferences.from_code_style(
            self.style
        )
        self.diff_options = diff_options or DiffOptions()
        self.reindenter = reindenter
        self.lock = lock
        self._logger_name = logger_name

    def reformat(self, regions: Iterable[Region]) -> ReformatReport:
        """Reformat ``regions`` in place.

        Raises ``OverlappingRegionsError`` before touching the document if
        two regions overlap. A ``BufferMutationError`` aborts the pass and
        leaves already processed regions as they are.
        """

        items = ensure_disjoint(regions)
        report = ReformatReport([RegionOutcome(region) for region in items])
        order = sorted(
            range(len(items)), key=lambda i: (items[i].start, i), reverse=True
        )

        with hold(self.lock), telemetry.span(
            "reformat::pass",
            logger_name=self._logger_name,
            component="reformat",
            metadata={"document": self.document.name, "regions": len(items)},
        ), self.document.compound("reformat"):
            for position in order:
                self._process(report.outcomes[position])

        telemetry.record_event(
            "reformat.pass",
            data={
                "document": self.document.name,
                "regions": len(items),
                "fallbacks": len(report.fallbacks),
                "abandoned": len(report.abandoned),
            },
            logger_name=self._logger_name,
        )
        return report

    def _process(self, outcome: RegionOutcome) -> None:
        region = outcome.region
        if not region.is_editable:
            outcome.state = RegionState.SKIPPED
            return

        outcome.state = RegionState.FORMATTING
        try:
            text = self.document.get_text(region.start, region.length)
        except OutOfRangeError as exc:
            self._abandon(outcome, exc)
            return

        try:
            formatted = self.formatter(text, self.preferences)
        except FormatParseError as exc:
            outcome.error = str(exc)
            formatted = ""

        if not formatted:
            outcome.state = RegionState.PARSE_FAILED
            self._fallback(outcome)
            return

        outcome.state = RegionState.DIFFING
        script = build_script(diff(text, formatted, self.diff_options))
        outcome.operations = len(script)

        outcome.state = RegionState.APPLYING
        window = LineWindow.over(region.start, text)
        for operation in script:
            try:
                apply(self.document, operation, window)
            except OutOfRangeError as exc:
                self._abandon(outcome, exc)
                return
            outcome.applied += 1
        outcome.state = RegionState.DONE

    def _fallback(self, outcome: RegionOutcome) -> None:
        outcome.state = RegionState.FALLBACK_REINDENT
        outcome.fallback = True
        telemetry.record_event(
            "reformat.fallback",
            level="warning",
            data={
                "start": outcome.region.start,
                "length": outcome.region.length,
                "reason": outcome.error or "empty formatter output",
            },
            logger_name=self._logger_name,
        )
        outcome.applied = self.reindenter(self.document, outcome.region, self.style)
        outcome.state = RegionState.DONE

    def _abandon(self, outcome: RegionOutcome, exc: OutOfRangeError) -> None:
        outcome.state = RegionState.ABANDONED
        outcome.error = str(exc)
        telemetry.record_event(
            "reformat.abandoned",
            level="warning",
            data={
                "start": outcome.region.start,
                "applied": outcome.applied,
                "operations": outcome.operations,
                "reason": str(exc),
            },
            logger_name=self._logger_name,
        )


__all__ = [
    "RegionState",
    "RegionOutcome",
    "ReformatReport",
    "RegionReformatter",
    "Reindenter",
]
