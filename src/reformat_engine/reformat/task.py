"""Reformat tasks handed out to the host editor per document."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from reformat_engine.buffer import ReformatLock, Region, TextDocument, ThreadLock
from reformat_engine.formatting import CodeStyle, Formatter, FormattingPreferences

from .reformatter import ReformatReport, RegionReformatter

SCALA_MIME_TYPE = "text/x-scala"

# Shared by every Scala task so reformatting never races the parser.
PARSER_LOCK = ThreadLock()


@dataclass(slots=True)
class ReformatContext:
    """Document plus the regions the host wants reformatted."""

    document: TextDocument
    regions: List[Region] = field(default_factory=list)
    mime_type: str = SCALA_MIME_TYPE


class ReformatTask:
    def __init__(
        self,
        context: ReformatContext,
        formatter: Formatter,
        *,
        style: Optional[CodeStyle] = None,
        lock: Optional[ReformatLock] = None,
        logger_name: Optional[str] = None,
    ) -> None:
        self.context = context
        self.formatter = formatter
        self.style = style or CodeStyle.from_env()
        self._lock = lock or PARSER_LOCK
        self._logger_name = logger_name

    def preferences(self) -> FormattingPreferences:
        return FormattingPreferences.from_code_style(self.style)

    def reformat_lock(self) -> Optional[ReformatLock]:
        """Lock held for the whole pass; only Scala sources need one."""

        if self.context.mime_type == SCALA_MIME_TYPE:
            return self._lock
        return None

    def reformat(self) -> ReformatReport:
        reformatter = RegionReformatter(
            self.context.document,
            self.formatter,
            style=self.style,
            preferences=self.preferences(),
            lock=self.reformat_lock(),
            logger_name=self._logger_name,
        )
        return reformatter.reformat(self.context.regions)


class ReformatTaskFactory:
    """Creates tasks for documents whose mime type the formatter understands."""

    def __init__(
        self,
        formatter: Formatter,
        *,
        mime_types: Iterable[str] = (SCALA_MIME_TYPE,),
        style: Optional[CodeStyle] = None,
        lock: Optional[ReformatLock] = None,
        logger_name: Optional[str] = None,
    ) -> None:
        self.formatter = formatter
        self.mime_types = frozenset(mime_types)
        self.style = style
        self.lock = lock
        self._logger_name = logger_name

    def create_task(self, context: ReformatContext) -> Optional[ReformatTask]:
        if context.mime_type not in self.mime_types:
            return None
        return ReformatTask(
            context,
            self.formatter,
            style=self.style,
            lock=self.lock,
            logger_name=self._logger_name,
        )


__all__ = [
    "SCALA_MIME_TYPE",
    "PARSER_LOCK",
    "ReformatContext",
    "ReformatTask",
    "ReformatTaskFactory",
]
