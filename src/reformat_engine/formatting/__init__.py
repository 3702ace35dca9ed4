"""Formatter capability, code style preferences, and the reindent fallback."""

from .formatter import (
    CommandFormatter,
    FormatParseError,
    Formatter,
    FormatterUnavailableError,
)
from .preferences import CodeStyle, FormattingPreferences
from .reindent import plan_reindent, reindent

__all__ = [
    "Formatter",
    "FormatParseError",
    "FormatterUnavailableError",
    "CommandFormatter",
    "CodeStyle",
    "FormattingPreferences",
    "plan_reindent",
    "reindent",
]
