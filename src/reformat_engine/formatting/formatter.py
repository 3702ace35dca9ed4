"""The external formatter capability and a command line implementation."""

from __future__ import annotations

import subprocess
from typing import Optional, Protocol, Sequence

from reformat_engine.runtime import telemetry

from .preferences import FormattingPreferences


class FormatParseError(RuntimeError):
    """Raised by a formatter that cannot parse the text it was given."""

    def __init__(self, message: str, *, details: str = "") -> None:
        super().__init__(message)
        self.details = details


class FormatterUnavailableError(RuntimeError):
    """Raised when the formatter itself cannot be run."""


class Formatter(Protocol):
    """Pretty-printer used by the reformatter: text in, formatted text out."""

    def __call__(self, text: str, preferences: FormattingPreferences) -> str:
        """Return ``text`` formatted or raise ``FormatParseError``."""
        ...


class CommandFormatter:
    """Runs a formatter executable that reads stdin and writes stdout.

    Preferences are appended to ``argv`` as scalariform-style options unless
    ``pass_preferences`` is off. A non-zero exit status is reported as a
    parse failure. No timeout is applied unless one is given.
    """

    def __init__(
        self,
        argv: Sequence[str],
        *,
        pass_preferences: bool = True,
        timeout: Optional[float] = None,
        encoding: str = "utf-8",
        logger_name: Optional[str] = None,
    ) -> None:
        if not argv:
            raise ValueError("argv cannot be empty")
        self.argv = tuple(argv)
        self.pass_preferences = pass_preferences
        self.timeout = timeout
        self.encoding = encoding
        self._logger_name = logger_name

    @classmethod
    def scalariform(cls, executable: str = "scalariform", **kwargs) -> "CommandFormatter":
        return cls((executable, "--stdin", "--stdout"), **kwargs)

    def command_for(self, preferences: FormattingPreferences) -> list[str]:
        command = list(self.argv)
        if self.pass_preferences:
            command.extend(preferences.as_arguments())
        return command

    def __call__(self, text: str, preferences: FormattingPreferences) -> str:
        command = self.command_for(preferences)
        with telemetry.span(
            "formatter::command",
            logger_name=self._logger_name,
            component="formatter",
            metadata={"command": self.argv[0]},
        ) as handle:
            try:
                completed = subprocess.run(
                    command,
                    input=text,
                    capture_output=True,
                    text=True,
                    encoding=self.encoding,
                    timeout=self.timeout,
                    check=False,
                )
            except FileNotFoundError as exc:
                raise FormatterUnavailableError(
                    f"Formatter executable '{self.argv[0]}' not found"
                ) from exc
            except subprocess.TimeoutExpired as exc:
                raise FormatterUnavailableError(
                    f"Formatter '{self.argv[0]}' timed out after {self.timeout}s"
                ) from exc

            handle.add_metadata("returncode", completed.returncode)
            if completed.returncode != 0:
                details = completed.stderr.strip()
                raise FormatParseError(
                    f"Formatter '{self.argv[0]}' rejected the input "
                    f"(exit {completed.returncode})",
                    details=details,
                )
            return completed.stdout


__all__ = [
    "Formatter",
    "FormatParseError",
    "FormatterUnavailableError",
    "CommandFormatter",
]
