"""Code style and formatter preference dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from reformat_engine.runtime.settings import env_flag, env_int


@dataclass(frozen=True, slots=True)
class CodeStyle:
    """Indentation settings for a document, as chosen by the user."""

    indent_size: int = 2
    tab_size: int = 8
    expand_tabs: bool = True

    def __post_init__(self) -> None:
        if self.indent_size < 0:
            raise ValueError("indent_size must be >= 0")
        if self.tab_size < 1:
            raise ValueError("tab_size must be >= 1")

    @classmethod
    def from_env(cls) -> "CodeStyle":
        return cls(
            indent_size=env_int("INDENT_SIZE", 2),
            tab_size=env_int("TAB_SIZE", 8, minimum=1),
            expand_tabs=env_flag("EXPAND_TABS", True),
        )

    def indent_string(self, columns: int) -> str:
        columns = max(columns, 0)
        if self.expand_tabs:
            return " " * columns
        tabs, spaces = divmod(columns, self.tab_size)
        return "\t" * tabs + " " * spaces

    def columns_of(self, whitespace: str) -> int:
        columns = 0
        for char in whitespace:
            if char == "\t":
                columns += self.tab_size - columns % self.tab_size
            else:
                columns += 1
        return columns


@dataclass(frozen=True, slots=True)
class FormattingPreferences:
    """Options handed to the external formatter."""

    indent_size: int = 2
    rewrite_arrows: bool = False
    align_parameters: bool = True
    align_single_line_blocks: bool = True

    def __post_init__(self) -> None:
        if self.indent_size < 0:
            raise ValueError("indent_size must be >= 0")

    @classmethod
    def from_code_style(cls, style: CodeStyle) -> "FormattingPreferences":
        return cls(indent_size=style.indent_size)

    def as_arguments(self) -> Tuple[str, ...]:
        """Render as scalariform-style ``+flag``/``-flag`` command line options."""

        def toggle(flag: bool, name: str) -> str:
            return f"{'+' if flag else '-'}{name}"

        return (
            f"-indentSpaces={self.indent_size}",
            toggle(self.rewrite_arrows, "rewriteArrowSymbols"),
            toggle(self.align_parameters, "alignParameters"),
            toggle(self.align_single_line_blocks, "alignSingleLineCaseStatements"),
        )


__all__ = ["CodeStyle", "FormattingPreferences"]
