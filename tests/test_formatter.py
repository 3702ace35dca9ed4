from __future__ import annotations

import sys

import pytest

from reformat_engine.formatting import (
    CodeStyle,
    CommandFormatter,
    FormatParseError,
    FormatterUnavailableError,
    FormattingPreferences,
)


def python_formatter(code: str, **kwargs: object) -> CommandFormatter:
    return CommandFormatter((sys.executable, "-c", code), **kwargs)


def test_command_output_is_returned() -> None:
    formatter = python_formatter(
        "import sys; sys.stdout.write(sys.stdin.read().upper())",
        pass_preferences=False,
    )

    assert formatter("val x = 1\n", FormattingPreferences()) == "VAL X = 1\n"


def test_preferences_are_passed_as_arguments() -> None:
    formatter = python_formatter("import sys; sys.stdout.write(' '.join(sys.argv[1:]))")

    output = formatter("", FormattingPreferences(indent_size=4, rewrite_arrows=True))

    assert output == (
        "-indentSpaces=4 +rewriteArrowSymbols +alignParameters "
        "+alignSingleLineCaseStatements"
    )


def test_non_zero_exit_is_a_parse_error() -> None:
    formatter = python_formatter(
        "import sys; sys.stderr.write('unexpected token'); sys.exit(3)",
        pass_preferences=False,
    )

    with pytest.raises(FormatParseError) as excinfo:
        formatter("object {", FormattingPreferences())

    assert excinfo.value.details == "unexpected token"


def test_missing_executable_is_reported() -> None:
    formatter = CommandFormatter(("reformat-engine-no-such-formatter",))

    with pytest.raises(FormatterUnavailableError):
        formatter("x", FormattingPreferences())


def test_scalariform_command_line() -> None:
    formatter = CommandFormatter.scalariform("/opt/scalariform")

    assert formatter.command_for(FormattingPreferences(indent_size=2)) == [
        "/opt/scalariform",
        "--stdin",
        "--stdout",
        "-indentSpaces=2",
        "-rewriteArrowSymbols",
        "+alignParameters",
        "+alignSingleLineCaseStatements",
    ]


def test_empty_command_is_rejected() -> None:
    with pytest.raises(ValueError):
        CommandFormatter(())


def test_code_style_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REFORMAT_ENGINE_INDENT_SIZE", "4")
    monkeypatch.setenv("REFORMAT_ENGINE_TAB_SIZE", "4")
    monkeypatch.setenv("REFORMAT_ENGINE_EXPAND_TABS", "no")

    style = CodeStyle.from_env()

    assert style == CodeStyle(indent_size=4, tab_size=4, expand_tabs=False)
    assert style.indent_string(6) == "\t  "


def test_code_style_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("INDENT_SIZE", "TAB_SIZE", "EXPAND_TABS"):
        monkeypatch.delenv(f"REFORMAT_ENGINE_{name}", raising=False)

    assert CodeStyle.from_env() == CodeStyle()


def test_invalid_env_value_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REFORMAT_ENGINE_INDENT_SIZE", "wide")

    with pytest.raises(ValueError):
        CodeStyle.from_env()


def test_columns_of_expands_tabs() -> None:
    style = CodeStyle(tab_size=4)

    assert style.columns_of("\t  ") == 6
    assert style.columns_of("  \t") == 4


def test_preferences_from_code_style() -> None:
    preferences = FormattingPreferences.from_code_style(CodeStyle(indent_size=3))

    assert preferences.indent_size == 3
    assert preferences.rewrite_arrows is False
    assert preferences.align_parameters is True
    assert preferences.align_single_line_blocks is True
    with pytest.raises(ValueError):
        FormattingPreferences(indent_size=-1)
