from __future__ import annotations

from typing import Callable, Dict, List

import pytest

from reformat_engine.buffer import (
    BufferMutationError,
    OverlappingRegionsError,
    Region,
    TextDocument,
    ThreadLock,
)
from reformat_engine.formatting import CodeStyle, FormatParseError, FormattingPreferences
from reformat_engine.reformat import RegionReformatter, RegionState


def make_formatter(
    rewrites: Dict[str, str], *, seen: List[str] | None = None
) -> Callable[[str, FormattingPreferences], str]:
    """Formatter returning canned output and failing on anything unknown."""

    def formatter(text: str, preferences: FormattingPreferences) -> str:
        if seen is not None:
            seen.append(text)
        try:
            return rewrites[text]
        except KeyError:
            raise FormatParseError(f"cannot parse {text!r}") from None

    return formatter


def whole(document: TextDocument) -> Region:
    return Region(0, len(document))


def test_single_line_is_reformatted() -> None:
    document = TextDocument("def f(x:Int)=x+1")
    reformatter = RegionReformatter(
        document, make_formatter({"def f(x:Int)=x+1": "def f(x: Int) = x + 1"})
    )

    report = reformatter.reformat([whole(document)])

    assert document.text == "def f(x: Int) = x + 1"
    outcome = report.outcomes[0]
    assert outcome.state is RegionState.DONE
    assert outcome.operations == 1
    assert outcome.applied == 1
    assert report.completed


def test_deleted_line_leaves_neighbours_untouched() -> None:
    original = "l1\nl2\nl3\nl4\nl5\n"
    document = TextDocument(original)
    reformatter = RegionReformatter(
        document, make_formatter({original: "l1\nl2\nl4\nl5\n"})
    )

    report = reformatter.reformat([whole(document)])

    assert document.text == "l1\nl2\nl4\nl5\n"
    assert document.text.count("\n") == 4
    assert report.outcomes[0].operations == 1


def test_parse_failure_runs_fallback_and_skips_diff(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def diff_must_not_run(*args: object, **kwargs: object) -> None:
        raise AssertionError("diff should not run after a parse failure")

    monkeypatch.setattr(
        "reformat_engine.reformat.reformatter.diff", diff_must_not_run
    )
    calls: List[Region] = []

    def reindenter(document: TextDocument, region: Region, style: CodeStyle) -> int:
        calls.append(region)
        return 0

    document = TextDocument("object {{{ broken\n")
    reformatter = RegionReformatter(
        document, make_formatter({}), reindenter=reindenter
    )

    report = reformatter.reformat([whole(document)])

    assert calls == [whole(document)]
    outcome = report.outcomes[0]
    assert outcome.fallback is True
    assert outcome.state is RegionState.DONE
    assert outcome.operations == 0
    assert "cannot parse" in (outcome.error or "")
    assert document.text == "object {{{ broken\n"


def test_empty_formatter_output_counts_as_parse_failure() -> None:
    document = TextDocument("class A {\nval x = 1\n}\n")
    reformatter = RegionReformatter(
        document,
        lambda text, preferences: "",
        style=CodeStyle(indent_size=2),
    )

    report = reformatter.reformat([whole(document)])

    assert report.fallbacks == report.outcomes
    assert report.outcomes[0].applied == 1
    assert document.text == "class A {\n  val x = 1\n}\n"


def test_later_region_is_processed_first_and_earlier_offsets_stay_valid() -> None:
    first_text = "val a=1\n"
    second_text = "val b=2\n"
    document = TextDocument(first_text + "// keep\n" + second_text)
    first = Region.from_length(0, len(first_text))
    second = Region.from_length(len(first_text) + len("// keep\n"), len(second_text))
    seen: List[str] = []
    formatter = make_formatter(
        {
            first_text: "val a = 1\n",
            second_text: "val b =\n  2\n",
        },
        seen=seen,
    )

    report = RegionReformatter(document, formatter).reformat([first, second])

    assert seen == [second_text, first_text]
    assert document.text == "val a = 1\n// keep\nval b =\n  2\n"
    assert [outcome.region for outcome in report.outcomes] == [first, second]
    assert all(outcome.state is RegionState.DONE for outcome in report.outcomes)


def test_identical_output_is_a_no_op() -> None:
    text = "object A {\n  val x = 1\n}\n"
    document = TextDocument(text)
    reformatter = RegionReformatter(document, make_formatter({text: text}))

    report = reformatter.reformat([whole(document)])

    assert document.text == text
    assert document.version == 0
    assert report.outcomes[0].operations == 0
    assert len(document.undo_timeline) == 0


def test_caret_stays_on_untouched_line() -> None:
    document = TextDocument("a=1\nb\nc\n")
    document.set_caret(6)
    reformatter = RegionReformatter(
        document, make_formatter({"a=1\nb\nc\n": "a = 1\nb\nc\n"})
    )

    reformatter.reformat([whole(document)])

    assert document.text[document.caret.offset :] == "c\n"


def test_whole_pass_undoes_in_one_step() -> None:
    original = "x=1\ny=2\nz=3\n"
    document = TextDocument(original)
    reformatter = RegionReformatter(
        document,
        make_formatter({"x=1\n": "x = 1\n", "z=3\n": "z = 3\n"}),
    )

    reformatter.reformat([Region(0, 4), Region(8, 12)])

    assert document.text == "x = 1\ny=2\nz = 3\n"
    assert document.undo() is True
    assert document.text == original


def test_region_outside_document_is_abandoned_and_pass_continues() -> None:
    document = TextDocument("a=1\nb=2\n")
    reformatter = RegionReformatter(document, make_formatter({"a=1\n": "a = 1\n"}))

    report = reformatter.reformat([Region(0, 4), Region(4, 400)])

    assert report.outcomes[1].state is RegionState.ABANDONED
    assert report.outcomes[0].state is RegionState.DONE
    assert document.text == "a = 1\nb=2\n"
    assert not report.completed


def test_external_mutation_abandons_remaining_operations() -> None:
    document = TextDocument("a\nb\nc\n")

    def clobbering_formatter(text: str, preferences: FormattingPreferences) -> str:
        document.remove_text(0, len(document))
        return "A\nB\nC\n"

    report = RegionReformatter(document, clobbering_formatter).reformat(
        [whole(document)]
    )

    outcome = report.outcomes[0]
    assert outcome.state is RegionState.ABANDONED
    assert outcome.applied == 0
    assert outcome.operations == 1
    assert document.text == ""


def test_buffer_mutation_error_aborts_pass_but_keeps_applied_regions() -> None:
    document = TextDocument("x=1\ny=2\n")

    def formatter(text: str, preferences: FormattingPreferences) -> str:
        if text == "x=1\n":
            document.read_only = True
        return text.replace("=", " = ")

    reformatter = RegionReformatter(document, formatter)

    with pytest.raises(BufferMutationError):
        reformatter.reformat([Region(0, 4), Region(4, 8)])

    assert document.text == "x=1\ny = 2\n"


def test_overlapping_regions_are_rejected_before_any_edit() -> None:
    document = TextDocument("a=1\nb=2\n")
    seen: List[str] = []
    reformatter = RegionReformatter(document, make_formatter({}, seen=seen))

    with pytest.raises(OverlappingRegionsError):
        reformatter.reformat([Region(0, 5), Region(4, 8)])

    assert seen == []
    assert document.text == "a=1\nb=2\n"


def test_overlap_hidden_behind_empty_region_is_rejected() -> None:
    document = TextDocument("abcdefghij\n")
    seen: List[str] = []
    reformatter = RegionReformatter(document, make_formatter({}, seen=seen))

    with pytest.raises(OverlappingRegionsError):
        reformatter.reformat([Region(0, 10), Region(5, 5), Region(6, 11)])

    assert seen == []
    assert document.text == "abcdefghij\n"


def test_skipped_region_does_not_block_overlapping_neighbour() -> None:
    document = TextDocument("ab\n")
    reformatter = RegionReformatter(document, make_formatter({"ab\n": "AB\n"}))

    report = reformatter.reformat([Region(-2, 3), Region(0, 3)])

    assert [outcome.state for outcome in report.outcomes] == [
        RegionState.SKIPPED,
        RegionState.DONE,
    ]
    assert document.text == "AB\n"


def test_empty_and_negative_regions_are_skipped() -> None:
    document = TextDocument("a\n")
    reformatter = RegionReformatter(document, make_formatter({}))

    report = reformatter.reformat([Region(1, 1), Region(-3, -1)])

    assert [outcome.state for outcome in report.outcomes] == [
        RegionState.SKIPPED,
        RegionState.SKIPPED,
    ]
    assert report.completed


def test_lock_is_held_during_pass_and_released_after_failure() -> None:
    lock = ThreadLock()
    document = TextDocument("a=1\n", read_only=True)
    held: List[bool] = []

    def formatter(text: str, preferences: FormattingPreferences) -> str:
        held.append(lock.held)
        return "a = 1\n"

    reformatter = RegionReformatter(document, formatter, lock=lock)

    with pytest.raises(BufferMutationError):
        reformatter.reformat([whole(document)])

    assert held == [True]
    assert not lock.held


def test_preferences_follow_code_style() -> None:
    received: List[FormattingPreferences] = []

    def formatter(text: str, preferences: FormattingPreferences) -> str:
        received.append(preferences)
        return text

    document = TextDocument("a\n")
    RegionReformatter(document, formatter, style=CodeStyle(indent_size=4)).reformat(
        [whole(document)]
    )

    assert received == [
        FormattingPreferences(
            indent_size=4,
            rewrite_arrows=False,
            align_parameters=True,
            align_single_line_blocks=True,
        )
    ]
