"""Indentation-only fallback used when the formatter cannot parse a region.

Only leading whitespace changes. Depth is tracked from brackets found
outside string literals and comments; a line that starts with closing
brackets is dedented by that many levels. Lines that begin inside a block
comment or a triple-quoted string are left alone, as are blank lines.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from reformat_engine.buffer import OutOfRangeError, Region, TextDocument
from reformat_engine.diff import split_lines
from reformat_engine.edits import EditOperation, LineWindow, ReplaceRange, apply
from reformat_engine.runtime import telemetry

from .preferences import CodeStyle

_OPENERS = "{(["
_CLOSERS = "}])"
_CHAR_LITERAL = re.compile(r"'(?:\\.|[^\\'\n])'")


@dataclass(slots=True)
class _ScanState:
    in_block_comment: bool = False
    in_multiline_string: bool = False

    @property
    def inside(self) -> bool:
        return self.in_block_comment or self.in_multiline_string


def _skip_string(line: str, start: int) -> int:
    i = start + 1
    while i < len(line):
        if line[i] == "\\":
            i += 2
            continue
        if line[i] == '"':
            return i + 1
        i += 1
    return len(line)


def bracket_delta(line: str, state: _ScanState) -> int:
    """Net change in bracket depth contributed by code on ``line``."""

    depth = 0
    i = 0
    while i < len(line):
        if state.in_block_comment:
            end = line.find("*/", i)
            if end == -1:
                break
            state.in_block_comment = False
            i = end + 2
            continue
        if state.in_multiline_string:
            end = line.find('"""', i)
            if end == -1:
                break
            state.in_multiline_string = False
            i = end + 3
            continue

        if line.startswith("//", i):
            break
        if line.startswith("/*", i):
            state.in_block_comment = True
            i += 2
            continue
        if line.startswith('"""', i):
            state.in_multiline_string = True
            i += 3
            continue

        char = line[i]
        if char == '"':
            i = _skip_string(line, i)
            continue
        if char == "'":
            literal = _CHAR_LITERAL.match(line, i)
            i = literal.end() if literal else i + 1
            continue
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth -= 1
        i += 1
    return depth


def _leading_closers(content: str) -> int:
    count = 0
    for char in content:
        if char in _CLOSERS:
            count += 1
        elif char not in " \t":
            break
    return count


def _leading_whitespace(line: str) -> str:
    return line[: len(line) - len(line.lstrip(" \t"))]


def base_columns(document: TextDocument, offset: int, style: CodeStyle) -> int:
    """Indentation the first region line should get, from the code above it."""

    index = document.line_index()
    text = document.text
    line = index.line_of(offset)
    line_start = index.line_start(line)
    candidate = line if offset > line_start else line - 1
    while candidate >= 1:
        start = index.line_start(candidate)
        end = offset if candidate == line else index.line_end(candidate)
        content = text[start:end].rstrip("\r\n")
        if content.strip():
            columns = style.columns_of(_leading_whitespace(content))
            if bracket_delta(content, _ScanState()) > 0:
                columns += style.indent_size
            return columns
        candidate -= 1
    return 0


def plan_reindent(
    document: TextDocument, region: Region, style: CodeStyle
) -> List[EditOperation]:
    """Line replacements (region-relative, descending) fixing indentation."""

    text = document.get_text(region.start, region.length)
    base = base_columns(document, region.start, style)
    index = document.line_index()
    starts_mid_line = region.start != index.line_start(index.line_of(region.start))
    state = _ScanState()
    depth = 0
    operations: List[EditOperation] = []
    for number, line in enumerate(split_lines(text), start=1):
        starts_inside = state.inside
        body = line.lstrip(" \t")
        content = body.rstrip("\r\n")
        if content and not starts_inside and not (number == 1 and starts_mid_line):
            level = depth - _leading_closers(content)
            wanted = style.indent_string(base + level * style.indent_size)
            if _leading_whitespace(line) != wanted:
                operations.append(ReplaceRange(number, number, wanted + body))
        depth += bracket_delta(line, state)
    operations.reverse()
    return operations


def reindent(
    document: TextDocument,
    region: Region,
    style: CodeStyle,
    *,
    logger_name: Optional[str] = None,
) -> int:
    """Fix leading indentation inside ``region``; returns lines changed.

    Parse problems cannot make this fail. If the region no longer fits the
    document the pass stops where it is and the problem is logged.
    """

    with telemetry.span(
        "reindent::region",
        logger_name=logger_name,
        component="reindent",
        metadata={"start": region.start, "length": region.length},
    ) as handle:
        changed = 0
        try:
            operations = plan_reindent(document, region, style)
            window = LineWindow.over(
                region.start, document.get_text(region.start, region.length)
            )
            for operation in operations:
                apply(document, operation, window)
                changed += 1
        except OutOfRangeError as exc:
            telemetry.record_event(
                "reindent.out_of_range",
                level="warning",
                data={"start": region.start, "reason": str(exc), "changed": changed},
                logger_name=logger_name,
            )
        handle.add_metadata("changed", changed)
        return changed


__all__ = ["bracket_delta", "base_columns", "plan_reindent", "reindent"]
