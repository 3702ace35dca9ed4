"""Line diff based on Myers' O(N·D) shortest edit script."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from reformat_engine.runtime.telemetry import span

from .models import DiffEntry, DiffKind, DiffOptions, LineRange

Match = Tuple[int, int]  # (original index, formatted index), 0-based

_DEFAULT_OPTIONS = DiffOptions()


def split_lines(text: str) -> List[str]:
    """Split ``text`` on ``\\n`` into lines that keep their terminators.

    Only ``\\n`` ends a line, matching ``LineIndex``; ``"".join`` of the
    result is always ``text``.
    """

    pieces = text.split("\n")
    lines = [piece + "\n" for piece in pieces[:-1]]
    if pieces[-1]:
        lines.append(pieces[-1])
    return lines


def diff(
    original: str, formatted: str, options: Optional[DiffOptions] = None
) -> List[DiffEntry]:
    """Return the ADD/DELETE/CHANGE entries turning ``original`` into ``formatted``.

    Entries come out in ascending original-line order. Lines are compared
    with their terminators, so applying the entries reproduces ``formatted``
    exactly unless normalization options say otherwise.
    """

    opts = options or _DEFAULT_OPTIONS
    old_lines = split_lines(original)
    new_lines = split_lines(formatted)
    old_keys = [opts.normalize(line) for line in old_lines]
    new_keys = [opts.normalize(line) for line in new_lines]
    if opts.ignore_leading_and_trailing_whitespace:
        old_keys = _drop_trailing_blank(old_keys)
        new_keys = _drop_trailing_blank(new_keys)

    with span(
        "diff::lines",
        component="diff",
        metadata={"original_lines": len(old_keys), "formatted_lines": len(new_keys)},
    ) as handle:
        matches = _matching_lines(old_keys, new_keys)
        entries = _classify(matches, len(old_keys), len(new_keys), new_lines)
        handle.add_metadata("entries", len(entries))
    return entries


def _drop_trailing_blank(keys: List[str]) -> List[str]:
    end = len(keys)
    while end and not keys[end - 1]:
        end -= 1
    return keys[:end]


def _matching_lines(a: Sequence[str], b: Sequence[str]) -> List[Match]:
    n, m = len(a), len(b)
    prefix = 0
    while prefix < n and prefix < m and a[prefix] == b[prefix]:
        prefix += 1
    suffix = 0
    while (
        suffix < n - prefix
        and suffix < m - prefix
        and a[n - 1 - suffix] == b[m - 1 - suffix]
    ):
        suffix += 1

    matches: List[Match] = [(i, i) for i in range(prefix)]
    middle = _myers(a[prefix : n - suffix], b[prefix : m - suffix])
    matches.extend((i + prefix, j + prefix) for i, j in middle)
    matches.extend((n - suffix + k, m - suffix + k) for k in range(suffix))
    return matches


def _myers(a: Sequence[str], b: Sequence[str]) -> List[Match]:
    """Matched index pairs along one shortest edit path from ``a`` to ``b``."""

    n, m = len(a), len(b)
    if n == 0 or m == 0:
        return []

    max_d = n + m
    offset = max_d + 1
    v = [0] * (2 * max_d + 3)
    trace: List[List[int]] = []

    for d in range(max_d + 1):
        # Diagonals -d-1..d+1 are all step d can read.
        trace.append(v[offset - d - 1 : offset + d + 2])
        done = False
        for k in range(-d, d + 1, 2):
            if k == -d or (k != d and v[offset + k - 1] < v[offset + k + 1]):
                x = v[offset + k + 1]
            else:
                x = v[offset + k - 1] + 1
            y = x - k
            while x < n and y < m and a[x] == b[y]:
                x += 1
                y += 1
            v[offset + k] = x
            if x >= n and y >= m:
                done = True
                break
        if done:
            break

    matches: List[Match] = []
    x, y = n, m
    for d in range(len(trace) - 1, -1, -1):
        snapshot = trace[d]
        base = d + 1
        k = x - y
        if k == -d or (k != d and snapshot[base + k - 1] < snapshot[base + k + 1]):
            prev_k = k + 1
        else:
            prev_k = k - 1
        prev_x = snapshot[base + prev_k]
        prev_y = prev_x - prev_k
        while x > prev_x and y > prev_y:
            x -= 1
            y -= 1
            matches.append((x, y))
        x, y = prev_x, prev_y
    matches.reverse()
    return matches


def _classify(
    matches: Sequence[Match], n: int, m: int, new_lines: Sequence[str]
) -> List[DiffEntry]:
    entries: List[DiffEntry] = []
    i = j = 0
    for match_i, match_j in list(matches) + [(n, m)]:
        if i < match_i or j < match_j:
            entries.append(_entry(i, match_i, j, match_j, new_lines))
        i, j = match_i + 1, match_j + 1
    return entries


def _entry(
    old_start: int, old_end: int, new_start: int, new_end: int, new_lines: Sequence[str]
) -> DiffEntry:
    original = LineRange(old_start + 1, old_end)
    formatted = LineRange(new_start + 1, new_end)
    text = "".join(new_lines[new_start:new_end])
    if original.is_empty:
        kind = DiffKind.ADD
    elif formatted.is_empty:
        kind = DiffKind.DELETE
    else:
        kind = DiffKind.CHANGE
    return DiffEntry(kind=kind, original=original, formatted=formatted, formatted_text=text)


__all__ = ["diff", "split_lines"]
