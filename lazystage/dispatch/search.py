"""Incremental search over visible rows."""

from __future__ import annotations

from collections.abc import Sequence

from ..outline import VisibleRow


def find_matches(rows: Sequence[VisibleRow], query: str) -> list[int]:
    """Indices of rows whose text contains ``query`` (case-insensitive)."""
    needle = query.casefold()
    if not needle:
        return []
    return [index for index, row in enumerate(rows) if needle in row.text.casefold()]


def next_match(matches: Sequence[int], current: int, forward: bool = True, inclusive: bool = False) -> int | None:
    """Return the next match index after ``current``, wrapping around."""
    if not matches:
        return None
    if forward:
        for index in matches:
            if index > current or (inclusive and index == current):
                return index
        return matches[0]
    for index in reversed(matches):
        if index < current or (inclusive and index == current):
            return index
    return matches[-1]
