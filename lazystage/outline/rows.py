"""Flattened, render-ready rows of an outline."""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import dataclass, replace

from ..diff.types import LineOrigin
from .types import Cursor, SectionAddress, SectionKind


@dataclass(frozen=True)
class VisibleRow:
    """One visible row: a section header, or a diff line inside an expanded hunk."""

    address: SectionAddress
    depth: int
    text: str
    line: int | None = None
    origin: LineOrigin | None = None
    collapsed: bool = False
    collapsible: bool = False
    is_cursor: bool = False
    in_selection: bool = False
    is_match: bool = False

    @property
    def kind(self) -> SectionKind:
        return self.address.kind

    @property
    def cursor(self) -> Cursor:
        return Cursor(self.address, self.line)


def mark_rows(
    rows: Sequence[VisibleRow],
    cursor_index: int | None = None,
    selection: tuple[int, int] | None = None,
    matches: Collection[int] = (),
) -> list[VisibleRow]:
    """Return ``rows`` with cursor, visual-selection and search flags set."""
    low, high = selection if selection is not None else (-1, -2)
    out: list[VisibleRow] = []
    for index, row in enumerate(rows):
        is_cursor = index == cursor_index
        in_selection = low <= index <= high
        is_match = index in matches
        if is_cursor or in_selection or is_match or row.is_cursor or row.in_selection or row.is_match:
            row = replace(row, is_cursor=is_cursor, in_selection=in_selection, is_match=is_match)
        out.append(row)
    return out
