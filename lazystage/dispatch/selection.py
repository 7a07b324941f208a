"""Resolve the cursor or a visual range into an operand for commands."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..diff.types import DiffHunk, FileDiff
from ..errors import InvalidSelection
from ..outline import Cursor, Outline, Section, SectionKind


class SelectionShape(str, Enum):
    SECTION = "section"
    SECTIONS = "sections"
    LINES = "lines"


@dataclass(frozen=True)
class ResolvedSelection:
    """Operand of a contextual command.

    ``lines`` holds 1-based hunk positions and is only set for ``LINES``.
    """

    shape: SelectionShape
    kind: SectionKind
    sections: tuple[Section, ...]
    lines: tuple[int, ...] = ()

    @property
    def section(self) -> Section:
        return self.sections[0]

    @property
    def paths(self) -> tuple[str, ...]:
        out: list[str] = []
        for section in self.sections:
            if section.address.key and section.address.key[0] not in out:
                out.append(section.address.key[0])
        return tuple(out)

    @property
    def hunk(self) -> DiffHunk | None:
        payload = self.section.payload
        return payload if isinstance(payload, DiffHunk) else None


def file_diff_for(outline: Outline, section: Section) -> FileDiff | None:
    """Return the ``FileDiff`` owning a file or hunk section."""
    if isinstance(section.payload, FileDiff):
        return section.payload
    parent = outline.parent(section.address)
    if parent is not None and isinstance(parent.payload, FileDiff):
        return parent.payload
    return None


def _outermost(outline: Outline, sections: list[Section]) -> list[Section]:
    addresses = {section.address for section in sections}
    return [
        section
        for section in sections
        if not any(ancestor.address in addresses for ancestor in outline.ancestors(section.address))
    ]


def resolve_selection(
    outline: Outline,
    cursor: Cursor | None,
    anchor: Cursor | None = None,
) -> ResolvedSelection | None:
    """Resolve the operand under ``cursor`` (and ``anchor`` in visual mode).

    Returns ``None`` when nothing is under the cursor. Raises
    ``InvalidSelection`` for ranges that span hunks, files, or section kinds.
    """
    if cursor is None:
        return None
    section = outline.find(cursor.address)
    if section is None:
        return None
    if anchor is None:
        return ResolvedSelection(SelectionShape.SECTION, section.kind, (section,))

    rows = outline.visible_rows()
    start = outline.row_index_for(anchor)
    end = outline.row_index_for(cursor)
    if start is None or end is None:
        raise InvalidSelection("selection anchor is no longer visible")
    low, high = min(start, end), max(start, end)
    span = rows[low : high + 1]

    if any(row.line is not None for row in span):
        addresses = {row.address for row in span}
        if len(addresses) > 1:
            paths = {address.key[0] for address in addresses if address.key}
            if len(paths) > 1:
                raise InvalidSelection("line selection spans several files")
            raise InvalidSelection("line selection spans several hunks")
        positions = tuple(row.line for row in span if row.line is not None)
        return ResolvedSelection(SelectionShape.LINES, section.kind, (section,), positions)

    seen: list[Section] = []
    for row in span:
        found = outline.find(row.address)
        if found is not None and all(item.address != found.address for item in seen):
            seen.append(found)
    selected = _outermost(outline, seen)
    kinds = {item.kind for item in selected}
    if len(kinds) > 1:
        raise InvalidSelection("selection mixes different kinds of sections")
    if len(selected) == 1:
        return ResolvedSelection(SelectionShape.SECTION, selected[0].kind, (selected[0],))
    return ResolvedSelection(SelectionShape.SECTIONS, selected[0].kind, tuple(selected))


def selection_bounds(outline: Outline, cursor: Cursor | None, anchor: Cursor | None) -> tuple[int, int] | None:
    """Row index range covered by a visual selection, for highlighting."""
    if cursor is None or anchor is None:
        return None
    start = outline.row_index_for(anchor)
    end = outline.row_index_for(cursor)
    if start is None or end is None:
        return None
    return min(start, end), max(start, end)
