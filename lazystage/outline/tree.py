"""Address-indexed outline with traversal and cursor relocation.

Sections hold no parent references; parent/sibling navigation goes through
an address index built once per outline.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import replace

from ..diff.types import DiffHunk
from .rows import VisibleRow
from .types import Cursor, Section, SectionAddress, SectionKind

K = SectionKind

# Where a file may reappear after an operation moved it between groups.
COUNTERPARTS: dict[SectionKind, tuple[SectionKind, ...]] = {
    K.UNTRACKED_FILE: (K.UNSTAGED_FILE, K.STAGED_FILE),
    K.UNSTAGED_FILE: (K.STAGED_FILE, K.UNTRACKED_FILE),
    K.STAGED_FILE: (K.UNSTAGED_FILE, K.UNTRACKED_FILE),
}


class Outline:
    """Immutable outline of top-level sections."""

    def __init__(self, sections: Iterable[Section] = ()) -> None:
        self.sections: tuple[Section, ...] = tuple(sections)
        self._by_address: dict[SectionAddress, Section] = {}
        self._parent: dict[SectionAddress, SectionAddress | None] = {}
        self._order: list[SectionAddress] = []
        self._index(self.sections, None)
        self._rows: list[VisibleRow] | None = None

    def _index(self, sections: Iterable[Section], parent: SectionAddress | None) -> None:
        for section in sections:
            if section.address in self._by_address:
                raise ValueError(f"duplicate section address {section.address}")
            self._by_address[section.address] = section
            self._parent[section.address] = parent
            self._order.append(section.address)
            self._index(section.children, section.address)

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, address: object) -> bool:
        return address in self._by_address

    def find(self, address: SectionAddress) -> Section | None:
        return self._by_address.get(address)

    def parent(self, address: SectionAddress) -> Section | None:
        parent_address = self._parent.get(address)
        return None if parent_address is None else self._by_address[parent_address]

    def ancestors(self, address: SectionAddress) -> list[Section]:
        """Parent first, top-level section last."""
        out: list[Section] = []
        current = self.parent(address)
        while current is not None:
            out.append(current)
            current = self.parent(current.address)
        return out

    def children(self, address: SectionAddress) -> tuple[Section, ...]:
        section = self.find(address)
        return () if section is None else section.children

    def siblings(self, address: SectionAddress) -> tuple[Section, ...]:
        """All sections sharing ``address``'s parent, including itself."""
        if address not in self._by_address:
            return ()
        parent = self.parent(address)
        return self.sections if parent is None else parent.children

    def _sibling(self, address: SectionAddress, step: int) -> Section | None:
        siblings = self.siblings(address)
        for index, section in enumerate(siblings):
            if section.address == address:
                target = index + step
                if 0 <= target < len(siblings):
                    return siblings[target]
                return None
        return None

    def next_sibling(self, address: SectionAddress) -> Section | None:
        return self._sibling(address, 1)

    def previous_sibling(self, address: SectionAddress) -> Section | None:
        return self._sibling(address, -1)

    def walk(self) -> Iterator[tuple[Section, int]]:
        """Yield every section with its depth in pre-order, ignoring collapse."""

        def visit(sections: tuple[Section, ...], depth: int) -> Iterator[tuple[Section, int]]:
            for section in sections:
                yield section, depth
                yield from visit(section.children, depth + 1)

        yield from visit(self.sections, 0)

    def of_kind(self, kind: SectionKind) -> list[Section]:
        return [section for section, _depth in self.walk() if section.kind is kind]

    def with_collapsed(self, addresses: Iterable[SectionAddress], collapsed: bool) -> Outline:
        """Return a copy with the collapsed flag of ``addresses`` set."""
        targets = set(addresses)

        def rebuild(sections: tuple[Section, ...]) -> tuple[Section, ...]:
            out: list[Section] = []
            changed = False
            for section in sections:
                children = rebuild(section.children)
                flag = collapsed if section.address in targets else section.collapsed
                if children is not section.children or flag != section.collapsed:
                    section = replace(section, children=children, collapsed=flag)
                    changed = True
                out.append(section)
            return tuple(out) if changed else sections

        return Outline(rebuild(self.sections))

    def toggle(self, address: SectionAddress) -> Outline:
        section = self.find(address)
        if section is None or not section.is_collapsible:
            return self
        return self.with_collapsed([address], not section.collapsed)

    def visible_rows(self) -> list[VisibleRow]:
        """Flattened rows honoring collapse; hunk lines are their own rows."""
        if self._rows is not None:
            return self._rows
        rows: list[VisibleRow] = []

        def visit(sections: tuple[Section, ...], depth: int) -> None:
            for section in sections:
                rows.append(
                    VisibleRow(
                        address=section.address,
                        depth=depth,
                        text=section.title,
                        collapsed=section.collapsed,
                        collapsible=section.is_collapsible,
                    )
                )
                if section.collapsed:
                    continue
                if isinstance(section.payload, DiffHunk):
                    for line in section.payload.lines:
                        rows.append(
                            VisibleRow(
                                address=section.address,
                                depth=depth + 1,
                                text=line.raw,
                                line=line.position,
                                origin=line.origin,
                            )
                        )
                visit(section.children, depth + 1)

        visit(self.sections, 0)
        self._rows = rows
        return rows

    def row_index_for(self, cursor: Cursor | None) -> int | None:
        if cursor is None:
            return None
        fallback: int | None = None
        for index, row in enumerate(self.visible_rows()):
            if row.address != cursor.address:
                continue
            if row.line == cursor.line:
                return index
            if fallback is None:
                fallback = index
        return fallback

    def cursor_for_row(self, index: int) -> Cursor | None:
        rows = self.visible_rows()
        if not rows:
            return None
        index = max(0, min(index, len(rows) - 1))
        return rows[index].cursor

    def first_cursor(self) -> Cursor | None:
        return self.cursor_for_row(0)


def _clamp_line(outline: Outline, address: SectionAddress, line: int | None) -> int | None:
    if line is None:
        return None
    section = outline.find(address)
    if section is None or not isinstance(section.payload, DiffHunk) or section.collapsed:
        return None
    count = len(section.payload.lines)
    return min(line, count) if count else None


def _surviving(previous: Outline, new: Outline, address: SectionAddress) -> SectionAddress | None:
    """Exact address, then counterpart group, then nearest sibling, then ancestor."""
    if address in new:
        return address

    for kind in COUNTERPARTS.get(address.kind, ()):
        candidate = SectionAddress(kind, address.key)
        if candidate in new:
            return candidate

    siblings = previous.siblings(address)
    position = next((i for i, s in enumerate(siblings) if s.address == address), None)
    if position is not None:
        for section in siblings[position + 1:]:
            if section.address in new:
                return section.address
        for section in reversed(siblings[:position]):
            if section.address in new:
                return section.address

    for ancestor in previous.ancestors(address):
        if ancestor.address in new:
            return ancestor.address
    return None


def relocate_cursor(previous: Outline | None, new: Outline, cursor: Cursor | None) -> Cursor | None:
    """Re-resolve ``cursor`` from ``previous`` onto the rebuilt ``new`` outline."""
    if cursor is None:
        return new.first_cursor()
    if cursor.address in new:
        return Cursor(cursor.address, _clamp_line(new, cursor.address, cursor.line))
    if previous is None:
        return new.first_cursor()
    address = _surviving(previous, new, cursor.address)
    if address is None:
        return new.first_cursor()
    return Cursor(address)
