"""Collapsible, address-stable outline of the repository status."""

from __future__ import annotations

from .build import DEFAULT_COLLAPSED, CollapsePolicy, build_outline, hunk_key
from .rows import VisibleRow, mark_rows
from .tree import COUNTERPARTS, Outline, relocate_cursor
from .types import FILE_KINDS, Cursor, Section, SectionAddress, SectionKind

__all__ = [
    "COUNTERPARTS",
    "DEFAULT_COLLAPSED",
    "FILE_KINDS",
    "CollapsePolicy",
    "Cursor",
    "Outline",
    "Section",
    "SectionAddress",
    "SectionKind",
    "VisibleRow",
    "build_outline",
    "hunk_key",
    "mark_rows",
    "relocate_cursor",
]
