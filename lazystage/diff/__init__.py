"""Unified diff model, parser and partial-patch builder."""

from __future__ import annotations

from .parse import format_hunk_header, parse_hunk, parse_hunk_header, parse_unified_diff
from .patch import (
    DEFAULT_CONTEXT_LINES,
    Patch,
    PatchIntent,
    build_file_patch,
    build_hunk_patch,
    build_line_patch,
)
from .types import ChangeKind, DiffHunk, DiffLine, FileDiff, LineOrigin

__all__ = [
    "DEFAULT_CONTEXT_LINES",
    "ChangeKind",
    "DiffHunk",
    "DiffLine",
    "FileDiff",
    "LineOrigin",
    "Patch",
    "PatchIntent",
    "build_file_patch",
    "build_hunk_patch",
    "build_line_patch",
    "format_hunk_header",
    "parse_hunk",
    "parse_hunk_header",
    "parse_unified_diff",
]
