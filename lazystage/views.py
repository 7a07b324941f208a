"""Read-only text views stacked above the outline.

A view is pushed when a log or commit-diff read completes and popped with
``q``. While any view is open it owns the body of the screen and the
navigation keys; the outline underneath keeps refreshing.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from .git.log import LogEntry


class ViewLineKind(str, Enum):
    PLAIN = "plain"
    GRAPH = "graph"
    COMMIT = "commit"
    FILE = "file"
    HUNK = "hunk"
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True)
class ViewLine:
    text: str
    kind: ViewLineKind = ViewLineKind.PLAIN
    revision: str | None = None


@dataclass
class TextView:
    title: str
    lines: list[ViewLine] = field(default_factory=list)
    cursor: int = 0
    scroll_top: int = 0

    def move_to(self, index: int) -> bool:
        if not self.lines:
            return False
        index = max(0, min(index, len(self.lines) - 1))
        if index == self.cursor:
            return False
        self.cursor = index
        return True

    def move_by(self, delta: int) -> bool:
        return self.move_to(self.cursor + delta)

    @property
    def current(self) -> ViewLine | None:
        if 0 <= self.cursor < len(self.lines):
            return self.lines[self.cursor]
        return None


def format_log_entry(entry: LogEntry) -> str:
    if not entry.is_commit:
        return entry.graph
    refs = f"({', '.join(entry.refs)}) " if entry.refs else ""
    byline = f"  {entry.author}, {entry.age}" if entry.author else ""
    return f"{entry.graph}{entry.oid} {refs}{entry.subject}{byline}"


def log_view(title: str, entries: Iterable[LogEntry]) -> TextView:
    lines = [
        ViewLine(format_log_entry(entry), ViewLineKind.COMMIT, entry.oid)
        if entry.is_commit
        else ViewLine(entry.graph, ViewLineKind.GRAPH)
        for entry in entries
    ]
    view = TextView(title, lines)
    first_commit = next((index for index, line in enumerate(lines) if line.revision), 0)
    view.move_to(first_commit)
    return view


def _diff_line_kind(line: str) -> ViewLineKind:
    if line.startswith(("diff --git ", "--- ", "+++ ")):
        return ViewLineKind.FILE
    if line.startswith("@@"):
        return ViewLineKind.HUNK
    if line.startswith("+"):
        return ViewLineKind.ADDED
    if line.startswith("-"):
        return ViewLineKind.REMOVED
    return ViewLineKind.PLAIN


def diff_view(title: str, text: str) -> TextView:
    lines = [ViewLine(line, _diff_line_kind(line)) for line in text.splitlines()]
    if not lines:
        lines = [ViewLine("(no changes)")]
    return TextView(title, lines)


__all__ = ["TextView", "ViewLine", "ViewLineKind", "diff_view", "format_log_entry", "log_view"]
