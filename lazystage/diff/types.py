"""Value types for parsed unified diffs."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LineOrigin(str, Enum):
    """Prefix character of one hunk body line."""

    CONTEXT = " "
    ADDITION = "+"
    DELETION = "-"
    NO_NEWLINE = "\\"

    @property
    def is_change(self) -> bool:
        return self in (LineOrigin.ADDITION, LineOrigin.DELETION)


class ChangeKind(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"
    TYPE_CHANGED = "type-changed"


def _format_range(start: int, length: int) -> str:
    return str(start) if length == 1 else f"{start},{length}"


def format_hunk_header(
    old_start: int,
    old_length: int,
    new_start: int,
    new_length: int,
    heading: str = "",
) -> str:
    """Format a hunk header the way git does (a length of 1 is omitted)."""
    return f"@@ -{_format_range(old_start, old_length)} +{_format_range(new_start, new_length)} @@{heading}"


@dataclass(frozen=True)
class DiffLine:
    """One hunk body line; ``position`` is 1-based within the owning hunk."""

    origin: LineOrigin
    text: str
    position: int

    @property
    def raw(self) -> str:
        return f"{self.origin.value}{self.text}"


@dataclass(frozen=True)
class DiffHunk:
    """A contiguous change region.

    ``old_start``/``new_start`` follow git's convention: for an empty range
    the start names the line *before* the insertion point.
    """

    old_start: int
    old_length: int
    new_start: int
    new_length: int
    heading: str
    lines: tuple[DiffLine, ...]
    index: int = 0

    @property
    def header(self) -> str:
        return format_hunk_header(
            self.old_start,
            self.old_length,
            self.new_start,
            self.new_length,
            self.heading,
        )

    @property
    def first_old_line(self) -> int:
        """1-based old-file line number of the first old-side body line."""
        return self.old_start + 1 if self.old_length == 0 else self.old_start

    @property
    def first_new_line(self) -> int:
        return self.new_start + 1 if self.new_length == 0 else self.new_start

    def line_at(self, position: int) -> DiffLine:
        return self.lines[position - 1]

    def text(self) -> str:
        """Return header and body exactly as they would appear in a patch."""
        return "\n".join([self.header, *(line.raw for line in self.lines)])


@dataclass(frozen=True)
class FileDiff:
    """One file's change as reported by ``git diff``.

    ``header_lines`` keeps the ``diff --git`` block verbatim (mode, rename and
    ``---``/``+++`` lines) so that patches can be re-emitted. ``error`` is set
    when the diff for this file could not be parsed; the file then carries no
    hunks and is shown as unavailable.
    """

    path: str
    old_path: str | None
    change: ChangeKind
    hunks: tuple[DiffHunk, ...] = ()
    header_lines: tuple[str, ...] = ()
    is_binary: bool = False
    error: str | None = None

    @property
    def is_mode_only(self) -> bool:
        return not self.hunks and not self.is_binary and self.error is None

    @property
    def is_available(self) -> bool:
        return self.error is None

    @property
    def display_path(self) -> str:
        if self.old_path and self.old_path != self.path:
            return f"{self.old_path} -> {self.path}"
        return self.path

    def hunk(self, index: int) -> DiffHunk:
        return self.hunks[index]
