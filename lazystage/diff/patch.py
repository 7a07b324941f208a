"""Patch construction from whole hunks, whole files, or line selections.

Line-level patches are always expressed in the forward (old -> new)
direction of the original diff. Stage patches are applied forward to the
index. Unstage and discard patches are applied with ``--reverse`` because the
target (index or working tree) already holds the post-image, which is why
unselected lines are treated the opposite way for those intents.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from ..errors import EmptySelection, InvalidSelection
from .types import ChangeKind, DiffHunk, FileDiff, LineOrigin, format_hunk_header

DEFAULT_CONTEXT_LINES = 3


class PatchIntent(str, Enum):
    STAGE = "stage"
    UNSTAGE = "unstage"
    DISCARD = "discard"

    @property
    def apply_args(self) -> tuple[str, ...]:
        """``git apply`` arguments selecting the target and direction."""
        if self is PatchIntent.STAGE:
            return ("--cached",)
        if self is PatchIntent.UNSTAGE:
            return ("--cached", "--reverse")
        return ("--reverse",)

    @property
    def anchored_on_new_side(self) -> bool:
        return self is not PatchIntent.STAGE


@dataclass(frozen=True)
class Patch:
    """A patch payload ready to be fed to ``git apply`` on stdin."""

    path: str
    intent: PatchIntent
    text: str
    unidiff_zero: bool = False

    @property
    def apply_args(self) -> tuple[str, ...]:
        args = self.intent.apply_args
        if self.unidiff_zero:
            args = (*args, "--unidiff-zero")
        return args


@dataclass(frozen=True)
class _Emitted:
    origin: LineOrigin
    text: str
    marker: str | None = None


def _header_for(file_diff: FileDiff, partial: bool, intent: PatchIntent) -> list[str]:
    """Return the file header lines to emit in front of the hunks."""
    header = list(file_diff.header_lines)
    if not header:
        header = [f"diff --git a/{file_diff.old_path or file_diff.path} b/{file_diff.path}"]
    has_paths = any(line.startswith("--- ") for line in header)
    # A partial patch cannot create or remove the whole file in the direction
    # it is applied, so it must be emitted as a plain modification.
    as_modification = partial and (
        (file_diff.change is ChangeKind.ADDED and intent is not PatchIntent.STAGE)
        or (file_diff.change is ChangeKind.DELETED and intent is PatchIntent.STAGE)
    )
    if as_modification or not has_paths:
        kept = [
            line
            for line in header[1:]
            if not line.startswith(("new file mode ", "deleted file mode ", "--- ", "+++ ", "index "))
        ]
        old_path = file_diff.old_path or file_diff.path
        header = [
            f"diff --git a/{old_path} b/{file_diff.path}",
            *kept,
            f"--- a/{old_path}" if file_diff.change is not ChangeKind.ADDED or as_modification else "--- /dev/null",
            f"+++ b/{file_diff.path}" if file_diff.change is not ChangeKind.DELETED or as_modification else "+++ /dev/null",
        ]
    return header


def _join(lines: Sequence[str]) -> str:
    return "\n".join(lines) + "\n"


def build_file_patch(file_diff: FileDiff, intent: PatchIntent = PatchIntent.STAGE) -> Patch:
    """Reuse a whole file diff verbatim."""
    if not file_diff.is_available:
        raise InvalidSelection(f"diff unavailable for {file_diff.path}")
    if not file_diff.hunks:
        raise EmptySelection(f"{file_diff.path} has no textual changes to apply")
    lines = _header_for(file_diff, partial=False, intent=intent)
    for hunk in file_diff.hunks:
        lines.append(hunk.text())
    return Patch(path=file_diff.path, intent=intent, text=_join(lines))


def build_hunk_patch(
    file_diff: FileDiff,
    hunks: Iterable[DiffHunk],
    intent: PatchIntent = PatchIntent.STAGE,
) -> Patch:
    """Reuse the selected hunks of one file verbatim, in file order."""
    selected = sorted({hunk.index: hunk for hunk in hunks}.values(), key=lambda hunk: hunk.index)
    if not selected:
        raise EmptySelection("no hunk selected")
    for hunk in selected:
        if hunk.index >= len(file_diff.hunks) or file_diff.hunks[hunk.index] != hunk:
            raise InvalidSelection(f"hunk {hunk.index} does not belong to {file_diff.path}")
    partial = len(selected) != len(file_diff.hunks)
    lines = _header_for(file_diff, partial=partial, intent=intent)
    for hunk in selected:
        lines.append(hunk.text())
    return Patch(path=file_diff.path, intent=intent, text=_join(lines))


def _transform_lines(
    hunk: DiffHunk,
    selected: set[int],
    intent: PatchIntent,
) -> list[_Emitted]:
    """Map every hunk line to its role in the partial patch.

    Selected changes keep their origin. An unselected change that already
    exists in the apply target becomes context, and one that does not is
    dropped together with its no-newline marker.
    """
    kept_origin_for_unselected = LineOrigin.DELETION if intent is PatchIntent.STAGE else LineOrigin.ADDITION
    emitted: list[_Emitted] = []
    last_dropped = False

    for line in hunk.lines:
        if line.origin is LineOrigin.NO_NEWLINE:
            if emitted and not last_dropped:
                previous = emitted[-1]
                emitted[-1] = _Emitted(previous.origin, previous.text, line.text)
            continue
        if line.origin is LineOrigin.CONTEXT:
            emitted.append(_Emitted(LineOrigin.CONTEXT, line.text))
            last_dropped = False
        elif line.position in selected:
            emitted.append(_Emitted(line.origin, line.text))
            last_dropped = False
        elif line.origin is kept_origin_for_unselected:
            emitted.append(_Emitted(LineOrigin.CONTEXT, line.text))
            last_dropped = False
        else:
            last_dropped = True
    return _split_unterminated_context(emitted)


def _split_unterminated_context(emitted: list[_Emitted]) -> list[_Emitted]:
    """Rewrite context that lacks a newline but is followed by more lines.

    Such a line ends the file on one side only, so it is emitted as a
    deletion plus an addition and each copy keeps the marker only on the side
    where nothing follows it.
    """
    out: list[_Emitted] = []
    for index, entry in enumerate(emitted):
        rest = emitted[index + 1:]
        if entry.origin is not LineOrigin.CONTEXT or entry.marker is None or not rest:
            out.append(entry)
            continue
        old_continues = any(later.origin is not LineOrigin.ADDITION for later in rest)
        new_continues = any(later.origin is not LineOrigin.DELETION for later in rest)
        out.append(_Emitted(LineOrigin.DELETION, entry.text, None if old_continues else entry.marker))
        out.append(_Emitted(LineOrigin.ADDITION, entry.text, None if new_continues else entry.marker))
    return out


def _count(entries: Iterable[_Emitted], side: LineOrigin) -> int:
    return sum(1 for entry in entries if entry.origin in (LineOrigin.CONTEXT, side))


def _trim_context(emitted: list[_Emitted], context_lines: int) -> tuple[list[_Emitted], list[_Emitted]]:
    """Return ``(trimmed_prefix, kept)`` keeping only context adjacent to the changes."""
    change_indices = [idx for idx, entry in enumerate(emitted) if entry.origin.is_change]
    first, last = change_indices[0], change_indices[-1]
    start = max(0, first - context_lines)
    end = min(len(emitted), last + 1 + context_lines)
    return emitted[:start], emitted[start:end]


def _edge_context(entries: Iterable[_Emitted]) -> int:
    """Number of context lines before the first change."""
    count = 0
    for entry in entries:
        if entry.origin is not LineOrigin.CONTEXT:
            break
        count += 1
    return count


def _render_emitted(entries: Iterable[_Emitted]) -> list[str]:
    out: list[str] = []
    for entry in entries:
        out.append(f"{entry.origin.value}{entry.text}")
        if entry.marker is not None:
            out.append(f"\\{entry.marker}")
    return out


def build_line_patch(
    file_diff: FileDiff,
    hunk: DiffHunk,
    positions: Iterable[int],
    intent: PatchIntent = PatchIntent.STAGE,
    context_lines: int = DEFAULT_CONTEXT_LINES,
) -> Patch:
    """Build a minimal patch applying only the selected lines of ``hunk``.

    ``positions`` are 1-based line positions within the hunk. The patch keeps
    at most ``context_lines`` context lines on each side of the selected
    region, and its header describes exactly the emitted lines.
    """
    if context_lines < 0:
        raise ValueError("context_lines must be >= 0")
    if hunk.index >= len(file_diff.hunks) or file_diff.hunks[hunk.index] != hunk:
        raise InvalidSelection(f"hunk {hunk.index} does not belong to {file_diff.path}")
    selected = set(positions)
    if not selected:
        raise EmptySelection("no line selected")
    out_of_range = [pos for pos in selected if pos < 1 or pos > len(hunk.lines)]
    if out_of_range:
        raise InvalidSelection(f"line positions {sorted(out_of_range)} are outside the hunk")
    if not any(hunk.line_at(pos).origin.is_change for pos in selected):
        raise EmptySelection("selection contains only context lines")

    emitted = _transform_lines(hunk, selected, intent)
    prefix, kept = _trim_context(emitted, context_lines)

    old_length = _count(kept, LineOrigin.DELETION)
    new_length = _count(kept, LineOrigin.ADDITION)
    # Lines around this hunk are identical on both sides of a single-hunk
    # patch, so both starts derive from the side the target already has.
    if intent.anchored_on_new_side:
        first_line = hunk.first_new_line + _count(prefix, LineOrigin.ADDITION)
    else:
        first_line = hunk.first_old_line + _count(prefix, LineOrigin.DELETION)
    old_start = first_line if old_length > 0 else first_line - 1
    new_start = first_line if new_length > 0 else first_line - 1

    header = format_hunk_header(old_start, old_length, new_start, new_length, hunk.heading)
    lines = _header_for(file_diff, partial=True, intent=intent)
    lines.append(header)
    lines.extend(_render_emitted(kept))
    # git anchors a hunk without leading or trailing context to the file
    # edges unless told otherwise; the header above is exact either way.
    edge_without_context = _edge_context(kept) == 0 or _edge_context(reversed(kept)) == 0
    return Patch(
        path=file_diff.path,
        intent=intent,
        text=_join(lines),
        unidiff_zero=edge_without_context,
    )
