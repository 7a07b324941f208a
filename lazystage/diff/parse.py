"""Unified diff parsing.

Turns ``git diff`` output into ``FileDiff``/``DiffHunk``/``DiffLine`` values.
Hunk bodies are consumed by the line counts in their headers, so a header
that disagrees with its body is detected instead of silently producing an
unpatchable hunk. A malformed file is returned with ``error`` set and parsing
continues with the next ``diff --git`` block.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from ..errors import MalformedDiff
from .types import ChangeKind, DiffHunk, DiffLine, FileDiff, LineOrigin, format_hunk_header

LOG = logging.getLogger(__name__)

_HUNK_HEADER_RE = re.compile(
    r"^@@ -(?P<old_start>\d+)(?:,(?P<old_length>\d+))?"
    r" \+(?P<new_start>\d+)(?:,(?P<new_length>\d+))?"
    r" @@(?P<heading>.*)$"
)
_DIFF_GIT_PREFIX = "diff --git "
_NO_NEWLINE_PREFIX = "\\"

__all__ = [
    "format_hunk_header",
    "parse_hunk",
    "parse_hunk_header",
    "parse_unified_diff",
]


def parse_hunk_header(header: str) -> tuple[int, int, int, int, str]:
    """Return ``(old_start, old_length, new_start, new_length, heading)``."""
    match = _HUNK_HEADER_RE.match(header)
    if match is None:
        raise MalformedDiff(f"invalid hunk header: {header!r}")
    old_length = match.group("old_length")
    new_length = match.group("new_length")
    return (
        int(match.group("old_start")),
        1 if old_length is None else int(old_length),
        int(match.group("new_start")),
        1 if new_length is None else int(new_length),
        match.group("heading"),
    )


def _classify_body_line(raw: str) -> tuple[LineOrigin, str]:
    if not raw:
        # Some tools strip the single space of empty context lines.
        return LineOrigin.CONTEXT, ""
    prefix = raw[0]
    if prefix == " ":
        return LineOrigin.CONTEXT, raw[1:]
    if prefix == "+":
        return LineOrigin.ADDITION, raw[1:]
    if prefix == "-":
        return LineOrigin.DELETION, raw[1:]
    if prefix == _NO_NEWLINE_PREFIX:
        return LineOrigin.NO_NEWLINE, raw[1:]
    raise MalformedDiff(f"unexpected hunk body line: {raw!r}")


def _consume_hunk(
    lines: Sequence[str],
    start_index: int,
    hunk_index: int = 0,
) -> tuple[DiffHunk, int]:
    """Parse the hunk whose header is at ``start_index``; return it and the next index."""
    header = lines[start_index]
    old_start, old_length, new_start, new_length, heading = parse_hunk_header(header)
    old_remaining = old_length
    new_remaining = new_length
    body: list[DiffLine] = []
    i = start_index + 1

    while old_remaining > 0 or new_remaining > 0:
        if i >= len(lines) or lines[i].startswith(_DIFF_GIT_PREFIX) or lines[i].startswith("@@ "):
            raise MalformedDiff(
                f"hunk {header!r} ends early: missing {old_remaining} old and {new_remaining} new lines"
            )
        origin, text = _classify_body_line(lines[i])
        if origin is LineOrigin.CONTEXT:
            old_remaining -= 1
            new_remaining -= 1
        elif origin is LineOrigin.DELETION:
            old_remaining -= 1
        elif origin is LineOrigin.ADDITION:
            new_remaining -= 1
        if old_remaining < 0 or new_remaining < 0:
            raise MalformedDiff(f"hunk {header!r} has more lines than its header declares")
        body.append(DiffLine(origin, text, len(body) + 1))
        i += 1

    # A trailing marker belongs to the last body line.
    while i < len(lines) and lines[i].startswith(_NO_NEWLINE_PREFIX):
        body.append(DiffLine(LineOrigin.NO_NEWLINE, lines[i][1:], len(body) + 1))
        i += 1

    hunk = DiffHunk(
        old_start=old_start,
        old_length=old_length,
        new_start=new_start,
        new_length=new_length,
        heading=heading,
        lines=tuple(body),
        index=hunk_index,
    )
    return hunk, i


def parse_hunk(header: str, body_lines: Sequence[str], index: int = 0) -> DiffHunk:
    """Strictly parse one hunk from its header and raw body lines.

    The body must contain exactly the lines the header declares, optionally
    followed by "No newline at end of file" markers.
    """
    if not header.startswith("@@"):
        raise MalformedDiff(f"invalid hunk header: {header!r}")
    lines = [header, *body_lines]
    hunk, next_index = _consume_hunk(lines, 0, index)
    if next_index != len(lines):
        raise MalformedDiff("trailing content after hunk body")
    return hunk


def _split_lines(text: str) -> list[str]:
    # ``str.splitlines`` would also split on form feeds and other separators
    # that may legitimately appear inside a line.
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _unquote_path(raw: str) -> str:
    """Decode git's C-style quoted path syntax."""
    raw = raw.strip()
    if len(raw) < 2 or not (raw.startswith('"') and raw.endswith('"')):
        return raw
    inner = raw[1:-1]
    decoded = inner.encode("latin-1", "backslashreplace").decode("unicode_escape")
    return decoded.encode("latin-1", "replace").decode("utf-8", errors="surrogateescape")


def _strip_side_prefix(path: str, prefix: str) -> str:
    return path[len(prefix):] if path.startswith(prefix) else path


def _paths_from_diff_git_line(line: str) -> tuple[str | None, str | None]:
    rest = line[len(_DIFF_GIT_PREFIX):]
    if rest.startswith('"'):
        closing = rest.find('" ', 1)
        if closing < 0:
            return None, None
        old_raw, new_raw = rest[: closing + 1], rest[closing + 2:]
        return (
            _strip_side_prefix(_unquote_path(old_raw), "a/"),
            _strip_side_prefix(_unquote_path(new_raw), "b/"),
        )
    # Unquoted paths are ambiguous when they contain spaces; the common case
    # of identical old/new paths splits cleanly in the middle.
    if rest.startswith("a/") and len(rest) % 2 == 1:
        half = (len(rest) - 1) // 2
        old_raw, new_raw = rest[:half], rest[half + 1:]
        if old_raw[2:] == new_raw[2:] and new_raw.startswith("b/"):
            return old_raw[2:], new_raw[2:]
    parts = rest.split(" b/", 1)
    if len(parts) != 2:
        return None, None
    return _strip_side_prefix(parts[0], "a/"), parts[1]


def _parse_file_header(header: Sequence[str]) -> tuple[str, str | None, ChangeKind, bool]:
    """Interpret the metadata block of one ``diff --git`` section."""
    old_path, new_path = _paths_from_diff_git_line(header[0])
    change = ChangeKind.MODIFIED
    is_binary = False
    minus_path: str | None = None
    plus_path: str | None = None
    saw_minus = False
    saw_plus = False

    for line in header[1:]:
        if line.startswith("new file mode "):
            change = ChangeKind.ADDED
        elif line.startswith("deleted file mode "):
            change = ChangeKind.DELETED
        elif line.startswith("rename from "):
            change = ChangeKind.RENAMED
            old_path = _unquote_path(line[len("rename from "):])
        elif line.startswith("rename to "):
            change = ChangeKind.RENAMED
            new_path = _unquote_path(line[len("rename to "):])
        elif line.startswith("copy from "):
            change = ChangeKind.COPIED
            old_path = _unquote_path(line[len("copy from "):])
        elif line.startswith("copy to "):
            change = ChangeKind.COPIED
            new_path = _unquote_path(line[len("copy to "):])
        elif line.startswith("old mode ") or line.startswith("new mode "):
            # Mode lines alone (or with content changes) keep the current kind
            # unless a mode 120000 swap turns it into a type change below.
            if "120000" in line and change is ChangeKind.MODIFIED:
                change = ChangeKind.TYPE_CHANGED
        elif line.startswith("Binary files ") or line.startswith("GIT binary patch"):
            is_binary = True
        elif line.startswith("--- "):
            saw_minus = True
            target = _unquote_path(line[4:])
            minus_path = None if target == "/dev/null" else _strip_side_prefix(target, "a/")
        elif line.startswith("+++ "):
            if not saw_minus:
                raise MalformedDiff(f"'+++' without '---' in {header[0]!r}")
            saw_plus = True
            target = _unquote_path(line[4:])
            plus_path = None if target == "/dev/null" else _strip_side_prefix(target, "b/")

    if saw_minus and not saw_plus:
        raise MalformedDiff(f"truncated file header in {header[0]!r}")
    if saw_minus:
        if minus_path is None:
            change = ChangeKind.ADDED
        if plus_path is None:
            change = ChangeKind.DELETED
        old_path = minus_path or old_path
        new_path = plus_path or new_path

    path = new_path or old_path
    if path is None:
        raise MalformedDiff(f"cannot determine path from {header[0]!r}")
    if change is ChangeKind.ADDED:
        return path, None, change, is_binary
    return path, old_path, change, is_binary


def _skip_to_next_file(lines: Sequence[str], index: int) -> int:
    while index < len(lines) and not lines[index].startswith(_DIFF_GIT_PREFIX):
        index += 1
    return index


def _fallback_path(line: str) -> str:
    old_path, new_path = _paths_from_diff_git_line(line)
    return new_path or old_path or line[len(_DIFF_GIT_PREFIX):]


def _parse_single_file(lines: Sequence[str], start_index: int) -> tuple[FileDiff, int]:
    i = start_index + 1
    while i < len(lines) and not lines[i].startswith("@@") and not lines[i].startswith(_DIFF_GIT_PREFIX):
        i += 1
    header = tuple(lines[start_index:i])
    path, old_path, change, is_binary = _parse_file_header(header)

    has_body = i < len(lines) and lines[i].startswith("@@")
    if has_body and not any(line.startswith("+++ ") for line in header):
        raise MalformedDiff(f"hunks without '---'/'+++' header in {header[0]!r}")

    hunks: list[DiffHunk] = []
    while i < len(lines) and lines[i].startswith("@@"):
        hunk, i = _consume_hunk(lines, i, len(hunks))
        hunks.append(hunk)

    while i < len(lines) and hunks and lines[i] == "":
        i += 1
    if i < len(lines) and not lines[i].startswith(_DIFF_GIT_PREFIX):
        raise MalformedDiff(f"unexpected line after hunks in {header[0]!r}: {lines[i]!r}")

    return (
        FileDiff(
            path=path,
            old_path=old_path,
            change=change,
            hunks=tuple(hunks),
            header_lines=header,
            is_binary=is_binary,
        ),
        i,
    )


def parse_unified_diff(raw_diff: str) -> list[FileDiff]:
    """Parse ``git diff`` output into one ``FileDiff`` per ``diff --git`` block.

    Malformed blocks do not abort the parse: they yield a ``FileDiff`` whose
    ``error`` holds the reason, and parsing resumes at the next block.
    """
    lines = _split_lines(raw_diff)
    files: list[FileDiff] = []
    i = _skip_to_next_file(lines, 0)

    while i < len(lines):
        start = i
        try:
            file_diff, i = _parse_single_file(lines, start)
        except MalformedDiff as exc:
            LOG.warning("diff unavailable for %s: %s", _fallback_path(lines[start]), exc)
            i = _skip_to_next_file(lines, start + 1)
            file_diff = FileDiff(
                path=_fallback_path(lines[start]),
                old_path=None,
                change=ChangeKind.MODIFIED,
                header_lines=(lines[start],),
                error=str(exc),
            )
        files.append(file_diff)
        i = _skip_to_next_file(lines, i)

    return files
