"""Parsing of ``git status --porcelain=v1 -z --branch`` output."""

from __future__ import annotations

import re
from dataclasses import dataclass

STATUS_ARGS = ("status", "--porcelain=v1", "-z", "--branch", "--untracked-files=normal")

_AHEAD_BEHIND_RE = re.compile(r"\[(?:ahead (?P<ahead>\d+))?(?:, )?(?:behind (?P<behind>\d+))?(?P<gone>gone)?\]$")
_CONFLICT_CODES = frozenset({"DD", "AU", "UD", "UA", "DU", "AA", "UU"})


@dataclass(frozen=True)
class StatusEntry:
    """One working-tree status record; ``orig_path`` is set for renames/copies."""

    path: str
    index_status: str
    worktree_status: str
    orig_path: str | None = None

    @property
    def code(self) -> str:
        return self.index_status + self.worktree_status

    @property
    def is_untracked(self) -> bool:
        return self.code == "??"

    @property
    def is_ignored(self) -> bool:
        return self.code == "!!"

    @property
    def is_conflicted(self) -> bool:
        return self.code in _CONFLICT_CODES

    @property
    def has_staged_changes(self) -> bool:
        return not self.is_untracked and not self.is_ignored and self.index_status not in (" ", "?")

    @property
    def has_unstaged_changes(self) -> bool:
        return not self.is_untracked and not self.is_ignored and self.worktree_status not in (" ", "?")


@dataclass(frozen=True)
class BranchStatus:
    head: str | None = None
    upstream: str | None = None
    ahead: int = 0
    behind: int = 0
    detached: bool = False
    unborn: bool = False
    upstream_gone: bool = False


def parse_branch_line(line: str) -> BranchStatus:
    """Parse the ``## ...`` header record emitted by ``--branch``."""
    text = line[3:] if line.startswith("## ") else line
    if text.startswith("No commits yet on "):
        return BranchStatus(head=text[len("No commits yet on "):], unborn=True)
    if text.startswith("Initial commit on "):
        return BranchStatus(head=text[len("Initial commit on "):], unborn=True)
    if text.startswith("HEAD (no branch)"):
        return BranchStatus(detached=True)

    ahead = behind = 0
    gone = False
    match = _AHEAD_BEHIND_RE.search(text)
    if match is not None:
        ahead = int(match.group("ahead") or 0)
        behind = int(match.group("behind") or 0)
        gone = match.group("gone") is not None
        text = text[: match.start()].rstrip()

    head, _sep, upstream = text.partition("...")
    return BranchStatus(
        head=head or None,
        upstream=upstream or None,
        ahead=ahead,
        behind=behind,
        upstream_gone=gone,
    )


def iter_porcelain_records(output: str) -> list[tuple[str, str, str | None]]:
    """Split NUL-separated porcelain output into ``(code, path, orig_path)``."""
    records: list[tuple[str, str, str | None]] = []
    tokens = output.split("\0")
    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1
        if not token or token.startswith("## "):
            continue
        if len(token) < 4 or token[2] != " ":
            continue

        status = token[:2]
        path_text = token[3:]
        orig_path: str | None = None
        # For renamed/copied entries, porcelain -z appends an extra token
        # containing the source path; the first path token is the destination.
        if "R" in status or "C" in status:
            if index < len(tokens):
                orig_path = tokens[index] or None
            index += 1
        records.append((status, path_text, orig_path))

    return records


def parse_status(output: str) -> tuple[BranchStatus, tuple[StatusEntry, ...]]:
    branch = BranchStatus()
    first = output.split("\0", 1)[0]
    if first.startswith("## "):
        branch = parse_branch_line(first)

    entries = tuple(
        StatusEntry(path=path, index_status=code[0], worktree_status=code[1], orig_path=orig_path)
        for code, path, orig_path in iter_porcelain_records(output)
        if code != "!!"
    )
    return branch, entries
