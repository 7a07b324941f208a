"""Outline node datatypes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class SectionKind(str, Enum):
    HEAD = "head"
    UPSTREAM = "upstream"
    PUSH_REMOTE = "push-remote"
    TAG = "tag"
    UNTRACKED_GROUP = "untracked-group"
    UNTRACKED_FILE = "untracked-file"
    UNSTAGED_GROUP = "unstaged-group"
    UNSTAGED_FILE = "unstaged-file"
    UNSTAGED_HUNK = "unstaged-hunk"
    STAGED_GROUP = "staged-group"
    STAGED_FILE = "staged-file"
    STAGED_HUNK = "staged-hunk"
    STASH_GROUP = "stash-group"
    STASH_ENTRY = "stash-entry"
    RECENT_GROUP = "recent-group"
    COMMIT = "commit"
    BRANCH_GROUP = "branch-group"
    BRANCH = "branch"
    REMOTE_GROUP = "remote-group"
    REMOTE = "remote"
    TAG_GROUP = "tag-group"

    @property
    def is_group(self) -> bool:
        return self.value.endswith("-group")

    @property
    def is_file(self) -> bool:
        return self in FILE_KINDS

    @property
    def is_hunk(self) -> bool:
        return self in (SectionKind.UNSTAGED_HUNK, SectionKind.STAGED_HUNK)


FILE_KINDS = frozenset({SectionKind.UNTRACKED_FILE, SectionKind.UNSTAGED_FILE, SectionKind.STAGED_FILE})


@dataclass(frozen=True)
class SectionAddress:
    """Stable identity of a section: its kind plus a kind-specific key."""

    kind: SectionKind
    key: tuple[str, ...] = ()

    def __str__(self) -> str:
        if not self.key:
            return self.kind.value
        return f"{self.kind.value}:{'/'.join(self.key)}"


@dataclass(frozen=True)
class Section:
    """One outline node. Children are owned exclusively by their parent."""

    address: SectionAddress
    title: str
    children: tuple[Section, ...] = ()
    collapsed: bool = False
    payload: object = field(default=None, compare=False)

    @property
    def kind(self) -> SectionKind:
        return self.address.kind

    @property
    def is_collapsible(self) -> bool:
        return bool(self.children) or self.kind.is_hunk


@dataclass(frozen=True)
class Cursor:
    """Cursor position: a section plus an optional 1-based hunk line."""

    address: SectionAddress
    line: int | None = None
