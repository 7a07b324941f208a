"""Immutable repository snapshots, one per refresh cycle."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..diff import FileDiff, parse_unified_diff
from . import refs
from .refs import Commit, Ref, Remote, StashEntry
from .runner import GitRunner
from .status import STATUS_ARGS, BranchStatus, StatusEntry, parse_status

LOG = logging.getLogger(__name__)

EMPTY_TREE_OID = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"
# Pinned prefixes: diff.noprefix and diff.mnemonicPrefix would change the
# "a/" and "b/" path prefixes the parser and patch headers rely on.
DIFF_ARGS = ("diff", "--no-color", "--no-ext-diff", "--find-renames", "--src-prefix=a/", "--dst-prefix=b/")


@dataclass(frozen=True)
class HeadInfo:
    branch: str | None
    commit: Commit | None
    detached: bool = False
    unborn: bool = False

    @property
    def label(self) -> str:
        if self.detached:
            return f"(detached {self.commit.short_oid})" if self.commit else "(detached)"
        return self.branch or "(unknown)"


@dataclass(frozen=True)
class RepositoryState:
    head: HeadInfo
    upstream: str | None = None
    push_remote: str | None = None
    ahead: int = 0
    behind: int = 0
    push_ahead: int = 0
    push_behind: int = 0
    branches: tuple[Ref, ...] = ()
    remotes: tuple[Remote, ...] = ()
    tags: tuple[Ref, ...] = ()
    stashes: tuple[StashEntry, ...] = ()
    entries: tuple[StatusEntry, ...] = ()
    latest_tag: str | None = None
    recent_commits: tuple[Commit, ...] = ()

    @property
    def untracked(self) -> tuple[StatusEntry, ...]:
        return tuple(entry for entry in self.entries if entry.is_untracked)

    @property
    def remote_names(self) -> tuple[str, ...]:
        return tuple(remote.name for remote in self.remotes)


@dataclass(frozen=True)
class Snapshot:
    """A ``RepositoryState`` plus the raw diff text captured with it."""

    state: RepositoryState
    unstaged_text: str = ""
    staged_text: str = ""
    unstaged: tuple[FileDiff, ...] = field(default=(), compare=False)
    staged: tuple[FileDiff, ...] = field(default=(), compare=False)


def _head_info(runner: GitRunner, branch: BranchStatus) -> HeadInfo:
    commit = None if branch.unborn else refs.head_commit(runner)
    return HeadInfo(branch=branch.head, commit=commit, detached=branch.detached, unborn=branch.unborn)


def read_diffs(runner: GitRunner, unborn: bool, diff_args: Sequence[str] = ()) -> tuple[str, str]:
    """Return ``(unstaged_text, staged_text)``."""
    unstaged = runner.output([*DIFF_ARGS, *diff_args])
    cached_base = [EMPTY_TREE_OID] if unborn else []
    staged = runner.output([*DIFF_ARGS, "--cached", *diff_args, *cached_base])
    return unstaged, staged


def collect_snapshot(
    runner: GitRunner,
    recent_commit_count: int = 10,
    diff_args: Sequence[str] = (),
) -> Snapshot:
    """Query git for the full repository state and both diff texts.

    Raises ``GitError`` only if git cannot be spawned; individual queries
    that fail (no upstream, no tags, unborn HEAD) degrade to empty values.
    """
    status_result = runner.run(STATUS_ARGS)
    if not status_result.ok:
        LOG.warning("git status failed: %s", status_result.stderr.strip())
    branch, entries = parse_status(status_result.stdout if status_result.ok else "")

    push_remote = None if branch.detached or branch.unborn else refs.push_remote_ref(runner)
    push_ahead, push_behind = (0, 0)
    if push_remote and push_remote != branch.upstream:
        push_ahead, push_behind = refs.ahead_behind(runner, push_remote)
    elif push_remote:
        push_ahead, push_behind = branch.ahead, branch.behind

    state = RepositoryState(
        head=_head_info(runner, branch),
        upstream=branch.upstream,
        push_remote=push_remote,
        ahead=branch.ahead,
        behind=branch.behind,
        push_ahead=push_ahead,
        push_behind=push_behind,
        branches=refs.list_branches(runner),
        remotes=refs.list_remotes(runner),
        tags=refs.list_tags(runner),
        stashes=refs.list_stashes(runner),
        entries=entries,
        latest_tag=None if branch.unborn else refs.latest_tag(runner),
        recent_commits=() if branch.unborn else refs.recent_commits(runner, recent_commit_count),
    )
    unstaged_text, staged_text = read_diffs(runner, branch.unborn, diff_args)
    return Snapshot(
        state=state,
        unstaged_text=unstaged_text,
        staged_text=staged_text,
        unstaged=tuple(parse_unified_diff(unstaged_text)),
        staged=tuple(parse_unified_diff(staged_text)),
    )
