"""git query and mutation interface."""

from __future__ import annotations

from .commands import GitCommand, build_command, run_operation
from .refs import Commit, Ref, Remote, StashEntry
from .runner import GitOutput, GitRunner, discover_repository
from .snapshot import HeadInfo, RepositoryState, Snapshot, collect_snapshot
from .status import BranchStatus, StatusEntry, parse_status

__all__ = [
    "BranchStatus",
    "Commit",
    "GitCommand",
    "GitOutput",
    "GitRunner",
    "HeadInfo",
    "Ref",
    "Remote",
    "RepositoryState",
    "Snapshot",
    "StashEntry",
    "StatusEntry",
    "build_command",
    "collect_snapshot",
    "discover_repository",
    "parse_status",
    "run_operation",
]
