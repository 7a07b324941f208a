"""Operation and result value objects.

An ``Operation`` describes one git action requested by the user. Building one
never touches the repository; options are validated per kind on construction
so that an invalid combination is rejected before anything is scheduled.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from enum import Enum

from .diff.patch import Patch
from .errors import IncompatibleOptions


class OperationKind(str, Enum):
    STAGE_FILES = "stage-files"
    STAGE_HUNK = "stage-hunk"
    STAGE_LINES = "stage-lines"
    STAGE_ALL = "stage-all"
    UNSTAGE_FILES = "unstage-files"
    UNSTAGE_HUNK = "unstage-hunk"
    UNSTAGE_LINES = "unstage-lines"
    UNSTAGE_ALL = "unstage-all"
    DISCARD_FILES = "discard-files"
    DISCARD_HUNK = "discard-hunk"
    DISCARD_LINES = "discard-lines"
    DELETE_UNTRACKED = "delete-untracked"
    FETCH = "fetch"
    PULL = "pull"
    PUSH = "push"
    PUSH_TAG = "push-tag"
    PUSH_ALL_TAGS = "push-all-tags"
    COMMIT = "commit"
    AMEND = "amend"
    REWORD = "reword"
    FIXUP = "fixup"
    CHECKOUT = "checkout"
    CREATE_BRANCH = "create-branch"
    DELETE_BRANCH = "delete-branch"
    RENAME_BRANCH = "rename-branch"
    STASH_PUSH = "stash-push"
    STASH_POP = "stash-pop"
    STASH_APPLY = "stash-apply"
    STASH_DROP = "stash-drop"
    REFRESH_STATUS = "refresh-status"
    READ_DIFF = "read-diff"
    LOG = "log"

    @property
    def is_mutating(self) -> bool:
        return self not in READ_KINDS

    @property
    def needs_patch(self) -> bool:
        return self in PATCH_KINDS


READ_KINDS = frozenset({OperationKind.REFRESH_STATUS, OperationKind.READ_DIFF, OperationKind.LOG})

PATCH_KINDS = frozenset(
    {
        OperationKind.STAGE_HUNK,
        OperationKind.STAGE_LINES,
        OperationKind.UNSTAGE_HUNK,
        OperationKind.UNSTAGE_LINES,
        OperationKind.DISCARD_HUNK,
        OperationKind.DISCARD_LINES,
    }
)

# Kinds where a later request makes a queued identical one pointless. Kinds
# that carry user text (commit messages, new names) are never collapsed.
SUPERSEDABLE_KINDS = frozenset(
    {
        OperationKind.FETCH,
        OperationKind.PULL,
        OperationKind.PUSH,
        OperationKind.PUSH_TAG,
        OperationKind.PUSH_ALL_TAGS,
        OperationKind.CHECKOUT,
        OperationKind.STAGE_FILES,
        OperationKind.STAGE_ALL,
        OperationKind.UNSTAGE_FILES,
        OperationKind.UNSTAGE_ALL,
        OperationKind.REFRESH_STATUS,
    }
)

OPTION_FLAGS: dict[str, str] = {
    "force": "--force",
    "force-with-lease": "--force-with-lease",
    "dry-run": "--dry-run",
    "prune": "--prune",
    "tags": "--tags",
    "include-tags": "--tags",
    "follow-tags": "--follow-tags",
    "autostash": "--autostash",
    "rebase": "--rebase",
    "ff-only": "--ff-only",
    "set-upstream": "--set-upstream",
    "no-verify": "--no-verify",
    "allow-empty": "--allow-empty",
    "all": "--all",
    "verbose": "--verbose",
    "include-untracked": "--include-untracked",
    "keep-index": "--keep-index",
}

_K = OperationKind

ALLOWED_OPTIONS: dict[OperationKind, frozenset[str]] = {
    _K.FETCH: frozenset({"prune", "include-tags", "all", "verbose", "force"}),
    _K.PULL: frozenset({"rebase", "ff-only", "autostash", "prune", "include-tags", "verbose"}),
    _K.PUSH: frozenset(
        {"force", "force-with-lease", "dry-run", "set-upstream", "tags", "follow-tags", "no-verify", "verbose"}
    ),
    _K.PUSH_TAG: frozenset({"force", "dry-run", "verbose"}),
    _K.PUSH_ALL_TAGS: frozenset({"force", "dry-run", "verbose"}),
    _K.COMMIT: frozenset({"all", "allow-empty", "no-verify", "verbose"}),
    _K.AMEND: frozenset({"all", "allow-empty", "no-verify"}),
    _K.REWORD: frozenset({"allow-empty", "no-verify"}),
    _K.FIXUP: frozenset({"no-verify"}),
    _K.CHECKOUT: frozenset({"force"}),
    _K.CREATE_BRANCH: frozenset({"force"}),
    _K.DELETE_BRANCH: frozenset({"force"}),
    _K.RENAME_BRANCH: frozenset({"force"}),
    _K.STASH_PUSH: frozenset({"include-untracked", "keep-index", "all"}),
    _K.STASH_POP: frozenset(),
    _K.STASH_APPLY: frozenset(),
    _K.STASH_DROP: frozenset(),
    _K.LOG: frozenset({"all"}),
}

INCOMPATIBLE_OPTIONS: tuple[tuple[str, str], ...] = (
    ("force", "force-with-lease"),
    ("rebase", "ff-only"),
    ("include-untracked", "all"),
)


def options_for(kind: OperationKind) -> frozenset[str]:
    """Return the option names accepted by ``kind`` (empty for most kinds)."""
    return ALLOWED_OPTIONS.get(kind, frozenset())


def validate_options(kind: OperationKind, options: Iterable[str]) -> frozenset[str]:
    """Return ``options`` as a frozenset, raising ``IncompatibleOptions`` when invalid."""
    normalized = frozenset(options)
    unknown = normalized - options_for(kind)
    if unknown:
        raise IncompatibleOptions(f"{kind.value} does not accept {', '.join(sorted(unknown))}")
    for first, second in INCOMPATIBLE_OPTIONS:
        if first in normalized and second in normalized:
            raise IncompatibleOptions(f"{first} and {second} cannot be combined")
    return normalized


@dataclass(frozen=True)
class Operation:
    """One requested git action.

    ``target`` names what the action is about (remote, branch, ref or stash
    ref); ``argument`` is the second operand where one exists (start point
    for a new branch, the new name for a rename, the branch to push).
    """

    kind: OperationKind
    options: frozenset[str] = frozenset()
    target: str | None = None
    argument: str | None = None
    paths: tuple[str, ...] = ()
    message: str | None = None
    patch: Patch | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", validate_options(self.kind, self.options))
        object.__setattr__(self, "paths", tuple(self.paths))
        if self.kind.needs_patch and self.patch is None:
            raise ValueError(f"{self.kind.value} requires a patch payload")
        if not self.kind.needs_patch and self.patch is not None:
            raise ValueError(f"{self.kind.value} does not take a patch payload")

    @property
    def is_mutating(self) -> bool:
        return self.kind.is_mutating

    @property
    def supersession_key(self) -> tuple[object, ...] | None:
        """Key under which a newer request replaces an older one, or ``None``."""
        if self.kind not in SUPERSEDABLE_KINDS:
            return None
        return (self.kind, self.target, self.paths)

    def describe(self) -> str:
        """Short human label used in notifications and logs."""
        parts = [self.kind.value]
        if self.target:
            parts.append(self.target)
        if self.argument and not self.is_mutating:
            parts.append(self.argument)
        if self.paths:
            parts.append(self.paths[0] if len(self.paths) == 1 else f"{len(self.paths)} files")
        elif self.patch is not None:
            parts.append(self.patch.path)
        return " ".join(parts)


class Outcome(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    SUPERSEDED = "superseded"


@dataclass(frozen=True)
class OperationResult:
    ticket: int
    operation: Operation
    outcome: Outcome
    exit_status: int | None = None
    stdout: str = ""
    stderr: str = ""

    @classmethod
    def from_exit(
        cls,
        ticket: int,
        operation: Operation,
        exit_status: int,
        stdout: str,
        stderr: str,
    ) -> OperationResult:
        outcome = Outcome.SUCCESS if exit_status == 0 else Outcome.FAILED
        return cls(ticket, operation, outcome, exit_status, stdout, stderr)

    @classmethod
    def superseded(cls, ticket: int, operation: Operation) -> OperationResult:
        return cls(ticket, operation, Outcome.SUPERSEDED)

    @property
    def succeeded(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    @property
    def diagnostic(self) -> str:
        """git's own explanation of a failure (stderr, else stdout)."""
        if self.outcome is not Outcome.FAILED:
            return ""
        text = self.stderr.strip() or self.stdout.strip()
        return text

    def as_superseded(self) -> OperationResult:
        return replace(self, outcome=Outcome.SUPERSEDED)


__all__ = [
    "ALLOWED_OPTIONS",
    "INCOMPATIBLE_OPTIONS",
    "OPTION_FLAGS",
    "PATCH_KINDS",
    "READ_KINDS",
    "SUPERSEDABLE_KINDS",
    "Operation",
    "OperationKind",
    "OperationResult",
    "Outcome",
    "options_for",
    "validate_options",
]
