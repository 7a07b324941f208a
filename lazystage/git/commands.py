"""Translate ``Operation`` values into git invocations."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..operations import OPTION_FLAGS, Operation, OperationKind
from .log import log_args
from .runner import GitOutput, GitRunner
from .snapshot import DIFF_ARGS
from .status import STATUS_ARGS

# Background commands must never wait on a credential prompt or an editor.
NON_INTERACTIVE_ENV = {
    "GIT_TERMINAL_PROMPT": "0",
    "GIT_EDITOR": "true",
    "GIT_SEQUENCE_EDITOR": "true",
}
COMMIT_DIFF_ARGS = (
    "diff-tree",
    "--patch",
    "--root",
    "--no-commit-id",
    "--no-color",
    "--no-ext-diff",
    "--find-renames",
    "--src-prefix=a/",
    "--dst-prefix=b/",
)

K = OperationKind


@dataclass(frozen=True)
class GitCommand:
    args: tuple[str, ...]
    stdin: str | None = None
    env: dict[str, str] = field(default_factory=lambda: dict(NON_INTERACTIVE_ENV))


def _flags(operation: Operation, skip: frozenset[str] = frozenset()) -> list[str]:
    return [OPTION_FLAGS[name] for name in sorted(operation.options) if name not in skip]


def _paths(operation: Operation) -> list[str]:
    return ["--", *operation.paths] if operation.paths else []


def _require(value: str | None, what: str, operation: Operation) -> str:
    if not value:
        raise ValueError(f"{operation.kind.value} requires a {what}")
    return value


def _message_args(operation: Operation) -> tuple[list[str], str | None]:
    if operation.message is None:
        return ["--no-edit"], None
    return ["--file=-"], operation.message


def _patch_command(operation: Operation) -> GitCommand:
    patch = operation.patch
    assert patch is not None
    return GitCommand(("apply", "--whitespace=nowarn", *patch.apply_args, "-"), stdin=patch.text)


def _remote_args(operation: Operation) -> list[str]:
    if "all" in operation.options:
        return []
    args = [operation.target] if operation.target else []
    if operation.target and operation.argument:
        args.append(operation.argument)
    return args


def build_command(operation: Operation) -> GitCommand:
    """Return the git invocation that carries out ``operation``.

    Raises ``ValueError`` when a required operand is missing.
    """
    kind = operation.kind

    if kind.needs_patch:
        return _patch_command(operation)
    if kind is K.STAGE_FILES:
        return GitCommand(("add", "--all", *_paths(operation)))
    if kind is K.STAGE_ALL:
        return GitCommand(("add", "--update"))
    if kind is K.UNSTAGE_FILES:
        return GitCommand(("reset", "--quiet", *_paths(operation)))
    if kind is K.UNSTAGE_ALL:
        return GitCommand(("reset", "--quiet"))
    if kind is K.DISCARD_FILES:
        return GitCommand(("checkout", *_paths(operation)))
    if kind is K.DELETE_UNTRACKED:
        return GitCommand(("clean", "--force", "-d", *_paths(operation)))

    if kind is K.FETCH:
        return GitCommand(("fetch", *_flags(operation), *_remote_args(operation)))
    if kind is K.PULL:
        return GitCommand(("pull", "--no-edit", *_flags(operation), *_remote_args(operation)))
    if kind is K.PUSH:
        return GitCommand(("push", "--porcelain", *_flags(operation), *_remote_args(operation)))
    if kind is K.PUSH_TAG:
        remote = _require(operation.target, "remote", operation)
        tag = _require(operation.argument, "tag", operation)
        return GitCommand(("push", *_flags(operation), remote, f"refs/tags/{tag}"))
    if kind is K.PUSH_ALL_TAGS:
        remote = _require(operation.target, "remote", operation)
        return GitCommand(("push", "--tags", *_flags(operation), remote))

    if kind is K.COMMIT:
        message = _require(operation.message, "message", operation)
        return GitCommand(("commit", *_flags(operation), "--file=-"), stdin=message)
    if kind is K.AMEND:
        message_args, stdin = _message_args(operation)
        return GitCommand(("commit", "--amend", *_flags(operation), *message_args), stdin=stdin)
    if kind is K.REWORD:
        message = _require(operation.message, "message", operation)
        return GitCommand(("commit", "--amend", "--only", *_flags(operation), "--file=-"), stdin=message)
    if kind is K.FIXUP:
        target = _require(operation.target, "commit", operation)
        return GitCommand(("commit", f"--fixup={target}", *_flags(operation)))

    if kind is K.CHECKOUT:
        target = _require(operation.target, "ref", operation)
        return GitCommand(("checkout", *_flags(operation), target))
    if kind is K.CREATE_BRANCH:
        name = _require(operation.target, "branch name", operation)
        create = "-B" if "force" in operation.options else "-b"
        start = [operation.argument] if operation.argument else []
        return GitCommand(("checkout", create, name, *start))
    if kind is K.DELETE_BRANCH:
        name = _require(operation.target, "branch", operation)
        return GitCommand(("branch", "-D" if "force" in operation.options else "-d", name))
    if kind is K.RENAME_BRANCH:
        old = _require(operation.target, "branch", operation)
        new = _require(operation.argument, "new branch name", operation)
        return GitCommand(("branch", "-M" if "force" in operation.options else "-m", old, new))

    if kind is K.STASH_PUSH:
        message = ["--message", operation.message] if operation.message else []
        return GitCommand(("stash", "push", *_flags(operation), *message))
    if kind in (K.STASH_POP, K.STASH_APPLY, K.STASH_DROP):
        ref = _require(operation.target, "stash", operation)
        verb = kind.value.removeprefix("stash-")
        return GitCommand(("stash", verb, "--quiet", ref))

    if kind is K.REFRESH_STATUS:
        return GitCommand(STATUS_ARGS)
    if kind is K.READ_DIFF:
        if operation.argument:
            return GitCommand((*COMMIT_DIFF_ARGS, operation.argument))
        cached = ["--cached"] if operation.target == "staged" else []
        return GitCommand((*DIFF_ARGS, *cached, *_paths(operation)))
    if kind is K.LOG:
        return GitCommand(log_args(operation.target, all_refs="all" in operation.options))

    raise ValueError(f"no command for {kind.value}")


def run_operation(runner: GitRunner, operation: Operation) -> GitOutput:
    command = build_command(operation)
    return runner.run(command.args, stdin=command.stdin, env=command.env)
