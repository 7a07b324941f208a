"""Ref, remote, stash and log queries."""

from __future__ import annotations

from dataclasses import dataclass

from .runner import GitRunner

_SEP = "\x1f"

_BRANCH_FORMAT = "%(HEAD)%1f%(refname:short)%1f%(objectname)%1f%(upstream:short)%1f%(contents:subject)"
_REMOTE_BRANCH_FORMAT = "%(refname:short)%1f%(objectname)%1f%(contents:subject)"
_TAG_FORMAT = "%(refname:short)%1f%(objectname)%1f%(contents:subject)"
_STASH_FORMAT = "%gd%x1f%H%x1f%gs"
_LOG_FORMAT = "%H%x1f%h%x1f%s"


@dataclass(frozen=True)
class Ref:
    name: str
    oid: str
    subject: str = ""
    upstream: str | None = None
    is_head: bool = False


@dataclass(frozen=True)
class Remote:
    name: str
    url: str
    branches: tuple[Ref, ...] = ()


@dataclass(frozen=True)
class StashEntry:
    """One ``stash@{N}`` entry."""

    index: int
    ref: str
    oid: str
    message: str


@dataclass(frozen=True)
class Commit:
    oid: str
    short_oid: str
    subject: str


def _split_records(output: str, fields: int) -> list[list[str]]:
    records: list[list[str]] = []
    for line in output.splitlines():
        if not line:
            continue
        parts = line.split(_SEP)
        if len(parts) < fields:
            parts.extend([""] * (fields - len(parts)))
        records.append(parts[:fields])
    return records


def list_branches(runner: GitRunner) -> tuple[Ref, ...]:
    output = runner.output(["for-each-ref", f"--format={_BRANCH_FORMAT}", "refs/heads"])
    return tuple(
        Ref(name=name, oid=oid, subject=subject, upstream=upstream or None, is_head=head == "*")
        for head, name, oid, upstream, subject in _split_records(output, 5)
    )


def list_remotes(runner: GitRunner) -> tuple[Remote, ...]:
    urls: dict[str, str] = {}
    for line in runner.output(["remote", "-v"]).splitlines():
        name, _tab, rest = line.partition("\t")
        if not name or name in urls:
            continue
        urls[name] = rest.rsplit(" ", 1)[0] if rest.endswith(")") else rest

    branches_by_remote: dict[str, list[Ref]] = {name: [] for name in urls}
    output = runner.output(["for-each-ref", f"--format={_REMOTE_BRANCH_FORMAT}", "refs/remotes"])
    for name, oid, subject in _split_records(output, 3):
        remote_name, _slash, branch = name.partition("/")
        # ``origin/HEAD`` symbolic refs show up as the bare remote name.
        if not branch or branch == "HEAD" or remote_name not in branches_by_remote:
            continue
        branches_by_remote[remote_name].append(Ref(name=name, oid=oid, subject=subject))

    return tuple(
        Remote(name=name, url=url, branches=tuple(branches_by_remote[name]))
        for name, url in urls.items()
    )


def list_tags(runner: GitRunner) -> tuple[Ref, ...]:
    output = runner.output(["for-each-ref", "--sort=-creatordate", f"--format={_TAG_FORMAT}", "refs/tags"])
    return tuple(Ref(name=name, oid=oid, subject=subject) for name, oid, subject in _split_records(output, 3))


def list_stashes(runner: GitRunner) -> tuple[StashEntry, ...]:
    output = runner.output(["stash", "list", f"--format={_STASH_FORMAT}"])
    entries: list[StashEntry] = []
    for ref, oid, message in _split_records(output, 3):
        try:
            index = int(ref[ref.index("{") + 1 : ref.index("}")])
        except ValueError:
            continue
        entries.append(StashEntry(index=index, ref=ref, oid=oid, message=message))
    return tuple(entries)


def recent_commits(runner: GitRunner, count: int) -> tuple[Commit, ...]:
    if count <= 0:
        return ()
    output = runner.output(["log", f"--format={_LOG_FORMAT}", f"--max-count={count}"])
    return tuple(Commit(oid=oid, short_oid=short, subject=subject) for oid, short, subject in _split_records(output, 3))


def latest_tag(runner: GitRunner) -> str | None:
    return runner.output(["describe", "--tags", "--abbrev=0"]).strip() or None


def push_remote_ref(runner: GitRunner) -> str | None:
    return runner.output(["rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{push}"]).strip() or None


def ahead_behind(runner: GitRunner, ref: str) -> tuple[int, int]:
    """Return ``(ahead, behind)`` of HEAD relative to ``ref``."""
    output = runner.output(["rev-list", "--left-right", "--count", f"HEAD...{ref}"]).split()
    if len(output) != 2:
        return 0, 0
    try:
        return int(output[0]), int(output[1])
    except ValueError:
        return 0, 0


def head_commit(runner: GitRunner) -> Commit | None:
    output = runner.output(["log", f"--format={_LOG_FORMAT}", "--max-count=1", "HEAD"])
    records = _split_records(output, 3)
    if not records:
        return None
    oid, short, subject = records[0]
    return Commit(oid=oid, short_oid=short, subject=subject)
