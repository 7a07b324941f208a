"""Build the status outline from a repository snapshot."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from ..diff.types import ChangeKind, DiffHunk, FileDiff
from ..git.snapshot import RepositoryState, Snapshot
from ..git.status import StatusEntry
from .tree import Outline
from .types import Section, SectionAddress, SectionKind

K = SectionKind

DEFAULT_COLLAPSED: dict[SectionKind, bool] = {
    K.UNTRACKED_FILE: True,
    K.UNSTAGED_FILE: True,
    K.STAGED_FILE: True,
    K.UNSTAGED_HUNK: False,
    K.STAGED_HUNK: False,
    K.STASH_ENTRY: True,
    K.BRANCH_GROUP: True,
    K.REMOTE_GROUP: True,
    K.TAG_GROUP: True,
}

_CHANGE_LABELS = {
    ChangeKind.ADDED: "new file",
    ChangeKind.MODIFIED: "modified",
    ChangeKind.DELETED: "deleted",
    ChangeKind.RENAMED: "renamed",
    ChangeKind.COPIED: "copied",
    ChangeKind.TYPE_CHANGED: "typechange",
}


@dataclass(frozen=True)
class CollapsePolicy:
    """Default collapsed flag per section kind for sections seen for the first time."""

    overrides: Mapping[SectionKind, bool] = field(default_factory=dict)

    def default_for(self, kind: SectionKind) -> bool:
        if kind in self.overrides:
            return self.overrides[kind]
        return DEFAULT_COLLAPSED.get(kind, False)


class _Builder:
    def __init__(self, previous: Outline | None, policy: CollapsePolicy) -> None:
        self._previous = previous
        self._policy = policy

    def section(
        self,
        kind: SectionKind,
        key: tuple[str, ...],
        title: str,
        children: Sequence[Section] = (),
        payload: object = None,
    ) -> Section:
        address = SectionAddress(kind, key)
        old = self._previous.find(address) if self._previous is not None else None
        collapsed = old.collapsed if old is not None else self._policy.default_for(kind)
        return Section(address=address, title=title, children=tuple(children), collapsed=collapsed, payload=payload)


def hunk_key(path: str, hunk: DiffHunk, staged: bool) -> tuple[str, str]:
    """Address key for a hunk.

    Unstaged hunks are keyed by their working-tree start and staged hunks by
    their HEAD start: those sides do not move when neighbouring hunks are
    staged or unstaged.
    """
    anchor = hunk.old_start if staged else hunk.new_start
    return (path, str(anchor))


def _file_title(file_diff: FileDiff) -> str:
    label = _CHANGE_LABELS[file_diff.change]
    suffix = ""
    if not file_diff.is_available:
        suffix = "  (diff unavailable)"
    elif file_diff.is_binary:
        suffix = "  (binary)"
    return f"{label:<10} {file_diff.display_path}{suffix}"


def _file_sections(
    builder: _Builder,
    file_diffs: Sequence[FileDiff],
    staged: bool,
) -> list[Section]:
    file_kind = K.STAGED_FILE if staged else K.UNSTAGED_FILE
    hunk_kind = K.STAGED_HUNK if staged else K.UNSTAGED_HUNK
    sections: list[Section] = []
    for file_diff in file_diffs:
        hunks = [
            builder.section(hunk_kind, hunk_key(file_diff.path, hunk, staged), hunk.header, payload=hunk)
            for hunk in file_diff.hunks
        ]
        sections.append(builder.section(file_kind, (file_diff.path,), _file_title(file_diff), hunks, file_diff))
    return sections


def _unmerged_placeholders(entries: Sequence[StatusEntry], known: set[str]) -> list[FileDiff]:
    # Conflicted files are reported as combined diffs, which are not parsed.
    return [
        FileDiff(path=entry.path, old_path=None, change=ChangeKind.MODIFIED, error="unmerged")
        for entry in entries
        if entry.is_conflicted and entry.path not in known
    ]


def _head_sections(builder: _Builder, state: RepositoryState) -> list[Section]:
    head = state.head
    commit = head.commit
    head_title = f"Head:     {head.label}"
    if commit is not None:
        head_title += f"  {commit.short_oid} {commit.subject}"
    elif head.unborn:
        head_title += "  (no commits yet)"
    sections = [builder.section(K.HEAD, (), head_title, payload=head)]

    if state.upstream:
        counts = []
        if state.ahead:
            counts.append(f"ahead {state.ahead}")
        if state.behind:
            counts.append(f"behind {state.behind}")
        suffix = f"  [{', '.join(counts)}]" if counts else ""
        sections.append(builder.section(K.UPSTREAM, (), f"Merge:    {state.upstream}{suffix}", payload=state.upstream))
    if state.push_remote and state.push_remote != state.upstream:
        sections.append(builder.section(K.PUSH_REMOTE, (), f"Push:     {state.push_remote}", payload=state.push_remote))
    if state.latest_tag:
        sections.append(builder.section(K.TAG, (), f"Tag:      {state.latest_tag}", payload=state.latest_tag))
    return sections


def _group(builder: _Builder, kind: SectionKind, title: str, children: Sequence[Section]) -> list[Section]:
    if not children:
        return []
    return [builder.section(kind, (), f"{title} ({len(children)})", children)]


def build_outline(
    snapshot: Snapshot,
    unstaged: Sequence[FileDiff] | None = None,
    staged: Sequence[FileDiff] | None = None,
    previous: Outline | None = None,
    policy: CollapsePolicy | None = None,
) -> Outline:
    """Build a fresh outline, carrying collapse state over from ``previous``.

    ``unstaged``/``staged`` default to the diffs parsed into ``snapshot``.
    Groups are emitted in a fixed order and omitted when empty.
    """
    builder = _Builder(previous, policy or CollapsePolicy())
    state = snapshot.state
    unstaged = list(snapshot.unstaged if unstaged is None else unstaged)
    staged = list(snapshot.staged if staged is None else staged)
    unstaged.extend(_unmerged_placeholders(state.entries, {file_diff.path for file_diff in unstaged}))

    sections = _head_sections(builder, state)

    untracked = [
        builder.section(K.UNTRACKED_FILE, (entry.path,), entry.path, payload=entry)
        for entry in state.untracked
    ]
    sections += _group(builder, K.UNTRACKED_GROUP, "Untracked files", untracked)
    sections += _group(builder, K.UNSTAGED_GROUP, "Unstaged changes", _file_sections(builder, unstaged, staged=False))
    sections += _group(builder, K.STAGED_GROUP, "Staged changes", _file_sections(builder, staged, staged=True))

    stashes = [
        builder.section(K.STASH_ENTRY, (stash.oid,), f"{stash.ref} {stash.message}", payload=stash)
        for stash in state.stashes
    ]
    sections += _group(builder, K.STASH_GROUP, "Stashes", stashes)

    commits = [
        builder.section(K.COMMIT, (commit.oid,), f"{commit.short_oid} {commit.subject}", payload=commit)
        for commit in state.recent_commits
    ]
    if commits:
        sections.append(builder.section(K.RECENT_GROUP, (), "Recent commits", commits))

    branches = [
        builder.section(K.BRANCH, (ref.name,), f"{'*' if ref.is_head else ' '} {ref.name}", payload=ref)
        for ref in state.branches
    ]
    sections += _group(builder, K.BRANCH_GROUP, "Branches", branches)

    remotes = [
        builder.section(K.REMOTE, (remote.name,), f"{remote.name}  {remote.url}", payload=remote)
        for remote in state.remotes
    ]
    sections += _group(builder, K.REMOTE_GROUP, "Remotes", remotes)

    tags = [builder.section(K.TAG, (ref.name,), ref.name, payload=ref) for ref in state.tags]
    sections += _group(builder, K.TAG_GROUP, "Tags", tags)

    return Outline(sections)
