"""Which operation a command means for a given section and selection.

Applicability is a lookup in an explicit table keyed by
``(Command, SectionKind, SelectionShape)``. Adding a command means adding rows
here, never probing payload types at dispatch time.
"""

from __future__ import annotations

from enum import Enum

from ..operations import OperationKind
from ..outline import SectionKind
from .modes import Mode
from .selection import SelectionShape


class Command(str, Enum):
    STAGE = "stage"
    UNSTAGE = "unstage"
    DISCARD = "discard"
    STAGE_ALL = "stage-all"
    UNSTAGE_ALL = "unstage-all"
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
    REFRESH = "refresh"
    LOG = "log"


K = SectionKind
S = SelectionShape
C = Command
O = OperationKind

ApplicabilityKey = tuple[Command, SectionKind, SelectionShape]

APPLICABILITY: dict[ApplicabilityKey, OperationKind] = {
    (C.STAGE, K.UNTRACKED_FILE, S.SECTION): O.STAGE_FILES,
    (C.STAGE, K.UNTRACKED_FILE, S.SECTIONS): O.STAGE_FILES,
    (C.STAGE, K.UNTRACKED_GROUP, S.SECTION): O.STAGE_FILES,
    (C.STAGE, K.UNSTAGED_FILE, S.SECTION): O.STAGE_FILES,
    (C.STAGE, K.UNSTAGED_FILE, S.SECTIONS): O.STAGE_FILES,
    (C.STAGE, K.UNSTAGED_GROUP, S.SECTION): O.STAGE_ALL,
    (C.STAGE, K.UNSTAGED_HUNK, S.SECTION): O.STAGE_HUNK,
    (C.STAGE, K.UNSTAGED_HUNK, S.SECTIONS): O.STAGE_HUNK,
    (C.STAGE, K.UNSTAGED_HUNK, S.LINES): O.STAGE_LINES,
    (C.UNSTAGE, K.STAGED_FILE, S.SECTION): O.UNSTAGE_FILES,
    (C.UNSTAGE, K.STAGED_FILE, S.SECTIONS): O.UNSTAGE_FILES,
    (C.UNSTAGE, K.STAGED_GROUP, S.SECTION): O.UNSTAGE_ALL,
    (C.UNSTAGE, K.STAGED_HUNK, S.SECTION): O.UNSTAGE_HUNK,
    (C.UNSTAGE, K.STAGED_HUNK, S.SECTIONS): O.UNSTAGE_HUNK,
    (C.UNSTAGE, K.STAGED_HUNK, S.LINES): O.UNSTAGE_LINES,
    (C.DISCARD, K.UNTRACKED_FILE, S.SECTION): O.DELETE_UNTRACKED,
    (C.DISCARD, K.UNTRACKED_FILE, S.SECTIONS): O.DELETE_UNTRACKED,
    (C.DISCARD, K.UNTRACKED_GROUP, S.SECTION): O.DELETE_UNTRACKED,
    (C.DISCARD, K.UNSTAGED_FILE, S.SECTION): O.DISCARD_FILES,
    (C.DISCARD, K.UNSTAGED_FILE, S.SECTIONS): O.DISCARD_FILES,
    (C.DISCARD, K.UNSTAGED_GROUP, S.SECTION): O.DISCARD_FILES,
    (C.DISCARD, K.UNSTAGED_HUNK, S.SECTION): O.DISCARD_HUNK,
    (C.DISCARD, K.UNSTAGED_HUNK, S.SECTIONS): O.DISCARD_HUNK,
    (C.DISCARD, K.UNSTAGED_HUNK, S.LINES): O.DISCARD_LINES,
    (C.DISCARD, K.STASH_ENTRY, S.SECTION): O.STASH_DROP,
    (C.DISCARD, K.BRANCH, S.SECTION): O.DELETE_BRANCH,
    (C.PUSH_TAG, K.TAG, S.SECTION): O.PUSH_TAG,
    (C.FIXUP, K.COMMIT, S.SECTION): O.FIXUP,
    (C.CHECKOUT, K.BRANCH, S.SECTION): O.CHECKOUT,
    (C.CHECKOUT, K.COMMIT, S.SECTION): O.CHECKOUT,
    (C.CHECKOUT, K.TAG, S.SECTION): O.CHECKOUT,
    (C.DELETE_BRANCH, K.BRANCH, S.SECTION): O.DELETE_BRANCH,
    (C.RENAME_BRANCH, K.BRANCH, S.SECTION): O.RENAME_BRANCH,
    (C.STASH_POP, K.STASH_ENTRY, S.SECTION): O.STASH_POP,
    (C.STASH_APPLY, K.STASH_ENTRY, S.SECTION): O.STASH_APPLY,
    (C.STASH_DROP, K.STASH_ENTRY, S.SECTION): O.STASH_DROP,
}

# Commands whose meaning does not depend on the cursor.
GLOBAL_COMMANDS: dict[Command, OperationKind] = {
    C.STAGE_ALL: O.STAGE_ALL,
    C.UNSTAGE_ALL: O.UNSTAGE_ALL,
    C.FETCH: O.FETCH,
    C.PULL: O.PULL,
    C.PUSH: O.PUSH,
    C.PUSH_ALL_TAGS: O.PUSH_ALL_TAGS,
    C.COMMIT: O.COMMIT,
    C.AMEND: O.AMEND,
    C.REWORD: O.REWORD,
    C.CREATE_BRANCH: O.CREATE_BRANCH,
    C.STASH_PUSH: O.STASH_PUSH,
    C.REFRESH: O.REFRESH_STATUS,
    C.LOG: O.LOG,
}


def resolve_applicability(
    command: Command,
    section_kind: SectionKind | None,
    shape: SelectionShape | None,
    mode: Mode = Mode.NORMAL,
) -> OperationKind | None:
    """Return the operation ``command`` stands for here, or ``None`` if inapplicable."""
    if mode not in (Mode.NORMAL, Mode.VISUAL, Mode.POPUP):
        return None
    if shape is SelectionShape.LINES and mode is Mode.NORMAL:
        return None
    if section_kind is not None and shape is not None:
        found = APPLICABILITY.get((command, section_kind, shape))
        if found is not None:
            return found
    return GLOBAL_COMMANDS.get(command)
