"""Default key bindings and popup layouts."""

from __future__ import annotations

from .applicability import Command
from .popups import PopupAction, PopupSpec, PopupSwitch

C = Command

# Normal/visual mode key -> action name. Action names are either a
# ``Command`` value or one of the navigation/mode actions below.
NORMAL_BINDINGS: dict[str, str] = {
    "j": "down",
    "DOWN": "down",
    "k": "up",
    "UP": "up",
    "g g": "top",
    "G": "bottom",
    "HOME": "top",
    "END": "bottom",
    "CTRL_D": "half-page-down",
    "CTRL_U": "half-page-up",
    "PAGE_DOWN": "half-page-down",
    "PAGE_UP": "half-page-up",
    "]": "next-sibling",
    "[": "previous-sibling",
    "^": "parent",
    "TAB": "toggle",
    "ENTER": "toggle",
    "1": "collapse-files",
    "2": "expand-files",
    "v": "visual",
    "V": "visual",
    "/": "search",
    "n": "search-next",
    "N": "search-previous",
    "?": "help",
    "q": "quit",
    "ESC": "escape",
    "CTRL_G": "escape",
    "s": C.STAGE.value,
    "u": C.UNSTAGE.value,
    "x": C.DISCARD.value,
    "S": C.STAGE_ALL.value,
    "U": C.UNSTAGE_ALL.value,
    "CTRL_R": C.REFRESH.value,
    "f": "popup:fetch",
    "F": "popup:pull",
    "P": "popup:push",
    "c": "popup:commit",
    "b": "popup:branch",
    "Z": "popup:stash",
    "l": "popup:log",
}

POPUPS: dict[str, PopupSpec] = {
    "fetch": PopupSpec(
        name="fetch",
        title="Fetch",
        switches=(
            PopupSwitch("p", "prune", "Prune deleted branches"),
            PopupSwitch("t", "include-tags", "Fetch all tags"),
            PopupSwitch("F", "force", "Force"),
        ),
        actions=(
            PopupAction("p", C.FETCH, "from push remote", "push-remote"),
            PopupAction("u", C.FETCH, "from upstream", "upstream"),
            PopupAction("a", C.FETCH, "all remotes", "all"),
        ),
    ),
    "pull": PopupSpec(
        name="pull",
        title="Pull",
        switches=(
            PopupSwitch("r", "rebase", "Rebase local commits"),
            PopupSwitch("f", "ff-only", "Fast-forward only"),
            PopupSwitch("a", "autostash", "Autostash"),
            PopupSwitch("t", "include-tags", "Fetch all tags"),
        ),
        actions=(
            PopupAction("p", C.PULL, "from push remote", "push-remote"),
            PopupAction("u", C.PULL, "from upstream", "upstream"),
        ),
    ),
    "push": PopupSpec(
        name="push",
        title="Push",
        switches=(
            PopupSwitch("f", "force-with-lease", "Force with lease"),
            PopupSwitch("F", "force", "Force"),
            PopupSwitch("u", "set-upstream", "Set the upstream before pushing"),
            PopupSwitch("n", "dry-run", "Dry run"),
            PopupSwitch("h", "no-verify", "Disable hooks"),
            PopupSwitch("T", "follow-tags", "Include annotated tags"),
        ),
        actions=(
            PopupAction("p", C.PUSH, "to push remote", "push-remote"),
            PopupAction("u", C.PUSH, "to upstream", "upstream"),
            PopupAction("t", C.PUSH_TAG, "a tag"),
            PopupAction("T", C.PUSH_ALL_TAGS, "all tags"),
        ),
    ),
    "commit": PopupSpec(
        name="commit",
        title="Commit",
        switches=(
            PopupSwitch("a", "all", "Stage all modified and deleted files"),
            PopupSwitch("e", "allow-empty", "Allow empty commit"),
            PopupSwitch("n", "no-verify", "Disable hooks"),
        ),
        actions=(
            PopupAction("c", C.COMMIT, "Commit"),
            PopupAction("a", C.AMEND, "Amend"),
            PopupAction("e", C.AMEND, "Extend (amend without editing the message)", "extend"),
            PopupAction("w", C.REWORD, "Reword"),
            PopupAction("F", C.FIXUP, "Fixup commit at point"),
        ),
    ),
    "branch": PopupSpec(
        name="branch",
        title="Branch",
        switches=(PopupSwitch("f", "force", "Force"),),
        actions=(
            PopupAction("b", C.CHECKOUT, "Checkout branch at point"),
            PopupAction("c", C.CREATE_BRANCH, "Create and checkout"),
            PopupAction("m", C.RENAME_BRANCH, "Rename branch at point"),
            PopupAction("D", C.DELETE_BRANCH, "Delete branch at point"),
        ),
    ),
    "stash": PopupSpec(
        name="stash",
        title="Stash",
        switches=(
            PopupSwitch("u", "include-untracked", "Include untracked files"),
            PopupSwitch("a", "all", "Include all files"),
            PopupSwitch("k", "keep-index", "Keep index"),
        ),
        actions=(
            PopupAction("z", C.STASH_PUSH, "Stash"),
            PopupAction("p", C.STASH_POP, "Pop stash at point"),
            PopupAction("a", C.STASH_APPLY, "Apply stash at point"),
            PopupAction("d", C.STASH_DROP, "Drop stash at point"),
        ),
    ),
    "log": PopupSpec(
        name="log",
        title="Log",
        actions=(
            PopupAction("l", C.LOG, "current"),
            PopupAction("o", C.LOG, "other branch or tag", "other"),
            PopupAction("a", C.LOG, "all references", "all"),
        ),
    ),
}

# Keys while a log or commit view is open.
VIEW_BINDINGS: dict[str, str] = {
    "j": "down",
    "DOWN": "down",
    "k": "up",
    "UP": "up",
    "g": "top",
    "HOME": "top",
    "G": "bottom",
    "END": "bottom",
    "CTRL_D": "half-page-down",
    "CTRL_U": "half-page-up",
    "PAGE_DOWN": "half-page-down",
    "PAGE_UP": "half-page-up",
    "ENTER": "show-commit",
    "q": "close-view",
    "ESC": "close-view",
    "CTRL_G": "close-view",
}


def help_rows() -> list[str]:
    return [f"{key:>8}  {action}" for key, action in NORMAL_BINDINGS.items()]
