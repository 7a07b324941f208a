"""Key handling: modes, navigation, popups and contextual commands.

``CommandDispatcher.handle_key`` turns one key token into a
``DispatchOutcome``. It edits the cursor, outline collapse state, mode stack
and popup on ``AppState`` directly, but never runs git: operations are handed
back in the outcome for the session to submit.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

from ..diff.patch import PatchIntent, build_hunk_patch, build_line_patch
from ..diff.types import DiffHunk
from ..errors import IncompatibleOptions, InvalidSelection, SelectionError
from ..git.refs import Commit, Ref, StashEntry
from ..operations import Operation, OperationKind, options_for
from ..outline import Cursor, Section, SectionKind
from .applicability import Command, resolve_applicability
from .bindings import NORMAL_BINDINGS, POPUPS, VIEW_BINDINGS, help_rows
from .key_registry import PENDING, KeyComboBinding, KeyComboRegistry
from .modes import Mode
from .popups import CommandPopup, ConfirmPopup, HelpPopup, InputPopup, PopupEventKind, SelectPopup
from .search import find_matches, next_match
from .selection import ResolvedSelection, SelectionShape, file_diff_for, resolve_selection

if TYPE_CHECKING:
    from ..state import AppState

O = OperationKind
K = SectionKind


class OutcomeKind(str, Enum):
    NONE = "none"
    PENDING = "pending"
    NAVIGATED = "navigated"
    MODE = "mode"
    POPUP = "popup"
    SUBMIT = "submit"
    REFRESH = "refresh"
    NOTIFY = "notify"
    QUIT = "quit"


@dataclass(frozen=True)
class DispatchOutcome:
    kind: OutcomeKind
    operation: Operation | None = None
    message: str = ""


NOTHING = DispatchOutcome(OutcomeKind.NONE)

CONFIRM_KINDS = frozenset(
    {
        O.DISCARD_FILES,
        O.DISCARD_HUNK,
        O.DISCARD_LINES,
        O.DELETE_UNTRACKED,
        O.DELETE_BRANCH,
        O.STASH_DROP,
    }
)

_INPUT_PROMPTS: dict[OperationKind, str] = {
    O.COMMIT: "Commit message",
    O.AMEND: "Amended message",
    O.REWORD: "Reworded message",
    O.CREATE_BRANCH: "New branch name",
    O.RENAME_BRANCH: "Rename branch to",
    O.STASH_PUSH: "Stash message",
}

_INTENTS: dict[OperationKind, PatchIntent] = {
    O.STAGE_HUNK: PatchIntent.STAGE,
    O.STAGE_LINES: PatchIntent.STAGE,
    O.UNSTAGE_HUNK: PatchIntent.UNSTAGE,
    O.UNSTAGE_LINES: PatchIntent.UNSTAGE,
    O.DISCARD_HUNK: PatchIntent.DISCARD,
    O.DISCARD_LINES: PatchIntent.DISCARD,
}

_POPUP_PRIMARY_KIND: dict[str, OperationKind] = {
    "fetch": O.FETCH,
    "pull": O.PULL,
    "push": O.PUSH,
    "commit": O.COMMIT,
    "branch": O.CHECKOUT,
    "stash": O.STASH_PUSH,
    "log": O.LOG,
}

# Commands that fall back to picking their operand from a list when the
# cursor is not on a matching row.
_PICKABLE: dict[Command, OperationKind] = {
    Command.CHECKOUT: O.CHECKOUT,
    Command.DELETE_BRANCH: O.DELETE_BRANCH,
    Command.RENAME_BRANCH: O.RENAME_BRANCH,
    Command.PUSH_TAG: O.PUSH_TAG,
    Command.FIXUP: O.FIXUP,
}


@dataclass(frozen=True)
class PendingCommand:
    """A command waiting for text input or a picked operand before its operation can be built."""

    kind: OperationKind
    selection: ResolvedSelection | None
    options: frozenset[str]
    variant: str = ""
    choice: str | None = None


def notify(message: str) -> DispatchOutcome:
    return DispatchOutcome(OutcomeKind.NOTIFY, message=message)


class CommandDispatcher:
    """Resolve key tokens against the mode stack and the cursor context."""

    def __init__(self, state: AppState, bindings: dict[str, str] | None = None) -> None:
        self.state = state
        self._actions: dict[str, Callable[[], DispatchOutcome]] = {
            "down": lambda: self._move_by(1),
            "up": lambda: self._move_by(-1),
            "top": lambda: self._move_to(0),
            "bottom": lambda: self._move_to(len(self.state.outline.visible_rows()) - 1),
            "half-page-down": lambda: self._move_by(max(1, self.state.viewport_rows // 2)),
            "half-page-up": lambda: self._move_by(-max(1, self.state.viewport_rows // 2)),
            "next-sibling": lambda: self._move_to_sibling(1),
            "previous-sibling": lambda: self._move_to_sibling(-1),
            "parent": self._move_to_parent,
            "toggle": self._toggle,
            "collapse-files": lambda: self._set_files_collapsed(True),
            "expand-files": lambda: self._set_files_collapsed(False),
            "visual": self._toggle_visual,
            "search": self._start_search,
            "search-next": lambda: self._jump_to_match(forward=True),
            "search-previous": lambda: self._jump_to_match(forward=False),
            "help": self._open_help,
            "quit": self._quit,
            "escape": self._escape,
        }
        self._registry = KeyComboRegistry()
        for key, action in (bindings or NORMAL_BINDINGS).items():
            self._registry.register_binding(KeyComboBinding((key,), self._action_handler(action)))
        view_actions: dict[str, Callable[[], DispatchOutcome]] = {
            "down": lambda: self._move_view_by(1),
            "up": lambda: self._move_view_by(-1),
            "top": lambda: self._move_view_to(0),
            "bottom": lambda: self._move_view_to(len(self.state.views[-1].lines) - 1),
            "half-page-down": lambda: self._move_view_by(max(1, self.state.viewport_rows // 2)),
            "half-page-up": lambda: self._move_view_by(-max(1, self.state.viewport_rows // 2)),
            "show-commit": self._show_commit,
            "close-view": self._close_view,
        }
        self._view_registry = KeyComboRegistry()
        for key, action in VIEW_BINDINGS.items():
            self._view_registry.register_binding(KeyComboBinding((key,), view_actions[action]))

    def _action_handler(self, action: str) -> Callable[[], DispatchOutcome]:
        if action in self._actions:
            return self._actions[action]
        if action.startswith("popup:"):
            name = action.split(":", 1)[1]
            return lambda: self._open_command_popup(name)
        command = Command(action)
        return lambda: self.run_command(command)

    # -- entry point -------------------------------------------------------

    def handle_key(self, key: str) -> DispatchOutcome:
        mode = self.state.modes.current
        if mode is Mode.POPUP:
            return self._handle_popup_key(key)
        if mode is Mode.SEARCH:
            return self._handle_search_key(key)
        registry = self._view_registry if self.state.views else self._registry
        result = registry.dispatch(key)
        if result is PENDING:
            return DispatchOutcome(OutcomeKind.PENDING)
        if result is None:
            return NOTHING
        return result

    # -- navigation --------------------------------------------------------

    def _current_row(self) -> int:
        index = self.state.outline.row_index_for(self.state.cursor)
        return 0 if index is None else index

    def _move_to(self, index: int) -> DispatchOutcome:
        cursor = self.state.outline.cursor_for_row(index)
        if cursor is None:
            return NOTHING
        self.state.cursor = cursor
        return DispatchOutcome(OutcomeKind.NAVIGATED)

    def _move_by(self, delta: int) -> DispatchOutcome:
        return self._move_to(self._current_row() + delta)

    def _move_to_sibling(self, step: int) -> DispatchOutcome:
        cursor = self.state.cursor
        if cursor is None:
            return NOTHING
        outline = self.state.outline
        sibling = outline.next_sibling(cursor.address) if step > 0 else outline.previous_sibling(cursor.address)
        if sibling is None:
            return NOTHING
        self.state.cursor = Cursor(sibling.address)
        return DispatchOutcome(OutcomeKind.NAVIGATED)

    def _move_to_parent(self) -> DispatchOutcome:
        cursor = self.state.cursor
        if cursor is None:
            return NOTHING
        if cursor.line is not None:
            self.state.cursor = Cursor(cursor.address)
            return DispatchOutcome(OutcomeKind.NAVIGATED)
        parent = self.state.outline.parent(cursor.address)
        if parent is None:
            return NOTHING
        self.state.cursor = Cursor(parent.address)
        return DispatchOutcome(OutcomeKind.NAVIGATED)

    def _toggle(self) -> DispatchOutcome:
        cursor = self.state.cursor
        if cursor is None:
            return NOTHING
        outline = self.state.outline.toggle(cursor.address)
        if outline is self.state.outline:
            return NOTHING
        self.state.outline = outline
        self.state.cursor = Cursor(cursor.address)
        return DispatchOutcome(OutcomeKind.NAVIGATED)

    def _set_files_collapsed(self, collapsed: bool) -> DispatchOutcome:
        outline = self.state.outline
        files = [section.address for section, _depth in outline.walk() if section.kind.is_file]
        if not files:
            return NOTHING
        self.state.outline = outline.with_collapsed(files, collapsed)
        cursor = self.state.cursor
        if collapsed and cursor is not None and cursor.address.kind.is_hunk:
            parent = outline.parent(cursor.address)
            self.state.cursor = Cursor(parent.address) if parent is not None else None
        return DispatchOutcome(OutcomeKind.NAVIGATED)

    # -- text views --------------------------------------------------------

    def _move_view_to(self, index: int) -> DispatchOutcome:
        if not self.state.views[-1].move_to(index):
            return NOTHING
        return DispatchOutcome(OutcomeKind.NAVIGATED)

    def _move_view_by(self, delta: int) -> DispatchOutcome:
        return self._move_view_to(self.state.views[-1].cursor + delta)

    def _show_commit(self) -> DispatchOutcome:
        line = self.state.views[-1].current
        if line is None or line.revision is None:
            return NOTHING
        return DispatchOutcome(OutcomeKind.SUBMIT, operation=Operation(O.READ_DIFF, argument=line.revision))

    def _close_view(self) -> DispatchOutcome:
        self.state.views.pop()
        return DispatchOutcome(OutcomeKind.NAVIGATED)

    # -- modes -------------------------------------------------------------

    def _toggle_visual(self) -> DispatchOutcome:
        modes = self.state.modes
        if modes.current is Mode.VISUAL:
            self.leave_visual()
            return DispatchOutcome(OutcomeKind.MODE)
        if self.state.cursor is None:
            return NOTHING
        modes.push(Mode.VISUAL)
        self.state.anchor = self.state.cursor
        return DispatchOutcome(OutcomeKind.MODE)

    def leave_visual(self) -> None:
        if Mode.VISUAL in self.state.modes:
            self.state.modes.reset()
        self.state.anchor = None

    def _escape(self) -> DispatchOutcome:
        self._registry.reset()
        if self.state.modes.current is Mode.VISUAL:
            self.leave_visual()
            return DispatchOutcome(OutcomeKind.MODE)
        return NOTHING

    def _quit(self) -> DispatchOutcome:
        if self.state.modes.current is Mode.VISUAL:
            self.leave_visual()
            return DispatchOutcome(OutcomeKind.MODE)
        return DispatchOutcome(OutcomeKind.QUIT)

    # -- search ------------------------------------------------------------

    def _start_search(self) -> DispatchOutcome:
        if not self.state.modes.can_push(Mode.SEARCH):
            return NOTHING
        self.state.modes.push(Mode.SEARCH)
        self.state.search_query = ""
        return DispatchOutcome(OutcomeKind.MODE)

    def search_matches(self) -> list[int]:
        return find_matches(self.state.outline.visible_rows(), self.state.search_query)

    def _jump_to_match(self, forward: bool, inclusive: bool = False) -> DispatchOutcome:
        target = next_match(self.search_matches(), self._current_row(), forward=forward, inclusive=inclusive)
        if target is None:
            if self.state.search_query:
                return notify(f"no match for {self.state.search_query!r}")
            return NOTHING
        return self._move_to(target)

    def _handle_search_key(self, key: str) -> DispatchOutcome:
        if key in ("ESC", "CTRL_G"):
            self.state.modes.pop(Mode.SEARCH)
            self.state.search_query = ""
            return DispatchOutcome(OutcomeKind.MODE)
        if key == "ENTER":
            self.state.modes.pop(Mode.SEARCH)
            return self._jump_to_match(forward=True, inclusive=True)
        if key == "BACKSPACE":
            self.state.search_query = self.state.search_query[:-1]
        elif len(key) == 1 and key.isprintable():
            self.state.search_query += key
        return DispatchOutcome(OutcomeKind.MODE)

    # -- popups ------------------------------------------------------------

    def _open_popup(self, popup: object) -> DispatchOutcome:
        modes = self.state.modes
        if modes.current is not Mode.POPUP:
            if not modes.can_push(Mode.POPUP):
                return NOTHING
            modes.push(Mode.POPUP)
        self.state.popup = popup
        return DispatchOutcome(OutcomeKind.POPUP)

    def close_popup(self) -> None:
        self.state.popup = None
        if self.state.modes.current is Mode.POPUP:
            self.state.modes.pop(Mode.POPUP)

    def _open_help(self) -> DispatchOutcome:
        return self._open_popup(HelpPopup(help_rows()))

    def _open_command_popup(self, name: str) -> DispatchOutcome:
        spec = POPUPS[name]
        defaults = self.state.config.default_options(_POPUP_PRIMARY_KIND[name])
        return self._open_popup(CommandPopup(spec, defaults))

    def _handle_popup_key(self, key: str) -> DispatchOutcome:
        popup = self.state.popup
        if popup is None:
            self.close_popup()
            return DispatchOutcome(OutcomeKind.MODE)
        event = popup.handle_key(key)
        if event.kind is PopupEventKind.CONTINUE:
            return DispatchOutcome(OutcomeKind.POPUP)
        if event.kind is PopupEventKind.DISMISS:
            self.close_popup()
            return DispatchOutcome(OutcomeKind.MODE)
        if event.kind is PopupEventKind.ACTION:
            assert event.command is not None
            return self.run_command(event.command, event.options, event.variant)
        if event.kind is PopupEventKind.CONFIRMED:
            assert isinstance(popup, ConfirmPopup)
            self.close_popup()
            return self._submit(popup.pending)
        if event.kind is PopupEventKind.SELECTED:
            assert isinstance(popup, SelectPopup)
            pending = replace(popup.pending, choice=event.text)
            self.close_popup()
            return self._prompt_or_finish(pending)
        assert isinstance(popup, InputPopup)
        pending = popup.pending
        assert isinstance(pending, PendingCommand)
        self.close_popup()
        return self._finish(pending, event.text)

    # -- commands ----------------------------------------------------------

    def _operand_mode(self) -> Mode:
        return Mode.VISUAL if Mode.VISUAL in self.state.modes else Mode.NORMAL

    def run_command(
        self,
        command: Command,
        options: Iterable[str] | None = None,
        variant: str = "",
    ) -> DispatchOutcome:
        """Resolve ``command`` against the cursor and build its operation.

        Inapplicable commands are no-ops. Selection and option errors are
        turned into notifications; nothing is submitted for them.
        """
        anchor = self.state.anchor if self._operand_mode() is Mode.VISUAL else None
        try:
            selection = resolve_selection(self.state.outline, self.state.cursor, anchor)
        except SelectionError as exc:
            self.close_popup()
            return notify(str(exc))
        kind = resolve_applicability(
            command,
            selection.kind if selection else None,
            selection.shape if selection else None,
            self._operand_mode(),
        )
        pick = False
        if kind is None:
            kind = _PICKABLE.get(command)
            if kind is None:
                self.close_popup()
                return NOTHING
            pick = True
        if kind is O.REFRESH_STATUS:
            self.close_popup()
            return DispatchOutcome(OutcomeKind.REFRESH)

        chosen = self.state.config.default_options(kind) if options is None else frozenset(options)
        pending = PendingCommand(kind, selection, chosen & options_for(kind), variant)
        if pick or (kind is O.LOG and variant == "other"):
            return self._open_picker(pending)
        return self._prompt_or_finish(pending)

    def _prompt_or_finish(self, pending: PendingCommand) -> DispatchOutcome:
        kind = pending.kind
        selection = pending.selection
        if kind in _INPUT_PROMPTS and not (kind is O.AMEND and pending.variant == "extend"):
            initial = ""
            if kind in (O.AMEND, O.REWORD):
                head = self.state.snapshot.state.head.commit if self.state.snapshot else None
                initial = head.subject if head is not None else ""
            if kind is O.RENAME_BRANCH:
                if pending.choice is not None:
                    initial = pending.choice
                elif selection is not None:
                    initial = selection.section.address.key[0]
            prompt = _INPUT_PROMPTS[kind]
            return self._open_popup(InputPopup(prompt, pending, initial, allow_empty=kind is O.STASH_PUSH))
        return self._finish(pending, None)

    def _pick_list(self, kind: OperationKind) -> tuple[str, list[str]]:
        """Title and candidates for choosing the operand of ``kind`` from a list."""
        snapshot = self.state.snapshot
        repo = snapshot.state if snapshot else None
        local = [ref.name for ref in repo.branches] if repo else []
        others = [ref.name for ref in repo.branches if not ref.is_head] if repo else []
        remote = [ref.name for remote in repo.remotes for ref in remote.branches] if repo else []
        tags = [ref.name for ref in repo.tags] if repo else []
        if kind is O.CHECKOUT:
            return "Checkout", others + remote
        if kind is O.DELETE_BRANCH:
            return "Delete branch", others
        if kind is O.RENAME_BRANCH:
            return "Rename branch", local
        if kind is O.PUSH_TAG:
            return "Push tag", tags
        if kind is O.FIXUP:
            commits = repo.recent_commits if repo else ()
            return "Fixup commit", [f"{commit.short_oid} {commit.subject}" for commit in commits]
        return "Log", local + remote + tags

    def _open_picker(self, pending: PendingCommand) -> DispatchOutcome:
        title, options = self._pick_list(pending.kind)
        if not options:
            self.close_popup()
            return notify(f"{title}: nothing to choose from")
        return self._open_popup(SelectPopup(title, options, pending))

    def _finish(self, pending: PendingCommand, text: str | None) -> DispatchOutcome:
        try:
            operation = self.build_operation(pending, text)
        except (SelectionError, IncompatibleOptions, ValueError) as exc:
            self.close_popup()
            return notify(str(exc))
        if pending.kind in CONFIRM_KINDS:
            return self._open_popup(ConfirmPopup(f"{operation.describe()}?", operation))
        self.close_popup()
        return self._submit(operation)

    def _submit(self, operation: object) -> DispatchOutcome:
        assert isinstance(operation, Operation)
        self.leave_visual()
        return DispatchOutcome(OutcomeKind.SUBMIT, operation=operation)

    # -- operation building ------------------------------------------------

    def _remote_names(self) -> tuple[str, ...]:
        snapshot = self.state.snapshot
        return snapshot.state.remote_names if snapshot else ()

    def _split_remote_ref(self, ref: str) -> tuple[str, str | None]:
        """Split ``origin/feature/x`` into ``("origin", "feature/x")``."""
        for name in sorted(self._remote_names(), key=len, reverse=True):
            if ref.startswith(f"{name}/"):
                return name, ref[len(name) + 1:]
        remote, _sep, branch = ref.partition("/")
        return remote, branch or None

    def _remote_target(self, variant: str) -> tuple[str, str | None]:
        """Resolve ``(remote, branch)`` for fetch/pull/push."""
        snapshot = self.state.snapshot
        upstream = snapshot.state.upstream if snapshot else None
        push_remote = snapshot.state.push_remote if snapshot else None
        ref = upstream if variant == "upstream" else (push_remote or upstream)
        if ref:
            return self._split_remote_ref(ref)
        remotes = self._remote_names()
        if not remotes:
            raise ValueError("no remote configured")
        remote = "origin" if "origin" in remotes else remotes[0]
        return remote, None

    def _head_branch(self) -> str | None:
        snapshot = self.state.snapshot
        return snapshot.state.head.branch if snapshot and not snapshot.state.head.detached else None

    def _hunk_operation(self, pending: PendingCommand, selection: ResolvedSelection) -> Operation:
        intent = _INTENTS[pending.kind]
        outline = self.state.outline
        file_diff = file_diff_for(outline, selection.section)
        if file_diff is None:
            raise InvalidSelection("no diff under cursor")
        if selection.shape is SelectionShape.LINES:
            hunk = selection.hunk
            assert hunk is not None
            patch = build_line_patch(
                file_diff,
                hunk,
                selection.lines,
                intent,
                self.state.config.patch_context_lines,
            )
        else:
            if any(file_diff_for(outline, section) is not file_diff for section in selection.sections):
                raise InvalidSelection("hunk selection spans several files")
            hunks = [section.payload for section in selection.sections if isinstance(section.payload, DiffHunk)]
            patch = build_hunk_patch(file_diff, hunks, intent)
        return Operation(pending.kind, pending.options, paths=(file_diff.path,), patch=patch)

    def _group_paths(self, selection: ResolvedSelection) -> tuple[str, ...]:
        if selection.kind.is_group:
            return tuple(child.address.key[0] for child in selection.section.children)
        return selection.paths

    def build_operation(self, pending: PendingCommand, text: str | None = None) -> Operation:
        """Build the operation for ``pending``; ``text`` is the popup input, if any."""
        kind = pending.kind
        selection = pending.selection
        options = pending.options
        section: Section | None = selection.section if selection else None
        payload = section.payload if section else None

        if kind in _INTENTS:
            assert selection is not None
            return self._hunk_operation(pending, selection)
        if kind in (O.STAGE_FILES, O.UNSTAGE_FILES, O.DISCARD_FILES, O.DELETE_UNTRACKED):
            assert selection is not None
            return Operation(kind, options, paths=self._group_paths(selection))
        if kind in (O.STAGE_ALL, O.UNSTAGE_ALL):
            return Operation(kind, options)

        if kind is O.FETCH and pending.variant == "all":
            return Operation(kind, options | {"all"})
        if kind in (O.FETCH, O.PULL):
            remote, branch = self._remote_target(pending.variant)
            return Operation(kind, options, target=remote, argument=branch if kind is O.PULL else None)
        if kind is O.PUSH:
            remote, branch = self._remote_target(pending.variant)
            head = self._head_branch()
            if head is None:
                raise ValueError("cannot push a detached HEAD")
            refspec = f"{head}:{branch}" if branch and branch != head else head
            return Operation(kind, options, target=remote, argument=refspec)
        if kind is O.PUSH_TAG:
            remote, _branch = self._remote_target(pending.variant)
            tag = pending.choice or (payload.name if isinstance(payload, Ref) else str(payload))
            return Operation(kind, options, target=remote, argument=tag)
        if kind is O.PUSH_ALL_TAGS:
            remote, _branch = self._remote_target(pending.variant)
            return Operation(kind, options, target=remote)

        if kind is O.COMMIT:
            return Operation(kind, options, message=text)
        if kind is O.AMEND:
            return Operation(kind, options, message=text)
        if kind is O.REWORD:
            return Operation(kind, options, message=text)
        if kind is O.FIXUP:
            if pending.choice is not None:
                return Operation(kind, options, target=pending.choice.split(" ", 1)[0])
            assert isinstance(payload, Commit)
            return Operation(kind, options, target=payload.oid)

        if kind is O.CHECKOUT:
            if pending.choice is not None:
                return Operation(kind, options, target=pending.choice)
            if isinstance(payload, Commit):
                return Operation(kind, options, target=payload.oid)
            if isinstance(payload, Ref):
                return Operation(kind, options, target=payload.name)
            return Operation(kind, options, target=str(payload))
        if kind is O.CREATE_BRANCH:
            start = None
            if isinstance(payload, Ref):
                start = payload.name
            elif isinstance(payload, Commit):
                start = payload.oid
            return Operation(kind, options, target=(text or "").strip(), argument=start)
        if kind is O.DELETE_BRANCH:
            if pending.choice is not None:
                return Operation(kind, options, target=pending.choice)
            assert isinstance(payload, Ref)
            return Operation(kind, options, target=payload.name)
        if kind is O.RENAME_BRANCH:
            if pending.choice is not None:
                old = pending.choice
            else:
                assert isinstance(payload, Ref)
                old = payload.name
            return Operation(kind, options, target=old, argument=(text or "").strip())

        if kind is O.STASH_PUSH:
            return Operation(kind, options, message=(text or "").strip() or None)
        if kind in (O.STASH_POP, O.STASH_APPLY, O.STASH_DROP):
            assert isinstance(payload, StashEntry)
            return Operation(kind, options, target=payload.ref)

        if kind is O.LOG:
            if pending.variant == "all":
                return Operation(kind, options | {"all"})
            return Operation(kind, options - {"all"}, target=pending.choice or "HEAD")

        raise ValueError(f"{kind.value} cannot be issued from the outline")
