"""Transient popup state machines: command, confirm, input, select and help."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from .applicability import Command

DISMISS_KEYS = frozenset({"ESC", "q", "CTRL_G"})
_TEXT_DISMISS_KEYS = frozenset({"ESC", "CTRL_G"})


@dataclass(frozen=True)
class PopupSwitch:
    """An option toggled by pressing ``-`` then ``key``."""

    key: str
    option: str
    description: str


@dataclass(frozen=True)
class PopupAction:
    """An action key; ``variant`` picks the operand (upstream, push remote, ...)."""

    key: str
    command: Command
    description: str
    variant: str = ""


@dataclass(frozen=True)
class PopupSpec:
    name: str
    title: str
    switches: tuple[PopupSwitch, ...] = ()
    actions: tuple[PopupAction, ...] = ()


class PopupEventKind(str, Enum):
    CONTINUE = "continue"
    DISMISS = "dismiss"
    ACTION = "action"
    CONFIRMED = "confirmed"
    SUBMITTED = "submitted"
    SELECTED = "selected"


@dataclass(frozen=True)
class PopupEvent:
    kind: PopupEventKind
    command: Command | None = None
    options: frozenset[str] = frozenset()
    text: str = ""
    variant: str = ""


_CONTINUE = PopupEvent(PopupEventKind.CONTINUE)
_DISMISS = PopupEvent(PopupEventKind.DISMISS)


class CommandPopup:
    """Option switches plus action keys, in the style of a transient menu."""

    def __init__(self, spec: PopupSpec, options: Iterable[str] = ()) -> None:
        self.spec = spec
        switch_options = {switch.option for switch in spec.switches}
        self.enabled: set[str] = {option for option in options if option in switch_options}
        self.awaiting_switch = False

    def handle_key(self, key: str) -> PopupEvent:
        if self.awaiting_switch:
            self.awaiting_switch = False
            for switch in self.spec.switches:
                if switch.key == key:
                    self.enabled ^= {switch.option}
            return _CONTINUE
        if key in DISMISS_KEYS:
            return _DISMISS
        if key == "-" and self.spec.switches:
            self.awaiting_switch = True
            return _CONTINUE
        for action in self.spec.actions:
            if action.key == key:
                return PopupEvent(PopupEventKind.ACTION, action.command, frozenset(self.enabled), variant=action.variant)
        return _CONTINUE

    def lines(self) -> list[str]:
        out = [self.spec.title]
        if self.spec.switches:
            out.append("Arguments")
            for switch in self.spec.switches:
                mark = "x" if switch.option in self.enabled else " "
                out.append(f" -{switch.key} [{mark}] {switch.description} (--{switch.option})")
        if self.spec.actions:
            out.append("Actions")
            for action in self.spec.actions:
                out.append(f"  {action.key}  {action.description}")
        if self.awaiting_switch:
            out.append("-")
        return out


class ConfirmPopup:
    """Yes/no question guarding a destructive operation."""

    def __init__(self, prompt: str, pending: object = None) -> None:
        self.prompt = prompt
        self.pending = pending

    def handle_key(self, key: str) -> PopupEvent:
        if key in ("y", "Y"):
            return PopupEvent(PopupEventKind.CONFIRMED)
        if key in ("n", "N") or key in DISMISS_KEYS:
            return _DISMISS
        return _CONTINUE

    def lines(self) -> list[str]:
        return [f"{self.prompt} (y or n)"]


class InputPopup:
    """Single-line text prompt (commit message, branch name, ...)."""

    def __init__(self, prompt: str, pending: object = None, initial: str = "", allow_empty: bool = False) -> None:
        self.prompt = prompt
        self.pending = pending
        self.text = initial
        self.allow_empty = allow_empty

    def handle_key(self, key: str) -> PopupEvent:
        if key in _TEXT_DISMISS_KEYS:
            return _DISMISS
        if key == "ENTER":
            if not self.text.strip() and not self.allow_empty:
                return _CONTINUE
            return PopupEvent(PopupEventKind.SUBMITTED, text=self.text)
        if key == "BACKSPACE":
            self.text = self.text[:-1]
            return _CONTINUE
        if key == "CTRL_U":
            self.text = ""
            return _CONTINUE
        if len(key) == 1 and key.isprintable():
            self.text += key
        return _CONTINUE

    def lines(self) -> list[str]:
        return [f"{self.prompt}: {self.text}"]


class SelectPopup:
    """Pick one of ``options``; typing narrows the list by substring.

    ENTER chooses the highlighted match, or the typed text when nothing
    matches it.
    """

    max_rows = 10

    def __init__(self, title: str, options: Iterable[str], pending: object = None) -> None:
        self.title = title
        self.options = list(options)
        self.pending = pending
        self.query = ""
        self.matches = list(self.options)
        self.selected = 0

    def _refilter(self) -> None:
        needle = self.query.lower()
        self.matches = [option for option in self.options if needle in option.lower()]
        self.selected = 0

    @property
    def choice(self) -> str | None:
        if self.matches:
            return self.matches[self.selected]
        return self.query.strip() or None

    def handle_key(self, key: str) -> PopupEvent:
        if key in _TEXT_DISMISS_KEYS:
            return _DISMISS
        if key == "ENTER":
            choice = self.choice
            if choice is None:
                return _DISMISS
            return PopupEvent(PopupEventKind.SELECTED, text=choice)
        if key in ("UP", "CTRL_P"):
            self.selected = max(0, self.selected - 1)
        elif key in ("DOWN", "CTRL_N"):
            self.selected = min(max(0, len(self.matches) - 1), self.selected + 1)
        elif key == "BACKSPACE":
            self.query = self.query[:-1]
            self._refilter()
        elif len(key) == 1 and key.isprintable():
            self.query += key
            self._refilter()
        return _CONTINUE

    def lines(self) -> list[str]:
        out = [f"{self.title}: {self.query}"]
        start = max(0, self.selected - self.max_rows + 1)
        for index, option in enumerate(self.matches[start : start + self.max_rows], start):
            mark = ">" if index == self.selected else " "
            out.append(f" {mark}  {option}")
        hidden = len(self.matches) - self.max_rows
        if hidden > 0:
            out.append(f"{len(self.matches)} matches")
        if not self.matches:
            out.append("no match")
        return out


class HelpPopup:
    """Read-only key reference; any key closes it."""

    def __init__(self, rows: Iterable[str]) -> None:
        self.rows = list(rows)

    def handle_key(self, key: str) -> PopupEvent:
        return _DISMISS

    def lines(self) -> list[str]:
        return ["Keys", *self.rows]


Popup = CommandPopup | ConfirmPopup | InputPopup | SelectPopup | HelpPopup
