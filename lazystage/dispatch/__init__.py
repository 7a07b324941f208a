"""Modal key dispatch from outline context to operations."""

from __future__ import annotations

from .applicability import APPLICABILITY, GLOBAL_COMMANDS, Command, resolve_applicability
from .dispatcher import CommandDispatcher, DispatchOutcome, OutcomeKind, PendingCommand
from .key_registry import KeyComboBinding, KeyComboRegistry
from .modes import Mode, ModeStack
from .popups import CommandPopup, ConfirmPopup, HelpPopup, InputPopup, Popup, SelectPopup
from .selection import ResolvedSelection, SelectionShape, resolve_selection

__all__ = [
    "APPLICABILITY",
    "GLOBAL_COMMANDS",
    "Command",
    "CommandDispatcher",
    "CommandPopup",
    "ConfirmPopup",
    "DispatchOutcome",
    "HelpPopup",
    "InputPopup",
    "KeyComboBinding",
    "KeyComboRegistry",
    "Mode",
    "ModeStack",
    "OutcomeKind",
    "PendingCommand",
    "Popup",
    "ResolvedSelection",
    "SelectPopup",
    "SelectionShape",
    "resolve_applicability",
    "resolve_selection",
]
