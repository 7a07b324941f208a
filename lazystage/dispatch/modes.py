"""Modal input stack."""

from __future__ import annotations

from enum import Enum

from ..errors import ModeError


class Mode(str, Enum):
    NORMAL = "normal"
    VISUAL = "visual"
    SEARCH = "search"
    POPUP = "popup"


class ModeStack:
    """Normal at the bottom, at most one other mode above it.

    The only exception is a popup opened from visual mode, which stacks on
    top of it so that closing the popup returns to the same selection.
    """

    def __init__(self) -> None:
        self._stack: list[Mode] = [Mode.NORMAL]

    @property
    def current(self) -> Mode:
        return self._stack[-1]

    @property
    def modes(self) -> tuple[Mode, ...]:
        return tuple(self._stack)

    def __contains__(self, mode: object) -> bool:
        return mode in self._stack

    def can_push(self, mode: Mode) -> bool:
        if mode is Mode.NORMAL:
            return False
        if len(self._stack) == 1:
            return True
        return mode is Mode.POPUP and self._stack == [Mode.NORMAL, Mode.VISUAL]

    def push(self, mode: Mode) -> None:
        if not self.can_push(mode):
            raise ModeError(f"cannot enter {mode.value} from {' > '.join(m.value for m in self._stack)}")
        self._stack.append(mode)

    def pop(self, expected: Mode | None = None) -> Mode:
        if len(self._stack) == 1:
            raise ModeError("normal mode cannot be left")
        if expected is not None and self._stack[-1] is not expected:
            raise ModeError(f"expected {expected.value} on top, found {self._stack[-1].value}")
        return self._stack.pop()

    def reset(self) -> None:
        del self._stack[1:]
