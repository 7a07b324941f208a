"""Exception types shared across lazystage.

Parse and selection errors are resolved where they are raised and never
leave the interaction loop. Only ``OperationFailed`` reaches the user, as a
notification carrying git's own diagnostic text.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .operations import OperationResult


class LazyStageError(Exception):
    """Base class for all lazystage specific errors."""


class GitError(LazyStageError):
    """Raised when git cannot be executed or the path is not a repository."""


class MalformedDiff(LazyStageError):
    """Raised when a file or hunk header in a unified diff cannot be trusted."""


class SelectionError(LazyStageError):
    """Base class for selections rejected before any operation is built."""


class EmptySelection(SelectionError):
    """Raised when a selection contains no added or removed line."""


class InvalidSelection(SelectionError):
    """Raised when a selection spans hunks, files, or mixed section kinds."""


class IncompatibleOptions(LazyStageError):
    """Raised when an option set is unknown for, or contradictory within, an operation."""


class ModeError(LazyStageError):
    """Raised on an illegal modal-stack transition."""


class OperationFailed(LazyStageError):
    """Raised (or reported) when git exits non-zero for an operation."""

    def __init__(self, result: OperationResult) -> None:
        self.result = result
        super().__init__(result.diagnostic or f"{result.operation.kind.value} failed")
