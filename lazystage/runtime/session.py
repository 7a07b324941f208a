"""Glue between key dispatch, the executor and the refresh worker.

All ``AppState`` writes happen here or in the dispatcher, on the main
thread. Background work only ever produces results that ``poll`` applies.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from functools import partial

from ..dispatch import CommandDispatcher, DispatchOutcome, Mode, OutcomeKind
from ..errors import OperationFailed
from ..git.commands import run_operation
from ..git.log import parse_log
from ..git.runner import GitRunner
from ..git.snapshot import collect_snapshot
from ..operations import Operation, OperationKind, OperationResult, Outcome
from ..outline import Outline, build_outline, relocate_cursor
from ..state import AppState
from ..views import TextView, diff_view, log_view
from .executor import OperationExecutor
from .refresh import RefreshResult, RefreshScheduler

LOG = logging.getLogger(__name__)

NOTIFICATION_SECONDS = 4.0
ERROR_NOTIFICATION_SECONDS = 8.0

# Slow network operations announce themselves when submitted.
REMOTE_KINDS = frozenset(
    {
        OperationKind.FETCH,
        OperationKind.PULL,
        OperationKind.PUSH,
        OperationKind.PUSH_TAG,
        OperationKind.PUSH_ALL_TAGS,
    }
)


class Session:
    """One interactive session over a repository."""

    def __init__(
        self,
        state: AppState,
        runner: GitRunner,
        executor: OperationExecutor | None = None,
        refresher: RefreshScheduler | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.state = state
        self.runner = runner
        self.clock = clock
        config = state.config
        self.executor = executor or OperationExecutor(partial(run_operation, runner))
        self.refresher = refresher or RefreshScheduler(
            partial(collect_snapshot, runner, config.recent_commit_count, config.diff_args)
        )
        self.dispatcher = CommandDispatcher(state)

    def start(self) -> None:
        self.refresh()

    def close(self) -> None:
        self.executor.shutdown(wait=False)

    # -- notifications -----------------------------------------------------

    def notify(self, message: str, error: bool = False) -> None:
        state = self.state
        state.notification = message
        state.notification_is_error = error
        duration = ERROR_NOTIFICATION_SECONDS if error else NOTIFICATION_SECONDS
        state.notification_until = self.clock() + duration
        state.dirty = True

    def expire_notification(self) -> None:
        state = self.state
        if state.notification and self.clock() >= state.notification_until:
            state.notification = ""
            state.notification_is_error = False
            state.dirty = True

    # -- input -------------------------------------------------------------

    def refresh(self, invalidate: bool = False) -> None:
        self.refresher.request(invalidate=invalidate)
        self.state.refreshing = True
        self.state.dirty = True

    def handle_key(self, key: str) -> bool:
        """Dispatch one key; return True when the session should end."""
        return self.apply_outcome(self.dispatcher.handle_key(key))

    def apply_outcome(self, outcome: DispatchOutcome) -> bool:
        if outcome.kind is OutcomeKind.NONE:
            return False
        self.state.dirty = True
        if outcome.kind is OutcomeKind.QUIT:
            return True
        if outcome.kind is OutcomeKind.SUBMIT:
            assert outcome.operation is not None
            self.submit(outcome.operation)
        elif outcome.kind is OutcomeKind.REFRESH:
            self.refresh()
        elif outcome.kind is OutcomeKind.NOTIFY:
            self.notify(outcome.message)
        return False

    def submit(self, operation: Operation) -> int:
        ticket = self.executor.submit(operation)
        self.state.pending_tickets.add(ticket)
        if operation.kind in REMOTE_KINDS:
            self.notify(f"{operation.describe()}...")
        return ticket

    # -- background results ------------------------------------------------

    def poll(self) -> bool:
        """Apply finished operations and snapshots; return whether anything changed."""
        changed = False
        for result in self.executor.drain_results():
            self.apply_result(result)
            changed = True
        for refreshed in self.refresher.drain_results():
            self.apply_snapshot(refreshed)
            changed = True
        if self.state.refreshing and not self.refresher.in_flight:
            self.state.refreshing = False
            changed = True
        self.expire_notification()
        if changed:
            self.state.dirty = True
        return changed

    def apply_result(self, result: OperationResult) -> None:
        self.state.pending_tickets.discard(result.ticket)
        operation = result.operation
        if result.outcome is Outcome.SUPERSEDED:
            LOG.debug("dropping superseded result #%d", result.ticket)
            return
        if operation.is_mutating:
            self.refresh(invalidate=True)
        if result.outcome is Outcome.FAILED:
            self.notify(str(OperationFailed(result)), error=True)
        elif operation.is_mutating:
            self.notify(f"{operation.describe()}: done")
        elif operation.kind is OperationKind.LOG:
            title = "Log all references" if "all" in operation.options else f"Log {operation.target or 'HEAD'}"
            self.open_view(log_view(title, parse_log(result.stdout)))
        elif operation.kind is OperationKind.READ_DIFF:
            self.open_view(diff_view(operation.describe(), result.stdout))

    def open_view(self, view: TextView) -> None:
        self.state.views.append(view)
        self.state.dirty = True

    def apply_snapshot(self, refreshed: RefreshResult) -> None:
        if refreshed.snapshot is None:
            self.notify(f"refresh failed: {refreshed.error}", error=True)
            return
        state = self.state
        previous: Outline | None = state.outline if state.snapshot is not None else None
        outline = build_outline(refreshed.snapshot, previous=previous, policy=state.config.collapse_policy())
        cursor = relocate_cursor(previous, outline, state.cursor)
        anchor = state.anchor
        if anchor is not None and anchor.address not in outline:
            anchor = None

        state.snapshot = refreshed.snapshot
        state.outline = outline
        state.cursor = cursor
        state.anchor = anchor
        if anchor is None and Mode.VISUAL in state.modes:
            self.dispatcher.leave_visual()
        state.dirty = True


__all__ = ["ERROR_NOTIFICATION_SECONDS", "NOTIFICATION_SECONDS", "Session"]
