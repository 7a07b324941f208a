"""Tests for the ticketed background operation executor."""

from __future__ import annotations

import threading
import time
import unittest

from lazystage.git.runner import GitOutput
from lazystage.operations import Operation, OperationKind, Outcome
from lazystage.runtime.executor import OperationExecutor

K = OperationKind


def _wait_for_results(executor: OperationExecutor, *, expected_count: int, timeout_seconds: float = 2.0) -> list:
    deadline = time.monotonic() + timeout_seconds
    out: list = []
    while time.monotonic() < deadline:
        out.extend(executor.drain_results())
        if len(out) >= expected_count:
            break
        time.sleep(0.01)
    return out


class _GatedRun:
    """Fake git: records calls; operations of ``gated_kind`` wait for ``release``."""

    def __init__(self, gated_kind: OperationKind | None = None, returncode: int = 0, stderr: str = "") -> None:
        self.gated_kind = gated_kind
        self.returncode = returncode
        self.stderr = stderr
        self.started = threading.Event()
        self.release = threading.Event()
        self.calls: list[Operation] = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def __call__(self, operation: Operation) -> GitOutput:
        with self._lock:
            self.calls.append(operation)
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if operation.kind is self.gated_kind:
                self.started.set()
                self.release.wait(timeout=2.0)
            else:
                time.sleep(0.005)
        finally:
            with self._lock:
                self.active -= 1
        return GitOutput((operation.kind.value,), self.returncode, "", self.stderr)


class OperationExecutorTests(unittest.TestCase):
    def test_mutations_run_one_at_a_time_in_submission_order(self) -> None:
        run = _GatedRun()
        executor = OperationExecutor(run)
        operations = [
            Operation(K.STAGE_FILES, paths=("a.txt",)),
            Operation(K.COMMIT, message="one"),
            Operation(K.STAGE_FILES, paths=("b.txt",)),
            Operation(K.COMMIT, message="two"),
        ]
        tickets = [executor.submit(operation) for operation in operations]

        results = _wait_for_results(executor, expected_count=4)
        self.assertEqual([result.ticket for result in results], tickets)
        self.assertTrue(all(result.outcome is Outcome.SUCCESS for result in results))
        self.assertEqual(run.calls, operations)
        self.assertEqual(run.max_active, 1)
        executor.shutdown()

    def test_queued_duplicate_is_superseded_without_running(self) -> None:
        run = _GatedRun(gated_kind=K.COMMIT)
        executor = OperationExecutor(run)
        gate = executor.submit(Operation(K.COMMIT, message="gate"))
        self.assertTrue(run.started.wait(timeout=1.0))

        first = executor.submit(Operation(K.FETCH, target="origin"))
        second = executor.submit(Operation(K.FETCH, target="origin"))
        run.release.set()

        results = {result.ticket: result for result in _wait_for_results(executor, expected_count=3)}
        self.assertIs(results[gate].outcome, Outcome.SUCCESS)
        self.assertIs(results[first].outcome, Outcome.SUPERSEDED)
        self.assertIsNone(results[first].exit_status)
        self.assertIs(results[second].outcome, Outcome.SUCCESS)
        self.assertEqual([operation.kind for operation in run.calls], [K.COMMIT, K.FETCH])
        executor.shutdown()

    def test_identical_running_mutation_is_joined(self) -> None:
        run = _GatedRun(gated_kind=K.FETCH)
        executor = OperationExecutor(run)
        first = executor.submit(Operation(K.FETCH, target="origin"))
        self.assertTrue(run.started.wait(timeout=1.0))
        second = executor.submit(Operation(K.FETCH, target="origin"))
        run.release.set()

        results = {result.ticket: result for result in _wait_for_results(executor, expected_count=2)}
        self.assertIs(results[first].outcome, Outcome.SUPERSEDED)
        self.assertEqual(results[first].exit_status, 0)
        self.assertIs(results[second].outcome, Outcome.SUCCESS)
        self.assertEqual(len(run.calls), 1)
        executor.shutdown()

    def test_running_mutation_with_other_options_is_superseded_and_rerun(self) -> None:
        run = _GatedRun(gated_kind=K.FETCH)
        executor = OperationExecutor(run)
        first = executor.submit(Operation(K.FETCH, target="origin"))
        self.assertTrue(run.started.wait(timeout=1.0))
        second = executor.submit(Operation(K.FETCH, frozenset({"prune"}), target="origin"))
        run.release.set()

        results = {result.ticket: result for result in _wait_for_results(executor, expected_count=2)}
        self.assertIs(results[first].outcome, Outcome.SUPERSEDED)
        self.assertIs(results[second].outcome, Outcome.SUCCESS)
        self.assertEqual([operation.options for operation in run.calls], [frozenset(), frozenset({"prune"})])
        executor.shutdown()

    def test_join_after_supersession_does_not_attach_to_stale_run(self) -> None:
        run = _GatedRun(gated_kind=K.FETCH)
        executor = OperationExecutor(run)
        executor.submit(Operation(K.FETCH, target="origin"))
        self.assertTrue(run.started.wait(timeout=1.0))
        executor.submit(Operation(K.FETCH, frozenset({"prune"}), target="origin"))
        last = executor.submit(Operation(K.FETCH, target="origin"))
        run.release.set()

        results = {result.ticket: result for result in _wait_for_results(executor, expected_count=3)}
        self.assertIs(results[last].outcome, Outcome.SUCCESS)
        self.assertEqual(sum(result.outcome is Outcome.SUCCESS for result in results.values()), 1)
        self.assertEqual(len(run.calls), 2)
        executor.shutdown()

    def test_different_targets_are_not_collapsed(self) -> None:
        run = _GatedRun(gated_kind=K.COMMIT)
        executor = OperationExecutor(run)
        executor.submit(Operation(K.COMMIT, message="gate"))
        self.assertTrue(run.started.wait(timeout=1.0))
        executor.submit(Operation(K.FETCH, target="origin"))
        executor.submit(Operation(K.FETCH, target="upstream"))
        executor.submit(Operation(K.COMMIT, message="same text is never collapsed"))
        executor.submit(Operation(K.COMMIT, message="same text is never collapsed"))
        run.release.set()

        results = _wait_for_results(executor, expected_count=5)
        self.assertTrue(all(result.outcome is Outcome.SUCCESS for result in results))
        self.assertEqual(len(run.calls), 5)
        executor.shutdown()

    def test_failure_carries_git_diagnostic(self) -> None:
        run = _GatedRun(returncode=1, stderr="error: patch failed: f.txt:1\n")
        executor = OperationExecutor(run)
        executor.submit(Operation(K.STAGE_ALL))

        [result] = _wait_for_results(executor, expected_count=1)
        self.assertIs(result.outcome, Outcome.FAILED)
        self.assertEqual(result.exit_status, 1)
        self.assertEqual(result.diagnostic, "error: patch failed: f.txt:1")
        executor.shutdown()

    def test_operation_that_cannot_be_built_fails_cleanly(self) -> None:
        def run(operation: Operation) -> GitOutput:
            raise ValueError("push-tag requires a tag")

        executor = OperationExecutor(run)
        with self.assertLogs("lazystage.runtime.executor", level="WARNING"):
            executor.submit(Operation(K.PUSH_TAG, target="origin"))
            [result] = _wait_for_results(executor, expected_count=1)
        self.assertIs(result.outcome, Outcome.FAILED)
        self.assertEqual(result.exit_status, -1)
        self.assertEqual(result.diagnostic, "push-tag requires a tag")
        executor.shutdown()

    def test_unexpected_error_fails_the_ticket_and_worker_keeps_going(self) -> None:
        calls: list[Operation] = []

        def run(operation: Operation) -> GitOutput:
            calls.append(operation)
            if operation.kind is K.STAGE_ALL:
                raise RuntimeError("boom")
            return GitOutput((operation.kind.value,), 0, "", "")

        executor = OperationExecutor(run)
        with self.assertLogs("lazystage.runtime.executor", level="ERROR"):
            crashed = executor.submit(Operation(K.STAGE_ALL))
            [result] = _wait_for_results(executor, expected_count=1)
        self.assertEqual(result.ticket, crashed)
        self.assertIs(result.outcome, Outcome.FAILED)
        self.assertEqual(result.exit_status, -1)
        self.assertEqual(result.diagnostic, "internal error: boom")

        after = executor.submit(Operation(K.COMMIT, message="next"))
        [next_result] = _wait_for_results(executor, expected_count=1)
        self.assertEqual(next_result.ticket, after)
        self.assertIs(next_result.outcome, Outcome.SUCCESS)
        self.assertEqual(len(calls), 2)
        executor.shutdown()

    def test_reads_do_not_wait_for_mutations(self) -> None:
        run = _GatedRun(gated_kind=K.PULL)
        executor = OperationExecutor(run)
        pull = executor.submit(Operation(K.PULL, target="origin"))
        self.assertTrue(run.started.wait(timeout=1.0))
        read = executor.submit(Operation(K.READ_DIFF, target="staged"))

        [read_result] = _wait_for_results(executor, expected_count=1)
        self.assertEqual(read_result.ticket, read)

        run.release.set()
        [pull_result] = _wait_for_results(executor, expected_count=1)
        self.assertEqual(pull_result.ticket, pull)
        executor.shutdown()

    def test_shutdown_supersedes_queued_work_and_rejects_new(self) -> None:
        run = _GatedRun(gated_kind=K.COMMIT)
        executor = OperationExecutor(run)
        executor.submit(Operation(K.COMMIT, message="gate"))
        self.assertTrue(run.started.wait(timeout=1.0))
        queued = executor.submit(Operation(K.STAGE_ALL))

        executor.shutdown(wait=False)
        with self.assertRaises(RuntimeError):
            executor.submit(Operation(K.FETCH))
        run.release.set()

        results = {result.ticket: result for result in _wait_for_results(executor, expected_count=2)}
        self.assertIs(results[queued].outcome, Outcome.SUPERSEDED)
        self.assertEqual([operation.kind for operation in run.calls], [K.COMMIT])


if __name__ == "__main__":
    unittest.main()
