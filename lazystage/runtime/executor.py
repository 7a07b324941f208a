"""Non-blocking execution of git operations.

Reads run concurrently on a small thread pool. Mutations run one at a time,
in submission order, on a single worker thread. Results are posted to a queue
and drained by the main loop, so nothing here touches ``AppState``.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from queue import Empty, Queue

from ..errors import LazyStageError
from ..git.runner import GitOutput
from ..operations import Operation, OperationResult

LOG = logging.getLogger(__name__)

DEFAULT_READ_WORKERS = 4

RunOperation = Callable[[Operation], GitOutput]


@dataclass(frozen=True)
class _Job:
    ticket: int
    operation: Operation


class OperationExecutor:
    """Ticketed operation executor.

    A mutation submitted while an equal one (same kind, target and paths) is
    still queued replaces it; the replaced ticket completes as superseded
    without running. If the running mutation is identical, options included,
    the new ticket joins it: git runs once, the newest ticket receives the
    result and the older ones complete as superseded. A running mutation that
    differs only in options finishes, but its result is reported as
    superseded and the newer one runs after it.
    """

    def __init__(self, run: RunOperation, read_workers: int = DEFAULT_READ_WORKERS) -> None:
        self._run = run
        self._lock = threading.Lock()
        self._next_ticket = 1
        self._queue: deque[_Job] = deque()
        self._current: _Job | None = None
        self._joined: list[int] = []
        self._current_superseded = False
        self._worker_running = False
        self._closed = False
        self._results: Queue[OperationResult] = Queue()
        self._readers = ThreadPoolExecutor(max_workers=read_workers, thread_name_prefix="lazystage-read")

    def submit(self, operation: Operation) -> int:
        """Queue ``operation`` and return its ticket immediately."""
        with self._lock:
            if self._closed:
                raise RuntimeError("executor is shut down")
            ticket = self._next_ticket
            self._next_ticket += 1
            job = _Job(ticket, operation)

            if not operation.is_mutating:
                self._readers.submit(self._run_read, job)
                return ticket

            if self._supersede(operation):
                self._joined.append(ticket)
                LOG.info("#%d %s joined running #%d", ticket, operation.describe(), self._current.ticket)
                return ticket
            self._queue.append(job)
            LOG.info("queued #%d %s", ticket, operation.describe())
            if self._worker_running:
                return ticket
            self._worker_running = True

        worker = threading.Thread(target=self._worker, name="lazystage-mutations", daemon=True)
        worker.start()
        return ticket

    def _supersede(self, operation: Operation) -> bool:
        """Drop queued equals of ``operation``; return True when it can join the running job."""
        key = operation.supersession_key
        if key is None:
            return False
        for job in [job for job in self._queue if job.operation.supersession_key == key]:
            self._queue.remove(job)
            LOG.info("#%d %s superseded before it started", job.ticket, job.operation.describe())
            self._results.put(OperationResult.superseded(job.ticket, job.operation))
        current = self._current
        if current is None or current.operation.supersession_key != key:
            return False
        if current.operation == operation and not self._current_superseded:
            return True
        self._current_superseded = True
        return False

    def _worker(self) -> None:
        try:
            while True:
                with self._lock:
                    if not self._queue:
                        self._worker_running = False
                        return
                    job = self._queue.popleft()
                    self._current = job
                    self._joined = []
                    self._current_superseded = False

                result = self._execute(job)

                with self._lock:
                    for posted in self._fan_out(job, result):
                        self._results.put(posted)
                    self._current = None
        except BaseException:
            with self._lock:
                self._current = None
                self._worker_running = False
            raise

    def _fan_out(self, job: _Job, result: OperationResult) -> list[OperationResult]:
        """Results for the running ticket and every ticket that joined it."""
        tickets = [job.ticket, *self._joined]
        if self._current_superseded:
            LOG.info("#%d %s superseded while running", job.ticket, job.operation.describe())
            return [replace(result.as_superseded(), ticket=ticket) for ticket in tickets]
        *older, newest = tickets
        out = [replace(result.as_superseded(), ticket=ticket) for ticket in older]
        out.append(replace(result, ticket=newest))
        return out

    def _run_read(self, job: _Job) -> None:
        self._results.put(self._execute(job))

    def _execute(self, job: _Job) -> OperationResult:
        operation = job.operation
        try:
            output = self._run(operation)
        except (LazyStageError, ValueError) as exc:
            LOG.warning("#%d %s could not run: %s", job.ticket, operation.describe(), exc)
            return OperationResult.from_exit(job.ticket, operation, -1, "", str(exc))
        except Exception as exc:
            LOG.exception("#%d %s crashed", job.ticket, operation.describe())
            return OperationResult.from_exit(job.ticket, operation, -1, "", f"internal error: {exc}")
        result = OperationResult.from_exit(job.ticket, operation, output.returncode, output.stdout, output.stderr)
        if result.succeeded:
            LOG.info("#%d %s done", job.ticket, operation.describe())
        else:
            LOG.warning("#%d %s failed (%d): %s", job.ticket, operation.describe(), output.returncode, result.diagnostic)
        return result

    def drain_results(self) -> list[OperationResult]:
        out: list[OperationResult] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        return out

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work; queued mutations that never started are superseded."""
        with self._lock:
            self._closed = True
            while self._queue:
                job = self._queue.popleft()
                self._results.put(OperationResult.superseded(job.ticket, job.operation))
        self._readers.shutdown(wait=wait)


__all__ = ["DEFAULT_READ_WORKERS", "OperationExecutor", "RunOperation"]
