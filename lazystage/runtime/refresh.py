"""Background worker that collects repository snapshots."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from queue import Empty, Queue

from ..errors import LazyStageError
from ..git.snapshot import Snapshot

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefreshResult:
    """A completed snapshot collection, or the error that stopped it."""

    generation: int
    snapshot: Snapshot | None
    error: str = ""


class RefreshScheduler:
    """Single-threaded refresh scheduler.

    At most one collection runs at a time. A plain request made while one is
    running joins it. An invalidating request (made after a mutation)
    discards the running collection's result and schedules exactly one
    follow-up collection, however many invalidations arrive meanwhile.
    """

    def __init__(self, collect: Callable[[], Snapshot]) -> None:
        self._collect = collect
        self._lock = threading.Lock()
        self._generation = 0
        self._running = False
        self._follow_up = False
        self._runs = 0
        self._idle = threading.Event()
        self._idle.set()
        self._results: Queue[RefreshResult] = Queue()

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    @property
    def in_flight(self) -> bool:
        with self._lock:
            return self._running

    @property
    def runs(self) -> int:
        """Number of collections actually executed."""
        with self._lock:
            return self._runs

    def request(self, invalidate: bool = False) -> int:
        """Ask for a fresh snapshot and return the generation that will satisfy it."""
        with self._lock:
            if self._running:
                if invalidate and not self._follow_up:
                    self._generation += 1
                    self._follow_up = True
                return self._generation
            self._generation += 1
            generation = self._generation
            self._running = True
            self._idle.clear()

        worker = threading.Thread(
            target=self._worker,
            args=(generation,),
            name="lazystage-refresh",
            daemon=True,
        )
        worker.start()
        return generation

    def _worker(self, generation: int) -> None:
        while True:
            LOG.debug("collecting snapshot (generation %d)", generation)
            try:
                result = RefreshResult(generation, self._collect())
            except LazyStageError as exc:
                LOG.warning("refresh failed: %s", exc)
                result = RefreshResult(generation, None, str(exc))
            except Exception as exc:
                LOG.exception("refresh crashed")
                result = RefreshResult(generation, None, f"refresh crashed: {exc}")

            with self._lock:
                self._runs += 1
                if generation == self._generation:
                    self._results.put(result)
                else:
                    LOG.debug("discarding stale snapshot (generation %d)", generation)
                if self._follow_up:
                    self._follow_up = False
                    generation = self._generation
                    continue
                self._running = False
                self._idle.set()
                return

    def wait_idle(self, timeout: float | None = None) -> bool:
        return self._idle.wait(timeout)

    def drain_results(self) -> list[RefreshResult]:
        """Drain completed results that are still current."""
        out: list[RefreshResult] = []
        while True:
            try:
                result = self._results.get_nowait()
            except Empty:
                break
            if result.generation == self.generation:
                out.append(result)
        return out


__all__ = ["RefreshResult", "RefreshScheduler"]
