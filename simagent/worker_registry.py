"""Thread-safe registry of started workers.

Shared between the launcher, which adds workers once their batch has
resolved, and whoever later talks to or stops them. Keyed by worker id.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator

from simagent.constants import WorkerRole, WorkerStatus
from simagent.types import WorkerProcess


class WorkerRegistry:
    """Single source of truth for started workers. Thread-safe.

    All public methods acquire the internal ``RLock`` so callers never need
    external synchronisation.
    """

    def __init__(self) -> None:
        self._workers: dict[str, WorkerProcess] = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def register(self, worker: WorkerProcess) -> None:
        """Add a worker under its id."""
        with self._lock:
            self._workers[worker.id] = worker

    def unregister(self, worker_id: str) -> WorkerProcess | None:
        """Remove a worker, returning it if it was registered."""
        with self._lock:
            return self._workers.pop(worker_id, None)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, worker_id: str) -> WorkerProcess | None:
        """Return worker by id, or ``None`` if not found."""
        with self._lock:
            return self._workers.get(worker_id)

    def all(self) -> dict[str, WorkerProcess]:
        """Return a shallow copy of every registered worker."""
        with self._lock:
            return dict(self._workers)

    def ready(self) -> dict[str, WorkerProcess]:
        """Return workers that announced an address."""
        with self._lock:
            return {wid: w for wid, w in self._workers.items() if w.status is WorkerStatus.READY}

    def by_role(self, role: WorkerRole) -> dict[str, WorkerProcess]:
        """Return workers of one role."""
        with self._lock:
            return {wid: w for wid, w in self._workers.items() if w.identity.role is role}

    # ------------------------------------------------------------------
    # Dict-like interface
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        with self._lock:
            return len(self._workers)

    def __contains__(self, worker_id: object) -> bool:
        with self._lock:
            return worker_id in self._workers

    def __getitem__(self, worker_id: str) -> WorkerProcess:
        """Dict-like access. Raises ``KeyError`` if not found."""
        with self._lock:
            return self._workers[worker_id]

    def __iter__(self) -> Iterator[str]:
        """Iterate over worker ids (snapshot)."""
        with self._lock:
            return iter(list(self._workers.keys()))

    def __repr__(self) -> str:
        with self._lock:
            count = len(self._workers)
        return f"<WorkerRegistry workers={count}>"
