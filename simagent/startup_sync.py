"""Startup synchronization for freshly spawned workers.

Polls a batch of workers once per interval until every one of them has
announced its address, one of them has died, or the batch runs out of time.
"""

from __future__ import annotations

import threading

from simagent.constants import POLL_INTERVAL_SECONDS, WorkerStatus
from simagent.exceptions import WorkerExitedEarlyError, WorkerStartupTimeoutError
from simagent.logging import get_logger
from simagent.readiness import AddressFileProbe, ReadinessProbe
from simagent.types import WorkerProcess

logger = get_logger("startup_sync")


class PollTimer:
    """Interruptible sleep between polling rounds."""

    def __init__(self) -> None:
        self._cancelled = threading.Event()

    def sleep(self, seconds: float) -> None:
        """Wait *seconds*, returning early if cancelled."""
        self._cancelled.wait(seconds)

    def cancel(self) -> None:
        """Wake up any sleeper; later sleeps return immediately."""
        self._cancelled.set()


class StartupSynchronizer:
    """Wait for a batch of workers to signal readiness.

    Each worker moves from PENDING to READY, EXITED_EARLY or TIMED_OUT.
    A worker that exits fails the whole batch at once; workers still
    pending after ``timeout_seconds`` rounds fail it with a timeout.
    """

    def __init__(
        self,
        public_address: str,
        probe: ReadinessProbe | None = None,
        timer: PollTimer | None = None,
        poll_interval: float = POLL_INTERVAL_SECONDS,
    ) -> None:
        self.public_address = public_address
        self.probe = probe or AddressFileProbe()
        self.timer = timer or PollTimer()
        self.poll_interval = poll_interval

    def wait_for_startup(
        self,
        workers: list[WorkerProcess],
        timeout_seconds: int,
        test_suite_id: str,
    ) -> None:
        """Block until every worker is READY.

        Args:
            workers: Spawned workers of one batch, in spawn order
            timeout_seconds: Number of one-interval polling rounds
            test_suite_id: Test suite the batch belongs to (for errors)

        Raises:
            WorkerExitedEarlyError: A worker process exited before it was ready
            WorkerStartupTimeoutError: Workers were still pending at the deadline
        """
        total = len(workers)
        pending = list(workers)
        if not pending:
            return

        for _ in range(timeout_seconds):
            for worker in list(pending):
                self._check_alive(worker)

                address = self.probe.poll(worker.working_directory)
                if address is not None:
                    worker.mark_ready(address)
                    pending.remove(worker)
                    logger.info(
                        f"Worker {worker.id} started {total - len(pending)} of {total}"
                        f" (address {address})"
                    )

            if not pending:
                return

            self.timer.sleep(self.poll_interval)

        for worker in pending:
            worker.status = WorkerStatus.TIMED_OUT

        raise WorkerStartupTimeoutError(
            [worker.id for worker in pending],
            test_suite_id,
            self.public_address,
            timeout_seconds,
        )

    def _check_alive(self, worker: WorkerProcess) -> None:
        if not worker.handle.has_exited():
            return

        worker.status = WorkerStatus.EXITED_EARLY
        logger.error(
            f"Worker {worker.id} exited during startup"
            f" (exit code: {worker.handle.exit_code}, oome: {worker.oome_detected()})"
        )
        raise WorkerExitedEarlyError(
            worker.id,
            worker.log_file,
            self.public_address,
            worker.handle.exit_code,
        )
