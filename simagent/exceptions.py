"""SimAgent exception hierarchy."""

from pathlib import Path
from typing import Any


class SimAgentError(Exception):
    """Base exception for all SimAgent errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(SimAgentError):
    """Error in SimAgent configuration."""

    pass


class DirectoryCreationError(SimAgentError):
    """A working directory could not be created."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = str(path) if path is not None else None


class SpawnWorkerFailedError(SimAgentError):
    """Base error for a worker batch that did not start."""

    def __init__(
        self, message: str, worker_id: str | None = None, details: dict[str, Any] | None = None
    ) -> None:
        super().__init__(message, details)
        self.worker_id = worker_id


class WorkerExitedEarlyError(SpawnWorkerFailedError):
    """Worker process exited before announcing its address."""

    def __init__(
        self,
        worker_id: str,
        log_file: str | Path,
        public_address: str,
        exit_code: int | None = None,
    ) -> None:
        super().__init__(
            f"Startup failure: worker {worker_id} on host {public_address} failed during startup,"
            f" check '{log_file}' for more information!",
            worker_id=worker_id,
        )
        self.log_file = str(log_file)
        self.public_address = public_address
        self.exit_code = exit_code


class WorkerStartupTimeoutError(SpawnWorkerFailedError):
    """One or more workers did not announce their address in time."""

    def __init__(
        self,
        pending_ids: list[str],
        test_suite_id: str,
        public_address: str,
        timeout_seconds: int,
    ) -> None:
        super().__init__(
            f"Timeout: workers [{','.join(pending_ids)}] of testsuite {test_suite_id}"
            f" on host {public_address} didn't start within {timeout_seconds} seconds"
        )
        self.pending_ids = list(pending_ids)
        self.test_suite_id = test_suite_id
        self.public_address = public_address
        self.timeout_seconds = timeout_seconds
