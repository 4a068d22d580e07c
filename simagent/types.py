"""SimAgent type definitions."""

from __future__ import annotations

__all__ = [
    "AgentContext",
    "ConfigArtifacts",
    "WorkerIdentity",
    "WorkerProcess",
    "format_worker_id",
]

import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from simagent.constants import (
    LIB_DIR,
    UPLOAD_DIR,
    WORKER_LOG_FILE,
    WORKER_OOME_FILE,
    WORKERS_DIR,
    WorkerRole,
    WorkerStatus,
)

if TYPE_CHECKING:
    from simagent.launchers.base import ProcessHandle


def format_worker_id(public_address: str, index: int, role: WorkerRole) -> str:
    """Build the id used for logging and for the worker's directory name."""
    return f"worker-{public_address}-{index}-{role.value}"


# ============================================================================
# Agent-level types
# ============================================================================


@dataclass(frozen=True)
class AgentContext:
    """Host-level facts the launcher needs about the agent that owns it."""

    public_address: str
    address_index: int
    test_suite_id: str
    simulator_home: Path
    classpath: str = field(default_factory=lambda: os.environ.get("CLASSPATH", ""))

    @property
    def workers_root(self) -> Path:
        """Root of all test suite directories on this host."""
        return self.simulator_home / WORKERS_DIR

    @property
    def test_suite_dir(self) -> Path:
        """Directory holding every worker directory of the current test suite."""
        return self.workers_root / self.test_suite_id

    @property
    def upload_dir(self) -> Path:
        """Files staged for the test suite, copied into every worker directory."""
        return self.test_suite_dir / UPLOAD_DIR

    @property
    def lib_dir(self) -> Path:
        """Libraries private to the current test suite."""
        return self.test_suite_dir / LIB_DIR


@dataclass(frozen=True)
class ConfigArtifacts:
    """Absolute paths of the generated config files of one launch."""

    member_config: Path
    client_config: Path
    log_config: Path


# ============================================================================
# Worker types
# ============================================================================


@dataclass(frozen=True)
class WorkerIdentity:
    """Identity of a single worker; never reused within a process lifetime."""

    index: int
    role: WorkerRole
    port: int
    id: str
    working_directory: Path


@dataclass
class WorkerProcess:
    """A spawned worker, tracked from spawn until its startup resolves."""

    identity: WorkerIdentity
    handle: ProcessHandle
    address: str | None = None
    status: WorkerStatus = WorkerStatus.PENDING
    started_at: datetime = field(default_factory=datetime.now)
    ready_at: datetime | None = None

    @property
    def id(self) -> str:
        return self.identity.id

    @property
    def working_directory(self) -> Path:
        return self.identity.working_directory

    @property
    def log_file(self) -> Path:
        return self.identity.working_directory / WORKER_LOG_FILE

    def mark_ready(self, address: str) -> None:
        """Record the address announced by the worker."""
        self.address = address
        self.status = WorkerStatus.READY
        self.ready_at = datetime.now()

    def oome_detected(self) -> bool:
        """Check whether the runtime's out-of-memory trap fired."""
        return (self.identity.working_directory / WORKER_OOME_FILE).exists()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "index": self.identity.index,
            "role": self.identity.role.value,
            "port": self.identity.port,
            "working_directory": str(self.working_directory),
            "pid": self.handle.pid,
            "address": self.address,
            "status": self.status.value,
            "started_at": self.started_at.isoformat(),
            "ready_at": self.ready_at.isoformat() if self.ready_at else None,
        }
