"""SimAgent - host-local worker launcher for distributed benchmark runs.

Starts member and client worker processes and waits until they are ready.
"""

__version__ = "0.1.0"
__author__ = "SimAgent Team"

from simagent.config import LaunchSettings, SimAgentConfig
from simagent.constants import Profiler, WorkerRole, WorkerStatus
from simagent.exceptions import (
    SimAgentError,
    SpawnWorkerFailedError,
    WorkerExitedEarlyError,
    WorkerStartupTimeoutError,
)
from simagent.launcher import WorkerLauncher
from simagent.types import AgentContext, WorkerIdentity, WorkerProcess

__all__ = [
    "__version__",
    "WorkerRole",
    "WorkerStatus",
    "Profiler",
    # Configuration
    "LaunchSettings",
    "SimAgentConfig",
    # Errors
    "SimAgentError",
    "SpawnWorkerFailedError",
    "WorkerExitedEarlyError",
    "WorkerStartupTimeoutError",
    # Launching
    "AgentContext",
    "WorkerIdentity",
    "WorkerProcess",
    "WorkerLauncher",
]
