"""SimAgent launchers package.

Re-exports the process spawner ABCs and the subprocess implementation.
"""

from __future__ import annotations

from simagent.launchers.base import ProcessHandle, ProcessSpawner
from simagent.launchers.subprocess_launcher import SubprocessHandle, SubprocessSpawner

__all__ = [
    "ProcessHandle",
    "ProcessSpawner",
    "SubprocessHandle",
    "SubprocessSpawner",
]
