"""ProcessSpawner and ProcessHandle abstract base classes.

Defines the interface for creating worker processes and querying them.
Implementations live in sibling modules.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path

from simagent.constants import RUNTIME_HOME_ENV
from simagent.env_validator import validate_env_vars
from simagent.logging import get_logger

logger = get_logger("launcher")


class ProcessHandle(ABC):
    """Handle to a spawned worker process."""

    @property
    @abstractmethod
    def pid(self) -> int | None:
        """OS process id, if known."""

    @property
    @abstractmethod
    def exit_code(self) -> int | None:
        """Exit code once the process has exited, else None."""

    @abstractmethod
    def has_exited(self) -> bool:
        """Check without blocking whether the process has exited."""

    @abstractmethod
    def terminate(self, force: bool = False) -> bool:
        """Stop the process.

        Args:
            force: Kill immediately instead of asking it to stop

        Returns:
            True if the process is gone afterwards
        """


class ProcessSpawner(ABC):
    """Creates worker processes from a working directory and a command."""

    @abstractmethod
    def spawn(
        self,
        working_dir: Path,
        command: list[str],
        runtime_home: Path,
        env: dict[str, str] | None = None,
    ) -> ProcessHandle:
        """Start a worker process.

        Args:
            working_dir: Directory the process runs in; its output log is
                written there as well
            command: Command to execute
            runtime_home: Runtime installation whose ``bin`` goes first on PATH
            env: Additional environment variables (validated)

        Returns:
            Handle of the started process
        """

    @staticmethod
    def build_environment(runtime_home: Path, env: dict[str, str] | None = None) -> dict[str, str]:
        """Build the child environment.

        Starts from the current environment, adds validated overrides, then
        prefixes PATH with ``<runtime_home>/bin`` and sets the runtime home.
        """
        worker_env = os.environ.copy()
        if env:
            worker_env.update(validate_env_vars(env))

        runtime_bin = str(runtime_home / "bin")
        current_path = worker_env.get("PATH", "")
        worker_env["PATH"] = f"{runtime_bin}{os.pathsep}{current_path}" if current_path else runtime_bin
        worker_env[RUNTIME_HOME_ENV] = str(runtime_home)
        return worker_env
