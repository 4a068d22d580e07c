"""SubprocessSpawner for starting workers as local OS processes.

Uses subprocess.Popen with stderr folded into stdout and both redirected to
the worker's ``out.log``. The child owns its own descriptor for the log, so
output keeps being appended after the launching process has exited.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from simagent.constants import WORKER_LOG_FILE
from simagent.exceptions import SpawnWorkerFailedError
from simagent.launchers.base import ProcessHandle, ProcessSpawner
from simagent.logging import get_logger

logger = get_logger("launcher")

TERMINATE_TIMEOUT_SECONDS = 10


class SubprocessHandle(ProcessHandle):
    """ProcessHandle backed by subprocess.Popen."""

    def __init__(self, process: subprocess.Popen[bytes], log_path: Path | None = None) -> None:
        self._process = process
        self.log_path = log_path

    @property
    def pid(self) -> int | None:
        return self._process.pid

    @property
    def exit_code(self) -> int | None:
        return self._process.poll()

    def has_exited(self) -> bool:
        return self._process.poll() is not None

    def terminate(self, force: bool = False) -> bool:
        if self.has_exited():
            return True

        try:
            if force:
                self._process.kill()
            else:
                self._process.terminate()

            try:
                self._process.wait(timeout=TERMINATE_TIMEOUT_SECONDS)
            except subprocess.TimeoutExpired:
                self._process.kill()
                self._process.wait()

            logger.info(f"Terminated process {self.pid} (exit code: {self._process.returncode})")
            return True

        except OSError as e:
            logger.error(f"Failed to terminate process {self.pid}: {e}")
            return False


class SubprocessSpawner(ProcessSpawner):
    """Spawn workers as local subprocesses."""

    def spawn(
        self,
        working_dir: Path,
        command: list[str],
        runtime_home: Path,
        env: dict[str, str] | None = None,
    ) -> SubprocessHandle:
        """Spawn a worker subprocess.

        Args:
            working_dir: Working directory of the process
            command: Command to execute
            runtime_home: Runtime installation directory
            env: Additional environment variables

        Returns:
            SubprocessHandle of the running process

        Raises:
            OSError: If the log file cannot be opened
            SpawnWorkerFailedError: If the OS refuses to start the process
        """
        worker_env = self.build_environment(runtime_home, env)
        log_path = working_dir / WORKER_LOG_FILE
        # The child keeps its own descriptor; ours is closed once Popen returns
        with log_path.open("wb") as log_file:
            try:
                process = subprocess.Popen(
                    command,
                    cwd=working_dir,
                    env=worker_env,
                    stdin=subprocess.DEVNULL,
                    stdout=log_file,
                    stderr=subprocess.STDOUT,
                    start_new_session=True,
                )
            except (OSError, subprocess.SubprocessError) as e:
                logger.error(f"Failed to spawn {command} in {working_dir}: {e}")
                raise SpawnWorkerFailedError(
                    f"Failed to spawn worker process in {working_dir}", details={"error": str(e)}
                ) from e

        logger.info(f"Spawned process {process.pid} in {working_dir}")
        return SubprocessHandle(process, log_path)
