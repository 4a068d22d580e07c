"""SimAgent worker launcher.

Starts the member and client workers requested by a set of launch settings,
one role at a time, and waits for each batch to announce itself before
moving on. Any failure aborts the launch.
"""

from __future__ import annotations

import os
import shutil
import sys
from pathlib import Path

from simagent.config import LaunchSettings
from simagent.constants import (
    CLIENT_CONFIG_PREFIX,
    CONFIG_FILE_SUFFIX,
    LOG_CONFIG_PREFIX,
    MEMBER_CONFIG_PREFIX,
    RUNTIME_COMMAND,
    RUNTIME_HOME_ENV,
    WORKER_ADDRESS_FILE,
    WORKER_OOME_FILE,
    WorkerRole,
    WorkerStatus,
)
from simagent.fs_utils import (
    copy_directory_contents,
    create_temp_file,
    delete_quiet,
    ensure_existing_directory,
)
from simagent.launch_args import build_worker_args
from simagent.launchers.base import ProcessSpawner
from simagent.launchers.subprocess_launcher import SubprocessSpawner
from simagent.logging import get_logger, set_launch_context
from simagent.ports import PortAllocator
from simagent.start_script import write_start_script
from simagent.startup_sync import StartupSynchronizer
from simagent.types import (
    AgentContext,
    ConfigArtifacts,
    WorkerIdentity,
    WorkerProcess,
    format_worker_id,
)
from simagent.worker_registry import WorkerRegistry

logger = get_logger("launcher")

LAUNCH_ORDER = (WorkerRole.MEMBER, WorkerRole.CLIENT)


def resolve_runtime_home(settings: LaunchSettings) -> Path:
    """Find the runtime installation used to run workers.

    Order: ``settings.java_home``, ``$JAVA_HOME``, the installation owning
    the runtime command on PATH, and finally the interpreter prefix.
    """
    if settings.java_home:
        return Path(settings.java_home)

    env_home = os.environ.get(RUNTIME_HOME_ENV)
    if env_home:
        return Path(env_home)

    runtime = shutil.which(RUNTIME_COMMAND)
    if runtime:
        return Path(runtime).resolve().parent.parent

    return Path(sys.prefix)


def write_config_artifacts(settings: LaunchSettings) -> ConfigArtifacts:
    """Write the opaque runtime and logging configs to temporary files."""
    return ConfigArtifacts(
        member_config=create_temp_file(MEMBER_CONFIG_PREFIX, CONFIG_FILE_SUFFIX, settings.member_config),
        client_config=create_temp_file(CLIENT_CONFIG_PREFIX, CONFIG_FILE_SUFFIX, settings.client_config),
        log_config=create_temp_file(LOG_CONFIG_PREFIX, CONFIG_FILE_SUFFIX, settings.log_config),
    )


class WorkerLauncher:
    """Launch batches of worker processes for one agent.

    The launcher owns each worker from spawn until its batch resolves. Workers
    of a successful batch are then handed to the shared registry.
    """

    def __init__(
        self,
        context: AgentContext,
        registry: WorkerRegistry | None = None,
        spawner: ProcessSpawner | None = None,
        allocator: PortAllocator | None = None,
        synchronizer: StartupSynchronizer | None = None,
    ) -> None:
        """Initialize launcher.

        Args:
            context: Agent the workers belong to
            registry: Shared registry receiving started workers
            spawner: Process backend (default: local subprocesses)
            allocator: Worker index/port source; share one per agent so
                indices are never reused across launches
            synchronizer: Startup synchronizer (default: address-file polling)
        """
        self.context = context
        self.registry = registry if registry is not None else WorkerRegistry()
        self.spawner = spawner or SubprocessSpawner()
        self.allocator = allocator or PortAllocator()
        self.synchronizer = synchronizer or StartupSynchronizer(context.public_address)
        self.artifacts: ConfigArtifacts | None = None
        self._workers_in_progress: list[WorkerProcess] = []
        self._runtime_home_logged = False

    def launch(self, settings: LaunchSettings) -> None:
        """Start all workers requested by *settings*.

        Members are started and confirmed first, then clients.

        Raises:
            DirectoryCreationError: If the test suite directory cannot be created
            SpawnWorkerFailedError: If a batch did not start completely
            OSError: If a config file, start script or upload copy fails
        """
        set_launch_context(
            test_suite_id=self.context.test_suite_id,
            public_address=self.context.public_address,
        )

        self.artifacts = write_config_artifacts(settings)
        ensure_existing_directory(self.context.test_suite_dir)

        logger.info(f"Spawning workers using settings: {settings.summary()}")
        for role in LAUNCH_ORDER:
            self._spawn_batch(role, settings, self.artifacts)

    def terminate_all(self, force: bool = False) -> dict[str, bool]:
        """Stop and unregister every worker in the registry.

        Returns:
            Dictionary of worker id to termination success
        """
        results: dict[str, bool] = {}
        for worker_id in list(self.registry):
            worker = self.registry.unregister(worker_id)
            if worker is not None:
                results[worker_id] = worker.handle.terminate(force=force)
        return results

    def _spawn_batch(self, role: WorkerRole, settings: LaunchSettings, artifacts: ConfigArtifacts) -> None:
        count = settings.worker_count_for(role)
        logger.info(f"Starting {count} {role} workers")

        try:
            for _ in range(count):
                self._workers_in_progress.append(self._start_worker(role, settings, artifacts))
            logger.info(f"Finished starting {count} {role} workers")

            self.synchronizer.wait_for_startup(
                self._workers_in_progress,
                settings.worker_startup_timeout,
                self.context.test_suite_id,
            )
        except Exception:
            self._resolve_failed_batch(role, settings.teardown_on_failure)
            raise
        else:
            for worker in self._workers_in_progress:
                self.registry.register(worker)
        finally:
            self._workers_in_progress.clear()

    def _resolve_failed_batch(self, role: WorkerRole, teardown: bool) -> None:
        if teardown:
            for worker in self._workers_in_progress:
                logger.warning(f"Tearing down {role} worker {worker.id} after failed startup")
                worker.handle.terminate(force=True)
            return

        ready = [w for w in self._workers_in_progress if w.status is WorkerStatus.READY]
        for worker in ready:
            self.registry.register(worker)
        if ready:
            logger.warning(
                f"Leaving {len(ready)} started {role} workers running after failed startup:"
                f" {', '.join(w.id for w in ready)}"
            )

    def _start_worker(
        self, role: WorkerRole, settings: LaunchSettings, artifacts: ConfigArtifacts
    ) -> WorkerProcess:
        index, port = self.allocator.allocate()
        worker_id = format_worker_id(self.context.public_address, index, role)
        working_dir = ensure_existing_directory(self.context.test_suite_dir / worker_id)
        # A directory reused under the same test suite may hold markers of an earlier run
        for stale in (WORKER_ADDRESS_FILE, WORKER_OOME_FILE):
            delete_quiet(working_dir / stale)

        identity = WorkerIdentity(
            index=index,
            role=role,
            port=port,
            id=worker_id,
            working_directory=working_dir,
        )

        args = build_worker_args(identity, settings, self.context, artifacts)
        script = write_start_script(working_dir, args)
        self._copy_upload_directory(worker_id, working_dir)

        handle = self.spawner.spawn(
            working_dir,
            ["bash", script.name],
            self._get_runtime_home(settings),
            settings.env_vars,
        )
        logger.info(f"Spawned worker {worker_id} on port {port} (pid {handle.pid})")
        return WorkerProcess(identity=identity, handle=handle)

    def _get_runtime_home(self, settings: LaunchSettings) -> Path:
        runtime_home = resolve_runtime_home(settings)
        if not self._runtime_home_logged:
            self._runtime_home_logged = True
            logger.info(f"{RUNTIME_HOME_ENV}={runtime_home}")
        return runtime_home

    def _copy_upload_directory(self, worker_id: str, working_dir: Path) -> None:
        upload_dir = self.context.upload_dir
        if not copy_directory_contents(upload_dir, working_dir):
            logger.debug("Skip copying upload directory to workers since no upload directory was found")
            return
        logger.info(f"Finished copying '{upload_dir}' to worker {worker_id}")
