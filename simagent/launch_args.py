"""Command line construction for worker processes.

Everything here is a pure function of its inputs so that the same settings
always produce the same token sequence.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from simagent.config import LaunchSettings
from simagent.constants import (
    LOGGING_TYPE_FLAG,
    NUMA_CTL_NONE,
    OOME_TRAP_FLAG,
    RUNTIME_COMMAND,
    SIMULATOR_HOME_PLACEHOLDER,
    USER_LIB_DIR,
    WORKER_HOME_PLACEHOLDER,
    Profiler,
)
from simagent.types import AgentContext, ConfigArtifacts, WorkerIdentity

_WHITESPACE = re.compile(r"\s+")


def tokenize_vm_options(options: str | None) -> list[str]:
    """Split a VM option string on whitespace runs, dropping empty tokens."""
    if options is None or not options.strip():
        return []
    return [token for token in _WHITESPACE.split(options.strip()) if token]


def build_classpath(context: AgentContext, lib_dir: Path | None = None) -> str:
    """Assemble the worker classpath.

    Order: the agent's own classpath, the installation's ``user-lib``
    wildcard, then the test suite's private ``lib`` wildcard.
    """
    batch_lib = (lib_dir or context.lib_dir).absolute()
    parts = [
        context.classpath,
        f"{context.simulator_home}/{USER_LIB_DIR}/*",
        str(batch_lib / "*"),
    ]
    return os.pathsep.join(part for part in parts if part)


def profiler_tokens(
    settings: LaunchSettings, simulator_home: Path, worker_home: Path
) -> list[str]:
    """Profiler prefix plus the runtime command.

    ``perf`` and ``vtune`` wrap the whole invocation and therefore come
    before the runtime command; the others attach to the runtime after it.
    """
    profiler = settings.profiler
    if profiler is Profiler.PERF:
        return [settings.perf_settings, RUNTIME_COMMAND]
    if profiler is Profiler.VTUNE:
        return [settings.vtune_settings, RUNTIME_COMMAND]
    if profiler is Profiler.YOURKIT:
        agent_setting = settings.yourkit_config.replace(
            SIMULATOR_HOME_PLACEHOLDER, str(simulator_home.absolute())
        ).replace(WORKER_HOME_PLACEHOLDER, str(worker_home.absolute()))
        return [RUNTIME_COMMAND, agent_setting]
    if profiler is Profiler.HPROF:
        return [RUNTIME_COMMAND, settings.hprof_settings]
    if profiler is Profiler.FLIGHTRECORDER:
        return [RUNTIME_COMMAND, settings.flightrecorder_settings]
    return [RUNTIME_COMMAND]


def identity_properties(
    identity: WorkerIdentity,
    context: AgentContext,
    settings: LaunchSettings,
    artifacts: ConfigArtifacts,
) -> list[str]:
    """System properties that tell the worker who and where it is."""
    return [
        f"-DSIMULATOR_HOME={context.simulator_home}",
        f"-DworkerId={identity.id}",
        f"-DworkerType={identity.role.value}",
        f"-DpublicAddress={context.public_address}",
        f"-DagentIndex={context.address_index}",
        f"-DworkerIndex={identity.index}",
        f"-DworkerPort={identity.port}",
        f"-DautoCreateHZInstances={str(settings.auto_create_instances).lower()}",
        f"-DmemberHzConfigFile={artifacts.member_config.absolute()}",
        f"-DclientHzConfigFile={artifacts.client_config.absolute()}",
    ]


def build_worker_args(
    identity: WorkerIdentity,
    settings: LaunchSettings,
    context: AgentContext,
    artifacts: ConfigArtifacts,
) -> list[str]:
    """Build the ordered launch tokens of one worker.

    Args:
        identity: Worker to build the command line for
        settings: Launch settings of the batch
        context: Agent the worker belongs to
        artifacts: Generated config files of the launch

    Returns:
        Token list; the last token is always the role's entry point
    """
    args: list[str] = []

    if settings.numa_ctl != NUMA_CTL_NONE:
        args.append(settings.numa_ctl)

    args.extend(profiler_tokens(settings, context.simulator_home, identity.working_directory))

    lib_dir = Path(settings.lib_dir) if settings.lib_dir else None
    args.append("-classpath")
    args.append(build_classpath(context, lib_dir))

    args.extend(tokenize_vm_options(settings.vm_options_for(identity.role)))

    args.append(OOME_TRAP_FLAG)
    args.append(LOGGING_TYPE_FLAG)
    args.append(f"-Dlog4j.configuration=file:{artifacts.log_config.absolute()}")

    args.extend(identity_properties(identity, context, settings, artifacts))

    args.append(settings.entry_point_for(identity.role))
    return args
