"""Tests for worker command line construction."""

import os
from pathlib import Path

import pytest

from simagent.config import LaunchSettings
from simagent.constants import OOME_TRAP_FLAG, RUNTIME_COMMAND, Profiler, WorkerRole
from simagent.launch_args import (
    build_classpath,
    build_worker_args,
    profiler_tokens,
    tokenize_vm_options,
)
from simagent.types import AgentContext, ConfigArtifacts, WorkerIdentity


class TestTokenizeVmOptions:
    """Tests for VM option splitting."""

    @pytest.mark.parametrize("options", [None, "", "   ", "\t\n"])
    def test_blank_gives_no_tokens(self, options: str | None) -> None:
        assert tokenize_vm_options(options) == []

    def test_splits_on_whitespace_runs(self) -> None:
        assert tokenize_vm_options("  -Xms1g \t -Xmx1g\n-XX:+UseG1GC ") == [
            "-Xms1g",
            "-Xmx1g",
            "-XX:+UseG1GC",
        ]


class TestBuildClasspath:
    """Tests for classpath assembly."""

    def test_order_and_separator(self, agent_context: AgentContext) -> None:
        classpath = build_classpath(agent_context)
        parts = classpath.split(os.pathsep)

        assert parts[0] == "/opt/agent/lib/agent.jar"
        assert parts[1] == f"{agent_context.simulator_home}/user-lib/*"
        assert parts[2] == str(agent_context.test_suite_dir.absolute() / "lib" / "*")

    def test_lib_dir_override(self, agent_context: AgentContext, tmp_path: Path) -> None:
        classpath = build_classpath(agent_context, tmp_path / "custom-lib")
        assert classpath.endswith(str(tmp_path / "custom-lib" / "*"))

    def test_empty_agent_classpath_is_skipped(self, simulator_home: Path) -> None:
        context = AgentContext("10.0.0.1", 1, "suite", simulator_home, classpath="")
        assert not build_classpath(context).startswith(os.pathsep)


class TestProfilerTokens:
    """Tests for the profiler prefix."""

    def _settings(self, **kwargs: object) -> LaunchSettings:
        return LaunchSettings(
            perf_settings="perf record -o perf.data --quiet",
            vtune_settings="amplxe-cl -collect hotspots",
            yourkit_config="-agentpath:${SIMULATOR_HOME}/yourkit.so=dir=${WORKER_HOME}",
            hprof_settings="-agentlib:hprof=cpu=samples",
            flightrecorder_settings="-XX:+FlightRecorder",
            **kwargs,
        )

    def test_none(self, tmp_path: Path) -> None:
        assert profiler_tokens(self._settings(), tmp_path, tmp_path) == [RUNTIME_COMMAND]

    def test_perf_wraps_runtime(self, tmp_path: Path) -> None:
        tokens = profiler_tokens(self._settings(profiler=Profiler.PERF), tmp_path, tmp_path)
        assert tokens == ["perf record -o perf.data --quiet", RUNTIME_COMMAND]

    def test_vtune_wraps_runtime(self, tmp_path: Path) -> None:
        tokens = profiler_tokens(self._settings(profiler=Profiler.VTUNE), tmp_path, tmp_path)
        assert tokens == ["amplxe-cl -collect hotspots", RUNTIME_COMMAND]

    def test_yourkit_substitutes_homes(self, tmp_path: Path) -> None:
        home = tmp_path / "home"
        worker_home = tmp_path / "worker"
        tokens = profiler_tokens(self._settings(profiler=Profiler.YOURKIT), home, worker_home)
        assert tokens == [
            RUNTIME_COMMAND,
            f"-agentpath:{home.absolute()}/yourkit.so=dir={worker_home.absolute()}",
        ]

    def test_hprof_attaches_after_runtime(self, tmp_path: Path) -> None:
        tokens = profiler_tokens(self._settings(profiler=Profiler.HPROF), tmp_path, tmp_path)
        assert tokens == [RUNTIME_COMMAND, "-agentlib:hprof=cpu=samples"]

    def test_flightrecorder_attaches_after_runtime(self, tmp_path: Path) -> None:
        tokens = profiler_tokens(self._settings(profiler=Profiler.FLIGHTRECORDER), tmp_path, tmp_path)
        assert tokens == [RUNTIME_COMMAND, "-XX:+FlightRecorder"]


class TestBuildWorkerArgs:
    """Tests for the full token sequence."""

    def test_full_sequence(
        self,
        member_identity: WorkerIdentity,
        launch_settings: LaunchSettings,
        agent_context: AgentContext,
        config_artifacts: ConfigArtifacts,
    ) -> None:
        args = build_worker_args(member_identity, launch_settings, agent_context, config_artifacts)

        assert args == [
            "java",
            "-classpath",
            build_classpath(agent_context),
            "-Xms512m",
            "-Xmx512m",
            OOME_TRAP_FLAG,
            "-Dhazelcast.logging.type=log4j",
            f"-Dlog4j.configuration=file:{config_artifacts.log_config}",
            f"-DSIMULATOR_HOME={agent_context.simulator_home}",
            "-DworkerId=worker-10.0.0.1-1-MEMBER",
            "-DworkerType=MEMBER",
            "-DpublicAddress=10.0.0.1",
            "-DagentIndex=3",
            "-DworkerIndex=1",
            "-DworkerPort=9502",
            "-DautoCreateHZInstances=true",
            f"-DmemberHzConfigFile={config_artifacts.member_config}",
            f"-DclientHzConfigFile={config_artifacts.client_config}",
            "com.hazelcast.simulator.worker.MemberWorker",
        ]

    def test_deterministic(
        self,
        member_identity: WorkerIdentity,
        launch_settings: LaunchSettings,
        agent_context: AgentContext,
        config_artifacts: ConfigArtifacts,
    ) -> None:
        first = build_worker_args(member_identity, launch_settings, agent_context, config_artifacts)
        second = build_worker_args(member_identity, launch_settings, agent_context, config_artifacts)
        assert first == second

    def test_numa_ctl_goes_first(
        self,
        member_identity: WorkerIdentity,
        agent_context: AgentContext,
        config_artifacts: ConfigArtifacts,
    ) -> None:
        settings = LaunchSettings(
            numa_ctl="numactl --interleave=all",
            profiler=Profiler.PERF,
            perf_settings="perf record",
        )
        args = build_worker_args(member_identity, settings, agent_context, config_artifacts)
        assert args[:3] == ["numactl --interleave=all", "perf record", "java"]

    def test_client_uses_client_options_and_entry_point(
        self,
        member_identity: WorkerIdentity,
        launch_settings: LaunchSettings,
        agent_context: AgentContext,
        config_artifacts: ConfigArtifacts,
    ) -> None:
        identity = WorkerIdentity(
            index=2,
            role=WorkerRole.CLIENT,
            port=9503,
            id="worker-10.0.0.1-2-CLIENT",
            working_directory=member_identity.working_directory,
        )
        args = build_worker_args(identity, launch_settings, agent_context, config_artifacts)

        assert "-Xmx256m" in args
        assert "-Xms512m" not in args
        assert "-DworkerType=CLIENT" in args
        assert args[-1] == "com.hazelcast.simulator.worker.ClientWorker"

    @pytest.mark.parametrize("profiler", list(Profiler))
    def test_single_runtime_token_and_entry_point_last(
        self,
        profiler: Profiler,
        member_identity: WorkerIdentity,
        agent_context: AgentContext,
        config_artifacts: ConfigArtifacts,
    ) -> None:
        settings = LaunchSettings(
            profiler=profiler,
            perf_settings="perf record",
            vtune_settings="amplxe-cl",
            yourkit_config="-agentpath:yk.so",
            hprof_settings="-agentlib:hprof",
            flightrecorder_settings="-XX:+FlightRecorder",
            member_entry_point="my-member-binary",
        )
        args = build_worker_args(member_identity, settings, agent_context, config_artifacts)

        assert args.count(RUNTIME_COMMAND) == 1
        assert args[-1] == "my-member-binary"

    def test_auto_create_flag_rendered_lowercase(
        self,
        member_identity: WorkerIdentity,
        agent_context: AgentContext,
        config_artifacts: ConfigArtifacts,
    ) -> None:
        settings = LaunchSettings(auto_create_instances=False)
        args = build_worker_args(member_identity, settings, agent_context, config_artifacts)
        assert "-DautoCreateHZInstances=false" in args
