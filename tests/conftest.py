"""Pytest configuration and fixtures for SimAgent tests."""

from pathlib import Path

import pytest

from simagent.config import LaunchSettings
from simagent.constants import WorkerRole
from simagent.ports import PortAllocator
from simagent.types import AgentContext, ConfigArtifacts, WorkerIdentity, format_worker_id

PUBLIC_ADDRESS = "10.0.0.1"
TEST_SUITE_ID = "2026-10-19__08_15_00"


@pytest.fixture
def simulator_home(tmp_path: Path) -> Path:
    """Create an installation directory.

    Returns:
        Path to the installation directory
    """
    home = tmp_path / "simulator-home"
    home.mkdir()
    return home


@pytest.fixture
def agent_context(simulator_home: Path) -> AgentContext:
    """Create the context of an agent on host 10.0.0.1.

    Returns:
        AgentContext with a fixed agent classpath
    """
    return AgentContext(
        public_address=PUBLIC_ADDRESS,
        address_index=3,
        test_suite_id=TEST_SUITE_ID,
        simulator_home=simulator_home,
        classpath="/opt/agent/lib/agent.jar",
    )


@pytest.fixture
def launch_settings(tmp_path: Path) -> LaunchSettings:
    """Create launch settings for one member without profiler.

    Returns:
        LaunchSettings instance
    """
    return LaunchSettings(
        member_worker_count=1,
        client_worker_count=0,
        worker_startup_timeout=10,
        vm_options="-Xms512m  -Xmx512m",
        client_vm_options="-Xmx256m",
        member_config="<hazelcast/>",
        client_config="<hazelcast-client/>",
        log_config="<log4j/>",
        java_home=str(tmp_path / "jdk"),
    )


@pytest.fixture
def config_artifacts(tmp_path: Path) -> ConfigArtifacts:
    """Create config artifact paths.

    Returns:
        ConfigArtifacts pointing into tmp_path
    """
    return ConfigArtifacts(
        member_config=tmp_path / "hazelcast123.xml",
        client_config=tmp_path / "client-hazelcast123.xml",
        log_config=tmp_path / "worker-log4j123.xml",
    )


@pytest.fixture
def member_identity(agent_context: AgentContext) -> WorkerIdentity:
    """Create the identity of the first member worker.

    Returns:
        WorkerIdentity with index 1
    """
    allocator = PortAllocator()
    index, port = allocator.allocate()
    worker_id = format_worker_id(agent_context.public_address, index, WorkerRole.MEMBER)
    working_dir = agent_context.test_suite_dir / worker_id
    working_dir.mkdir(parents=True)
    return WorkerIdentity(
        index=index,
        role=WorkerRole.MEMBER,
        port=port,
        id=worker_id,
        working_directory=working_dir,
    )
