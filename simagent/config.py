"""SimAgent configuration management using Pydantic."""

import os
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from simagent.constants import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_ENTRY_POINTS,
    DEFAULT_STARTUP_TIMEOUT_SECONDS,
    NUMA_CTL_NONE,
    SIMULATOR_HOME_ENV,
    Profiler,
    WorkerRole,
)
from simagent.exceptions import ConfigurationError


class LaunchSettings(BaseModel):
    """Immutable settings for one launch of member and client workers."""

    model_config = ConfigDict(frozen=True)

    member_worker_count: int = Field(default=0, ge=0)
    client_worker_count: int = Field(default=0, ge=0)
    worker_startup_timeout: int = Field(default=DEFAULT_STARTUP_TIMEOUT_SECONDS, ge=0)

    vm_options: str = ""
    client_vm_options: str = ""

    profiler: Profiler = Profiler.NONE
    perf_settings: str = ""
    vtune_settings: str = ""
    yourkit_config: str = ""
    hprof_settings: str = ""
    flightrecorder_settings: str = ""

    numa_ctl: str = NUMA_CTL_NONE

    member_config: str = ""
    client_config: str = ""
    log_config: str = ""

    auto_create_instances: bool = True
    member_entry_point: str = DEFAULT_ENTRY_POINTS[WorkerRole.MEMBER]
    client_entry_point: str = DEFAULT_ENTRY_POINTS[WorkerRole.CLIENT]

    java_home: str | None = None
    java_vendor: str = "openjdk"
    java_version: str = ""
    lib_dir: str | None = Field(
        default=None,
        description="Override for the batch lib directory (default: <test suite dir>/lib)",
    )
    env_vars: dict[str, str] = Field(default_factory=dict)
    teardown_on_failure: bool = False

    def vm_options_for(self, role: WorkerRole) -> str:
        """Get the VM option string of a role."""
        return self.vm_options if role is WorkerRole.MEMBER else self.client_vm_options

    def entry_point_for(self, role: WorkerRole) -> str:
        """Get the entry point (class or binary) of a role."""
        return self.member_entry_point if role is WorkerRole.MEMBER else self.client_entry_point

    def worker_count_for(self, role: WorkerRole) -> int:
        """Get the number of workers to start for a role."""
        return self.member_worker_count if role is WorkerRole.MEMBER else self.client_worker_count

    def summary(self) -> str:
        """Short one-line description for log output."""
        return (
            f"members={self.member_worker_count} clients={self.client_worker_count}"
            f" timeout={self.worker_startup_timeout}s profiler={self.profiler.value}"
            f" numa_ctl={self.numa_ctl} java={self.java_vendor} {self.java_version}".rstrip()
        )


class AgentSettings(BaseModel):
    """Identity of the agent that owns the launched workers."""

    public_address: str = "127.0.0.1"
    address_index: int = Field(default=1, ge=0)
    test_suite_id: str = "default"
    simulator_home: str = Field(default_factory=lambda: os.environ.get(SIMULATOR_HOME_ENV, os.getcwd()))


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="info", pattern="^(debug|info|warn|error)$")
    directory: str | None = None
    json_output: bool = True


class SimAgentConfig(BaseModel):
    """Complete SimAgent configuration."""

    agent: AgentSettings = Field(default_factory=AgentSettings)
    launch: LaunchSettings = Field(default_factory=LaunchSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> "SimAgentConfig":
        """Load configuration from YAML file.

        Args:
            config_path: Path to config file. Defaults to simagent.yaml

        Returns:
            SimAgentConfig instance

        Raises:
            ConfigurationError: If the file cannot be parsed or validated
        """
        config_path = Path(DEFAULT_CONFIG_PATH) if config_path is None else Path(config_path)

        if not config_path.exists():
            return cls()

        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}", {"error": str(e)}) from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Expected a mapping in {config_path}")

        try:
            return cls.from_dict(data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration in {config_path}", {"errors": e.error_count()}
            ) from e

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SimAgentConfig":
        """Create configuration from dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            SimAgentConfig instance
        """
        return cls(**data)

    def save(self, config_path: str | Path | None = None) -> None:
        """Save configuration to YAML file.

        Args:
            config_path: Path to save config. Defaults to simagent.yaml
        """
        config_path = Path(DEFAULT_CONFIG_PATH) if config_path is None else Path(config_path)

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Configuration as dictionary
        """
        return self.model_dump(mode="json")
