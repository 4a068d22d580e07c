"""SimAgent constants and enumerations."""

from enum import Enum


class WorkerRole(Enum):
    """Role of a spawned worker process."""

    MEMBER = "MEMBER"
    CLIENT = "CLIENT"

    def __str__(self) -> str:
        return self.value


class WorkerStatus(Enum):
    """Startup state of a worker as seen by the startup synchronizer."""

    PENDING = "pending"
    READY = "ready"
    EXITED_EARLY = "exited_early"
    TIMED_OUT = "timed_out"


class Profiler(Enum):
    """Profilers that can wrap or attach to a worker runtime."""

    NONE = "none"
    PERF = "perf"
    VTUNE = "vtune"
    YOURKIT = "yourkit"
    HPROF = "hprof"
    FLIGHTRECORDER = "flightrecorder"


# Ports
AGENT_PORT = 9500
WORKER_START_PORT = 9501

# Files inside a worker's working directory
WORKER_SCRIPT_FILE = "worker.sh"
WORKER_LOG_FILE = "out.log"
WORKER_ADDRESS_FILE = "worker.address"
WORKER_OOME_FILE = "worker.oome"
SCRIPT_SHEBANG = "#!/bin/bash"

# Directory names under the installation home / test suite directory
WORKERS_DIR = "workers"
UPLOAD_DIR = "upload"
USER_LIB_DIR = "user-lib"
LIB_DIR = "lib"

# Runtime invocation
RUNTIME_COMMAND = "java"
NUMA_CTL_NONE = "none"
SIMULATOR_HOME_PLACEHOLDER = "${SIMULATOR_HOME}"
WORKER_HOME_PLACEHOLDER = "${WORKER_HOME}"
OOME_TRAP_FLAG = f'-XX:OnOutOfMemoryError="touch {WORKER_OOME_FILE}"'
LOGGING_TYPE_FLAG = "-Dhazelcast.logging.type=log4j"

DEFAULT_ENTRY_POINTS = {
    WorkerRole.MEMBER: "com.hazelcast.simulator.worker.MemberWorker",
    WorkerRole.CLIENT: "com.hazelcast.simulator.worker.ClientWorker",
}

# Prefixes of the temporary config artifacts written per launch
MEMBER_CONFIG_PREFIX = "hazelcast"
CLIENT_CONFIG_PREFIX = "client-hazelcast"
LOG_CONFIG_PREFIX = "worker-log4j"
CONFIG_FILE_SUFFIX = ".xml"

# Default configuration values
DEFAULT_STARTUP_TIMEOUT_SECONDS = 60
DEFAULT_CONFIG_PATH = "simagent.yaml"
POLL_INTERVAL_SECONDS = 1.0

# Environment variables
SIMULATOR_HOME_ENV = "SIMULATOR_HOME"
RUNTIME_HOME_ENV = "JAVA_HOME"
