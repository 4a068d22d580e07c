"""Filtering of the extra environment handed to worker processes.

Only names a worker runtime legitimately reads may be set from config.
Names that change how the child is located or loaded are always refused,
as are values carrying shell syntax, since the start script is run by bash.
"""

from __future__ import annotations

from simagent.logging import get_logger

logger = get_logger("env_validator")

# Names a worker may receive from config
ALLOWED_ENV_VARS = frozenset(
    {
        "JAVA_OPTS",
        "MALLOC_ARENA_MAX",
        "TZ",
        "LANG",
        "LC_ALL",
        "CI",
        "DEBUG",
        "LOG_LEVEL",
        "VERBOSE",
        "TERM",
        "NO_COLOR",
    }
)

# Any name with this prefix is allowed
ALLOWED_PREFIX = "SIMULATOR_"

# Set by the spawner itself or able to hijack the child; never overridable
DANGEROUS_ENV_VARS = frozenset(
    {
        "PATH",
        "JAVA_HOME",
        "CLASSPATH",
        "LD_PRELOAD",
        "LD_LIBRARY_PATH",
        "DYLD_INSERT_LIBRARIES",
        "DYLD_LIBRARY_PATH",
        "PYTHONPATH",
        "HOME",
        "USER",
        "SHELL",
        "TMPDIR",
        "TMP",
        "TEMP",
    }
)

SHELL_METACHARACTERS = frozenset(";|&`$()<>")


def _rejection_reason(name: str, value: str) -> str | None:
    upper = name.upper()
    if upper in DANGEROUS_ENV_VARS:
        return "protected variable"
    if upper not in ALLOWED_ENV_VARS and not upper.startswith(ALLOWED_PREFIX):
        return "not allowlisted"
    if SHELL_METACHARACTERS.intersection(value):
        return "shell metacharacters in value"
    return None


def validate_env_vars(env: dict[str, str]) -> dict[str, str]:
    """Return the subset of *env* that may be passed to a worker.

    Rejected entries are logged and dropped, never raised.
    """
    accepted: dict[str, str] = {}
    for name, value in env.items():
        reason = _rejection_reason(name, value)
        if reason is None:
            accepted[name] = value
        elif reason == "not allowlisted":
            logger.debug(f"Ignoring worker env var {name}: {reason}")
        else:
            logger.warning(f"Refusing worker env var {name}: {reason}")
    return accepted
