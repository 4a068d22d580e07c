"""Start script generation for worker processes."""

from __future__ import annotations

from pathlib import Path

from simagent.constants import SCRIPT_SHEBANG, WORKER_SCRIPT_FILE
from simagent.logging import get_logger

logger = get_logger("start_script")


def render_start_script(tokens: list[str]) -> str:
    """Render the script text: shebang, then the tokens on a single line."""
    return f"{SCRIPT_SHEBANG}\n{' '.join(tokens)}\n"


def write_start_script(working_dir: Path, tokens: list[str]) -> Path:
    """Write ``worker.sh`` into a worker's working directory.

    Args:
        working_dir: The worker's private directory (must exist)
        tokens: Launch tokens of the worker

    Returns:
        Path of the written script

    Raises:
        OSError: If the script cannot be written
    """
    script = working_dir / WORKER_SCRIPT_FILE
    script.write_text(render_start_script(tokens), encoding="utf-8")
    script.chmod(0o755)
    logger.debug(f"Wrote start script {script}")
    return script
