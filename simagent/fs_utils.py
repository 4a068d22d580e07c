"""Filesystem primitives for SimAgent.

Small helpers shared by the launcher: directory creation, quiet deletion,
temporary artifacts removed at interpreter exit, and recursive copies of a
test suite's upload directory into a worker's working directory.
"""

from __future__ import annotations

import atexit
import shutil
import tempfile
from pathlib import Path

from simagent.exceptions import DirectoryCreationError
from simagent.logging import get_logger

logger = get_logger("fs_utils")


def ensure_existing_directory(path: Path) -> Path:
    """Create *path* (and parents) unless it already exists.

    Raises:
        DirectoryCreationError: If the directory cannot be created or the
            path exists and is not a directory.
    """
    if path.is_dir():
        return path
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryCreationError(f"Couldn't create directory: {path.absolute()}", path) from e
    if not path.is_dir():
        raise DirectoryCreationError(f"Couldn't create directory: {path.absolute()}", path)
    return path


def delete_quiet(path: Path) -> None:
    """Delete a file, ignoring a file that is already gone."""
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.debug(f"Could not delete {path}: {e}")


def create_temp_file(prefix: str, suffix: str, content: str) -> Path:
    """Write *content* to a new temporary file deleted at interpreter exit.

    Args:
        prefix: File name prefix
        suffix: File name suffix (including the dot)
        content: Text to write

    Returns:
        Absolute path of the temporary file
    """
    with tempfile.NamedTemporaryFile(
        "w", prefix=prefix, suffix=suffix, delete=False, encoding="utf-8"
    ) as f:
        f.write(content)
        path = Path(f.name).absolute()
    atexit.register(delete_quiet, path)
    return path


def copy_directory_contents(source: Path, target: Path) -> bool:
    """Recursively copy everything under *source* into *target*.

    Existing files in *target* are overwritten.

    Returns:
        False if *source* does not exist, True after copying
    """
    if not source.is_dir():
        return False

    target.mkdir(parents=True, exist_ok=True)
    for entry in source.iterdir():
        destination = target / entry.name
        if entry.is_dir():
            shutil.copytree(entry, destination, dirs_exist_ok=True)
        else:
            shutil.copy2(entry, destination)
    return True
