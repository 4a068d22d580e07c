"""Readiness probes: how a worker tells the agent it has started.

A worker announces itself by writing its bound address into
``worker.address`` inside its working directory. The probe consumes the
file, so a second poll of the same worker returns nothing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from simagent.constants import WORKER_ADDRESS_FILE
from simagent.fs_utils import delete_quiet
from simagent.logging import get_logger

logger = get_logger("readiness")


class ReadinessProbe(ABC):
    """Checks whether a worker has announced its address."""

    @abstractmethod
    def poll(self, working_dir: Path) -> str | None:
        """Return the worker's address if it is ready, else None."""


class AddressFileProbe(ReadinessProbe):
    """Probe backed by the ``worker.address`` marker file."""

    def __init__(self, file_name: str = WORKER_ADDRESS_FILE) -> None:
        self.file_name = file_name

    def poll(self, working_dir: Path) -> str | None:
        marker = working_dir / self.file_name
        if not marker.exists():
            return None

        try:
            address = marker.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        if not address:
            # Worker is still writing the file
            return None
        delete_quiet(marker)

        logger.debug(f"Read address {address!r} from {marker}")
        return address
