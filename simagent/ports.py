"""Worker index and port allocation for SimAgent."""

import threading
from dataclasses import dataclass, field

from simagent.constants import WORKER_START_PORT
from simagent.logging import get_logger

logger = get_logger("ports")


@dataclass
class PortAllocator:
    """Hand out strictly increasing worker indices and their derived ports.

    Indices start at ``start_index + 1`` and are never handed out twice by
    the same allocator, even if the worker that received one failed. There
    is no upper bound; a port already bound by another process surfaces
    later as a worker that exits during startup.
    """

    base_port: int = WORKER_START_PORT
    start_index: int = 0
    _last_index: int = field(init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.start_index < 0:
            raise ValueError(f"start_index must be >= 0, got {self.start_index}")
        self._last_index = self.start_index

    def next_index(self) -> int:
        """Reserve the next worker index.

        Returns:
            A worker index greater than every index returned before
        """
        with self._lock:
            self._last_index += 1
            return self._last_index

    def port_for(self, index: int) -> int:
        """Port of the worker with the given index."""
        return self.base_port + index

    def allocate(self) -> tuple[int, int]:
        """Reserve the next index together with its port.

        Returns:
            Tuple of (worker index, worker port)
        """
        index = self.next_index()
        port = self.port_for(index)
        logger.debug(f"Allocated worker index {index} with port {port}")
        return index, port

    def reset(self, start_index: int = 0) -> None:
        """Restart numbering after *start_index*.

        Only meant for tests and for a fresh agent; indices handed out
        before the reset may be handed out again.
        """
        with self._lock:
            self._last_index = start_index

    @property
    def last_index(self) -> int:
        """Most recently allocated index (``start_index`` if none yet)."""
        with self._lock:
            return self._last_index
