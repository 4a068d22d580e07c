"""Tests for SimAgent worker index and port allocation."""

import threading

import pytest

from simagent.constants import AGENT_PORT, WORKER_START_PORT
from simagent.ports import PortAllocator


class TestPortAllocatorInit:
    """Tests for PortAllocator initialization and defaults."""

    def test_defaults(self) -> None:
        allocator = PortAllocator()
        assert allocator.base_port == WORKER_START_PORT
        assert allocator.last_index == 0

    def test_base_port_above_agent_port(self) -> None:
        assert PortAllocator().port_for(1) > AGENT_PORT

    def test_negative_start_index_rejected(self) -> None:
        with pytest.raises(ValueError, match="start_index"):
            PortAllocator(start_index=-1)


class TestNextIndex:
    """Tests for index allocation."""

    def test_starts_at_one(self) -> None:
        allocator = PortAllocator()
        assert allocator.next_index() == 1

    def test_strictly_increasing(self) -> None:
        allocator = PortAllocator()
        indices = [allocator.next_index() for _ in range(20)]
        assert indices == list(range(1, 21))

    def test_seeded_start_index(self) -> None:
        allocator = PortAllocator(start_index=41)
        assert allocator.next_index() == 42

    def test_reset_restarts_numbering(self) -> None:
        allocator = PortAllocator()
        allocator.next_index()
        allocator.next_index()
        allocator.reset()
        assert allocator.next_index() == 1

    def test_concurrent_callers_get_unique_indices(self) -> None:
        """Indices handed to concurrent threads are unique and gap-free."""
        allocator = PortAllocator()
        results: list[int] = []
        results_lock = threading.Lock()

        def worker() -> None:
            local = [allocator.next_index() for _ in range(200)]
            with results_lock:
                results.extend(local)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(results) == list(range(1, 1601))


class TestPorts:
    """Tests for derived ports."""

    def test_port_for_is_base_plus_index(self) -> None:
        allocator = PortAllocator()
        for index in (1, 2, 17, 1000):
            assert allocator.port_for(index) == WORKER_START_PORT + index

    def test_custom_base_port(self) -> None:
        allocator = PortAllocator(base_port=20000)
        assert allocator.port_for(5) == 20005

    def test_allocate_returns_index_and_port(self) -> None:
        allocator = PortAllocator()
        assert allocator.allocate() == (1, 9502)
        assert allocator.allocate() == (2, 9503)
        assert allocator.last_index == 2
