"""Mock objects for SimAgent testing."""

from tests.mocks.mock_launcher import (
    FakePollTimer,
    MockProcessHandle,
    MockSpawner,
    SpawnCall,
    write_address,
)

__all__ = [
    "FakePollTimer",
    "MockProcessHandle",
    "MockSpawner",
    "SpawnCall",
    "write_address",
]
