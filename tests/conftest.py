"""Shared fixtures for tracker tests."""

import pytest

from personal_health_tracker.infrastructure.storage.adapter import MemoryAdapter
from personal_health_tracker.services.mutations import MutationService
from personal_health_tracker.services.record_store import RecordStore
from personal_health_tracker.utils.exceptions import PersistenceError


class FlakyAdapter(MemoryAdapter):
    """Memory adapter whose reads and writes can be made to fail per key."""

    def __init__(self, blobs: dict[str, str] | None = None) -> None:
        super().__init__(blobs)
        self.failing_loads: set[str] = set()
        self.failing_saves: set[str] = set()
        self.save_log: list[tuple[str, str]] = []

    async def load(self, key: str) -> str | None:
        if key in self.failing_loads:
            raise PersistenceError(f"disk unavailable for {key}")
        return await super().load(key)

    async def save(self, key: str, blob: str) -> None:
        if key in self.failing_saves:
            raise PersistenceError(f"disk full for {key}")
        self.save_log.append((key, blob))
        await super().save(key, blob)


@pytest.fixture
def adapter() -> FlakyAdapter:
    return FlakyAdapter()


@pytest.fixture
def store(adapter: FlakyAdapter) -> RecordStore:
    return RecordStore(adapter)


@pytest.fixture
def mutations(store: RecordStore) -> MutationService:
    return MutationService(store)
