"""Shared test fixtures."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from cache_pool.adapters.memory_repository import InMemoryRepository
from cache_pool.adapters.simple_repository_adapter import (
    SimpleRepository,
    SimpleRepositoryAdapter,
)
from cache_pool.config import CacheSettings
from cache_pool.domain import items as items_module
from cache_pool.domain.items import Item
from cache_pool.services.pool import Pool, Repository


@dataclass
class RecordingRepository(Repository):
    """In-memory bulk repository that records every call."""

    items: dict[str, Item] = field(default_factory=dict)
    calls: list[tuple[str, object]] = field(default_factory=list)
    failing_keys: set[str] = field(default_factory=set)

    def contains(self, key: str) -> bool:
        self.calls.append(("contains", key))
        return key in self.items

    def contains_many(self, keys: list[str]) -> dict[str, bool]:
        self.calls.append(("contains_many", list(keys)))
        return {key: key in self.items for key in keys}

    def fetch(self, key: str) -> Item | None:
        self.calls.append(("fetch", key))
        return self.items.get(key)

    def fetch_many(self, keys: list[str]) -> dict[str, Item | None]:
        self.calls.append(("fetch_many", list(keys)))
        return {key: self.items.get(key) for key in keys}

    def store(self, item: Item) -> bool:
        self.calls.append(("store", item.key))
        if item.key in self.failing_keys:
            return False
        self.items[item.key] = item
        return True

    def store_many(self, items: list[Item]) -> bool:
        self.calls.append(("store_many", [item.key for item in items]))
        stored = True
        for item in items:
            if item.key in self.failing_keys:
                stored = False
                continue
            self.items[item.key] = item
        return stored

    def delete(self, key: str) -> bool:
        self.calls.append(("delete", key))
        self.items.pop(key, None)
        return True

    def delete_many(self, keys: list[str]) -> bool:
        self.calls.append(("delete_many", list(keys)))
        for key in keys:
            self.items.pop(key, None)
        return not self.failing_keys.intersection(keys)

    def clear(self) -> bool:
        self.calls.append(("clear", None))
        self.items.clear()
        return True


@dataclass
class ScriptedSimpleRepository(SimpleRepository):
    """Simple repository returning scripted results and recording calls."""

    present: set[str] = field(default_factory=set)
    results: list[bool] = field(default_factory=list)
    calls: list[tuple[str, object]] = field(default_factory=list)

    def contains(self, key: str) -> bool:
        self.calls.append(("contains", key))
        return key in self.present

    def fetch(self, key: str) -> Item | None:
        self.calls.append(("fetch", key))
        return Item(key).mark_cached() if key in self.present else None

    def store(self, item: Item) -> bool:
        self.calls.append(("store", item.key))
        return self._next_result()

    def delete(self, key: str) -> bool:
        self.calls.append(("delete", key))
        return self._next_result()

    def clear(self) -> bool:
        self.calls.append(("clear", None))
        return self._next_result()

    def _next_result(self) -> bool:
        return self.results.pop(0) if self.results else True


@dataclass
class Clock:
    """Controllable replacement for the item clock."""

    now: datetime

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch) -> Clock:
    frozen = Clock(now=datetime(2024, 1, 15, 12, 0, tzinfo=UTC))
    monkeypatch.setattr(items_module, "_utcnow", frozen)
    return frozen


@pytest.fixture
def settings() -> CacheSettings:
    return CacheSettings(backend="memory", default_ttl=3600)


@pytest.fixture
def repository() -> RecordingRepository:
    return RecordingRepository()


@pytest.fixture
def pool(repository: RecordingRepository) -> Pool:
    return Pool(repository)


@pytest.fixture
def memory_pool() -> Pool:
    return Pool(SimpleRepositoryAdapter(InMemoryRepository()))


@pytest.fixture
def cached_item() -> Callable[[str, object], Item]:
    def factory(key: str, value: object) -> Item:
        return Item(key).set(value, 10).mark_cached()

    return factory
