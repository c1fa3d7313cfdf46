"""Adapter exposing a single-key repository through the bulk interface."""

from dataclasses import dataclass
from typing import Protocol

from cache_pool.domain.items import Item
from cache_pool.services.pool import Repository


class SimpleRepository(Protocol):
    """Minimal storage interface with single-key operations only."""

    def contains(self, key: str) -> bool:
        """Return whether an item is stored under the key."""

    def fetch(self, key: str) -> Item | None:
        """Return the stored item for a key, if present."""

    def store(self, item: Item) -> bool:
        """Store an item and report success."""

    def delete(self, key: str) -> bool:
        """Delete the item for a key and report success."""

    def clear(self) -> bool:
        """Remove all items and report success."""


@dataclass
class SimpleRepositoryAdapter(Repository):
    """Synthesizes bulk operations as loops over a simple repository.

    Bulk writes keep going after an individual failure and report False
    if any single call failed.
    """

    repository: SimpleRepository

    def contains(self, key: str) -> bool:
        return self.repository.contains(key)

    def contains_many(self, keys: list[str]) -> dict[str, bool]:
        return {key: self.repository.contains(key) for key in keys}

    def fetch(self, key: str) -> Item | None:
        return self.repository.fetch(key)

    def fetch_many(self, keys: list[str]) -> dict[str, Item | None]:
        return {key: self.repository.fetch(key) for key in keys}

    def store(self, item: Item) -> bool:
        return self.repository.store(item)

    def store_many(self, items: list[Item]) -> bool:
        results = [self.repository.store(item) for item in items]
        return all(results)

    def delete(self, key: str) -> bool:
        return self.repository.delete(key)

    def delete_many(self, keys: list[str]) -> bool:
        results = [self.repository.delete(key) for key in keys]
        return all(results)

    def clear(self) -> bool:
        return self.repository.clear()
