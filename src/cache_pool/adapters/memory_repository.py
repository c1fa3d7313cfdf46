"""In-memory cache repository."""

import copy
from dataclasses import dataclass

from cache_pool.adapters.simple_repository_adapter import SimpleRepository
from cache_pool.domain.items import Item


@dataclass
class InMemoryRepository(SimpleRepository):
    """Process-local repository keeping item copies in a dict."""

    _items: dict[str, Item]

    def __init__(self) -> None:
        self._items = {}

    def contains(self, key: str) -> bool:
        return key in self._items

    def fetch(self, key: str) -> Item | None:
        """Return a copy of the stored item, if present."""
        item = self._items.get(key)
        if item is None:
            return None
        return copy.copy(item).mark_cached()

    def store(self, item: Item) -> bool:
        self._items[item.key] = copy.copy(item)
        return True

    def delete(self, key: str) -> bool:
        self._items.pop(key, None)
        return True

    def clear(self) -> bool:
        self._items.clear()
        return True
