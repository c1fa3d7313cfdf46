"""Cache pool orchestrating items against a storage repository."""

import logging
import weakref
from types import TracebackType
from typing import Protocol

from cache_pool.domain.items import Item, validate_default_ttl, validate_key
from cache_pool.errors import InvalidArgumentError

_logger = logging.getLogger(__name__)


class Repository(Protocol):
    """Storage interface for cached items, including bulk operations."""

    def contains(self, key: str) -> bool:
        """Return whether an item is stored under the key."""

    def contains_many(self, keys: list[str]) -> dict[str, bool]:
        """Return a presence flag for every requested key."""

    def fetch(self, key: str) -> Item | None:
        """Return the stored item for a key, if present."""

    def fetch_many(self, keys: list[str]) -> dict[str, Item | None]:
        """Return the stored item, or None, for every requested key."""

    def store(self, item: Item) -> bool:
        """Store an item and report success."""

    def store_many(self, items: list[Item]) -> bool:
        """Store items and report whether every one succeeded."""

    def delete(self, key: str) -> bool:
        """Delete the item for a key and report success."""

    def delete_many(self, keys: list[str]) -> bool:
        """Delete items and report whether every one succeeded."""

    def clear(self) -> bool:
        """Remove all items and report success."""


def _flush_deferred(repository: Repository, deferred: dict[str, Item]) -> bool:
    """Persist a snapshot of the deferred items and empty the buffer."""
    items = list(deferred.values())
    if not items:
        return True
    try:
        for item in items:
            item.mark_cached()
        stored = repository.store_many(items)
    finally:
        deferred.clear()
    if stored:
        _logger.debug("Committed %s deferred cache items", len(items))
    else:
        _logger.warning("Failed to commit some of %s deferred cache items", len(items))
    return stored


class Pool:
    """Facade for producing, fetching and persisting cache items.

    Writes are either persisted immediately with ``save`` or buffered with
    ``save_deferred`` until ``commit``. Pending deferred writes are flushed
    once more when the pool is closed, used as a context manager, or garbage
    collected.
    """

    def __init__(self, repository: Repository, default_ttl: int | None = 3600) -> None:
        self.repository = repository
        self.default_ttl = validate_default_ttl(default_ttl)
        self._deferred: dict[str, Item] = {}
        self._finalizer = weakref.finalize(
            self, _flush_deferred, repository, self._deferred
        )

    def __enter__(self) -> "Pool":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def get_item(self, key: str) -> Item:
        """Return the item for a key, fresh when nothing is stored."""
        validate_key(key)
        if key in self._deferred:
            return self._deferred[key]
        if self.repository.contains(key):
            item = self.repository.fetch(key)
            if item is not None:
                return item
        return self._create_item(key)

    def get_items(self, keys: list[str]) -> dict[str, Item]:
        """Return an item for every key, in the order the keys were given.

        Keys missing from both the deferred buffer and the repository get a
        fresh item. Repository lookups are batched into a single presence
        check and a single fetch.
        """
        for key in keys:
            validate_key(key)
        ordered = list(dict.fromkeys(keys))
        if not ordered:
            return {}

        pending = [key for key in ordered if key not in self._deferred]
        fetched: dict[str, Item | None] = {}
        if pending:
            presence = self.repository.contains_many(pending)
            cached_keys = [key for key in pending if presence.get(key)]
            if cached_keys:
                fetched = self.repository.fetch_many(cached_keys)

        items: dict[str, Item] = {}
        for key in ordered:
            if key in self._deferred:
                items[key] = self._deferred[key]
                continue
            item = fetched.get(key)
            items[key] = item if item is not None else self._create_item(key)
        return items

    def clear(self) -> bool:
        """Remove every item from the repository and drop pending writes."""
        if self._deferred:
            _logger.debug(
                "Dropping %s deferred cache items on clear", len(self._deferred)
            )
            self._deferred.clear()
        return self.repository.clear()

    def delete_items(self, keys: list[str]) -> "Pool":
        """Delete items from the repository and drop matching pending writes."""
        for key in keys:
            validate_key(key)
        for key in keys:
            self._deferred.pop(key, None)
        if not self.repository.delete_many(list(keys)):
            _logger.warning("Failed to delete some of %s cache items", len(keys))
        return self

    def save(self, item: Item) -> "Pool":
        """Persist an item immediately."""
        _ensure_item(item)
        item.mark_cached()
        if not self.repository.store(item):
            _logger.warning("Failed to store cache item %s", item.key)
        return self

    def save_deferred(self, item: Item) -> "Pool":
        """Queue an item to be persisted on the next commit.

        A closed pool has no end-of-life flush left, so the item is saved
        immediately instead.
        """
        _ensure_item(item)
        if self.closed:
            _logger.warning(
                "Pool is closed; saving deferred cache item %s immediately", item.key
            )
            return self.save(item)
        self._deferred[item.key] = item
        return self

    def commit(self) -> bool:
        """Persist every deferred item; True when all were stored."""
        return _flush_deferred(self.repository, self._deferred)

    def close(self) -> None:
        """Flush pending deferred items. Only the first call has an effect."""
        self._finalizer()

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    def _create_item(self, key: str) -> Item:
        return Item(key, self.default_ttl)


def _ensure_item(item: object) -> None:
    if not isinstance(item, Item):
        raise InvalidArgumentError(
            f"Pool can only persist Item instances, got {type(item).__name__}"
        )
