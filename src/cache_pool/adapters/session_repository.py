"""Session-scoped cache repository."""

import logging
from collections.abc import MutableMapping
from dataclasses import dataclass

from fastapi import Request

from cache_pool.domain.items import Item
from cache_pool.domain.records import item_from_record, item_to_json_record
from cache_pool.errors import BackendUnavailableError
from cache_pool.services.pool import Repository

_logger = logging.getLogger(__name__)

DEFAULT_SESSION_KEY = "cache_pool.pool"


@dataclass
class SessionRepository(Repository):
    """Keeps items in a namespace of an active session mapping.

    Items are stored as JSON records so they survive cookie-backed session
    middleware, which means cached values must be JSON-serializable.
    """

    data: dict[str, dict[str, object]]

    def __init__(
        self,
        session: MutableMapping[str, object] | None,
        session_key: str = DEFAULT_SESSION_KEY,
    ) -> None:
        if session is None:
            raise BackendUnavailableError(
                "Session repository requires an active session"
            )
        data = session.get(session_key)
        if not isinstance(data, dict):
            data = {}
            session[session_key] = data
        self.data = data

    @classmethod
    def from_request(
        cls, request: Request, session_key: str = DEFAULT_SESSION_KEY
    ) -> "SessionRepository":
        """Create a repository over the session of a request."""
        if "session" not in request.scope:
            raise BackendUnavailableError(
                "No active session; install SessionMiddleware to use the session cache"
            )
        return cls(request.session, session_key=session_key)

    def contains(self, key: str) -> bool:
        return key in self.data

    def contains_many(self, keys: list[str]) -> dict[str, bool]:
        return {key: self.contains(key) for key in keys}

    def fetch(self, key: str) -> Item | None:
        """Return a fresh item rebuilt from the stored record, if present."""
        record = self.data.get(key)
        if record is None:
            return None
        return item_from_record(record)

    def fetch_many(self, keys: list[str]) -> dict[str, Item | None]:
        return {key: self.fetch(key) for key in keys}

    def store(self, item: Item) -> bool:
        """Store the item record; False when the value cannot be encoded as JSON."""
        try:
            self.data[item.key] = item_to_json_record(item)
        except (TypeError, ValueError) as exc:
            _logger.warning("Cache item %s is not JSON-serializable: %s", item.key, exc)
            return False
        return True

    def store_many(self, items: list[Item]) -> bool:
        results = [self.store(item) for item in items]
        return all(results)

    def delete(self, key: str) -> bool:
        self.data.pop(key, None)
        return True

    def delete_many(self, keys: list[str]) -> bool:
        for key in keys:
            self.delete(key)
        return True

    def clear(self) -> bool:
        self.data.clear()
        return True
