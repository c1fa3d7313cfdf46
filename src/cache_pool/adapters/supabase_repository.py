"""Supabase-backed cache repository."""

import logging
from dataclasses import dataclass

from postgrest.exceptions import APIError
from supabase import Client

from cache_pool.domain.items import Item
from cache_pool.domain.records import item_from_record, item_to_json_record
from cache_pool.services.pool import Repository

_logger = logging.getLogger(__name__)

_COLUMNS = "key, value, expires_at"


@dataclass
class SupabaseRepository(Repository):
    """Supabase implementation storing one row per cache item.

    Expects a table with a text primary key ``key``, a jsonb ``value`` and a
    timestamptz ``expires_at``. Bulk operations issue a single request.
    """

    client: Client
    table: str = "cache_items"

    def contains(self, key: str) -> bool:
        """Return whether a row exists for the key."""
        response = (
            self.client.table(self.table)
            .select("key")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        return bool(response.data)

    def contains_many(self, keys: list[str]) -> dict[str, bool]:
        """Return presence flags for keys using one query."""
        if not keys:
            return {}
        response = (
            self.client.table(self.table).select("key").in_("key", keys).execute()
        )
        found = {row["key"] for row in response.data or []}
        return {key: key in found for key in keys}

    def fetch(self, key: str) -> Item | None:
        """Return the stored item for a key, if present."""
        response = (
            self.client.table(self.table)
            .select(_COLUMNS)
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return item_from_record(response.data[0])

    def fetch_many(self, keys: list[str]) -> dict[str, Item | None]:
        """Return stored items for keys using one query."""
        if not keys:
            return {}
        response = (
            self.client.table(self.table).select(_COLUMNS).in_("key", keys).execute()
        )
        rows = {row["key"]: row for row in response.data or []}
        return {
            key: item_from_record(rows[key]) if key in rows else None for key in keys
        }

    def store(self, item: Item) -> bool:
        """Upsert a single item row."""
        return self.store_many([item])

    def store_many(self, items: list[Item]) -> bool:
        """Upsert item rows in one request."""
        if not items:
            return True
        try:
            records = [item_to_json_record(item) for item in items]
        except (TypeError, ValueError) as exc:
            _logger.warning("Cache items are not JSON-serializable: %s", exc)
            return False
        try:
            self.client.table(self.table).upsert(records).execute()
        except APIError:
            _logger.exception("Failed to store %s cache items", len(items))
            return False
        return True

    def delete(self, key: str) -> bool:
        return self.delete_many([key])

    def delete_many(self, keys: list[str]) -> bool:
        """Delete rows for keys in one request."""
        if not keys:
            return True
        try:
            self.client.table(self.table).delete().in_("key", keys).execute()
        except APIError:
            _logger.exception("Failed to delete %s cache items", len(keys))
            return False
        return True

    def clear(self) -> bool:
        """Delete every cache row."""
        try:
            # PostgREST refuses unfiltered deletes.
            self.client.table(self.table).delete().neq("key", "").execute()
        except APIError:
            _logger.exception("Failed to clear cache table %s", self.table)
            return False
        return True
