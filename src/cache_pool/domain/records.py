"""JSON record conversion for backends that store plain data."""

import json
from datetime import datetime

from cache_pool.domain.items import Item


def item_to_record(item: Item) -> dict[str, object]:
    """Serialize an item into a JSON-compatible record."""
    return {
        "key": item.key,
        "value": item.value,
        "expires_at": item.expiration.isoformat(),
    }


def item_to_json_record(item: Item) -> dict[str, object]:
    """Return the record for an item after checking that it encodes as JSON.

    Raises TypeError or ValueError when the value cannot be encoded.
    """
    record = item_to_record(item)
    json.dumps(record, allow_nan=False)
    return record


def item_from_record(record: dict[str, object]) -> Item:
    """Rebuild a persisted item from a record and mark it cached."""
    item = Item(str(record["key"]))
    item.set(record.get("value"), datetime.fromisoformat(str(record["expires_at"])))
    return item.mark_cached()
