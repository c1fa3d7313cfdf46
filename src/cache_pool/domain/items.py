"""Cache item entity."""

from datetime import UTC, datetime, timedelta

from cache_pool.errors import InvalidArgumentError, InvalidKeyError

# Reserved for backend key encodings, e.g. the file backend's file names.
RESERVED_KEY_CHARACTERS = frozenset("(){}/\\")

# Items without a TTL expire this far in the future. Not a real expiration.
UNBOUNDED_TTL = timedelta(days=365)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


def validate_key(key: object) -> str:
    """Return the key if it is a valid cache key, else raise InvalidKeyError."""
    if not isinstance(key, str) or not key:
        raise InvalidKeyError(f"Cache key must be a non-empty string, got {key!r}")
    reserved = RESERVED_KEY_CHARACTERS.intersection(key)
    if reserved:
        raise InvalidKeyError(
            f"Cache key {key!r} contains reserved characters: "
            f"{''.join(sorted(reserved))}"
        )
    return key


def is_integer(value: object) -> bool:
    """Return whether a value is an int. Bools do not count."""
    return isinstance(value, int) and not isinstance(value, bool)


def validate_default_ttl(default_ttl: object) -> int | None:
    """Return the default TTL if it is None or a usable number of seconds."""
    if default_ttl is None:
        return None
    if not is_integer(default_ttl):
        raise InvalidArgumentError(
            "Default TTL must be an integer or None, "
            f"got {type(default_ttl).__name__}"
        )
    _from_now(default_ttl)
    return default_ttl


def _from_now(duration: int | timedelta) -> datetime:
    try:
        if not isinstance(duration, timedelta):
            duration = timedelta(seconds=duration)
        return _utcnow() + duration
    except OverflowError as exc:
        raise InvalidArgumentError(
            f"Duration {duration} is out of the supported date range"
        ) from exc


def _as_utc(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        return instant.replace(tzinfo=UTC)
    return instant.astimezone(UTC)


class Item:
    """A single cached value with its key, expiration and hit state.

    Items are handed out by a pool, mutated by the caller and handed back to
    the pool to be persisted. An item only reports a hit once it has been
    marked as cached and while it has not expired.
    """

    def __init__(self, key: str, default_ttl: int | None = None) -> None:
        self._key = validate_key(key)
        self._default_ttl = validate_default_ttl(default_ttl)
        self._value: object = None
        self._cached = False
        self._expiration = self._resolve_expiration(default_ttl)

    def __repr__(self) -> str:
        return (
            f"Item(key={self._key!r}, expiration={self._expiration.isoformat()}, "
            f"cached={self._cached})"
        )

    @property
    def key(self) -> str:
        """Return the key of the item."""
        return self._key

    @property
    def expiration(self) -> datetime:
        """Return the UTC instant at which the item expires."""
        return self._expiration

    @property
    def value(self) -> object:
        """Return the stored value regardless of hit state, for backends."""
        return self._value

    def get(self) -> object | None:
        """Return the value on a hit, None otherwise."""
        return self._value if self.is_hit() else None

    def set(self, value: object, ttl: int | datetime | None = None) -> "Item":
        """Store a value, expiring after ttl seconds or at ttl when a datetime.

        Without a ttl the default TTL given at construction applies, and
        without that the item does not expire.
        """
        expiration = self._resolve_expiration(
            ttl if ttl is not None else self._default_ttl
        )
        self._value = value
        self._expiration = expiration
        return self

    def expires_at(self, instant: datetime) -> "Item":
        """Expire the item at an absolute instant."""
        if not isinstance(instant, datetime):
            raise InvalidArgumentError(
                f"Expiration must be a datetime, got {type(instant).__name__}"
            )
        self._expiration = _as_utc(instant)
        return self

    def expires_after(self, duration: int | timedelta) -> "Item":
        """Expire the item after a duration. Negative durations are allowed."""
        if not is_integer(duration) and not isinstance(duration, timedelta):
            raise InvalidArgumentError(
                "Duration must be an integer or timedelta, "
                f"got {type(duration).__name__}"
            )
        self._expiration = _from_now(duration)
        return self

    def is_expired(self) -> bool:
        return _utcnow() >= self._expiration

    def exists(self) -> bool:
        return self._cached

    def is_hit(self) -> bool:
        return self._cached and not self.is_expired()

    def mark_cached(self) -> "Item":
        """Flag the item as persisted. Only pools and backends call this."""
        self._cached = True
        return self

    def _resolve_expiration(self, ttl: object) -> datetime:
        if ttl is None:
            return _utcnow() + UNBOUNDED_TTL
        if isinstance(ttl, datetime):
            return _as_utc(ttl)
        if is_integer(ttl):
            return _from_now(ttl)
        raise InvalidArgumentError(
            f"TTL must be an integer, datetime or None, got {type(ttl).__name__}"
        )
