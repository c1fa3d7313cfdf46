"""Exceptions raised by the cache pool."""


class CacheError(Exception):
    """Base class for cache errors."""


class InvalidArgumentError(CacheError, ValueError):
    """Raised when a TTL, expiration, item or setting has the wrong type."""


class InvalidKeyError(InvalidArgumentError):
    """Raised when a cache key is empty or contains reserved characters."""


class BackendUnavailableError(CacheError, RuntimeError):
    """Raised when a storage backend precondition is not met."""
