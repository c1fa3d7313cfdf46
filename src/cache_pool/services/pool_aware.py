"""Mixin for objects that use a cache pool."""

from typing import Self

from cache_pool.services.pool import Pool


class CachePoolAware:
    """Gives an object an optional, settable cache pool."""

    cache_pool: Pool | None = None

    def set_cache_pool(self, cache_pool: Pool) -> Self:
        self.cache_pool = cache_pool
        return self

    def get_cache_pool(self) -> Pool | None:
        return self.cache_pool

    def has_cache_pool(self) -> bool:
        return isinstance(self.cache_pool, Pool)
