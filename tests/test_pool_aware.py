"""Tests for the cache pool aware mixin."""

from dataclasses import dataclass

from cache_pool.services.pool import Pool
from cache_pool.services.pool_aware import CachePoolAware


@dataclass
class WidgetService(CachePoolAware):
    name: str = "widgets"

    def widget_list(self) -> list[str]:
        pool = self.get_cache_pool()
        if pool is None:
            return self._load()
        item = pool.get_item("widget_list")
        if not item.is_hit():
            item.set(self._load())
            pool.save(item)
        return item.get()  # type: ignore[return-value]

    def _load(self) -> list[str]:
        return ["gear", "sprocket"]


def test_set_cache_pool_returns_object(memory_pool: Pool) -> None:
    service = WidgetService()
    assert service.set_cache_pool(memory_pool) is service


def test_get_cache_pool(memory_pool: Pool) -> None:
    service = WidgetService()
    assert service.get_cache_pool() is None
    service.set_cache_pool(memory_pool)
    assert service.get_cache_pool() is memory_pool


def test_has_cache_pool(memory_pool: Pool) -> None:
    service = WidgetService()
    assert not service.has_cache_pool()
    service.set_cache_pool(memory_pool)
    assert service.has_cache_pool()


def test_pool_aware_service_caches_results(memory_pool: Pool) -> None:
    service = WidgetService().set_cache_pool(memory_pool)

    assert service.widget_list() == ["gear", "sprocket"]
    assert memory_pool.get_item("widget_list").is_hit()
    assert service.widget_list() == ["gear", "sprocket"]
