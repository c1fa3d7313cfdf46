"""Dependency container wiring for the cache pool."""

from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Request
from supabase import create_client

from cache_pool.adapters.file_repository import FileRepository
from cache_pool.adapters.memory_repository import InMemoryRepository
from cache_pool.adapters.session_repository import SessionRepository
from cache_pool.adapters.simple_repository_adapter import SimpleRepositoryAdapter
from cache_pool.adapters.supabase_repository import SupabaseRepository
from cache_pool.config import CacheSettings
from cache_pool.errors import InvalidArgumentError
from cache_pool.services.pool import Pool, Repository


@dataclass
class CacheContainer:
    """Holds the configured repository and pool."""

    settings: CacheSettings
    repository: Repository
    pool: Pool
    close_resources: Callable[[], None]


def build_repository(settings: CacheSettings) -> Repository:
    """Create the repository selected by the settings."""
    if settings.backend == "memory":
        return SimpleRepositoryAdapter(InMemoryRepository())
    if settings.backend == "file":
        if not settings.file_directory:
            raise InvalidArgumentError(
                "CACHE_FILE_DIRECTORY is required for the file backend"
            )
        return SimpleRepositoryAdapter(
            FileRepository(settings.file_directory, settings.file_extension)
        )
    if settings.backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise InvalidArgumentError(
                "CACHE_SUPABASE_URL and CACHE_SUPABASE_SERVICE_KEY are required "
                "for the supabase backend"
            )
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseRepository(client, table=settings.supabase_table)
    raise InvalidArgumentError(f"Unknown cache backend: {settings.backend}")


def build_container(settings: CacheSettings | None = None) -> CacheContainer:
    """Create the default cache container."""
    resolved_settings = settings or CacheSettings()
    repository = build_repository(resolved_settings)
    pool = Pool(repository, default_ttl=resolved_settings.default_ttl)
    return CacheContainer(
        settings=resolved_settings,
        repository=repository,
        pool=pool,
        close_resources=pool.close,
    )


def build_session_pool(request: Request, settings: CacheSettings | None = None) -> Pool:
    """Create a pool over the session of a request."""
    resolved_settings = settings or CacheSettings()
    repository = SessionRepository.from_request(
        request, session_key=resolved_settings.session_key
    )
    return Pool(repository, default_ttl=resolved_settings.default_ttl)
