"""Cache manager — drives the per-request cache lifecycle around a transform."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from pydantic import BaseModel

from imgcache.cache.base import BaseImageCache
from imgcache.cache.disk import DiskStore, store_from_settings
from imgcache.cache.factory import Store, create_image_cache
from imgcache.cache.freshness import FreshnessProbe
from imgcache.cache.memory import MemoryStore
from imgcache.cache.settings import SettingsAugmenter, build_settings
from imgcache.cache.stats import CacheStats
from imgcache.concurrency.locks import KeyedLock
from imgcache.config.schema import BackendKind, CacheConfig
from imgcache.errors.exceptions import BackendUnavailableError
from imgcache.types import CacheRequest, RequestContext

logger = logging.getLogger(__name__)

# Produces the processed image and its content type.
Transform = Callable[[], Awaitable[tuple[bytes, str]]]


class CacheResult(BaseModel):
    """Outcome of one fetch_or_regenerate call."""

    file_name: str
    hit: bool
    stored: bool = False
    content: bytes | None = None
    content_type: str | None = None


class ImageCacheManager:
    """Serves cached images, regenerating at most once per fingerprint at a time."""

    def __init__(
        self,
        config: CacheConfig,
        store: Store | None = None,
        augmenter: SettingsAugmenter | None = None,
        probe: FreshnessProbe | None = None,
    ) -> None:
        self._config = config
        self._augmenter = augmenter
        self._probe = probe or FreshnessProbe(timeout=config.probe_timeout)
        self._store = store or self._open_store()
        self._locks = KeyedLock()
        self._stats = CacheStats()

    @property
    def store(self) -> Store:
        return self._store

    def create(self, request: CacheRequest) -> BaseImageCache:
        return create_image_cache(
            request,
            self._config,
            store=self._store,
            augmenter=self._augmenter,
            probe=self._probe,
        )

    async def fetch_or_regenerate(
        self,
        request: CacheRequest,
        transform: Transform,
        context: RequestContext,
    ) -> CacheResult:
        """Serve from cache, or run ``transform`` and store its output.

        A backend write failure is not fatal here: the freshly generated
        content is returned uncached and the context is left untouched.
        """
        cache = self.create(request)
        file_name = await cache.resolve_file_name()

        async with self._locks.acquire(file_name):
            if not await cache.is_new_or_updated():
                self._stats.hits += 1
                cache.rewrite_path(context)
                return CacheResult(file_name=file_name, hit=True)

            self._stats.misses += 1
            content, content_type = await transform()
            try:
                await cache.add_to_cache(content, content_type)
            except BackendUnavailableError as e:
                self._stats.write_failures += 1
                logger.error("Serving %s uncached: %s", request.full_path, e)
                return CacheResult(
                    file_name=file_name,
                    hit=False,
                    content=content,
                    content_type=content_type,
                )

            self._stats.writes += 1
            cache.rewrite_path(context)
            return CacheResult(
                file_name=file_name,
                hit=False,
                stored=True,
                content=content,
                content_type=content_type,
            )

    async def trim(self) -> int:
        """Remove expired entries from the shared store."""
        removed = self._store.trim(self._config.max_days)
        self._stats.trimmed += removed
        return removed

    def clear(self) -> None:
        """Remove every entry and reset statistics."""
        self._store.clear()
        self._stats = CacheStats()

    def stats(self) -> CacheStats:
        """Return aggregate cache statistics."""
        entries = (
            self._store.entry_count if isinstance(self._store, DiskStore) else len(self._store)
        )
        return self._stats.model_copy(
            update={"entries": entries, "size_mb": self._store.size_mb}
        )

    def close(self) -> None:
        if isinstance(self._store, DiskStore):
            self._store.close()

    def _open_store(self) -> Store:
        if self._config.backend == BackendKind.MEMORY:
            return MemoryStore()
        settings = build_settings(self._config.settings, self._augmenter)
        return store_from_settings(settings)
