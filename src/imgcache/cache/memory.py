"""In-memory image cache backend."""

from __future__ import annotations

from imgcache.cache.base import BaseImageCache, Content, read_content
from imgcache.cache.expiration import is_expired
from imgcache.cache.freshness import FreshnessProbe
from imgcache.cache.settings import SettingsAugmenter
from imgcache.cache.stats import CacheEntry
from imgcache.config.defaults import DEFAULT_VIRTUAL_CACHE_PATH
from imgcache.config.schema import CacheConfig
from imgcache.types import CacheRequest, RequestContext


class MemoryStore:
    """Process-wide store shared by every MemoryImageCache.

    An entry is published with a single dict assignment, so a lookup either
    sees the previous artifact or the complete new one.
    """

    def __init__(self) -> None:
        self._store: dict[str, tuple[CacheEntry, bytes]] = {}
        self._current_size_bytes = 0

    def get(self, key: str) -> CacheEntry | None:
        item = self._store.get(key)
        return item[0] if item else None

    def read(self, key: str) -> bytes | None:
        item = self._store.get(key)
        return item[1] if item else None

    def set(self, entry: CacheEntry, data: bytes) -> None:
        self._remove(entry.key)
        self._store[entry.key] = (entry, data)
        self._current_size_bytes += entry.size_bytes

    def entries(self) -> list[CacheEntry]:
        return [entry for entry, _ in list(self._store.values())]

    def trim(self, max_days: int) -> int:
        """Remove entries older than ``max_days``. Returns count deleted."""
        expired = [e.key for e in self.entries() if is_expired(e.created_at, max_days)]
        for key in expired:
            self._remove(key)
        return len(expired)

    def clear(self) -> None:
        self._store.clear()
        self._current_size_bytes = 0

    @property
    def size_mb(self) -> float:
        return self._current_size_bytes / (1024 * 1024)

    def __len__(self) -> int:
        return len(self._store)

    def _remove(self, key: str) -> None:
        item = self._store.pop(key, None)
        if item:
            self._current_size_bytes -= item[0].size_bytes


class MemoryImageCache(BaseImageCache):
    """Keeps processed images in a shared MemoryStore."""

    def __init__(
        self,
        request: CacheRequest,
        config: CacheConfig,
        store: MemoryStore,
        augmenter: SettingsAugmenter | None = None,
        probe: FreshnessProbe | None = None,
    ) -> None:
        super().__init__(request, config, augmenter=augmenter, probe=probe)
        self._store = store
        self._virtual_root = self.settings.get(
            "virtual_cache_path", DEFAULT_VIRTUAL_CACHE_PATH
        ).rstrip("/")

    async def is_new_or_updated(self) -> bool:
        file_name = await self.resolve_file_name()
        self.cached_path = f"{self._virtual_root}/{file_name}"
        entry = self._store.get(file_name)
        return entry is None or self.is_expired(entry.created_at)

    async def add_to_cache(self, content: Content, content_type: str) -> None:
        file_name = await self.resolve_file_name()
        data = read_content(content)
        self.cached_path = f"{self._virtual_root}/{file_name}"
        self._store.set(
            CacheEntry(
                key=file_name,
                content_type=content_type,
                size_bytes=len(data),
                location=self.cached_path,
            ),
            data,
        )

    async def trim_cache(self) -> int:
        return self._store.trim(self.max_days)

    def rewrite_path(self, context: RequestContext) -> None:
        if self.cached_path is None:
            return
        entry = self._store.get(self.cached_path.rsplit("/", 1)[-1])
        context.path = self.cached_path
        context.rewritten = True
        if entry is not None:
            context.content_type = entry.content_type
