"""Factory for image cache instantiation."""

from __future__ import annotations

from imgcache.cache.base import BaseImageCache
from imgcache.cache.disk import DiskImageCache, DiskStore
from imgcache.cache.freshness import FreshnessProbe
from imgcache.cache.memory import MemoryImageCache, MemoryStore
from imgcache.cache.settings import SettingsAugmenter
from imgcache.config.schema import BackendKind, CacheConfig
from imgcache.errors.exceptions import ConfigurationError
from imgcache.types import CacheRequest

Store = DiskStore | MemoryStore


def create_image_cache(
    request: CacheRequest,
    config: CacheConfig,
    store: Store | None = None,
    augmenter: SettingsAugmenter | None = None,
    probe: FreshnessProbe | None = None,
) -> BaseImageCache:
    """Instantiate the configured cache backend for one request.

    Args:
        request: The request being served.
        config: Validated cache configuration; ``config.backend`` picks the class.
        store: Shared backend store. Disk caches open one from settings when
            omitted; memory caches require one.
        augmenter: Settings augmentation hook, applied once per instance.
        probe: Freshness probe to reuse across instances.

    Returns:
        Configured BaseImageCache implementation.
    """
    if config.backend == BackendKind.DISK:
        if store is not None and not isinstance(store, DiskStore):
            raise ConfigurationError(
                "disk backend requires a DiskStore", error_type="store_mismatch", field="backend"
            )
        return DiskImageCache(request, config, store=store, augmenter=augmenter, probe=probe)

    if config.backend == BackendKind.MEMORY:
        if not isinstance(store, MemoryStore):
            raise ConfigurationError(
                "memory backend requires a shared MemoryStore",
                error_type="store_mismatch",
                field="backend",
            )
        return MemoryImageCache(request, config, store=store, augmenter=augmenter, probe=probe)

    raise ConfigurationError(f"Unsupported cache backend: {config.backend!r}", field="backend")
