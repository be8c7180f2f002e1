"""Image cache subsystem — fingerprints, expiration and the backend contract."""

from imgcache.cache.base import BaseImageCache
from imgcache.cache.disk import DiskImageCache, DiskStore
from imgcache.cache.expiration import is_expired
from imgcache.cache.factory import create_image_cache
from imgcache.cache.freshness import EMPTY_SIGNAL, FreshnessProbe
from imgcache.cache.keys import generate_cache_key, generate_cached_file_name
from imgcache.cache.manager import CacheResult, ImageCacheManager
from imgcache.cache.memory import MemoryImageCache, MemoryStore
from imgcache.cache.settings import EnvironmentSettingsAugmenter, build_settings
from imgcache.cache.stats import CacheEntry, CacheStats

__all__ = [
    "BaseImageCache",
    "CacheEntry",
    "CacheResult",
    "CacheStats",
    "DiskImageCache",
    "DiskStore",
    "EMPTY_SIGNAL",
    "EnvironmentSettingsAugmenter",
    "FreshnessProbe",
    "ImageCacheManager",
    "MemoryImageCache",
    "MemoryStore",
    "build_settings",
    "create_image_cache",
    "generate_cache_key",
    "generate_cached_file_name",
    "is_expired",
]
