"""imgcache — fingerprinting, expiration and backend contract for image caches."""

from imgcache.cache import (
    BaseImageCache,
    FreshnessProbe,
    ImageCacheManager,
    create_image_cache,
    generate_cached_file_name,
    is_expired,
)
from imgcache.config.schema import CacheConfig
from imgcache.types import CacheRequest, RequestContext

__version__ = "0.1.0"

__all__ = [
    "BaseImageCache",
    "CacheConfig",
    "CacheRequest",
    "FreshnessProbe",
    "ImageCacheManager",
    "RequestContext",
    "create_image_cache",
    "generate_cached_file_name",
    "is_expired",
]
