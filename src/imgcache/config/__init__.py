"""Configuration — defaults, file/env hierarchy and validated schema."""

from imgcache.config.hierarchy import load_config_hierarchy
from imgcache.config.schema import BackendKind, CacheConfig

__all__ = ["BackendKind", "CacheConfig", "load_config_hierarchy"]
