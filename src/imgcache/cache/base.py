"""Abstract image cache — the contract every storage backend implements.

One instance serves one ``CacheRequest``. The request pipeline drives it as::

    name = await cache.create_cached_file_name()
    if await cache.is_new_or_updated():
        await cache.add_to_cache(processed, content_type)
    cache.rewrite_path(context)

and calls ``trim_cache`` periodically from any instance.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import BinaryIO

from imgcache.cache.expiration import is_expired
from imgcache.cache.freshness import FreshnessProbe
from imgcache.cache.keys import generate_cached_file_name
from imgcache.cache.settings import CacheSettings, SettingsAugmenter, build_settings
from imgcache.config.schema import CacheConfig
from imgcache.types import CacheRequest, RequestContext

Content = bytes | BinaryIO


class BaseImageCache(ABC):
    """Unified interface for image cache backends."""

    def __init__(
        self,
        request: CacheRequest,
        config: CacheConfig,
        augmenter: SettingsAugmenter | None = None,
        probe: FreshnessProbe | None = None,
    ) -> None:
        self.request = request
        self.settings: CacheSettings = build_settings(config.settings, augmenter)
        self.max_days = config.max_days
        self.browser_max_days = config.browser_max_days
        self.cached_path: str | None = None
        self._include_querystring = config.key_includes_querystring
        self._probe = probe or FreshnessProbe(timeout=config.probe_timeout)
        self._file_name: str | None = None

    @abstractmethod
    async def is_new_or_updated(self) -> bool:
        """True when no fresh entry exists for the current fingerprint."""

    @abstractmethod
    async def add_to_cache(self, content: Content, content_type: str) -> None:
        """Store the processed image under the current fingerprint."""

    @abstractmethod
    async def trim_cache(self) -> int:
        """Remove expired entries. Returns the number removed."""

    @abstractmethod
    def rewrite_path(self, context: RequestContext) -> None:
        """Point the request context at the cached artifact."""

    async def create_cached_file_name(self) -> str:
        """Return ``<sha1>.<ext>`` for the request, probing the source each call."""
        signal = await self._probe.probe(self.request.request_path)
        return generate_cached_file_name(
            signal,
            self.request.full_path,
            self.request.querystring,
            include_querystring=self._include_querystring,
        )

    async def resolve_file_name(self) -> str:
        """The fingerprint for this instance, probed once and then reused."""
        if self._file_name is None:
            self._file_name = await self.create_cached_file_name()
        return self._file_name

    def is_expired(self, created_at: datetime) -> bool:
        return is_expired(created_at, self.max_days)


def read_content(content: Content) -> bytes:
    """Drain a byte stream (or pass bytes through) for storage."""
    if isinstance(content, bytes | bytearray | memoryview):
        return bytes(content)
    return content.read()
