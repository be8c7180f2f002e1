"""Freshness probing — a cheap time+size signal for "has the source changed".

Reading a whole image to detect change is too expensive, so local files are
summarized by creation time and length, and remote resources by the
``Last-Modified`` and ``Content-Length`` headers of a ``HEAD`` request.
Probing never raises: any failure yields ``EMPTY_SIGNAL`` and the cache
keeps working with a key that no longer tracks source edits.
"""

from __future__ import annotations

import asyncio
import logging
import os
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

import httpx

from imgcache.config.defaults import DEFAULT_PROBE_TIMEOUT

logger = logging.getLogger(__name__)

EMPTY_SIGNAL = ""

_REMOTE_SCHEMES = {"http", "https"}
_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Failures that degrade to the empty signal
_PROBE_ERRORS = (httpx.HTTPError, httpx.InvalidURL, OSError, ValueError, TypeError)


def format_timestamp(value: datetime) -> str:
    """Fixed, locale-independent UTC rendering used in freshness signals."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime(_TIMESTAMP_FORMAT)


def is_remote(request_path: str) -> bool:
    return urlparse(request_path).scheme.lower() in _REMOTE_SCHEMES


def local_path(request_path: str) -> Path:
    """Resolve a plain path or ``file://`` URI to a filesystem path."""
    parsed = urlparse(request_path)
    if parsed.scheme.lower() == "file":
        return Path(url2pathname(parsed.path))
    return Path(request_path)


class FreshnessProbe:
    """Derives a freshness signal for a local file or remote resource."""

    def __init__(
        self,
        timeout: float = DEFAULT_PROBE_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._timeout = timeout
        self._client = client

    @property
    def timeout(self) -> float:
        return self._timeout

    async def probe(self, request_path: str) -> str:
        """Return ``<timestamp><length>`` for the resource, or ``EMPTY_SIGNAL``."""
        try:
            if is_remote(request_path):
                return await self._probe_remote(request_path)
            return await self._probe_local(local_path(request_path))
        except _PROBE_ERRORS as e:
            logger.debug("Freshness probe failed for %s: %s", request_path, e)
            return EMPTY_SIGNAL

    async def _probe_local(self, path: Path) -> str:
        try:
            st = await asyncio.to_thread(os.stat, path)
        except FileNotFoundError:
            return EMPTY_SIGNAL
        created = getattr(st, "st_birthtime", None) or st.st_ctime
        creation = format_timestamp(datetime.fromtimestamp(created, UTC))
        return f"{creation}{st.st_size}"

    async def _probe_remote(self, url: str) -> str:
        async with asyncio.timeout(self._timeout):
            if self._client is not None:
                response = await self._client.head(url, timeout=self._timeout)
            else:
                async with httpx.AsyncClient(
                    timeout=self._timeout, follow_redirects=True
                ) as client:
                    response = await client.head(url)
        response.raise_for_status()

        last_modified = ""
        header = response.headers.get("last-modified")
        if header:
            last_modified = format_timestamp(parsedate_to_datetime(header))
        length = response.headers.get("content-length", "")
        return f"{last_modified}{length.strip()}"
