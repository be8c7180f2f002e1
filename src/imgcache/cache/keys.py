"""Cache file-name generation — freshness-aware, path-addressed."""

from __future__ import annotations

import hashlib

from imgcache.cache.extensions import extract_extension
from imgcache.config.defaults import DEFAULT_EXTENSION


def sha1_fingerprint(text: str) -> str:
    """SHA-1 hex digest of UTF-8 text. A cache key, not a security boundary."""
    return hashlib.sha1(text.encode("utf-8")).hexdigest()  # noqa: S324


def generate_cache_key(
    signal: str,
    full_path: str,
    querystring: str = "",
    include_querystring: bool = False,
) -> str:
    """Hash the freshness signal and full path into a cache key.

    The querystring is left out of the hashed material unless
    ``include_querystring`` is set. With it left out, two requests for the
    same source that differ only in processing instructions share a key and
    are told apart by extension alone.
    """
    material = signal + full_path
    if include_querystring and querystring:
        material += "?" + querystring
    return sha1_fingerprint(material)


def generate_cached_file_name(
    signal: str,
    full_path: str,
    querystring: str = "",
    include_querystring: bool = False,
) -> str:
    """Build ``<sha1>.<extension>`` for a request, defaulting the extension to jpg."""
    extension = extract_extension(full_path, querystring).replace(".", "")
    key = generate_cache_key(signal, full_path, querystring, include_querystring)
    return f"{key}.{extension or DEFAULT_EXTENSION}"
