"""Disk image cache backend — files on disk, SQLite index of entries."""

from __future__ import annotations

import asyncio
import logging
import os
import sqlite3
import tempfile
import time
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path

from imgcache.cache.base import BaseImageCache, Content, read_content
from imgcache.cache.expiration import is_expired
from imgcache.cache.freshness import FreshnessProbe
from imgcache.cache.settings import SettingsAugmenter
from imgcache.cache.stats import CacheEntry
from imgcache.config.defaults import (
    DEFAULT_CACHE_DIR,
    DEFAULT_FOLDER_DEPTH,
    DEFAULT_VIRTUAL_CACHE_PATH,
)
from imgcache.config.schema import CacheConfig
from imgcache.errors.exceptions import BackendUnavailableError, ConfigurationError
from imgcache.types import CacheRequest, RequestContext

logger = logging.getLogger(__name__)

_INDEX_NAME = "index.db"
_TEMP_SUFFIX = ".tmp"


class DiskStore:
    """Artifact files sharded into sub-folders by leading hash characters.

    Every artifact is written to a temp file in its final folder and moved
    into place with ``os.replace``; the index row is written afterwards, so
    a key is only visible once its file is complete. Keys with a write in
    flight are skipped by ``trim``.
    """

    def __init__(self, root: Path | str, folder_depth: int = DEFAULT_FOLDER_DEPTH) -> None:
        if folder_depth < 0:
            raise ConfigurationError(
                f"folder_depth must be >= 0, got {folder_depth}", field="folder_depth"
            )
        self._root = Path(root).expanduser()
        self._folder_depth = folder_depth
        self._writing: set[str] = set()
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(self._root / _INDEX_NAME))
            self._conn.row_factory = sqlite3.Row
            self._create_table()
        except (OSError, sqlite3.Error) as e:
            raise BackendUnavailableError(
                f"Cannot open disk cache at {self._root}: {e}",
                error_type="open_failure",
                original=e,
            ) from e

    @property
    def root(self) -> Path:
        return self._root

    def relative_path(self, key: str) -> Path:
        """``abcdef...jpg`` -> ``a/b/c/d/e/f/abcdef...jpg`` for folder_depth 6."""
        folders = list(key[: self._folder_depth])
        return Path(*folders, key)

    def path_for(self, key: str) -> Path:
        return self._root / self.relative_path(key)

    def get(self, key: str) -> CacheEntry | None:
        try:
            row = self._conn.execute(
                "SELECT * FROM entries WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            raise BackendUnavailableError(
                f"Cache index lookup failed: {e}", error_type="read_failure", key=key, original=e
            ) from e
        if row is None:
            return None
        if not self.path_for(key).exists():
            logger.warning("Index entry %s has no file on disk, treating as missing", key)
            return None
        return self._row_to_entry(row)

    async def write(self, key: str, data: bytes, content_type: str) -> CacheEntry:
        """Store ``data`` under ``key``, replacing any previous artifact."""
        target = self.path_for(key)
        self._writing.add(key)
        try:
            await asyncio.to_thread(_atomic_write, target, data)
            entry = CacheEntry(
                key=key,
                created_at=datetime.now(UTC),
                content_type=content_type,
                size_bytes=len(data),
                location=str(target),
            )
            self._conn.execute(
                """INSERT OR REPLACE INTO entries
                   (key, created_at, content_type, size_bytes, location)
                   VALUES (?, ?, ?, ?, ?)""",
                (
                    entry.key,
                    entry.created_at.timestamp(),
                    entry.content_type,
                    entry.size_bytes,
                    entry.location,
                ),
            )
            self._conn.commit()
        except (OSError, sqlite3.Error) as e:
            raise BackendUnavailableError(
                f"Failed to write cache entry {key}: {e}",
                error_type="write_failure",
                key=key,
                original=e,
            ) from e
        finally:
            self._writing.discard(key)
        return entry

    def entries(self) -> list[CacheEntry]:
        rows = self._conn.execute("SELECT * FROM entries ORDER BY created_at").fetchall()
        return [self._row_to_entry(row) for row in rows]

    def trim(self, max_days: int) -> int:
        """Delete expired artifacts and their index rows. Returns count deleted."""
        if max_days < 0:
            return 0
        cutoff = time.time() - max_days * 86400
        try:
            rows = self._conn.execute(
                "SELECT * FROM entries WHERE created_at < ?", (cutoff,)
            ).fetchall()
            removed = 0
            for row in rows:
                entry = self._row_to_entry(row)
                if entry.key in self._writing or not is_expired(entry.created_at, max_days):
                    continue
                self.path_for(entry.key).unlink(missing_ok=True)
                self._conn.execute("DELETE FROM entries WHERE key = ?", (entry.key,))
                removed += 1
            self._conn.commit()
        except (OSError, sqlite3.Error) as e:
            raise BackendUnavailableError(
                f"Cache trim failed: {e}", error_type="delete_failure", original=e
            ) from e
        if removed:
            logger.info("Trimmed %d expired entries from %s", removed, self._root)
        return removed

    def clear(self) -> None:
        try:
            for entry in self.entries():
                self.path_for(entry.key).unlink(missing_ok=True)
            self._conn.execute("DELETE FROM entries")
            self._conn.commit()
        except (OSError, sqlite3.Error) as e:
            raise BackendUnavailableError(
                f"Cache clear failed: {e}", error_type="delete_failure", original=e
            ) from e

    @property
    def entry_count(self) -> int:
        row = self._conn.execute("SELECT COUNT(*) FROM entries").fetchone()
        return row[0]

    @property
    def size_mb(self) -> float:
        row = self._conn.execute(
            "SELECT COALESCE(SUM(size_bytes), 0) FROM entries"
        ).fetchone()
        return row[0] / (1024 * 1024)

    def close(self) -> None:
        self._conn.close()

    def _create_table(self) -> None:
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS entries (
                key TEXT PRIMARY KEY,
                created_at REAL,
                content_type TEXT,
                size_bytes INTEGER,
                location TEXT
            )
        """)
        self._conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_entries_created_at ON entries(created_at)"
        )
        self._conn.commit()

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> CacheEntry:
        return CacheEntry(
            key=row["key"],
            created_at=datetime.fromtimestamp(row["created_at"], UTC),
            content_type=row["content_type"] or "",
            size_bytes=row["size_bytes"] or 0,
            location=row["location"] or "",
        )


def _atomic_write(target: Path, data: bytes) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, suffix=_TEMP_SUFFIX)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def store_from_settings(settings: Mapping[str, str] | None = None) -> DiskStore:
    """Open a DiskStore from ``cache_dir`` / ``folder_depth`` settings."""
    settings = settings or {}
    raw_depth = settings.get("folder_depth", str(DEFAULT_FOLDER_DEPTH))
    try:
        depth = int(raw_depth)
    except ValueError as e:
        raise ConfigurationError(
            f"folder_depth must be an integer, got {raw_depth!r}", field="folder_depth"
        ) from e
    return DiskStore(settings.get("cache_dir", DEFAULT_CACHE_DIR), folder_depth=depth)


class DiskImageCache(BaseImageCache):
    """Stores processed images as files under a DiskStore root."""

    def __init__(
        self,
        request: CacheRequest,
        config: CacheConfig,
        store: DiskStore | None = None,
        augmenter: SettingsAugmenter | None = None,
        probe: FreshnessProbe | None = None,
    ) -> None:
        super().__init__(request, config, augmenter=augmenter, probe=probe)
        self._store = store or store_from_settings(self.settings)
        self._virtual_root = self.settings.get(
            "virtual_cache_path", DEFAULT_VIRTUAL_CACHE_PATH
        ).rstrip("/")

    async def is_new_or_updated(self) -> bool:
        file_name = await self.resolve_file_name()
        self.cached_path = self._virtual_path(file_name)
        entry = self._store.get(file_name)
        if entry is None:
            return True
        return self.is_expired(entry.created_at)

    async def add_to_cache(self, content: Content, content_type: str) -> None:
        file_name = await self.resolve_file_name()
        await self._store.write(file_name, read_content(content), content_type)
        self.cached_path = self._virtual_path(file_name)

    async def trim_cache(self) -> int:
        return self._store.trim(self.max_days)

    def rewrite_path(self, context: RequestContext) -> None:
        if self.cached_path is None:
            return
        context.path = self.cached_path
        context.rewritten = True
        entry = self._store.get(self.cached_path.rsplit("/", 1)[-1])
        if entry is not None:
            context.content_type = entry.content_type

    def _virtual_path(self, file_name: str) -> str:
        return f"{self._virtual_root}/{self._store.relative_path(file_name).as_posix()}"
