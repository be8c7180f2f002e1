"""Package-level default configuration values."""

from __future__ import annotations

from pathlib import Path
from typing import Any

# Default expiration settings
DEFAULT_MAX_DAYS = 365
DEFAULT_BROWSER_MAX_DAYS = 7

# Default backend settings
DEFAULT_BACKEND = "disk"
DEFAULT_CACHE_DIR = str(Path.home() / ".imgcache" / "cache")
DEFAULT_VIRTUAL_CACHE_PATH = "/app_data/cache"
DEFAULT_FOLDER_DEPTH = 6

# Default fingerprint settings
DEFAULT_PROBE_TIMEOUT = 5.0
DEFAULT_KEY_INCLUDES_QUERYSTRING = False
DEFAULT_EXTENSION = "jpg"

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "max_days": DEFAULT_MAX_DAYS,
        "browser_max_days": DEFAULT_BROWSER_MAX_DAYS,
        "backend": DEFAULT_BACKEND,
        "probe_timeout": DEFAULT_PROBE_TIMEOUT,
        "key_includes_querystring": DEFAULT_KEY_INCLUDES_QUERYSTRING,
        "settings": {
            "cache_dir": DEFAULT_CACHE_DIR,
            "virtual_cache_path": DEFAULT_VIRTUAL_CACHE_PATH,
            "folder_depth": str(DEFAULT_FOLDER_DEPTH),
        },
        "log_level": DEFAULT_LOG_LEVEL,
    }
