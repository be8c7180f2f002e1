"""Configuration hierarchy — merges sources in priority order.

Precedence (later overrides earlier):
  1. Package defaults
  2. Global config   (~/.imgcache/config.yaml)
  3. Project config   (./imgcache.yaml)
  4. Environment variables (IMGCACHE_*)
  5. Runtime arguments

The nested ``settings`` mapping is merged key by key rather than replaced,
so a project file can override ``cache_dir`` without dropping the default
``folder_depth``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from imgcache.config.defaults import get_defaults

logger = logging.getLogger(__name__)

_GLOBAL_CONFIG_PATH = Path.home() / ".imgcache" / "config.yaml"
_PROJECT_CONFIG_NAME = "imgcache.yaml"

# Map of environment variables to top-level config keys
_ENV_MAP: dict[str, str] = {
    "IMGCACHE_MAX_DAYS": "max_days",
    "IMGCACHE_BROWSER_MAX_DAYS": "browser_max_days",
    "IMGCACHE_BACKEND": "backend",
    "IMGCACHE_PROBE_TIMEOUT": "probe_timeout",
    "IMGCACHE_KEY_INCLUDES_QUERYSTRING": "key_includes_querystring",
    "IMGCACHE_LOG_LEVEL": "log_level",
}

# Map of environment variables to backend ``settings`` keys
_SETTINGS_ENV_MAP: dict[str, str] = {
    "IMGCACHE_CACHE_DIR": "cache_dir",
    "IMGCACHE_VIRTUAL_CACHE_PATH": "virtual_cache_path",
    "IMGCACHE_FOLDER_DEPTH": "folder_depth",
}

# Keys that should be parsed as specific types
_TYPE_MAP: dict[str, type] = {
    "max_days": int,
    "browser_max_days": int,
    "probe_timeout": float,
}

_BOOL_KEYS = {"key_includes_querystring"}

# Boolean env var values
_TRUTHY = {"1", "true", "yes", "on"}


def load_config_hierarchy(**runtime_overrides: Any) -> dict[str, Any]:
    """Load and merge configuration from all sources.

    Returns a merged dict with the final resolved values.
    """
    config = get_defaults()

    # Layer 2: Global config
    global_cfg = _load_yaml_config(_GLOBAL_CONFIG_PATH)
    if global_cfg:
        _merge(config, global_cfg)

    # Layer 3: Project config (search from cwd upward)
    project_path = _find_project_config()
    if project_path:
        project_cfg = _load_yaml_config(project_path)
        if project_cfg:
            _merge(config, project_cfg)

    # Layer 4: Environment variables
    _merge(config, _load_env_vars())

    # Layer 5: Runtime arguments (highest priority)
    # Filter out None values: only override when explicitly set
    _merge(config, {k: v for k, v in runtime_overrides.items() if v is not None})

    return config


def _merge(config: dict[str, Any], layer: dict[str, Any]) -> None:
    """Apply one layer on top of ``config``, merging ``settings`` key by key."""
    for key, value in layer.items():
        if key == "settings":
            if not isinstance(value, dict):
                logger.warning("Ignoring non-mapping 'settings' value: %r", value)
                continue
            merged = dict(config.get("settings") or {})
            merged.update({str(k): str(v) for k, v in value.items()})
            config["settings"] = merged
        else:
            config[key] = value


def _load_yaml_config(path: Path) -> dict[str, Any] | None:
    """Load a YAML config file if it exists."""
    if not path.exists() or not path.is_file():
        return None
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
        if isinstance(data, dict):
            return data
        logger.warning("Config file %s is not a mapping, ignoring", path)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config %s: %s", path, e)
    return None


def _find_project_config() -> Path | None:
    """Search for imgcache.yaml from cwd upward."""
    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / _PROJECT_CONFIG_NAME
        if candidate.exists():
            return candidate
    return None


def _load_env_vars() -> dict[str, Any]:
    """Read IMGCACHE_* environment variables."""
    result: dict[str, Any] = {}
    for env_key, config_key in _ENV_MAP.items():
        value = os.environ.get(env_key)
        if value is None:
            continue
        result[config_key] = _coerce_env_value(config_key, value)

    settings: dict[str, str] = {}
    for env_key, settings_key in _SETTINGS_ENV_MAP.items():
        value = os.environ.get(env_key)
        if value is not None:
            settings[settings_key] = value
    if settings:
        result["settings"] = settings
    return result


def _coerce_env_value(key: str, value: str) -> Any:
    """Coerce an environment variable string to the appropriate type."""
    if key in _BOOL_KEYS:
        return value.lower() in _TRUTHY

    target_type = _TYPE_MAP.get(key)
    if target_type:
        try:
            return target_type(value)
        except (ValueError, TypeError):
            logger.warning(
                "Cannot convert env var for '%s' to %s: %s", key, target_type.__name__, value
            )
            return value

    return value
