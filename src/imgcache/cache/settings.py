"""Construction-time augmentation of backend settings.

Settings are built in two phases: the externally supplied mapping is copied,
handed once to an augmenter, and the result is frozen. Backends that read
their configuration from somewhere else (environment, secret store) supply
an augmenter instead of overriding a constructor hook.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from types import MappingProxyType

logger = logging.getLogger(__name__)

CacheSettings = Mapping[str, str]

# An augmenter may edit the dict in place (returning None) or return a new mapping.
SettingsAugmenter = Callable[[dict[str, str]], Mapping[str, str] | None]


def noop_augmenter(settings: dict[str, str]) -> None:
    """Default augmentation: leave the supplied settings untouched."""


class EnvironmentSettingsAugmenter:
    """Layer ``<prefix><KEY>`` environment variables over the supplied settings.

    ``IMGCACHE_SETTING_CACHE_DIR=/srv/cache`` sets ``cache_dir``. Keys are
    lower-cased after the prefix is removed.
    """

    def __init__(
        self,
        prefix: str = "IMGCACHE_SETTING_",
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._prefix = prefix
        self._environ = environ

    def __call__(self, settings: dict[str, str]) -> None:
        environ = os.environ if self._environ is None else self._environ
        for name, value in environ.items():
            if not name.startswith(self._prefix) or name == self._prefix:
                continue
            key = name[len(self._prefix):].lower()
            logger.debug("Setting '%s' overridden from environment", key)
            settings[key] = value


def build_settings(
    supplied: Mapping[str, str] | None,
    augmenter: SettingsAugmenter | None = None,
) -> CacheSettings:
    """Copy, augment exactly once, then freeze the settings mapping."""
    settings = dict(supplied or {})
    result = (augmenter or noop_augmenter)(settings)
    if result is not None:
        settings = dict(result)
    return MappingProxyType(settings)
