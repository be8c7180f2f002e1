"""Tests for CacheConfig validation."""

import pytest
from pydantic import ValidationError

from imgcache.config.defaults import get_defaults
from imgcache.config.schema import BackendKind, CacheConfig
from imgcache.errors.exceptions import ConfigurationError


class TestCacheConfig:
    def test_defaults(self):
        config = CacheConfig()
        assert config.max_days == 365
        assert config.browser_max_days == 7
        assert config.backend == BackendKind.DISK
        assert config.key_includes_querystring is False

    def test_from_package_defaults(self):
        config = CacheConfig.from_mapping(get_defaults())
        assert config.settings["virtual_cache_path"] == "/app_data/cache"

    def test_negative_max_days_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            CacheConfig.from_mapping({"max_days": -1})
        assert exc_info.value.field == "max_days"

    def test_negative_browser_max_days_rejected(self):
        with pytest.raises(ConfigurationError):
            CacheConfig.from_mapping({"browser_max_days": -5})

    def test_zero_max_days_allowed(self):
        assert CacheConfig.from_mapping({"max_days": 0}).max_days == 0

    def test_unknown_backend_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            CacheConfig.from_mapping({"backend": "s3"})
        assert exc_info.value.field == "backend"

    def test_non_positive_timeout_rejected(self):
        with pytest.raises(ConfigurationError):
            CacheConfig.from_mapping({"probe_timeout": 0})

    def test_unknown_keys_ignored(self):
        config = CacheConfig.from_mapping({"log_level": "DEBUG", "max_days": 3})
        assert config.max_days == 3

    def test_frozen(self):
        config = CacheConfig()
        with pytest.raises(ValidationError):
            config.max_days = 1
