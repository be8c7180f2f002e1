import pytest

from imgcache.cache.freshness import FreshnessProbe
from imgcache.config.schema import CacheConfig
from imgcache.types import CacheRequest


class StaticProbe(FreshnessProbe):
    """Probe returning a fixed signal, counting calls."""

    def __init__(self, signal: str = "") -> None:
        super().__init__()
        self.signal = signal
        self.calls = 0

    async def probe(self, request_path: str) -> str:
        self.calls += 1
        return self.signal


@pytest.fixture
def sample_image_bytes():
    """Minimal valid PNG for testing (1x1 white pixel)."""
    import base64
    return base64.b64decode(
        "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR4"
        "nGP4z8BQDwAEgAF/pooBPQAAAABJRU5ErkJggg=="
    )


@pytest.fixture
def probe_factory():
    return StaticProbe


@pytest.fixture
def static_probe():
    return StaticProbe("2024-01-01T00:00:00Z1024")


@pytest.fixture
def photo_request():
    return CacheRequest(
        request_path="/srv/images/photo.jpg",
        full_path="/images/photo.jpg",
        querystring="width=100",
    )


@pytest.fixture
def disk_config(tmp_path):
    return CacheConfig(
        max_days=30,
        browser_max_days=7,
        backend="disk",
        settings={
            "cache_dir": str(tmp_path / "cache"),
            "virtual_cache_path": "/app_data/cache",
            "folder_depth": "2",
        },
    )


@pytest.fixture
def memory_config():
    return CacheConfig(max_days=30, browser_max_days=7, backend="memory")
