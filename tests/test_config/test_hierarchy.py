"""Tests for config hierarchy."""

import pytest

from imgcache.config import hierarchy
from imgcache.config.hierarchy import (
    _coerce_env_value,
    _load_yaml_config,
    load_config_hierarchy,
)


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    monkeypatch.setattr(hierarchy, "_GLOBAL_CONFIG_PATH", tmp_path / "global" / "config.yaml")
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir


class TestLoadConfigHierarchy:
    def test_returns_defaults(self):
        config = load_config_hierarchy()
        assert config["max_days"] == 365
        assert config["browser_max_days"] == 7
        assert config["backend"] == "disk"
        assert config["settings"]["folder_depth"] == "6"

    def test_runtime_overrides(self):
        config = load_config_hierarchy(max_days=10, backend="memory")
        assert config["max_days"] == 10
        assert config["backend"] == "memory"

    def test_none_overrides_ignored(self):
        config = load_config_hierarchy(max_days=None)
        assert config["max_days"] == 365

    def test_env_var_override(self, monkeypatch):
        monkeypatch.setenv("IMGCACHE_BACKEND", "memory")
        assert load_config_hierarchy()["backend"] == "memory"

    def test_env_numeric_coercion(self, monkeypatch):
        monkeypatch.setenv("IMGCACHE_MAX_DAYS", "14")
        monkeypatch.setenv("IMGCACHE_PROBE_TIMEOUT", "2.5")
        config = load_config_hierarchy()
        assert config["max_days"] == 14
        assert config["probe_timeout"] == 2.5

    def test_env_bool_coercion(self, monkeypatch):
        monkeypatch.setenv("IMGCACHE_KEY_INCLUDES_QUERYSTRING", "yes")
        assert load_config_hierarchy()["key_includes_querystring"] is True

    def test_env_settings(self, monkeypatch):
        monkeypatch.setenv("IMGCACHE_CACHE_DIR", "/srv/cache")
        config = load_config_hierarchy()
        assert config["settings"]["cache_dir"] == "/srv/cache"
        assert config["settings"]["folder_depth"] == "6"

    def test_runtime_beats_env(self, monkeypatch):
        monkeypatch.setenv("IMGCACHE_MAX_DAYS", "14")
        assert load_config_hierarchy(max_days=3)["max_days"] == 3

    def test_project_config(self, isolated):
        (isolated / "imgcache.yaml").write_text(
            "max_days: 90\nsettings:\n  cache_dir: /data/cache\n  folder_depth: 3\n"
        )
        config = load_config_hierarchy()
        assert config["max_days"] == 90
        assert config["settings"]["cache_dir"] == "/data/cache"
        assert config["settings"]["folder_depth"] == "3"
        assert config["settings"]["virtual_cache_path"] == "/app_data/cache"

    def test_project_config_found_from_subdirectory(self, isolated, monkeypatch):
        (isolated / "imgcache.yaml").write_text("browser_max_days: 1\n")
        nested = isolated / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        assert load_config_hierarchy()["browser_max_days"] == 1

    def test_global_config(self, tmp_path):
        global_path = tmp_path / "global" / "config.yaml"
        global_path.parent.mkdir()
        global_path.write_text("max_days: 60\n")
        assert load_config_hierarchy()["max_days"] == 60

    def test_project_beats_global(self, tmp_path, isolated):
        global_path = tmp_path / "global" / "config.yaml"
        global_path.parent.mkdir()
        global_path.write_text("max_days: 60\n")
        (isolated / "imgcache.yaml").write_text("max_days: 90\n")
        assert load_config_hierarchy()["max_days"] == 90

    def test_non_mapping_settings_ignored(self, isolated):
        (isolated / "imgcache.yaml").write_text("settings: [1, 2]\n")
        assert load_config_hierarchy()["settings"]["folder_depth"] == "6"


class TestLoadYamlConfig:
    def test_missing_file(self, tmp_path):
        assert _load_yaml_config(tmp_path / "missing.yaml") is None

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        assert _load_yaml_config(path) is None

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("key: [unclosed\n")
        assert _load_yaml_config(path) is None


class TestCoerceEnvValue:
    def test_int(self):
        assert _coerce_env_value("max_days", "5") == 5

    def test_bad_int_kept_as_string(self):
        assert _coerce_env_value("max_days", "five") == "five"

    def test_bool(self):
        assert _coerce_env_value("key_includes_querystring", "0") is False
        assert _coerce_env_value("key_includes_querystring", "TRUE") is True

    def test_untyped(self):
        assert _coerce_env_value("backend", "disk") == "disk"
