"""
Unit tests for the configuration singleton and TOML loading.
"""

import tomllib

import pytest

from workload_analyzer.config import (
    clear_config_cache,
    get_config,
    get_config_info,
    is_config_loaded,
    load_toml_file,
    reset_config_path,
    resolve_config_path,
    set_config_path,
)
from workload_analyzer.validation import ValidationError


@pytest.mark.unit
class TestConfigManager:
    """Test cases for loading and caching the application configuration."""

    def test_get_config_loads_from_set_path(self, config_files):
        set_config_path(config_files["config"])

        config = get_config()

        assert config.source_path == config_files["config"]
        assert config.analyzer.input_dir == config_files["dir"] / "data"
        assert config.analyzer.max_workers == 2

    def test_config_is_cached(self, config_files):
        set_config_path(config_files["config"])

        assert get_config() is get_config()
        assert is_config_loaded() is True

    def test_clear_cache_forces_reload(self, config_files):
        set_config_path(config_files["config"])
        first = get_config()

        clear_config_cache()

        assert is_config_loaded() is False
        assert get_config() is not first

    def test_config_info(self, config_files):
        set_config_path(config_files["config"])
        assert get_config_info()["source_path"] is None

        get_config()
        info = get_config_info()

        assert info["config_loaded"] is True
        assert info["config_path"] == str(config_files["config"])
        assert info["source_path"] == str(config_files["config"])

    def test_explicit_missing_file_raises(self, temp_dir):
        set_config_path(temp_dir / "missing.toml")

        with pytest.raises(FileNotFoundError):
            get_config()

    def test_malformed_toml_raises(self, temp_dir):
        bad = temp_dir / "bad.toml"
        bad.write_text("[analyzer\nparallel = ", encoding="utf-8")
        set_config_path(bad)

        with pytest.raises(tomllib.TOMLDecodeError):
            get_config()

    def test_invalid_values_raise(self, config_files):
        bad =config_files["dir"] / "invalid.toml"
        bad.write_text('[analyzer.peak]\ntop_divisor = 0\n', encoding="utf-8")
        set_config_path(bad)

        with pytest.raises(ValidationError):
            get_config()

    def test_reset_restores_default_path(self, config_files):
        default_path = get_config_info()["config_path"]
        set_config_path(config_files["config"])

        reset_config_path()

        assert get_config_info()["config_path"] == default_path
        assert is_config_loaded() is False


@pytest.mark.unit
class TestConfigLoader:
    """Test cases for the low-level TOML helpers."""

    def test_load_toml_file(self, config_files):
        data = load_toml_file(config_files["config"])

        assert data["analyzer"]["peak"]["top_divisor"] == 10

    def test_load_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            load_toml_file(temp_dir / "nothing.toml")

    def test_resolve_config_path(self, temp_dir):
        assert resolve_config_path("data", temp_dir) == temp_dir / "data"
        assert resolve_config_path(str(temp_dir), temp_dir / "x") == temp_dir
