"""
Unit tests for storage configuration.
"""

import pytest

from workload_analyzer.config.storage_config import StorageConfig


class TestStorageConfig:
    """Test cases for StorageConfig class."""

    def test_default_values(self):
        """Test default values."""
        config = StorageConfig()
        assert config.format == "csv"
        assert config.compression == "snappy"

    def test_from_dict(self):
        """Test creating from dictionary."""
        config = StorageConfig.from_dict({"format": "parquet", "compression": "gzip"})

        assert config.format == "parquet"
        assert config.compression == "gzip"

    def test_from_dict_defaults(self):
        """Test creating from dictionary with defaults."""
        config = StorageConfig.from_dict({})

        assert config == StorageConfig()

    def test_from_dict_invalid_format(self):
        """Test creating from dictionary with invalid format."""
        with pytest.raises(ValueError) as excinfo:
            StorageConfig.from_dict({"format": "json"})

        assert "Unsupported storage format" in str(excinfo.value)

    def test_from_dict_invalid_compression(self):
        """Test that compression is only checked for Parquet."""
        with pytest.raises(ValueError) as excinfo:
            StorageConfig.from_dict({"format": "parquet", "compression": "rar"})

        assert "Unsupported compression algorithm" in str(excinfo.value)
        assert StorageConfig.from_dict({"format": "csv", "compression": "rar"}).format == "csv"

    def test_to_dict(self):
        """Test converting to dictionary."""
        config = StorageConfig(format="parquet", compression="zstd")

        assert config.to_dict() == {"format": "parquet", "compression": "zstd"}
        assert StorageConfig.from_dict(config.to_dict()) == config
