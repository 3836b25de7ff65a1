"""
Unit tests for the CSV and Parquet storage implementations.
"""

from pathlib import Path

import polars as pl
import pytest

from workload_analyzer.storage.csv_storage import CsvStorage
from workload_analyzer.storage.parquet_storage import ParquetStorage


@pytest.fixture
def sample_df():
    return pl.DataFrame(
        {
            "timestamp": ["2024-01-01T00:00:00+00:00", "2024-01-01T00:01:00+00:00"],
            "workload": ["W1", "W2"],
            "change": [1.25, -3.5],
        }
    )


class TestParquetStorage:
    """Test cases for ParquetStorage class."""

    def test_initialization(self):
        """Test ParquetStorage initialization."""
        storage = ParquetStorage()
        assert storage.compression == "snappy"

        storage = ParquetStorage(compression="gzip")
        assert storage.compression == "gzip"

    def test_save_load_dataframe(self, sample_df, temp_dir):
        """Test saving and loading a DataFrame."""
        storage = ParquetStorage()
        file_path = temp_dir / "nested" / "test.parquet"

        storage.save_dataframe(sample_df, str(file_path))

        assert file_path.exists()
        loaded_df = storage.load_dataframe(str(file_path))
        assert loaded_df.columns == sample_df.columns
        assert loaded_df["workload"].to_list() == ["W1", "W2"]
        assert loaded_df["change"].to_list() == [1.25, -3.5]

    def test_load_dataframe_with_column_pruning(self, sample_df, temp_dir):
        """Test loading only selected columns."""
        storage = ParquetStorage(compression="zstd")
        file_path = temp_dir / "test.parquet"
        storage.save_dataframe(sample_df, file_path)

        loaded_df = storage.load_dataframe(file_path, columns=["workload"])

        assert loaded_df.columns == ["workload"]

    def test_table_path(self, temp_dir):
        assert ParquetStorage().table_path(temp_dir, "aggregate_volatility") == (
            temp_dir / "aggregate_volatility.parquet"
        )

    def test_load_missing_file(self, temp_dir):
        with pytest.raises(Exception):
            ParquetStorage().load_dataframe(temp_dir / "missing.parquet")


class TestCsvStorage:
    """Test cases for CsvStorage class."""

    def test_save_load_dataframe(self, sample_df, temp_dir):
        storage = CsvStorage()
        file_path = storage.table_path(temp_dir, "workload_volatility_intervals")

        storage.save_dataframe(sample_df, file_path)

        assert file_path.name == "workload_volatility_intervals.csv"
        loaded_df = storage.load_dataframe(file_path)
        assert loaded_df.columns == ["timestamp", "workload", "change"]
        assert loaded_df["change"].to_list() == [1.25, -3.5]

    def test_column_selection(self, sample_df, temp_dir):
        storage = CsvStorage()
        file_path = temp_dir / "test.csv"
        storage.save_dataframe(sample_df, file_path)

        loaded_df = storage.load_dataframe(file_path, columns=["change"])

        assert loaded_df.columns == ["change"]


class TestDocumentHelpers:
    """Test cases for the shared JSON and file helpers."""

    def test_save_load_dict(self, temp_dir):
        storage = CsvStorage()
        path = temp_dir / "docs" / "summary.json"
        data = {"workload_count": 2, "tiers": {"high": ["W1"]}}

        storage.save_dict(data, path)

        assert storage.load_dict(path) == data

    def test_file_helpers(self, temp_dir):
        storage = ParquetStorage()
        path = Path(temp_dir) / "file.txt"

        assert storage.file_exists(path) is False
        assert storage.get_file_size(path) == 0

        path.write_text("12345", encoding="utf-8")

        assert storage.file_exists(path) is True
        assert storage.get_file_size(path) == 5
