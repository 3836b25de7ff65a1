"""
Abstract base class for table storage implementations.

This module defines the DataStorage abstract base class shared by the CSV
and Parquet backends. Backends differ only in how they write and read
tables; small structured documents (the analysis summary) are always
written as indented JSON for readability, whatever the table format.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import polars as pl

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class DataStorage(ABC):
    """Abstract base class for table storage implementations."""

    @property
    @abstractmethod
    def extension(self) -> str:
        """File extension of the tables written by this backend, with the dot."""

    @abstractmethod
    def save_dataframe(self, df: pl.DataFrame, path: PathLike) -> None:
        """
        Save a Polars DataFrame to the specified path.

        Args:
            df: Polars DataFrame to save
            path: File path to save to
        """

    @abstractmethod
    def load_dataframe(self, path: PathLike, columns: Optional[List[str]] = None) -> pl.DataFrame:
        """
        Load a Polars DataFrame from the specified path.

        Args:
            path: File path to load from
            columns: Optional list of columns to load

        Returns:
            Loaded Polars DataFrame
        """

    def table_path(self, directory: PathLike, name: str) -> Path:
        """Path of the table ``name`` inside ``directory`` for this backend."""
        return Path(directory) / f"{name}{self.extension}"

    def save_dict(self, data: Dict[str, Any], path: PathLike) -> None:
        """Save dictionary data as indented JSON."""
        try:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            logger.debug(f"Saved dictionary data to {path}")
        except Exception as e:
            logger.error(f"Failed to save dictionary to {path}: {e}")
            raise

    def load_dict(self, path: PathLike) -> Dict[str, Any]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except Exception as e:
            logger.error(f"Failed to load dictionary from {path}: {e}")
            raise

    def file_exists(self, path: PathLike) -> bool:
        return Path(path).exists()

    def get_file_size(self, path: PathLike) -> int:
        """File size in bytes, 0 if the file does not exist."""
        try:
            return Path(path).stat().st_size
        except FileNotFoundError:
            return 0
