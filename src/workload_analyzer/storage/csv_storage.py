"""
CSV storage implementation using Polars.
"""

import logging
from pathlib import Path
from typing import List, Optional

import polars as pl

from .base import DataStorage, PathLike

logger = logging.getLogger(__name__)


class CsvStorage(DataStorage):
    """
    Plain-text table storage.

    CSV is the default output format: the tables stay readable in a
    spreadsheet and diff cleanly between runs.
    """

    @property
    def extension(self) -> str:
        return ".csv"

    def save_dataframe(self, df: pl.DataFrame, path: PathLike) -> None:
        try:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            df.write_csv(path)
            logger.debug(f"Saved DataFrame with {len(df)} rows to {path}")
        except Exception as e:
            logger.error(f"Failed to save DataFrame to {path}: {e}")
            raise

    def load_dataframe(self, path: PathLike, columns: Optional[List[str]] = None) -> pl.DataFrame:
        try:
            # Infer column types from every row, not a leading sample.
            df = pl.read_csv(path, columns=columns, infer_schema_length=None)
            logger.debug(f"Loaded DataFrame with {len(df)} rows from {path}")
            return df
        except Exception as e:
            logger.error(f"Failed to load DataFrame from {path}: {e}")
            raise
