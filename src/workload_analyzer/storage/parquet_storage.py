"""
Parquet storage implementation using Polars.
"""

import logging
from pathlib import Path
from typing import List, Literal, Optional

import polars as pl

from .base import DataStorage, PathLike

logger = logging.getLogger(__name__)


class ParquetStorage(DataStorage):
    """
    Columnar table storage with compression.

    Column pruning on load keeps plotting of large exports cheap.
    """

    def __init__(self, compression: Literal["snappy", "gzip", "brotli", "lz4", "zstd"] = "snappy"):
        self.compression = compression
        logger.debug(f"Initialized ParquetStorage with compression: {compression}")

    @property
    def extension(self) -> str:
        return ".parquet"

    def save_dataframe(self, df: pl.DataFrame, path: PathLike) -> None:
        try:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            df.write_parquet(path, compression=self.compression)
            logger.debug(f"Saved DataFrame with {len(df)} rows to {path}")
        except Exception as e:
            logger.error(f"Failed to save DataFrame to {path}: {e}")
            raise

    def load_dataframe(self, path: PathLike, columns: Optional[List[str]] = None) -> pl.DataFrame:
        try:
            if columns:
                df = pl.read_parquet(path, columns=columns)
                logger.debug(f"Loaded DataFrame with columns {columns} from {path}")
            else:
                df = pl.read_parquet(path)
                logger.debug(f"Loaded DataFrame with {len(df)} rows from {path}")
            return df
        except Exception as e:
            logger.error(f"Failed to load DataFrame from {path}: {e}")
            raise
