"""
Storage configuration model and validation.

This module defines the StorageConfig dataclass which selects the tabular
format used by the report exporter and, for Parquet, its compression codec.
"""

from dataclasses import dataclass
from typing import Any, Dict, Literal

SUPPORTED_FORMATS = ("csv", "parquet")
SUPPORTED_COMPRESSIONS = ("snappy", "gzip", "brotli", "lz4", "zstd")


@dataclass
class StorageConfig:
    """
    Configuration model for exported table storage.

    Attributes:
        format: Tabular output format
            - 'csv': Plain text tables, readable by spreadsheets and the plotter
            - 'parquet': Columnar format with compression
        compression: Compression algorithm for Parquet format

    Note:
        Compression setting only applies to Parquet format. CSV tables
        are always written uncompressed.
    """

    format: Literal["csv", "parquet"] = "csv"
    compression: Literal["snappy", "gzip", "brotli", "lz4", "zstd"] = "snappy"

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "StorageConfig":
        """
        Create a StorageConfig instance from a dictionary.

        Raises:
            ValueError: If invalid configuration values are provided
        """
        format_type = config_dict.get("format", "csv")
        compression = config_dict.get("compression", "snappy")

        if format_type not in SUPPORTED_FORMATS:
            raise ValueError(f"Unsupported storage format: {format_type}")

        if format_type == "parquet" and compression not in SUPPORTED_COMPRESSIONS:
            raise ValueError(f"Unsupported compression algorithm: {compression}")

        return cls(format=format_type, compression=compression)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "format": self.format,
            "compression": self.compression,
        }
