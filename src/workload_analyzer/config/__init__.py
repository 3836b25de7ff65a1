"""
Configuration management for the workload_analyzer package.

This module provides a clean interface for loading, validating, and accessing
configuration data from a TOML file with singleton pattern management.
"""

from .manager import (
    clear_config_cache,
    get_config,
    get_config_info,
    is_config_loaded,
    reset_config_path,
    set_config_path,
)
from .loader import load_main_config, load_toml_file, resolve_config_path
from .storage_config import StorageConfig
from .validators import validate_analyzer_config

__all__ = [
    # Main interface
    "get_config",
    "set_config_path",
    "reset_config_path",
    "clear_config_cache",
    "is_config_loaded",
    "get_config_info",
    # Advanced interface
    "load_toml_file",
    "load_main_config",
    "resolve_config_path",
    "validate_analyzer_config",
    "StorageConfig",
]
