"""
Configuration management and singleton pattern.

This module provides the main configuration loading and management interface,
implementing a singleton pattern to ensure configuration is loaded only once.
"""

import logging
from pathlib import Path
from typing import Optional

from ..models.config import AnalyzerConfig, AppConfig
from ..validation import handle_config_error, ErrorSeverity
from .loader import load_main_config
from .validators import validate_analyzer_config

logger = logging.getLogger(__name__)

# --- Global Singleton for Configuration ---

# This global variable will hold the single instance of the loaded AppConfig.
_CONFIG: Optional[AppConfig] = None

# Default location of the main configuration file, relative to this module.
# Overridden by the CLI's --config option and by tests.
_DEFAULT_CONFIG_FILE_PATH = Path(__file__).parent.parent.parent.parent / "conf" / "config.toml"
_CONFIG_FILE_PATH = _DEFAULT_CONFIG_FILE_PATH


def set_config_path(config_path: Path) -> None:
    """
    Set a custom configuration file path.

    Args:
        config_path: Path to the main config.toml file

    Note:
        The cached configuration is dropped so the next call to get_config()
        loads from the new path.
    """
    global _CONFIG_FILE_PATH, _CONFIG
    _CONFIG_FILE_PATH = Path(config_path)
    _CONFIG = None
    logger.info(f"Configuration path set to: {config_path}")


def clear_config_cache() -> None:
    """Clear the cached configuration, forcing a reload on next access."""
    global _CONFIG
    _CONFIG = None
    logger.debug("Configuration cache cleared")


def reset_config_path() -> None:
    """Restore the default configuration path and drop the cache."""
    global _CONFIG_FILE_PATH, _CONFIG
    _CONFIG_FILE_PATH = _DEFAULT_CONFIG_FILE_PATH
    _CONFIG = None


def _load_config(config_path: Path) -> AppConfig:
    """
    Load the complete application configuration from a TOML file.

    If the default configuration file is absent, built-in defaults are used.
    A missing file at an explicitly configured path is an error.

    Raises:
        FileNotFoundError: If an explicitly configured file is missing
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
    """
    if config_path == _DEFAULT_CONFIG_FILE_PATH and not config_path.exists():
        logger.warning(
            f"Default configuration file not found at {config_path}; using built-in defaults"
        )
        return AppConfig(analyzer=AnalyzerConfig(), source_path=None)

    try:
        main_config_data = load_main_config(config_path)
        analyzer_config = validate_analyzer_config(
            main_config_data.get("analyzer", {}), config_dir=config_path.parent
        )
        logger.info(f"Successfully loaded configuration from {config_path}")
        return AppConfig(analyzer=analyzer_config, source_path=config_path)

    except FileNotFoundError as e:
        handle_config_error(
            error=e,
            context="loading configuration file",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise
    except Exception as e:
        handle_config_error(
            error=e,
            context="processing configuration",
            severity=ErrorSeverity.ERROR,
            reraise=True,
            logger=logger
        )
        raise


def get_config() -> AppConfig:
    """
    Get the global application configuration, loading it if necessary.

    Returns:
        The singleton AppConfig instance
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = _load_config(_CONFIG_FILE_PATH)
    return _CONFIG


def is_config_loaded() -> bool:
    return _CONFIG is not None


def get_config_info() -> dict:
    """
    Get information about the current configuration state.

    Returns:
        Dictionary with configuration metadata
    """
    return {
        "config_loaded": is_config_loaded(),
        "config_path": str(_CONFIG_FILE_PATH),
        "source_path": str(_CONFIG.source_path) if _CONFIG and _CONFIG.source_path else None,
    }
