"""
Configuration validation utilities.

This module turns the raw ``[analyzer]`` table of `config.toml` into a
validated AnalyzerConfig instance.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..models.config import AnalyzerConfig, TIER_METRICS
from ..validation import (
    ValidationError,
    validate_enum_choice,
    validate_file_affix,
    validate_positive_float,
    validate_positive_integer,
)
from .loader import resolve_config_path
from .storage_config import StorageConfig

logger = logging.getLogger(__name__)


def _validate_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be true or false, got {value!r}",
            field_name=field_name,
            value=value,
        )
    return value


def validate_analyzer_config(
    analyzer_data: Dict[str, Any], config_dir: Optional[Path] = None
) -> AnalyzerConfig:
    """
    Validate and create an AnalyzerConfig from raw configuration data.

    Missing keys fall back to the AnalyzerConfig defaults.

    Args:
        analyzer_data: Raw ``[analyzer]`` table from TOML
        config_dir: Directory relative paths are resolved against

    Returns:
        Validated AnalyzerConfig instance

    Raises:
        ValidationError: If validation fails
    """
    defaults = AnalyzerConfig()
    config_dir = config_dir or Path(".")

    general = analyzer_data.get("general", {})
    volatility = analyzer_data.get("volatility", {})
    peak = analyzer_data.get("peak", {})
    execution = analyzer_data.get("execution", {})
    generation = analyzer_data.get("generation", {})
    storage_settings = analyzer_data.get("storage", {})

    # --- [analyzer.general] ---
    input_dir = resolve_config_path(general.get("input_dir", defaults.input_dir), config_dir)
    output_dir = resolve_config_path(general.get("output_dir", defaults.output_dir), config_dir)
    file_prefix = validate_file_affix(
        general.get("file_prefix", defaults.file_prefix),
        field_name="analyzer.general.file_prefix",
    )
    file_suffix = validate_file_affix(
        general.get("file_suffix", defaults.file_suffix),
        field_name="analyzer.general.file_suffix",
        allow_empty=False,
    )
    skip_plots = _validate_bool(
        general.get("skip_plots", defaults.skip_plots), "analyzer.general.skip_plots"
    )

    # --- [analyzer.volatility] ---
    window_minutes = validate_positive_float(
        volatility.get("window_minutes", defaults.window_minutes),
        min_value=0.0,
        max_value=24 * 60.0,
        field_name="analyzer.volatility.window_minutes",
    )
    interval_size = validate_positive_integer(
        volatility.get("interval_size", defaults.interval_size),
        min_value=1,
        field_name="analyzer.volatility.interval_size",
    )
    aggregate_interval = validate_positive_integer(
        volatility.get("aggregate_interval", defaults.aggregate_interval),
        min_value=1,
        field_name="analyzer.volatility.aggregate_interval",
    )
    tier_metric = validate_enum_choice(
        volatility.get("tier_metric", defaults.tier_metric),
        choices=list(TIER_METRICS),
        field_name="analyzer.volatility.tier_metric",
        case_sensitive=False,
    )

    # --- [analyzer.peak] ---
    top_divisor = validate_positive_integer(
        peak.get("top_divisor", defaults.top_divisor),
        min_value=1,
        field_name="analyzer.peak.top_divisor",
    )

    # --- [analyzer.execution] ---
    parallel = _validate_bool(
        execution.get("parallel", defaults.parallel), "analyzer.execution.parallel"
    )
    max_workers = validate_positive_integer(
        execution.get("max_workers", defaults.max_workers),
        min_value=1,
        max_value=256,
        field_name="analyzer.execution.max_workers",
    )
    thread_name_prefix = str(
        execution.get("thread_name_prefix", defaults.thread_name_prefix)
    )
    shutdown_timeout = validate_positive_float(
        execution.get("shutdown_timeout", defaults.shutdown_timeout),
        min_value=0.1,
        max_value=600.0,
        field_name="analyzer.execution.shutdown_timeout",
    )

    # --- [analyzer.generation] ---
    volatile_percentage = validate_positive_integer(
        generation.get("volatile_percentage", defaults.volatile_percentage),
        min_value=0,
        max_value=100,
        field_name="analyzer.generation.volatile_percentage",
    )
    samples_per_load = validate_positive_integer(
        generation.get("samples_per_load", defaults.samples_per_load),
        min_value=1,
        field_name="analyzer.generation.samples_per_load",
    )

    # --- [analyzer.storage] ---
    try:
        storage = StorageConfig.from_dict(storage_settings)
    except ValueError as e:
        raise ValidationError(str(e), field_name="analyzer.storage", value=storage_settings)

    logger.debug(
        f"Validated analyzer config: window={window_minutes}min, interval={interval_size}, "
        f"tier_metric={tier_metric}, storage={storage.format}"
    )

    return AnalyzerConfig(
        input_dir=input_dir,
        output_dir=output_dir,
        file_prefix=file_prefix,
        file_suffix=file_suffix,
        skip_plots=skip_plots,
        window_minutes=window_minutes,
        interval_size=interval_size,
        aggregate_interval=aggregate_interval,
        tier_metric=tier_metric,
        top_divisor=top_divisor,
        parallel=parallel,
        max_workers=max_workers,
        thread_name_prefix=thread_name_prefix,
        shutdown_timeout=shutdown_timeout,
        volatile_percentage=volatile_percentage,
        samples_per_load=samples_per_load,
        storage=storage,
    )
