"""
Validation and error handling for the workload_analyzer package.

This module provides the analysis exception hierarchy, input validation
and error handling with consistent error reporting across the application.
"""

from .exceptions import (
    AnalysisError,
    EmptySeriesError,
    ErrorSeverity,
    MalformedInputError,
    NoDataError,
    UndefinedRatioError,
    UnsynchronizedChannelsError,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
    handle_file_error,
)

from .validators import (
    validate_enum_choice,
    validate_file_affix,
    validate_path_exists,
    validate_positive_float,
    validate_positive_integer,
)

__all__ = [
    # Exceptions
    "AnalysisError",
    "EmptySeriesError",
    "ErrorSeverity",
    "MalformedInputError",
    "NoDataError",
    "UndefinedRatioError",
    "UnsynchronizedChannelsError",
    "ValidationError",
    # Handlers
    "handle_error",
    "handle_config_error",
    "handle_file_error",
    "handle_cli_error",
    # Validators
    "validate_enum_choice",
    "validate_file_affix",
    "validate_path_exists",
    "validate_positive_float",
    "validate_positive_integer",
]
