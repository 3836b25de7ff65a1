"""
Exception types and error handling helpers.

This module provides the exception hierarchy raised by the statistics engine
and the ingestion boundary, together with the small set of helpers used to
log and optionally re-raise errors consistently across the application.
"""

import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ValidationError(Exception):
    """
    Exception raised when validation of configuration or arguments fails.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class AnalysisError(Exception):
    """Base class for errors raised while analyzing workload data."""


class MalformedInputError(AnalysisError):
    """
    Raised when a workload source record cannot be parsed.

    The offending source (usually a file path) is kept so that the caller can
    report it and carry on with the remaining sources.
    """

    def __init__(self, message: str, source: Union[str, Path, None] = None):
        super().__init__(f"{source}: {message}" if source else message)
        self.source = str(source) if source is not None else None


class EmptySeriesError(AnalysisError):
    """Raised when an estimator needs at least one sample and got none."""

    def __init__(self, message: str = "series is empty", channel: Optional[str] = None):
        super().__init__(f"{channel}: {message}" if channel else message)
        self.channel = channel


class UndefinedRatioError(AnalysisError):
    """Raised when a ratio has a zero or negative denominator and no fallback applies."""

    def __init__(self, message: str, denominator: float = 0.0):
        super().__init__(message)
        self.denominator = denominator


class UnsynchronizedChannelsError(AnalysisError):
    """Raised when the channels of a workload do not have the same length."""

    def __init__(self, workload_name: str, lengths: tuple):
        super().__init__(
            f"workload '{workload_name}' has unsynchronized load arrays: lengths {lengths}"
        )
        self.workload_name = workload_name
        self.lengths = lengths


class NoDataError(AnalysisError):
    """Raised when the workload collection is empty."""


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Handle errors with consistent logging and optional re-raising.

    Args:
        error: The exception that occurred
        context: Context description of where the error occurred
        severity: Severity level for logging
        reraise: Whether to re-raise the exception after logging
        logger: Logger instance to use (defaults to module logger)
    """
    effective_logger = logger or globals()['logger']

    error_msg = f"Error in {context}: {error}"

    # Handle both enum and string severity values
    if isinstance(severity, str):
        severity_str = severity.lower()
    else:
        severity_str = severity.value

    if severity_str == "debug":
        effective_logger.debug(error_msg, exc_info=True)
    elif severity_str == "info":
        effective_logger.info(error_msg)
    elif severity_str == "warning":
        effective_logger.warning(error_msg)
    elif severity_str == "error":
        effective_logger.error(error_msg)
    elif severity_str == "critical":
        effective_logger.critical(error_msg, exc_info=True)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_file_error(error: Exception, context: str, **kwargs) -> None:
    """Handle file-related errors."""
    handle_error(error, f"file {context}", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """Handle CLI-related errors by logging them and exiting."""
    exit_code = kwargs.pop('exit_code', 1)
    include_traceback = kwargs.pop('include_traceback', False)

    severity = kwargs.pop('severity', ErrorSeverity.CRITICAL if include_traceback else ErrorSeverity.ERROR)
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)

    sys.exit(exit_code)
