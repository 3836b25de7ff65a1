"""
Command-line interface for the workload_analyzer package.

This module provides the main CLI entry point for the analyzer.
"""

from .main import main_cli

__all__ = [
    "main_cli",
]
