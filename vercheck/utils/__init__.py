"""Utility modules for VERCHECK.

This package contains:
- console: Rich-based terminal output utilities
- errors: Custom exceptions and exit codes
- logging: Logging configuration
"""

from vercheck.utils.console import (
    console,
    print_error,
    print_header,
    print_info,
    print_success,
    print_warning,
)
from vercheck.utils.errors import (
    ExitCode,
    FetchFailedError,
    InvalidVersionFormatError,
    ManifestNotFoundError,
    VercheckError,
)
from vercheck.utils.logging import get_logger, log_message, setup_logging

__all__ = [
    # Console
    "console",
    "print_error",
    "print_success",
    "print_warning",
    "print_info",
    "print_header",
    # Errors
    "ExitCode",
    "VercheckError",
    "FetchFailedError",
    "InvalidVersionFormatError",
    "ManifestNotFoundError",
    # Logging
    "setup_logging",
    "get_logger",
    "log_message",
]
