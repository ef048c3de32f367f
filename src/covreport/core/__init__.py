"""Core module exports."""

from covreport.core.console import get_console, pluralize, spinner, status
from covreport.core.errors import (
    CovReportError,
    ConfigError,
    EmptyInputError,
    ErrorCode,
    MalformedGitInfoError,
    SourceReadError,
    TraceLoadError,
    UnknownProviderError,
    UploadError,
)
from covreport.core.logging import configure_logging, get_logger

__all__ = [
    # Errors
    "ConfigError",
    "CovReportError",
    "EmptyInputError",
    "ErrorCode",
    "MalformedGitInfoError",
    "SourceReadError",
    "TraceLoadError",
    "UnknownProviderError",
    "UploadError",
    # Logging
    "configure_logging",
    "get_logger",
    # Console
    "get_console",
    "pluralize",
    "spinner",
    "status",
]
