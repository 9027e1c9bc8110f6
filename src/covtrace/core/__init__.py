"""Core module exports."""

from covtrace.core.errors import (
    ConfigError,
    CovtraceError,
    ErrorCode,
    IndexStoreError,
    ReportError,
)
from covtrace.core.logging import (
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)
from covtrace.core.progress import pluralize, progress, status

__all__ = [
    # Errors
    "ConfigError",
    "CovtraceError",
    "ErrorCode",
    "IndexStoreError",
    "ReportError",
    # Logging
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
    # Progress
    "pluralize",
    "progress",
    "status",
]
