"""Config module exports."""

from covtrace.config.loader import load_config
from covtrace.config.models import (
    CovtraceConfig,
    IndexConfig,
    LoggingConfig,
    LogOutputConfig,
    OutputConfig,
)

__all__ = [
    "load_config",
    "CovtraceConfig",
    "IndexConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "OutputConfig",
]
