"""covtrace error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 7xxx: Report ingest
- 8xxx: Index store
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Report ingest (7xxx)
    MALFORMED_INPUT = 7001
    UNRECOGNIZED_FORMAT = 7002
    UNEXPECTED_COVERAGE_TYPE = 7003
    UNSUPPORTED_OUTPUT_FORMAT = 7004

    # Index store (8xxx)
    INDEX_CAPACITY_EXCEEDED = 8001


@dataclass(frozen=True, slots=True)
class CovtraceError(Exception):
    """Base error with structured context for diagnostics."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'MALFORMED_INPUT')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(CovtraceError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class ReportError(CovtraceError):
    """Errors raised while reading coverage or test-result reports.

    MALFORMED_INPUT and UNRECOGNIZED_FORMAT abort one input file.
    UNEXPECTED_COVERAGE_TYPE is local to one line and is reported as a
    diagnostic rather than raised out of a parser.
    """

    @classmethod
    def malformed_input(cls, source: str, reason: str) -> "ReportError":
        return cls(
            code=ErrorCode.MALFORMED_INPUT,
            message=f"Cannot parse {source}: {reason}",
            details={"source": source, "reason": reason},
        )

    @classmethod
    def unrecognized_format(cls, source: str, expected: str) -> "ReportError":
        return cls(
            code=ErrorCode.UNRECOGNIZED_FORMAT,
            message=f"{source} is not a valid {expected} report",
            details={"source": source, "expected": expected},
        )

    @classmethod
    def unexpected_coverage_type(cls, value: str, line: int, path: str = "") -> "ReportError":
        return cls(
            code=ErrorCode.UNEXPECTED_COVERAGE_TYPE,
            message=f"Unexpected coverage type {value!r} at {path or '<unknown>'}:{line}",
            details={"type": value, "line": line, "path": path},
        )

    @classmethod
    def unsupported_output(cls, fmt: str, valid: list[str]) -> "ReportError":
        return cls(
            code=ErrorCode.UNSUPPORTED_OUTPUT_FORMAT,
            message=f"Unsupported output format: {fmt!r}. Valid formats: {', '.join(valid)}",
            details={"format": fmt, "valid": valid},
        )


class IndexStoreError(CovtraceError):
    """Index store errors."""

    @classmethod
    def capacity_exceeded(cls, table: str, width: int) -> "IndexStoreError":
        return cls(
            code=ErrorCode.INDEX_CAPACITY_EXCEEDED,
            message=f"Table '{table}' is full for {width}-bit handles",
            details={"table": table, "width": width},
        )

