"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (COVTRACE__SECTION__KEY)
3. Project YAML (covtrace.yaml, or the path passed with --config)
4. Global YAML (~/.config/covtrace/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    COVTRACE__<SECTION>__<KEY>=<VALUE>

Examples:
    COVTRACE__LOGGING__LEVEL=DEBUG
    COVTRACE__INDEX__HANDLE_WIDTH=32
    COVTRACE__OUTPUT__FORMATS='["json", "yaml"]'
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
OutputFormat = Literal["json", "yaml", "xml", "binary"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        COVTRACE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. WARNING shows skipped lines; INFO adds one line per report.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class IndexConfig(BaseModel):
    """Index store configuration.

    Env vars:
        COVTRACE__INDEX__HANDLE_WIDTH: Handle width in bits (32 or 64)
    """

    handle_width: Literal[32, 64] = Field(
        default=64,
        description="Width of the integer handles assigned by the index store. "
        "A table refuses new entries once it would overflow this width.",
    )


class OutputConfig(BaseModel):
    """Output encoding configuration.

    Env vars:
        COVTRACE__OUTPUT__FORMATS: Default encodings when --format is not given
        COVTRACE__OUTPUT__INDENT: Indentation for text encodings
    """

    formats: list[OutputFormat] = Field(
        default_factory=lambda: ["json"],
        description="Encodings emitted for each report when the CLI gets no --format.",
    )
    indent: int = Field(
        default=2,
        description="Indentation for JSON and XML output.",
    )

    @field_validator("formats")
    @classmethod
    def validate_formats(cls, v: list[OutputFormat]) -> list[OutputFormat]:
        if not v:
            raise ValueError("At least one output format is required")
        return v

    @field_validator("indent")
    @classmethod
    def validate_indent(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"Indent must be >= 0, got {v}")
        return v


class CovtraceConfig(BaseModel):
    """Root configuration for covtrace."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    index: IndexConfig = Field(default_factory=IndexConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
