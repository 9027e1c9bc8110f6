"""covtrace CLI."""

from covtrace.cli.main import cli

__all__ = ["cli"]
