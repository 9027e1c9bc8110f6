"""CLI utilities."""

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import click
import structlog

from covtrace.config.models import CovtraceConfig
from covtrace.core.errors import ReportError
from covtrace.core.progress import pluralize, progress, status
from covtrace.output import FORMATS, encode

log = structlog.get_logger()

format_option = click.option(
    "-f",
    "--format",
    "formats",
    multiple=True,
    type=click.Choice(FORMATS),
    help="Output encoding (repeatable). Defaults to output.formats from config.",
)


def get_config(ctx: click.Context) -> CovtraceConfig:
    config: CovtraceConfig = ctx.obj["config"]
    return config


def resolve_formats(ctx: click.Context, formats: Sequence[str]) -> list[str]:
    return list(formats) if formats else list(get_config(ctx).output.formats)


def emit(model: Any, formats: Sequence[str], *, indent: int) -> None:
    """Write a model to stdout once per requested encoding."""
    for fmt in formats:
        data = encode(model, fmt, indent=indent)
        if fmt == "binary":
            click.echo(data, nl=False)
        else:
            click.echo(data.decode("utf-8"))


def for_each_report(
    paths: Sequence[Path],
    handle: Callable[[Path], str],
    *,
    desc: str,
) -> int:
    """Run handle on every report, reporting failures without stopping.

    handle returns a short summary for the success status line. A report
    that raises ReportError is reported and skipped.

    Returns:
        Number of reports that failed.
    """
    failed = 0
    for path in progress(paths, desc=desc):
        try:
            summary = handle(path)
        except ReportError as e:
            failed += 1
            log.info("report_failed", path=str(path), error=e.error_name, message=e.message)
            status(f"{path}: {e.message}", style="error")
            continue
        status(f"{path}: {summary}", style="success")

    if failed:
        status(
            f"{failed} of {pluralize(len(paths), 'report')} could not be processed",
            style="warning",
        )
    return failed
