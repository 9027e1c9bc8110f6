"""covtrace metrics command - compute file metrics from Clover reports."""

from pathlib import Path

import click

from covtrace.cli.utils import emit, for_each_report, format_option, get_config, resolve_formats
from covtrace.core.progress import pluralize
from covtrace.coverage.builder import CloverParser
from covtrace.coverage.metrics import collect_file_metrics


@click.command()
@click.argument("paths", nargs=-1, type=click.Path(path_type=Path))
@click.option("--path", "file_path", default=None, help="Only the file listed under this path")
@format_option
@click.pass_context
def metrics_command(
    ctx: click.Context,
    paths: tuple[Path, ...],
    file_path: str | None,
    formats: tuple[str, ...],
) -> None:
    """Compute statement, method and conditional counts per source file."""
    parser = CloverParser()
    output_formats = resolve_formats(ctx, formats)
    indent = get_config(ctx).output.indent

    def handle(path: Path) -> str:
        report = parser.parse(path)
        entries = collect_file_metrics(report.project, file_path)
        emit(entries, output_formats, indent=indent)
        return pluralize(len(entries), "file")

    for_each_report(paths, handle, desc="Computing")
