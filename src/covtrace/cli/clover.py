"""covtrace clover command - print the coverage tree of Clover reports."""

from pathlib import Path

import click

from covtrace.cli.utils import emit, for_each_report, format_option, get_config, resolve_formats
from covtrace.core.progress import pluralize
from covtrace.coverage.builder import CloverParser


@click.command()
@click.argument("paths", nargs=-1, type=click.Path(path_type=Path))
@format_option
@click.pass_context
def clover_command(ctx: click.Context, paths: tuple[Path, ...], formats: tuple[str, ...]) -> None:
    """Parse Clover coverage reports and print their coverage trees.

    PATHS are Clover XML files, or directories containing clover.xml.
    """
    parser = CloverParser()
    output_formats = resolve_formats(ctx, formats)
    indent = get_config(ctx).output.indent

    def handle(path: Path) -> str:
        report = parser.parse(path)
        emit(report.project, output_formats, indent=indent)
        summary = pluralize(len(report.project.files), "file")
        if report.diagnostics:
            summary += f", {pluralize(len(report.diagnostics), 'line')} skipped"
        return summary

    for_each_report(paths, handle, desc="Parsing")
