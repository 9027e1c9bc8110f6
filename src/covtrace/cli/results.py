"""covtrace results command - print parsed test result reports."""

from pathlib import Path

import click

from covtrace.cli.utils import emit, for_each_report, format_option, get_config, resolve_formats
from covtrace.core.progress import pluralize
from covtrace.results import parse_test_results


@click.command()
@click.argument("paths", nargs=-1, type=click.Path(path_type=Path))
@format_option
@click.pass_context
def results_command(ctx: click.Context, paths: tuple[Path, ...], formats: tuple[str, ...]) -> None:
    """Parse <testsuites> test result reports and print them."""
    output_formats = resolve_formats(ctx, formats)
    indent = get_config(ctx).output.indent

    def handle(path: Path) -> str:
        suites = parse_test_results(path)
        emit(suites, output_formats, indent=indent)
        failing = sum(1 for suite in suites if suite.failed)
        return f"{pluralize(len(suites), 'suite')}, {failing} failing"

    for_each_report(paths, handle, desc="Parsing")
