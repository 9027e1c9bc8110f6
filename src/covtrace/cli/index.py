"""covtrace index command - build a deduplicated fact index from reports."""

from pathlib import Path

import click

from covtrace.cli.utils import for_each_report, get_config
from covtrace.core.progress import pluralize, print_table
from covtrace.coverage.index import CoverageIndex
from covtrace.coverage.models import TestIdentity


@click.command()
@click.argument("paths", nargs=-1, type=click.Path(path_type=Path))
@click.option("--test-name", default=None, help="Test name for every report (default: file stem)")
@click.option("--dump", is_flag=True, help="Print every stored fact")
@click.pass_context
def index_command(
    ctx: click.Context,
    paths: tuple[Path, ...],
    test_name: str | None,
    dump: bool,
) -> None:
    """Ingest Clover reports into one index, one test per report.

    Each report is recorded as the coverage of the test identified by the
    report path and --test-name (or the report file name without extension).
    """
    index = CoverageIndex.from_config(get_config(ctx).index)

    def handle(path: Path) -> str:
        test = TestIdentity(file=str(path), name=test_name or path.stem)
        result = index.ingest_report(test, path)
        summary = pluralize(result.facts_added, "fact")
        if result.diagnostics:
            summary += f", {pluralize(len(result.diagnostics), 'line')} skipped"
        return summary

    for_each_report(paths, handle, desc="Ingesting")

    if dump:
        for fact in index.dump():
            click.echo(fact.describe())

    summary = index.summary()
    print_table(
        "Index",
        ("tests", "files", "lines", "facts"),
        [(summary.tests, summary.files, summary.lines, summary.facts)],
    )
