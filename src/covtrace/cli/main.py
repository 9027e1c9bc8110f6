"""covtrace CLI - covtrace command."""

from pathlib import Path

import click

from covtrace.cli.clover import clover_command
from covtrace.cli.index import index_command
from covtrace.cli.metrics import metrics_command
from covtrace.cli.results import results_command
from covtrace.config.loader import load_config
from covtrace.core.errors import ConfigError
from covtrace.core.logging import configure_logging, set_run_id


@click.group()
@click.version_option(version="0.1.0", prog_name="covtrace")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ./covtrace.yaml if present)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """covtrace - Clover coverage and test result tooling."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(e.message) from e

    if verbose:
        config.logging.level = "DEBUG"

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config
    configure_logging(config=config.logging)
    set_run_id()


cli.add_command(clover_command, name="clover")
cli.add_command(results_command, name="results")
cli.add_command(metrics_command, name="metrics")
cli.add_command(index_command, name="index")


if __name__ == "__main__":
    cli()
