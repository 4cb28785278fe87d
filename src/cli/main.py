"""CLI entry point for moments."""

import sys

import click
from rich.console import Console

from cli.commands import (
    add,
    archive,
    complete,
    dashboard,
    delete,
    edit,
    feel,
    insight,
    list_moments,
    mood,
    plan,
    postpone,
    remind,
    select,
    settings,
    show,
    stats,
    task,
)
from cli.config import load_config_model
from cli.logging_config import setup_logging

console = Console()


@click.group()
@click.version_option(version="0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Moments - track goals and events, count down, reflect."""
    try:
        config = load_config_model()
    except ValueError as e:
        console.print(f"[red]Config error:[/] {e}")
        sys.exit(1)
    level = "DEBUG" if verbose else config.logging.level
    setup_logging(json_mode=config.logging.json_mode, level=level, log_file=config.paths.log_file)


for command in (
    add,
    list_moments,
    show,
    edit,
    delete,
    select,
    task,
    feel,
    complete,
    postpone,
    archive,
    dashboard,
    stats,
    mood,
    remind,
    plan,
    insight,
    settings,
):
    cli.add_command(command)


if __name__ == "__main__":
    cli()
