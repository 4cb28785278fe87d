"""Complete, postpone and archive commands."""

import sys

import click
from rich.console import Console

from cli.utils import get_components, require_moment
from moments.commands import ArchiveMoment, CompleteMoment, Postpone
from moments.lifecycle import phase
from shared_types import MomentStatus, Phase

console = Console()


@click.command()
@click.argument("ref")
@click.option("-r", "--rating", type=click.IntRange(1, 5), prompt="Rating (1-5)")
@click.option("-l", "--lessons", default="", help="What did you learn?")
@click.option("--repeat/--no-repeat", default=False, help="Would you do it again?")
def complete(ref: str, rating: int, lessons: str, repeat: bool):
    """Mark a moment as achieved and record a reflection."""
    c = get_components()
    m = require_moment(c["repository"], ref)
    if m.status != MomentStatus.ACTIVE:
        console.print(f"[yellow]Already {m.status}:[/] {m.title}")
        sys.exit(1)

    result = c["service"].dispatch(CompleteMoment(m.id, rating, lessons, repeat))
    if not result.accepted:
        console.print("[red]Error:[/] Could not complete moment")
        sys.exit(1)
    console.print(f"[green]Completed:[/] {m.title} {'★' * rating}")


@click.command()
@click.argument("ref")
def postpone(ref: str):
    """Push a past-due moment forward by the configured number of days."""
    c = get_components()
    m = require_moment(c["repository"], ref)
    if phase(m) != Phase.PAST_DUE:
        console.print(f"[yellow]Only past-due moments can be postponed:[/] {m.title}")
        sys.exit(1)

    result = c["service"].dispatch(Postpone(m.id))
    if not result.accepted:
        console.print("[red]Error:[/] Could not postpone moment")
        sys.exit(1)
    console.print(f"[green]Postponed:[/] {m.title} -> {result.moment.date.isoformat()}")


@click.command()
@click.argument("ref")
def archive(ref: str):
    """Move a moment to history without a reflection."""
    c = get_components()
    m = require_moment(c["repository"], ref)
    result = c["service"].dispatch(ArchiveMoment(m.id))
    if not result.accepted:
        console.print(f"[yellow]Already archived:[/] {m.title}")
        sys.exit(1)
    console.print(f"[green]Archived:[/] {m.title}")
