"""Settings commands."""

import sys

import click
from rich.console import Console

from cli.utils import get_components
from moments.commands import ChangeSettings
from shared_types import Language, Permission, Theme

console = Console()


@click.group()
def settings():
    """View and change display settings."""
    pass


@settings.command("show")
def settings_show():
    """Show current settings."""
    c = get_components()
    current = c["service"].settings
    permission = c["notifier"].permission()
    console.print(f"[bold]Theme:[/] {current.theme}")
    console.print(f"[bold]Language:[/] {current.language}")
    style = "green" if permission == Permission.GRANTED else "yellow"
    console.print(f"[bold]Reminders:[/] [{style}]{permission}[/]")
    console.print(f"[dim]Data: {c['config'].paths.data_db}[/]")


@settings.command("set")
@click.option("--theme", type=click.Choice([str(t) for t in Theme]))
@click.option("--language", type=click.Choice([str(lang) for lang in Language]))
def settings_set(theme: str, language: str):
    """Change theme and/or language."""
    if not theme and not language:
        console.print("[yellow]Nothing to change. Pass --theme and/or --language.[/]")
        return

    c = get_components()
    result = c["service"].dispatch(
        ChangeSettings(
            theme=Theme(theme) if theme else None,
            language=Language(language) if language else None,
        )
    )
    if not result.accepted:
        console.print("[red]Error:[/] Could not save settings")
        sys.exit(1)
    updated = c["service"].settings
    console.print(f"[green]Saved:[/] theme={updated.theme} language={updated.language}")
