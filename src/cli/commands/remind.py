"""Reminder CLI command."""

import click
from rich.console import Console

from cli.utils import get_components
from moments.analytics import days_remaining
from moments.commands import RequestPermission
from shared_types import Permission

console = Console()


@click.command()
@click.option("--request-permission", is_flag=True, help="Allow reminders to be shown")
def remind(request_permission: bool):
    """Show reminders for moments due today or tomorrow (once per day each)."""
    c = get_components()
    service = c["service"]

    if not c["config"].reminders.enabled:
        console.print("[yellow]Reminders are disabled in config.[/]")
        return

    if request_permission:
        result = service.dispatch(RequestPermission())
        if not result.accepted:
            console.print("[red]Permission denied.[/]")
            return
        console.print("[green]Reminders enabled.[/]")
        # dispatch already evaluated reminders after the grant
        sent = result.reminders
    else:
        if c["notifier"].permission() != Permission.GRANTED:
            console.print(
                "[yellow]Reminders are not enabled.[/] Run `moments remind --request-permission`."
            )
            return
        sent = service.evaluate_reminders()

    if sent:
        return

    due = c["scheduler"].due(c["repository"].snapshot(), service.clock())
    if due:
        console.print("[dim]Already reminded today:[/]")
        for m in due:
            console.print(f"  {days_remaining(m.date, service.clock())}d  {m.title}")
    else:
        console.print("[dim]Nothing due today or tomorrow.[/]")
