"""Dashboard and history statistics commands."""

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from cli.utils import get_components
from moments.analytics import (
    average_rating,
    category_distribution,
    days_remaining,
    repeatable_share,
)
from moments.catalog import CATEGORY_CONFIG, VIBE_CONFIG, category_label, vibe_label

console = Console()


@click.command()
def dashboard():
    """Overview: counts, stress vibe and the next three moments."""
    c = get_components()
    service = c["service"]
    language = service.settings.language
    summary = service.dashboard()

    vibe_style = VIBE_CONFIG[summary.vibe][1]
    console.print(
        Panel(
            f"[bold]{summary.active}[/] active  |  [bold]{summary.history}[/] done  |  "
            f"[bold]{summary.total}[/] total\n"
            f"Urgent: {summary.urgent} (within a day: {summary.very_urgent})\n"
            f"Vibe: [{vibe_style}]{vibe_label(summary.vibe, language)}[/] "
            f"[dim](stress {summary.stress_score})[/]",
            title=c["config"].reminders.app_title,
        )
    )

    if not summary.upcoming:
        console.print("[dim]Nothing coming up. Add one with `moments add`.[/]")
        return

    console.print("\n[bold]Coming up[/]")
    for m in summary.upcoming:
        days = days_remaining(m.date, service.clock())
        console.print(f"  {days:>4}d  {m.title}  [dim]{category_label(m.type, language)}[/]")

    selected = c["repository"].selected
    if selected:
        console.print(f"\n[bold]Selected:[/] {selected.title}")


@click.command()
def stats():
    """Category distribution and reflection stats for finished moments."""
    c = get_components()
    language = c["service"].settings.language
    moments = c["repository"].snapshot()
    dist = category_distribution(moments)

    if not dist:
        console.print("[yellow]No completed or archived moments yet.[/]")
        return

    total = sum(dist.values())
    table = Table(show_header=True, title="History by category")
    table.add_column("Category")
    table.add_column("Count", justify="right")
    table.add_column("Share", justify="right")
    for moment_type, count in dist.items():
        style = CATEGORY_CONFIG[moment_type].rich_style
        table.add_row(
            f"[{style}]{category_label(moment_type, language)}[/]",
            str(count),
            f"{count / total:.0%}",
        )
    console.print(table)

    rating = average_rating(moments)
    if rating is not None:
        console.print(f"\n[bold]Average rating:[/] {rating:.1f} / 5")
    share = repeatable_share(moments)
    if share is not None:
        console.print(f"[bold]Would repeat:[/] {share:.0%}")
