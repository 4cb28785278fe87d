"""Mood tracking CLI command."""

import click
from rich.console import Console
from rich.table import Table

from cli.utils import get_components
from moments.analytics import emotion_timeline, mood_average
from moments.catalog import EMOTION_CONFIG, emotion_label
from shared_types import Emotion

console = Console()


@click.command()
@click.option("-n", "--limit", default=30, help="Show the most recent N logs")
def mood(limit: int):
    """Show the emotion timeline across all moments."""
    c = get_components()
    language = c["service"].settings.language
    moments = {m.id: m for m in c["repository"].snapshot()}
    timeline = emotion_timeline(moments.values())

    if not timeline:
        console.print("[yellow]No feelings logged yet. Use `moments feel` to add one.[/]")
        return

    table = Table(show_header=True, title="Mood timeline")
    table.add_column("When", style="dim")
    table.add_column("Feeling")
    table.add_column("Score", justify="right")
    table.add_column("Moment")

    for point in timeline[-limit:]:
        style = EMOTION_CONFIG[Emotion(point.emotion)]
        bar = f"[{style.rich_style}]{'█' * point.score}[/]"
        table.add_row(
            f"{point.timestamp:%Y-%m-%d %H:%M}",
            emotion_label(point.emotion, language),
            bar,
            moments[point.moment_id].title[:35],
        )

    console.print(table)

    avg = mood_average(timeline)
    console.print(f"\n[bold]Average:[/] {avg:.2f} / 5  |  Logs: {len(timeline)}")
