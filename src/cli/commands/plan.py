"""AI plan drafts and reflection insights."""

import sys

import click
from rich.console import Console
from rich.markdown import Markdown

from cli.utils import get_components, parse_date, require_moment
from moments.commands import CreateMoment
from moments.planner import PlannerError

console = Console()


@click.command()
@click.argument("description")
@click.option("-d", "--date", "date_str", help="Target date for --save (YYYY-MM-DD or +N)")
@click.option("--save", is_flag=True, help="Create the drafted moment")
def plan(description: str, date_str: str, save: bool):
    """Draft a moment (title, type, priority, notes, tasks) from a description."""
    c = get_components(with_planner=True)
    language = c["service"].settings.language

    try:
        with console.status("Drafting plan..."):
            draft = c["planner"].plan(description, language=language)
    except PlannerError as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)

    console.print(f"\n[bold]{draft.title}[/]  [dim]{draft.type} | {draft.priority}[/]")
    if draft.notes:
        console.print(draft.notes)
    for t in draft.tasks:
        console.print(f"  ○ {t}")

    if not save:
        return

    target = parse_date(date_str)
    if target is None:
        console.print("[yellow]--save needs a --date.[/]")
        sys.exit(1)
    result = c["service"].dispatch(
        CreateMoment(
            title=draft.title,
            date=target,
            type=draft.type,
            priority=draft.priority,
            notes=draft.notes,
            tasks=tuple(draft.tasks),
        )
    )
    if not result.accepted:
        console.print("[red]Error:[/] Could not save the draft")
        sys.exit(1)
    console.print(f"\n[green]Created:[/] {result.moment.title} ({result.moment.id[:8]})")


@click.command()
@click.argument("ref")
@click.option("-l", "--lessons", help="Use these lessons instead of the stored reflection")
def insight(ref: str, lessons: str):
    """Ask the assistant for a short insight on a finished moment's lessons."""
    c = get_components(with_planner=True)
    m = require_moment(c["repository"], ref)
    reflection = m.reflection
    text = lessons or (reflection.lessons if reflection else "")
    rating = reflection.rating if reflection else 3

    try:
        with console.status("Thinking..."):
            reply = c["planner"].insight(m.title, text, rating, language=c["service"].settings.language)
    except PlannerError as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)

    console.print()
    console.print(Markdown(reply))
