"""Moment CRUD, task and emotion commands."""

import sys

import click
from rich.console import Console
from rich.table import Table

from cli.utils import get_components, parse_date, require_moment
from moments.analytics import countdown_band, days_remaining, task_completion_ratio
from moments.catalog import BAND_STYLE, CATEGORY_CONFIG, category_label, emotion_label
from moments.commands import (
    AddTask,
    CreateMoment,
    DeleteMoment,
    EditMoment,
    LogEmotion,
    RemoveTask,
    SelectMoment,
    ToggleTask,
)
from moments.lifecycle import phase
from shared_types import Emotion, MomentType, Phase, Priority

console = Console()

TYPE_CHOICES = click.Choice([str(t) for t in MomentType])
PRIORITY_CHOICES = click.Choice([str(p) for p in Priority])
EMOTION_CHOICES = click.Choice([str(e) for e in Emotion])


def _moment_table(moments, language, show_status: bool = False) -> Table:
    table = Table(show_header=True)
    table.add_column("ID", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Days", justify="right")
    table.add_column("Title")
    table.add_column("Type")
    table.add_column("Priority")
    table.add_column("Tasks", justify="right")
    if show_status:
        table.add_column("Status")

    for m in moments:
        days = days_remaining(m.date)
        style = BAND_STYLE[countdown_band(days)]
        cat = CATEGORY_CONFIG[MomentType(m.type)]
        tasks = f"{m.completed_tasks()}/{len(m.tasks)}" if m.tasks else ""
        row = [
            m.id[:8],
            m.date.isoformat(),
            f"[{style}]{days}[/]",
            m.title[:40],
            f"[{cat.rich_style}]{category_label(m.type, language)}[/]",
            str(m.priority),
            tasks,
        ]
        if show_status:
            row.append(str(m.status))
        table.add_row(*row)
    return table


@click.command("add")
@click.argument("title")
@click.option("-d", "--date", "date_str", required=True, help="YYYY-MM-DD or +N days")
@click.option("-t", "--type", "moment_type", default="personal", type=TYPE_CHOICES)
@click.option("-p", "--priority", default="medium", type=PRIORITY_CHOICES)
@click.option("-n", "--notes", default="", help="Free-text notes")
@click.option("--task", "tasks", multiple=True, help="Subtask (repeatable)")
@click.option("-e", "--emotion", default="happy", type=EMOTION_CHOICES, help="How you feel now")
def add(title, date_str, moment_type, priority, notes, tasks, emotion):
    """Create a new moment."""
    c = get_components()
    result = c["service"].dispatch(
        CreateMoment(
            title=title,
            date=parse_date(date_str),
            type=MomentType(moment_type),
            priority=Priority(priority),
            notes=notes,
            tasks=tuple(tasks),
            emotion=Emotion(emotion),
        )
    )
    if not result.accepted:
        console.print("[yellow]Title and date are required.[/]")
        sys.exit(1)
    m = result.moment
    console.print(f"[green]Created:[/] {m.title} ({m.id[:8]}) - {days_remaining(m.date)} days")


@click.command("list")
@click.option("--history", is_flag=True, help="Show completed/archived moments")
def list_moments(history: bool):
    """List active moments (soonest first) or history (latest first)."""
    c = get_components()
    repo = c["repository"]
    language = c["service"].settings.language
    moments = repo.query_history() if history else repo.query_active()

    if not moments:
        console.print("[yellow]No moments found.[/]")
        return

    console.print(_moment_table(moments, language, show_status=history))


@click.command("show")
@click.argument("ref")
def show(ref: str):
    """Show one moment with tasks and emotion history."""
    c = get_components()
    m = require_moment(c["repository"], ref)
    language = c["service"].settings.language
    current = phase(m)

    console.print(f"\n[bold]{m.title}[/]  [dim]{m.id}[/]")
    console.print(
        f"{category_label(m.type, language)} | {m.priority} priority | "
        f"{m.date.isoformat()} ({days_remaining(m.date)} days) | {current}"
    )
    if current == Phase.PAST_DUE:
        console.print(
            "[yellow]This date has passed.[/] Run `moments complete` to reflect "
            "or `moments postpone` to push it a week."
        )
    if m.notes:
        console.print(f"\n{m.notes}")

    if m.tasks:
        pct = round(task_completion_ratio(m) * 100)
        console.print(f"\n[bold]Tasks[/] ({pct}%)")
        for t in m.tasks:
            mark = "[green]✓[/]" if t.is_completed else "[dim]○[/]"
            console.print(f"  {mark} {t.text}  [dim]{t.id[:8]}[/]")

    console.print("\n[bold]Feelings[/]")
    for log in sorted(m.emotion_history, key=lambda x: x.date):
        note = f" - {log.note}" if log.note else ""
        console.print(f"  {log.date:%Y-%m-%d %H:%M} {emotion_label(log.emotion, language)}{note}")

    if m.reflection:
        r = m.reflection
        console.print(f"\n[bold]Reflection[/] {'★' * r.rating}{'☆' * (5 - r.rating)}")
        if r.lessons:
            console.print(f"  {r.lessons}")
        console.print(f"  Would repeat: {'yes' if r.repeatable else 'no'}")


@click.command("edit")
@click.argument("ref")
@click.option("--title")
@click.option("-d", "--date", "date_str", help="YYYY-MM-DD or +N days")
@click.option("-t", "--type", "moment_type", type=TYPE_CHOICES)
@click.option("-p", "--priority", type=PRIORITY_CHOICES)
@click.option("-n", "--notes")
def edit(ref, title, date_str, moment_type, priority, notes):
    """Edit a moment's title, date, type, priority or notes."""
    c = get_components()
    m = require_moment(c["repository"], ref)
    result = c["service"].dispatch(
        EditMoment(
            moment_id=m.id,
            title=title,
            date=parse_date(date_str),
            type=MomentType(moment_type) if moment_type else None,
            priority=Priority(priority) if priority else None,
            notes=notes,
        )
    )
    if not result.accepted:
        console.print("[yellow]Edit rejected - title and date cannot be empty.[/]")
        sys.exit(1)
    console.print(f"[green]Updated:[/] {result.moment.title}")


@click.command("delete")
@click.argument("ref")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def delete(ref: str, yes: bool):
    """Delete a moment permanently."""
    c = get_components()
    m = require_moment(c["repository"], ref)
    if not yes and not click.confirm(f"Delete '{m.title}'?"):
        console.print("[yellow]Cancelled.[/]")
        return
    c["service"].dispatch(DeleteMoment(m.id))
    console.print(f"[green]Deleted:[/] {m.title}")


@click.command("select")
@click.argument("ref")
def select(ref: str):
    """Mark a moment as the current one."""
    c = get_components()
    m = require_moment(c["repository"], ref)
    c["service"].dispatch(SelectMoment(m.id))
    console.print(f"[green]Selected:[/] {m.title}")


@click.group()
def task():
    """Manage a moment's subtasks."""
    pass


@task.command("add")
@click.argument("ref")
@click.argument("text")
def task_add(ref: str, text: str):
    """Add a subtask."""
    c = get_components()
    m = require_moment(c["repository"], ref)
    result = c["service"].dispatch(AddTask(m.id, text))
    if not result.accepted:
        console.print("[yellow]Task text is required.[/]")
        sys.exit(1)
    console.print(f"[green]Added task to[/] {m.title}")


@task.command("toggle")
@click.argument("ref")
@click.argument("task_ref")
def task_toggle(ref: str, task_ref: str):
    """Toggle a subtask done/undone (by id prefix or 1-based position)."""
    c = get_components()
    m = require_moment(c["repository"], ref)
    target = _find_task(m, task_ref)
    if target is None:
        console.print(f"[red]No task matches:[/] {task_ref}")
        sys.exit(1)
    result = c["service"].dispatch(ToggleTask(m.id, target.id))
    updated = next(t for t in result.moment.tasks if t.id == target.id)
    state = "done" if updated.is_completed else "open"
    console.print(f"[green]{updated.text}[/] -> {state}")


@task.command("remove")
@click.argument("ref")
@click.argument("task_ref")
def task_remove(ref: str, task_ref: str):
    """Remove a subtask."""
    c = get_components()
    m = require_moment(c["repository"], ref)
    target = _find_task(m, task_ref)
    if target is None:
        console.print(f"[red]No task matches:[/] {task_ref}")
        sys.exit(1)
    c["service"].dispatch(RemoveTask(m.id, target.id))
    console.print(f"[green]Removed:[/] {target.text}")


def _find_task(moment, task_ref: str):
    if task_ref.isdigit():
        idx = int(task_ref) - 1
        if 0 <= idx < len(moment.tasks):
            return moment.tasks[idx]
        return None
    matches = [t for t in moment.tasks if t.id.startswith(task_ref)]
    return matches[0] if len(matches) == 1 else None


@click.command("feel")
@click.argument("ref")
@click.argument("emotion", type=EMOTION_CHOICES)
@click.option("--note", help="Optional note")
def feel(ref: str, emotion: str, note: str):
    """Log how you feel about a moment right now."""
    c = get_components()
    m = require_moment(c["repository"], ref)
    result = c["service"].dispatch(LogEmotion(m.id, Emotion(emotion), note))
    language = c["service"].settings.language
    if not result.accepted:
        console.print("[red]Could not log feeling.[/]")
        sys.exit(1)
    console.print(f"Logged {emotion_label(emotion, language)} for {m.title}")
