"""Shared CLI utilities."""

import sys
from datetime import date, datetime, timedelta
from typing import Optional

import click
from rich.console import Console

console = Console()


def get_components(with_planner: bool = False) -> dict:
    """Initialize all components from config.

    Args:
        with_planner: Also build the LLM-backed planner (needs an API key)
    """
    from cli.config import load_config_model
    from moments import (
        ConsoleNotifier,
        KeyValueStore,
        MomentPlanner,
        MomentService,
        MomentStorage,
        ReminderLedger,
        ReminderScheduler,
    )

    config = load_config_model()
    store = KeyValueStore(config.paths.data_db)
    storage = MomentStorage(store)
    notifier = ConsoleNotifier(store, console=console)
    scheduler = ReminderScheduler(
        notifier,
        ReminderLedger(store),
        window=config.reminders.window_days,
        app_title=config.reminders.app_title,
        enabled=config.reminders.enabled,
    )
    service = MomentService(storage, scheduler, postpone_days=config.lifecycle.postpone_days)

    planner = None
    if with_planner:
        from llm import LLMError
        from llm.factory import create_from_config

        try:
            planner = MomentPlanner(create_from_config(config.llm), max_tokens=config.llm.max_tokens)
        except LLMError as e:
            console.print(f"[red]Config error:[/] {e}")
            sys.exit(1)

    return {
        "config": config,
        "store": store,
        "storage": storage,
        "notifier": notifier,
        "scheduler": scheduler,
        "service": service,
        "repository": service.repository,
        "planner": planner,
    }


def resolve_moment(repository, ref: str):
    """Find a moment by id, id prefix, or case-insensitive exact title."""
    moment = repository.get(ref)
    if moment:
        return moment
    snapshot = repository.snapshot()
    by_prefix = [m for m in snapshot if m.id.startswith(ref)]
    if len(by_prefix) == 1:
        return by_prefix[0]
    by_title = [m for m in snapshot if m.title.lower() == ref.lower()]
    if len(by_title) == 1:
        return by_title[0]
    return None


def require_moment(repository, ref: str):
    """resolve_moment or exit with a message."""
    moment = resolve_moment(repository, ref)
    if moment is None:
        console.print(f"[red]No moment matches:[/] {ref}")
        sys.exit(1)
    return moment


def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse YYYY-MM-DD or +N (days from today)."""
    if not value:
        return None
    value = value.strip()
    if value.startswith("+") and value[1:].isdigit():
        return date.today() + timedelta(days=int(value[1:]))
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise click.BadParameter(f"Expected YYYY-MM-DD or +N, got {value!r}")
