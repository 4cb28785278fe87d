"""CLI command modules."""

from .lifecycle import archive, complete, postpone
from .moments import add, delete, edit, feel, list_moments, select, show, task
from .mood import mood
from .plan import insight, plan
from .remind import remind
from .settings import settings
from .stats import dashboard, stats

__all__ = [
    "add",
    "list_moments",
    "show",
    "edit",
    "delete",
    "select",
    "task",
    "feel",
    "complete",
    "postpone",
    "archive",
    "dashboard",
    "stats",
    "mood",
    "remind",
    "plan",
    "insight",
    "settings",
]
