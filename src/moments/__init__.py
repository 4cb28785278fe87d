"""Moment tracking core: model, repository, lifecycle, analytics, reminders."""

from .commands import CommandResult, MomentService
from .lifecycle import LifecycleWorkflow, build_moment, phase
from .models import (
    ActiveMoment,
    ArchivedMoment,
    CompletedMoment,
    EmotionLog,
    Moment,
    Reflection,
    Settings,
    Task,
)
from .planner import MomentPlan, MomentPlanner, PlannerError
from .reminders import ConsoleNotifier, NullNotifier, ReminderLedger, ReminderScheduler
from .repository import MomentRepository
from .storage import KeyValueStore, MomentStorage

__all__ = [
    "ActiveMoment",
    "ArchivedMoment",
    "CompletedMoment",
    "EmotionLog",
    "Moment",
    "Reflection",
    "Settings",
    "Task",
    "KeyValueStore",
    "MomentStorage",
    "MomentRepository",
    "LifecycleWorkflow",
    "build_moment",
    "phase",
    "ReminderScheduler",
    "ReminderLedger",
    "ConsoleNotifier",
    "NullNotifier",
    "MomentService",
    "CommandResult",
    "MomentPlan",
    "MomentPlanner",
    "PlannerError",
]
