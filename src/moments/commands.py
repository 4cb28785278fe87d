"""Command messages and the service that applies them.

Every mutation from an input surface (CLI, tests, a future UI) is expressed as
one of the command dataclasses below and handed to ``MomentService.dispatch``.
Dispatch runs to completion, then re-derives the dashboard and evaluates
reminders over a fresh snapshot.
"""

import datetime as dt
from dataclasses import dataclass, field
from typing import Callable, Optional

import structlog

from shared_types import Emotion, Language, MomentType, Permission, Priority, Theme

from . import analytics
from .lifecycle import LifecycleWorkflow
from .models import Moment, Settings
from .reminders import Reminder, ReminderScheduler
from .repository import MomentRepository
from .storage import MomentStorage

logger = structlog.get_logger()


@dataclass(frozen=True)
class CreateMoment:
    title: str
    date: Optional[dt.date]
    type: MomentType = MomentType.PERSONAL
    priority: Priority = Priority.MEDIUM
    notes: str = ""
    tasks: tuple[str, ...] = ()
    emotion: Emotion = Emotion.HAPPY


@dataclass(frozen=True)
class EditMoment:
    """Change any subset of the editable fields; None means unchanged."""

    moment_id: str
    title: Optional[str] = None
    date: Optional[dt.date] = None
    type: Optional[MomentType] = None
    priority: Optional[Priority] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class DeleteMoment:
    moment_id: str


@dataclass(frozen=True)
class SelectMoment:
    moment_id: Optional[str]


@dataclass(frozen=True)
class ToggleTask:
    moment_id: str
    task_id: str


@dataclass(frozen=True)
class AddTask:
    moment_id: str
    text: str


@dataclass(frozen=True)
class RemoveTask:
    moment_id: str
    task_id: str


@dataclass(frozen=True)
class LogEmotion:
    moment_id: str
    emotion: Emotion
    note: Optional[str] = None


@dataclass(frozen=True)
class CompleteMoment:
    moment_id: str
    rating: int
    lessons: str = ""
    repeatable: bool = False


@dataclass(frozen=True)
class Postpone:
    moment_id: str


@dataclass(frozen=True)
class ArchiveMoment:
    moment_id: str


@dataclass(frozen=True)
class ChangeSettings:
    theme: Optional[Theme] = None
    language: Optional[Language] = None


@dataclass(frozen=True)
class RequestPermission:
    pass


@dataclass
class CommandResult:
    accepted: bool
    moment: Optional[Moment] = None
    reminders: list[Reminder] = field(default_factory=list)


class MomentService:
    """Single entry point for mutations; recomputes derived views after each."""

    def __init__(
        self,
        storage: MomentStorage,
        scheduler: Optional[ReminderScheduler] = None,
        postpone_days: int = 7,
        clock: Callable[[], dt.datetime] = dt.datetime.now,
    ):
        self.storage = storage
        self.repository = MomentRepository(storage)
        self.lifecycle = LifecycleWorkflow(self.repository, postpone_days=postpone_days)
        self.scheduler = scheduler
        self.clock = clock
        self.settings = storage.load_settings()
        self._handlers = {
            CreateMoment: self._create,
            EditMoment: self._edit,
            DeleteMoment: self._delete,
            SelectMoment: self._select,
            ToggleTask: self._toggle_task,
            AddTask: self._add_task,
            RemoveTask: self._remove_task,
            LogEmotion: self._log_emotion,
            CompleteMoment: self._complete,
            Postpone: self._postpone,
            ArchiveMoment: self._archive,
            ChangeSettings: self._change_settings,
            RequestPermission: self._request_permission,
        }

    def dispatch(self, command) -> CommandResult:
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Unknown command: {type(command).__name__}")
        result = handler(command)
        logger.debug("command_dispatched", command=type(command).__name__, accepted=result.accepted)
        if result.accepted:
            result.reminders = self.evaluate_reminders()
        return result

    # -- derived views --

    def dashboard(self) -> analytics.DashboardSummary:
        return analytics.dashboard(self.repository.snapshot(), self.clock())

    def evaluate_reminders(self) -> list[Reminder]:
        if self.scheduler is None:
            return []
        return self.scheduler.evaluate(
            self.repository.snapshot(), self.clock(), language=self.settings.language
        )

    # -- handlers --

    def _create(self, cmd: CreateMoment) -> CommandResult:
        moment = self.lifecycle.create(
            cmd.title,
            cmd.date,
            moment_type=cmd.type,
            priority=cmd.priority,
            notes=cmd.notes,
            tasks=cmd.tasks,
            emotion=cmd.emotion,
            now=self.clock(),
        )
        return CommandResult(accepted=moment is not None, moment=moment)

    def _edit(self, cmd: EditMoment) -> CommandResult:
        current = self.repository.get(cmd.moment_id)
        if current is None:
            return CommandResult(accepted=False)
        changes = {
            k: v
            for k, v in {
                "title": cmd.title,
                "date": cmd.date,
                "type": cmd.type,
                "priority": cmd.priority,
                "notes": cmd.notes,
            }.items()
            if v is not None
        }
        if "title" in changes:
            changes["title"] = changes["title"].strip()
        if not changes.get("title", current.title):
            return CommandResult(accepted=False, moment=current)
        updated = current.evolve(**changes)
        if not self.repository.update(updated):
            return CommandResult(accepted=False, moment=current)
        return CommandResult(accepted=True, moment=updated)

    def _delete(self, cmd: DeleteMoment) -> CommandResult:
        return CommandResult(accepted=self.repository.delete(cmd.moment_id))

    def _select(self, cmd: SelectMoment) -> CommandResult:
        ok = self.repository.select(cmd.moment_id)
        return CommandResult(accepted=ok, moment=self.repository.selected)

    def _toggle_task(self, cmd: ToggleTask) -> CommandResult:
        ok = self.repository.toggle_task(cmd.moment_id, cmd.task_id)
        return CommandResult(accepted=ok, moment=self.repository.get(cmd.moment_id))

    def _add_task(self, cmd: AddTask) -> CommandResult:
        task = self.repository.add_task(cmd.moment_id, cmd.text)
        return CommandResult(accepted=task is not None, moment=self.repository.get(cmd.moment_id))

    def _remove_task(self, cmd: RemoveTask) -> CommandResult:
        ok = self.repository.remove_task(cmd.moment_id, cmd.task_id)
        return CommandResult(accepted=ok, moment=self.repository.get(cmd.moment_id))

    def _log_emotion(self, cmd: LogEmotion) -> CommandResult:
        log = self.repository.log_emotion(cmd.moment_id, cmd.emotion, cmd.note, when=self.clock())
        return CommandResult(accepted=log is not None, moment=self.repository.get(cmd.moment_id))

    def _complete(self, cmd: CompleteMoment) -> CommandResult:
        moment = self.lifecycle.complete(
            cmd.moment_id, cmd.rating, cmd.lessons, cmd.repeatable, now=self.clock()
        )
        return CommandResult(accepted=moment is not None, moment=moment)

    def _postpone(self, cmd: Postpone) -> CommandResult:
        moment = self.lifecycle.postpone(cmd.moment_id, now=self.clock())
        return CommandResult(accepted=moment is not None, moment=moment)

    def _archive(self, cmd: ArchiveMoment) -> CommandResult:
        moment = self.lifecycle.archive(cmd.moment_id)
        return CommandResult(accepted=moment is not None, moment=moment)

    def _change_settings(self, cmd: ChangeSettings) -> CommandResult:
        updated = Settings(
            theme=cmd.theme or self.settings.theme,
            language=cmd.language or self.settings.language,
        )
        if not self.storage.save_settings(updated):
            return CommandResult(accepted=False)
        self.settings = updated
        return CommandResult(accepted=True)

    def _request_permission(self, cmd: RequestPermission) -> CommandResult:
        if self.scheduler is None:
            return CommandResult(accepted=False)
        granted = self.scheduler.notifier.request_permission() == Permission.GRANTED
        logger.info("notification_permission", granted=granted)
        return CommandResult(accepted=granted)
