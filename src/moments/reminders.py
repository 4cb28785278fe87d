"""Day-before / day-of reminders with per-day deduplication."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional

import structlog
from rich.console import Console

from shared_types import Language, MomentStatus, Permission

from .analytics import days_remaining
from .catalog import reminder_body
from .models import Moment
from .storage import KeyValueStore

logger = structlog.get_logger()

APP_TITLE = "MOMENTS"
DEFAULT_WINDOW = (0, 1)
MARKER_PREFIX = "notified:"
PERMISSION_KEY = "notification_permission"


class Notifier(ABC):
    """Delivery capability for reminders."""

    @abstractmethod
    def permission(self) -> Permission:
        ...

    @abstractmethod
    def request_permission(self) -> Permission:
        ...

    @abstractmethod
    def show(self, title: str, body: str) -> None:
        ...


class NullNotifier(Notifier):
    """No delivery channel available."""

    def permission(self) -> Permission:
        return Permission.DENIED

    def request_permission(self) -> Permission:
        return Permission.DENIED

    def show(self, title: str, body: str) -> None:
        return None


class ConsoleNotifier(Notifier):
    """Prints reminders to the terminal. Permission is remembered in the store."""

    def __init__(self, store: Optional[KeyValueStore] = None, console: Optional[Console] = None):
        self.store = store
        self.console = console or Console()
        self._permission = Permission.DEFAULT

    def permission(self) -> Permission:
        if self.store is not None:
            stored = self.store.load(PERMISSION_KEY)
            if stored in tuple(Permission):
                return Permission(stored)
        return self._permission

    def request_permission(self) -> Permission:
        self._permission = Permission.GRANTED
        if self.store is not None:
            self.store.save(PERMISSION_KEY, str(Permission.GRANTED))
        return self._permission

    def revoke(self) -> None:
        self._permission = Permission.DENIED
        if self.store is not None:
            self.store.save(PERMISSION_KEY, str(Permission.DENIED))

    def show(self, title: str, body: str) -> None:
        self.console.print(f"[bold magenta]{title}[/] {body}")


class ReminderLedger:
    """Markers recording which (moment, day) pairs already fired."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    @staticmethod
    def key(moment_id: str, day: date) -> str:
        return f"{MARKER_PREFIX}{moment_id}:{day.isoformat()}"

    def has_fired(self, moment_id: str, day: date) -> bool:
        return self.store.load(self.key(moment_id, day)) is not None

    def mark(self, moment_id: str, day: date) -> bool:
        return self.store.save(self.key(moment_id, day), True)

    def markers(self) -> list[tuple[str, str]]:
        """(moment_id, iso_day) for every stored marker."""
        out = []
        for key in self.store.keys(MARKER_PREFIX):
            moment_id, _, day = key[len(MARKER_PREFIX):].rpartition(":")
            out.append((moment_id, day))
        return out

    def prune(self, today: date, live_ids: Iterable[str]) -> int:
        """Drop markers from earlier days and for moments no longer active."""
        live = set(live_ids)
        today_iso = today.isoformat()
        removed = 0
        for moment_id, day in self.markers():
            if day != today_iso or moment_id not in live:
                self.store.delete(f"{MARKER_PREFIX}{moment_id}:{day}")
                removed += 1
        return removed


@dataclass(frozen=True)
class Reminder:
    moment_id: str
    title: str
    body: str
    days_left: int


class ReminderScheduler:
    """Fires at most one reminder per moment per calendar day."""

    def __init__(
        self,
        notifier: Notifier,
        ledger: ReminderLedger,
        window: Iterable[int] = DEFAULT_WINDOW,
        app_title: str = APP_TITLE,
        enabled: bool = True,
    ):
        self.notifier = notifier
        self.ledger = ledger
        self.window = frozenset(window)
        self.app_title = app_title
        self.enabled = enabled

    def due(self, moments: Iterable[Moment], now: Optional[date | datetime] = None) -> list[Moment]:
        """Active moments whose days-remaining falls in the reminder window."""
        return [
            m
            for m in moments
            if m.status == MomentStatus.ACTIVE and days_remaining(m.date, now) in self.window
        ]

    def evaluate(
        self,
        moments: Iterable[Moment],
        now: Optional[date | datetime] = None,
        language: Language | str = Language.EN,
    ) -> list[Reminder]:
        """Deliver any reminders not yet sent today. Returns what was delivered."""
        if not self.enabled:
            return []
        if self.notifier.permission() != Permission.GRANTED:
            logger.debug("reminders_skipped", reason="permission_not_granted")
            return []

        moments = list(moments)
        today = now if isinstance(now, date) and not isinstance(now, datetime) else None
        if today is None:
            today = (now or datetime.now()).date()

        sent = []
        for moment in self.due(moments, today):
            if self.ledger.has_fired(moment.id, today):
                continue
            body = reminder_body(moment.title, language)
            try:
                self.notifier.show(self.app_title, body)
            except Exception as e:
                logger.warning("reminder_delivery_failed", moment_id=moment.id, error=str(e))
                continue
            self.ledger.mark(moment.id, today)
            sent.append(
                Reminder(
                    moment_id=moment.id,
                    title=self.app_title,
                    body=body,
                    days_left=days_remaining(moment.date, today),
                )
            )
            logger.info("reminder_sent", moment_id=moment.id)

        self.ledger.prune(today, (m.id for m in moments if m.status == MomentStatus.ACTIVE))
        return sent
