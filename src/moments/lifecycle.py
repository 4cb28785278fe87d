"""Moment lifecycle: creation, completion with reflection, postpone, archive."""

from datetime import date, datetime, timedelta
from typing import Iterable, Optional

import structlog
from pydantic import ValidationError

from shared_types import Emotion, MomentStatus, MomentType, Phase, Priority

from .analytics import days_remaining, is_past_due
from .models import (
    INITIAL_FEELING_NOTE,
    ActiveMoment,
    ArchivedMoment,
    CompletedMoment,
    EmotionLog,
    Moment,
    Reflection,
    Task,
)
from .repository import MomentRepository

logger = structlog.get_logger()

DEFAULT_POSTPONE_DAYS = 7


def phase(moment: Moment, now: Optional[date | datetime] = None) -> Phase:
    """Lifecycle phase, including the derived past-due view of active moments."""
    if moment.status == MomentStatus.COMPLETED:
        return Phase.COMPLETED
    if moment.status == MomentStatus.ARCHIVED:
        return Phase.ARCHIVED
    if days_remaining(moment.date, now) < 0:
        return Phase.PAST_DUE
    return Phase.ACTIVE


def build_moment(
    title: str,
    target_date: Optional[date],
    moment_type: MomentType = MomentType.PERSONAL,
    priority: Priority = Priority.MEDIUM,
    notes: str = "",
    tasks: Iterable[str] = (),
    emotion: Emotion = Emotion.HAPPY,
    now: Optional[datetime] = None,
) -> Optional[ActiveMoment]:
    """Build a fresh active moment, or None if title/date are missing."""
    if not title or not title.strip() or target_date is None:
        return None
    now = now or datetime.now()
    return ActiveMoment(
        title=title.strip(),
        date=target_date,
        type=moment_type,
        priority=priority,
        notes=notes,
        tasks=tuple(Task(text=t.strip()) for t in tasks if t and t.strip()),
        created_at=now,
        initial_emotion=emotion,
        emotion_history=(EmotionLog(date=now, emotion=emotion, note=INITIAL_FEELING_NOTE),),
    )


class LifecycleWorkflow:
    """Governs status transitions. Refusals return False/None, never raise."""

    def __init__(self, repository: MomentRepository, postpone_days: int = DEFAULT_POSTPONE_DAYS):
        self.repository = repository
        self.postpone_days = postpone_days

    def create(self, title: str, target_date: Optional[date], **kwargs) -> Optional[ActiveMoment]:
        moment = build_moment(title, target_date, **kwargs)
        if moment is None:
            logger.debug("moment_create_refused", reason="missing_title_or_date")
            return None
        if not self.repository.create(moment):
            return None
        return moment

    def complete(
        self,
        moment_id: str,
        rating: int,
        lessons: str = "",
        repeatable: bool = False,
        now: Optional[datetime] = None,
    ) -> Optional[CompletedMoment]:
        """active -> completed. Requires a rating of 1-5."""
        moment = self.repository.get(moment_id)
        if moment is None or moment.status != MomentStatus.ACTIVE:
            logger.debug("complete_refused", reason="not_active", moment_id=moment_id)
            return None
        try:
            reflection = Reflection(
                rating=rating,
                lessons=lessons,
                repeatable=repeatable,
                completed_date=now or datetime.now(),
            )
        except ValidationError:
            logger.debug("complete_refused", reason="invalid_rating", rating=rating)
            return None

        completed = CompletedMoment.model_validate(
            {**moment.model_dump(exclude={"status", "reflection"}), "reflection": reflection}
        )
        if not self.repository.update(completed):
            return None
        logger.info("moment_completed", moment_id=moment_id, rating=rating)
        return completed

    def postpone(self, moment_id: str, now: Optional[date | datetime] = None) -> Optional[Moment]:
        """Shift a past-due active moment forward; status stays active."""
        moment = self.repository.get(moment_id)
        if moment is None or not is_past_due(moment, now):
            logger.debug("postpone_refused", reason="not_past_due", moment_id=moment_id)
            return None
        postponed = moment.evolve(date=moment.date + timedelta(days=self.postpone_days))
        if not self.repository.update(postponed):
            return None
        logger.info("moment_postponed", moment_id=moment_id, new_date=postponed.date.isoformat())
        return postponed

    def archive(self, moment_id: str) -> Optional[ArchivedMoment]:
        """active/completed -> archived. Archived moments carry no reflection."""
        moment = self.repository.get(moment_id)
        if moment is None or moment.status == MomentStatus.ARCHIVED:
            logger.debug("archive_refused", reason="missing_or_archived", moment_id=moment_id)
            return None
        archived = ArchivedMoment.model_validate(moment.model_dump(exclude={"status", "reflection"}))
        if not self.repository.update(archived):
            return None
        logger.info("moment_archived", moment_id=moment_id)
        return archived
