"""In-memory moment collection with write-through persistence."""

from datetime import datetime
from typing import Optional

import structlog

from shared_types import Emotion, MomentStatus

from .analytics import sort_active, sort_history
from .models import EmotionLog, Moment, Task
from .storage import MomentStorage

logger = structlog.get_logger()

# Status only moves forward.
_NEXT_STATUSES = {
    MomentStatus.ACTIVE: {MomentStatus.COMPLETED, MomentStatus.ARCHIVED},
    MomentStatus.COMPLETED: {MomentStatus.ARCHIVED},
    MomentStatus.ARCHIVED: set(),
}


def _has_required_fields(moment: Moment) -> bool:
    return bool(moment.title and moment.title.strip()) and bool(moment.date)


def _unique_task_ids(moment: Moment) -> bool:
    ids = [t.id for t in moment.tasks]
    return len(ids) == len(set(ids))


class MomentRepository:
    """Owns the moment collection. The only mutation surface for moments.

    Mutations return ``True``/``False`` (or ``None`` for lookups) instead of
    raising: a rejected request leaves the collection untouched and nothing is
    written. Every accepted mutation writes the full collection through the
    storage gateway before returning.
    """

    def __init__(self, storage: MomentStorage):
        self.storage = storage
        self._moments: dict[str, Moment] = {m.id: m for m in storage.load()}
        self._selected_id: Optional[str] = None

    def __len__(self) -> int:
        return len(self._moments)

    def __contains__(self, moment_id: str) -> bool:
        return moment_id in self._moments

    def _persist(self) -> None:
        if not self.storage.save(list(self._moments.values())):
            logger.error("moments_persist_failed", count=len(self._moments))

    # -- queries --

    def get(self, moment_id: str) -> Optional[Moment]:
        return self._moments.get(moment_id)

    def snapshot(self) -> list[Moment]:
        """All moments in stored order. Items are frozen models."""
        return list(self._moments.values())

    def query_active(self) -> list[Moment]:
        return sort_active(self._moments.values())

    def query_history(self) -> list[Moment]:
        return sort_history(self._moments.values())

    @property
    def selected(self) -> Optional[Moment]:
        if self._selected_id is None:
            return None
        return self._moments.get(self._selected_id)

    def select(self, moment_id: Optional[str]) -> bool:
        if moment_id is not None and moment_id not in self._moments:
            return False
        self._selected_id = moment_id
        return True

    # -- mutations --

    def create(self, moment: Moment) -> bool:
        if not _has_required_fields(moment):
            logger.debug("moment_create_rejected", reason="missing_title_or_date")
            return False
        if moment.id in self._moments:
            logger.debug("moment_create_rejected", reason="duplicate_id", moment_id=moment.id)
            return False
        if moment.status != MomentStatus.ACTIVE:
            logger.debug("moment_create_rejected", reason="not_active", status=moment.status)
            return False
        if not _unique_task_ids(moment):
            logger.debug("moment_create_rejected", reason="duplicate_task_id")
            return False

        self._moments[moment.id] = moment
        self._persist()
        logger.info("moment_created", moment_id=moment.id, type=str(moment.type))
        return True

    def update(self, moment: Moment) -> bool:
        """Replace the stored moment with the same id."""
        current = self._moments.get(moment.id)
        if current is None:
            logger.debug("moment_update_rejected", reason="unknown_id", moment_id=moment.id)
            return False
        reason = self._update_violation(current, moment)
        if reason:
            logger.debug("moment_update_rejected", reason=reason, moment_id=moment.id)
            return False

        self._moments[moment.id] = moment
        self._persist()
        logger.debug("moment_updated", moment_id=moment.id, status=moment.status)
        return True

    @staticmethod
    def _update_violation(current: Moment, new: Moment) -> Optional[str]:
        if not _has_required_fields(new):
            return "missing_title_or_date"
        if new.status != current.status and new.status not in _NEXT_STATUSES[current.status]:
            return "status_reversal"
        if new.created_at != current.created_at:
            return "created_at_changed"
        if (
            current.status == MomentStatus.COMPLETED
            and new.status == MomentStatus.COMPLETED
            and new.reflection != current.reflection
        ):
            return "reflection_changed"
        if new.emotion_history[: len(current.emotion_history)] != current.emotion_history:
            return "emotion_history_rewritten"
        if not _unique_task_ids(new):
            return "duplicate_task_id"
        return None

    def delete(self, moment_id: str) -> bool:
        if moment_id not in self._moments:
            return False
        del self._moments[moment_id]
        if self._selected_id == moment_id:
            self._selected_id = None
        self._persist()
        logger.info("moment_deleted", moment_id=moment_id)
        return True

    def toggle_task(self, moment_id: str, task_id: str) -> bool:
        moment = self._moments.get(moment_id)
        if moment is None or not any(t.id == task_id for t in moment.tasks):
            return False
        tasks = tuple(
            t.model_copy(update={"is_completed": not t.is_completed}) if t.id == task_id else t
            for t in moment.tasks
        )
        return self.update(moment.evolve(tasks=tasks))

    def add_task(self, moment_id: str, text: str) -> Optional[Task]:
        moment = self._moments.get(moment_id)
        if moment is None or not text.strip():
            return None
        task = Task(text=text.strip())
        if self.update(moment.evolve(tasks=(*moment.tasks, task))):
            return task
        return None

    def remove_task(self, moment_id: str, task_id: str) -> bool:
        moment = self._moments.get(moment_id)
        if moment is None or not any(t.id == task_id for t in moment.tasks):
            return False
        return self.update(moment.evolve(tasks=tuple(t for t in moment.tasks if t.id != task_id)))

    def log_emotion(
        self,
        moment_id: str,
        emotion: Emotion,
        note: Optional[str] = None,
        when: Optional[datetime] = None,
    ) -> Optional[EmotionLog]:
        """Append an emotion check-in to a moment's history."""
        moment = self._moments.get(moment_id)
        if moment is None:
            return None
        log = EmotionLog(emotion=emotion, note=note, date=when or datetime.now())
        if self.update(moment.evolve(emotion_history=(*moment.emotion_history, log))):
            return log
        return None
