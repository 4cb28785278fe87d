"""Derived views over a moment collection.

Every function here is pure: it takes a snapshot (and a reference ``now``) and
returns a fresh value. Nothing is cached between calls.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Optional

from shared_types import CountdownBand, Emotion, MomentStatus, MomentType, Priority, Vibe

from .models import Moment

URGENT_DAYS = 7
VERY_URGENT_DAYS = 1
CHILL_MAX = 5
BALANCED_MAX = 10
NEAR_DAYS = 14
IMMINENT_DAYS = 3
UPCOMING_LIMIT = 3

_EMOTION_SCORES = {
    Emotion.HAPPY: 5,
    Emotion.EXCITED: 5,
    Emotion.WORRIED: 1,
    Emotion.STRESSED: 1,
}
NEUTRAL_SCORE = 3

HISTORY_STATUSES = (MomentStatus.COMPLETED, MomentStatus.ARCHIVED)


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def days_remaining(target: date | datetime, now: Optional[date | datetime] = None) -> int:
    """Whole days from midnight of ``now`` to midnight of ``target``.

    Negative once the date has passed.
    """
    today = _as_date(now) if now is not None else date.today()
    return (_as_date(target) - today).days


def is_urgent(moment: Moment, now: Optional[date | datetime] = None) -> bool:
    return moment.priority == Priority.HIGH and days_remaining(moment.date, now) <= URGENT_DAYS


def is_very_urgent(moment: Moment, now: Optional[date | datetime] = None) -> bool:
    return days_remaining(moment.date, now) <= VERY_URGENT_DAYS


def is_past_due(moment: Moment, now: Optional[date | datetime] = None) -> bool:
    """Active but its date has gone by ("memory mode")."""
    return moment.status == MomentStatus.ACTIVE and days_remaining(moment.date, now) < 0


def active_moments(moments: Iterable[Moment]) -> list[Moment]:
    return [m for m in moments if m.status == MomentStatus.ACTIVE]


def history_moments(moments: Iterable[Moment]) -> list[Moment]:
    return [m for m in moments if m.status in HISTORY_STATUSES]


def stress_score(moments: Iterable[Moment], now: Optional[date | datetime] = None) -> int:
    """2 x urgent + active, counted over active moments only."""
    active = active_moments(moments)
    urgent = sum(1 for m in active if is_urgent(m, now))
    return 2 * urgent + len(active)


def vibe_for(score: int) -> Vibe:
    if score > BALANCED_MAX:
        return Vibe.HECTIC
    if score > CHILL_MAX:
        return Vibe.BALANCED
    return Vibe.CHILL


def task_completion_ratio(moment: Moment) -> float:
    total = len(moment.tasks)
    if total == 0:
        return 0.0
    return moment.completed_tasks() / total


def countdown_band(days: int) -> CountdownBand:
    if days < IMMINENT_DAYS:
        return CountdownBand.IMMINENT
    if days < NEAR_DAYS:
        return CountdownBand.NEAR
    return CountdownBand.FAR


def category_distribution(moments: Iterable[Moment]) -> dict[MomentType, int]:
    """Completed + archived moments per type, zero-count types omitted.

    Keys follow the declaration order of MomentType.
    """
    counts = Counter(MomentType(m.type) for m in history_moments(moments))
    return {t: counts[t] for t in MomentType if counts[t] > 0}


def emotion_score(emotion: Emotion | str) -> int:
    return _EMOTION_SCORES.get(emotion, NEUTRAL_SCORE)


@dataclass(frozen=True)
class MoodPoint:
    timestamp: datetime
    score: int
    emotion: Emotion
    moment_id: str


def emotion_timeline(moments: Iterable[Moment]) -> list[MoodPoint]:
    """Every emotion log across all moments, ascending by timestamp."""
    points = [
        MoodPoint(
            timestamp=log.date,
            score=emotion_score(log.emotion),
            emotion=log.emotion,
            moment_id=m.id,
        )
        for m in moments
        for log in m.emotion_history
    ]
    points.sort(key=lambda p: p.timestamp)
    return points


def mood_average(timeline: list[MoodPoint]) -> Optional[float]:
    if not timeline:
        return None
    return sum(p.score for p in timeline) / len(timeline)


def average_rating(moments: Iterable[Moment]) -> Optional[float]:
    ratings = [m.reflection.rating for m in moments if m.reflection is not None]
    if not ratings:
        return None
    return sum(ratings) / len(ratings)


def repeatable_share(moments: Iterable[Moment]) -> Optional[float]:
    """Fraction of reflections marked repeatable."""
    flags = [m.reflection.repeatable for m in moments if m.reflection is not None]
    if not flags:
        return None
    return sum(1 for f in flags if f) / len(flags)


def sort_active(moments: Iterable[Moment]) -> list[Moment]:
    return sorted(active_moments(moments), key=lambda m: m.date)


def sort_history(moments: Iterable[Moment]) -> list[Moment]:
    return sorted(history_moments(moments), key=lambda m: m.date, reverse=True)


@dataclass
class DashboardSummary:
    """Headline numbers for the overview screen."""

    total: int
    history: int
    active: int
    urgent: int
    very_urgent: int
    stress_score: int
    vibe: Vibe
    upcoming: list[Moment] = field(default_factory=list)


def dashboard(moments: Iterable[Moment], now: Optional[date | datetime] = None) -> DashboardSummary:
    moments = list(moments)
    active = sort_active(moments)
    score = stress_score(moments, now)
    return DashboardSummary(
        total=len(moments),
        history=len(history_moments(moments)),
        active=len(active),
        urgent=sum(1 for m in active if is_urgent(m, now)),
        very_urgent=sum(1 for m in active if is_very_urgent(m, now)),
        stress_score=score,
        vibe=vibe_for(score),
        upcoming=active[:UPCOMING_LIMIT],
    )
