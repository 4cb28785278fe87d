"""Moment data model: a tagged variant on status.

A moment is one of ``ActiveMoment``, ``CompletedMoment`` or ``ArchivedMoment``.
Only ``CompletedMoment`` carries a ``Reflection``; the other two pin
``reflection`` to ``None`` so a reflection can never exist outside the
completed state.
"""

import datetime as dt
import uuid
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from shared_types import Emotion, Language, MomentType, Priority, Theme

INITIAL_FEELING_NOTE = "Initial feeling"


def new_id() -> str:
    return uuid.uuid4().hex[:12]


class Task(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    text: str
    is_completed: bool = False


class EmotionLog(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    date: dt.datetime = Field(default_factory=dt.datetime.now)
    emotion: Emotion
    note: Optional[str] = None


class Reflection(BaseModel):
    model_config = ConfigDict(frozen=True)

    rating: int = Field(ge=1, le=5, description="1=poor, 5=great")
    lessons: str = ""
    repeatable: bool = False
    completed_date: dt.datetime = Field(default_factory=dt.datetime.now)


class MomentBase(BaseModel):
    """Fields shared by every lifecycle state."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    title: str
    date: dt.date
    type: MomentType = MomentType.PERSONAL
    priority: Priority = Priority.MEDIUM
    notes: str = ""
    tasks: tuple[Task, ...] = ()
    created_at: dt.datetime = Field(default_factory=dt.datetime.now)
    initial_emotion: Emotion = Emotion.HAPPY
    emotion_history: tuple[EmotionLog, ...] = ()

    def evolve(self, **changes) -> "MomentBase":
        """Return a validated copy of this moment with ``changes`` applied."""
        data = self.model_dump()
        data.update(changes)
        return type(self).model_validate(data)

    def completed_tasks(self) -> int:
        return sum(1 for t in self.tasks if t.is_completed)


class ActiveMoment(MomentBase):
    status: Literal["active"] = "active"
    reflection: None = None


class CompletedMoment(MomentBase):
    status: Literal["completed"] = "completed"
    reflection: Reflection


class ArchivedMoment(MomentBase):
    status: Literal["archived"] = "archived"
    reflection: None = None


Moment = Annotated[
    Union[ActiveMoment, CompletedMoment, ArchivedMoment],
    Field(discriminator="status"),
]

MOMENT_LIST = TypeAdapter(list[Moment])


class Settings(BaseModel):
    """User display preferences."""

    theme: Theme = Theme.LIGHT
    language: Language = Language.AR
