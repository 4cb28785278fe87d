"""AI-drafted moment plans and reflection insights.

The assistant only ever seeds a create form: a plan is a draft that the caller
turns into a ``CreateMoment`` command. Any failure, transport or shape, comes
back as a single ``PlannerError`` and nothing from a bad response is used.
"""

import json
from typing import Optional

import structlog
from pydantic import BaseModel, Field, ValidationError, field_validator

from llm import LLMError
from shared_types import Language, MomentType, Priority

logger = structlog.get_logger()

MAX_PLAN_TASKS = 6

_LANGUAGE_NAMES = {Language.EN: "English", Language.AR: "Arabic"}

_PLAN_PROMPT = """Generate a plan for this life event or goal: "{description}".
Respond ONLY in JSON with:
- title
- type (study, travel, work, personal, goal)
- priority (low, medium, high)
- notes
- tasks (3-6 items)
Language: {language}."""

_INSIGHT_SYSTEM = """You help people reflect on goals and events they have just finished.
Read the lessons they wrote and reply with one or two short, warm sentences that
name a pattern worth keeping and one thing to try differently next time.
No preamble, no lists."""

_INSIGHT_PROMPT = """Moment: "{title}"
Rating: {rating}/5
Lessons: {lessons}
Language: {language}."""


class PlannerError(Exception):
    """The assistant was unreachable or returned something unusable."""


class MomentPlan(BaseModel):
    """Draft fields for a new moment."""

    title: str = Field(min_length=1)
    type: MomentType = MomentType.PERSONAL
    priority: Priority = Priority.MEDIUM
    notes: str = ""
    tasks: list[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title is blank")
        return v

    @field_validator("tasks")
    @classmethod
    def clean_tasks(cls, v: list[str]) -> list[str]:
        return [t.strip() for t in v if t.strip()][:MAX_PLAN_TASKS]


def _strip_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[-1]
    if text.endswith("```"):
        text = text.rsplit("```", 1)[0]
    return text.strip()


def parse_plan(response: str) -> MomentPlan:
    """Parse an assistant reply into a plan, all-or-nothing."""
    if not isinstance(response, str):
        raise PlannerError("Assistant reply was empty")
    try:
        data = json.loads(_strip_fences(response))
    except json.JSONDecodeError as e:
        raise PlannerError("Assistant reply was not valid JSON") from e
    if not isinstance(data, dict):
        raise PlannerError("Assistant reply was not a JSON object")
    try:
        return MomentPlan.model_validate(data)
    except ValidationError as e:
        raise PlannerError(f"Assistant reply had unexpected shape ({e.error_count()} errors)") from e


class MomentPlanner:
    """Talks to an LLM provider to draft plans and reflection insights."""

    def __init__(self, provider=None, max_tokens: int = 1000):
        self._provider = provider
        self.max_tokens = max_tokens

    def _get_provider(self):
        if self._provider:
            return self._provider
        from llm.factory import create_llm_provider

        self._provider = create_llm_provider()
        return self._provider

    def _generate(self, prompt: str, system: Optional[str] = None, json_mode: bool = False) -> str:
        try:
            provider = self._get_provider()
            return provider.generate(
                messages=[{"role": "user", "content": prompt}],
                system=system,
                max_tokens=self.max_tokens,
                json_mode=json_mode,
            )
        except LLMError as e:
            logger.warning("planner_request_failed", error=str(e))
            raise PlannerError("Generation failed, try again") from e

    def plan(self, description: str, language: Language | str = Language.EN) -> MomentPlan:
        if not description or not description.strip():
            raise PlannerError("Describe the event or goal first")
        prompt = _PLAN_PROMPT.format(
            description=description.strip(),
            language=_LANGUAGE_NAMES[Language(language)],
        )
        response = self._generate(prompt, json_mode=True)
        plan = parse_plan(response)
        logger.info("plan_generated", type=str(plan.type), tasks=len(plan.tasks))
        return plan

    def insight(
        self,
        title: str,
        lessons: str,
        rating: int,
        language: Language | str = Language.EN,
    ) -> str:
        if not lessons or not lessons.strip():
            raise PlannerError("Write down a lesson first")
        prompt = _INSIGHT_PROMPT.format(
            title=title,
            rating=rating,
            lessons=lessons.strip()[:2000],
            language=_LANGUAGE_NAMES[Language(language)],
        )
        text = self._generate(prompt, system=_INSIGHT_SYSTEM)
        if not isinstance(text, str) or not text.strip():
            raise PlannerError("Assistant returned an empty insight")
        return text.strip()
