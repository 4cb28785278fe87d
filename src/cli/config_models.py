"""Pydantic configuration models for moments."""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

VALID_LLM_PROVIDERS = {"auto", "claude", "openai", "gemini"}
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class LLMConfig(BaseModel):
    """LLM provider configuration for plan drafts and insights."""

    provider: str = "auto"
    model: Optional[str] = None  # None = use provider default
    api_key: Optional[str] = None
    max_tokens: int = 1000

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v: str) -> str:
        if v not in VALID_LLM_PROVIDERS:
            raise ValueError(f"Invalid LLM provider: {v}. Must be one of {VALID_LLM_PROVIDERS}")
        return v


class PathsConfig(BaseModel):
    """File paths configuration."""

    data_db: Path = Path("~/moments/moments.db")
    log_file: Optional[Path] = None

    @model_validator(mode="after")
    def expand_paths(self):
        """Expand ~ in all paths."""
        self.data_db = self.data_db.expanduser()
        if self.log_file:
            self.log_file = self.log_file.expanduser()
        return self


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "WARNING"
    json_mode: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        v_upper = v.upper()
        if v_upper not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Must be one of {VALID_LOG_LEVELS}")
        return v_upper


class RemindersConfig(BaseModel):
    """Day-before / day-of reminder configuration."""

    enabled: bool = True
    window_days: list[int] = Field(default_factory=lambda: [0, 1])
    app_title: str = "MOMENTS"

    @field_validator("window_days")
    @classmethod
    def validate_window(cls, v: list[int]) -> list[int]:
        if any(d < 0 for d in v):
            raise ValueError(f"window_days must be >= 0, got {v}")
        return sorted(set(v))


class LifecycleConfig(BaseModel):
    """Lifecycle tuning."""

    postpone_days: int = Field(default=7, ge=1)


class MomentsConfig(BaseModel):
    """Main configuration model."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    reminders: RemindersConfig = Field(default_factory=RemindersConfig)
    lifecycle: LifecycleConfig = Field(default_factory=LifecycleConfig)

    @model_validator(mode="after")
    def expand_env_vars(self):
        """Expand ${VAR} patterns in API keys."""
        key = self.llm.api_key
        if key and key.startswith("${") and key.endswith("}"):
            self.llm.api_key = os.getenv(key[2:-1], "")
        return self

    @classmethod
    def from_dict(cls, data: dict) -> "MomentsConfig":
        return cls.model_validate(data)
