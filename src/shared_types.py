"""Shared enums and types for moments."""

from enum import StrEnum


class MomentType(StrEnum):
    STUDY = "study"
    WORK = "work"
    PERSONAL = "personal"
    TRAVEL = "travel"
    GOAL = "goal"


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MomentStatus(StrEnum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class Phase(StrEnum):
    """Lifecycle view of a moment. PAST_DUE is derived, never stored."""

    ACTIVE = "active"
    PAST_DUE = "past_due"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class Emotion(StrEnum):
    HAPPY = "happy"
    EXCITED = "excited"
    NEUTRAL = "neutral"
    CALM = "calm"
    WORRIED = "worried"
    STRESSED = "stressed"


class Vibe(StrEnum):
    CHILL = "chill"
    BALANCED = "balanced"
    HECTIC = "hectic"


class CountdownBand(StrEnum):
    FAR = "far"
    NEAR = "near"
    IMMINENT = "imminent"


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"


class Language(StrEnum):
    EN = "en"
    AR = "ar"


class Permission(StrEnum):
    GRANTED = "granted"
    DENIED = "denied"
    DEFAULT = "default"
