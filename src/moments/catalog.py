"""Display attributes for categories, emotions and vibes, keyed by enum."""

from dataclasses import dataclass
from enum import Enum

from shared_types import CountdownBand, Emotion, Language, MomentType, Vibe


@dataclass(frozen=True)
class CategoryStyle:
    label: dict[Language, str]
    color: str  # hex, used by charts
    rich_style: str


@dataclass(frozen=True)
class EmotionStyle:
    label: dict[Language, str]
    icon: str
    rich_style: str


CATEGORY_CONFIG: dict[MomentType, CategoryStyle] = {
    MomentType.STUDY: CategoryStyle({Language.EN: "Study", Language.AR: "دراسة"}, "#8b5cf6", "magenta"),
    MomentType.WORK: CategoryStyle({Language.EN: "Work", Language.AR: "عمل"}, "#64748b", "bright_black"),
    MomentType.PERSONAL: CategoryStyle({Language.EN: "Personal", Language.AR: "شخصي"}, "#ec4899", "bright_magenta"),
    MomentType.TRAVEL: CategoryStyle({Language.EN: "Travel", Language.AR: "سفر"}, "#0ea5e9", "cyan"),
    MomentType.GOAL: CategoryStyle({Language.EN: "Goal", Language.AR: "هدف"}, "#10b981", "green"),
}

EMOTION_CONFIG: dict[Emotion, EmotionStyle] = {
    Emotion.HAPPY: EmotionStyle({Language.EN: "Happy", Language.AR: "سعيد"}, "😊", "green"),
    Emotion.EXCITED: EmotionStyle({Language.EN: "Excited", Language.AR: "متحمس"}, "🤩", "bright_green"),
    Emotion.NEUTRAL: EmotionStyle({Language.EN: "Neutral", Language.AR: "محايد"}, "😐", "dim"),
    Emotion.CALM: EmotionStyle({Language.EN: "Calm", Language.AR: "هادئ"}, "😌", "blue"),
    Emotion.WORRIED: EmotionStyle({Language.EN: "Worried", Language.AR: "قلق"}, "😟", "yellow"),
    Emotion.STRESSED: EmotionStyle({Language.EN: "Stressed", Language.AR: "متوتر"}, "😫", "red"),
}

VIBE_CONFIG: dict[Vibe, tuple[dict[Language, str], str]] = {
    Vibe.CHILL: ({Language.EN: "Chill", Language.AR: "مريح"}, "green"),
    Vibe.BALANCED: ({Language.EN: "Balanced", Language.AR: "متوازن"}, "yellow"),
    Vibe.HECTIC: ({Language.EN: "Hectic", Language.AR: "مزدحم"}, "red"),
}

BAND_STYLE: dict[CountdownBand, str] = {
    CountdownBand.FAR: "green",
    CountdownBand.NEAR: "yellow",
    CountdownBand.IMMINENT: "red",
}

REMINDER_TEXT: dict[Language, str] = {
    Language.EN: "Reminder: {title} is coming up!",
    Language.AR: "تذكير: {title} قريب جداً!",
}


def _check_exhaustive(name: str, mapping: dict, enum_cls: type[Enum]) -> None:
    missing = set(enum_cls) - set(mapping)
    if missing:
        raise RuntimeError(f"{name} missing entries: {sorted(str(m) for m in missing)}")


for _name, _mapping, _enum in (
    ("CATEGORY_CONFIG", CATEGORY_CONFIG, MomentType),
    ("EMOTION_CONFIG", EMOTION_CONFIG, Emotion),
    ("VIBE_CONFIG", VIBE_CONFIG, Vibe),
    ("BAND_STYLE", BAND_STYLE, CountdownBand),
    ("REMINDER_TEXT", REMINDER_TEXT, Language),
):
    _check_exhaustive(_name, _mapping, _enum)
for _style in (*CATEGORY_CONFIG.values(), *EMOTION_CONFIG.values()):
    _check_exhaustive("label", _style.label, Language)


def category_label(moment_type: MomentType | str, language: Language | str = Language.EN) -> str:
    return CATEGORY_CONFIG[MomentType(moment_type)].label[Language(language)]


def emotion_label(emotion: Emotion | str, language: Language | str = Language.EN) -> str:
    style = EMOTION_CONFIG[Emotion(emotion)]
    return f"{style.icon} {style.label[Language(language)]}"


def vibe_label(vibe: Vibe | str, language: Language | str = Language.EN) -> str:
    return VIBE_CONFIG[Vibe(vibe)][0][Language(language)]


def reminder_body(title: str, language: Language | str = Language.EN) -> str:
    return REMINDER_TEXT[Language(language)].format(title=title)
