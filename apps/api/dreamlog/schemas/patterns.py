# apps/api/dreamlog/schemas/patterns.py
#
# Shape of the pattern report returned to the web client.
# Field names go over the wire in camelCase.

from __future__ import annotations

from typing import Annotated, Any, List, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _to_number(x: Any) -> float:
    if isinstance(x, bool):
        raise ValueError("expected a number, got a boolean")
    if isinstance(x, str):
        x = x.strip().rstrip("%").strip()
    return float(x)


def _clamp_percentage(x: Any) -> float:
    return max(0.0, min(100.0, _to_number(x)))


def _clamp_intensity(x: Any) -> float:
    return max(0.0, min(1.0, _to_number(x)))


def _normalize_trend(x: Any) -> str:
    t = str(x or "").strip().lower()
    return t if t in ("rising", "falling", "stable") else "stable"


Percentage = Annotated[float, BeforeValidator(_clamp_percentage)]
Intensity = Annotated[float, BeforeValidator(_clamp_intensity)]
Trend = Annotated[Literal["rising", "falling", "stable"], BeforeValidator(_normalize_trend)]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PatternOverview(_CamelModel):
    summary: str = ""
    timespan: str = ""
    dream_count: int = 0
    journal_count: int = 0
    total_count: int = 0
    dominant_mood: str = ""


class PatternSymbol(_CamelModel):
    symbol: str
    frequency: Percentage = 0.0
    description: str = ""
    possible_meaning: str = ""
    contexts: List[str] = []


class PatternTheme(_CamelModel):
    theme: str
    frequency: Percentage = 0.0
    description: str = ""
    related_symbols: List[str] = []
    emotional_tone: str = ""


class PatternEmotion(_CamelModel):
    emotion: str
    average_intensity: Intensity = 0.0
    frequency: Percentage = 0.0
    trend: Trend = "stable"
    associated_themes: List[str] = []


class LifeAreaInsight(_CamelModel):
    area: str
    related_symbols: List[str] = []
    challenges: List[str] = []
    strengths: List[str] = []
    suggestions: List[str] = []


class PersonalGrowth(_CamelModel):
    potential_areas: List[str] = []
    suggestions: List[str] = []


class WordCount(_CamelModel):
    word: str
    count: int


class TimelinePeriod(_CamelModel):
    timeframe: str
    dominant_themes: List[str] = []
    dominant_emotions: List[str] = []
    summary: str = ""


class PatternTimeline(_CamelModel):
    periods: List[TimelinePeriod] = []


class Recommendations(_CamelModel):
    general: List[str] = []
    actionable: List[str] = []


class PatternReport(_CamelModel):
    overview: PatternOverview
    recurring_symbols: List[PatternSymbol]
    dominant_themes: List[PatternTheme]
    emotional_patterns: List[PatternEmotion]
    recommendations: Recommendations

    # optional: carried through empty when the analysis leaves them out
    life_area_insights: List[LifeAreaInsight] = []
    personal_growth: PersonalGrowth = Field(default_factory=PersonalGrowth)
    word_frequency: List[WordCount] = []
    timeline: PatternTimeline = Field(default_factory=PatternTimeline)
