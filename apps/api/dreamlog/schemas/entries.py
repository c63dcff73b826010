# apps/api/dreamlog/schemas/entries.py

from __future__ import annotations

from datetime import date
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class DreamTimelineEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["dream"] = "dream"
    id: Optional[Union[int, str]] = None
    title: str
    occurred_on: date
    content_excerpt: str
    tags: List[str] = []

    mood_before_sleep: Optional[int] = Field(default=None, ge=1, le=10)
    mood_after_wakeup: Optional[int] = Field(default=None, ge=1, le=10)
    mood_notes: Optional[str] = None

    # None = never analyzed (or the stored analysis did not parse)
    derived_themes: Optional[List[str]] = None
    derived_emotions: Optional[List[str]] = None
    derived_symbols: Optional[List[str]] = None


class JournalTimelineEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["journal"] = "journal"
    id: Optional[Union[int, str]] = None
    title: str
    occurred_on: date
    content_excerpt: str
    tags: List[str] = []

    mood: Optional[int] = Field(default=None, ge=1, le=10)


TimelineEntry = Annotated[
    Union[DreamTimelineEntry, JournalTimelineEntry],
    Field(discriminator="kind"),
]


class Timeline(BaseModel):
    model_config = ConfigDict(frozen=True)

    entries: List[TimelineEntry] = []
    oldest: Optional[date] = None
    newest: Optional[date] = None

    @property
    def dream_count(self) -> int:
        return sum(1 for e in self.entries if e.kind == "dream")

    @property
    def journal_count(self) -> int:
        return sum(1 for e in self.entries if e.kind == "journal")
