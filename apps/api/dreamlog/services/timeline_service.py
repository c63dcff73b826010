# apps/api/dreamlog/services/timeline_service.py

from __future__ import annotations

from typing import Any, List, Mapping, Sequence

from dreamlog.schemas.entries import (
    DreamTimelineEntry,
    JournalTimelineEntry,
    Timeline,
)
from dreamlog.services.entries_service import normalize_dream, normalize_journal_entry


def build_timeline(
    dreams: Sequence[DreamTimelineEntry],
    journal_entries: Sequence[JournalTimelineEntry],
) -> Timeline:
    """
    Merge into one list, most recent first.
    sorted() is stable: same-day entries keep their input order
    (dreams as given, then journal entries as given).
    """
    merged: List[DreamTimelineEntry | JournalTimelineEntry] = [*dreams, *journal_entries]
    if not merged:
        return Timeline(entries=[], oldest=None, newest=None)

    ordered = sorted(merged, key=lambda e: e.occurred_on, reverse=True)
    return Timeline(
        entries=ordered,
        oldest=ordered[-1].occurred_on,
        newest=ordered[0].occurred_on,
    )


def build_timeline_from_records(
    dreams: Sequence[Mapping[str, Any]],
    journal_entries: Sequence[Mapping[str, Any]],
) -> Timeline:
    return build_timeline(
        [normalize_dream(d) for d in dreams],
        [normalize_journal_entry(j) for j in journal_entries],
    )


def timespan_label(timeline: Timeline) -> str:
    """'2024-03-01 – 2024-03-28' style label of the covered dates ('' when empty)."""
    if timeline.oldest is None or timeline.newest is None:
        return ""
    if timeline.oldest == timeline.newest:
        return timeline.newest.isoformat()
    return f"{timeline.oldest.isoformat()} – {timeline.newest.isoformat()}"
