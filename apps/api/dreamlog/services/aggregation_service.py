# apps/api/dreamlog/services/aggregation_service.py

from __future__ import annotations

import re
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional

from dreamlog.schemas.entries import DreamTimelineEntry, JournalTimelineEntry, Timeline
from dreamlog.services.timeline_service import timespan_label

DEFAULT_WORD_LIMIT = 30
DEFAULT_TAG_LIMIT = 10
MIN_WORD_LENGTH = 5  # "longer than 4 characters"

# \w is unicode-aware, so umlauts/accents stay part of the word
_PUNCT = re.compile(r"[^\w\s]|_")


def tokenize(text: str) -> List[str]:
    cleaned = _PUNCT.sub("", (text or "").lower())
    return [w for w in cleaned.split() if len(w) >= MIN_WORD_LENGTH and not w.isdigit()]


def _ranked(counts: Counter, limit: int, key_name: str) -> List[Dict[str, Any]]:
    # count desc, then alphabetical so equal counts come out deterministic
    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    if limit and limit > 0:
        ranked = ranked[:limit]
    return [{key_name: k, "count": int(n)} for k, n in ranked]


def word_frequency(entries: Iterable[DreamTimelineEntry | JournalTimelineEntry], *, limit: int = DEFAULT_WORD_LIMIT) -> List[Dict[str, Any]]:
    """
    Exact occurrence counts over every excerpt in the merged timeline.
    A word used 3 times across 2 entries counts 3.
    """
    counts: Counter = Counter()
    for e in entries:
        counts.update(tokenize(e.content_excerpt))
    return _ranked(counts, limit, "word")


def tag_frequency(entries: Iterable[DreamTimelineEntry | JournalTimelineEntry], *, limit: int = DEFAULT_TAG_LIMIT) -> List[Dict[str, Any]]:
    counts: Counter = Counter()
    for e in entries:
        counts.update({t.strip().lower() for t in e.tags if t.strip()})
    return _ranked(counts, limit, "tag")


def _mean(values: List[int]) -> Optional[float]:
    if not values:
        return None
    return round(sum(values) / len(values), 2)


def mood_statistics(entries: Iterable[DreamTimelineEntry | JournalTimelineEntry]) -> Dict[str, Any]:
    before: List[int] = []
    after: List[int] = []
    journal: List[int] = []

    for e in entries:
        if e.kind == "dream":
            if e.mood_before_sleep is not None:
                before.append(e.mood_before_sleep)
            if e.mood_after_wakeup is not None:
                after.append(e.mood_after_wakeup)
        elif e.kind == "journal":
            if e.mood is not None:
                journal.append(e.mood)
        else:
            raise ValueError(f"unknown entry kind: {e.kind!r}")

    return {
        "moodBeforeSleep": {"average": _mean(before), "samples": len(before)},
        "moodAfterWakeup": {"average": _mean(after), "samples": len(after)},
        "journalMood": {"average": _mean(journal), "samples": len(journal)},
    }


def summarize_entry(entry: DreamTimelineEntry | JournalTimelineEntry) -> Dict[str, Any]:
    """Compact, JSON-ready view of one entry for the analysis prompt."""
    out: Dict[str, Any] = {
        "kind": entry.kind,
        "title": entry.title,
        "date": entry.occurred_on.isoformat(),
        "excerpt": entry.content_excerpt,
        "tags": list(entry.tags),
    }

    if entry.kind == "dream":
        if entry.derived_themes is not None:
            out["themes"] = list(entry.derived_themes)
        if entry.derived_emotions is not None:
            out["emotions"] = list(entry.derived_emotions)
        if entry.derived_symbols is not None:
            out["symbols"] = list(entry.derived_symbols)
        if entry.mood_before_sleep is not None:
            out["moodBeforeSleep"] = entry.mood_before_sleep
        if entry.mood_after_wakeup is not None:
            out["moodAfterWakeup"] = entry.mood_after_wakeup
        if entry.mood_notes:
            out["moodNotes"] = entry.mood_notes
    elif entry.kind == "journal":
        if entry.mood is not None:
            out["mood"] = entry.mood
    else:
        raise ValueError(f"unknown entry kind: {entry.kind!r}")

    return out


def build_analysis_payload(
    timeline: Timeline,
    *,
    time_range: str,
    word_limit: int = DEFAULT_WORD_LIMIT,
    tag_limit: int = DEFAULT_TAG_LIMIT,
) -> Dict[str, Any]:
    """
    Everything the analysis call gets to see, JSON-serializable.
    time_range is a display label only; it does not filter entries.
    """
    entries = timeline.entries
    dream_count = timeline.dream_count
    journal_count = timeline.journal_count

    return {
        "timeRange": time_range,
        "counts": {
            "dreams": dream_count,
            "journal": journal_count,
            "total": dream_count + journal_count,
        },
        "dateRange": {
            "oldest": timeline.oldest.isoformat() if timeline.oldest else None,
            "newest": timeline.newest.isoformat() if timeline.newest else None,
            "label": timespan_label(timeline),
        },
        "entries": [summarize_entry(e) for e in entries],
        "wordFrequency": word_frequency(entries, limit=word_limit),
        "tagFrequency": tag_frequency(entries, limit=tag_limit),
        "moodStatistics": mood_statistics(entries),
    }
