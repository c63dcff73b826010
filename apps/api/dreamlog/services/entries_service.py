# apps/api/dreamlog/services/entries_service.py

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional

from dreamlog.schemas.entries import DreamTimelineEntry, JournalTimelineEntry

logger = logging.getLogger(__name__)

EXCERPT_LIMIT = 300
ELLIPSIS = "…"


def excerpt(content: str | None, limit: int = EXCERPT_LIMIT) -> str:
    """
    Lossy one-way truncation: first `limit` chars + ELLIPSIS.
    Running it again on its own output gives the same string.
    """
    content = content or ""
    if len(content) <= limit:
        return content
    return content[:limit] + ELLIPSIS


def _to_date(x: Any) -> Optional[date]:
    if x is None:
        return None
    if isinstance(x, datetime):
        return x.date()
    if isinstance(x, date):
        return x
    if isinstance(x, str):
        s = x.strip()
        if not s:
            return None
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(s).date()
        except ValueError:
            return date.fromisoformat(s[:10])
    raise ValueError(f"unsupported date value: {type(x).__name__}")


def occurred_on(record: Mapping[str, Any]) -> date:
    """Explicit `date` first, `created_at` as the fallback."""
    d = None
    for key in ("date", "created_at"):
        try:
            d = _to_date(record.get(key))
        except ValueError:
            logger.debug("unreadable %s on entry %r", key, record.get("id"))
            d = None
        if d is not None:
            break
    if d is None:
        raise ValueError(f"entry {record.get('id')!r} has neither date nor created_at")
    return d


def _coerce_tags(raw: Any) -> List[str]:
    # postgres text[] arrives as a list; other stores hand us JSON or "a, b"
    if raw is None:
        return []
    if isinstance(raw, str):
        s = raw.strip()
        if not s:
            return []
        try:
            raw = json.loads(s)
        except ValueError:
            raw = s.split(",")
        if isinstance(raw, str):
            raw = [raw]
    if not isinstance(raw, (list, tuple, set)):
        return []

    out: List[str] = []
    for t in raw:
        t = str(t).strip()
        if t and t not in out:
            out.append(t)
    return out


def _mood(x: Any) -> Optional[int]:
    if x is None or isinstance(x, bool):
        return None
    try:
        v = int(x)
    except (TypeError, ValueError):
        return None
    return v if 1 <= v <= 10 else None


def _names(items: Any, *keys: str) -> Optional[List[str]]:
    if not isinstance(items, list):
        return None

    out: List[str] = []
    for item in items:
        if isinstance(item, str):
            name = item
        elif isinstance(item, dict):
            name = next((item[k] for k in keys if isinstance(item.get(k), str)), "")
        else:
            continue
        name = name.strip()
        if name:
            out.append(name)
    return out


def parse_prior_analysis(raw: Any) -> Optional[Dict[str, List[str]]]:
    """
    A dream's stored analysis is a JSON string (or an already-decoded dict):
      { themes: [str], emotions: [{name, intensity}], symbols: [{symbol, meaning}], ... }

    Returns {"themes", "emotions", "symbols"} (each list or None), or None
    when there is no analysis or it cannot be read. Never raises.
    """
    if raw is None:
        return None

    data = raw
    if isinstance(raw, (bytes, str)):
        if not raw.strip():
            return None
        try:
            data = json.loads(raw)
        except ValueError:
            logger.debug("ignoring unparsable stored dream analysis")
            return None

    if not isinstance(data, dict):
        logger.debug("ignoring stored dream analysis of type %s", type(data).__name__)
        return None

    return {
        "themes": _names(data.get("themes"), "name", "theme"),
        "emotions": _names(data.get("emotions"), "name", "emotion"),
        "symbols": _names(data.get("symbols"), "symbol", "name"),
    }


def normalize_dream(record: Mapping[str, Any]) -> DreamTimelineEntry:
    analysis = parse_prior_analysis(record.get("analysis")) or {}

    return DreamTimelineEntry(
        id=record.get("id"),
        title=str(record.get("title") or ""),
        occurred_on=occurred_on(record),
        content_excerpt=excerpt(record.get("content")),
        tags=_coerce_tags(record.get("tags")),
        mood_before_sleep=_mood(record.get("mood_before_sleep")),
        mood_after_wakeup=_mood(record.get("mood_after_wakeup")),
        mood_notes=(record.get("mood_notes") or None),
        derived_themes=analysis.get("themes"),
        derived_emotions=analysis.get("emotions"),
        derived_symbols=analysis.get("symbols"),
    )


def normalize_journal_entry(record: Mapping[str, Any]) -> JournalTimelineEntry:
    return JournalTimelineEntry(
        id=record.get("id"),
        title=str(record.get("title") or ""),
        occurred_on=occurred_on(record),
        content_excerpt=excerpt(record.get("content")),
        tags=_coerce_tags(record.get("tags")),
        mood=_mood(record.get("mood")),
    )
