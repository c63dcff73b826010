# apps/api/dreamlog/services/report_service.py

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import ValidationError

from dreamlog.core.errors import MalformedAnalysisError
from dreamlog.schemas.patterns import PatternReport

REQUIRED_SECTIONS = (
    "overview",
    "recurringSymbols",
    "dominantThemes",
    "emotionalPatterns",
    "recommendations",
)


def _validation_summary(err: ValidationError, limit: int = 5) -> str:
    parts: List[str] = []
    for e in err.errors()[:limit]:
        loc = ".".join(str(p) for p in e.get("loc", ()))
        parts.append(f"{loc}: {e.get('msg')}")
    more = len(err.errors()) - limit
    if more > 0:
        parts.append(f"(+{more} more)")
    return "; ".join(parts)


def assemble_report(raw: Any, *, payload: Dict[str, Any]) -> PatternReport:
    """
    Turn the analyzer's untyped answer into a PatternReport.

    - missing mandatory section -> MalformedAnalysisError (never an empty report)
    - wrong shape -> MalformedAnalysisError
    - optional sections the model skipped stay empty, nothing is made up
    - overview counts/timespan come from our own payload, not from the model
    """
    if not isinstance(raw, dict):
        raise MalformedAnalysisError(f"analysis result must be a JSON object, got {type(raw).__name__}")

    missing = [k for k in REQUIRED_SECTIONS if raw.get(k) is None]
    if missing:
        raise MalformedAnalysisError(
            f"analysis result is missing sections: {', '.join(missing)}",
            missing=missing,
        )

    data = dict(raw)
    overview = data.get("overview")
    if not isinstance(overview, dict):
        raise MalformedAnalysisError("analysis overview must be an object")

    counts = payload.get("counts") or {}
    data["overview"] = {
        "summary": overview.get("summary") or "",
        "dominantMood": overview.get("dominantMood") or "",
        "timespan": payload.get("timeRange") or "",
        "dreamCount": int(counts.get("dreams", 0)),
        "journalCount": int(counts.get("journal", 0)),
        "totalCount": int(counts.get("total", 0)),
    }

    # "null" from the model on an optional section means "not given"
    for key in ("lifeAreaInsights", "personalGrowth", "wordFrequency", "timeline"):
        if data.get(key) is None:
            data.pop(key, None)

    try:
        report = PatternReport.model_validate(data)
    except ValidationError as e:
        raise MalformedAnalysisError(f"analysis result has an invalid shape: {_validation_summary(e)}")

    return report.model_copy(
        update={
            "recurring_symbols": sorted(report.recurring_symbols, key=lambda s: -s.frequency),
            "dominant_themes": sorted(report.dominant_themes, key=lambda t: -t.frequency),
            "emotional_patterns": sorted(report.emotional_patterns, key=lambda e: -e.frequency),
            "word_frequency": sorted(report.word_frequency, key=lambda w: -w.count),
        }
    )
