# apps/api/dreamlog/services/patterns_service.py

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict

from dreamlog.core.errors import AnalysisUnavailableError, ExternalAnalysisError
from dreamlog.repos import dreams_repo, journal_repo
from dreamlog.schemas.patterns import PatternReport
from dreamlog.services.aggregation_service import DEFAULT_WORD_LIMIT, build_analysis_payload
from dreamlog.services.eligibility_service import MIN_ENTRIES, select_eligible
from dreamlog.services.report_service import assemble_report
from dreamlog.services.timeline_service import build_timeline_from_records

logger = logging.getLogger(__name__)

DEFAULT_TIME_RANGE = "30 Tage"


def _call_analyzer(analyzer: Callable[[Dict[str, Any]], Any], payload: Dict[str, Any]) -> Any:
    t0 = time.perf_counter()
    try:
        return analyzer(payload)
    except ExternalAnalysisError:
        raise
    except Exception as e:
        raise AnalysisUnavailableError(f"{type(e).__name__}: {str(e)}") from e
    finally:
        logger.info("pattern analyzer call took %.0f ms", (time.perf_counter() - t0) * 1000)


def run_pattern_pipeline(
    dreams,
    journal_entries,
    *,
    analyzer: Callable[[Dict[str, Any]], Any],
    time_range: str = DEFAULT_TIME_RANGE,
    limit: int = 0,
    min_entries: int = MIN_ENTRIES,
    word_limit: int = DEFAULT_WORD_LIMIT,
) -> PatternReport:
    """
    Filter -> Build -> Aggregate -> analyzer -> Assemble.
    Any stage failing stops the rest; there is no partial report.
    """
    eligible_dreams, eligible_journal = select_eligible(
        dreams,
        journal_entries,
        min_entries=min_entries,
        dream_limit=limit,
    )

    timeline = build_timeline_from_records(eligible_dreams, eligible_journal)
    payload = build_analysis_payload(timeline, time_range=time_range, word_limit=word_limit)

    raw = _call_analyzer(analyzer, payload)
    return assemble_report(raw, payload=payload)


def analyze_patterns(
    engine,
    *,
    user_id: int,
    analyzer: Callable[[Dict[str, Any]], Any],
    time_range: str = DEFAULT_TIME_RANGE,
    limit: int = 0,
    min_entries: int = MIN_ENTRIES,
    word_limit: int = DEFAULT_WORD_LIMIT,
) -> PatternReport:
    """
    Loads the user's dreams + journal entries and runs the pattern pipeline.

    Notes:
    - time_range is only a label for the report; all entries are included.
    - The DB transaction is closed before the (slow) analyzer call.
    """
    time_range = (time_range or "").strip() or DEFAULT_TIME_RANGE

    try:
        limit_int = int(limit or 0)
    except (TypeError, ValueError):
        limit_int = 0

    with engine.begin() as conn:
        dreams = dreams_repo.list_dreams_by_user(conn, user_id=user_id)
        journal_entries = journal_repo.list_journal_entries_by_user(conn, user_id=user_id)

    logger.info(
        "pattern analysis: user=%s dreams=%d journal_entries=%d time_range=%r limit=%d",
        user_id,
        len(dreams),
        len(journal_entries),
        time_range,
        limit_int,
    )

    return run_pattern_pipeline(
        dreams,
        journal_entries,
        analyzer=analyzer,
        time_range=time_range,
        limit=limit_int,
        min_entries=min_entries,
        word_limit=word_limit,
    )
