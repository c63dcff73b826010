# apps/api/dreamlog/services/eligibility_service.py

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence, Tuple

from dreamlog.core.errors import InsufficientDataError

MIN_ENTRIES = 3


def is_eligible_journal_entry(entry: Mapping[str, Any]) -> bool:
    # only an explicit opt-in counts; "true"/1 from a sloppy caller does not
    return entry.get("include_in_analysis") is True


def select_eligible(
    dreams: Sequence[Mapping[str, Any]],
    journal_entries: Sequence[Mapping[str, Any]],
    *,
    min_entries: int = MIN_ENTRIES,
    dream_limit: int = 0,
) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """
    Returns (dreams, eligible_journal_entries) as fresh lists.

    - all dreams go in; journal entries only when include_in_analysis is True
    - total below `min_entries` raises InsufficientDataError
    - dream_limit > 0 keeps only the first N dreams, applied AFTER the
      threshold check (the gate counts everything the user has)
    """
    dreams_out = [dict(d) for d in dreams]
    journal_out = [dict(j) for j in journal_entries if is_eligible_journal_entry(j)]

    total = len(dreams_out) + len(journal_out)
    if total < min_entries:
        raise InsufficientDataError(total=total, required=min_entries)

    if dream_limit and dream_limit > 0:
        dreams_out = dreams_out[:dream_limit]

    return dreams_out, journal_out
