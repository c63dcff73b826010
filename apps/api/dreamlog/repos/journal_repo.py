# apps/api/dreamlog/repos/journal_repo.py

from __future__ import annotations

from sqlalchemy import text


def list_journal_entries_by_user(conn, *, user_id: int):
    """
    All journal entries of a user, most recent first.
    Opt-in filtering (include_in_analysis) happens in the service, not here,
    so callers can still tell "no entries" from "no shared entries".
    """
    rows = conn.execute(
        text(
            """
            select
              id, title, content, date, created_at,
              tags, mood, include_in_analysis
            from journal_entries
            where user_id = :user_id
            order by coalesce(date, created_at) desc, id desc
            """
        ),
        {"user_id": int(user_id)},
    ).mappings().all()

    out = []
    for r in rows:
        d = dict(r)
        # sqlite hands booleans back as 0/1
        d["include_in_analysis"] = bool(d.get("include_in_analysis"))
        out.append(d)
    return out
