# apps/api/dreamlog/repos/dreams_repo.py

from __future__ import annotations

from sqlalchemy import text


def list_dreams_by_user(conn, *, user_id: int):
    """
    All of a user's dreams, most recent first (same order the diary shows).

    Columns used by the pattern pipeline:
      id, title, content, date, created_at,
      analysis (json text or null), tags (text[] / json text),
      mood_before_sleep, mood_after_wakeup (1-10 or null), mood_notes
    """
    rows = conn.execute(
        text(
            """
            select
              id, title, content, date, created_at,
              analysis, tags,
              mood_before_sleep, mood_after_wakeup, mood_notes
            from dreams
            where user_id = :user_id
            order by coalesce(date, created_at) desc, id desc
            """
        ),
        {"user_id": int(user_id)},
    ).mappings().all()

    return [dict(r) for r in rows]
