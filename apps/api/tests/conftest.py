"""Test configuration: in-memory database and a canned analysis result."""

import json

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool

DDL = [
    """
    create table dreams (
      id integer primary key autoincrement,
      user_id integer,
      title text not null,
      content text not null,
      date text,
      created_at text not null,
      analysis text,
      tags text,
      mood_before_sleep integer,
      mood_after_wakeup integer,
      mood_notes text
    )
    """,
    """
    create table journal_entries (
      id integer primary key autoincrement,
      user_id integer not null,
      title text not null,
      content text not null,
      date text,
      created_at text not null,
      tags text,
      mood integer,
      include_in_analysis boolean not null default 0
    )
    """,
]


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    with eng.begin() as conn:
        for stmt in DDL:
            conn.execute(text(stmt))
    yield eng
    eng.dispose()


@pytest.fixture
def add_dream(engine):
    def _add(user_id=1, title="Dream", content="", date="2024-03-01", created_at="2024-03-01T08:00:00",
             analysis=None, tags=None, mood_before_sleep=None, mood_after_wakeup=None, mood_notes=None):
        if isinstance(analysis, dict):
            analysis = json.dumps(analysis)
        with engine.begin() as conn:
            conn.execute(
                text("""
                    insert into dreams (user_id, title, content, date, created_at, analysis, tags,
                                        mood_before_sleep, mood_after_wakeup, mood_notes)
                    values (:user_id, :title, :content, :date, :created_at, :analysis, :tags,
                            :mbs, :maw, :notes)
                """),
                {
                    "user_id": user_id, "title": title, "content": content,
                    "date": date, "created_at": created_at, "analysis": analysis,
                    "tags": json.dumps(tags) if tags is not None else None,
                    "mbs": mood_before_sleep, "maw": mood_after_wakeup, "notes": mood_notes,
                },
            )
    return _add


@pytest.fixture
def add_journal_entry(engine):
    def _add(user_id=1, title="Entry", content="", date="2024-03-01", created_at="2024-03-01T20:00:00",
             tags=None, mood=None, include_in_analysis=False):
        with engine.begin() as conn:
            conn.execute(
                text("""
                    insert into journal_entries (user_id, title, content, date, created_at, tags, mood,
                                                 include_in_analysis)
                    values (:user_id, :title, :content, :date, :created_at, :tags, :mood, :inc)
                """),
                {
                    "user_id": user_id, "title": title, "content": content,
                    "date": date, "created_at": created_at,
                    "tags": json.dumps(tags) if tags is not None else None,
                    "mood": mood, "inc": include_in_analysis,
                },
            )
    return _add


@pytest.fixture
def analysis_result():
    """What a well-behaved model answers (camelCase, as prompted)."""
    return {
        "overview": {
            "summary": "Water and forests keep coming back.",
            "dominantMood": "nachdenklich",
            "timespan": "whatever the model says",
            "dreamCount": 99,
        },
        "recurringSymbols": [
            {"symbol": "Wald", "frequency": 40, "description": "d", "possibleMeaning": "m", "contexts": ["Nacht"]},
            {"symbol": "Wasser", "frequency": 80, "description": "d", "possibleMeaning": "m", "contexts": []},
        ],
        "dominantThemes": [
            {"theme": "Suche", "frequency": 60, "description": "d", "relatedSymbols": ["Wald"], "emotionalTone": "gemischt"},
        ],
        "emotionalPatterns": [
            {"emotion": "Neugier", "averageIntensity": 0.7, "frequency": 50, "trend": "rising", "associatedThemes": ["Suche"]},
        ],
        "recommendations": {"general": ["Keep writing."], "actionable": ["Note the water dreams."]},
    }


@pytest.fixture
def fake_analyzer(analysis_result):
    """Records every payload it gets and answers with analysis_result."""
    calls = []

    def _analyze(payload):
        calls.append(payload)
        return analysis_result

    _analyze.calls = calls
    return _analyze
