"""End-to-end pipeline over the in-memory database."""

import json

import pytest

from dreamlog.core.errors import AnalysisUnavailableError, InsufficientDataError, MalformedAnalysisError
from dreamlog.services.patterns_service import analyze_patterns, run_pattern_pipeline


def _seed_scenario(add_dream, add_journal_entry):
    add_dream(title="Wald", content="Ich lief durch einen dunklen forest", date="2024-03-01")
    add_dream(title="See", content="Kaltes water überall", date=None, created_at="2024-03-03T07:00:00")
    add_journal_entry(title="Arbeit", content="Heute war der Arbeitstag anstrengend", date="2024-03-02",
                      mood=4, include_in_analysis=True)
    add_journal_entry(title="Privat", content="Geheimnis geheimnisvoll secretword", date="2024-03-04",
                      include_in_analysis=False)


def test_scenario_two_dreams_one_shared_entry(engine, add_dream, add_journal_entry, fake_analyzer):
    _seed_scenario(add_dream, add_journal_entry)

    report = analyze_patterns(engine, user_id=1, analyzer=fake_analyzer)

    assert len(fake_analyzer.calls) == 1
    payload = fake_analyzer.calls[0]
    assert payload["counts"] == {"dreams": 2, "journal": 1, "total": 3}
    assert [e["title"] for e in payload["entries"]] == ["See", "Arbeit", "Wald"]

    # the private entry is nowhere in what leaves the service
    blob = json.dumps(payload, ensure_ascii=False)
    assert "Privat" not in blob
    assert "secretword" not in blob
    assert all(w["word"] != "geheimnis" for w in payload["wordFrequency"])

    assert report.overview.total_count == 3
    assert report.overview.timespan == "30 Tage"


def test_time_range_is_only_a_label(engine, add_dream, fake_analyzer):
    add_dream(date="2020-01-01")
    add_dream(date="2021-06-01")
    add_dream(date="2024-03-01")

    report = analyze_patterns(engine, user_id=1, analyzer=fake_analyzer, time_range="7 Tage")

    assert fake_analyzer.calls[0]["counts"]["total"] == 3
    assert report.overview.timespan == "7 Tage"


def test_blank_time_range_gets_default(engine, add_dream, fake_analyzer):
    for _ in range(3):
        add_dream()
    report = analyze_patterns(engine, user_id=1, analyzer=fake_analyzer, time_range="  ")
    assert report.overview.timespan == "30 Tage"


def test_other_users_entries_are_ignored(engine, add_dream, add_journal_entry, fake_analyzer):
    add_dream(user_id=1)
    add_dream(user_id=2)
    add_dream(user_id=2)
    add_journal_entry(user_id=2, include_in_analysis=True)

    with pytest.raises(InsufficientDataError) as exc:
        analyze_patterns(engine, user_id=1, analyzer=fake_analyzer)

    assert exc.value.total == 1
    assert fake_analyzer.calls == []


def test_threshold_gate_stops_before_analyzer(engine, add_dream, add_journal_entry, fake_analyzer):
    add_dream()
    add_dream()
    add_journal_entry(include_in_analysis=False)

    with pytest.raises(InsufficientDataError):
        analyze_patterns(engine, user_id=1, analyzer=fake_analyzer)

    assert fake_analyzer.calls == []


def test_limit_keeps_most_recent_dreams(engine, add_dream, fake_analyzer):
    add_dream(title="old", date="2024-01-01")
    add_dream(title="mid", date="2024-02-01")
    add_dream(title="new", date="2024-03-01")

    analyze_patterns(engine, user_id=1, analyzer=fake_analyzer, limit=2)

    assert [e["title"] for e in fake_analyzer.calls[0]["entries"]] == ["new", "mid"]


def test_stored_analysis_reaches_payload(engine, add_dream, fake_analyzer):
    add_dream(title="a", analysis={"themes": ["Flucht"], "emotions": [], "symbols": [{"symbol": "Tür"}]})
    add_dream(title="b", analysis="{not json")
    add_dream(title="c", tags=["nacht"], mood_before_sleep=3)

    analyze_patterns(engine, user_id=1, analyzer=fake_analyzer)

    by_title = {e["title"]: e for e in fake_analyzer.calls[0]["entries"]}
    assert by_title["a"]["symbols"] == ["Tür"]
    assert "themes" not in by_title["b"]
    assert by_title["c"]["tags"] == ["nacht"]
    assert by_title["c"]["moodBeforeSleep"] == 3


def test_malformed_result_propagates(engine, add_dream, analysis_result):
    for _ in range(3):
        add_dream()
    raw = dict(analysis_result)
    raw.pop("emotionalPatterns")

    with pytest.raises(MalformedAnalysisError):
        analyze_patterns(engine, user_id=1, analyzer=lambda payload: raw)


def test_analyzer_crash_becomes_unavailable(engine, add_dream):
    for _ in range(3):
        add_dream()

    def broken(payload):
        raise ConnectionError("analysis host down")

    with pytest.raises(AnalysisUnavailableError) as exc:
        analyze_patterns(engine, user_id=1, analyzer=broken)
    assert "ConnectionError" in str(exc.value)


def test_pipeline_without_database(fake_analyzer):
    dreams = [{"id": i, "title": f"d{i}", "content": "forest", "date": f"2024-03-0{i}"} for i in (1, 2, 3)]
    report = run_pattern_pipeline(dreams, [], analyzer=fake_analyzer, time_range="3 Monate")
    assert report.overview.dream_count == 3
    assert fake_analyzer.calls[0]["wordFrequency"] == [{"word": "forest", "count": 3}]
