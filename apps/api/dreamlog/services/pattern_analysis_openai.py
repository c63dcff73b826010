# apps/api/dreamlog/services/pattern_analysis_openai.py
from __future__ import annotations

import json
import os
import re
from typing import Any, Dict, Optional

from openai import OpenAI

from dreamlog.core.errors import MalformedAnalysisError

_client: Optional[OpenAI] = None

REPORT_SHAPE = """{
  "overview": {"summary": str, "dominantMood": str},
  "recurringSymbols": [{"symbol": str, "frequency": 0-100, "description": str, "possibleMeaning": str, "contexts": [str]}],
  "dominantThemes": [{"theme": str, "frequency": 0-100, "description": str, "relatedSymbols": [str], "emotionalTone": str}],
  "emotionalPatterns": [{"emotion": str, "averageIntensity": 0-1, "frequency": 0-100, "trend": "rising"|"falling"|"stable", "associatedThemes": [str]}],
  "lifeAreaInsights": [{"area": str, "relatedSymbols": [str], "challenges": [str], "strengths": [str], "suggestions": [str]}],
  "personalGrowth": {"potentialAreas": [str], "suggestions": [str]},
  "wordFrequency": [{"word": str, "count": int}],
  "timeline": {"periods": [{"timeframe": str, "dominantThemes": [str], "dominantEmotions": [str], "summary": str}]},
  "recommendations": {"general": [str], "actionable": [str]}
}"""


def _get_client() -> OpenAI:
    """
    Lazy client creation so uvicorn reload won't crash on import
    if OPENAI_API_KEY isn't loaded until app startup.
    """
    global _client
    if _client is None:
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise RuntimeError("OPENAI_API_KEY is not set in environment")
        timeout_s = float(os.getenv("OPENAI_TIMEOUT_S", "120"))
        _client = OpenAI(api_key=api_key, timeout=timeout_s)
    return _client


def extract_json(text: str) -> Dict[str, Any]:
    """
    Handles cases where the model returns extra text (or a code fence) around JSON.
    """
    text = (text or "").strip()
    if not text:
        raise MalformedAnalysisError("empty model response")

    candidate = text
    if not (text.startswith("{") and text.endswith("}")):
        m = re.search(r"\{.*\}", text, flags=re.DOTALL)
        if not m:
            raise MalformedAnalysisError(f"could not find JSON object in: {text[:200]}")
        candidate = m.group(0)

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise MalformedAnalysisError(f"model response is not valid JSON: {e}")

    if not isinstance(data, dict):
        raise MalformedAnalysisError("model response JSON is not an object")
    return data


def build_prompt(payload: Dict[str, Any], *, language: str) -> str:
    counts = payload.get("counts") or {}
    return (
        "You are a dream analyst working with psychological principles and symbolism.\n"
        "Below are a person's dreams and the journal entries they chose to share, most recent first, "
        "together with precomputed statistics (word counts, tag counts, mood averages).\n"
        "Find patterns ACROSS the entries: recurring symbols, dominant themes, emotional trends over time, "
        "links to areas of life, and split the covered time into a few periods.\n"
        "Frequencies are percentages of entries (0-100). Intensities are 0-1. "
        "trend is one of rising, falling, stable.\n"
        "Return ONLY valid JSON with exactly this shape:\n"
        f"{REPORT_SHAPE}\n"
        f"Write all text in {language}.\n"
        f"Time range label: {payload.get('timeRange')}\n"
        f"Entries: {counts.get('dreams', 0)} dreams, {counts.get('journal', 0)} journal entries.\n"
        f"Data:\n{json.dumps(payload, ensure_ascii=False)}\n"
    )


def analyze_patterns_openai(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    One model call per aggregation. Returns the parsed (still untrusted) JSON object.
    Network/auth errors propagate; bad JSON raises MalformedAnalysisError.
    """
    client = _get_client()
    model = os.getenv("OPENAI_PATTERN_MODEL", "gpt-4o-mini")
    language = os.getenv("PATTERN_LANGUAGE", "German")

    resp = client.responses.create(
        model=model,
        input=build_prompt(payload, language=language),
        temperature=0.2,
    )

    raw = (resp.output_text or "").strip()
    return extract_json(raw)
