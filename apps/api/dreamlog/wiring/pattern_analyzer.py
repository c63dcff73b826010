# apps/api/dreamlog/wiring/pattern_analyzer.py

from __future__ import annotations

import os
from typing import Any, Callable, Dict, Tuple

import requests

from dreamlog.core.errors import AnalysisUnavailableError, MalformedAnalysisError
from dreamlog.services.pattern_analysis_openai import analyze_patterns_openai

PatternAnalyzer = Callable[[Dict[str, Any]], Any]


def _parse_timeout(timeout_s: float) -> Tuple[float, float]:
    """
    requests timeout as (connect, read):
      connect: 5s (or 10% of total, capped)
      read: remainder
    """
    total = max(1.0, float(timeout_s))
    connect = min(5.0, max(1.0, total * 0.1))
    read = max(1.0, total - connect)
    return connect, read


def build_http_pattern_analyzer() -> PatternAnalyzer:
    """
    Returns a function(payload) -> untyped analysis dict that POSTs the payload
    as JSON to an external analysis service. No retries: the caller decides.
    """
    url = os.getenv("PATTERN_ANALYZER_URL", "http://analyzer:8002/patterns").strip()
    timeout_s = float(os.getenv("PATTERN_ANALYZER_TIMEOUT_S", "120"))
    timeout = _parse_timeout(timeout_s)

    # Optional header (auth between services)
    api_key = os.getenv("PATTERN_ANALYZER_API_KEY", "").strip()

    def _analyze(payload: Dict[str, Any]) -> Any:
        headers = {}
        if api_key:
            headers["x-api-key"] = api_key

        try:
            r = requests.post(url, json=payload, headers=headers, timeout=timeout)
        except (requests.exceptions.ReadTimeout, requests.exceptions.ConnectTimeout) as e:
            raise AnalysisUnavailableError(f"pattern analyzer timeout after {timeout_s:.0f}s") from e
        except requests.exceptions.RequestException as e:
            raise AnalysisUnavailableError(f"pattern analyzer request failed: {type(e).__name__}") from e

        if r.status_code != 200:
            # Keep error stable; don't leak huge bodies
            raise AnalysisUnavailableError(f"pattern analyzer failed: {r.status_code} :: {r.text[:300]}")

        try:
            return r.json()
        except ValueError as e:
            raise MalformedAnalysisError("pattern analyzer returned a non-JSON body") from e

    return _analyze


def build_pattern_analyzer() -> PatternAnalyzer:
    """
    PATTERN_ANALYZER=openai (default) calls the model directly,
    PATTERN_ANALYZER=http delegates to a separate service.
    """
    backend = os.getenv("PATTERN_ANALYZER", "openai").strip().lower()
    if backend == "openai":
        return analyze_patterns_openai
    if backend == "http":
        return build_http_pattern_analyzer()
    raise RuntimeError(f"PATTERN_ANALYZER must be 'openai' or 'http', got {backend!r}")
