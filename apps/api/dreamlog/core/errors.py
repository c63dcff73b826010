# apps/api/dreamlog/core/errors.py

from __future__ import annotations

from typing import Sequence


class PatternAnalysisError(Exception):
    """Base for every failure the pattern pipeline raises on purpose."""


class InsufficientDataError(PatternAnalysisError):
    """
    Not enough entries to look for patterns.
    User-facing: the user fixes it by writing more entries.
    """

    def __init__(self, total: int, required: int):
        self.total = int(total)
        self.required = int(required)
        super().__init__(
            f"at least {self.required} entries (dreams and/or shared journal entries) "
            f"are needed for a pattern analysis, found {self.total}"
        )


class ExternalAnalysisError(PatternAnalysisError):
    """The analysis service failed. Retrying the request may help."""


class MalformedAnalysisError(ExternalAnalysisError):
    def __init__(self, detail: str, *, missing: Sequence[str] = ()):
        self.missing = list(missing)
        self.detail = detail
        super().__init__(detail)


class AnalysisUnavailableError(ExternalAnalysisError):
    """The analyzer call itself failed (network, auth, quota)."""
