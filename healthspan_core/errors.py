"""Error taxonomy for the assessment core.

``ConfigurationError`` is fatal and raised only while loading the catalog.
Everything else is recoverable and is converted into an explicit state at the
boundary nearest its origin (HTTP status, entry view, "unavailable" narrative).
"""
from __future__ import annotations


class AssessmentError(Exception):
    """Base class for every error raised by healthspan_core."""


class ConfigurationError(AssessmentError):
    def __init__(self, problems: list[str]):
        self.problems = list(problems)
        super().__init__("catalog misconfigured: " + "; ".join(self.problems))


class InputValidationError(AssessmentError, ValueError):
    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class MalformedToken(AssessmentError, ValueError):
    pass


class NarrativeUnavailable(AssessmentError):
    pass


__all__ = [
    "AssessmentError",
    "ConfigurationError",
    "InputValidationError",
    "MalformedToken",
    "NarrativeUnavailable",
]
