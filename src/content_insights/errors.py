from __future__ import annotations

from typing import Optional


class AnalysisError(Exception):
    """
    Base class for every failure that aborts an analysis run.
    """


class ConfigurationError(AnalysisError):
    """Missing or invalid configuration (e.g. no API key)."""


class UpstreamError(AnalysisError):
    """
    The completion endpoint answered with a non-success status
    or could not be reached at all.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return f"Upstream error: {self.message}"
        return f"Upstream error ({self.status_code}): {self.message}"


class MalformedResponseError(AnalysisError):
    """
    Model output could not be parsed into the expected structure.
    The raw text is kept for diagnostics.
    """

    def __init__(self, message: str, raw_text: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.raw_text = raw_text
