"""
Error kinds surfaced by the policy analyzer.
Each kind maps to exactly one HTTP response in the API layer.
"""

from typing import Dict, Optional


class PolicyAnalyzerError(Exception):
    """Base class for every error raised by this package."""


class RateLimitExceeded(PolicyAnalyzerError):
    """A client exhausted its request budget for the current window."""

    def __init__(self, message: str = "Rate limit exceeded. Try again later.", retry_after: Optional[int] = None):
        super().__init__(message)
        self.retry_after = retry_after


class DemoAuthError(PolicyAnalyzerError):
    """The demo password header is missing or wrong."""

    def __init__(self, error: str, message: str, contact: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.error = error
        self.message = message
        self.contact = contact or {}


class ExternalServiceError(PolicyAnalyzerError):
    """The LLM provider could not produce a usable response."""


class PolicyAnalysisError(PolicyAnalyzerError):
    """Uniform failure of the analysis pipeline. The original error is chained as __cause__."""
