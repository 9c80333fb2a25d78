"""
Core services for the policy analyzer.
"""

from .cache import ExpiringCache
from .correlation import configure_logging, get_correlation_id
from .metrics import MetricsRecorder
from .openai_client import OpenAIClient, OpenAIModelConfig, get_openai_client
from .rate_limiter import RateLimiter, get_rate_limiter
from .request_logger import RequestLogger

__all__ = [
    "ExpiringCache",
    "configure_logging",
    "get_correlation_id",
    "MetricsRecorder",
    "OpenAIClient",
    "OpenAIModelConfig",
    "get_openai_client",
    "RateLimiter",
    "get_rate_limiter",
    "RequestLogger",
]
