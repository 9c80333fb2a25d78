"""
API layer for the policy analyzer.
"""

from .routes import router
from .schemas import ErrorResponse, HealthResponse, ValidationErrorResponse

__all__ = [
    "router",
    "ErrorResponse",
    "HealthResponse",
    "ValidationErrorResponse",
]
