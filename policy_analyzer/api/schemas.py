"""
Pydantic schemas for API responses other than the analysis result.
"""

from datetime import datetime, timezone
from typing import List, Optional
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str


class ValidationViolation(BaseModel):
    """A single field that failed validation."""
    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    """Body of a 422 response."""
    error: str = "Validation failed"
    violations: List[ValidationViolation] = Field(default_factory=list)


class RateLimitErrorResponse(BaseModel):
    """Body of a 429 response."""
    error: str = "Rate limit exceeded."
    message: str
    retry_after: Optional[int] = Field(default=None, serialization_alias="retryAfter")


class ContactInfo(BaseModel):
    """Where to ask for demo access."""
    email: str
    url: str


class DemoAuthErrorResponse(BaseModel):
    """Body of a 401 response."""
    error: str
    message: str
    contact: ContactInfo


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(default="healthy")
    version: str
    model: str
    openai_configured: bool
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
