"""
Pydantic models for the policy analysis pipeline.
Wire names are camelCase; Python attributes are snake_case.
"""

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


JURISDICTIONS = ("IT", "EU", "US", "UK", "GLOBAL")
RISK_LEVELS = ("low", "medium", "high")
DEFAULT_RISK_LEVEL = "medium"
DEFAULT_LANGUAGE = "en"

Jurisdiction = Literal["IT", "EU", "US", "UK", "GLOBAL"]


class AnalysisRequest(BaseModel):
    """Request body for analyzing a policy."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    policy_text: str = Field(
        ...,
        alias="policyText",
        min_length=1,
        description="Full policy text, sent to the model verbatim",
        examples=["Comprehensive health insurance policy. Coverage limit: EUR 1,000,000..."],
    )
    policy_type: Optional[str] = Field(
        default=None,
        alias="policyType",
        max_length=50,
        description="Free-form policy category, e.g. health or auto",
    )
    jurisdiction: Optional[Jurisdiction] = Field(
        default=None,
        description="One of IT, EU, US, UK, GLOBAL",
    )
    language: Optional[str] = Field(default=DEFAULT_LANGUAGE, description="Output language")
    metadata: Optional[Dict[str, Any]] = Field(default=None, description="Opaque caller metadata")

    @field_validator("language", mode="before")
    @classmethod
    def default_language(cls, value: Any) -> Any:
        return DEFAULT_LANGUAGE if value is None else value


class CoverageBreakdown(BaseModel):
    """Coverage limit for a single category."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    category: str = ""
    limit: str = ""


class Coverage(BaseModel):
    """Overall coverage summary."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    coverage_type: str = Field(default="", alias="coverageType")
    coverage_amount: str = Field(default="", alias="coverageAmount")
    coverage_breakdown: List[CoverageBreakdown] = Field(default_factory=list, alias="coverageBreakdown")


class Flags(BaseModel):
    """Compliance and review flags."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    needs_legal_review: bool = Field(default=False, alias="needsLegalReview")
    inconsistent_clauses_detected: bool = Field(default=False, alias="inconsistentClausesDetected")


class AnalysisResult(BaseModel):
    """Structured risk assessment of one policy."""
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "coverage": {
                    "coverageType": "health",
                    "coverageAmount": "EUR 1,000,000",
                    "coverageBreakdown": [{"category": "hospitalization", "limit": "EUR 500,000"}],
                },
                "deductibles": [{"type": "annual", "amount": "EUR 1,000"}],
                "exclusions": ["Pre-existing conditions"],
                "riskLevel": "medium",
                "requiredActions": ["Confirm waiting periods"],
                "flags": {"needsLegalReview": False, "inconsistentClausesDetected": False},
            }
        },
    )

    coverage: Coverage = Field(default_factory=Coverage)
    deductibles: List[Dict[str, Any]] = Field(default_factory=list)
    exclusions: List[str] = Field(default_factory=list)
    # Not restricted to RISK_LEVELS: the enum is enforced provider-side.
    risk_level: str = Field(default=DEFAULT_RISK_LEVEL, alias="riskLevel")
    required_actions: List[str] = Field(default_factory=list, alias="requiredActions")
    flags: Flags = Field(default_factory=Flags)
