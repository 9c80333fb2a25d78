"""
API routes for the policy analyzer.
"""

import logging
from fastapi import APIRouter, Depends

from policy_analyzer import __version__
from policy_analyzer.api.dependencies import enforce_rate_limit, require_demo_password
from policy_analyzer.api.schemas import (
    DemoAuthErrorResponse,
    ErrorResponse,
    HealthResponse,
    RateLimitErrorResponse,
    ValidationErrorResponse,
)
from policy_analyzer.config import Settings, get_settings
from policy_analyzer.pipeline.models import AnalysisRequest, AnalysisResult
from policy_analyzer.pipeline.orchestrator import PolicyAnalyzer, get_policy_analyzer


logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health", response_model=HealthResponse, tags=["Health"])
def health_check(settings: Settings = Depends(get_settings)):
    """
    Report service status and LLM configuration.
    """
    openai_configured = bool(settings.openai_api_key)

    return HealthResponse(
        status="healthy" if openai_configured else "degraded",
        version=__version__,
        model=settings.openai_model,
        openai_configured=openai_configured,
    )


@router.post(
    "/analyze",
    response_model=AnalysisResult,
    tags=["Analysis"],
    summary="Analyze an insurance policy",
    description="Submit policy text and receive coverage, deductibles, exclusions, risk level and review flags",
    dependencies=[Depends(require_demo_password), Depends(enforce_rate_limit)],
    responses={
        401: {"model": DemoAuthErrorResponse, "description": "Missing or invalid demo password"},
        422: {"model": ValidationErrorResponse, "description": "Invalid request body"},
        429: {"model": RateLimitErrorResponse, "description": "Rate limit exceeded"},
        502: {"model": ErrorResponse, "description": "The policy could not be analyzed"},
    },
)
def analyze_policy(
    payload: AnalysisRequest,
    analyzer: PolicyAnalyzer = Depends(get_policy_analyzer),
) -> AnalysisResult:
    """
    Analyze a policy document.
    Runs in the threadpool: the model call and its retries block a worker, not the event loop.
    """
    return analyzer.analyze(payload)
