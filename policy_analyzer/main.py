"""
FastAPI application entry point.
AI-Powered Insurance Policy Analyzer
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from policy_analyzer import __version__
from policy_analyzer.api.middleware import (
    correlation_id_middleware,
    cors_middleware,
    unhandled_error_middleware,
)
from policy_analyzer.api.routes import router
from policy_analyzer.api.schemas import (
    DemoAuthErrorResponse,
    ErrorResponse,
    RateLimitErrorResponse,
    ValidationErrorResponse,
    ValidationViolation,
)
from policy_analyzer.config import get_settings
from policy_analyzer.core.correlation import configure_logging
from policy_analyzer.core.openai_client import get_openai_client
from policy_analyzer.exceptions import DemoAuthError, PolicyAnalysisError, RateLimitExceeded


configure_logging(get_settings().log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info("Starting Insurance Policy Analyzer API...")
    settings = get_settings()
    logger.info(f"API Version: {__version__}")
    logger.info(f"Environment: {settings.app_env}")
    logger.info(f"Model: {settings.openai_model}")
    budget = (
        f"LLM time budget: {settings.worst_case_llm_seconds:.2f}s worst case "
        f"({settings.openai_max_retries + 1} attempts x {settings.openai_timeout_seconds}s), "
        f"invocation deadline {settings.invocation_deadline_seconds}s"
    )
    if settings.llm_budget_exceeds_deadline:
        logger.warning(
            f"{budget}. Retries can outlast the deadline; lower OPENAI_MAX_RETRIES "
            f"or OPENAI_TIMEOUT_SECONDS"
        )
    else:
        logger.info(budget)
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY is not set; analysis requests will fail")
    if not settings.demo_password:
        logger.warning("DEMO_PASSWORD is not set; the demo password gate is disabled")

    yield

    # Shutdown
    logger.info("Shutting down Insurance Policy Analyzer API...")
    if get_openai_client.cache_info().currsize:
        get_openai_client().close()
    logger.info("Cleanup complete")


# Create FastAPI application
app = FastAPI(
    title="Insurance Policy Analyzer API",
    description="""
    AI-Powered Insurance Policy Analysis

    Submit the text of an insurance policy and receive a structured risk assessment:
    coverage and limits, deductibles, exclusions, a risk level, recommended follow-up
    actions and legal-review flags.

    ## Headers

    - `X-Demo-Password`: required when the demo gate is enabled
    - `X-Client-Id`: optional rate-limit key (defaults to the caller IP)
    - `X-Correlation-ID`: optional trace id, echoed on every response
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Middleware added last runs first: correlation id wraps CORS, which wraps
# the catch-all for unhandled errors.
app.middleware("http")(unhandled_error_middleware)
app.middleware("http")(cors_middleware)
app.middleware("http")(correlation_id_middleware)

# Include routes
app.include_router(router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Render validation failures without echoing the submitted values."""
    violations = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        violations.append(ValidationViolation(
            field=".".join(location) or "body",
            message=error.get("msg", "Invalid value"),
        ))

    body = ValidationErrorResponse(violations=violations)
    return JSONResponse(status_code=422, content=body.model_dump())


@app.exception_handler(DemoAuthError)
async def demo_auth_exception_handler(request: Request, exc: DemoAuthError):
    body = DemoAuthErrorResponse(error=exc.error, message=exc.message, contact=exc.contact)
    return JSONResponse(status_code=401, content=body.model_dump())


@app.exception_handler(RateLimitExceeded)
async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded):
    body = RateLimitErrorResponse(message=str(exc), retry_after=exc.retry_after)
    headers = {"Retry-After": str(exc.retry_after)} if exc.retry_after is not None else None
    return JSONResponse(status_code=429, content=body.model_dump(by_alias=True), headers=headers)


@app.exception_handler(PolicyAnalysisError)
async def analysis_exception_handler(request: Request, exc: PolicyAnalysisError):
    logger.warning(f"Policy analysis failed: {exc.__cause__!r}")
    body = ErrorResponse(error=str(exc))
    return JSONResponse(status_code=502, content=body.model_dump())


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Insurance Policy Analyzer API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "policy_analyzer.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
