"""
HTTP middleware: correlation id propagation, CORS headers and a catch-all
for unhandled errors.
"""

import logging
from typing import Awaitable, Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from policy_analyzer.api.schemas import ErrorResponse
from policy_analyzer.core.correlation import (
    CORRELATION_HEADER,
    reset_correlation_id,
    resolve_correlation_id,
    set_correlation_id,
)


logger = logging.getLogger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]

INTERNAL_ERROR_MESSAGE = "Internal server error."

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, X-Correlation-ID, X-Demo-Password, X-Client-Id",
    "Access-Control-Max-Age": "3600",
}


async def correlation_id_middleware(request: Request, call_next: CallNext) -> Response:
    """Attach a correlation id for the lifetime of the request and echo it on the response."""
    correlation_id = resolve_correlation_id(request.headers.get(CORRELATION_HEADER))
    token = set_correlation_id(correlation_id)

    try:
        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
    finally:
        reset_correlation_id(token)


async def cors_middleware(request: Request, call_next: CallNext) -> Response:
    """
    Answer preflight requests and add CORS headers to every response.

    Starlette's CORSMiddleware only decorates requests that carry an Origin
    header; these headers go on all responses, errors included.
    """
    if request.method == "OPTIONS":
        response = Response(status_code=204)
    else:
        response = await call_next(request)

    response.headers.update(CORS_HEADERS)
    return response


async def unhandled_error_middleware(request: Request, call_next: CallNext) -> Response:
    """
    Turn errors no exception handler claimed into a generic 500.

    Registered innermost so the CORS and correlation id middlewares still
    decorate the response. Starlette's own 500 page is produced outside them.
    """
    try:
        return await call_next(request)
    except Exception:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        body = ErrorResponse(error=INTERNAL_ERROR_MESSAGE)
        return JSONResponse(status_code=500, content=body.model_dump())
