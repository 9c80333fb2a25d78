"""
Request-scoped dependencies for the analysis route: the demo password gate,
client identification and rate-limit admission.
"""

import logging
import secrets
from typing import List, Optional

from fastapi import Depends, Header, Request

from policy_analyzer.config import Settings, get_settings
from policy_analyzer.core.rate_limiter import RateLimiter, get_rate_limiter
from policy_analyzer.exceptions import DemoAuthError


logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"


def client_ip(request: Request, trusted_proxies: List[str]) -> Optional[str]:
    """
    Remote address of the caller.

    X-Forwarded-For is only honored when the direct peer is a trusted proxy;
    the left-most entry is the original client.
    """
    peer = request.client.host if request.client else None

    if peer and peer in trusted_proxies:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            original = forwarded.split(",")[0].strip()
            if original:
                return original

    return peer


def get_client_key(request: Request, settings: Settings = Depends(get_settings)) -> str:
    """
    Identify the client for rate limiting.

    An X-Client-Id header wins even when it is empty; otherwise the remote
    IP, otherwise "unknown".
    """
    header = request.headers.get("x-client-id")
    if header is not None:
        return header

    return client_ip(request, settings.trusted_proxy_list) or UNKNOWN_CLIENT


def require_demo_password(
    x_demo_password: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Reject requests without the shared demo password. Disabled when no password is configured."""
    if not settings.demo_password:
        return

    contact = {"email": settings.demo_contact_email, "url": settings.demo_contact_url}

    if not x_demo_password:
        raise DemoAuthError(
            "Demo password required",
            "This API requires a demo password. Contact us to get access.",
            contact,
        )

    if not secrets.compare_digest(x_demo_password.encode("utf-8"), settings.demo_password.encode("utf-8")):
        logger.warning("Rejected request with invalid demo password")
        raise DemoAuthError(
            "Invalid demo password",
            "The demo password you provided is incorrect. Contact us for access.",
            contact,
        )


def enforce_rate_limit(
    client_key: str = Depends(get_client_key),
    limiter: RateLimiter = Depends(get_rate_limiter),
    settings: Settings = Depends(get_settings),
) -> None:
    """Count the request against the client's budget; skipped in the test environment."""
    if not settings.rate_limiting_enabled:
        return

    limiter.check_or_raise(client_key)
