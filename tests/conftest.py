"""
Pytest configuration and fixtures.
"""

import json

import httpx
import pytest

from policy_analyzer.config import Settings
from policy_analyzer.core.cache import ExpiringCache
from policy_analyzer.core.openai_client import OpenAIClient, OpenAIModelConfig
from policy_analyzer.core.rate_limiter import RateLimiter


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def completion_response(arguments, status_code: int = 200) -> httpx.Response:
    """Build a chat-completions response carrying a single tool call."""
    if not isinstance(arguments, str):
        arguments = json.dumps(arguments)

    return httpx.Response(status_code, json={
        "id": "chatcmpl-test",
        "choices": [
            {
                "index": 0,
                "message": {
                    "role": "assistant",
                    "content": None,
                    "tool_calls": [
                        {
                            "id": "call_1",
                            "type": "function",
                            "function": {
                                "name": "analyze_insurance_policy",
                                "arguments": arguments,
                            },
                        }
                    ],
                },
                "finish_reason": "tool_calls",
            }
        ],
    })


def make_openai_client(handler, **kwargs) -> OpenAIClient:
    """OpenAI client whose HTTP traffic is served by ``handler``."""
    kwargs.setdefault("retry_delay", 0)
    kwargs.setdefault("config", OpenAIModelConfig(model="gpt-4o-mini", temperature=0.1, max_tokens=2000))
    return OpenAIClient(
        api_key="test-api-key-sk-1234567890",
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        **kwargs,
    )


@pytest.fixture
def sample_policy_text():
    """Sample health insurance policy."""
    return """
Comprehensive health insurance policy - Plan Gold 2024

Section 1. Coverage
The insurer covers hospitalization, specialist visits and diagnostic tests
up to a total annual limit of EUR 1,000,000. Hospitalization is covered up
to EUR 500,000 per year; dental care up to EUR 50,000.

Section 2. Deductibles
An annual deductible of EUR 1,000 applies. Specialist visits carry a
per-visit deductible of EUR 50.

Section 3. Exclusions
Pre-existing conditions, cosmetic procedures and experimental treatments
are excluded. Section 1 states dental care is covered, while Appendix B
lists dental care as excluded.
"""


@pytest.fixture
def analysis_payload():
    """Tool arguments as the model returns them for the sample policy."""
    return {
        "coverage": {
            "coverageType": "health",
            "coverageAmount": "EUR 1,000,000",
            "coverageBreakdown": [
                {"category": "hospitalization", "limit": "EUR 500,000"},
                {"category": "dental", "limit": "EUR 50,000"},
            ],
        },
        "deductibles": [
            {"type": "annual", "amount": "EUR 1,000"},
            {"type": "per_visit", "amount": "EUR 50"},
        ],
        "exclusions": [
            "Pre-existing conditions",
            "Cosmetic procedures",
            "Experimental treatments",
        ],
        "riskLevel": "medium",
        "requiredActions": ["Clarify dental coverage between Section 1 and Appendix B"],
        "flags": {
            "needsLegalReview": True,
            "inconsistentClausesDetected": True,
        },
    }


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rate_limiter(clock):
    """Limiter with the default budget of 5 requests per 60 seconds."""
    return RateLimiter(ExpiringCache(clock=clock), max_requests=5, window_seconds=60)


@pytest.fixture
def settings():
    """Settings as used in production, with a demo password."""
    return Settings(
        openai_api_key="sk-test",
        openai_model="gpt-4o-mini",
        app_env="prod",
        demo_password="let-me-in",
        demo_contact_email="access@example.com",
        demo_contact_url="https://example.com/contact",
        rate_limit_max_requests=5,
        rate_limit_window_seconds=60,
    )
