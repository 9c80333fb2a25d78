"""
OpenAI chat-completions client for structured policy analysis.
Forces a single tool call and returns its decoded arguments, with retry logic.
"""

import json
import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field
from tenacity import RetryCallState, Retrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from policy_analyzer.config import Settings, get_settings
from policy_analyzer.exceptions import ExternalServiceError


logger = logging.getLogger(__name__)

FORCED_TOOL_NAME = "analyze_insurance_policy"


class OpenAIModelConfig(BaseModel):
    """Sampling parameters sent with every completion request."""
    model_config = ConfigDict(frozen=True)

    model: str = Field(default="gpt-4.1-mini")
    temperature: float = Field(default=0.1)
    max_tokens: int = Field(default=2000)

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAIModelConfig":
        return cls(
            model=settings.openai_model,
            temperature=settings.openai_temperature,
            max_tokens=settings.openai_max_tokens,
        )


class OpenAIClient:
    """
    Thin wrapper around the chat-completions endpoint.

    Every call is bounded by ``timeout`` seconds per attempt and
    ``max_retries + 1`` attempts in total. The timeout has to stay below the
    hosting environment's invocation deadline; Settings enforces that.
    """

    def __init__(
        self,
        api_key: str,
        config: Optional[OpenAIModelConfig] = None,
        http_client: Optional[httpx.Client] = None,
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 25.0,
        max_retries: int = 2,
        retry_delay: float = 0.15,
    ):
        self.api_key = api_key
        self.config = config or OpenAIModelConfig()
        self.timeout = timeout
        self.http = http_client or httpx.Client(timeout=timeout)
        self.url = base_url.rstrip("/") + "/chat/completions"
        self.max_retries = max_retries
        self.retry_delay = retry_delay

    @property
    def model_name(self) -> str:
        return self.config.model

    def run(self, messages: List[Dict[str, Any]], tools: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Send the conversation and return the forced tool call's arguments.

        Args:
            messages: Role-tagged chat messages
            tools: Tool definitions; the analysis tool is forced

        Returns:
            Decoded tool arguments

        Raises:
            ExternalServiceError: once every attempt has failed
        """
        retrying = Retrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_fixed(self.retry_delay),
            retry=retry_if_exception_type(Exception),
            before_sleep=self._log_retry,
            reraise=True,
        )

        try:
            return retrying(self._execute_request, messages, tools)
        except Exception as e:
            raise ExternalServiceError(f"OpenAI request failed: {e}") from e

    def _execute_request(self, messages: List[Dict[str, Any]], tools: List[Dict[str, Any]]) -> Dict[str, Any]:
        payload = {
            "model": self.config.model,
            "messages": messages,
            "tools": tools,
            "tool_choice": {
                "type": "function",
                "function": {"name": FORCED_TOOL_NAME},
            },
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }

        response = self.http.post(
            self.url,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            json=payload,
            timeout=self.timeout,
        )

        if response.status_code != 200:
            raise ExternalServiceError(f"OpenAI returned non-200: {response.status_code}")

        arguments = self._extract_arguments(response.json())
        result = json.loads(arguments)
        if not isinstance(result, dict):
            raise ExternalServiceError("OpenAI tool arguments are not a JSON object")
        return result

    @staticmethod
    def _extract_arguments(data: Any) -> str:
        # choices[0].message.tool_calls[0].function.arguments
        try:
            arguments = data["choices"][0]["message"]["tool_calls"][0]["function"]["arguments"]
        except (KeyError, IndexError, TypeError):
            raise ExternalServiceError("Unexpected OpenAI response structure")

        if not isinstance(arguments, str):
            raise ExternalServiceError("Unexpected OpenAI response structure")
        return arguments

    def _log_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            f"OpenAI attempt {retry_state.attempt_number}/{self.max_retries + 1} failed: {error}. "
            f"Retrying in {self.retry_delay}s"
        )

    def close(self) -> None:
        self.http.close()


@lru_cache()
def get_openai_client() -> OpenAIClient:
    """Get cached OpenAI client instance."""
    settings = get_settings()
    return OpenAIClient(
        api_key=settings.openai_api_key,
        config=OpenAIModelConfig.from_settings(settings),
        base_url=settings.openai_base_url,
        timeout=settings.openai_timeout_seconds,
        max_retries=settings.openai_max_retries,
        retry_delay=settings.openai_retry_delay_seconds,
    )
