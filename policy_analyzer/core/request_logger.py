"""
Lifecycle logging for policy analysis requests.
Raw policy text is never logged; only metadata and context.
"""

import logging
from typing import Any, Dict, Optional


class RequestLogger:
    """Writes the analysis lifecycle events to a logger."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("policy_analyzer.requests")

    def log_incoming_request(self, context: Dict[str, Any]) -> None:
        """Log sanitized request metadata before calling the model."""
        fields = {
            "policy_type": context.get("policy_type"),
            "jurisdiction": context.get("jurisdiction"),
            "language": context.get("language"),
            "metadata": context.get("metadata"),
        }
        self.logger.info(
            f"Incoming policy analysis request: policy_type={fields['policy_type']}, "
            f"jurisdiction={fields['jurisdiction']}, language={fields['language']}",
            extra=fields,
        )

    def log_openai_call(self, model: str) -> None:
        self.logger.info(f"Calling OpenAI model {model}", extra={"model": model})

    def log_openai_success(self) -> None:
        self.logger.info("OpenAI call succeeded")

    def log_openai_failure(self, message: str) -> None:
        self.logger.error(f"OpenAI call failed: {message}", extra={"error": message})
