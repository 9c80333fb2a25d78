"""
Pipeline Orchestrator
Runs one policy analysis: prompt, schema, model call, normalization.
"""

import time
import logging
from functools import lru_cache
from typing import Optional

from policy_analyzer.core.metrics import MetricsRecorder
from policy_analyzer.core.openai_client import OpenAIClient, get_openai_client
from policy_analyzer.core.request_logger import RequestLogger
from policy_analyzer.exceptions import PolicyAnalysisError
from policy_analyzer.pipeline.models import AnalysisRequest, AnalysisResult
from policy_analyzer.pipeline.normalizer import PolicyResponseNormalizer
from policy_analyzer.pipeline.prompt_builder import PolicyPromptBuilder
from policy_analyzer.pipeline.tool_schema import create_policy_analysis_tools


logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Failed to analyze insurance policy."


class PolicyAnalyzer:
    """
    Orchestrates a single policy analysis.

    Side effects happen in a fixed order: request log, message build, tool
    schema, model log, model call, success log, normalization, metrics.
    Any error along the way is logged once and re-raised as
    PolicyAnalysisError with the original error chained.
    """

    def __init__(
        self,
        client: Optional[OpenAIClient] = None,
        prompt_builder: Optional[PolicyPromptBuilder] = None,
        normalizer: Optional[PolicyResponseNormalizer] = None,
        request_logger: Optional[RequestLogger] = None,
        metrics: Optional[MetricsRecorder] = None,
    ):
        """
        Initialize the analyzer with its collaborators.

        Args:
            client: OpenAI client (uses default if not provided)
            prompt_builder: Message builder
            normalizer: Payload normalizer
            request_logger: Lifecycle logger
            metrics: Metrics recorder
        """
        self.client = client if client is not None else get_openai_client()
        self.prompt_builder = prompt_builder if prompt_builder is not None else PolicyPromptBuilder()
        self.normalizer = normalizer if normalizer is not None else PolicyResponseNormalizer()
        self.request_logger = request_logger if request_logger is not None else RequestLogger()
        self.metrics = metrics if metrics is not None else MetricsRecorder()

    def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """
        Analyze one policy.

        Args:
            request: Validated analysis request

        Returns:
            Normalized AnalysisResult

        Raises:
            PolicyAnalysisError: on any failure
        """
        start_time = time.perf_counter()

        try:
            # Metadata only, never the policy text
            self.request_logger.log_incoming_request({
                "policy_type": request.policy_type,
                "jurisdiction": request.jurisdiction,
                "language": request.language,
                "metadata": request.metadata,
            })

            messages = self.prompt_builder.build_messages(request)
            tools = create_policy_analysis_tools()

            self.request_logger.log_openai_call(model=self.client.model_name)

            payload = self.client.run(messages, tools)

            self.request_logger.log_openai_success()

            result = self.normalizer.normalize(payload)

            self.metrics.record_success(
                _elapsed_ms(start_time),
                {"model": self.client.model_name, "risk_level": result.risk_level},
            )
            return result

        except Exception as e:
            self.request_logger.log_openai_failure(str(e))
            self.metrics.record_failure(_elapsed_ms(start_time), type(e).__name__)
            raise PolicyAnalysisError(FAILURE_MESSAGE) from e


def _elapsed_ms(start_time: float) -> float:
    return (time.perf_counter() - start_time) * 1000


@lru_cache()
def get_policy_analyzer() -> PolicyAnalyzer:
    """Get cached analyzer instance."""
    return PolicyAnalyzer()
