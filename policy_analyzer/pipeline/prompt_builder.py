"""
Builds the chat messages for a policy analysis request.
The tool schema is not part of the messages; see tool_schema.
"""

import json
from typing import Dict, List

from policy_analyzer.prompts import POLICY_ANALYSIS_PROMPT, POLICY_ANALYSIS_SYSTEM
from policy_analyzer.pipeline.models import AnalysisRequest


class PolicyPromptBuilder:
    """Turns an AnalysisRequest into a system + user message pair."""

    def build_messages(self, request: AnalysisRequest) -> List[Dict[str, str]]:
        """
        Build the conversation sent to the model.

        The policy text is inserted verbatim: never truncated, summarized
        or rewritten.

        Args:
            request: Validated analysis request

        Returns:
            Exactly two messages, system first
        """
        return [
            {"role": "system", "content": self._build_system_content(request)},
            {"role": "user", "content": self._build_user_content(request)},
        ]

    def _build_system_content(self, request: AnalysisRequest) -> str:
        return POLICY_ANALYSIS_SYSTEM.format(
            jurisdiction=request.jurisdiction or "",
            language=request.language or "",
        )

    def _build_user_content(self, request: AnalysisRequest) -> str:
        metadata = json.dumps(request.metadata) if request.metadata else "{}"

        return POLICY_ANALYSIS_PROMPT.format(
            policy_type=request.policy_type or "",
            metadata=metadata,
            policy_text=request.policy_text,
        )
