"""
Policy analysis pipeline components.
"""

from .models import (
    AnalysisRequest,
    AnalysisResult,
    Coverage,
    CoverageBreakdown,
    Flags,
)
from .normalizer import PolicyResponseNormalizer
from .orchestrator import PolicyAnalyzer, get_policy_analyzer
from .prompt_builder import PolicyPromptBuilder
from .tool_schema import create_policy_analysis_tools

__all__ = [
    "AnalysisRequest",
    "AnalysisResult",
    "Coverage",
    "CoverageBreakdown",
    "Flags",
    "PolicyResponseNormalizer",
    "PolicyAnalyzer",
    "get_policy_analyzer",
    "PolicyPromptBuilder",
    "create_policy_analysis_tools",
]
