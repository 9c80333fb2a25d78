"""
OpenAI tool (function calling) schema for insurance policy analysis.

The schema forces the model to answer with strictly structured JSON that
maps onto AnalysisResult. Every object node forbids undeclared properties
and lists its required fields.
"""

from typing import Any, Dict, List

from policy_analyzer.core.openai_client import FORCED_TOOL_NAME
from policy_analyzer.pipeline.models import RISK_LEVELS
from policy_analyzer.prompts import POLICY_ANALYSIS_TOOL_DESCRIPTION


def create_policy_analysis_tools() -> List[Dict[str, Any]]:
    """Return the tools array sent with every completion request."""
    return [
        {
            "type": "function",
            "function": {
                "name": FORCED_TOOL_NAME,
                "description": POLICY_ANALYSIS_TOOL_DESCRIPTION,
                "parameters": _policy_analysis_parameters(),
            },
        }
    ]


def _policy_analysis_parameters() -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "coverage": _coverage_schema(),
            "deductibles": _deductibles_schema(),
            "exclusions": _string_list_schema(
                "Key exclusions extracted from the policy.",
                "A single exclusion clause in concise form.",
            ),
            "riskLevel": {
                "type": "string",
                "description": "Qualitative risk level inferred from the policy.",
                "enum": list(RISK_LEVELS),
            },
            "requiredActions": _string_list_schema(
                "Recommended follow-up actions, checks, or confirmations.",
                "One recommended action or next step.",
            ),
            "flags": _flags_schema(),
        },
        "required": ["coverage", "deductibles", "exclusions", "riskLevel", "flags"],
        "additionalProperties": False,
    }


def _coverage_schema() -> Dict[str, Any]:
    return {
        "type": "object",
        "description": "Overall coverage summary extracted from the policy.",
        "properties": {
            "coverageType": {
                "type": "string",
                "description": 'High-level category of coverage, e.g. "vehicle_liability", "property_damage", "health", "life".',
            },
            "coverageAmount": {
                "type": "string",
                "description": 'Human-readable main coverage limit, including currency if possible, e.g. "EUR 1,000,000".',
            },
            "coverageBreakdown": {
                "type": "array",
                "description": "Optional detailed breakdown by category.",
                "items": {
                    "type": "object",
                    "properties": {
                        "category": {
                            "type": "string",
                            "description": 'Coverage category, e.g. "property_damage", "bodily_injury".',
                        },
                        "limit": {
                            "type": "string",
                            "description": "Coverage limit for this category, including currency if possible.",
                        },
                    },
                    "required": ["category", "limit"],
                    "additionalProperties": False,
                },
            },
        },
        "required": ["coverageType", "coverageAmount"],
        "additionalProperties": False,
    }


def _deductibles_schema() -> Dict[str, Any]:
    return {
        "type": "array",
        "description": "List of deductibles described in the policy.",
        "items": {
            "type": "object",
            "properties": {
                "type": {
                    "type": "string",
                    "description": 'Type of deductible, e.g. "collision", "theft", "medical".',
                },
                "amount": {
                    "type": "string",
                    "description": "Deductible amount, including currency if possible.",
                },
            },
            "required": ["type", "amount"],
            "additionalProperties": False,
        },
    }


def _string_list_schema(description: str, item_description: str) -> Dict[str, Any]:
    return {
        "type": "array",
        "description": description,
        "items": {"type": "string", "description": item_description},
    }


def _flags_schema() -> Dict[str, Any]:
    return {
        "type": "object",
        "description": "Compliance and review flags for the policy.",
        "properties": {
            "needsLegalReview": {
                "type": "boolean",
                "description": "True if a human legal review is strongly recommended.",
            },
            "inconsistentClausesDetected": {
                "type": "boolean",
                "description": "True if the model detected contradictions or inconsistencies.",
            },
        },
        "required": ["needsLegalReview", "inconsistentClausesDetected"],
        "additionalProperties": False,
    }
