"""
Maps the decoded tool arguments onto AnalysisResult.

Normalization is total: whatever shape the model returned, a well-formed
result comes out. Missing or mistyped fields fall back to empty values,
except the risk level which falls back to "medium". Values are not checked
against the schema enums.
"""

from typing import Any, Dict, List

from policy_analyzer.pipeline.models import (
    DEFAULT_RISK_LEVEL,
    AnalysisResult,
    Coverage,
    CoverageBreakdown,
    Flags,
)


class PolicyResponseNormalizer:
    """Converts a raw model payload into an AnalysisResult."""

    def normalize(self, data: Any) -> AnalysisResult:
        if not isinstance(data, dict):
            data = {}

        raw_risk = data.get("riskLevel")

        return AnalysisResult(
            coverage=self._coverage(data.get("coverage")),
            deductibles=self._records(data.get("deductibles")),
            exclusions=self._strings(data.get("exclusions")),
            risk_level=DEFAULT_RISK_LEVEL if raw_risk is None else _text(raw_risk),
            required_actions=self._strings(data.get("requiredActions")),
            flags=self._flags(data.get("flags")),
        )

    def _coverage(self, raw: Any) -> Coverage:
        if not isinstance(raw, dict):
            return Coverage()

        breakdown = [
            CoverageBreakdown(
                category=_text(item.get("category")),
                limit=_text(item.get("limit")),
            )
            for item in _as_list(raw.get("coverageBreakdown"))
            if isinstance(item, dict)
        ]

        return Coverage(
            coverage_type=_text(raw.get("coverageType")),
            coverage_amount=_text(raw.get("coverageAmount")),
            coverage_breakdown=breakdown,
        )

    def _flags(self, raw: Any) -> Flags:
        if not isinstance(raw, dict):
            return Flags()

        return Flags(
            needs_legal_review=_flag(raw.get("needsLegalReview")),
            inconsistent_clauses_detected=_flag(raw.get("inconsistentClausesDetected")),
        )

    @staticmethod
    def _records(raw: Any) -> List[Dict[str, Any]]:
        return [dict(item) for item in _as_list(raw) if isinstance(item, dict)]

    @staticmethod
    def _strings(raw: Any) -> List[str]:
        return [_text(item) for item in _as_list(raw) if item is not None]


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _flag(value: Any) -> bool:
    return value if isinstance(value, bool) else False
