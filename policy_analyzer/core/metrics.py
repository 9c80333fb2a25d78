"""
Minimal metrics recorder.

Metrics are emitted as log records with a fixed event name and the measured
values attached as record attributes, so any log shipper can aggregate them.
"""

import logging
from typing import Any, Dict, Optional


class MetricsRecorder:
    """Records duration and outcome of policy analyses."""

    SUCCESS_EVENT = "metrics.policy_analysis.success"
    FAILURE_EVENT = "metrics.policy_analysis.failure"

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("policy_analyzer.metrics")

    def record_success(self, duration_ms: float, meta: Optional[Dict[str, Any]] = None) -> None:
        fields = {"duration_ms": round(duration_ms, 2), **(meta or {})}
        self.logger.info(self.SUCCESS_EVENT, extra=fields)

    def record_failure(self, duration_ms: float, reason: str, meta: Optional[Dict[str, Any]] = None) -> None:
        fields = {"duration_ms": round(duration_ms, 2), "reason": reason, **(meta or {})}
        self.logger.warning(self.FAILURE_EVENT, extra=fields)
