"""
Tests for the analysis orchestrator.
"""

import logging

import httpx
import pytest

from conftest import completion_response, make_openai_client
from policy_analyzer.core.metrics import MetricsRecorder
from policy_analyzer.core.request_logger import RequestLogger
from policy_analyzer.exceptions import ExternalServiceError, PolicyAnalysisError
from policy_analyzer.pipeline.models import AnalysisRequest, AnalysisResult
from policy_analyzer.pipeline.orchestrator import PolicyAnalyzer


@pytest.fixture
def analysis_request(sample_policy_text):
    return AnalysisRequest(
        policy_text=sample_policy_text,
        policy_type="health",
        jurisdiction="EU",
        metadata={"customerId": "C-42"},
    )


@pytest.fixture
def collaborators(mocker, analysis_payload):
    """Mocked collaborators attached to one manager to record call order."""
    manager = mocker.MagicMock()

    client = mocker.MagicMock()
    client.model_name = "gpt-4o-mini"
    client.run.return_value = analysis_payload

    prompt_builder = mocker.MagicMock()
    prompt_builder.build_messages.return_value = [{"role": "system", "content": "s"}, {"role": "user", "content": "u"}]

    normalizer = mocker.MagicMock()
    normalizer.normalize.return_value = AnalysisResult()

    request_logger = mocker.MagicMock()
    metrics = mocker.MagicMock()

    create_tools = mocker.patch(
        "policy_analyzer.pipeline.orchestrator.create_policy_analysis_tools",
        return_value=[{"type": "function"}],
    )

    manager.attach_mock(client, "client")
    manager.attach_mock(prompt_builder, "prompt_builder")
    manager.attach_mock(normalizer, "normalizer")
    manager.attach_mock(request_logger, "request_logger")
    manager.attach_mock(metrics, "metrics")
    manager.attach_mock(create_tools, "create_tools")

    analyzer = PolicyAnalyzer(
        client=client,
        prompt_builder=prompt_builder,
        normalizer=normalizer,
        request_logger=request_logger,
        metrics=metrics,
    )
    return analyzer, manager


class TestPolicyAnalyzer:
    """Tests for the orchestration sequence."""

    def test_side_effects_happen_in_order(self, collaborators, analysis_request):
        analyzer, manager = collaborators

        analyzer.analyze(analysis_request)

        assert [c[0] for c in manager.mock_calls] == [
            "request_logger.log_incoming_request",
            "prompt_builder.build_messages",
            "create_tools",
            "request_logger.log_openai_call",
            "client.run",
            "request_logger.log_openai_success",
            "normalizer.normalize",
            "metrics.record_success",
        ]

    def test_keeps_injected_collaborators_without_truth_testing(self, mocker):
        client = mocker.MagicMock()
        client.__bool__.return_value = False
        get_client = mocker.patch("policy_analyzer.pipeline.orchestrator.get_openai_client")

        analyzer = PolicyAnalyzer(client=client)

        assert analyzer.client is client
        get_client.assert_not_called()
        client.__bool__.assert_not_called()

    def test_passes_results_between_stages(self, collaborators, analysis_request, analysis_payload):
        analyzer, manager = collaborators

        result = analyzer.analyze(analysis_request)

        manager.prompt_builder.build_messages.assert_called_once_with(analysis_request)
        manager.client.run.assert_called_once_with(
            manager.prompt_builder.build_messages.return_value,
            [{"type": "function"}],
        )
        manager.request_logger.log_openai_call.assert_called_once_with(model="gpt-4o-mini")
        manager.normalizer.normalize.assert_called_once_with(analysis_payload)
        assert result is manager.normalizer.normalize.return_value

    def test_logs_metadata_but_not_policy_text(self, collaborators, analysis_request):
        analyzer, manager = collaborators

        analyzer.analyze(analysis_request)

        context = manager.request_logger.log_incoming_request.call_args[0][0]
        assert context == {
            "policy_type": "health",
            "jurisdiction": "EU",
            "language": "en",
            "metadata": {"customerId": "C-42"},
        }
        assert analysis_request.policy_text not in str(manager.mock_calls)

    def test_client_failure_is_wrapped(self, collaborators, analysis_request):
        analyzer, manager = collaborators
        original = ExternalServiceError("OpenAI request failed: OpenAI returned non-200: 429")
        manager.client.run.side_effect = original

        with pytest.raises(PolicyAnalysisError, match="^Failed to analyze insurance policy.$") as exc_info:
            analyzer.analyze(analysis_request)

        assert exc_info.value.__cause__ is original
        assert [c[0] for c in manager.mock_calls][-2:] == [
            "request_logger.log_openai_failure",
            "metrics.record_failure",
        ]
        manager.request_logger.log_openai_success.assert_not_called()
        manager.normalizer.normalize.assert_not_called()
        manager.request_logger.log_openai_failure.assert_called_once_with(str(original))

    def test_failure_before_model_call_is_wrapped(self, collaborators, analysis_request):
        analyzer, manager = collaborators
        manager.prompt_builder.build_messages.side_effect = ValueError("bad template")

        with pytest.raises(PolicyAnalysisError) as exc_info:
            analyzer.analyze(analysis_request)

        assert isinstance(exc_info.value.__cause__, ValueError)
        manager.client.run.assert_not_called()

    def test_failure_is_logged_once(self, collaborators, analysis_request):
        analyzer, manager = collaborators
        manager.client.run.side_effect = RuntimeError("boom")

        with pytest.raises(PolicyAnalysisError):
            analyzer.analyze(analysis_request)

        assert manager.request_logger.log_openai_failure.call_count == 1
        assert manager.metrics.record_failure.call_count == 1
        duration, reason = manager.metrics.record_failure.call_args[0]
        assert duration >= 0
        assert reason == "RuntimeError"


class TestEndToEnd:
    """Orchestrator wired to a real client over a mocked transport."""

    def test_persistent_429_becomes_policy_analysis_error(self, analysis_request):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(429, json={"error": {"message": "Rate limit reached"}})

        analyzer = PolicyAnalyzer(client=make_openai_client(handler))

        with pytest.raises(PolicyAnalysisError, match="Failed to analyze insurance policy.") as exc_info:
            analyzer.analyze(analysis_request)

        assert len(calls) == 3
        cause = exc_info.value.__cause__
        assert isinstance(cause, ExternalServiceError)
        assert str(cause) == "OpenAI request failed: OpenAI returned non-200: 429"

    def test_missing_fields_are_defaulted(self, analysis_request, analysis_payload):
        del analysis_payload["requiredActions"]
        del analysis_payload["riskLevel"]
        analyzer = PolicyAnalyzer(client=make_openai_client(lambda request: completion_response(analysis_payload)))

        result = analyzer.analyze(analysis_request)

        assert result.required_actions == []
        assert result.risk_level == "medium"
        assert result.coverage.coverage_type == "health"

    def test_logs_never_contain_policy_text(self, analysis_request, caplog):
        analyzer = PolicyAnalyzer(
            client=make_openai_client(lambda request: httpx.Response(500)),
            request_logger=RequestLogger(),
            metrics=MetricsRecorder(),
        )

        with caplog.at_level(logging.DEBUG):
            with pytest.raises(PolicyAnalysisError):
                analyzer.analyze(analysis_request)

        assert caplog.records
        assert "Plan Gold" not in caplog.text
        assert all("Plan Gold" not in str(r.__dict__) for r in caplog.records)

    def test_lifecycle_events_are_logged(self, analysis_request, analysis_payload, caplog):
        analyzer = PolicyAnalyzer(client=make_openai_client(lambda request: completion_response(analysis_payload)))

        with caplog.at_level(logging.INFO):
            analyzer.analyze(analysis_request)

        messages = [r.getMessage() for r in caplog.records]
        assert messages[0].startswith("Incoming policy analysis request")
        assert "Calling OpenAI model gpt-4o-mini" in messages
        assert "OpenAI call succeeded" in messages
        assert messages[-1] == "metrics.policy_analysis.success"

        incoming = caplog.records[0]
        assert incoming.jurisdiction == "EU"
        assert incoming.metadata == {"customerId": "C-42"}
        assert caplog.records[-1].duration_ms >= 0
