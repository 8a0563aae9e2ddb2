"""
Tests for LLM-based control plane / data plane classification.
"""

import json
from unittest.mock import MagicMock, patch

import pytest

from ack_api_extractor.classify import (
    CLASSIFIER_SYSTEM_PROMPT,
    MAX_OPERATIONS_PER_BATCH,
    OperationClassifier,
    apply_classification,
    build_classification_prompt,
    parse_classification_response,
)
from ack_api_extractor.exceptions import (
    ClassificationInvokeError,
    ClassificationParseError,
    LLMAPIError,
)
from ack_api_extractor.llm.mock import MockProvider
from ack_api_extractor.models import (
    ClassificationResult,
    Operation,
    OperationType,
    SourceLocation,
)


def reply(control_plane=(), data_plane=()) -> str:
    return json.dumps({"control_plane": list(control_plane), "data_plane": list(data_plane)})


class TestBuildClassificationPrompt:
    """Tests for prompt construction."""

    def test_includes_service_and_operations(self):
        prompt = build_classification_prompt("dynamodb", ["CreateTable", "GetItem"])

        assert "Classify these dynamodb service operations: CreateTable, GetItem" in prompt

    def test_defines_both_categories_and_default(self):
        prompt = build_classification_prompt("s3", ["GetObject"])

        assert "CONTROL_PLANE" in prompt
        assert "DATA_PLANE" in prompt
        assert "When in doubt, classify as DATA_PLANE" in prompt
        assert '"control_plane": ["operation1", "operation2"]' in prompt


class TestParseClassificationResponse:
    """Tests for reply parsing."""

    def test_plain_json(self):
        result = parse_classification_response(reply(["CreateTable"], ["GetItem"]))

        assert result.control_plane == ["CreateTable"]
        assert result.data_plane == ["GetItem"]

    def test_text_around_json_is_ignored(self):
        text = "Here you go:\n```json\n" + reply([], ["Bar"]) + "\n```\nDone."

        result = parse_classification_response(text)

        assert result.data_plane == ["Bar"]

    def test_no_braces(self):
        with pytest.raises(ClassificationParseError, match="no JSON object"):
            parse_classification_response("I cannot classify these operations.")

    def test_closing_brace_before_opening(self):
        with pytest.raises(ClassificationParseError):
            parse_classification_response("} nothing {")

    def test_invalid_json_between_braces(self):
        with pytest.raises(ClassificationParseError):
            parse_classification_response('{"control_plane": [CreateTable]}')

    def test_missing_field_defaults_to_empty(self):
        result = parse_classification_response('{"control_plane": ["CreateTable"]}')

        assert result.data_plane == []

    def test_field_not_a_list(self):
        with pytest.raises(ClassificationParseError, match="data_plane"):
            parse_classification_response('{"control_plane": [], "data_plane": "GetItem"}')


class TestOperationClassifier:
    """Tests for batching and oracle invocation."""

    def test_empty_input_makes_no_calls(self):
        provider = MagicMock()

        result = OperationClassifier(provider).classify("svc", [])

        assert result == ClassificationResult()
        provider.generate.assert_not_called()

    def test_single_batch(self):
        provider = MagicMock()
        provider.generate.return_value = reply([], ["Bar"])

        result = OperationClassifier(provider).classify("svc", ["Bar"])

        assert result.data_plane == ["Bar"]
        provider.generate.assert_called_once()
        _, kwargs = provider.generate.call_args
        assert kwargs["system_prompt"] == CLASSIFIER_SYSTEM_PROMPT
        assert kwargs["json_response"] is True

    def test_default_batch_size(self):
        assert MAX_OPERATIONS_PER_BATCH == 100
        assert OperationClassifier(MagicMock()).batch_size == 100

    def test_batches_are_sequential_and_concatenated(self):
        names = [f"Op{i}" for i in range(250)]
        classifier = OperationClassifier(MockProvider({}))

        original = classifier.provider.generate
        with patch.object(classifier.provider, "generate", wraps=original) as gen:
            result = classifier.classify("svc", names)

        assert gen.call_count == 3
        batch_sizes = [
            len(call.args[0].split("service operations: ")[1].split("\n")[0].split(", "))
            for call in gen.call_args_list
        ]
        assert batch_sizes == [100, 100, 50]
        assert result.data_plane == names

    def test_custom_batch_size(self):
        provider = MagicMock()
        provider.generate.side_effect = [reply(["A"], []), reply([], ["B"])]

        result = OperationClassifier(provider, batch_size=1).classify("svc", ["A", "B"])

        assert result.control_plane == ["A"]
        assert result.data_plane == ["B"]

    def test_invalid_batch_size(self):
        with pytest.raises(ValueError):
            OperationClassifier(MagicMock(), batch_size=0)

    def test_provider_error_becomes_invoke_error(self):
        provider = MagicMock()
        provider.generate.side_effect = LLMAPIError("Bedrock", "AccessDeniedException")

        with pytest.raises(ClassificationInvokeError, match="batch 1"):
            OperationClassifier(provider).classify("svc", ["Bar"])

    def test_parse_failure_aborts_whole_call(self):
        provider = MagicMock()
        provider.generate.side_effect = [reply(["A"], []), "no json here"]

        with pytest.raises(ClassificationParseError):
            OperationClassifier(provider, batch_size=1).classify("svc", ["A", "B"])

    def test_rate_limit_delay_between_batches(self):
        provider = MagicMock()
        provider.generate.side_effect = [reply(["A"], []), reply([], ["B"])]

        with patch("ack_api_extractor.classify.time.sleep") as sleep:
            OperationClassifier(provider, batch_size=1, rate_limit_delay=0.5).classify(
                "svc", ["A", "B"]
            )

        sleep.assert_called_once_with(0.5)


class TestApplyClassification:
    """Tests for applying results to operations."""

    def test_membership(self):
        ops = [Operation("CreateTable"), Operation("GetItem")]
        result = ClassificationResult(control_plane=["CreateTable"], data_plane=["GetItem"])

        classified = apply_classification(ops, result)

        assert [op.type for op in classified] == [
            OperationType.CONTROL_PLANE,
            OperationType.DATA_PLANE,
        ]

    def test_unnamed_operations_default_to_data_plane(self):
        ops = [Operation("A"), Operation("B"), Operation("C")]
        result = ClassificationResult(control_plane=["A"])

        classified = apply_classification(ops, result)

        assert [op.type for op in classified] == [
            OperationType.CONTROL_PLANE,
            OperationType.DATA_PLANE,
            OperationType.DATA_PLANE,
        ]

    def test_control_plane_wins_when_named_twice(self):
        ops = [Operation("A")]
        result = ClassificationResult(control_plane=["A"], data_plane=["A"])

        assert apply_classification(ops, result)[0].type is OperationType.CONTROL_PLANE

    def test_preserves_source_location_and_inputs(self):
        location = SourceLocation(file="pkg/a.go", line=4)
        ops = [Operation("A", source_location=location)]

        classified = apply_classification(ops, ClassificationResult(data_plane=["A"]))

        assert classified[0].source_location == location
        assert ops[0].type is OperationType.UNCLASSIFIED
