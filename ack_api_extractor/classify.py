"""
Control plane / data plane classification of API operations using an LLM.

Operation names are sent in batches of at most ``MAX_OPERATIONS_PER_BATCH``.
Batches run one after another and their results are concatenated in batch
order. The LLM reply must contain one JSON object; anything before the first
``{`` or after the last ``}`` is ignored.
"""

import json
import logging
import time
from collections.abc import Sequence
from dataclasses import replace

from ack_api_extractor.exceptions import (
    ClassificationInvokeError,
    ClassificationParseError,
)
from ack_api_extractor.llm.base import LLMProvider
from ack_api_extractor.models import ClassificationResult, Operation, OperationType
from ack_api_extractor.util.redact import redact_sensitive

logger = logging.getLogger(__name__)

MAX_OPERATIONS_PER_BATCH = 100

CLASSIFIER_SYSTEM_PROMPT = """You are an AWS architecture expert who classifies AWS API operations.
CONTROL_PLANE operations manage AWS infrastructure (create, configure, delete resources).
DATA_PLANE operations work with data inside existing resources.

Respond with ONLY valid JSON in this format:
{
  "control_plane": ["operation1", "operation2"],
  "data_plane": ["operation3", "operation4"]
}

Every operation from the input list must appear in exactly one category."""

CLASSIFICATION_PROMPT_TEMPLATE = """Classify AWS API operations by their primary purpose.

## CATEGORIES

**CONTROL_PLANE**: manages the AWS resources themselves. Creating, configuring,
deleting or changing resources, their settings, permissions or metadata.

**DATA_PLANE**: works with data stored in existing resources. Reading, writing,
querying or moving application data without changing resource configuration.

## RULES

CONTROL_PLANE:
- Resource lifecycle: Create*, Delete*, Update* on resources
- Resource configuration: Put*Policy, Put*Configuration, Modify*Attributes
- Permissions: Attach*, Detach*, Associate*, Disassociate*
- Metadata: TagResource, UntagResource, Update*Tags
- Service management: Enable*, Disable*, Start*, Stop*
- Monitoring setup: Put*MetricFilter, Create*Alarm, Put*Retention

DATA_PLANE:
- Data access: Get*, Describe*, List* of data held in a resource
- Data changes: Put*, Update*, Delete* of items or objects
- Queries: Query*, Scan*, Search*, Select*
- Streaming and messaging: Read*, Write*, Consume*, Produce*, Send*, Receive*
- Processing: Execute*, Invoke*
- Transfer: Upload*, Download*, Import*, Export* of content
- Transactions: Begin*, Commit*, Rollback*

## EXAMPLES

DynamoDB: CONTROL_PLANE CreateTable, DeleteTable, UpdateTable, TagResource;
DATA_PLANE GetItem, PutItem, Query, Scan, UpdateItem, DeleteItem
S3: CONTROL_PLANE CreateBucket, DeleteBucket, PutBucketPolicy, PutBucketVersioning;
DATA_PLANE GetObject, PutObject, DeleteObject, ListObjects, CopyObject
Lambda: CONTROL_PLANE CreateFunction, DeleteFunction, UpdateFunctionCode;
DATA_PLANE Invoke, InvokeAsync
EC2: CONTROL_PLANE RunInstances, TerminateInstances, CreateSecurityGroup;
DATA_PLANE DescribeInstances, GetConsoleOutput

## EDGE CASES

1. Describe*: CONTROL_PLANE when it describes resource configuration
   (DescribeTable), DATA_PLANE when it describes data (DescribeLogEvents).
2. List*: CONTROL_PLANE when it lists resources (ListTables, ListBuckets),
   DATA_PLANE when it lists data inside a resource (ListObjects).
3. Update*: CONTROL_PLANE for resource configuration (UpdateTable),
   DATA_PLANE for data content (UpdateItem).
4. When in doubt, classify as DATA_PLANE.

## TASK
Classify these {service_name} service operations: {operation_list}

## OUTPUT FORMAT
Respond with ONLY valid JSON in exactly this format:
{{
  "control_plane": ["operation1", "operation2"],
  "data_plane": ["operation3", "operation4"]
}}

Every operation from the input list must appear in exactly one category.
Do not add explanations or additional text."""


def build_classification_prompt(service_name: str, operation_names: Sequence[str]) -> str:
    """Build the classification instruction for one batch of operations."""
    return CLASSIFICATION_PROMPT_TEMPLATE.format(
        service_name=service_name,
        operation_list=", ".join(operation_names),
    )


def _string_list(data: dict, key: str) -> list[str]:
    value = data.get(key, [])
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ClassificationParseError(f"'{key}' must be a list of strings")
    return value


def parse_classification_response(response: str) -> ClassificationResult:
    """
    Parse the JSON object out of an LLM reply.

    Args:
        response: Raw reply text

    Returns:
        ClassificationResult with the two name lists

    Raises:
        ClassificationParseError: No brace pair, invalid JSON between the
            braces, or fields that are not lists of strings
    """
    response = response.strip()

    start = response.find("{")
    if start == -1:
        raise ClassificationParseError("no JSON object found", response)

    end = response.rfind("}")
    if end <= start:
        raise ClassificationParseError("incomplete JSON object", response)

    json_str = response[start : end + 1]
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ClassificationParseError(str(e), json_str) from e

    if not isinstance(data, dict):
        raise ClassificationParseError("expected a JSON object", json_str)

    return ClassificationResult(
        control_plane=_string_list(data, "control_plane"),
        data_plane=_string_list(data, "data_plane"),
    )


class OperationClassifier:
    """
    Classifies operation names with an LLM provider.

    Example:
        >>> from ack_api_extractor.llm import MockProvider
        >>> classifier = OperationClassifier(MockProvider({}))
        >>> classifier.classify("dynamodb", ["CreateTable", "GetItem"]).control_plane
        ['CreateTable']
    """

    def __init__(
        self,
        provider: LLMProvider,
        batch_size: int = MAX_OPERATIONS_PER_BATCH,
        rate_limit_delay: float = 0.0,
    ):
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self.provider = provider
        self.batch_size = batch_size
        self.rate_limit_delay = rate_limit_delay

    def classify(self, service_name: str, operation_names: Sequence[str]) -> ClassificationResult:
        """
        Classify operations, one LLM call per batch.

        Raises:
            ClassificationInvokeError: The provider call failed
            ClassificationParseError: A reply could not be parsed
        """
        result = ClassificationResult()
        if not operation_names:
            return result

        names = list(operation_names)
        batch_count = (len(names) + self.batch_size - 1) // self.batch_size

        for index, start in enumerate(range(0, len(names), self.batch_size), start=1):
            batch = names[start : start + self.batch_size]
            logger.info(f"Processing batch {index}/{batch_count} ({len(batch)} operations)")

            if index > 1 and self.rate_limit_delay > 0:
                time.sleep(self.rate_limit_delay)

            prompt = build_classification_prompt(service_name, batch)
            try:
                response = self.provider.generate(
                    prompt, system_prompt=CLASSIFIER_SYSTEM_PROMPT, json_response=True
                )
            except Exception as e:
                raise ClassificationInvokeError(index, redact_sensitive(str(e))) from e

            result = result.merge(parse_classification_response(response))

        return result


def apply_classification(
    operations: Sequence[Operation], classification: ClassificationResult
) -> list[Operation]:
    """
    Set each operation's type from a classification result.

    Operations named in neither list default to data plane.

    Returns:
        New Operation instances in the same order
    """
    control_plane = set(classification.control_plane)
    data_plane = set(classification.data_plane)

    classified = []
    for op in operations:
        if op.name in control_plane:
            op_type = OperationType.CONTROL_PLANE
        elif op.name in data_plane:
            op_type = OperationType.DATA_PLANE
        else:
            op_type = OperationType.DATA_PLANE
        classified.append(replace(op, type=op_type))

    return classified
