"""
Data models for extracted operations, classification results and IAM policies.

Modules:
- operations: Operation, ServiceOperationSet, ClassificationResult, IAMPolicy
"""

from ack_api_extractor.models.operations import (
    ClassificationResult,
    IAMPolicy,
    Operation,
    OperationType,
    PolicyStatement,
    ServiceOperationSet,
    SourceLocation,
)

__all__ = [
    "ClassificationResult",
    "IAMPolicy",
    "Operation",
    "OperationType",
    "PolicyStatement",
    "ServiceOperationSet",
    "SourceLocation",
]
