"""
Least-privilege IAM policy generation for implemented operations.

The policy has a single Allow statement listing ``<namespace>:<Operation>``
for every operation the controller calls. The namespace is the controller's
implementation model name (or the service identifier when there is none).
"""

import logging
from collections.abc import Sequence
from pathlib import Path

from ack_api_extractor.controller import implementation_name_or_default
from ack_api_extractor.exceptions import NoSupportedOperationsError, PolicyValidationError
from ack_api_extractor.models import IAMPolicy, Operation, PolicyStatement
from ack_api_extractor.models.operations import POLICY_VERSION

logger = logging.getLogger(__name__)

ALLOWED_EFFECTS = ("Allow", "Deny")

# Services whose ARNs don't follow arn:aws:<service>:<region>:<account>:<resource>
RESOURCE_PATTERN_OVERRIDES = {
    "s3": "*",
    "iam": "arn:aws:iam::*:*",
}


def map_operation_to_action(namespace: str, operation_name: str) -> str:
    """
    Build the IAM action for an operation.

    Example:
        >>> map_operation_to_action("DynamoDB", "CreateTable")
        'dynamodb:CreateTable'
    """
    return f"{namespace.lower()}:{operation_name}"


def resource_pattern_for(namespace: str) -> str:
    """Wildcard resource ARN for a service namespace."""
    namespace = namespace.lower()
    return RESOURCE_PATTERN_OVERRIDES.get(namespace, f"arn:aws:{namespace}:*:*:*")


def synthesize_policy(
    service_name: str,
    operations: Sequence[Operation],
    controllers_root: Path,
) -> IAMPolicy:
    """
    Create a policy allowing every supported operation.

    Args:
        service_name: Service identifier
        operations: Extracted operations (unsupported ones are ignored)
        controllers_root: Directory holding the ``*-controller`` checkouts

    Returns:
        IAMPolicy with one Allow statement

    Raises:
        NoSupportedOperationsError: No operation has a source location
    """
    supported = [op for op in operations if op.is_supported]
    if not supported:
        raise NoSupportedOperationsError(service_name)

    namespace = implementation_name_or_default(service_name, controllers_root).lower()
    actions = [map_operation_to_action(namespace, op.name) for op in supported]

    return IAMPolicy(
        version=POLICY_VERSION,
        statements=[
            PolicyStatement(
                effect="Allow",
                actions=actions,
                resource=resource_pattern_for(namespace),
            )
        ],
    )


def validate_policy(policy: IAMPolicy) -> None:
    """
    Check a policy for structural problems.

    Raises:
        PolicyValidationError: Listing every problem found
    """
    errors = []

    if not policy.version:
        errors.append("policy Version is required")

    if not policy.statements:
        errors.append("policy must have at least one statement")

    for i, statement in enumerate(policy.statements):
        if statement.effect not in ALLOWED_EFFECTS:
            errors.append(f"statement {i}: Effect must be 'Allow' or 'Deny'")
        if not statement.actions:
            errors.append(f"statement {i}: Action is required")
        if statement.resource is None:
            errors.append(f"statement {i}: Resource is required")

    if errors:
        raise PolicyValidationError(errors)


def generate_policy(
    service_name: str,
    operations: Sequence[Operation],
    controllers_root: Path,
) -> IAMPolicy:
    """Synthesize and validate the policy for a service."""
    policy = synthesize_policy(service_name, operations, controllers_root)
    validate_policy(policy)
    logger.debug(
        f"{service_name}: policy with {len(policy.statements[0].actions)} action(s)"
    )
    return policy
