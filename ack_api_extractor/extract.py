"""
Operation extraction for a service.

Combines the service model, the controller source scan and (optionally) the
LLM classifier into a ``ServiceOperationSet``.

The extraction process:
1. Load the service model and list its operations (deduplicated, model order)
2. Look for each operation's call site in the controller sources
3. Let the control plane policy decide which operations are typed directly
   and which go to the classifier
4. Classify the pending operations if requested; a classifier failure marks
   them ``unknown`` instead of failing the service
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import replace

from ack_api_extractor.analyze.patterns import DEFAULT_PATTERNS, CallPattern
from ack_api_extractor.analyze.scanner import find_operation_in_controller
from ack_api_extractor.classify import OperationClassifier, apply_classification
from ack_api_extractor.exceptions import ClassificationError, NoOperationsFoundError
from ack_api_extractor.models import Operation, OperationType, ServiceOperationSet
from ack_api_extractor.service_model import load_service_model, operation_names
from ack_api_extractor.workspace import ExtractorPaths

logger = logging.getLogger(__name__)


class ControlPlanePolicy(ABC):
    """Decides which operations can be typed without asking the classifier."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def decide(self, operation: Operation) -> OperationType | None:
        """
        Return the operation's type, or None if it needs classification.
        """
        pass


class ImplementedIsControlPlane(ControlPlanePolicy):
    """
    Operations the controller already calls are control plane.

    Only unimplemented operations are sent to the classifier, which keeps the
    number of LLM calls down.
    """

    @property
    def name(self) -> str:
        return "implemented_is_control_plane"

    def decide(self, operation: Operation) -> OperationType | None:
        if operation.is_supported:
            return OperationType.CONTROL_PLANE
        return None


class AlwaysClassify(ControlPlanePolicy):
    """Every operation goes to the classifier."""

    @property
    def name(self) -> str:
        return "always_classify"

    def decide(self, operation: Operation) -> OperationType | None:
        return None


CONTROL_PLANE_POLICIES = {
    policy.name: policy for policy in (ImplementedIsControlPlane(), AlwaysClassify())
}


def get_control_plane_policy(mode: str) -> ControlPlanePolicy:
    """
    Look up a control plane policy by name.

    Raises:
        ValueError: If the mode is unknown
    """
    if mode not in CONTROL_PLANE_POLICIES:
        raise ValueError(
            f"Unsupported classification mode: {mode}. "
            f"Must be one of: {list(CONTROL_PLANE_POLICIES.keys())}"
        )
    return CONTROL_PLANE_POLICIES[mode]


def _mark(operations: Sequence[Operation], op_type: OperationType) -> list[Operation]:
    return [replace(op, type=op_type) for op in operations]


def resolve_pending(
    service_name: str,
    pending: Sequence[Operation],
    classify: bool,
    classifier: OperationClassifier | None,
) -> list[Operation]:
    """
    Type the operations the control plane policy left open.

    Without classification they stay ``unclassified``. With classification a
    failure downgrades all of them to ``unknown``.
    """
    if not pending:
        return []

    if not classify:
        return _mark(pending, OperationType.UNCLASSIFIED)

    if classifier is None:
        raise ValueError("classify=True requires a classifier")

    try:
        result = classifier.classify(service_name, [op.name for op in pending])
    except ClassificationError as e:
        logger.warning(f"Failed to classify operations for {service_name}: {e.message}")
        return _mark(pending, OperationType.UNKNOWN)

    return apply_classification(pending, result)


def extract_service_operations(
    service_name: str,
    classify: bool = False,
    *,
    paths: ExtractorPaths,
    classifier: OperationClassifier | None = None,
    policy: ControlPlanePolicy | None = None,
    patterns: Sequence[CallPattern] = DEFAULT_PATTERNS,
) -> ServiceOperationSet:
    """
    Extract every operation of a service with implementation status.

    Args:
        service_name: Service identifier (e.g. "dynamodb")
        classify: Classify operations the policy leaves open
        paths: Controller and model roots
        classifier: Classifier used when ``classify`` is True
        policy: Control plane policy (default: ImplementedIsControlPlane)
        patterns: Call patterns for the source scan

    Returns:
        ServiceOperationSet with operations in model order

    Raises:
        ModelNotFoundError: No model file for the service
        ModelParseError: Model file is not a shape mapping
        NoOperationsFoundError: The model defines no operations
    """
    policy = policy or ImplementedIsControlPlane()

    shapes = load_service_model(service_name, paths)
    names = operation_names(shapes)

    decided: dict[str, Operation] = {}
    pending: list[Operation] = []

    for name in names:
        location = find_operation_in_controller(
            service_name, name, paths.controllers_root, patterns
        )
        operation = Operation(name=name, source_location=location)

        op_type = policy.decide(operation)
        if op_type is None:
            pending.append(operation)
        else:
            decided[name] = Operation(name=name, type=op_type, source_location=location)

    logger.debug(
        f"{service_name}: {len(names)} operations, "
        f"{len(decided)} decided by {policy.name}, {len(pending)} pending"
    )

    resolved = {op.name: op for op in resolve_pending(service_name, pending, classify, classifier)}

    operations = [decided[name] if name in decided else resolved[name] for name in names]
    if not operations:
        raise NoOperationsFoundError(service_name)

    return ServiceOperationSet(service_name=service_name, operations=operations)
