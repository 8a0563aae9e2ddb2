"""Dataclasses for extracted API operations and the documents built from them.

A ``ServiceOperationSet`` is the per-service result of an extraction run. Its
summary counts are computed from the operation list on access, so they always
describe the operations that are actually written out.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

POLICY_VERSION = "2012-10-17"


class OperationType(Enum):
    """
    Purpose of an API operation.

    Types:
        UNCLASSIFIED: Not implemented and classification was not requested
        CONTROL_PLANE: Manages the resources themselves (create, configure, delete)
        DATA_PLANE: Works with data held inside existing resources
        UNKNOWN: Classification was requested but the classifier failed

    Examples:
        >>> OperationType.CONTROL_PLANE.value
        'control_plane'
    """

    UNCLASSIFIED = "unclassified"
    CONTROL_PLANE = "control_plane"
    DATA_PLANE = "data_plane"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SourceLocation:
    """Where an operation is invoked in a controller, relative to the controller root."""

    file: str
    line: int


@dataclass(frozen=True)
class Operation:
    """
    A single API operation of a service.

    Attributes:
        name: Operation name as it appears in the model (e.g. "CreateTable")
        type: Classification of the operation
        source_location: First call site in the controller, None if not implemented
    """

    name: str
    type: OperationType = OperationType.UNCLASSIFIED
    source_location: SourceLocation | None = None

    @property
    def is_supported(self) -> bool:
        """True if the controller calls this operation."""
        return self.source_location is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "type": self.type.value}
        if self.source_location is not None:
            data["file"] = self.source_location.file
            data["line"] = self.source_location.line
        return data


@dataclass
class ServiceOperationSet:
    """All operations extracted for one service in one run."""

    service_name: str
    operations: list[Operation] = field(default_factory=list)

    @property
    def total_operations(self) -> int:
        return len(self.operations)

    @property
    def supported_operations(self) -> int:
        return sum(1 for op in self.operations if op.is_supported)

    @property
    def control_plane_operations(self) -> int:
        return sum(1 for op in self.operations if op.type is OperationType.CONTROL_PLANE)

    @property
    def supported_control_plane_operations(self) -> int:
        return sum(
            1
            for op in self.operations
            if op.type is OperationType.CONTROL_PLANE and op.is_supported
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "service_name": self.service_name,
            "total_operations": self.total_operations,
            "supported_operations": self.supported_operations,
            "control_plane_operations": self.control_plane_operations,
            "supported_control_plane_operations": self.supported_control_plane_operations,
            "operations": [op.to_dict() for op in self.operations],
        }


@dataclass
class ClassificationResult:
    """Operation names split into control plane and data plane, in reply order."""

    control_plane: list[str] = field(default_factory=list)
    data_plane: list[str] = field(default_factory=list)

    def merge(self, other: "ClassificationResult") -> "ClassificationResult":
        """Return a new result with ``other`` appended after this one."""
        return ClassificationResult(
            control_plane=self.control_plane + other.control_plane,
            data_plane=self.data_plane + other.data_plane,
        )


@dataclass
class PolicyStatement:
    """A single IAM policy statement."""

    effect: str
    actions: list[str]
    resource: Any
    condition: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "Effect": self.effect,
            "Action": list(self.actions),
            "Resource": self.resource,
        }
        if self.condition:
            data["Condition"] = self.condition
        return data


@dataclass
class IAMPolicy:
    """An AWS IAM policy document."""

    version: str = POLICY_VERSION
    statements: list[PolicyStatement] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "Version": self.version,
            "Statement": [statement.to_dict() for statement in self.statements],
        }
