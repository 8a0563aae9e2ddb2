"""
Write extraction results as JSON documents.
"""

from pathlib import Path

from ack_api_extractor.models import IAMPolicy, ServiceOperationSet
from ack_api_extractor.util.files import write_json


def operations_output_path(output_dir: Path, service_name: str) -> Path:
    return Path(output_dir) / f"{service_name}-operations.json"


def policy_output_path(output_dir: Path, service_name: str) -> Path:
    return Path(output_dir) / f"{service_name}-policy.json"


def write_service_operations(service_ops: ServiceOperationSet, output_dir: Path) -> Path:
    """Write ``<service>-operations.json`` and return its path."""
    path = operations_output_path(output_dir, service_ops.service_name)
    write_json(path, service_ops.to_dict())
    return path


def write_policy(policy: IAMPolicy, service_name: str, output_dir: Path) -> Path:
    """Write ``<service>-policy.json`` and return its path."""
    path = policy_output_path(output_dir, service_name)
    write_json(path, policy.to_dict())
    return path
