"""
Read AWS API models (Smithy JSON AST) and list the operations they define.

Models are stored as ``<models_root>/<model name>/service/<version>/<name>.json``.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from ack_api_extractor.controller import resolve_implementation_name
from ack_api_extractor.exceptions import ControllerConfigError, ModelNotFoundError, ModelParseError
from ack_api_extractor.workspace import ExtractorPaths

logger = logging.getLogger(__name__)


def _first_json_file(directory: Path) -> Path | None:
    """First ``*.json`` file below a directory, walking in sorted order."""
    for dirpath, dirnames, filenames in os.walk(directory):
        dirnames.sort()
        for filename in sorted(filenames):
            if filename.endswith(".json"):
                return Path(dirpath) / filename
    return None


def find_service_model_file(service_name: str, paths: ExtractorPaths) -> Path:
    """
    Locate the JSON model file for a service.

    Looks in ``<models_root>/<service_name>/service`` first. If that directory
    doesn't exist, the controller's generator.yaml is consulted for the
    implementation model name and that directory is tried instead.

    Args:
        service_name: Service identifier
        paths: Controller and model roots

    Returns:
        Path to the model JSON file

    Raises:
        ModelNotFoundError: If no model file can be found under either name
    """
    models_path = paths.models_root / service_name / "service"

    if not models_path.is_dir():
        try:
            model_name = resolve_implementation_name(service_name, paths.controllers_root)
        except ControllerConfigError as e:
            raise ModelNotFoundError(
                service_name,
                f"{models_path} does not exist and fallback failed: {e.message}",
            ) from e

        logger.debug(f"Falling back to model name '{model_name}' for service '{service_name}'")
        models_path = paths.models_root / model_name / "service"
        if not models_path.is_dir():
            raise ModelNotFoundError(
                service_name,
                f"no model directory for service name ({service_name}) "
                f"or model name ({model_name})",
            )

    json_file = _first_json_file(models_path)
    if json_file is None:
        raise ModelNotFoundError(service_name, f"no JSON file found in {models_path}")

    return json_file


def load_service_model(service_name: str, paths: ExtractorPaths) -> dict[str, dict[str, Any]]:
    """
    Load a service model and return its shape mapping.

    Raises:
        ModelNotFoundError: If the model file can't be located
        ModelParseError: If the file isn't JSON or has no ``shapes`` object
    """
    model_file = find_service_model_file(service_name, paths)
    logger.debug(f"Loading model for {service_name} from {model_file}")

    try:
        with open(model_file, encoding="utf-8") as f:
            model = json.load(f)
    except json.JSONDecodeError as e:
        raise ModelParseError(str(model_file), str(e)) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ModelParseError(str(model_file), str(e)) from e

    if not isinstance(model, dict):
        raise ModelParseError(str(model_file), "top level is not an object")

    shapes = model.get("shapes")
    if not isinstance(shapes, dict):
        raise ModelParseError(str(model_file), "missing 'shapes' object")

    return shapes


def extract_operation_name(target: str) -> str:
    """
    Extract the operation name from a shape id.

    Example:
        >>> extract_operation_name("com.amazonaws.acm#DeleteCertificate")
        'DeleteCertificate'
        >>> extract_operation_name("DeleteCertificate")
        ''
    """
    parts = target.split("#")
    if len(parts) == 2:
        return parts[1]
    return ""


def operation_names(shapes: dict[str, dict[str, Any]]) -> list[str]:
    """
    List every operation defined by a model, without duplicates.

    Names come from the ``operations`` targets of service shapes and from
    shapes whose own type is ``operation``. The order is the order of first
    appearance, service shape references first.

    Args:
        shapes: Shape mapping from ``load_service_model``

    Returns:
        Ordered, deduplicated operation names
    """
    names: list[str] = []
    seen: set[str] = set()

    def add(name: str) -> None:
        if name and name not in seen:
            seen.add(name)
            names.append(name)

    for shape in shapes.values():
        if not isinstance(shape, dict) or shape.get("type") != "service":
            continue
        for op_target in shape.get("operations") or []:
            if isinstance(op_target, dict):
                add(extract_operation_name(str(op_target.get("target", ""))))

    for shape_id, shape in shapes.items():
        if isinstance(shape, dict) and shape.get("type") == "operation":
            add(extract_operation_name(shape_id) if "#" in shape_id else shape_id)

    return names
