"""
Locate ACK controller checkouts and read their generator configuration.

A controller for service ``<name>`` lives in a sibling directory named
``<name>-controller``. A missing controller is the normal state of a service
that has not been implemented yet, so lookups return None instead of raising.
"""

import logging
from pathlib import Path

import yaml

from ack_api_extractor.exceptions import ConfigNotFoundError, ConfigParseError

logger = logging.getLogger(__name__)

GENERATOR_CONFIG_FILE = "generator.yaml"


def find_controller(service_name: str, controllers_root: Path) -> Path | None:
    """
    Return the controller directory for a service, or None if there isn't one.

    Args:
        service_name: Service identifier (e.g. "dynamodb")
        controllers_root: Directory holding the ``*-controller`` checkouts

    Returns:
        Path to ``<controllers_root>/<service_name>-controller`` if it exists
    """
    controller_path = Path(controllers_root) / f"{service_name}-controller"
    if controller_path.is_dir():
        return controller_path
    return None


def resolve_implementation_name(service_name: str, controllers_root: Path) -> str:
    """
    Read ``sdk_names.model_name`` from the controller's generator.yaml.

    The model name is what the AWS SDK and the models repository call the
    service, which can differ from the controller's name.

    Args:
        service_name: Service identifier
        controllers_root: Directory holding the ``*-controller`` checkouts

    Returns:
        The implementation model name

    Raises:
        ConfigNotFoundError: Controller, generator.yaml, or model_name missing
        ConfigParseError: generator.yaml is not valid YAML or not a mapping
    """
    controller_path = find_controller(service_name, controllers_root)
    if controller_path is None:
        raise ConfigNotFoundError(service_name, "controller directory not found")

    generator_file = controller_path / GENERATOR_CONFIG_FILE
    if not generator_file.is_file():
        raise ConfigNotFoundError(service_name, f"{generator_file} does not exist")

    try:
        with open(generator_file) as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigParseError(str(generator_file), str(e)) from e
    except OSError as e:
        raise ConfigParseError(str(generator_file), str(e)) from e

    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise ConfigParseError(
            str(generator_file), f"expected mapping, got {type(config).__name__}"
        )

    sdk_names = config.get("sdk_names") or {}
    if not isinstance(sdk_names, dict):
        raise ConfigParseError(str(generator_file), "sdk_names must be a mapping")

    model_name = sdk_names.get("model_name")
    if not model_name:
        raise ConfigNotFoundError(service_name, f"model_name not found in {generator_file}")

    return str(model_name)


def implementation_name_or_default(service_name: str, controllers_root: Path) -> str:
    """Resolved implementation name, or the service identifier if it can't be resolved."""
    try:
        return resolve_implementation_name(service_name, controllers_root)
    except ConfigNotFoundError as e:
        logger.debug(f"Using service name '{service_name}' as implementation name: {e}")
        return service_name
    except ConfigParseError as e:
        logger.warning(f"Using service name '{service_name}' as implementation name: {e}")
        return service_name
