"""
Workspace configuration for ack-api-extractor.
"""

import copy
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validate

from ack_api_extractor.exceptions import ConfigFileNotFoundError, InvalidConfigError

SCHEMA_FILE = Path(__file__).parent / "schema" / "config.schema.json"


@dataclass(frozen=True)
class ExtractorPaths:
    """Locations of the controller checkouts and the API model store."""

    controllers_root: Path
    models_root: Path


class Workspace:
    """Manages the ack-api-extractor configuration file of a working directory."""

    CONFIG_FILENAME = "ack-api-extractor.yaml"

    DEFAULT_CONFIG = {
        "paths": {
            "controllers_root": "..",
            "models_root": "../api-models-aws/models",
        },
        "llm": {
            "provider": "bedrock",
            "model": "us.anthropic.claude-3-5-sonnet-20241022-v2:0",
            "api_key_env": "ACK_EXTRACTOR_LLM_API_KEY",
            "region": "us-east-1",
            "rate_limit_delay": 0.0,  # seconds between classification batches
        },
        "classification": {
            "batch_size": 100,
            "mode": "implemented_is_control_plane",
        },
    }

    def __init__(self, root: Path, config_file: Path | None = None):
        self.root = Path(root)
        self.config_file = Path(config_file) if config_file else self.root / self.CONFIG_FILENAME
        self.explicit_config = config_file is not None
        self._config_cache: dict[str, Any] | None = None

    def initialize(self) -> None:
        """Write the default configuration file."""
        self.root.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w") as f:
            yaml.dump(self.DEFAULT_CONFIG, f, default_flow_style=False, sort_keys=False)

    def load_config(self) -> dict[str, Any]:
        """
        Load, validate and cache the configuration.

        A missing default config file is not an error: the defaults describe the
        usual layout where the tool is checked out next to the controllers. A
        config file passed in explicitly must exist.
        Values from the file are merged section by section over the defaults.
        """
        if self._config_cache is not None:
            return self._config_cache

        config = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.explicit_config and not self.config_file.is_file():
            raise ConfigFileNotFoundError(str(self.config_file))

        if self.config_file.exists():
            try:
                with open(self.config_file) as f:
                    user_config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise InvalidConfigError(f"{self.config_file}: {e}") from e

            if user_config is None:
                user_config = {}
            if not isinstance(user_config, dict):
                raise InvalidConfigError(
                    f"{self.config_file}: expected mapping, got {type(user_config).__name__}"
                )

            self._validate_config_schema(user_config)

            for section, values in user_config.items():
                config[section].update(values or {})

        self._config_cache = config
        return config

    def _validate_config_schema(self, config: dict) -> None:
        """Validate config against JSON schema."""
        schema = json.loads(SCHEMA_FILE.read_text())
        try:
            validate(instance=config, schema=schema)
        except ValidationError as e:
            raise InvalidConfigError(
                f"{e.message} (path: {'.'.join(str(p) for p in e.path) or '<root>'})"
            ) from e

    def paths(
        self,
        controllers_root: str | Path | None = None,
        models_root: str | Path | None = None,
    ) -> ExtractorPaths:
        """
        Resolve controller and model roots.

        Explicit arguments win over the config file. Relative config values are
        resolved against the workspace root.
        """
        config_paths = self.load_config()["paths"]
        return ExtractorPaths(
            controllers_root=self._resolve(controllers_root or config_paths["controllers_root"]),
            models_root=self._resolve(models_root or config_paths["models_root"]),
        )

    def _resolve(self, path: str | Path) -> Path:
        p = Path(path)
        return p if p.is_absolute() else self.root / p
