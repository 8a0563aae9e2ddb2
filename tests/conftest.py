"""
Pytest configuration and shared fixtures.
"""

import json
from pathlib import Path

import pytest

from ack_api_extractor.workspace import ExtractorPaths


def build_service_model(namespace: str, operations: list[str], extra_shapes: dict = None) -> dict:
    """Build a minimal Smithy model with one service shape."""
    shapes = {
        f"{namespace}#Service": {
            "type": "service",
            "operations": [{"target": f"{namespace}#{op}"} for op in operations],
        }
    }
    shapes.update(extra_shapes or {})
    return {"smithy": "2.0", "shapes": shapes}


@pytest.fixture
def service_model():
    """Factory for minimal Smithy models."""
    return build_service_model


@pytest.fixture
def layout(tmp_path):
    """Controllers root and models root inside a temporary directory."""
    controllers_root = tmp_path / "controllers"
    models_root = tmp_path / "api-models-aws" / "models"
    controllers_root.mkdir()
    models_root.mkdir(parents=True)
    return ExtractorPaths(controllers_root=controllers_root, models_root=models_root)


@pytest.fixture
def write_model(layout):
    """Write a model JSON document for a model name and return its path."""

    def _write(model_name: str, model, version: str = "2012-08-10") -> Path:
        model_dir = layout.models_root / model_name / "service" / version
        model_dir.mkdir(parents=True, exist_ok=True)
        model_file = model_dir / f"{model_name}-{version}.json"
        if isinstance(model, str):
            model_file.write_text(model)
        else:
            model_file.write_text(json.dumps(model))
        return model_file

    return _write


@pytest.fixture
def make_controller(layout):
    """Create ``<service>-controller`` with optional generator.yaml and sources."""

    def _make(service_name: str, sources: dict[str, str] = None, generator: str = None) -> Path:
        controller = layout.controllers_root / f"{service_name}-controller"
        controller.mkdir(parents=True, exist_ok=True)
        if generator is not None:
            (controller / "generator.yaml").write_text(generator)
        for relative, content in (sources or {}).items():
            path = controller / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return controller

    return _make


@pytest.fixture
def mock_llm_config():
    """Return configuration for mock LLM provider."""
    return {"llm": {"provider": "mock", "model": "mock-model"}}
