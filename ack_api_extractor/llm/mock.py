"""
Mock LLM provider for testing and offline runs (no API calls).
"""

import json
import re

from ack_api_extractor.llm.base import LLMProvider, LLMRequest

# Verbs that manage resources rather than the data inside them
CONTROL_PLANE_PREFIXES = (
    "Create",
    "Delete",
    "Update",
    "Modify",
    "Put",
    "Tag",
    "Untag",
    "Attach",
    "Detach",
    "Associate",
    "Disassociate",
    "Enable",
    "Disable",
    "Register",
    "Deregister",
)

_OPERATION_LIST = re.compile(r"^Classify these .+? service operations: (?P<ops>.*)$", re.MULTILINE)


class MockProvider(LLMProvider):
    """
    Mock LLM provider that answers classification prompts with canned JSON.

    Operations starting with a resource-management verb are reported as
    control plane, everything else as data plane.
    """

    display_name = "Mock"

    def _complete(self, request: LLMRequest) -> str:
        """Return a classification JSON object for the operations named in the prompt."""
        match = _OPERATION_LIST.search(request.prompt)
        operations = [op.strip() for op in match.group("ops").split(",")] if match else []
        operations = [op for op in operations if op]

        result = {
            "control_plane": [op for op in operations if op.startswith(CONTROL_PLANE_PREFIXES)],
            "data_plane": [op for op in operations if not op.startswith(CONTROL_PLANE_PREFIXES)],
        }
        return json.dumps(result, indent=2)

    def is_available(self) -> bool:
        """Mock provider is always available."""
        return True
