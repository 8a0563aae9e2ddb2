"""
Anthropic API provider (Claude without going through AWS).
"""

import os

from ack_api_extractor.llm.base import LLMProvider, LLMRequest

DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-5"


class AnthropicProvider(LLMProvider):
    """Claude through the Anthropic API, sharing Bedrock's message shape."""

    display_name = "Anthropic"
    requires_api_key = True

    def __init__(self, config: dict):
        super().__init__(config)
        self.client = None
        api_key = os.environ.get(self.api_key_env)
        if api_key:
            try:
                from anthropic import Anthropic
            except ImportError:
                raise ImportError(
                    "anthropic package not installed. Install with: pip install anthropic"
                )
            self.client = Anthropic(api_key=api_key)

    def _complete(self, request: LLMRequest) -> str:
        kwargs = {
            "model": self.model or DEFAULT_ANTHROPIC_MODEL,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "messages": request.anthropic_messages(),
        }
        if request.system_prompt:
            kwargs["system"] = request.system_prompt

        response = self.client.messages.create(**kwargs)
        text = "".join(
            getattr(block, "text", "") for block in response.content if block.type == "text"
        )
        return request.complete_text(text)

    def is_available(self) -> bool:
        return self.client is not None
