"""
LLM provider abstraction layer used as the classification oracle.
"""

from ack_api_extractor.llm.anthropic import AnthropicProvider
from ack_api_extractor.llm.base import LLMProvider
from ack_api_extractor.llm.bedrock import BedrockProvider
from ack_api_extractor.llm.mock import MockProvider
from ack_api_extractor.llm.openai import OpenAIProvider


def get_provider(config: dict) -> LLMProvider:
    """
    Factory function to get LLM provider based on config.

    Args:
        config: Configuration dict with 'llm' section

    Returns:
        LLMProvider instance

    Raises:
        ValueError: If provider is not supported
    """
    llm_config = config.get("llm", {})
    provider_name = llm_config.get("provider", "bedrock").lower()

    providers = {
        "bedrock": BedrockProvider,
        "anthropic": AnthropicProvider,
        "openai": OpenAIProvider,
        "mock": MockProvider,
    }

    if provider_name not in providers:
        raise ValueError(
            f"Unsupported provider: {provider_name}. Must be one of: {list(providers.keys())}"
        )

    return providers[provider_name](llm_config)


__all__ = [
    "LLMProvider",
    "AnthropicProvider",
    "BedrockProvider",
    "OpenAIProvider",
    "MockProvider",
    "get_provider",
]
