"""
Base class for the LLM providers used as the classification oracle.

Every provider receives the same ``LLMRequest``. Retry, credential redaction
and error wrapping happen here, so a provider only has to turn a request into
one API call and return the reply text.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ack_api_extractor.exceptions import LLMAPIError, LLMProviderNotAvailableError
from ack_api_extractor.util.redact import redact_sensitive
from ack_api_extractor.util.retry import (
    RetryStrategy,
    is_retryable_error,
    log_retry,
    retry_with_backoff,
)

# Assistant turn that forces Claude models to answer with a JSON object
JSON_PREFILL = "{"


@dataclass(frozen=True)
class LLMRequest:
    """One prompt sent to a provider."""

    prompt: str
    system_prompt: Optional[str] = None
    max_tokens: int = 4096
    temperature: float = 0.0
    json_response: bool = False

    def anthropic_messages(self) -> list[dict]:
        """Messages in the Anthropic Messages API shape (also used by Bedrock)."""
        messages = [{"role": "user", "content": self.prompt}]
        if self.json_response:
            messages.append({"role": "assistant", "content": JSON_PREFILL})
        return messages

    def complete_text(self, text: str) -> str:
        """Put the prefilled opening brace back in front of a continuation."""
        if self.json_response and not text.lstrip().startswith(JSON_PREFILL):
            return JSON_PREFILL + text
        return text


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    display_name = "LLM"
    requires_api_key = False

    def __init__(self, config: dict):
        """
        Initialize LLM provider.

        Args:
            config: LLM configuration dict with 'model', 'api_key_env', 'region', etc.
        """
        self.config = config
        self.model = config.get("model")
        self.api_key_env = config.get("api_key_env", "ACK_EXTRACTOR_LLM_API_KEY")

    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: int = 4096,
        temperature: float = 0.0,
        json_response: bool = False,
    ) -> str:
        """
        Send a prompt and return the reply text.

        Args:
            prompt: The user prompt
            system_prompt: Optional system instruction
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature (0.0 = deterministic)
            json_response: Ask the model to reply with a single JSON object

        Raises:
            LLMProviderNotAvailableError: Provider is not configured
            LLMAPIError: The call failed with a non-retryable error
            RetryableError: Every attempt failed with a retryable error
        """
        if not self.is_available():
            raise LLMProviderNotAvailableError(
                self.display_name.lower(), self.api_key_env if self.requires_api_key else None
            )

        request = LLMRequest(prompt, system_prompt, max_tokens, temperature, json_response)
        return self._generate_with_retry(request)

    @retry_with_backoff(
        **RetryStrategy.LLM_API, fatal_exceptions=(LLMAPIError,), on_retry=log_retry
    )  # type: ignore[arg-type]
    def _generate_with_retry(self, request: LLMRequest) -> str:
        try:
            return self._complete(request)
        except Exception as e:
            if is_retryable_error(e):
                raise
            raise LLMAPIError(self.display_name, redact_sensitive(str(e))) from e

    @abstractmethod
    def _complete(self, request: LLMRequest) -> str:
        """Make one API call and return the reply text."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """True if the provider can be called."""
        pass

    def get_model_name(self) -> str:
        """Get the configured model name."""
        return self.model or "unknown"
