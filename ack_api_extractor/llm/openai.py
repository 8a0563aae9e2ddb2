"""
OpenAI provider. JSON replies use the API's ``json_object`` response format.
"""

import os

from ack_api_extractor.llm.base import LLMProvider, LLMRequest

DEFAULT_OPENAI_MODEL = "gpt-4o"


class OpenAIProvider(LLMProvider):
    """OpenAI chat completions."""

    display_name = "OpenAI"
    requires_api_key = True

    def __init__(self, config: dict):
        super().__init__(config)
        self.client = None
        api_key = os.environ.get(self.api_key_env)
        if api_key:
            try:
                from openai import OpenAI
            except ImportError:
                raise ImportError("openai package not installed. Install with: pip install openai")
            self.client = OpenAI(api_key=api_key)

    def _complete(self, request: LLMRequest) -> str:
        messages = []
        if request.system_prompt:
            messages.append({"role": "system", "content": request.system_prompt})
        messages.append({"role": "user", "content": request.prompt})

        kwargs = {
            "model": self.model or DEFAULT_OPENAI_MODEL,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "messages": messages,
        }
        if request.json_response:
            kwargs["response_format"] = {"type": "json_object"}

        response = self.client.chat.completions.create(**kwargs)
        return response.choices[0].message.content or ""

    def is_available(self) -> bool:
        return self.client is not None
