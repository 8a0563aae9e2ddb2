"""
AWS Bedrock LLM provider implementation (Claude models via bedrock-runtime).
"""

import json

from ack_api_extractor.llm.base import LLMProvider, LLMRequest

DEFAULT_BEDROCK_MODEL = "us.anthropic.claude-3-5-sonnet-20241022-v2:0"
BEDROCK_ANTHROPIC_VERSION = "bedrock-2023-05-31"


class BedrockProvider(LLMProvider):
    """
    Claude on AWS Bedrock.

    Credentials come from the standard AWS chain (environment, profile,
    instance role); ``api_key_env`` is not used.
    """

    display_name = "Bedrock"

    def __init__(self, config: dict):
        super().__init__(config)
        self.region = config.get("region", "us-east-1")
        self.client = None
        self._initialize_client()

    def _initialize_client(self):
        """Create the bedrock-runtime client."""
        try:
            import boto3
        except ImportError:
            raise ImportError("boto3 package not installed. Install with: pip install boto3")

        self.client = boto3.client("bedrock-runtime", region_name=self.region)

    def _complete(self, request: LLMRequest) -> str:
        body = {
            "anthropic_version": BEDROCK_ANTHROPIC_VERSION,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "messages": request.anthropic_messages(),
        }
        if request.system_prompt:
            body["system"] = request.system_prompt

        response = self.client.invoke_model(
            modelId=self.model or DEFAULT_BEDROCK_MODEL,
            body=json.dumps(body),
        )

        response_body = json.loads(response["body"].read())
        content = response_body.get("content") or []
        text = "".join(
            block.get("text", "") for block in content if block.get("type", "text") == "text"
        )
        return request.complete_text(text)

    def is_available(self) -> bool:
        """Bedrock is usable once the client exists; credentials are checked on first call."""
        return self.client is not None
