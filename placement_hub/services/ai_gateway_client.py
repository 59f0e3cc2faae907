"""
AI Gateway Client

The gateway speaks the OpenAI chat-completions API, so we use the openai
library with a custom base_url.

FAILURE MODES (all raised as AIGatewayUnavailable with a reason):
- 429 -> rate_limited
- 402 -> payment_required
- connection problems / timeouts -> network_error
- any other non-2xx -> upstream_error
- empty content -> malformed_response

Callers never see openai exceptions.
"""
import json
import logging
from typing import Optional

import openai
from openai import OpenAI

from placement_hub.core.config import get_settings
from placement_hub.core.errors import AIGatewayUnavailable

settings = get_settings()
logger = logging.getLogger(__name__)


class AIGatewayClient:
    """
    Thin wrapper around the chat-completions endpoint.
    """

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, model: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.ai_gateway_api_key
        self.base_url = base_url or settings.ai_gateway_base_url
        self.model = model or settings.ai_model
        self._client: Optional[OpenAI] = None

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @property
    def client(self) -> OpenAI:
        if not self.api_key:
            raise AIGatewayUnavailable(AIGatewayUnavailable.NOT_CONFIGURED)
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    def chat(
        self,
        system_prompt: str,
        user_content: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> str:
        """
        Send one system + user message pair and return the raw text reply.
        """
        params = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content}
            ],
        }
        if temperature is not None:
            params["temperature"] = temperature
        if max_tokens is not None:
            params["max_tokens"] = max_tokens

        try:
            response = self.client.chat.completions.create(**params)
        except openai.RateLimitError as e:
            raise AIGatewayUnavailable(AIGatewayUnavailable.RATE_LIMITED) from e
        except openai.APIStatusError as e:
            if e.status_code == 402:
                raise AIGatewayUnavailable(AIGatewayUnavailable.PAYMENT_REQUIRED) from e
            logger.error("AI gateway error %s: %s", e.status_code, e.message)
            raise AIGatewayUnavailable(
                AIGatewayUnavailable.UPSTREAM_ERROR, f"AI API error: {e.status_code}"
            ) from e
        except openai.APIConnectionError as e:
            raise AIGatewayUnavailable(AIGatewayUnavailable.NETWORK_ERROR) from e
        except openai.OpenAIError as e:
            logger.error("AI gateway client error: %s", e)
            raise AIGatewayUnavailable(AIGatewayUnavailable.UPSTREAM_ERROR, "AI API error") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise AIGatewayUnavailable(
                AIGatewayUnavailable.MALFORMED_RESPONSE, "No content received from AI"
            )
        return content

    @staticmethod
    def extract_json(text: str):
        """
        Extract JSON from a reply.
        Handles cases where the model wraps JSON in markdown code blocks.
        Raises json.JSONDecodeError when the text is not JSON.
        """
        text = text.strip()
        if text.startswith("```json"):
            text = text[7:]
        if text.startswith("```"):
            text = text[3:]
        if text.endswith("```"):
            text = text[:-3]

        return json.loads(text.strip())

    def test_connection(self) -> bool:
        """Test if the gateway is reachable"""
        try:
            reply = self.chat(
                "You are a test assistant.",
                "Reply with exactly: OK",
                max_tokens=10
            )
            return "OK" in reply.upper()
        except AIGatewayUnavailable as e:
            logger.warning("AI gateway connection failed: %s", e.reason)
            return False


# Singleton instance
_ai_client: Optional[AIGatewayClient] = None


def get_ai_client() -> AIGatewayClient:
    """Get or create the gateway client (singleton pattern)"""
    global _ai_client
    if _ai_client is None:
        _ai_client = AIGatewayClient()
    return _ai_client


def set_ai_client(client: Optional[AIGatewayClient]) -> None:
    """Replace the shared client (None resets to a fresh default on next use)."""
    global _ai_client
    _ai_client = client
