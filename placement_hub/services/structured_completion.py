"""
Resilient structured completion.

Every AI feature follows the same contract: send a prompt pair, expect a JSON
object of a known shape, and hand back a fallback payload when the gateway
is down or the answer can't be used. This module is the one place that
contract lives.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Type, Union

from pydantic import BaseModel, ValidationError as SchemaError

from placement_hub.core.errors import AIGatewayUnavailable
from placement_hub.services.ai_gateway_client import AIGatewayClient, get_ai_client

logger = logging.getLogger(__name__)

SOURCE_AI = "ai"
SOURCE_FALLBACK = "fallback"

Fallback = Union[Dict[str, Any], Callable[[], Dict[str, Any]]]


@dataclass
class CompletionResult:
    data: Dict[str, Any]
    source: str
    error: Optional[str] = None
    message: Optional[str] = None
    raw_content: Optional[str] = None

    @property
    def from_ai(self) -> bool:
        return self.source == SOURCE_AI


class StructuredCompletion:
    """
    One AI call with a schema and a fallback.

    Usage:
        completion = StructuredCompletion(RecommendationSet, fallback=lambda: {...})
        result = completion.run(system_prompt, user_prompt)
        result.data      # validated AI payload, or the fallback
        result.source    # "ai" or "fallback"
    """

    def __init__(
        self,
        schema: Type[BaseModel],
        fallback: Fallback,
        client: Optional[AIGatewayClient] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ):
        self.schema = schema
        self.fallback = fallback
        self.client = client
        self.temperature = temperature
        self.max_tokens = max_tokens

    def _fallback_data(self) -> Dict[str, Any]:
        return self.fallback() if callable(self.fallback) else dict(self.fallback)

    def run(self, system_prompt: str, user_prompt: str) -> CompletionResult:
        client = self.client or get_ai_client()
        name = self.schema.__name__

        try:
            content = client.chat(
                system_prompt,
                user_prompt,
                temperature=self.temperature,
                max_tokens=self.max_tokens
            )
        except AIGatewayUnavailable as e:
            logger.warning("%s: AI gateway unavailable (%s), using fallback", name, e.reason)
            return CompletionResult(
                data=self._fallback_data(),
                source=SOURCE_FALLBACK,
                error=e.reason,
                message=e.message
            )

        try:
            parsed = client.extract_json(content)
            data = self.schema.model_validate(parsed).model_dump()
        except (json.JSONDecodeError, SchemaError) as e:
            logger.warning("%s: unusable AI response, using fallback: %s", name, e)
            return CompletionResult(
                data=self._fallback_data(),
                source=SOURCE_FALLBACK,
                error=AIGatewayUnavailable.MALFORMED_RESPONSE,
                message=AIGatewayUnavailable.MESSAGES[AIGatewayUnavailable.MALFORMED_RESPONSE],
                raw_content=content
            )

        return CompletionResult(data=data, source=SOURCE_AI, raw_content=content)
