import json
from types import SimpleNamespace

import httpx
import openai
import pytest

from conftest import FakeAIClient
from placement_hub.core.errors import AIGatewayUnavailable
from placement_hub.schemas.schemas import RecommendationSet
from placement_hub.services.ai_gateway_client import AIGatewayClient
from placement_hub.services.structured_completion import StructuredCompletion

GATEWAY_URL = "https://gateway.campus.edu/v1/chat/completions"


class StubCompletions:
    def __init__(self, outcome):
        self.outcome = outcome
        self.params = None

    def create(self, **params):
        self.params = params
        if isinstance(self.outcome, Exception):
            raise self.outcome
        message = SimpleNamespace(content=self.outcome)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def client_with(outcome):
    client = AIGatewayClient(api_key="key", base_url="https://gateway.campus.edu/v1", model="test-model")
    completions = StubCompletions(outcome)
    client._client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return client, completions


def status_error(cls, code):
    request = httpx.Request("POST", GATEWAY_URL)
    response = httpx.Response(code, request=request)
    return cls(f"status {code}", response=response, body=None)


# ============================================================
# GATEWAY CLIENT
# ============================================================

def test_chat_sends_model_messages_and_options():
    client, completions = client_with('{"ok": true}')
    assert client.chat("sys", "user", temperature=0.3, max_tokens=50) == '{"ok": true}'
    assert completions.params == {
        "model": "test-model",
        "messages": [{"role": "system", "content": "sys"}, {"role": "user", "content": "user"}],
        "temperature": 0.3,
        "max_tokens": 50,
    }


@pytest.mark.parametrize("error, reason", [
    (status_error(openai.RateLimitError, 429), AIGatewayUnavailable.RATE_LIMITED),
    (status_error(openai.APIStatusError, 402), AIGatewayUnavailable.PAYMENT_REQUIRED),
    (status_error(openai.InternalServerError, 500), AIGatewayUnavailable.UPSTREAM_ERROR),
    (openai.APIConnectionError(request=httpx.Request("POST", GATEWAY_URL)), AIGatewayUnavailable.NETWORK_ERROR),
    (
        openai.APIResponseValidationError(
            response=httpx.Response(200, request=httpx.Request("POST", GATEWAY_URL)), body=None
        ),
        AIGatewayUnavailable.UPSTREAM_ERROR,
    ),
    (openai.OpenAIError("client misconfigured"), AIGatewayUnavailable.UPSTREAM_ERROR),
])
def test_chat_maps_gateway_failures_to_reasons(error, reason):
    client, _ = client_with(error)
    with pytest.raises(AIGatewayUnavailable) as excinfo:
        client.chat("sys", "user")
    assert excinfo.value.reason == reason
    assert excinfo.value.status_code == 503


def test_empty_reply_is_malformed():
    client, _ = client_with("")
    with pytest.raises(AIGatewayUnavailable) as excinfo:
        client.chat("sys", "user")
    assert excinfo.value.reason == AIGatewayUnavailable.MALFORMED_RESPONSE


def test_missing_api_key_is_not_configured():
    client = AIGatewayClient(api_key="")
    assert not client.configured
    with pytest.raises(AIGatewayUnavailable) as excinfo:
        client.chat("sys", "user")
    assert excinfo.value.reason == AIGatewayUnavailable.NOT_CONFIGURED


def test_extract_json_tolerates_markdown_fences():
    assert AIGatewayClient.extract_json('```json\n{"a": 1}\n```') == {"a": 1}
    assert AIGatewayClient.extract_json('```\n[1, 2]\n```') == [1, 2]
    with pytest.raises(json.JSONDecodeError):
        AIGatewayClient.extract_json("Here are your jobs!")


# ============================================================
# STRUCTURED COMPLETION
# ============================================================

FALLBACK = {"recommended_job_ids": ["fallback-job"], "reasoning": "fallback"}


def test_valid_reply_is_returned_as_ai_data():
    fake = FakeAIClient([{"recommended_job_ids": ["j1", "j2"], "reasoning": "skills fit"}])
    result = StructuredCompletion(RecommendationSet, FALLBACK, client=fake).run("sys", "user")

    assert result.source == "ai"
    assert result.error is None
    assert result.data["recommended_job_ids"] == ["j1", "j2"]


def test_gateway_failure_returns_fallback_with_reason():
    fake = FakeAIClient([AIGatewayUnavailable(AIGatewayUnavailable.RATE_LIMITED)])
    result = StructuredCompletion(RecommendationSet, FALLBACK, client=fake).run("sys", "user")

    assert result.source == "fallback"
    assert result.error == "rate_limited"
    assert result.message == AIGatewayUnavailable.MESSAGES["rate_limited"]
    assert result.data == FALLBACK


def test_unparseable_reply_returns_fallback_and_keeps_raw_text():
    fake = FakeAIClient(["I think job 3 is great"])
    result = StructuredCompletion(RecommendationSet, lambda: dict(FALLBACK), client=fake).run("sys", "user")

    assert result.source == "fallback"
    assert result.error == "malformed_response"
    assert result.raw_content == "I think job 3 is great"
    assert result.data == FALLBACK


def test_reply_missing_required_field_returns_fallback():
    fake = FakeAIClient([{"reasoning": "forgot the ids"}])
    result = StructuredCompletion(RecommendationSet, FALLBACK, client=fake).run("sys", "user")

    assert result.source == "fallback"
    assert result.error == "malformed_response"


def test_fallback_dict_is_copied_per_call():
    fake = FakeAIClient()
    completion = StructuredCompletion(RecommendationSet, FALLBACK, client=fake)
    completion.run("sys", "user").data["reasoning"] = "mutated"
    assert completion.run("sys", "user").data["reasoning"] == "fallback"
