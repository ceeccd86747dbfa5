# Area: Inference Tests
"""Tests for the Anthropic messages adapter."""

import json

import httpx
import pytest

from geohistory._inference.anthropics import JSON_SYSTEM_PREFIX, AnthropicsProvider
from geohistory.errors import InferenceError
from geohistory.types import InferenceJsonRequest, InferenceTextRequest


def message(text):
    return {
        "id": "msg_01",
        "type": "message",
        "role": "assistant",
        "model": "claude-3-haiku-20240307",
        "content": [{"type": "text", "text": text}],
        "stop_reason": "end_turn",
        "stop_sequence": None,
        "usage": {"input_tokens": 10, "output_tokens": 5},
    }


class Recorder:
    def __init__(self, response):
        self.response = response
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        return self.response

    @property
    def body(self):
        return json.loads(self.requests[-1].content)


def make_provider(recorder, **kwargs):
    http_client = httpx.Client(transport=httpx.MockTransport(recorder))
    return AnthropicsProvider(http_client=http_client, **kwargs)


class TestRequestShape:
    """Outgoing messages request."""

    def test_headers_and_url(self):
        recorder = Recorder(httpx.Response(200, json=message("Paris")))
        provider = make_provider(recorder, base_url="https://custom.anthropic.com/", api_key="test-key-123")
        provider.generate_text(InferenceTextRequest(prompt="Capital of France?"))
        request = recorder.requests[0]
        assert str(request.url) == "https://custom.anthropic.com/v1/messages"
        assert request.headers["x-api-key"] == "test-key-123"
        assert request.headers["anthropic-version"] == "2023-06-01"

    def test_system_instruction_folded_into_prompt(self):
        recorder = Recorder(httpx.Response(200, json=message("ok")))
        make_provider(recorder, api_key="k").generate_text(
            InferenceTextRequest(prompt="Question", system_instruction="Be brief")
        )
        body = recorder.body
        assert body["messages"] == [{"role": "user", "content": "Be brief\n\nQuestion"}]
        assert "system" not in body

    def test_default_max_tokens_and_model(self):
        recorder = Recorder(httpx.Response(200, json=message("ok")))
        make_provider(recorder, api_key="k").generate_text(InferenceTextRequest(prompt="x", power="light"))
        assert recorder.body["max_tokens"] == 1024
        assert recorder.body["model"] == "claude-3-haiku-20240307"

    def test_json_schema_goes_to_system_prompt(self):
        schema = {"type": "object", "properties": {"scope": {"type": "string"}}}
        recorder = Recorder(httpx.Response(200, json=message('{"scope": "Rome"}')))
        result = make_provider(recorder, api_key="k").generate_json(
            InferenceJsonRequest(prompt="x", schema=schema)
        )
        assert result == {"scope": "Rome"}
        assert recorder.body["system"] == JSON_SYSTEM_PREFIX + json.dumps(schema)


class TestResponses:
    def test_text_trimmed(self):
        provider = make_provider(Recorder(httpx.Response(200, json=message("  Danube \n"))), api_key="k")
        assert provider.generate_text(InferenceTextRequest(prompt="x")) == "Danube"

    def test_invalid_json_is_response_parse(self):
        provider = make_provider(Recorder(httpx.Response(200, json=message("Sure! Here it is"))), api_key="k")
        with pytest.raises(InferenceError) as exc:
            provider.generate_json(InferenceJsonRequest(prompt="x"))
        assert exc.value.stage == "response_parse"

    def test_http_error_is_provider_call(self):
        recorder = Recorder(httpx.Response(500, json={"type": "error", "error": {"type": "api_error"}}))
        provider = make_provider(recorder, api_key="k")
        with pytest.raises(InferenceError) as exc:
            provider.generate_text(InferenceTextRequest(prompt="x"))
        assert exc.value.stage == "provider_call"
        assert exc.value.status_code == 500
        assert exc.value.provider == "anthropics"
        assert len(recorder.requests) == 1

    def test_network_error_is_provider_call(self):
        def handler(request):
            raise httpx.ConnectError("refused")

        provider = AnthropicsProvider(api_key="k", http_client=httpx.Client(transport=httpx.MockTransport(handler)))
        with pytest.raises(InferenceError) as exc:
            provider.generate_text(InferenceTextRequest(prompt="x"))
        assert exc.value.stage == "provider_call"


class TestClientConstruction:
    """The SDK client is built lazily from the bound endpoint."""

    def test_injected_http_client_accepted(self):
        provider = AnthropicsProvider(
            base_url="https://custom.anthropic.com",
            api_key="k",
            http_client=httpx.Client(transport=httpx.MockTransport(Recorder(httpx.Response(200)))),
        )
        client = provider._get_client()
        assert client.max_retries == 0
        assert str(client.base_url).rstrip("/") == "https://custom.anthropic.com"

    def test_rejected_http_client_is_request_build(self):
        provider = AnthropicsProvider(api_key="k", http_client=object())
        with pytest.raises(InferenceError) as exc:
            provider.generate_text(InferenceTextRequest(prompt="x"))
        assert exc.value.stage == "request_build"
        assert exc.value.provider == "anthropics"
