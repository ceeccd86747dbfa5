# Area: Inference Tests
"""Tests for routed dispatch through InferenceService."""

import json
from unittest.mock import MagicMock

import httpx
import pytest

from geohistory._config.secrets import EnvSecrets, no_secrets
from geohistory._config.store import MemoryStore
from geohistory._inference.openai_compatible import OpenAICompatibleProvider
from geohistory._inference.registry import ProviderRegistry
from geohistory.errors import GeoHistoryError, InferenceError
from geohistory.inference import InferenceService
from geohistory.types import InferenceJsonRequest, InferenceTextRequest

ROUTED_CONFIG = {
    "inference": {
        "routing": {
            "light": {"provider": "gemini", "model": "gemini-2.5-flash"},
            "normal": {"provider": "anthropics", "model": "claude-3-5-sonnet-20241022"},
        },
    },
}


class FakeProvider:
    """Records every request it receives."""

    def __init__(self, settings, text="ok", json_result=None, error=None):
        self.settings = settings
        self.text = text
        self.json_result = json_result if json_result is not None else {"ok": True}
        self.error = error
        self.requests = []

    def generate_text(self, request):
        self.requests.append(request)
        if self.error:
            raise self.error
        return self.text

    def generate_json(self, request):
        self.requests.append(request)
        if self.error:
            raise self.error
        return self.json_result


def recording_registry(**kwargs):
    created = []

    def factory(settings):
        provider = FakeProvider(settings, **kwargs)
        created.append(provider)
        return provider

    registry = ProviderRegistry({kind: factory for kind in ProviderRegistry().kinds()})
    return registry, created


class TestRouting:
    """Power level selects the provider and model."""

    def test_light_routes_to_light_provider(self):
        registry, created = recording_registry()
        service = InferenceService(ROUTED_CONFIG, no_secrets, registry=registry)
        service.generate_text(InferenceTextRequest(prompt="x", power="light"))
        assert created[0].settings.kind == "gemini"
        assert created[0].requests[0].model == "gemini-2.5-flash"

    def test_power_defaults_to_normal(self):
        registry, created = recording_registry()
        service = InferenceService(ROUTED_CONFIG, no_secrets, registry=registry)
        service.generate_json(InferenceJsonRequest(prompt="x"))
        assert created[0].settings.kind == "anthropics"
        assert created[0].requests[0].power == "normal"
        assert created[0].requests[0].model == "claude-3-5-sonnet-20241022"

    def test_unknown_power_treated_as_normal(self):
        registry, created = recording_registry()
        service = InferenceService(ROUTED_CONFIG, no_secrets, registry=registry)
        service.generate_text(InferenceTextRequest(prompt="x", power="turbo"))
        assert created[0].settings.kind == "anthropics"

    def test_explicit_model_wins(self):
        registry, created = recording_registry()
        service = InferenceService(ROUTED_CONFIG, no_secrets, registry=registry)
        service.generate_text(InferenceTextRequest(prompt="x", power="light", model="gemini-2.5-pro"))
        assert created[0].requests[0].model == "gemini-2.5-pro"

    def test_routing_override_applies(self):
        registry, created = recording_registry()
        service = InferenceService(ROUTED_CONFIG, no_secrets, registry=registry)
        service.save_routing_override({"light": {"provider": "lmstudio", "model": "llama-3.2-1b"}})
        service.generate_text(InferenceTextRequest(prompt="x", power="light"))
        assert created[0].settings.kind == "lmstudio"
        assert created[0].requests[0].model == "llama-3.2-1b"

        service.clear_routing_override()
        service.generate_text(InferenceTextRequest(prompt="x", power="light"))
        assert created[1].settings.kind == "gemini"

    def test_results_passed_through(self):
        registry, _ = recording_registry(text="Danube", json_result={"correct": True})
        service = InferenceService(ROUTED_CONFIG, no_secrets, registry=registry)
        assert service.generate_text(InferenceTextRequest(prompt="x")) == "Danube"
        assert service.generate_json(InferenceJsonRequest(prompt="x")) == {"correct": True}


class TestErrorsPassThrough:
    def test_inference_error_unchanged(self):
        error = InferenceError("boom", "provider_call", provider="anthropics", status_code=500)
        registry, _ = recording_registry(error=error)
        service = InferenceService(ROUTED_CONFIG, no_secrets, registry=registry)
        with pytest.raises(InferenceError) as exc:
            service.generate_text(InferenceTextRequest(prompt="x"))
        assert exc.value is error


class TestCredentials:
    """Adapters are rebuilt per call from current state."""

    def test_saved_key_applies_to_next_call(self):
        registry, created = recording_registry()
        service = InferenceService(ROUTED_CONFIG, no_secrets, registry=registry)
        service.generate_text(InferenceTextRequest(prompt="x"))
        assert created[0].settings.api_key is None

        service.save_provider_credentials("anthropics", api_key="test-key-123")
        service.generate_text(InferenceTextRequest(prompt="x"))
        assert created[1].settings.api_key == "test-key-123"
        assert created[1].settings.base_url == "https://api.anthropic.com"

        service.clear_provider_credentials()
        service.generate_text(InferenceTextRequest(prompt="x"))
        assert created[2].settings.api_key is None

    def test_secret_key_used_when_nothing_stored(self):
        registry, created = recording_registry()
        secrets = EnvSecrets(values={"ANTHROPIC_API_KEY": "from-env"}, environ={})
        service = InferenceService(ROUTED_CONFIG, secrets, registry=registry)
        service.generate_text(InferenceTextRequest(prompt="x"))
        assert created[0].settings.api_key == "from-env"

    def test_unknown_provider_rejected(self):
        service = InferenceService(store=MemoryStore())
        with pytest.raises(GeoHistoryError):
            service.save_provider_credentials("openrouter", api_key="k")


class TestFromFiles:
    """File-backed services re-read their inputs on each call."""

    def test_config_edit_applies_without_restart(self, tmp_path):
        config_path = tmp_path / "app.config.json"
        config_path.write_text(json.dumps(ROUTED_CONFIG), encoding="utf-8")
        registry, created = recording_registry()
        service = InferenceService.from_files(
            str(config_path), str(tmp_path / ".env"), str(tmp_path / "state"), registry=registry
        )
        service.generate_text(InferenceTextRequest(prompt="x", power="light"))
        assert created[0].settings.kind == "gemini"

        edited = {"inference": {"routing": {"light": {"provider": "lmstudio", "model": ""}}}}
        config_path.write_text(json.dumps(edited), encoding="utf-8")
        service.generate_text(InferenceTextRequest(prompt="x", power="light"))
        assert created[1].settings.kind == "lmstudio"
        assert created[1].requests[0].model == "qwen/qwen3-vl-8b"

    def test_env_file_secrets(self, tmp_path):
        (tmp_path / ".env").write_text("GEMINI_API_KEY=dotenv-key\n", encoding="utf-8")
        registry, created = recording_registry()
        service = InferenceService.from_files(
            str(tmp_path / "missing.json"), str(tmp_path / ".env"), str(tmp_path / "state"), registry=registry
        )
        assert service.app_config().inference.providers["gemini"].api_key == "dotenv-key"


class TestEndToEnd:
    """A light request reaches the local server over HTTP."""

    def test_local_server_light_request(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"choices": [{"message": {"content": " Lake Victoria "}}]})

        client = httpx.Client(transport=httpx.MockTransport(handler))
        registry = ProviderRegistry({
            "local_openai_compatible": lambda s: OpenAICompatibleProvider(
                base_url=s.base_url, api_key=s.api_key, name=s.kind, client=client
            ),
        })
        static = {"inference": {"providers": {"local_openai_compatible": {"baseURL": "http://127.0.0.1:8841"}}}}
        service = InferenceService(static, no_secrets, registry=registry)

        result = service.generate_text(InferenceTextRequest(prompt="Largest lake in Africa?", power="light"))

        assert result == "Lake Victoria"
        assert len(requests) == 1
        assert requests[0].method == "POST"
        assert str(requests[0].url) == "http://127.0.0.1:8841/v1/chat/completions"
        assert json.loads(requests[0].content)["model"] == "claude-haiku-4-5-20251001"


class TestModelListing:
    def test_list_models_uses_current_config(self):
        service = InferenceService({}, no_secrets)
        fetch = MagicMock(return_value=["remote"])
        assert service.list_models("lmstudio", fetch_openai_compatible_models=fetch) == ["remote", "qwen/qwen3-vl-8b"]
        fetch.assert_called_once_with("http://127.0.0.1:1234")
