# Area: Config Tests
"""Tests for layered configuration resolution and routing overrides."""

import json

import pytest

from geohistory._config.resolver import (
    DEFAULT_PROVIDERS,
    get_effective_inference_routing,
    get_inference_level_options,
    load_static_config,
    resolve_app_config,
    sanitize_route,
)
from geohistory._config.secrets import EnvSecrets, no_secrets
from geohistory.errors import ConfigError
from geohistory.types import DifficultyLevel, GameCategory


def secrets_from(values):
    return EnvSecrets(values=values, environ={})


class TestProviderDefaults:
    """Compiled defaults apply when the static config is empty."""

    def test_all_provider_kinds_present(self):
        config = resolve_app_config({}, no_secrets)
        assert set(config.inference.providers) == {
            "gemini", "local_openai_compatible", "lmstudio", "anthropics",
        }

    def test_default_base_urls(self):
        providers = resolve_app_config({}, no_secrets).inference.providers
        assert providers["local_openai_compatible"].base_url == "http://127.0.0.1:8841"
        assert providers["lmstudio"].base_url == "http://127.0.0.1:1234"
        assert providers["anthropics"].base_url == "https://api.anthropic.com"
        assert providers["gemini"].base_url is None

    def test_default_routing_prefers_local_provider(self):
        routing = resolve_app_config({}, no_secrets).inference.routing
        assert routing.light.provider == "local_openai_compatible"
        assert routing.light.model == "claude-haiku-4-5-20251001"
        assert routing.normal.provider == "local_openai_compatible"
        assert routing.normal.model == "claude-sonnet-4-5-20250929"


class TestStaticOverlay:
    """Static config fields overlay the defaults."""

    def test_models_are_deep_merged(self):
        static = {
            "inference": {
                "providers": {
                    "lmstudio": {"models": {"light": "llama-3.2-1b"}},
                },
            },
        }
        models = resolve_app_config(static, no_secrets).inference.providers["lmstudio"].models
        assert models.light == "llama-3.2-1b"
        assert models.normal == DEFAULT_PROVIDERS["lmstudio"]["models"]["normal"]

    def test_base_url_overridden_other_fields_kept(self):
        static = {
            "inference": {
                "providers": {
                    "local_openai_compatible": {"baseURL": "http://10.0.0.5:9000"},
                },
            },
        }
        provider = resolve_app_config(static, no_secrets).inference.providers["local_openai_compatible"]
        assert provider.base_url == "http://10.0.0.5:9000"
        assert provider.api_key_env == "LOCAL_OPENAI_API_KEY"

    def test_unknown_provider_ignored(self):
        static = {"inference": {"providers": {"openrouter": {"baseURL": "https://x"}}}}
        providers = resolve_app_config(static, no_secrets).inference.providers
        assert "openrouter" not in providers


class TestSecretResolution:
    """API keys are looked up by each provider's apiKeyEnv."""

    def test_api_key_from_secret_mapping(self):
        config = resolve_app_config({}, secrets_from({"GEMINI_API_KEY": "g-key"}))
        assert config.inference.providers["gemini"].api_key == "g-key"

    def test_mapping_checked_before_environ(self):
        secrets = EnvSecrets(
            values={"ANTHROPIC_API_KEY": "from-dotenv"},
            environ={"ANTHROPIC_API_KEY": "from-environ"},
        )
        config = resolve_app_config({}, secrets)
        assert config.inference.providers["anthropics"].api_key == "from-dotenv"

    def test_environ_used_when_mapping_lacks_key(self):
        secrets = EnvSecrets(values={}, environ={"LMSTUDIO_API_KEY": "lm"})
        config = resolve_app_config({}, secrets)
        assert config.inference.providers["lmstudio"].api_key == "lm"

    def test_missing_secret_is_none(self):
        config = resolve_app_config({}, no_secrets)
        assert config.inference.providers["gemini"].api_key is None


class TestStaticRouting:
    """The static routing section is validated against providers."""

    def test_valid_route_applied(self):
        static = {"inference": {"routing": {"normal": {"provider": "gemini", "model": "gemini-2.5-pro"}}}}
        routing = resolve_app_config(static, no_secrets).inference.routing
        assert routing.normal.provider == "gemini"
        assert routing.normal.model == "gemini-2.5-pro"
        assert routing.light.provider == "local_openai_compatible"

    def test_blank_model_uses_provider_default(self):
        static = {"inference": {"routing": {"light": {"provider": "anthropics", "model": "  "}}}}
        routing = resolve_app_config(static, no_secrets).inference.routing
        assert routing.light.provider == "anthropics"
        assert routing.light.model == "claude-3-haiku-20240307"

    def test_unknown_provider_falls_back(self):
        static = {"inference": {"routing": {"light": {"provider": "openrouter", "model": ""}}}}
        routing = resolve_app_config(static, no_secrets).inference.routing
        assert routing.light.provider == "local_openai_compatible"
        assert routing.light.model == "claude-haiku-4-5-20251001"


class TestSanitizeRoute:
    """Provider and model are validated independently."""

    def setup_method(self):
        self.config = resolve_app_config({}, no_secrets)
        self.providers = self.config.inference.providers
        self.fallback = self.config.inference.routing.light

    def test_invalid_provider_keeps_explicit_model(self):
        route = sanitize_route(
            {"provider": "bogus", "model": "custom-model"}, self.providers, self.fallback, "light"
        )
        assert route.provider == self.fallback.provider
        assert route.model == "custom-model"

    def test_non_mapping_route_returns_fallback(self):
        assert sanitize_route("garbage", self.providers, self.fallback, "light") == self.fallback
        assert sanitize_route(None, self.providers, self.fallback, "light") == self.fallback


class TestGameplayDefaults:
    """Invalid gameplay values are replaced, never fatal."""

    def test_defaults(self):
        defaults = resolve_app_config({}, no_secrets).gameplay_defaults
        assert defaults.category == GameCategory.HISTORY
        assert defaults.difficulty == DifficultyLevel.HIGH_SCHOOL
        assert defaults.question_count == 10
        assert defaults.scope == "*"

    @pytest.mark.parametrize("raw, expected", [(0, 1), (-5, 1), (50, 20), (7, 7), ("12", 12), ("abc", 10)])
    def test_question_count_clamped(self, raw, expected):
        static = {"gameplayDefaults": {"questionCount": raw}}
        assert resolve_app_config(static, no_secrets).gameplay_defaults.question_count == expected

    def test_unknown_category_and_difficulty_coerced(self):
        static = {"gameplayDefaults": {"category": "Science", "difficulty": "PHD"}}
        defaults = resolve_app_config(static, no_secrets).gameplay_defaults
        assert defaults.category == GameCategory.HISTORY
        assert defaults.difficulty == DifficultyLevel.HIGH_SCHOOL

    def test_valid_values_kept(self):
        static = {"gameplayDefaults": {"category": "Geography", "difficulty": "COLLEGE", "scope": "Africa"}}
        defaults = resolve_app_config(static, no_secrets).gameplay_defaults
        assert defaults.category == GameCategory.GEOGRAPHY
        assert defaults.difficulty == DifficultyLevel.COLLEGE
        assert defaults.scope == "Africa"


class TestIdempotence:
    """Resolving twice over the same inputs gives equal results."""

    def test_structurally_equal(self):
        static = {
            "version": 2,
            "inference": {
                "providers": {"lmstudio": {"baseURL": "http://localhost:1234"}},
                "routing": {"light": {"provider": "lmstudio", "model": ""}},
            },
        }
        secrets = secrets_from({"GEMINI_API_KEY": "k"})
        first = resolve_app_config(static, secrets)
        second = resolve_app_config(static, secrets)
        assert first == second
        assert first.model_dump() == second.model_dump()
        assert first.version == 2


class TestEffectiveRouting:
    """User override overlays the resolved routing per level."""

    def setup_method(self):
        self.config = resolve_app_config({}, no_secrets)

    def test_no_override_returns_config_routing(self):
        assert get_effective_inference_routing(self.config, None) == self.config.inference.routing

    def test_unconfigured_provider_falls_back_valid_level_kept(self):
        override = {
            "light": {"provider": "openrouter", "model": ""},
            "normal": {"provider": "anthropics", "model": "claude-3-5-sonnet-20241022"},
        }
        routing = get_effective_inference_routing(self.config, override)
        assert routing.light == self.config.inference.routing.light
        assert routing.normal.provider == "anthropics"
        assert routing.normal.model == "claude-3-5-sonnet-20241022"

    def test_missing_level_keeps_configured_entry(self):
        static = {"inference": {"routing": {"light": {"provider": "gemini", "model": "gemini-2.5-flash"}}}}
        config = resolve_app_config(static, no_secrets)
        routing = get_effective_inference_routing(config, {"normal": {"provider": "lmstudio", "model": ""}})
        assert routing.light.model == "gemini-2.5-flash"
        assert routing.normal.provider == "lmstudio"


class TestLevelOptions:
    def test_lists_every_provider_with_level_default(self):
        options = dict(get_inference_level_options(resolve_app_config({}, no_secrets), "normal"))
        assert options["anthropics"] == "claude-3-5-sonnet-20241022"
        assert len(options) == 4


class TestLoadStaticConfig:
    """Static JSON file loading."""

    def test_missing_file_is_empty(self, tmp_path):
        assert load_static_config(str(tmp_path / "missing.json")) == {}

    def test_reads_json(self, tmp_path):
        path = tmp_path / "app.config.json"
        path.write_text(json.dumps({"version": 3}), encoding="utf-8")
        assert load_static_config(str(path)) == {"version": 3}

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "app.config.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_static_config(str(path))

    def test_non_object_raises(self, tmp_path):
        path = tmp_path / "app.config.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_static_config(str(path))
