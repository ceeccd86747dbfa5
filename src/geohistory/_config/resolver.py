# Area: Config
"""
geohistory._config.resolver — Layered configuration resolution
===============================================================

Merges compiled-in provider defaults, the static JSON config file and the
secret surface into one frozen AppConfig, and overlays the user's
persisted routing override on top of the resulting routing table.

Layers, lowest priority first:
    1. DEFAULT_PROVIDERS (this module)
    2. static config  inference.providers.<kind>  (models deep-merged)
    3. secret lookup  apiKeyEnv -> apiKey

Everything here is a pure function of its inputs: nothing is cached and
invalid input is never fatal, it is replaced by a safe default.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..errors import ConfigError
from ..types import (
    LOCAL_PROVIDER,
    POWER_LEVELS,
    PROVIDER_KINDS,
    DifficultyLevel,
    GameCategory,
    InferencePower,
    is_provider_kind,
)
from .models import (
    AppConfig,
    GameplayDefaults,
    InferenceConfig,
    ProviderConfig,
    ProviderModels,
    RouteConfig,
    RoutingTable,
)
from .secrets import EnvSecrets, SecretLookup

logger = logging.getLogger("geohistory.config")

DEFAULT_CONFIG_PATH = "app.config.json"

MIN_QUESTION_COUNT = 1
MAX_QUESTION_COUNT = 20
DEFAULT_QUESTION_COUNT = 10
DEFAULT_SCOPE = "*"

DEFAULT_PROVIDERS: Dict[str, Dict[str, Any]] = {
    "gemini": {
        "apiKeyEnv": "GEMINI_API_KEY",
        "models": {
            "light": "gemini-3-flash-preview",
            "normal": "gemini-3-flash-preview",
        },
    },
    "local_openai_compatible": {
        "baseURL": "http://127.0.0.1:8841",
        "apiKeyEnv": "LOCAL_OPENAI_API_KEY",
        "models": {
            "light": "claude-haiku-4-5-20251001",
            "normal": "claude-sonnet-4-5-20250929",
        },
    },
    "lmstudio": {
        "baseURL": "http://127.0.0.1:1234",
        "apiKeyEnv": "LMSTUDIO_API_KEY",
        "models": {
            "light": "qwen/qwen3-vl-8b",
            "normal": "qwen/qwen3-vl-8b",
        },
    },
    "anthropics": {
        "baseURL": "https://api.anthropic.com",
        "apiKeyEnv": "ANTHROPIC_API_KEY",
        "models": {
            "light": "claude-3-haiku-20240307",
            "normal": "claude-3-5-sonnet-20241022",
        },
    },
}


def load_static_config(path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load the static JSON config file.

    Args:
        path: Path to the config file

    Returns:
        Parsed config dict; {} when the file does not exist

    Raises:
        ConfigError: If the file exists but is not a JSON object
    """
    config_path = Path(path)
    if not config_path.exists():
        logger.debug(f"No static config at {config_path}, using defaults")
        return {}

    try:
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(str(config_path), str(e)) from e

    if not isinstance(data, dict):
        raise ConfigError(str(config_path), "top-level value must be an object")
    return data


def _section(data: Any, key: str) -> Dict[str, Any]:
    """Return data[key] if it is a dict, else {}."""
    if isinstance(data, Mapping):
        value = data.get(key)
        if isinstance(value, Mapping):
            return dict(value)
    return {}


def _merge_provider(defaults: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow-merge provider fields, deep-merging the models object."""
    merged = {**defaults, **overlay}
    models = dict(defaults.get("models", {}))
    for level, model in _section(overlay, "models").items():
        if level in POWER_LEVELS and isinstance(model, str):
            models[level] = model
    merged["models"] = models
    return merged


def _build_providers(
    static_providers: Dict[str, Any],
    secrets: SecretLookup,
) -> Dict[str, ProviderConfig]:
    providers: Dict[str, ProviderConfig] = {}
    for kind in PROVIDER_KINDS:
        merged = _merge_provider(DEFAULT_PROVIDERS[kind], _section(static_providers, kind))

        api_key = merged.get("apiKey")
        api_key_env = merged.get("apiKeyEnv")
        if api_key_env:
            api_key = secrets(api_key_env)

        providers[kind] = ProviderConfig(
            base_url=merged.get("baseURL") or None,
            api_key_env=api_key_env or None,
            api_key=api_key or None,
            models=ProviderModels(**merged["models"]),
        )

    ignored = sorted(set(static_providers) - set(PROVIDER_KINDS))
    if ignored:
        logger.warning(f"Ignoring unknown providers in static config: {ignored}")
    return providers


def default_routing(providers: Mapping[str, ProviderConfig]) -> RoutingTable:
    """Route both levels to the local provider, else the first declared one."""
    if LOCAL_PROVIDER in providers:
        kind = LOCAL_PROVIDER
    else:
        kind = next(iter(providers))
    models = providers[kind].models
    return RoutingTable(
        light=RouteConfig(provider=kind, model=models.light),
        normal=RouteConfig(provider=kind, model=models.normal),
    )


def sanitize_route(
    route: Any,
    providers: Mapping[str, ProviderConfig],
    fallback: RouteConfig,
    level: InferencePower,
) -> RouteConfig:
    """
    Validate one routing entry field by field.

    The provider falls back when it is unknown or unconfigured; a blank
    model is replaced by the provider's default for the level.
    """
    if not isinstance(route, Mapping):
        return fallback

    route_provider = route.get("provider")
    provider = route_provider if is_provider_kind(route_provider) else fallback.provider

    if provider not in providers:
        return fallback

    route_model = route.get("model")
    route_model = route_model.strip() if isinstance(route_model, str) else ""
    model = route_model or providers[provider].models.for_level(level) or fallback.model

    return RouteConfig(provider=provider, model=model)


def _clamp_question_count(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return DEFAULT_QUESTION_COUNT
    try:
        count = int(float(value))
    except (TypeError, ValueError):
        return DEFAULT_QUESTION_COUNT
    return max(MIN_QUESTION_COUNT, min(MAX_QUESTION_COUNT, count))


def _resolve_gameplay_defaults(raw: Dict[str, Any]) -> GameplayDefaults:
    category_values = {c.value for c in GameCategory}
    difficulty_values = {d.value for d in DifficultyLevel}

    raw_category = raw.get("category")
    raw_difficulty = raw.get("difficulty")
    scope = raw.get("scope")

    return GameplayDefaults(
        category=GameCategory(raw_category) if raw_category in category_values else GameCategory.HISTORY,
        difficulty=(
            DifficultyLevel(raw_difficulty)
            if raw_difficulty in difficulty_values
            else DifficultyLevel.HIGH_SCHOOL
        ),
        question_count=_clamp_question_count(raw.get("questionCount")),
        scope=scope if isinstance(scope, str) else DEFAULT_SCOPE,
    )


def _resolve_version(value: Any) -> int:
    try:
        return int(value) if value is not None else 1
    except (TypeError, ValueError):
        return 1


def resolve_app_config(
    static_config: Optional[Mapping[str, Any]] = None,
    secrets: Optional[SecretLookup] = None,
) -> AppConfig:
    """
    Merge all configuration layers into one AppConfig.

    Args:
        static_config: Parsed static config file content (may be empty)
        secrets: Callable mapping an env-var name to its value;
            defaults to the process environment

    Returns:
        Frozen AppConfig
    """
    parsed = dict(static_config or {})
    lookup = secrets if secrets is not None else EnvSecrets()
    inference = _section(parsed, "inference")

    providers = _build_providers(_section(inference, "providers"), lookup)

    fallback = default_routing(providers)
    static_routing = _section(inference, "routing")
    routing = RoutingTable(
        light=sanitize_route(static_routing.get("light"), providers, fallback.light, "light"),
        normal=sanitize_route(static_routing.get("normal"), providers, fallback.normal, "normal"),
    )

    return AppConfig(
        version=_resolve_version(parsed.get("version")),
        inference=InferenceConfig(providers=providers, routing=routing),
        gameplay_defaults=_resolve_gameplay_defaults(_section(parsed, "gameplayDefaults")),
    )


def get_effective_inference_routing(
    config: AppConfig,
    override: Optional[Mapping[str, Any]] = None,
) -> RoutingTable:
    """
    Overlay a persisted routing override on the config's routing table.

    Each level is validated independently; a level missing from the
    override keeps the configured entry.
    """
    routing = config.inference.routing
    if not override:
        return routing

    providers = config.inference.providers
    return RoutingTable(
        light=sanitize_route(override.get("light"), providers, routing.light, "light"),
        normal=sanitize_route(override.get("normal"), providers, routing.normal, "normal"),
    )


def get_inference_level_options(
    config: AppConfig,
    level: InferencePower,
) -> List[Tuple[str, str]]:
    """List (provider, default model) pairs selectable for a power level."""
    return [
        (kind, provider.models.for_level(level))
        for kind, provider in config.inference.providers.items()
    ]
