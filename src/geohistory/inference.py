"""
geohistory.inference — Routed text and JSON generation
=======================================================

InferenceService resolves each request's power level to a provider and
model, builds the adapter and forwards the call. Configuration is merged
again on every call, so edits to the static file, the .env secrets or
the persisted user state apply without a restart.

Usage:
    from geohistory import InferenceService, InferenceTextRequest

    service = InferenceService(static_config={"inference": {...}})
    text = service.generate_text(InferenceTextRequest(prompt="Hi", power="light"))
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ._config.discovery import list_level_models, list_provider_models
from ._config.models import AppConfig, RouteConfig, RoutingTable
from ._config.resolver import (
    DEFAULT_CONFIG_PATH,
    get_effective_inference_routing,
    load_static_config,
    resolve_app_config,
)
from ._config.secrets import EnvSecrets, SecretLookup
from ._config.store import (
    FileStore,
    KeyValueStore,
    MemoryStore,
    clear_inference_override,
    clear_provider_configs,
    get_inference_override,
    get_provider_config,
    save_inference_override,
    save_provider_config,
)
from ._inference.base import InferenceProvider
from ._inference.registry import ProviderRegistry
from .errors import GeoHistoryError
from .types import (
    DEFAULT_POWER,
    InferenceJsonRequest,
    InferenceTextRequest,
    is_power_level,
    is_provider_kind,
)

logger = logging.getLogger("geohistory.inference")


class InferenceService:
    """
    Dispatches generation requests to the routed provider.

    Args:
        static_config: Parsed static config file content
        secrets: Secret lookup for provider API keys (env-var name -> value)
        store: Persisted user state (routing override, stored credentials)
        registry: Provider factories; defaults to the built-in adapters
    """

    def __init__(
        self,
        static_config: Optional[Mapping[str, Any]] = None,
        secrets: Optional[SecretLookup] = None,
        store: Optional[KeyValueStore] = None,
        registry: Optional[ProviderRegistry] = None,
    ):
        self.static_config = dict(static_config or {})
        self.secrets = secrets
        self.store = store if store is not None else MemoryStore()
        self.registry = registry or ProviderRegistry()
        self._config_path: Optional[str] = None
        self._env_file: Optional[str] = None

    @classmethod
    def from_files(
        cls,
        config_path: str = DEFAULT_CONFIG_PATH,
        env_file: str = ".env",
        state_dir: Optional[str] = None,
        registry: Optional[ProviderRegistry] = None,
    ) -> "InferenceService":
        """
        Build a service backed by files that are re-read on every call.

        Args:
            config_path: Static JSON config file
            env_file: .env file checked before the process environment
            state_dir: Directory for persisted user state (default ~/.geohistory)
        """
        service = cls(store=FileStore(state_dir), registry=registry)
        service._config_path = config_path
        service._env_file = env_file
        return service

    # ─────────────────────────────────────────────
    # CONFIGURATION VIEW
    # ─────────────────────────────────────────────

    def app_config(self) -> AppConfig:
        static_config = self.static_config
        if self._config_path:
            static_config = load_static_config(self._config_path)
        secrets = self.secrets
        if secrets is None and self._env_file:
            secrets = EnvSecrets.from_env_file(self._env_file)
        return resolve_app_config(static_config, secrets)

    def routing(self, config: Optional[AppConfig] = None) -> RoutingTable:
        """Effective routing table: resolved config plus the user override."""
        config = config or self.app_config()
        return get_effective_inference_routing(config, get_inference_override(self.store))

    def list_models(self, provider: str, **overrides) -> List[str]:
        return list_provider_models(provider, self.app_config(), **overrides)

    def list_level_models(self, **overrides) -> Dict[str, List[str]]:
        config = self.app_config()
        return list_level_models(config, self.routing(config), **overrides)

    # ─────────────────────────────────────────────
    # USER STATE
    # ─────────────────────────────────────────────

    def save_routing_override(self, routing: Mapping[str, Mapping[str, str]]) -> None:
        """Persist a routing override; it is validated on every read."""
        save_inference_override(self.store, {level: dict(entry) for level, entry in routing.items()})

    def clear_routing_override(self) -> None:
        clear_inference_override(self.store)

    def save_provider_credentials(
        self,
        provider: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> None:
        """Store credentials for one provider, replacing any previous record."""
        if not is_provider_kind(provider):
            raise GeoHistoryError(f"Unknown provider: {provider}")
        record: Dict[str, str] = {}
        if api_key:
            record["apiKey"] = api_key
        if base_url:
            record["baseURL"] = base_url
        save_provider_config(self.store, provider, record)

    def clear_provider_credentials(self) -> None:
        clear_provider_configs(self.store)

    # ─────────────────────────────────────────────
    # DISPATCH
    # ─────────────────────────────────────────────

    def resolve(self, request: InferenceTextRequest) -> Tuple[InferenceProvider, InferenceTextRequest]:
        """Pick the provider for a request and fill in its power and model."""
        power = request.power if is_power_level(request.power) else DEFAULT_POWER
        config = self.app_config()
        route: RouteConfig = self.routing(config).for_level(power)

        provider = self.registry.create(
            route.provider,
            config.inference.providers.get(route.provider),
            get_provider_config(self.store, route.provider),
        )
        # Explicit request model wins over the routed one
        model = request.model or route.model
        logger.debug(
            f"Routing {power} request to {route.provider} model={model}",
            extra={"provider": route.provider, "power": power, "model": model},
        )
        return provider, replace(request, power=power, model=model)

    def generate_text(self, request: InferenceTextRequest) -> str:
        provider, routed = self.resolve(request)
        return provider.generate_text(routed)

    def generate_json(self, request: InferenceJsonRequest) -> Any:
        provider, routed = self.resolve(request)
        return provider.generate_json(routed)
