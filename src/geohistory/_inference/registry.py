# Area: Inference
"""
geohistory._inference.registry — Provider factory
==================================================

Builds a ready-to-use adapter for a provider kind from its resolved
configuration and the user's stored credentials. Adapters are rebuilt on
every dispatch, so a freshly saved API key applies to the next call.

Credential precedence for one provider kind:
    stored record (apiKey / baseURL)  >  resolved config  >  built-in URL
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional

from .._config.models import ProviderConfig
from ..errors import InferenceError
from .anthropics import AnthropicsProvider
from .base import InferenceProvider
from .gemini import GeminiProvider
from .openai_compatible import OpenAICompatibleProvider

logger = logging.getLogger("geohistory.inference")

DEFAULT_BASE_URLS: Dict[str, str] = {
    "local_openai_compatible": "http://127.0.0.1:8841",
    "lmstudio": "http://127.0.0.1:1234",
    "anthropics": "https://api.anthropic.com",
}


@dataclass(frozen=True)
class ProviderSettings:
    """Endpoint and credential bound into one adapter instance."""
    kind: str
    base_url: Optional[str] = None
    api_key: Optional[str] = None


ProviderFactory = Callable[[ProviderSettings], InferenceProvider]


def resolve_provider_settings(
    kind: str,
    provider_config: Optional[ProviderConfig],
    stored: Optional[Mapping[str, str]] = None,
) -> ProviderSettings:
    """Apply stored credentials over the resolved config for one provider."""
    stored = stored or {}
    base_url = provider_config.base_url if provider_config else None
    api_key = provider_config.api_key if provider_config else None

    return ProviderSettings(
        kind=kind,
        base_url=stored.get("baseURL") or base_url or DEFAULT_BASE_URLS.get(kind),
        api_key=stored.get("apiKey") or api_key,
    )


def _gemini(settings: ProviderSettings) -> InferenceProvider:
    return GeminiProvider(api_key=settings.api_key)


def _openai_compatible(settings: ProviderSettings) -> InferenceProvider:
    return OpenAICompatibleProvider(
        base_url=settings.base_url,
        api_key=settings.api_key,
        name=settings.kind,
    )


def _anthropics(settings: ProviderSettings) -> InferenceProvider:
    return AnthropicsProvider(base_url=settings.base_url, api_key=settings.api_key)


DEFAULT_FACTORIES: Dict[str, ProviderFactory] = {
    "gemini": _gemini,
    "local_openai_compatible": _openai_compatible,
    "lmstudio": _openai_compatible,
    "anthropics": _anthropics,
}


class ProviderRegistry:
    """Maps provider kinds to adapter factories."""

    def __init__(self, factories: Optional[Mapping[str, ProviderFactory]] = None):
        self._factories: Dict[str, ProviderFactory] = dict(DEFAULT_FACTORIES)
        if factories:
            self._factories.update(factories)

    def register(self, kind: str, factory: ProviderFactory) -> None:
        self._factories[kind] = factory

    def kinds(self):
        return list(self._factories)

    def create(
        self,
        kind: str,
        provider_config: Optional[ProviderConfig],
        stored: Optional[Mapping[str, str]] = None,
    ) -> InferenceProvider:
        """
        Build an adapter for a provider kind.

        Raises:
            InferenceError: stage "request_build" if no factory handles kind
        """
        factory = self._factories.get(kind)
        if factory is None:
            raise InferenceError(f"No provider registered for '{kind}'", "request_build", provider=kind)

        settings = resolve_provider_settings(kind, provider_config, stored)
        logger.debug(f"Creating {kind} provider base_url={settings.base_url}")
        return factory(settings)


def create_provider(
    kind: str,
    provider_config: Optional[ProviderConfig],
    stored: Optional[Mapping[str, str]] = None,
) -> InferenceProvider:
    """Build an adapter with the default factories."""
    return ProviderRegistry().create(kind, provider_config, stored)
