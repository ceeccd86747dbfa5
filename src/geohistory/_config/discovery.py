# Area: Config
"""
geohistory._config.discovery — Provider model discovery
========================================================

Lists the models a provider offers so the configuration surface can show
them. Remote results are merged with the provider's configured defaults;
discovery never raises; a configured provider never yields an empty list.

The network calls are parameters so tests can simulate offline or
failing providers:

    list_provider_models("gemini", config,
                         list_gemini_models=lambda key: ["models/gemini-2.5-pro"])
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, Iterable, List, Optional

import httpx

from ..types import POWER_LEVELS
from .models import AppConfig, RoutingTable

logger = logging.getLogger("geohistory.config")

GeminiLister = Callable[[Optional[str]], List[str]]
OpenAIModelsFetcher = Callable[[str], List[str]]


def unique_models(models: Iterable[str]) -> List[str]:
    """De-duplicate preserving first occurrence, dropping empty names."""
    seen: Dict[str, None] = {}
    for model in models:
        if model and model not in seen:
            seen[model] = None
    return list(seen)


def normalize_gemini_model_name(name: str) -> str:
    """Strip the 'models/' path prefix the Gemini list API returns."""
    name = name.strip()
    if name.startswith("models/"):
        name = name[len("models/"):]
    return name.strip()


def list_gemini_models(api_key: Optional[str]) -> List[str]:
    """List model names from the Gemini API."""
    if not api_key:
        return []

    from google import genai

    client = genai.Client(api_key=api_key)
    return [
        normalize_gemini_model_name(model.name or "")
        for model in client.models.list()
        if model.name
    ]


def fetch_openai_compatible_models(base_url: str) -> List[str]:
    """GET {base_url}/v1/models; a non-success status yields []."""
    response = httpx.get(f"{base_url.rstrip('/')}/v1/models", timeout=None)
    if not response.is_success:
        logger.debug(f"Model listing at {base_url} returned {response.status_code}")
        return []

    payload = response.json()
    data = payload.get("data") if isinstance(payload, dict) else None
    ids = []
    for item in data or []:
        model_id = item.get("id") if isinstance(item, dict) else None
        if isinstance(model_id, str) and model_id.strip():
            ids.append(model_id.strip())
    return ids


def list_provider_models(
    provider: str,
    config: AppConfig,
    *,
    list_gemini_models: Optional[GeminiLister] = None,
    fetch_openai_compatible_models: Optional[OpenAIModelsFetcher] = None,
) -> List[str]:
    """
    Discover the models available for a provider.

    Args:
        provider: Provider kind
        config: Resolved application config
        list_gemini_models: Override for the Gemini list call
        fetch_openai_compatible_models: Override for the /v1/models call

    Returns:
        Remote models first, then configured defaults, without duplicates
    """
    provider_config = config.inference.providers.get(provider)
    if provider_config is None:
        logger.warning(f"No configuration for provider '{provider}', no models to list")
        return []
    fallback = unique_models([provider_config.models.light, provider_config.models.normal])

    if provider == "gemini":
        if not provider_config.api_key:
            return fallback
        lister = list_gemini_models or _default_gemini_lister
        try:
            remote = unique_models(
                normalize_gemini_model_name(name) for name in lister(provider_config.api_key)
            )
        except Exception as e:
            logger.warning(f"Gemini model listing failed, using configured models: {e}")
            return fallback
        merged = unique_models([*remote, *fallback])
        return merged or fallback

    if not provider_config.base_url:
        return fallback

    fetcher = fetch_openai_compatible_models or _default_openai_fetcher
    try:
        remote = fetcher(provider_config.base_url)
    except Exception as e:
        logger.warning(f"Model listing for {provider} failed, using configured models: {e}")
        return fallback
    merged = unique_models([*remote, *fallback])
    return merged or fallback


def list_level_models(
    config: AppConfig,
    routing: RoutingTable,
    **overrides,
) -> Dict[str, List[str]]:
    """Discover models for each power level's routed provider concurrently."""
    with ThreadPoolExecutor(max_workers=len(POWER_LEVELS)) as pool:
        futures = {
            level: pool.submit(
                list_provider_models,
                routing.for_level(level).provider,
                config,
                **overrides,
            )
            for level in POWER_LEVELS
        }
        return {level: future.result() for level, future in futures.items()}


# Module-level names are shadowed by the keyword parameters above
_default_gemini_lister = list_gemini_models
_default_openai_fetcher = fetch_openai_compatible_models
