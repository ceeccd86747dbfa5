# Area: Inference
"""
Provider adapters and the factory that binds them to configuration.
"""

from .base import InferenceProvider, GENERIC_JSON_SCHEMA
from .gemini import GeminiProvider
from .openai_compatible import OpenAICompatibleProvider, extract_message_text
from .anthropics import AnthropicsProvider
from .registry import (
    DEFAULT_BASE_URLS,
    ProviderRegistry,
    ProviderSettings,
    create_provider,
    resolve_provider_settings,
)

__all__ = [
    "InferenceProvider",
    "GENERIC_JSON_SCHEMA",
    "GeminiProvider",
    "OpenAICompatibleProvider",
    "extract_message_text",
    "AnthropicsProvider",
    "DEFAULT_BASE_URLS",
    "ProviderRegistry",
    "ProviderSettings",
    "create_provider",
    "resolve_provider_settings",
]
