# Area: Config
"""
Configuration layer: layered resolution, persisted user state and
provider model discovery.
"""

from .models import (
    AppConfig,
    GameplayDefaults,
    InferenceConfig,
    ProviderConfig,
    ProviderModels,
    RouteConfig,
    RoutingTable,
)
from .resolver import (
    DEFAULT_PROVIDERS,
    load_static_config,
    resolve_app_config,
    get_effective_inference_routing,
    get_inference_level_options,
    sanitize_route,
)
from .secrets import EnvSecrets, SecretLookup, no_secrets
from .store import (
    FileStore,
    KeyValueStore,
    MemoryStore,
    get_inference_override,
    save_inference_override,
    clear_inference_override,
    get_all_provider_configs,
    get_provider_config,
    save_provider_config,
    clear_provider_configs,
)
from .discovery import list_provider_models, list_level_models

__all__ = [
    "AppConfig",
    "GameplayDefaults",
    "InferenceConfig",
    "ProviderConfig",
    "ProviderModels",
    "RouteConfig",
    "RoutingTable",
    "DEFAULT_PROVIDERS",
    "load_static_config",
    "resolve_app_config",
    "get_effective_inference_routing",
    "get_inference_level_options",
    "sanitize_route",
    "EnvSecrets",
    "SecretLookup",
    "no_secrets",
    "FileStore",
    "KeyValueStore",
    "MemoryStore",
    "get_inference_override",
    "save_inference_override",
    "clear_inference_override",
    "get_all_provider_configs",
    "get_provider_config",
    "save_provider_config",
    "clear_provider_configs",
    "list_provider_models",
    "list_level_models",
]
