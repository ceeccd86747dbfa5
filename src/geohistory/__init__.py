"""
geohistory — Inference routing for the GeoHistory trivia game
==============================================================

Questions, answer checks and post-game coaching are generated by one of
several interchangeable LLM backends. This package decides, per request,
which backend and model to call and normalizes their responses into two
contracts: generate text, and generate JSON matching a schema.

Quick Start:
    from geohistory import InferenceService, InferenceTextRequest

    service = InferenceService.from_files("app.config.json", ".env")
    text = service.generate_text(InferenceTextRequest(prompt="Hello", power="light"))

Game Operations:
    from geohistory import generate_quiz, check_answer

    quiz = generate_quiz(service, GameCategory.HISTORY, 5, "*", DifficultyLevel.COLLEGE)

Providers
---------
    gemini                    Google generative API (google-genai)
    local_openai_compatible   OpenAI chat completions, http://127.0.0.1:8841
    lmstudio                  OpenAI chat completions, http://127.0.0.1:1234
    anthropics                Anthropic messages API
"""

from .inference import InferenceService
from .errors import (
    GeoHistoryError,
    ConfigError,
    InferenceError,
)
from .operations import (
    generate_quiz,
    check_answer,
    extract_scope_from_content,
    generate_study_advice,
)
from .types import (
    # Requests
    InferenceTextRequest,
    InferenceJsonRequest,
    InferencePower,
    ProviderKind,
    PROVIDER_KINDS,
    POWER_LEVELS,
    # Game data
    GameCategory,
    DifficultyLevel,
    QuizItem,
    QuestionResult,
    StudyAdvice,
    StudyResource,
)
from ._config import (
    AppConfig,
    RoutingTable,
    RouteConfig,
    EnvSecrets,
    FileStore,
    MemoryStore,
    load_static_config,
    resolve_app_config,
    get_effective_inference_routing,
    list_provider_models,
)

__all__ = [
    # Main classes
    "InferenceService",
    # Errors
    "GeoHistoryError",
    "ConfigError",
    "InferenceError",
    # Operations
    "generate_quiz",
    "check_answer",
    "extract_scope_from_content",
    "generate_study_advice",
    # Requests
    "InferenceTextRequest",
    "InferenceJsonRequest",
    "InferencePower",
    "ProviderKind",
    "PROVIDER_KINDS",
    "POWER_LEVELS",
    # Game data
    "GameCategory",
    "DifficultyLevel",
    "QuizItem",
    "QuestionResult",
    "StudyAdvice",
    "StudyResource",
    # Configuration
    "AppConfig",
    "RoutingTable",
    "RouteConfig",
    "EnvSecrets",
    "FileStore",
    "MemoryStore",
    "load_static_config",
    "resolve_app_config",
    "get_effective_inference_routing",
    "list_provider_models",
]
__version__ = "1.0.0"
