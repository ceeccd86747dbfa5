# Area: Config
"""
geohistory._config.models — Resolved configuration models
==========================================================

Frozen pydantic models for the merged application configuration.
Instances are produced by the resolver and never mutated afterwards;
two resolutions over the same inputs compare equal.
"""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict

from ..types import DifficultyLevel, GameCategory, InferencePower, ProviderKind


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class ProviderModels(_Frozen):
    """Default model per power level."""
    light: str
    normal: str

    def for_level(self, level: InferencePower) -> str:
        return self.light if level == "light" else self.normal


class ProviderConfig(_Frozen):
    """Resolved settings for one provider kind."""
    base_url: Optional[str] = None
    api_key_env: Optional[str] = None
    api_key: Optional[str] = None
    models: ProviderModels


class RouteConfig(_Frozen):
    """One routing entry: which provider and model serve a power level."""
    provider: ProviderKind
    model: str


class RoutingTable(_Frozen):
    light: RouteConfig
    normal: RouteConfig

    def for_level(self, level: InferencePower) -> RouteConfig:
        return self.light if level == "light" else self.normal

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        return self.model_dump()


class InferenceConfig(_Frozen):
    providers: Dict[str, ProviderConfig]
    routing: RoutingTable


class GameplayDefaults(_Frozen):
    category: GameCategory = GameCategory.HISTORY
    difficulty: DifficultyLevel = DifficultyLevel.HIGH_SCHOOL
    question_count: int = 10
    scope: str = "*"


class AppConfig(_Frozen):
    """Merged view of compiled defaults, static file and secrets."""
    version: int = 1
    inference: InferenceConfig
    gameplay_defaults: GameplayDefaults = GameplayDefaults()
