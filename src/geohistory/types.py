"""
geohistory.types — Request and game data types
===============================================

Request dataclasses passed to the inference layer, the provider and
power-level identifiers used for routing, and the TypedDict shapes
exchanged with the game screens.

    from geohistory.types import InferenceTextRequest, InferenceJsonRequest

    request = InferenceTextRequest(prompt="Name a river", power="light")
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, TypedDict


# ============================================
# Routing identifiers
# ============================================

InferencePower = Literal["light", "normal"]
ProviderKind = Literal["gemini", "local_openai_compatible", "lmstudio", "anthropics"]
InferenceStage = Literal["request_build", "provider_call", "response_parse", "schema_validation"]

POWER_LEVELS = ("light", "normal")
DEFAULT_POWER: InferencePower = "normal"

# Declaration order matters: the first kind is the routing fallback
PROVIDER_KINDS = ("gemini", "local_openai_compatible", "lmstudio", "anthropics")
LOCAL_PROVIDER: ProviderKind = "local_openai_compatible"

INFERENCE_STAGES = ("request_build", "provider_call", "response_parse", "schema_validation")


def is_provider_kind(value: Any) -> bool:
    """Check if value names a known provider kind."""
    return isinstance(value, str) and value in PROVIDER_KINDS


def is_power_level(value: Any) -> bool:
    """Check if value names a power level."""
    return isinstance(value, str) and value in POWER_LEVELS


# ============================================
# Inference requests
# ============================================

@dataclass
class InferenceTextRequest:
    """A plain-text generation request.

    Fields
    ------
    prompt : str
        User prompt sent to the model.
    system_instruction : str, optional
        System instruction; providers without a system role prepend it.
    power : "light" | "normal", optional
        Cost/quality tier. Defaults to "normal" when routed.
    model : str, optional
        Explicit model. Wins over both the routed and the adapter default.
    temperature : float, optional
    max_output_tokens : int, optional
    """
    prompt: str
    system_instruction: Optional[str] = None
    power: Optional[InferencePower] = None
    model: Optional[str] = None
    temperature: Optional[float] = None
    max_output_tokens: Optional[int] = None


@dataclass
class InferenceJsonRequest(InferenceTextRequest):
    """A structured generation request; schema describes the expected JSON."""
    schema: Optional[Dict[str, Any]] = None


# ============================================
# Game data
# ============================================

class GameCategory(str, Enum):
    HISTORY = "History"
    GEOGRAPHY = "Geography"


class DifficultyLevel(str, Enum):
    HIGH_SCHOOL = "HIGH_SCHOOL"
    COLLEGE = "COLLEGE"
    PROFESSIONAL = "PROFESSIONAL"


class QuizItem(TypedDict, total=False):
    """One generated question.

    Fields
    ------
    id : str
        Assigned locally, e.g. "quiz-1718000000000-0".
    subject : str
        The main answer, e.g. "Napoleon Bonaparte".
    acceptedAnswers : List[str]
        Alternative names or spellings, e.g. ["Napoleon", "Bonaparte"].
    clues : List[str]
        5 to 8 clues ordered from most obscure to most obvious.
    category : str
    difficulty : str
    """
    id: str
    subject: str
    acceptedAnswers: List[str]
    clues: List[str]
    category: str
    difficulty: str


class QuestionResult(TypedDict, total=False):
    """Outcome of one round, reported by the game screen."""
    questionIndex: int
    subject: str
    cluesTotal: int
    cluesUsed: int
    incorrectAttempts: int
    success: bool
    userAnswer: str


class StudyResource(TypedDict):
    title: str
    url: str
    description: str


class StudyAdvice(TypedDict):
    """Post-game coaching payload."""
    overallFeedback: str
    weakAreas: List[str]
    studyResources: List[StudyResource]
