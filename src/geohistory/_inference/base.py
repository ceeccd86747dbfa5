# Area: Inference
"""
geohistory._inference.base — Provider contract and shared helpers
==================================================================

Every provider adapter implements two operations:

    generate_text(request) -> str     trimmed, non-empty
    generate_json(request) -> Any     parsed JSON value

Adapters make a single attempt per call and raise InferenceError for
every failure.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional, Protocol

from ..errors import InferenceError
from ..types import DEFAULT_POWER, InferenceJsonRequest, InferenceTextRequest

GENERIC_JSON_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": True,
}


class InferenceProvider(Protocol):
    """Two-operation generation contract shared by all adapters."""

    def generate_text(self, request: InferenceTextRequest) -> str:
        ...

    def generate_json(self, request: InferenceJsonRequest) -> Any:
        ...


def resolve_model(model_by_power: Dict[str, str], request: InferenceTextRequest) -> str:
    """Explicit request model, else the adapter's own default for the power level."""
    if request.model:
        return request.model
    return model_by_power[request.power or DEFAULT_POWER]


def require_text(text: Optional[str], provider: str) -> str:
    """Trim normalized text; empty text is a parse failure."""
    text = text.strip() if isinstance(text, str) else ""
    if not text:
        raise InferenceError("Provider returned empty response text", "response_parse", provider=provider)
    return text


def parse_json_text(text: str, provider: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise InferenceError(
            "Failed to parse provider JSON response", "response_parse", cause=e, provider=provider
        ) from e


def schema_of(request: InferenceTextRequest) -> Optional[Dict[str, Any]]:
    """Return the request's schema if it is a JSON request carrying one."""
    if isinstance(request, InferenceJsonRequest) and request.schema:
        return request.schema
    return None
