# Area: Inference
"""
geohistory._inference.gemini — Google generative API adapter
=============================================================

Uses the google-genai SDK. The prompt is sent as a single contents
string; JSON calls set response_mime_type to application/json and pass
the caller's schema through unchanged.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

from ..errors import InferenceError
from ..types import InferenceJsonRequest, InferenceTextRequest
from .base import parse_json_text, require_text, resolve_model

logger = logging.getLogger("geohistory.inference")

PROVIDER_NAME = "gemini"

MODEL_BY_POWER: Dict[str, str] = {
    "light": "gemini-3-flash-preview",
    "normal": "gemini-3-flash-preview",
}


class GeminiProvider:
    """Adapter for the Google generative API."""

    def __init__(self, api_key: Optional[str] = None, client: Any = None):
        self.api_key = api_key or os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY")
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            from google import genai
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def _build_config(self, request: InferenceTextRequest, expect_json: bool) -> Dict[str, Any]:
        config: Dict[str, Any] = {
            "response_mime_type": "application/json" if expect_json else "text/plain",
            "system_instruction": request.system_instruction,
            "temperature": request.temperature,
            "max_output_tokens": request.max_output_tokens,
        }
        if expect_json and isinstance(request, InferenceJsonRequest) and request.schema:
            config["response_schema"] = request.schema
        return {key: value for key, value in config.items() if value is not None}

    def _generate(self, request: InferenceTextRequest, expect_json: bool) -> str:
        model = resolve_model(MODEL_BY_POWER, request)
        logger.debug(f"Gemini generate_content model={model} json={expect_json}")
        try:
            response = self._get_client().models.generate_content(
                model=model,
                contents=request.prompt,
                config=self._build_config(request, expect_json),
            )
            return require_text(getattr(response, "text", None), PROVIDER_NAME)
        except InferenceError:
            raise
        except Exception as e:
            kind = "JSON" if expect_json else "text"
            # google.genai.errors.APIError carries the HTTP status as .code
            code = getattr(e, "code", None)
            raise InferenceError(
                f"Gemini {kind} generation failed: {e}",
                "provider_call",
                cause=e,
                provider=PROVIDER_NAME,
                status_code=code if isinstance(code, int) else None,
            ) from e

    def generate_text(self, request: InferenceTextRequest) -> str:
        return self._generate(request, expect_json=False)

    def generate_json(self, request: InferenceJsonRequest) -> Any:
        return parse_json_text(self._generate(request, expect_json=True), PROVIDER_NAME)
