# Area: Inference
"""
geohistory._inference.anthropics — Messages API adapter
========================================================

Calls POST {base_url}/v1/messages through the anthropic SDK (which sends
x-api-key and anthropic-version: 2023-06-01). The system instruction is
folded into the user message; JSON mode only asks for JSON through the
top-level system prompt, the schema is not enforced.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx
from anthropic import Anthropic, APIStatusError

from ..errors import InferenceError
from ..types import InferenceJsonRequest, InferenceTextRequest
from .base import parse_json_text, require_text, resolve_model, schema_of

logger = logging.getLogger("geohistory.inference")

PROVIDER_NAME = "anthropics"
DEFAULT_BASE_URL = "https://api.anthropic.com"
DEFAULT_MAX_TOKENS = 1024

MODEL_BY_POWER: Dict[str, str] = {
    "light": "claude-3-haiku-20240307",
    "normal": "claude-3-5-sonnet-20241022",
}

JSON_SYSTEM_PREFIX = "You must respond with valid JSON matching this schema: "


class AnthropicsProvider:
    """Adapter for the Anthropic messages API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        client: Optional[Anthropic] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.api_key = api_key
        self._client = client
        self._http_client = http_client

    def _get_client(self) -> Anthropic:
        if self._client is None:
            # Single attempt per call
            self._client = Anthropic(
                api_key=self.api_key or "",
                base_url=self.base_url,
                max_retries=0,
                http_client=self._http_client,
            )
        return self._client

    def build_params(self, request: InferenceTextRequest, expect_json: bool) -> Dict[str, Any]:
        content = request.prompt
        if request.system_instruction:
            content = request.system_instruction + "\n\n" + request.prompt

        params: Dict[str, Any] = {
            "model": resolve_model(MODEL_BY_POWER, request),
            "max_tokens": request.max_output_tokens or DEFAULT_MAX_TOKENS,
            "messages": [{"role": "user", "content": content}],
        }
        if request.temperature is not None:
            params["temperature"] = request.temperature

        schema = schema_of(request)
        if expect_json and schema:
            params["system"] = JSON_SYSTEM_PREFIX + json.dumps(schema)
        return params

    def _post_message(self, request: InferenceTextRequest, expect_json: bool) -> str:
        params = self.build_params(request, expect_json)
        logger.debug(f"POST {self.base_url}/v1/messages model={params['model']} json={expect_json}")

        try:
            client = self._get_client()
        except Exception as e:
            raise InferenceError(
                f"Could not build Anthropics client: {e}", "request_build", cause=e, provider=PROVIDER_NAME
            ) from e

        try:
            response = client.messages.create(**params)
        except APIStatusError as e:
            body = e.response.text if e.response is not None else str(e)
            raise InferenceError(
                f"Anthropics request failed ({e.status_code}): {body}",
                "provider_call",
                cause=e,
                provider=PROVIDER_NAME,
                status_code=e.status_code,
            ) from e
        except Exception as e:
            raise InferenceError(
                f"Anthropics request failed: {e}", "provider_call", cause=e, provider=PROVIDER_NAME
            ) from e

        blocks = getattr(response, "content", None) or []
        text = getattr(blocks[0], "text", None) if blocks else None
        return require_text(text, PROVIDER_NAME)

    def generate_text(self, request: InferenceTextRequest) -> str:
        return self._post_message(request, expect_json=False)

    def generate_json(self, request: InferenceJsonRequest) -> Any:
        return parse_json_text(self._post_message(request, expect_json=True), PROVIDER_NAME)
