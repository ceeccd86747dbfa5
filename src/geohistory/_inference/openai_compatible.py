# Area: Inference
"""
geohistory._inference.openai_compatible — Chat-completions adapter
==================================================================

Talks to any server exposing POST {base_url}/v1/chat/completions.
Used for both the local OpenAI-compatible proxy and LM Studio.

Message content in the response is either a string or a list of typed
parts; it is reduced to plain text as soon as the response arrives.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..errors import InferenceError
from ..types import InferenceJsonRequest, InferenceTextRequest
from .base import GENERIC_JSON_SCHEMA, parse_json_text, require_text, resolve_model, schema_of

logger = logging.getLogger("geohistory.inference")

DEFAULT_BASE_URL = "http://127.0.0.1:8841"

MODEL_BY_POWER: Dict[str, str] = {
    "light": "claude-haiku-4-5-20251001",
    "normal": "claude-sonnet-4-5-20250929",
}


def extract_message_text(payload: Any) -> str:
    """
    Return the text of the first choice's message.

    String content is returned trimmed; a list of parts contributes only
    the parts whose type is "text". Any other shape yields "".
    """
    if not isinstance(payload, dict):
        return ""
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return ""
    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    content = message.get("content") if isinstance(message, dict) else None

    if isinstance(content, str):
        return content.strip()

    if isinstance(content, list):
        texts: List[str] = []
        for part in content:
            if isinstance(part, dict) and part.get("type") == "text":
                texts.append(part.get("text") or "")
        return "".join(texts).strip()

    return ""


class OpenAICompatibleProvider:
    """Adapter for OpenAI chat-completions compatible servers."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        name: str = "local_openai_compatible",
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.api_key = api_key
        self.name = name
        self._client = client

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def build_payload(self, request: InferenceTextRequest, expect_json: bool) -> Dict[str, Any]:
        messages: List[Dict[str, str]] = []
        if request.system_instruction:
            messages.append({"role": "system", "content": request.system_instruction})
        messages.append({"role": "user", "content": request.prompt})

        payload: Dict[str, Any] = {
            "model": resolve_model(MODEL_BY_POWER, request),
            "messages": messages,
        }
        if request.temperature is not None:
            payload["temperature"] = request.temperature
        if request.max_output_tokens is not None:
            payload["max_tokens"] = request.max_output_tokens

        if expect_json:
            payload["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": "inference_response",
                    "strict": True,
                    "schema": schema_of(request) or GENERIC_JSON_SCHEMA,
                },
            }
        return payload

    def _post(self, url: str, payload: Dict[str, Any]) -> httpx.Response:
        if self._client is not None:
            return self._client.post(url, headers=self._headers(), json=payload)
        with httpx.Client(timeout=None) as client:
            return client.post(url, headers=self._headers(), json=payload)

    def _post_chat_completions(self, request: InferenceTextRequest, expect_json: bool) -> str:
        url = f"{self.base_url}/v1/chat/completions"
        payload = self.build_payload(request, expect_json)
        logger.debug(f"POST {url} model={payload['model']} json={expect_json}")

        try:
            response = self._post(url, payload)
            if not response.is_success:
                body = response.text or response.reason_phrase
                raise InferenceError(
                    f"{self.name} request failed ({response.status_code}): {body}",
                    "provider_call",
                    provider=self.name,
                    status_code=response.status_code,
                )
            text = extract_message_text(response.json())
        except InferenceError:
            raise
        except Exception as e:
            raise InferenceError(
                f"{self.name} request failed: {e}", "provider_call", cause=e, provider=self.name
            ) from e

        return require_text(text, self.name)

    def generate_text(self, request: InferenceTextRequest) -> str:
        return self._post_chat_completions(request, expect_json=False)

    def generate_json(self, request: InferenceJsonRequest) -> Any:
        return parse_json_text(self._post_chat_completions(request, expect_json=True), self.name)
