"""
geohistory.errors — Custom exception classes
=============================================

Defines the exception hierarchy for inference and configuration errors.
InferenceError carries the stage at which a provider call failed so
callers can apply their own recovery policy.
"""

from __future__ import annotations
from typing import Any, Dict, Optional
import json

from .types import INFERENCE_STAGES


class GeoHistoryError(Exception):
    """Base exception for all geohistory package errors."""
    pass


class ConfigError(GeoHistoryError):
    """Raised when a static configuration file cannot be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not load config '{path}': {reason}")


class InferenceError(GeoHistoryError):
    """Raised when a provider call fails.

    Stages
    ------
    request_build
        The outgoing request could not be constructed.
    provider_call
        Network error or non-success status from the provider.
    response_parse
        Empty text after normalization, or text that is not valid JSON
        when JSON was required.
    schema_validation
        Structured output does not match the requested schema.
    """

    def __init__(
        self,
        message: str,
        stage: str,
        cause: Optional[BaseException] = None,
        provider: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        if stage not in INFERENCE_STAGES:
            raise ValueError(f"Unknown inference stage: {stage}")
        self.message = message
        self.stage = stage
        self.cause = cause
        self.provider = provider
        self.status_code = status_code
        super().__init__(f"[{stage}] {message}")
        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "status": "error",
            "stage": self.stage,
            "message": self.message,
        }
        if self.provider:
            result["provider"] = self.provider
        if self.status_code is not None:
            result["status_code"] = self.status_code
        if self.cause is not None:
            result["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        return result

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type=self.stage.upper(),
            provider=self.provider,
            details=self.to_dict(),
        )


def _format_error_block(
    error_type: str,
    provider: Optional[str],
    details: Dict[str, Any],
) -> str:
    """Format a structured error block for terminal output."""
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " INFERENCE ERROR",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
    ]

    if provider:
        lines.append(f" Provider:     {provider}")

    lines.append("")
    lines.append(" ── DETAILS " + "─" * 52)
    lines.append(_indent_json(details))
    lines.append("")
    lines.append("=" * 64)
    lines.append("")

    return "\n".join(lines)


def _indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    try:
        formatted = json.dumps(data, indent=indent, default=str)
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"
