# Area: Shared
"""
Shared utilities used by the inference and configuration layers.

This package contains:
- Logging configuration
"""

from .logging_config import (
    setup_logging,
    log_inference_error,
    TerminalFormatter,
    JSONFormatter,
)

__all__ = [
    "setup_logging",
    "log_inference_error",
    "TerminalFormatter",
    "JSONFormatter",
]
