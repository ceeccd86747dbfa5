# Area: Config
"""
geohistory._config.secrets — Secret lookup surface
===================================================

Provider credentials are looked up by environment-variable name in two
places: an injected secrets mapping (by default the contents of a .env
file) and then the process environment.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Mapping, Optional

from dotenv import dotenv_values

SecretLookup = Callable[[str], Optional[str]]


class EnvSecrets:
    """Secret lookup over an injected mapping, then os.environ."""

    def __init__(
        self,
        values: Optional[Mapping[str, Optional[str]]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self._values = dict(values or {})
        self._environ = environ if environ is not None else os.environ

    @classmethod
    def from_env_file(cls, path: str = ".env") -> "EnvSecrets":
        """Build a lookup from a .env file; a missing file yields no values."""
        env_path = Path(path)
        values = dotenv_values(env_path) if env_path.exists() else {}
        return cls(values=values)

    def __call__(self, key: str) -> Optional[str]:
        value = self._values.get(key)
        if value:
            return value
        return self._environ.get(key) or None


def no_secrets(key: str) -> Optional[str]:
    """Secret lookup that never resolves anything."""
    return None
