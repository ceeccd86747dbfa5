# Area: Config
"""
geohistory._config.store — Persisted client-local state
========================================================

Two independent records survive restarts:

    inference_config_override_v1    {"light": {provider, model}, "normal": {...}}
    geohistory_provider_config_v1   {"<provider>": {"apiKey": ..., "baseURL": ...}}

Records are read and written whole, as JSON strings, through a small
key-value store. A corrupt record is treated as absent.
"""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

logger = logging.getLogger("geohistory.config")

OVERRIDE_KEY = "inference_config_override_v1"
PROVIDER_CONFIG_KEY = "geohistory_provider_config_v1"

DEFAULT_STATE_DIR = Path.home() / ".geohistory"

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(Protocol):
    """Whole-value string storage keyed by name."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class MemoryStore:
    """In-process store; state lives as long as the instance."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class FileStore:
    """Store keeping one file per key under a state directory."""

    def __init__(self, directory: Optional[str] = None):
        self.directory = Path(directory) if directory else DEFAULT_STATE_DIR

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid store key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        # Write then rename so readers never see a partial record
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(value, encoding="utf-8")
        os.replace(tmp_path, path)

    def remove(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()


# ─────────────────────────────────────────────
# ROUTING OVERRIDE
# ─────────────────────────────────────────────

def get_inference_override(store: KeyValueStore) -> Optional[Dict[str, Any]]:
    """Return the persisted routing override, or None if absent or corrupt."""
    raw = store.get(OVERRIDE_KEY)
    if not raw:
        return None

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Ignoring corrupt routing override")
        return None
    return data if isinstance(data, dict) else None


def save_inference_override(store: KeyValueStore, override: Dict[str, Any]) -> None:
    store.set(OVERRIDE_KEY, json.dumps(override))


def clear_inference_override(store: KeyValueStore) -> None:
    store.remove(OVERRIDE_KEY)


# ─────────────────────────────────────────────
# PER-PROVIDER SECRETS
# ─────────────────────────────────────────────

def get_all_provider_configs(store: KeyValueStore) -> Dict[str, Optional[Dict[str, str]]]:
    """Return every stored provider record; a corrupt slot is cleared."""
    raw = store.get(PROVIDER_CONFIG_KEY)
    if not raw:
        return {}

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        data = None

    if not isinstance(data, dict):
        logger.warning("Clearing corrupt provider config record")
        store.remove(PROVIDER_CONFIG_KEY)
        return {}
    return data


def get_provider_config(store: KeyValueStore, provider: str) -> Optional[Dict[str, str]]:
    record = get_all_provider_configs(store).get(provider)
    return record if isinstance(record, dict) else None


def save_provider_config(store: KeyValueStore, provider: str, config: Dict[str, str]) -> None:
    all_configs = get_all_provider_configs(store)
    all_configs[provider] = config
    store.set(PROVIDER_CONFIG_KEY, json.dumps(all_configs))


def clear_provider_configs(store: KeyValueStore) -> None:
    store.remove(PROVIDER_CONFIG_KEY)
