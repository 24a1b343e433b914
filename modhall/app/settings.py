# modhall/app/settings.py
from __future__ import annotations
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, cast

import json5
from pydantic import JsonValue

import logging
logger = logging.getLogger(__name__)

__all__ = [
    "SETTINGS", "userSettingsPath", "loadUserSettings", "loadSettings",
    "deepMerge", "getByPath", "settings", "settingsBool", "settingsInt",
]


SETTINGS: JsonValue = {
    "__source": "MODHALL_DEFAULTS",
    "paths": {"appDataDir": "~/.modhall"},
    "install": {"defaultPath": None},
    "scan": {"maxConcurrentReads": 8},
    "logging": {"file": None},
    "debug": {
        "devModeEnabled": False,
        "suppressRecurringMessages": {"enabled": False, "windowSeconds": 60, "maxPerWindow": 5, "summaryLevel": "INFO"},
    },
}



def userSettingsPath() -> Path:
    override = os.environ.get("MODHALL_CONFIG")
    if override:
        return Path(override).expanduser()
    return Path(os.path.expanduser("~/.modhall/modhall.json5"))



def loadUserSettings() -> JsonValue:
    filePath = userSettingsPath()
    if filePath.exists():
        try:
            return json5.loads(filePath.read_text(encoding="utf-8"))
        except (OSError, ValueError) as err:
            logger.error("Failed to parse '%s': %s", filePath, err)
    return {}



@lru_cache(maxsize=1)
def loadSettings() -> JsonValue:
    return deepMerge(SETTINGS, loadUserSettings())



def deepMerge(first: JsonValue, second: JsonValue) -> JsonValue:
    """
    Returns a new JsonValue where keys from `second` override/extend `first`.
    Only merges recursively when BOTH sides are JSON objects (dicts).
    Anything else on the right-hand side replaces the left-hand value.
    """
    if isinstance(first, dict) and isinstance(second, dict):
        out: dict[str, JsonValue] = dict(first)
        for key, value in second.items():
            out[key] = deepMerge(out[key], value) if key in out else value
        return cast(JsonValue, out)
    return second



def getByPath(data: Any, path: str, default: Any = None) -> Any:
    """Walks dotted `path` through nested dicts; `default` when any hop is missing."""
    node = data
    for part in path.split("."):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return node

# ---------- Ergonomic accessors over merged settings ----------

def settings(path: str, default: Any = None) -> Any:
    """Returns value at `path` from merged settings, or `default` if missing."""
    val = getByPath(loadSettings(), path)
    return default if val is None else val



def settingsBool(path: str, default: bool = False) -> bool:
    val = getByPath(loadSettings(), path)
    if isinstance(val, bool):
        return val
    if val is None:
        return default
    return bool(val)



def settingsInt(path: str, default: int = 0) -> int:
    val = getByPath(loadSettings(), path)
    try:
        return int(val) if val is not None else default
    except (TypeError, ValueError):
        logger.warning("Setting '%s' is not an integer (%r), using %d", path, val, default)
        return default
