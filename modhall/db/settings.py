# modhall/db/settings.py
from __future__ import annotations
from typing import Protocol

from .database import Database
from .models import SettingRow

__all__ = ["SETTINGS_KEYS", "SettingsStore", "SqlSettingsStore", "MemorySettingsStore"]



class SETTINGS_KEYS:
    installPath = "install_path_override"
    activeProfile = "active_profile_id"
    profilesSeeded = "profiles_seeded"
    selectedWorld = "selected_world_id"



class SettingsStore(Protocol):
    """key -> string contract. Setting None deletes the key."""
    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str | None) -> None: ...



class SqlSettingsStore:
    def __init__(self, database: Database):
        self._db = database

    def get(self, key: str) -> str | None:
        with self._db.session() as db:
            row = db.get(SettingRow, key)
            return row.value if row is not None else None

    def set(self, key: str, value: str | None) -> None:
        with self._db.session() as db:
            row = db.get(SettingRow, key)
            if value is None:
                if row is not None:
                    db.delete(row)
                return
            if row is None:
                db.add(SettingRow(key=key, value=value))
            else:
                row.value = value



class MemorySettingsStore:
    def __init__(self, initial: dict[str, str] | None = None):
        self.values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str | None) -> None:
        if value is None:
            self.values.pop(key, None)
        else:
            self.values[key] = value
