# modhall/app/state.py
from __future__ import annotations

from modhall.db.settings import SETTINGS_KEYS, SettingsStore

__all__ = ["LibraryState"]



class LibraryState:
    """
    The few scalars the library keeps between calls: install-path override,
    active profile pointer and the "default profile seeded" flag.

    Owned by one ModLibraryService and handed to the components that need it.
    Every setter writes through to the settings store.
    """
    def __init__(self, store: SettingsStore):
        self._store = store
        self.installPathOverride: str | None = store.get(SETTINGS_KEYS.installPath)
        self.activeProfileId: str | None = store.get(SETTINGS_KEYS.activeProfile)
        self.profilesSeeded: bool = store.get(SETTINGS_KEYS.profilesSeeded) == "true"

    @property
    def store(self) -> SettingsStore:
        return self._store

    def setInstallPathOverride(self, path: str | None) -> None:
        self.installPathOverride = path or None
        self._store.set(SETTINGS_KEYS.installPath, self.installPathOverride)

    def setActiveProfileId(self, profileId: str | None) -> None:
        self.activeProfileId = profileId
        self._store.set(SETTINGS_KEYS.activeProfile, profileId)

    def markProfilesSeeded(self) -> None:
        self.profilesSeeded = True
        self._store.set(SETTINGS_KEYS.profilesSeeded, "true")
