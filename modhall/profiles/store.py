# modhall/profiles/store.py
from __future__ import annotations
import logging
import re
import uuid
from collections.abc import Iterable

from modhall.app.state import LibraryState
from modhall.core.errors import ReadonlyProfileError
from modhall.db.database import Database
from modhall.db.models import ProfileRow
from modhall.mods.types import ModEntry
from modhall.profiles.models import DEFAULT_PROFILE_ID, DEFAULT_PROFILE_NAME, Profile, ProfilesState

logger = logging.getLogger(__name__)

__all__ = ["ProfileStore", "slugifyProfileId"]

_SLUG_STRIP = re.compile(r"[^a-z0-9]+")



def slugifyProfileId(name: str) -> str:
    return _SLUG_STRIP.sub("-", name.lower()).strip("-")



def _rowToProfile(row: ProfileRow) -> Profile:
    return Profile(
        id=row.id,
        name=row.name,
        enabledMods=row.enabled_mods if isinstance(row.enabled_mods, list) else [],
        readonly=bool(row.readonly),
    )



def _enabledIds(entries: Iterable[ModEntry]) -> list[str]:
    return list(dict.fromkeys(entry.id for entry in entries if entry.enabled))



class ProfileStore:
    """
    Durable profiles plus the active-profile pointer.

    There is no delete: profiles stay once created. The one readonly profile
    ("default") mirrors what is physically enabled and is only written by
    seedFromScan()/syncDefaultFromScan().
    """
    def __init__(self, database: Database, state: LibraryState):
        self._db = database
        self._state = state

    # ----- Reads -----

    def listProfiles(self) -> list[Profile]:
        """Readonly profiles first, then by name."""
        with self._db.session() as db:
            rows = db.query(ProfileRow).order_by(ProfileRow.readonly.desc(), ProfileRow.name).all()
            return [_rowToProfile(row) for row in rows]

    def getProfile(self, profileId: str) -> Profile | None:
        with self._db.session() as db:
            row = db.get(ProfileRow, profileId)
            return _rowToProfile(row) if row is not None else None

    def profileExists(self, profileId: str) -> bool:
        return self.getProfile(profileId) is not None

    def getProfilesState(self) -> ProfilesState:
        """Also repairs a stale active pointer (falls back to the first profile)."""
        profiles = self.listProfiles()
        if not profiles:
            if self._state.activeProfileId is not None:
                self._state.setActiveProfileId(None)
            return ProfilesState(activeProfileId=None, profiles=profiles)

        activeId = self._state.activeProfileId
        if not activeId or not any(profile.id == activeId for profile in profiles):
            logger.info("Active profile '%s' not found, falling back to '%s'", activeId, profiles[0].id)
            self._state.setActiveProfileId(profiles[0].id)
        return ProfilesState(activeProfileId=self._state.activeProfileId, profiles=profiles)

    # ----- Writes -----

    def saveProfile(self, profile: Profile) -> Profile:
        """Upsert, no readonly check. Use updateProfile() for user edits."""
        with self._db.session() as db:
            row = db.get(ProfileRow, profile.id)
            if row is None:
                row = ProfileRow(id=profile.id)
                db.add(row)
            row.name = profile.name
            row.enabled_mods = list(profile.enabledMods)
            row.readonly = profile.readonly
        return profile

    def createProfile(self, name: str) -> ProfilesState:
        profileName = (name or "").strip() or "New Profile"
        baseId = slugifyProfileId(profileName) or f"profile-{uuid.uuid4().hex[:8]}"
        profileId = baseId
        suffix = 2
        # "default" belongs to the seeded readonly profile, even before the first scan
        while profileId == DEFAULT_PROFILE_ID or self.profileExists(profileId):
            profileId = f"{baseId}-{suffix}"
            suffix += 1

        self.saveProfile(Profile(id=profileId, name=profileName, enabledMods=[], readonly=False))
        self._state.setActiveProfileId(profileId)
        logger.info("Created profile '%s' (%s)", profileName, profileId)
        return self.getProfilesState()

    def updateProfile(self, profile: Profile) -> Profile:
        existing = self.getProfile(profile.id)
        if existing is None and profile.id == DEFAULT_PROFILE_ID:
            # Reserved for the seeded profile
            raise ReadonlyProfileError(f"Profile id '{profile.id}' is reserved.")
        if existing is not None and existing.readonly:
            raise ReadonlyProfileError(f"Cannot modify readonly profile '{profile.id}'.")
        # Readonly is reserved for the seeded default
        return self.saveProfile(profile.model_copy(update={"readonly": False}))

    def setActiveProfile(self, profileId: str) -> ProfilesState:
        """Unknown ids are ignored."""
        if self.profileExists(profileId):
            self._state.setActiveProfileId(profileId)
        else:
            logger.debug("setActiveProfile: no profile '%s'", profileId)
        return ProfilesState(activeProfileId=self._state.activeProfileId, profiles=self.listProfiles())

    # ----- Default profile tracking -----

    def seedFromScan(self, entries: Iterable[ModEntry]) -> bool:
        """
        Creates the readonly default profile from the first successful scan.
        Runs once per database; returns True when it created the profile.
        """
        if self._state.profilesSeeded:
            return False

        created = False
        existing = self.getProfile(DEFAULT_PROFILE_ID)
        if existing is None or not existing.readonly:
            enabledMods = _enabledIds(entries)
            self.saveProfile(Profile(
                id=DEFAULT_PROFILE_ID,
                name=DEFAULT_PROFILE_NAME,
                enabledMods=enabledMods,
                readonly=True,
            ))
            self._state.setActiveProfileId(DEFAULT_PROFILE_ID)
            logger.info("Seeded default profile with %d enabled mods", len(enabledMods))
            created = True

        self._state.markProfilesSeeded()
        return created

    def syncDefaultFromScan(self, entries: Iterable[ModEntry]) -> bool:
        """Rewrites the default profile only when the enabled set actually changed."""
        default = self.getProfile(DEFAULT_PROFILE_ID)
        if default is None or not default.readonly:
            return False

        enabledMods = _enabledIds(entries)
        if set(enabledMods) == set(default.enabledMods):
            return False

        self.saveProfile(default.model_copy(update={"enabledMods": enabledMods, "readonly": True}))
        logger.debug("Default profile resynced: %d enabled mods", len(enabledMods))
        return True
