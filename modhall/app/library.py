# modhall/app/library.py
from __future__ import annotations
import logging
from collections.abc import Iterable
from pathlib import Path

from modhall.app.paths import AppPaths
from modhall.app.settings import settings, settingsInt
from modhall.app.state import LibraryState
from modhall.core.errors import ModNotFoundError
from modhall.core.fsutils import pathExists
from modhall.core.logging import logContext
from modhall.core.security import ensureWithinRoots
from modhall.db.database import Database
from modhall.db.settings import SqlSettingsStore
from modhall.install.service import InstallInfo, InstallService, locationPath
from modhall.mods.add import addMods
from modhall.mods.apply import ProfileApplier
from modhall.mods.deleted import (
    DeletedModEntry,
    DeletedModsService,
    DeleteModResult,
    RestoreDeletedModResult,
)
from modhall.mods.discover import InstallLocks, LibraryScanner
from modhall.mods.manifest import Manifest, readManifest
from modhall.mods.types import MOD_LOCATIONS, AddModResult, ApplyResult, ScanResult
from modhall.mods.walk import archiveFormat
from modhall.profiles.models import Profile, ProfilesState
from modhall.profiles.store import ProfileStore
from modhall.worlds.saves import WorldService, WorldsState

logger = logging.getLogger(__name__)

__all__ = ["ModLibraryService"]



class ModLibraryService:
    """
    One object per managed library. Wires the components together and is the
    only thing the HTTP layer talks to.

    Operations that read or rearrange the install (scan, apply, add, delete,
    restore) run under the per-install lock.
    """
    def __init__(
        self,
        paths: AppPaths,
        database: Database,
        *,
        defaultInstallPath: Path | str | None = None,
        maxConcurrentReads: int | None = None,
    ):
        self.paths = paths
        self.database = database
        self.state = LibraryState(SqlSettingsStore(database))
        self.locks = InstallLocks()

        self.install = InstallService(self.state, defaultPath=defaultInstallPath)
        self.worlds = WorldService(self.install, self.state.store)
        self.profiles = ProfileStore(database, self.state)
        self.scanner = LibraryScanner(
            install=self.install,
            worlds=self.worlds,
            profiles=self.profiles,
            paths=paths,
            maxConcurrentReads=maxConcurrentReads or settingsInt("scan.maxConcurrentReads", 8),
        )
        self.applier = ProfileApplier(
            install=self.install,
            scanner=self.scanner,
            profiles=self.profiles,
            worlds=self.worlds,
            paths=paths,
            locks=self.locks,
        )
        self.deleted = DeletedModsService(self.install, paths)

    @classmethod
    def fromSettings(cls) -> ModLibraryService:
        """Builds the service from the layered settings file (see modhall.app.settings)."""
        paths = AppPaths.fromDir(settings("paths.appDataDir", "~/.modhall"))
        paths.appDataDir.mkdir(parents=True, exist_ok=True)
        database = Database.forPath(paths.databasePath)
        logger.info("Mod library data at '%s'", paths.appDataDir)
        return cls(paths, database, defaultInstallPath=settings("install.defaultPath"))

    def close(self) -> None:
        self.database.dispose()

    # ----- Install -----

    async def getInstallInfo(self) -> InstallInfo:
        return await self.install.resolveInstallInfo()

    async def setInstallPath(self, path: Path | str | None) -> InstallInfo:
        self.install.setInstallPath(path)
        return await self.install.resolveInstallInfo()

    def _lockFor(self, info: InstallInfo):
        return self.locks.forInstall(info.activePath or self.install.defaultPath)

    # ----- Scan / apply -----

    async def scanMods(self, worldId: str | None = None) -> ScanResult:
        info = await self.install.resolveInstallInfo()
        with logContext(op="scan", worldId=worldId):
            async with self._lockFor(info):
                return await self.scanner.scan(worldId)

    async def applyProfile(self, profileId: str) -> ApplyResult:
        return await self.applier.apply(profileId)

    async def getModManifest(self, modPath: Path | str) -> Manifest | None:
        info = await self.install.resolveInstallInfo()
        roots: list[Path | str | None] = [locationPath(info, location) for location in MOD_LOCATIONS]
        roots.append(self.paths.disabledRoot)
        target = ensureWithinRoots(modPath, roots, action="read manifest of")
        if not await pathExists(target):
            raise ModNotFoundError()
        fmt = "directory" if target.is_dir() else archiveFormat(target.name)
        if fmt is None:
            return None
        return (await readManifest(target, fmt)).manifest

    # ----- Add / delete -----

    async def addMods(self, sourcePaths: Iterable[Path | str]) -> AddModResult:
        info = await self.install.resolveInstallInfo()
        with logContext(op="add"):
            async with self._lockFor(info):
                return await addMods(info, sourcePaths)

    async def deleteMod(self, modPath: Path | str) -> DeleteModResult:
        info = await self.install.resolveInstallInfo()
        with logContext(op="delete"):
            async with self._lockFor(info):
                return await self.deleted.deleteMod(modPath)

    async def listDeletedMods(self) -> list[DeletedModEntry]:
        return await self.deleted.listDeletedMods()

    async def restoreDeletedMod(self, backupId: str) -> RestoreDeletedModResult:
        info = await self.install.resolveInstallInfo()
        with logContext(op="restore"):
            async with self._lockFor(info):
                return await self.deleted.restoreDeletedMod(backupId)

    async def permanentlyDeleteMod(self, backupId: str) -> None:
        await self.deleted.permanentlyDeleteMod(backupId)

    async def clearDeletedMods(self) -> int:
        return await self.deleted.clearDeletedMods()

    # ----- Profiles -----

    def getProfiles(self) -> ProfilesState:
        return self.profiles.getProfilesState()

    def createProfile(self, name: str) -> ProfilesState:
        return self.profiles.createProfile(name)

    def updateProfile(self, profile: Profile) -> Profile:
        return self.profiles.updateProfile(profile)

    def setActiveProfile(self, profileId: str) -> ProfilesState:
        return self.profiles.setActiveProfile(profileId)

    # ----- Worlds -----

    async def listWorlds(self) -> WorldsState:
        return await self.worlds.listWorlds()

    async def getWorldConfig(self, worldId: str):
        return await self.worlds.getWorldConfig(worldId)

    async def setWorldModEnabled(self, worldId: str, modId: str, enabled: bool) -> None:
        await self.worlds.setModEnabled(worldId, modId, enabled)

    def setSelectedWorld(self, worldId: str | None) -> None:
        self.worlds.setSelectedWorld(worldId)
