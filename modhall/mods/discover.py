# modhall/mods/discover.py
from __future__ import annotations
import asyncio
import logging
import os
from pathlib import Path

from modhall.app.paths import AppPaths
from modhall.core.fsutils import getPathSize
from modhall.install.service import InstallInfo, InstallService
from modhall.mods.dependencies import validateModDependencies
from modhall.mods.enablement import WorldOverrideMap
from modhall.mods.entry import buildEntry
from modhall.mods.manifest import readManifest
from modhall.mods.types import MOD_LOCATIONS, ModEntry, ModLocation, ScanResult
from modhall.mods.walk import Candidate, iterCandidates, listDirectory
from modhall.profiles.store import ProfileStore
from modhall.worlds.saves import WorldService

logger = logging.getLogger(__name__)

__all__ = ["LibraryScanner", "InstallLocks", "ScanRoot", "enabledRootFor", "sortEntries"]

# (root, location, enabledOverride). enabledOverride is False for disabled-mirror roots.
ScanRoot = tuple[Path, ModLocation, bool | None]



class InstallLocks:
    """
    One asyncio.Lock per install root. Scans and applies against the same
    install queue up behind each other; different installs do not contend.
    """
    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}

    def forInstall(self, installPath: Path | str) -> asyncio.Lock:
        key = os.path.normcase(os.path.abspath(installPath))
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock



def enabledRootFor(info: InstallInfo, location: ModLocation) -> Path | None:
    """Existing enabled root for a location, as scanned. Packs without a Packs folder live in Mods."""
    if location == "packs":
        return Path(info.packsPath) if info.packsPath else None
    if location == "mods":
        return Path(info.modsPath) if info.modsPath else None
    return Path(info.earlyPluginsPath) if info.earlyPluginsPath else None



def sortEntries(entries: list[ModEntry]) -> list[ModEntry]:
    """Case-insensitive by name, then case-sensitive, then id/path so equal names stay stable."""
    return sorted(entries, key=lambda entry: (entry.name.casefold(), entry.name, entry.id, entry.path))



class LibraryScanner:
    """
    Walks every location root and its disabled mirror, builds ModEntry objects,
    keeps the default profile in line with what is enabled and validates dependencies.

    Does not lock; ModLibraryService and ProfileApplier hold the install lock around it.
    """
    def __init__(
        self,
        *,
        install: InstallService,
        worlds: WorldService,
        profiles: ProfileStore,
        paths: AppPaths,
        maxConcurrentReads: int = 8,
    ):
        self._install = install
        self._worlds = worlds
        self._profiles = profiles
        self._paths = paths
        self._maxConcurrentReads = max(1, int(maxConcurrentReads))

    def scanRoots(self, info: InstallInfo) -> list[ScanRoot]:
        roots: list[ScanRoot] = []
        for location in MOD_LOCATIONS:
            enabledRoot = enabledRootFor(info, location)
            if enabledRoot is not None:
                roots.append((enabledRoot, location, None))
            disabledRoot = self._paths.disabledLocationPath(location)
            if disabledRoot.is_dir():
                roots.append((disabledRoot, location, False))
        return roots

    async def _worldOverrides(self, info: InstallInfo, worldId: str | None) -> WorldOverrideMap | None:
        if worldId:
            if not info.userDataPath:
                return None
            return await self._worlds.readWorldModOverrides(worldId)
        return await self._worlds.readActiveWorldModOverrides(info.userDataPath)

    async def _entryFor(
        self,
        candidate: Candidate,
        *,
        enabledOverride: bool | None,
        worldOverrides: WorldOverrideMap | None,
        semaphore: asyncio.Semaphore,
    ) -> ModEntry:
        # Each archive is opened by exactly one reader; the semaphore caps how many run at once
        async with semaphore:
            read = await readManifest(candidate.path, candidate.format)
            size = await getPathSize(candidate.path)
        return buildEntry(
            read.manifest,
            candidate.name,
            candidate.format,
            candidate.location,
            str(candidate.path),
            hasClasses=read.hasClasses,
            enabledOverride=enabledOverride,
            worldOverrides=worldOverrides,
            size=size,
        )

    async def scanRoot(
        self,
        root: Path,
        location: ModLocation,
        *,
        enabledOverride: bool | None = None,
        worldOverrides: WorldOverrideMap | None = None,
        semaphore: asyncio.Semaphore | None = None,
    ) -> list[ModEntry]:
        try:
            listing = await asyncio.to_thread(listDirectory, root)
        except OSError as err:
            logger.warning("Cannot list '%s', treating as empty: %s", root, err)
            return []

        semaphore = semaphore or asyncio.Semaphore(self._maxConcurrentReads)
        return list(await asyncio.gather(*(
            self._entryFor(candidate, enabledOverride=enabledOverride, worldOverrides=worldOverrides, semaphore=semaphore)
            for candidate in iterCandidates(root, location, listing)
        )))

    async def scan(self, worldId: str | None = None) -> ScanResult:
        info = await self._install.resolveInstallInfo()
        if not info.activePath:
            logger.debug("No install path configured, nothing to scan")
            return ScanResult(installPath=None, entries=[])

        worldOverrides = await self._worldOverrides(info, worldId)
        roots = self.scanRoots(info)
        semaphore = asyncio.Semaphore(self._maxConcurrentReads)

        # Roots share nothing mutable, so they are walked concurrently; gather keeps root order
        perRoot = await asyncio.gather(*(
            self.scanRoot(root, location, enabledOverride=override, worldOverrides=worldOverrides, semaphore=semaphore)
            for root, location, override in roots
        ))
        entries = sortEntries([entry for rootEntries in perRoot for entry in rootEntries])

        self._profiles.seedFromScan(entries)
        self._profiles.syncDefaultFromScan(entries)
        validation = validateModDependencies(entries)

        logger.info(
            "Mods discovered: %d (enabled=%d, roots=%d, worldOverrides=%s)",
            len(entries),
            sum(1 for entry in entries if entry.enabled),
            len(roots),
            "none" if worldOverrides is None else len(worldOverrides),
        )
        if validation.hasErrors:
            logger.warning(
                "Dependency problems: %s",
                "; ".join(issue.message + f" ({issue.modId})" for issue in validation.issues if issue.type != "optional_missing"),
            )
        return ScanResult(installPath=info.activePath, entries=entries, validation=validation)
