# modhall/mods/apply.py
from __future__ import annotations
import logging
from datetime import datetime, timezone
from pathlib import Path

from modhall.app.paths import AppPaths
from modhall.core.errors import InstallPathNotConfiguredError, ProfileNotFoundError
from modhall.core.fsutils import ensureDir, movePath, pathExists
from modhall.core.logging import logContext
from modhall.core.security import ensureWithinRoots, isWithinPath
from modhall.install.service import InstallInfo, InstallService, locationPath
from modhall.mods.discover import InstallLocks, LibraryScanner
from modhall.mods.types import MOD_LOCATIONS, ApplyResult, ModEntry
from modhall.profiles.store import ProfileStore
from modhall.worlds.saves import WorldService

logger = logging.getLogger(__name__)

__all__ = ["ProfileApplier", "isoNow"]



def isoNow() -> str:
    """UTC ISO-8601 with milliseconds and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")



class ProfileApplier:
    """
    Makes disk and the active world's config agree with one profile.

    Under the install lock: scan fresh, move every entry whose placement
    disagrees with the profile (enabled root <-> disabled mirror), then give
    every scanned entry an explicit Enabled flag in the active world config.
    Moves are not rolled back when a later one fails.
    """
    def __init__(
        self,
        *,
        install: InstallService,
        scanner: LibraryScanner,
        profiles: ProfileStore,
        worlds: WorldService,
        paths: AppPaths,
        locks: InstallLocks,
    ):
        self._install = install
        self._scanner = scanner
        self._profiles = profiles
        self._worlds = worlds
        self._paths = paths
        self._locks = locks

    def _knownRoots(self, info: InstallInfo) -> list[Path]:
        roots = [locationPath(info, location) for location in MOD_LOCATIONS]
        return [root for root in roots if root is not None] + [self._paths.disabledRoot]

    def _targetFor(self, info: InstallInfo, entry: ModEntry, shouldEnable: bool) -> Path | None:
        if shouldEnable:
            targetRoot = locationPath(info, entry.location)
        else:
            targetRoot = self._paths.disabledLocationPath(entry.location)
        if targetRoot is None:
            return None
        return targetRoot / Path(entry.path).name

    async def apply(self, profileId: str) -> ApplyResult:
        info = await self._install.resolveInstallInfo()
        if not info.activePath:
            raise InstallPathNotConfiguredError()

        profile = self._profiles.getProfile(profileId)
        if profile is None:
            raise ProfileNotFoundError(f"Profile '{profileId}' not found.")

        with logContext(op="apply", profileId=profile.id):
            async with self._locks.forInstall(info.activePath):
                return await self._applyLocked(info, profile.id, set(profile.enabledMods))

    async def _applyLocked(self, info: InstallInfo, profileId: str, desired: set[str]) -> ApplyResult:
        # Never trust an entry list from before the lock was taken
        scan = await self._scanner.scan()
        knownRoots = self._knownRoots(info)
        disabledRoot = self._paths.disabledRoot

        moved: list[ModEntry] = []
        skipped: list[ModEntry] = []
        for entry in scan.entries:
            shouldEnable = entry.id in desired
            currentlyDisabled = isWithinPath(entry.path, disabledRoot)
            if shouldEnable != currentlyDisabled:
                # Placement already matches
                continue

            target = self._targetFor(info, entry, shouldEnable)
            if target is None:
                logger.warning("No enabled root for location '%s', leaving '%s' in place", entry.location, entry.path)
                skipped.append(entry)
                continue

            ensureWithinRoots(entry.path, knownRoots, action="move")
            ensureWithinRoots(target, knownRoots, action="move into")

            if await pathExists(target):
                logger.warning("Skipping '%s': '%s' already exists", entry.id, target)
                skipped.append(entry)
                continue

            await ensureDir(target.parent)
            await movePath(entry.path, target)
            logger.debug("%s '%s' -> '%s'", "Enabled" if shouldEnable else "Disabled", entry.id, target)
            moved.append(entry.model_copy(update={"path": str(target), "enabled": shouldEnable}))

        await self._worlds.syncActiveWorldModConfig(info.userDataPath, desired, scan.entries)

        scannedIds = {entry.id for entry in scan.entries}
        missing = sorted(desired - scannedIds)
        if missing:
            logger.info("Profile wants mods that are not installed: %s", ", ".join(missing))

        logger.info(
            "Applied profile '%s': moved=%d skipped=%d missing=%d",
            profileId, len(moved), len(skipped), len(missing),
        )
        return ApplyResult(
            profileId=profileId,
            appliedAt=isoNow(),
            moved=moved,
            skipped=skipped,
            missing=missing,
        )
