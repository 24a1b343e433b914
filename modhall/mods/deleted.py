# modhall/mods/deleted.py
from __future__ import annotations
import asyncio
import logging
import os
import re
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel

from modhall.app.paths import AppPaths
from modhall.core.errors import (
    BackupNotFoundError,
    ConflictError,
    InstallPathNotConfiguredError,
    ModNotFoundError,
    PathContainmentError,
)
from modhall.core.fsutils import copyPath, ensureDir, getPathSize, pathExists, removePath
from modhall.core.security import ensureSafeChild, ensureWithinRoots
from modhall.install.service import InstallService, locationPath
from modhall.mods.types import MOD_LOCATIONS, ModFormat
from modhall.mods.walk import archiveFormat

logger = logging.getLogger(__name__)

__all__ = [
    "DeletedModEntry",
    "DeleteModResult",
    "RestoreDeletedModResult",
    "DeletedModsService",
    "backupTimestamp",
    "parseDeletedModName",
]

# <basename>_2024-01-15T12-34-56-789Z
_BACKUP_NAME = re.compile(r"^(.+)_(\d{4})-(\d{2})-(\d{2})T(\d{2})-(\d{2})-(\d{2})-(\d{3})Z$")



def backupTimestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC with ':' and '.' replaced by '-' so it is safe in file names."""
    now = now or datetime.now(timezone.utc)
    iso = now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return iso.replace(":", "-").replace(".", "-")



def parseDeletedModName(backupName: str) -> tuple[str, str] | None:
    """Returns (originalName, deletedAt ISO) or None for names we did not produce."""
    match = _BACKUP_NAME.match(backupName)
    if not match:
        return None
    name, year, month, day, hour, minute, second, millis = match.groups()
    return name, f"{year}-{month}-{day}T{hour}:{minute}:{second}.{millis}Z"



class DeletedModEntry(BaseModel):
    id: str
    originalName: str
    deletedAt: str
    backupPath: str
    size: int = 0
    format: ModFormat = "directory"



class DeleteModResult(BaseModel):
    success: bool = True
    backupPath: str



class RestoreDeletedModResult(BaseModel):
    success: bool = True
    restoredPath: str



class DeletedModsService:
    """Removal with a one-deep safety net: every delete leaves a timestamped copy."""
    def __init__(self, install: InstallService, paths: AppPaths):
        self._install = install
        self._paths = paths

    @property
    def backupRoot(self) -> Path:
        return self._paths.deletedModsRoot

    async def deleteMod(self, modPath: Path | str) -> DeleteModResult:
        info = await self._install.resolveInstallInfo()
        if not info.activePath:
            raise InstallPathNotConfiguredError()

        locationRoots = [locationPath(info, location) for location in MOD_LOCATIONS]
        locationRoots += [self._paths.disabledLocationPath(location) for location in MOD_LOCATIONS]
        target = Path(os.path.abspath(ensureWithinRoots(modPath, locationRoots, action="delete mod")))
        # Only direct children of a location root are mods; roots and files inside a mod are not
        parents = {os.path.abspath(root) for root in locationRoots if root is not None}
        if os.path.abspath(target.parent) not in parents or os.path.abspath(target) in parents:
            raise PathContainmentError(f"Cannot delete '{target}': not a mod entry of a mod folder.")
        if not await pathExists(target):
            raise ModNotFoundError()

        backupPath = self.backupRoot / f"{target.name}_{backupTimestamp()}"
        await ensureDir(self.backupRoot)
        await copyPath(target, backupPath)
        await removePath(target)

        logger.info("Deleted '%s' (backup at '%s')", target, backupPath)
        return DeleteModResult(success=True, backupPath=str(backupPath))

    async def listDeletedMods(self) -> list[DeletedModEntry]:
        root = self.backupRoot
        if not await pathExists(root):
            return []

        items = await asyncio.to_thread(lambda: sorted(root.iterdir()))
        entries: list[DeletedModEntry] = []
        for item in items:
            parsed = parseDeletedModName(item.name)
            if parsed is None:
                continue
            originalName, deletedAt = parsed
            fmt: ModFormat = "directory"
            if item.is_file():
                fmt = archiveFormat(originalName) or "directory"
            entries.append(DeletedModEntry(
                id=item.name,
                originalName=originalName,
                deletedAt=deletedAt,
                backupPath=str(item),
                size=(await getPathSize(item)) or 0,
                format=fmt,
            ))

        entries.sort(key=lambda entry: entry.deletedAt, reverse=True)
        return entries

    def _backupPathFor(self, backupId: str) -> Path:
        return ensureSafeChild(self.backupRoot, backupId)

    async def restoreDeletedMod(self, backupId: str) -> RestoreDeletedModResult:
        info = await self._install.resolveInstallInfo()
        if not info.modsPath:
            raise InstallPathNotConfiguredError("Mods folder not found.")

        backupPath = self._backupPathFor(backupId)
        if not await pathExists(backupPath):
            raise BackupNotFoundError()
        parsed = parseDeletedModName(backupId)
        if parsed is None:
            raise BackupNotFoundError("Invalid backup filename format.")

        restorePath = Path(info.modsPath) / parsed[0]
        if await pathExists(restorePath):
            raise ConflictError(f'A mod named "{parsed[0]}" already exists in the Mods folder.')

        await copyPath(backupPath, restorePath)
        await removePath(backupPath)
        logger.info("Restored '%s' to '%s'", backupId, restorePath)
        return RestoreDeletedModResult(success=True, restoredPath=str(restorePath))

    async def permanentlyDeleteMod(self, backupId: str) -> None:
        backupPath = self._backupPathFor(backupId)
        if not await pathExists(backupPath):
            raise BackupNotFoundError()
        await removePath(backupPath)
        logger.info("Permanently deleted backup '%s'", backupId)

    async def clearDeletedMods(self) -> int:
        root = self.backupRoot
        if not await pathExists(root):
            return 0
        items = await asyncio.to_thread(lambda: list(root.iterdir()))
        for item in items:
            await removePath(item)
        logger.info("Cleared %d deleted mod backups", len(items))
        return len(items)
