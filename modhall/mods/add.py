# modhall/mods/add.py
from __future__ import annotations
import logging
from collections.abc import Iterable
from pathlib import Path

from modhall.core.errors import ConflictError, InstallPathNotConfiguredError, ModNotFoundError
from modhall.core.fsutils import copyPath, ensureDir, pathExists
from modhall.install.service import InstallInfo
from modhall.mods.types import AddModResult

logger = logging.getLogger(__name__)

__all__ = ["addMods"]



async def addMods(info: InstallInfo, sourcePaths: Iterable[Path | str]) -> AddModResult:
    """
    Copies files or folders into the Mods folder. Never overwrites: a taken
    name is skipped. Raises when nothing was added but something was skipped.
    """
    if not info.userDataPath:
        raise InstallPathNotConfiguredError("Mods folder not found.")
    modsPath = Path(info.modsPath) if info.modsPath else Path(info.userDataPath) / "Mods"
    await ensureDir(modsPath)

    added: list[str] = []
    skipped: list[str] = []
    for source in map(Path, sourcePaths):
        if not await pathExists(source):
            raise ModNotFoundError(f"Source '{source}' does not exist.")
        destination = modsPath / source.name
        if await pathExists(destination):
            skipped.append(f"Skipped {source.name}: already exists in Mods folder.")
            continue
        await copyPath(source, destination)
        added.append(str(destination))

    if not added and skipped:
        raise ConflictError("No mods were added. " + " ".join(skipped))

    logger.info("Added %d mods (%d skipped)", len(added), len(skipped))
    return AddModResult(success=True, addedPaths=added, skipped=skipped)
