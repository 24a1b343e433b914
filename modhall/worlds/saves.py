# modhall/worlds/saves.py
from __future__ import annotations
import asyncio
import logging
from collections.abc import Iterable, Set
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from modhall.core.errors import WorldConfigError
from modhall.core.fsutils import readJsonFile, writeJsonFile
from modhall.core.security import ensureSafeChild
from modhall.db.settings import SETTINGS_KEYS, SettingsStore
from modhall.install.service import InstallService
from modhall.mods.types import ModEntry

logger = logging.getLogger(__name__)

__all__ = [
    "WorldInfo",
    "WorldsState",
    "WorldService",
    "SAVES_FOLDER",
    "WORLD_CONFIG_FILENAME",
    "readWorldModOverridesFromConfig",
    "applyEnabledSetToConfig",
]

SAVES_FOLDER = "Saves"
WORLD_CONFIG_FILENAME = "config.json"
PREVIEW_FILENAME = "preview.png"

# Layout:
#   <UserData>/Saves/<worldId>/config.json   { "Mods": { "<modId>": { "Enabled": bool, ... } }, ... }
#   <UserData>/Saves/<worldId>/preview.png   optional thumbnail



class WorldInfo(BaseModel):
    id: str
    name: str
    path: str
    configPath: str
    previewPath: str | None = None
    lastModified: str



class WorldsState(BaseModel):
    worlds: list[WorldInfo] = Field(default_factory=list)
    selectedWorldId: str | None = None



def readWorldModOverridesFromConfig(config: Any) -> dict[str, bool]:
    """Mods.<id>.Enabled booleans; everything non-boolean is ignored."""
    overrides: dict[str, bool] = {}
    mods = config.get("Mods") if isinstance(config, dict) else None
    if not isinstance(mods, dict):
        return overrides
    for modId, value in mods.items():
        if isinstance(value, dict) and isinstance(value.get("Enabled"), bool):
            overrides[str(modId)] = value["Enabled"]
    return overrides



def applyEnabledSetToConfig(config: dict[str, Any], enabledIds: Set[str], entries: Iterable[ModEntry]) -> dict[str, Any]:
    """
    Returns a copy of `config` where every entry has an explicit Mods.<id>.Enabled.
    Unrelated top-level keys and unrelated per-mod keys are kept as they were.
    """
    out = dict(config)
    existingMods = out.get("Mods")
    mods: dict[str, Any] = dict(existingMods) if isinstance(existingMods, dict) else {}
    for entry in entries:
        existing = mods.get(entry.id)
        modConfig = dict(existing) if isinstance(existing, dict) else {}
        modConfig["Enabled"] = entry.id in enabledIds
        mods[entry.id] = modConfig
    out["Mods"] = mods
    return out



def _mtime(path: Path) -> float:
    return path.stat().st_mtime



class WorldService:
    def __init__(self, install: InstallService, store: SettingsStore):
        self._install = install
        self._store = store

    # ----- Discovery -----

    @staticmethod
    def _worldConfigPathsSync(userDataPath: Path) -> list[Path]:
        savesRoot = userDataPath / SAVES_FOLDER
        if not savesRoot.is_dir():
            return []
        configs: list[Path] = []
        for child in sorted(savesRoot.iterdir()):
            configPath = child / WORLD_CONFIG_FILENAME
            if child.is_dir() and configPath.is_file():
                configs.append(configPath)
        return configs

    async def worldConfigPaths(self, userDataPath: Path | str | None) -> list[Path]:
        if not userDataPath:
            return []
        try:
            return await asyncio.to_thread(self._worldConfigPathsSync, Path(userDataPath))
        except OSError as err:
            logger.warning("Could not list worlds under '%s': %s", userDataPath, err)
            return []

    async def activeWorldConfigPath(self, userDataPath: Path | str | None) -> Path | None:
        """The most recently modified world config counts as the active world."""
        latest: tuple[float, Path] | None = None
        for configPath in await self.worldConfigPaths(userDataPath):
            try:
                mtime = await asyncio.to_thread(_mtime, configPath)
            except OSError:
                continue
            if latest is None or mtime > latest[0]:
                latest = (mtime, configPath)
        return latest[1] if latest else None

    async def _configPathFor(self, worldId: str) -> Path | None:
        info = await self._install.resolveInstallInfo()
        if not info.userDataPath:
            return None
        savesRoot = Path(info.userDataPath) / SAVES_FOLDER
        return ensureSafeChild(savesRoot, worldId) / WORLD_CONFIG_FILENAME

    # ----- Overrides (read side of the scan) -----

    async def readActiveWorldModOverrides(self, userDataPath: Path | str | None) -> dict[str, bool] | None:
        configPath = await self.activeWorldConfigPath(userDataPath)
        if configPath is None:
            return None
        try:
            return readWorldModOverridesFromConfig(await readJsonFile(configPath))
        except (OSError, ValueError) as err:
            logger.warning("Ignoring unreadable world config '%s': %s", configPath, err)
            return None

    async def readWorldModOverrides(self, worldId: str) -> dict[str, bool] | None:
        config = await self.getWorldConfig(worldId)
        if not isinstance(config, dict) or not isinstance(config.get("Mods"), dict):
            return None
        return readWorldModOverridesFromConfig(config)

    # ----- Write side -----

    async def updateWorldModConfig(self, configPath: Path, enabledIds: Set[str], entries: Iterable[ModEntry]) -> None:
        try:
            config = await readJsonFile(configPath)
        except (OSError, ValueError) as err:
            # Never overwrite a config we could not parse
            raise WorldConfigError(f"Cannot read world config '{configPath}': {err}") from err
        if not isinstance(config, dict):
            raise WorldConfigError(f"World config '{configPath}' is not a JSON object.")

        try:
            await writeJsonFile(configPath, applyEnabledSetToConfig(config, enabledIds, entries))
        except OSError as err:
            raise WorldConfigError(f"Cannot write world config '{configPath}': {err}") from err

    async def syncActiveWorldModConfig(
        self,
        userDataPath: Path | str | None,
        enabledIds: Set[str],
        entries: Iterable[ModEntry],
    ) -> Path | None:
        """Best effort: returns the config written, or None when nothing was written."""
        configPath = await self.activeWorldConfigPath(userDataPath)
        if configPath is None:
            logger.debug("No world config found, skipping world sync")
            return None
        try:
            await self.updateWorldModConfig(configPath, enabledIds, entries)
        except WorldConfigError as err:
            logger.warning("World config sync failed: %s", err)
            return None
        return configPath

    # ----- World listing / per-world edits -----

    @staticmethod
    def _listWorldsSync(savesRoot: Path) -> list[WorldInfo]:
        if not savesRoot.is_dir():
            return []
        worlds: list[WorldInfo] = []
        for child in savesRoot.iterdir():
            configPath = child / WORLD_CONFIG_FILENAME
            if not child.is_dir() or not configPath.is_file():
                continue
            try:
                modified = datetime.fromtimestamp(_mtime(child), tz=timezone.utc)
            except OSError as err:
                logger.warning("Skipping world '%s': %s", child.name, err)
                continue
            previewPath = child / PREVIEW_FILENAME
            worlds.append(WorldInfo(
                id=child.name,
                name=child.name,
                path=str(child),
                configPath=str(configPath),
                previewPath=str(previewPath) if previewPath.is_file() else None,
                lastModified=modified.isoformat(),
            ))
        worlds.sort(key=lambda world: world.lastModified, reverse=True)
        return worlds

    async def listWorlds(self) -> WorldsState:
        info = await self._install.resolveInstallInfo()
        if not info.userDataPath:
            return WorldsState()
        try:
            worlds = await asyncio.to_thread(self._listWorldsSync, Path(info.userDataPath) / SAVES_FOLDER)
        except OSError as err:
            logger.warning("Could not list worlds: %s", err)
            worlds = []
        selected = self._store.get(SETTINGS_KEYS.selectedWorld) or (worlds[0].id if worlds else None)
        return WorldsState(worlds=worlds, selectedWorldId=selected)

    async def getWorldConfig(self, worldId: str) -> dict[str, Any] | None:
        configPath = await self._configPathFor(worldId)
        if configPath is None or not configPath.is_file():
            return None
        try:
            config = await readJsonFile(configPath)
        except (OSError, ValueError) as err:
            logger.warning("Unreadable world config '%s': %s", configPath, err)
            return None
        return config if isinstance(config, dict) else None

    async def setModEnabled(self, worldId: str, modId: str, enabled: bool) -> None:
        configPath = await self._configPathFor(worldId)
        if configPath is None:
            raise WorldConfigError("Game UserData path not found.")
        if not configPath.is_file():
            raise WorldConfigError(f"World config.json not found for '{worldId}'.")

        try:
            config = await readJsonFile(configPath)
        except (OSError, ValueError) as err:
            raise WorldConfigError(f"Cannot read world config '{configPath}': {err}") from err
        if not isinstance(config, dict):
            raise WorldConfigError(f"World config '{configPath}' is not a JSON object.")

        mods = config.get("Mods")
        if not isinstance(mods, dict):
            mods = config["Mods"] = {}
        modConfig = mods.get(modId)
        if not isinstance(modConfig, dict):
            modConfig = mods[modId] = {}
        modConfig["Enabled"] = bool(enabled)

        await writeJsonFile(configPath, config)
        logger.info("World '%s': %s %s", worldId, modId, "enabled" if enabled else "disabled")

    def setSelectedWorld(self, worldId: str | None) -> None:
        self._store.set(SETTINGS_KEYS.selectedWorld, worldId or None)
