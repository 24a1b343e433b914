# modhall/install/service.py
from __future__ import annotations
import asyncio
import logging
from pathlib import Path

from pydantic import BaseModel, Field

from modhall.app.paths import defaultGameInstallPath
from modhall.app.state import LibraryState
from modhall.mods.types import ModLocation

logger = logging.getLogger(__name__)

__all__ = ["InstallInfo", "InstallService", "locationPath", "USER_DATA_FOLDER"]

# Layout below an install root
USER_DATA_FOLDER = "UserData"
MODS_FOLDER = "Mods"
PACKS_FOLDER = "Packs"
EARLY_PLUGINS_FOLDER = "earlyplugins"



class InstallInfo(BaseModel):
    defaultPath: str
    detectedPath: str | None = None
    activePath: str | None = None
    userDataPath: str | None = None
    modsPath: str | None = None
    packsPath: str | None = None
    earlyPluginsPath: str | None = None
    issues: list[str] = Field(default_factory=list)



def _existing(path: Path | None) -> str | None:
    return str(path) if path is not None and path.exists() else None



def locationPath(info: InstallInfo, location: ModLocation) -> Path | None:
    """
    Enabled root for a location, even when the folder does not exist yet.

    Installs without a Packs folder (older layout) keep packs in Mods.
    """
    if location == "earlyplugins":
        if info.earlyPluginsPath:
            return Path(info.earlyPluginsPath)
        return Path(info.activePath) / EARLY_PLUGINS_FOLDER if info.activePath else None

    userDataPath = info.userDataPath or (str(Path(info.activePath) / USER_DATA_FOLDER) if info.activePath else None)
    if not userDataPath:
        return None
    if location == "packs" and info.packsPath:
        return Path(info.packsPath)
    return Path(info.modsPath) if info.modsPath else Path(userDataPath) / MODS_FOLDER



class InstallService:
    def __init__(self, state: LibraryState, *, defaultPath: Path | str | None = None):
        self._state = state
        self._defaultPath = Path(defaultPath).expanduser() if defaultPath else defaultGameInstallPath()

    @property
    def defaultPath(self) -> Path:
        return self._defaultPath

    def _resolveSync(self) -> InstallInfo:
        detectedPath = self._defaultPath if self._defaultPath.exists() else None
        override = self._state.installPathOverride
        activePath = Path(override) if override else detectedPath
        userDataPath = activePath / USER_DATA_FOLDER if activePath else None

        issues: list[str] = []
        if activePath is not None and not activePath.exists():
            issues.append("Install path does not exist.")
        if userDataPath is not None and not userDataPath.exists():
            issues.append("UserData folder not found.")

        return InstallInfo(
            defaultPath=str(self._defaultPath),
            detectedPath=str(detectedPath) if detectedPath else None,
            activePath=str(activePath) if activePath else None,
            userDataPath=str(userDataPath) if userDataPath else None,
            modsPath=_existing(userDataPath / MODS_FOLDER if userDataPath else None),
            packsPath=_existing(userDataPath / PACKS_FOLDER if userDataPath else None),
            earlyPluginsPath=_existing(activePath / EARLY_PLUGINS_FOLDER if activePath else None),
            issues=issues,
        )

    async def resolveInstallInfo(self) -> InstallInfo:
        return await asyncio.to_thread(self._resolveSync)

    def setInstallPath(self, path: Path | str | None) -> None:
        value = str(Path(path).expanduser()) if path else None
        self._state.setInstallPathOverride(value)
        logger.info("Install path override set to %s", value or "<auto-detect>")
