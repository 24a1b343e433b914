# modhall/app/paths.py
from __future__ import annotations
import os
import platform
from dataclasses import dataclass
from pathlib import Path

__all__ = [
    "DISABLED_FOLDER",
    "DELETED_MODS_FOLDER",
    "DB_FILENAME",
    "AppPaths",
    "defaultGameInstallPath",
]


# Folders under the application data directory
DISABLED_FOLDER = "disabled"
DELETED_MODS_FOLDER = "deleted-mods"
DB_FILENAME = "modhall.sqlite"
LOG_FILENAME = "modhall.log"



@dataclass(frozen=True)
class AppPaths:
    """
    Where the manager keeps its own files. Nothing here lives inside the game
    install; the disabled mirror in particular must survive game updates.

      <appDataDir>/disabled/<location>/   disabled mirror, one folder per location
      <appDataDir>/deleted-mods/          timestamped backups of removed mods
      <appDataDir>/modhall.sqlite         profiles + scalar settings
    """
    appDataDir: Path
    disabledRoot: Path
    deletedModsRoot: Path
    databasePath: Path
    logFile: Path

    @classmethod
    def fromDir(cls, appDataDir: Path | str) -> AppPaths:
        base = Path(appDataDir).expanduser().resolve()
        return cls(
            appDataDir=base,
            disabledRoot=base / DISABLED_FOLDER,
            deletedModsRoot=base / DELETED_MODS_FOLDER,
            databasePath=base / DB_FILENAME,
            logFile=base / LOG_FILENAME,
        )

    def disabledLocationPath(self, location: str) -> Path:
        return self.disabledRoot / location



def defaultGameInstallPath() -> Path:
    system = platform.system().lower()
    if system.startswith("win"):
        return Path(os.environ.get("APPDATA", "")) / "Hytale"
    if system == "darwin":
        return Path.home() / "Library" / "Application Support" / "Hytale"
    # XDG base directory, falling back to ~/.local/share
    xdgDataHome = os.environ.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(xdgDataHome) / "Hytale"
