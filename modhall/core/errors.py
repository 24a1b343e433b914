# modhall/core/errors.py
from __future__ import annotations

__all__ = [
    "ModHallError",
    "InstallPathNotConfiguredError",
    "ProfileNotFoundError",
    "ReadonlyProfileError",
    "PathContainmentError",
    "ModNotFoundError",
    "BackupNotFoundError",
    "ConflictError",
    "WorldConfigError",
]



class ModHallError(Exception):
    """Base class for every error the library raises on purpose."""
    defaultMessage = "Mod library operation failed."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.defaultMessage)



class InstallPathNotConfiguredError(ModHallError):
    """No active game installation could be resolved."""
    defaultMessage = "Game install path not configured."



class ProfileNotFoundError(ModHallError):
    defaultMessage = "Profile not found."



class ReadonlyProfileError(ModHallError):
    defaultMessage = "Cannot modify readonly profile."



class PathContainmentError(ModHallError):
    """A path resolved outside of every root it was allowed to touch."""
    defaultMessage = "Path is outside allowed mod folders."



class ModNotFoundError(ModHallError):
    defaultMessage = "Mod not found at specified path."



class BackupNotFoundError(ModHallError):
    defaultMessage = "Backup not found."



class ConflictError(ModHallError):
    """Destination already taken."""
    defaultMessage = "Destination already exists."



class WorldConfigError(ModHallError):
    defaultMessage = "World config could not be read or written."
