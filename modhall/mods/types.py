# modhall/mods/types.py
from __future__ import annotations
from typing import Literal

from pydantic import BaseModel, Field

__all__ = [
    "ModFormat", "ModLocation", "ModType", "MOD_LOCATIONS",
    "ModEntry", "DependencyIssueType", "DependencyIssue",
    "ModValidationResult", "ScanResult", "ApplyResult", "AddModResult",
]

ModFormat = Literal["directory", "zip", "jar"]
ModLocation = Literal["mods", "packs", "earlyplugins"]
ModType = Literal["pack", "plugin", "early-plugin", "unknown"]

# Scan order; the final list is re-sorted by name anyway
MOD_LOCATIONS: tuple[ModLocation, ...] = ("packs", "mods", "earlyplugins")



class ModEntry(BaseModel):
    """A discovered mod, pack or plugin. Rebuilt from disk on every scan."""
    id: str
    name: str
    group: str | None = None
    version: str | None = None
    description: str | None = None
    format: ModFormat
    location: ModLocation
    path: str
    type: ModType
    entryPoint: str | None = None
    dependencies: list[str] = Field(default_factory=list)
    optionalDependencies: list[str] = Field(default_factory=list)
    includesAssetPack: bool = False
    enabled: bool = False
    size: int | None = None



DependencyIssueType = Literal["missing_dependency", "disabled_dependency", "optional_missing"]



class DependencyIssue(BaseModel):
    modId: str
    modName: str
    type: DependencyIssueType
    dependencyId: str
    message: str



class ModValidationResult(BaseModel):
    issues: list[DependencyIssue] = Field(default_factory=list)
    hasErrors: bool = False
    hasWarnings: bool = False



class ScanResult(BaseModel):
    installPath: str | None = None
    entries: list[ModEntry] = Field(default_factory=list)
    validation: ModValidationResult | None = None



class ApplyResult(BaseModel):
    profileId: str
    appliedAt: str
    moved: list[ModEntry] = Field(default_factory=list)    # entries as they are after the move
    skipped: list[ModEntry] = Field(default_factory=list)  # left in place: destination taken or no root for it
    missing: list[str] = Field(default_factory=list)       # wanted by the profile, not in the library



class AddModResult(BaseModel):
    success: bool = True
    addedPaths: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
