# modhall/mods/entry.py
from __future__ import annotations
from typing import Any

from modhall.mods.enablement import WorldOverrideMap, resolveEnabled, worldSignalFor
from modhall.mods.manifest import Manifest
from modhall.mods.types import ModEntry, ModFormat, ModLocation, ModType

__all__ = ["buildEntry", "readManifestDependencies", "resolveModType", "modIdFor"]



def _str(manifest: Manifest | None, key: str) -> str | None:
    value = manifest.get(key) if manifest else None
    return value if isinstance(value, str) and value else None



def readManifestDependencies(value: Any) -> list[str]:
    """
    Dependencies come as ["a", "b"] or {"a": ">=1.0", "b": "*"}; version ranges are ignored.
    """
    if isinstance(value, list):
        return [item for item in value if isinstance(item, str)]
    if isinstance(value, dict):
        return [str(key) for key in value]
    return []



def resolveModType(
    *,
    location: ModLocation,
    manifest: Manifest | None,
    format: ModFormat,
    hasClasses: bool = False,
) -> ModType:
    if location == "earlyplugins":
        return "early-plugin"
    if manifest is not None and isinstance(manifest.get("Main"), str):
        return "plugin"
    if hasClasses:
        return "plugin"
    if manifest is not None:
        return "pack"
    if location == "packs" or format == "directory":
        return "pack"
    return "unknown"



def modIdFor(name: str, group: str | None) -> str:
    return f"{group}:{name}" if group else name



def buildEntry(
    manifest: Manifest | None,
    fallbackName: str,
    format: ModFormat,
    location: ModLocation,
    path: str,
    *,
    hasClasses: bool = False,
    enabledOverride: bool | None = None,
    worldOverrides: WorldOverrideMap | None = None,
    size: int | None = None,
) -> ModEntry:
    name = _str(manifest, "Name") or fallbackName
    group = _str(manifest, "Group")
    modId = modIdFor(name, group)
    main = manifest.get("Main") if manifest else None

    return ModEntry(
        id=modId,
        name=name,
        group=group,
        version=_str(manifest, "Version"),
        description=_str(manifest, "Description"),
        format=format,
        location=location,
        path=path,
        type=resolveModType(location=location, manifest=manifest, format=format, hasClasses=hasClasses),
        entryPoint=main if isinstance(main, str) else None,
        dependencies=readManifestDependencies(manifest.get("Dependencies") if manifest else None),
        optionalDependencies=readManifestDependencies(manifest.get("OptionalDependencies") if manifest else None),
        includesAssetPack=bool(manifest) and manifest.get("IncludesAssetPack") is True,
        enabled=resolveEnabled(enabledOverride, worldSignalFor(modId, worldOverrides)),
        size=size,
    )
