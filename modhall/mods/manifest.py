# modhall/mods/manifest.py
from __future__ import annotations
import asyncio
import logging
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import json5

from modhall.mods.types import ModFormat

logger = logging.getLogger(__name__)

__all__ = [
    "Manifest",
    "ManifestRead",
    "MANIFEST_FILENAME",
    "FOLDER_MANIFEST_CANDIDATES",
    "readManifestFromFolder",
    "readManifestFromArchive",
    "readManifest",
]

# Raw manifest document. Fields of interest: Name, Group, Version, Description,
# Main, Dependencies, OptionalDependencies, IncludesAssetPack. Everything else rides along.
Manifest = dict[str, Any]

MANIFEST_FILENAME = "manifest.json"

# Probe order inside a mod folder. Plugin projects keep theirs under src/main/resources.
FOLDER_MANIFEST_CANDIDATES: tuple[tuple[str, ...], ...] = (
    (MANIFEST_FILENAME,),
    ("Server", MANIFEST_FILENAME),
    ("src", "main", "resources", MANIFEST_FILENAME),
)

# Lower-cased archive member names, exact match first
ARCHIVE_MANIFEST_CANDIDATES: tuple[str, ...] = ("manifest.json", "server/manifest.json")
CLASS_SUFFIX = ".class"



@dataclass(frozen=True)
class ManifestRead:
    manifest: Manifest | None
    hasClasses: bool = False
    manifestPath: str | None = None



def _parseManifestText(text: str) -> Manifest | None:
    raw = json5.loads(text)
    return raw if isinstance(raw, dict) else None



def _loadManifest(manifestPath: Path) -> Manifest | None:
    try:
        return _parseManifestText(manifestPath.read_text(encoding="utf-8-sig"))
    except (OSError, ValueError) as err:
        logger.debug("Skipping manifest candidate '%s': %s", manifestPath, err)
        return None



def readManifestFromFolder(folderPath: Path) -> Manifest | None:
    """First candidate that parses wins. Missing or broken manifests are not errors."""
    for parts in FOLDER_MANIFEST_CANDIDATES:
        candidate = folderPath.joinpath(*parts)
        if not candidate.is_file():
            continue
        manifest = _loadManifest(candidate)
        if manifest is not None:
            return manifest
    return None



def readManifestFromArchive(archivePath: Path) -> ManifestRead:
    """
    Reads manifest.json (or Server/manifest.json) out of a zip/jar and notes
    whether the archive carries compiled classes.

    Raises zipfile.BadZipFile, OSError or ValueError; callers decide how soft to be.
    """
    with zipfile.ZipFile(archivePath) as archive:
        names = archive.namelist()
        lowered = {name.lower(): name for name in reversed(names)}
        hasClasses = any(name.lower().endswith(CLASS_SUFFIX) for name in names)

        memberName = next((lowered[key] for key in ARCHIVE_MANIFEST_CANDIDATES if key in lowered), None)
        if memberName is None:
            return ManifestRead(manifest=None, hasClasses=hasClasses, manifestPath=None)

        text = archive.read(memberName).decode("utf-8-sig")

    return ManifestRead(
        manifest=_parseManifestText(text),
        hasClasses=hasClasses,
        manifestPath=memberName,
    )



def _readManifestSync(path: Path, format: ModFormat) -> ManifestRead:
    if format == "directory":
        return ManifestRead(manifest=readManifestFromFolder(path))
    try:
        return readManifestFromArchive(path)
    except (zipfile.BadZipFile, OSError, ValueError) as err:
        logger.warning("Unreadable archive '%s': %s", path, err)
        return ManifestRead(manifest=None)



async def readManifest(path: Path | str, format: ModFormat) -> ManifestRead:
    """Soft read for either form: failures come back as an empty ManifestRead."""
    return await asyncio.to_thread(_readManifestSync, Path(path), format)
