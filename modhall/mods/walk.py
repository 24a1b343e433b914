# modhall/mods/walk.py
from __future__ import annotations
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from modhall.mods.types import ModFormat, ModLocation

__all__ = ["DirItem", "Candidate", "listDirectory", "iterCandidates", "archiveFormat"]



@dataclass(frozen=True)
class DirItem:
    """One directory listing row. Plain data so traversal can be fed without a disk."""
    name: str
    isDir: bool
    isFile: bool



@dataclass(frozen=True)
class Candidate:
    path: Path
    name: str
    format: ModFormat
    location: ModLocation



def listDirectory(root: Path) -> list[DirItem]:
    """Immediate children of `root`. Raises OSError; the scanner decides what that means."""
    with os.scandir(root) as it:
        return [
            DirItem(name=item.name, isDir=item.is_dir(), isFile=item.is_file())
            for item in it
        ]



def archiveFormat(fileName: str) -> ModFormat | None:
    lowered = fileName.lower()
    if lowered.endswith(".jar"):
        return "jar"
    if lowered.endswith(".zip"):
        return "zip"
    return None



def iterCandidates(root: Path, location: ModLocation, listing: Iterable[DirItem]) -> Iterator[Candidate]:
    """
    Which children of a location root are mods:
      packs        - every subdirectory
      mods         - every subdirectory, plus loose .zip/.jar files
      earlyplugins - loose .jar files only
    """
    for item in sorted(listing, key=lambda row: row.name):
        fullPath = root / item.name
        if location == "earlyplugins":
            if item.isFile and archiveFormat(item.name) == "jar":
                yield Candidate(path=fullPath, name=item.name, format="jar", location=location)
            continue

        if item.isDir:
            yield Candidate(path=fullPath, name=item.name, format="directory", location=location)
            continue

        if location == "mods" and item.isFile:
            fmt = archiveFormat(item.name)
            if fmt is not None:
                yield Candidate(path=fullPath, name=item.name, format=fmt, location=location)
