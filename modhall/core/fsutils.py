# modhall/core/fsutils.py
from __future__ import annotations
import asyncio
import errno
import json
import logging
import os
import shutil
from pathlib import Path
from typing import Any

import json5

logger = logging.getLogger(__name__)

__all__ = [
    "pathExists", "getPathSize", "ensureDir", "copyPath",
    "removePath", "movePath", "readJsonFile", "writeJsonFile",
]

# Every helper here is a thin async shell around blocking filesystem calls.
# The event loop never touches the disk directly.



async def pathExists(target: Path | str) -> bool:
    return await asyncio.to_thread(os.path.lexists, target)



def _pathSizeSync(target: Path) -> int | None:
    try:
        if target.is_symlink() or target.is_file():
            return target.lstat().st_size
        if target.is_dir():
            total = 0
            for child in target.iterdir():
                childSize = _pathSizeSync(child)
                if childSize is not None:
                    total += childSize
            return total
        return None
    except OSError as err:
        logger.debug("Could not size '%s': %s", target, err)
        return None



async def getPathSize(target: Path | str) -> int | None:
    """Byte size of a file, or the recursive total of a directory. None when unreadable."""
    return await asyncio.to_thread(_pathSizeSync, Path(target))



async def ensureDir(target: Path | str) -> None:
    await asyncio.to_thread(Path(target).mkdir, parents=True, exist_ok=True)



def _copyPathSync(source: Path, destination: Path) -> None:
    if source.is_dir() and not source.is_symlink():
        shutil.copytree(source, destination, symlinks=True)
        return
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, destination, follow_symlinks=False)



async def copyPath(source: Path | str, destination: Path | str) -> None:
    await asyncio.to_thread(_copyPathSync, Path(source), Path(destination))



def _removePathSync(target: Path) -> None:
    if target.is_dir() and not target.is_symlink():
        shutil.rmtree(target)
    else:
        target.unlink(missing_ok=True)



async def removePath(target: Path | str) -> None:
    await asyncio.to_thread(_removePathSync, Path(target))



def _movePathSync(source: Path, destination: Path) -> None:
    destination.parent.mkdir(parents=True, exist_ok=True)
    try:
        os.rename(source, destination)
    except OSError as err:
        if err.errno != errno.EXDEV:
            raise
        # Cross-device: the source only goes away once the copy is complete
        logger.debug("Cross-device move '%s' -> '%s', copying", source, destination)
        _copyPathSync(source, destination)
        _removePathSync(source)



async def movePath(source: Path | str, destination: Path | str) -> None:
    await asyncio.to_thread(_movePathSync, Path(source), Path(destination))



def _readJsonSync(path: Path) -> Any:
    return json5.loads(path.read_text(encoding="utf-8-sig"))



async def readJsonFile(path: Path | str) -> Any:
    """Lenient read (JSON5 superset: comments, trailing commas). Raises OSError/ValueError."""
    return await asyncio.to_thread(_readJsonSync, Path(path))



def _writeJsonSync(path: Path, data: Any) -> None:
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")



async def writeJsonFile(path: Path | str, data: Any) -> None:
    """Strict JSON out; the game does not read JSON5."""
    await asyncio.to_thread(_writeJsonSync, Path(path), data)
