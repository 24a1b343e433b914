# modhall/core/security.py
from __future__ import annotations
import os
from collections.abc import Iterable
from pathlib import Path

from modhall.core.errors import PathContainmentError

__all__ = ["isWithinPath", "ensureWithinRoots", "ensureSafeChild"]



def isWithinPath(target: Path | str, root: Path | str) -> bool:
    """True when `target` is `root` itself or anything below it (lexically, no symlink resolution)."""
    try:
        relative = os.path.relpath(os.path.abspath(target), os.path.abspath(root))
    except ValueError:
        # Different drives on Windows
        return False
    if relative == os.curdir:
        return True
    if relative == os.pardir or relative.startswith(os.pardir + os.sep):
        return False
    return not os.path.isabs(relative)



def ensureWithinRoots(target: Path | str, roots: Iterable[Path | str | None], *, action: str = "operate on") -> Path:
    validRoots = [root for root in roots if root]
    if not any(isWithinPath(target, root) for root in validRoots):
        raise PathContainmentError(f"Cannot {action} '{target}': path is outside allowed mod folders.")
    return Path(target)



def ensureSafeChild(root: Path | str, name: str) -> Path:
    """
    Joins a single user-supplied name (world id, backup id) onto `root`.
    Anything that would land outside `root`, or on `root` itself, is rejected.
    """
    name = str(name or "").strip()
    if not name or name in (os.curdir, os.pardir):
        raise PathContainmentError(f"Invalid name '{name}'.")
    candidate = Path(os.path.abspath(Path(root) / name))
    if candidate == Path(os.path.abspath(root)) or not isWithinPath(candidate, root):
        raise PathContainmentError(f"Invalid path detected for '{name}'.")
    return candidate
