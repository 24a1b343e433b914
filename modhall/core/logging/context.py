# modhall/core/logging/context.py
from __future__ import annotations
import contextvars
from collections.abc import Iterator
from contextlib import contextmanager

__all__ = ["setLogContext", "getLogContext", "logContext"]

# Per-task log context (op, profileId, worldId, ...). asyncio copies it into each task.
_logContextVar: contextvars.ContextVar[dict[str, object] | None] = contextvars.ContextVar("modhall.logctx", default=None)



def setLogContext(**kvs) -> None:
    """Merge values into the current log context. None values are skipped."""
    current = dict(_logContextVar.get() or {})
    for key, value in kvs.items():
        if value is not None:
            current[key] = value
    _logContextVar.set(current)



def getLogContext() -> dict[str, object] | None:
    return _logContextVar.get()



@contextmanager
def logContext(**kvs) -> Iterator[None]:
    """
    Scoped variant of setLogContext(); the previous context is restored on exit.

        with logContext(op="apply", profileId=profile.id):
            ...
    """
    token = _logContextVar.set(dict(_logContextVar.get() or {}))
    try:
        setLogContext(**kvs)
        yield
    finally:
        _logContextVar.reset(token)
