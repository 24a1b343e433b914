# modhall/core/logging/formatters.py
from __future__ import annotations

import json
import logging

from .context import getLogContext

__all__ = ["DevFormatter", "JsonFormatter", "CONTEXT_KEYS"]

# Context keys rendered by the console formatter, in this order
CONTEXT_KEYS: tuple[str, ...] = ("op", "profileId", "worldId")



class JsonFormatter(logging.Formatter):
    """One JSON object per line, for the rotating log file."""
    def format(self, record: logging.LogRecord) -> str:
        base: dict[str, object] = {
            "ts": int(record.created * 1000),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
            "ctx": getLogContext() or {},
            "where": f"{record.module}:{record.lineno}",
            "task": getattr(record, "taskName", None),
        }

        if record.exc_info:
            excType, excValue, _tb = record.exc_info
            try:
                base["exc"] = {
                    "type": getattr(excType, "__name__", "Error"),
                    "message": str(excValue),
                    "stack": self.formatException(record.exc_info),
                }
            except Exception:
                base["exc"] = {"type": "Error", "message": "format failed", "stack": None}

        # default=str keeps Paths and other odd context values printable
        return json.dumps(base, ensure_ascii=False, default=str, separators=(",", ":"))



class DevFormatter(logging.Formatter):
    """Human-friendly console formatter."""
    def format(self, record: logging.LogRecord) -> str:
        ctx = getLogContext() or {}
        parts = [str(ctx[key]) for key in CONTEXT_KEYS if ctx.get(key)]
        ctxStr = f" [{'/'.join(parts)}]" if parts else ""

        msg = record.getMessage()
        if record.exc_info:
            msg += "\n" + self.formatException(record.exc_info)
        if record.stack_info:
            msg += "\n" + str(record.stack_info)
        return f"{record.levelname}: [{record.name}] {msg}{ctxStr}"
