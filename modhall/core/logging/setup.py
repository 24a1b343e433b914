# modhall/core/logging/setup.py
from __future__ import annotations
import logging
import logging.handlers
from pathlib import Path

from modhall.app.settings import settings, settingsBool, settingsInt
from .filters import RecurringSuppressFilter
from .formatters import DevFormatter, JsonFormatter

__all__ = ["NO_PROPAGATE", "configureLogging"]



# Library loggers that should not bubble into our root handlers
NO_PROPAGATE = [
    "uvicorn", "uvicorn.access", "uvicorn.error",
    "fastapi", "asyncio",
    "httpcore.connection", "httpcore.http11",
    "httpx",
]



def configureLogging(*, devMode: bool | None = None, logFile: Path | str | None = None) -> None:
    """
    Install the process-wide logging configuration.

    Dev:
      - console, human readable, DEBUG
      - JSON lines file, DEBUG
    Prod:
      - console INFO
      - JSON lines file INFO, rotated at 10 MiB x 5
    Optional recurring-message suppression via debug.suppressRecurringMessages.enabled.
    """
    if devMode is None:
        devMode = settingsBool("debug.devModeEnabled", False)
    rootLevel = logging.DEBUG if devMode else logging.INFO

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(rootLevel)

    for name in NO_PROPAGATE:
        logging.getLogger(name).propagate = False

    consoleHandler = logging.StreamHandler()
    consoleHandler.setLevel(rootLevel)
    consoleHandler.setFormatter(DevFormatter())
    handlers: list[logging.Handler] = [consoleHandler]

    if logFile is None:
        logFile = settings("logging.file")
    if logFile:
        logPath = Path(logFile).expanduser()
        logPath.parent.mkdir(parents=True, exist_ok=True)
        fileHandler = logging.handlers.RotatingFileHandler(
            logPath,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        fileHandler.setLevel(rootLevel)
        fileHandler.setFormatter(JsonFormatter())
        handlers.append(fileHandler)

    if settingsBool("debug.suppressRecurringMessages.enabled", False):
        levelName = str(settings("debug.suppressRecurringMessages.summaryLevel", "INFO")).upper()
        suppressFilter = RecurringSuppressFilter(
            windowSeconds=settingsInt("debug.suppressRecurringMessages.windowSeconds", 60),
            maxPerWindow=settingsInt("debug.suppressRecurringMessages.maxPerWindow", 5),
            summaryLevel=getattr(logging, levelName, logging.INFO),
        )
        for handler in handlers:
            handler.addFilter(suppressFilter)

    for handler in handlers:
        root.addHandler(handler)

    # Per-logger tweaks (reduce noise)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)
