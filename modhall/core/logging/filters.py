# modhall/core/logging/filters.py
from __future__ import annotations
import logging
import threading
import time
from collections import defaultdict, deque

__all__ = ["RecurringSuppressFilter"]

MAX_KEY_LEN = 512



class RecurringSuppressFilter(logging.Filter):
    """
    Drops identical messages once more than `maxPerWindow` of them arrived
    within the last `windowSeconds`. When the key is allowed through again a
    single summary line reports how many were dropped.

    A scan over a broken library can emit the same "unreadable manifest"
    warning for every entry on every rescan; this keeps the console usable.

    Key = (logger name, level, whitespace-squashed message)
    """
    def __init__(
            self,
            *,
            windowSeconds: int = 60,
            maxPerWindow: int = 5,
            summaryLevel: int = logging.INFO,
    ):
        super().__init__()
        self.windowSeconds = max(1, int(windowSeconds))
        self.maxPerWindow = max(1, int(maxPerWindow))
        self.summaryLevel = int(summaryLevel)
        self._seen: dict[tuple[str, int, str], deque[float]] = defaultdict(deque)
        self._dropped: dict[tuple[str, int, str], int] = defaultdict(int)
        self._lock = threading.Lock()

    @staticmethod
    def _keyOf(record: logging.LogRecord) -> tuple[str, int, str]:
        try:
            text = record.getMessage()
        except Exception:
            text = str(record.msg)
        text = " ".join(text.split())[:MAX_KEY_LEN]
        return (record.name, record.levelno, text)

    def _flushDropped(self, key: tuple[str, int, str]) -> None:
        count = self._dropped.pop(key, 0)
        if count <= 0:
            return
        loggerName, _level, text = key
        logging.getLogger(loggerName).log(
            self.summaryLevel,
            "Suppressed %d repeated logs: %s",
            count,
            text,
            extra={"_noRecurringSuppress": True},
        )

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "_noRecurringSuppress", False):
            return True

        now = time.monotonic()
        key = self._keyOf(record)
        with self._lock:
            window = self._seen[key]
            while window and window[0] < now - self.windowSeconds:
                window.popleft()
            window.append(now)
            if len(window) <= self.maxPerWindow:
                flush = self._dropped.get(key, 0) > 0
            else:
                self._dropped[key] += 1
                return False

        # Emitted outside the lock; the summary record re-enters filter()
        if flush:
            self._flushDropped(key)
        return True
