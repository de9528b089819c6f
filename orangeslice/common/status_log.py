# orangeslice/common/status_log.py
from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Deque, List, Optional

from orangeslice.common.logging import get_logger

logger = get_logger("orangeslice.status")


@dataclass(frozen=True)
class StatusLine:
    at: datetime
    level: str
    message: str

    def as_dict(self):
        return asdict(self)

    def __str__(self) -> str:
        return f"[{self.at.strftime('%H:%M:%S')}] {self.level}: {self.message}"


class StatusLog:
    """
    Bounded, thread-safe log of human-readable status/error lines surfaced in
    the admin view. Each line is also forwarded to the regular logger.
    """

    def __init__(self, maxlen: int = 50) -> None:
        self._lines: Deque[StatusLine] = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def append(self, message: str, level: str = "INFO") -> StatusLine:
        line = StatusLine(at=datetime.now(timezone.utc), level=level.upper(), message=message)
        with self._lock:
            self._lines.append(line)
        logger.log(getattr(logging, line.level, logging.INFO), message)
        return line

    def info(self, message: str) -> StatusLine:
        return self.append(message, "INFO")

    def error(self, message: str) -> StatusLine:
        return self.append(message, "ERROR")

    def lines(self, limit: Optional[int] = None) -> List[StatusLine]:
        """Newest last. `limit` keeps only the most recent N lines."""
        with self._lock:
            out = list(self._lines)
        if limit is not None:
            out = out[-limit:] if limit > 0 else []
        return out

    def latest(self) -> Optional[StatusLine]:
        with self._lock:
            return self._lines[-1] if self._lines else None

    def clear(self) -> None:
        with self._lock:
            self._lines.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._lines)
