"""System clock adapter."""

import time
import uuid
from datetime import date, datetime
from zoneinfo import ZoneInfo


class SystemClock:
    """
    Wall-clock implementation of the Clock protocol.

    `today()` uses the configured IANA timezone, or the machine's local time
    when none is set. `now()` returns epoch milliseconds and is bumped so that
    two calls never return the same value within a process.
    """

    def __init__(self, timezone: str = ""):
        self.tz = ZoneInfo(timezone) if timezone else None
        self._last_now = 0

    def today(self) -> date:
        return datetime.now(self.tz).date()

    def now(self) -> int:
        current = time.time_ns() // 1_000_000
        if current <= self._last_now:
            current = self._last_now + 1
        self._last_now = current
        return current

    def new_id(self) -> str:
        return uuid.uuid4().hex
