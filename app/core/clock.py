"""Time sources injected into operation handlers."""

import time
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        """Current instant, timezone-aware UTC."""
        ...

    def monotonic(self) -> float:
        """Monotonic reading in seconds, for measuring durations."""
        ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(UTC)

    def monotonic(self) -> float:
        return time.perf_counter()


class FixedClock:
    """Clock frozen at a given instant. Used by tests."""

    def __init__(self, instant: datetime, reading: float = 0.0):
        if instant.tzinfo is None:
            raise ValueError("FixedClock needs a timezone-aware instant")
        self.instant = instant
        self.reading = reading

    def now(self) -> datetime:
        return self.instant

    def monotonic(self) -> float:
        return self.reading

    def advance(self, seconds: float) -> None:
        self.instant = self.instant + timedelta(seconds=seconds)
        self.reading += seconds


def isoformat_utc(instant: datetime) -> str:
    """Render an instant as ISO-8601 in UTC with a trailing 'Z'."""
    return instant.astimezone(UTC).isoformat().replace("+00:00", "Z")
