import math
from datetime import datetime, timedelta
from typing import Callable, Optional


class AttemptTimer:
    """
    Time budget of a single attempt.

    Only the start timestamp and the duration are needed; remaining time is
    derived on demand. The expiry callback runs at most once per timer, and
    never after `stop()` has been called for a manual submission.
    """

    def __init__(
        self,
        duration_minutes: int,
        started_at: datetime,
        on_expire: Optional[Callable[[], None]] = None,
    ):
        if duration_minutes is None or duration_minutes <= 0:
            raise ValueError("Test duration must be at least one minute")
        self.duration_minutes = duration_minutes
        self.started_at = started_at
        self.on_expire = on_expire
        self._finished = False

    @property
    def duration_seconds(self) -> int:
        return self.duration_minutes * 60

    @property
    def deadline(self) -> datetime:
        return self.started_at + timedelta(minutes=self.duration_minutes)

    @property
    def finished(self) -> bool:
        return self._finished

    def elapsed_seconds(self, now: Optional[datetime] = None) -> int:
        now = now or datetime.utcnow()
        elapsed = int((now - self.started_at).total_seconds())
        return min(max(elapsed, 0), self.duration_seconds)

    def remaining_seconds(self, now: Optional[datetime] = None) -> int:
        now = now or datetime.utcnow()
        remaining = (self.deadline - now).total_seconds()
        return max(0, math.ceil(remaining))

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.utcnow()
        return now >= self.deadline

    def check(self, now: Optional[datetime] = None) -> bool:
        """Fire the expiry callback if time is up. Returns True only on the call that fired it."""
        if self._finished or not self.is_expired(now):
            return False
        self._finished = True
        if self.on_expire is not None:
            self.on_expire()
        return True

    def stop(self) -> bool:
        """Mark the attempt as submitted by hand. Returns False if the timer already finished."""
        if self._finished:
            return False
        self._finished = True
        return True
