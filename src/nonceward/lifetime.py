"""Nonce lifetime policy.

``window_seconds`` is the full lifetime of a nonce. Time is cut into ticks of
half that size; a nonce issued at tick ``w`` is accepted while the current
tick is ``w`` (first half of its life) or ``w + 1`` (second half).

With the default 24 hour lifetime that gives two 12 hour buckets.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum

__all__ = ["TimeUnit", "LifetimePolicy", "configure", "DEFAULT_POLICY"]


class TimeUnit(str, Enum):
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"

    @property
    def seconds(self) -> int:
        return _UNIT_SECONDS[self]

    @classmethod
    def parse(cls, value: TimeUnit | str) -> TimeUnit:
        """Accept enum members, plural or singular names, any case."""
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        if not name.endswith("s"):
            name += "s"
        try:
            return cls(name)
        except ValueError:
            raise ValueError(
                f"Unknown time unit {value!r}; expected one of: seconds, minutes, hours"
            ) from None


_UNIT_SECONDS = {
    TimeUnit.SECONDS: 1,
    TimeUnit.MINUTES: 60,
    TimeUnit.HOURS: 3600,
}


@dataclass(frozen=True)
class LifetimePolicy:
    """Immutable lifetime setting. Build it with :func:`configure`.

    Buckets are ``window_seconds // 2`` long. An odd window rounds down: a
    3 second window has 1 second buckets, so nonces live 1 to 2 seconds.
    """

    window_seconds: int

    def __post_init__(self) -> None:
        if isinstance(self.window_seconds, bool) or not isinstance(self.window_seconds, int):
            raise ValueError("window_seconds must be an integer")
        if self.window_seconds < 2:
            raise ValueError("window_seconds must be at least 2")

    @property
    def bucket_seconds(self) -> int:
        return self.window_seconds // 2

    def tick(self, now: float | None = None) -> int:
        """Index of the bucket containing *now* (defaults to the current time)."""
        if now is None:
            now = time.time()
        return int(now // self.bucket_seconds)


def configure(amount: int, unit: TimeUnit | str = TimeUnit.MINUTES) -> LifetimePolicy:
    """Return a policy whose nonces live for ``amount`` units.

    The lifetime is ``amount * unit`` seconds, computed once. Minute and
    hour windows are always even; an odd number of seconds rounds the bucket
    down (``configure(3, "seconds")`` gives a 2 second maximum life).
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"amount must be an integer, got {amount!r}")
    if amount <= 0:
        raise ValueError(f"amount must be positive, got {amount}")
    return LifetimePolicy(window_seconds=amount * TimeUnit.parse(unit).seconds)


DEFAULT_POLICY = configure(24, TimeUnit.HOURS)
