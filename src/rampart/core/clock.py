"""Wall clocks for the tick loop and event timestamps."""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Time source for the simulation engine and its runner.

    :class:`SystemClock` follows real time; :class:`SimClock` only moves when
    told to, which makes tick sequences reproducible in tests and in the
    headless CLI.
    """

    def now(self) -> float:
        """Current time as epoch seconds."""
        ...

    def elapsed(self) -> float:
        """Seconds since the clock started."""
        ...


class SystemClock:
    """Monotonic wall clock reported in epoch seconds."""

    def __init__(self):
        self._start = time.monotonic()
        self._epoch_offset = time.time() - self._start

    def now(self) -> float:
        return time.monotonic() + self._epoch_offset

    def elapsed(self) -> float:
        return time.monotonic() - self._start


class SimClock:
    """Deterministic clock advanced explicitly with :meth:`step`.

    Args:
        start_epoch: What ``now()`` returns before any step.
    """

    def __init__(self, start_epoch: float = 1_000_000.0):
        self._start_epoch = start_epoch
        self._elapsed = 0.0

    def now(self) -> float:
        return self._start_epoch + self._elapsed

    def elapsed(self) -> float:
        return self._elapsed

    def step(self, dt: float) -> None:
        """Advance by *dt* seconds.

        Raises:
            ValueError: If *dt* is negative.
        """
        if dt < 0:
            raise ValueError(f"SimClock.step() requires dt >= 0, got {dt}")
        self._elapsed += dt


def create_clock(mode: str = "realtime", start_epoch: float = 1_000_000.0) -> Clock:
    """``"simulated"`` gives a :class:`SimClock`, anything else real time."""
    if mode == "simulated":
        return SimClock(start_epoch=start_epoch)
    return SystemClock()
