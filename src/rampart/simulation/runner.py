"""Frame-driven tick loop for the kinematic engine.

The runner plays the role of the display's animation-frame callback on an
asyncio event loop: each frame measures elapsed clock time, ticks the engine
and schedules the next frame. Between frames control returns to the loop.
Deactivation cancels the pending frame before it fires and hard-resets the
engine.
"""

from __future__ import annotations

import asyncio
import logging

from rampart.core.clock import Clock, SimClock, SystemClock
from rampart.core.types import LogKind, Severity
from rampart.simulation.engine import SimulationEngine

logger = logging.getLogger(__name__)


class SimulationRunner:
    """Drives a :class:`SimulationEngine` at a fixed frame interval.

    Args:
        engine: Engine to tick.
        clock: Source of elapsed time between frames. Should be the same
            clock the engine timestamps with.
        frame_interval_s: Delay between frames.
        acceleration: Initial time-acceleration factor.
    """

    def __init__(
        self,
        engine: SimulationEngine,
        clock: Clock | None = None,
        frame_interval_s: float = 0.016,
        acceleration: float = 1.0,
    ):
        if frame_interval_s <= 0:
            raise ValueError(f"frame_interval_s must be > 0, got {frame_interval_s}")
        self._engine = engine
        self._clock = clock if clock is not None else SystemClock()
        self._interval = frame_interval_s
        self._acceleration = 1.0
        self.acceleration = acceleration

        self._active = False
        self._handle: asyncio.TimerHandle | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._last_time = 0.0
        self._frames = 0

    @property
    def engine(self) -> SimulationEngine:
        return self._engine

    @property
    def active(self) -> bool:
        return self._active

    @property
    def frames(self) -> int:
        return self._frames

    @property
    def pending(self) -> bool:
        """True while a frame callback is scheduled."""
        return self._handle is not None and not self._handle.cancelled()

    @property
    def acceleration(self) -> float:
        return self._acceleration

    @acceleration.setter
    def acceleration(self, value: float) -> None:
        if value <= 0:
            raise ValueError(f"acceleration must be > 0, got {value}")
        self._acceleration = float(value)

    # ------------------------------------------------------------------
    # Event-loop driven mode
    # ------------------------------------------------------------------

    def activate(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Start ticking on *loop* (default: the running loop)."""
        if self._active:
            return
        self._loop = loop or asyncio.get_running_loop()
        self._active = True
        self._frames = 0
        self._last_time = self._clock.now()
        self._engine.log_event(LogKind.ENGAGED, Severity.SUCCESS)
        logger.info("Simulation engaged at x%.1f time acceleration", self._acceleration)
        self._schedule()

    def deactivate(self) -> None:
        """Cancel the pending frame and hard-reset the engine."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        was_active = self._active
        self._active = False
        self._engine.reset()
        if was_active:
            logger.info("Simulation deactivated after %d frames", self._frames)

    def _schedule(self) -> None:
        assert self._loop is not None
        self._handle = self._loop.call_later(self._interval, self._on_frame)

    def _on_frame(self) -> None:
        self._handle = None
        if not self._active:
            return
        now = self._clock.now()
        elapsed = now - self._last_time
        self._last_time = now
        self._engine.tick(elapsed, self._acceleration)
        self._frames += 1
        self._schedule()

    async def run_for(self, duration_s: float) -> None:
        """Engage, let frames run for *duration_s*, then deactivate."""
        self.activate()
        try:
            await asyncio.sleep(duration_s)
        finally:
            self.deactivate()

    # ------------------------------------------------------------------
    # Headless mode
    # ------------------------------------------------------------------

    def step_frames(self, count: int) -> int:
        """Run *count* frames synchronously without an event loop.

        Requires a :class:`SimClock`, which is advanced by one frame
        interval per frame. Stops early once no threat is moving.

        Returns:
            Number of frames actually run.
        """
        if not isinstance(self._clock, SimClock):
            raise TypeError("step_frames() needs a SimClock; use activate() for real time")
        ran = 0
        for _ in range(count):
            self._clock.step(self._interval)
            self._engine.tick(self._interval, self._acceleration)
            ran += 1
            self._frames += 1
            if not any(t.is_moving for t in self._engine.threats):
                break
        return ran
