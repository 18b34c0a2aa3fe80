"""Tests for the frame-driven simulation runner."""

from __future__ import annotations

import asyncio

import pytest

from rampart.core.clock import SimClock, SystemClock
from rampart.core.types import DefenseUnit, LogKind, ThreatStatus, UnitRole
from rampart.simulation.engine import SimulationEngine
from rampart.simulation.runner import SimulationRunner


def _runner(clock=None, units=(), **kwargs):
    clock = clock if clock is not None else SimClock()
    engine = SimulationEngine(units, clock=clock, seed=0)
    return SimulationRunner(engine, clock, **kwargs), engine, clock


class TestConstruction:
    def test_bad_frame_interval(self):
        with pytest.raises(ValueError, match="frame_interval_s"):
            _runner(frame_interval_s=0.0)

    def test_bad_acceleration(self):
        with pytest.raises(ValueError, match="acceleration"):
            _runner(acceleration=0.0)

    def test_acceleration_setter(self):
        runner, _, _ = _runner()
        runner.acceleration = 50
        assert runner.acceleration == 50.0
        with pytest.raises(ValueError):
            runner.acceleration = -1.0


class TestHeadless:
    def test_requires_sim_clock(self):
        runner, _, _ = _runner(clock=SystemClock())
        with pytest.raises(TypeError, match="SimClock"):
            runner.step_frames(1)

    def test_stops_when_idle(self):
        runner, _, clock = _runner(frame_interval_s=0.1)
        assert runner.step_frames(100) == 1
        assert clock.elapsed() == pytest.approx(0.1)

    def test_runs_until_resolved(self):
        runner, engine, clock = _runner(frame_interval_s=0.1, acceleration=10.0)
        engine.launch((0.0, 0.0), (0.0, 0.1))
        frames = runner.step_frames(1000)
        # 0.1 deg at 0.0075 deg/s is about 13 simulated seconds, 1 per frame
        assert 12 <= frames <= 15
        assert engine.threats[0].status is ThreatStatus.IMPACTED
        assert runner.frames == frames

    def test_frame_budget_respected(self):
        runner, engine, _ = _runner(frame_interval_s=0.1)
        engine.launch((0.0, 0.0), (0.0, 5.0))
        assert runner.step_frames(3) == 3
        assert engine.threats[0].is_moving


class TestEventLoop:
    def test_activate_logs_engaged_and_schedules(self):
        async def scenario():
            runner, engine, _ = _runner()
            runner.activate()
            assert runner.active
            assert runner.pending
            assert engine.logs[0].kind is LogKind.ENGAGED
            runner.deactivate()

        asyncio.run(scenario())

    def test_deactivate_cancels_before_fire(self):
        async def scenario():
            runner, _, _ = _runner(frame_interval_s=0.01)
            runner.activate()
            runner.deactivate()
            await asyncio.sleep(0.05)
            return runner

        runner = asyncio.run(scenario())
        assert runner.frames == 0
        assert not runner.pending
        assert not runner.active

    def test_deactivate_resets_engine(self):
        async def scenario():
            runner, engine, _ = _runner()
            engine.launch((0.0, 0.0), (0.0, 1.0))
            runner.activate()
            runner.deactivate()
            return engine

        engine = asyncio.run(scenario())
        assert engine.threats == ()
        assert engine.logs == ()
        assert engine.stats.launched == 0

    def test_activate_twice_is_noop(self):
        async def scenario():
            runner, engine, _ = _runner()
            runner.activate()
            runner.activate()
            engaged = [e for e in engine.logs if e.kind is LogKind.ENGAGED]
            runner.deactivate()
            return engaged

        assert len(asyncio.run(scenario())) == 1

    def test_run_for_ticks_frames(self):
        units = [
            DefenseUnit("R", "R", 0.0, 0.0, UnitRole.RADAR, 1000.0),
        ]

        async def scenario():
            runner, engine, _ = _runner(
                clock=SystemClock(), units=units, frame_interval_s=0.01, acceleration=100.0,
            )
            engine.launch((0.0, 1.0), (0.0, 0.0))
            seen = []
            await asyncio.gather(runner.run_for(0.2), _watch(engine, seen))
            return runner, seen

        async def _watch(engine, seen):
            for _ in range(15):
                await asyncio.sleep(0.01)
                if engine.threats:
                    seen.append(engine.threats[0].current[1])

        runner, seen = asyncio.run(scenario())
        assert runner.frames > 0
        assert not runner.active
        assert seen and min(seen) < 1.0
