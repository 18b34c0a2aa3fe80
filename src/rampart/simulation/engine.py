"""Time-stepped kinematic engagement simulation.

Each tick is split into equal sub-steps so fast threats at high time
acceleration cannot jump over the kill and impact thresholds. Within a
sub-step every MOVING threat:

1. advances toward its target at ``speed * dt``;
2. is marked detected by the first active radar in range (sticky);
3. if detected and unbound, is bound to the first interceptor, in order of
   descending shot speed, whose predicted intercept point lies inside that
   interceptor's range;
4. if bound, is pursued toward the intercept point re-solved from the
   interceptor's current position;
5. is INTERCEPTED when the interceptor closes within the kill radius, or
   IMPACTED when it gets within the impact threshold of its target.

Assignment policy: the first feasible interceptor in speed order wins, not
the globally best one, and a binding is never reassigned.

State is copy-on-write. Threats are frozen; each sub-step builds a new tuple
from the previous one and the engine swaps its public collections only at
the end of the tick.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace

import numpy as np

from rampart.core.bus import EventBus
from rampart.core.clock import Clock, SystemClock
from rampart.core.theater import Theater
from rampart.core.types import (
    DefenseUnit,
    Explosion,
    ExplosionKind,
    LatLng,
    LogEntry,
    LogKind,
    Severity,
    Threat,
    ThreatStatus,
    get_archetype,
)
from rampart.engagement.reach import first_in_reach, point_metric, split_roles
from rampart.geo.primitives import distance_m, step_toward
from rampart.simulation.config import SimulationConfig
from rampart.simulation.intercept import solve_intercept

logger = logging.getLogger(__name__)

# Shot speed used when an interceptor record carries none
DEFAULT_SHOT_SPEED = 0.22


@dataclass(frozen=True)
class SimulationStats:
    launched: int = 0
    intercepted: int = 0
    impacted: int = 0

    def to_dict(self) -> dict:
        return {
            "launched": self.launched,
            "intercepted": self.intercepted,
            "impacted": self.impacted,
        }


@dataclass(frozen=True)
class SimulationSnapshot:
    """Everything the display layer needs after a tick."""

    timestamp: float
    threats: tuple[Threat, ...]
    explosions: tuple[Explosion, ...]
    stats: SimulationStats

    @property
    def moving(self) -> int:
        return sum(1 for t in self.threats if t.is_moving)

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "threats": [t.to_dict() for t in self.threats],
            "explosions": [
                {"id": e.event_id, "position": list(e.position), "kind": e.kind.value}
                for e in self.explosions
            ],
            "stats": {**self.stats.to_dict(), "moving": self.moving},
        }


@dataclass(frozen=True)
class TickResult:
    substeps: int
    dt: float
    logs: tuple[LogEntry, ...] = ()
    explosions: tuple[Explosion, ...] = ()


@dataclass
class _TickEvents:
    """Side effects collected during one tick, applied when it ends."""

    now: float
    logs: list[LogEntry] = field(default_factory=list)
    explosions: list[Explosion] = field(default_factory=list)
    intercepted: int = 0
    impacted: int = 0


class SimulationEngine:
    """Kinematic threat/interceptor simulation for one run.

    Args:
        units: Defense deployment. Inactive units are ignored.
        theater: Bounds and cities used for random salvos.
        config: Sub-stepping, calibration and display settings.
        clock: Timestamp source for logs and explosion TTLs.
        bus: Optional event bus; logs, explosions and tick snapshots are
            published to it.
        seed: RNG seed for random salvos.
    """

    def __init__(
        self,
        units: Iterable[DefenseUnit],
        theater: Theater | None = None,
        config: SimulationConfig | None = None,
        clock: Clock | None = None,
        bus: EventBus | None = None,
        seed: int | None = None,
    ):
        self._config = config or SimulationConfig()
        self._theater = theater or Theater()
        self._clock = clock if clock is not None else SystemClock()
        self._bus = bus
        self._rng = np.random.default_rng(seed)
        self._units: tuple[DefenseUnit, ...] = tuple(units)

        self._threats: tuple[Threat, ...] = ()
        self._explosions: tuple[Explosion, ...] = ()
        self._logs: tuple[LogEntry, ...] = ()
        self._stats = SimulationStats()
        self._launch_point: LatLng | None = None

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def units(self) -> tuple[DefenseUnit, ...]:
        return self._units

    @property
    def threats(self) -> tuple[Threat, ...]:
        return self._threats

    @property
    def explosions(self) -> tuple[Explosion, ...]:
        return self._explosions

    @property
    def logs(self) -> tuple[LogEntry, ...]:
        """Newest first, capped at ``max_log_entries``."""
        return self._logs

    @property
    def stats(self) -> SimulationStats:
        return self._stats

    @property
    def launch_point(self) -> LatLng | None:
        return self._launch_point

    def snapshot(self) -> SimulationSnapshot:
        return SimulationSnapshot(
            timestamp=self._clock.now(),
            threats=self._threats,
            explosions=self._explosions,
            stats=self._stats,
        )

    def set_units(self, units: Iterable[DefenseUnit]) -> None:
        """Replace the deployment; takes effect from the next tick."""
        self._units = tuple(units)

    # ------------------------------------------------------------------
    # Launching
    # ------------------------------------------------------------------

    def launch(
        self,
        start: LatLng,
        target: LatLng,
        archetype: str = "cruise",
        speed_scale: float = 1.0,
    ) -> Threat:
        """Launch one threat from *start* toward *target*.

        Raises:
            ValueError: For an unknown archetype or a non-positive speed scale.
        """
        if speed_scale <= 0:
            raise ValueError(f"speed_scale must be > 0, got {speed_scale}")
        kind = get_archetype(archetype)
        start = (float(start[0]), float(start[1]))
        threat = Threat(
            threat_id=uuid.uuid4().hex[:9],
            start=start,
            target=(float(target[0]), float(target[1])),
            current=start,
            speed=kind.speed(speed_scale),
            archetype=kind.archetype_id,
            launched_at=self._clock.now(),
        )
        self._threats = self._threats + (threat,)
        self._stats = replace(self._stats, launched=self._stats.launched + 1)
        logger.debug(
            "Launched %s %s from (%.3f, %.3f) to (%.3f, %.3f) at %.4f deg/s",
            kind.archetype_id, threat.short_id, *threat.start, *threat.target, threat.speed,
        )
        return threat

    def designate(
        self,
        point: LatLng,
        archetype: str = "cruise",
        speed_scale: float = 1.0,
    ) -> Threat | None:
        """Two-step launch: the first point locks the origin, the second fires.

        Returns the launched threat on the second call, ``None`` on the first.
        """
        if self._launch_point is None:
            self._launch_point = (float(point[0]), float(point[1]))
            self.log_event(
                LogKind.LAUNCH_POINT, Severity.WARNING,
                lat=self._launch_point[0], lng=self._launch_point[1],
            )
            return None
        start = self._launch_point
        self._launch_point = None
        return self.launch(start, point, archetype, speed_scale)

    def launch_salvo(
        self,
        count: int,
        archetype: str = "cruise",
        speed_scale: float = 1.0,
    ) -> list[Threat]:
        """Random strike: *count* threats from outside the theater edges.

        Each origin sits on one of the four bounding-box edges, pushed
        outward by ``salvo_border_margin_deg``. Targets are a random city
        with probability ``salvo_city_probability``, otherwise a random
        interior point at least half a degree from the edges.
        """
        kind = get_archetype(archetype)
        self.log_event(LogKind.SALVO, Severity.DANGER, label=kind.label, count=count)
        bounds = self._theater.bounds
        cities = self._theater.cities
        margin = self._config.salvo_border_margin_deg
        launched = []
        for _ in range(count):
            origin = bounds.border_point(self._rng, margin)
            if cities and self._rng.random() < self._config.salvo_city_probability:
                city = cities[int(self._rng.integers(len(cities)))]
                target = city.position
            else:
                target = bounds.random_point(self._rng, inset=0.5)
            launched.append(self.launch(origin, target, kind.archetype_id, speed_scale))
        return launched

    # ------------------------------------------------------------------
    # Ticking
    # ------------------------------------------------------------------

    def tick(self, elapsed_s: float, acceleration: float = 1.0) -> TickResult:
        """Advance the simulation by *elapsed_s* wall seconds.

        Simulated time is ``elapsed_s * acceleration``, split into
        ``config.substeps(acceleration)`` equal sub-steps.
        """
        now = self._clock.now()
        events = _TickEvents(now=now)
        substeps = self._config.substeps(acceleration)
        sim_dt = max(elapsed_s, 0.0) * max(acceleration, 0.0)
        dt = sim_dt / substeps

        threats = self._threats
        if dt > 0 and any(t.is_moving for t in threats):
            radars, interceptors = split_roles(self._units)
            # Stable sort keeps configuration order among equal speeds
            interceptors.sort(key=lambda u: -_shot_speed(u))
            unit_index = {u.unit_id: u for u in self._units}
            for _ in range(substeps):
                threats = tuple(
                    self._advance(t, dt, acceleration, radars, interceptors, unit_index, events)
                    if t.is_moving else t
                    for t in threats
                )
                if not any(t.is_moving for t in threats):
                    break

        self._commit(threats, events)
        return TickResult(
            substeps=substeps,
            dt=dt,
            logs=tuple(events.logs),
            explosions=tuple(events.explosions),
        )

    def _advance(
        self,
        threat: Threat,
        dt: float,
        acceleration: float,
        radars: Sequence[DefenseUnit],
        interceptors: Sequence[DefenseUnit],
        unit_index: dict[str, DefenseUnit],
        events: _TickEvents,
    ) -> Threat:
        cal = self._config.calibration
        velocity = threat.velocity
        next_pos = step_toward(threat.current, threat.target, threat.speed * dt)

        detected_by = threat.detected_by
        radar = first_in_reach(radars, point_metric(next_pos))
        if radar is not None and detected_by is None:
            detected_by = radar.unit_id
            self._emit(
                events, LogKind.DETECTED, Severity.INFO,
                threat_id=threat.threat_id, short_id=threat.short_id, radar=radar.name,
            )

        interceptor_id = threat.interceptor_id
        interceptor_pos = threat.interceptor_pos
        predicted = threat.predicted_intercept

        if detected_by is not None and interceptor_id is None:
            for unit in interceptors:
                solution = solve_intercept(next_pos, velocity, unit.position, _shot_speed(unit))
                if solution is None:
                    continue
                if distance_m(solution.point, unit.position) > unit.range_m:
                    continue
                interceptor_id = unit.unit_id
                interceptor_pos = unit.position
                predicted = solution.point
                self._emit(
                    events, LogKind.LOCK_ON, Severity.WARNING,
                    threat_id=threat.threat_id, short_id=threat.short_id,
                    interceptor=unit.name,
                )
                break

        if interceptor_id is not None and interceptor_pos is not None:
            unit = unit_index.get(interceptor_id)
            shot_speed = _shot_speed(unit) if unit is not None else DEFAULT_SHOT_SPEED
            solution = solve_intercept(next_pos, velocity, interceptor_pos, shot_speed)
            if solution is not None:
                predicted = solution.point
            goal = predicted if predicted is not None else next_pos
            interceptor_pos = step_toward(interceptor_pos, goal, shot_speed * dt)

            kill_radius = cal.kill_radius_m(acceleration, threat.speed)
            if distance_m(interceptor_pos, next_pos) < kill_radius:
                events.intercepted += 1
                self._explode(events, next_pos, ExplosionKind.INTERCEPT)
                self._emit(
                    events, LogKind.INTERCEPTED, Severity.SUCCESS,
                    threat_id=threat.threat_id, short_id=threat.short_id,
                )
                return replace(
                    threat,
                    status=ThreatStatus.INTERCEPTED,
                    current=next_pos,
                    detected_by=detected_by,
                    interceptor_id=interceptor_id,
                    interceptor_pos=interceptor_pos,
                    predicted_intercept=predicted,
                )

        if distance_m(next_pos, threat.target) < cal.impact_threshold_m(acceleration):
            events.impacted += 1
            self._explode(events, threat.target, ExplosionKind.IMPACT)
            self._emit(
                events, LogKind.IMPACTED, Severity.DANGER,
                threat_id=threat.threat_id, short_id=threat.short_id,
            )
            return replace(
                threat,
                status=ThreatStatus.IMPACTED,
                current=threat.target,
                detected_by=detected_by,
                interceptor_id=interceptor_id,
                interceptor_pos=interceptor_pos,
                predicted_intercept=predicted,
            )

        return replace(
            threat,
            current=next_pos,
            detected_by=detected_by,
            interceptor_id=interceptor_id,
            interceptor_pos=interceptor_pos,
            predicted_intercept=predicted,
        )

    def _commit(self, threats: tuple[Threat, ...], events: _TickEvents) -> None:
        self._threats = threats
        if events.intercepted or events.impacted:
            self._stats = replace(
                self._stats,
                intercepted=self._stats.intercepted + events.intercepted,
                impacted=self._stats.impacted + events.impacted,
            )

        live = tuple(e for e in self._explosions if not e.expired(events.now))
        self._explosions = live + tuple(events.explosions)

        for entry in events.logs:
            self._append_log(entry)

        if self._bus is not None:
            for explosion in events.explosions:
                self._bus.publish("explosion", explosion=explosion)
            self._bus.publish("tick", snapshot=self.snapshot())

    # ------------------------------------------------------------------
    # Logging and reset
    # ------------------------------------------------------------------

    def log_event(self, kind: LogKind, severity: Severity, **params) -> LogEntry:
        """Record a log entry immediately (outside a tick)."""
        entry = LogEntry(kind=kind, severity=severity, timestamp=self._clock.now(), params=params)
        self._append_log(entry)
        return entry

    def _append_log(self, entry: LogEntry) -> None:
        self._logs = ((entry,) + self._logs)[: self._config.max_log_entries]
        logger.debug("[%s] %s", entry.severity.value, entry.message)
        if self._bus is not None:
            self._bus.publish("log", entry=entry)

    @staticmethod
    def _emit(events: _TickEvents, kind: LogKind, severity: Severity, **params) -> None:
        events.logs.append(
            LogEntry(kind=kind, severity=severity, timestamp=events.now, params=params)
        )

    def _explode(self, events: _TickEvents, position: LatLng, kind: ExplosionKind) -> None:
        events.explosions.append(
            Explosion(
                event_id=f"{kind.value}-{uuid.uuid4().hex[:8]}",
                position=position,
                kind=kind,
                created_at=events.now,
                ttl_s=self._config.explosion_ttl_s,
            )
        )

    def reset(self) -> None:
        """Hard reset: drop threats, explosions, logs, counters and launch point."""
        self._threats = ()
        self._explosions = ()
        self._logs = ()
        self._stats = SimulationStats()
        self._launch_point = None


def _shot_speed(unit: DefenseUnit) -> float:
    return unit.shot_speed or DEFAULT_SHOT_SPEED

