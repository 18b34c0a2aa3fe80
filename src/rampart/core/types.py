"""Core data types for the RAMPART simulation core."""

from __future__ import annotations

import enum
import math
import uuid
from dataclasses import dataclass, field, replace
from typing import Any

LatLng = tuple[float, float]

# Degrees of arc per simulated second for a speed multiplier of 1.0
BASE_THREAT_SPEED: float = 0.005


class UnitRole(enum.Enum):
    RADAR = "RADAR"
    INTERCEPTOR = "INTERCEPTOR"


class ThreatStatus(enum.Enum):
    MOVING = "MOVING"
    INTERCEPTED = "INTERCEPTED"
    IMPACTED = "IMPACTED"

    @property
    def is_terminal(self) -> bool:
        return self is not ThreatStatus.MOVING


class ExplosionKind(enum.Enum):
    IMPACT = "impact"
    INTERCEPT = "intercept"


class Severity(enum.Enum):
    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"
    DANGER = "danger"


class LogKind(enum.Enum):
    """What happened. Display layers localize on this, not on ``message``."""

    ENGAGED = "engaged"
    LAUNCH_POINT = "launch_point"
    SALVO = "salvo"
    DETECTED = "detected"
    LOCK_ON = "lock_on"
    INTERCEPTED = "intercepted"
    IMPACTED = "impacted"


_LOG_TEMPLATES: dict[LogKind, str] = {
    LogKind.ENGAGED: "Defense Grid: ENGAGED",
    LogKind.LAUNCH_POINT: "Launch Point Locked: [{lat:.3f}, {lng:.3f}]",
    LogKind.SALVO: "INCOMING: {label} strike detected!",
    LogKind.DETECTED: "Radar Contact: ID-{short_id} by {radar}",
    LogKind.LOCK_ON: "Hyper-Lock: ID-{short_id} -> {interceptor}",
    LogKind.INTERCEPTED: "Threat Neutralized: ID-{short_id}",
    LogKind.IMPACTED: "Impact [ID-{short_id}]",
}


@dataclass(frozen=True)
class ThreatArchetype:
    """A named threat class with a speed multiplier against the base speed."""

    archetype_id: str
    label: str
    speed_mod: float

    def speed(self, scale: float = 1.0) -> float:
        return BASE_THREAT_SPEED * self.speed_mod * scale


THREAT_ARCHETYPES: dict[str, ThreatArchetype] = {
    "drone": ThreatArchetype("drone", "Suicide Drone", 0.6),
    "cruise": ThreatArchetype("cruise", "Cruise Missile", 1.5),
    "ballistic": ThreatArchetype("ballistic", "Ballistic Missile", 4.0),
    "hypersonic": ThreatArchetype("hypersonic", "Hypersonic", 12.0),
}


def get_archetype(archetype_id: str) -> ThreatArchetype:
    """Look up a threat archetype by id.

    Raises:
        ValueError: If *archetype_id* is not in :data:`THREAT_ARCHETYPES`.
    """
    try:
        return THREAT_ARCHETYPES[archetype_id]
    except KeyError:
        raise ValueError(
            f"Unknown threat archetype {archetype_id!r}; "
            f"expected one of {sorted(THREAT_ARCHETYPES)}"
        ) from None


def _short_uuid() -> str:
    return uuid.uuid4().hex[:9]


@dataclass(frozen=True)
class DefenseUnit:
    """A placed radar or interceptor installation.

    Instances are immutable; relocation and activation toggles go through
    :meth:`with_position` and :meth:`with_active`, which return new units.
    """

    unit_id: str
    name: str
    lat: float
    lng: float
    role: UnitRole
    range_km: float
    shot_speed: float = 0.0
    active: bool = True
    category: str = "Custom"
    system_cost: float = 0.0

    @property
    def position(self) -> LatLng:
        return (self.lat, self.lng)

    @property
    def range_m(self) -> float:
        return self.range_km * 1000.0

    @property
    def is_radar(self) -> bool:
        return self.role is UnitRole.RADAR

    @property
    def is_interceptor(self) -> bool:
        return self.role is UnitRole.INTERCEPTOR

    def with_position(self, lat: float, lng: float) -> DefenseUnit:
        return replace(self, lat=float(lat), lng=float(lng))

    def with_active(self, active: bool) -> DefenseUnit:
        return replace(self, active=bool(active))

    @classmethod
    def from_config(cls, cfg: dict, unit_id: str = "") -> DefenseUnit:
        """Parse a unit record.

        ``active`` defaults to True. ``lat``, ``lng``, ``role`` and
        ``range_km`` are required.

        Raises:
            ValueError: If a required field is missing or malformed.
        """
        missing = [k for k in ("lat", "lng", "role", "range_km") if cfg.get(k) is None]
        if missing:
            raise ValueError(f"Defense unit record is missing {', '.join(missing)}: {cfg}")
        try:
            role = UnitRole(str(cfg["role"]).upper())
        except ValueError:
            raise ValueError(f"Unknown unit role {cfg['role']!r}") from None
        uid = cfg.get("unit_id", unit_id) or _short_uuid()
        lat = float(cfg["lat"])
        lng = float(cfg["lng"])
        range_km = float(cfg["range_km"])
        if not (math.isfinite(lat) and math.isfinite(lng)) or range_km < 0:
            raise ValueError(f"Invalid position or range in unit {uid}: {cfg}")
        return cls(
            unit_id=uid,
            name=cfg.get("name", uid),
            lat=lat,
            lng=lng,
            role=role,
            range_km=range_km,
            shot_speed=float(cfg.get("shot_speed", 0.0) or 0.0),
            active=bool(cfg.get("active", True)),
            category=cfg.get("category", "Custom"),
            system_cost=float(cfg.get("system_cost", 0.0)),
        )

    def to_dict(self) -> dict:
        return {
            "unit_id": self.unit_id,
            "name": self.name,
            "lat": self.lat,
            "lng": self.lng,
            "role": self.role.value,
            "range_km": self.range_km,
            "shot_speed": self.shot_speed,
            "active": self.active,
            "category": self.category,
            "system_cost": self.system_cost,
        }


@dataclass(frozen=True)
class Threat:
    """A hostile projectile flying a straight line from ``start`` to ``target``.

    Frozen: the engine builds a new instance on every sub-step while the
    threat is MOVING, and never again once it reaches a terminal status.
    """

    threat_id: str
    start: LatLng
    target: LatLng
    current: LatLng
    speed: float
    archetype: str = "cruise"
    status: ThreatStatus = ThreatStatus.MOVING
    launched_at: float = 0.0
    interceptor_id: str | None = None
    interceptor_pos: LatLng | None = None
    predicted_intercept: LatLng | None = None
    detected_by: str | None = None

    @property
    def short_id(self) -> str:
        return self.threat_id[:4]

    @property
    def is_moving(self) -> bool:
        return self.status is ThreatStatus.MOVING

    @property
    def velocity(self) -> tuple[float, float]:
        """(d_lat, d_lng) per simulated second along the start-to-target bearing."""
        angle = math.atan2(self.target[0] - self.start[0], self.target[1] - self.start[1])
        return (math.sin(angle) * self.speed, math.cos(angle) * self.speed)

    def to_dict(self) -> dict:
        return {
            "threat_id": self.threat_id,
            "start": list(self.start),
            "target": list(self.target),
            "current": list(self.current),
            "speed": self.speed,
            "archetype": self.archetype,
            "status": self.status.value,
            "interceptor_id": self.interceptor_id,
            "interceptor_pos": list(self.interceptor_pos) if self.interceptor_pos else None,
            "predicted_intercept": (
                list(self.predicted_intercept) if self.predicted_intercept else None
            ),
            "detected_by": self.detected_by,
        }


@dataclass(frozen=True)
class Explosion:
    """Transient display marker for an impact or an intercept."""

    event_id: str
    position: LatLng
    kind: ExplosionKind
    created_at: float
    ttl_s: float = 2.0

    def expired(self, now: float) -> bool:
        return now - self.created_at >= self.ttl_s


@dataclass(frozen=True)
class LogEntry:
    """Structured event-log line for the display layer."""

    kind: LogKind
    severity: Severity
    timestamp: float
    params: dict[str, Any] = field(default_factory=dict)
    entry_id: str = field(default_factory=_short_uuid)

    @property
    def message(self) -> str:
        """English rendering of the entry."""
        return _LOG_TEMPLATES[self.kind].format(**self.params)

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "kind": self.kind.value,
            "severity": self.severity.value,
            "timestamp": self.timestamp,
            "message": self.message,
            "params": dict(self.params),
        }


@dataclass(frozen=True)
class CoverageResult:
    """Coverage percentages, each in [0, 100]."""

    combined_land_pct: float = 0.0
    combined_city_pct: float = 0.0
    combined_sea_pct: float = 0.0
    radar_land_pct: float = 0.0
    interceptor_land_pct: float = 0.0

    def to_dict(self) -> dict:
        return {
            "combined_land_pct": round(self.combined_land_pct, 2),
            "combined_city_pct": round(self.combined_city_pct, 2),
            "combined_sea_pct": round(self.combined_sea_pct, 2),
            "radar_land_pct": round(self.radar_land_pct, 2),
            "interceptor_land_pct": round(self.interceptor_land_pct, 2),
        }


@dataclass(frozen=True)
class BatchResult:
    """Aggregate outcome of a Monte Carlo batch run."""

    total_launched: int
    detected: int
    intercepted: int
    impacted: int
    detection_rate: float
    time_taken_s: float
    logs: tuple[str, ...] = ()

    @property
    def intercept_rate(self) -> float:
        if self.total_launched <= 0:
            return 0.0
        return self.intercepted / self.total_launched * 100.0

    def to_dict(self) -> dict:
        return {
            "total_launched": self.total_launched,
            "detected": self.detected,
            "intercepted": self.intercepted,
            "impacted": self.impacted,
            "detection_rate": round(self.detection_rate, 2),
            "intercept_rate": round(self.intercept_rate, 2),
            "time_taken_s": round(self.time_taken_s, 4),
            "logs": list(self.logs),
        }
