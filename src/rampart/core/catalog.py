"""Defense unit catalog: performance templates for placeable systems.

Ranges are in km; ``shot_speed`` is in the same degree-per-second units as
threat speeds. Radars carry ``shot_speed = 0``.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Any

from rampart.core.types import DefenseUnit, UnitRole


@dataclass(frozen=True)
class UnitTemplate:
    """Catalog entry that placed units are stamped from."""

    category: str
    role: UnitRole
    range_km: float
    shot_speed: float = 0.0
    system_cost: float = 0.0
    kill_method: str = ""

    @classmethod
    def from_config(cls, category: str, cfg: dict) -> UnitTemplate:
        return cls(
            category=category,
            role=UnitRole(str(cfg.get("role", "INTERCEPTOR")).upper()),
            range_km=float(cfg.get("range_km", 0.0)),
            shot_speed=float(cfg.get("shot_speed", 0.0)),
            system_cost=float(cfg.get("system_cost", 0.0)),
            kill_method=cfg.get("kill_method", ""),
        )

    def place(
        self, lat: float, lng: float, unit_id: str, name: str | None = None,
    ) -> DefenseUnit:
        """Stamp an active unit of this type at (lat, lng)."""
        return DefenseUnit(
            unit_id=unit_id,
            name=name or unit_id,
            lat=float(lat),
            lng=float(lng),
            role=self.role,
            range_km=self.range_km,
            shot_speed=self.shot_speed,
            active=True,
            category=self.category,
            system_cost=self.system_cost,
        )


DEFAULT_CATALOG: dict[str, UnitTemplate] = {
    "Barak-8": UnitTemplate("Barak-8", UnitRole.INTERCEPTOR, 150.0, 0.25, 100.0, "Hard Kill"),
    "Iron Beam": UnitTemplate("Iron Beam", UnitRole.INTERCEPTOR, 7.0, 1.5, 50.0, "100kW Laser"),
    "DragonFire": UnitTemplate("DragonFire", UnitRole.INTERCEPTOR, 15.0, 1.2, 100.0, "Hard Kill"),
    "Silent Hunter": UnitTemplate("Silent Hunter", UnitRole.INTERCEPTOR, 4.0, 0.9, 30.0, "Close Range"),
    "ODIN": UnitTemplate("ODIN", UnitRole.INTERCEPTOR, 20.0, 2.0, 40.0, "Soft Kill"),
    "JY-27": UnitTemplate("JY-27", UnitRole.RADAR, 500.0, 0.0, 20.0, "VHF Scanning"),
    "YLC-18": UnitTemplate("YLC-18", UnitRole.RADAR, 250.0, 0.0, 10.0, "L-Band 3D Scanning"),
}


def catalog_from_config(cfg: Any) -> dict[str, UnitTemplate]:
    """Build a catalog from a ``{category: {...}}`` mapping.

    Falls back to :data:`DEFAULT_CATALOG` when *cfg* is empty.
    """
    if not cfg:
        return dict(DEFAULT_CATALOG)
    return {str(k): UnitTemplate.from_config(str(k), dict(v)) for k, v in cfg.items()}


def deployment_from_config(
    records: list[dict],
    catalog: dict[str, UnitTemplate] | None = None,
) -> list[DefenseUnit]:
    """Parse a deployment list.

    A record may name a ``category`` from *catalog*; template fields fill in
    whatever the record leaves out.

    Raises:
        ValueError: On records missing required fields.
    """
    catalog = catalog if catalog is not None else DEFAULT_CATALOG
    counter = itertools.count(1)
    units: list[DefenseUnit] = []
    for rec in records or []:
        rec = dict(rec)
        template = catalog.get(rec.get("category", ""))
        if template is not None:
            rec.setdefault("role", template.role.value)
            rec.setdefault("range_km", template.range_km)
            rec.setdefault("shot_speed", template.shot_speed)
            rec.setdefault("system_cost", template.system_cost)
        units.append(DefenseUnit.from_config(rec, unit_id=f"U{next(counter):03d}"))
    return units
