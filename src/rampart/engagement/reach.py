"""Which active units can reach a point or a path.

One capability query backs the coverage scorer, the kinematic engine and the
batch evaluator, so all three agree on range units (km) and on the
"any active unit" rule. They differ only in the distance metric:

- :func:`point_metric`: great-circle meters to a point.
- :func:`segment_metric`: planar distance to a straight path, converted
  from degrees with :data:`~rampart.geo.primitives.KM_PER_DEGREE`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

from rampart.core.types import DefenseUnit, LatLng, UnitRole
from rampart.geo.primitives import KM_PER_DEGREE, distance_m, point_to_segment_distance

# Distance from a unit to whatever is being tested, in km
DistanceMetric = Callable[[DefenseUnit], float]


def point_metric(point: LatLng) -> DistanceMetric:
    def _km(unit: DefenseUnit) -> float:
        return distance_m(point, unit.position) / 1000.0
    return _km


def segment_metric(start: LatLng, end: LatLng) -> DistanceMetric:
    def _km(unit: DefenseUnit) -> float:
        return point_to_segment_distance(unit.position, start, end) * KM_PER_DEGREE
    return _km


def active_units(units: Iterable[DefenseUnit], role: UnitRole) -> list[DefenseUnit]:
    """Active units of *role*, in configuration order."""
    return [u for u in units if u.active and u.role is role]


def split_roles(units: Iterable[DefenseUnit]) -> tuple[list[DefenseUnit], list[DefenseUnit]]:
    """(active radars, active interceptors)."""
    units = list(units)
    return active_units(units, UnitRole.RADAR), active_units(units, UnitRole.INTERCEPTOR)


def first_in_reach(
    units: Sequence[DefenseUnit],
    metric: DistanceMetric,
    predicate: Callable[[DefenseUnit], bool] | None = None,
) -> DefenseUnit | None:
    """First active unit whose range covers *metric*, optionally filtered.

    Inactive units are ignored even if present in *units*.
    """
    for unit in units:
        if not unit.active:
            continue
        if metric(unit) <= unit.range_km and (predicate is None or predicate(unit)):
            return unit
    return None


def any_in_reach(
    units: Sequence[DefenseUnit],
    metric: DistanceMetric,
    predicate: Callable[[DefenseUnit], bool] | None = None,
) -> bool:
    return first_in_reach(units, metric, predicate) is not None


def covers_point(units: Sequence[DefenseUnit], point: LatLng) -> bool:
    """True iff some active unit is within its range of *point*."""
    return any_in_reach(units, point_metric(point))
