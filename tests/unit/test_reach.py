"""Tests for the shared reachability query."""

import pytest

from rampart.core.types import DefenseUnit, UnitRole
from rampart.engagement.reach import (
    active_units,
    any_in_reach,
    covers_point,
    first_in_reach,
    point_metric,
    segment_metric,
    split_roles,
)
from rampart.geo.primitives import distance_m


def _unit(uid, lat=0.0, lng=0.0, role=UnitRole.RADAR, range_km=100.0, **kw):
    return DefenseUnit(
        unit_id=uid, name=uid, lat=lat, lng=lng, role=role, range_km=range_km, **kw,
    )


class TestMetrics:
    def test_point_metric_km(self):
        unit = _unit("R", lat=1.0)
        assert point_metric((0.0, 0.0))(unit) == pytest.approx(
            distance_m((0.0, 0.0), (1.0, 0.0)) / 1000.0
        )

    def test_segment_metric_uses_111_km_per_degree(self):
        unit = _unit("R", lat=0.0, lng=0.5)
        metric = segment_metric((1.0, 0.0), (1.0, 1.0))
        assert metric(unit) == pytest.approx(111.0)

    def test_segment_metric_endpoint(self):
        unit = _unit("R", lat=0.0, lng=3.0)
        assert segment_metric((0.0, 0.0), (0.0, 1.0))(unit) == pytest.approx(222.0)


class TestFilters:
    def test_active_units_by_role(self):
        units = [
            _unit("R1"),
            _unit("R2", active=False),
            _unit("I1", role=UnitRole.INTERCEPTOR),
        ]
        assert [u.unit_id for u in active_units(units, UnitRole.RADAR)] == ["R1"]

    def test_split_roles(self):
        units = [
            _unit("I1", role=UnitRole.INTERCEPTOR),
            _unit("R1"),
            _unit("I2", role=UnitRole.INTERCEPTOR, active=False),
            _unit("I3", role=UnitRole.INTERCEPTOR),
        ]
        radars, interceptors = split_roles(iter(units))
        assert [u.unit_id for u in radars] == ["R1"]
        assert [u.unit_id for u in interceptors] == ["I1", "I3"]


class TestFirstInReach:
    def test_first_in_configuration_order(self):
        units = [_unit("FAR", lat=5.0), _unit("A"), _unit("B")]
        assert first_in_reach(units, point_metric((0.0, 0.0))).unit_id == "A"

    def test_inactive_ignored(self):
        units = [_unit("OFF", active=False), _unit("ON")]
        assert first_in_reach(units, point_metric((0.0, 0.0))).unit_id == "ON"

    def test_none_in_reach(self):
        assert first_in_reach([_unit("A", range_km=10.0)], point_metric((1.0, 0.0))) is None

    def test_range_boundary_inclusive(self):
        path = segment_metric((1.0, 0.0), (1.0, 1.0))
        assert any_in_reach([_unit("A", lng=0.5, range_km=112.0)], path)
        assert not any_in_reach([_unit("A", lng=0.5, range_km=110.0)], path)

    def test_predicate_filters(self):
        units = [
            _unit("SLOW", role=UnitRole.INTERCEPTOR, shot_speed=0.1),
            _unit("FAST", role=UnitRole.INTERCEPTOR, shot_speed=1.0),
        ]
        hit = first_in_reach(units, point_metric((0.0, 0.0)), lambda u: u.shot_speed > 0.5)
        assert hit.unit_id == "FAST"


class TestCoversPoint:
    def test_covers(self):
        assert covers_point([_unit("A", range_km=120.0)], (1.0, 0.0))

    def test_out_of_range(self):
        assert not covers_point([_unit("A", range_km=100.0)], (1.0, 0.0))

    def test_inactive_never_covers(self):
        assert not covers_point([_unit("A", range_km=1e6, active=False)], (0.0, 0.0))

    def test_empty(self):
        assert not covers_point([], (0.0, 0.0))
