"""Tests for the deployment mutation operator."""

import numpy as np
import pytest

from rampart.core.types import DefenseUnit, UnitRole
from rampart.geo.region import BoundingBox
from rampart.optimize.mutation import MutationParams, mutate_deployment

BOUNDS = BoundingBox(min_lat=5.8, max_lat=9.9, min_lng=79.5, max_lng=82.0)


def _layout():
    return [
        DefenseUnit("R1", "radar", 7.0, 80.7, UnitRole.RADAR, 500.0),
        DefenseUnit("R2", "edge radar", 9.9, 82.0, UnitRole.RADAR, 250.0),
        DefenseUnit("I1", "battery", 6.9, 79.9, UnitRole.INTERCEPTOR, 150.0, shot_speed=0.25),
        DefenseUnit("I2", "corner battery", 5.8, 79.5, UnitRole.INTERCEPTOR, 15.0, shot_speed=1.2),
    ]


def _always(**overrides):
    defaults = dict(chance_low=1.0, chance_high=1.0, relocation_chance=0.0)
    defaults.update(overrides)
    return MutationParams(**defaults)


class TestShape:
    @pytest.mark.parametrize("high_entropy", [False, True])
    def test_length_and_order_preserved(self, high_entropy):
        rng = np.random.default_rng(0)
        units = _layout()
        out = mutate_deployment(units, False, BOUNDS, rng, high_entropy=high_entropy)
        assert [u.unit_id for u in out] == [u.unit_id for u in units]

    def test_input_not_modified(self):
        units = _layout()
        snapshot = list(units)
        mutate_deployment(units, False, BOUNDS, np.random.default_rng(1), params=_always())
        assert units == snapshot

    def test_only_position_changes(self):
        out = mutate_deployment(_layout(), False, BOUNDS, np.random.default_rng(2), params=_always())
        for before, after in zip(_layout(), out):
            assert (after.role, after.range_km, after.shot_speed) == (
                before.role, before.range_km, before.shot_speed,
            )


class TestBounds:
    @pytest.mark.parametrize("high_entropy", [False, True])
    def test_always_within_bounds(self, high_entropy):
        rng = np.random.default_rng(3)
        params = _always(relocation_chance=0.5)
        units = _layout()
        for _ in range(200):
            units = mutate_deployment(units, False, BOUNDS, rng, high_entropy, params)
            for u in units:
                assert BOUNDS.contains(u.position)


class TestProbabilities:
    def test_zero_chance_is_identity(self):
        params = MutationParams(chance_low=0.0, chance_high=0.0)
        rng = np.random.default_rng(4)
        units = _layout()
        for high_entropy in (False, True):
            out = mutate_deployment(units, False, BOUNDS, rng, high_entropy, params)
            assert out == units

    def test_secured_radars_frozen(self):
        units = _layout()
        out = mutate_deployment(units, True, BOUNDS, np.random.default_rng(5), params=_always())
        assert out[0] is units[0]
        assert out[1] is units[1]
        assert out[2].position != units[2].position

    def test_high_entropy_overrides_secured(self):
        units = _layout()
        out = mutate_deployment(
            units, True, BOUNDS, np.random.default_rng(6), high_entropy=True, params=_always(),
        )
        assert out[0].position != units[0].position

    def test_low_entropy_step_size(self):
        rng = np.random.default_rng(7)
        params = _always()
        unit = _layout()[2]  # interceptor, well inside the box
        for _ in range(200):
            moved = mutate_deployment([unit], False, BOUNDS, rng, params=params)[0]
            assert abs(moved.lat - unit.lat) <= 0.45 / 2
            assert abs(moved.lng - unit.lng) <= 0.45 / 2

    def test_high_entropy_step_size(self):
        rng = np.random.default_rng(8)
        unit = _layout()[0]  # radar at the center
        for _ in range(200):
            moved = mutate_deployment([unit], False, BOUNDS, rng, True, _always())[0]
            assert abs(moved.lat - unit.lat) <= 1.5 * 2.5 / 2 + 1e-12

    def test_full_relocation(self):
        rng = np.random.default_rng(9)
        params = _always(relocation_chance=1.0)
        units = _layout()
        out = mutate_deployment(units, False, BOUNDS, rng, high_entropy=True, params=params)
        assert all(BOUNDS.contains(u.position) for u in out)
        assert all(a.position != b.position for a, b in zip(units, out))

    def test_reproducible(self):
        a = mutate_deployment(_layout(), False, BOUNDS, np.random.default_rng(10))
        b = mutate_deployment(_layout(), False, BOUNDS, np.random.default_rng(10))
        assert a == b


class TestMutationParams:
    def test_from_none(self):
        assert MutationParams.from_omegaconf(None) == MutationParams()

    def test_partial(self):
        params = MutationParams.from_omegaconf({"chance_low": 0.1})
        assert params.chance_low == 0.1
        assert params.radar_step_deg == 1.5
