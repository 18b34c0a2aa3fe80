"""Tests for the hill-climbing placement search."""

import pytest

from rampart.core.types import DefenseUnit, UnitRole
from rampart.coverage.scoring import CoverageScorer
from rampart.optimize import search
from rampart.optimize.mutation import MutationParams
from rampart.optimize.search import HillClimbOptimizer


def _separated_layout():
    """Radar and interceptor in opposite corners: zero combined coverage."""
    return [
        DefenseUnit("R", "radar", 0.95, 0.95, UnitRole.RADAR, 60.0),
        DefenseUnit("I", "battery", 0.05, 0.05, UnitRole.INTERCEPTOR, 30.0, shot_speed=0.25),
    ]


@pytest.fixture
def scorer(square_theater):
    return CoverageScorer(square_theater, sample_count=100)


class TestHillClimb:
    def test_zero_iterations_returns_initial(self, scorer):
        initial = _separated_layout()
        result = HillClimbOptimizer(scorer, max_iterations=0, seed=1).optimize(initial)
        assert result.units == initial
        assert result.iterations == 0
        assert result.history == [result.score]

    def test_score_never_decreases(self, scorer):
        result = HillClimbOptimizer(scorer, ["land"], max_iterations=150, seed=2).optimize(
            _separated_layout(),
        )
        assert len(result.history) == 151
        assert all(b >= a for a, b in zip(result.history, result.history[1:]))
        assert result.score == result.history[-1]

    def test_improves_separated_layout(self, scorer):
        initial = _separated_layout()
        optimizer = HillClimbOptimizer(scorer, ["land"], max_iterations=300, seed=3)
        assert optimizer.evaluate(initial)[0] == 0.0
        result = optimizer.optimize(initial)
        assert result.score > 0.0
        assert result.accepted >= 1
        assert result.coverage.combined_land_pct == pytest.approx(result.score)

    def test_zero_mutation_never_accepts(self, scorer):
        params = MutationParams(chance_low=0.0, chance_high=0.0)
        result = HillClimbOptimizer(scorer, params=params, max_iterations=20, seed=4).optimize(
            _separated_layout(),
        )
        assert result.accepted == 0
        assert result.units == _separated_layout()

    def test_stagnation_forces_high_entropy(self, scorer, monkeypatch):
        flags = []

        def fake_mutate(units, radar_secured, bounds, rng, high_entropy=False, params=None):
            flags.append(high_entropy)
            return list(units)

        monkeypatch.setattr(search, "mutate_deployment", fake_mutate)
        HillClimbOptimizer(scorer, max_iterations=6, stagnation_limit=3, seed=5).optimize(
            _separated_layout(),
        )
        assert flags == [False, False, False, True, True, True]

    def test_radar_secured_threshold(self, scorer, monkeypatch):
        secured = []

        def fake_mutate(units, radar_secured, bounds, rng, high_entropy=False, params=None):
            secured.append(radar_secured)
            return list(units)

        monkeypatch.setattr(search, "mutate_deployment", fake_mutate)
        wide_radar = [DefenseUnit("R", "radar", 0.5, 0.5, UnitRole.RADAR, 1000.0)]
        HillClimbOptimizer(scorer, max_iterations=2, seed=6).optimize(wide_radar)
        HillClimbOptimizer(scorer, max_iterations=2, seed=6).optimize(_separated_layout())
        assert secured == [True, True, False, False]

    def test_to_dict(self, scorer):
        result = HillClimbOptimizer(scorer, max_iterations=5, seed=7).optimize(_separated_layout())
        d = result.to_dict()
        assert d["iterations"] == 5
        assert len(d["units"]) == 2
        assert set(d["coverage"]) >= {"combined_land_pct", "radar_land_pct"}
