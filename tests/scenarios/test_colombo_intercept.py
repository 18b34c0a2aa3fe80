"""End-to-end engagement scenarios over the default theater."""

from __future__ import annotations

import pytest

from rampart.batch.evaluator import BatchConfig, BatchEvaluator
from rampart.core.catalog import catalog_from_config, deployment_from_config
from rampart.core.clock import SimClock
from rampart.core.theater import Theater
from rampart.core.types import LogKind, ThreatStatus
from rampart.coverage.scoring import CoverageScorer
from rampart.geo.primitives import distance_m
from rampart.simulation.config import SimulationConfig
from rampart.simulation.engine import SimulationEngine
from rampart.simulation.runner import SimulationRunner

COLOMBO = (6.9271, 79.8612)
NORTHERN_ORIGIN = (9.9, 80.75)


def _headless(units, theater=None, acceleration=10.0, frame_interval_s=0.1, seed=0):
    clock = SimClock()
    engine = SimulationEngine(units, theater, SimulationConfig(), clock=clock, seed=seed)
    runner = SimulationRunner(
        engine, clock, frame_interval_s=frame_interval_s, acceleration=acceleration,
    )
    return engine, runner


@pytest.fixture
def theater(default_config, config_path) -> Theater:
    return Theater.from_omegaconf(default_config.rampart.theater, base_dir=config_path.parent)


@pytest.fixture
def default_units(default_config):
    catalog = catalog_from_config(default_config.rampart.catalog)
    records = [dict(r) for r in default_config.rampart.deployment.units]
    return deployment_from_config(records, catalog)


class TestColomboDefense:
    def test_cruise_missile_on_colombo_is_intercepted(self, colombo_deployment):
        engine, runner = _headless(colombo_deployment)
        engine.launch(NORTHERN_ORIGIN, COLOMBO, "cruise")
        frames = runner.step_frames(2000)

        threat = engine.threats[0]
        assert threat.status is ThreatStatus.INTERCEPTED
        assert frames < 2000
        assert threat.detected_by == "RDR-CMB"
        assert threat.interceptor_id == "INT-CMB"
        assert engine.stats.intercepted == 1
        assert engine.stats.impacted == 0

        # Killed inside the battery's envelope, well short of the city
        battery = colombo_deployment[1]
        assert distance_m(threat.current, battery.position) <= battery.range_m + 5_000.0
        assert distance_m(threat.current, COLOMBO) > 50_000.0

    def test_event_sequence(self, colombo_deployment):
        engine, runner = _headless(colombo_deployment)
        engine.launch(NORTHERN_ORIGIN, COLOMBO, "cruise")
        runner.step_frames(2000)
        kinds = [e.kind for e in reversed(engine.logs)]
        assert kinds == [LogKind.DETECTED, LogKind.LOCK_ON, LogKind.INTERCEPTED]

    def test_radar_off_means_impact(self, colombo_deployment):
        radar, battery = colombo_deployment
        engine, runner = _headless([radar.with_active(False), battery])
        engine.launch(NORTHERN_ORIGIN, COLOMBO, "cruise")
        runner.step_frames(5000)
        threat = engine.threats[0]
        assert threat.status is ThreatStatus.IMPACTED
        assert threat.current == COLOMBO
        assert engine.stats.impacted == 1


class TestDefaultTheater:
    def test_salvo_resolves_with_consistent_counters(self, theater, default_units):
        engine, runner = _headless(default_units, theater, acceleration=50.0, seed=11)
        engine.launch_salvo(12, "ballistic")
        runner.step_frames(20000)
        stats = engine.stats
        assert stats.launched == 12
        assert stats.intercepted + stats.impacted == 12
        assert all(not t.is_moving for t in engine.threats)

    def test_undefended_salvo_all_impact(self, theater):
        engine, runner = _headless([], theater, acceleration=50.0, seed=12)
        engine.launch_salvo(5, "hypersonic")
        runner.step_frames(20000)
        assert engine.stats.impacted == 5
        for threat in engine.threats:
            assert threat.current == threat.target

    def test_default_coverage_in_range(self, theater, default_units):
        result = CoverageScorer(theater).score(default_units)
        for pct in result.to_dict().values():
            assert 0.0 <= pct <= 100.0
        # One 500 km radar in the central highlands sees the whole island
        assert result.radar_land_pct == 100.0
        assert result.combined_land_pct > 0.0

    def test_batch_over_default_deployment(self, theater, default_units, default_config):
        cfg = BatchConfig.from_omegaconf(default_config.rampart.batch)
        result = BatchEvaluator(default_units, theater, cfg, seed=13).run(rounds=20)
        assert result.total_launched == 20 * cfg.missiles_per_round
        assert result.intercepted + result.impacted == result.total_launched
        assert result.detection_rate == 100.0
        assert result.intercepted > 0
