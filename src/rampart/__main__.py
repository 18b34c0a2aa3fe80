"""RAMPART CLI entry point.

Usage:
    python -m rampart coverage                          # Score the configured deployment
    python -m rampart simulate --salvo 10               # Headless kinematic run
    python -m rampart batch --rounds 500 --archetype ballistic
    python -m rampart optimize --iterations 1000        # Hill-climb the deployment
    python -m rampart optimize --unit JY-27=2 --unit Barak-8=4 --strategy inside
    python -m rampart --config custom.yaml batch        # Custom config
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

import numpy as np
from omegaconf import OmegaConf

from rampart.batch.evaluator import BatchConfig, BatchEvaluator
from rampart.core.catalog import catalog_from_config, deployment_from_config
from rampart.core.clock import SimClock, create_clock
from rampart.core.config import RampartConfig
from rampart.core.theater import Theater
from rampart.core.types import THREAT_ARCHETYPES
from rampart.coverage.scoring import DEFAULT_SAMPLE_COUNT, CoverageScorer, summarize
from rampart.optimize.deployment import PLACEMENT_STRATEGIES, random_deployment
from rampart.optimize.mutation import MutationParams
from rampart.optimize.search import HillClimbOptimizer
from rampart.simulation.config import SimulationConfig
from rampart.simulation.engine import SimulationEngine
from rampart.simulation.runner import SimulationRunner
from rampart.utils.logging import setup_logging

logger = logging.getLogger("rampart.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rampart",
        description="RAMPART - Area-defense simulation and placement optimization",
    )
    parser.add_argument(
        "--config",
        "-c",
        default="config/default.yaml",
        help="Path to configuration YAML file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Path to log file (default: no file logging)",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        default=False,
        help="Output logs as JSON instead of human-readable",
    )
    parser.add_argument(
        "--validate-config",
        action="store_true",
        default=False,
        help="Validate config against Pydantic schema before starting",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="RNG seed for reproducible runs",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("coverage", help="Score coverage of the configured deployment")

    sim = sub.add_parser("simulate", help="Run a headless kinematic engagement")
    sim.add_argument("--salvo", type=int, default=10, help="Threats in the random strike")
    sim.add_argument(
        "--archetype", default="cruise", choices=sorted(THREAT_ARCHETYPES),
        help="Threat archetype",
    )
    sim.add_argument("--speed-scale", type=float, default=1.0, help="Threat speed multiplier")
    sim.add_argument("--acceleration", type=float, default=10.0, help="Time acceleration")
    sim.add_argument(
        "--max-frames", type=int, default=20000,
        help="Stop after this many frames even if threats are still flying",
    )

    batch = sub.add_parser("batch", help="Run the statistical batch evaluator")
    batch.add_argument("--rounds", type=int, default=None, help="Override batch rounds")
    batch.add_argument(
        "--missiles", type=int, default=None, help="Override missiles per round",
    )
    batch.add_argument(
        "--archetype", default=None, choices=sorted(THREAT_ARCHETYPES),
        help="Override batch archetype",
    )
    batch.add_argument("--speed-scale", type=float, default=1.0, help="Threat speed multiplier")

    opt = sub.add_parser("optimize", help="Hill-climb unit placement for coverage")
    opt.add_argument("--iterations", type=int, default=None, help="Override max iterations")
    opt.add_argument(
        "--priority", action="append", default=None, choices=["land", "cities", "sea"],
        help="Coverage metric to maximize (repeatable)",
    )
    opt.add_argument(
        "--unit", action="append", default=None, metavar="CATEGORY=COUNT",
        help="Start from a random layout with COUNT units of CATEGORY (repeatable)",
    )
    opt.add_argument(
        "--strategy", default="inside", choices=list(PLACEMENT_STRATEGIES),
        help="Land test for random initial placement",
    )
    return parser


def _parse_unit_counts(items: list[str]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for item in items:
        category, sep, count = item.rpartition("=")
        if not sep or not category:
            raise ValueError(f"Expected CATEGORY=COUNT, got {item!r}")
        counts[category] = counts.get(category, 0) + int(count)
    return counts


def _section(cfg: Any, name: str) -> Any:
    return OmegaConf.select(cfg, f"rampart.{name}", default=None)


def _print(payload: dict) -> None:
    print(json.dumps(payload, indent=2))


def _run_coverage(cfg: Any, theater: Theater, units: list) -> int:
    sample_count = OmegaConf.select(
        cfg, "rampart.coverage.sample_count", default=DEFAULT_SAMPLE_COUNT,
    )
    scorer = CoverageScorer(theater, sample_count=sample_count)
    result = scorer.score(units)
    priorities = list(OmegaConf.select(cfg, "rampart.optimize.priorities", default=["land"]))
    _print({"coverage": result.to_dict(), "summary": summarize(result, priorities)})
    return 0


def _run_simulate(cfg: Any, theater: Theater, units: list, args: argparse.Namespace) -> int:
    sim_cfg = SimulationConfig.from_omegaconf(_section(cfg, "simulation"))
    clock = create_clock(sim_cfg.clock_mode)
    engine = SimulationEngine(units, theater, sim_cfg, clock=clock, seed=args.seed)
    runner = SimulationRunner(
        engine, clock, frame_interval_s=sim_cfg.frame_interval_s, acceleration=args.acceleration,
    )
    engine.launch_salvo(args.salvo, args.archetype, args.speed_scale)
    if isinstance(clock, SimClock):
        frames = runner.step_frames(args.max_frames)
        snapshot, logs = engine.snapshot(), engine.logs
    else:
        frames, snapshot, logs = asyncio.run(
            _run_realtime(runner, sim_cfg.frame_interval_s, args.max_frames),
        )
    logger.info(
        "Simulated %d frames (%.1f s at x%.1f, %s clock)",
        frames, clock.elapsed(), runner.acceleration, sim_cfg.clock_mode,
    )
    _print({
        "frames": frames,
        "simulated_s": round(clock.elapsed() * runner.acceleration, 3),
        "stats": {**snapshot.stats.to_dict(), "moving": snapshot.moving},
        "log": [entry.message for entry in reversed(logs)],
    })
    return 0


async def _run_realtime(runner: SimulationRunner, interval_s: float, max_frames: int):
    """Tick on the event loop until no threat is moving or *max_frames* ran."""
    engine = runner.engine
    runner.activate()
    try:
        while runner.frames < max_frames and any(t.is_moving for t in engine.threats):
            await asyncio.sleep(interval_s)
        # deactivate() resets the engine, so capture the outcome first
        return runner.frames, engine.snapshot(), engine.logs
    finally:
        runner.deactivate()


def _run_batch(cfg: Any, theater: Theater, units: list, args: argparse.Namespace) -> int:
    batch_cfg = BatchConfig.from_omegaconf(_section(cfg, "batch"))
    evaluator = BatchEvaluator(units, theater, batch_cfg, seed=args.seed)
    result = evaluator.run(args.rounds, args.missiles, args.archetype, args.speed_scale)
    _print(result.to_dict())
    return 0


def _run_optimize(
    cfg: Any, theater: Theater, catalog: dict, units: list, args: argparse.Namespace,
) -> int:
    opt_cfg = _section(cfg, "optimize")
    get = opt_cfg.get if opt_cfg is not None else {}.get
    sample_count = OmegaConf.select(
        cfg, "rampart.coverage.sample_count", default=DEFAULT_SAMPLE_COUNT,
    )
    priorities = args.priority or list(get("priorities", ["land", "cities"]))

    if args.unit:
        counts = _parse_unit_counts(args.unit)
        units = random_deployment(
            counts, catalog, theater, np.random.default_rng(args.seed), strategy=args.strategy,
        )

    optimizer = HillClimbOptimizer(
        CoverageScorer(theater, sample_count=sample_count),
        priorities=priorities,
        params=MutationParams.from_omegaconf(get("mutation")),
        max_iterations=args.iterations if args.iterations is not None
        else int(get("max_iterations", 500)),
        stagnation_limit=int(get("stagnation_limit", 40)),
        radar_secured_pct=float(get("radar_secured_pct", 98.0)),
        seed=args.seed,
    )
    result = optimizer.optimize(units)
    _print({**result.to_dict(), "summary": summarize(result.coverage, priorities)})
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    # Load config
    config = RampartConfig(args.config)
    try:
        cfg = config.load(validate=args.validate_config)
    except FileNotFoundError:
        print(f"Error: Config file not found: {args.config}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: Config validation failed:\n{e}", file=sys.stderr)
        return 1

    # Setup logging
    system = _section(cfg, "system") or {}
    log_level = args.log_level or system.get("log_level", "INFO")
    log_file = args.log_file or system.get("log_file", None)
    log_json = args.log_json or system.get("log_json", False)
    setup_logging(log_level, log_file=log_file, log_json=log_json)

    # Build the scenario
    try:
        theater = Theater.from_omegaconf(_section(cfg, "theater"), base_dir=config.base_dir)
        catalog = catalog_from_config(_section(cfg, "catalog"))
        records = OmegaConf.select(cfg, "rampart.deployment.units", default=None)
        records = OmegaConf.to_container(records, resolve=True) if records is not None else []
        units = deployment_from_config(records, catalog)
    except ValueError as e:
        print(f"Error: Invalid scenario configuration:\n{e}", file=sys.stderr)
        return 1

    try:
        if args.command == "coverage":
            return _run_coverage(cfg, theater, units)
        if args.command == "simulate":
            return _run_simulate(cfg, theater, units, args)
        if args.command == "batch":
            return _run_batch(cfg, theater, units, args)
        return _run_optimize(cfg, theater, catalog, units, args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
