"""Monte Carlo batch evaluation without kinematic stepping.

Each trial draws a border-crossing origin and a destination, then decides
the outcome from straight-line geometry alone:

- detected if any active radar's range reaches the origin-to-target segment;
- intercepted if detected and any active interceptor both reaches the
  segment and out-paces the threat by more than ``feasibility_ratio``.

This is a deliberately coarser model than the kinematic engine; it shares
the same reachability query and range units so the two stay consistent.
Cost is linear in ``rounds * missiles_per_round * units``.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import numpy as np

from rampart.core.theater import Theater
from rampart.core.types import BatchResult, DefenseUnit, get_archetype
from rampart.engagement.reach import any_in_reach, segment_metric, split_roles

logger = logging.getLogger(__name__)

# Shot speed assumed for interceptors that carry none
DEFAULT_BATCH_SHOT_SPEED = 0.25


@dataclass
class BatchConfig:
    """Batch evaluator settings."""

    rounds: int = 100
    missiles_per_round: int = 20
    archetype: str = "cruise"
    border_margin_deg: float = 1.0
    city_target_probability: float = 0.7
    feasibility_ratio: float = 0.8
    max_logs: int = 20
    # Every Nth launch contributes a log line, per outcome
    intercept_log_every: int = 100
    breach_log_every: int = 50
    undetected_log_every: int = 20

    @classmethod
    def from_omegaconf(cls, cfg: Any) -> BatchConfig:
        """Build from OmegaConf dict or plain dict."""
        if cfg is None:
            return cls()

        try:
            from omegaconf import OmegaConf
            if hasattr(cfg, "_metadata"):
                cfg = OmegaConf.to_container(cfg, resolve=True)
        except ImportError:
            pass

        return cls(
            rounds=int(cfg.get("rounds", 100)),
            missiles_per_round=int(cfg.get("missiles_per_round", 20)),
            archetype=str(cfg.get("archetype", "cruise")),
            border_margin_deg=float(cfg.get("border_margin_deg", 1.0)),
            city_target_probability=float(cfg.get("city_target_probability", 0.7)),
            feasibility_ratio=float(cfg.get("feasibility_ratio", 0.8)),
            max_logs=int(cfg.get("max_logs", 20)),
            intercept_log_every=int(cfg.get("intercept_log_every", 100)),
            breach_log_every=int(cfg.get("breach_log_every", 50)),
            undetected_log_every=int(cfg.get("undetected_log_every", 20)),
        )


class BatchEvaluator:
    """Statistical outcome estimator for a deployment.

    Args:
        units: Defense deployment; inactive units are ignored.
        theater: Bounds and weighted cities to draw trials from.
        config: Trial-generation settings.
        seed: RNG seed. Results are reproducible for a fixed seed.
    """

    def __init__(
        self,
        units: Iterable[DefenseUnit],
        theater: Theater | None = None,
        config: BatchConfig | None = None,
        seed: int | None = None,
    ):
        self._radars, self._interceptors = split_roles(units)
        self._theater = theater or Theater()
        self._config = config or BatchConfig()
        self._rng = np.random.default_rng(seed)

    @property
    def config(self) -> BatchConfig:
        return self._config

    def run(
        self,
        rounds: int | None = None,
        missiles_per_round: int | None = None,
        archetype: str | None = None,
        speed_scale: float = 1.0,
    ) -> BatchResult:
        """Run ``rounds * missiles_per_round`` trials synchronously.

        Arguments left as ``None`` come from the config.

        Raises:
            ValueError: For negative counts, a non-positive speed scale or an
                unknown archetype.
        """
        cfg = self._config
        rounds = cfg.rounds if rounds is None else int(rounds)
        per_round = cfg.missiles_per_round if missiles_per_round is None else int(missiles_per_round)
        if rounds < 0 or per_round < 0:
            raise ValueError(f"rounds and missiles_per_round must be >= 0, got {rounds}, {per_round}")
        if speed_scale <= 0:
            raise ValueError(f"speed_scale must be > 0, got {speed_scale}")
        kind = get_archetype(archetype or cfg.archetype)
        threat_speed = kind.speed(speed_scale)

        started = time.perf_counter()
        bounds = self._theater.bounds
        cities = self._theater.cities

        launched = detected_count = intercepted = impacted = 0
        logs: list[str] = []

        def keep(line: str) -> None:
            if len(logs) < cfg.max_logs:
                logs.append(line)

        def fast_enough(unit: DefenseUnit) -> bool:
            shot = unit.shot_speed or DEFAULT_BATCH_SHOT_SPEED
            return shot / threat_speed > cfg.feasibility_ratio

        for r in range(rounds):
            for _ in range(per_round):
                launched += 1
                start = bounds.border_point(self._rng, cfg.border_margin_deg)
                if cities and self._rng.random() < cfg.city_target_probability:
                    city = cities[int(self._rng.integers(len(cities)))]
                    target, place = city.position, city.name
                else:
                    target = bounds.random_point(self._rng, inset=0.5)
                    place = f"({target[0]:.2f}, {target[1]:.2f})"

                path = segment_metric(start, target)
                if not any_in_reach(self._radars, path):
                    impacted += 1
                    if launched % cfg.undetected_log_every == 0:
                        keep(f"[R-{r + 1}] Undetected Threat Impact on {place}")
                    continue

                detected_count += 1
                if any_in_reach(self._interceptors, path, fast_enough):
                    intercepted += 1
                    if launched % cfg.intercept_log_every == 0:
                        keep(f"[R-{r + 1}] Intercepted missile near {place}")
                else:
                    impacted += 1
                    if launched % cfg.breach_log_every == 0:
                        keep(f"[R-{r + 1}] Critical Failure: Impact on {place}")

        elapsed = time.perf_counter() - started
        result = BatchResult(
            total_launched=launched,
            detected=detected_count,
            intercepted=intercepted,
            impacted=impacted,
            detection_rate=(detected_count / launched * 100.0) if launched else 0.0,
            time_taken_s=elapsed,
            logs=tuple(logs),
        )
        logger.info(
            "Batch %s x%d x%d: %d/%d intercepted, %.1f%% detected in %.3fs",
            kind.archetype_id, rounds, per_round, intercepted, launched,
            result.detection_rate, elapsed,
        )
        return result

    async def run_async(
        self,
        rounds: int | None = None,
        missiles_per_round: int | None = None,
        archetype: str | None = None,
        speed_scale: float = 1.0,
    ) -> BatchResult:
        """Yield to the event loop once, then run to completion."""
        await asyncio.sleep(0)
        return self.run(rounds, missiles_per_round, archetype, speed_scale)
