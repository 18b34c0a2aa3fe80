"""Greedy hill-climbing placement search.

Repeatedly mutates the best layout so far, scores the candidate with the
coverage scorer and keeps it only if the objective strictly improves.
Radars are frozen once radar land coverage reaches ``radar_secured_pct``.
After ``stagnation_limit`` consecutive rejections the search switches to
high-entropy mutation until something improves again.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np

from rampart.core.types import CoverageResult, DefenseUnit
from rampart.coverage.scoring import CoverageScorer, objective
from rampart.optimize.mutation import MutationParams, mutate_deployment

logger = logging.getLogger(__name__)


@dataclass
class OptimizationResult:
    units: list[DefenseUnit]
    coverage: CoverageResult
    score: float
    iterations: int = 0
    accepted: int = 0
    history: list[float] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "score": round(self.score, 3),
            "iterations": self.iterations,
            "accepted": self.accepted,
            "coverage": self.coverage.to_dict(),
            "units": [u.to_dict() for u in self.units],
        }


class HillClimbOptimizer:
    """Greedy search over unit positions.

    Args:
        scorer: Objective source; its theater's bounds confine mutations.
        priorities: Coverage metrics to maximize (``land``, ``cities``, ``sea``).
        params: Mutation probabilities and step sizes.
        max_iterations: Number of candidates to evaluate.
        stagnation_limit: Rejections in a row before forcing high entropy.
        radar_secured_pct: Radar land coverage at which radars stop moving.
        seed: RNG seed.
    """

    def __init__(
        self,
        scorer: CoverageScorer,
        priorities: Sequence[str] = ("land", "cities"),
        params: MutationParams | None = None,
        max_iterations: int = 500,
        stagnation_limit: int = 40,
        radar_secured_pct: float = 98.0,
        seed: int | None = None,
    ):
        self._scorer = scorer
        self._priorities = tuple(priorities)
        self._params = params or MutationParams()
        self._max_iterations = max(0, int(max_iterations))
        self._stagnation_limit = max(1, int(stagnation_limit))
        self._radar_secured_pct = radar_secured_pct
        self._rng = np.random.default_rng(seed)

    def evaluate(self, units: Sequence[DefenseUnit]) -> tuple[float, CoverageResult]:
        result = self._scorer.score(units)
        return objective(result, self._priorities), result

    def optimize(self, initial: Sequence[DefenseUnit]) -> OptimizationResult:
        best = list(initial)
        best_score, best_cov = self.evaluate(best)
        history = [best_score]
        accepted = 0
        stagnant = 0
        bounds = self._scorer.theater.bounds

        for i in range(self._max_iterations):
            high_entropy = stagnant >= self._stagnation_limit
            radar_secured = best_cov.radar_land_pct >= self._radar_secured_pct
            candidate = mutate_deployment(
                best, radar_secured, bounds, self._rng,
                high_entropy=high_entropy, params=self._params,
            )
            score, cov = self.evaluate(candidate)
            if score > best_score:
                best, best_score, best_cov = candidate, score, cov
                accepted += 1
                stagnant = 0
                logger.debug(
                    "Iteration %d: accepted score %.3f (high_entropy=%s)", i, score, high_entropy,
                )
            else:
                stagnant += 1
            history.append(best_score)

        logger.info(
            "Search complete: %d iterations, %d accepted, score %.3f",
            self._max_iterations, accepted, best_score,
        )
        return OptimizationResult(
            units=best,
            coverage=best_cov,
            score=best_score,
            iterations=self._max_iterations,
            accepted=accepted,
            history=history,
        )
