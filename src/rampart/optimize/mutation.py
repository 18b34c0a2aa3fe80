"""Stochastic deployment mutation: the candidate generator for placement search.

The operator never judges fitness. It perturbs a layout and leaves the
accept/reject decision to the caller.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

from rampart.core.types import DefenseUnit
from rampart.geo.region import BoundingBox


@dataclass(frozen=True)
class MutationParams:
    """Mutation probabilities and step sizes (degrees).

    Radars move in larger steps than interceptors: their placement is a
    coarse strategic choice, interceptor placement a tactical one.
    """

    chance_low: float = 0.25
    chance_high: float = 0.45
    relocation_chance: float = 0.08
    radar_step_deg: float = 1.5
    interceptor_step_deg: float = 0.45
    high_entropy_multiplier: float = 2.5

    @classmethod
    def from_omegaconf(cls, cfg: Any) -> MutationParams:
        if cfg is None:
            return cls()
        return cls(
            chance_low=float(cfg.get("chance_low", 0.25)),
            chance_high=float(cfg.get("chance_high", 0.45)),
            relocation_chance=float(cfg.get("relocation_chance", 0.08)),
            radar_step_deg=float(cfg.get("radar_step_deg", 1.5)),
            interceptor_step_deg=float(cfg.get("interceptor_step_deg", 0.45)),
            high_entropy_multiplier=float(cfg.get("high_entropy_multiplier", 2.5)),
        )


def mutate_deployment(
    units: Sequence[DefenseUnit],
    radar_secured: bool,
    bounds: BoundingBox,
    rng: np.random.Generator,
    high_entropy: bool = False,
    params: MutationParams | None = None,
) -> list[DefenseUnit]:
    """Produce a perturbed copy of *units*, same length and order.

    Args:
        units: Current layout.
        radar_secured: Leave radars where they are (ignored under high entropy).
        bounds: Every moved unit is clamped into this box.
        rng: Random source.
        high_entropy: Raise the mutation chance and step size and allow
            occasional full relocation, to escape local optima.
        params: Probabilities and step sizes.
    """
    p = params or MutationParams()
    chance = p.chance_high if high_entropy else p.chance_low
    multiplier = p.high_entropy_multiplier if high_entropy else 1.0

    out: list[DefenseUnit] = []
    for unit in units:
        if radar_secured and not high_entropy and unit.is_radar:
            out.append(unit)
            continue
        if rng.random() >= chance:
            out.append(unit)
            continue

        if high_entropy and rng.random() < p.relocation_chance:
            lat, lng = bounds.random_point(rng)
            out.append(unit.with_position(lat, lng))
            continue

        step = p.radar_step_deg if unit.is_radar else p.interceptor_step_deg
        lat = unit.lat + (rng.random() - 0.5) * step * multiplier
        lng = unit.lng + (rng.random() - 0.5) * step * multiplier
        out.append(unit.with_position(*bounds.clamp(lat, lng)))
    return out
