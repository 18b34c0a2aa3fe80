"""Random initial deployments for the placement search."""

from __future__ import annotations

import logging
from collections.abc import Mapping

import numpy as np

from rampart.core.catalog import UnitTemplate
from rampart.core.theater import Theater
from rampart.core.types import DefenseUnit

logger = logging.getLogger(__name__)

PLACEMENT_STRATEGIES = ("inside", "outside", "any")
MAX_PLACEMENT_ATTEMPTS = 50


def random_deployment(
    unit_counts: Mapping[str, int],
    catalog: Mapping[str, UnitTemplate],
    theater: Theater,
    rng: np.random.Generator,
    strategy: str = "inside",
) -> list[DefenseUnit]:
    """Scatter ``unit_counts[category]`` units of each catalog type.

    Candidate positions favor strategic sites (30 %) and cities (30 %) and
    are otherwise uniform in the bounding box; the ``outside`` strategy only
    uses uniform draws. A candidate is accepted when it satisfies the
    strategy's land test (``inside`` = on land, ``outside`` = at sea,
    ``any`` = anything). After 50 rejected draws the last candidate is kept.

    Unknown categories are skipped with a warning.

    Raises:
        ValueError: For an unknown strategy.
    """
    if strategy not in PLACEMENT_STRATEGIES:
        raise ValueError(f"strategy must be one of {PLACEMENT_STRATEGIES}, got {strategy!r}")

    units: list[DefenseUnit] = []
    for category, count in unit_counts.items():
        template = catalog.get(category)
        if template is None:
            logger.warning("Unknown unit category %r, skipping", category)
            continue
        for s in range(int(count)):
            lat, lng = _draw_position(theater, rng, strategy)
            units.append(
                template.place(
                    lat, lng,
                    unit_id=f"{category}-{s + 1}",
                    name=f"{category}-{s + 1}",
                )
            )
    return units


def _draw_position(
    theater: Theater, rng: np.random.Generator, strategy: str,
) -> tuple[float, float]:
    bounds = theater.bounds
    lat = lng = 0.0
    for _ in range(MAX_PLACEMENT_ATTEMPTS):
        roll = rng.random()
        if roll > 0.7 and strategy != "outside" and theater.sites:
            site = theater.sites[int(rng.integers(len(theater.sites)))]
            lat = site.lat + (rng.random() - 0.5) * 0.4
            lng = site.lng + (rng.random() - 0.5) * 0.4
        elif roll > 0.4 and strategy != "outside" and theater.cities:
            city = theater.cities[int(rng.integers(len(theater.cities)))]
            lat = city.lat + (rng.random() - 0.5) * 0.6
            lng = city.lng + (rng.random() - 0.5) * 0.6
        else:
            lat, lng = bounds.random_point(rng)

        on_land = theater.is_land((lat, lng))
        if strategy == "inside" and on_land:
            break
        if strategy == "outside" and not on_land:
            break
        if strategy == "any":
            break
    return float(lat), float(lng)
