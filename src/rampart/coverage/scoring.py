"""Grid coverage scoring over the theater.

A uniform ``floor(sqrt(N))²`` grid of cell centers is laid over the bounding
box. Each sample is classified land/sea against the region boundary and
tested for radar and interceptor reach; weighted cities are scored
separately. Results are recomputed from scratch on every call; the only
cached state is the grid and its land mask, which depend on the theater
alone.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence

import numpy as np

from rampart.core.theater import City, Theater
from rampart.core.types import CoverageResult, DefenseUnit
from rampart.engagement.reach import covers_point, split_roles
from rampart.geo.primitives import distance_m_array

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_COUNT = 3600

PRIORITY_METRICS = {
    "land": "combined_land_pct",
    "cities": "combined_city_pct",
    "sea": "combined_sea_pct",
}


def _pct(count: float, total: float) -> float:
    if total <= 0:
        return 0.0
    return count / total * 100.0


class CoverageScorer:
    """Scores a deployment against a fixed theater.

    Args:
        theater: Bounding box, optional land boundary and weighted cities.
        sample_count: Target number of grid samples; the grid side is
            ``floor(sqrt(sample_count))``.
    """

    def __init__(self, theater: Theater, sample_count: int = DEFAULT_SAMPLE_COUNT):
        self._theater = theater
        self._grid_size = int(math.isqrt(max(int(sample_count), 0)))
        self._lat, self._lng = self._build_grid()
        self._land = self._classify_land()
        logger.debug(
            "Coverage grid %dx%d: %d land, %d sea samples",
            self._grid_size, self._grid_size,
            int(self._land.sum()), int(self._land.size - self._land.sum()),
        )

    @property
    def theater(self) -> Theater:
        return self._theater

    @property
    def grid_size(self) -> int:
        return self._grid_size

    @property
    def sample_points(self) -> np.ndarray:
        """(G*G, 2) array of (lat, lng) cell centers."""
        return np.column_stack([self._lat.ravel(), self._lng.ravel()])

    @property
    def land_mask(self) -> np.ndarray:
        return self._land.copy()

    def _build_grid(self) -> tuple[np.ndarray, np.ndarray]:
        b = self._theater.bounds
        g = self._grid_size
        if g == 0:
            return np.empty((0, 0)), np.empty((0, 0))
        lat_step = b.lat_span / g
        lng_step = b.lng_span / g
        lats = b.min_lat + np.arange(g) * lat_step + lat_step / 2.0
        lngs = b.min_lng + np.arange(g) * lng_step + lng_step / 2.0
        # Row i = latitude band, column j = longitude band
        return np.meshgrid(lats, lngs, indexing="ij")

    def _classify_land(self) -> np.ndarray:
        if self._lat.size == 0:
            return np.zeros((0, 0), dtype=bool)
        if self._theater.region is None:
            return np.ones(self._lat.shape, dtype=bool)
        contains = self._theater.region.contains
        flat = [
            contains((float(lat), float(lng)))
            for lat, lng in zip(self._lat.ravel(), self._lng.ravel())
        ]
        return np.array(flat, dtype=bool).reshape(self._lat.shape)

    def reach_mask(self, units: Sequence[DefenseUnit]) -> np.ndarray:
        """Boolean grid: sample is within range of at least one active unit."""
        mask = np.zeros(self._lat.shape, dtype=bool)
        for unit in units:
            if not unit.active:
                continue
            dist = distance_m_array(self._lat, self._lng, unit.lat, unit.lng)
            mask |= dist <= unit.range_m
        return mask

    def score(self, units: Iterable[DefenseUnit]) -> CoverageResult:
        """Full coverage evaluation for *units* (inactive units are ignored)."""
        radars, interceptors = split_roles(units)

        radar = self.reach_mask(radars)
        shot = self.reach_mask(interceptors)
        both = radar & shot
        land = self._land
        sea = ~land

        land_total = int(land.sum())
        sea_total = int(sea.sum())

        city_total, city_covered = self._city_weights(
            self._theater.cities, radars, interceptors,
        )

        return CoverageResult(
            combined_land_pct=_pct(int((both & land).sum()), land_total),
            combined_city_pct=_pct(city_covered, city_total),
            combined_sea_pct=_pct(int((both & sea).sum()), sea_total),
            radar_land_pct=_pct(int((radar & land).sum()), land_total),
            interceptor_land_pct=_pct(int((shot & land).sum()), land_total),
        )

    @staticmethod
    def _city_weights(
        cities: Sequence[City],
        radars: Sequence[DefenseUnit],
        interceptors: Sequence[DefenseUnit],
    ) -> tuple[float, float]:
        total = 0.0
        covered = 0.0
        for city in cities:
            total += city.weight
            if covers_point(radars, city.position) and covers_point(interceptors, city.position):
                covered += city.weight
        return total, covered


def objective(result: CoverageResult, priorities: Sequence[str]) -> float:
    """Mean of the prioritized combined-coverage metrics.

    Unknown priority names are ignored; no valid priority gives land coverage.
    """
    keys = [PRIORITY_METRICS[p] for p in priorities if p in PRIORITY_METRICS]
    if not keys:
        keys = [PRIORITY_METRICS["land"]]
    return sum(getattr(result, k) for k in keys) / len(keys)


def summarize(result: CoverageResult, priorities: Sequence[str]) -> str:
    """One-line human summary of a coverage result."""
    text = f"Priorities: {' + '.join(priorities).upper()}."
    if result.combined_city_pct > 95:
        text += " [Fortress Protocol Active]"
    elif result.combined_city_pct > 75:
        text += " [High-Priority Urban Shield]"
    if result.radar_land_pct > 98:
        text += " [Total Detection Awareness]"
    return text
