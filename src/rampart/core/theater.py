"""Theater of operations: bounding box, land boundary, weighted cities."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from rampart.geo.region import BoundingBox, Region

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class City:
    """Weighted point of interest. ``weight`` must be positive."""

    name: str
    lat: float
    lng: float
    weight: float = 1.0

    def __post_init__(self) -> None:
        if self.weight <= 0:
            raise ValueError(f"City {self.name!r} needs a positive weight, got {self.weight}")

    @property
    def position(self) -> tuple[float, float]:
        return (self.lat, self.lng)


@dataclass(frozen=True)
class Site:
    """Named strategic location used to seed random deployments."""

    name: str
    lat: float
    lng: float


DEFAULT_BOUNDS = BoundingBox(min_lat=5.8, max_lat=9.9, min_lng=79.5, max_lng=82.0)

DEFAULT_CITIES: tuple[City, ...] = (
    City("Colombo", 6.9271, 79.8612, 5.0),
    City("Kandy", 7.2906, 80.6337, 3.0),
    City("Galle", 6.0535, 80.2210, 2.0),
    City("Jaffna", 9.6615, 80.0104, 2.0),
    City("Trincomalee", 8.5873, 81.2152, 2.0),
    City("Anuradhapura", 8.3114, 80.4037, 3.5),
    City("Batticaloa", 7.7102, 81.6924, 1.5),
    City("Matara", 5.9549, 80.5550, 2.5),
    City("Ratnapura", 6.6828, 80.3992, 1.5),
    City("Kurunegala", 7.4818, 80.3609, 1.5),
    City("Pottuvil", 6.8724, 81.8210, 1.2),
)

DEFAULT_SITES: tuple[Site, ...] = (
    Site("Pidurutalagala Summit", 7.0001, 80.7725),
    Site("Trincomalee Coast", 8.5873, 81.2152),
    Site("Hambantota Coast", 6.1246, 81.1245),
    Site("Pottuvil Coast", 6.8724, 81.8210),
    Site("Dondra Head", 5.9234, 80.5873),
)


@dataclass(frozen=True)
class Theater:
    """Everything geographic the simulation core needs.

    ``region`` may be ``None``, in which case every point counts as land.
    """

    bounds: BoundingBox = DEFAULT_BOUNDS
    region: Region | None = None
    cities: tuple[City, ...] = DEFAULT_CITIES
    sites: tuple[Site, ...] = DEFAULT_SITES

    def is_land(self, point: tuple[float, float]) -> bool:
        if self.region is None:
            return True
        return self.region.contains(point)

    @property
    def total_city_weight(self) -> float:
        return sum(c.weight for c in self.cities)

    @classmethod
    def from_omegaconf(cls, cfg: Any, base_dir: str | Path | None = None) -> Theater:
        """Build from the ``rampart.theater`` config section.

        A relative ``region_geojson`` path is resolved against *base_dir*
        (normally the directory of the config file).
        """
        if cfg is None:
            return cls()

        try:
            from omegaconf import OmegaConf
            if hasattr(cfg, "_metadata"):
                cfg = OmegaConf.to_container(cfg, resolve=True)
        except ImportError:
            pass

        bounds = BoundingBox.from_config(cfg["bounds"]) if cfg.get("bounds") else DEFAULT_BOUNDS

        region = None
        region_path = cfg.get("region_geojson")
        if region_path:
            path = Path(region_path)
            if not path.is_absolute() and base_dir is not None:
                path = Path(base_dir) / path
            region = Region.load(path)

        cities = DEFAULT_CITIES
        if cfg.get("cities"):
            cities = tuple(
                City(c["name"], float(c["lat"]), float(c["lng"]), float(c.get("weight", 1.0)))
                for c in cfg["cities"]
            )

        sites = DEFAULT_SITES
        if cfg.get("strategic_locations"):
            sites = tuple(
                Site(s["name"], float(s["lat"]), float(s["lng"]))
                for s in cfg["strategic_locations"]
            )

        logger.debug(
            "Theater loaded: %d cities, %d sites, region=%s",
            len(cities), len(sites), "yes" if region is not None else "none",
        )
        return cls(bounds=bounds, region=region, cities=cities, sites=sites)
