"""Theater geometry: the bounding box and the land boundary.

The land boundary is parsed from GeoJSON. Every ring of every polygon is
kept and membership uses odd/even toggling across all of them, so holes
(lakes, lagoons) and islands both come out right without special-casing.

A missing or malformed boundary is not an error: callers receive ``None``
and treat every point as land.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np

from rampart.geo.primitives import LatLng, clamp_to_bounds, point_in_rings

logger = logging.getLogger(__name__)

Ring = tuple[tuple[float, float], ...]


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned lat/lng box in decimal degrees."""

    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def __post_init__(self) -> None:
        if self.min_lat > self.max_lat or self.min_lng > self.max_lng:
            raise ValueError(
                f"Inverted bounding box: lat [{self.min_lat}, {self.max_lat}], "
                f"lng [{self.min_lng}, {self.max_lng}]"
            )

    @property
    def lat_span(self) -> float:
        return self.max_lat - self.min_lat

    @property
    def lng_span(self) -> float:
        return self.max_lng - self.min_lng

    def contains(self, point: LatLng) -> bool:
        return (
            self.min_lat <= point[0] <= self.max_lat
            and self.min_lng <= point[1] <= self.max_lng
        )

    def clamp(self, lat: float, lng: float) -> LatLng:
        return clamp_to_bounds(
            lat, lng, self.min_lat, self.max_lat, self.min_lng, self.max_lng,
        )

    def random_point(self, rng: np.random.Generator, inset: float = 0.0) -> LatLng:
        """Uniform random point, optionally kept *inset* degrees from the edges."""
        lat = self.min_lat + inset + rng.random() * max(self.lat_span - 2 * inset, 0.0)
        lng = self.min_lng + inset + rng.random() * max(self.lng_span - 2 * inset, 0.0)
        return (float(lat), float(lng))

    def border_point(self, rng: np.random.Generator, margin: float) -> LatLng:
        """Random point on one of the four edges, pushed *margin* degrees outward."""
        side = int(rng.integers(4))
        along = float(rng.random())
        if side == 0:
            return (self.max_lat + margin, self.min_lng + along * self.lng_span)
        if side == 1:
            return (self.min_lat - margin, self.min_lng + along * self.lng_span)
        if side == 2:
            return (self.min_lat + along * self.lat_span, self.max_lng + margin)
        return (self.min_lat + along * self.lat_span, self.min_lng - margin)

    @classmethod
    def from_config(cls, cfg: Any) -> BoundingBox:
        return cls(
            min_lat=float(cfg["min_lat"]),
            max_lat=float(cfg["max_lat"]),
            min_lng=float(cfg["min_lng"]),
            max_lng=float(cfg["max_lng"]),
        )

    def to_dict(self) -> dict:
        return {
            "min_lat": self.min_lat,
            "max_lat": self.max_lat,
            "min_lng": self.min_lng,
            "max_lng": self.max_lng,
        }


@dataclass(frozen=True)
class Region:
    """Land boundary as a set of (lng, lat) rings."""

    rings: tuple[Ring, ...]

    def contains(self, point: LatLng) -> bool:
        """True if *point* is on land (odd number of enclosing rings)."""
        return point_in_rings(point, self.rings)

    @classmethod
    def from_geojson(cls, data: Any) -> Region | None:
        """Parse a GeoJSON FeatureCollection, Feature, Polygon or MultiPolygon.

        Returns ``None`` when no usable ring is found.
        """
        try:
            rings = list(_collect_rings(data))
        except (KeyError, TypeError, ValueError, IndexError) as e:
            logger.warning("Malformed region boundary, treating all points as land: %s", e)
            return None
        if not rings:
            logger.warning("Region boundary has no rings, treating all points as land")
            return None
        return cls(rings=tuple(rings))

    @classmethod
    def load(cls, path: str | Path) -> Region | None:
        """Load a boundary from a GeoJSON file; ``None`` if unreadable."""
        file_path = Path(path)
        try:
            data = json.loads(file_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read region file %s: %s", file_path, e)
            return None
        return cls.from_geojson(data)


# Valid geometries that carry no land area; skipped
_OTHER_GEOMETRY_TYPES = frozenset({
    "Point", "MultiPoint", "LineString", "MultiLineString", "GeometryCollection",
})


def _collect_rings(data: Any):
    if not isinstance(data, dict):
        raise TypeError(f"expected a GeoJSON object, got {type(data).__name__}")
    gtype = data.get("type")
    if gtype == "FeatureCollection":
        for feature in data.get("features") or []:
            yield from _collect_rings(feature)
    elif gtype == "Feature":
        geometry = data.get("geometry")
        if geometry is not None:
            yield from _collect_rings(geometry)
    elif gtype == "Polygon":
        for ring in data["coordinates"]:
            yield _parse_ring(ring)
    elif gtype == "MultiPolygon":
        for polygon in data["coordinates"]:
            for ring in polygon:
                yield _parse_ring(ring)
    elif gtype not in _OTHER_GEOMETRY_TYPES:
        raise ValueError(f"unsupported GeoJSON type {gtype!r}")


def _parse_ring(ring: Any) -> Ring:
    vertices = tuple((float(v[0]), float(v[1])) for v in ring)
    if len(vertices) < 3:
        raise ValueError(f"ring has {len(vertices)} vertices, need at least 3")
    return vertices
