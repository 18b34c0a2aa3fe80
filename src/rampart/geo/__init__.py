"""Geometry primitives and theater geometry (bounding box, land boundary)."""

from rampart.geo.primitives import (
    EARTH_RADIUS_M,
    KM_PER_DEGREE,
    clamp_to_bounds,
    distance_m,
    distance_m_array,
    point_in_ring,
    point_in_rings,
    point_to_segment_distance,
    step_toward,
)
from rampart.geo.region import BoundingBox, Region

__all__ = [
    "BoundingBox",
    "EARTH_RADIUS_M",
    "KM_PER_DEGREE",
    "Region",
    "clamp_to_bounds",
    "distance_m",
    "distance_m_array",
    "point_in_ring",
    "point_in_rings",
    "point_to_segment_distance",
    "step_toward",
]
