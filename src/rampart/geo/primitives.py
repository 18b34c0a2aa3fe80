"""Distance and containment primitives on (lat, lng) coordinates.

All public functions take points as ``(lat, lng)`` tuples in decimal degrees,
except the polygon tests whose rings follow the GeoJSON ``(lng, lat)`` vertex
order. Every function here is pure.

Distances used against unit ranges are great-circle meters (haversine on a
sphere). Planar helpers (:func:`point_to_segment_distance`,
:func:`step_toward`) work directly in degree space, which is how threat and
interceptor motion is integrated.
"""
from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

EARTH_RADIUS_M: float = 6_371_000.0  # Mean spherical radius
KM_PER_DEGREE: float = 111.0  # Flat-earth conversion for degree-space distances

LatLng = tuple[float, float]


def distance_m(a: LatLng, b: LatLng) -> float:
    """Great-circle distance in meters between two (lat, lng) points."""
    lat1 = math.radians(a[0])
    lat2 = math.radians(b[0])
    dlat = lat2 - lat1
    dlng = math.radians(b[1] - a[1])

    h = math.sin(dlat / 2.0) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2.0) ** 2
    h = max(0.0, min(1.0, h))  # Clamp for floating-point safety
    return EARTH_RADIUS_M * 2.0 * math.atan2(math.sqrt(h), math.sqrt(1.0 - h))


def distance_m_array(
    lat: np.ndarray, lng: np.ndarray, lat0: float, lng0: float,
) -> np.ndarray:
    """Vectorized :func:`distance_m` from many points to one reference point.

    Args:
        lat: Latitudes in degrees, any shape.
        lng: Longitudes in degrees, same shape as *lat*.
        lat0: Reference latitude in degrees.
        lng0: Reference longitude in degrees.

    Returns:
        Array of distances in meters with the shape of *lat*.
    """
    lat1 = np.radians(lat0)
    lat2 = np.radians(np.asarray(lat, dtype=float))
    dlat = lat2 - lat1
    dlng = np.radians(np.asarray(lng, dtype=float) - lng0)

    h = np.sin(dlat / 2.0) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlng / 2.0) ** 2
    h = np.clip(h, 0.0, 1.0)
    return EARTH_RADIUS_M * 2.0 * np.arctan2(np.sqrt(h), np.sqrt(1.0 - h))


def point_in_ring(point: LatLng, ring: Sequence[Sequence[float]]) -> bool:
    """Ray-casting point-in-polygon test.

    Casts a ray from the test point along +lng and counts edge crossings.
    Odd count = inside, even = outside.

    Args:
        point: (lat, lng) test point.
        ring: Ordered (lng, lat) vertices; closing the ring is optional.
    """
    y, x = float(point[0]), float(point[1])
    n = len(ring)
    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = float(ring[i][0]), float(ring[i][1])
        xj, yj = float(ring[j][0]), float(ring[j][1])
        if ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi) + xi):
            inside = not inside
        j = i
    return inside


def point_in_rings(point: LatLng, rings: Sequence[Sequence[Sequence[float]]]) -> bool:
    """Odd/even membership across a set of rings.

    Every ring that contains the point flips membership, so a ring nested
    inside another acts as a hole.
    """
    inside = False
    for ring in rings:
        if point_in_ring(point, ring):
            inside = not inside
    return inside


def point_to_segment_distance(p: LatLng, a: LatLng, b: LatLng) -> float:
    """Minimum planar distance from *p* to segment *a*-*b* (input units)."""
    px, py = float(p[1]), float(p[0])
    ax, ay = float(a[1]), float(a[0])
    bx, by = float(b[1]), float(b[0])
    dx = bx - ax
    dy = by - ay
    seg_len_sq = dx * dx + dy * dy
    if seg_len_sq <= 0.0:
        return math.hypot(px - ax, py - ay)
    t = ((px - ax) * dx + (py - ay) * dy) / seg_len_sq
    t = max(0.0, min(1.0, t))
    return math.hypot(px - (ax + t * dx), py - (ay + t * dy))


def clamp_to_bounds(
    lat: float, lng: float,
    min_lat: float, max_lat: float, min_lng: float, max_lng: float,
) -> LatLng:
    """Clamp a coordinate pair into an axis-aligned box."""
    return (
        max(min_lat, min(max_lat, lat)),
        max(min_lng, min(max_lng, lng)),
    )


def step_toward(pos: LatLng, goal: LatLng, step: float) -> LatLng:
    """Move *step* degrees from *pos* straight toward *goal*.

    Never overshoots: if *goal* is closer than *step*, returns *goal*.
    """
    dlat = goal[0] - pos[0]
    dlng = goal[1] - pos[1]
    dist = math.hypot(dlat, dlng)
    if dist <= step or dist <= 0.0:
        return (float(goal[0]), float(goal[1]))
    scale = step / dist
    return (pos[0] + dlat * scale, pos[1] + dlng * scale)
