"""Predicted intercept point for a constant-velocity threat.

Works in degree space with x = lng, y = lat. The interceptor leaves its
launch point now and flies straight at ``shot_speed``; we look for the
earliest time ``t >= 0`` with

    |current + v*t - base| = shot_speed * t

which expands to ``a*t² + b*t + c = 0`` with ``a = |v|² - shot_speed²``,
``b = 2 v·Δ``, ``c = |Δ|²`` and ``Δ = current - base``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from rampart.core.types import LatLng

_EPS = 1e-12


@dataclass(frozen=True)
class InterceptSolution:
    """Time (simulated seconds) and (lat, lng) point of the predicted intercept."""

    time_s: float
    point: LatLng


def solve_intercept(
    current: LatLng,
    velocity: tuple[float, float],
    base: LatLng,
    shot_speed: float,
) -> InterceptSolution | None:
    """Earliest intercept of a threat by a shot fired from *base*.

    Args:
        current: Threat (lat, lng) now.
        velocity: Threat (d_lat, d_lng) per second.
        base: Interceptor launch (lat, lng).
        shot_speed: Interceptor speed, degrees per second.

    Returns:
        The solution, or ``None`` when the shot can never catch the threat
        (negative discriminant, or no non-negative root).
    """
    vy, vx = float(velocity[0]), float(velocity[1])
    dy = float(current[0]) - float(base[0])
    dx = float(current[1]) - float(base[1])

    c = dx * dx + dy * dy
    if c <= _EPS * _EPS:
        return InterceptSolution(0.0, (float(current[0]), float(current[1])))

    a = vx * vx + vy * vy - shot_speed * shot_speed
    b = 2.0 * (vx * dx + vy * dy)

    if abs(a) < _EPS:
        # Equal speeds: the quadratic degenerates to b*t + c = 0
        if b >= 0.0:
            return None
        t = -c / b
    else:
        disc = b * b - 4.0 * a * c
        if disc < 0.0:
            return None
        root = math.sqrt(disc)
        candidates = [t for t in ((-b - root) / (2.0 * a), (-b + root) / (2.0 * a)) if t >= 0.0]
        if not candidates:
            return None
        t = min(candidates)

    return InterceptSolution(t, (float(current[0]) + vy * t, float(current[1]) + vx * t))
