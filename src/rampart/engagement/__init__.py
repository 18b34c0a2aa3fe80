"""Shared unit reachability queries (point and path metrics)."""

from rampart.engagement.reach import (
    active_units,
    any_in_reach,
    covers_point,
    first_in_reach,
    point_metric,
    segment_metric,
    split_roles,
)

__all__ = [
    "active_units",
    "any_in_reach",
    "covers_point",
    "first_in_reach",
    "point_metric",
    "segment_metric",
    "split_roles",
]
