"""Shared pytest fixtures for RAMPART tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from omegaconf import OmegaConf

from rampart.core.theater import City, Theater
from rampart.core.types import DefenseUnit, UnitRole
from rampart.geo.region import BoundingBox, Region

COLOMBO = (6.9271, 79.8612)


@pytest.fixture
def project_root() -> Path:
    return Path(__file__).parent.parent


@pytest.fixture
def config_path(project_root: Path) -> Path:
    return project_root / "config" / "default.yaml"


@pytest.fixture
def default_config(config_path: Path):
    return OmegaConf.load(config_path)


@pytest.fixture
def square_theater() -> Theater:
    """1x1 degree box at the origin; the western half (lng < 0.5) is land."""
    land = ((0.0, 0.0), (0.5, 0.0), (0.5, 1.0), (0.0, 1.0))
    return Theater(
        bounds=BoundingBox(min_lat=0.0, max_lat=1.0, min_lng=0.0, max_lng=1.0),
        region=Region(rings=(land,)),
        cities=(
            City("Center", 0.5, 0.5, 3.0),
            City("Corner", 0.05, 0.05, 1.0),
        ),
        sites=(),
    )


@pytest.fixture
def colombo_deployment() -> list[DefenseUnit]:
    """Long-range radar and a Barak-8 battery co-located at Colombo."""
    return [
        DefenseUnit(
            unit_id="RDR-CMB", name="JY-27 Colombo",
            lat=COLOMBO[0], lng=COLOMBO[1],
            role=UnitRole.RADAR, range_km=500.0, category="JY-27",
        ),
        DefenseUnit(
            unit_id="INT-CMB", name="Barak-8 Colombo",
            lat=COLOMBO[0], lng=COLOMBO[1],
            role=UnitRole.INTERCEPTOR, range_km=150.0, shot_speed=0.25,
            category="Barak-8",
        ),
    ]
