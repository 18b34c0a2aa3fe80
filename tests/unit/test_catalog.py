"""Tests for the unit catalog and deployment parsing."""

import pytest

from rampart.core.catalog import (
    DEFAULT_CATALOG,
    UnitTemplate,
    catalog_from_config,
    deployment_from_config,
)
from rampart.core.types import UnitRole


class TestCatalog:
    def test_default_catalog(self):
        assert len(DEFAULT_CATALOG) == 7
        assert DEFAULT_CATALOG["JY-27"].role is UnitRole.RADAR
        assert DEFAULT_CATALOG["Barak-8"].shot_speed == 0.25

    def test_empty_config_falls_back(self):
        assert catalog_from_config(None) == DEFAULT_CATALOG
        assert catalog_from_config({}) == DEFAULT_CATALOG

    def test_from_config(self):
        catalog = catalog_from_config({
            "Patriot": {"role": "interceptor", "range_km": 160, "shot_speed": 0.4},
        })
        assert list(catalog) == ["Patriot"]
        assert catalog["Patriot"].role is UnitRole.INTERCEPTOR
        assert catalog["Patriot"].range_km == 160.0

    def test_from_default_yaml(self, default_config):
        catalog = catalog_from_config(default_config.rampart.catalog)
        assert catalog == DEFAULT_CATALOG

    def test_place(self):
        unit = DEFAULT_CATALOG["ODIN"].place(7.0, 80.0, unit_id="O-1")
        assert unit.name == "O-1"
        assert unit.category == "ODIN"
        assert unit.range_km == 20.0
        assert unit.active is True


class TestDeploymentFromConfig:
    def test_template_fills_fields(self):
        units = deployment_from_config([{"category": "YLC-18", "lat": 8.0, "lng": 81.0}])
        assert units[0].role is UnitRole.RADAR
        assert units[0].range_km == 250.0
        assert units[0].unit_id == "U001"

    def test_record_overrides_template(self):
        units = deployment_from_config([
            {"category": "Barak-8", "lat": 7.0, "lng": 80.0, "range_km": 90},
        ])
        assert units[0].range_km == 90.0
        assert units[0].shot_speed == 0.25

    def test_generated_ids_sequential(self):
        records = [{"category": "ODIN", "lat": 7.0, "lng": 80.0}] * 3
        assert [u.unit_id for u in deployment_from_config(records)] == ["U001", "U002", "U003"]

    def test_missing_position_raises(self):
        with pytest.raises(ValueError, match="lat"):
            deployment_from_config([{"category": "ODIN", "lng": 80.0}])

    def test_unknown_category_needs_full_record(self):
        with pytest.raises(ValueError):
            deployment_from_config([{"category": "Mystery", "lat": 7.0, "lng": 80.0}])

    def test_custom_catalog(self):
        catalog = {"Tiny": UnitTemplate("Tiny", UnitRole.RADAR, 5.0)}
        units = deployment_from_config([{"category": "Tiny", "lat": 0, "lng": 0}], catalog)
        assert units[0].range_km == 5.0

    def test_default_deployment(self, default_config):
        catalog = catalog_from_config(default_config.rampart.catalog)
        records = [dict(r) for r in default_config.rampart.deployment.units]
        units = deployment_from_config(records, catalog)
        assert [u.unit_id for u in units] == ["RDR-1", "RDR-2", "INT-1", "INT-2", "INT-3"]
        assert sum(u.is_radar for u in units) == 2
