"""Pydantic schema for RAMPART configuration validation.

Mirrors the YAML structure in config/default.yaml. Used when
``validate=True`` is passed to ``RampartConfig.load()``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

# ---------------------------------------------------------------------------
# System
# ---------------------------------------------------------------------------


class SystemConfig(BaseModel):
    name: str = "RAMPART"
    version: str = "0.1.0"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_file: str | None = None
    log_json: bool = False
    validate_config: bool = False


# ---------------------------------------------------------------------------
# Theater
# ---------------------------------------------------------------------------


class BoundsConfig(BaseModel):
    min_lat: float = Field(default=5.8, ge=-90, le=90)
    max_lat: float = Field(default=9.9, ge=-90, le=90)
    min_lng: float = Field(default=79.5, ge=-180, le=180)
    max_lng: float = Field(default=82.0, ge=-180, le=180)

    @model_validator(mode="after")
    def _ordered(self) -> BoundsConfig:
        if self.min_lat > self.max_lat or self.min_lng > self.max_lng:
            raise ValueError("bounds must satisfy min <= max on both axes")
        return self


class CityConfig(BaseModel):
    name: str
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    weight: float = Field(default=1.0, gt=0)


class SiteConfig(BaseModel):
    name: str
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class TheaterConfig(BaseModel):
    bounds: BoundsConfig = Field(default_factory=BoundsConfig)
    region_geojson: str | None = None
    cities: list[CityConfig] = Field(default_factory=list)
    strategic_locations: list[SiteConfig] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------


class TemplateConfig(BaseModel):
    role: Literal["RADAR", "INTERCEPTOR"]
    range_km: float = Field(ge=0)
    shot_speed: float = Field(default=0.0, ge=0)
    system_cost: float = Field(default=0.0, ge=0)
    kill_method: str = ""


class UnitConfig(BaseModel):
    unit_id: str | None = None
    name: str | None = None
    category: str | None = None
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    role: Literal["RADAR", "INTERCEPTOR"] | None = None
    range_km: float | None = Field(default=None, ge=0)
    shot_speed: float | None = Field(default=None, ge=0)
    active: bool = True


class DeploymentConfig(BaseModel):
    units: list[UnitConfig] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Subsystems
# ---------------------------------------------------------------------------


class CalibrationConfig(BaseModel):
    kill_base_m: float = Field(default=900.0, gt=0)
    kill_accel_threshold: float = Field(default=50.0, ge=0)
    kill_accel_coeff: float = Field(default=2.0, ge=0)
    kill_speed_coeff: float = Field(default=20000.0, ge=0)
    impact_base_m: float = Field(default=600.0, gt=0)
    impact_accel_threshold: float = Field(default=500.0, ge=0)
    impact_accel_coeff: float = Field(default=1.0, ge=0)


class SimulationConfig(BaseModel):
    clock_mode: Literal["realtime", "simulated"] = "realtime"
    frame_interval_s: float = Field(default=0.016, gt=0)
    substep_factor: float = Field(default=2.5, gt=0)
    max_substeps: int = Field(default=1000, gt=0)
    explosion_ttl_s: float = Field(default=2.0, ge=0)
    max_log_entries: int = Field(default=100, gt=0)
    salvo_border_margin_deg: float = Field(default=2.5, ge=0)
    salvo_city_probability: float = Field(default=0.7, ge=0, le=1)
    calibration: CalibrationConfig = Field(default_factory=CalibrationConfig)


class CoverageConfig(BaseModel):
    sample_count: int = Field(default=3600, ge=0)


class BatchConfig(BaseModel):
    rounds: int = Field(default=100, ge=0)
    missiles_per_round: int = Field(default=20, ge=0)
    archetype: Literal["drone", "cruise", "ballistic", "hypersonic"] = "cruise"
    border_margin_deg: float = Field(default=1.0, ge=0)
    city_target_probability: float = Field(default=0.7, ge=0, le=1)
    feasibility_ratio: float = Field(default=0.8, ge=0)
    max_logs: int = Field(default=20, ge=0)
    intercept_log_every: int = Field(default=100, gt=0)
    breach_log_every: int = Field(default=50, gt=0)
    undetected_log_every: int = Field(default=20, gt=0)


class MutationConfig(BaseModel):
    chance_low: float = Field(default=0.25, ge=0, le=1)
    chance_high: float = Field(default=0.45, ge=0, le=1)
    relocation_chance: float = Field(default=0.08, ge=0, le=1)
    radar_step_deg: float = Field(default=1.5, ge=0)
    interceptor_step_deg: float = Field(default=0.45, ge=0)
    high_entropy_multiplier: float = Field(default=2.5, ge=0)


class OptimizeConfig(BaseModel):
    max_iterations: int = Field(default=500, ge=0)
    stagnation_limit: int = Field(default=40, gt=0)
    priorities: list[Literal["land", "cities", "sea"]] = Field(
        default_factory=lambda: ["land", "cities"],
    )
    radar_secured_pct: float = Field(default=98.0, ge=0, le=100)
    mutation: MutationConfig = Field(default_factory=MutationConfig)


# ---------------------------------------------------------------------------
# Top level
# ---------------------------------------------------------------------------


class RampartSection(BaseModel):
    system: SystemConfig = Field(default_factory=SystemConfig)
    theater: TheaterConfig = Field(default_factory=TheaterConfig)
    catalog: dict[str, TemplateConfig] = Field(default_factory=dict)
    deployment: DeploymentConfig = Field(default_factory=DeploymentConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    coverage: CoverageConfig = Field(default_factory=CoverageConfig)
    batch: BatchConfig = Field(default_factory=BatchConfig)
    optimize: OptimizeConfig = Field(default_factory=OptimizeConfig)

    model_config = {"extra": "allow"}


class RampartConfigSchema(BaseModel):
    """Top-level wrapper matching YAML root key ``rampart:``."""

    rampart: RampartSection = Field(default_factory=RampartSection)

    model_config = {"extra": "allow"}


def validate_config(data: dict) -> RampartConfigSchema:
    """Validate a plain config dict.

    Raises:
        pydantic.ValidationError: On invalid values.
    """
    return RampartConfigSchema.model_validate(data)
