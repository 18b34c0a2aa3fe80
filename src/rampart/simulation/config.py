"""Kinematic simulation configuration and kill/impact calibration."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Calibration:
    """Kill-radius and impact-threshold coefficients.

    Both thresholds have the shape ``base + acceleration term + speed term``;
    the acceleration term only applies above its threshold. The defaults are
    tuned for the stylized speed units, not derived from physics.
    """

    kill_base_m: float = 900.0
    kill_accel_threshold: float = 50.0
    kill_accel_coeff: float = 2.0
    kill_speed_coeff: float = 20000.0
    impact_base_m: float = 600.0
    impact_accel_threshold: float = 500.0
    impact_accel_coeff: float = 1.0

    def kill_radius_m(self, acceleration: float, threat_speed: float) -> float:
        accel_term = (
            acceleration * self.kill_accel_coeff
            if acceleration > self.kill_accel_threshold else 0.0
        )
        return self.kill_base_m + accel_term + threat_speed * self.kill_speed_coeff

    def impact_threshold_m(self, acceleration: float) -> float:
        accel_term = (
            acceleration * self.impact_accel_coeff
            if acceleration > self.impact_accel_threshold else 0.0
        )
        return self.impact_base_m + accel_term


@dataclass
class SimulationConfig:
    """Kinematic engine and tick-loop settings."""

    clock_mode: str = "realtime"
    frame_interval_s: float = 0.016
    substep_factor: float = 2.5
    max_substeps: int = 1000
    explosion_ttl_s: float = 2.0
    max_log_entries: int = 100
    salvo_border_margin_deg: float = 2.5
    salvo_city_probability: float = 0.7
    calibration: Calibration = field(default_factory=Calibration)

    def substeps(self, acceleration: float) -> int:
        """Sub-steps for one tick: ``min(cap, ceil(acceleration * factor))``, at least 1."""
        if acceleration <= 0:
            return 1
        return max(1, min(self.max_substeps, math.ceil(acceleration * self.substep_factor)))

    @classmethod
    def from_omegaconf(cls, cfg: Any) -> SimulationConfig:
        """Build from OmegaConf dict or plain dict."""
        if cfg is None:
            return cls()

        try:
            from omegaconf import OmegaConf
            if hasattr(cfg, "_metadata"):
                cfg = OmegaConf.to_container(cfg, resolve=True)
        except ImportError:
            pass

        if not isinstance(cfg, dict):
            cfg = dict(cfg)

        cal = cfg.get("calibration") or {}
        calibration = Calibration(
            kill_base_m=float(cal.get("kill_base_m", 900.0)),
            kill_accel_threshold=float(cal.get("kill_accel_threshold", 50.0)),
            kill_accel_coeff=float(cal.get("kill_accel_coeff", 2.0)),
            kill_speed_coeff=float(cal.get("kill_speed_coeff", 20000.0)),
            impact_base_m=float(cal.get("impact_base_m", 600.0)),
            impact_accel_threshold=float(cal.get("impact_accel_threshold", 500.0)),
            impact_accel_coeff=float(cal.get("impact_accel_coeff", 1.0)),
        )

        return cls(
            clock_mode=str(cfg.get("clock_mode", "realtime")),
            frame_interval_s=float(cfg.get("frame_interval_s", 0.016)),
            substep_factor=float(cfg.get("substep_factor", 2.5)),
            max_substeps=int(cfg.get("max_substeps", 1000)),
            explosion_ttl_s=float(cfg.get("explosion_ttl_s", 2.0)),
            max_log_entries=int(cfg.get("max_log_entries", 100)),
            salvo_border_margin_deg=float(cfg.get("salvo_border_margin_deg", 2.5)),
            salvo_city_probability=float(cfg.get("salvo_city_probability", 0.7)),
            calibration=calibration,
        )
