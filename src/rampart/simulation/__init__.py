"""Kinematic engagement simulation: threats, intercept prediction, tick loop."""

from rampart.simulation.config import Calibration, SimulationConfig
from rampart.simulation.engine import (
    SimulationEngine,
    SimulationSnapshot,
    SimulationStats,
    TickResult,
)
from rampart.simulation.intercept import InterceptSolution, solve_intercept
from rampart.simulation.runner import SimulationRunner

__all__ = [
    "Calibration",
    "InterceptSolution",
    "SimulationConfig",
    "SimulationEngine",
    "SimulationRunner",
    "SimulationSnapshot",
    "SimulationStats",
    "TickResult",
    "solve_intercept",
]
