"""Placement optimization: mutation operator, random seeding, hill-climb search."""

from rampart.optimize.deployment import PLACEMENT_STRATEGIES, random_deployment
from rampart.optimize.mutation import MutationParams, mutate_deployment
from rampart.optimize.search import HillClimbOptimizer, OptimizationResult

__all__ = [
    "PLACEMENT_STRATEGIES",
    "HillClimbOptimizer",
    "MutationParams",
    "OptimizationResult",
    "mutate_deployment",
    "random_deployment",
]
