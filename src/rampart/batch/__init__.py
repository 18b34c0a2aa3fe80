"""Statistical batch evaluator: Monte Carlo outcome estimation."""

from rampart.batch.evaluator import BatchConfig, BatchEvaluator

__all__ = ["BatchConfig", "BatchEvaluator"]
