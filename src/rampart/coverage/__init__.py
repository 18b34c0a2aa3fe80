"""Coverage scoring: grid land/sea sampling and weighted city coverage."""

from rampart.coverage.scoring import (
    DEFAULT_SAMPLE_COUNT,
    CoverageScorer,
    objective,
    summarize,
)

__all__ = [
    "DEFAULT_SAMPLE_COUNT",
    "CoverageScorer",
    "objective",
    "summarize",
]
