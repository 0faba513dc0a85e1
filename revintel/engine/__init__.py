from .benchmarks import BENCHMARKS, COST_ASSUMPTIONS, classify_archetype
from .calculator import MetricCalculator, summarize

__all__ = ["BENCHMARKS", "COST_ASSUMPTIONS", "classify_archetype", "MetricCalculator", "summarize"]
