from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from revintel.engine.benchmarks import Benchmark, get_benchmark
from revintel.models.assessment import ParsedAssessmentFields, ValidatedAssessmentData
from revintel.models.enums import Archetype, SearchType
from revintel.models.metrics import PreCalculatedMetrics
from revintel.models.research import ResearchResult, SolutionItem


@dataclass(frozen=True)
class ReportBundle:
    """Everything a section renderer may read. Shared, never modified."""

    data: ValidatedAssessmentData
    metrics: PreCalculatedMetrics
    solutions: tuple[SolutionItem, ...] = ()
    research: Optional[ResearchResult] = None
    search_type: SearchType = SearchType.VECTOR

    @property
    def parsed(self) -> ParsedAssessmentFields:
        return self.data.parsed

    @property
    def archetype(self) -> Archetype:
        return self.metrics.benchmarks.archetype

    @property
    def benchmark(self) -> Benchmark:
        return get_benchmark(self.archetype)


@dataclass(frozen=True)
class ReportSection:
    name: str
    title: str
    content: str = field(repr=False)
