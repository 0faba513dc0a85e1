"""Industry benchmark and cost-assumption tables."""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType

from revintel.models.enums import Archetype


@dataclass(frozen=True)
class Benchmark:
    conversion_rate: float
    sales_cycle_months: float
    avg_deal_size: float
    automation_level: float
    efficiency: float


@dataclass(frozen=True)
class CostAssumptions:
    avg_salary_monthly: float = 8000  # $96k annual
    benefits_multiplier: float = 1.3
    overhead_multiplier: float = 1.5
    tool_cost_per_stack: float = 150
    opportunity_discount_rate: float = 0.15  # annual

    @property
    def loaded_salary_monthly(self) -> float:
        return self.avg_salary_monthly * self.benefits_multiplier * self.overhead_multiplier


BENCHMARKS = MappingProxyType({
    Archetype.ITSM: Benchmark(0.09, 4, 15000, 0.3, 0.6),
    Archetype.AGENCY: Benchmark(0.12, 2.5, 8000, 0.4, 0.7),
    Archetype.SAAS: Benchmark(0.15, 2, 12000, 0.5, 0.8),
    Archetype.ENTERPRISE: Benchmark(0.06, 6, 50000, 0.2, 0.5),
})

COST_ASSUMPTIONS = CostAssumptions()

# Team size assumed when the process text names nobody
TEAM_SIZE_ESTIMATES = MappingProxyType({
    Archetype.ITSM: 5,
    Archetype.AGENCY: 3,
    Archetype.SAAS: 4,
    Archetype.ENTERPRISE: 8,
})

DEFAULT_ARCHETYPE = Archetype.AGENCY

# Checked in order; first archetype with a matching keyword wins.
_ARCHETYPE_KEYWORDS: tuple[tuple[Archetype, tuple[str, ...]], ...] = (
    (Archetype.ITSM, (r"\bit\b", r"service", r"support")),
    (Archetype.AGENCY, (r"agenc", r"consult", r"marketing")),
    (Archetype.SAAS, (r"saas", r"software", r"tech")),
    (Archetype.ENTERPRISE, (r"enterprise", r"corporation")),
)


def classify_archetype(business_type: str) -> Archetype:
    """Infer the benchmark archetype from a business-type description.

    Keyword search over the lowercased text; AGENCY when nothing matches.
    """
    lower = business_type.lower().strip()

    for archetype, patterns in _ARCHETYPE_KEYWORDS:
        for pattern in patterns:
            if re.search(pattern, lower):
                return archetype

    return DEFAULT_ARCHETYPE


def get_benchmark(archetype: Archetype) -> Benchmark:
    return BENCHMARKS.get(archetype, BENCHMARKS[DEFAULT_ARCHETYPE])
