"""Immutable outputs of the metrics calculator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .enums import Archetype


@dataclass(frozen=True)
class CurrentState:
    monthly_revenue: float
    annual_revenue: float
    conversion_rate: float
    sales_cycle_months: float
    team_size: int
    team_cost_monthly: float
    tool_cost_monthly: float
    opportunity_cost_monthly: float
    total_cost_monthly: float
    revenue_per_employee: float
    customer_acquisition_cost: float


@dataclass(frozen=True)
class TargetState:
    conversion_rate: float
    sales_cycle_months: float
    monthly_revenue: float
    annual_revenue: float
    efficiency_gain: float
    automation_level: float


@dataclass(frozen=True)
class Improvement:
    conversion_lift: float
    conversion_lift_percent: float
    revenue_lift: float
    revenue_lift_percent: float
    time_savings_months: float
    time_savings_hours: float
    time_savings_percent: float
    cost_reduction: float
    cost_reduction_percent: float
    productivity_gain: float


@dataclass(frozen=True)
class ROIResult:
    """Return on investment, discounted by data confidence.

    payback_months and break_even_month are None when the projected
    monthly return is not positive.
    """

    setup_cost: float
    training_cost: float
    monthly_tool_cost: float
    total_investment: float
    monthly_return: float
    annual_return: float
    payback_months: Optional[int]
    break_even_month: Optional[int]
    year_one_roi: float
    three_year_roi: float
    irr: float
    confidence: float

    @property
    def pays_back(self) -> bool:
        return self.payback_months is not None


@dataclass(frozen=True)
class PerformanceGap:
    conversion: float
    cycle: float
    efficiency: float


@dataclass(frozen=True)
class BenchmarkComparison:
    archetype: Archetype
    industry_conversion_rate: float
    industry_sales_cycle: float
    industry_deal_size: float
    performance_gap: PerformanceGap


@dataclass(frozen=True)
class PreCalculatedMetrics:
    current: CurrentState
    target: TargetState
    improvement: Improvement
    roi: ROIResult
    benchmarks: BenchmarkComparison
