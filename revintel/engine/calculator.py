"""Deterministic current/target/improvement/ROI calculation.

Takes a ValidatedAssessmentData record plus the solution items picked for
the report and produces PreCalculatedMetrics. Never raises on thin input:
every ratio has a floored denominator so defaulted fields still yield a
complete, conservative model.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Optional, Sequence

from revintel.engine.benchmarks import (
    COST_ASSUMPTIONS,
    TEAM_SIZE_ESTIMATES,
    Benchmark,
    classify_archetype,
    get_benchmark,
)
from revintel.models.assessment import BudgetRange, ValidatedAssessmentData
from revintel.models.enums import Archetype
from revintel.models.metrics import (
    BenchmarkComparison,
    CurrentState,
    Improvement,
    PerformanceGap,
    PreCalculatedMetrics,
    ROIResult,
    TargetState,
)
from revintel.models.research import SolutionItem

logger = logging.getLogger(__name__)

# Target-state clamps
MAX_CONVERSION_MULTIPLIER = 2.5
CYCLE_REDUCTION_FACTOR = 0.6
MIN_CONVERSION_RATE = 0.001

WEEKS_PER_MONTH = 4.33
HOURS_PER_WEEK = 40

# Investment model
BASE_SETUP_COST = 8000
SETUP_COST_PER_TOOL = 0.2
BASELINE_BUDGET = 25000
BUDGET_RATIO_BOUNDS = (0.5, 2.0)
TRAINING_COST_PER_PERSON = 500
MIN_MONTHLY_TOOL_COST = 200
USAGE_PRICE_MULTIPLIER = 100
MAX_USAGE_TOOL_COST = 500
CONFIDENCE_DISCOUNT = 0.9

# Simplified IRR
HOLDING_PERIOD_MONTHS = 36
IRR_BOUNDS = (-0.5, 2.0)

# Checked in order against the lowercased tool category.
CATEGORY_TOOL_COSTS: tuple[tuple[tuple[str, ...], float], ...] = (
    (("ai", "conversational"), 300),
    (("crm", "context"), 200),
    (("automation", "function"), 150),
    (("data", "knowledge"), 100),
)
DEFAULT_TOOL_COST = 150

_PRICE = re.compile(r"\$?(\d+(?:,\d{3})*(?:\.\d+)?)")


def safe_ratio(numerator: float, denominator: float, default: float = 0.0) -> float:
    if not denominator:
        return default
    return numerator / denominator


def _clamp(value: float, bounds: tuple[float, float]) -> float:
    low, high = bounds
    return max(low, min(high, value))


def estimate_tool_cost(tool: SolutionItem) -> float:
    """Monthly cost of one tool from its pricing text, else its category."""
    match = _PRICE.search(tool.pricing or "")
    if match:
        price = float(match.group(1).replace(",", ""))
        pricing = tool.pricing.lower()
        if "month" in pricing:
            return price
        if "year" in pricing:
            return price / 12
        # Usage-based (per token, per request ...)
        return min(price * USAGE_PRICE_MULTIPLIER, MAX_USAGE_TOOL_COST)

    category = (tool.category or "").lower()
    for keywords, cost in CATEGORY_TOOL_COSTS:
        if any(k in category for k in keywords):
            return cost
    return DEFAULT_TOOL_COST


def estimate_monthly_tool_cost(tools: Sequence[SolutionItem]) -> float:
    total = sum(estimate_tool_cost(t) for t in tools)
    return max(MIN_MONTHLY_TOOL_COST, total)


def simplified_irr(total_investment: float, monthly_return: float, months: int) -> float:
    """Annualized compounding of total ROI over the holding period.

    Clamped to IRR_BOUNDS. Non-positive returns, or a total loss beyond the
    investment, map to the lower bound.
    """
    if monthly_return <= 0 or total_investment <= 0:
        return IRR_BOUNDS[0]
    total_roi = (monthly_return * months - total_investment) / total_investment
    base = 1 + total_roi
    if base <= 0:
        return IRR_BOUNDS[0]
    return _clamp(base ** (12 / months) - 1, IRR_BOUNDS)


class MetricCalculator:
    """Stateless calculator for the assessment financial model."""

    def calculate(
        self,
        data: ValidatedAssessmentData,
        tools: Sequence[SolutionItem] = (),
    ) -> PreCalculatedMetrics:
        archetype = classify_archetype(data.business_type)
        benchmark = get_benchmark(archetype)

        current = self._current_state(data, archetype, benchmark)
        target = self._target_state(current, benchmark)
        improvement = self._improvement(current, target)
        roi = self._roi(data, improvement, tools)
        benchmarks = self._benchmark_comparison(archetype, benchmark, current)

        metrics = PreCalculatedMetrics(
            current=current,
            target=target,
            improvement=improvement,
            roi=roi,
            benchmarks=benchmarks,
        )
        logger.info(f"Metrics calculated for {data.company or 'unknown company'} - {summarize(metrics)}")
        return metrics

    def _current_state(
        self,
        data: ValidatedAssessmentData,
        archetype: Archetype,
        benchmark: Benchmark,
    ) -> CurrentState:
        parsed = data.parsed
        costs = COST_ASSUMPTIONS

        monthly_revenue = parsed.monthly_deals * parsed.avg_deal_size
        team_size = max(1, len(parsed.team_members) or TEAM_SIZE_ESTIMATES[archetype])
        team_cost = team_size * costs.loaded_salary_monthly
        tool_cost = max(1, len(parsed.stack_components)) * costs.tool_cost_per_stack

        excess_cycle = max(0.0, parsed.sales_cycle_months - benchmark.sales_cycle_months)
        opportunity_cost = (
            monthly_revenue * excess_cycle * (costs.opportunity_discount_rate / 12)
        )
        total_cost = team_cost + tool_cost + opportunity_cost

        return CurrentState(
            monthly_revenue=monthly_revenue,
            annual_revenue=monthly_revenue * 12,
            conversion_rate=parsed.conversion_rate,
            sales_cycle_months=parsed.sales_cycle_months,
            team_size=team_size,
            team_cost_monthly=team_cost,
            tool_cost_monthly=tool_cost,
            opportunity_cost_monthly=opportunity_cost,
            total_cost_monthly=total_cost,
            revenue_per_employee=monthly_revenue / team_size,
            customer_acquisition_cost=total_cost / max(1, parsed.monthly_deals),
        )

    def _target_state(self, current: CurrentState, benchmark: Benchmark) -> TargetState:
        conversion = min(
            benchmark.conversion_rate,
            current.conversion_rate * MAX_CONVERSION_MULTIPLIER,
        )
        cycle = max(
            benchmark.sales_cycle_months,
            current.sales_cycle_months * CYCLE_REDUCTION_FACTOR,
        )
        # Same lead volume, converted at the target rate
        lead_volume = current.monthly_revenue / max(current.conversion_rate, MIN_CONVERSION_RATE)
        monthly_revenue = lead_volume * conversion

        return TargetState(
            conversion_rate=conversion,
            sales_cycle_months=cycle,
            monthly_revenue=monthly_revenue,
            annual_revenue=monthly_revenue * 12,
            efficiency_gain=benchmark.efficiency,
            automation_level=benchmark.automation_level,
        )

    def _improvement(self, current: CurrentState, target: TargetState) -> Improvement:
        conversion_lift = target.conversion_rate - current.conversion_rate
        revenue_lift = target.monthly_revenue - current.monthly_revenue
        time_savings = current.sales_cycle_months - target.sales_cycle_months
        cost_reduction = (
            current.total_cost_monthly * target.efficiency_gain * target.automation_level
        )

        return Improvement(
            conversion_lift=conversion_lift,
            conversion_lift_percent=safe_ratio(conversion_lift, current.conversion_rate) * 100,
            revenue_lift=revenue_lift,
            revenue_lift_percent=safe_ratio(revenue_lift, current.monthly_revenue) * 100,
            time_savings_months=time_savings,
            time_savings_hours=time_savings * WEEKS_PER_MONTH * HOURS_PER_WEEK,
            time_savings_percent=safe_ratio(time_savings, current.sales_cycle_months) * 100,
            cost_reduction=cost_reduction,
            cost_reduction_percent=safe_ratio(cost_reduction, current.total_cost_monthly) * 100,
            productivity_gain=target.efficiency_gain,
        )

    def _roi(
        self,
        data: ValidatedAssessmentData,
        improvement: Improvement,
        tools: Sequence[SolutionItem],
    ) -> ROIResult:
        budget: BudgetRange = data.parsed.budget_range
        budget_ratio = _clamp(budget.midpoint / BASELINE_BUDGET, BUDGET_RATIO_BOUNDS)
        setup_cost = BASE_SETUP_COST * (1 + SETUP_COST_PER_TOOL * len(tools)) * budget_ratio
        training_cost = max(1, len(data.parsed.team_members)) * TRAINING_COST_PER_PERSON
        monthly_tool_cost = estimate_monthly_tool_cost(tools)
        total_investment = setup_cost + training_cost + monthly_tool_cost * 12

        confidence = data.validation.confidence * CONFIDENCE_DISCOUNT
        monthly_return = improvement.revenue_lift + improvement.cost_reduction

        payback: Optional[int] = None
        break_even: Optional[int] = None
        if monthly_return > 0:
            raw_payback = total_investment / monthly_return
            break_even = math.ceil(raw_payback)
            # Lower confidence stretches the stated payback
            payback = math.ceil(raw_payback / confidence)

        year_one = safe_ratio(monthly_return * 12 - total_investment, total_investment)
        three_year = safe_ratio(
            monthly_return * HOLDING_PERIOD_MONTHS - total_investment, total_investment
        )
        irr = simplified_irr(total_investment, monthly_return, HOLDING_PERIOD_MONTHS)

        return ROIResult(
            setup_cost=setup_cost,
            training_cost=training_cost,
            monthly_tool_cost=monthly_tool_cost,
            total_investment=total_investment,
            monthly_return=monthly_return * confidence,
            annual_return=monthly_return * 12 * confidence,
            payback_months=payback,
            break_even_month=break_even,
            year_one_roi=year_one * confidence,
            three_year_roi=three_year * confidence,
            irr=irr * confidence,
            confidence=confidence,
        )

    def _benchmark_comparison(
        self,
        archetype: Archetype,
        benchmark: Benchmark,
        current: CurrentState,
    ) -> BenchmarkComparison:
        gap = PerformanceGap(
            conversion=safe_ratio(
                benchmark.conversion_rate - current.conversion_rate, benchmark.conversion_rate
            ),
            cycle=safe_ratio(
                current.sales_cycle_months - benchmark.sales_cycle_months,
                benchmark.sales_cycle_months,
            ),
            efficiency=1 - benchmark.efficiency,
        )
        return BenchmarkComparison(
            archetype=archetype,
            industry_conversion_rate=benchmark.conversion_rate,
            industry_sales_cycle=benchmark.sales_cycle_months,
            industry_deal_size=benchmark.avg_deal_size,
            performance_gap=gap,
        )


def summarize(metrics: PreCalculatedMetrics) -> str:
    """One-line summary for logs."""
    roi = metrics.roi
    payback = f"{roi.payback_months} months" if roi.payback_months is not None else "n/a"
    return (
        f"Archetype: {metrics.benchmarks.archetype.value}, "
        f"Revenue lift: ${metrics.improvement.revenue_lift:,.0f}/mo, "
        f"Payback: {payback}, "
        f"3yr ROI: {roi.three_year_roi * 100:.0f}%"
    )
