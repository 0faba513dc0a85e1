"""Small derived values the section renderers weave into prose.

Each helper is a pure function of the assessment data or metrics, so a
section can compute what it needs without reading another section.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional, Sequence

from revintel.engine.calculator import safe_ratio
from revintel.engine.formatting import format_currency
from revintel.models.assessment import ParsedAssessmentFields, ValidatedAssessmentData
from revintel.models.enums import Archetype
from revintel.models.metrics import PreCalculatedMetrics

HANDOFF_RETENTION = 0.85

EXECUTIVE_ROLES = ("CEO", "VP", "CTO")
EXECUTIVE_HOURS_PER_WEEK = 20
EXECUTIVE_HOURLY_RATE = 150
COORDINATION_HOURS_PER_PERSON = 5
COORDINATION_HOURLY_RATE = 100
WEEKS_PER_YEAR = 52

STRONG_TEAM_SIZE = 3
ESTABLISHED_STACK_SIZE = 2
HIGH_VALUE_DEAL = 5000

# Illustrative funnel for the "math of your pain" breakdown
ASSUMED_MONTHLY_LEADS = 200
ASSUMED_CLOSE_RATE = 0.6

FRAMEWORK_LAYERS = (
    "Conversational Interface",
    "Function Execution",
    "Knowledge Retrieval",
    "Context Orchestration",
)

TYPICAL_PROCESS = MappingProxyType({
    Archetype.ITSM: "Manual ticket triage -> Engineer assignment -> Client communication -> Resolution documentation",
    Archetype.AGENCY: "Lead inquiry -> Discovery call -> Proposal creation -> Contract negotiation",
    Archetype.SAAS: "Lead capture -> Qualification call -> Product demo -> Trial setup -> Close",
    Archetype.ENTERPRISE: "RFP response -> Stakeholder meetings -> Custom proposal -> Legal review -> Signature",
})

AI_TRANSFORMATION = MappingProxyType({
    Archetype.ITSM: "AI-powered ticket routing and automated resolution are reducing response times by 70%",
    Archetype.AGENCY: "AI proposal generation and client research are shortening sales cycles by 50%",
    Archetype.SAAS: "Intelligent lead scoring and automated nurturing are improving conversion by 3x",
    Archetype.ENTERPRISE: "AI-assisted RFP responses and stakeholder mapping are winning more deals faster",
})

TIMING_URGENCY = MappingProxyType({
    Archetype.ITSM: "MSPs implementing AI are winning larger contracts and higher margins",
    Archetype.AGENCY: "Agencies with AI capabilities are charging 30-50% premiums",
    Archetype.SAAS: "AI-enabled SaaS companies are growing 3x faster than traditional competitors",
    Archetype.ENTERPRISE: "Enterprise buyers now expect AI-powered experiences as table stakes",
})

TRIGGER_PHRASES = ("lead comes in", "referral received", "demo requested", "proposal needed")
BOTTLENECK_PHRASES = ("takes a long time", "slow", "manual", "complex")

_TIME_SPAN = re.compile(r"(\d+)\s*(days?|hours?|weeks?)", re.IGNORECASE)


@dataclass(frozen=True)
class HiddenCosts:
    executive_count: int
    executive_hours_weekly: int
    executive_cost_annual: float
    coordination_hours_weekly: int
    coordination_cost_annual: float


def join_names(names: Sequence[str], fallback: str = "your team") -> str:
    """'Doug', 'Doug and Kevin', 'Doug, Kevin and Candice'."""
    names = [n for n in names if n]
    if not names:
        return fallback
    if len(names) == 1:
        return names[0]
    return f"{', '.join(names[:-1])} and {names[-1]}"


def primary_system(parsed: ParsedAssessmentFields) -> str:
    return parsed.stack_components[0] if parsed.stack_components else "your existing systems"


def stack_list(parsed: ParsedAssessmentFields) -> str:
    return ", ".join(parsed.stack_components) or "your existing systems"


def handoff_retention(handoffs: int) -> float:
    """Share of opportunities still alive after ``handoffs`` hand-offs."""
    return HANDOFF_RETENTION ** max(0, handoffs)


def handoff_loss_percent(handoffs: int) -> float:
    return (1 - handoff_retention(handoffs)) * 100


def describe_handoff_loss(handoffs: int) -> str:
    retention = handoff_retention(handoffs)
    return (
        f"{HANDOFF_RETENTION}^{handoffs} = Only {retention * 100:.0f}% of qualified "
        "opportunities survive to proposal"
    )


def count_executives(members: Sequence[str]) -> int:
    return sum(1 for m in members if any(role in m for role in EXECUTIVE_ROLES))


def hidden_costs(parsed: ParsedAssessmentFields) -> HiddenCosts:
    executives = count_executives(parsed.team_members)
    exec_hours = executives * EXECUTIVE_HOURS_PER_WEEK
    coord_hours = len(parsed.team_members) * COORDINATION_HOURS_PER_PERSON
    return HiddenCosts(
        executive_count=executives,
        executive_hours_weekly=exec_hours,
        executive_cost_annual=exec_hours * EXECUTIVE_HOURLY_RATE * WEEKS_PER_YEAR,
        coordination_hours_weekly=coord_hours,
        coordination_cost_annual=coord_hours * COORDINATION_HOURLY_RATE * WEEKS_PER_YEAR,
    )


def identify_strengths(parsed: ParsedAssessmentFields) -> list[str]:
    strengths: list[str] = []
    if len(parsed.team_members) >= STRONG_TEAM_SIZE:
        strengths.append(f"Strong team depth with {len(parsed.team_members)} people involved")
    if len(parsed.stack_components) >= ESTABLISHED_STACK_SIZE:
        strengths.append(f"Established tech stack with {', '.join(parsed.stack_components)}")
    if parsed.avg_deal_size > HIGH_VALUE_DEAL:
        strengths.append(f"High-value deals averaging {format_currency(parsed.avg_deal_size)}")
    return strengths or ["Committed team ready for improvement"]


def final_step(process: str) -> str:
    steps = [s.strip() for s in re.split(r"[,.]", process or "") if s.strip()]
    return steps[-1].lower() if steps else "completes the process"


def qualification_time(process: str) -> str:
    match = _TIME_SPAN.search(process or "")
    return match.group(0) if match else "5 days"


def find_trigger_point(process: str) -> str:
    lower = (process or "").lower()
    return next((t for t in TRIGGER_PHRASES if t in lower), "process starts")


def find_bottleneck(process: str) -> str:
    lower = (process or "").lower()
    return next((b for b in BOTTLENECK_PHRASES if b in lower), "coordination")


def conversion_uplift_percent(metrics: PreCalculatedMetrics) -> float:
    """Relative conversion improvement of target over current, in percent."""
    ratio = safe_ratio(metrics.target.conversion_rate, metrics.current.conversion_rate, default=1.0)
    return (ratio - 1) * 100


def math_breakdown(data: ValidatedAssessmentData, metrics: PreCalculatedMetrics) -> str:
    parsed = data.parsed
    demos = ASSUMED_MONTHLY_LEADS * parsed.conversion_rate
    deals = demos * ASSUMED_CLOSE_RATE
    current_mrr = deals * parsed.avg_deal_size
    potential_mrr = (
        ASSUMED_MONTHLY_LEADS * metrics.target.conversion_rate
        * ASSUMED_CLOSE_RATE * parsed.avg_deal_size
    )
    return "\n".join([
        "**The Math of Your Pain:**",
        f"- {ASSUMED_MONTHLY_LEADS} leads/month x {parsed.conversion_rate * 100:.0f}% conversion = {demos:.0f} demos",
        f"- {demos:.0f} demos x {ASSUMED_CLOSE_RATE * 100:.0f}% close rate = {deals:.1f} deals",
        f"- {deals:.1f} deals x {format_currency(parsed.avg_deal_size)} = {format_currency(current_mrr)} new MRR",
        f"- But with {metrics.target.conversion_rate * 100:.0f}% conversion: {format_currency(potential_mrr)} new MRR",
        f"- **Monthly loss: {format_currency(potential_mrr - current_mrr)}**",
    ])


def typical_process(archetype: Archetype) -> str:
    return TYPICAL_PROCESS.get(
        archetype, "Traditional manual process with multiple handoffs and delays"
    )


def trend_summary(trends: Optional[Sequence], default: str) -> str:
    if not trends:
        return default
    return " and ".join(t.trend for t in trends[:2])
