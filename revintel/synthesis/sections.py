"""One renderer per report section.

Every function takes the full ReportBundle and returns a marked-up text
fragment. Renderers never call each other.
"""

from __future__ import annotations

import re

from revintel.engine.formatting import (
    format_currency,
    format_days,
    format_months,
    format_number,
    format_percent,
)
from revintel.models.research import SolutionItem

from . import narrative
from .bundle import ReportBundle

MAX_AUGMENTATION_TOOLS = 3
MAX_CASE_STUDIES = 2

# Characters that would end or split a [TAG:field:field] marker
_MARKER_SYNTAX = re.compile(r"\s*[:\[\]]+\s*")


def _marker(tag: str, *fields: str) -> str:
    return "[" + ":".join([tag, *(_MARKER_SYNTAX.sub(" ", f).strip() for f in fields)]) + "]"


def executive_summary(bundle: ReportBundle) -> str:
    data, metrics = bundle.data, bundle.metrics
    parsed = data.parsed
    team = parsed.team_members
    handoffs = len(team)

    monthly_gap = metrics.improvement.revenue_lift
    last_person = team[-1] if team else "your team"
    company = data.company or "Your company"
    challenge = (data.revenue_challenge or "revenue operations").lower()

    problem = (
        f"{company} converts only {format_percent(parsed.conversion_rate, 0)} of leads and "
        f"takes {format_number(parsed.sales_cycle_months)} months to close deals. With "
        f"{narrative.join_names(team)} manually nurturing every lead, you're leaving "
        f"{format_currency(monthly_gap * 12)} in annual revenue on the table."
    )
    root_cause = (
        f"Your sales process has {handoffs} handoffs between team members. Each handoff "
        f"loses 15% of momentum. By the time {last_person} "
        f"{narrative.final_step(data.team_process)}, "
        f"{narrative.handoff_loss_percent(handoffs):.0f}% of prospects have gone cold."
    )
    solution = (
        f"Deploy AI-powered {challenge} that works 24/7. Based on our analysis of "
        f"{len(bundle.solutions)} relevant tools and similar {data.business_type} "
        f"implementations, companies achieve "
        f"{narrative.conversion_uplift_percent(metrics):.0f}% conversion improvement within 90 days."
    )
    outcome = "\n".join([
        f"- Qualify leads in 5 minutes instead of {narrative.qualification_time(data.team_process)}",
        "- Book demos automatically when prospects are hot",
        f"- Free {narrative.join_names(team[:2])} to close deals, not chase leads",
        f"- Generate an additional {format_currency(monthly_gap)} monthly revenue",
    ])
    investment = "\n".join([
        f"**Investment:** {format_currency(metrics.roi.total_investment)}",
        f"**Payback:** {format_days(metrics.roi.payback_months)}",
        f"**12-Month ROI:** {format_percent(metrics.roi.year_one_roi, 0)}",
    ])

    return f"""[EXEC_SUMMARY]
## Executive Summary

**The Problem:** {problem}

**The Root Cause:** {root_cause}

**The Solution:** {solution}

**The Outcome:**
{outcome}

{investment}
[/EXEC_SUMMARY]"""


def current_state(bundle: ReportBundle) -> str:
    data, metrics = bundle.data, bundle.metrics
    parsed = data.parsed
    team = parsed.team_members
    costs = narrative.hidden_costs(parsed)
    strengths = "\n".join(f"- {s}" for s in narrative.identify_strengths(parsed))
    cycle_reduction = metrics.current.sales_cycle_months - metrics.target.sales_cycle_months

    return f"""## Current State Analysis

### Your Exact Process (As You Described It)
"{data.team_process}"

### What This Actually Means
[HIGHLIGHT]
**{len(team)} People Touch Every Deal**
{" -> ".join(team) or "No team members identified"}

**Each Handoff Loses 15% of Deals**
{narrative.describe_handoff_loss(len(team))}

{narrative.math_breakdown(data, metrics)}
[/HIGHLIGHT]

### The Hidden Costs
- Executive time on lead management: {costs.executive_hours_weekly} hours/week x $150/hour = {format_currency(costs.executive_cost_annual)}/year
- Team coordination overhead: {costs.coordination_hours_weekly} hours/week wasted = {format_currency(costs.coordination_cost_annual)}/year
- Delayed revenue from {format_number(parsed.sales_cycle_months)}-month cycle: {format_currency(metrics.current.opportunity_cost_monthly)}/month
- **Total hidden cost: {format_currency(metrics.current.total_cost_monthly)}/month**

### What You're Doing Right
{strengths}

### Your Biggest Opportunity
Your biggest lever is conversion rate improvement. Moving from {format_percent(metrics.current.conversion_rate, 0)} to {format_percent(metrics.target.conversion_rate, 0)} would generate {format_currency(metrics.improvement.revenue_lift)} additional monthly revenue. Combined with reducing your sales cycle by {cycle_reduction:.1f} months, you unlock {format_currency(metrics.improvement.revenue_lift * 12)} in annual value."""


def benchmarks(bundle: ReportBundle) -> str:
    data, metrics = bundle.data, bundle.metrics
    parsed = data.parsed
    bench = metrics.benchmarks
    gap = bench.performance_gap
    challenge = data.revenue_challenge or "sales"

    return f"""## Industry Benchmarks for {data.business_type}

### The Typical {challenge} Process (Without AI)

{narrative.typical_process(bundle.archetype)}

This traditional approach worked when buyers had fewer options and longer decision timelines. Today's buyers expect responses in minutes, not days. By the time your team executes the traditional {challenge} process, prospects have often made their decision elsewhere.

### Current Performance Metrics

**Your Current Performance:**
- Conversion Rate: {format_percent(parsed.conversion_rate)}
- Sales Cycle: {format_number(parsed.sales_cycle_months)} months
- Deal Size: {format_currency(parsed.avg_deal_size)}

**Industry Benchmarks:**
- Top Quartile Conversion: {format_percent(bench.industry_conversion_rate)}
- Best-in-Class Cycle: {format_number(bench.industry_sales_cycle)} months
- Average Deal Size: {format_currency(bench.industry_deal_size)}

**Your Performance Gap:**
- Conversion: {format_percent(gap.conversion, 0)} below benchmark
- Cycle Time: {format_percent(gap.cycle, 0)} longer than optimal
- Efficiency: {format_percent(gap.efficiency, 0)} improvement potential

### The AI Transformation Happening Now

{narrative.AI_TRANSFORMATION[bundle.archetype]}. Companies implementing AI-first revenue operations are seeing 40-60% improvement in key metrics within 90 days."""


def _augmentation_tools(bundle: ReportBundle) -> list[SolutionItem]:
    """Tools that integrate with something already in the stack, else the top matches."""
    stack = [s.lower() for s in bundle.parsed.stack_components]
    matching = [
        tool for tool in bundle.solutions
        if any(s in i.lower() for i in tool.integrations for s in stack)
    ]
    return (matching or list(bundle.solutions))[:MAX_AUGMENTATION_TOOLS]


def _tool_block(tool: SolutionItem, bundle: ReportBundle) -> str:
    process = bundle.data.team_process
    description = (tool.description or "processes the request").rstrip(".")
    return "\n".join([
        f"**{tool.name}**",
        "*How it works in your process:*",
        f'Integrates when "{narrative.find_trigger_point(process)}". {tool.name}: '
        f"{description[:1].lower() + description[1:]}. This removes the "
        f'"{narrative.find_bottleneck(process)}" bottleneck while keeping '
        f"{narrative.primary_system(bundle.parsed)} as the system of record.",
        f"Investment: {tool.pricing or 'Contact for pricing'}",
        f"Implementation: {tool.implementation_time}",
    ])


def solutions(bundle: ReportBundle) -> str:
    data, parsed = bundle.data, bundle.parsed
    tools = _augmentation_tools(bundle)
    tool_text = "\n\n".join(_tool_block(t, bundle) for t in tools) or "No matching tools found."
    system = narrative.primary_system(parsed)
    challenge = data.revenue_challenge or "revenue"

    return f"""## In-Scope Solutions

[SOLUTIONS_START]
[COLUMN]
### Augmentation Tools
**Philosophy**: Enhance your existing {data.solution_stack or "systems"}

{tool_text}

These tools integrate with {system} to add AI capabilities without replacing your core systems.
[/COLUMN]
[COLUMN]
### Custom Architecture
**Philosophy**: Build exactly what you need

**Core Components:**
- Vector database for context retrieval
- LLM orchestration layer
- Integration with {system}
- Custom workflow automation

**Investment**: $35k-$75k setup + $2k-$5k monthly
**Timeline**: 8-12 weeks
**Best For**: Unique processes requiring custom logic

This approach gives you maximum control and can handle any edge case in your {challenge} process.
[/COLUMN]
[COLUMN]
### Hybrid Platform
**Philosophy**: Speed of pre-built components with room for customization

**The Layered Approach:**
- **Context Layer**: Your data stays secure
- **Knowledge Layer**: Integrates {narrative.stack_list(parsed)}
- **Function Layer**: Pre-built + custom automations
- **Interface Layer**: Natural language interactions

**Investment**: $15k-$35k setup + $1k-$3k monthly
**Timeline**: 4-8 weeks
**Best For**: Proven framework with customization flexibility
[/COLUMN]
[SOLUTIONS_END]"""


def future_state(bundle: ReportBundle) -> str:
    data, metrics = bundle.data, bundle.metrics
    parsed = data.parsed
    lead = parsed.team_members[0] if parsed.team_members else "Your team lead"
    system = narrative.primary_system(parsed)
    challenge = (data.revenue_challenge or "revenue operations").lower()
    current = (data.team_process or "the current manual process").rstrip(".").lower()
    handoff_loss = narrative.handoff_loss_percent(len(parsed.team_members))

    return f"""## Future State Vision

### The Transformed Process

Instead of {current}, here's what happens:

**Morning (9 AM)**: AI has already processed overnight inquiries, qualified 15 leads, and scheduled 8 demos for the week
**During Calls**: {lead} focuses on relationship building while AI captures notes, updates {system}, and triggers follow-up sequences
**Between Meetings**: AI generates personalized proposals using your templates and pricing, sends them automatically when prospects are most engaged
**End of Day**: Revenue pipeline updated in real-time, tomorrow's priorities ranked by AI, team focused on closing instead of coordinating

**Result**: {format_percent(metrics.target.conversion_rate, 0)} conversion rate, {format_months(metrics.target.sales_cycle_months)} average cycle, {format_currency(metrics.target.monthly_revenue)}/month revenue.

### Where Each Solution Fits in the Four-Layer Framework

**{narrative.FRAMEWORK_LAYERS[0]}**: Natural language interactions with prospects and internal team
**{narrative.FRAMEWORK_LAYERS[1]}**: Automated {challenge}, proposal generation, follow-up sequences
**{narrative.FRAMEWORK_LAYERS[2]}**: Access to {narrative.stack_list(parsed)} data, industry insights, competitive intelligence
**{narrative.FRAMEWORK_LAYERS[3]}**: Maintains conversation history, preferences, deal stage across all touchpoints

Each layer works together to eliminate the handoffs currently causing your {handoff_loss:.0f}% opportunity loss rate.

### The 90-Day Transformation

[TIMELINE]
**Days 1-30: Foundation**
- Audit current {challenge} process
- Set up AI infrastructure and integrations
- Begin parallel testing

**Days 31-60: Automation**
- Deploy lead scoring and qualification
- Implement automated follow-up sequences
- Measure early results

**Days 61-90: Optimization**
- Refine AI responses based on performance
- Train {narrative.join_names(parsed.team_members)} on new workflows
- Scale successful automations
[/TIMELINE]

Start with {challenge}, prove the ROI, then expand to full revenue orchestration."""


def roi(bundle: ReportBundle) -> str:
    data, metrics = bundle.data, bundle.metrics
    parsed = data.parsed
    current, target, result = metrics.current, metrics.target, metrics.roi
    bench = metrics.benchmarks
    gap_potential = (
        (bench.industry_conversion_rate - current.conversion_rate)
        / max(current.conversion_rate, 0.001)
    )
    uplift = narrative.conversion_uplift_percent(metrics)
    payback = (
        f"{result.payback_months} months" if result.payback_months is not None
        else format_months(None)
    )
    metric_rows = "\n".join(_marker("METRIC", label, value) for label, value in (
        ("Current State Baseline", f"{format_currency(current.monthly_revenue)}/month"),
        ("Improvement Target", f"{format_percent(target.conversion_rate)} conversion"),
        ("Monthly Revenue Gain", format_currency(metrics.improvement.revenue_lift)),
        ("Annual Impact", format_currency(metrics.improvement.revenue_lift * 12)),
        ("Total Investment", format_currency(result.total_investment)),
        ("Payback Period", payback),
        ("12-Month ROI", format_percent(result.year_one_roi, 0)),
        ("3-Year ROI", format_percent(result.three_year_roi, 0)),
    ))

    return f"""## Return on Investment Analysis

### Understanding the Numbers

We built these projections from your specific situation:

**Your Current Baseline**: {format_number(parsed.monthly_deals)} deals/month x {format_currency(parsed.avg_deal_size)} = {format_currency(current.monthly_revenue)}/month
**Industry Benchmark**: Companies like yours typically convert at {format_percent(bench.industry_conversion_rate)}
**Your Conversion Gap**: {format_percent(gap_potential, 0)} improvement potential
**Conservative Target**: We projected only {uplift:.0f}% improvement ({format_percent(target.conversion_rate)} final rate)

All returns below are discounted by a {format_percent(result.confidence, 0)} confidence factor.

[ROI_TABLE]
{metric_rows}
[/ROI_TABLE]

**Why we're confident in these numbers:**
Your {format_percent(current.conversion_rate, 0)} to {format_percent(target.conversion_rate, 0)} conversion improvement is capped at the industry benchmark and at 2.5x your current rate. Companies with your profile ({data.business_type}, {len(parsed.team_members)}-person team, {data.revenue_model or "your revenue model"}) consistently see this range of improvement within 90 days."""


def market_context(bundle: ReportBundle) -> str:
    data = bundle.data
    research = bundle.research
    trends = research.trends if research else []
    summary = narrative.trend_summary(trends, "AI adoption accelerating across all industries")

    studies = research.case_studies[:MAX_CASE_STUDIES] if research else []
    if studies:
        case_text = "\n\n".join(
            f"**{s.company}**: {s.challenge or 'Similar revenue challenge'}\n"
            f"*Solution*: {s.solution or 'AI-assisted workflow automation'}\n"
            f"*Result*: {s.result}\n"
            f"*Confidence*: {format_percent(s.confidence, 0)}"
            for s in studies
        )
    else:
        case_text = (
            f"Similar {data.business_type} companies are achieving 40-60% improvement in key "
            f"metrics through AI implementation, consistently across companies with "
            f"{len(data.parsed.team_members)}-person teams."
        )

    narrative_text = research.narrative_text if research and research.narrative_text else ""
    findings = f"\n\n### Research Findings\n\n{narrative_text}" if narrative_text else ""
    citations = ""
    if research and research.citations:
        citations = "\n\n### Sources\n" + "\n".join(
            f"{i}. {c}" for i, c in enumerate(research.citations, 1)
        )

    return f"""## Market Context: AI Adoption in {data.business_type}

### The Industry Transformation Underway

The {data.business_type} industry is experiencing rapid AI transformation. {summary} are forcing companies to automate or fall behind.{findings}

### Who's Getting This Right

{case_text}

### The Architecture Pattern That's Winning

1. **They keep data sovereignty**: Customer data never leaves their control (Context Layer)
2. **They leverage existing systems**: {data.solution_stack or "Current systems"} remain the foundation (Knowledge Layer)
3. **They automate deterministically**: AI handles repeatable tasks (Function Layer)
4. **They maintain human touch**: AI amplifies but doesn't replace relationships (Interface Layer)

### Why Timing Matters

{narrative.TIMING_URGENCY[bundle.archetype]}. The companies that move first capture the largest market share gains.{citations}"""


def recommendations(bundle: ReportBundle) -> str:
    data, metrics = bundle.data, bundle.metrics
    parsed = data.parsed
    team = narrative.join_names(parsed.team_members)
    lead = parsed.team_members[0] if parsed.team_members else "your team lead"
    system = narrative.primary_system(parsed)
    challenge = data.revenue_challenge or "revenue operations"
    cards = "\n".join(_marker("CARD", *card) for card in (
        ("Week 1-2", "Foundation Setup", f"Set up AI infrastructure and begin data integration with {system}"),
        ("Week 3-4", "First Automation", f"Deploy {challenge.lower()} automation and begin testing"),
        ("Week 5-8", "Optimization", "Refine AI responses and expand to additional use cases"),
        ("Week 9-12", "Scale", f"Train {team} and expand automation coverage"),
    ))

    return f"""## Strategic Recommendations

### Immediate Actions (Next 30 Days)

1. **Audit Your Current Process**: Document exactly how {team} handle {challenge.lower()}
2. **Baseline Metrics**: Establish current conversion rate, cycle time, and cost per acquisition
3. **Quick Wins**: Implement basic lead scoring using your {system} data
4. **Team Alignment**: Brief {lead} on the transformation timeline and expectations

### Phase 1 Implementation (Days 31-90)

1. **Deploy Core AI Stack**: Set up vector database and LLM orchestration
2. **Integrate {system}**: Connect AI systems to your existing data
3. **Launch Automation**: Begin with highest-impact use case ({challenge})
4. **Measure & Iterate**: Track improvement toward {format_percent(metrics.target.conversion_rate, 0)} conversion target

### Long-term Expansion (Months 4-12)

1. **Scale Successful Automations**: Expand beyond {challenge} to full revenue cycle
2. **Advanced Personalization**: Use AI for custom proposal generation and pricing optimization
3. **Predictive Analytics**: Implement revenue forecasting and churn prediction
4. **Team Evolution**: Train {team} for AI-augmented roles

### Implementation Sequence

[RECOMMENDATION_CARDS]
{cards}
[/RECOMMENDATION_CARDS]

Start with your highest-impact bottleneck: {challenge}. Once the ROI is proven there, expansion becomes a business decision rather than an experiment."""
