"""Read-only text views over an assessment context."""

from __future__ import annotations

from typing import Iterable, Optional

from revintel.models.assessment import RawAssessmentAnswers
from revintel.models.context import AssessmentContext, CompanyProfile, ProcessStep
from revintel.models.enums import ProcessPath, Tier

from .errors import PreconditionError
from .machine import AssessmentStateMachine, is_assessment_complete


def extract_tools(steps: Iterable[ProcessStep]) -> str:
    """Unique tools named across the process, first five only."""
    unique: list[str] = []
    for step in steps:
        for tool in step.tools:
            if tool not in unique:
                unique.append(tool)
    text = ", ".join(unique[:5])
    if len(unique) > 5:
        text += ", and others"
    return text


def _average_step_time(steps: Iterable[ProcessStep]) -> str:
    if not any(step.time_invested for step in steps):
        return "Not specified"
    return "Varies by step"


def _require_complete(context: AssessmentContext, what: str) -> None:
    if not is_assessment_complete(context):
        raise PreconditionError(f"Assessment not complete - cannot generate {what}", tier=context.current_tier)


def generate_process_validation_summary(
    context: AssessmentContext, machine: AssessmentStateMachine
) -> str:
    """Markdown recap of the mapped workflow shown at tier 6."""
    metric = machine.selected_metric(context)
    if (
        metric is None
        or not context.process_steps
        or not context.current_baseline
        or not context.process_breakdown_point
    ):
        raise PreconditionError(
            "Insufficient context for process validation", tier=Tier.PROCESS_VALIDATION
        )

    challenge = machine.selected_challenge_area(context)
    workflow = "\n".join(
        f"{step.sequence}. **{step.role}** {step.action} using "
        f"{', '.join(step.tools) or 'no tools'} -> {step.output}"
        for step in context.process_steps
    )
    return "\n".join([
        "## CURRENT STATE ANALYSIS",
        "",
        f"**Challenge:** {challenge.label if challenge else ''} - {metric.label}",
        f"**Current Performance:** {context.current_baseline}",
        "",
        "**Process Workflow:**",
        workflow,
        "",
        f"**Total Process Steps:** {len(context.process_steps)}",
        f"**Average Time per Step:** {_average_step_time(context.process_steps)}",
        f"**Primary Bottleneck:** {context.process_breakdown_point}",
        f"**Friction Source:** {context.main_friction}",
        "",
        "**Is this analysis accurate?**",
    ])


def _process_lines(context: AssessmentContext) -> list[str]:
    if context.process_path == ProcessPath.SIMPLE:
        return [f"**Process Description:** {context.process_description}"]

    lines = [
        f"**Step {step.sequence}:** {step.role} -> {step.action} -> {step.output}"
        for step in context.process_steps
    ]
    lines.append("")
    lines.append(f"**Breakdown Point:** {context.process_breakdown_point}")
    status = "Confirmed" if context.process_validated else "Needs Refinement"
    lines.append(f"**Validation Status:** {status}")
    if context.process_refinements:
        lines.append(f"**Refinements:** {context.process_refinements}")
    return lines


def generate_assessment_summary(context: AssessmentContext, machine: AssessmentStateMachine) -> str:
    _require_complete(context, "summary")

    icp = machine.selected_icp(context)
    area = machine.selected_opportunity_area(context)
    challenge = machine.selected_challenge_area(context)
    metric = machine.selected_metric(context)

    revenue_model = context.selected_revenue_model
    if context.custom_revenue_model:
        revenue_model = f"{revenue_model} ({context.custom_revenue_model})"

    tools = extract_tools(context.process_steps) or "existing systems"
    lines = [
        "# Revenue Intelligence Assessment Summary",
        "",
        "## Business Context",
        f"- **Company Type:** {icp.label}",
        f"- **Opportunity Area:** {area.label}",
        f"- **Revenue Model:** {revenue_model}",
        "",
        "## Specific Challenge",
        f"- **Challenge Area:** {challenge.label}",
        f"- **Target Metric:** {metric.label}",
        f"- **Current Baseline:** {context.current_baseline}",
        f"- **Primary Friction:** {context.main_friction}",
        "",
        "## Process Analysis",
        *_process_lines(context),
        "",
        "## Research Focus Areas",
        f"1. **Solution Type:** AI automation for {metric.label}",
        f"2. **Industry Focus:** {area.label} optimization",
        f"3. **Integration Requirements:** {tools}",
        f"4. **Success Metrics:** Improve {metric.label} from {context.current_baseline}",
    ]
    return "\n".join(lines)


def generate_research_query(context: AssessmentContext, machine: AssessmentStateMachine) -> str:
    """One-paragraph query handed to the retrieval and research collaborators."""
    _require_complete(context, "research query")

    area = machine.selected_opportunity_area(context)
    metric = machine.selected_metric(context)
    tools = extract_tools(context.process_steps) or "existing systems"
    return (
        f"{area.label} companies improving {metric.label} from {context.current_baseline} "
        f"using AI automation. Focus on {context.main_friction} solutions and integration "
        f"with {tools}. Target {context.revenue_model_label} revenue model optimization."
    )


def _team_process_text(context: AssessmentContext) -> str:
    if context.process_path == ProcessPath.SIMPLE:
        return context.process_description or ""
    return " ".join(step.as_sentence() for step in context.process_steps)


def build_raw_answers(
    context: AssessmentContext,
    profile: CompanyProfile,
    machine: AssessmentStateMachine,
    session_id: Optional[str] = None,
) -> RawAssessmentAnswers:
    """Flatten a completed interview into the extraction unit's input."""
    icp = machine.selected_icp(context)
    area = machine.selected_opportunity_area(context)
    challenge = machine.selected_challenge_area(context)

    # Quantification answers carry most of the numbers the extractor looks for
    context_parts = [
        context.current_baseline or "",
        context.main_friction or "",
        profile.additional_context,
    ]
    return RawAssessmentAnswers(
        session_id=session_id or context.session_id or "",
        company=profile.company,
        email=profile.email,
        business_type=icp.label if icp else "",
        opportunity_focus=area.label if area else "",
        revenue_model=context.revenue_model_label or "",
        revenue_challenge=challenge.label if challenge else "",
        team_process=_team_process_text(context),
        solution_stack=profile.solution_stack,
        investment_level=profile.investment_level,
        additional_context=". ".join(part.strip() for part in context_parts if part.strip()),
    )
