"""Tiered assessment state machine.

Every transition is a pure function ``(answer, context) -> context'``:
it checks that the context sits at the transition's tier, validates the
answer against the option set derived from the context, writes the
answer and advances ``current_tier``. The input context is never mutated.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from revintel.catalog.loader import get_default_catalog
from revintel.catalog.schema import (
    ChallengeArea,
    ICPDefinition,
    InterviewCatalog,
    MetricDefinition,
    OpportunityArea,
    QuantificationPrompts,
)
from revintel.models.context import AssessmentContext, ProcessStep
from revintel.models.enums import ProcessPath, Tier

from .errors import InvalidAnswerError, InvalidSelectionError, PreconditionError
from .tiers import (
    CUSTOM_REVENUE_MODEL,
    REFINEMENT_PROGRESS,
    SIMPLE_PROCESS_MIN_LENGTH,
    previous_tier,
    progress_for,
)

logger = logging.getLogger(__name__)


def is_assessment_complete(context: AssessmentContext) -> bool:
    """True when every answer needed for a report is present.

    Either the mapped process was confirmed at tier 6, or the prospect took
    the simple path and gave a long enough process description.
    """
    answered = all([
        context.selected_icp_id,
        context.selected_opportunity_area_id,
        context.revenue_model_label,
        context.selected_challenge_area_id,
        context.selected_metric_id,
        context.current_baseline,
        context.main_friction,
    ])
    if not answered:
        return False

    if context.process_path == ProcessPath.SIMPLE:
        description = (context.process_description or "").strip()
        return len(description) >= SIMPLE_PROCESS_MIN_LENGTH

    return bool(
        context.process_steps
        and context.process_breakdown_point
        and context.process_validated
    )


class AssessmentStateMachine:
    """Drives the interview over an immutable AssessmentContext."""

    def __init__(self, catalog: Optional[InterviewCatalog] = None):
        self._catalog = catalog or get_default_catalog()

    @property
    def catalog(self) -> InterviewCatalog:
        return self._catalog

    def start(self, session_id: Optional[str] = None) -> AssessmentContext:
        return AssessmentContext(session_id=session_id)

    # ------------------------------------------------------------------
    # Tier 1: ICP category
    # ------------------------------------------------------------------

    def get_icp_options(self, context: Optional[AssessmentContext] = None) -> list[ICPDefinition]:
        return list(self._catalog.icps)

    def select_icp(self, icp_id: str, context: AssessmentContext) -> AssessmentContext:
        self._require_tier(context, Tier.CATEGORY)
        options = self.get_icp_options(context)
        self._check_option(Tier.CATEGORY, icp_id, [icp.id for icp in options])
        return self._advance(context, Tier.OPPORTUNITY_AREA, selected_icp_id=icp_id)

    # ------------------------------------------------------------------
    # Tier 2: opportunity area
    # ------------------------------------------------------------------

    def get_opportunity_areas(self, context: AssessmentContext) -> list[OpportunityArea]:
        icp = self._selected_icp(context)
        return list(icp.opportunity_areas)

    def select_opportunity_area(self, area_id: str, context: AssessmentContext) -> AssessmentContext:
        self._require_tier(context, Tier.OPPORTUNITY_AREA)
        options = self.get_opportunity_areas(context)
        self._check_option(Tier.OPPORTUNITY_AREA, area_id, [a.id for a in options])
        return self._advance(context, Tier.REVENUE_MODEL, selected_opportunity_area_id=area_id)

    # ------------------------------------------------------------------
    # Tier 2.5: revenue model
    # ------------------------------------------------------------------

    def get_revenue_model_options(self, context: AssessmentContext) -> list[str]:
        """Suggested revenue models plus the custom option."""
        area = self._selected_opportunity_area(context)
        return list(area.revenue_model_suggestions) + [CUSTOM_REVENUE_MODEL]

    def select_revenue_model(
        self,
        revenue_model: str,
        context: AssessmentContext,
        custom_model: Optional[str] = None,
    ) -> AssessmentContext:
        self._require_tier(context, Tier.REVENUE_MODEL)
        options = self.get_revenue_model_options(context)
        self._check_option(Tier.REVENUE_MODEL, revenue_model, options)

        custom: Optional[str] = None
        if revenue_model == CUSTOM_REVENUE_MODEL:
            custom = (custom_model or "").strip()
            if not custom:
                raise InvalidAnswerError(
                    Tier.REVENUE_MODEL, custom_model, "a custom revenue model needs a description"
                )

        return self._advance(
            context,
            Tier.CHALLENGE_AREA,
            selected_revenue_model=revenue_model,
            custom_revenue_model=custom,
        )

    # ------------------------------------------------------------------
    # Tier 3: challenge area
    # ------------------------------------------------------------------

    def get_challenge_areas(self, context: AssessmentContext) -> list[ChallengeArea]:
        area = self._selected_opportunity_area(context)
        if not context.revenue_model_label:
            raise PreconditionError(
                "No revenue model selected", tier=Tier.CHALLENGE_AREA, missing="selected_revenue_model"
            )
        return self._catalog.challenge_areas_for(area)

    def select_challenge_area(self, challenge_id: str, context: AssessmentContext) -> AssessmentContext:
        self._require_tier(context, Tier.CHALLENGE_AREA)
        options = self.get_challenge_areas(context)
        self._check_option(Tier.CHALLENGE_AREA, challenge_id, [c.id for c in options])
        return self._advance(context, Tier.METRIC, selected_challenge_area_id=challenge_id)

    # ------------------------------------------------------------------
    # Tier 3.5: metric
    # ------------------------------------------------------------------

    def get_metrics(self, context: AssessmentContext) -> list[MetricDefinition]:
        return list(self._selected_challenge_area(context).metrics)

    def select_metric(self, metric_id: str, context: AssessmentContext) -> AssessmentContext:
        self._require_tier(context, Tier.METRIC)
        options = self.get_metrics(context)
        self._check_option(Tier.METRIC, metric_id, [m.id for m in options])
        return self._advance(context, Tier.QUANTIFICATION, selected_metric_id=metric_id)

    # ------------------------------------------------------------------
    # Tier 4: quantification
    # ------------------------------------------------------------------

    def get_quantification_prompts(self, context: AssessmentContext) -> QuantificationPrompts:
        return self._selected_metric(context).quantification_prompts

    def submit_quantification(
        self, baseline: str, friction: str, context: AssessmentContext
    ) -> AssessmentContext:
        self._require_tier(context, Tier.QUANTIFICATION)
        self.get_quantification_prompts(context)
        baseline = self._require_text(Tier.QUANTIFICATION, baseline, "baseline")
        friction = self._require_text(Tier.QUANTIFICATION, friction, "friction")
        return self._advance(
            context, Tier.PROCESS, current_baseline=baseline, main_friction=friction
        )

    # ------------------------------------------------------------------
    # Tier 5: process description
    # ------------------------------------------------------------------

    def add_process_step(self, step: ProcessStep, context: AssessmentContext) -> AssessmentContext:
        """Append a step; the sequence number is assigned here."""
        self._require_tier(context, Tier.PROCESS)
        numbered = step.model_copy(update={"sequence": len(context.process_steps) + 1})
        return context.model_copy(update={"process_steps": context.process_steps + (numbered,)})

    def submit_process_breakdown(
        self, breakdown_point: str, context: AssessmentContext
    ) -> AssessmentContext:
        self._require_tier(context, Tier.PROCESS)
        if not context.process_steps:
            raise PreconditionError(
                "At least one process step is required", tier=Tier.PROCESS, missing="process_steps"
            )
        breakdown_point = self._require_text(Tier.PROCESS, breakdown_point, "breakdown point")
        return self._advance(
            context,
            Tier.PROCESS_VALIDATION,
            process_breakdown_point=breakdown_point,
            process_path=ProcessPath.VALIDATED,
        )

    def submit_simple_process(self, description: str, context: AssessmentContext) -> AssessmentContext:
        """Skip process validation with a single free-text description."""
        self._require_tier(context, Tier.PROCESS)
        text = (description or "").strip()
        if len(text) < SIMPLE_PROCESS_MIN_LENGTH:
            raise InvalidAnswerError(
                Tier.PROCESS,
                description,
                f"process description must be at least {SIMPLE_PROCESS_MIN_LENGTH} characters",
            )
        return self._advance(
            context,
            Tier.COMPLETE,
            process_description=text,
            process_path=ProcessPath.SIMPLE,
        )

    # ------------------------------------------------------------------
    # Tier 6: process validation
    # ------------------------------------------------------------------

    def validate_process(
        self,
        is_accurate: bool,
        context: AssessmentContext,
        refinements: Optional[str] = None,
    ) -> AssessmentContext:
        """Confirm the mapped process, or stay at tier 6 with refinements."""
        self._require_tier(context, Tier.PROCESS_VALIDATION)
        if not context.process_steps or not context.process_breakdown_point:
            raise PreconditionError(
                "No mapped process to validate",
                tier=Tier.PROCESS_VALIDATION,
                missing="process_steps",
            )

        refinements = (refinements or "").strip() or None
        if is_accurate:
            return self._advance(
                context,
                Tier.COMPLETE,
                process_validated=True,
                process_refinements=refinements,
                process_path=ProcessPath.VALIDATED,
            )

        logger.info("Process map rejected, awaiting refinements")
        return context.model_copy(update={
            "process_validated": False,
            "process_refinements": refinements,
            "progress_percentage": REFINEMENT_PROGRESS,
        })

    # ------------------------------------------------------------------
    # Navigation and completion
    # ------------------------------------------------------------------

    def step_back(self, context: AssessmentContext) -> AssessmentContext:
        """Return to the previous tier, keeping every answer given so far."""
        target = previous_tier(context.current_tier)
        # The simple path never visited tier 6
        if context.current_tier == Tier.COMPLETE and context.process_path == ProcessPath.SIMPLE:
            target = Tier.PROCESS
        if target is None:
            raise PreconditionError("Already at the first tier", tier=context.current_tier)
        return context.model_copy(update={
            "current_tier": target,
            "progress_percentage": progress_for(target),
        })

    def options_for_current_tier(self, context: AssessmentContext) -> list[Any]:
        """Legal answers for whichever tier the context is at."""
        getters = {
            Tier.CATEGORY: self.get_icp_options,
            Tier.OPPORTUNITY_AREA: self.get_opportunity_areas,
            Tier.REVENUE_MODEL: self.get_revenue_model_options,
            Tier.CHALLENGE_AREA: self.get_challenge_areas,
            Tier.METRIC: self.get_metrics,
        }
        getter = getters.get(context.current_tier)
        if getter is None:
            return []
        return getter(context)

    def is_complete(self, context: AssessmentContext) -> bool:
        return is_assessment_complete(context)

    def is_ready_for_report(self, context: AssessmentContext) -> bool:
        return context.current_tier == Tier.COMPLETE and is_assessment_complete(context)

    # ------------------------------------------------------------------
    # Catalog lookups over the current context
    # ------------------------------------------------------------------

    def selected_icp(self, context: AssessmentContext) -> Optional[ICPDefinition]:
        return self._catalog.get_icp(context.selected_icp_id)

    def selected_opportunity_area(self, context: AssessmentContext) -> Optional[OpportunityArea]:
        icp = self.selected_icp(context)
        if icp is None or context.selected_opportunity_area_id is None:
            return None
        return icp.get_opportunity_area(context.selected_opportunity_area_id)

    def selected_challenge_area(self, context: AssessmentContext) -> Optional[ChallengeArea]:
        return self._catalog.get_challenge_area(context.selected_challenge_area_id)

    def selected_metric(self, context: AssessmentContext) -> Optional[MetricDefinition]:
        area = self.selected_challenge_area(context)
        if area is None or context.selected_metric_id is None:
            return None
        return area.get_metric(context.selected_metric_id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _selected_icp(self, context: AssessmentContext) -> ICPDefinition:
        icp = self.selected_icp(context)
        if icp is None:
            raise PreconditionError(
                "No ICP category selected", tier=Tier.OPPORTUNITY_AREA, missing="selected_icp_id"
            )
        return icp

    def _selected_opportunity_area(self, context: AssessmentContext) -> OpportunityArea:
        self._selected_icp(context)
        area = self.selected_opportunity_area(context)
        if area is None:
            raise PreconditionError(
                "No opportunity area selected",
                tier=Tier.REVENUE_MODEL,
                missing="selected_opportunity_area_id",
            )
        return area

    def _selected_challenge_area(self, context: AssessmentContext) -> ChallengeArea:
        options = self.get_challenge_areas(context)
        area = self.selected_challenge_area(context)
        if area is None:
            raise PreconditionError(
                "No challenge area selected",
                tier=Tier.METRIC,
                missing="selected_challenge_area_id",
            )
        if area.id not in [c.id for c in options]:
            raise PreconditionError(
                f"Challenge area '{area.id}' is not offered for the selected opportunity area",
                tier=Tier.METRIC,
                missing="selected_challenge_area_id",
            )
        return area

    def _selected_metric(self, context: AssessmentContext) -> MetricDefinition:
        self._selected_challenge_area(context)
        metric = self.selected_metric(context)
        if metric is None:
            raise PreconditionError(
                "No metric selected", tier=Tier.QUANTIFICATION, missing="selected_metric_id"
            )
        return metric

    @staticmethod
    def _require_tier(context: AssessmentContext, tier: Tier) -> None:
        if context.current_tier != tier:
            raise PreconditionError(
                f"Expected tier {tier.value:g} but context is at tier "
                f"{context.current_tier.value:g}",
                tier=context.current_tier,
            )

    @staticmethod
    def _check_option(tier: Tier, value: str, options: list[str]) -> None:
        if value not in options:
            raise InvalidSelectionError(tier, value, options)

    @staticmethod
    def _require_text(tier: Tier, value: Optional[str], label: str) -> str:
        text = (value or "").strip()
        if not text:
            raise InvalidAnswerError(tier, value, f"{label} must not be blank")
        return text

    @staticmethod
    def _advance(context: AssessmentContext, tier: Tier, **updates: Any) -> AssessmentContext:
        updates["current_tier"] = tier
        updates["progress_percentage"] = progress_for(tier)
        logger.info(f"Assessment advanced to tier {tier.value:g} ({updates['progress_percentage']}%)")
        return context.model_copy(update=updates)
