"""Tests for the tiered assessment state machine."""

import pytest

from revintel.catalog.loader import get_default_catalog
from revintel.models.context import AssessmentContext
from revintel.models.enums import ProcessPath, Tier
from revintel.state_machine.errors import (
    InvalidAnswerError,
    InvalidSelectionError,
    PreconditionError,
)
from revintel.state_machine.machine import AssessmentStateMachine, is_assessment_complete
from revintel.state_machine.tiers import CUSTOM_REVENUE_MODEL, REFINEMENT_PROGRESS
from tests.conftest import (
    ACME_PROCESS,
    AREA_ID,
    BASELINE,
    CHALLENGE_ID,
    DEFAULT_STEPS,
    FRICTION,
    ICP_ID,
    METRIC_ID,
    REVENUE_MODEL,
    complete_simple,
    make_step,
    walk_to_process,
    walk_to_quantification,
)


class TestTransitions:

    def test_start_is_tier_one(self, machine):
        ctx = machine.start(session_id="abc")
        assert ctx.current_tier == Tier.CATEGORY
        assert ctx.progress_percentage == 0
        assert ctx.session_id == "abc"

    def test_each_selection_advances_one_tier(self, machine):
        ctx = machine.start()
        ctx = machine.select_icp(ICP_ID, ctx)
        assert (ctx.current_tier, ctx.progress_percentage) == (Tier.OPPORTUNITY_AREA, 15)

        ctx = machine.select_opportunity_area(AREA_ID, ctx)
        assert (ctx.current_tier, ctx.progress_percentage) == (Tier.REVENUE_MODEL, 25)

        ctx = machine.select_revenue_model(REVENUE_MODEL, ctx)
        assert (ctx.current_tier, ctx.progress_percentage) == (Tier.CHALLENGE_AREA, 35)

        ctx = machine.select_challenge_area(CHALLENGE_ID, ctx)
        assert (ctx.current_tier, ctx.progress_percentage) == (Tier.METRIC, 45)

        ctx = machine.select_metric(METRIC_ID, ctx)
        assert (ctx.current_tier, ctx.progress_percentage) == (Tier.QUANTIFICATION, 55)

        ctx = machine.submit_quantification(BASELINE, FRICTION, ctx)
        assert (ctx.current_tier, ctx.progress_percentage) == (Tier.PROCESS, 70)
        assert ctx.current_baseline == BASELINE
        assert ctx.main_friction == FRICTION

    def test_transition_does_not_mutate_input(self, machine):
        start = machine.start()
        after = machine.select_icp(ICP_ID, start)
        assert start.selected_icp_id is None
        assert start.current_tier == Tier.CATEGORY
        assert after is not start

    def test_validated_path_reaches_complete(self, completed_context, machine):
        assert completed_context.current_tier == Tier.COMPLETE
        assert completed_context.progress_percentage == 100
        assert completed_context.process_validated is True
        assert completed_context.process_path == ProcessPath.VALIDATED
        assert machine.is_complete(completed_context)
        assert machine.is_ready_for_report(completed_context)

    def test_simple_path_reaches_complete(self, simple_context, machine):
        assert simple_context.current_tier == Tier.COMPLETE
        assert simple_context.progress_percentage == 100
        assert simple_context.process_path == ProcessPath.SIMPLE
        assert simple_context.process_description == ACME_PROCESS
        assert machine.is_ready_for_report(simple_context)

    def test_process_steps_are_numbered_in_order(self, completed_context):
        assert [s.sequence for s in completed_context.process_steps] == [1, 2, 3]
        assert completed_context.process_steps[0].role == "Doug"

    def test_custom_revenue_model_recorded(self, machine):
        ctx = machine.select_opportunity_area(AREA_ID, machine.select_icp(ICP_ID, machine.start()))
        ctx = machine.select_revenue_model(
            CUSTOM_REVENUE_MODEL, ctx, custom_model="Usage-based platform fees"
        )
        assert ctx.selected_revenue_model == CUSTOM_REVENUE_MODEL
        assert ctx.custom_revenue_model == "Usage-based platform fees"
        assert ctx.revenue_model_label == "Usage-based platform fees"

    def test_custom_revenue_model_requires_text(self, machine):
        ctx = machine.select_opportunity_area(AREA_ID, machine.select_icp(ICP_ID, machine.start()))
        with pytest.raises(InvalidAnswerError):
            machine.select_revenue_model(CUSTOM_REVENUE_MODEL, ctx, custom_model="   ")


class TestInvalidSelections:

    def test_unknown_icp_rejected(self, machine):
        ctx = machine.start()
        with pytest.raises(InvalidSelectionError) as exc_info:
            machine.select_icp("not_a_category", ctx)
        assert exc_info.value.tier == Tier.CATEGORY
        assert ICP_ID in exc_info.value.options
        assert "please choose again" in str(exc_info.value)
        assert ctx.selected_icp_id is None

    def test_area_from_other_icp_rejected(self, machine):
        ctx = machine.select_icp(ICP_ID, machine.start())
        with pytest.raises(InvalidSelectionError):
            machine.select_opportunity_area("crm_integration", ctx)

    def test_revenue_model_outside_suggestions_rejected(self, machine):
        ctx = machine.select_opportunity_area(AREA_ID, machine.select_icp(ICP_ID, machine.start()))
        with pytest.raises(InvalidSelectionError):
            machine.select_revenue_model("Pay what you want", ctx)

    def test_metric_from_other_challenge_rejected(self, machine):
        ctx = walk_to_quantification(machine)
        ctx = machine.step_back(ctx)
        with pytest.raises(InvalidSelectionError):
            machine.select_metric("proposal_win_rate", ctx)

    def test_blank_quantification_rejected(self, machine):
        ctx = walk_to_quantification(machine)
        with pytest.raises(InvalidAnswerError):
            machine.submit_quantification("  ", FRICTION, ctx)
        with pytest.raises(InvalidAnswerError):
            machine.submit_quantification(BASELINE, "", ctx)

    def test_short_simple_process_rejected(self, machine):
        ctx = walk_to_process(machine)
        with pytest.raises(InvalidAnswerError):
            machine.submit_simple_process("Doug does everything.", ctx)

    def test_invalid_answer_is_invalid_selection(self):
        assert issubclass(InvalidAnswerError, InvalidSelectionError)
        assert issubclass(InvalidSelectionError, ValueError)


class TestPreconditions:

    def test_transition_at_wrong_tier_raises(self, machine):
        ctx = machine.start()
        with pytest.raises(PreconditionError):
            machine.select_metric(METRIC_ID, ctx)

    def test_opportunity_areas_need_icp(self, machine):
        with pytest.raises(PreconditionError) as exc_info:
            machine.get_opportunity_areas(machine.start())
        assert exc_info.value.missing == "selected_icp_id"

    def test_challenge_areas_need_revenue_model(self, machine):
        ctx = machine.select_opportunity_area(AREA_ID, machine.select_icp(ICP_ID, machine.start()))
        with pytest.raises(PreconditionError):
            machine.get_challenge_areas(ctx)

    def test_breakdown_needs_steps(self, machine):
        ctx = walk_to_process(machine)
        with pytest.raises(PreconditionError):
            machine.submit_process_breakdown("Proposals stall", ctx)

    @pytest.mark.parametrize("missing", [
        "selected_icp_id",
        "selected_opportunity_area_id",
        "selected_revenue_model",
        "selected_challenge_area_id",
    ])
    def test_metrics_need_whole_upstream_chain(self, machine, missing):
        ctx = machine.step_back(walk_to_quantification(machine))
        ctx = ctx.model_copy(update={missing: None})
        with pytest.raises(PreconditionError):
            machine.get_metrics(ctx)
        with pytest.raises(PreconditionError):
            machine.select_metric(METRIC_ID, ctx)

    @pytest.mark.parametrize("missing", [
        "selected_icp_id",
        "selected_opportunity_area_id",
        "selected_challenge_area_id",
        "selected_metric_id",
    ])
    def test_quantification_prompts_need_whole_upstream_chain(self, machine, missing):
        ctx = walk_to_quantification(machine).model_copy(update={missing: None})
        with pytest.raises(PreconditionError):
            machine.get_quantification_prompts(ctx)
        with pytest.raises(PreconditionError):
            machine.submit_quantification(BASELINE, FRICTION, ctx)

    def test_challenge_area_only_at_metric_tier_is_rejected(self, machine):
        ctx = AssessmentContext(selected_challenge_area_id=CHALLENGE_ID, current_tier=Tier.METRIC)
        with pytest.raises(PreconditionError):
            machine.select_metric(METRIC_ID, ctx)
        assert ctx.current_tier == Tier.METRIC

    def test_challenge_area_must_belong_to_opportunity_area(self):
        catalog = get_default_catalog().model_copy(
            update={"default_challenge_area_ids": [CHALLENGE_ID]}
        )
        machine = AssessmentStateMachine(catalog=catalog)
        ctx = AssessmentContext(
            selected_icp_id=ICP_ID,
            selected_opportunity_area_id=AREA_ID,
            selected_revenue_model=REVENUE_MODEL,
            selected_challenge_area_id="account_management",
            current_tier=Tier.METRIC,
        )
        with pytest.raises(PreconditionError) as exc_info:
            machine.get_metrics(ctx)
        assert exc_info.value.missing == "selected_challenge_area_id"

    def test_step_back_from_first_tier_raises(self, machine):
        with pytest.raises(PreconditionError):
            machine.step_back(machine.start())

    def test_summary_requires_completion(self, machine):
        from revintel.state_machine.summary import generate_assessment_summary

        with pytest.raises(PreconditionError):
            generate_assessment_summary(walk_to_process(machine), machine)


class TestProcessValidation:

    def _at_validation(self, machine):
        ctx = walk_to_process(machine)
        for step in DEFAULT_STEPS:
            ctx = machine.add_process_step(step, ctx)
        return machine.submit_process_breakdown("Proposals wait on review", ctx)

    def test_breakdown_moves_to_validation(self, machine):
        ctx = self._at_validation(machine)
        assert ctx.current_tier == Tier.PROCESS_VALIDATION
        assert ctx.progress_percentage == 85
        assert not is_assessment_complete(ctx)

    def test_rejection_stays_at_tier_six(self, machine):
        ctx = machine.validate_process(
            False, self._at_validation(machine), refinements="Kevin also reviews pricing"
        )
        assert ctx.current_tier == Tier.PROCESS_VALIDATION
        assert ctx.progress_percentage == REFINEMENT_PROGRESS
        assert ctx.process_refinements == "Kevin also reviews pricing"
        assert not ctx.process_validated

    def test_rejection_then_confirmation_completes(self, machine):
        ctx = machine.validate_process(False, self._at_validation(machine), refinements="Add pricing")
        ctx = machine.validate_process(True, ctx)
        assert ctx.current_tier == Tier.COMPLETE
        assert ctx.process_validated


class TestStepBack:

    def test_step_back_keeps_answers(self, machine):
        ctx = walk_to_quantification(machine)
        back = machine.step_back(ctx)
        assert back.current_tier == Tier.METRIC
        assert back.progress_percentage == 45
        assert back.selected_metric_id == METRIC_ID

    def test_reselect_after_step_back(self, machine):
        ctx = machine.step_back(walk_to_quantification(machine))
        ctx = machine.select_metric("opportunity_to_close_rate", ctx)
        assert ctx.current_tier == Tier.QUANTIFICATION
        assert ctx.selected_metric_id == "opportunity_to_close_rate"

    def test_step_back_from_simple_complete_returns_to_process(self, simple_context, machine):
        back = machine.step_back(simple_context)
        assert back.current_tier == Tier.PROCESS
        assert back.progress_percentage == 70
        assert not machine.is_ready_for_report(back)

        redone = machine.submit_simple_process(ACME_PROCESS + " Kevin sends proposals.", back)
        assert redone.current_tier == Tier.COMPLETE
        assert machine.is_ready_for_report(redone)

    def test_step_back_from_validated_complete_returns_to_validation(self, completed_context, machine):
        back = machine.step_back(completed_context)
        assert back.current_tier == Tier.PROCESS_VALIDATION
        assert not machine.is_ready_for_report(back)

        redone = machine.validate_process(True, back)
        assert redone.current_tier == Tier.COMPLETE
        assert machine.is_ready_for_report(redone)


class TestOptions:

    def test_options_follow_current_tier(self, machine):
        ctx = machine.start()
        assert len(machine.options_for_current_tier(ctx)) == 6

        ctx = machine.select_icp(ICP_ID, ctx)
        assert len(machine.options_for_current_tier(ctx)) == 4

        ctx = machine.select_opportunity_area(AREA_ID, ctx)
        options = machine.options_for_current_tier(ctx)
        assert options[-1] == CUSTOM_REVENUE_MODEL
        assert REVENUE_MODEL in options

    def test_challenge_areas_default_to_catalog_defaults(self, machine):
        ctx = machine.select_opportunity_area(AREA_ID, machine.select_icp(ICP_ID, machine.start()))
        ctx = machine.select_revenue_model(REVENUE_MODEL, ctx)
        ids = [c.id for c in machine.get_challenge_areas(ctx)]
        assert ids == [
            "lead_management",
            "presales_discovery_scoping",
            "client_activation_onboarding_adoption",
            "account_management",
        ]

    def test_no_options_after_metric(self, machine):
        assert machine.options_for_current_tier(walk_to_process(machine)) == []


class TestSerialization:

    def test_round_trip_mid_interview(self, machine):
        ctx = walk_to_process(machine, session_id="resume-me")
        ctx = machine.add_process_step(make_step("Doug", "qualifies inquiries", "a shortlist"), ctx)

        restored = AssessmentContext.model_validate_json(ctx.model_dump_json())
        assert restored == ctx
        assert restored.current_tier == Tier.PROCESS

        resumed = machine.submit_process_breakdown("Qualification is slow", restored)
        direct = machine.submit_process_breakdown("Qualification is slow", ctx)
        assert resumed == direct

    def test_round_trip_complete(self, simple_context):
        restored = AssessmentContext.model_validate_json(simple_context.model_dump_json())
        assert restored.current_tier == Tier.COMPLETE
        assert is_assessment_complete(restored)

    def test_simple_path_with_short_stored_description_is_incomplete(self, machine):
        ctx = complete_simple(machine)
        tampered = ctx.model_copy(update={"process_description": "too short"})
        assert not is_assessment_complete(tampered)
