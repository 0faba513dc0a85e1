"""Shared test fixtures for the revintel test suite."""

import pytest

from revintel.engine.calculator import MetricCalculator
from revintel.extraction.processor import DataProcessor
from revintel.models.assessment import RawAssessmentAnswers
from revintel.models.context import AssessmentContext, CompanyProfile, ProcessStep
from revintel.models.enums import ImpactLevel
from revintel.models.research import CaseStudy, MarketTrend, ResearchResult, SolutionItem
from revintel.state_machine.machine import AssessmentStateMachine
from revintel.synthesis.bundle import ReportBundle

ICP_ID = "custom_development_agencies"
AREA_ID = "saas_product_development"
REVENUE_MODEL = "MVP development + ongoing product development"
CHALLENGE_ID = "lead_management"
METRIC_ID = "lead_to_opportunity_conversion"

BASELINE = "We convert 8% of leads and close 4 deals per month"
FRICTION = "Deals take 3 months to close because Doug qualifies every inquiry by hand"

ACME_PROCESS = "Doug CEO and Kevin VP nurture leads manually. Takes 8 months to close deals."


def make_step(role, action, output, tools=(), time_invested=None):
    """Helper to create a ProcessStep with minimal boilerplate."""
    return ProcessStep(
        role=role,
        action=action,
        output=output,
        tools=tuple(tools),
        time_invested=time_invested,
    )


DEFAULT_STEPS = (
    make_step("Doug", "reviews inbound inquiries", "a shortlist of prospects", ["HubSpot"], "2 hours"),
    make_step("Kevin", "runs discovery calls", "call notes", ["Zoom", "HubSpot"]),
    make_step("Sarah", "drafts proposals", "a proposal", ["Google Docs"]),
)


def walk_to_quantification(machine, session_id=None) -> AssessmentContext:
    """Answer tiers 1 through 3.5 with the default catalog path."""
    ctx = machine.start(session_id=session_id)
    ctx = machine.select_icp(ICP_ID, ctx)
    ctx = machine.select_opportunity_area(AREA_ID, ctx)
    ctx = machine.select_revenue_model(REVENUE_MODEL, ctx)
    ctx = machine.select_challenge_area(CHALLENGE_ID, ctx)
    return machine.select_metric(METRIC_ID, ctx)


def walk_to_process(machine, session_id=None) -> AssessmentContext:
    ctx = walk_to_quantification(machine, session_id=session_id)
    return machine.submit_quantification(BASELINE, FRICTION, ctx)


def complete_validated(machine, session_id=None, steps=DEFAULT_STEPS) -> AssessmentContext:
    ctx = walk_to_process(machine, session_id=session_id)
    for step in steps:
        ctx = machine.add_process_step(step, ctx)
    ctx = machine.submit_process_breakdown("Proposals wait on Doug's review", ctx)
    return machine.validate_process(True, ctx)


def complete_simple(machine, description=ACME_PROCESS, session_id=None) -> AssessmentContext:
    ctx = walk_to_process(machine, session_id=session_id)
    return machine.submit_simple_process(description, ctx)


def make_acme_raw(**overrides) -> RawAssessmentAnswers:
    """Acme SaaS answers; deal size, deal count and conversion are unstated."""
    fields = dict(
        session_id="acme-001",
        company="Acme SaaS Co",
        email="doug@acme.io",
        business_type="SaaS",
        opportunity_focus="Product-led growth",
        revenue_model="Subscription",
        revenue_challenge="Lead Management",
        team_process=ACME_PROCESS,
        solution_stack="HubSpot, Slack",
        investment_level="moderate",
        additional_context="",
    )
    fields.update(overrides)
    return RawAssessmentAnswers(**fields)


@pytest.fixture
def machine() -> AssessmentStateMachine:
    return AssessmentStateMachine()


@pytest.fixture
def completed_context(machine) -> AssessmentContext:
    """Interview finished through process validation."""
    return complete_validated(machine, session_id="session-123")


@pytest.fixture
def simple_context(machine) -> AssessmentContext:
    """Interview finished through the single-description shortcut."""
    return complete_simple(machine, session_id="session-456")


@pytest.fixture
def profile() -> CompanyProfile:
    return CompanyProfile(
        company="Acme Corp",
        email="ops@acme.com",
        solution_stack="HubSpot, Slack",
        investment_level="moderate",
        additional_context="Average deal size is about $12,000. We have 25 employees, based in Austin.",
    )


@pytest.fixture
def acme_raw() -> RawAssessmentAnswers:
    return make_acme_raw()


@pytest.fixture
def acme_data(acme_raw):
    return DataProcessor().validate_and_enhance(acme_raw)


@pytest.fixture
def acme_metrics(acme_data):
    return MetricCalculator().calculate(acme_data)


@pytest.fixture
def sample_solutions() -> list[SolutionItem]:
    return [
        SolutionItem(
            id="clay-com",
            name="Clay.com",
            description="AI-native lead enrichment with 50+ data sources",
            pricing="$149/month",
            integrations=["HubSpot", "Salesforce"],
            category="Context Orchestration",
            relevance_score=0.91,
        ),
        SolutionItem(
            id="gpt-4o-mini",
            name="GPT-4o-mini",
            description="Language model for high-volume lead scoring",
            pricing="$0.15/$0.60 per million tokens",
            integrations=["OpenAI API", "Zapier"],
            category="Conversational Interface",
            relevance_score=0.84,
        ),
    ]


@pytest.fixture
def sample_research() -> ResearchResult:
    return ResearchResult(
        narrative_text="SaaS revenue teams are rapidly adopting AI qualification agents.",
        citations=["https://example.com/ai-sales-report"],
        trends=[
            MarketTrend(trend="Rapid adoption of AI lead scoring", impact=ImpactLevel.HIGH),
            MarketTrend(trend="Growing use of automated nurture sequences"),
        ],
        case_studies=[
            CaseStudy(company="Northwind", result="reduced response time by 60%", confidence=0.6),
        ],
    )


@pytest.fixture
def acme_bundle(acme_data, acme_metrics, sample_solutions, sample_research) -> ReportBundle:
    return ReportBundle(
        data=acme_data,
        metrics=acme_metrics,
        solutions=tuple(sample_solutions),
        research=sample_research,
    )
