"""Templated market narrative used when live research is unavailable."""

from __future__ import annotations

from types import MappingProxyType

from revintel.engine.benchmarks import classify_archetype
from revintel.models.enums import Archetype, ImpactLevel
from revintel.models.research import MarketTrend, ResearchResult

_NARRATIVES = MappingProxyType({
    Archetype.ITSM: (
        "Managed service and IT support providers are moving ticket triage, "
        "routing and first-line resolution to AI agents. Providers that automate "
        "intake report faster response times and are winning larger contracts at "
        "higher margins."
    ),
    Archetype.AGENCY: (
        "Agencies and consultancies are using AI for client research, discovery "
        "preparation and proposal drafting. Firms with these capabilities are "
        "shortening sales cycles and charging premiums for faster delivery."
    ),
    Archetype.SAAS: (
        "Software companies are adopting intelligent lead scoring and automated "
        "nurturing across the funnel. AI-enabled revenue teams convert more of "
        "the same pipeline and grow faster than traditional competitors."
    ),
    Archetype.ENTERPRISE: (
        "Enterprise sellers are applying AI to RFP responses and stakeholder "
        "mapping. Buyers now expect AI-assisted experiences as table stakes, "
        "which favors vendors that respond quickly with tailored proposals."
    ),
})

_TRENDS = MappingProxyType({
    Archetype.ITSM: (
        MarketTrend(trend="AI-powered ticket routing and automated resolution", impact=ImpactLevel.HIGH),
        MarketTrend(trend="Growing demand for proactive, monitored service tiers", impact=ImpactLevel.MEDIUM),
    ),
    Archetype.AGENCY: (
        MarketTrend(trend="AI proposal generation and client research", impact=ImpactLevel.HIGH),
        MarketTrend(trend="Shift from hourly billing to value-based pricing", impact=ImpactLevel.MEDIUM),
    ),
    Archetype.SAAS: (
        MarketTrend(trend="Intelligent lead scoring and automated nurturing", impact=ImpactLevel.HIGH),
        MarketTrend(trend="Product-led growth with AI onboarding assistants", impact=ImpactLevel.MEDIUM),
    ),
    Archetype.ENTERPRISE: (
        MarketTrend(trend="AI-assisted RFP responses and stakeholder mapping", impact=ImpactLevel.HIGH),
        MarketTrend(trend="Consolidation of point tools into governed AI platforms", impact=ImpactLevel.MEDIUM),
    ),
})


def generic_research(business_type: str) -> ResearchResult:
    """Generic industry narrative keyed by the business archetype."""
    archetype = classify_archetype(business_type)
    label = business_type or "B2B services"
    narrative = (
        f"AI adoption in {label} is accelerating. {_NARRATIVES[archetype]} "
        "Companies implementing AI-first revenue operations commonly report "
        "40-60% improvement in key metrics within 90 days."
    )
    return ResearchResult(
        narrative_text=narrative,
        trends=list(_TRENDS[archetype]),
        is_fallback=True,
    )
