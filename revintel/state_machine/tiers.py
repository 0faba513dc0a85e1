"""Fixed lookup tables for tier progress and back-navigation."""

from __future__ import annotations

from types import MappingProxyType

from revintel.models.enums import Tier

TIER_PROGRESS = MappingProxyType({
    Tier.CATEGORY: 0,
    Tier.OPPORTUNITY_AREA: 15,
    Tier.REVENUE_MODEL: 25,
    Tier.CHALLENGE_AREA: 35,
    Tier.METRIC: 45,
    Tier.QUANTIFICATION: 55,
    Tier.PROCESS: 70,
    Tier.PROCESS_VALIDATION: 85,
    Tier.COMPLETE: 100,
})

# Progress shown while a rejected process map is being refined
REFINEMENT_PROGRESS = 90

PREVIOUS_TIER = MappingProxyType({
    Tier.OPPORTUNITY_AREA: Tier.CATEGORY,
    Tier.REVENUE_MODEL: Tier.OPPORTUNITY_AREA,
    Tier.CHALLENGE_AREA: Tier.REVENUE_MODEL,
    Tier.METRIC: Tier.CHALLENGE_AREA,
    Tier.QUANTIFICATION: Tier.METRIC,
    Tier.PROCESS: Tier.QUANTIFICATION,
    Tier.PROCESS_VALIDATION: Tier.PROCESS,
    Tier.COMPLETE: Tier.PROCESS_VALIDATION,
})

# Minimum length of a free-text process description for the simple path
SIMPLE_PROCESS_MIN_LENGTH = 50

# Revenue model option that requires the prospect's own description
CUSTOM_REVENUE_MODEL = "custom"


def progress_for(tier: Tier) -> int:
    return TIER_PROGRESS[tier]


def previous_tier(tier: Tier) -> Tier | None:
    """Tier one step back, or None for the first tier."""
    return PREVIOUS_TIER.get(tier)
