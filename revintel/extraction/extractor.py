"""Field extraction with explicit fallback defaults."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any

# Ensure all matchers are registered on import
import revintel.extraction.matchers  # noqa: F401
from revintel.extraction.matchers import extract_team_members, parse_stack
from revintel.extraction.registry import first_match
from revintel.models.assessment import (
    BudgetRange,
    ParsedAssessmentFields,
    RawAssessmentAnswers,
)

logger = logging.getLogger(__name__)

FIELD_DEFAULTS = MappingProxyType({
    "avg_deal_size": 5000.0,
    "monthly_deals": 5,
    "sales_cycle_months": 3.0,
    "conversion_rate": 0.08,
    "budget_range": BudgetRange(5000, 25000),
})


def _join(*parts: str) -> str:
    return ". ".join(p.strip() for p in parts if p and p.strip())


def _required(field: str, text: str, defaulted: list[str]) -> Any:
    value, matcher = first_match(field, text)
    if value is None:
        defaulted.append(field)
        logger.debug(f"{field}: no pattern matched, using default {FIELD_DEFAULTS[field]}")
        return FIELD_DEFAULTS[field]
    logger.debug(f"{field}: matched by '{matcher}' -> {value}")
    return value


def _optional(field: str, text: str) -> Any:
    value, _ = first_match(field, text)
    return value


def extract_fields(raw: RawAssessmentAnswers) -> ParsedAssessmentFields:
    """Pull typed values out of the free-text answers.

    Each field is extracted independently. Fields with no matching phrase
    fall back to FIELD_DEFAULTS and are listed in ``defaulted_fields``.
    """
    defaulted: list[str] = []
    activity_text = _join(raw.additional_context, raw.team_process)

    return ParsedAssessmentFields(
        team_members=tuple(extract_team_members(raw.team_process)),
        stack_components=tuple(parse_stack(raw.solution_stack)),
        budget_range=_required("budget_range", raw.investment_level, defaulted),
        avg_deal_size=_required(
            "avg_deal_size", _join(raw.revenue_model, raw.additional_context), defaulted
        ),
        monthly_deals=_required("monthly_deals", activity_text, defaulted),
        sales_cycle_months=_required("sales_cycle_months", activity_text, defaulted),
        conversion_rate=_required("conversion_rate", activity_text, defaulted),
        employee_count=_optional("employee_count", activity_text),
        years_founded=_optional("years_founded", raw.additional_context),
        location=_optional("location", raw.additional_context),
        defaulted_fields=tuple(defaulted),
    )
