"""Turns raw interview answers into a validated, typed record."""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping, Union

from revintel.models.assessment import RawAssessmentAnswers, ValidatedAssessmentData

from .extractor import extract_fields
from .validation import summarize, validate_fields

logger = logging.getLogger(__name__)

MAX_STRING_LENGTH = 500

_WHITESPACE = re.compile(r"\s+")
_DISALLOWED_CHARS = re.compile(r"[^\w\s@.,()\-]")


def clean_string(value: str) -> str:
    """Trim, collapse whitespace, drop unusual characters, cap length."""
    if not value:
        return ""
    value = _WHITESPACE.sub(" ", value.strip())
    value = _DISALLOWED_CHARS.sub("", value)
    return value[:MAX_STRING_LENGTH]


class DataProcessor:
    """Stateless extraction and validation of assessment answers."""

    def validate_and_enhance(
        self, raw: Union[RawAssessmentAnswers, Mapping[str, Any]]
    ) -> ValidatedAssessmentData:
        if not isinstance(raw, RawAssessmentAnswers):
            raw = RawAssessmentAnswers.model_validate(dict(raw))

        # Patterns run on the raw text; cleaning would strip "$" and "%"
        parsed = extract_fields(raw)
        validation = validate_fields(raw, parsed)
        logger.info(f"Assessment data processed - {summarize(validation)}")

        return ValidatedAssessmentData(
            session_id=raw.session_id,
            company=clean_string(raw.company),
            email=clean_string(raw.email),
            business_type=clean_string(raw.business_type),
            opportunity_focus=clean_string(raw.opportunity_focus),
            revenue_model=clean_string(raw.revenue_model),
            revenue_challenge=clean_string(raw.revenue_challenge),
            team_process=clean_string(raw.team_process),
            solution_stack=clean_string(raw.solution_stack),
            investment_level=clean_string(raw.investment_level),
            additional_context=clean_string(raw.additional_context),
            parsed=parsed,
            validation=validation,
        )
