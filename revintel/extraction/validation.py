"""Data-quality scoring for extracted assessment fields."""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable

from revintel.models.assessment import (
    ParsedAssessmentFields,
    RawAssessmentAnswers,
    SuspiciousValue,
    ValidationReport,
)
from revintel.models.enums import QualityTier, Severity


@dataclass(frozen=True)
class NumericRange:
    min: float
    max: float


@dataclass(frozen=True)
class CrossFieldRule:
    fields: tuple[str, ...]
    rule: Callable[..., bool]
    message: str


REQUIRED_FIELDS = (
    "company",
    "email",
    "business_type",
    "opportunity_focus",
    "revenue_model",
    "revenue_challenge",
    "investment_level",
)

NUMERIC_RANGES = MappingProxyType({
    "conversion_rate": NumericRange(0.001, 0.8),
    "avg_deal_size": NumericRange(100, 1_000_000),
    "sales_cycle_months": NumericRange(0.25, 36),
    "monthly_deals": NumericRange(1, 1000),
    "employee_count": NumericRange(1, 100_000),
})

STRING_PATTERNS = MappingProxyType({
    "email": re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$"),
    "company": re.compile(r"^[a-zA-Z0-9\s\-&.,()]{2,100}$"),
})

CROSS_FIELD_RULES = (
    CrossFieldRule(
        fields=("avg_deal_size", "monthly_deals"),
        rule=lambda deal_size, monthly_deals: deal_size * monthly_deals < 10_000_000,
        message="Monthly revenue calculation seems unusually high",
    ),
)

MISSING_FIELD_PENALTY = 0.1
RANGE_PENALTY = 0.1
PATTERN_PENALTY = 0.15
EMPTY_TEAM_PENALTY = 0.05

HIGH_QUALITY_THRESHOLD = 0.8
MEDIUM_QUALITY_THRESHOLD = 0.6
MIN_CONFIDENCE = 0.1


def quality_tier_for(score: float) -> QualityTier:
    if score >= HIGH_QUALITY_THRESHOLD:
        return QualityTier.HIGH
    if score >= MEDIUM_QUALITY_THRESHOLD:
        return QualityTier.MEDIUM
    return QualityTier.LOW


def validate_fields(raw: RawAssessmentAnswers, parsed: ParsedAssessmentFields) -> ValidationReport:
    """Score the extracted record and list everything that looked wrong.

    Never raises; every problem is reported through the returned report.
    """
    warnings: list[str] = []
    suspicious: list[SuspiciousValue] = []
    missing: list[str] = []
    score = 1.0

    for field_name in REQUIRED_FIELDS:
        value = getattr(raw, field_name, "")
        if not value or not str(value).strip():
            missing.append(field_name)
            score -= MISSING_FIELD_PENALTY

    for field_name, bounds in NUMERIC_RANGES.items():
        value = parsed.get(field_name)
        if value is not None and not (bounds.min <= value <= bounds.max):
            suspicious.append(SuspiciousValue(
                field=field_name,
                value=value,
                reason=f"Value {value} outside expected range {bounds.min:g}-{bounds.max:g}",
                severity=Severity.MEDIUM,
                suggestion=f"Expected range: {bounds.min:g} to {bounds.max:g}",
            ))
            score -= RANGE_PENALTY

    for field_name, pattern in STRING_PATTERNS.items():
        value = getattr(raw, field_name, "")
        if value and not pattern.match(value):
            suspicious.append(SuspiciousValue(
                field=field_name,
                value=value,
                reason="Does not match expected format",
                severity=Severity.HIGH,
                suggestion=f"Please check {field_name} format",
            ))
            score -= PATTERN_PENALTY

    # Cross-field rules only warn
    for rule in CROSS_FIELD_RULES:
        values = [parsed.get(f) for f in rule.fields]
        if all(v is not None for v in values) and not rule.rule(*values):
            warnings.append(rule.message)

    if parsed.conversion_rate > 0.5:
        suspicious.append(SuspiciousValue(
            field="conversion_rate",
            value=parsed.conversion_rate,
            reason="Conversion rate over 50% is unusually high",
            severity=Severity.MEDIUM,
            suggestion="Typical B2B conversion rates are 2-15%",
        ))

    if parsed.sales_cycle_months > 12:
        warnings.append("Sales cycle over 12 months indicates complex/enterprise sales")

    if not parsed.team_members:
        warnings.append("No team members identified - may impact personalization")
        score -= EMPTY_TEAM_PENALTY

    for field_name in parsed.defaulted_fields:
        warnings.append(f"No value found for {field_name}; using estimated default")

    # Guard against float drift (1.0 - 0.1 - 0.1 ...)
    score = round(score, 10)

    actions: list[str] = []
    if missing:
        actions.append(f"Collect missing data: {', '.join(missing)}")
    if suspicious:
        actions.append("Review flagged values for accuracy")
    if not parsed.team_members:
        actions.append("Add team member information for better personalization")
    if parsed.defaulted_fields:
        actions.append(f"Confirm estimated values: {', '.join(parsed.defaulted_fields)}")

    return ValidationReport(
        quality_tier=quality_tier_for(score),
        quality_score=score,
        confidence=max(MIN_CONFIDENCE, score),
        data_completeness=1 - len(missing) / len(REQUIRED_FIELDS),
        missing_fields=tuple(missing),
        suspicious_values=tuple(suspicious),
        warnings=tuple(warnings),
        recommended_actions=tuple(actions),
        requires_manual_review=(
            score < MEDIUM_QUALITY_THRESHOLD
            or any(v.severity == Severity.HIGH for v in suspicious)
        ),
        has_required_fields=not missing,
        has_numeric_data=parsed.avg_deal_size > 0 and parsed.conversion_rate > 0,
    )


def summarize(report: ValidationReport) -> str:
    """One-line summary for logs."""
    return (
        f"Quality: {report.quality_tier.value}, "
        f"Completeness: {report.data_completeness * 100:.0f}%, "
        f"Confidence: {report.confidence * 100:.0f}%"
    )
