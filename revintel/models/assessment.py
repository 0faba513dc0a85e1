"""Raw interview answers and the validated record extracted from them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel

from .enums import QualityTier, Severity


class RawAssessmentAnswers(BaseModel):
    """Free-text answers handed to the extraction unit."""

    session_id: str = ""
    company: str = ""
    email: str = ""
    business_type: str = ""
    opportunity_focus: str = ""
    revenue_model: str = ""
    revenue_challenge: str = ""
    team_process: str = ""
    solution_stack: str = ""
    investment_level: str = ""
    additional_context: str = ""


@dataclass(frozen=True)
class BudgetRange:
    min: float
    max: float

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2


@dataclass(frozen=True)
class ParsedAssessmentFields:
    """Typed values pulled out of the free-text answers."""

    team_members: tuple[str, ...]
    stack_components: tuple[str, ...]
    budget_range: BudgetRange
    avg_deal_size: float
    monthly_deals: float
    sales_cycle_months: float
    conversion_rate: float
    employee_count: Optional[int] = None
    years_founded: Optional[int] = None
    location: Optional[str] = None
    # Fields that fell back to a documented default
    defaulted_fields: tuple[str, ...] = ()

    def get(self, field_name: str) -> Any:
        return getattr(self, field_name, None)


@dataclass(frozen=True)
class SuspiciousValue:
    """A value that was present but failed a range or format check."""

    field: str
    value: Any
    reason: str
    severity: Severity
    suggestion: Optional[str] = None


@dataclass(frozen=True)
class ValidationReport:
    quality_tier: QualityTier
    quality_score: float
    confidence: float
    data_completeness: float
    missing_fields: tuple[str, ...] = ()
    suspicious_values: tuple[SuspiciousValue, ...] = ()
    warnings: tuple[str, ...] = ()
    recommended_actions: tuple[str, ...] = ()
    requires_manual_review: bool = False
    has_required_fields: bool = True
    has_numeric_data: bool = True

    @property
    def missing_critical_data(self) -> list[str]:
        return list(self.missing_fields)


@dataclass(frozen=True)
class ValidatedAssessmentData:
    """Cleaned answers plus parsed fields and the data-quality report.

    Built once per completed interview and never modified afterwards.
    """

    session_id: str
    company: str
    email: str
    business_type: str
    opportunity_focus: str
    revenue_model: str
    revenue_challenge: str
    team_process: str
    solution_stack: str
    investment_level: str
    additional_context: str
    parsed: ParsedAssessmentFields
    validation: ValidationReport
