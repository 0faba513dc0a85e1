"""Interview state threaded through the assessment state machine."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import ProcessPath, Tier


class ProcessStep(BaseModel):
    """One step of the prospect's current revenue workflow."""

    model_config = ConfigDict(frozen=True)

    sequence: int = Field(default=0, ge=0)
    role: str
    action: str
    tools: tuple[str, ...] = ()
    output: str
    time_invested: Optional[str] = None

    @field_validator("role", "action", "output")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Process step fields must not be blank")
        return v.strip()

    def as_sentence(self) -> str:
        tools = f" using {', '.join(self.tools)}" if self.tools else ""
        return f"{self.role} {self.action}{tools} to produce {self.output}."


class AssessmentContext(BaseModel):
    """Accumulated interview answers.

    Selections are stored as catalog ids so the context stays plain JSON.
    Only the state machine creates new versions; every transition returns
    a copy and never mutates the instance it was given.
    """

    model_config = ConfigDict(frozen=True)

    session_id: Optional[str] = None

    # Tiers 1 - 3.5
    selected_icp_id: Optional[str] = None
    selected_opportunity_area_id: Optional[str] = None
    selected_revenue_model: Optional[str] = None
    custom_revenue_model: Optional[str] = None
    selected_challenge_area_id: Optional[str] = None
    selected_metric_id: Optional[str] = None

    # Tier 4
    current_baseline: Optional[str] = None
    main_friction: Optional[str] = None

    # Tiers 5 - 6
    process_steps: tuple[ProcessStep, ...] = ()
    process_breakdown_point: Optional[str] = None
    process_description: Optional[str] = None
    process_validated: bool = False
    process_refinements: Optional[str] = None
    process_path: Optional[ProcessPath] = None

    current_tier: Tier = Tier.CATEGORY
    progress_percentage: int = Field(default=0, ge=0, le=100)

    @property
    def revenue_model_label(self) -> Optional[str]:
        """The revenue model as the prospect described it."""
        if self.custom_revenue_model:
            return self.custom_revenue_model
        return self.selected_revenue_model


class CompanyProfile(BaseModel):
    """Contact and company details collected alongside the interview."""

    company: str = ""
    email: str = ""
    solution_stack: str = ""
    investment_level: str = ""
    additional_context: str = ""
