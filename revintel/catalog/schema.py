"""Pydantic models for the interview option catalog."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class QuantificationPrompts(BaseModel):
    baseline: str = Field(min_length=1)
    friction: str = Field(min_length=1)


class MetricDefinition(BaseModel):
    """A measurable outcome the prospect wants to move."""

    id: str
    label: str
    description: str = ""
    quantification_prompts: QuantificationPrompts
    example_values: list[str] = Field(default_factory=list)


class ChallengeArea(BaseModel):
    id: str
    label: str
    description: str = ""
    metrics: list[MetricDefinition] = Field(min_length=1)

    @model_validator(mode="after")
    def metric_ids_unique(self) -> ChallengeArea:
        ids = [m.id for m in self.metrics]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate metric ids in challenge area '{self.id}'")
        return self

    def get_metric(self, metric_id: str) -> Optional[MetricDefinition]:
        for metric in self.metrics:
            if metric.id == metric_id:
                return metric
        return None


class OpportunityArea(BaseModel):
    id: str
    label: str
    description: str = ""
    common_projects: list[str] = Field(default_factory=list)
    revenue_model_suggestions: list[str] = Field(min_length=1)
    # None means every challenge area applies
    relevant_challenge_areas: Optional[list[str]] = None


class ICPDefinition(BaseModel):
    """An ideal-customer-profile category offered at the first tier."""

    id: str
    label: str
    description: str = ""
    opportunity_areas: list[OpportunityArea] = Field(min_length=1)

    def get_opportunity_area(self, area_id: str) -> Optional[OpportunityArea]:
        for area in self.opportunity_areas:
            if area.id == area_id:
                return area
        return None


class ICPCatalogFile(BaseModel):
    version: str
    default_challenge_area_ids: list[str] = Field(min_length=1)
    icps: list[ICPDefinition] = Field(min_length=1)


class ChallengeCatalogFile(BaseModel):
    version: str
    challenge_areas: list[ChallengeArea] = Field(min_length=1)


class InterviewCatalog(BaseModel):
    """Every option set the state machine can offer, cross-checked on load."""

    icps: list[ICPDefinition] = Field(min_length=1)
    challenge_areas: list[ChallengeArea] = Field(min_length=1)
    default_challenge_area_ids: list[str] = Field(min_length=1)

    @field_validator("icps")
    @classmethod
    def icp_ids_unique(cls, v: list[ICPDefinition]) -> list[ICPDefinition]:
        ids = [icp.id for icp in v]
        if len(ids) != len(set(ids)):
            raise ValueError("ICP ids must be unique")
        return v

    @model_validator(mode="after")
    def challenge_references_resolve(self) -> InterviewCatalog:
        known = {area.id for area in self.challenge_areas}
        for area_id in self.default_challenge_area_ids:
            if area_id not in known:
                raise ValueError(f"Unknown default challenge area '{area_id}'")
        for icp in self.icps:
            for area in icp.opportunity_areas:
                for ref in area.relevant_challenge_areas or []:
                    if ref not in known:
                        raise ValueError(
                            f"Opportunity area '{area.id}' references unknown "
                            f"challenge area '{ref}'"
                        )
        return self

    def get_icp(self, icp_id: Optional[str]) -> Optional[ICPDefinition]:
        for icp in self.icps:
            if icp.id == icp_id:
                return icp
        return None

    def get_challenge_area(self, area_id: Optional[str]) -> Optional[ChallengeArea]:
        for area in self.challenge_areas:
            if area.id == area_id:
                return area
        return None

    def challenge_areas_for(self, opportunity_area: OpportunityArea) -> list[ChallengeArea]:
        """Challenge areas relevant to an opportunity area, in catalog order."""
        ids = opportunity_area.relevant_challenge_areas or self.default_challenge_area_ids
        return [area for area in self.challenge_areas if area.id in ids]
