"""Data returned by the retrieval and research collaborators."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from .enums import ImpactLevel, SearchType


class SearchFilters(BaseModel):
    category: Optional[str] = None
    challenge: Optional[str] = None
    budget: Optional[str] = None
    limit: int = Field(default=10, ge=1)


class SolutionItem(BaseModel):
    """A candidate tool or platform for the prospect's workflow."""

    id: str = ""
    name: str
    description: str = ""
    pricing: str = ""
    integrations: list[str] = Field(default_factory=list)
    category: str = ""
    best_for: str = ""
    implementation_time: str = "1-2 weeks"
    relevance_score: float = Field(default=0.0, ge=0.0, le=1.0)


class SolutionSearchResult(BaseModel):
    query: str
    items: list[SolutionItem] = Field(default_factory=list)
    search_type: SearchType = SearchType.VECTOR

    @property
    def total_found(self) -> int:
        return len(self.items)

    @property
    def avg_relevance(self) -> float:
        if not self.items:
            return 0.0
        return sum(i.relevance_score for i in self.items) / len(self.items)


class MarketTrend(BaseModel):
    trend: str
    impact: ImpactLevel = ImpactLevel.MEDIUM


class CaseStudy(BaseModel):
    company: str
    challenge: str = ""
    solution: str = ""
    result: str = ""
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)


class ResearchResult(BaseModel):
    """Market narrative for the prospect's industry."""

    narrative_text: str = ""
    citations: list[str] = Field(default_factory=list)
    trends: list[MarketTrend] = Field(default_factory=list)
    case_studies: list[CaseStudy] = Field(default_factory=list)
    is_fallback: bool = False
