"""Research provider -- market narrative from the Perplexity chat API."""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

import httpx

from revintel.config.settings import Settings
from revintel.models.assessment import ValidatedAssessmentData
from revintel.models.enums import ImpactLevel
from revintel.models.research import CaseStudy, MarketTrend, ResearchResult

from .base import ResearchProvider

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a comprehensive business research analyst specializing in AI "
    "transformation for B2B service providers. Research thoroughly and provide "
    "specific, actionable insights with real examples and concrete recommendations."
)

MAX_TRENDS = 5
MAX_CASE_STUDIES = 3

# Ordered; first matching keyword set decides the impact.
IMPACT_KEYWORDS: tuple[tuple[ImpactLevel, tuple[str, ...]], ...] = (
    (ImpactLevel.HIGH, ("significant", "rapid", "major", "critical", "transform", "doubl", "3x")),
    (ImpactLevel.LOW, ("emerging", "early", "slight", "niche", "modest")),
)

TREND_KEYWORDS = ("trend", "adoption", "growth", "growing", "shift", "increas", "market", "ai ")

PAIN_INDICATORS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("manual",), "manual processes"),
    (("slow", "takes time"), "slow processes"),
    (("complex", "complicated"), "process complexity"),
    (("bottleneck", "stuck"), "process bottlenecks"),
    (("inefficient", "waste"), "inefficiencies"),
    (("repetitive", "repeat"), "repetitive tasks"),
    (("error", "mistake"), "error-prone processes"),
)

_BULLET = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+(.+)$", re.MULTILINE)
_MARKDOWN = re.compile(r"[*_`#]+")
_CASE_STUDY = re.compile(
    r"([A-Z][\w&.\-]*(?:[ \t]+[A-Z][\w&.\-]*){0,3})[ \t]+"
    r"(achieved|saw|reduced|increased|improved|cut|grew|boosted)\s+([^.\n]+)"
)
_NOT_COMPANIES = {"the", "this", "that", "ai", "companies", "firms", "teams", "it"}
_TIME_SPAN = re.compile(r"(\d+)\s*(hours?|days?|weeks?|months?)")


def find_pain_indicators(text: str) -> list[str]:
    lower = text.lower()
    found = [label for keywords, label in PAIN_INDICATORS if any(k in lower for k in keywords)]
    span = _TIME_SPAN.search(lower)
    if span:
        found.append(f"time-consuming ({span.group(0)})")
    return found[:5]


def build_research_prompt(data: ValidatedAssessmentData, focus: str) -> str:
    """Structured research request carrying the full assessment context."""
    parsed = data.parsed
    team = ", ".join(parsed.team_members) or "not specified"
    pains = ", ".join(find_pain_indicators(f"{data.additional_context} {data.team_process}"))
    return "\n".join([
        "## CONTEXT",
        f"Company: {data.company}",
        f"Business Type: {data.business_type} -> {data.opportunity_focus}",
        f"Revenue Model: {data.revenue_model}",
        f"Primary Challenge: {data.revenue_challenge}",
        f"Process: {data.team_process}",
        f"Tech Stack: {data.solution_stack or 'not specified'}",
        f"Investment Level: {data.investment_level}",
        f"Team Members: {team} ({len(parsed.team_members)} people)",
        f"Pain Indicators: {pains or 'none stated'}",
        f"Location: {parsed.location or 'not specified'}",
        "",
        "## FOCUS",
        focus,
        "",
        "## RESEARCH DIRECTIVE",
        f"1. Industry benchmarks for {data.business_type} firms on this challenge, with sources.",
        "2. Current market trends in AI adoption for this segment, one per bullet.",
        "3. Real case studies: company, challenge, solution, measurable result.",
        f"4. Build vs. buy options that fit a {data.investment_level or 'moderate'} budget.",
        "Prioritize recent data and real implementation examples.",
    ])


def _impact_for(text: str) -> ImpactLevel:
    lower = text.lower()
    for level, keywords in IMPACT_KEYWORDS:
        if any(k in lower for k in keywords):
            return level
    return ImpactLevel.MEDIUM


def parse_trends(content: str) -> list[MarketTrend]:
    """Bullet lines that read like market trends, with a keyword-based impact."""
    trends: list[MarketTrend] = []
    for match in _BULLET.finditer(content):
        line = _MARKDOWN.sub("", match.group(1)).strip()
        if not line or not any(k in line.lower() for k in TREND_KEYWORDS):
            continue
        trends.append(MarketTrend(trend=line, impact=_impact_for(line)))
        if len(trends) >= MAX_TRENDS:
            break
    return trends


def parse_case_studies(content: str) -> list[CaseStudy]:
    """Sentences of the form "<Company> achieved/reduced/... <result>"."""
    studies: list[CaseStudy] = []
    seen: set[str] = set()
    for match in _CASE_STUDY.finditer(_MARKDOWN.sub("", content)):
        company = match.group(1).strip()
        if company in seen or company.lower() in _NOT_COMPANIES:
            continue
        seen.add(company)
        result = f"{match.group(2)} {match.group(3).strip()}"
        studies.append(CaseStudy(
            company=company,
            result=result,
            # Quantified results are more trustworthy
            confidence=0.6 if re.search(r"\d", result) else 0.4,
        ))
        if len(studies) >= MAX_CASE_STUDIES:
            break
    return studies


def parse_response(data: dict[str, Any]) -> Optional[ResearchResult]:
    choices = data.get("choices") or []
    if not choices:
        return None
    content = (choices[0].get("message") or {}).get("content") or ""
    if not content.strip():
        return None
    return ResearchResult(
        narrative_text=content.strip(),
        citations=[str(c) for c in data.get("citations") or []],
        trends=parse_trends(content),
        case_studies=parse_case_studies(content),
    )


class PerplexityResearchProvider(ResearchProvider):
    """Market research via Perplexity chat completions with citations."""

    API_URL = "https://api.perplexity.ai/chat/completions"

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or Settings()
        self._client = httpx.AsyncClient(timeout=30.0)

    async def health_check(self) -> bool:
        if not self._settings.perplexity_api_key:
            return False
        try:
            resp = await self._post([{"role": "user", "content": "ping"}], max_tokens=1)
            return resp.status_code == 200
        except Exception as e:
            logger.error(f"Perplexity health check failed: {e}")
            return False

    async def research(self, query: str) -> Optional[ResearchResult]:
        if not self._settings.perplexity_api_key:
            logger.warning("Perplexity API key not configured, skipping research")
            return None

        try:
            resp = await self._post([
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": query},
            ])
            if resp.status_code != 200:
                logger.error(f"Perplexity research failed with status {resp.status_code}")
                return None

            result = parse_response(resp.json())
            if result is None:
                logger.warning("Perplexity returned an empty research response")
                return None

            logger.info(
                f"Research complete: {len(result.citations)} citations, "
                f"{len(result.trends)} trends, {len(result.case_studies)} case studies"
            )
            return result

        except Exception as e:
            logger.error(f"Perplexity research failed: {e}")
            return None

    async def _post(self, messages: list[dict[str, str]], max_tokens: int = 4000) -> httpx.Response:
        return await self._client.post(
            self.API_URL,
            headers={
                "Authorization": f"Bearer {self._settings.perplexity_api_key}",
                "Content-Type": "application/json",
            },
            json={
                "model": self._settings.research_model,
                "messages": messages,
                "temperature": 0.2,
                "max_tokens": max_tokens,
                "return_citations": True,
                "search_recency_filter": "month",
            },
        )
