"""Static curated solution catalog, used when vector search has nothing."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Optional

from revintel.models.enums import SolutionCategory
from revintel.models.research import SearchFilters, SolutionItem

from .base import RetrievalProvider

logger = logging.getLogger(__name__)

CURATED_RELEVANCE = 0.8

# Checked in order; first category with a keyword in the query wins.
CATEGORY_KEYWORDS: tuple[tuple[SolutionCategory, tuple[str, ...]], ...] = (
    (SolutionCategory.LEAD_QUALIFICATION, ("lead", "qualification", "scoring", "prospect")),
    (SolutionCategory.CONTENT_GENERATION, ("proposal", "content", "generation", "writing")),
    (SolutionCategory.WORKFLOW_AUTOMATION, ("workflow", "automation", "process", "integration")),
    (SolutionCategory.DATA_PROCESSING, ("data", "storage", "database", "backend")),
)


def _item(**kwargs) -> SolutionItem:
    return SolutionItem(relevance_score=CURATED_RELEVANCE, **kwargs)


CURATED_SOLUTIONS = MappingProxyType({
    SolutionCategory.LEAD_QUALIFICATION: (
        _item(
            id="gpt-4o-mini",
            name="GPT-4o-mini",
            description="Cost-effective language model optimized for high-volume lead qualification and scoring",
            pricing="$0.15/$0.60 per million tokens",
            integrations=["OpenAI API", "Zapier", "Make", "n8n"],
            category="Conversational Interface",
            best_for="Automated lead qualification at scale with cost efficiency",
            implementation_time="1-2 weeks",
        ),
        _item(
            id="clay-com",
            name="Clay.com",
            description="AI-native lead enrichment and research platform with 50+ data sources",
            pricing="Free tier available, $149/month for paid plans",
            integrations=["HubSpot", "Salesforce", "Apollo", "Outreach"],
            category="Context Orchestration",
            best_for="Comprehensive prospect research and lead enrichment",
            implementation_time="2-3 weeks",
        ),
    ),
    SolutionCategory.CONTENT_GENERATION: (
        _item(
            id="gpt-4o",
            name="GPT-4o",
            description="Premium language model for high-quality proposal and content generation",
            pricing="$5/$15 per million tokens",
            integrations=["OpenAI API", "LangChain", "Custom integrations"],
            category="Conversational Interface",
            best_for="Professional proposals and complex content creation",
            implementation_time="1-3 weeks",
        ),
        _item(
            id="claude-3-haiku",
            name="Claude-3-Haiku",
            description="Fast, affordable AI model with strong reasoning for proposal generation",
            pricing="$0.25/$1.25 per million tokens",
            integrations=["Anthropic API", "LangChain", "Custom workflows"],
            category="Conversational Interface",
            best_for="Complex proposals requiring nuanced understanding",
            implementation_time="1-2 weeks",
        ),
    ),
    SolutionCategory.WORKFLOW_AUTOMATION: (
        _item(
            id="n8n",
            name="n8n",
            description="Open-source workflow automation platform with 400+ integrations and AI support",
            pricing="Free self-hosted, $20/month cloud",
            integrations=["400+ pre-built nodes", "AI APIs", "Custom webhooks"],
            category="Function Execution",
            best_for="Custom automation workflows without vendor lock-in",
            implementation_time="2-4 weeks",
        ),
        _item(
            id="make-com",
            name="Make.com",
            description="Visual automation platform with advanced data transformation capabilities",
            pricing="Free tier available, $9/month for paid plans",
            integrations=["1000+ apps", "AI services", "Advanced data manipulation"],
            category="Function Execution",
            best_for="Complex automation scenarios with data transformation",
            implementation_time="1-3 weeks",
        ),
    ),
    SolutionCategory.DATA_PROCESSING: (
        _item(
            id="supabase",
            name="Supabase",
            description="Open-source backend platform with PostgreSQL and vector search capabilities",
            pricing="Free tier available, $25/month for paid plans",
            integrations=["PostgreSQL", "REST API", "Real-time subscriptions", "Vector extensions"],
            category="Knowledge Retrieval",
            best_for="Rapid backend development for AI applications with vector search",
            implementation_time="1-2 weeks",
        ),
        _item(
            id="pinecone",
            name="Pinecone",
            description="Managed vector database optimized for semantic search and RAG applications",
            pricing="Free tier available, $70/month for paid plans",
            integrations=["OpenAI", "LangChain", "LlamaIndex", "Python/JS SDKs"],
            category="Knowledge Retrieval",
            best_for="Production vector search and RAG systems",
            implementation_time="2-3 weeks",
        ),
    ),
    SolutionCategory.GENERIC: (
        _item(
            id="vercel",
            name="Vercel",
            description="Frontend cloud platform optimized for AI applications with streaming capabilities",
            pricing="Free tier available, $20/month for paid plans",
            integrations=["Next.js", "AI SDK", "OpenAI", "Anthropic", "GitHub"],
            category="Function Execution",
            best_for="Deploying AI-powered web applications with streaming responses",
            implementation_time="1-2 weeks",
        ),
    ),
})


def classify_query(query: str) -> SolutionCategory:
    lower = query.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(k in lower for k in keywords):
            return category
    return SolutionCategory.GENERIC


def curated_solutions(query: str, limit: Optional[int] = None) -> list[SolutionItem]:
    """Curated items for the query's category, never empty."""
    items = list(CURATED_SOLUTIONS[classify_query(query)])
    return items[:limit] if limit else items


class CuratedCatalogProvider(RetrievalProvider):
    """Keyword-classified lookup into a fixed catalog. No network access."""

    async def health_check(self) -> bool:
        return True

    async def search(
        self, query: str, filters: Optional[SearchFilters] = None
    ) -> list[SolutionItem]:
        category = classify_query(query)
        logger.info(f"Curated catalog lookup: category={category.value}")
        return curated_solutions(query, filters.limit if filters else None)
