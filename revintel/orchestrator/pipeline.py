"""Assessment pipeline -- from a finished interview to a rendered report.

Stages:
- Readiness gate: the context must be at the final tier and complete.
- Extraction and validation of the flattened answers.
- Solution retrieval and market research, issued concurrently, each bounded
  by ``Settings.collaborator_timeout_seconds``. Timeouts, errors and empty
  results switch to the curated catalog / templated research.
- Metric calculation, section rendering and document assembly.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from revintel.config.settings import Settings
from revintel.engine.calculator import MetricCalculator
from revintel.extraction.processor import DataProcessor
from revintel.models.assessment import ValidatedAssessmentData
from revintel.models.context import AssessmentContext, CompanyProfile
from revintel.models.enums import SearchType
from revintel.models.metrics import PreCalculatedMetrics
from revintel.models.research import ResearchResult, SearchFilters, SolutionItem, SolutionSearchResult
from revintel.persistence.store import ContextStore
from revintel.providers.base import ResearchProvider, RetrievalProvider
from revintel.providers.curated_catalog import curated_solutions
from revintel.providers.fallback_research import generic_research
from revintel.providers.research_provider import PerplexityResearchProvider, build_research_prompt
from revintel.providers.vector_search_provider import VectorSearchProvider
from revintel.state_machine.errors import PreconditionError
from revintel.state_machine.machine import AssessmentStateMachine
from revintel.state_machine.summary import build_raw_answers, generate_research_query
from revintel.synthesis.bundle import ReportBundle, ReportSection
from revintel.synthesis.report import render_report

logger = logging.getLogger(__name__)

FALLBACK_SOLUTIONS = "curated_solutions"
FALLBACK_RESEARCH = "generic_research"


@dataclass(frozen=True)
class AssessmentReport:
    session_id: str
    data: ValidatedAssessmentData
    metrics: PreCalculatedMetrics
    solutions: tuple[SolutionItem, ...]
    research: ResearchResult
    sections: tuple[ReportSection, ...]
    document: str
    search_type: SearchType = SearchType.VECTOR
    fallbacks_used: tuple[str, ...] = ()
    context_id: Optional[str] = None

    @property
    def requires_manual_review(self) -> bool:
        return self.data.validation.requires_manual_review


class AssessmentPipeline:
    """Coordinates extraction, collaborators, calculation and synthesis."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        machine: Optional[AssessmentStateMachine] = None,
        retrieval: Optional[RetrievalProvider] = None,
        research: Optional[ResearchProvider] = None,
        store: Optional[ContextStore] = None,
    ):
        self._settings = settings or Settings()
        self._machine = machine or AssessmentStateMachine()
        self._retrieval = retrieval or VectorSearchProvider(settings=self._settings)
        self._research = research or PerplexityResearchProvider(settings=self._settings)
        self._store = store
        self._processor = DataProcessor()
        self._calculator = MetricCalculator()

    async def run(
        self,
        context: AssessmentContext,
        profile: CompanyProfile,
        session_id: Optional[str] = None,
    ) -> AssessmentReport:
        if not self._machine.is_ready_for_report(context):
            raise PreconditionError(
                "Assessment is not complete - cannot build a report",
                tier=context.current_tier,
            )

        raw = build_raw_answers(context, profile, self._machine, session_id=session_id)
        data = self._processor.validate_and_enhance(raw)
        logger.info(f"Extraction complete for session {data.session_id or 'n/a'}")

        query = generate_research_query(context, self._machine)
        filters = SearchFilters(
            category=context.selected_icp_id,
            challenge=context.selected_challenge_area_id,
            budget=profile.investment_level or None,
            limit=self._settings.search_limit,
        )

        search, research = await asyncio.gather(
            self._find_solutions(query, filters),
            self._find_research(data, query),
        )

        fallbacks: list[str] = []
        if search.search_type == SearchType.FALLBACK:
            fallbacks.append(FALLBACK_SOLUTIONS)
        if research.is_fallback:
            fallbacks.append(FALLBACK_RESEARCH)

        metrics = self._calculator.calculate(data, search.items)

        bundle = ReportBundle(
            data=data,
            metrics=metrics,
            solutions=tuple(search.items),
            research=research,
            search_type=search.search_type,
        )
        sections, document = render_report(bundle)
        logger.info(
            f"Report assembled: {len(sections)} sections, "
            f"fallbacks={fallbacks or 'none'}"
        )

        context_id = await asyncio.to_thread(self._store.save, context) if self._store else None

        return AssessmentReport(
            session_id=data.session_id,
            data=data,
            metrics=metrics,
            solutions=tuple(search.items),
            research=research,
            sections=tuple(sections),
            document=document,
            search_type=search.search_type,
            fallbacks_used=tuple(fallbacks),
            context_id=context_id,
        )

    async def _find_solutions(self, query: str, filters: SearchFilters) -> SolutionSearchResult:
        timeout = self._settings.collaborator_timeout_seconds
        items: list[SolutionItem] = []
        try:
            items = await asyncio.wait_for(self._retrieval.search(query, filters), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Solution search timed out after {timeout}s")
        except Exception as e:
            logger.error(f"Solution search failed: {e}")

        if items:
            result = SolutionSearchResult(query=query, items=list(items))
            logger.info(
                f"Retrieved {result.total_found} solutions, "
                f"avg relevance {result.avg_relevance:.2f}"
            )
            return result

        logger.warning("No solutions retrieved, using curated catalog")
        return SolutionSearchResult(
            query=query,
            items=curated_solutions(query, filters.limit),
            search_type=SearchType.FALLBACK,
        )

    async def _find_research(self, data: ValidatedAssessmentData, query: str) -> ResearchResult:
        timeout = self._settings.collaborator_timeout_seconds
        result: Optional[ResearchResult] = None
        try:
            prompt = build_research_prompt(data, query)
            result = await asyncio.wait_for(self._research.research(prompt), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Market research timed out after {timeout}s")
        except Exception as e:
            logger.error(f"Market research failed: {e}")

        if result is not None and result.narrative_text:
            return result

        logger.warning("No market research available, using generic narrative")
        return generic_research(data.business_type)
