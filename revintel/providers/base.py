from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from revintel.models.research import ResearchResult, SearchFilters, SolutionItem


class RetrievalProvider(ABC):
    """Abstract base for solution/tool search collaborators."""

    @abstractmethod
    async def search(
        self, query: str, filters: Optional[SearchFilters] = None
    ) -> list[SolutionItem]:
        """Return matching solution items, possibly empty. Never raises."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Verify the backing service is reachable and authenticated."""
        ...


class ResearchProvider(ABC):
    """Abstract base for market-research collaborators."""

    @abstractmethod
    async def research(self, query: str) -> Optional[ResearchResult]:
        """Return a research narrative, or None when nothing usable came back."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        ...
