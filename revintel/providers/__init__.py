from .base import ResearchProvider, RetrievalProvider
from .curated_catalog import CuratedCatalogProvider
from .research_provider import PerplexityResearchProvider
from .vector_search_provider import VectorSearchProvider

__all__ = [
    "RetrievalProvider",
    "ResearchProvider",
    "CuratedCatalogProvider",
    "PerplexityResearchProvider",
    "VectorSearchProvider",
]
