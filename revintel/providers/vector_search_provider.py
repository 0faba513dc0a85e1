"""Vector search provider -- semantic tool retrieval.

Embeds the query with the OpenAI embeddings endpoint, then calls the
``vector_search_minimal`` Postgres function through Supabase's REST RPC
interface. Tool records keep their details in a free-text
``description_full`` column, parsed here into SolutionItem fields.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

import httpx

from revintel.config.settings import Settings
from revintel.models.research import SearchFilters, SolutionItem

from .base import RetrievalProvider

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "Information not available"
DEFAULT_IMPLEMENTATION_TIME = "1-2 weeks"

_DURATION = r"(\d+[\-\s]*(?:to|-)?\s*\d*\s*(?:days?|weeks?|months?))"
_IMPLEMENTATION_PATTERNS = (
    re.compile(r"Implementation.*?" + _DURATION, re.IGNORECASE),
    re.compile(_DURATION + r".*?implementation", re.IGNORECASE),
    re.compile(r"Timeline.*?" + _DURATION, re.IGNORECASE),
)


def extract_section(text: str, section: str) -> str:
    """Value following ``<section>:`` in a rich-text description."""
    name = re.escape(section)
    patterns = (
        re.compile(name + r":?\s*([^\n]+)", re.IGNORECASE),
        re.compile(name + r"[:\s]+(.+?)(?=\n[A-Z][a-z]+:|$)", re.IGNORECASE | re.DOTALL),
        re.compile(name + r"[:\-\s]+([^\n.]+)", re.IGNORECASE),
    )
    for pattern in patterns:
        match = pattern.search(text or "")
        if match and match.group(1).strip():
            return match.group(1).strip()
    return NOT_AVAILABLE


def extract_implementation_time(text: str) -> str:
    for pattern in _IMPLEMENTATION_PATTERNS:
        match = pattern.search(text or "")
        if match:
            return match.group(1).strip()
    return DEFAULT_IMPLEMENTATION_TIME


def parse_tool_record(record: dict[str, Any]) -> SolutionItem:
    """Map one RPC row onto a SolutionItem."""
    text = record.get("description_full") or ""
    integrations = extract_section(text, "Integrations")
    layer = extract_section(text, "Layer")
    similarity = float(record.get("similarity") or 0.0)

    return SolutionItem(
        id=str(record.get("id") or ""),
        name=record.get("name") or "Unnamed tool",
        description=extract_section(text, "Description"),
        pricing=extract_section(text, "Pricing"),
        integrations=(
            [] if integrations == NOT_AVAILABLE
            else [i.strip() for i in integrations.split(",") if i.strip()]
        ),
        category="" if layer == NOT_AVAILABLE else layer,
        best_for=extract_section(text, "Best For"),
        implementation_time=extract_implementation_time(text),
        relevance_score=max(0.0, min(1.0, similarity)),
    )


class VectorSearchProvider(RetrievalProvider):
    """Semantic search over the tool catalog via embeddings + Supabase RPC."""

    EMBEDDINGS_URL = "https://api.openai.com/v1/embeddings"
    RPC_FUNCTION = "vector_search_minimal"

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or Settings()
        self._client = httpx.AsyncClient(timeout=30.0)

    @property
    def is_configured(self) -> bool:
        s = self._settings
        return bool(s.supabase_url and s.supabase_key and s.openai_api_key)

    async def health_check(self) -> bool:
        if not self.is_configured:
            return False
        try:
            embedding = await self._embed("automation tools")
            if embedding is None:
                return False
            rows = await self._rpc(embedding, threshold=0.5, count=1)
            return rows is not None
        except Exception as e:
            logger.error(f"Vector search health check failed: {e}")
            return False

    async def search(
        self, query: str, filters: Optional[SearchFilters] = None
    ) -> list[SolutionItem]:
        if not self.is_configured:
            logger.warning("Vector search not configured, returning no results")
            return []

        filters = filters or SearchFilters(limit=self._settings.search_limit)
        try:
            embedding = await self._embed(query)
            if embedding is None:
                return []

            rows = await self._rpc(
                embedding,
                threshold=self._settings.vector_match_threshold,
                count=filters.limit,
                filters=filters,
            )
            if not rows:
                logger.warning(f"Vector search returned no matches for '{query[:80]}'")
                return []

            logger.info(f"Vector search found {len(rows)} tools")
            return [parse_tool_record(r) for r in rows]

        except Exception as e:
            logger.error(f"Vector search failed: {e}")
            return []

    async def _embed(self, text: str) -> Optional[list[float]]:
        resp = await self._client.post(
            self.EMBEDDINGS_URL,
            headers={"Authorization": f"Bearer {self._settings.openai_api_key}"},
            json={"model": self._settings.embedding_model, "input": text},
        )
        if resp.status_code != 200:
            logger.error(f"Embedding request failed with status {resp.status_code}")
            return None
        data = resp.json()
        return data["data"][0]["embedding"]

    async def _rpc(
        self,
        embedding: list[float],
        threshold: float,
        count: int,
        filters: Optional[SearchFilters] = None,
    ) -> Optional[list[dict[str, Any]]]:
        url = f"{self._settings.supabase_url.rstrip('/')}/rest/v1/rpc/{self.RPC_FUNCTION}"
        key = self._settings.supabase_key
        resp = await self._client.post(
            url,
            headers={"apikey": key, "Authorization": f"Bearer {key}"},
            json={
                "query_embedding": embedding,
                "match_threshold": threshold,
                "match_count": count,
                "icp_filter": filters.category if filters else None,
                "challenge_filter": filters.challenge if filters else None,
                "budget_filter": filters.budget if filters else None,
            },
        )
        if resp.status_code != 200:
            logger.error(f"Vector search RPC failed with status {resp.status_code}")
            return None
        return resp.json() or []
