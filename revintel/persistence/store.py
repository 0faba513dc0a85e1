"""Session storage for interview contexts."""

from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from revintel.config.settings import Settings
from revintel.models.context import AssessmentContext

logger = logging.getLogger(__name__)


class ContextStore(ABC):
    """Abstract base for context persistence.

    ``save`` returns the id the context is stored under: its session_id if
    set, otherwise a freshly generated one. ``load`` raises KeyError for an
    unknown id.
    """

    @abstractmethod
    def save(self, context: AssessmentContext) -> str:
        ...

    @abstractmethod
    def load(self, context_id: str) -> AssessmentContext:
        ...

    @staticmethod
    def _id_for(context: AssessmentContext) -> str:
        return context.session_id or uuid.uuid4().hex


class InMemoryContextStore(ContextStore):
    def __init__(self):
        self._contexts: dict[str, str] = {}

    def save(self, context: AssessmentContext) -> str:
        context_id = self._id_for(context)
        # Stored as JSON so loads behave exactly like the file store
        self._contexts[context_id] = context.model_dump_json()
        return context_id

    def load(self, context_id: str) -> AssessmentContext:
        if context_id not in self._contexts:
            raise KeyError(context_id)
        return AssessmentContext.model_validate_json(self._contexts[context_id])


class JsonFileContextStore(ContextStore):
    """One ``<id>.json`` file per session under a base directory."""

    def __init__(self, base_dir: Optional[Path] = None, settings: Optional[Settings] = None):
        if base_dir is None:
            base_dir = Path((settings or Settings()).store_dir)
        self._base_dir = Path(base_dir)

    def _path(self, context_id: str) -> Path:
        if not context_id or Path(context_id).name != context_id:
            raise KeyError(context_id)
        return self._base_dir / f"{context_id}.json"

    def save(self, context: AssessmentContext) -> str:
        context_id = self._id_for(context)
        path = self._path(context_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(context.model_dump_json(indent=2), encoding="utf-8")
        logger.debug(f"Saved context {context_id} at tier {context.current_tier.value:g}")
        return context_id

    def load(self, context_id: str) -> AssessmentContext:
        path = self._path(context_id)
        if not path.exists():
            raise KeyError(context_id)
        return AssessmentContext.model_validate_json(path.read_text(encoding="utf-8"))
