from .store import ContextStore, InMemoryContextStore, JsonFileContextStore

__all__ = ["ContextStore", "InMemoryContextStore", "JsonFileContextStore"]
