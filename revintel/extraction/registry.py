from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

# Global registry -- maps field name -> matchers, sorted by priority
_REGISTRY: dict[str, list[MatcherDefinition]] = {}


@dataclass(frozen=True)
class MatcherDefinition:
    """A single extraction heuristic for one parsed field."""

    field: str
    name: str
    priority: int
    matcher_fn: Callable[[str], Optional[Any]]
    description: str = ""


def register_matcher(
    field: str,
    name: str,
    priority: int,
    description: str = "",
) -> Callable:
    """Decorator to register a matcher function for a parsed field.

    Lower priority values run first. A matcher returns None when it does
    not apply to the text.
    """

    def decorator(fn: Callable[[str], Optional[Any]]) -> Callable[[str], Optional[Any]]:
        definition = MatcherDefinition(
            field=field,
            name=name,
            priority=priority,
            matcher_fn=fn,
            description=description,
        )
        matchers = [m for m in _REGISTRY.get(field, []) if m.name != name]
        matchers.append(definition)
        matchers.sort(key=lambda m: m.priority)
        _REGISTRY[field] = matchers
        return fn

    return decorator


def get_matchers(field: str) -> list[MatcherDefinition]:
    """Matchers for a field in evaluation order."""
    return list(_REGISTRY.get(field, []))


def get_all_matchers() -> dict[str, list[MatcherDefinition]]:
    """Return the full registry (read-only copy)."""
    return {field: list(matchers) for field, matchers in _REGISTRY.items()}


def first_match(field: str, text: str) -> tuple[Optional[Any], Optional[str]]:
    """Run matchers in order; return (value, matcher name) of the first hit."""
    for matcher in _REGISTRY.get(field, []):
        value = matcher.matcher_fn(text)
        if value is not None:
            return value, matcher.name
    return None, None
