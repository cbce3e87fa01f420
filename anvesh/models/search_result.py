"""
Search result data models - Value Object pattern.
Immutable data structures passed between engines, the aggregator and the frontend.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from .engine_models import EngineError, QueryType, TimeRelevancy


@dataclass(frozen=True)
class SearchResult:
    """
    Single result scraped from an upstream engine.

    Attributes:
        title: Result title
        url: Visiting URL (href)
        description: Snippet text shown under the title
        engines: Names of the engines that returned this result, first-seen order
    """
    title: str
    url: str
    description: str = ""
    engines: Tuple[str, ...] = ()

    def __post_init__(self):
        """Validate invariants"""
        if not self.url:
            raise ValueError("Search result url cannot be empty")

    def with_engines(self, *names: str) -> 'SearchResult':
        """Create a new instance with extra engine names (immutable update)"""
        merged = list(self.engines)
        for name in names:
            if name not in merged:
                merged.append(name)
        return replace(self, engines=tuple(merged))


@dataclass(frozen=True)
class EngineErrorInfo:
    """Engine failure summary shown next to the results"""
    engine: str
    error: str
    severity_level: int

    @classmethod
    def from_error(cls, error: EngineError) -> 'EngineErrorInfo':
        return cls(
            engine=error.engine,
            error=error.error_type.value,
            severity_level=error.severity_level
        )


@dataclass(frozen=True)
class SearchParams:
    """
    A user search request.

    Attributes:
        query: Search terms, stripped of surrounding whitespace
        page: 1-based page number
        engines: Optional engine names to restrict the search to
        query_type: Kind of results requested
        time_relevance: Optional time window
        safe_search: Level 0 (off) to 4 (strictest)
    """
    query: str
    page: int = 1
    engines: Optional[List[str]] = field(default=None, hash=False)
    query_type: QueryType = QueryType.TEXT
    time_relevance: Optional[TimeRelevancy] = None
    safe_search: int = 0

    def __post_init__(self):
        """Validate invariants"""
        query = (self.query or "").strip()
        if not query:
            raise ValueError("Search query cannot be empty")
        object.__setattr__(self, "query", query)

        if self.page < 1:
            raise ValueError(f"Page must be >= 1, got {self.page}")
        if not 0 <= self.safe_search <= 4:
            raise ValueError(f"Safe search level must be between 0 and 4, got {self.safe_search}")

        if self.engines is not None:
            object.__setattr__(
                self, "engines",
                [e.strip().lower() for e in self.engines if e and e.strip()]
            )

    def with_safe_search(self, level: int) -> 'SearchParams':
        return replace(self, safe_search=level)

    def cache_key(self) -> str:
        """Deterministic key, independent of the order engines were given in"""
        engines = ",".join(sorted(set(self.engines))) if self.engines is not None else "*"
        time_range = self.time_relevance.value if self.time_relevance else TimeRelevancy.ANYTIME.value
        return (
            f"search?q={self.query}&page={self.page}&engines={engines}"
            f"&type={int(self.query_type)}&time={time_range}&safesearch={self.safe_search}"
        )
