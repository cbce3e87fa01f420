"""
Anvesh Meta Search Package

This package queries several upstream search engines (DuckDuckGo, Brave,
searx) for one query and merges their answers into a single ranked list.

Architecture:
- Strategy Pattern for upstream engine implementations
- Factory Pattern for creating engines by name
- Facade Pattern for the search service
- Value Object Pattern for immutable data models
"""

from .models import (
    EngineError,
    EngineErrorType,
    QueryType,
    TimeRelevancy,
    SearchResult,
    EngineErrorInfo,
    SearchParams,
    Instance,
)
from .engines import SearchEngine, DuckDuckGo, Brave, Searx
from .repositories import EngineFactory, InstanceRepository
from .services import EngineHandler, EngineResponse, Ranker, SearchResults, SearchService
from .filters import ResultFilter
from .formatters import SearchResultsFormatter, InstanceFormatter

__version__ = "1.0.0"

__all__ = [
    # Models
    "EngineError",
    "EngineErrorType",
    "QueryType",
    "TimeRelevancy",
    "SearchResult",
    "EngineErrorInfo",
    "SearchParams",
    "Instance",
    # Engines
    "SearchEngine",
    "DuckDuckGo",
    "Brave",
    "Searx",
    # Factory / repositories
    "EngineFactory",
    "InstanceRepository",
    # Services
    "EngineHandler",
    "EngineResponse",
    "Ranker",
    "SearchResults",
    "SearchService",
    # Filters
    "ResultFilter",
    # Formatters
    "SearchResultsFormatter",
    "InstanceFormatter",
]
