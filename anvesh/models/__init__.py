"""
Data models and value objects.
Following Domain-Driven Design patterns for immutable data structures.
"""

from .engine_models import EngineError, EngineErrorType, QueryType, TimeRelevancy
from .search_result import SearchResult, EngineErrorInfo, SearchParams
from .instance import Instance

__all__ = [
    'EngineError',
    'EngineErrorType',
    'QueryType',
    'TimeRelevancy',
    'SearchResult',
    'EngineErrorInfo',
    'SearchParams',
    'Instance',
]
