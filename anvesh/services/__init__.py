"""
Services - search orchestration.
"""

from .engine_handler import EngineHandler, EngineResponse
from .aggregator import Ranker, SearchResults
from .search_service import SearchService, initialize_search_service

__all__ = [
    'EngineHandler',
    'EngineResponse',
    'Ranker',
    'SearchResults',
    'SearchService',
    'initialize_search_service',
]
