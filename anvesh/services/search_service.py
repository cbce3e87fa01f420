"""
Search Service - Main business logic for a meta search.

Coordinates safe search, engine dispatch, aggregation, filtering and caching.
"""

import asyncio
import logging
import random
import time
from typing import Optional

from .. import config
from ..cache import DataCache
from ..filters import ResultFilter
from ..models import SearchParams
from .aggregator import Ranker, SearchResults
from .engine_handler import EngineHandler

logger = logging.getLogger(__name__)


class SearchService:
    """
    Main search service - orchestrates the search process.

    Design Pattern: Facade Pattern
    Provides a simple interface to complex subsystems (engines, ranker, filters, cache).
    """

    def __init__(self,
                 engine_handler: EngineHandler,
                 ranker: Optional[Ranker] = None,
                 cache: Optional[DataCache] = None,
                 result_filter: Optional[ResultFilter] = None,
                 safe_search: int = 2,
                 random_delay: bool = False):
        """
        Initialize search service.

        Args:
            engine_handler: Handler owning the active engines
            ranker: Result aggregator (default: unlimited Ranker)
            cache: Optional result cache; None disables caching
            result_filter: Optional blocklist/allowlist filter
            safe_search: Server safe search level; 3 and above override users
            random_delay: Sleep 1-10s before querying upstream
        """
        self.engine_handler = engine_handler
        self.ranker = ranker or Ranker()
        self.cache = cache
        self.result_filter = result_filter or ResultFilter()
        self.safe_search = safe_search
        self.random_delay = random_delay

    def effective_safe_search(self, requested: Optional[int]) -> int:
        """
        Resolve the safe search level for a request.

        The server level wins when it is 3 or higher; otherwise the user's
        level is used, falling back to the server level.
        """
        if self.safe_search >= 3 or requested is None:
            return self.safe_search
        return requested

    async def search(self, params: SearchParams, safe_search: Optional[int] = None) -> SearchResults:
        """
        Run a search, serving from cache when possible.

        Args:
            params: Validated search request
            safe_search: The user's requested level (None = no preference)

        Returns:
            SearchResults
        """
        params = params.with_safe_search(self.effective_safe_search(safe_search))

        if params.safe_search >= 4 and self.result_filter.is_query_disallowed(params.query):
            logger.info(f"Query disallowed by safe search: {params.query!r}")
            return SearchResults(disallowed=True)

        if not self.engine_handler.select_engines(params.engines, params.query_type):
            return SearchResults(no_engines_selected=True)

        cache_key = params.cache_key()
        if self.cache is not None:
            cached = await self.cache.get(cache_key)
            if cached:
                return cached.data

        results = await asyncio.to_thread(self.search_upstream, params)

        if self.cache is not None and results.results:
            await self.cache.set(cache_key, results)

        return results

    def search_upstream(self, params: SearchParams) -> SearchResults:
        """Query the engines and aggregate, bypassing the cache (blocking)"""
        if self.random_delay:
            delay = random.uniform(1, 10)
            logger.debug(f"Random delay of {delay:.1f}s before dispatch")
            time.sleep(delay)

        start = time.monotonic()
        responses = self.engine_handler.search(
            params.query,
            query_type=params.query_type,
            engine_names=params.engines,
            time_relevance=params.time_relevance,
            page=params.page,
            safe_search=params.safe_search
        )

        results = self.ranker.aggregate(responses)
        results.results, results.filtered_count = self.result_filter.apply(results.results)

        logger.info(
            f"Search {params.query!r} page {params.page}: {results.total()} results, "
            f"{len(results.engine_errors_info)} engine errors in {time.monotonic() - start:.2f}s"
        )
        return results

    def close(self):
        self.engine_handler.close()

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        self.close()


def initialize_search_service() -> SearchService:
    """
    Initialize the search service from configuration.

    Returns:
        Configured SearchService instance

    Raises:
        EngineError: If an upstream engine name is invalid
    """
    engine_config = config.EngineConfig
    cache = None
    if config.FeatureFlags.ENABLE_CACHING:
        cache = DataCache(
            ttl_seconds=config.CacheConfig.CACHE_TTL_SECONDS,
            max_entries=config.CacheConfig.CACHE_MAX_ENTRIES
        )

    handler = EngineHandler(
        engine_config.get_engine_list(),
        timeout=engine_config.REQUEST_TIMEOUT,
        user_agent=engine_config.USER_AGENT
    )

    return SearchService(
        engine_handler=handler,
        ranker=Ranker(max_results=engine_config.MAX_RESULTS),
        cache=cache,
        result_filter=ResultFilter.from_files(
            config.FilterConfig.BLOCKLIST_FILE,
            config.FilterConfig.ALLOWLIST_FILE
        ),
        safe_search=engine_config.SAFE_SEARCH,
        random_delay=engine_config.RANDOM_DELAY
    )
