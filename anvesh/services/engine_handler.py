"""
Engine Handler - dispatches a query to every selected upstream engine.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..engines import SearchEngine
from ..engines.base_engine import DEFAULT_TIMEOUT
from ..models import EngineError, EngineErrorType, QueryType, SearchResult, TimeRelevancy
from ..repositories import EngineFactory

logger = logging.getLogger(__name__)


def build_session(retries: int = 2) -> requests.Session:
    """HTTP session shared by all engines, retrying transient upstream failures"""
    session = requests.Session()
    retry = Retry(
        total=retries,
        backoff_factor=0.3,
        status_forcelist=(502, 503, 504),
        allowed_methods=("GET",)
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


@dataclass
class EngineResponse:
    """Outcome of one engine for one query: results or an error"""
    engine: str
    results: Dict[str, SearchResult] = field(default_factory=dict)
    error: Optional[EngineError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class EngineHandler:
    """
    Handler for all upstream engines.

    Owns one HTTP session shared by every engine, and runs the selected
    engines concurrently on a thread pool.
    """

    def __init__(self,
                 engine_names: List[str],
                 client: Optional[requests.Session] = None,
                 timeout: int = DEFAULT_TIMEOUT,
                 user_agent: Optional[str] = None,
                 max_workers: Optional[int] = None):
        """
        Initialize the engines by name.

        Args:
            engine_names: Names of the engines to activate
            client: Optional pre-configured HTTP session
            timeout: Per-request timeout in seconds
            user_agent: User-Agent header for the shared session
            max_workers: Thread pool size (default: one per engine)

        Raises:
            EngineError: NO_SUCH_ENGINE_FOUND if any name is invalid
        """
        self._engines: List[SearchEngine] = []
        for name in engine_names:
            self._engines.append(EngineFactory.create_engine(name, timeout=timeout))

        self._client = client or build_session()
        if user_agent:
            self._client.headers["User-Agent"] = user_agent

        self._max_workers = max_workers
        logger.info(f"Initialized engines: {', '.join(self.engine_names) or '(none)'}")

    @property
    def engine_names(self) -> List[str]:
        return [engine.name for engine in self._engines]

    def select_engines(self,
                       engine_names: Optional[List[str]] = None,
                       query_type: QueryType = QueryType.TEXT) -> List[SearchEngine]:
        """
        Get the active engines to query, in registration order.

        Args:
            engine_names: Optional names to restrict to; None means all active engines
            query_type: Only engines supporting this type are returned
        """
        selected = []
        wanted = None
        if engine_names is not None:
            wanted = {name.lower() for name in engine_names}
            unknown = wanted - set(self.engine_names)
            if unknown:
                logger.warning(f"Ignoring inactive or unknown engines: {', '.join(sorted(unknown))}")

        for engine in self._engines:
            if wanted is not None and engine.name not in wanted:
                continue
            if not engine.supports(query_type):
                logger.debug(f"Skipping {engine.name}: no {query_type!r} support")
                continue
            selected.append(engine)

        return selected

    def search(self,
               query: str,
               query_type: QueryType = QueryType.TEXT,
               engine_names: Optional[List[str]] = None,
               time_relevance: Optional[TimeRelevancy] = None,
               page: int = 1,
               safe_search: int = 0) -> List[EngineResponse]:
        """
        Search the query in each selected upstream engine.

        Args:
            query: The string to search
            query_type: The type of results to search for
            engine_names: Engines to use; None searches all active engines
            time_relevance: Optional time window
            page: 1-based page number
            safe_search: Level 0-4

        Returns:
            One EngineResponse per queried engine, in registration order
        """
        engines = self.select_engines(engine_names, query_type)
        if not engines:
            return []

        workers = self._max_workers or len(engines)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="engine") as executor:
            futures = [
                (engine, executor.submit(
                    engine.fetch_results,
                    query, query_type, time_relevance, page, self._client, safe_search
                ))
                for engine in engines
            ]

            responses = []
            for engine, future in futures:
                try:
                    responses.append(EngineResponse(engine.name, results=future.result()))
                except EngineError as e:
                    logger.info(f"{engine.name}: {e}")
                    responses.append(EngineResponse(engine.name, error=e))
                except Exception as e:
                    logger.error(f"Unexpected failure in {engine.name}: {e}", exc_info=True)
                    responses.append(EngineResponse(
                        engine.name,
                        error=EngineError(EngineErrorType.UNEXPECTED_ERROR, engine.name)
                    ))

        return responses

    def close(self):
        """Close the shared HTTP session"""
        self._client.close()

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensure cleanup"""
        self.close()
