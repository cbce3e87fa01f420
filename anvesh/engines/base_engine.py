"""
Base search engine - Abstract base class using Strategy Pattern.
Defines the interface that all upstream engines must implement.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

import requests
from bs4 import BeautifulSoup

from ..models import EngineError, EngineErrorType, QueryType, SearchResult, TimeRelevancy

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class SearchEngine(ABC):
    """
    Abstract base class for upstream search engines.

    Design Pattern: Strategy Pattern + Template Method
    Each engine builds its own request and parses its own markup;
    fetching, status checks and error mapping are shared here.

    Responsibilities:
    - Translate a query into the upstream's URL, params and headers
    - Scrape title, url and description of each result
    """

    def __init__(self, timeout: int = DEFAULT_TIMEOUT):
        self.timeout = timeout

    @property
    @abstractmethod
    def name(self) -> str:
        """Return engine name (lowercase, used in config and cookies)"""
        pass

    @property
    def query_types(self) -> QueryType:
        """Types of results this engine can provide"""
        return QueryType.TEXT

    def supports(self, query_type: QueryType) -> bool:
        return bool(self.query_types & query_type)

    @abstractmethod
    def build_request(self,
                      query: str,
                      page: int,
                      time_relevance: Optional[TimeRelevancy],
                      safe_search: int) -> Tuple[str, Dict[str, str], Dict[str, str]]:
        """
        Build the upstream request.

        Args:
            query: Search terms
            page: 1-based page number
            time_relevance: Optional time window
            safe_search: Level 0-2 (higher levels are clamped by the caller)

        Returns:
            Tuple of (url, query params, extra headers)
        """
        pass

    @abstractmethod
    def parse_results(self, soup: BeautifulSoup) -> Dict[str, SearchResult]:
        """
        Scrape results from the parsed upstream page.

        Returns:
            Dict mapping result url to SearchResult (insertion order = upstream rank)

        Raises:
            EngineError: EMPTY_RESULT_SET when the page says there are no results
        """
        pass

    def fetch_results(self,
                      query: str,
                      query_type: QueryType,
                      time_relevance: Optional[TimeRelevancy],
                      page: int,
                      client: requests.Session,
                      safe_search: int = 0) -> Dict[str, SearchResult]:
        """
        Query the upstream engine and scrape its results.

        Args:
            query: Search terms
            query_type: Type of results to search for
            time_relevance: Optional time window
            page: 1-based page number
            client: Shared HTTP session
            safe_search: Level 0-4

        Returns:
            Dict mapping result url to SearchResult

        Raises:
            EngineError: REQUEST_ERROR on connection or HTTP failures,
                EMPTY_RESULT_SET when nothing was found,
                UNEXPECTED_ERROR when the markup cannot be processed
        """
        if not self.supports(query_type):
            logger.debug(f"{self.name} does not provide {query_type!r} results")
            raise EngineError(EngineErrorType.UNEXPECTED_ERROR, self.name)

        url, params, headers = self.build_request(
            query, page, time_relevance, min(safe_search, 2)
        )
        html = self._get_html(client, url, params, headers)

        try:
            soup = BeautifulSoup(html, "html.parser")
            results = self.parse_results(soup)
        except EngineError:
            raise
        except Exception as e:
            logger.error(f"Failed to parse {self.name} results: {type(e).__name__}: {e}")
            raise EngineError(EngineErrorType.UNEXPECTED_ERROR, self.name) from e

        if not results:
            raise EngineError(EngineErrorType.EMPTY_RESULT_SET, self.name)

        logger.info(f"{self.name} returned {len(results)} results for page {page}")
        return results

    def _get_html(self,
                  client: requests.Session,
                  url: str,
                  params: Dict[str, str],
                  headers: Dict[str, str]) -> str:
        """GET the upstream page, mapping transport failures to REQUEST_ERROR"""
        try:
            response = client.get(url, params=params, headers=headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning(f"Request to {self.name} failed: {e}")
            raise EngineError(EngineErrorType.REQUEST_ERROR, self.name) from e
        return response.text

    @staticmethod
    def _is_web_url(url: str) -> bool:
        """Only absolute http(s) links are rendered as results"""
        return url.strip().lower().startswith(("http://", "https://"))

    def _make_result(self, title: str, url: str, description: str) -> SearchResult:
        return SearchResult(
            title=" ".join(title.split()),
            url=url.strip(),
            description=" ".join(description.split()),
            engines=(self.name,)
        )
