import logging
from typing import Dict, Optional, Tuple
from urllib.parse import parse_qs, urlparse

from bs4 import BeautifulSoup

from .base_engine import SearchEngine
from ..models import EngineError, EngineErrorType, SearchResult, TimeRelevancy

logger = logging.getLogger(__name__)


class DuckDuckGo(SearchEngine):
    """DuckDuckGo HTML (no-JS) frontend scraper"""

    BASE_URL = "https://html.duckduckgo.com/html/"
    RESULTS_PER_PAGE = 30

    # kp parameter: 1 = strict, -1 = moderate, -2 = off
    _SAFE_SEARCH = {0: "-2", 1: "-1", 2: "1"}

    _TIME_RANGES = {
        TimeRelevancy.LAST_DAY: "d",
        TimeRelevancy.LAST_WEEK: "w",
        TimeRelevancy.LAST_MONTH: "m",
        TimeRelevancy.LAST_YEAR: "y",
    }

    @property
    def name(self) -> str:
        return "duckduckgo"

    def build_request(self,
                      query: str,
                      page: int,
                      time_relevance: Optional[TimeRelevancy],
                      safe_search: int) -> Tuple[str, Dict[str, str], Dict[str, str]]:
        params = {"q": query, "kp": self._SAFE_SEARCH[safe_search]}

        if page > 1:
            offset = (page - 1) * self.RESULTS_PER_PAGE
            params["s"] = str(offset)
            params["dc"] = str(offset + 1)

        if time_relevance in self._TIME_RANGES:
            params["df"] = self._TIME_RANGES[time_relevance]

        headers = {"Referer": "https://html.duckduckgo.com/"}
        return self.BASE_URL, params, headers

    def parse_results(self, soup: BeautifulSoup) -> Dict[str, SearchResult]:
        if soup.select_one(".no-results"):
            raise EngineError(EngineErrorType.EMPTY_RESULT_SET, self.name)

        results: Dict[str, SearchResult] = {}
        for node in soup.select("div.result"):
            # Sponsored links
            if "result--ad" in (node.get("class") or []):
                continue

            link = node.select_one("a.result__a")
            if link is None or not link.get("href"):
                continue

            url = self._resolve_redirect(link["href"])
            if not self._is_web_url(url):
                continue

            snippet = node.select_one(".result__snippet")
            description = snippet.get_text(" ", strip=True) if snippet else ""

            result = self._make_result(link.get_text(" ", strip=True), url, description)
            results.setdefault(result.url, result)

        return results

    @staticmethod
    def _resolve_redirect(href: str) -> str:
        """Unwrap //duckduckgo.com/l/?uddg=<target> redirect links"""
        parsed = urlparse(href)
        if parsed.path.startswith("/l/"):
            target = parse_qs(parsed.query).get("uddg")
            if target:
                return target[0]
        if href.startswith("//"):
            return f"https:{href}"
        return href
