import logging
from typing import Dict, Optional, Tuple

from bs4 import BeautifulSoup

from .base_engine import SearchEngine
from ..models import EngineError, EngineErrorType, SearchResult, TimeRelevancy

logger = logging.getLogger(__name__)


class Brave(SearchEngine):
    """Brave Search scraper"""

    BASE_URL = "https://search.brave.com/search"

    _SAFE_SEARCH = {0: "off", 1: "moderate", 2: "strict"}

    _TIME_RANGES = {
        TimeRelevancy.LAST_DAY: "pd",
        TimeRelevancy.LAST_WEEK: "pw",
        TimeRelevancy.LAST_MONTH: "pm",
        TimeRelevancy.LAST_YEAR: "py",
    }

    @property
    def name(self) -> str:
        return "brave"

    def build_request(self,
                      query: str,
                      page: int,
                      time_relevance: Optional[TimeRelevancy],
                      safe_search: int) -> Tuple[str, Dict[str, str], Dict[str, str]]:
        params = {"q": query, "offset": str(page - 1)}

        if time_relevance in self._TIME_RANGES:
            params["tf"] = self._TIME_RANGES[time_relevance]

        # Brave reads safe search from a cookie only
        headers = {
            "Referer": "https://search.brave.com/",
            "Cookie": f"safe_search={self._SAFE_SEARCH[safe_search]}",
        }
        return self.BASE_URL, params, headers

    def parse_results(self, soup: BeautifulSoup) -> Dict[str, SearchResult]:
        if soup.select_one("#results .no-results, .no-results-container"):
            raise EngineError(EngineErrorType.EMPTY_RESULT_SET, self.name)

        results: Dict[str, SearchResult] = {}
        for node in soup.select("#results .snippet[data-type='web'], #results div.snippet"):
            link = node.select_one("a[href]")
            if link is None or not self._is_web_url(link["href"]):
                continue

            title_node = node.select_one(".title, .snippet-title")
            title = title_node.get_text(" ", strip=True) if title_node else link.get_text(" ", strip=True)

            desc_node = node.select_one(".snippet-description, .snippet-content, .generic-snippet .content")
            description = desc_node.get_text(" ", strip=True) if desc_node else ""

            result = self._make_result(title, link["href"], description)
            results.setdefault(result.url, result)

        return results
