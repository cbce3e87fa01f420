import logging
from typing import Dict, Optional, Tuple

from bs4 import BeautifulSoup

from .base_engine import SearchEngine, DEFAULT_TIMEOUT
from ..models import EngineError, EngineErrorType, SearchResult, TimeRelevancy

logger = logging.getLogger(__name__)

DEFAULT_SEARX_URL = "https://searx.be"


class Searx(SearchEngine):
    """searx / SearXNG instance scraper"""

    _TIME_RANGES = {
        TimeRelevancy.LAST_DAY: "day",
        TimeRelevancy.LAST_WEEK: "week",
        TimeRelevancy.LAST_MONTH: "month",
        TimeRelevancy.LAST_YEAR: "year",
    }

    def __init__(self, timeout: int = DEFAULT_TIMEOUT, base_url: Optional[str] = None):
        super().__init__(timeout)
        if base_url is None:
            from .. import config
            base_url = config.EngineConfig.SEARX_URL or DEFAULT_SEARX_URL
        self.base_url = base_url.rstrip("/")

    @property
    def name(self) -> str:
        return "searx"

    def build_request(self,
                      query: str,
                      page: int,
                      time_relevance: Optional[TimeRelevancy],
                      safe_search: int) -> Tuple[str, Dict[str, str], Dict[str, str]]:
        params = {
            "q": query,
            "pageno": str(page),
            "safesearch": str(safe_search),
            "categories": "general",
        }

        if time_relevance in self._TIME_RANGES:
            params["time_range"] = self._TIME_RANGES[time_relevance]

        headers = {"Referer": f"{self.base_url}/"}
        return f"{self.base_url}/search", params, headers

    def parse_results(self, soup: BeautifulSoup) -> Dict[str, SearchResult]:
        if soup.select_one("#urls .dialog-error-block, .dialog-error"):
            raise EngineError(EngineErrorType.EMPTY_RESULT_SET, self.name)

        results: Dict[str, SearchResult] = {}
        for node in soup.select("article.result"):
            link = node.select_one("h3 a[href]") or node.select_one("a.url_wrapper[href]")
            if link is None or not self._is_web_url(link["href"]):
                continue

            snippet = node.select_one("p.content")
            description = snippet.get_text(" ", strip=True) if snippet else ""

            result = self._make_result(link.get_text(" ", strip=True), link["href"], description)
            results.setdefault(result.url, result)

        return results
