"""
Aggregator - merges per-engine results into one ranked list.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..models import EngineErrorInfo, SearchResult
from .engine_handler import EngineResponse

logger = logging.getLogger(__name__)


@dataclass
class SearchResults:
    """
    Aggregated results of one search.

    Attributes:
        results: Ranked results
        engine_errors_info: One entry per engine that failed
        no_engines_selected: The user's engine selection matched no active engine
        disallowed: The query was refused by safe search
        filtered_count: Results removed by the blocklist
    """
    results: List[SearchResult] = field(default_factory=list)
    engine_errors_info: List[EngineErrorInfo] = field(default_factory=list)
    no_engines_selected: bool = False
    disallowed: bool = False
    filtered_count: int = 0

    def total(self) -> int:
        return len(self.results)


def merge_key(url: str) -> str:
    """Key used to detect the same page coming from several engines"""
    url = url.strip()
    if url.endswith("/"):
        url = url[:-1]
    return url


class Ranker:
    """
    Merges engine responses by url and ranks by engine agreement.

    Results returned by more engines rank higher; ties keep first-seen
    order (engine order, then upstream rank).
    """

    def __init__(self, max_results: Optional[int] = None):
        self.max_results = max_results or None

    def aggregate(self, responses: List[EngineResponse]) -> SearchResults:
        merged: Dict[str, SearchResult] = {}
        errors: List[EngineErrorInfo] = []

        for response in responses:
            if not response.ok:
                errors.append(EngineErrorInfo.from_error(response.error))
                continue

            for result in response.results.values():
                key = merge_key(result.url)
                if key in merged:
                    merged[key] = merged[key].with_engines(*result.engines)
                else:
                    merged[key] = result

        # sorted() is stable, first-seen order survives among equals
        ranked = sorted(merged.values(), key=lambda r: len(r.engines), reverse=True)
        if self.max_results:
            ranked = ranked[:self.max_results]

        logger.debug(f"Aggregated {len(ranked)} results from {len(responses)} engine responses")
        return SearchResults(results=ranked, engine_errors_info=errors)
