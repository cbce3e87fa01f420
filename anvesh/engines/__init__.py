"""
Upstream search engine implementations - Strategy Pattern.
Each engine (DuckDuckGo, Brave, searx) has its own request builder and scraper.
"""

from .base_engine import SearchEngine
from .duckduckgo import DuckDuckGo
from .brave import Brave
from .searx import Searx

__all__ = [
    'SearchEngine',
    'DuckDuckGo',
    'Brave',
    'Searx',
]
