"""
Blocklist/allowlist result filter.

Each list file holds one regular expression per line. Blank lines and
lines starting with '#' are ignored.
"""

import logging
import re
from pathlib import Path
from typing import Iterable, List, Optional, Pattern, Tuple

from ..models import SearchResult

logger = logging.getLogger(__name__)


def load_patterns(path: Optional[str]) -> List[Pattern]:
    """
    Compile the patterns of a list file.

    Args:
        path: List file path; None or empty means no patterns

    Returns:
        Compiled case-insensitive patterns; invalid ones are skipped
    """
    if not path:
        return []

    list_path = Path(path)
    if not list_path.exists():
        logger.warning(f"Filter list not found: {path}")
        return []

    patterns = []
    for number, line in enumerate(list_path.read_text(encoding="utf-8").splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        try:
            patterns.append(re.compile(line, re.IGNORECASE))
        except re.error as e:
            logger.warning(f"Invalid regex in {path}:{number} ({line!r}): {e}")

    logger.info(f"Loaded {len(patterns)} patterns from {path}")
    return patterns


class ResultFilter:
    """
    Removes blocklisted results unless they are also allowlisted.

    A result matches a list when its url or title matches any pattern.
    """

    def __init__(self,
                 blocklist: Optional[Iterable[Pattern]] = None,
                 allowlist: Optional[Iterable[Pattern]] = None):
        self._blocklist = list(blocklist or [])
        self._allowlist = list(allowlist or [])

    @classmethod
    def from_files(cls, blocklist_file: Optional[str], allowlist_file: Optional[str]) -> 'ResultFilter':
        return cls(load_patterns(blocklist_file), load_patterns(allowlist_file))

    @staticmethod
    def _matches(patterns: List[Pattern], *texts: str) -> bool:
        return any(p.search(text) for p in patterns for text in texts if text)

    def is_blocked(self, result: SearchResult) -> bool:
        if not self._matches(self._blocklist, result.url, result.title):
            return False
        return not self._matches(self._allowlist, result.url, result.title)

    def is_query_disallowed(self, query: str) -> bool:
        return self._matches(self._blocklist, query)

    def apply(self, results: List[SearchResult]) -> Tuple[List[SearchResult], int]:
        """
        Filter results.

        Returns:
            Tuple of (kept results in original order, number removed)
        """
        if not self._blocklist:
            return list(results), 0

        kept = [r for r in results if not self.is_blocked(r)]
        removed = len(results) - len(kept)
        if removed:
            logger.info(f"Blocklist removed {removed} results")
        return kept, removed
