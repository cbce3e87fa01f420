"""
Instance table parser for docs/instances.md.

Expected layout (column order does not matter, matching is by header):

| URL | Network | Version | Location | Behind Cloudflare | Maintained By | TLS | IPv6 | Comment |
|-----|---------|---------|----------|-------------------|---------------|-----|------|---------|
| https://example.org | www | v1.0.0 | 🇩🇪 | ❌ | [@someone](...) | ✅ | ✅ | |
"""

import logging
import re
from typing import Dict, List, Optional

from ..models import Instance

logger = logging.getLogger(__name__)


class InstanceTableParser:
    """
    Parser for the markdown instance table.

    Handles:
    - Header aliases (e.g. "Behind Cloudflare" or "CDN" for the cdn column)
    - Markdown links in cells ([text](url) → url for URL, text elsewhere)
    - Emoji and word flags (✅ / yes / true)
    """

    # Header text (lowercased) → Instance field
    HEADER_ALIASES = {
        "url": "url",
        "network": "network",
        "version": "version",
        "location": "location",
        "behind cloudflare": "cdn",
        "cloudflare": "cdn",
        "cdn": "cdn",
        "maintained by": "maintainer",
        "maintainer": "maintainer",
        "tls": "tls",
        "ssl": "tls",
        "ipv6": "ipv6",
        "comment": "comment",
        "comments": "comment",
    }

    BOOLEAN_FIELDS = {"cdn", "tls", "ipv6"}
    TRUE_VALUES = {"✅", "✔", "✔️", "yes", "y", "true"}

    MARKDOWN_LINK = re.compile(r'\[([^\]]*)\]\(([^)\s]+)[^)]*\)')
    SEPARATOR_ROW = re.compile(r'^\|?\s*:?-{3,}:?\s*(\|\s*:?-{3,}:?\s*)*\|?$')

    @classmethod
    def split_row(cls, line: str) -> List[str]:
        """Split a markdown table row into stripped cells"""
        line = line.strip()
        if line.startswith("|"):
            line = line[1:]
        if line.endswith("|"):
            line = line[:-1]
        return [cell.strip() for cell in line.split("|")]

    @classmethod
    def parse_flag(cls, value: str) -> bool:
        return value.strip().lower() in cls.TRUE_VALUES

    @classmethod
    def extract_url(cls, value: str) -> str:
        """Return the link target of a markdown link, or the raw cell"""
        match = cls.MARKDOWN_LINK.search(value)
        if match:
            return match.group(2).strip()
        return value.strip().strip("<>")

    @classmethod
    def extract_text(cls, value: str) -> str:
        """Replace markdown links with their text"""
        return cls.MARKDOWN_LINK.sub(lambda m: m.group(1), value).strip()

    @classmethod
    def map_headers(cls, cells: List[str]) -> Dict[int, str]:
        mapping = {}
        for index, cell in enumerate(cells):
            field = cls.HEADER_ALIASES.get(cls.extract_text(cell).lower())
            if field:
                mapping[index] = field
        return mapping

    def parse(self, markdown: str) -> List[Instance]:
        """
        Parse every instance row of the first table that has a URL column.

        Args:
            markdown: Contents of the instances page

        Returns:
            List of Instance in document order; invalid rows are skipped
        """
        lines = markdown.splitlines()
        instances: List[Instance] = []
        columns: Optional[Dict[int, str]] = None

        for number, line in enumerate(lines, start=1):
            stripped = line.strip()

            if not stripped.startswith("|"):
                # Table ended
                if columns is not None and instances:
                    break
                columns = None
                continue

            if self.SEPARATOR_ROW.match(stripped):
                continue

            cells = self.split_row(stripped)

            if columns is None:
                mapping = self.map_headers(cells)
                if "url" in mapping.values():
                    columns = mapping
                continue

            instance = self._build_instance(cells, columns, number)
            if instance:
                instances.append(instance)

        return instances

    def _build_instance(self, cells: List[str], columns: Dict[int, str], line_number: int) -> Optional[Instance]:
        values = {}
        for index, field in columns.items():
            raw = cells[index] if index < len(cells) else ""
            if field == "url":
                values[field] = self.extract_url(raw)
            elif field in self.BOOLEAN_FIELDS:
                values[field] = self.parse_flag(raw)
            else:
                values[field] = self.extract_text(raw)

        try:
            return Instance(**values)
        except (TypeError, ValueError) as e:
            logger.warning(f"Skipping instance row at line {line_number}: {e}")
            return None
