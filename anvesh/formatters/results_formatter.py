"""
Search results formatter for terminal output.

List output:
 1. Result title
    https://example.org/page
    Snippet text...
    [duckduckgo, brave]
"""

import json
import textwrap

from .base_formatter import OutputFormatter
from ..services.aggregator import SearchResults


class SearchResultsFormatter(OutputFormatter):
    """Formats aggregated search results as list, table or JSON"""

    def format(self, results: SearchResults) -> str:
        if self.output_format == "json":
            return self._format_json(results)
        elif self.output_format == "table":
            return self._format_table(results)
        else:  # list (default)
            return self._format_list(results)

    def _empty_message(self, results: SearchResults) -> str:
        if results.disallowed:
            return "This query is not allowed by the safe search settings."
        if results.no_engines_selected:
            return "No engines selected. Pick at least one active engine."
        return "No results found."

    def _format_errors(self, results: SearchResults) -> list:
        lines = []
        if results.engine_errors_info:
            lines.append("\nEngine errors:")
            for info in results.engine_errors_info:
                lines.append(f"  - {info.engine}: {info.error}")
        return lines

    def _format_list(self, results: SearchResults) -> str:
        lines = []

        if not results.results:
            lines.append(self._empty_message(results))

        for position, result in enumerate(results.results, start=1):
            lines.append(f"\n{position:>2}. {result.title}")
            lines.append(f"    {result.url}")
            if result.description:
                for line in textwrap.wrap(result.description, width=76):
                    lines.append(f"    {line}")
            lines.append(f"    [{', '.join(result.engines)}]")

        lines.extend(self._format_errors(results))
        return "\n".join(lines)

    def _format_table(self, results: SearchResults) -> str:
        lines = []

        lines.append("\n{:<4} {:<40} {:<50} {:<20}".format("#", "TITLE", "URL", "ENGINES"))
        lines.append("=" * 116)

        for position, result in enumerate(results.results, start=1):
            lines.append("{:<4} {:<40} {:<50} {:<20}".format(
                position,
                textwrap.shorten(result.title, width=40, placeholder="..."),
                result.url if len(result.url) <= 50 else result.url[:47] + "...",
                ",".join(result.engines)
            ))

        if not results.results:
            lines.append(self._empty_message(results))

        lines.extend(self._format_errors(results))
        return "\n".join(lines)

    def _format_json(self, results: SearchResults) -> str:
        output = {
            "total_results": results.total(),
            "disallowed": results.disallowed,
            "no_engines_selected": results.no_engines_selected,
            "filtered_count": results.filtered_count,
            "results": [
                {
                    "title": r.title,
                    "url": r.url,
                    "description": r.description,
                    "engines": list(r.engines),
                }
                for r in results.results
            ],
            "engine_errors": [
                {"engine": e.engine, "error": e.error, "severity_level": e.severity_level}
                for e in results.engine_errors_info
            ],
        }
        return json.dumps(output, indent=2, ensure_ascii=False)
