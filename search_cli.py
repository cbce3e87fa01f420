#!/usr/bin/env python3
"""
Anvesh command line search

Runs one meta search from the terminal using the engines configured in .env.
Features:
- Engine selection, paging, time range and safe search
- Multiple output formats (list, table, JSON)
- Listing of documented public instances

Usage:
    python search_cli.py rust async runtime              # Search with all engines
    python search_cli.py --engine brave python asyncio   # Specific engine only
    python search_cli.py --page 2 --time week fastapi    # Second page, last week
    python search_cli.py --format json privacy           # Output as JSON
    python search_cli.py --instances                     # List public instances
"""

import argparse
import asyncio
import logging
import sys

from anvesh import config
from anvesh.formatters import InstanceFormatter, SearchResultsFormatter
from anvesh.models import EngineError, SearchParams, TimeRelevancy
from anvesh.repositories import EngineFactory, InstanceRepository
from anvesh.services import initialize_search_service


# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Search several upstream engines at once",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Search with all configured engines
  python search_cli.py open source search engines

  # Only DuckDuckGo and Brave
  python search_cli.py --engine duckduckgo --engine brave privacy

  # Results from the last month as a table
  python search_cli.py --time month --format table release notes

  # Show results as JSON
  python search_cli.py --json metasearch

  # List public instances with IPv6
  python search_cli.py --instances
        """
    )

    parser.add_argument(
        "query",
        nargs="*",
        help="Search terms"
    )

    parser.add_argument(
        "--page", "-p",
        type=int,
        default=1,
        help="Result page (default: 1)"
    )

    parser.add_argument(
        "--engine", "-E",
        action="append",
        choices=EngineFactory.get_supported_engines(),
        help="Search specific engine(s) only (can be repeated)"
    )

    parser.add_argument(
        "--safe-search", "-s",
        type=int,
        choices=range(0, 5),
        default=None,
        help="Safe search level 0-4 (default: server setting)"
    )

    parser.add_argument(
        "--time", "-t",
        choices=[t.value for t in TimeRelevancy],
        help="Only results from this time range"
    )

    parser.add_argument(
        "--format", "-f",
        choices=["list", "table", "json"],
        default="list",
        help="Output format: list (default), table, or json"
    )

    parser.add_argument(
        "--json", "-j",
        action="store_true",
        help="Output as JSON (shortcut for --format json)"
    )

    parser.add_argument(
        "--instances",
        action="store_true",
        help="List documented public instances instead of searching"
    )

    parser.add_argument(
        "--env-file", "-e",
        help="Path to .env file"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)
        logging.getLogger('anvesh').setLevel(logging.INFO)
        logging.getLogger('urllib3').setLevel(logging.WARNING)

    if args.env_file:
        config.load_environment(args.env_file)
        logger.info(f"Loaded environment from {args.env_file}")

    output_format = "json" if args.json else args.format

    if args.instances:
        repository = InstanceRepository(config.InstanceConfig.INSTANCES_FILE)
        print(InstanceFormatter(output_format="json" if output_format == "json" else "table")
              .format(repository.list_instances()))
        return 0

    if not args.query:
        parser.error("a search query is required (or use --instances)")

    try:
        params = SearchParams(
            query=" ".join(args.query),
            page=args.page,
            engines=args.engine,
            time_relevance=TimeRelevancy.from_string(args.time) if args.time else None
        )
    except ValueError as e:
        parser.error(str(e))

    try:
        service = initialize_search_service()
    except EngineError as e:
        logger.error(f"Failed to initialize search service: {e}")
        print(f"\n❌ Error initializing engines: {e}")
        print("\nPlease check UPSTREAM_ENGINES in your .env configuration.")
        return 1

    with service:
        if output_format != "json":
            print(f"\n🔍 Searching for: {params.query} (page {params.page})\n")

        try:
            results = asyncio.run(service.search(params, args.safe_search))
        except KeyboardInterrupt:
            print("\n\nSearch cancelled by user.")
            return 130
        except Exception as e:
            logger.error(f"Search failed: {e}", exc_info=True)
            print(f"\n❌ Search failed: {e}")
            return 1

        print(SearchResultsFormatter(output_format=output_format).format(results))

        if output_format != "json":
            print(f"\n{'=' * 60}")
            print(f"Total results: {results.total()}")
            print(f"Engine errors: {len(results.engine_errors_info)}")
            print(f"{'=' * 60}\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())
