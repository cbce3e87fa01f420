import pytest

from anvesh.engines import SearchEngine
from anvesh.models import EngineError, QueryType, SearchResult
from anvesh.repositories import EngineFactory


INSTANCES_MD = """# Instances

| URL | Network | Version | Location | Behind Cloudflare | Maintained By | TLS | IPv6 | Comment |
|-----|---------|---------|----------|-------------------|---------------|-----|------|---------|
| https://search.example.org | www | v1.2.0 | Germany | ❌ | [@alice](https://github.com/alice) | ✅ | ✅ | main |
| [mirror](https://mirror.example.net/) | www | v1.1.0 | France | ✅ | bob | ✅ | ❌ | |
| http://abcdefghijklmnop.onion | tor | v1.2.0 | Germany | ❌ | alice | ❌ | ❌ | tor mirror |
| not-a-url | www | v0.1 | Nowhere | ❌ | nobody | ❌ | ❌ | broken row |

[Back](./README.md)
"""


@pytest.fixture
def register_engine():
    """Register fake engines returning canned results, unregistered after the test."""
    registered = []

    def _register(engine_name, results=(), error_type=None, exception=None,
                  query_types=QueryType.TEXT):
        calls = []

        class FakeEngine(SearchEngine):
            @property
            def name(self):
                return engine_name

            @property
            def query_types(self):
                return query_types

            def build_request(self, query, page, time_relevance, safe_search):
                return "http://localhost/", {}, {}

            def parse_results(self, soup):
                return {}

            def fetch_results(self, query, query_type, time_relevance, page, client, safe_search=0):
                calls.append({
                    "query": query,
                    "page": page,
                    "time_relevance": time_relevance,
                    "safe_search": safe_search,
                })
                if exception is not None:
                    raise exception
                if error_type is not None:
                    raise EngineError(error_type, engine_name)
                return {
                    url: SearchResult(title=title, url=url, description=desc, engines=(engine_name,))
                    for title, url, desc in results
                }

        FakeEngine.calls = calls
        EngineFactory.register_engine(engine_name, FakeEngine)
        registered.append(engine_name)
        return FakeEngine

    yield _register

    for name in registered:
        EngineFactory.unregister_engine(name)


@pytest.fixture
def instances_file(tmp_path):
    path = tmp_path / "instances.md"
    path.write_text(INSTANCES_MD, encoding="utf-8")
    return path
