import re

from anvesh.filters import ResultFilter, load_patterns
from anvesh.models import EngineError, EngineErrorType, SearchResult
from anvesh.services import EngineResponse, Ranker


def response(engine, *urls):
    return EngineResponse(engine, results={
        url: SearchResult(title=f"{engine} {url}", url=url, description="", engines=(engine,))
        for url in urls
    })


def test_results_returned_by_more_engines_rank_first():
    responses = [
        response("alpha", "https://one.example/", "https://two.example/"),
        response("beta", "https://three.example/", "https://two.example/"),
    ]

    results = Ranker().aggregate(responses)

    assert [r.url for r in results.results] == [
        "https://two.example/",
        "https://one.example/",
        "https://three.example/",
    ]
    assert results.results[0].engines == ("alpha", "beta")
    # First-seen title wins
    assert results.results[0].title == "alpha https://two.example/"


def test_trailing_slash_is_ignored_when_merging():
    responses = [
        response("alpha", "https://one.example/docs/"),
        response("beta", "https://one.example/docs"),
    ]

    results = Ranker().aggregate(responses)

    assert results.total() == 1
    assert results.results[0].engines == ("alpha", "beta")


def test_engine_errors_are_collected():
    responses = [
        response("alpha", "https://one.example/"),
        EngineResponse("beta", error=EngineError(EngineErrorType.EMPTY_RESULT_SET, "beta")),
    ]

    results = Ranker().aggregate(responses)

    assert results.total() == 1
    assert [(e.engine, e.error, e.severity_level) for e in results.engine_errors_info] == [
        ("beta", "EmptyResultSet", 1)
    ]


def test_max_results_truncates():
    responses = [response("alpha", *(f"https://{i}.example/" for i in range(10)))]

    assert Ranker(max_results=3).aggregate(responses).total() == 3
    assert Ranker(max_results=0).aggregate(responses).total() == 10


def test_blocklist_removes_results_unless_allowlisted():
    result_filter = ResultFilter(
        blocklist=[re.compile(r"casino", re.IGNORECASE)],
        allowlist=[re.compile(r"wikipedia\.org")],
    )
    results = [
        SearchResult(title="Best Casino", url="https://casino.example/"),
        SearchResult(title="Casino - Wikipedia", url="https://en.wikipedia.org/wiki/Casino"),
        SearchResult(title="Rust", url="https://www.rust-lang.org/"),
    ]

    kept, removed = result_filter.apply(results)

    assert [r.url for r in kept] == [
        "https://en.wikipedia.org/wiki/Casino",
        "https://www.rust-lang.org/",
    ]
    assert removed == 1
    assert result_filter.is_query_disallowed("online CASINO")
    assert not result_filter.is_query_disallowed("rust")


def test_load_patterns_skips_comments_and_invalid_regexes(tmp_path):
    path = tmp_path / "blocklist.txt"
    path.write_text("# comment\n\nevil\\.example\n[unclosed\n", encoding="utf-8")

    patterns = load_patterns(str(path))

    assert [p.pattern for p in patterns] == [r"evil\.example"]
    assert load_patterns(str(tmp_path / "missing.txt")) == []
    assert load_patterns("") == []
