import pytest
import requests

from anvesh.engines import Brave, DuckDuckGo, Searx
from anvesh.models import EngineError, EngineErrorType, QueryType, TimeRelevancy

DUCKDUCKGO_HTML = """
<div class="results">
  <div class="result results_links web-result">
    <h2 class="result__title">
      <a class="result__a" href="//duckduckgo.com/l/?uddg=https%3A%2F%2Fwww.rust-lang.org%2F&amp;rut=abc">Rust Programming   Language</a>
    </h2>
    <a class="result__snippet" href="#">A language empowering everyone to build reliable software.</a>
  </div>
  <div class="result result--ad">
    <h2 class="result__title"><a class="result__a" href="https://ads.example.com/">Buy now</a></h2>
  </div>
  <div class="result results_links web-result">
    <h2 class="result__title"><a class="result__a" href="https://doc.rust-lang.org/book/">The Rust Book</a></h2>
    <a class="result__snippet" href="#">Learn Rust.</a>
  </div>
</div>
"""

DUCKDUCKGO_EMPTY_HTML = '<div class="results"><div class="no-results">No results.</div></div>'

BRAVE_HTML = """
<div id="results">
  <div class="snippet" data-type="web">
    <a href="https://www.python.org/"><div class="title">Welcome to Python.org</div></a>
    <div class="snippet-description">The official home of the Python Programming Language</div>
  </div>
  <div class="snippet" data-type="web">
    <a href="/relative/link"><div class="title">Internal</div></a>
  </div>
</div>
"""

SEARX_HTML = """
<div id="urls">
  <article class="result result-default">
    <a href="https://fastapi.tiangolo.com/" class="url_wrapper">fastapi.tiangolo.com</a>
    <h3><a href="https://fastapi.tiangolo.com/">FastAPI</a></h3>
    <p class="content">FastAPI framework, high performance, easy to learn.</p>
  </article>
  <article class="result result-default">
    <h3><a href="https://github.com/fastapi/fastapi">fastapi/fastapi on GitHub</a></h3>
  </article>
</div>
"""

SEARX_EMPTY_HTML = '<div id="urls"><div class="dialog-error-block">Sorry! No results.</div></div>'


def make_client(mocker, html="", status_error=None, get_error=None):
    client = mocker.Mock(spec=requests.Session)
    response = mocker.Mock()
    response.text = html
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    client.get.return_value = response
    if get_error is not None:
        client.get.side_effect = get_error
    return client


def test_duckduckgo_parses_results_and_unwraps_redirects(mocker):
    client = make_client(mocker, DUCKDUCKGO_HTML)

    results = DuckDuckGo().fetch_results("rust", QueryType.TEXT, None, 1, client)

    assert list(results) == ["https://www.rust-lang.org/", "https://doc.rust-lang.org/book/"]
    first = results["https://www.rust-lang.org/"]
    assert first.title == "Rust Programming Language"
    assert first.description == "A language empowering everyone to build reliable software."
    assert first.engines == ("duckduckgo",)


def test_duckduckgo_request_parameters():
    url, params, _ = DuckDuckGo().build_request("rust", 3, TimeRelevancy.LAST_WEEK, 0)

    assert url == "https://html.duckduckgo.com/html/"
    assert params["q"] == "rust"
    assert params["s"] == "60"
    assert params["dc"] == "61"
    assert params["df"] == "w"
    assert params["kp"] == "-2"


def test_duckduckgo_first_page_has_no_offset():
    _, params, _ = DuckDuckGo().build_request("rust", 1, TimeRelevancy.ANYTIME, 1)
    assert "s" not in params
    assert "df" not in params
    assert params["kp"] == "-1"


def test_safe_search_levels_above_two_are_clamped(mocker):
    client = make_client(mocker, DUCKDUCKGO_HTML)

    DuckDuckGo().fetch_results("rust", QueryType.TEXT, None, 1, client, safe_search=4)

    assert client.get.call_args.kwargs["params"]["kp"] == "1"


def test_empty_page_raises_empty_result_set(mocker):
    client = make_client(mocker, DUCKDUCKGO_EMPTY_HTML)

    with pytest.raises(EngineError) as exc_info:
        DuckDuckGo().fetch_results("zzzz", QueryType.TEXT, None, 1, client)

    assert exc_info.value.error_type is EngineErrorType.EMPTY_RESULT_SET
    assert exc_info.value.engine == "duckduckgo"


def test_page_without_results_raises_empty_result_set(mocker):
    client = make_client(mocker, "<html><body>nothing here</body></html>")

    with pytest.raises(EngineError) as exc_info:
        Brave().fetch_results("zzzz", QueryType.TEXT, None, 1, client)

    assert exc_info.value.error_type is EngineErrorType.EMPTY_RESULT_SET


def test_connection_failure_raises_request_error(mocker):
    client = make_client(mocker, get_error=requests.ConnectionError("unreachable"))

    with pytest.raises(EngineError) as exc_info:
        DuckDuckGo().fetch_results("rust", QueryType.TEXT, None, 1, client)

    assert exc_info.value.error_type is EngineErrorType.REQUEST_ERROR


def test_http_error_status_raises_request_error(mocker):
    client = make_client(mocker, "blocked", status_error=requests.HTTPError("403 Forbidden"))

    with pytest.raises(EngineError) as exc_info:
        Brave().fetch_results("rust", QueryType.TEXT, None, 1, client)

    assert exc_info.value.error_type is EngineErrorType.REQUEST_ERROR


def test_parser_failure_raises_unexpected_error(mocker):
    client = make_client(mocker, DUCKDUCKGO_HTML)
    engine = DuckDuckGo()
    mocker.patch.object(engine, "parse_results", side_effect=AttributeError("markup changed"))

    with pytest.raises(EngineError) as exc_info:
        engine.fetch_results("rust", QueryType.TEXT, None, 1, client)

    assert exc_info.value.error_type is EngineErrorType.UNEXPECTED_ERROR


def test_brave_parses_absolute_links_only(mocker):
    client = make_client(mocker, BRAVE_HTML)

    results = Brave().fetch_results("python", QueryType.TEXT, None, 1, client)

    assert list(results) == ["https://www.python.org/"]
    assert results["https://www.python.org/"].title == "Welcome to Python.org"
    assert "official home" in results["https://www.python.org/"].description


def test_brave_request_uses_offset_and_safe_search_cookie():
    url, params, headers = Brave().build_request("python", 2, TimeRelevancy.LAST_DAY, 2)

    assert url == "https://search.brave.com/search"
    assert params == {"q": "python", "offset": "1", "tf": "pd"}
    assert headers["Cookie"] == "safe_search=strict"


def test_searx_parses_results(mocker):
    client = make_client(mocker, SEARX_HTML)

    results = Searx(base_url="https://searx.example.org/").fetch_results(
        "fastapi", QueryType.TEXT, None, 1, client
    )

    assert list(results) == ["https://fastapi.tiangolo.com/", "https://github.com/fastapi/fastapi"]
    assert results["https://fastapi.tiangolo.com/"].description.startswith("FastAPI framework")
    assert results["https://github.com/fastapi/fastapi"].description == ""


def test_searx_request_targets_configured_instance():
    url, params, _ = Searx(base_url="https://searx.example.org/").build_request(
        "fastapi", 2, TimeRelevancy.LAST_YEAR, 1
    )

    assert url == "https://searx.example.org/search"
    assert params["pageno"] == "2"
    assert params["safesearch"] == "1"
    assert params["time_range"] == "year"


def test_searx_error_dialog_is_empty_result_set(mocker):
    client = make_client(mocker, SEARX_EMPTY_HTML)

    with pytest.raises(EngineError) as exc_info:
        Searx(base_url="https://searx.example.org").fetch_results(
            "zzzz", QueryType.TEXT, None, 1, client
        )

    assert exc_info.value.error_type is EngineErrorType.EMPTY_RESULT_SET


def test_non_web_links_are_skipped(mocker):
    ddg_html = """
    <div class="result"><a class="result__a" href="javascript:alert(1)">Click me</a></div>
    <div class="result"><a class="result__a" href="https://www.rust-lang.org/">Rust</a></div>
    """
    searx_html = """
    <article class="result"><h3><a href="javascript:void(0)">Bad</a></h3></article>
    <article class="result"><h3><a href="HTTPS://docs.python.org/">Python docs</a></h3></article>
    """

    ddg = DuckDuckGo().fetch_results("rust", QueryType.TEXT, None, 1, make_client(mocker, ddg_html))
    searx = Searx(base_url="https://searx.example.org").fetch_results(
        "python", QueryType.TEXT, None, 1, make_client(mocker, searx_html)
    )

    assert list(ddg) == ["https://www.rust-lang.org/"]
    assert list(searx) == ["HTTPS://docs.python.org/"]


def test_engines_only_support_text():
    engine = DuckDuckGo()
    assert engine.supports(QueryType.TEXT)
    assert not engine.supports(QueryType.IMAGE)
